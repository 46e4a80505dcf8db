from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigLoadError
from .types import OutputMode, SkipScope

DEFAULT_CFG_FILE = "jcrush.yaml"


class CrushOptions(BaseModel):
    """
    Options of one crush run.

    Every field also accepts the short option name used by the JavaScript
    tooling this package mirrors (``eval``, ``let``, ``reps``, ...).
    """
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    # output shape
    mode: OutputMode = "concat"
    use_eval: bool = Field(True, alias="eval")
    declare: bool = Field(False, alias="let")
    semicolon: bool = Field(False, alias="semi")
    wrap_prefix: Optional[str] = None
    wrap_suffix: Optional[str] = None
    ascii_safe: bool = Field(False, alias="escSafe")
    strip: bool = True

    # replacement loop
    max_replacements: int = Field(0, ge=0, alias="reps")
    max_iterations: int = Field(500, ge=1)
    reserved: Tuple[str, ...] = ()
    skip_scope: SkipScope = "run"

    # reporting
    progress: bool = Field(True, alias="prog")
    summary: bool = Field(True, alias="fin")

    # search passthroughs
    max_len: int = Field(40, ge=1, alias="maxLen")
    min_occurrences: int = Field(2, ge=2, alias="minOcc")
    max_results: int = Field(50, ge=1, alias="maxRes")
    omit: Tuple[str, ...] = ()
    words: bool = False
    trim: bool = False
    clean: bool = False
    break_markers: Tuple[str, ...] = Field((), alias="break")


DEFAULT_OPTIONS = CrushOptions()

_ALIASES: Dict[str, str] = {
    f.alias: name for name, f in CrushOptions.model_fields.items() if f.alias
}


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #

def _canonical_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename alias keys to field names (later keys win)."""
    return {_ALIASES.get(k, k): v for k, v in raw.items()}


def _format_validation_error(e: ValidationError, source: str) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "$"
        parts.append(f"{loc}: {err.get('msg')}")
    return f"{source}: " + "; ".join(parts)


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #

def merge_options(base: Optional[CrushOptions] = None, overrides: Optional[Mapping[str, Any]] = None) -> CrushOptions:
    """
    New options object: *overrides* on top of *base* (or the defaults).

    The base instance is left untouched.
    """
    base = base or DEFAULT_OPTIONS
    if not overrides:
        return base
    data = base.model_dump()
    data.update(_canonical_keys(overrides))
    try:
        return CrushOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(_format_validation_error(e, "options")) from e


def load_config(path: Path) -> CrushOptions:
    """
    Load options from a YAML file.

    • Missing file → defaults.
    • Empty file → defaults.
    • Unknown keys and wrong types are reported with the field path.
    """
    if not path.exists():
        return DEFAULT_OPTIONS

    yaml = YAML(typ="safe")
    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.load(f)
    except (OSError, YAMLError) as e:
        raise ConfigLoadError(f"{path}: cannot read config: {e}") from e

    if raw is None:
        return DEFAULT_OPTIONS
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"{path}: top-level mapping expected, got {type(raw).__name__}")

    try:
        return CrushOptions.model_validate(_canonical_keys(raw))
    except ValidationError as e:
        raise ConfigLoadError(_format_validation_error(e, str(path))) from e


__all__ = [
    "DEFAULT_CFG_FILE",
    "CrushOptions",
    "DEFAULT_OPTIONS",
    "merge_options",
    "load_config",
]
