from pathlib import Path

import pytest
from pydantic import ValidationError

from jcrush.config import DEFAULT_OPTIONS, CrushOptions, load_config, merge_options
from jcrush.errors import ConfigLoadError

from tests.infrastructure import write


def test_missing_file_gives_defaults(tmp_path: Path):
    assert load_config(tmp_path / "jcrush.yaml") == DEFAULT_OPTIONS


def test_short_option_names_are_accepted(tmp_path: Path):
    cfg = write(tmp_path / "jcrush.yaml", """
mode: template
eval: false
let: true
reps: 3
maxLen: 24
reserved: [foo, bar]
break: ["/*split*/"]
""")
    opts = load_config(cfg)
    assert opts.mode == "template"
    assert opts.use_eval is False
    assert opts.declare is True
    assert opts.max_replacements == 3
    assert opts.max_len == 24
    assert opts.reserved == ("foo", "bar")
    assert opts.break_markers == ("/*split*/",)


def test_unknown_key_is_reported(tmp_path: Path):
    cfg = write(tmp_path / "jcrush.yaml", "bogus: 1\n")
    with pytest.raises(ConfigLoadError) as exc:
        load_config(cfg)
    assert "bogus" in str(exc.value)


def test_wrong_type_is_reported(tmp_path: Path):
    cfg = write(tmp_path / "jcrush.yaml", "reps: many\n")
    with pytest.raises(ConfigLoadError):
        load_config(cfg)


def test_top_level_must_be_mapping(tmp_path: Path):
    cfg = write(tmp_path / "jcrush.yaml", "- a\n- b\n")
    with pytest.raises(ConfigLoadError):
        load_config(cfg)


def test_empty_file_gives_defaults(tmp_path: Path):
    assert load_config(write(tmp_path / "jcrush.yaml", "")) == DEFAULT_OPTIONS


def test_merge_copies_instead_of_mutating():
    base = CrushOptions()
    merged = merge_options(base, {"let": True, "semicolon": True})
    assert merged.declare is True and merged.semicolon is True
    assert base.declare is False and base.semicolon is False
    assert merge_options(base, {}) is base


def test_merge_validates_overrides():
    with pytest.raises(ConfigLoadError):
        merge_options(None, {"min_occurrences": 1})


def test_options_are_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_OPTIONS.mode = "template"
