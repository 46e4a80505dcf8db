import textwrap

import pytest

# Browser-style snippet: repeated DOM calls, mixed quotes, escapes,
# a regex literal, a template literal with interpolation and non-ASCII text.
SAMPLE_JS = textwrap.dedent(r'''
    var header=document.getElementById('header');
    var footer=document.getElementById('footer');
    var sidebar=document.getElementById('sidebar');
    header.addEventListener('click',function(e){console.log("clicked \"header\"\n");});
    footer.addEventListener('click',function(e){console.log("clicked \"footer\"\n");});
    sidebar.addEventListener('click',function(e){console.log("clicked \"sidebar\"\n");});
    var card=`<div class="card">${header.id}</div>`;
    var re=/\d+\.\d+/g, path='C:\\temp\\file';
    var msg='café — café — café — café';
''').lstrip()

# Same flavour without unescaped ${ so it is usable in template mode.
TEMPLATE_JS = textwrap.dedent(r'''
    var header=document.getElementById('header');
    var footer=document.getElementById('footer');
    var sidebar=document.getElementById('sidebar');
    header.addEventListener('click',function(e){console.log("clicked `header`");});
    footer.addEventListener('click',function(e){console.log("clicked `footer`");});
    sidebar.addEventListener('click',function(e){console.log("clicked `sidebar`");});
    var price=`cost: \${n} \\ each`, crlf="a\r\nb";
''').lstrip()


@pytest.fixture
def sample_js() -> str:
    return SAMPLE_JS


@pytest.fixture
def template_js() -> str:
    return TEMPLATE_JS
