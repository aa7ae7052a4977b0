import pytest

from html_compressor.levels import Level
from html_compressor.minify_js import JsMinifier, JsState, minify_js


def aggressive(js):
    return minify_js(js, Level.AGGRESSIVE)


def extreme(js):
    return minify_js(js, Level.EXTREME)


def test_basic_level_is_noop():
    js = "var a = 1;  // note\n"
    assert minify_js(js, Level.BASIC) == js


def test_empty():
    assert aggressive("") == ""


def test_statements():
    assert aggressive("var a = 1;\nvar b = 2;\n") == "var a=1;var b=2;"


def test_identifiers_keep_one_space():
    assert aggressive("return     value") == "return value"
    assert aggressive("const  x = typeof   y") == "const x=typeof y"


def test_unary_plus_minus_stay_apart():
    assert aggressive("a + +b") == "a+ +b"
    assert aggressive("a - -b") == "a- -b"
    assert aggressive("a + b") == "a+b"


@pytest.mark.parametrize("js", [
    'var s = "a ;  b // not a comment";',
    "var s = 'it\\'s   ok';",
    "var t = `line 1\n   line 2 ${ x }`;",
    'var s = "a\\\\";',
])
def test_string_literals_are_verbatim(js):
    assert aggressive(js) == js.replace("var s = ", "var s=").replace("var t = ", "var t=")


def test_line_comment_becomes_line_break():
    assert aggressive("a = 1; // note\nb = 2;") == "a=1;b=2;"
    assert aggressive("foo() // note\nbar()") == "foo();bar()"


def test_block_comment_kept_at_aggressive():
    assert aggressive("a = 1; /* keep */ b = 2;") == "a=1;/* keep */b=2;"


def test_block_comment_dropped_at_extreme():
    assert extreme("a = 1; /* drop */ b = 2;") == "a=1;b=2;"
    assert extreme("return/* x */value") == "return value"
    assert extreme("foo()/* a\n b */bar()") == "foo();bar()"


def test_unterminated_block_comment_runs_to_end():
    assert extreme("a(); /* never closed") == "a();"


def test_unterminated_string_runs_to_end():
    assert aggressive('var s = "abc  def') == 'var s="abc  def'


def test_asi_before_paren():
    assert aggressive("let x = a\n(b)") == "let x=a;(b)"
    assert aggressive("foo()\n(bar)()") == "foo();(bar)()"


@pytest.mark.parametrize("js, expected", [
    ("a = b\n[1, 2].forEach(f)", "a=b;[1,2].forEach(f)"),
    ("a = b\n!c", "a=b;!c"),
    ("x = 'a'\ny = 2", "x='a';y=2"),
    ("i++\nj++", "i++;j++"),
    ("a = [1]\nb = 2", "a=[1];b=2"),
    ("let x = void 0\nfoo()", "let x=void 0;foo()"),
    ("var t = typeof 1\nbar()", "var t=typeof 1;bar()"),
    ("foo()\n'x'.trim()", "foo();'x'.trim()"),
    ('a = b\n"use strict"', 'a=b;"use strict"'),
])
def test_asi_repair(js, expected):
    assert aggressive(js) == expected


@pytest.mark.parametrize("js, expected", [
    ("promise\n  .then(f)\n  .catch(g)", "promise.then(f).catch(g)"),
    ("a = b +\n  c", "a=b+c"),
    ("x = {\n  a: 1,\n  b: 2\n}", "x={a:1,b:2}"),
    ("var a;\nvar b;", "var a;var b;"),
    ("let\nx = 1", "let x=1"),
    ("a = b +\n  'x'", "a=b+'x'"),
    ("html\n`<p>${x}</p>`", "html`<p>${x}</p>`"),
])
def test_no_semicolon_inside_expressions(js, expected):
    assert aggressive(js) == expected


def test_control_head_is_not_a_statement_end():
    assert aggressive("if (ready)\n  start()") == "if(ready)start()"
    assert aggressive("for (let i = 0; i < n; i++)\n  f(i)") == "for(let i=0;i<n;i++)f(i)"
    assert aggressive("while (busy(x))\n  wait()") == "while(busy(x))wait()"


def test_else_after_brace_gets_one_space():
    js = "if (a) {\n  b();\n}\nelse {\n  c();\n}"
    assert aggressive(js) == "if(a){b();} else{c();}"


def test_catch_and_finally_stay_attached():
    js = "try {\n  x()\n}\ncatch (e) {\n}\nfinally {\n  y()\n}"
    assert aggressive(js) == "try{x()} catch(e){} finally{y()}"


def test_do_while_tail():
    js = "do {\n  step()\n}\nwhile (more)\nnext()"
    assert aggressive(js) == "do{step()} while(more);next()"


def test_else_on_its_own_line():
    assert aggressive("if (a) b()\nelse\n  c()") == "if(a)b()else c()"


def test_idempotent():
    js = "function f(a, b) {\n  if (a)\n    return b\n  return a + b\n}\nf(1, 2)\n"
    once = aggressive(js)
    assert once == "function f(a,b){if(a)return b;return a+b};f(1,2)"
    assert aggressive(once) == once


def test_state_after_unterminated_input():
    minifier = JsMinifier(Level.AGGRESSIVE)
    minifier.minify("x = 'open")
    assert minifier.state is JsState.STRING

    minifier = JsMinifier(Level.AGGRESSIVE)
    minifier.minify("x = 1 // trailing")
    assert minifier.state is JsState.LINE_COMMENT

    minifier = JsMinifier(Level.AGGRESSIVE)
    minifier.minify("x = 1 /* open")
    assert minifier.state is JsState.KEPT_COMMENT
