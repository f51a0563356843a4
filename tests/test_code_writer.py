import pytest

from code_writer import CodeWriter
from generation_errors import ScopeError


def test_bracket_indents_body():
    cw = CodeWriter()
    cw.bracket("public class A")
    cw.write_line("int x;")
    cw.end_bracket()
    assert cw.code == "public class A\n{\n    int x;\n}\n"
    assert cw.depth == 0


def test_tabs_and_nested_blocks():
    cw = CodeWriter(indent='\t')
    with cw.scope("namespace N"):
        with cw.scope("class A"):
            cw.write_line("int x;")
    assert cw.code == "namespace N\n{\n\tclass A\n\t{\n\t\tint x;\n\t}\n}\n"


def test_empty_line_has_no_indentation():
    cw = CodeWriter()
    with cw.scope("class A"):
        cw.write_line()
    assert cw.code == "class A\n{\n\n}\n"


def test_comment_writes_one_line_per_text_line():
    cw = CodeWriter()
    cw.comment("first\nsecond")
    assert cw.code == "// first\n// second\n"


def test_summary_escapes_xml_and_skips_empty_text():
    cw = CodeWriter()
    cw.summary(None)
    cw.summary("")
    assert cw.code == ""
    cw.summary("List<int> & more")
    assert cw.code == "/// <summary>\n/// List&lt;int&gt; &amp; more\n/// </summary>\n"


def test_end_bracket_without_bracket_raises():
    cw = CodeWriter()
    with pytest.raises(ScopeError):
        cw.end_bracket()


def test_scope_closes_open_blocks_on_exception():
    cw = CodeWriter()
    with pytest.raises(RuntimeError):
        with cw.scope("class A"):
            cw.bracket("void F()")
            raise RuntimeError("boom")
    assert cw.depth == 0
    assert cw.code == "class A\n{\n    void F()\n    {\n    }\n}\n"
