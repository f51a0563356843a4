import pytest
from lark.exceptions import UnexpectedInput

from proto_parser import parse_int_literal, parse_proto, parse_proto_file

SIMPLE = """
syntax = "proto2";
package demo;

// Leading comment
message Person {
    required string name = 1;
    repeated .demo.Tag tags = 2 [packed = true];
    int32 age = 3;
    message Tag { optional string label = 1; }
    enum Mood { HAPPY = 0; SAD = -1; }
    reserved 4, 5 to 7;
    option deprecated = true;
}
"""


def nodes(tree, data):
    # find_data walks bottom-up, keep document order
    return [node for node in tree.iter_subtrees_topdown() if node.data == data]


def names(tree, data):
    return [str(node.children[0]) for node in nodes(tree, data)]


def test_parse_messages_fields_and_enums():
    tree = parse_proto(SIMPLE)
    assert tree.data == 'start'
    assert names(tree, 'message') == ['Person', 'Tag']
    assert names(tree, 'enum_def') == ['Mood']
    assert names(tree, 'enum_value') == ['HAPPY', 'SAD']


def test_field_tokens():
    tree = parse_proto(SIMPLE)
    fields = nodes(tree, 'field')
    tokens = [[(t.type, str(t)) for t in f.children if not hasattr(t, 'data')] for f in fields]
    assert tokens[0] == [('LABEL', 'required'), ('TYPE_NAME', 'string'), ('NAME', 'name'), ('INT', '1')]
    assert tokens[1] == [('LABEL', 'repeated'), ('TYPE_NAME', '.demo.Tag'), ('NAME', 'tags'), ('INT', '2')]
    # label is optional
    assert tokens[2] == [('TYPE_NAME', 'int32'), ('NAME', 'age'), ('INT', '3')]


def test_comments_are_kept_with_positions():
    tree = parse_proto(SIMPLE)
    comments = [node.children[0] for node in nodes(tree, 'comment')]
    assert [str(c) for c in comments] == ['// Leading comment']
    assert comments[0].line == 5


def test_block_comment_and_local_option():
    tree = parse_proto("/* doc */\n//:external\nmessage A {}\n")
    assert [str(n.children[0]) for n in nodes(tree, 'comment')] == ['/* doc */', '//:external']


def test_syntax_error():
    with pytest.raises(UnexpectedInput):
        parse_proto("message { }")


def test_parse_proto_file(temp_dir):
    import os
    path = os.path.join(temp_dir, 'a.proto')
    with open(path, 'w', encoding='utf-8') as f:
        f.write("message A { optional int32 x = 1; }\n")
    assert names(parse_proto_file(path), 'message') == ['A']


@pytest.mark.parametrize("text,value", [
    ("0", 0),
    ("42", 42),
    ("-5", -5),
    ("0x1F", 31),
    ("-0x10", -16),
    ("017", 15),
])
def test_parse_int_literal(text, value):
    assert parse_int_literal(text) == value
