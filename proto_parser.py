"""
proto_parser.py
Lark grammar for the .proto subset ProtoWrangler reads (proto2 messages and enums).

Comments are kept in the tree instead of being ignored: the schema builder turns them
into documentation, and '//:' comments into local options for the next declaration.
"""
from lark import Lark

grammar = r"""
    start: _item*

    _item: syntax_stmt
         | package_stmt
         | import_stmt
         | option_stmt
         | message
         | enum_def
         | comment
         | ";"

    syntax_stmt: "syntax" "=" STRING ";"
    package_stmt: "package" TYPE_NAME ";"
    import_stmt: "import" IMPORT_MODIFIER? STRING ";"
    IMPORT_MODIFIER: "public" | "weak"
    option_stmt: "option" option_name "=" constant ";"

    message: "message" NAME "{" _message_item* "}"
    _message_item: field
                 | message
                 | enum_def
                 | option_stmt
                 | reserved
                 | extensions
                 | comment
                 | ";"

    field: LABEL? TYPE_NAME NAME "=" INT field_options? ";"
    LABEL: "required" | "optional" | "repeated"
    field_options: "[" field_option ("," field_option)* "]"
    field_option: option_name "=" constant
    option_name: TYPE_NAME | "(" TYPE_NAME ")" TYPE_NAME?
    constant: TYPE_NAME | SIGNED_NUMBER | STRING

    enum_def: "enum" NAME "{" _enum_item* "}"
    _enum_item: enum_value
              | option_stmt
              | reserved
              | comment
              | ";"
    enum_value: NAME "=" SIGNED_INT field_options? ";"

    reserved: "reserved" RANGE_BODY ";"
    extensions: "extensions" RANGE_BODY ";"
    RANGE_BODY: /[^;{}]+/

    comment: LINE_COMMENT | BLOCK_COMMENT
    LINE_COMMENT: /\/\/[^\n]*/
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//

    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    TYPE_NAME: /\.?[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*/
    INT: /0[xX][0-9a-fA-F]+|[0-9]+/
    SIGNED_INT: /-?(0[xX][0-9a-fA-F]+|[0-9]+)/
    SIGNED_NUMBER: /[-+]?(0[xX][0-9a-fA-F]+|[0-9]+(\.[0-9]*)?([eE][-+]?[0-9]+)?)/
    STRING: /"(\\.|[^"\\])*"/ | /'(\\.|[^'\\])*'/

    %import common.WS
    %ignore WS
"""

parser = Lark(
    grammar,
    start='start',
    propagate_positions=True
)


def parse_proto(text: str):
    """Parse .proto source text into a lark Tree. Syntax errors raise lark's UnexpectedInput."""
    return parser.parse(text)


def parse_proto_file(path: str):
    with open(path, 'r', encoding='utf-8') as f:
        return parse_proto(f.read())


def parse_int_literal(text: str) -> int:
    """Decimal, hex (0x1F) or octal (017) integer literal, optionally negative."""
    negative = text.startswith('-')
    digits = text.lstrip('+-')
    if digits[:2].lower() == '0x':
        value = int(digits, 16)
    elif len(digits) > 1 and digits.startswith('0'):
        value = int(digits, 8)
    else:
        value = int(digits)
    return -value if negative else value
