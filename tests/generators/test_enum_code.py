from code_writer import CodeWriter
from generators.enum_code import generate_enum
from schema_model import SchemaEnum, SchemaEnumValue


def enum_code(enum):
    cw = CodeWriter()
    generate_enum(enum, cw)
    return cw.code


def test_enum_values_in_declaration_order():
    enum = SchemaEnum("Color")
    enum.add_value("RED", 0)
    enum.add_value("GREEN", 2, "Like grass")
    enum.add_value("BLUE", 1)
    assert enum_code(enum) == (
        "public enum Color\n"
        "{\n"
        "    RED = 0,\n"
        "    /// <summary>\n"
        "    /// Like grass\n"
        "    /// </summary>\n"
        "    GREEN = 2,\n"
        "    BLUE = 1,\n"
        "}\n"
        "\n"
    )


def test_duplicate_and_negative_values_are_kept():
    enum = SchemaEnum("Level", values=[
        SchemaEnumValue("LOW", 0),
        SchemaEnumValue("ALSO_LOW", 0),
        SchemaEnumValue("BELOW", -3),
    ])
    code = enum_code(enum)
    assert "    LOW = 0,\n    ALSO_LOW = 0,\n    BELOW = -3,\n" in code


def test_enum_access_and_name():
    enum = SchemaEnum("state", cs_type="State", access="internal", comments="Lifecycle")
    code = enum_code(enum)
    assert code == (
        "/// <summary>\n"
        "/// Lifecycle\n"
        "/// </summary>\n"
        "internal enum State\n"
        "{\n"
        "}\n"
        "\n"
    )
