"""
C# enum declarations for SchemaEnum.
"""
from code_writer import CodeWriter
from schema_model import SchemaEnum


def generate_enum(enum: SchemaEnum, cw: CodeWriter) -> None:
    # Values are written exactly as given: duplicates and gaps are not checked here.
    cw.summary(enum.comments)
    with cw.scope(f"{enum.access} enum {enum.cs_type}"):
        for value in enum.values:
            cw.summary(value.comment)
            cw.write_line(f"{value.name} = {value.value},")
    cw.write_line()
