"""
C# source file generator.

Writes one .cs file for a SchemaFile: a header, the using directives the generated
declarations need, then per namespace the top-level enums, the interfaces (when enabled)
and the classes.
"""
import os
from typing import Iterable, Optional, Union

from code_writer import CodeWriter
from generation_errors import GenerationCancelled, GenerationError, SchemaError, ScopeError
from generation_options import GenerationOptions
from generators.enum_code import generate_enum
from generators.message_code import generate_class, generate_interface
from schema_model import SchemaFile, SchemaMessage

GENERATED_NOTICE = "// Generated by ProtoWrangler, do not edit by hand."


def _as_schema_file(schema: Union[SchemaFile, Iterable[SchemaMessage]]) -> SchemaFile:
    if isinstance(schema, SchemaFile):
        return schema
    messages = list(schema)
    if any(message is None for message in messages):
        raise GenerationError("Missing message in root message list")
    try:
        return SchemaFile(messages=messages)
    except SchemaError as e:
        raise GenerationError(str(e)) from e


def _check_cancelled(options: GenerationOptions, decl) -> None:
    if options.cancelled():
        raise GenerationCancelled(f"Generation cancelled before '{decl.full_name}'")


def write_file_header(cw: CodeWriter, schema: SchemaFile, options: GenerationOptions) -> None:
    cw.write_line(GENERATED_NOTICE)
    for source in schema.sources:
        cw.write_line(f"// Source: {os.path.basename(source)}")
    cw.write_line()
    cw.write_line("using System;")
    cw.write_line("using System.Collections.Generic;")
    if options.generate_interfaces:
        cw.write_line("using System.Linq;")
    cw.write_line()


def write_namespace_body(cw: CodeWriter, schema: SchemaFile, namespace: Optional[str],
                         options: GenerationOptions) -> None:
    enums = [e for e in schema.enums.values() if e.namespace == namespace]
    messages = [m for m in schema.messages.values() if m.namespace == namespace]
    for enum in enums:
        generate_enum(enum, cw)
    if options.generate_interfaces:
        for message in messages:
            _check_cancelled(options, message)
            generate_interface(message, cw, options)
            cw.write_line()
    for index, message in enumerate(messages):
        _check_cancelled(options, message)
        if index:
            cw.write_line()
        generate_class(message, cw, options)


def generate_csharp_code(schema: Union[SchemaFile, Iterable[SchemaMessage]],
                         options: Optional[GenerationOptions] = None) -> str:
    """
    Generate C# declarations for all top-level messages and enums of schema.

    Args:
        schema: A SchemaFile, or just the root messages
        options: Generation options (defaults to GenerationOptions())

    Returns:
        str: The generated source text

    Raises:
        GenerationError: if generation had to abort; nothing is returned in that case
    """
    options = options or GenerationOptions()
    schema = _as_schema_file(schema)
    cw = CodeWriter(indent=options.indent)
    write_file_header(cw, schema, options)
    for namespace in schema.namespaces():
        options.debug_print(f"Generating namespace '{namespace or '<global>'}'")
        if namespace:
            with cw.scope(f"namespace {namespace}"):
                write_namespace_body(cw, schema, namespace, options)
        else:
            write_namespace_body(cw, schema, namespace, options)
        cw.write_line()
    if cw.depth:
        raise ScopeError(f"{cw.depth} block(s) left open after generation")
    return cw.code


def write_csharp_file(schema: SchemaFile, output_path: str, options: Optional[GenerationOptions] = None) -> str:
    """Generate code for schema and write it to output_path. Returns the path written."""
    code = generate_csharp_code(schema, options)
    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8', newline='\n') as f:
        f.write(code)
    return output_path
