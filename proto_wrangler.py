#!/usr/bin/env python3
"""
ProtoWrangler

Reads .proto message definitions and writes C# declarations for them: partial classes or
structs with properties, enums, and optionally a read-only interface per message. The
generated classes are partial so hand-written code can extend them.

Usage:
    python proto_wrangler.py <input.proto> [<input.proto> ...] [--output <path>] [--interfaces]
                             [--use-tabs] [--preserve-names] [--debug-field-ids] [--verbose]

Arguments:
    inputs                : One or more .proto files, generated into a single .cs file
    --output, -o          : Output .cs file, or a directory to write <first input>.cs into
                            (default: first input with a .cs extension)
    --interfaces, -i      : Generate an interface per message
    --use-tabs, -t        : Indent with tabs instead of four spaces
    --preserve-names      : Keep names as written instead of converting them to CamelCase
    --debug-field-ids     : Emit a <Field>FieldID constant per field with its wire id
    --verbose, -v         : Print debug information

Environment overrides:
    PW_OUTPUT, PW_INTERFACES, PW_USE_TABS, PW_VERBOSE

Example:
    python proto_wrangler.py messages.proto --output ./generated/ --interfaces
"""

import argparse
import os
import sys
from typing import List, Optional

from generation_errors import GenerationError, SchemaError
from generation_options import GenerationOptions
from generators.csharp_generator import write_csharp_file
from schema_builder import SchemaBuilder


def resolve_output_path(inputs: List[str], output: Optional[str]) -> str:
    """
    Work out the .cs file to write. Without an output the first input's name is reused;
    a directory (existing, or given with a trailing separator) gets that name inside it.
    """
    first = inputs[0]
    default_name = os.path.splitext(os.path.basename(first))[0] + ".cs"
    if output is None:
        return os.path.abspath(os.path.join(os.path.dirname(first), default_name))
    if output.endswith(('/', os.sep)) or os.path.isdir(output):
        return os.path.abspath(os.path.join(output, default_name))
    return os.path.abspath(output)


class ProtoWrangler:
    """
    Loads the input schemas and writes the generated C# file.
    """

    def __init__(self, input_files: List[str], output_path: str, options: GenerationOptions):
        """
        Args:
            input_files: Paths of the .proto files to read
            output_path: Path of the .cs file to write
            options: Generation options for this run
        """
        self.input_files = input_files
        self.output_path = output_path
        self.options = options
        self.schema = None

    def parse_input_files(self) -> bool:
        """
        Parse all input files into one schema.

        Returns:
            bool: True if parsing was successful, False otherwise
        """
        missing = [path for path in self.input_files if not os.path.isfile(path)]
        for path in missing:
            print(f"Error: File not found: {path}")
        if missing:
            return False

        builder = SchemaBuilder(self.options)
        try:
            for path in self.input_files:
                builder.add_file(path)
            self.schema = builder.build()
        except SchemaError as e:
            print(f"Error: {e}")
            return False
        return True

    def generate_output(self) -> bool:
        """
        Generate the C# file from the parsed schema.

        Returns:
            bool: True if generation was successful, False otherwise
        """
        if self.schema is None:
            print("Error: No schema available. Parse input files first.")
            return False
        try:
            write_csharp_file(self.schema, self.output_path, self.options)
        except GenerationError as e:
            print(f"Error: Generation aborted: {e}")
            return False
        self.options.debug_print(f"Wrote {self.output_path}")
        return True


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate C# declarations from .proto message definitions",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('inputs', nargs='+', help='Input .proto files')
    parser.add_argument('--output', '-o', help='Output .cs file or directory (default: first input with .cs)')
    parser.add_argument('--interfaces', '-i', action='store_true', help='Generate interfaces')
    parser.add_argument('--use-tabs', '-t', action='store_true', help='Indent generated code with tabs')
    parser.add_argument('--preserve-names', action='store_true',
                        help='Keep names as written, otherwise names are converted to CamelCase')
    parser.add_argument('--debug-field-ids', action='store_true', help='Emit wire field id constants')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output for debugging')
    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments
    """
    return build_argument_parser().parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point of the script. Returns the process exit code.
    """
    args = parse_arguments(argv)
    options = GenerationOptions.from_args(args)
    output = os.environ.get('PW_OUTPUT', args.output)
    input_files = [os.path.abspath(path) for path in args.inputs]
    output_path = resolve_output_path(input_files, output)
    options.debug_print(f"Inputs: {input_files}")
    options.debug_print(f"Output: {output_path}")

    wrangler = ProtoWrangler(input_files, output_path, options)
    if not wrangler.parse_input_files():
        return 1
    if not wrangler.generate_output():
        return 1

    print(f"Generated {output_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
