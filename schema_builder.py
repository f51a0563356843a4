"""
schema_builder.py
Builds a SchemaFile from parsed .proto files.

Comments in front of a declaration become its documentation; a comment on the line a
declaration ends on is appended to it. Comments of the form '//:key' or '//:key=value'
are local options for the next declaration:

    message: external, namespace=, access=, type=class|struct, triggers, preserveunknown
    field:   external, readonly, codetype=, access=
    enum:    access=

Field types are resolved once all input files are loaded, so a type can be used before
it is declared and across input files.
"""
import os
from typing import Dict, List, Optional, Tuple

from lark import Token, Tree
from lark.exceptions import UnexpectedInput

from generation_errors import SchemaError
from generation_options import GenerationOptions
from naming import to_camel_case
from proto_parser import parse_int_literal, parse_proto
from schema_model import (
    FieldRule,
    MessageKind,
    ScalarType,
    SchemaEnum,
    SchemaField,
    SchemaFile,
    SchemaMessage,
)
from type_resolver import SCALAR_TO_CS_TYPE, resolve_field_types

MESSAGE_OPTIONS = {'external', 'namespace', 'access', 'type', 'triggers', 'preserveunknown'}
FIELD_OPTIONS = {'external', 'readonly', 'codetype', 'access'}
ENUM_OPTIONS = {'access'}
INTERFACE_NAME_SUFFIX = "View"


def comment_text(token: Token) -> str:
    """Strip comment markers from a LINE_COMMENT or BLOCK_COMMENT token."""
    text = str(token)
    if token.type == 'BLOCK_COMMENT':
        lines = text[2:-2].strip().split('\n')
        return '\n'.join(line.strip().lstrip('*').strip() for line in lines).strip()
    return text.lstrip('/').strip()


def is_local_option(token: Token) -> bool:
    return token.type == 'LINE_COMMENT' and str(token).startswith('//:')


def parse_local_option(token: Token) -> Tuple[str, Optional[str]]:
    body = str(token)[3:].strip()
    if not body:
        raise SchemaError(f"Empty local option at line {token.line}")
    if '=' in body:
        key, value = body.split('=', 1)
        return key.strip().lower(), value.strip()
    return body.lower(), None


def int_literal(token: Token, source: str) -> int:
    try:
        return parse_int_literal(str(token))
    except ValueError:
        raise SchemaError(f"{source}:{token.line}: invalid integer literal '{token}'")


def option_flag(local_options: Dict[str, Optional[str]], key: str) -> bool:
    if key not in local_options:
        return False
    value = local_options[key]
    return value is None or value.lower() in ('1', 'true', 'yes')


class _Pending:
    """Comments and local options collected for the next declaration."""

    def __init__(self):
        self.comments: List[str] = []
        self.options: Dict[str, Optional[str]] = {}

    def add(self, token: Token) -> None:
        if is_local_option(token):
            key, value = parse_local_option(token)
            self.options[key] = value
        else:
            text = comment_text(token)
            if text:
                self.comments.append(text)

    @property
    def doc(self) -> Optional[str]:
        return '\n'.join(self.comments) if self.comments else None


class SchemaBuilder:
    def __init__(self, options: Optional[GenerationOptions] = None):
        self.options = options or GenerationOptions()
        self.schema = SchemaFile()
        # fully qualified proto name ('pkg.Outer.Inner') -> SchemaMessage/SchemaEnum
        self._types: Dict[str, object] = {}
        # (field, type name, owning message, package, source) waiting for type resolution
        self._unresolved: List[Tuple[SchemaField, str, SchemaMessage, str, str]] = []

    def debug_print(self, message: str) -> None:
        self.options.debug_print(message)

    def cs_name(self, name: str) -> str:
        return name if self.options.preserve_names else to_camel_case(name)

    # --- Loading ---

    def add_file(self, path: str) -> None:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
        self.add_text(text, path)

    def add_text(self, text: str, source: str = '<string>') -> None:
        try:
            tree = parse_proto(text)
        except UnexpectedInput as e:
            raise SchemaError(f"{source}:{getattr(e, 'line', '?')}: syntax error\n{e.get_context(text)}") from e
        self.debug_print(f"Parsed {source}")
        self.schema.sources.append(source)
        self._process_file(tree, source)

    def _file_namespace(self, tree: Tree, source: str) -> Tuple[str, Optional[str]]:
        package = ''
        csharp_namespace = None
        for child in tree.children:
            if isinstance(child, Tree) and child.data == 'package_stmt':
                package = str(child.children[0])
            elif isinstance(child, Tree) and child.data == 'option_stmt':
                name, value = self._option_pair(child)
                if name == 'csharp_namespace':
                    csharp_namespace = value.strip('"\'')
        if csharp_namespace:
            return package, csharp_namespace
        if package:
            return package, '.'.join(to_camel_case(part) for part in package.split('.'))
        base = os.path.splitext(os.path.basename(source))[0]
        return package, to_camel_case(base) if base and not base.startswith('<') else None

    @staticmethod
    def _option_pair(node: Tree) -> Tuple[str, str]:
        name_node, constant_node = node.children
        name = ''.join(str(t) for t in name_node.children)
        return name, str(constant_node.children[0])

    def _process_file(self, tree: Tree, source: str) -> None:
        package, namespace = self._file_namespace(tree, source)
        for child, pending in self._declarations(tree.children):
            if child.data == 'message':
                message = self._build_message(child, pending, package, None, source, namespace)
                self.schema.add_message(message)
            elif child.data == 'enum_def':
                enum = self._build_enum(child, pending, package, None, source, namespace)
                self.schema.add_enum(enum)
            elif child.data == 'import_stmt':
                self.debug_print(f"{source}: import {child.children[-1]} not followed, list it as an input")

    @staticmethod
    def _declarations(children) -> List[Tuple[Tree, _Pending]]:
        """
        Pair each non-comment child with the comments and local options that belong to
        it: the ones written before it, and a comment on the line it ends on.
        """
        entries = []
        pending = _Pending()
        last = None
        for child in children:
            if not isinstance(child, Tree):
                continue
            if child.data == 'comment':
                token = child.children[0]
                if last is not None and not is_local_option(token) and token.line == last[0].meta.end_line:
                    last[1].add(token)
                else:
                    pending.add(token)
                continue
            last = (child, pending)
            entries.append(last)
            pending = _Pending()
        return entries

    def _check_options(self, pending: _Pending, allowed, what: str) -> None:
        for key in pending.options:
            if key not in allowed:
                self.debug_print(f"Ignoring unknown local option '{key}' on {what}")

    # --- Declarations ---

    def _build_message(self, node: Tree, pending: _Pending, package: str, parent: Optional[SchemaMessage],
                       source: str, namespace: Optional[str]) -> SchemaMessage:
        name = str(node.children[0])
        opts = pending.options
        self._check_options(pending, MESSAGE_OPTIONS, f"message '{name}'")
        kind_name = opts.get('type') or MessageKind.CLASS.value
        try:
            kind = MessageKind(kind_name)
        except ValueError:
            raise SchemaError(f"{source}: message '{name}' has invalid type '{kind_name}' (class or struct)")
        message = SchemaMessage(
            name=name,
            cs_type=self.cs_name(name),
            access=opts.get('access') or 'public',
            kind=kind,
            external=option_flag(opts, 'external'),
            preserve_unknown=option_flag(opts, 'preserveunknown'),
            triggers=option_flag(opts, 'triggers'),
            comments=pending.doc,
            namespace=(opts.get('namespace') or namespace) if parent is None else None,
        )
        if parent is not None:
            parent.add_message(message)
        self._register(package, message, source)

        for child, child_pending in self._declarations(node.children[1:]):
            if child.data == 'field':
                self._build_field(child, child_pending, package, message, source)
            elif child.data == 'message':
                self._build_message(child, child_pending, package, message, source, namespace)
            elif child.data == 'enum_def':
                self._build_enum(child, child_pending, package, message, source, namespace)
        return message

    def _build_enum(self, node: Tree, pending: _Pending, package: str, parent: Optional[SchemaMessage],
                    source: str, namespace: Optional[str]) -> SchemaEnum:
        name = str(node.children[0])
        self._check_options(pending, ENUM_OPTIONS, f"enum '{name}'")
        enum = SchemaEnum(
            name=name,
            cs_type=self.cs_name(name),
            access=pending.options.get('access') or 'public',
            comments=pending.doc,
            namespace=namespace if parent is None else None,
        )
        if parent is not None:
            parent.add_enum(enum)
        self._register(package, enum, source)

        for child, child_pending in self._declarations(node.children[1:]):
            if child.data == 'enum_value':
                enum.add_value(str(child.children[0]), int_literal(child.children[1], source), child_pending.doc)
        return enum

    def _build_field(self, node: Tree, pending: _Pending, package: str, message: SchemaMessage,
                     source: str) -> SchemaField:
        tokens = [c for c in node.children if isinstance(c, Token)]
        label = tokens[0] if tokens[0].type == 'LABEL' else None
        type_token, name_token, id_token = tokens[-3:]
        name = str(name_token)
        opts = pending.options
        self._check_options(pending, FIELD_OPTIONS, f"field '{message.name}.{name}'")
        field = SchemaField(
            id=int_literal(id_token, source),
            name=name,
            proto_type=None,
            rule=FieldRule.REPEATED if label is not None and str(label) == 'repeated' else FieldRule.SINGULAR,
            cs_name=self.cs_name(name),
            access=opts.get('access') or 'public',
            external=option_flag(opts, 'external'),
            read_only=option_flag(opts, 'readonly'),
            code_type=opts.get('codetype'),
            comments=pending.doc,
        )
        message.add_field(field)
        self._unresolved.append((field, str(type_token), message, package, source))
        return field

    def _register(self, package: str, decl, source: str) -> None:
        qualified = f"{package}.{decl.full_name}" if package else decl.full_name
        if qualified in self._types:
            raise SchemaError(f"{source}: duplicate declaration of '{qualified}'")
        self._types[qualified] = decl

    # --- Resolution ---

    def _lookup(self, type_name: str, message: SchemaMessage, package: str):
        if type_name in SCALAR_TO_CS_TYPE:
            return ScalarType(type_name)
        if type_name.startswith('.'):
            return self._types.get(type_name[1:])
        scope = (package.split('.') if package else []) + message.full_name.split('.')
        while True:
            candidate = '.'.join(scope + [type_name])
            if candidate in self._types:
                return self._types[candidate]
            if not scope:
                return None
            scope.pop()

    def build(self) -> SchemaFile:
        """Resolve all field types and return the finished SchemaFile."""
        for field, type_name, message, package, source in self._unresolved:
            resolved = self._lookup(type_name, message, package)
            if resolved is None:
                raise SchemaError(f"{source}: unresolved type '{type_name}' for field '{field.name}' "
                                  f"in message '{message.full_name}'")
            field.proto_type = resolved
            types = resolve_field_types(field, message)
            if types.diverges or field.repeated:
                field.interface_name = field.cs_name + INTERFACE_NAME_SUFFIX
            else:
                field.interface_name = field.cs_name
        self._unresolved = []
        self.debug_print(f"Built schema with {len(self.schema.messages)} message(s) "
                         f"and {len(self.schema.enums)} enum(s)")
        return self.schema


def build_schema(paths: List[str], options: Optional[GenerationOptions] = None) -> SchemaFile:
    """Load one or more .proto files into a single SchemaFile."""
    builder = SchemaBuilder(options)
    for path in paths:
        builder.add_file(path)
    return builder.build()


def build_schema_from_text(text: str, options: Optional[GenerationOptions] = None,
                           source: str = '<string>') -> SchemaFile:
    builder = SchemaBuilder(options)
    builder.add_text(text, source)
    return builder.build()
