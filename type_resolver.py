"""
type_resolver.py
Maps schema types to the C# types used by the generators.

Every field has two candidate surface types: the implementation type used by the
generated class and the interface type exposed by the generated read-only interface.
They differ for message-typed fields (class 'Person' vs. interface 'IPerson').
"""
from typing import Optional

from generation_errors import GenerationError
from schema_model import MessageKind, ScalarType, SchemaEnum, SchemaField, SchemaMessage

SCALAR_TO_CS_TYPE = {
    'double': 'double',
    'float': 'float',
    'int32': 'int',
    'int64': 'long',
    'uint32': 'uint',
    'uint64': 'ulong',
    'sint32': 'int',
    'sint64': 'long',
    'fixed32': 'uint',
    'fixed64': 'ulong',
    'sfixed32': 'int',
    'sfixed64': 'long',
    'bool': 'bool',
    'string': 'string',
    'bytes': 'byte[]',
}

REPEATED_IMPLEMENTATION = "List<{}>"
REPEATED_INTERFACE = "IEnumerable<{}>"


def _qualify(namespace: Optional[str], name: str) -> str:
    return f"{namespace}.{name}" if namespace else name


def _nested_cs_path(proto_type) -> str:
    # Outer.Inner for types declared inside messages
    parts = [proto_type.cs_type]
    parent = proto_type.parent
    while parent is not None:
        parts.insert(0, parent.cs_type)
        parent = parent.parent
    return '.'.join(parts)


def full_cs_type(proto_type) -> str:
    """Fully qualified C# type of the generated class/enum, or the C# scalar type."""
    if isinstance(proto_type, ScalarType):
        if proto_type.name not in SCALAR_TO_CS_TYPE:
            raise GenerationError(f"Unknown scalar type '{proto_type.name}'")
        return SCALAR_TO_CS_TYPE[proto_type.name]
    if isinstance(proto_type, (SchemaMessage, SchemaEnum)):
        return _qualify(proto_type.namespace, _nested_cs_path(proto_type))
    raise GenerationError(f"Cannot resolve C# type for {proto_type!r}")


def full_interface_type(proto_type) -> str:
    """
    Type used on the interface side. Interfaces of nested messages are declared at
    namespace level, so only the namespace qualifies them.
    """
    if isinstance(proto_type, SchemaMessage):
        return _qualify(proto_type.namespace, proto_type.interface_type)
    return full_cs_type(proto_type)


class ResolvedTypes:
    """
    Resolved types of one field.

    base_cs_type/base_interface_type are the raw types of the schema type; they decide
    whether the two views diverge. implementation_type/interface_type are what gets
    written: the code_type override replaces the raw type, and repeated fields wrap it
    in List<T> and IEnumerable<T>.
    """

    def __init__(self, base_cs_type: str, base_interface_type: str, implementation_type: str, interface_type: str):
        self.base_cs_type = base_cs_type
        self.base_interface_type = base_interface_type
        self.implementation_type = implementation_type
        self.interface_type = interface_type

    @property
    def diverges(self) -> bool:
        return self.base_cs_type != self.base_interface_type


def resolve_field_types(field: SchemaField, message: Optional[SchemaMessage] = None) -> ResolvedTypes:
    if field.proto_type is None:
        owner = message.full_name if message is not None else '?'
        raise GenerationError(f"Unresolved type for field '{field.name}' in message '{owner}'")
    base_cs = full_cs_type(field.proto_type)
    base_interface = full_interface_type(field.proto_type)
    implementation_type = field.code_type if field.code_type is not None else base_cs
    interface_type = field.code_type if field.code_type is not None else base_interface
    if field.repeated:
        implementation_type = REPEATED_IMPLEMENTATION.format(implementation_type)
        interface_type = REPEATED_INTERFACE.format(interface_type)
    return ResolvedTypes(base_cs, base_interface, implementation_type, interface_type)


def is_value_type_message(proto_type) -> bool:
    """True for message types generated as a struct."""
    return isinstance(proto_type, SchemaMessage) and proto_type.kind == MessageKind.STRUCT
