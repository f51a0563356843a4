"""
schema_model.py
In-memory schema tree consumed by the code generators: messages, fields, enums and the
per-message/per-field options that drive declaration generation.

Nothing in here has behavior beyond bookkeeping. The tree is built once (see
schema_builder.py or construct it by hand in tests) and only read by the generators.
"""
from enum import Enum
from typing import Dict, List, Optional, Union

from generation_errors import SchemaError


class FieldRule(Enum):
    SINGULAR = "singular"
    REPEATED = "repeated"


class MessageKind(Enum):
    CLASS = "class"
    STRUCT = "struct"


class ScalarType:
    """A built-in schema type such as 'int32' or 'string'."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f"ScalarType({self.name!r})"

    def __eq__(self, other):
        return isinstance(other, ScalarType) and other.name == self.name

    def __hash__(self):
        return hash(('scalar', self.name))


class SchemaEnumValue:
    def __init__(self, name: str, value: int, comment: Optional[str] = None):
        self.name = name
        self.value = value
        self.comment = comment

    def __repr__(self):
        return f"SchemaEnumValue(name={self.name!r}, value={self.value!r})"


class SchemaEnum:
    def __init__(self, name: str, values: Optional[List[SchemaEnumValue]] = None, cs_type: Optional[str] = None,
                 access: str = "public", comments: Optional[str] = None, namespace: Optional[str] = None):
        self.name = name
        self.cs_type = cs_type or name
        self.access = access
        self.values = values or []
        self.comments = comments
        self.namespace = namespace
        self.parent: Optional['SchemaMessage'] = None

    def add_value(self, name: str, value: int, comment: Optional[str] = None) -> SchemaEnumValue:
        enum_value = SchemaEnumValue(name, value, comment)
        self.values.append(enum_value)
        return enum_value

    @property
    def full_name(self) -> str:
        """Dotted schema name including containing messages, e.g. 'Outer.Inner.Color'."""
        if self.parent is not None:
            return f"{self.parent.full_name}.{self.name}"
        return self.name

    def __repr__(self):
        return f"SchemaEnum({self.full_name!r})"


class SchemaField:
    """
    A field of a message.

    Args:
        id: Wire field id, unique within the owning message
        name: Field name as written in the schema
        proto_type: ScalarType, SchemaMessage or SchemaEnum
        rule: FieldRule.SINGULAR or FieldRule.REPEATED
        cs_name: Implementation-facing member name (defaults to name)
        interface_name: Interface-facing member name (defaults to cs_name)
        access: Access modifier for the generated member
        external: Member is written by hand elsewhere, only documented
        read_only: Member is emitted as a readonly field initialized in place
        code_type: Replaces the resolved type entirely when set
        comments: Documentation text
    """

    def __init__(self, id: int, name: str, proto_type: Union[ScalarType, 'SchemaMessage', SchemaEnum, None],
                 rule: FieldRule = FieldRule.SINGULAR, cs_name: Optional[str] = None,
                 interface_name: Optional[str] = None, access: str = "public", external: bool = False,
                 read_only: bool = False, code_type: Optional[str] = None, comments: Optional[str] = None):
        self.id = id
        self.name = name
        self.proto_type = proto_type
        self.rule = rule
        self.cs_name = cs_name or name
        self.interface_name = interface_name or self.cs_name
        self.access = access
        self.external = external
        self.read_only = read_only
        self.code_type = code_type
        self.comments = comments

    @property
    def repeated(self) -> bool:
        return self.rule == FieldRule.REPEATED

    def __repr__(self):
        return f"SchemaField(id={self.id!r}, name={self.name!r}, rule={self.rule.value})"


class SchemaMessage:
    """
    A message: an aggregate of fields, optionally containing nested messages and enums.

    fields, enums and messages keep insertion order, which is the order declarations are
    generated in.
    """

    def __init__(self, name: str, cs_type: Optional[str] = None, access: str = "public",
                 kind: MessageKind = MessageKind.CLASS, external: bool = False, preserve_unknown: bool = False,
                 triggers: bool = False, comments: Optional[str] = None, namespace: Optional[str] = None):
        self.name = name
        self.cs_type = cs_type or name
        self.access = access
        self.kind = kind
        self.external = external
        self.preserve_unknown = preserve_unknown
        self.triggers = triggers
        self.comments = comments
        self.namespace = namespace
        self.parent: Optional['SchemaMessage'] = None
        self.fields: Dict[int, SchemaField] = {}
        self.enums: Dict[str, SchemaEnum] = {}
        self.messages: Dict[str, 'SchemaMessage'] = {}

    def add_field(self, field: SchemaField) -> SchemaField:
        self.fields[field.id] = field
        return field

    def add_enum(self, enum: SchemaEnum) -> SchemaEnum:
        enum.parent = self
        if enum.namespace is None:
            enum.namespace = self.namespace
        self.enums[enum.name] = enum
        return enum

    def add_message(self, message: 'SchemaMessage') -> 'SchemaMessage':
        message.parent = self
        if message.namespace is None:
            message.namespace = self.namespace
        self.messages[message.name] = message
        return message

    @property
    def interface_type(self) -> str:
        """Name of the generated interface, e.g. 'IPerson'."""
        return "I" + self.cs_type

    @property
    def full_name(self) -> str:
        if self.parent is not None:
            return f"{self.parent.full_name}.{self.name}"
        return self.name

    def __repr__(self):
        return f"SchemaMessage({self.full_name!r})"


def _declaration_key(decl) -> str:
    return f"{decl.namespace}.{decl.full_name}" if decl.namespace else decl.full_name


class SchemaFile:
    """
    Root of a schema tree: the top-level messages and enums of one generation run,
    possibly collected from several input files.
    """

    def __init__(self, messages: Optional[List[SchemaMessage]] = None, enums: Optional[List[SchemaEnum]] = None,
                 sources: Optional[List[str]] = None):
        self.messages: Dict[str, SchemaMessage] = {}
        self.enums: Dict[str, SchemaEnum] = {}
        self.sources = sources or []
        for message in messages or []:
            self.add_message(message)
        for enum in enums or []:
            self.add_enum(enum)

    @staticmethod
    def _add(table: Dict[str, object], decl):
        key = _declaration_key(decl)
        if key in table:
            raise SchemaError(f"Duplicate top-level declaration '{key}'")
        table[key] = decl
        return decl

    def add_message(self, message: SchemaMessage) -> SchemaMessage:
        return self._add(self.messages, message)

    def add_enum(self, enum: SchemaEnum) -> SchemaEnum:
        return self._add(self.enums, enum)

    def namespaces(self) -> List[Optional[str]]:
        """Namespaces of the top-level declarations: enums first, then messages, each in insertion order."""
        seen = []
        for decl in list(self.enums.values()) + list(self.messages.values()):
            if decl.namespace not in seen:
                seen.append(decl.namespace)
        return seen
