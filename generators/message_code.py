"""
C# declarations for SchemaMessage trees.

Two traversals share the same walking code:

  generate_interface  - one read-only 'partial interface I<Name>' per message. Interfaces
                        of nested messages are written as siblings, not nested.
  generate_class      - the 'partial class'/'partial struct' itself, with nested enums and
                        nested messages declared inside it.

What a field turns into is decided by two tables below (member variant and interface
accessor) and rendered by a member policy object per output mode.
"""
from enum import Enum
from typing import Callable, List, Optional, Tuple

from code_writer import CodeWriter
from generation_errors import GenerationCancelled, GenerationError, SchemaCycleError
from generation_options import GenerationOptions
from generators.enum_code import generate_enum
from schema_model import SchemaField, SchemaMessage
from type_resolver import is_value_type_message, resolve_field_types

EXTERNAL_MARKER = " // Implemented by user elsewhere"
PRESERVED_FIELDS_MEMBER = "public List<KeyValuePair<uint, byte[]>> PreservedFields;"
TRIGGER_HOOKS = (
    "protected virtual void BeforeSerialize() {}",
    "protected virtual void AfterDeserialize() {}",
)


class MemberVariant(Enum):
    DISABLED = "disabled"
    READONLY = "readonly"
    INLINE_VALUE = "inline_value"
    PROPERTY = "property"


class InterfaceAccessor(Enum):
    NONE = "none"
    FORWARD = "forward"
    SNAPSHOT = "snapshot"


ANY = None

# (external, read_only, value_type, repeated, has_code_type) -> variant, first match wins.
# The last row matches every non-external field so the table is total.
MEMBER_VARIANT_TABLE = [
    ((True, ANY, ANY, ANY, ANY), MemberVariant.DISABLED),
    ((False, True, ANY, ANY, ANY), MemberVariant.READONLY),
    ((False, False, True, ANY, ANY), MemberVariant.INLINE_VALUE),
    ((False, False, False, ANY, ANY), MemberVariant.PROPERTY),
]

# (generate_interfaces, types_diverge, repeated) -> extra interface-facing accessor
INTERFACE_ACCESSOR_TABLE = {
    (False, False, False): InterfaceAccessor.NONE,
    (False, False, True): InterfaceAccessor.NONE,
    (False, True, False): InterfaceAccessor.NONE,
    (False, True, True): InterfaceAccessor.NONE,
    (True, False, False): InterfaceAccessor.NONE,
    (True, False, True): InterfaceAccessor.SNAPSHOT,
    (True, True, False): InterfaceAccessor.FORWARD,
    (True, True, True): InterfaceAccessor.SNAPSHOT,
}


def member_key(field: SchemaField, external: Optional[bool] = None) -> Tuple[bool, bool, bool, bool, bool]:
    return (
        field.external if external is None else external,
        field.read_only,
        is_value_type_message(field.proto_type),
        field.repeated,
        field.code_type is not None,
    )


def select_member_variant(field: SchemaField, external: Optional[bool] = None) -> MemberVariant:
    """
    Pick how a field's implementation member is declared. Pass external=False to get the
    variant a hand-written (external) field would have had if it were generated.
    """
    key = member_key(field, external)
    for pattern, variant in MEMBER_VARIANT_TABLE:
        if all(p is ANY or p == k for p, k in zip(pattern, key)):
            return variant
    raise GenerationError(f"No member variant for field '{field.name}' with options {key}")


def select_interface_accessor(field: SchemaField, options: GenerationOptions, message=None) -> InterfaceAccessor:
    types = resolve_field_types(field, message)
    return INTERFACE_ACCESSOR_TABLE[(bool(options.generate_interfaces), types.diverges, field.repeated)]


def interface_member_name(field: SchemaField, message=None) -> str:
    types = resolve_field_types(field, message)
    if not types.diverges and not field.repeated:
        return field.cs_name
    return field.interface_name


class InterfaceMemberPolicy:
    """Members of the read-only 'I<Name>' interface."""

    def __init__(self, message: SchemaMessage, options: GenerationOptions):
        self.message = message
        self.options = options

    def signature(self, field: SchemaField) -> str:
        types = resolve_field_types(field, self.message)
        return f"{types.interface_type} {interface_member_name(field, self.message)} {{ get; }}"

    def separated(self, field: SchemaField) -> bool:
        return False

    def render_member(self, field: SchemaField) -> List[str]:
        return [self.signature(field)]

    def render_disabled(self, field: SchemaField) -> str:
        return "//" + self.signature(field) + EXTERNAL_MARKER


class ClassMemberPolicy:
    """Members of the generated class/struct, plus interface-facing accessors when enabled."""

    def __init__(self, message: SchemaMessage, options: GenerationOptions):
        self.message = message
        self.options = options

    def signature(self, field: SchemaField) -> str:
        types = resolve_field_types(field, self.message)
        member_type = types.implementation_type
        variant = select_member_variant(field, external=False)
        if variant == MemberVariant.READONLY:
            return f"{field.access} readonly {member_type} {field.cs_name} = new {member_type}();"
        if variant == MemberVariant.INLINE_VALUE:
            return f"{field.access} {member_type} {field.cs_name};"
        return f"{field.access} {member_type} {field.cs_name} {{ get; set; }}"

    def accessor(self, field: SchemaField) -> Optional[str]:
        kind = select_interface_accessor(field, self.options, self.message)
        if kind == InterfaceAccessor.NONE:
            return None
        types = resolve_field_types(field, self.message)
        if kind == InterfaceAccessor.SNAPSHOT:
            body = f"return {field.cs_name}.ToArray();"
        else:
            body = f"return {field.cs_name};"
        return f"{field.access} {types.interface_type} {field.interface_name} {{ get {{ {body} }} }}"

    def separated(self, field: SchemaField) -> bool:
        return select_interface_accessor(field, self.options, self.message) != InterfaceAccessor.NONE

    def render_member(self, field: SchemaField) -> List[str]:
        lines = [self.signature(field)]
        accessor = self.accessor(field)
        if accessor is not None:
            lines.append(accessor)
        return lines

    def render_disabled(self, field: SchemaField) -> str:
        return "//" + self.signature(field) + EXTERNAL_MARKER


def write_members(message: SchemaMessage, cw: CodeWriter, policy) -> None:
    for field in message.fields.values():
        if select_member_variant(field) == MemberVariant.DISABLED:
            cw.write_line(policy.render_disabled(field))
            continue
        if policy.separated(field):
            cw.write_line()
        cw.summary(field.comments)
        for line in policy.render_member(field):
            cw.write_line(line)


def _enter(message: Optional[SchemaMessage], chain: Tuple[SchemaMessage, ...]) -> Tuple[SchemaMessage, ...]:
    if message is None:
        parent = chain[-1].full_name if chain else None
        raise GenerationError(f"Missing message inside '{parent}'" if parent else "Missing message")
    if any(message is visited for visited in chain):
        path = ' -> '.join(m.name for m in chain + (message,))
        raise SchemaCycleError(f"Message '{message.name}' contains itself: {path}")
    return chain + (message,)


def walk_nested(message: SchemaMessage, cw: CodeWriter, options: GenerationOptions,
                emit: Callable, chain: Tuple[SchemaMessage, ...]) -> None:
    """Visit nested messages in declaration order, a blank line before each."""
    for sub in message.messages.values():
        if options.cancelled():
            raise GenerationCancelled(f"Generation cancelled before message '{sub.full_name}'")
        cw.write_line()
        emit(sub, cw, options, chain)


def write_external_stub(message: SchemaMessage, cw: CodeWriter) -> None:
    cw.comment("Written elsewhere")
    cw.comment(f"{message.access} {message.kind.value} {message.cs_type} {{}}")


def generate_interface(message: SchemaMessage, cw: CodeWriter, options: GenerationOptions,
                       chain: Tuple[SchemaMessage, ...] = ()) -> None:
    chain = _enter(message, chain)
    if message.external:
        write_external_stub(message, cw)
        return
    options.debug_print(f"Generating interface {message.interface_type} for '{message.full_name}'")
    with cw.scope(f"{message.access} partial interface {message.interface_type}"):
        write_members(message, cw, InterfaceMemberPolicy(message, options))
    walk_nested(message, cw, options, generate_interface, chain)


def generate_class(message: SchemaMessage, cw: CodeWriter, options: GenerationOptions,
                   chain: Tuple[SchemaMessage, ...] = ()) -> None:
    chain = _enter(message, chain)
    if message.external:
        write_external_stub(message, cw)
        return
    options.debug_print(f"Generating {message.kind.value} {message.cs_type} for '{message.full_name}'")
    header = f"{message.access} partial {message.kind.value} {message.cs_type}"
    if options.generate_interfaces:
        header += f" : {message.interface_type}"
    cw.summary(message.comments)
    with cw.scope(header):
        for enum in message.enums.values():
            generate_enum(enum, cw)

        write_members(message, cw, ClassMemberPolicy(message, options))

        if options.debug_field_ids and message.fields:
            cw.comment("Wire field id")
            for field in message.fields.values():
                cw.write_line(f"public const int {field.cs_name}FieldID = {field.id};")

        if message.preserve_unknown:
            cw.summary("Values for unknown fields.")
            cw.write_line(PRESERVED_FIELDS_MEMBER)
            cw.write_line()

        if message.triggers:
            for hook in TRIGGER_HOOKS:
                cw.comment(hook)
            cw.write_line()

        walk_nested(message, cw, options, generate_class, chain)
