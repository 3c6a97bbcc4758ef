"""
Access flags of classes, fields and methods.
"""

from enum import IntFlag


class AccessFlags(IntFlag):
    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    SUPER = 0x0020  # For classes (invokespecial semantics)
    SYNCHRONIZED = 0x0020  # For methods
    VOLATILE = 0x0040
    BRIDGE = 0x0040
    TRANSIENT = 0x0080
    VARARGS = 0x0080
    NATIVE = 0x0100
    INTERFACE = 0x0200
    ABSTRACT = 0x0400
    STRICT = 0x0800
    SYNTHETIC = 0x1000
    ANNOTATION = 0x2000
    ENUM = 0x4000
    MODULE = 0x8000


# Bits each kind of entity may carry, with the keyword used when listing them.
CLASS_FLAGS = (
    (AccessFlags.PUBLIC, "public"),
    (AccessFlags.FINAL, "final"),
    (AccessFlags.SUPER, "super"),
    (AccessFlags.INTERFACE, "interface"),
    (AccessFlags.ABSTRACT, "abstract"),
    (AccessFlags.SYNTHETIC, "synthetic"),
    (AccessFlags.ANNOTATION, "annotation"),
    (AccessFlags.ENUM, "enum"),
    (AccessFlags.MODULE, "module"),
)

FIELD_FLAGS = (
    (AccessFlags.PUBLIC, "public"),
    (AccessFlags.PRIVATE, "private"),
    (AccessFlags.PROTECTED, "protected"),
    (AccessFlags.STATIC, "static"),
    (AccessFlags.FINAL, "final"),
    (AccessFlags.VOLATILE, "volatile"),
    (AccessFlags.TRANSIENT, "transient"),
    (AccessFlags.SYNTHETIC, "synthetic"),
    (AccessFlags.ENUM, "enum"),
)

METHOD_FLAGS = (
    (AccessFlags.PUBLIC, "public"),
    (AccessFlags.PRIVATE, "private"),
    (AccessFlags.PROTECTED, "protected"),
    (AccessFlags.STATIC, "static"),
    (AccessFlags.FINAL, "final"),
    (AccessFlags.SYNCHRONIZED, "synchronized"),
    (AccessFlags.BRIDGE, "bridge"),
    (AccessFlags.VARARGS, "varargs"),
    (AccessFlags.NATIVE, "native"),
    (AccessFlags.ABSTRACT, "abstract"),
    (AccessFlags.STRICT, "strictfp"),
    (AccessFlags.SYNTHETIC, "synthetic"),
)


def flag_names(access_flags: int, table) -> list[str]:
    """List the keywords of the bits set in ``access_flags`` that ``table`` knows."""
    return [name for flag, name in table if access_flags & flag]


class _AccessMixin:
    access_flags: int

    def _has_flag(self, flag: AccessFlags) -> bool:
        return (self.access_flags & flag) != 0

    @property
    def is_public(self) -> bool:
        return self._has_flag(AccessFlags.PUBLIC)

    @property
    def is_final(self) -> bool:
        return self._has_flag(AccessFlags.FINAL)

    @property
    def is_synthetic(self) -> bool:
        return self._has_flag(AccessFlags.SYNTHETIC)


class ClassAccessMixin(_AccessMixin):
    """Predicates over a class's access flags."""

    @property
    def is_super(self) -> bool:
        return self._has_flag(AccessFlags.SUPER)

    @property
    def is_interface(self) -> bool:
        return self._has_flag(AccessFlags.INTERFACE)

    @property
    def is_abstract(self) -> bool:
        return self._has_flag(AccessFlags.ABSTRACT)

    @property
    def is_annotation(self) -> bool:
        return self._has_flag(AccessFlags.ANNOTATION)

    @property
    def is_enum(self) -> bool:
        return self._has_flag(AccessFlags.ENUM)

    @property
    def is_module(self) -> bool:
        return self._has_flag(AccessFlags.MODULE)

    @property
    def flag_names(self) -> list[str]:
        return flag_names(self.access_flags, CLASS_FLAGS)


class _MemberAccessMixin(_AccessMixin):

    @property
    def is_private(self) -> bool:
        return self._has_flag(AccessFlags.PRIVATE)

    @property
    def is_protected(self) -> bool:
        return self._has_flag(AccessFlags.PROTECTED)

    @property
    def is_static(self) -> bool:
        return self._has_flag(AccessFlags.STATIC)


class FieldAccessMixin(_MemberAccessMixin):
    """Predicates over a field's access flags."""

    @property
    def is_volatile(self) -> bool:
        return self._has_flag(AccessFlags.VOLATILE)

    @property
    def is_transient(self) -> bool:
        return self._has_flag(AccessFlags.TRANSIENT)

    @property
    def is_enum(self) -> bool:
        return self._has_flag(AccessFlags.ENUM)

    @property
    def flag_names(self) -> list[str]:
        return flag_names(self.access_flags, FIELD_FLAGS)


class MethodAccessMixin(_MemberAccessMixin):
    """Predicates over a method's access flags."""

    @property
    def is_synchronized(self) -> bool:
        return self._has_flag(AccessFlags.SYNCHRONIZED)

    @property
    def is_bridge(self) -> bool:
        return self._has_flag(AccessFlags.BRIDGE)

    @property
    def is_varargs(self) -> bool:
        return self._has_flag(AccessFlags.VARARGS)

    @property
    def is_native(self) -> bool:
        return self._has_flag(AccessFlags.NATIVE)

    @property
    def is_abstract(self) -> bool:
        return self._has_flag(AccessFlags.ABSTRACT)

    @property
    def is_strict(self) -> bool:
        return self._has_flag(AccessFlags.STRICT)

    @property
    def flag_names(self) -> list[str]:
        return flag_names(self.access_flags, METHOD_FLAGS)
