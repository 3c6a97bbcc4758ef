"""
Constant pool entries and the constant pool table.

Entries store inline scalars or 1-based indices into the pool. Indices are
never followed while the pool is read; every lookup goes through the
ConstantPool accessors, which check bounds and entry kinds at call time.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Iterator, Optional, Union

from .bytereader import ByteReader
from .errors import (
    ConstantIndexError,
    ConstantTypeError,
    ReservedSlotError,
    UnknownConstantTagError,
)
from .mutf8 import read_modified_utf8

logger = logging.getLogger(__name__)


class ConstantPoolTag(IntEnum):
    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    DYNAMIC = 17
    INVOKE_DYNAMIC = 18
    MODULE = 19
    PACKAGE = 20


class ReferenceKind(IntEnum):
    """Kinds of CONSTANT_MethodHandle references."""
    GET_FIELD = 1
    GET_STATIC = 2
    PUT_FIELD = 3
    PUT_STATIC = 4
    INVOKE_VIRTUAL = 5
    INVOKE_STATIC = 6
    INVOKE_SPECIAL = 7
    NEW_INVOKE_SPECIAL = 8
    INVOKE_INTERFACE = 9


class Constant:
    """Base class for constant pool entries."""
    tag: ClassVar[ConstantPoolTag]
    # Long and Double take up two slots in the pool.
    slots: ClassVar[int] = 1

    @classmethod
    def read(cls, reader: ByteReader) -> "Constant":
        raise NotImplementedError

    def describe(self, pool: "ConstantPool") -> str:
        """Return a short javap-like description of this entry."""
        raise NotImplementedError


@dataclass(frozen=True)
class ConstantUtf8(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.UTF8
    value: str

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantUtf8":
        return cls(read_modified_utf8(reader))

    def describe(self, pool: "ConstantPool") -> str:
        return self.value


@dataclass(frozen=True)
class ConstantInteger(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.INTEGER
    value: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantInteger":
        return cls(reader.read_i4())

    def describe(self, pool: "ConstantPool") -> str:
        return str(self.value)


@dataclass(frozen=True)
class ConstantFloat(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.FLOAT
    value: float

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantFloat":
        return cls(reader.read_f4())

    def describe(self, pool: "ConstantPool") -> str:
        return f"{self.value}f"


@dataclass(frozen=True)
class ConstantLong(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.LONG
    slots: ClassVar[int] = 2
    value: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantLong":
        return cls(reader.read_i8())

    def describe(self, pool: "ConstantPool") -> str:
        return f"{self.value}l"


@dataclass(frozen=True)
class ConstantDouble(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.DOUBLE
    slots: ClassVar[int] = 2
    value: float

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantDouble":
        return cls(reader.read_f8())

    def describe(self, pool: "ConstantPool") -> str:
        return f"{self.value}d"


@dataclass(frozen=True)
class ConstantClass(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.CLASS
    name_index: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantClass":
        return cls(reader.read_u2())

    def describe(self, pool: "ConstantPool") -> str:
        return f"#{self.name_index} // {pool.utf8(self.name_index)}"


@dataclass(frozen=True)
class ConstantString(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.STRING
    string_index: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantString":
        return cls(reader.read_u2())

    def describe(self, pool: "ConstantPool") -> str:
        return f"#{self.string_index} // {pool.utf8(self.string_index)}"


@dataclass(frozen=True)
class ConstantMemberRef(Constant):
    """Common shape of Fieldref, Methodref and InterfaceMethodref."""
    class_index: int
    name_and_type_index: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantMemberRef":
        class_index = reader.read_u2()
        name_and_type_index = reader.read_u2()
        return cls(class_index, name_and_type_index)

    def describe(self, pool: "ConstantPool") -> str:
        owner = pool.class_name(self.class_index)
        name, descriptor = pool.name_and_type(self.name_and_type_index)
        return (f"#{self.class_index}.#{self.name_and_type_index} "
                f"// {owner}.{name}:{descriptor}")


@dataclass(frozen=True)
class ConstantFieldref(ConstantMemberRef):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.FIELDREF


@dataclass(frozen=True)
class ConstantMethodref(ConstantMemberRef):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.METHODREF


@dataclass(frozen=True)
class ConstantInterfaceMethodref(ConstantMemberRef):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.INTERFACE_METHODREF


@dataclass(frozen=True)
class ConstantNameAndType(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.NAME_AND_TYPE
    name_index: int
    descriptor_index: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantNameAndType":
        name_index = reader.read_u2()
        descriptor_index = reader.read_u2()
        return cls(name_index, descriptor_index)

    def describe(self, pool: "ConstantPool") -> str:
        return (f"#{self.name_index}:#{self.descriptor_index} "
                f"// {pool.utf8(self.name_index)}:{pool.utf8(self.descriptor_index)}")


@dataclass(frozen=True)
class ConstantMethodHandle(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.METHOD_HANDLE
    reference_kind: int
    reference_index: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantMethodHandle":
        reference_kind = reader.read_u1()
        reference_index = reader.read_u2()
        return cls(reference_kind, reference_index)

    @property
    def kind(self) -> Optional[ReferenceKind]:
        try:
            return ReferenceKind(self.reference_kind)
        except ValueError:
            return None

    def describe(self, pool: "ConstantPool") -> str:
        owner, name, descriptor = pool.member_ref(self.reference_index)
        kind = self.kind.name if self.kind is not None else str(self.reference_kind)
        return f"{kind}:#{self.reference_index} // {owner}.{name}:{descriptor}"


@dataclass(frozen=True)
class ConstantMethodType(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.METHOD_TYPE
    descriptor_index: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantMethodType":
        return cls(reader.read_u2())

    def describe(self, pool: "ConstantPool") -> str:
        return f"#{self.descriptor_index} // {pool.utf8(self.descriptor_index)}"


@dataclass(frozen=True)
class ConstantDynamicBase(Constant):
    """Common shape of Dynamic and InvokeDynamic."""
    bootstrap_method_attr_index: int
    name_and_type_index: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantDynamicBase":
        bootstrap_method_attr_index = reader.read_u2()
        name_and_type_index = reader.read_u2()
        return cls(bootstrap_method_attr_index, name_and_type_index)

    def describe(self, pool: "ConstantPool") -> str:
        name, descriptor = pool.name_and_type(self.name_and_type_index)
        return (f"#{self.bootstrap_method_attr_index}:#{self.name_and_type_index} "
                f"// {name}:{descriptor}")


@dataclass(frozen=True)
class ConstantDynamic(ConstantDynamicBase):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.DYNAMIC


@dataclass(frozen=True)
class ConstantInvokeDynamic(ConstantDynamicBase):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.INVOKE_DYNAMIC


@dataclass(frozen=True)
class ConstantModule(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.MODULE
    name_index: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantModule":
        return cls(reader.read_u2())

    def describe(self, pool: "ConstantPool") -> str:
        return f"#{self.name_index} // {pool.utf8(self.name_index)}"


@dataclass(frozen=True)
class ConstantPackage(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.PACKAGE
    name_index: int

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantPackage":
        return cls(reader.read_u2())

    def describe(self, pool: "ConstantPool") -> str:
        return f"#{self.name_index} // {pool.utf8(self.name_index)}"


ConstantEntry = Union[
    ConstantUtf8, ConstantInteger, ConstantFloat, ConstantLong, ConstantDouble,
    ConstantClass, ConstantString, ConstantFieldref, ConstantMethodref,
    ConstantInterfaceMethodref, ConstantNameAndType, ConstantMethodHandle,
    ConstantMethodType, ConstantDynamic, ConstantInvokeDynamic,
    ConstantModule, ConstantPackage,
]

CONSTANT_TYPES: dict[int, type] = {
    kind.tag: kind
    for kind in (
        ConstantUtf8, ConstantInteger, ConstantFloat, ConstantLong, ConstantDouble,
        ConstantClass, ConstantString, ConstantFieldref, ConstantMethodref,
        ConstantInterfaceMethodref, ConstantNameAndType, ConstantMethodHandle,
        ConstantMethodType, ConstantDynamic, ConstantInvokeDynamic,
        ConstantModule, ConstantPackage,
    )
}

MEMBER_REF_TYPES = (ConstantFieldref, ConstantMethodref, ConstantInterfaceMethodref)


class ConstantPool:
    """The constant pool of a class file, indexed from 1.

    Slot ``i`` holds the entry with index ``i + 1``. The slot after a Long
    or Double holds ``None`` and cannot be looked up.
    """

    def __init__(self, entries: list):
        self._entries = entries

    @classmethod
    def read(cls, reader: ByteReader) -> "ConstantPool":
        """Read the u2 constant_pool_count and the pool that follows it."""
        return cls.build(reader, reader.read_u2())

    @classmethod
    def build(cls, reader: ByteReader, declared_count: int) -> "ConstantPool":
        """Read ``declared_count - 1`` slots worth of entries."""
        size = max(declared_count - 1, 0)
        entries = [None] * size
        i = 0
        while i < size:
            tag = reader.read_u1()
            kind = CONSTANT_TYPES.get(tag)
            if kind is None:
                raise UnknownConstantTagError(tag, i + 1)
            entries[i] = kind.read(reader)
            i += kind.slots
        logger.debug("Read constant pool with %d slots", size)
        return cls(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[int, ConstantEntry]]:
        """Yield ``(index, entry)`` for every addressable slot."""
        for slot, entry in enumerate(self._entries):
            if entry is not None:
                yield slot + 1, entry

    def __getitem__(self, index: int) -> ConstantEntry:
        return self.get(index)

    def get(self, index: int) -> ConstantEntry:
        """Return the entry at 1-based ``index``."""
        slot = index - 1
        if slot < 0 or slot >= len(self._entries):
            raise ConstantIndexError(index, len(self._entries))
        entry = self._entries[slot]
        if entry is None:
            raise ReservedSlotError(index, len(self._entries))
        return entry

    def is_reserved(self, index: int) -> bool:
        slot = index - 1
        return 0 <= slot < len(self._entries) and self._entries[slot] is None

    def get_typed(self, index: int, *kinds: type) -> ConstantEntry:
        """Return the entry at ``index``, checking it is one of ``kinds``."""
        entry = self.get(index)
        if not isinstance(entry, kinds):
            raise ConstantTypeError(index, tuple(kind.tag for kind in kinds), entry.tag)
        return entry

    # ---- typed accessors ----

    def get_utf8(self, index: int) -> ConstantUtf8:
        return self.get_typed(index, ConstantUtf8)

    def get_class(self, index: int) -> ConstantClass:
        return self.get_typed(index, ConstantClass)

    def get_string(self, index: int) -> ConstantString:
        return self.get_typed(index, ConstantString)

    def get_name_and_type(self, index: int) -> ConstantNameAndType:
        return self.get_typed(index, ConstantNameAndType)

    def get_member_ref(self, index: int) -> ConstantMemberRef:
        return self.get_typed(index, *MEMBER_REF_TYPES)

    def get_method_handle(self, index: int) -> ConstantMethodHandle:
        return self.get_typed(index, ConstantMethodHandle)

    def get_method_type(self, index: int) -> ConstantMethodType:
        return self.get_typed(index, ConstantMethodType)

    def get_module(self, index: int) -> ConstantModule:
        return self.get_typed(index, ConstantModule)

    def get_package(self, index: int) -> ConstantPackage:
        return self.get_typed(index, ConstantPackage)

    # ---- resolution helpers ----

    def utf8(self, index: int) -> str:
        """Get the string of the Utf8 entry at ``index``."""
        return self.get_utf8(index).value

    def class_name(self, index: int) -> str:
        """Get the internal name of the Class entry at ``index``."""
        return self.utf8(self.get_class(index).name_index)

    def class_name_or_none(self, index: int) -> Optional[str]:
        """Like class_name, but index 0 means "no class"."""
        if index == 0:
            return None
        return self.class_name(index)

    def string_value(self, index: int) -> str:
        return self.utf8(self.get_string(index).string_index)

    def name_and_type(self, index: int) -> tuple[str, str]:
        """Get ``(name, descriptor)`` of the NameAndType entry at ``index``."""
        nat = self.get_name_and_type(index)
        return self.utf8(nat.name_index), self.utf8(nat.descriptor_index)

    def member_ref(self, index: int) -> tuple[str, str, str]:
        """Get ``(class name, member name, descriptor)`` of a member reference."""
        ref = self.get_member_ref(index)
        name, descriptor = self.name_and_type(ref.name_and_type_index)
        return self.class_name(ref.class_index), name, descriptor

    def constant_value(self, index: int) -> Union[int, float, str]:
        """Get the Python value of an Integer, Float, Long, Double or String entry."""
        entry = self.get_typed(
            index, ConstantInteger, ConstantFloat, ConstantLong, ConstantDouble, ConstantString)
        if isinstance(entry, ConstantString):
            return self.utf8(entry.string_index)
        return entry.value
