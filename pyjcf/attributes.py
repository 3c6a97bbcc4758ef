"""
Attribute decoding.

Every attribute is first read as a generic record: a name index and the
raw payload. If the name is one this module understands and the payload
has the layout that attribute requires, the record is then refined into a
typed attribute that wraps the generic one. A payload with the wrong
length is not an error; the record simply stays generic.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, TypeVar, Union

from .bytereader import ByteReader
from .constants import ConstantClass, ConstantNameAndType, ConstantPool
from .errors import StreamError

logger = logging.getLogger(__name__)


class AttributeTag(Enum):
    CONSTANT_VALUE = "ConstantValue"
    CODE = "Code"
    STACK_MAP_TABLE = "StackMapTable"
    EXCEPTIONS = "Exceptions"
    INNER_CLASSES = "InnerClasses"
    ENCLOSING_METHOD = "EnclosingMethod"
    SYNTHETIC = "Synthetic"
    SIGNATURE = "Signature"
    SOURCE_FILE = "SourceFile"
    SOURCE_DEBUG_EXTENSION = "SourceDebugExtension"
    LINE_NUMBER_TABLE = "LineNumberTable"
    LOCAL_VARIABLE_TABLE = "LocalVariableTable"
    LOCAL_VARIABLE_TYPE_TABLE = "LocalVariableTypeTable"
    DEPRECATED = "Deprecated"
    RUNTIME_VISIBLE_ANNOTATIONS = "RuntimeVisibleAnnotations"
    RUNTIME_INVISIBLE_ANNOTATIONS = "RuntimeInvisibleAnnotations"
    RUNTIME_VISIBLE_PARAMETER_ANNOTATIONS = "RuntimeVisibleParameterAnnotations"
    RUNTIME_INVISIBLE_PARAMETER_ANNOTATIONS = "RuntimeInvisibleParameterAnnotations"
    ANNOTATION_DEFAULT = "AnnotationDefault"
    BOOTSTRAP_METHODS = "BootstrapMethods"


_TAGS_BY_NAME = {tag.value: tag for tag in AttributeTag}


class AttributeBase:
    """Accessors shared by generic and refined attributes."""
    name_index: int
    info: bytes
    pool: ConstantPool

    @property
    def name(self) -> str:
        return self.pool.utf8(self.name_index)

    @property
    def length(self) -> int:
        return len(self.info)

    @property
    def tag(self) -> Optional[AttributeTag]:
        return _TAGS_BY_NAME.get(self.name)

    def info_reader(self) -> ByteReader:
        """A fresh cursor over the payload."""
        return ByteReader(self.info)


@dataclass(frozen=True)
class Attribute(AttributeBase):
    """An attribute as read from the stream, payload not interpreted."""
    name_index: int
    info: bytes
    pool: ConstantPool = field(repr=False, compare=False)

    @property
    def generic(self) -> "Attribute":
        return self


@dataclass(frozen=True)
class RefinedAttribute(AttributeBase):
    """An attribute whose payload has been decoded.

    Wraps the generic record it was built from; name and payload are the
    generic record's own.
    """
    kind: ClassVar[AttributeTag]
    # Required payload length, or None when the layout is count-prefixed.
    expected_length: ClassVar[Optional[int]] = None

    generic: Attribute

    @property
    def name_index(self) -> int:
        return self.generic.name_index

    @property
    def info(self) -> bytes:
        return self.generic.info

    @property
    def pool(self) -> ConstantPool:
        return self.generic.pool

    @classmethod
    def from_generic(cls, attr: Attribute) -> Optional["RefinedAttribute"]:
        """Build the refined attribute, or return None if the payload does not fit."""
        if cls.expected_length is not None and attr.length != cls.expected_length:
            return None
        return cls._decode(attr, attr.info_reader())

    @classmethod
    def _decode(cls, attr: Attribute, reader: ByteReader) -> Optional["RefinedAttribute"]:
        return cls(attr)


@dataclass(frozen=True)
class ConstantValueAttribute(RefinedAttribute):
    kind: ClassVar[AttributeTag] = AttributeTag.CONSTANT_VALUE
    expected_length: ClassVar[Optional[int]] = 2

    constant_value_index: int = 0

    @classmethod
    def _decode(cls, attr, reader):
        return cls(attr, reader.read_u2())

    @property
    def constant(self):
        """The referenced constant pool entry."""
        return self.pool.get(self.constant_value_index)

    @property
    def value(self) -> Union[int, float, str]:
        """The constant as a Python value."""
        return self.pool.constant_value(self.constant_value_index)


@dataclass(frozen=True)
class EnclosingMethodAttribute(RefinedAttribute):
    kind: ClassVar[AttributeTag] = AttributeTag.ENCLOSING_METHOD
    expected_length: ClassVar[Optional[int]] = 4

    class_index: int = 0
    method_index: int = 0

    @classmethod
    def _decode(cls, attr, reader):
        class_index = reader.read_u2()
        method_index = reader.read_u2()
        return cls(attr, class_index, method_index)

    @property
    def enclosing_class(self) -> ConstantClass:
        return self.pool.get_class(self.class_index)

    @property
    def enclosing_class_name(self) -> str:
        return self.pool.class_name(self.class_index)

    @property
    def enclosing_method(self) -> Optional[ConstantNameAndType]:
        """The enclosing method, or None if the class is not enclosed by a method."""
        if self.method_index == 0:
            return None
        return self.pool.get_name_and_type(self.method_index)


@dataclass(frozen=True)
class SyntheticAttribute(RefinedAttribute):
    kind: ClassVar[AttributeTag] = AttributeTag.SYNTHETIC
    expected_length: ClassVar[Optional[int]] = 0


@dataclass(frozen=True)
class DeprecatedAttribute(RefinedAttribute):
    kind: ClassVar[AttributeTag] = AttributeTag.DEPRECATED
    expected_length: ClassVar[Optional[int]] = 0


@dataclass(frozen=True)
class SignatureAttribute(RefinedAttribute):
    kind: ClassVar[AttributeTag] = AttributeTag.SIGNATURE
    expected_length: ClassVar[Optional[int]] = 2

    signature_index: int = 0

    @classmethod
    def _decode(cls, attr, reader):
        return cls(attr, reader.read_u2())

    @property
    def signature(self) -> str:
        return self.pool.utf8(self.signature_index)


@dataclass(frozen=True)
class SourceFileAttribute(RefinedAttribute):
    kind: ClassVar[AttributeTag] = AttributeTag.SOURCE_FILE
    expected_length: ClassVar[Optional[int]] = 2

    sourcefile_index: int = 0

    @classmethod
    def _decode(cls, attr, reader):
        return cls(attr, reader.read_u2())

    @property
    def source_file(self) -> str:
        return self.pool.utf8(self.sourcefile_index)


def _read_counted(reader: ByteReader, length: int, item_size: int) -> Optional[int]:
    """Read a u2 count and check the payload is exactly ``2 + count * item_size`` bytes."""
    if length < 2:
        return None
    count = reader.read_u2()
    if length != 2 + count * item_size:
        return None
    return count


@dataclass(frozen=True)
class ExceptionsAttribute(RefinedAttribute):
    kind: ClassVar[AttributeTag] = AttributeTag.EXCEPTIONS

    exception_index_table: tuple[int, ...] = ()

    @classmethod
    def _decode(cls, attr, reader):
        count = _read_counted(reader, attr.length, 2)
        if count is None:
            return None
        return cls(attr, tuple(reader.read_u2() for _ in range(count)))

    @property
    def exceptions(self) -> tuple[str, ...]:
        """Internal names of the declared exception classes."""
        return tuple(self.pool.class_name(idx) for idx in self.exception_index_table)


@dataclass(frozen=True)
class InnerClassEntry:
    """One row of an InnerClasses attribute, as indices."""
    inner_class_info_index: int
    outer_class_info_index: int
    inner_name_index: int
    inner_class_access_flags: int


@dataclass(frozen=True)
class InnerClassInfo:
    """One row of an InnerClasses attribute, resolved."""
    inner_class: str  # Internal name like "Outer$Inner"
    outer_class: Optional[str]  # Internal name like "Outer", None for anonymous/local
    inner_name: Optional[str]  # Simple name like "Inner", None for anonymous
    access_flags: int


@dataclass(frozen=True)
class InnerClassesAttribute(RefinedAttribute):
    kind: ClassVar[AttributeTag] = AttributeTag.INNER_CLASSES

    entries: tuple[InnerClassEntry, ...] = ()

    @classmethod
    def _decode(cls, attr, reader):
        count = _read_counted(reader, attr.length, 8)
        if count is None:
            return None
        entries = []
        for _ in range(count):
            inner_class_idx = reader.read_u2()
            outer_class_idx = reader.read_u2()
            inner_name_idx = reader.read_u2()
            inner_access = reader.read_u2()
            entries.append(InnerClassEntry(
                inner_class_idx, outer_class_idx, inner_name_idx, inner_access))
        return cls(attr, tuple(entries))

    @property
    def classes(self) -> tuple[InnerClassInfo, ...]:
        pool = self.pool
        return tuple(
            InnerClassInfo(
                inner_class=pool.class_name(entry.inner_class_info_index),
                outer_class=pool.class_name_or_none(entry.outer_class_info_index),
                inner_name=pool.utf8(entry.inner_name_index) if entry.inner_name_index else None,
                access_flags=entry.inner_class_access_flags,
            )
            for entry in self.entries
        )


@dataclass(frozen=True)
class BootstrapMethod:
    """A bootstrap method reference and its static arguments, as indices."""
    method_ref_index: int
    argument_indices: tuple[int, ...] = ()


@dataclass(frozen=True)
class BootstrapMethodsAttribute(RefinedAttribute):
    kind: ClassVar[AttributeTag] = AttributeTag.BOOTSTRAP_METHODS

    methods: tuple[BootstrapMethod, ...] = ()

    @classmethod
    def _decode(cls, attr, reader):
        try:
            count = reader.read_u2()
            methods = []
            for _ in range(count):
                method_ref_index = reader.read_u2()
                num_args = reader.read_u2()
                args = tuple(reader.read_u2() for _ in range(num_args))
                methods.append(BootstrapMethod(method_ref_index, args))
        except StreamError:
            # Counts claim more than the payload holds.
            return None
        if not reader.at_end():
            return None
        return cls(attr, tuple(methods))


REFINED_ATTRIBUTES: dict[AttributeTag, type] = {
    kind.kind: kind
    for kind in (
        ConstantValueAttribute,
        EnclosingMethodAttribute,
        SyntheticAttribute,
        DeprecatedAttribute,
        SignatureAttribute,
        SourceFileAttribute,
        ExceptionsAttribute,
        InnerClassesAttribute,
        BootstrapMethodsAttribute,
    )
}

AnyAttribute = Union[Attribute, RefinedAttribute]

A = TypeVar("A", bound=RefinedAttribute)


def refine(attribute: Attribute) -> AnyAttribute:
    """Return the refined form of ``attribute``, or ``attribute`` itself."""
    tag = attribute.tag
    kind = REFINED_ATTRIBUTES.get(tag) if tag is not None else None
    if kind is None:
        return attribute
    refined = kind.from_generic(attribute)
    if refined is None:
        logger.debug(
            "%s attribute with %d byte payload does not match its layout, kept generic",
            attribute.name, attribute.length)
        return attribute
    return refined


def read_attribute(reader: ByteReader, pool: ConstantPool) -> AnyAttribute:
    """Read one attribute_info structure and refine it."""
    name_index = reader.read_u2()
    length = reader.read_u4()
    info = reader.read_bytes(length)
    return refine(Attribute(name_index, info, pool))


def read_attributes(reader: ByteReader, pool: ConstantPool) -> tuple[AnyAttribute, ...]:
    """Read a u2 attributes_count and that many attributes."""
    count = reader.read_u2()
    return tuple(read_attribute(reader, pool) for _ in range(count))


def find_attribute(attributes, kind: type[A]) -> Optional[A]:
    """Return the first attribute of refined type ``kind``, or None."""
    for attr in attributes:
        if isinstance(attr, kind):
            return attr
    return None
