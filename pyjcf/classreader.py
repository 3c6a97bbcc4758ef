"""
Java class file reader.

Decodes a complete class file into a read-only ClassFile model. A file
without the 0xCAFEBABE magic number is reported through ClassFile.valid
rather than an exception; truncated or malformed data raises StreamError
or FormatError and no model is returned.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .access import ClassAccessMixin
from .attributes import (
    AnyAttribute,
    InnerClassesAttribute,
    InnerClassInfo,
    SignatureAttribute,
    SourceFileAttribute,
    find_attribute,
    read_attributes,
)
from .bytereader import ByteReader
from .constants import ConstantPool
from .members import Field, Method, read_field, read_method
from .signature import ClassSignature, parse_class_signature

logger = logging.getLogger(__name__)

MAGIC = 0xCAFEBABE


@dataclass(frozen=True)
class ClassFile(ClassAccessMixin):
    """Parsed class file.

    ``this_class``, ``super_class`` and ``interfaces`` are constant pool
    indices; ``super_class`` is 0 only for java/lang/Object. Use the
    name properties for resolved internal names.
    """
    valid: bool
    minor_version: int = 0
    major_version: int = 0
    constant_pool: ConstantPool = field(default_factory=lambda: ConstantPool([]), repr=False)
    access_flags: int = 0
    this_class: int = 0
    super_class: int = 0
    interfaces: tuple[int, ...] = ()
    fields: tuple[Field, ...] = ()
    methods: tuple[Method, ...] = ()
    attributes: tuple[AnyAttribute, ...] = ()

    @classmethod
    def from_bytes(cls, data: bytes) -> "ClassFile":
        return ClassReader(data).read()

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "ClassFile":
        return ClassReader(stream.read()).read()

    @property
    def version(self) -> tuple[int, int]:
        return (self.major_version, self.minor_version)

    @property
    def name(self) -> str:
        return self.constant_pool.class_name(self.this_class)

    @property
    def super_name(self) -> Optional[str]:
        return self.constant_pool.class_name_or_none(self.super_class)

    @property
    def interface_names(self) -> tuple[str, ...]:
        return tuple(self.constant_pool.class_name(idx) for idx in self.interfaces)

    @property
    def signature(self) -> Optional[str]:
        attr = find_attribute(self.attributes, SignatureAttribute)
        return attr.signature if attr is not None else None

    @property
    def generic_signature(self) -> Optional[ClassSignature]:
        signature = self.signature
        if signature is None:
            return None
        return parse_class_signature(signature)

    @property
    def source_file(self) -> Optional[str]:
        attr = find_attribute(self.attributes, SourceFileAttribute)
        return attr.source_file if attr is not None else None

    @property
    def inner_classes(self) -> tuple[InnerClassInfo, ...]:
        attr = find_attribute(self.attributes, InnerClassesAttribute)
        return attr.classes if attr is not None else ()

    def find_attribute(self, kind):
        return find_attribute(self.attributes, kind)

    def find_field(self, name: str) -> Optional[Field]:
        for fld in self.fields:
            if fld.name == name:
                return fld
        return None

    def find_methods(self, name: str) -> list[Method]:
        return [method for method in self.methods if method.name == name]


class ClassReader:
    """Reads Java class files."""

    def __init__(self, data: bytes):
        self.reader = ByteReader(data)

    def read(self) -> ClassFile:
        """Read the class file and return a ClassFile."""
        reader = self.reader

        # Magic number
        magic = reader.read_u4()
        if magic != MAGIC:
            logger.debug("Invalid class file magic: %#010x", magic)
            return ClassFile(valid=False)

        # Version
        minor = reader.read_u2()
        major = reader.read_u2()

        # Constant pool
        pool = ConstantPool.read(reader)

        # Access flags
        access_flags = reader.read_u2()

        # This/super class
        this_class_idx = reader.read_u2()
        super_class_idx = reader.read_u2()

        # Interfaces
        interfaces_count = reader.read_u2()
        interfaces = tuple(reader.read_u2() for _ in range(interfaces_count))

        # Fields
        fields_count = reader.read_u2()
        fields = tuple(read_field(reader, pool) for _ in range(fields_count))

        # Methods
        methods_count = reader.read_u2()
        methods = tuple(read_method(reader, pool) for _ in range(methods_count))

        # Class attributes
        attrs = read_attributes(reader, pool)

        if not reader.at_end():
            logger.warning("Ignoring %d trailing bytes after class file", reader.remaining)

        logger.debug(
            "Read class file version %d.%d: %d interfaces, %d fields, %d methods, %d attributes",
            major, minor, len(interfaces), len(fields), len(methods), len(attrs))

        return ClassFile(
            valid=True,
            minor_version=minor,
            major_version=major,
            constant_pool=pool,
            access_flags=access_flags,
            this_class=this_class_idx,
            super_class=super_class_idx,
            interfaces=interfaces,
            fields=fields,
            methods=methods,
            attributes=attrs,
        )


def read_class_file(path: Union[str, Path]) -> ClassFile:
    """Read a single class file."""
    data = Path(path).read_bytes()
    reader = ClassReader(data)
    return reader.read()
