"""
Field and method records.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from .access import FieldAccessMixin, MethodAccessMixin
from .attributes import (
    AnyAttribute,
    ConstantValueAttribute,
    DeprecatedAttribute,
    ExceptionsAttribute,
    SignatureAttribute,
    find_attribute,
    read_attributes,
)
from .bytereader import ByteReader
from .constants import ConstantPool
from .descriptors import parse_method_descriptor, type_from_descriptor
from .signature import MethodSignature, compound_type_from_signature, parse_method_signature


@dataclass(frozen=True)
class Member:
    """A field_info or method_info structure."""
    access_flags: int
    name_index: int
    descriptor_index: int
    attributes: tuple[AnyAttribute, ...] = ()
    pool: ConstantPool = field(default=None, repr=False, compare=False)

    @property
    def name(self) -> str:
        return self.pool.utf8(self.name_index)

    @property
    def descriptor(self) -> str:
        return self.pool.utf8(self.descriptor_index)

    @property
    def signature(self) -> Optional[str]:
        """The generic signature, if the member has a Signature attribute."""
        attr = find_attribute(self.attributes, SignatureAttribute)
        return attr.signature if attr is not None else None

    @property
    def is_deprecated(self) -> bool:
        return find_attribute(self.attributes, DeprecatedAttribute) is not None

    def find_attribute(self, kind):
        return find_attribute(self.attributes, kind)


@dataclass(frozen=True)
class Field(FieldAccessMixin, Member):
    """A field of a class."""

    @property
    def type(self) -> Optional[str]:
        """The erased type from the descriptor."""
        return type_from_descriptor(self.descriptor)

    @property
    def generic_type(self) -> Optional[str]:
        """The type from the Signature attribute, falling back to the descriptor."""
        signature = self.signature
        if signature is None:
            return self.type
        return compound_type_from_signature(signature)

    @property
    def constant_value(self) -> Optional[Union[int, float, str]]:
        attr = find_attribute(self.attributes, ConstantValueAttribute)
        return attr.value if attr is not None else None


@dataclass(frozen=True)
class Method(MethodAccessMixin, Member):
    """A method of a class."""

    @property
    def parameter_types(self) -> tuple[str, ...]:
        return parse_method_descriptor(self.descriptor).parameter_types

    @property
    def return_type(self) -> str:
        return parse_method_descriptor(self.descriptor).return_type

    @property
    def parameters(self) -> str:
        """Parameter types joined with ", "."""
        return ", ".join(self.parameter_types)

    @property
    def exceptions(self) -> tuple[str, ...]:
        attr = find_attribute(self.attributes, ExceptionsAttribute)
        return attr.exceptions if attr is not None else ()

    @property
    def generic_signature(self) -> Optional[MethodSignature]:
        signature = self.signature
        if signature is None:
            return None
        return parse_method_signature(signature)

    @property
    def is_constructor(self) -> bool:
        return self.name == "<init>"

    @property
    def is_static_initializer(self) -> bool:
        return self.name == "<clinit>"


def _read_member(reader: ByteReader, pool: ConstantPool, kind: type):
    access = reader.read_u2()
    name_idx = reader.read_u2()
    desc_idx = reader.read_u2()
    attrs = read_attributes(reader, pool)
    return kind(
        access_flags=access,
        name_index=name_idx,
        descriptor_index=desc_idx,
        attributes=attrs,
        pool=pool,
    )


def read_field(reader: ByteReader, pool: ConstantPool) -> Field:
    """Read a field_info structure."""
    return _read_member(reader, pool, Field)


def read_method(reader: ByteReader, pool: ConstantPool) -> Method:
    """Read a method_info structure."""
    return _read_member(reader, pool, Method)
