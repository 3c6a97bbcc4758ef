"""
Field and method descriptor decoding.

Descriptors are the erased type strings stored for every field and method
(JVMS 4.3). Decoded types are Java-like names: primitives become their
keyword, reference types use '.' as package separator and each array
dimension adds a trailing "[]".
"""

from dataclasses import dataclass
from typing import Optional

from .errors import DescriptorError

PRIMITIVE_NAMES = {
    "B": "byte",
    "C": "char",
    "D": "double",
    "F": "float",
    "I": "int",
    "J": "long",
    "S": "short",
    "Z": "boolean",
}


@dataclass(frozen=True)
class MethodDescriptor:
    """Decoded method descriptor."""
    parameter_types: tuple[str, ...]
    return_type: str


class DescriptorParser:
    """Scans a descriptor string left to right."""

    def __init__(self, descriptor: str):
        self.desc = descriptor
        self.pos = 0

    def _peek(self) -> str:
        if self.pos >= len(self.desc):
            return ""
        return self.desc[self.pos]

    def _read(self) -> str:
        ch = self._peek()
        self.pos += 1
        return ch

    def _error(self, message: str) -> DescriptorError:
        return DescriptorError(f"{message} at pos {self.pos} in descriptor '{self.desc}'")

    def parse_types(self) -> list[str]:
        """Decode a run of field types until the end of the string."""
        types = []
        while self.pos < len(self.desc):
            types.append(self._parse_field_type())
        return types

    def parse_method(self) -> MethodDescriptor:
        if self._read() != "(":
            raise self._error("Expected '('")
        params = []
        while self._peek() != ")":
            if not self._peek():
                raise self._error("Missing ')'")
            params.append(self._parse_field_type())
        self._read()  # consume ')'
        if self._peek() == "V":
            self._read()
            return_type = "void"
        else:
            return_type = self._parse_field_type()
        if self.pos != len(self.desc):
            raise self._error("Unexpected trailing characters")
        return MethodDescriptor(parameter_types=tuple(params), return_type=return_type)

    def _parse_field_type(self) -> str:
        depth = 0
        while self._peek() == "[":
            self._read()
            depth += 1

        ch = self._read()
        if ch in PRIMITIVE_NAMES:
            name = PRIMITIVE_NAMES[ch]
        elif ch == "L":
            end = self.desc.find(";", self.pos)
            if end < 0:
                raise self._error("Unterminated class name")
            if end == self.pos:
                raise self._error("Empty class name")
            name = self.desc[self.pos:end].replace("/", ".")
            self.pos = end + 1
        elif not ch:
            raise self._error("Missing type")
        else:
            self.pos -= 1
            raise self._error(f"Unexpected '{ch}'")

        return name + "[]" * depth


def types_from_descriptor(descriptor: str) -> list[str]:
    """Decode every type in ``descriptor``, in order.

    >>> types_from_descriptor("I[[DLjava/lang/String;")
    ['int', 'double[][]', 'java.lang.String']
    """
    return DescriptorParser(descriptor).parse_types()


def type_from_descriptor(descriptor: str) -> Optional[str]:
    """Decode a descriptor holding exactly one type, or return None."""
    types = types_from_descriptor(descriptor)
    if len(types) != 1:
        return None
    return types[0]


def parse_method_descriptor(descriptor: str) -> MethodDescriptor:
    """Decode ``(params)return`` into parameter and return types."""
    return DescriptorParser(descriptor).parse_method()
