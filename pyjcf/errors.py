"""
Exceptions raised while decoding class files.
"""

from typing import Optional


class ClassFileError(Exception):
    """Base class for all class file decoding errors."""
    pass


class StreamError(ClassFileError):
    """The input ended before a required value could be read."""

    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.offset = offset


class FormatError(ClassFileError):
    """A value violates the class file format."""
    pass


class UnknownConstantTagError(FormatError):
    """A constant pool entry has a tag outside the known set."""

    def __init__(self, tag: int, index: int):
        super().__init__(f"Unknown constant pool tag {tag} at index {index}")
        self.tag = tag
        self.index = index


class StringDecodeError(FormatError):
    """A modified UTF-8 sequence is truncated."""
    pass


class DescriptorError(FormatError):
    """A field or method descriptor is malformed."""
    pass


class SignatureError(FormatError):
    """A generic signature is malformed."""
    pass


class ConstantIndexError(ClassFileError, IndexError):
    """A constant pool index is outside [1, pool length]."""

    def __init__(self, index: int, size: int, message: Optional[str] = None):
        super().__init__(message or f"Constant pool index {index} out of range [1, {size}]")
        self.index = index
        self.size = size


class ReservedSlotError(FormatError, ConstantIndexError):
    """A constant pool index points at the unusable slot after a Long or Double."""

    def __init__(self, index: int, size: int):
        ConstantIndexError.__init__(
            self, index, size,
            f"Constant pool index {index} is the reserved slot after a Long or Double",
        )


class ConstantTypeError(ClassFileError, TypeError):
    """A constant pool entry is not of the kind the caller expected."""

    def __init__(self, index: int, expected: tuple, actual):
        names = " or ".join(getattr(kind, "name", str(kind)) for kind in expected)
        actual_name = getattr(actual, "name", str(actual))
        super().__init__(f"Expected {names} at constant pool index {index}, got {actual_name}")
        self.index = index
        self.expected = expected
        self.actual = actual
