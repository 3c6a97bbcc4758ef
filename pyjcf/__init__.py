"""pyjcf - A reader for compiled Java class files."""

from .classreader import ClassFile, ClassReader, read_class_file
from .classpath import ClassPath
from .constants import ConstantPool
from .descriptors import parse_method_descriptor, type_from_descriptor, types_from_descriptor
from .errors import ClassFileError, FormatError, StreamError
from .mutf8 import decode_modified_utf8
from .signature import compound_type_from_signature

__version__ = "0.1.0"
__all__ = [
    "ClassFile",
    "ClassReader",
    "ClassPath",
    "ConstantPool",
    "read_class_file",
    "types_from_descriptor",
    "type_from_descriptor",
    "parse_method_descriptor",
    "compound_type_from_signature",
    "decode_modified_utf8",
    "ClassFileError",
    "FormatError",
    "StreamError",
]
