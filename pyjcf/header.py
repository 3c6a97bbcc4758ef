"""
Java-like rendering of a decoded class: declaration line, fields and
method headers, without method bodies.
"""

import io
import math
import struct
import sys
from decimal import Decimal
from typing import TextIO

from .attributes import ConstantValueAttribute
from .classreader import ClassFile
from .constants import (
    ConstantDouble,
    ConstantFloat,
    ConstantInteger,
    ConstantLong,
    ConstantString,
)
from .errors import DescriptorError

_IMPLICIT_SUPERCLASSES = ("java.lang.Object", "java.lang.Enum")

_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _java_name(name: str) -> str:
    return name.replace("/", ".").replace("$", ".")


def escape_java_string(value: str) -> str:
    """Render ``value`` as a Java string literal."""
    parts = ['"']
    for c in value:
        if c in _ESCAPES:
            parts.append(_ESCAPES[c])
        elif 0x20 <= ord(c) <= 0x7E:
            parts.append(c)
        else:
            parts.append(f"\\u{ord(c):04x}")
    parts.append('"')
    return "".join(parts)


def format_java_float(value: float, single: bool = False) -> str:
    """Format a float or double the way Java's toString does."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if single:
        # Shortest decimal that reads back as the same 32-bit float.
        for precision in range(1, 10):
            candidate = float(f"{value:.{precision}g}")
            if struct.unpack(">f", struct.pack(">f", candidate))[0] == value:
                value = candidate
                break
    text = repr(value)
    magnitude = abs(value)
    if magnitude == 0 or 1e-3 <= magnitude < 1e7:
        return text
    # Java switches to d.dddEn outside [10^-3, 10^7)
    sign, digits, exponent = Decimal(text).normalize().as_tuple()
    mantissa = str(digits[0]) + "." + ("".join(str(d) for d in digits[1:]) or "0")
    return f"{'-' if sign else ''}{mantissa}E{len(digits) - 1 + exponent}"


def _constant_initializer(class_file: ClassFile, attr: ConstantValueAttribute) -> str:
    const = attr.constant
    pool = class_file.constant_pool
    if isinstance(const, ConstantString):
        return " = " + escape_java_string(pool.utf8(const.string_index))
    elif isinstance(const, (ConstantInteger, ConstantLong)):
        return f" = {const.value}"
    elif isinstance(const, ConstantFloat):
        return f" = {format_java_float(const.value, single=True)}f"
    elif isinstance(const, ConstantDouble):
        return f" = {format_java_float(const.value)}"
    return ""


def _write_fields(class_file: ClassFile, out: TextIO):
    fields = class_file.fields
    out.write("    // fields\n")
    for i, fld in enumerate(fields):
        out.write("    ")

        # enum constants are listed by name only
        if fld.is_enum:
            out.write(fld.name)
            if i + 1 < len(fields) and fields[i + 1].is_enum:
                out.write(",")
            out.write("\n")
            continue

        if fld.is_public:
            out.write("public ")
        if fld.is_protected:
            out.write("protected ")
        if fld.is_private:
            out.write("private ")
        if fld.is_static:
            out.write("static ")
        if fld.is_final:
            out.write("final ")
        if fld.is_transient:
            out.write("transient ")
        if fld.is_volatile:
            out.write("volatile ")

        field_type = fld.generic_type
        if field_type is None:
            raise DescriptorError(f"Field {fld.name} has malformed descriptor '{fld.descriptor}'")
        out.write(_java_name(field_type) + " ")
        out.write(fld.name)

        if fld.is_static and fld.is_final:
            attr = fld.find_attribute(ConstantValueAttribute)
            if attr is not None:
                out.write(_constant_initializer(class_file, attr))

        out.write(";")
        if fld.is_synthetic:
            out.write(" // This synthetic field is auto-generated by compiler.")
        out.write("\n")


def _write_methods(class_file: ClassFile, this_class_name: str, out: TextIO):
    out.write("    // methods\n")
    for method in class_file.methods:
        out.write("    ")

        if method.is_public:
            out.write("public ")
        if method.is_protected:
            out.write("protected ")
        if method.is_private:
            out.write("private ")
        if method.is_abstract:
            out.write("abstract ")
        if method.is_static:
            out.write("static ")
        if method.is_final:
            out.write("final ")
        if method.is_synchronized:
            out.write("synchronized ")
        if method.is_native:
            out.write("native ")
        if method.is_strict:
            out.write("strictfp ")

        if method.is_constructor or method.is_static_initializer:
            out.write(this_class_name)
        else:
            out.write(_java_name(method.return_type) + " ")
            out.write(method.name)

        out.write("(" + _java_name(method.parameters) + ")")
        out.write(";")

        if method.is_bridge:
            out.write(" // This bridge method is auto-generated by compiler.")
        if method.is_synthetic:
            out.write(" // This synthetic method is auto-generated by compiler.")
        if method.is_static_initializer:
            out.write(" // This static method is used by JVM to initialize static fields in this class.")
        out.write("\n")


def write_class_header(class_file: ClassFile, out: TextIO):
    """Write the header of ``class_file`` to ``out``."""
    if not class_file.valid:
        raise ValueError("Cannot render the header of an invalid class file")

    if class_file.is_synthetic:
        out.write("// This class is auto-generated by compiler.\n")

    out.write("public " if class_file.is_public else "private ")
    if class_file.is_final:
        out.write("final ")
    if class_file.is_abstract and not class_file.is_interface:
        out.write("abstract ")

    if class_file.is_annotation:
        out.write("@interface ")
    elif class_file.is_interface:
        out.write("interface ")
    elif class_file.is_enum:
        out.write("enum ")
    elif class_file.is_module:
        out.write("module ")
    else:
        out.write("class ")

    this_class_name = class_file.name.replace("/", ".")
    out.write(this_class_name)

    super_name = class_file.super_name
    if super_name is not None:
        super_name = _java_name(super_name)
        if super_name not in _IMPLICIT_SUPERCLASSES:
            out.write(" extends " + super_name)

    interface_names = [_java_name(name) for name in class_file.interface_names]
    if interface_names:
        keyword = " extends " if class_file.is_interface else " implements "
        out.write(keyword + ", ".join(interface_names))

    out.write(" {\n")

    if class_file.fields:
        _write_fields(class_file, out)
    if class_file.fields and class_file.methods:
        out.write("    \n")
    if class_file.methods:
        _write_methods(class_file, this_class_name, out)

    out.write("}")


def class_header(class_file: ClassFile) -> str:
    """Return the header of ``class_file`` as a string."""
    out = io.StringIO()
    write_class_header(class_file, out)
    return out.getvalue()


def print_class_header(class_file: ClassFile):
    write_class_header(class_file, sys.stdout)
    sys.stdout.write("\n")
