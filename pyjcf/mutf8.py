"""
Decoder for the modified UTF-8 encoding used by CONSTANT_Utf8 entries.

Every encoded character becomes exactly one UTF-16 code unit. Characters
outside the Basic Multilingual Plane are stored by compilers as two
three-byte surrogate sequences; they are decoded as two lone surrogates and
never joined into one code point.
"""

from .errors import StringDecodeError


def decode_modified_utf8(data: bytes) -> str:
    """Decode a modified UTF-8 byte string."""
    chars = []
    i = 0
    length = len(data)
    while i < length:
        x = data[i]
        if (x & 0xF0) == 0xE0:
            if i + 2 >= length:
                raise StringDecodeError(
                    f"Truncated 3-byte sequence at offset {i} of {length}")
            y = data[i + 1]
            z = data[i + 2]
            chars.append(chr(((x & 0x0F) << 12) | ((y & 0x3F) << 6) | (z & 0x3F)))
            i += 3
        elif (x & 0xE0) == 0xC0:
            if i + 1 >= length:
                raise StringDecodeError(
                    f"Truncated 2-byte sequence at offset {i} of {length}")
            y = data[i + 1]
            chars.append(chr(((x & 0x1F) << 6) | (y & 0x3F)))
            i += 2
        else:
            chars.append(chr(x))
            i += 1
    return "".join(chars)


def read_modified_utf8(reader) -> str:
    """Read a u2 length followed by that many modified UTF-8 bytes."""
    length = reader.read_u2()
    return decode_modified_utf8(reader.read_bytes(length))
