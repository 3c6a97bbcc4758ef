"""
Big-endian cursor over an in-memory byte buffer.
"""

import struct

from .errors import StreamError

_U1 = struct.Struct(">B")
_U2 = struct.Struct(">H")
_U4 = struct.Struct(">I")
_I4 = struct.Struct(">i")
_I8 = struct.Struct(">q")
_F4 = struct.Struct(">f")
_F8 = struct.Struct(">d")


class ByteReader:
    """Reads class file primitives from a byte buffer."""

    def __init__(self, data: bytes, pos: int = 0):
        self.data = data
        self.pos = pos

    def __len__(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def _require(self, size: int, what: str):
        if self.remaining < size:
            raise StreamError(
                f"Unexpected end of data reading {what} at offset {self.pos} "
                f"(need {size} bytes, {max(self.remaining, 0)} left)",
                offset=self.pos,
            )

    def _unpack(self, fmt: struct.Struct, what: str):
        self._require(fmt.size, what)
        val = fmt.unpack_from(self.data, self.pos)[0]
        self.pos += fmt.size
        return val

    def read_u1(self) -> int:
        return self._unpack(_U1, "u1")

    def read_u2(self) -> int:
        return self._unpack(_U2, "u2")

    def read_u4(self) -> int:
        return self._unpack(_U4, "u4")

    def read_i4(self) -> int:
        return self._unpack(_I4, "i4")

    def read_i8(self) -> int:
        return self._unpack(_I8, "i8")

    def read_f4(self) -> float:
        return self._unpack(_F4, "f4")

    def read_f8(self) -> float:
        return self._unpack(_F8, "f8")

    def read_bytes(self, length: int) -> bytes:
        self._require(length, f"{length} bytes")
        val = bytes(self.data[self.pos:self.pos + length])
        self.pos += length
        return val
