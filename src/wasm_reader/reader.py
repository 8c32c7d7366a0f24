"""Bounded binary reader, LEB128 codec and shared field decoders."""

from typing import Any

from .errors import (
    DecodeError,
    InvalidUtf8Error,
    MalformedVarintError,
    UnexpectedEofError,
    UnknownVariantError,
)
from .types import VALTYPE_ENCODING, ResizableLimits


class BinaryReader:
    """A bounded cursor over a byte buffer.

    The reader never copies the buffer: ``read_bytes`` and ``sub_reader``
    hand out views of the same memory. Reads are confined to
    ``[position, end)`` even when ``data`` extends further.
    """

    def __init__(self, data: Any, position: int = 0, end: int | None = None) -> None:
        self.data = memoryview(data).cast("B")
        if end is None:
            end = len(self.data)
        if not 0 <= position <= end <= len(self.data):
            raise ValueError(f"Invalid reader bounds {position}..{end}")
        self.position = position
        self.end = end

    def read_byte(self) -> int:
        """Read a single byte."""
        if self.position >= self.end:
            raise UnexpectedEofError(
                f"Unexpected end of data at position {self.position}"
            )
        byte = self.data[self.position]
        self.position += 1
        return byte

    def read_bytes(self, n: int) -> memoryview:
        """Read n bytes, returned as a view into the underlying buffer."""
        if n > self.end - self.position:
            raise UnexpectedEofError(
                f"Unexpected end of data: wanted {n} bytes at position "
                f"{self.position}, {self.remaining()} available"
            )
        result = self.data[self.position : self.position + n]
        self.position += n
        return result

    def sub_reader(self, n: int) -> "BinaryReader":
        """Split off a reader over the next n bytes and skip past them."""
        if n > self.end - self.position:
            raise UnexpectedEofError(
                f"Declared length {n} at position {self.position} exceeds "
                f"the {self.remaining()} bytes available"
            )
        start = self.position
        self.position += n
        return BinaryReader(self.data, start, start + n)

    def fork(self) -> "BinaryReader":
        """Return an independent reader at the same position and bound."""
        return BinaryReader(self.data, self.position, self.end)

    def seek(self, position: int) -> None:
        """Resume from a position reached by a forked reader."""
        if not 0 <= position <= self.end:
            raise ValueError(f"Position {position} outside reader bound {self.end}")
        self.position = position

    def eof(self) -> bool:
        """Check if at end of data."""
        return self.position >= self.end

    def remaining(self) -> int:
        """Return number of remaining bytes."""
        return self.end - self.position

    def view(self) -> memoryview:
        """Return the unread bytes without consuming them."""
        return self.data[self.position : self.end]


def decode_unsigned_leb128(reader: BinaryReader, max_bits: int = 32) -> int:
    """Decode an unsigned LEB128 integer of at most ``max_bits`` bits."""
    result = 0
    shift = 0
    for _ in range((max_bits + 6) // 7):
        byte = reader.read_byte()
        result |= (byte & 0x7F) << shift
        shift += 7
        if (byte & 0x80) == 0:
            if result >> max_bits:
                raise MalformedVarintError(
                    f"LEB128 integer does not fit in {max_bits} bits"
                )
            return result
    raise MalformedVarintError("LEB128 integer too long")


def decode_signed_leb128(reader: BinaryReader, max_bits: int = 32) -> int:
    """Decode a signed LEB128 integer of at most ``max_bits`` bits."""
    result = 0
    shift = 0
    for _ in range((max_bits + 6) // 7):
        byte = reader.read_byte()
        result |= (byte & 0x7F) << shift
        shift += 7
        if (byte & 0x80) == 0:
            # Sign extend if the sign bit (bit 6 of the last byte) is set
            if byte & 0x40:
                result -= 1 << shift
            limit = 1 << (max_bits - 1)
            if not -limit <= result < limit:
                raise MalformedVarintError(
                    f"LEB128 integer does not fit in {max_bits} bits"
                )
            return result
    raise MalformedVarintError("LEB128 integer too long")


def decode_name(reader: BinaryReader) -> str:
    """Decode a UTF-8 name (length-prefixed byte vector)."""
    length = decode_unsigned_leb128(reader)
    data = reader.read_bytes(length)
    try:
        return str(data, "utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error(f"Invalid UTF-8 in name: {e}") from e


def decode_enum(reader: BinaryReader, encoding: dict[int, str], domain: str) -> str:
    """Decode a one-byte discriminant through an encoding table."""
    byte = reader.read_byte()
    if byte not in encoding:
        raise UnknownVariantError(domain, byte)
    return encoding[byte]


def decode_valtype(reader: BinaryReader) -> str:
    """Decode a value type."""
    return decode_enum(reader, VALTYPE_ENCODING, "value type")


def decode_limits(reader: BinaryReader) -> ResizableLimits:
    """Decode limits (initial, optional maximum)."""
    flags = decode_unsigned_leb128(reader)
    initial = decode_unsigned_leb128(reader)
    maximum = None
    if flags & 0x01:
        maximum = decode_unsigned_leb128(reader)
    return ResizableLimits(initial=initial, maximum=maximum)


class DecodeIterator:
    """Base class for the lazy, fail-once sequences produced by the reader.

    Subclasses implement ``_next_item``, returning ``None`` once the
    sequence is complete. The first ``DecodeError`` is raised to the caller
    and leaves the iterator exhausted; it never resumes from a cursor that
    may be corrupt.
    """

    def __init__(self, reader: BinaryReader) -> None:
        self.reader = reader
        self.finished = False

    def __iter__(self) -> "DecodeIterator":
        return self

    def __next__(self):
        if self.finished:
            raise StopIteration
        try:
            item = self._next_item()
        except DecodeError:
            self.finished = True
            raise
        if item is None:
            self.finished = True
            raise StopIteration
        return item

    @property
    def position(self) -> int:
        """Offset of the next unread byte in the module buffer."""
        return self.reader.position

    def _next_item(self):
        raise NotImplementedError
