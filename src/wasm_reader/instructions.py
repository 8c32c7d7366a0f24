"""Instruction stream decoder."""

import struct
from dataclasses import dataclass
from typing import Any, Callable

from .errors import UnknownVariantError
from .reader import (
    BinaryReader,
    DecodeIterator,
    decode_enum,
    decode_signed_leb128,
    decode_unsigned_leb128,
)
from .types import BLOCKTYPE_ENCODING
from . import opcodes


@dataclass(frozen=True)
class Instruction:
    """A WebAssembly instruction."""

    opcode: str
    operand: Any = None  # Immediate value(s) if any

    def __repr__(self) -> str:
        if self.operand is not None:
            return f"{self.opcode} {self.operand}"
        return self.opcode


@dataclass(frozen=True)
class MemoryImmediate:
    """Alignment flags and byte offset of a load or store."""

    flags: int
    offset: int

    def __repr__(self) -> str:
        return f"flags={self.flags} offset={self.offset}"


@dataclass(frozen=True, eq=False)
class BrTable:
    """Operand of ``br_table``.

    The arm targets stay encoded in the module buffer; ``arms()`` decodes
    exactly ``count`` of them. ``default`` is the fallback target.
    """

    count: int
    raw: memoryview
    default: int

    def arms(self) -> "BrTableArmIterator":
        return BrTableArmIterator(BinaryReader(self.raw), self.count)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BrTable):
            return NotImplemented
        return (
            self.count == other.count
            and self.default == other.default
            and self.raw == other.raw
        )

    def __hash__(self) -> int:
        return hash((self.count, bytes(self.raw), self.default))

    def __repr__(self) -> str:
        return f"{list(self.arms())} default={self.default}"


class BrTableArmIterator(DecodeIterator):
    """Branch targets of a ``br_table``, each readable once."""

    def __init__(self, reader: BinaryReader, count: int) -> None:
        super().__init__(reader)
        self.count = count

    def _next_item(self) -> int | None:
        if self.count == 0:
            return None
        self.count -= 1
        return decode_unsigned_leb128(self.reader)


def decode_blocktype(reader: BinaryReader) -> str:
    """Decode an inline block signature."""
    return decode_enum(reader, BLOCKTYPE_ENCODING, "inline signature type")


def decode_memory_immediate(reader: BinaryReader) -> MemoryImmediate:
    flags = decode_unsigned_leb128(reader)
    offset = decode_unsigned_leb128(reader)
    return MemoryImmediate(flags, offset)


def decode_br_table(reader: BinaryReader) -> BrTable:
    count = decode_unsigned_leb128(reader)
    start = reader.position
    for _ in range(count):
        decode_unsigned_leb128(reader)
    raw = reader.data[start : reader.position]
    default = decode_unsigned_leb128(reader)
    return BrTable(count, raw, default)


def decode_call_indirect(reader: BinaryReader) -> tuple[int, bool]:
    type_idx = decode_unsigned_leb128(reader)
    reserved = decode_unsigned_leb128(reader) != 0
    return (type_idx, reserved)


def decode_reserved(reader: BinaryReader) -> bool:
    # Memory index placeholder, always 0 in the MVP
    return decode_unsigned_leb128(reader) != 0


IMMEDIATE_DECODERS: dict[str, Callable[[BinaryReader], Any]] = {
    opcodes.IMM_NONE: lambda reader: None,
    opcodes.IMM_INDEX: decode_unsigned_leb128,
    opcodes.IMM_I32: lambda reader: decode_signed_leb128(reader, 32),
    opcodes.IMM_I64: lambda reader: decode_signed_leb128(reader, 64),
    opcodes.IMM_F32: lambda reader: struct.unpack("<f", reader.read_bytes(4))[0],
    opcodes.IMM_F64: lambda reader: struct.unpack("<d", reader.read_bytes(8))[0],
    opcodes.IMM_BLOCK: decode_blocktype,
    opcodes.IMM_MEMORY: decode_memory_immediate,
    opcodes.IMM_BR_TABLE: decode_br_table,
    opcodes.IMM_CALL_INDIRECT: decode_call_indirect,
    opcodes.IMM_RESERVED: decode_reserved,
}


def decode_instruction(reader: BinaryReader) -> tuple[int, Instruction]:
    """Decode a single instruction, returning its opcode byte as well."""
    opcode = reader.read_byte()
    if opcode not in opcodes.OPCODES:
        raise UnknownVariantError("opcode", opcode)
    name, shape = opcodes.OPCODES[opcode]
    operand = IMMEDIATE_DECODERS[shape](reader)
    return opcode, Instruction(name, operand)


class OpIterator(DecodeIterator):
    """Decode an instruction stream up to the ``end`` closing its outer scope.

    ``nesting`` starts at 1 for the implicit scope of the function body or
    initializer expression. Once it drops to 0 the iterator is done and
    ``position`` is the offset just past that final ``end``.
    """

    def __init__(self, reader: BinaryReader) -> None:
        super().__init__(reader)
        self.nesting = 1

    def _next_item(self) -> Instruction | None:
        if self.nesting == 0:
            return None
        opcode, instr = decode_instruction(self.reader)
        if opcode in opcodes.BLOCK_OPENERS:
            self.nesting += 1
        elif opcode == opcodes.END:
            self.nesting -= 1
        return instr
