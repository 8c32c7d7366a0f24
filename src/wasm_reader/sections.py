"""Typed views over the contents of each section kind.

Every counted section keeps a reader positioned just past its entry count.
``entries()`` returns a fresh iterator each time it is called; iterators
decode one entry per pull and stop once the declared count is used up,
whatever bytes remain in the section.

Global, element and data sections interleave entries with the instructions
of their initializer or offset expressions. Those expressions are decoded by
an ``OpIterator`` over a forked reader, and the section iterator resumes
from the position the ``OpIterator`` stopped at.
"""

from dataclasses import dataclass

from .errors import UnknownVariantError
from .instructions import Instruction, OpIterator
from .reader import (
    BinaryReader,
    DecodeIterator,
    decode_enum,
    decode_limits,
    decode_name,
    decode_unsigned_leb128,
    decode_valtype,
)
from .types import (
    ELEMTYPE_ENCODING,
    EXTERNAL_KIND_ENCODING,
    FUNC_TYPE_FORM,
    KIND_FUNC,
    KIND_GLOBAL,
    KIND_MEMORY,
    KIND_TABLE,
    DataBlob,
    ElementFunction,
    ExportEntry,
    FunctionName,
    GlobalType,
    ImportEntry,
    Local,
    LocalName,
    MemoryType,
    SegmentIndex,
    TableType,
    ValType,
)


class EntryIterator(DecodeIterator):
    """Count-bounded iterator decoding one entry per pull."""

    def __init__(self, reader: BinaryReader, count: int) -> None:
        super().__init__(reader)
        self.count = count

    def _next_item(self):
        if self.count == 0:
            return None
        self.count -= 1
        return self.decode_entry()

    def decode_entry(self):
        raise NotImplementedError


class CountedSection:
    """A section whose body is an entry count followed by the entries."""

    iterator_class: type[DecodeIterator] = EntryIterator

    def __init__(self, reader: BinaryReader, count: int) -> None:
        self.reader = reader
        self.count = count

    @property
    def payload(self) -> memoryview:
        """Section bytes following the entry count."""
        return self.reader.view()

    def entries(self) -> DecodeIterator:
        return self.iterator_class(self.reader.fork(), self.count)

    def __iter__(self) -> DecodeIterator:
        return self.entries()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(count={self.count})"


# Type section


class FunctionType:
    """A function signature.

    Parameter types stay encoded in the module buffer until ``params()`` is
    iterated, which yields exactly ``param_count`` value types.
    """

    def __init__(
        self, param_count: int, params_raw: memoryview, return_type: ValType | None
    ) -> None:
        self.param_count = param_count
        self.params_raw = params_raw
        self.return_type = return_type

    def params(self) -> "ParamsIterator":
        return ParamsIterator(BinaryReader(self.params_raw), self.param_count)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FunctionType):
            return NotImplemented
        return (
            self.param_count == other.param_count
            and self.params_raw == other.params_raw
            and self.return_type == other.return_type
        )

    def __repr__(self) -> str:
        params = ", ".join(self.params())
        return f"({params}) -> ({self.return_type or ''})"


class ParamsIterator(EntryIterator):
    def decode_entry(self) -> ValType:
        return decode_valtype(self.reader)


class TypeEntryIterator(EntryIterator):
    def decode_entry(self) -> FunctionType:
        form = self.reader.read_byte()
        if form != FUNC_TYPE_FORM:
            raise UnknownVariantError("type entry form", form)

        # Value types are single bytes, so the parameters can be sliced out
        param_count = decode_unsigned_leb128(self.reader)
        params_raw = self.reader.read_bytes(param_count)

        return_count = decode_unsigned_leb128(self.reader)
        if return_count == 0:
            return_type = None
        elif return_count == 1:
            return_type = decode_valtype(self.reader)
        else:
            raise UnknownVariantError("return count", return_count)

        return FunctionType(param_count, params_raw, return_type)


class TypeSection(CountedSection):
    iterator_class = TypeEntryIterator


# Import section


class ImportEntryIterator(EntryIterator):
    def decode_entry(self) -> ImportEntry:
        module = decode_name(self.reader)
        field = decode_name(self.reader)
        kind = decode_enum(self.reader, EXTERNAL_KIND_ENCODING, "external kind")

        if kind == KIND_FUNC:
            contents = decode_unsigned_leb128(self.reader)
        elif kind == KIND_TABLE:
            contents = decode_table_type(self.reader)
        elif kind == KIND_MEMORY:
            contents = MemoryType(decode_limits(self.reader))
        else:
            contents = decode_global_type(self.reader)

        return ImportEntry(module, field, kind, contents)


class ImportSection(CountedSection):
    iterator_class = ImportEntryIterator


def decode_table_type(reader: BinaryReader) -> TableType:
    element_type = decode_enum(reader, ELEMTYPE_ENCODING, "element type")
    limits = decode_limits(reader)
    return TableType(element_type, limits)


def decode_global_type(reader: BinaryReader) -> GlobalType:
    valtype = decode_valtype(reader)
    mutable = decode_unsigned_leb128(reader) != 0
    return GlobalType(valtype, mutable)


# Function section


class FunctionEntryIterator(EntryIterator):
    """Type indices of the functions defined by the module."""

    def decode_entry(self) -> int:
        return decode_unsigned_leb128(self.reader)


class FunctionSection(CountedSection):
    iterator_class = FunctionEntryIterator


# Table and memory sections


class TableEntryIterator(EntryIterator):
    def decode_entry(self) -> TableType:
        return decode_table_type(self.reader)


class TableSection(CountedSection):
    iterator_class = TableEntryIterator


class MemoryEntryIterator(EntryIterator):
    def decode_entry(self) -> MemoryType:
        return MemoryType(decode_limits(self.reader))


class MemorySection(CountedSection):
    iterator_class = MemoryEntryIterator


# Global section


class GlobalEntryIterator(EntryIterator):
    """Yields each GlobalType followed by its initializer instructions."""

    def __init__(self, reader: BinaryReader, count: int) -> None:
        super().__init__(reader, count)
        self.ops: OpIterator | None = None

    def _next_item(self) -> GlobalType | Instruction | None:
        if self.ops is not None:
            instr = next(self.ops, None)
            if instr is not None:
                return instr
            self.reader.seek(self.ops.position)
            self.ops = None
        return super()._next_item()

    def decode_entry(self) -> GlobalType:
        entry = decode_global_type(self.reader)
        self.ops = OpIterator(self.reader.fork())
        return entry


class GlobalSection(CountedSection):
    iterator_class = GlobalEntryIterator


# Export section


class ExportEntryIterator(EntryIterator):
    def decode_entry(self) -> ExportEntry:
        field = decode_name(self.reader)
        kind = decode_enum(self.reader, EXTERNAL_KIND_ENCODING, "external kind")
        index = decode_unsigned_leb128(self.reader)
        return ExportEntry(field, kind, index)


class ExportSection(CountedSection):
    iterator_class = ExportEntryIterator


# Start section


@dataclass(frozen=True)
class StartSection:
    """Index of the function run when the module is instantiated."""

    function_index: int


# Element section


class ElementEntryIterator(EntryIterator):
    """Yields, per segment: SegmentIndex, offset instructions, then one
    ElementFunction per function index."""

    def __init__(self, reader: BinaryReader, count: int) -> None:
        super().__init__(reader, count)
        self.ops: OpIterator | None = None
        self.elems = 0

    def _next_item(self) -> SegmentIndex | Instruction | ElementFunction | None:
        if self.ops is not None:
            instr = next(self.ops, None)
            if instr is not None:
                return instr
            self.reader.seek(self.ops.position)
            self.ops = None
            self.elems = decode_unsigned_leb128(self.reader)
        if self.elems > 0:
            self.elems -= 1
            return ElementFunction(decode_unsigned_leb128(self.reader))
        return super()._next_item()

    def decode_entry(self) -> SegmentIndex:
        index = decode_unsigned_leb128(self.reader)
        self.ops = OpIterator(self.reader.fork())
        return SegmentIndex(index)


class ElementSection(CountedSection):
    iterator_class = ElementEntryIterator


# Code section


class FunctionBody:
    """A function body: local declarations followed by its instructions."""

    def __init__(self, reader: BinaryReader) -> None:
        self.reader = reader

    @property
    def size(self) -> int:
        return self.reader.remaining()

    @property
    def payload(self) -> memoryview:
        return self.reader.view()

    def contents(self) -> "FunctionIterator":
        """Iterate Local declarations, then Instructions."""
        return FunctionIterator(self.reader.fork())

    def locals(self):
        for part in self.contents():
            if not isinstance(part, Local):
                break
            yield part

    def instructions(self):
        for part in self.contents():
            if isinstance(part, Instruction):
                yield part

    def __repr__(self) -> str:
        return f"FunctionBody(size={self.size})"


class FunctionIterator(DecodeIterator):
    def __init__(self, reader: BinaryReader) -> None:
        super().__init__(reader)
        self.local_count: int | None = None
        self.ops: OpIterator | None = None

    def _next_item(self) -> Local | Instruction | None:
        if self.ops is None:
            if self.local_count is None:
                self.local_count = decode_unsigned_leb128(self.reader)
            if self.local_count > 0:
                self.local_count -= 1
                count = decode_unsigned_leb128(self.reader)
                valtype = decode_valtype(self.reader)
                return Local(count, valtype)
            self.ops = OpIterator(self.reader)
        return next(self.ops, None)


class CodeIterator(EntryIterator):
    def decode_entry(self) -> FunctionBody:
        body_size = decode_unsigned_leb128(self.reader)
        return FunctionBody(self.reader.sub_reader(body_size))


class CodeSection(CountedSection):
    iterator_class = CodeIterator


# Data section


class DataEntryIterator(EntryIterator):
    """Yields, per segment: SegmentIndex, offset instructions, then a
    DataBlob with the segment's bytes."""

    def __init__(self, reader: BinaryReader, count: int) -> None:
        super().__init__(reader, count)
        self.ops: OpIterator | None = None

    def _next_item(self) -> SegmentIndex | Instruction | DataBlob | None:
        if self.ops is not None:
            instr = next(self.ops, None)
            if instr is not None:
                return instr
            self.reader.seek(self.ops.position)
            self.ops = None
            size = decode_unsigned_leb128(self.reader)
            return DataBlob(self.reader.read_bytes(size))
        return super()._next_item()

    def decode_entry(self) -> SegmentIndex:
        index = decode_unsigned_leb128(self.reader)
        self.ops = OpIterator(self.reader.fork())
        return SegmentIndex(index)


class DataSection(CountedSection):
    iterator_class = DataEntryIterator


# Debug names (custom section "name")


class NameEntryIterator(EntryIterator):
    """Yields each FunctionName followed by the LocalNames of that function."""

    def __init__(self, reader: BinaryReader, count: int) -> None:
        super().__init__(reader, count)
        self.local_count = 0

    def _next_item(self) -> FunctionName | LocalName | None:
        if self.local_count > 0:
            self.local_count -= 1
            return LocalName(decode_name(self.reader))
        return super()._next_item()

    def decode_entry(self) -> FunctionName:
        name = decode_name(self.reader)
        self.local_count = decode_unsigned_leb128(self.reader)
        return FunctionName(name)


class NameSection(CountedSection):
    iterator_class = NameEntryIterator


@dataclass(frozen=True)
class CustomSection:
    """A custom section this reader does not interpret."""

    name: str
    payload: memoryview

    def __repr__(self) -> str:
        return f"CustomSection(name={self.name!r}, size={len(self.payload)})"
