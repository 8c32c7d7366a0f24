"""Pure Python WebAssembly module reader.

Decodes the WebAssembly binary format into lazy, typed views over the
original byte buffer.
"""

from .module import Module, Section, SectionIterator, read_module
from .reader import BinaryReader, decode_unsigned_leb128, decode_signed_leb128
from .errors import (
    WasmError,
    DecodeError,
    NotWasmError,
    UnexpectedEofError,
    MalformedVarintError,
    UnknownVariantError,
    InvalidUtf8Error,
)
from .instructions import Instruction, MemoryImmediate, BrTable, OpIterator
from .sections import (
    TypeSection,
    ImportSection,
    FunctionSection,
    TableSection,
    MemorySection,
    GlobalSection,
    ExportSection,
    StartSection,
    ElementSection,
    CodeSection,
    DataSection,
    NameSection,
    CustomSection,
    FunctionType,
    FunctionBody,
)
from .types import (
    ResizableLimits,
    TableType,
    MemoryType,
    GlobalType,
    ImportEntry,
    ExportEntry,
    SegmentIndex,
    ElementFunction,
    DataBlob,
    Local,
    FunctionName,
    LocalName,
)

__version__ = "0.1.0"

__all__ = [
    # Main API
    "read_module",
    "Module",
    "Section",
    "SectionIterator",
    # Decoder internals (for testing)
    "BinaryReader",
    "decode_unsigned_leb128",
    "decode_signed_leb128",
    "OpIterator",
    # Section contents
    "TypeSection",
    "ImportSection",
    "FunctionSection",
    "TableSection",
    "MemorySection",
    "GlobalSection",
    "ExportSection",
    "StartSection",
    "ElementSection",
    "CodeSection",
    "DataSection",
    "NameSection",
    "CustomSection",
    # Entries
    "FunctionType",
    "FunctionBody",
    "ResizableLimits",
    "TableType",
    "MemoryType",
    "GlobalType",
    "ImportEntry",
    "ExportEntry",
    "SegmentIndex",
    "ElementFunction",
    "DataBlob",
    "Local",
    "FunctionName",
    "LocalName",
    "Instruction",
    "MemoryImmediate",
    "BrTable",
    # Errors
    "WasmError",
    "DecodeError",
    "NotWasmError",
    "UnexpectedEofError",
    "MalformedVarintError",
    "UnknownVariantError",
    "InvalidUtf8Error",
]
