"""WebAssembly type definitions and enumerations."""

from dataclasses import dataclass


# Value type constants
VALTYPE_I32 = "i32"
VALTYPE_I64 = "i64"
VALTYPE_F32 = "f32"
VALTYPE_F64 = "f64"

# Binary encoding of value types
VALTYPE_ENCODING = {
    0x7F: VALTYPE_I32,
    0x7E: VALTYPE_I64,
    0x7D: VALTYPE_F32,
    0x7C: VALTYPE_F64,
}

ValType = str  # One of the VALTYPE_* constants

# Table element types
ELEMTYPE_ANYFUNC = "anyfunc"

ELEMTYPE_ENCODING = {
    0x70: ELEMTYPE_ANYFUNC,
}

# Inline block signatures: a single result value type or nothing
BLOCKTYPE_EMPTY = "empty"

BLOCKTYPE_ENCODING = {
    0x40: BLOCKTYPE_EMPTY,
    **VALTYPE_ENCODING,
}

# Type section entry form
FUNC_TYPE_FORM = 0x60

# External kinds (imports and exports)
KIND_FUNC = "func"
KIND_TABLE = "table"
KIND_MEMORY = "memory"
KIND_GLOBAL = "global"

EXTERNAL_KIND_ENCODING = {
    0x00: KIND_FUNC,
    0x01: KIND_TABLE,
    0x02: KIND_MEMORY,
    0x03: KIND_GLOBAL,
}

# Section IDs
SECTION_CUSTOM = 0
SECTION_TYPE = 1
SECTION_IMPORT = 2
SECTION_FUNCTION = 3
SECTION_TABLE = 4
SECTION_MEMORY = 5
SECTION_GLOBAL = 6
SECTION_EXPORT = 7
SECTION_START = 8
SECTION_ELEMENT = 9
SECTION_CODE = 10
SECTION_DATA = 11

SECTION_NAMES = {
    SECTION_CUSTOM: "custom",
    SECTION_TYPE: "type",
    SECTION_IMPORT: "import",
    SECTION_FUNCTION: "function",
    SECTION_TABLE: "table",
    SECTION_MEMORY: "memory",
    SECTION_GLOBAL: "global",
    SECTION_EXPORT: "export",
    SECTION_START: "start",
    SECTION_ELEMENT: "element",
    SECTION_CODE: "code",
    SECTION_DATA: "data",
}

# Custom section carrying debug names
NAME_SECTION = "name"


@dataclass(frozen=True)
class ResizableLimits:
    """Memory or table limits."""

    initial: int
    maximum: int | None = None


@dataclass(frozen=True)
class TableType:
    """Table type with element type and limits."""

    element_type: str
    limits: ResizableLimits


@dataclass(frozen=True)
class MemoryType:
    """Memory type with limits."""

    limits: ResizableLimits


@dataclass(frozen=True)
class GlobalType:
    """Global type with value type and mutability."""

    valtype: ValType
    mutable: bool


@dataclass(frozen=True)
class ImportEntry:
    """An import entry."""

    module: str
    field: str
    kind: str  # One of KIND_* constants
    contents: int | TableType | MemoryType | GlobalType

    def __repr__(self) -> str:
        return f"{self.module}::{self.field} ({self.kind} {self.contents!r})"


@dataclass(frozen=True)
class ExportEntry:
    """An export entry."""

    field: str
    kind: str  # One of KIND_* constants
    index: int


@dataclass(frozen=True)
class SegmentIndex:
    """Table or memory index opening an element or data segment."""

    index: int


@dataclass(frozen=True)
class ElementFunction:
    """One function index listed by an element segment."""

    index: int


@dataclass(frozen=True)
class DataBlob:
    """Initial contents of a data segment (a view into the module buffer)."""

    data: memoryview

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"DataBlob({bytes(self.data)!r})"


@dataclass(frozen=True)
class Local:
    """A run of ``count`` locals of one value type in a function body."""

    count: int
    valtype: ValType


@dataclass(frozen=True)
class FunctionName:
    """Debug name of a function."""

    name: str


@dataclass(frozen=True)
class LocalName:
    """Debug name of a local, following its function's FunctionName."""

    name: str
