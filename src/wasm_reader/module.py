"""Module header parsing, section framing and section content dispatch."""

import logging
from pathlib import Path
from typing import Any, BinaryIO

from .errors import DecodeError, NotWasmError, UnexpectedEofError, UnknownVariantError
from .reader import BinaryReader, DecodeIterator, decode_name, decode_unsigned_leb128
from .sections import (
    CodeSection,
    CustomSection,
    DataSection,
    ElementSection,
    ExportSection,
    FunctionSection,
    GlobalSection,
    ImportSection,
    MemorySection,
    NameSection,
    StartSection,
    TableSection,
    TypeSection,
)
from .types import (
    NAME_SECTION,
    SECTION_NAMES,
    SECTION_CUSTOM,
    SECTION_TYPE,
    SECTION_IMPORT,
    SECTION_FUNCTION,
    SECTION_TABLE,
    SECTION_MEMORY,
    SECTION_GLOBAL,
    SECTION_EXPORT,
    SECTION_START,
    SECTION_ELEMENT,
    SECTION_CODE,
    SECTION_DATA,
)

logger = logging.getLogger(__name__)

# WASM magic number
WASM_MAGIC = b"\x00asm"

# Section id -> content class for sections with a leading entry count
COUNTED_SECTIONS = {
    SECTION_TYPE: TypeSection,
    SECTION_IMPORT: ImportSection,
    SECTION_FUNCTION: FunctionSection,
    SECTION_TABLE: TableSection,
    SECTION_MEMORY: MemorySection,
    SECTION_GLOBAL: GlobalSection,
    SECTION_EXPORT: ExportSection,
    SECTION_ELEMENT: ElementSection,
    SECTION_CODE: CodeSection,
    SECTION_DATA: DataSection,
}


class Section:
    """One top-level section of a module.

    ``name`` is only set for custom sections (id 0). ``payload`` is a view
    of the section bytes following the id, size and name.
    """

    def __init__(self, id: int, name: str | None, reader: BinaryReader) -> None:
        self.id = id
        self.name = name
        self.reader = reader

    @property
    def kind(self) -> str:
        return SECTION_NAMES[self.id]

    @property
    def payload(self) -> memoryview:
        return self.reader.view()

    def content(self):
        """Return the typed view matching this section's id.

        Raises:
            DecodeError: If the entry count (or start index) cannot be read
        """
        reader = self.reader.fork()

        if self.id == SECTION_START:
            return StartSection(decode_unsigned_leb128(reader))

        if self.id == SECTION_CUSTOM:
            if self.name != NAME_SECTION:
                logger.debug("Leaving custom section %r uninterpreted", self.name)
                return CustomSection(self.name, self.payload)
            count = decode_unsigned_leb128(reader)
            return NameSection(reader, count)

        count = decode_unsigned_leb128(reader)
        return COUNTED_SECTIONS[self.id](reader, count)

    def __repr__(self) -> str:
        if self.name is not None:
            return f"Section({self.kind} {self.name!r}, size={len(self.payload)})"
        return f"Section({self.kind}, size={len(self.payload)})"


class SectionIterator(DecodeIterator):
    """Frame the module payload into Sections, one per pull."""

    def _next_item(self) -> Section | None:
        if self.reader.eof():
            return None

        section_id = decode_unsigned_leb128(self.reader, 7)
        if section_id not in SECTION_NAMES:
            raise UnknownVariantError("section id", section_id)
        section_size = decode_unsigned_leb128(self.reader)

        name = None
        if section_id == SECTION_CUSTOM:
            # The declared size of a custom section includes its name
            name_start = self.reader.position
            name = decode_name(self.reader)
            consumed = self.reader.position - name_start
            if consumed > section_size:
                raise UnexpectedEofError(
                    f"Custom section name ({consumed} bytes) overruns "
                    f"declared section size {section_size}"
                )
            section_size -= consumed

        body = self.reader.sub_reader(section_size)
        logger.debug(
            "Section %s at offset %d, %d bytes",
            SECTION_NAMES[section_id],
            body.position,
            section_size,
        )
        return Section(section_id, name, body)


class Module:
    """A WebAssembly module: its version and the payload after the header.

    Args:
        data: The complete module bytes. Any object supporting the buffer
            protocol works; it is viewed, never copied, and must stay alive
            as long as anything decoded from it is in use.

    Raises:
        NotWasmError: If the magic number is missing or wrong
        UnexpectedEofError: If the version field is truncated
    """

    def __init__(self, data: Any) -> None:
        reader = BinaryReader(data)

        try:
            magic = reader.read_bytes(4)
        except DecodeError as e:
            raise NotWasmError("Input too short for WASM magic number") from e
        if magic != WASM_MAGIC:
            raise NotWasmError(
                f"Invalid WASM magic number: expected {WASM_MAGIC!r}, "
                f"got {bytes(magic)!r}"
            )

        version_bytes = reader.read_bytes(4)
        self.version = int.from_bytes(version_bytes, "little")
        logger.debug(
            "WASM module version %d, %d payload bytes",
            self.version,
            reader.remaining(),
        )

        self.reader = reader

    @property
    def payload(self) -> memoryview:
        return self.reader.view()

    def sections(self) -> SectionIterator:
        """Iterate the module's sections from the start of the payload."""
        return SectionIterator(self.reader.fork())

    def __repr__(self) -> str:
        return f"Module(version={self.version}, size={len(self.payload)})"


def read_module(source: bytes | BinaryIO | Path) -> Module:
    """Read a WebAssembly module.

    Args:
        source: WASM bytes (or any buffer), file-like object, or path to
            .wasm file

    Returns:
        Module view over the loaded bytes
    """
    if isinstance(source, (str, Path)):
        data = Path(source).read_bytes()
    elif hasattr(source, "read"):
        data = source.read()
    else:
        data = source
    return Module(data)
