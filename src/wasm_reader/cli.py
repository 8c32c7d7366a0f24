"""wasm-print: dump the decoded contents of a WebAssembly module.

Usage:
    wasm-print module.wasm
    wasm-print -v module.wasm     # also log decoder debug output
"""

import argparse
import logging
import sys
from pathlib import Path

from .errors import DecodeError
from .instructions import Instruction
from .module import read_module
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
    KIND_FUNC,
    KIND_MEMORY,
    KIND_TABLE,
    DataBlob,
    ElementFunction,
    FunctionName,
    GlobalType,
    Local,
    SegmentIndex,
)

logger = logging.getLogger(__name__)


def format_limits(limits) -> str:
    return f"initial={limits.initial}, max={limits.maximum}"


def print_types(types: TypeSection) -> None:
    for func in types.entries():
        params = "".join(f" {param}" for param in func.params())
        print(f"Function returning {func.return_type}, accepting:{params}")


def print_imports(imports: ImportSection) -> None:
    for entry in imports.entries():
        prefix = f"{entry.module}::{entry.field}: "
        if entry.kind == KIND_FUNC:
            print(f"{prefix}function type={entry.contents}")
        elif entry.kind == KIND_TABLE:
            table = entry.contents
            print(
                f"{prefix}table type={table.element_type}, "
                f"{format_limits(table.limits)}"
            )
        elif entry.kind == KIND_MEMORY:
            print(f"{prefix}memory {format_limits(entry.contents.limits)}")
        else:
            glob = entry.contents
            print(f"{prefix}global ty={glob.valtype}, mutable={glob.mutable}")


def print_functions(functions: FunctionSection) -> None:
    for i, type_idx in enumerate(functions.entries()):
        print(f"function {i}: type={type_idx}")


def print_tables(tables: TableSection) -> None:
    for i, table in enumerate(tables.entries()):
        limits = format_limits(table.limits)
        print(f"table {i}: type={table.element_type}, {limits}")


def print_memories(memories: MemorySection) -> None:
    for i, memory in enumerate(memories.entries()):
        print(f"memory {i}: {format_limits(memory.limits)}")


def print_globals(globals_: GlobalSection) -> None:
    i = 0
    for entry in globals_.entries():
        if isinstance(entry, GlobalType):
            print(f"global {i}: ty={entry.valtype}, mutable={entry.mutable}")
            i += 1
        else:
            print(f"  {entry!r}")


def print_exports(exports: ExportSection) -> None:
    for entry in exports.entries():
        print(f"{entry.field}: kind={entry.kind}, index={entry.index}")


def print_start(start: StartSection) -> None:
    print(f"start function={start.function_index}")


def print_elements(elements: ElementSection) -> None:
    functions: list[str] = []
    try:
        for entry in elements.entries():
            if isinstance(entry, SegmentIndex):
                if functions:
                    print("  functions: " + " ".join(functions))
                    functions = []
                print(f"element index={entry.index}")
            elif isinstance(entry, ElementFunction):
                functions.append(str(entry.index))
            else:
                print(f"  {entry!r}")
    finally:
        if functions:
            print("  functions: " + " ".join(functions))


def print_code(code: CodeSection) -> None:
    for i, body in enumerate(code.entries()):
        print(f"function {i}")
        for part in body.contents():
            if isinstance(part, Local):
                print(f"  local {part.valtype} x {part.count}")
            else:
                print(f"  {part!r}")


def print_data(data: DataSection) -> None:
    for entry in data.entries():
        if isinstance(entry, SegmentIndex):
            print(f"data for heap {entry.index}")
            print("  offset:")
        elif isinstance(entry, Instruction):
            print(f"    {entry!r}")
        elif isinstance(entry, DataBlob):
            print("  value:")
            for start in range(0, len(entry.data), 16):
                chunk = entry.data[start : start + 16]
                print("    " + " ".join(f"{b:02x}" for b in chunk))


def print_names(names: NameSection) -> None:
    for entry in names.entries():
        if isinstance(entry, FunctionName):
            print(entry.name)
        else:
            print(f"  {entry.name}")


def print_custom(custom: CustomSection) -> None:
    print(f"{len(custom.payload)} bytes")


PRINTERS = {
    TypeSection: print_types,
    ImportSection: print_imports,
    FunctionSection: print_functions,
    TableSection: print_tables,
    MemorySection: print_memories,
    GlobalSection: print_globals,
    ExportSection: print_exports,
    StartSection: print_start,
    ElementSection: print_elements,
    CodeSection: print_code,
    DataSection: print_data,
    NameSection: print_names,
    CustomSection: print_custom,
}


def print_module(path: Path) -> int:
    """Print every section of the module at ``path``; return an exit status."""
    try:
        module = read_module(path)
    except OSError as e:
        print(f"Failed to read {path}: {e}", file=sys.stderr)
        return 1
    except DecodeError as e:
        print(e)
        return 1

    try:
        for section in module.sections():
            title = section.kind
            if section.name is not None:
                title += f" {section.name}"
            print(f"--- section {title} ----------")
            try:
                content = section.content()
                PRINTERS[type(content)](content)
            except DecodeError as e:
                # Stop this section; framing already moved past it
                print(e)
    except DecodeError as e:
        logger.debug("Section framing stopped: %s", e)
        print(e)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="wasm-print",
        description="Print the decoded contents of a WebAssembly module.",
    )
    parser.add_argument("file", type=Path, help="WASM binary to print")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log decoder debug output to stderr",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return print_module(args.file)


if __name__ == "__main__":
    sys.exit(main())
