"""Tests for the per-kind section decoders."""

import pytest
from wasm_reader import Module
from wasm_reader.errors import (
    InvalidUtf8Error,
    UnexpectedEofError,
    UnknownVariantError,
)
from wasm_reader.instructions import Instruction
from wasm_reader.sections import (
    CodeSection,
    CustomSection,
    FunctionType,
    NameSection,
    StartSection,
    TypeSection,
)
from wasm_reader.types import (
    ElementFunction,
    ExportEntry,
    FunctionName,
    GlobalType,
    ImportEntry,
    Local,
    LocalName,
    MemoryType,
    ResizableLimits,
    SegmentIndex,
    TableType,
)

from wasm_bytes import (
    CODE_SECTION,
    DATA_SECTION,
    ELEMENT_SECTION,
    EXPORT_SECTION,
    FUNCTION_SECTION,
    GLOBAL_SECTION,
    IMPORT_SECTION,
    MEMORY_SECTION,
    NAME_SECTION,
    START_SECTION,
    TABLE_SECTION,
    TYPE_SECTION,
    custom_section,
    func_body,
    module,
    name,
    sample_module,
    section,
    uleb,
    vec,
)


def content_of(section_bytes: bytes):
    return next(Module(module(section_bytes)).sections()).content()


def entries_of(section_bytes: bytes) -> list:
    return list(content_of(section_bytes).entries())


class TestTypeSection:
    def test_single_function_type(self):
        types = content_of(section(1, vec([b"\x60\x00\x01\x7f"])))
        assert isinstance(types, TypeSection)
        assert types.count == 1
        [func] = list(types.entries())
        assert isinstance(func, FunctionType)
        assert list(func.params()) == []
        assert func.return_type == "i32"

    def test_params_and_no_result(self):
        first, second = entries_of(TYPE_SECTION)
        assert list(first.params()) == ["i32", "i64"]
        assert first.param_count == 2
        assert first.return_type == "i32"
        assert repr(first) == "(i32, i64) -> (i32)"
        assert list(second.params()) == []
        assert second.return_type is None

    def test_entries_restart(self):
        types = content_of(TYPE_SECTION)
        assert list(types.entries()) == list(types.entries())

    def test_unknown_form(self):
        with pytest.raises(UnknownVariantError) as excinfo:
            entries_of(section(1, vec([b"\x40\x00\x00"])))
        assert excinfo.value.domain == "type entry form"

    def test_param_count_past_end(self):
        with pytest.raises(UnexpectedEofError):
            entries_of(section(1, b"\x01\x60\x05\x7f"))

    def test_unknown_param_type_is_lazy(self):
        [func] = entries_of(section(1, vec([b"\x60\x01\x01\x00"])))
        params = func.params()
        with pytest.raises(UnknownVariantError) as excinfo:
            next(params)
        assert excinfo.value.domain == "value type"
        assert list(params) == []

    def test_multiple_results_unsupported(self):
        with pytest.raises(UnknownVariantError) as excinfo:
            entries_of(section(1, vec([b"\x60\x00\x02\x7f\x7f"])))
        assert excinfo.value.domain == "return count"

    def test_count_bounds_iteration(self):
        # Trailing bytes after the declared entries are never decoded
        entries = entries_of(section(1, b"\x01\x60\x00\x00\xff\xff"))
        assert len(entries) == 1


class TestImportSection:
    def test_all_kinds(self):
        assert entries_of(IMPORT_SECTION) == [
            ImportEntry("env", "log", "func", 1),
            ImportEntry("env", "mem", "memory", MemoryType(ResizableLimits(1, 2))),
            ImportEntry(
                "env", "tbl", "table", TableType("anyfunc", ResizableLimits(10))
            ),
            ImportEntry("env", "g", "global", GlobalType("i32", False)),
        ]

    def test_unknown_external_kind(self):
        entry = name("env") + name("x") + b"\x04\x00"
        with pytest.raises(UnknownVariantError) as excinfo:
            entries_of(section(2, vec([entry])))
        assert excinfo.value.domain == "external kind"

    def test_unknown_element_type(self):
        entry = name("env") + name("t") + b"\x01\x6f\x00\x01"
        with pytest.raises(UnknownVariantError) as excinfo:
            entries_of(section(2, vec([entry])))
        assert excinfo.value.domain == "element type"

    def test_invalid_utf8_module_name(self):
        entry = b"\x02\xc3\x28" + name("x") + b"\x00\x00"
        with pytest.raises(InvalidUtf8Error):
            entries_of(section(2, vec([entry])))

    def test_stops_after_first_error(self):
        good = name("env") + name("f") + b"\x00\x00"
        bad = name("env") + name("x") + b"\x09"
        imports = content_of(section(2, vec([good, bad, good])))
        it = imports.entries()
        assert next(it).field == "f"
        with pytest.raises(UnknownVariantError):
            next(it)
        assert list(it) == []


class TestFunctionTableMemorySections:
    def test_function_type_indices(self):
        assert entries_of(FUNCTION_SECTION) == [0, 1]

    def test_table(self):
        assert entries_of(TABLE_SECTION) == [TableType("anyfunc", ResizableLimits(1))]

    def test_memory(self):
        assert entries_of(MEMORY_SECTION) == [MemoryType(ResizableLimits(1))]

    def test_memory_with_maximum(self):
        assert entries_of(section(5, vec([b"\x01\x02\x80\x02"]))) == [
            MemoryType(ResizableLimits(2, 256))
        ]


class TestGlobalSection:
    def test_entries_interleave_initializers(self):
        assert entries_of(GLOBAL_SECTION) == [
            GlobalType("i32", True),
            Instruction("i32.const", -7),
            Instruction("end"),
            GlobalType("f64", False),
            Instruction("f64.const", 2.5),
            Instruction("end"),
        ]

    def test_truncated_initializer(self):
        it = content_of(section(6, vec([b"\x7f\x00\x41"]))).entries()
        assert next(it) == GlobalType("i32", False)
        with pytest.raises(UnexpectedEofError):
            next(it)
        assert list(it) == []


class TestExportSection:
    def test_exports(self):
        assert entries_of(EXPORT_SECTION) == [
            ExportEntry("add", "func", 1),
            ExportEntry("memory", "memory", 0),
        ]

    def test_invalid_utf8_field(self):
        with pytest.raises(InvalidUtf8Error):
            entries_of(section(7, vec([b"\x02\xc3\x28\x00\x00"])))


class TestStartSection:
    def test_start(self):
        assert content_of(START_SECTION) == StartSection(2)

    def test_truncated_start(self):
        with pytest.raises(UnexpectedEofError):
            content_of(section(8, b""))


class TestElementSection:
    def test_segment(self):
        assert entries_of(ELEMENT_SECTION) == [
            SegmentIndex(0),
            Instruction("i32.const", 0),
            Instruction("end"),
            ElementFunction(1),
            ElementFunction(2),
        ]

    def test_two_segments(self):
        first = uleb(0) + b"\x41\x01\x0b" + vec([uleb(7)])
        second = uleb(0) + b"\x23\x00\x0b" + vec([])
        assert entries_of(section(9, vec([first, second]))) == [
            SegmentIndex(0),
            Instruction("i32.const", 1),
            Instruction("end"),
            ElementFunction(7),
            SegmentIndex(0),
            Instruction("global.get", 0),
            Instruction("end"),
        ]


class TestCodeSection:
    def test_bodies(self):
        code = content_of(CODE_SECTION)
        assert isinstance(code, CodeSection)
        first, second = list(code.entries())
        assert first.size == 9
        assert list(first.contents()) == [
            Local(1, "i32"),
            Instruction("local.get", 0),
            Instruction("local.get", 1),
            Instruction("i32.add"),
            Instruction("end"),
        ]
        assert list(first.locals()) == [Local(1, "i32")]
        assert list(second.locals()) == []
        assert list(second.instructions()) == [
            Instruction("i32.const", 5),
            Instruction("end"),
        ]

    def test_contents_restart(self):
        [_, body] = entries_of(CODE_SECTION)
        assert list(body.contents()) == list(body.contents())

    def test_body_size_past_end(self):
        with pytest.raises(UnexpectedEofError):
            entries_of(section(10, b"\x01\x10\x00\x0b"))

    def test_body_is_bounded(self):
        # The first body lacks its end; the next body's end must not be used
        code = section(10, vec([func_body([], b"\x01"), func_body([], b"\x0b")]))
        first, second = entries_of(code)
        with pytest.raises(UnexpectedEofError):
            list(first.instructions())
        assert list(second.instructions()) == [Instruction("end")]

    def test_unknown_local_type(self):
        [body] = entries_of(section(10, vec([func_body([b"\x01\x00"], b"\x0b")])))
        with pytest.raises(UnknownVariantError):
            list(body.contents())


class TestDataSection:
    def test_segment(self):
        entries = entries_of(DATA_SECTION)
        assert entries[:3] == [
            SegmentIndex(0),
            Instruction("i32.const", 8),
            Instruction("end"),
        ]
        assert bytes(entries[3].data) == b"hello"
        assert len(entries) == 4

    def test_blob_is_a_view(self):
        data = bytearray(module(DATA_SECTION))
        blob = entries_of_buffer(data)[-1]
        assert isinstance(blob.data, memoryview)
        data[-1] = ord("!")
        assert bytes(blob.data) == b"hell!"

    def test_blob_past_end(self):
        with pytest.raises(UnexpectedEofError):
            entries_of(section(11, vec([b"\x00\x41\x00\x0b\x10abc"])))


def entries_of_buffer(data) -> list:
    return list(next(Module(data).sections()).content().entries())


class TestNameSection:
    def test_names(self):
        names = content_of(NAME_SECTION)
        assert isinstance(names, NameSection)
        assert list(names.entries()) == [
            FunctionName("add"),
            LocalName("a"),
            LocalName("b"),
            FunctionName("main"),
        ]

    def test_invalid_utf8_function_name(self):
        names = content_of(custom_section("name", vec([b"\x01\xff" + uleb(0)])))
        it = names.entries()
        with pytest.raises(InvalidUtf8Error):
            next(it)
        assert list(it) == []

    def test_other_custom_section_is_opaque(self):
        custom = content_of(custom_section("producers", b"\x01\x02"))
        assert isinstance(custom, CustomSection)
        assert custom.name == "producers"
        assert bytes(custom.payload) == b"\x01\x02"


class TestByteAccounting:
    def test_entries_consume_whole_section(self):
        for section_ in Module(sample_module()).sections():
            content = section_.content()
            if not hasattr(content, "entries"):
                continue
            it = content.entries()
            for entry in it:
                if isinstance(entry, FunctionType):
                    list(entry.params())
            assert it.reader.eof(), section_
