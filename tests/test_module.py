"""Tests for module header parsing and section framing."""

import io

import pytest
from wasm_reader import Module, read_module
from wasm_reader.errors import (
    DecodeError,
    InvalidUtf8Error,
    MalformedVarintError,
    NotWasmError,
    UnexpectedEofError,
    UnknownVariantError,
)
from wasm_reader.sections import FunctionType, FunctionBody

from wasm_bytes import (
    HEADER,
    TYPE_SECTION,
    CODE_SECTION,
    custom_section,
    module,
    sample_module,
    section,
)


def dump(data: bytes) -> list[str]:
    """Decode everything in a module into a flat list of reprs."""
    out = []
    for section_ in Module(data).sections():
        out.append(repr(section_))
        content = section_.content()
        out.append(repr(content))
        if not hasattr(content, "entries"):
            continue
        for entry in content.entries():
            out.append(repr(entry))
            if isinstance(entry, FunctionBody):
                out.extend(repr(part) for part in entry.contents())
    return out


class TestModuleHeader:
    def test_minimal_module(self):
        mod = Module(HEADER)
        assert mod.version == 1
        assert len(mod.payload) == 0
        # Scenario: no bytes after the header means no sections
        assert list(mod.sections()) == []

    def test_reports_any_version(self):
        mod = Module(b"\x00asm" + (13).to_bytes(4, "little"))
        assert mod.version == 13

    @pytest.mark.parametrize(
        "prefix",
        [
            b"\x00\x00\x00\x00\x01\x00\x00\x00",
            b"\x00ASM\x01\x00\x00\x00",
            b"asm\x00\x01\x00\x00\x00",
            b"\x7fELF\x02\x01\x01\x00",
        ],
    )
    def test_invalid_magic(self, prefix):
        with pytest.raises(NotWasmError, match="magic"):
            Module(prefix)

    def test_too_short_for_magic(self):
        with pytest.raises(NotWasmError) as excinfo:
            Module(b"\x00as")
        assert isinstance(excinfo.value.__cause__, UnexpectedEofError)

    def test_truncated_version(self):
        with pytest.raises(UnexpectedEofError):
            Module(b"\x00asm\x01\x00")

    def test_read_module_sources(self, tmp_path):
        data = sample_module()
        path = tmp_path / "sample.wasm"
        path.write_bytes(data)
        assert read_module(path).version == 1
        assert read_module(io.BytesIO(data)).version == 1
        assert read_module(data).version == 1
        assert len(read_module(bytearray(data)).payload) == len(data) - 8


class TestSectionFraming:
    def test_sections_in_order(self):
        sections = list(Module(sample_module()).sections())
        assert [s.id for s in sections] == list(range(1, 12)) + [0]
        assert sections[0].kind == "type"
        assert sections[-1].kind == "custom"
        assert sections[-1].name == "name"
        assert sections[0].name is None

    def test_payload_excludes_header_fields(self):
        [type_section] = list(Module(module(TYPE_SECTION)).sections())
        assert bytes(type_section.payload) == TYPE_SECTION[2:]

    def test_custom_section_name_counts_against_size(self):
        data = module(custom_section("hello", b"\x01\x02"), TYPE_SECTION)
        custom, types = list(Module(data).sections())
        assert custom.name == "hello"
        assert bytes(custom.payload) == b"\x01\x02"
        assert types.id == 1

    def test_custom_section_name_overruns_size(self):
        data = module(b"\x00\x02\x05hello")
        with pytest.raises(UnexpectedEofError):
            list(Module(data).sections())

    def test_custom_section_invalid_name(self):
        data = module(b"\x00\x03\x02\xff\xfe")
        with pytest.raises(InvalidUtf8Error):
            list(Module(data).sections())

    def test_declared_length_past_end(self):
        # Scenario: 10 bytes declared, only 4 present
        data = module(b"\x01\x0a\x01\x60\x00\x00")
        sections = Module(data).sections()
        with pytest.raises(UnexpectedEofError):
            next(sections)
        assert list(sections) == []

    def test_section_id_wider_than_one_byte(self):
        # Padded encoding of id 1
        data = module(b"\x81\x80\x80\x80\x00\x00")
        with pytest.raises(MalformedVarintError):
            list(Module(data).sections())

    def test_unknown_section_id(self):
        data = module(TYPE_SECTION, section(12, b"\x00"))
        sections = Module(data).sections()
        assert next(sections).id == 1
        with pytest.raises(UnknownVariantError) as excinfo:
            next(sections)
        assert excinfo.value.domain == "section id"
        assert list(sections) == []

    def test_sections_restart(self):
        mod = Module(sample_module())
        first = [bytes(s.payload) for s in mod.sections()]
        second = [bytes(s.payload) for s in mod.sections()]
        assert first == second

    def test_payloads_lie_within_buffer(self):
        data = sample_module()
        for section_ in Module(data).sections():
            reader = section_.reader
            assert 0 <= reader.position <= reader.end <= len(data)


class TestSectionContent:
    def test_empty_counted_section(self):
        with pytest.raises(UnexpectedEofError):
            next(Module(module(section(1, b""))).sections()).content()

    def test_content_does_not_consume_section(self):
        [type_section] = list(Module(module(TYPE_SECTION)).sections())
        assert type_section.content().count == type_section.content().count == 2

    def test_content_error_does_not_stop_framing(self):
        data = module(section(1, b"\x80"), CODE_SECTION)
        bad, code = list(Module(data).sections())
        with pytest.raises(DecodeError):
            bad.content()
        assert code.content().count == 2


class TestWholeModule:
    def test_decoding_is_deterministic(self):
        data = sample_module()
        assert dump(data) == dump(bytearray(data))

    def test_type_entries(self):
        types = next(Module(sample_module()).sections()).content()
        assert all(isinstance(t, FunctionType) for t in types.entries())

    @pytest.mark.parametrize(
        "data",
        [
            sample_module(),
            module(TYPE_SECTION, CODE_SECTION),
            module(TYPE_SECTION),
        ],
    )
    def test_truncated_module_fails_with_eof(self, data):
        with pytest.raises(UnexpectedEofError):
            dump(data[:-1])
