"""Exception classes for the WebAssembly module reader."""


class WasmError(Exception):
    """Base class for all WebAssembly reader errors."""

    pass


class DecodeError(WasmError):
    """Error during binary format decoding."""

    pass


class NotWasmError(DecodeError):
    """The input does not start with the WebAssembly magic number."""

    pass


class UnexpectedEofError(DecodeError):
    """A declared or implicit length runs past the end of the input."""

    pass


class MalformedVarintError(DecodeError):
    """A LEB128 integer does not terminate within its maximum width."""

    pass


class UnknownVariantError(DecodeError):
    """An enumerated discriminant has no defined meaning.

    ``domain`` names the enumeration that failed, e.g. ``"opcode"`` or
    ``"value type"``.
    """

    def __init__(self, domain: str, value: int | None = None) -> None:
        self.domain = domain
        self.value = value
        if value is None:
            message = f"Unknown {domain}"
        else:
            message = f"Unknown {domain}: 0x{value:02x}"
        super().__init__(message)


class InvalidUtf8Error(DecodeError):
    """A length-prefixed string is not valid UTF-8."""

    pass
