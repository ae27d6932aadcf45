"""A small printf for sending formatted text in fixed-size chunks to an up-channel.

Conversion specifications follow ``%[flags][width][.precision][l|h]conversion``
with flags ``-`` (left justify), ``+`` (always show sign), ``0`` (pad with
zeros, ignored with ``-`` or a precision) and ``#``; conversions are ``c``,
``d``, ``u``, ``x``/``X`` (upper-case hex), ``s``, ``p`` (8-digit hex) and
``%``.  Unknown conversions are dropped without consuming an argument.
"""

from __future__ import annotations

import enum
import operator
from typing import Any, Callable, Iterable, Iterator

_DIGITS = "0123456789ABCDEF"
_UINT32_MASK = 0xFFFFFFFF


class RttWriteError(IOError):
    """Raised when the channel accepts fewer bytes than were handed to it."""


class _Flag(enum.IntFlag):
    NONE = 0
    LEFT_JUSTIFY = 1
    PAD_ZERO = 2
    PRINT_SIGN = 4
    ALTERNATE = 8


_FLAG_CHARS = {
    ord("-"): _Flag.LEFT_JUSTIFY,
    ord("0"): _Flag.PAD_ZERO,
    ord("+"): _Flag.PRINT_SIGN,
    ord("#"): _Flag.ALTERNATE,
}


def _to_base(value: int, base: int) -> str:
    digits = []
    while True:
        value, remainder = divmod(value, base)
        digits.append(_DIGITS[remainder])
        if not value:
            break
    return "".join(reversed(digits))


def _format_unsigned(value: int, base: int, num_digits: int, field_width: int, flags: _Flag) -> str:
    text = _to_base(value, base).rjust(num_digits, "0")
    pad = max(field_width - len(text), 0)
    if flags & _Flag.LEFT_JUSTIFY:
        return text + " " * pad
    fill = "0" if flags & _Flag.PAD_ZERO and num_digits == 0 else " "
    return fill * pad + text


def _format_signed(value: int, num_digits: int, field_width: int, flags: _Flag) -> str:
    magnitude = abs(value)
    negative = value < 0
    width = max(len(_to_base(magnitude, 10)), num_digits)
    if field_width > 0 and (negative or flags & _Flag.PRINT_SIGN):
        field_width -= 1

    spaces = zeros = ""
    if not flags & _Flag.LEFT_JUSTIFY:
        pad = max(field_width - width, 0)
        if flags & _Flag.PAD_ZERO and num_digits == 0:
            zeros = "0" * pad
        else:
            spaces = " " * pad
        field_width -= pad

    sign = "-" if negative else "+" if flags & _Flag.PRINT_SIGN else ""
    return spaces + sign + zeros + _format_unsigned(magnitude, 10, num_digits, field_width, flags)


def _as_uint32(value: Any) -> int:
    return operator.index(value) & _UINT32_MASK


def _as_int32(value: Any) -> int:
    unsigned = _as_uint32(value)
    return unsigned - (1 << 32) if unsigned & 0x80000000 else unsigned


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise TypeError(f"expected str or bytes, got {type(value).__name__}")


def _until_nul(data: bytes) -> bytes:
    end = data.find(0)
    return data if end < 0 else data[:end]


def _read_number(data: bytes, pos: int) -> tuple[int, int]:
    number = 0
    while pos < len(data) and 0x30 <= data[pos] <= 0x39:
        number = number * 10 + (data[pos] - 0x30)
        pos += 1
    return number, pos


def _next_arg(pending: Iterator[Any]) -> Any:
    try:
        return next(pending)
    except StopIteration:
        raise TypeError("not enough arguments for format string") from None


def _convert(conversion: str, flags: _Flag, width: int, precision: int, pending: Iterator[Any]) -> bytes:
    if conversion == "c":
        arg = _next_arg(pending)
        if isinstance(arg, (str, bytes, bytearray)):
            return _as_bytes(arg)[:1]
        return bytes((operator.index(arg) & 0xFF,))
    if conversion == "d":
        return _format_signed(_as_int32(_next_arg(pending)), precision, width, flags).encode("ascii")
    if conversion == "u":
        return _format_unsigned(_as_uint32(_next_arg(pending)), 10, precision, width, flags).encode("ascii")
    if conversion in ("x", "X"):
        return _format_unsigned(_as_uint32(_next_arg(pending)), 16, precision, width, flags).encode("ascii")
    if conversion == "s":
        return _until_nul(_as_bytes(_next_arg(pending)))
    if conversion == "p":
        return _format_unsigned(_as_uint32(_next_arg(pending)), 16, 8, 8, _Flag.NONE).encode("ascii")
    if conversion == "%":
        return b"%"
    return b""


def _render(fmt: str | bytes, args: Iterable[Any]) -> Iterator[bytes]:
    """Yield the formatted output as successive byte chunks."""
    data = _until_nul(_as_bytes(fmt))
    pending = iter(args)
    pos = 0
    while pos < len(data):
        char = data[pos]
        pos += 1
        if char != ord("%"):
            yield bytes((char,))
            continue

        flags = _Flag.NONE
        while pos < len(data) and data[pos] in _FLAG_CHARS:
            flags |= _FLAG_CHARS[data[pos]]
            pos += 1
        width, pos = _read_number(data, pos)
        precision = 0
        if pos < len(data) and data[pos] == ord("."):
            precision, pos = _read_number(data, pos + 1)
        while pos < len(data) and data[pos] in b"lh":
            pos += 1
        if pos >= len(data):
            break
        conversion = chr(data[pos])
        pos += 1
        chunk = _convert(conversion, flags, width, precision, pending)
        if chunk:
            yield chunk


def format_rtt(fmt: str | bytes, *args: Any) -> str:
    """Return the text that ``RttPrinter.printf`` would send for these arguments."""
    return b"".join(_render(fmt, args)).decode("utf-8", errors="replace")


class RttPrinter:
    """Formats text and hands it to ``write(buffer_index, data)`` in chunks.

    ``write`` must return the number of bytes it accepted; a short write
    raises ``RttWriteError``.
    """

    def __init__(
        self,
        write: Callable[[int, bytes], int],
        buffer_index: int = 0,
        buffer_size: int = 64,
    ) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        self._write = write
        self.buffer_index = buffer_index
        self.buffer_size = buffer_size

    def printf(self, fmt: str | bytes, *args: Any) -> int:
        """Format and send; return the number of bytes sent."""
        pending = bytearray()
        total = 0
        for chunk in _render(fmt, args):
            for byte in chunk:
                pending.append(byte)
                total += 1
                if len(pending) == self.buffer_size:
                    self._flush(pending)
                    pending.clear()
        if pending:
            self._flush(pending)
        return total

    def _flush(self, data: bytearray) -> None:
        written = self._write(self.buffer_index, bytes(data))
        if written != len(data):
            raise RttWriteError(
                f"channel {self.buffer_index} accepted {written} of {len(data)} bytes"
            )