import pytest

from rmcontrol.rtt_printf import RttPrinter, RttWriteError, format_rtt


@pytest.mark.parametrize(
    "fmt,value",
    [
        ("%d", 42),
        ("%d", -42),
        ("%5d", 42),
        ("%-6d|", 42),
        ("%05d", -42),
        ("%+d", 7),
        ("%+5d", 42),
        ("%.3d", 7),
        ("%5.3d", 7),
        ("%-05d|", 3),
        ("%u", 123456),
        ("%08u", 99),
    ],
)
def test_integer_conversions_match_printf_semantics(fmt, value):
    assert format_rtt(fmt, value) == fmt % value


@pytest.mark.parametrize("value", [0, 10, 255, 0xBEEF, 0xDEADBEEF])
def test_hex_is_upper_case(value):
    assert format_rtt("%x", value) == "%X" % value
    assert format_rtt("%X", value) == "%X" % value


def test_zero_padded_hex():
    assert format_rtt("%08x", 0xABC) == "%08X" % 0xABC


def test_pointer_is_eight_hex_digits():
    assert format_rtt("%p", 0x1234) == "%08X" % 0x1234


def test_unsigned_wraps_negative_values():
    assert format_rtt("%u", -1) == str(2**32 - 1)


def test_signed_wraps_to_32_bits():
    assert format_rtt("%d", 2**32 - 5) == "-5"


def test_char_string_and_percent():
    assert format_rtt("%c%s%%", 65, "bc") == "Abc%"


def test_string_stops_at_nul():
    assert format_rtt("[%s]", "ab\0cd") == "[ab]"


def test_length_modifiers_are_ignored():
    assert format_rtt("%lu %hd %lld", 5, -3, 9) == "5 -3 9"


def test_unknown_conversion_is_dropped_without_argument():
    assert format_rtt("a%qb%d", 4) == "ab4"


def test_missing_argument_raises():
    with pytest.raises(TypeError):
        format_rtt("%d %d", 1)


def test_string_argument_must_be_text():
    with pytest.raises(TypeError):
        format_rtt("%s", 12)


def test_printer_sends_in_buffer_sized_chunks():
    writes = []

    def write(index, data):
        writes.append((index, data))
        return len(data)

    printer = RttPrinter(write, buffer_index=1, buffer_size=4)
    count = printer.printf("abcdefghij")
    assert count == len("abcdefghij")
    assert [data for _, data in writes] == [b"abcd", b"efgh", b"ij"]
    assert {index for index, _ in writes} == {1}


def test_printer_output_matches_format_rtt():
    received = bytearray()

    def write(index, data):
        received.extend(data)
        return len(data)

    printer = RttPrinter(write, buffer_size=8)
    count = printer.printf("value=%5d hex=%x name=%s", -17, 0xCAFE, "motor")
    assert received.decode() == format_rtt("value=%5d hex=%x name=%s", -17, 0xCAFE, "motor")
    assert count == len(received)


def test_empty_output_writes_nothing():
    writes = []
    printer = RttPrinter(lambda index, data: writes.append(data) or len(data))
    assert printer.printf("") == 0
    assert writes == []


def test_short_write_raises():
    printer = RttPrinter(lambda index, data: 0, buffer_size=4)
    with pytest.raises(RttWriteError):
        printer.printf("abcdef")


def test_short_final_write_raises():
    printer = RttPrinter(lambda index, data: len(data) - 1, buffer_size=64)
    with pytest.raises(RttWriteError):
        printer.printf("xy")


def test_buffer_size_must_be_positive():
    with pytest.raises(ValueError):
        RttPrinter(lambda index, data: len(data), buffer_size=0)