import pytest

from xvkit.cformat import format_int, format_printf


@pytest.mark.parametrize("n", [0, 1, 9, 10, 255, 65535, 0x7FFFFFFF])
def test_hex_round_trip(n):
    assert int(format_int(n, 16, False), 16) == n


@pytest.mark.parametrize("n", [0, 7, -7, 100, -2147483648, 2147483647])
def test_signed_decimal_round_trip(n):
    assert int(format_int(n, 10, True)) == n


def test_hex_digits_are_upper_case():
    text = format_int(0xABCDEF, 16, False)
    assert text == text.upper()
    assert int(text, 16) == 0xABCDEF


def test_unsigned_treats_negative_as_32_bit():
    assert int(format_int(-1, 16, False), 16) == 0xFFFFFFFF


def test_bad_base():
    with pytest.raises(ValueError):
        format_int(5, 1, False)


def test_mixed_format():
    assert format_printf("%s=%d\n", "x", -3) == "x=-3\n"


def test_null_string():
    assert format_printf("[%s]", None) == "[(null)]"


def test_char_and_percent():
    assert format_printf("%c%%", ord("Z")) == "Z%"


def test_unknown_escape_is_echoed():
    assert format_printf("a%qb") == "a%qb"


def test_pointer_uses_hex():
    assert format_printf("%p", 0x1F) == format_int(0x1F, 16, False)


def test_missing_argument():
    with pytest.raises(TypeError):
        format_printf("%d %d", 1)