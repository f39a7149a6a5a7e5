import pytest

from pgtypes.flags import Flag, has_flag, should_quote_array


def test_quote_flag_is_bit_one():
    assert has_flag(1, Flag.QUOTE)
    assert not has_flag(1, Flag.ARRAY)


def test_has_flag_requires_all_bits():
    combined = Flag.QUOTE | Flag.ARRAY
    assert has_flag(combined, Flag.QUOTE)
    assert has_flag(combined, Flag.ARRAY)
    assert has_flag(combined, combined)
    assert not has_flag(Flag.QUOTE, combined)


@pytest.mark.parametrize("flags", [0, 1, 2, 3, 7])
def test_empty_flag_is_always_set(flags):
    assert has_flag(flags, 0)


def test_should_quote_array():
    assert should_quote_array(Flag.QUOTE)
    assert should_quote_array(Flag.QUOTE | Flag.ARRAY)
    assert not should_quote_array(Flag.QUOTE | Flag.SUBARRAY)
    assert not should_quote_array(Flag.ARRAY)
    assert not should_quote_array(0)