import pytest

from sigscope.channels import (
    ALL_COUNT,
    ANALOG_COUNT,
    CURSOR_ABSOLUTE,
    LOGIC_BITS,
    LOGIC_GROUPS,
    MATH_COUNT,
    ch_list_index_to_logic_group,
    chid_to_logic_group,
    chid_to_logic_group_bit,
    fft_index,
    index_to_fft_chid,
    interpolation_chid,
    is_analog_or_math,
    is_analog_or_math_or_logic,
    is_fft_index,
    is_logic_ch,
    is_logic_index,
    is_numeric_char,
    logic_group_to_ch_list_index,
)

FIRST_LOGIC = ANALOG_COUNT + MATH_COUNT


def test_fft_entries_follow_logic_groups():
    assert fft_index(0) == FIRST_LOGIC + LOGIC_GROUPS
    assert fft_index(1) == fft_index(0) + 1


def test_is_fft_index():
    assert is_fft_index(fft_index(0))
    assert is_fft_index(fft_index(1))
    assert not is_fft_index(fft_index(2))
    assert not is_fft_index(0)


def test_index_to_fft_chid_round_trip():
    assert index_to_fft_chid(fft_index(0)) == 0
    assert index_to_fft_chid(fft_index(1)) == 1


def test_is_logic_index():
    assert is_logic_index(FIRST_LOGIC)
    assert is_logic_index(FIRST_LOGIC + LOGIC_GROUPS - 1)
    assert not is_logic_index(FIRST_LOGIC - 1)
    assert not is_logic_index(fft_index(0))
    assert not is_logic_index(fft_index(1))
    assert not is_logic_index(CURSOR_ABSOLUTE)


def test_interpolation_channels_follow_all_channels():
    assert interpolation_chid(0) == ALL_COUNT
    assert interpolation_chid(1) == ALL_COUNT + 1


def test_channel_kind_predicates():
    assert is_analog_or_math(0)
    assert is_analog_or_math(FIRST_LOGIC - 1)
    assert not is_analog_or_math(FIRST_LOGIC)
    assert is_analog_or_math_or_logic(FIRST_LOGIC + LOGIC_GROUPS - 1)
    assert not is_analog_or_math_or_logic(FIRST_LOGIC + LOGIC_GROUPS)
    assert is_logic_ch(FIRST_LOGIC)
    assert not is_logic_ch(FIRST_LOGIC - 1)


@pytest.mark.parametrize("group", range(LOGIC_GROUPS))
def test_logic_group_list_index_round_trip(group):
    index = logic_group_to_ch_list_index(group)
    assert is_logic_index(index)
    assert ch_list_index_to_logic_group(index) == group


@pytest.mark.parametrize("group", range(LOGIC_GROUPS))
@pytest.mark.parametrize("bit", [0, 1, LOGIC_BITS - 1])
def test_chid_to_logic_group_and_bit(group, bit):
    chid = FIRST_LOGIC + group * LOGIC_BITS + bit
    assert chid_to_logic_group(chid) == group
    assert chid_to_logic_group_bit(chid) == bit


def test_last_logic_channel_is_last_of_all():
    last = ALL_COUNT - 1
    assert chid_to_logic_group(last) == LOGIC_GROUPS - 1
    assert chid_to_logic_group_bit(last) == LOGIC_BITS - 1


@pytest.mark.parametrize("char", list("0123456789-,"))
def test_numeric_chars(char):
    assert is_numeric_char(char)


@pytest.mark.parametrize("char", ["a", ".", " ", "+", "", "12"])
def test_non_numeric_chars(char):
    assert not is_numeric_char(char)