"""Channel numbering shared by the plot, cursors, measurements and exports.

Channel ids run through the analog channels, then the math channels, then
every bit of every logic group. Channel-list indexes (as shown in selection
lists) run through the analog and math channels, then one entry per logic
group, then the two FFT entries and the absolute cursor.
"""

ANALOG_COUNT = 16
MATH_COUNT = 3
LOGIC_BITS = 32
LOGIC_GROUPS = 3
INTERPOLATION_COUNT = 2

LOGIC_COUNT = LOGIC_BITS * LOGIC_GROUPS
#: Channels in the plot; every logic bit counts, interpolation channels do not.
ALL_COUNT = ANALOG_COUNT + MATH_COUNT + LOGIC_COUNT

SHOW_OPENGL_RECOMMENDATION_WHEN_SWITCHED_TO_FILLED = True
TERMINAL_CLICK_BLINK_TIME = 100
TERMINAL_DEFAULT_WIDTH = 14 + 1
TERMINAL_DEFAULT_HEIGHT = 10

MAX_PLOT_ZOOMOUT = 10_000_000_000
PLOT_ELEMENTS_MOUSE_DISTANCE = 10
TRACER_MOUSE_DISTANCE = 20

CURSOR_ABSOLUTE = ANALOG_COUNT + MATH_COUNT + LOGIC_GROUPS + 2

EXPORT_XY = -1
EXPORT_FFT = -2
EXPORT_ALL = -3
EXPORT_FREQTIME = -4

_FIRST_LOGIC = ANALOG_COUNT + MATH_COUNT


def _trunc_divmod(value: int, divisor: int) -> tuple[int, int]:
    """Integer division truncating toward zero, with a matching remainder."""
    quotient = abs(value) // divisor
    if value < 0:
        quotient = -quotient
    return quotient, value - quotient * divisor


def fft_index(n: int) -> int:
    """Channel-list index of FFT entry ``n`` (0 or 1)."""
    return ANALOG_COUNT + MATH_COUNT + LOGIC_GROUPS + n


def is_fft_index(index: int) -> bool:
    """Whether a channel-list index points at one of the FFT entries."""
    return index in (fft_index(0), fft_index(1))


def is_logic_index(index: int) -> bool:
    """Whether a channel-list index points at a logic group entry."""
    return index >= _FIRST_LOGIC and not is_fft_index(index) and index != CURSOR_ABSOLUTE


def index_to_fft_chid(index: int) -> int:
    """FFT number (0 or 1) of an FFT channel-list index."""
    return index - fft_index(0)


def interpolation_chid(n: int) -> int:
    """Channel id of interpolation channel ``n``."""
    return ALL_COUNT + n


def is_analog_or_math(ch: int) -> bool:
    """Whether a channel id is an analog or a math channel."""
    return ch < ANALOG_COUNT + MATH_COUNT


def is_analog_or_math_or_logic(ch: int) -> bool:
    """Whether a channel-list index is an analog, math or logic group entry."""
    return ch < ANALOG_COUNT + MATH_COUNT + LOGIC_GROUPS


def is_logic_ch(ch: int) -> bool:
    """Whether a channel id or list index lies past the analog and math channels."""
    return ch >= _FIRST_LOGIC


def ch_list_index_to_logic_group(index: int) -> int:
    """Logic group number of a channel-list index."""
    return index - ANALOG_COUNT - MATH_COUNT


def logic_group_to_ch_list_index(group: int) -> int:
    """Channel-list index of a logic group."""
    return group + ANALOG_COUNT + MATH_COUNT


def chid_to_logic_group(ch: int) -> int:
    """Logic group that a logic channel id belongs to."""
    return _trunc_divmod(ch - _FIRST_LOGIC, LOGIC_BITS)[0]


def chid_to_logic_group_bit(ch: int) -> int:
    """Bit within its logic group of a logic channel id."""
    return _trunc_divmod(ch - _FIRST_LOGIC, LOGIC_BITS)[1]


def is_numeric_char(c: str) -> bool:
    """Whether a single character may appear in a number list: a digit, '-' or ','."""
    return len(c) == 1 and c in "0123456789-,"