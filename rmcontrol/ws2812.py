"""Timer-compare buffers that drive a WS2812 LED strip on the armour plates."""

from __future__ import annotations

import enum

HIGH_DATA = 64
LOW_DATA = 36
RESET_SLOTS = 80
LED_COUNT = 12
NEXT_COUNT = 3
BITS_PER_LED = 24
FRAME_LENGTH = RESET_SLOTS + LED_COUNT * BITS_PER_LED

TIMER_PRESCALER = 0
TIMER_AUTORELOAD = 89


class ArmorColor(enum.IntEnum):
    """24-bit colours in the strip's wire order."""

    BLUE = 0x0000FF
    RED = 0x00FF00
    GREEN = 0xFF0000


_SIDE_COLORS = {0: ArmorColor.BLUE, 1: ArmorColor.RED}


def encode_leds(led_count: int, color: int) -> tuple[int, ...]:
    """Return a frame of compare values: reset slots, then ``led_count`` LEDs.

    Each LED takes 24 slots, most significant bit first; the rest of the
    frame is zero.
    """
    if not 0 <= led_count <= LED_COUNT:
        raise ValueError(f"led_count must be between 0 and {LED_COUNT}, got {led_count}")
    value = int(color) & 0xFFFFFF
    bits = [
        HIGH_DATA if (value >> (BITS_PER_LED - 1 - position)) & 1 else LOW_DATA
        for position in range(BITS_PER_LED)
    ]
    frame = [0] * RESET_SLOTS + bits * led_count
    frame.extend([0] * (FRAME_LENGTH - len(frame)))
    return tuple(frame)


def armor_frames(color: int | ArmorColor) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Return the two frames sent for an armour colour.

    ``color`` is an :class:`ArmorColor`, or 0 for blue and 1 for red.  The
    first frame lights every LED, the second only the first few.
    """
    if isinstance(color, ArmorColor):
        resolved = color
    elif color in _SIDE_COLORS:
        resolved = _SIDE_COLORS[color]
    else:
        raise ValueError(f"unknown armour colour: {color!r}")
    return encode_leds(LED_COUNT, resolved), encode_leds(NEXT_COUNT, resolved)