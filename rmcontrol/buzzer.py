"""PWM settings that make a buzzer play the notes of one octave."""

from __future__ import annotations

from typing import NamedTuple

TIMER_CLOCK_HZ = 36_000_000.0
STOP_COMPARE = 1

TONES = (261, 270, 293, 311, 329, 349, 370, 392, 415, 440, 466, 493)
TONE_RELOADS = (45977, 44444, 40955, 38585, 36474, 34383, 32432, 30612, 28915, 27272, 25751, 24340)


class PwmSetting(NamedTuple):
    """Timer auto-reload value and compare value (a quarter duty cycle)."""

    autoreload: int
    compare: int


def _index(num: int, table: tuple[int, ...]) -> int:
    if not 1 <= num <= len(table):
        raise ValueError(f"note number must be between 1 and {len(table)}, got {num}")
    return table[num - 1]


def _setting(autoreload: int) -> PwmSetting:
    return PwmSetting(autoreload, autoreload // 4)


def tone_reload(num: int) -> PwmSetting:
    """PWM setting for note ``num`` (1-based), computed from its frequency."""
    return _setting(int(TIMER_CLOCK_HZ / _index(num, TONES)))


def preset_reload(num: int) -> PwmSetting:
    """PWM setting for note ``num`` (1-based), taken from the preset table."""
    return _setting(_index(num, TONE_RELOADS))