"""Brightness sequences for the board's RGB LED."""

from __future__ import annotations

from typing import Iterator, NamedTuple

PERIOD = 1000
STEP_DELAY_MS = 2
PAUSE_MS = 200


class LedStep(NamedTuple):
    """Compare values for the three channels and how long to hold them."""

    red: int
    green: int
    blue: int
    delay_ms: int


def breath_sequence() -> Iterator[LedStep]:
    """Fade all channels up to full and back to dark, then pause."""
    for duty in range(1, PERIOD + 1):
        yield LedStep(duty, duty, duty, STEP_DELAY_MS)
    for duty in range(PERIOD - 1, -1, -1):
        yield LedStep(duty, duty, duty, STEP_DELAY_MS)
    yield LedStep(0, 0, 0, PAUSE_MS)


def rgb_sequence() -> Iterator[LedStep]:
    """Cross-fade red to green, green to blue and blue to red, then pause."""
    step = LedStep(0, 0, 0, STEP_DELAY_MS)
    for duty in range(PERIOD):
        step = LedStep(PERIOD - duty, duty, 0, STEP_DELAY_MS)
        yield step
    for duty in range(PERIOD):
        step = LedStep(0, PERIOD - duty, duty, STEP_DELAY_MS)
        yield step
    for duty in range(PERIOD):
        step = LedStep(duty, 0, PERIOD - duty, STEP_DELAY_MS)
        yield step
    yield step._replace(delay_ms=PAUSE_MS)