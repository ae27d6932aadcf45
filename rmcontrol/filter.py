"""Signal filters."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Filter(ABC):
    """A filter that exposes its current output as ``value``."""

    @property
    @abstractmethod
    def value(self) -> float:
        """The current filtered value."""


class FirstOrderFilter(Filter):
    """Exponential smoothing: ``value = c * input + (1 - c) * value``, starting at 0."""

    def __init__(self, coefficient: float) -> None:
        self.coefficient = coefficient
        self._value = 0.0

    @property
    def value(self) -> float:
        return self._value

    def update(self, value: float) -> float:
        """Feed one sample and return the new filtered value."""
        self._value = self.coefficient * value + (1 - self.coefficient) * self._value
        return self._value