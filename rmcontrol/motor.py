"""Common types for CAN-driven motors."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

MAX_STANDARD_ID = 0x7FF
MAX_FRAME_DATA = 8


class PidLoop(enum.Enum):
    """Which closed loop a motor runs."""

    NONE = 0
    SPEED = 1
    POSITION = 2


class ControlMethod(enum.Enum):
    """Whether a motor is commanded by voltage or by current."""

    VOLTAGE = 0
    CURRENT = 1


class MotorMode(enum.Enum):
    """Command modes of motors with their own on-board controller."""

    MIT = 0
    MIT_TORQUE = 1
    POSITION_AND_SPEED = 2
    SPEED = 3
    NONE = 4


@dataclass(frozen=True)
class CanFrame:
    """A standard-identifier CAN data frame."""

    std_id: int
    data: bytes

    def __post_init__(self) -> None:
        if not 0 <= self.std_id <= MAX_STANDARD_ID:
            raise ValueError(f"standard identifier out of range: {self.std_id:#x}")
        object.__setattr__(self, "data", bytes(self.data))
        if len(self.data) > MAX_FRAME_DATA:
            raise ValueError(f"CAN frame carries at most {MAX_FRAME_DATA} bytes")

    @property
    def dlc(self) -> int:
        """Data length code: the number of data bytes."""
        return len(self.data)


class Motor(ABC):
    """A motor commanded over a CAN bus.

    The bus is any object with a ``send(frame)`` method taking a
    :class:`CanFrame`.
    """

    def __init__(self, bus: Any = None, pid_loop: PidLoop = PidLoop.NONE) -> None:
        self.bus = bus
        self.pid_loop = pid_loop

    @abstractmethod
    def set_angle(self, angle: float, speed: float = 0.0) -> None:
        """Drive the motor towards ``angle``."""

    @abstractmethod
    def set_speed(self, speed: float) -> None:
        """Drive the motor at ``speed``."""

    def bind_can(self, bus: Any) -> None:
        """Attach the bus that commands are sent on."""
        self.bus = bus

    def _send(self, frame: CanFrame) -> Any:
        if self.bus is None:
            raise RuntimeError("motor is not bound to a CAN bus")
        return self.bus.send(frame)