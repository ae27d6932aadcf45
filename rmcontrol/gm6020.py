"""GM6020 gimbal motor: feedback decoding, group control frames and cascaded PID."""

from __future__ import annotations

import enum
import math
import struct
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from .motor import CanFrame, ControlMethod, Motor, PidLoop
from .pid import Pid

MAX_CURRENT = 16384
MAX_VOLTAGE = 25000
MAX_POSITION = 8191
FEEDBACK_BASE_ID = 0x204

VOLTAGE_LOW_ID = 0x1FF
VOLTAGE_HIGH_ID = 0x2FF
CURRENT_LOW_ID = 0x1FE
CURRENT_HIGH_ID = 0x2FE

_DEFAULT_DT = 0.001
_STATUS_FORMAT = ">hhhb"
_TICK_MASK = 0xFFFFFFFF


class MessageType(enum.Enum):
    """Group control messages: motors 1-4 (low) or 5-7 (high), by voltage or current."""

    VOLTAGE_LOW = (VOLTAGE_LOW_ID, 4, MAX_VOLTAGE)
    VOLTAGE_HIGH = (VOLTAGE_HIGH_ID, 3, MAX_VOLTAGE)
    CURRENT_LOW = (CURRENT_LOW_ID, 4, MAX_CURRENT)
    CURRENT_HIGH = (CURRENT_HIGH_ID, 3, MAX_CURRENT)

    @property
    def std_id(self) -> int:
        return self.value[0]

    @property
    def slots(self) -> int:
        return self.value[1]

    @property
    def limit(self) -> int:
        return self.value[2]


@dataclass(frozen=True)
class GmStatus:
    """Feedback reported by the motor."""

    position: int = 0
    speed: int = 0
    current: int = 0
    temperature: int = 0


class FeedbackMonitor:
    """Tracks how often feedback frames arrive, from millisecond tick stamps."""

    def __init__(self) -> None:
        self.last_tick = 0
        self.frequency = 0.0

    def record(self, now_ms: int) -> float:
        """Note a frame received at ``now_ms`` and return the feedback rate in Hz."""
        if self.last_tick != 0:
            interval = (now_ms - self.last_tick) & _TICK_MASK
            if interval > 0:
                self.frequency = 1000.0 / interval
        self.last_tick = now_ms
        return self.frequency


def decode_status(data: bytes | bytearray | memoryview) -> GmStatus:
    """Decode a feedback frame's payload."""
    payload = bytes(data)
    size = struct.calcsize(_STATUS_FORMAT)
    if len(payload) < size:
        raise ValueError(f"GM6020 feedback needs at least {size} bytes, got {len(payload)}")
    position, speed, current, temperature = struct.unpack_from(_STATUS_FORMAT, payload)
    return GmStatus(position, speed, current, temperature)


def build_control_frame(message_type: MessageType, values: Iterable[int]) -> CanFrame:
    """Build the group control frame; missing slots are sent as zero.

    Raises ``ValueError`` if there are more values than slots or a value lies
    outside the message's limit.
    """
    commands = [int(value) for value in values]
    if len(commands) > message_type.slots:
        raise ValueError(
            f"{message_type.name} carries at most {message_type.slots} values, got {len(commands)}"
        )
    limit = message_type.limit
    for value in commands:
        if not -limit <= value <= limit:
            raise ValueError(f"{message_type.name} value {value} outside ±{limit}")
    commands.extend([0] * (4 - len(commands)))
    return CanFrame(message_type.std_id, struct.pack(">4h", *commands))


class GM6020(Motor):
    """A GM6020 driven through a speed loop, or an angle loop cascaded into it."""

    def __init__(
        self,
        mode: ControlMethod = ControlMethod.CURRENT,
        bus: Any = None,
        motor_id: int = 1,
        pid_loop: PidLoop = PidLoop.NONE,
    ) -> None:
        super().__init__(bus, pid_loop)
        self.mode = mode
        self.motor_id = motor_id
        self.pid_speed = Pid(0.0, 0.0, 0.0, _DEFAULT_DT, 0.0)
        self.pid_angle = Pid(0.0, 0.0, 0.0, _DEFAULT_DT, 0.0)
        self.status = GmStatus()

    @property
    def feedback_id(self) -> int:
        """Standard identifier of this motor's feedback frames."""
        return FEEDBACK_BASE_ID + self.motor_id

    def set_angle(self, angle: float, speed: float = 0.0) -> None:
        """Run one step of the position loop towards ``angle`` (encoder counts)."""
        if self.pid_loop is not PidLoop.POSITION:
            raise RuntimeError("set_angle needs the position loop")
        self._pid_update(angle)

    def set_speed(self, speed: float) -> None:
        """Run one step of the speed loop towards ``speed``."""
        if self.pid_loop is not PidLoop.SPEED:
            raise RuntimeError("set_speed needs the speed loop")
        self._pid_update(speed)

    def set_pid_loop(self, pid_loop: PidLoop) -> None:
        """Select the loop; choosing a loop clears both controllers' gains."""
        self.pid_loop = pid_loop
        if pid_loop in (PidLoop.POSITION, PidLoop.SPEED):
            self.pid_angle.set_parameters(0.0, 0.0, 0.0, _DEFAULT_DT)
            self.pid_speed.set_parameters(0.0, 0.0, 0.0, _DEFAULT_DT)

    def update_status(self, data: bytes | bytearray | memoryview) -> GmStatus:
        """Decode a feedback payload, store it and return it."""
        self.status = decode_status(data)
        return self.status

    def _pid_update(self, target: float) -> None:
        if self.pid_loop is PidLoop.SPEED:
            self.pid_speed.update(float(self.status.speed), target)
        elif self.pid_loop is PidLoop.POSITION:
            current_pos = self.status.position / MAX_POSITION * 2 * math.pi
            target_pos = target / MAX_POSITION * 2 * math.pi
            self.pid_angle.update(current_pos, target_pos)
            self.pid_speed.update(float(self.status.speed), self.pid_angle.output)
        else:
            raise RuntimeError("no PID loop selected")


def send_gm_commands(motors: Sequence[GM6020], bus: Any) -> list[CanFrame]:
    """Send the speed-loop outputs of ``motors`` as group frames on ``bus``.

    Motors 1-4 share one frame and 5-7 another; the first motor's control
    method decides voltage or current.  Every motor must be bound to ``bus``.
    Returns the frames sent.
    """
    if not motors:
        return []
    low = [0] * 4
    high = [0] * 3
    has_low = has_high = False
    for motor in motors:
        if motor.bus is not bus:
            raise ValueError(f"motor {motor.motor_id} is bound to a different bus")
        output = int(motor.pid_speed.output)
        if 1 <= motor.motor_id <= 4:
            low[motor.motor_id - 1] = output
            has_low = True
        elif 5 <= motor.motor_id <= 7:
            high[motor.motor_id - 5] = output
            has_high = True

    if motors[0].mode is ControlMethod.CURRENT:
        low_type, high_type = MessageType.CURRENT_LOW, MessageType.CURRENT_HIGH
    else:
        low_type, high_type = MessageType.VOLTAGE_LOW, MessageType.VOLTAGE_HIGH

    frames = []
    if has_low:
        frames.append(build_control_frame(low_type, low))
    if has_high:
        frames.append(build_control_frame(high_type, high))
    for frame in frames:
        bus.send(frame)
    return frames