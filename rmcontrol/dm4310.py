"""DM4310 joint motor: MIT, position-speed and speed commands, feedback and PID."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Any

from .motor import CanFrame, Motor, MotorMode, PidLoop
from .pid import Pid

P_MAX = 3.141593
P_MIN = -3.141593
V_MAX = 30.0
V_MIN = -30.0
KP_MAX = 500.0
KP_MIN = 0.0
KD_MAX = 5.0
KD_MIN = 0.0
T_MAX = 10.0
T_MIN = -10.0

POSITION_SPEED_OFFSET = 0x100
SPEED_OFFSET = 0x200

ENABLE_CODE = 0xFC
DISABLE_CODE = 0xFD
RESET_ERROR_CODE = 0xFB

_DEFAULT_DT = 0.001
_STATUS_LENGTH = 8


class DmModeError(RuntimeError):
    """Raised when a command does not fit the motor's mode or PID loop."""


@dataclass(frozen=True)
class DmStatus:
    """Feedback reported by the motor."""

    error_code: int = 0
    position: float = 0.0
    speed: float = 0.0
    torque: float = 0.0
    temperature_mos: int = 0
    temperature_rotor: int = 0


def float_to_uint(x: float, x_min: float, x_max: float, bits: int) -> int:
    """Map ``x`` in ``[x_min, x_max]`` onto an unsigned integer of ``bits`` bits."""
    span = x_max - x_min
    return int((x - x_min) * float((1 << bits) - 1) / span)


def uint_to_float(x_int: int, x_min: float, x_max: float, bits: int) -> float:
    """Map an unsigned integer of ``bits`` bits back onto ``[x_min, x_max]``."""
    span = x_max - x_min
    return float(x_int) * span / float((1 << bits) - 1) + x_min


class DM4310(Motor):
    """A DM4310 commanded over CAN in one of its :class:`MotorMode` modes.

    In ``MIT_TORQUE`` mode the motor is driven by torque commands produced by
    a speed loop, or an angle loop cascaded into it.
    """

    def __init__(
        self,
        mode: MotorMode = MotorMode.NONE,
        bus: Any = None,
        can_id: int = 0,
        master_id: int = 0,
        pid_loop: PidLoop = PidLoop.NONE,
    ) -> None:
        super().__init__(bus, pid_loop)
        self.mode = mode
        self.can_id = can_id
        self.master_id = master_id
        self.pid_speed = Pid(0.0, 0.0, 0.0, _DEFAULT_DT, 0.0)
        self.pid_angle = Pid(0.0, 0.0, 0.0, _DEFAULT_DT, 0.0)
        self.status = DmStatus()

    def set_angle(self, angle: float, speed: float = 0.0) -> None:
        """Drive towards ``angle`` in the way the current mode allows."""
        if self.mode is MotorMode.MIT:
            self.mit_control(angle, speed, 2.0, 1.0, 0.0)
        elif self.mode is MotorMode.POSITION_AND_SPEED:
            self.position_speed_control(angle, speed)
        elif self.mode is MotorMode.MIT_TORQUE:
            if self.pid_loop is not PidLoop.POSITION:
                raise DmModeError("set_angle in MIT torque mode needs the position loop")
            self._pid_update(angle)
        else:
            raise DmModeError(f"set_angle is not available in {self.mode.name} mode")

    def set_speed(self, speed: float) -> None:
        """Drive at ``speed`` in the way the current mode allows."""
        if self.mode is MotorMode.MIT:
            self.mit_control(0.0, speed, 0.0, 1.0, 0.0)
        elif self.mode is MotorMode.POSITION_AND_SPEED:
            self.position_speed_control(0.0, speed)
        elif self.mode is MotorMode.SPEED:
            self.speed_control(speed)
        elif self.mode is MotorMode.MIT_TORQUE:
            if self.pid_loop is not PidLoop.SPEED:
                raise DmModeError("set_speed in MIT torque mode needs the speed loop")
            self._pid_update(speed)
        else:
            raise DmModeError(f"set_speed is not available in {self.mode.name} mode")

    def mit_control(self, pos: float, vel: float, kp: float, kd: float, torque: float) -> CanFrame:
        """Send an MIT command frame and return it."""
        if self.mode not in (MotorMode.MIT, MotorMode.MIT_TORQUE):
            raise DmModeError(f"MIT commands are not available in {self.mode.name} mode")
        pos_tmp = float_to_uint(pos, P_MIN, P_MAX, 16) & 0xFFFF
        vel_tmp = float_to_uint(vel, V_MIN, V_MAX, 12) & 0xFFFF
        kp_tmp = float_to_uint(kp, KP_MIN, KP_MAX, 12) & 0xFFFF
        kd_tmp = float_to_uint(kd, KD_MIN, KD_MAX, 12) & 0xFFFF
        tor_tmp = float_to_uint(torque, T_MIN, T_MAX, 12) & 0xFFFF
        data = bytes(
            byte & 0xFF
            for byte in (
                pos_tmp >> 8,
                pos_tmp,
                vel_tmp >> 4,
                ((vel_tmp & 0xF) << 4) | (kp_tmp >> 8),
                kp_tmp,
                kd_tmp >> 4,
                ((kd_tmp & 0xF) << 4) | (tor_tmp >> 8),
                tor_tmp,
            )
        )
        frame = CanFrame(self.can_id, data)
        self._send(frame)
        return frame

    def position_speed_control(self, pos: float, vel: float) -> CanFrame:
        """Send a position-speed command frame and return it."""
        if self.mode is not MotorMode.POSITION_AND_SPEED:
            raise DmModeError(
                f"position-speed commands are not available in {self.mode.name} mode"
            )
        frame = CanFrame(self.can_id + POSITION_SPEED_OFFSET, struct.pack("<ff", pos, vel))
        self._send(frame)
        return frame

    def speed_control(self, vel: float) -> CanFrame:
        """Send a speed command frame and return it."""
        if self.mode is not MotorMode.SPEED:
            raise DmModeError(f"speed commands are not available in {self.mode.name} mode")
        frame = CanFrame(self.can_id + SPEED_OFFSET, struct.pack("<f", vel))
        self._send(frame)
        return frame

    def update_status(self, data: bytes | bytearray | memoryview) -> DmStatus:
        """Decode a feedback payload, store it and return it."""
        payload = bytes(data)
        if len(payload) < _STATUS_LENGTH:
            raise ValueError(
                f"DM4310 feedback needs {_STATUS_LENGTH} bytes, got {len(payload)}"
            )
        p_int = (payload[1] << 8) | payload[2]
        v_int = (payload[3] << 4) | (payload[4] >> 4)
        t_int = ((payload[4] & 0xF) << 8) | payload[5]
        self.status = DmStatus(
            error_code=payload[0] >> 4,
            position=uint_to_float(p_int, P_MIN, P_MAX, 16),
            speed=uint_to_float(v_int, V_MIN, V_MAX, 12),
            torque=uint_to_float(t_int, T_MIN, T_MAX, 12),
            temperature_mos=payload[6],
            temperature_rotor=payload[7],
        )
        return self.status

    def enable(self) -> CanFrame:
        """Send the enable command."""
        return self._send_command(ENABLE_CODE)

    def disable(self) -> CanFrame:
        """Send the disable command."""
        return self._send_command(DISABLE_CODE)

    def reset_error(self) -> CanFrame:
        """Send the clear-error command."""
        return self._send_command(RESET_ERROR_CODE)

    def set_pid_loop(self, pid_loop: PidLoop) -> None:
        """Select the loop; choosing a loop clears both controllers' gains."""
        self.pid_loop = pid_loop
        if pid_loop in (PidLoop.POSITION, PidLoop.SPEED):
            self.pid_angle.set_parameters(0.0, 0.0, 0.0, _DEFAULT_DT)
            self.pid_speed.set_parameters(0.0, 0.0, 0.0, _DEFAULT_DT)

    def _command_id(self) -> int:
        if self.mode in (MotorMode.MIT, MotorMode.MIT_TORQUE):
            return self.can_id
        if self.mode is MotorMode.POSITION_AND_SPEED:
            return self.can_id + POSITION_SPEED_OFFSET
        if self.mode is MotorMode.SPEED:
            return self.can_id + SPEED_OFFSET
        raise DmModeError("no command identifier without a control mode")

    def _send_command(self, code: int) -> CanFrame:
        frame = CanFrame(self._command_id(), b"\xff" * 7 + bytes((code,)))
        self._send(frame)
        return frame

    def _pid_update(self, target: float) -> None:
        if self.mode is not MotorMode.MIT_TORQUE:
            raise DmModeError("PID control needs MIT torque mode")
        if self.pid_loop is PidLoop.POSITION:
            scale = 2 * math.pi / (P_MAX - P_MIN)
            target_pos = (target - P_MIN) * scale
            current_pos = (self.status.position - P_MIN) * scale
            self.pid_angle.update(current_pos, target_pos)
            self.pid_speed.update(self.status.speed, self.pid_angle.output)
        elif self.pid_loop is PidLoop.SPEED:
            self.pid_speed.update(self.status.speed, target)
        else:
            raise DmModeError("no PID loop selected")
        self.mit_control(0.0, 0.0, 0.0, 0.0, self.pid_speed.output)