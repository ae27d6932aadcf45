import struct

import pytest

from rmcontrol.dm4310 import (
    DM4310,
    KD_MAX,
    KD_MIN,
    KP_MAX,
    KP_MIN,
    P_MAX,
    P_MIN,
    T_MAX,
    T_MIN,
    V_MAX,
    V_MIN,
    DmModeError,
    DmStatus,
    float_to_uint,
    uint_to_float,
)
from rmcontrol.motor import MotorMode, PidLoop


class FakeBus:
    def __init__(self):
        self.frames = []

    def send(self, frame):
        self.frames.append(frame)


def _mit_fields(data):
    pos = (data[0] << 8) | data[1]
    vel = (data[2] << 4) | (data[3] >> 4)
    kp = ((data[3] & 0xF) << 8) | data[4]
    kd = (data[5] << 4) | (data[6] >> 4)
    tor = ((data[6] & 0xF) << 8) | data[7]
    return pos, vel, kp, kd, tor


def _status_payload(error_code, pos, vel, tor, t_mos, t_rotor):
    p = float_to_uint(pos, P_MIN, P_MAX, 16)
    v = float_to_uint(vel, V_MIN, V_MAX, 12)
    t = float_to_uint(tor, T_MIN, T_MAX, 12)
    return bytes(
        [
            error_code << 4,
            p >> 8,
            p & 0xFF,
            v >> 4,
            ((v & 0xF) << 4) | (t >> 8),
            t & 0xFF,
            t_mos,
            t_rotor,
        ]
    )


def test_float_to_uint_minimum_is_zero():
    assert float_to_uint(P_MIN, P_MIN, P_MAX, 16) == 0
    assert float_to_uint(T_MIN, T_MIN, T_MAX, 12) == 0


def test_uint_to_float_endpoints():
    assert uint_to_float(0, V_MIN, V_MAX, 12) == pytest.approx(V_MIN)
    assert uint_to_float((1 << 12) - 1, V_MIN, V_MAX, 12) == pytest.approx(V_MAX)


@pytest.mark.parametrize("value", [-2.5, -0.3, 0.0, 1.7, 3.0])
def test_uint_float_round_trip(value):
    encoded = float_to_uint(value, P_MIN, P_MAX, 16)
    step = (P_MAX - P_MIN) / ((1 << 16) - 1)
    assert abs(uint_to_float(encoded, P_MIN, P_MAX, 16) - value) <= step


def test_enable_disable_reset_frames():
    bus = FakeBus()
    motor = DM4310(MotorMode.MIT, bus, can_id=0x01)
    assert motor.enable().data == b"\xff" * 7 + b"\xfc"
    assert motor.disable().data == b"\xff" * 7 + b"\xfd"
    assert motor.reset_error().data == b"\xff" * 7 + b"\xfb"
    assert [frame.std_id for frame in bus.frames] == [0x01, 0x01, 0x01]


@pytest.mark.parametrize(
    "mode, offset",
    [
        (MotorMode.MIT, 0),
        (MotorMode.MIT_TORQUE, 0),
        (MotorMode.POSITION_AND_SPEED, 0x100),
        (MotorMode.SPEED, 0x200),
    ],
)
def test_command_identifier_follows_mode(mode, offset):
    bus = FakeBus()
    motor = DM4310(mode, bus, can_id=3)
    assert motor.enable().std_id == 3 + offset


def test_enable_without_mode_raises():
    motor = DM4310(MotorMode.NONE, FakeBus(), can_id=1)
    with pytest.raises(DmModeError):
        motor.enable()


def test_mit_control_packs_fields():
    bus = FakeBus()
    motor = DM4310(MotorMode.MIT, bus, can_id=2)
    frame = motor.mit_control(1.0, -5.0, 100.0, 2.0, 3.0)
    assert frame.std_id == 2
    assert frame.dlc == 8
    assert _mit_fields(frame.data) == (
        float_to_uint(1.0, P_MIN, P_MAX, 16),
        float_to_uint(-5.0, V_MIN, V_MAX, 12),
        float_to_uint(100.0, KP_MIN, KP_MAX, 12),
        float_to_uint(2.0, KD_MIN, KD_MAX, 12),
        float_to_uint(3.0, T_MIN, T_MAX, 12),
    )
    assert bus.frames == [frame]


def test_mit_control_wrong_mode_raises():
    motor = DM4310(MotorMode.SPEED, FakeBus())
    with pytest.raises(DmModeError):
        motor.mit_control(0, 0, 0, 0, 0)


def test_position_speed_control_frame():
    bus = FakeBus()
    motor = DM4310(MotorMode.POSITION_AND_SPEED, bus, can_id=1)
    frame = motor.position_speed_control(1.5, 2.25)
    assert frame.std_id == 0x101
    assert struct.unpack("<ff", frame.data) == (1.5, 2.25)


def test_speed_control_frame():
    bus = FakeBus()
    motor = DM4310(MotorMode.SPEED, bus, can_id=1)
    frame = motor.speed_control(-4.5)
    assert frame.std_id == 0x201
    assert frame.dlc == 4
    assert struct.unpack("<f", frame.data) == (-4.5,)


def test_speed_control_wrong_mode_raises():
    with pytest.raises(DmModeError):
        DM4310(MotorMode.MIT, FakeBus()).speed_control(1.0)


def test_set_angle_in_mit_mode_uses_fixed_gains():
    bus = FakeBus()
    motor = DM4310(MotorMode.MIT, bus, can_id=1)
    motor.set_angle(0.5, 1.0)
    pos, vel, kp, kd, tor = _mit_fields(bus.frames[0].data)
    assert kp == float_to_uint(2.0, KP_MIN, KP_MAX, 12)
    assert kd == float_to_uint(1.0, KD_MIN, KD_MAX, 12)
    assert pos == float_to_uint(0.5, P_MIN, P_MAX, 16)


def test_set_speed_in_speed_mode():
    bus = FakeBus()
    DM4310(MotorMode.SPEED, bus, can_id=5).set_speed(3.0)
    assert bus.frames[0].std_id == 0x205
    assert struct.unpack("<f", bus.frames[0].data) == (3.0,)


def test_set_angle_in_speed_mode_raises():
    with pytest.raises(DmModeError):
        DM4310(MotorMode.SPEED, FakeBus()).set_angle(1.0, 0.0)


def test_set_speed_without_mode_raises():
    with pytest.raises(DmModeError):
        DM4310(MotorMode.NONE, FakeBus()).set_speed(1.0)


def test_torque_mode_needs_matching_loop():
    motor = DM4310(MotorMode.MIT_TORQUE, FakeBus(), pid_loop=PidLoop.SPEED)
    with pytest.raises(DmModeError):
        motor.set_angle(1.0, 0.0)
    motor.set_pid_loop(PidLoop.POSITION)
    with pytest.raises(DmModeError):
        motor.set_speed(1.0)


def test_update_status_decodes_fields():
    motor = DM4310(MotorMode.MIT, FakeBus())
    status = motor.update_status(_status_payload(3, 1.2, -7.0, 2.5, 40, 50))
    assert motor.status == status
    assert status.error_code == 3
    assert status.temperature_mos == 40
    assert status.temperature_rotor == 50
    assert status.position == pytest.approx(1.2, abs=1e-3)
    assert status.speed == pytest.approx(-7.0, abs=0.02)
    assert status.torque == pytest.approx(2.5, abs=0.01)


def test_update_status_short_payload_raises():
    with pytest.raises(ValueError):
        DM4310().update_status(b"\x00\x01")


def test_speed_loop_sends_torque_command():
    bus = FakeBus()
    motor = DM4310(MotorMode.MIT_TORQUE, bus, can_id=1, pid_loop=PidLoop.SPEED)
    motor.pid_speed.set_parameters(1.0, 0.0, 0.0, 0.001)
    motor.set_speed(2.0)
    assert motor.pid_speed.output == pytest.approx(2.0)
    pos, vel, kp, kd, tor = _mit_fields(bus.frames[0].data)
    assert bus.frames[0].std_id == 1
    assert (kp, kd) == (0, 0)
    assert tor == float_to_uint(motor.pid_speed.output, T_MIN, T_MAX, 12)


def test_position_loop_cascades_into_speed_loop():
    bus = FakeBus()
    motor = DM4310(MotorMode.MIT_TORQUE, bus, can_id=1, pid_loop=PidLoop.POSITION)
    motor.pid_angle.set_parameters(1.0, 0.0, 0.0, 0.001)
    motor.pid_speed.set_parameters(1.0, 0.0, 0.0, 0.001)
    motor.set_angle(1.0, 0.0)
    assert motor.pid_angle.output > 0
    assert motor.pid_speed.output == pytest.approx(motor.pid_angle.output)
    assert len(bus.frames) == 1


def test_set_pid_loop_clears_gains():
    motor = DM4310(MotorMode.MIT_TORQUE, FakeBus())
    motor.pid_speed.set_parameters(3.0, 2.0, 1.0, 0.01)
    motor.set_pid_loop(PidLoop.SPEED)
    assert motor.pid_loop is PidLoop.SPEED
    assert (motor.pid_speed.kp, motor.pid_speed.ki, motor.pid_speed.kd) == (0.0, 0.0, 0.0)
    assert motor.pid_speed.dt == 0.001


def test_default_status_is_zero():
    assert DM4310().status == DmStatus()


def test_unbound_motor_cannot_send():
    with pytest.raises(RuntimeError):
        DM4310(MotorMode.MIT).enable()