# rmcontrol

Building blocks for controlling robot actuators and peripherals, written in
plain Python so that control logic and wire formats can be run and tested
away from the target board.

## Modules

- `rmcontrol.transform`: 4×4 homogeneous transforms as numpy arrays.
  `Move(x, y, z)` holds a translation and `Rotate(roll, pitch, yaw)` a
  rotation composed as yaw · pitch · roll. `Transform(rotate, move)` combines
  them, and `Transform.from_pose(x, y, z, roll, pitch, yaw)` does both steps in
  one call. Each object keeps its matrix in `.matrix`.
- `rmcontrol.thread_pool`: `ThreadPool(thread_num)` runs callables on a fixed
  set of worker threads. `add_task(func, *args, **kwargs)` returns a
  `concurrent.futures.Future`. `shutdown()` refuses new tasks, lets the tasks
  already queued finish, and joins the workers. The pool also works as a
  context manager. Adding a task after shutdown raises `ThreadPoolClosedError`.
- `rmcontrol.rtt_printf`: a compact printf dialect,
  `%[flags][width][.precision][l|h]conversion`. It accepts the flags `-`,
  `0`, `+` and `#` and the conversions `c d u x X s p %`. Hex output is
  upper case. Unknown conversions produce nothing.
  - `format_rtt(fmt, *args)` returns the formatted text.
  - `RttPrinter(write, buffer_index=0, buffer_size=64)` hands the output to
    `write(buffer_index, data)` in chunks of at most `buffer_size` bytes.
    `printf(fmt, *args)` returns the number of bytes sent. A short write raises
    `RttWriteError`.
- `rmcontrol.basic_pid`: `BasicPid(kp, ki, kd, dt, pid_type)`.
  - `PidType.NORMAL` clamps the output to `max_output`, which is 25000 by
    default. It can wrap the error with `enable_zero_crossing_protection`.
  - `PidType.INTEGRAL_SEPARATION` drops the integral while the error is
    outside `integral_separation_threshold`. It clamps the integral term to
    `max_integral_limit`.
  - `PidType.VARIABLE_SPEED_INTEGRAL` has no update rule and leaves the state
    unchanged.
  - `update(current_value, target_value)` returns the output.
  - `set_parameters(...)` replaces the gains and resets the error state.
- `rmcontrol.pid`: `Pid(kp, ki, kd, dt, target=0.0)`. It has optional stages,
  each switched on and off by an `enable_*`/`disable_*` pair:
  - integral separation
  - dead zone
  - variable-speed integral
  - zero-crossing protection, with a default threshold of 3.1415926
  - differential-first
  - feedforward, which is recorded but does not change the output

  The integral and the output are clamped to `max_integral_limit` and
  `max_output`. Both are 25000 by default.
- `rmcontrol.filter`: the `Filter` base class and `FirstOrderFilter(coefficient)`.
  `update(value)` returns `c * value + (1 - c) * previous`. The filtered value
  starts at 0.
- `rmcontrol.dr16`: `parse_dr16(buffer)` decodes a DR16 receiver frame into a
  frozen `Dr16Data`. The frame must be at least 16 bytes. Stick channels are
  centred on zero. A frame with any channel beyond ±660 decodes to all zeros.
- `rmcontrol.ws2812`: `encode_leds(led_count, color)` builds a frame of timer
  compare values: 80 reset slots, then 24 slots per LED, most significant bit
  first. `armor_frames(color)` returns the full 12-LED frame and the 3-LED
  frame. `color` is an `ArmorColor`, or 0 for blue and 1 for red.
- `rmcontrol.buzzer`: `tone_reload(num)` and `preset_reload(num)` return a
  `PwmSetting(autoreload, compare)` for notes 1–12. The first computes the
  reload from the note's frequency, the second looks it up in a preset table.
  The compare value is a quarter of the reload.
- `rmcontrol.led`: `breath_sequence()` and `rgb_sequence()` yield `LedStep`
  values: red, green and blue compare values plus a delay in milliseconds.
- `rmcontrol.motor`: the enums `PidLoop`, `ControlMethod` and `MotorMode`, the
  `CanFrame(std_id, data)` type, and the abstract `Motor` base class.
- `rmcontrol.gm6020`:
  - `GM6020` runs a speed loop, or an angle loop cascaded into the speed loop.
    `set_angle` and `set_speed` raise `RuntimeError` when the matching loop is
    not selected.
  - `decode_status(data)` returns a `GmStatus`.
  - `build_control_frame(message_type, values)` builds one group frame. It
    raises `ValueError` for too many values or for values out of range.
  - `send_gm_commands(motors, bus)` packs the speed-loop outputs of motors 1–4
    and 5–7 into group frames and sends them.
  - `FeedbackMonitor.record(now_ms)` tracks the feedback rate in Hz.
- `rmcontrol.dm4310`:
  - `DM4310` supports the MIT, MIT-torque (PID-driven), position-speed and
    speed modes. It sends commands with `mit_control`,
    `position_speed_control`, `speed_control`, `enable`, `disable` and
    `reset_error`.
  - `update_status(data)` decodes feedback into a `DmStatus`.
  - A command that does not fit the current mode or loop raises `DmModeError`.
  - `float_to_uint` and `uint_to_float` handle fixed-point packing.
- `rmcontrol.can_router`: `route_frame(frame, dm_motor, gm_motor)` passes a
  received feedback frame to the matching motor. The DM4310 is matched on its
  master id, the GM6020 on `0x204 + motor_id`. It returns the motor that was
  updated, or `None`.

## Buses

The motors send through a bus object bound with `bind_can(bus)` or passed to
the constructor. The bus is any object with a `send(frame)` method that takes
a `CanFrame`. Sending without a bound bus raises `RuntimeError`.

## What this package does not do

It does not talk to hardware. It has no CAN, UART, timer, GPIO or RTT driver.
You supply the bus or writer callable that moves bytes. The LED, buzzer and
WS2812 modules compute values and sequences but do not drive any device. The
package has no command-line program and no task scheduler.

## Example

```python
from rmcontrol.pid import Pid
from rmcontrol.rtt_printf import format_rtt

pid = Pid(kp=1.5, ki=0.1, kd=0.0, dt=0.001, target=0.0)
pid.update(current_value=0.0, target_value=10.0)
print(format_rtt("out=%+d", int(pid.output)))
```

## Installing and testing

```
pip install rmcontrol
pip install "rmcontrol[test]"
pytest
```