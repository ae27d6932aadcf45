"""A plain PID controller with normal and integral-separation update rules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class PidType(enum.Enum):
    """Update rule used by :class:`BasicPid`."""

    NORMAL = 0
    INTEGRAL_SEPARATION = 1
    VARIABLE_SPEED_INTEGRAL = 2


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


@dataclass
class BasicPid:
    """PID controller whose behaviour is chosen by ``pid_type``.

    ``NORMAL`` uses a plain error sum and clamps the output to
    ``max_output``.  ``INTEGRAL_SEPARATION`` integrates over ``dt``, drops
    the integral while the error lies outside
    ``integral_separation_threshold`` and clamps only the integral term.
    ``VARIABLE_SPEED_INTEGRAL`` has no update rule and leaves the state as is.
    """

    kp: float
    ki: float
    kd: float
    dt: float
    pid_type: PidType = PidType.NORMAL
    target: float = field(default=0.0, init=False)
    error: float = field(default=0.0, init=False)
    error_last: float = field(default=0.0, init=False)
    error_sum: float = field(default=0.0, init=False)
    output: float = field(default=0.0, init=False)
    max_output: float = field(default=25000.0, init=False)
    max_integral_limit: float = field(default=20000.0, init=False)
    integral_separation_threshold: float = field(default=0.0, init=False)
    variable_speed_integral_lower_limit: float = field(default=0.0, init=False)
    variable_speed_integral_upper_limit: float = field(default=0.0, init=False)
    zero_crossing_protection: bool = field(default=False, init=False)
    zero_crossing_threshold: float = field(default=0.0, init=False)
    first_order_filtering: bool = field(default=False, init=False)
    first_order_coefficient: float = field(default=0.0, init=False)

    def update(self, current_value: float, target_value: float) -> float:
        """Run one control step and return the new output."""
        if self.pid_type is PidType.NORMAL:
            self._update_normal(current_value, target_value)
        elif self.pid_type is PidType.INTEGRAL_SEPARATION:
            self._update_integral_separation(current_value, target_value)
        return self.output

    def _update_normal(self, current_value: float, target_value: float) -> None:
        self.error_last = self.error
        difference = target_value - current_value
        threshold = self.zero_crossing_threshold
        if self.zero_crossing_protection and difference >= threshold:
            self.error = difference - 2 * threshold
        elif self.zero_crossing_protection and difference <= -threshold:
            self.error = difference + 2 * threshold
        else:
            self.error = difference

        self.error_sum += self.error
        output = (
            self.kp * self.error
            + self.ki * self.error_sum
            + self.kd * (self.error - self.error_last)
        )
        self.output = _clamp(output, self.max_output)

    def _update_integral_separation(self, current_value: float, target_value: float) -> None:
        self.error_last = self.error
        self.error = target_value - current_value
        self.error_sum += self.error * self.dt
        if abs(self.error) > self.integral_separation_threshold:
            self.error_sum = 0.0
        else:
            self.error_sum += self.error * self.dt

        integral = _clamp(self.ki * self.error_sum, self.max_integral_limit)
        self.output = (
            self.kp * self.error
            + integral
            + self.kd * (self.error - self.error_last) / self.dt
        )

    def enable_zero_crossing_protection(self, enabled: bool, threshold: float) -> None:
        """Turn wrap-around handling of the error on or off."""
        self.zero_crossing_protection = enabled
        self.zero_crossing_threshold = threshold

    def enable_first_order_filtering(self, enabled: bool, coefficient: float) -> None:
        """Record the first-order filtering setting."""
        self.first_order_filtering = enabled
        self.first_order_coefficient = coefficient

    def set_parameters(self, kp: float, ki: float, kd: float, dt: float, pid_type: PidType) -> None:
        """Replace gains, sample time and type, and clear the error state."""
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.dt = dt
        self.pid_type = pid_type
        self.error = 0.0
        self.error_last = 0.0
        self.error_sum = 0.0
        self.output = 0.0