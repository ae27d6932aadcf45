"""A PID controller with optional dead zone, integral separation,
variable-speed integration, zero-crossing protection and derivative-first."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_ZERO_CROSSING_THRESHOLD = 3.1415926


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


@dataclass
class Pid:
    """PID controller; each optional stage is switched on by an ``enable_*`` method."""

    kp: float
    ki: float
    kd: float
    dt: float
    target: float = 0.0
    error: float = field(default=0.0, init=False)
    error_last: float = field(default=0.0, init=False)
    error_sum: float = field(default=0.0, init=False)
    p_output: float = field(default=0.0, init=False)
    i_output: float = field(default=0.0, init=False)
    d_output: float = field(default=0.0, init=False)
    output: float = field(default=0.0, init=False)
    output_last: float = field(default=0.0, init=False)
    max_output: float = field(default=25000.0, init=False)
    max_integral_limit: float = field(default=25000.0, init=False)
    integral_separation: bool = field(default=False, init=False)
    integral_separation_threshold: float = field(default=0.0, init=False)
    dead_zone: bool = field(default=False, init=False)
    dead_zone_threshold: float = field(default=0.0, init=False)
    feedforward: bool = field(default=False, init=False)
    feedforward_compensation: float = field(default=0.0, init=False)
    variable_speed_integral: bool = field(default=False, init=False)
    variable_speed_lower_limit: float = field(default=0.0, init=False)
    variable_speed_upper_limit: float = field(default=0.0, init=False)
    alpha_e: float = field(default=0.0, init=False)
    zero_crossing_protection: bool = field(default=False, init=False)
    zero_crossing_threshold: float = field(default=0.0, init=False)
    differential_first: bool = field(default=False, init=False)

    def update(self, current_value: float, target_value: float) -> float:
        """Run one control step and return the new output."""
        self.error_last = self.error
        self.target = target_value

        difference = target_value - current_value
        threshold = self.zero_crossing_threshold
        if self.zero_crossing_protection and difference >= threshold:
            self.error = difference - 2 * threshold
        elif self.zero_crossing_protection and difference <= -threshold:
            self.error = difference + 2 * threshold
        else:
            self.error = difference

        if self.dead_zone and -self.dead_zone_threshold <= self.error <= self.dead_zone_threshold:
            self.error = 0.0

        self.error_sum += self.error
        self.p_output = self.kp * self.error

        integral = self.error_sum * self.ki * self.dt
        if self.variable_speed_integral and not (
            self.variable_speed_lower_limit <= self.error <= self.variable_speed_upper_limit
        ):
            integral *= 1 / (1 + self.alpha_e * abs(self.error))
        self.i_output = integral

        if self.integral_separation and abs(self.error) > self.integral_separation_threshold:
            self.i_output = 0.0
            self.error_sum -= self.error

        self.i_output = _clamp(self.i_output, self.max_integral_limit)

        if self.differential_first:
            self.d_output = self.kd * (self.output - self.output_last) / self.dt
        else:
            self.d_output = self.kd * (self.error - self.error_last) / self.dt

        self.output_last = self.output
        self.output = _clamp(self.p_output + self.i_output + self.d_output, self.max_output)
        return self.output

    def set_parameters(self, kp: float, ki: float, kd: float, dt: float) -> None:
        """Replace the gains and sample time, keeping the controller state."""
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.dt = dt

    def enable_integral_separation(self, threshold: float) -> None:
        self.integral_separation = True
        self.integral_separation_threshold = threshold

    def disable_integral_separation(self) -> None:
        self.integral_separation = False

    def enable_dead_zone(self, threshold: float) -> None:
        self.dead_zone = True
        self.dead_zone_threshold = threshold

    def disable_dead_zone(self) -> None:
        self.dead_zone = False

    def enable_feedforward(self) -> None:
        self.feedforward = True
        self.feedforward_compensation = 0.0

    def disable_feedforward(self) -> None:
        self.feedforward = False

    def enable_variable_speed_integral(
        self, lower_limit: float, upper_limit: float, alpha_e: float
    ) -> None:
        """Scale the integral down by ``1 / (1 + alpha_e * |error|)`` outside the band."""
        self.variable_speed_integral = True
        self.variable_speed_lower_limit = lower_limit
        self.variable_speed_upper_limit = upper_limit
        self.alpha_e = alpha_e

    def disable_variable_speed_integral(self) -> None:
        self.variable_speed_integral = False

    def enable_zero_crossing_protection(
        self, threshold: float = DEFAULT_ZERO_CROSSING_THRESHOLD
    ) -> None:
        self.zero_crossing_protection = True
        self.zero_crossing_threshold = threshold

    def disable_zero_crossing_protection(self) -> None:
        self.zero_crossing_protection = False

    def enable_differential_first(self) -> None:
        self.differential_first = True

    def disable_differential_first(self) -> None:
        self.differential_first = False