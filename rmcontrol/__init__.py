"""Control building blocks for robot firmware: PID loops, motor CAN frames, receiver decoding, LED and buzzer helpers, RTT-style printf, a thread pool and rigid transforms."""

__version__ = "0.1.0"