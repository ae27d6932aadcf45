"""Decoding of DR16 remote-control receiver frames."""

from __future__ import annotations

import struct
from dataclasses import dataclass

FRAME_LENGTH = 18
CHANNEL_OFFSET = 1024
CHANNEL_LIMIT = 660

_PAYLOAD_LENGTH = 16
_CHANNEL_BITS = 11
_CHANNEL_MASK = 0x07FF


@dataclass(frozen=True)
class Dr16Data:
    """One decoded receiver frame; stick channels are centred on zero."""

    channel_0: int = 0
    channel_1: int = 0
    channel_2: int = 0
    channel_3: int = 0
    s1: int = 0
    s2: int = 0
    mouse_x: int = 0
    mouse_y: int = 0
    mouse_z: int = 0
    mouse_left: int = 0
    mouse_right: int = 0
    button: int = 0


def parse_dr16(buffer: bytes | bytearray | memoryview) -> Dr16Data:
    """Decode a receiver frame.

    A frame whose stick channels lie outside ``±CHANNEL_LIMIT`` is treated as
    corrupt and decodes to an all-zero :class:`Dr16Data`.
    """
    data = bytes(buffer)
    if len(data) < _PAYLOAD_LENGTH:
        raise ValueError(
            f"DR16 frame needs at least {_PAYLOAD_LENGTH} bytes, got {len(data)}"
        )

    packed = int.from_bytes(data[:6], "little")
    channels = [
        ((packed >> (_CHANNEL_BITS * index)) & _CHANNEL_MASK) - CHANNEL_OFFSET
        for index in range(4)
    ]
    if any(abs(channel) > CHANNEL_LIMIT for channel in channels):
        return Dr16Data()

    switches = data[5] >> 4
    mouse_x, mouse_y, mouse_z = struct.unpack_from("<HHH", data, 6)
    (button,) = struct.unpack_from("<H", data, 14)
    return Dr16Data(
        channel_0=channels[0],
        channel_1=channels[1],
        channel_2=channels[2],
        channel_3=channels[3],
        s1=switches & 0x3,
        s2=(switches >> 2) & 0x3,
        mouse_x=mouse_x,
        mouse_y=mouse_y,
        mouse_z=mouse_z,
        mouse_left=data[12],
        mouse_right=data[13],
        button=button,
    )