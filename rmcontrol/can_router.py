"""Dispatch of received CAN feedback frames to the motors they belong to."""

from __future__ import annotations

from typing import Optional, Union

from .dm4310 import DM4310
from .gm6020 import GM6020
from .motor import CanFrame

_PAYLOAD_LENGTH = 8


def route_frame(
    frame: CanFrame,
    dm_motor: Optional[DM4310] = None,
    gm_motor: Optional[GM6020] = None,
) -> Union[DM4310, GM6020, None]:
    """Hand ``frame`` to the motor whose feedback identifier it carries.

    The DM4310 is matched on its master identifier, the GM6020 on its
    feedback identifier.  Short payloads are padded with zeros to eight
    bytes.  Returns the motor updated, or ``None`` if no motor matched.
    """
    payload = frame.data.ljust(_PAYLOAD_LENGTH, b"\x00")
    if dm_motor is not None and frame.std_id == dm_motor.master_id:
        dm_motor.update_status(payload)
        return dm_motor
    if gm_motor is not None and frame.std_id == gm_motor.feedback_id:
        gm_motor.update_status(payload)
        return gm_motor
    return None