"""Homogeneous 4x4 rigid-body transforms built from translations and roll/pitch/yaw."""

from __future__ import annotations

import math

import numpy as np


class Rotate:
    """Rotation as a 4x4 homogeneous matrix, composed as yaw * pitch * roll."""

    def __init__(self, roll: float, pitch: float, yaw: float) -> None:
        cr, sr = math.cos(roll), math.sin(roll)
        cp, sp = math.cos(pitch), math.sin(pitch)
        cy, sy = math.cos(yaw), math.sin(yaw)

        roll_rotate = np.identity(4)
        roll_rotate[1:3, 1:3] = [[cr, -sr], [sr, cr]]

        pitch_rotate = np.identity(4)
        pitch_rotate[0, 0] = cp
        pitch_rotate[0, 2] = sp
        pitch_rotate[2, 0] = -sp
        pitch_rotate[2, 2] = cp

        yaw_rotate = np.identity(4)
        yaw_rotate[0:2, 0:2] = [[cy, -sy], [sy, cy]]

        self.matrix: np.ndarray = yaw_rotate @ pitch_rotate @ roll_rotate


class Move:
    """Translation as a 4x4 homogeneous matrix."""

    def __init__(self, x: float, y: float, z: float) -> None:
        self.matrix: np.ndarray = np.identity(4)
        self.matrix[0:3, 3] = (x, y, z)


class Transform:
    """Rigid transform combining the rotation block of a Rotate and the offset of a Move."""

    def __init__(self, rotate: Rotate, move: Move) -> None:
        self.matrix: np.ndarray = np.identity(4)
        self.matrix[0:3, 0:3] = rotate.matrix[0:3, 0:3]
        self.matrix[0:3, 3] = move.matrix[0:3, 3]

    @classmethod
    def from_pose(
        cls,
        x: float,
        y: float,
        z: float,
        roll: float,
        pitch: float,
        yaw: float,
    ) -> "Transform":
        """Build a transform from a position and roll/pitch/yaw angles in radians."""
        return cls(Rotate(roll, pitch, yaw), Move(x, y, z))