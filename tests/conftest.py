"""
Shared test fixtures and helpers for superposition testing
"""

import gemmi
import numpy as np
import pytest
from Bio.PDB.Atom import Atom


def rotation_about_axis(axis, angle_degrees):
    """Column-vector rotation matrix for a right-handed rotation about axis."""
    axis = np.asarray(axis, dtype=float)
    axis = axis / np.linalg.norm(axis)
    theta = np.radians(angle_degrees)
    x, y, z = axis
    cross = np.array([[0, -z, y], [z, 0, -x], [-y, x, 0]])
    return np.eye(3) + np.sin(theta) * cross + (1 - np.cos(theta)) * np.dot(cross, cross)


def rotation_from_quaternion(w, x, y, z):
    """Column-vector rotation matrix from a (not necessarily unit) quaternion."""
    norm = np.sqrt(w * w + x * x + y * y + z * z)
    w, x, y, z = w / norm, x / norm, y / norm, z / norm
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ]
    )


def create_gemmi_atom(x, y, z, name="CA"):
    """Create a GEMMI atom at the given position"""
    atom = gemmi.Atom()
    atom.name = name
    atom.pos = gemmi.Position(x, y, z)
    return atom


def create_biopython_atom(x, y, z, name="CA", serial_number=1):
    """Create a BioPython atom at the given position"""
    return Atom(
        name,
        np.array([x, y, z], dtype="f"),
        20.0,
        1.0,
        " ",
        f" {name:<3}",
        serial_number,
        element=name[0],
    )


@pytest.fixture
def chiral_points():
    """Four non-coplanar points with distinct arm lengths (no mirror symmetry)."""
    return np.array(
        [
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 2.0, 0.0],
            [0.0, 0.0, 3.0],
        ]
    )


@pytest.fixture
def helix_points():
    """Twenty Cα-like points along an ideal α-helix."""
    n = np.arange(20)
    theta = np.radians(100.0) * n
    return np.column_stack([2.3 * np.cos(theta), 2.3 * np.sin(theta), 1.5 * n])
