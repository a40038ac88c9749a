"""
Point-set accessors shared by the solver and the scoring functions

Every public operation takes its points through as_coordinates(), which
returns a fresh (N, 3) float array. Supported inputs:
- numpy arrays of shape (N, 3)
- sequences of (x, y, z) triples
- sequences of GEMMI atoms or positions (atom.pos / Position.x,y,z)
- sequences of BioPython atoms (atom.get_coord())
"""

from collections.abc import Iterable

import gemmi
import numpy as np
from Bio.PDB.Atom import Atom

from .exceptions import StructureError


def _point_to_xyz(point) -> tuple[float, float, float]:
    """Read one point as an (x, y, z) tuple."""
    if isinstance(point, gemmi.Atom):
        point = point.pos
    if isinstance(point, gemmi.Vec3):
        return point.x, point.y, point.z
    if isinstance(point, Atom):
        x, y, z = point.get_coord()
        return float(x), float(y), float(z)

    try:
        x, y, z = point
        return float(x), float(y), float(z)
    except (TypeError, ValueError) as e:
        raise StructureError(f"Cannot read {point!r} as a 3D point") from e


def as_coordinates(points: np.ndarray | Iterable) -> np.ndarray:
    """
    Convert a point set to an (N, 3) float64 array.

    The result is always a copy, so callers can center or transform it
    without touching the input.

    Args:
        points: Array of shape (N, 3) or an iterable of points/atoms

    Returns:
        New (N, 3) coordinate array

    Raises:
        StructureError: If the input cannot be read as N 3D points
    """
    if isinstance(points, np.ndarray):
        coords = np.array(points, dtype=float)
    else:
        coords = np.array([_point_to_xyz(point) for point in points], dtype=float)

    if coords.size == 0:
        coords = coords.reshape(0, 3)

    if coords.ndim != 2 or coords.shape[1] != 3:
        raise StructureError(f"Expected an (N, 3) point set, got shape {coords.shape}")

    return coords


def check_matched(fixed: np.ndarray, moving: np.ndarray) -> int:
    """
    Check that two coordinate arrays form a usable index-aligned pair.

    Args:
        fixed: Fixed coordinates (N x 3)
        moving: Moving coordinates (N x 3)

    Returns:
        Number of matched points N

    Raises:
        StructureError: If the sets differ in length or are empty
    """
    if len(fixed) != len(moving):
        raise StructureError(
            f"The two point sets are not of same length. "
            f"Got {len(fixed)} and {len(moving)}"
        )
    if len(fixed) == 0:
        raise StructureError("Point sets must contain at least one point")
    return len(fixed)


def centroid(coords: np.ndarray) -> np.ndarray:
    """Arithmetic mean position of an (N, 3) coordinate array."""
    return np.mean(coords, axis=0)


def center(coords: np.ndarray, origin: np.ndarray | None = None) -> np.ndarray:
    """Return a copy of coords shifted so that origin (default: centroid) sits at zero."""
    if origin is None:
        origin = centroid(coords)
    return coords - origin


def to_homogeneous(rotation: np.ndarray, translation: np.ndarray) -> np.ndarray:
    """
    Build a 4x4 homogeneous transform from a row-vector rotation and translation.

    The rotation is applied to row vectors (x @ rotation + translation), so the
    column-vector matrix carries its transpose:

        matrix @ [x, y, z, 1] == [x @ rotation + translation, 1]

    Args:
        rotation: 3x3 rotation matrix (row-vector convention)
        translation: Translation vector of length 3

    Returns:
        4x4 affine transformation matrix
    """
    matrix = np.eye(4)
    matrix[:3, :3] = rotation.T
    matrix[:3, 3] = translation
    return matrix
