"""
Similarity scores for superposed point sets

All functions take two index-aligned point sets that the caller has already
superposed; none of them fit a transform except superimpose_structures().
- RMSD: root-mean-square deviation of corresponding points
- TM-score: length-normalized similarity (Zhang & Skolnick, 2004), normalized
  either by the shorter (tm_score) or the longer (tm_score_max) structure
"""

import logging
from collections.abc import Iterable

import numpy as np

from .exceptions import StructureError
from .points import as_coordinates, check_matched
from .superimposer import SVDSuperimposer

logger = logging.getLogger(__name__)

# d0(L) = 1.24 * cbrt(L - 15) - 1.8 (Zhang & Skolnick, 2004)
TM_D0_SCALE = 1.24
TM_D0_OFFSET = 15.0
TM_D0_SHIFT = 1.8


def pair_distances(coords1: np.ndarray | Iterable, coords2: np.ndarray | Iterable) -> np.ndarray:
    """
    Euclidean distance between each pair of corresponding points.

    Args:
        coords1: First point set (N points)
        coords2: Second point set (N points)

    Returns:
        Array of N distances

    Raises:
        StructureError: If the sets differ in length or are empty
    """
    coords1 = as_coordinates(coords1)
    coords2 = as_coordinates(coords2)
    check_matched(coords1, coords2)
    return np.linalg.norm(coords1 - coords2, axis=1)


def rmsd(coords1: np.ndarray | Iterable, coords2: np.ndarray | Iterable) -> float:
    """
    Calculate the RMSD between two pre-superposed point sets.

    Args:
        coords1: Reference coordinates (N x 3)
        coords2: Coordinates to compare (N x 3)

    Returns:
        RMSD in the units of the input (Angstroms for atom coordinates)

    Raises:
        StructureError: If the sets differ in length or are empty
    """
    distances = pair_distances(coords1, coords2)
    return float(np.sqrt(np.mean(distances**2)))


def tm_d0(length: float) -> float:
    """
    Distance scale d0 for a normalization length.

    Uses the real cube root, so lengths below 15 give a negative d0 rather
    than NaN. Only d0 squared enters the score.
    """
    return float(TM_D0_SCALE * np.cbrt(length - TM_D0_OFFSET) - TM_D0_SHIFT)


def _check_full_lengths(n_aligned: int, len1: int, len2: int) -> None:
    if n_aligned > len1:
        raise StructureError(
            f"len1 must be greater or equal to the alignment length ({len1} < {n_aligned})"
        )
    if n_aligned > len2:
        raise StructureError(
            f"len2 must be greater or equal to the alignment length ({len2} < {n_aligned})"
        )


def _tm_score(distances: np.ndarray, length: int) -> float:
    d0 = tm_d0(length)
    if d0 <= 0:
        logger.debug("Non-positive TM-score d0=%.4f for normalization length %d", d0, length)
    terms = 1.0 / (1.0 + (distances / d0) ** 2)
    return float(np.sum(terms) / length)


def tm_score(
    coords1: np.ndarray | Iterable,
    coords2: np.ndarray | Iterable,
    len1: int,
    len2: int,
) -> float:
    """
    Calculate the TM-score of a superposition, normalized by the shorter structure.

    TM = 1/L * sum_i 1 / (1 + (d_i/d0)^2) with L = min(len1, len2) and
    d0 = 1.24 * cbrt(L - 15) - 1.8.

    Args:
        coords1: Aligned, pre-superposed points of structure 1
        coords2: Aligned, pre-superposed points of structure 2
        len1: Full length of the structure supplying coords1
        len2: Full length of the structure supplying coords2

    Returns:
        TM-score in (0, 1]

    Raises:
        StructureError: If the sets differ in length or are empty, or if the
            alignment is longer than either full length

    Reference:
        Zhang Y & Skolnick J (2004) "Scoring function for automated assessment
        of protein structure template quality" Proteins 57: 702-710
    """
    distances = pair_distances(coords1, coords2)
    _check_full_lengths(len(distances), len1, len2)
    return _tm_score(distances, min(len1, len2))


def tm_score_max(
    coords1: np.ndarray | Iterable,
    coords2: np.ndarray | Iterable,
    len1: int,
    len2: int,
) -> float:
    """
    Calculate the TM-score normalized by the longer structure.

    Same formula and preconditions as tm_score(), with L = max(len1, len2)
    used for both d0 and the final normalization.
    """
    distances = pair_distances(coords1, coords2)
    _check_full_lengths(len(distances), len1, len2)
    return _tm_score(distances, max(len1, len2))


def calculate_orientation_error(rotation_matrix: np.ndarray) -> float:
    """
    Calculate orientation error in degrees from rotation matrix.

    Args:
        rotation_matrix: 3x3 rotation matrix

    Returns:
        Rotation angle in degrees
    """
    # trace(R) = 1 + 2*cos(θ)
    trace = np.trace(rotation_matrix)
    cos_theta = np.clip((trace - 1) / 2, -1, 1)
    return float(np.degrees(np.arccos(cos_theta)))


def calculate_translational_error(translation_vector: np.ndarray) -> float:
    """Length of a translation vector."""
    return float(np.linalg.norm(translation_vector))


def superimpose_structures(
    fixed_coords: np.ndarray | Iterable, moving_coords: np.ndarray | Iterable
) -> tuple[float, np.ndarray, np.ndarray]:
    """
    Superimpose moving onto fixed and report the fit.

    Args:
        fixed_coords: Reference coordinates
        moving_coords: Coordinates to move, index-aligned with fixed_coords

    Returns:
        tuple: (rmsd, rotation_matrix, translation_vector)
    """
    fixed_coords = as_coordinates(fixed_coords)
    moving_coords = as_coordinates(moving_coords)

    superimposer = SVDSuperimposer(fixed_coords, moving_coords)
    moved = superimposer.transform.apply(moving_coords)
    return rmsd(fixed_coords, moved), superimposer.rotation, superimposer.translation
