"""
Optimal rigid-body superposition of matched point sets

Implements the Kabsch solution: center both sets, take the SVD of the
cross-covariance matrix and build the least-squares rotation, flipping the
smallest singular direction when the SVD yields a reflection.

Rotations follow the row-vector convention used by Bio.SVDSuperimposer:
a moving point x lands on the fixed frame at x @ rotation + translation.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import gemmi
import numpy as np

from .exceptions import StructureError
from .points import as_coordinates, center, centroid, check_matched, to_homogeneous

logger = logging.getLogger(__name__)


def _read_only(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=float)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class Transform:
    """
    Rotation and translation mapping moving coordinates onto the fixed frame.

    Both arrays are stored as read-only copies, so a Transform can be shared
    freely once built.

    Attributes:
        rotation: 3x3 proper rotation (row-vector convention)
        translation: Translation vector applied after rotation
    """

    rotation: np.ndarray
    translation: np.ndarray

    def __post_init__(self) -> None:
        rotation = _read_only(self.rotation)
        translation = _read_only(self.translation).ravel()
        if rotation.shape != (3, 3):
            raise StructureError(f"Rotation must be 3x3, got shape {rotation.shape}")
        if translation.shape != (3,):
            raise StructureError(f"Translation must have 3 components, got {translation.size}")
        object.__setattr__(self, "rotation", rotation)
        object.__setattr__(self, "translation", translation)

    @property
    def matrix(self) -> np.ndarray:
        """4x4 homogeneous matrix acting on column vectors [x, y, z, 1]."""
        return to_homogeneous(self.rotation, self.translation)

    @property
    def rotran(self) -> tuple[np.ndarray, np.ndarray]:
        """(rotation, translation) pair as used by Bio.PDB Atom.transform()."""
        return self.rotation, self.translation

    def apply(self, points: np.ndarray | Iterable) -> np.ndarray:
        """
        Map points from the moving frame into the fixed frame.

        Works for any point set taken from the moving structure, not only
        the subset the transform was fitted on.

        Args:
            points: Point set in the moving frame (see as_coordinates)

        Returns:
            New (N, 3) array of transformed coordinates
        """
        coords = as_coordinates(points)
        return np.dot(coords, self.rotation) + self.translation

    def to_gemmi(self) -> gemmi.Transform:
        """Return an equivalent gemmi.Transform (column-vector convention)."""
        transform = gemmi.Transform()
        transform.mat.fromlist(self.rotation.T.tolist())
        transform.vec.fromlist(self.translation.tolist())
        return transform


class SVDSuperimposer:
    """
    Least-squares superposition of a moving point set onto a fixed one.

    All work happens in the constructor; afterwards the instance only
    exposes read-only results.

    Example:
        >>> sup = SVDSuperimposer(fixed_coords, moving_coords)
        >>> moved = sup.transform.apply(moving_structure_coords)
        >>> sup.rotation, sup.translation
    """

    __slots__ = (
        "_centroid_fixed",
        "_centroid_moving",
        "_singular_values",
        "_reflection_corrected",
        "_transform",
        "_size",
    )

    def __init__(self, fixed: np.ndarray | Iterable, moving: np.ndarray | Iterable) -> None:
        """
        Superimpose moving onto fixed.

        Args:
            fixed: Reference point set (N points), left in place
            moving: Point set to be moved (N points), index-aligned with fixed

        Raises:
            StructureError: If the sets differ in length or are empty
        """
        fixed_coords = as_coordinates(fixed)
        moving_coords = as_coordinates(moving)
        self._size = check_matched(fixed_coords, moving_coords)

        logger.debug("Superimposing %d matched point pairs", self._size)

        self._centroid_fixed = _read_only(centroid(fixed_coords))
        self._centroid_moving = _read_only(centroid(moving_coords))

        a = center(fixed_coords, self._centroid_fixed)
        b = center(moving_coords, self._centroid_moving)

        # Cross-covariance: moving transposed times fixed
        correlation_matrix = np.dot(b.T, a)

        # numpy returns V already transposed (vh)
        u, singular_values, vh = np.linalg.svd(correlation_matrix)
        self._singular_values = _read_only(singular_values)

        rotation = np.dot(u, vh)

        # Negative determinant means the SVD found a reflection
        det = np.linalg.det(rotation)
        self._reflection_corrected = bool(det < 0)
        if self._reflection_corrected:
            logger.debug(
                "SVD gave a reflection (det=%.6f); flipping smallest singular direction", det
            )
            vh[2, :] *= -1
            rotation = np.dot(u, vh)

        translation = self._centroid_fixed - np.dot(self._centroid_moving, rotation)

        self._transform = Transform(rotation, translation)

    @property
    def rotation(self) -> np.ndarray:
        """3x3 rotation matrix with determinant +1."""
        return self._transform.rotation

    @property
    def translation(self) -> np.ndarray:
        """Shift vector applied after rotation."""
        return self._transform.translation

    @property
    def transformation(self) -> np.ndarray:
        """Combined 4x4 homogeneous transform."""
        return self._transform.matrix

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def centroid_fixed(self) -> np.ndarray:
        return self._centroid_fixed

    @property
    def centroid_moving(self) -> np.ndarray:
        return self._centroid_moving

    @property
    def singular_values(self) -> np.ndarray:
        """Singular values of the cross-covariance matrix, descending."""
        return self._singular_values

    @property
    def reflection_corrected(self) -> bool:
        """True when the unconstrained SVD solution was a reflection and got fixed."""
        return self._reflection_corrected

    @property
    def size(self) -> int:
        """Number of matched point pairs."""
        return self._size

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self._size}, "
            f"reflection_corrected={self._reflection_corrected})"
        )


def superimpose(fixed: np.ndarray | Iterable, moving: np.ndarray | Iterable) -> Transform:
    """
    Compute the transform that best superimposes moving onto fixed.

    Args:
        fixed: Reference point set
        moving: Point set to move, index-aligned with fixed

    Returns:
        Transform with rotation (det +1) and translation

    Raises:
        StructureError: If the sets differ in length or are empty
    """
    return SVDSuperimposer(fixed, moving).transform
