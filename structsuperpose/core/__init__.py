"""Core modules for superposition and similarity scoring."""

from structsuperpose.core.exceptions import StructureError
from structsuperpose.core.points import as_coordinates, center, centroid, to_homogeneous
from structsuperpose.core.scoring import (
    calculate_orientation_error,
    calculate_translational_error,
    pair_distances,
    rmsd,
    superimpose_structures,
    tm_d0,
    tm_score,
    tm_score_max,
)
from structsuperpose.core.superimposer import SVDSuperimposer, Transform, superimpose

__all__ = [
    "SVDSuperimposer",
    "StructureError",
    "Transform",
    "as_coordinates",
    "calculate_orientation_error",
    "calculate_translational_error",
    "center",
    "centroid",
    "pair_distances",
    "rmsd",
    "superimpose",
    "superimpose_structures",
    "tm_d0",
    "tm_score",
    "tm_score_max",
    "to_homogeneous",
]
