"""Optimal rigid-body superposition and structural similarity scores."""

from importlib.metadata import PackageNotFoundError, version

from structsuperpose.core import (
    StructureError,
    SVDSuperimposer,
    Transform,
    rmsd,
    superimpose,
    tm_score,
    tm_score_max,
)

try:
    __version__ = version("StructSuperpose")
except PackageNotFoundError:
    __version__ = "0.0.1"  # Fallback for development

__all__ = [
    "SVDSuperimposer",
    "StructureError",
    "Transform",
    "rmsd",
    "superimpose",
    "tm_score",
    "tm_score_max",
]
