"""
Per-pair deviation analysis for superposed point sets.

Turns two superposed, index-aligned point sets into a table of per-pair
distances that can be grouped by label (for example a residue id shared by
all atoms of that residue) and exported to CSV.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from structsuperpose.core.exceptions import StructureError
from structsuperpose.core.scoring import pair_distances

logger = logging.getLogger(__name__)

DEVIATION_COLUMNS = ["index", "label", "distance", "squared_distance"]


@dataclass
class DeviationStatistics:
    """
    Summary of a deviation table.

    Attributes:
        count: Number of point pairs
        rmsd: Root-mean-square of the pair distances
        mean_distance: Mean pair distance
        max_distance: Largest pair distance
    """

    count: int
    rmsd: float
    mean_distance: float
    max_distance: float


def deviation_table(
    fixed_coords: np.ndarray | Iterable,
    moving_coords: np.ndarray | Iterable,
    labels: Sequence[str] | None = None,
) -> pd.DataFrame:
    """
    Tabulate the deviation of each corresponding point pair.

    Args:
        fixed_coords: Reference coordinates (N x 3)
        moving_coords: Superposed coordinates (N x 3)
        labels: Optional label per pair; defaults to the pair index

    Returns:
        DataFrame with columns: index, label, distance, squared_distance

    Raises:
        StructureError: If the sets differ in length or are empty, or if the
            number of labels does not match
    """
    distances = pair_distances(fixed_coords, moving_coords)

    if labels is None:
        labels = [str(i) for i in range(len(distances))]
    elif len(labels) != len(distances):
        raise StructureError(
            f"Got {len(labels)} labels for {len(distances)} point pairs"
        )

    return pd.DataFrame(
        {
            "index": np.arange(len(distances)),
            "label": list(labels),
            "distance": distances,
            "squared_distance": distances**2,
        },
        columns=DEVIATION_COLUMNS,
    )


def per_label_rmsd(table: pd.DataFrame) -> dict[str, float]:
    """
    Calculate RMSD for each label group of a deviation table.

    Args:
        table: Output of deviation_table()

    Returns:
        Dict mapping label to RMSD, in order of first appearance
    """
    grouped = table.groupby("label", sort=False)["squared_distance"].mean()
    return {str(label): float(np.sqrt(msd)) for label, msd in grouped.items()}


def summarize_deviations(table: pd.DataFrame) -> DeviationStatistics:
    """Summary statistics for a deviation table."""
    if table.empty:
        return DeviationStatistics(0, 0.0, 0.0, 0.0)

    return DeviationStatistics(
        count=len(table),
        rmsd=float(np.sqrt(table["squared_distance"].mean())),
        mean_distance=float(table["distance"].mean()),
        max_distance=float(table["distance"].max()),
    )


def save_to_csv(table: pd.DataFrame, output_path: Path) -> None:
    """
    Export a deviation table to CSV file.

    Creates parent directories if they don't exist.

    Args:
        table: Output of deviation_table()
        output_path: Path where CSV file should be saved

    Raises:
        OSError: If file cannot be written
    """
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(output_path, index=False)
    except Exception as e:
        raise OSError(f"Failed to save CSV to {output_path}: {e}") from e
    logger.info("Saved %d deviations to %s", len(table), output_path)
