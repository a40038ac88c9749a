"""
Deviation analysis modules
"""

from structsuperpose.analysis.deviations import (
    DeviationStatistics,
    deviation_table,
    per_label_rmsd,
    save_to_csv,
    summarize_deviations,
)

__all__ = [
    "DeviationStatistics",
    "deviation_table",
    "per_label_rmsd",
    "save_to_csv",
    "summarize_deviations",
]
