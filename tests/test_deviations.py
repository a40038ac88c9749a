"""Tests for per-pair deviation analysis."""

import numpy as np
import pandas as pd
import pytest

from structsuperpose.analysis.deviations import (
    DEVIATION_COLUMNS,
    DeviationStatistics,
    deviation_table,
    per_label_rmsd,
    save_to_csv,
    summarize_deviations,
)
from structsuperpose.core.exceptions import StructureError
from structsuperpose.core.scoring import rmsd


@pytest.fixture
def residue_pairs():
    """Six atom pairs from three residues, two atoms each."""
    fixed = np.zeros((6, 3))
    moving = np.array(
        [
            [1.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 3.0, 0.0],
            [0.0, 0.0, 4.0],
            [0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0],
        ]
    )
    labels = ["A:1", "A:1", "A:2", "A:2", "A:3", "A:3"]
    return fixed, moving, labels


class TestDeviationTable:
    """Test deviation table construction."""

    def test_columns_and_values(self, residue_pairs):
        fixed, moving, labels = residue_pairs
        table = deviation_table(fixed, moving, labels)

        assert list(table.columns) == DEVIATION_COLUMNS
        assert len(table) == 6
        np.testing.assert_allclose(table["distance"], [1.0, 1.0, 3.0, 4.0, 0.0, 0.0])
        np.testing.assert_allclose(table["squared_distance"], [1.0, 1.0, 9.0, 16.0, 0.0, 0.0])

    def test_default_labels(self):
        table = deviation_table(np.zeros((3, 3)), np.ones((3, 3)))
        assert list(table["label"]) == ["0", "1", "2"]
        assert list(table["index"]) == [0, 1, 2]

    def test_label_count_mismatch(self):
        with pytest.raises(StructureError, match="labels"):
            deviation_table(np.zeros((3, 3)), np.zeros((3, 3)), ["a", "b"])

    def test_length_mismatch(self):
        with pytest.raises(StructureError):
            deviation_table(np.zeros((3, 3)), np.zeros((2, 3)))


class TestPerLabelRMSD:
    """Test grouped RMSD."""

    def test_grouped_rmsd(self, residue_pairs):
        fixed, moving, labels = residue_pairs
        result = per_label_rmsd(deviation_table(fixed, moving, labels))

        assert list(result) == ["A:1", "A:2", "A:3"]
        assert result["A:1"] == pytest.approx(1.0)
        assert result["A:2"] == pytest.approx(np.sqrt((9.0 + 16.0) / 2))
        assert result["A:3"] == 0.0


class TestSummary:
    """Test summary statistics."""

    def test_summary_matches_rmsd(self, residue_pairs):
        fixed, moving, labels = residue_pairs
        stats = summarize_deviations(deviation_table(fixed, moving, labels))

        assert stats.count == 6
        assert stats.rmsd == pytest.approx(rmsd(fixed, moving))
        assert stats.mean_distance == pytest.approx(9.0 / 6)
        assert stats.max_distance == 4.0

    def test_empty_table(self):
        stats = summarize_deviations(pd.DataFrame(columns=DEVIATION_COLUMNS))
        assert stats == DeviationStatistics(0, 0.0, 0.0, 0.0)


class TestCSVExport:
    """Test CSV export."""

    def test_save_creates_directories(self, residue_pairs, tmp_path):
        fixed, moving, labels = residue_pairs
        table = deviation_table(fixed, moving, labels)
        output_path = tmp_path / "analysis" / "deviations.csv"

        save_to_csv(table, output_path)

        assert output_path.exists()
        loaded = pd.read_csv(output_path)
        assert list(loaded.columns) == DEVIATION_COLUMNS
        np.testing.assert_allclose(loaded["distance"], table["distance"])

    def test_save_failure(self, residue_pairs, tmp_path):
        fixed, moving, labels = residue_pairs
        table = deviation_table(fixed, moving, labels)
        blocker = tmp_path / "not_a_directory"
        blocker.write_text("")

        with pytest.raises(OSError, match="Failed to save CSV"):
            save_to_csv(table, blocker / "deviations.csv")
