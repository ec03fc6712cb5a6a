"""
Unit tests for grid inference (clustering of OCR edge positions).
"""
import pytest

from table_capture.grid_inference import (
    COLUMN_THRESHOLD,
    ROW_THRESHOLD,
    cluster_positions,
    infer_initial_grid,
)


class TestClusterPositions:

    def test_empty(self):
        assert cluster_positions([], 0.05) == []

    def test_merges_with_midpoint(self):
        assert cluster_positions([0.30, 0.32], 0.05) == pytest.approx([0.31])

    def test_running_midpoint_is_order_dependent(self):
        # 0.30 -> (0.30+0.34)/2 = 0.32 -> (0.32+0.36)/2 = 0.34
        assert cluster_positions([0.36, 0.30, 0.34], 0.05) == pytest.approx([0.34])

    def test_separates_values_beyond_threshold(self):
        assert cluster_positions([0.7, 0.1, 0.4], 0.05) == pytest.approx([0.1, 0.4, 0.7])

    def test_idempotent_on_clustered_input(self):
        once = cluster_positions([0.1, 0.12, 0.4, 0.41, 0.8], COLUMN_THRESHOLD)
        assert cluster_positions(once, COLUMN_THRESHOLD) == once

    def test_already_separated_list_unchanged(self):
        values = [0.1, 0.2, 0.3, 0.6]
        assert cluster_positions(values, ROW_THRESHOLD) == values


class TestInferInitialGrid:

    def test_no_fragments_gives_empty_grid(self):
        grid = infer_initial_grid([])
        assert grid.vertical_lines == []
        assert grid.horizontal_lines == []

    def test_left_margin_column_dropped(self, make_fragment):
        frags = [
            make_fragment("Name", y=0.7, x=0.02),
            make_fragment("Qty", y=0.7, x=0.6),
            make_fragment("Apple", y=0.3, x=0.03),
            make_fragment("3", y=0.3, x=0.62),
        ]
        grid = infer_initial_grid(frags)
        assert grid.vertical_lines == pytest.approx([0.61])

    def test_row_edges_use_top_and_bottom(self, make_fragment):
        frags = [
            make_fragment("Name", y=0.7, x=0.6, height=0.1),
            make_fragment("Apple", y=0.3, x=0.6, height=0.1),
        ]
        grid = infer_initial_grid(frags)
        assert grid.horizontal_lines == pytest.approx([0.3, 0.4, 0.7, 0.8])

    def test_row_edges_near_margins_dropped(self, make_fragment):
        frags = [
            make_fragment("top", y=0.9, x=0.6, height=0.08),     # top edge 0.98
            make_fragment("bottom", y=0.01, x=0.6, height=0.2),  # bottom edge 0.01
        ]
        grid = infer_initial_grid(frags)
        assert grid.horizontal_lines == pytest.approx([0.21, 0.9])
