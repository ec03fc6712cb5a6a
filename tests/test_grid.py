"""
Unit tests for GridModel mutations.
"""
import pytest

from table_capture.errors import DegenerateGrid
from table_capture.grid import GridModel, widest_gap_midpoint
from table_capture.structures import Axis, GridSelection


class TestAddLines:

    def test_first_column_goes_to_middle(self):
        grid = GridModel()
        assert grid.add_column() == 0.5
        assert grid.vertical_lines == [0.5]

    def test_first_row_goes_to_middle(self):
        grid = GridModel()
        assert grid.add_row() == 0.5
        assert grid.horizontal_lines == [0.5]

    def test_picks_largest_gap(self):
        grid = GridModel(vertical_lines=[0.2, 0.3])
        assert grid.add_column() == pytest.approx(0.65)
        assert grid.vertical_lines == pytest.approx([0.2, 0.3, 0.65])

    def test_uses_sorted_order_but_keeps_insertion_order(self):
        grid = GridModel(horizontal_lines=[0.9, 0.1])
        assert grid.add_row() == pytest.approx(0.5)
        assert grid.horizontal_lines == pytest.approx([0.9, 0.1, 0.5])

    def test_leading_boundary_gap(self):
        grid = GridModel(vertical_lines=[0.8, 0.9])
        assert grid.add_column() == pytest.approx(0.4)

    def test_tie_goes_to_first_gap(self):
        assert widest_gap_midpoint([0.25, 0.5, 0.75]) == 0.125

    def test_repeated_adds(self):
        grid = GridModel()
        grid.add_column()
        grid.add_column()
        assert grid.vertical_lines == [0.5, 0.25]


class TestRemoveLine:

    def test_remove_selected(self):
        grid = GridModel(vertical_lines=[0.2, 0.5])
        grid.select(Axis.VERTICAL, 0)
        assert grid.remove_line() == 0.2
        assert grid.vertical_lines == [0.5]
        assert grid.selection is None

    def test_remove_explicit_selection(self):
        grid = GridModel(horizontal_lines=[0.2, 0.5])
        grid.remove_line(GridSelection(Axis.HORIZONTAL, 1))
        assert grid.horizontal_lines == [0.2]

    def test_out_of_range_is_noop(self):
        grid = GridModel(vertical_lines=[0.2], horizontal_lines=[0.4])
        grid.select(Axis.VERTICAL, 5)
        assert grid.remove_line() is None
        assert grid.vertical_lines == [0.2]
        assert grid.horizontal_lines == [0.4]
        assert grid.selection is None

    def test_negative_index_is_noop(self):
        grid = GridModel(vertical_lines=[0.2])
        grid.remove_line(GridSelection(Axis.VERTICAL, -1))
        assert grid.vertical_lines == [0.2]

    def test_string_axis_selection(self):
        grid = GridModel(vertical_lines=[0.5], horizontal_lines=[0.3])
        assert grid.remove_line(GridSelection("vertical", 0)) == 0.5
        assert grid.vertical_lines == []
        assert grid.horizontal_lines == [0.3]
        assert grid.select("horizontal", 0).axis is Axis.HORIZONTAL

    def test_invalid_axis_rejected_before_mutation(self):
        grid = GridModel(vertical_lines=[0.5])
        with pytest.raises(ValueError):
            grid.remove_line(GridSelection("diagonal", 0))
        assert grid.vertical_lines == [0.5]

    def test_nothing_selected(self):
        grid = GridModel(vertical_lines=[0.2])
        assert grid.remove_line() is None
        assert grid.vertical_lines == [0.2]


class TestClearAndMove:

    def test_clear_all(self):
        grid = GridModel(vertical_lines=[0.2], horizontal_lines=[0.3])
        grid.select(Axis.HORIZONTAL, 0)
        grid.clear_all()
        assert grid.is_empty
        assert grid.selection is None

    @pytest.mark.parametrize("value, expected", [(-0.5, 0.01), (0.0, 0.01), (0.42, 0.42), (1.0, 0.99), (3.0, 0.99)])
    def test_set_line_position_clamps(self, value, expected):
        grid = GridModel(vertical_lines=[0.5])
        assert grid.set_line_position(Axis.VERTICAL, 0, value) == expected
        assert grid.vertical_lines == [expected]

    def test_set_line_position_missing_index(self):
        grid = GridModel()
        with pytest.raises(IndexError):
            grid.set_line_position(Axis.HORIZONTAL, 0, 0.5)


class TestValidate:

    def test_shape(self):
        assert GridModel(vertical_lines=[0.5], horizontal_lines=[0.2, 0.7]).shape == (3, 2)

    @pytest.mark.parametrize("bad", [0.0, 1.0, -0.1, 1.5, float("nan")])
    def test_rejects_out_of_range(self, bad):
        with pytest.raises(DegenerateGrid):
            GridModel(horizontal_lines=[bad]).validate()

    def test_copy_is_independent(self):
        grid = GridModel(vertical_lines=[0.5])
        clone = grid.copy()
        clone.add_column()
        assert grid.vertical_lines == [0.5]
