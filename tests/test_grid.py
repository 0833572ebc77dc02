"""
Grid map layout tests.

1. Layout fit - uniform square cells, centred bounding box
2. Failures - empty, duplicate, bad viewport
3. Projection - cell corners, north-up y axis, flow arrows
"""
import math

import pytest

from chart_builder.errors import DuplicateGridCell, EmptyDataset, InvalidViewport, LayoutError
from chart_builder.grid import (
    FlowArrow, GridCell, cell_center, cell_to_pixel, compute_layout, flow_segments, flows_from_rows,
    load_grid_cells,
)
from chart_builder.io_utils import read_geojson

SQUARE = [(0, 0), (1, 0), (0, 1), (1, 1)]


# =============================================================================
# LAYOUT FIT
# =============================================================================

class TestComputeLayout:

    def test_square_grid_fits_and_is_centred(self):
        layout = compute_layout(SQUARE, 500, 500, 40)
        assert 2 * layout.cell_size <= 420
        assert layout.cell_size == pytest.approx(210)
        assert layout.offset_x == layout.offset_y == pytest.approx(40)
        assert (layout.min_x, layout.max_x, layout.min_y, layout.max_y) == (0, 1, 0, 1)

    def test_uses_one_cell_size_for_both_axes(self):
        layout = compute_layout([(0, 0), (3, 0)], 500, 500, 40)
        assert layout.cell_size == pytest.approx(105)
        assert layout.offset_x == pytest.approx(40)
        assert layout.offset_y == pytest.approx(197.5)

    def test_accepts_grid_cells(self):
        cells = [GridCell(x, y) for x, y in SQUARE]
        assert compute_layout(cells, 500, 500, 40) == compute_layout(SQUARE, 500, 500, 40)

    def test_negative_coordinates(self):
        layout = compute_layout([(-2, -1), (0, 1)], 300, 300, 0)
        assert layout.cell_size == pytest.approx(100)
        assert (layout.min_x, layout.max_y) == (-2, 1)


# =============================================================================
# FAILURES
# =============================================================================

class TestLayoutFailures:

    def test_empty_cells(self):
        with pytest.raises(EmptyDataset):
            compute_layout([], 500, 500, 40)

    def test_duplicate_cells(self):
        with pytest.raises(DuplicateGridCell):
            compute_layout([(0, 0), (1, 1), (0, 0)], 500, 500, 40)

    @pytest.mark.parametrize("w,h", [(0, 500), (500, -1), (float("nan"), 500), (500, float("inf"))])
    def test_bad_viewport(self, w, h):
        with pytest.raises(InvalidViewport):
            compute_layout(SQUARE, w, h, 40)

    def test_padding_consumes_viewport(self):
        with pytest.raises(InvalidViewport):
            compute_layout(SQUARE, 80, 80, 40)

    def test_failures_share_a_base_class(self):
        with pytest.raises(LayoutError):
            compute_layout([], 500, 500, 0)


# =============================================================================
# PROJECTION
# =============================================================================

class TestProjection:

    @pytest.fixture
    def layout(self):
        return compute_layout(SQUARE, 500, 500, 40)

    def test_cell_corners(self, layout):
        assert cell_to_pixel((0, 0), layout) == pytest.approx((40, 250))
        assert cell_to_pixel((1, 1), layout) == pytest.approx((250, 40))

    def test_larger_grid_y_renders_higher(self, layout):
        _, y_low = cell_to_pixel((0, 0), layout)
        _, y_high = cell_to_pixel((0, 1), layout)
        assert y_high < y_low

    def test_cells_do_not_overlap(self):
        layout = compute_layout([(0, 0), (1, 0), (2, 1)], 400, 300, 10)
        xs = sorted(cell_to_pixel(c, layout)[0] for c in [(0, 0), (1, 0), (2, 1)])
        assert all(b - a >= layout.cell_size - 1e-9 for a, b in zip(xs, xs[1:]))

    def test_cell_center(self, layout):
        assert cell_center((0, 0), layout) == pytest.approx((145, 355))

    def test_flow_segments_shrink_and_scale(self, layout):
        flows = [FlowArrow((0, 0), (1, 0), 10.0), FlowArrow((0, 0), (0, 1), 5.0)]
        segs = flow_segments(flows, layout, max_width=6.0, shrink=0.3)
        assert (segs[0].x1, segs[0].x2) == pytest.approx((208, 292))
        assert segs[0].y1 == segs[0].y2 == pytest.approx(355)
        assert segs[0].width == pytest.approx(6.0)
        assert segs[1].width == pytest.approx(3.0)
        assert segs[1].y2 < segs[1].y1

    def test_no_flows(self, layout):
        assert flow_segments([], layout) == []

    def test_flows_from_rows(self):
        flows = flows_from_rows([{"from_x": "1", "from_y": "2", "to_x": "3", "to_y": "4", "value": "7.5"}])
        assert flows == [FlowArrow((1, 2), (3, 4), 7.5)]

    def test_flows_missing_columns(self):
        with pytest.raises(ValueError, match="from_x"):
            flows_from_rows([{"src": "1", "dst": "2"}])


# =============================================================================
# GEOJSON FEATURES
# =============================================================================

class TestLoadGridCells:

    def test_reads_grid_properties(self):
        features = [
            {"type": "Feature", "properties": {"grid_x": 3, "grid_y": "7", "level": 2, "name": "臺北"}},
            {"type": "Feature", "properties": {"grid_x": 4, "grid_y": 7}},
        ]
        cells = load_grid_cells(features)
        assert (cells[0].grid_x, cells[0].grid_y, cells[0].level) == (3, 7, 2)
        assert cells[0].properties == {"name": "臺北"}
        assert cells[1].level is None

    def test_level_out_of_range(self):
        with pytest.raises(ValueError):
            load_grid_cells([{"properties": {"grid_x": 0, "grid_y": 0, "level": 6}}])

    def test_missing_coordinates(self):
        with pytest.raises(ValueError):
            load_grid_cells([{"properties": {"grid_x": 0}}])

    def test_geojson_must_be_a_feature_collection(self, tmp_path):
        path = tmp_path / "grid.geojson"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ValueError):
            read_geojson(path)
