"""Tests for the faceted map renderer (Agg backend, no display)."""

import matplotlib.pyplot as plt
import numpy as np
import pytest

from spatialaccuracy.core.batch_workflow import evaluate_stack
from spatialaccuracy.domain.models import MapStyle, PolygonSet, RasterStack
from spatialaccuracy.reporting.chart_renderer import (
    class_colors,
    class_order,
    figure_to_png,
    grid_from_long,
    polygon_paths,
    render_facet_map,
)
from spatialaccuracy.reporting.facet_map import build_long_table, facet_labels

from conftest import make_layer


@pytest.fixture
def long_table(two_layer_stack, top_left_block):
    table = evaluate_stack(two_layer_stack, top_left_block, "ASM")
    return build_long_table(two_layer_stack, table), facet_labels(table)


class TestClassColours:

    def test_target_first(self):
        assert class_order(["Non.ASM", "x", "ASM"], "ASM", "Non.ASM") == ["ASM", "Non.ASM", "x"]

    def test_colours(self):
        colors = class_colors(["ASM", "Non.ASM", "x"], "ASM", "Non.ASM", MapStyle())
        assert colors == ["red", "aliceblue", "lightgrey"]


class TestGridFromLong:

    def test_rebuilds_layer_grid(self, long_table, two_layer_stack):
        long_df, labels = long_table
        facet = long_df[long_df["Layer"] == "a_layer"]
        grid, extent = grid_from_long(facet, ["ASM", "Non.ASM"])

        expected = (two_layer_stack["a_layer"].values == 2).astype(float)
        np.testing.assert_array_equal(grid, expected)
        assert extent == (500000.0, 500040.0, 4000000.0, 4000040.0)

    def test_empty_interior_column_keeps_its_place(self, asm_values, top_left_block):
        """A column of missing cells stays in the grid as NaN."""
        values = asm_values.astype(float)
        values[:, 1] = np.nan
        stack = RasterStack((make_layer("gap", values),))
        table = evaluate_stack(stack, top_left_block, "ASM")
        long_df = build_long_table(stack, table)

        grid, extent = grid_from_long(long_df, ["ASM", "Non.ASM"])
        assert grid.shape == (4, 4)
        assert np.isnan(grid[:, 1]).all()
        assert grid[3, 3] == 1.0
        assert grid[0, 2] == 0.0
        assert extent == (500000.0, 500040.0, 4000000.0, 4000040.0)


class TestRenderFacetMap:

    def test_one_panel_per_layer_in_order(self, long_table, top_left_block):
        long_df, labels = long_table
        fig = render_facet_map(long_df, "ASM", "Non.ASM", polygons=top_left_block,
                               style=MapStyle(ncol_facet=3))
        try:
            visible = [ax for ax in fig.axes if ax.get_visible()]
            assert [ax.get_title() for ax in visible] == [labels["z_layer"], labels["a_layer"]]
            # one polygon patch per panel
            assert all(len(ax.patches) == 1 for ax in visible)
        finally:
            plt.close(fig)

    def test_facet_columns(self, long_table):
        long_df, _ = long_table
        fig = render_facet_map(long_df, "ASM", "Non.ASM", style=MapStyle(ncol_facet=1))
        try:
            assert len(fig.axes) == 2
            positions = [ax.get_position() for ax in fig.axes]
            assert positions[0].y0 > positions[1].y0
        finally:
            plt.close(fig)

    def test_png_bytes(self, long_table):
        long_df, _ = long_table
        fig = render_facet_map(long_df, "ASM", "Non.ASM",
                               style=MapStyle(show_polygons=False))
        try:
            png = figure_to_png(fig, dpi=50)
            assert png[:8] == b"\x89PNG\r\n\x1a\n"
        finally:
            plt.close(fig)

    def test_polygon_paths_with_hole(self):
        polys = PolygonSet((
            "MULTIPOLYGON (((0 0, 10 0, 10 10, 0 10, 0 0), (2 2, 4 2, 4 4, 2 4, 2 2)),"
            " ((20 20, 30 20, 30 30, 20 20)))",
        ), "")
        paths = polygon_paths(polys)
        assert len(paths) == 2
        assert len(paths[0].vertices) == 10
