"""Tests for facet labels and the long-form pixel table."""

import pytest

from spatialaccuracy.core.batch_workflow import evaluate_stack
from spatialaccuracy.domain.metrics import compute_layer_metrics
from spatialaccuracy.domain.models import ConfusionCounts, RasterStack
from spatialaccuracy.reporting.facet_map import (
    LabelMode,
    as_label_mode,
    build_long_table,
    facet_label,
    facet_labels,
)

from conftest import make_layer


@pytest.fixture
def example_metrics():
    # UA = 4/15, PA = 1, F1 = 8/19, SCR = 4/15
    return compute_layer_metrics(ConfusionCounts(4, 0, 11), 100.0, 400.0, layer_name="model_a")


class TestFacetLabel:

    def test_accuracy_mode(self, example_metrics):
        assert facet_label(example_metrics, "accuracy") == (
            "model_a\nUA=26.7% | PA=100.0% | F1=42.1%"
        )

    def test_scr_mode(self, example_metrics):
        assert facet_label(example_metrics, LabelMode.SCR) == "model_a\nSCR=0.27"

    def test_both_mode(self, example_metrics):
        assert facet_label(example_metrics, "both") == "model_a\nF1=42.1% | SCR=0.27"

    def test_undefined_renders_na(self):
        m = compute_layer_metrics(ConfusionCounts(0, 4, 0), 100.0, 400.0, layer_name="empty")
        assert facet_label(m, "accuracy") == "empty\nUA=NA% | PA=0.0% | F1=NA%"
        assert facet_label(m, "scr") == "empty\nSCR=NA"

    def test_invalid_mode(self):
        with pytest.raises(ValueError, match="accuracy, scr, both"):
            as_label_mode("kappa")


class TestLongTable:

    def test_facet_order_follows_input(self, two_layer_stack, top_left_block):
        table = evaluate_stack(two_layer_stack, top_left_block, "ASM")
        long_df = build_long_table(two_layer_stack, table, "scr")

        labels = facet_labels(table, "scr")
        assert list(long_df["Layer"].cat.categories) == ["z_layer", "a_layer"]
        assert list(long_df["label"].cat.categories) == [labels["z_layer"], labels["a_layer"]]
        assert list(long_df.columns) == ["x", "y", "Layer", "Class", "label"]

    def test_one_row_per_cell_per_layer(self, two_layer_stack, top_left_block):
        table = evaluate_stack(two_layer_stack, top_left_block, "ASM")
        long_df = build_long_table(two_layer_stack, table)
        assert len(long_df) == 32
        z = long_df[long_df["Layer"] == "z_layer"]
        assert (z["Class"] == "ASM").sum() == 15
        assert (z["Class"] == "Non.ASM").sum() == 1

    def test_cell_centre_coordinates(self, two_layer_stack, top_left_block):
        table = evaluate_stack(two_layer_stack, top_left_block, "ASM")
        long_df = build_long_table(two_layer_stack, table)
        z = long_df[long_df["Layer"] == "z_layer"]
        corner = z[(z["x"] == 500035.0) & (z["y"] == 4000005.0)]
        assert list(corner["Class"]) == ["Non.ASM"]

    def test_missing_cells_dropped(self, asm_values, top_left_block):
        values = asm_values.copy()
        values[1, 2] = 0
        stack = RasterStack((make_layer("nd", values, nodata=0),))
        table = evaluate_stack(stack, top_left_block, "ASM")
        long_df = build_long_table(stack, table)
        assert len(long_df) == 15
