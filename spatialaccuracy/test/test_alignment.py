"""Tests for stack grid alignment reporting."""

import logging

from spatialaccuracy.core.alignment import check_stack_alignment
from spatialaccuracy.core.batch_workflow import evaluate_stack
from spatialaccuracy.domain.models import RasterStack

from conftest import GEOTRANSFORM, make_layer


class TestCheckStackAlignment:

    def test_aligned_stack(self, two_layer_stack):
        assert check_stack_alignment(two_layer_stack).is_aligned

    def test_single_layer_is_aligned(self, asm_layer):
        assert check_stack_alignment(RasterStack((asm_layer,))).is_aligned

    def test_shifted_origin(self, asm_values):
        shifted = (GEOTRANSFORM[0] + 10.0,) + GEOTRANSFORM[1:]
        stack = RasterStack((
            make_layer("a", asm_values),
            make_layer("b", asm_values, geotransform=shifted),
        ))
        report = check_stack_alignment(stack)
        assert not report.is_aligned
        assert len(report.issues) == 1
        assert "origin" in report.issues[0].message

    def test_resolution_and_shape(self, asm_values):
        coarse = (GEOTRANSFORM[0], 20.0, 0.0, GEOTRANSFORM[3], 0.0, -20.0)
        stack = RasterStack((
            make_layer("a", asm_values),
            make_layer("b", asm_values[:2, :2], geotransform=coarse),
        ))
        messages = [i.message for i in check_stack_alignment(stack).issues]
        assert any("Shape mismatch" in m for m in messages)
        assert any("Resolution mismatch" in m for m in messages)

    def test_misalignment_is_only_logged(self, asm_values, top_left_block, caplog):
        shifted = (GEOTRANSFORM[0] + 10.0,) + GEOTRANSFORM[1:]
        stack = RasterStack((
            make_layer("a", asm_values),
            make_layer("b", asm_values, geotransform=shifted),
        ))
        with caplog.at_level(logging.WARNING, logger="spatialaccuracy"):
            table = evaluate_stack(stack, top_left_block, "ASM")
        assert len(table) == 2
        assert "origin" in caplog.text

    def test_unreadable_crs_is_reported(self, asm_values):
        stack = RasterStack((
            make_layer("a", asm_values),
            make_layer("b", asm_values, crs="EPSG:999999"),
        ))
        report = check_stack_alignment(stack)
        assert not report.is_aligned
        assert "could not be compared" in report.issues[0].message
