"""Spatial accuracy workflow orchestrator.

Coordinates the full pipeline: evaluate stack -> label facets ->
assemble long table -> render map.
This is the bridge between core evaluation and reporting.

Depends on: core.*, domain.*, reporting.facet_map, reporting.chart_renderer.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Union

import pandas as pd
from matplotlib.figure import Figure

from ..domain.categories import ByCode, as_selector, label_for
from ..domain.errors import InvalidInputTypeError
from ..domain.models import MapStyle, MetricsTable, PolygonSet, RasterStack
from ..reporting.chart_renderer import render_facet_map
from ..reporting.facet_map import as_label_mode, build_long_table, facet_labels
from .batch_workflow import LayerInput, as_stack, evaluate_stack
from .reprojection import reproject_polygons

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SpatialAccuracyResult:
    """Rendered map plus the per-layer metrics behind it."""
    figure: Figure
    metrics: MetricsTable
    long_table: pd.DataFrame


def _display_name(stack: RasterStack, selector) -> str:
    """Class label as it appears in the long table's Class column."""
    if isinstance(selector, ByCode) and len(stack):
        categories = stack.layers[0].categories
        return label_for(categories, selector.code)
    return str(selector)


def spatial_accuracy(
    input_raster: Union[RasterStack, Sequence[LayerInput]],
    polygons: PolygonSet,
    target_class="class_a",
    other_class="class_b",
    label_type: str = "accuracy",
    show_polygons: bool = True,
    polygon_color: str = "black",
    polygon_fill: str = "none",
    polygon_size: float = 0.5,
    polygon_alpha: float = 0.7,
    ncol_facet: int = 3,
    strip_text_size: float = 7,
    max_workers: int = 1,
) -> SpatialAccuracyResult:
    """Evaluate every layer against the polygons and render a faceted map.

    Args:
        input_raster: RasterStack, list of layers, or (name, layer) pairs.
        polygons: Reference polygons (reprojected to the raster CRS if needed).
        target_class: Label or code of the evaluated (positive) class.
        other_class: Label or code of the negative class (map colouring only).
        label_type: "accuracy", "scr" or "both" facet titles.
        show_polygons: Overlay the polygons on every facet.
        polygon_color: Polygon outline colour.
        polygon_fill: Polygon fill colour ("none" for transparent).
        polygon_size: Polygon outline width.
        polygon_alpha: Polygon opacity.
        ncol_facet: Number of facet columns.
        strip_text_size: Facet title font size.
        max_workers: >1 evaluates layers on a thread pool.

    Returns:
        SpatialAccuracyResult(figure, metrics, long_table).
    """
    stack = as_stack(input_raster)
    if not isinstance(polygons, PolygonSet):
        raise InvalidInputTypeError(
            f"Polygons must be a PolygonSet, got {type(polygons).__name__}"
        )
    mode = as_label_mode(label_type)
    target = as_selector(target_class)
    other = as_selector(other_class)

    logger.info("Starting spatial accuracy assessment of %d layer(s)", len(stack))

    metrics = evaluate_stack(stack, polygons, target, max_workers=max_workers)

    long_df = build_long_table(stack, metrics, labels=facet_labels(metrics, mode))

    style = MapStyle(
        show_polygons=show_polygons,
        polygon_color=polygon_color,
        polygon_fill=polygon_fill,
        polygon_size=polygon_size,
        polygon_alpha=polygon_alpha,
        ncol_facet=ncol_facet,
        strip_text_size=strip_text_size,
    )
    overlay = reproject_polygons(polygons, stack.crs) if show_polygons else None

    figure = render_facet_map(
        long_df,
        target_class=_display_name(stack, target),
        other_class=_display_name(stack, other),
        polygons=overlay,
        style=style,
    )

    logger.info(
        "Spatial accuracy assessment complete: %s",
        ", ".join(
            f"{m.layer_name} F1={m.f1:.3f}" for m in metrics
        ),
    )
    return SpatialAccuracyResult(figure=figure, metrics=metrics, long_table=long_df)
