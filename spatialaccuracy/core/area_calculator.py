"""Area statistics of one class inside and outside reference polygons.

Shares the evaluation pipeline with the batch workflow, so pixel
counts and SCR are identical to the corresponding MetricsTable row.

Depends on: core.layer_evaluator.
"""

import logging

from ..domain.models import AreaSummary, CategoricalRasterLayer, PolygonSet
from .layer_evaluator import evaluate_layer

logger = logging.getLogger(__name__)


def calculate_area(
    raster_layer: CategoricalRasterLayer,
    polygons: PolygonSet,
    target_class,
) -> AreaSummary:
    """Target-class area inside/outside the polygon union.

    Args:
        raster_layer: Categorical raster layer.
        polygons: Reference polygons (any CRS).
        target_class: Label, code, ByLabel or ByCode.

    Returns:
        AreaSummary; ``to_dataframe()`` gives the single-row table.
    """
    metrics = evaluate_layer(raster_layer, polygons, target_class)
    summary = AreaSummary.from_metrics(metrics)
    logger.info(
        "Area of '%s' in '%s': %.1f m2 inside, %.1f m2 outside (%.1f%% of polygons)",
        summary.target_class, raster_layer.name, summary.area_inside_m2,
        summary.area_outside_m2, summary.percentage_in_polygon,
    )
    return summary
