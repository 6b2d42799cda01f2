"""Single-layer evaluation pipeline.

reproject -> categorical check -> resolve code -> mask -> count -> metrics.
Any failure propagates unchanged; no partial record is ever returned.

Depends on: core.reprojection, core.zone_masker, domain.*.
"""

import logging
from typing import Callable, Optional

from ..domain.categories import ClassSelector, as_selector, label_for, resolve_code
from ..domain.confusion import accumulate_zones
from ..domain.errors import InvalidInputTypeError, NotCategoricalError
from ..domain.metrics import compute_layer_metrics
from ..domain.models import CategoricalRasterLayer, LayerMetrics, PolygonSet
from .reprojection import is_geographic, polygon_area_m2, reproject_polygons
from .zone_masker import split_zones

logger = logging.getLogger(__name__)

Reprojector = Callable[[PolygonSet, str], PolygonSet]


def check_inputs(layer, polygons) -> None:
    if not isinstance(layer, CategoricalRasterLayer):
        raise InvalidInputTypeError(
            f"Raster layer must be a CategoricalRasterLayer, "
            f"got {type(layer).__name__}"
        )
    if not isinstance(polygons, PolygonSet):
        raise InvalidInputTypeError(
            f"Polygons must be a PolygonSet, got {type(polygons).__name__}"
        )


def evaluate_layer(
    layer: CategoricalRasterLayer,
    polygons: PolygonSet,
    target_class,
    reprojector: Optional[Reprojector] = None,
) -> LayerMetrics:
    """Evaluate one classified layer against reference polygons.

    Args:
        layer: Categorical raster layer.
        polygons: Reference polygons (any CRS).
        target_class: Label, code, ByLabel or ByCode.
        reprojector: Replacement for reproject_polygons (same signature).

    Returns:
        LayerMetrics for the layer.

    Raises:
        InvalidInputTypeError, NotCategoricalError, UnknownClassError,
        AmbiguousClassError.
    """
    check_inputs(layer, polygons)
    selector: ClassSelector = as_selector(target_class)
    reproject = reprojector or reproject_polygons

    polygons = reproject(polygons, layer.crs)

    if not layer.is_categorical:
        raise NotCategoricalError(
            f"Raster layer '{layer.name}' must be categorical (have a category table)."
        )

    target_code = resolve_code(layer.categories, selector)

    if is_geographic(layer.crs):
        logger.warning(
            "Layer '%s' has a geographic CRS; pixel areas are in square degrees",
            layer.name,
        )

    zones = split_zones(layer, polygons)
    counts = accumulate_zones(zones, target_code)

    metrics = compute_layer_metrics(
        counts,
        pixel_area=layer.pixel_area,
        total_polygon_area=polygon_area_m2(polygons),
        layer_name=layer.name,
        target_code=target_code,
        target_label=label_for(layer.categories, target_code),
    )

    logger.debug(
        "Layer '%s': tp=%d fn=%d fp=%d UA=%.4f PA=%.4f SCR=%.4f",
        layer.name, counts.true_positive, counts.false_negative,
        counts.false_positive, metrics.users_accuracy,
        metrics.producers_accuracy, metrics.scr,
    )
    return metrics
