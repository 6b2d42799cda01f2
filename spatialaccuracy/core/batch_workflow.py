"""Batch evaluation of an ordered raster stack.

Layers are independent, so they may be evaluated on a thread pool.
Results are always reassembled in input order and the first failure
(in input order) aborts the batch.

Depends on: core.layer_evaluator, core.alignment, core.reprojection.
"""

import dataclasses
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Sequence, Tuple, Union

from ..domain.categories import as_selector
from ..domain.errors import InvalidInputTypeError
from ..domain.models import (
    CategoricalRasterLayer,
    MetricsTable,
    PolygonSet,
    RasterStack,
)
from .alignment import check_stack_alignment
from .layer_evaluator import Reprojector, evaluate_layer
from .reprojection import reproject_polygons

logger = logging.getLogger(__name__)

LayerInput = Union[CategoricalRasterLayer, Tuple[str, CategoricalRasterLayer]]


def as_stack(layers: Union[RasterStack, Sequence[LayerInput]]) -> RasterStack:
    """Normalise a stack, a list of layers, or (name, layer) pairs."""
    if isinstance(layers, RasterStack):
        return layers
    if isinstance(layers, CategoricalRasterLayer):
        return RasterStack(layers=(layers,))
    if isinstance(layers, (str, bytes)) or not hasattr(layers, "__iter__"):
        raise InvalidInputTypeError(
            f"Input raster must be a RasterStack or a sequence of layers, "
            f"got {type(layers).__name__}"
        )

    normalised = []
    for item in layers:
        if isinstance(item, tuple) and len(item) == 2:
            name, layer = item
            if not isinstance(layer, CategoricalRasterLayer):
                raise InvalidInputTypeError(
                    f"Layer '{name}' must be a CategoricalRasterLayer, "
                    f"got {type(layer).__name__}"
                )
            if layer.name != name:
                layer = dataclasses.replace(layer, name=name)
            normalised.append(layer)
        elif isinstance(item, CategoricalRasterLayer):
            normalised.append(item)
        else:
            raise InvalidInputTypeError(
                f"Stack entries must be layers or (name, layer) pairs, "
                f"got {type(item).__name__}"
            )
    return RasterStack(layers=tuple(normalised))


def _cached_reprojector(polygons: PolygonSet) -> Reprojector:
    """Reproject on first use, once per distinct layer CRS.

    A layer's CRS is only touched when that layer runs, so errors keep
    the input order of the layers.
    """
    by_crs: Dict[str, PolygonSet] = {}
    lock = threading.Lock()

    def reproject(_polygons: PolygonSet, target_crs: str) -> PolygonSet:
        with lock:
            if target_crs not in by_crs:
                by_crs[target_crs] = reproject_polygons(polygons, target_crs)
            return by_crs[target_crs]

    return reproject


def evaluate_stack(
    layers: Union[RasterStack, Sequence[LayerInput]],
    polygons: PolygonSet,
    target_class,
    max_workers: int = 1,
    reprojector: Optional[Reprojector] = None,
) -> MetricsTable:
    """Evaluate every layer and return a MetricsTable in input order.

    Args:
        layers: RasterStack, list of layers, or list of (name, layer).
        polygons: Reference polygons.
        target_class: Label, code, ByLabel or ByCode.
        max_workers: >1 evaluates layers on a thread pool.
        reprojector: Replacement for reproject_polygons.

    Returns:
        MetricsTable, one row per layer, same order as *layers*.
    """
    stack = as_stack(layers)
    if not isinstance(polygons, PolygonSet):
        raise InvalidInputTypeError(
            f"Polygons must be a PolygonSet, got {type(polygons).__name__}"
        )
    selector = as_selector(target_class)

    for issue in check_stack_alignment(stack).issues:
        logger.warning("%s %s", issue.message, issue.suggestion)

    reproject = reprojector or _cached_reprojector(polygons)

    def run(layer: CategoricalRasterLayer):
        return evaluate_layer(layer, polygons, selector, reprojector=reproject)

    logger.info(
        "Evaluating %d layer(s) for target class '%s'", len(stack), selector
    )

    try:
        if max_workers <= 1 or len(stack) <= 1:
            rows = [run(layer) for layer in stack]
        else:
            executor = ThreadPoolExecutor(max_workers=max_workers)
            try:
                # map() yields in submission order and re-raises on first failure
                rows = list(executor.map(run, stack.layers))
            finally:
                executor.shutdown(wait=True, cancel_futures=True)
    except Exception as e:
        logger.error("Batch evaluation failed: %s", e)
        raise

    return MetricsTable(rows=tuple(rows))
