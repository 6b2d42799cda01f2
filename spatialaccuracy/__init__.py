"""
spatialaccuracy: polygon-based accuracy assessment of classified rasters

Computes user's accuracy, producer's accuracy, F1 and the spatially
correct ratio (SCR) of a target class against reference polygons, for
one layer or a whole stack of competing classifications, and renders
faceted comparison maps.
"""

__version__ = "0.3.0"

from .core.accuracy_workflow import SpatialAccuracyResult, spatial_accuracy
from .core.area_calculator import calculate_area
from .core.batch_workflow import evaluate_stack
from .core.layer_evaluator import evaluate_layer
from .core.raster_reader import read_raster_stack
from .core.vector_io import read_polygons
from .domain.categories import ByCode, ByLabel
from .domain.errors import (
    AmbiguousClassError,
    InvalidInputTypeError,
    NotCategoricalError,
    SpatialAccuracyError,
    UnknownClassError,
)
from .domain.models import (
    AreaSummary,
    CategoricalRasterLayer,
    LayerMetrics,
    MetricsTable,
    PolygonSet,
    RasterStack,
)
