"""Domain data models for spatialaccuracy.

All models are frozen dataclasses (immutable once created).
This module has ZERO imports from osgeo.* or matplotlib.*.
Only depends on: numpy, pandas, typing, dataclasses.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple

import numpy as np
import pandas as pd


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class CategoricalRasterLayer:
    """One classified raster band plus its georeferencing.

    Cell values that do not appear in ``categories`` are tolerated and
    simply never match a target code.
    """
    name: str
    values: np.ndarray                         # (rows, cols) class codes
    categories: Optional[Dict[int, str]]       # code -> label, None = not categorical
    geotransform: Tuple[float, ...]            # GDAL 6-tuple
    crs: str                                   # WKT or "EPSG:xxxx"
    nodata: Optional[float] = None

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)

    @property
    def resolution(self) -> Tuple[float, float]:
        """Cell (width, height) in CRS linear units."""
        return (abs(self.geotransform[1]), abs(self.geotransform[5]))

    @property
    def pixel_area(self) -> float:
        res_x, res_y = self.resolution
        return res_x * res_y

    @property
    def is_categorical(self) -> bool:
        return self.categories is not None

    def valid_mask(self) -> np.ndarray:
        """Boolean array, True where the cell holds a (non-missing) code."""
        values = self.values
        valid = np.ones(values.shape, dtype=bool)
        if np.issubdtype(values.dtype, np.floating):
            valid &= ~np.isnan(values)
        if self.nodata is not None and not math.isnan(self.nodata):
            valid &= values != self.nodata
        return valid

    def cell_centers(self) -> Tuple[np.ndarray, np.ndarray]:
        """Map coordinates of every cell centre, as two (rows, cols) arrays."""
        gt = self.geotransform
        cols, rows = np.meshgrid(
            np.arange(self.width) + 0.5, np.arange(self.height) + 0.5
        )
        xs = gt[0] + cols * gt[1] + rows * gt[2]
        ys = gt[3] + cols * gt[4] + rows * gt[5]
        return xs, ys


@dataclass(frozen=True)
class RasterStack:
    """Ordered collection of layers sharing a grid (not verified here)."""
    layers: Tuple[CategoricalRasterLayer, ...]

    def __post_init__(self):
        names = [layer.name for layer in self.layers]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"Duplicate layer names in stack: {dupes}")

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(layer.name for layer in self.layers)

    @property
    def crs(self) -> str:
        return self.layers[0].crs if self.layers else ""

    def __iter__(self) -> Iterator[CategoricalRasterLayer]:
        return iter(self.layers)

    def __len__(self) -> int:
        return len(self.layers)

    def __getitem__(self, name: str) -> CategoricalRasterLayer:
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise KeyError(name)


@dataclass(frozen=True)
class PolygonSet:
    """Reference polygons as WKT strings in a single CRS."""
    geometries_wkt: Tuple[str, ...]
    crs: str
    source_path: str = ""

    def __len__(self) -> int:
        return len(self.geometries_wkt)


# ---------------------------------------------------------------------------
# Intermediate values
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ZoneValues:
    """Non-missing cell values split by the polygon union."""
    inside: np.ndarray
    outside: np.ndarray


@dataclass(frozen=True)
class ConfusionCounts:
    """Presence/absence counts for one layer and one target code."""
    true_positive: int
    false_negative: int
    false_positive: int


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

METRICS_COLUMNS = (
    "UA", "PA", "F1", "inside_m2", "outside_m2", "percentage_in_polygon",
    "n_pixels_inside", "n_pixels_outside", "SCR", "Layer",
)

AREA_COLUMNS = (
    "target_class", "pixels_inside", "pixels_outside", "area_inside_m2",
    "area_outside_m2", "total_polygon_area_m2", "percentage_in_polygon",
    "pixel_size_m2", "SCR",
)


@dataclass(frozen=True)
class LayerMetrics:
    """Accuracy and area statistics for one evaluated layer.

    Undefined ratios (zero denominators) are NaN, never zero.
    """
    layer_name: str
    users_accuracy: float
    producers_accuracy: float
    f1: float
    scr: float
    area_inside: float
    area_outside: float
    percentage_in_polygon: float
    pixel_count_inside: int
    pixel_count_outside: int

    target_code: int = 0
    target_label: str = ""
    pixel_area: float = 0.0
    total_polygon_area: float = 0.0
    counts: Optional[ConfusionCounts] = None

    def as_row(self) -> Dict[str, Any]:
        return {
            "UA": self.users_accuracy,
            "PA": self.producers_accuracy,
            "F1": self.f1,
            "inside_m2": self.area_inside,
            "outside_m2": self.area_outside,
            "percentage_in_polygon": self.percentage_in_polygon,
            "n_pixels_inside": self.pixel_count_inside,
            "n_pixels_outside": self.pixel_count_outside,
            "SCR": self.scr,
            "Layer": self.layer_name,
        }


@dataclass(frozen=True)
class MetricsTable:
    """LayerMetrics in caller-supplied layer order."""
    rows: Tuple[LayerMetrics, ...]

    @property
    def layer_names(self) -> Tuple[str, ...]:
        return tuple(r.layer_name for r in self.rows)

    def __iter__(self) -> Iterator[LayerMetrics]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, key):
        if isinstance(key, str):
            for row in self.rows:
                if row.layer_name == key:
                    return row
            raise KeyError(key)
        return self.rows[key]

    def to_dataframe(self) -> pd.DataFrame:
        """One row per layer; ``Layer`` is an ordered categorical."""
        df = pd.DataFrame(
            [r.as_row() for r in self.rows], columns=list(METRICS_COLUMNS)
        )
        df["Layer"] = pd.Categorical(
            df["Layer"], categories=list(self.layer_names), ordered=True
        )
        return df


@dataclass(frozen=True)
class AreaSummary:
    """Single-layer area record returned by calculate_area()."""
    target_class: str
    pixels_inside: int
    pixels_outside: int
    area_inside_m2: float
    area_outside_m2: float
    total_polygon_area_m2: float
    percentage_in_polygon: float
    pixel_size_m2: float
    scr: float

    @classmethod
    def from_metrics(cls, metrics: LayerMetrics) -> "AreaSummary":
        return cls(
            target_class=metrics.target_label,
            pixels_inside=metrics.pixel_count_inside,
            pixels_outside=metrics.pixel_count_outside,
            area_inside_m2=metrics.area_inside,
            area_outside_m2=metrics.area_outside,
            total_polygon_area_m2=metrics.total_polygon_area,
            percentage_in_polygon=metrics.percentage_in_polygon,
            pixel_size_m2=metrics.pixel_area,
            scr=metrics.scr,
        )

    def to_dataframe(self) -> pd.DataFrame:
        row = {
            "target_class": self.target_class,
            "pixels_inside": self.pixels_inside,
            "pixels_outside": self.pixels_outside,
            "area_inside_m2": self.area_inside_m2,
            "area_outside_m2": self.area_outside_m2,
            "total_polygon_area_m2": self.total_polygon_area_m2,
            "percentage_in_polygon": self.percentage_in_polygon,
            "pixel_size_m2": self.pixel_size_m2,
            "SCR": self.scr,
        }
        return pd.DataFrame([row], columns=list(AREA_COLUMNS))


# ---------------------------------------------------------------------------
# Map styling
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MapStyle:
    """Rendering options for the faceted comparison map."""
    show_polygons: bool = True
    polygon_color: str = "black"
    polygon_fill: str = "none"
    polygon_size: float = 0.5
    polygon_alpha: float = 0.7
    ncol_facet: int = 3
    strip_text_size: float = 7
    target_color: str = "red"
    other_color: str = "aliceblue"
    fallback_color: str = "lightgrey"


# ---------------------------------------------------------------------------
# Provenance (lightweight, no database)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RunMetadata:
    """Lightweight provenance record. Serialized to JSON alongside exports."""
    package_version: str
    timestamp: str                    # ISO 8601
    layer_names: Tuple[str, ...]
    raster_paths: Tuple[str, ...]
    polygon_path: str
    crs: str
    target_class: str
    other_class: str
    label_type: str
    parameters: Dict[str, Any] = field(default_factory=dict)

