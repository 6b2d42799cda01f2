"""Raster reading utilities for spatialaccuracy.

Reads classified bands into CategoricalRasterLayer objects, including
the category table (raster attribute table or band category names).

Depends on: GDAL.
"""

import logging
import os
from typing import Dict, List, Optional, Sequence, Union

from osgeo import gdal

from ..domain.models import CategoricalRasterLayer, RasterStack

# Raise on GDAL errors instead of printing them
gdal.UseExceptions()

logger = logging.getLogger(__name__)

_VALUE_COLUMNS = ("value", "values", "id", "code")
_CLASS_COLUMNS = ("class", "category", "label", "name")


def _rat_categories(rat) -> Optional[Dict[int, str]]:
    """{code: label} from a raster attribute table, or None."""
    if rat is None or rat.GetRowCount() == 0:
        return None

    value_col = None
    name_col = None
    for i in range(rat.GetColumnCount()):
        usage = rat.GetUsageOfCol(i)
        if value_col is None and usage in (gdal.GFU_MinMax, gdal.GFU_Min):
            value_col = i
        elif name_col is None and usage == gdal.GFU_Name:
            name_col = i

    # Many writers leave usages generic; fall back to column names
    for i in range(rat.GetColumnCount()):
        col = rat.GetNameOfCol(i).lower()
        if value_col is None and col in _VALUE_COLUMNS:
            value_col = i
        elif name_col is None and col in _CLASS_COLUMNS:
            name_col = i

    if value_col is None or name_col is None:
        return None

    return {
        int(rat.GetValueAsInt(row, value_col)): rat.GetValueAsString(row, name_col)
        for row in range(rat.GetRowCount())
    }


def read_categories(band) -> Optional[Dict[int, str]]:
    """Category table of a band: RAT first, then category names."""
    categories = _rat_categories(band.GetDefaultRAT())
    if categories:
        return categories

    names = band.GetCategoryNames()
    if names:
        table = {code: name for code, name in enumerate(names) if name}
        if table:
            return table
    return None


def read_raster_layers(
    raster_path: str,
    categories: Optional[Dict[int, str]] = None,
) -> List[CategoricalRasterLayer]:
    """Read every band of a raster file as a CategoricalRasterLayer.

    Args:
        raster_path: Path to a classified raster.
        categories: Optional {code: label} table overriding the file's.

    Returns:
        List of layers, one per band, in band order.
    """
    if not os.path.exists(raster_path):
        raise FileNotFoundError(f"Cannot open raster: {raster_path}")
    ds = gdal.Open(raster_path, gdal.GA_ReadOnly)
    if ds is None:
        raise FileNotFoundError(f"Cannot open raster: {raster_path}")

    stem = os.path.splitext(os.path.basename(raster_path))[0]
    gt = ds.GetGeoTransform()
    crs = ds.GetProjection()

    layers = []
    for b in range(1, ds.RasterCount + 1):
        band = ds.GetRasterBand(b)
        name = band.GetDescription() or (
            stem if ds.RasterCount == 1 else f"{stem}_{b}"
        )
        table = dict(categories) if categories is not None else read_categories(band)
        if table is None:
            logger.warning("Band %d of %s has no category table", b, raster_path)

        layers.append(CategoricalRasterLayer(
            name=name,
            values=band.ReadAsArray(),
            categories=table,
            geotransform=tuple(gt),
            crs=crs,
            nodata=band.GetNoDataValue(),
        ))

    ds = None  # close
    return layers


def read_raster_stack(
    raster_paths: Union[str, Sequence[str]],
    categories: Optional[Dict[int, str]] = None,
) -> RasterStack:
    """Read one or more rasters into a single ordered RasterStack.

    Layer order follows path order, then band order.
    """
    if isinstance(raster_paths, str):
        raster_paths = [raster_paths]

    layers = []
    for path in raster_paths:
        layers.extend(read_raster_layers(path, categories))

    logger.info("Read %d layer(s) from %d raster(s)", len(layers), len(raster_paths))
    return RasterStack(layers=tuple(layers))
