"""Inside/outside partition of raster cells against reference polygons.

A cell is inside when its centre falls within the polygon union (GDAL
rasterization without ALL_TOUCHED). Missing cells are dropped from
both zones.

Depends on: GDAL/OGR, numpy.
"""

import numpy as np

from osgeo import gdal, ogr

from ..domain.models import CategoricalRasterLayer, PolygonSet, ZoneValues
from .reprojection import to_ogr_geometries

gdal.UseExceptions()


def _memory_vector_driver():
    # "Memory" was folded into the MEM driver in GDAL 3.11
    driver = ogr.GetDriverByName("Memory")
    if driver is None:
        driver = ogr.GetDriverByName("MEM")
    return driver


def rasterize_polygons(
    layer: CategoricalRasterLayer,
    polygons: PolygonSet,
) -> np.ndarray:
    """Burn polygons onto the layer grid.

    Args:
        layer: Raster layer defining size and geotransform.
        polygons: Polygons already expressed in the layer CRS.

    Returns:
        (rows, cols) boolean array, True where the cell centre is covered.
    """
    raster_ds = gdal.GetDriverByName("MEM").Create(
        "", layer.width, layer.height, 1, gdal.GDT_Byte
    )
    raster_ds.SetGeoTransform(tuple(layer.geotransform))
    band = raster_ds.GetRasterBand(1)
    band.Fill(0)

    vector_ds = _memory_vector_driver().CreateDataSource("zones")
    zones = vector_ds.CreateLayer("zones", None, ogr.wkbUnknown)
    for geom in to_ogr_geometries(polygons):
        # SRS is dropped so GDAL never reprojects on its own
        geom.AssignSpatialReference(None)
        feature = ogr.Feature(zones.GetLayerDefn())
        feature.SetGeometry(geom)
        zones.CreateFeature(feature)
        feature = None

    gdal.RasterizeLayer(raster_ds, [1], zones, burn_values=[1])
    covered = band.ReadAsArray().astype(bool)

    vector_ds = None
    raster_ds = None
    return covered


def split_zones(
    layer: CategoricalRasterLayer,
    polygons: PolygonSet,
) -> ZoneValues:
    """Partition non-missing cell values into inside/outside collections.

    The layer is not modified.
    """
    valid = layer.valid_mask()
    if len(polygons) == 0:
        covered = np.zeros(layer.shape, dtype=bool)
    else:
        covered = rasterize_polygons(layer, polygons)

    values = np.asarray(layer.values)
    return ZoneValues(
        inside=values[covered & valid],
        outside=values[~covered & valid],
    )
