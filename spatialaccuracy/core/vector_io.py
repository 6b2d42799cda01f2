"""Vector I/O for spatialaccuracy.

Reads reference polygons from any OGR-readable vector file.

Depends on: GDAL/OGR.
"""

import logging
import os

from osgeo import ogr

from ..domain.models import PolygonSet

ogr.UseExceptions()

logger = logging.getLogger(__name__)

_POLYGON_TYPES = (ogr.wkbPolygon, ogr.wkbMultiPolygon)


def read_polygons(vector_path: str, layer_index: int = 0) -> PolygonSet:
    """Read reference polygons.

    Args:
        vector_path: Path to vector file (GeoPackage, Shapefile, etc.).
        layer_index: Layer index within the file.

    Returns:
        PolygonSet in the layer's CRS. Non-polygon features are skipped.
    """
    if not os.path.exists(vector_path):
        raise FileNotFoundError(f"Cannot open vector: {vector_path}")
    ds = ogr.Open(vector_path, 0)
    if ds is None:
        raise FileNotFoundError(f"Cannot open vector: {vector_path}")

    layer = ds.GetLayer(layer_index)
    if layer is None:
        raise ValueError(f"No layer at index {layer_index} in {vector_path}")

    srs = layer.GetSpatialRef()
    crs = srs.ExportToWkt() if srs is not None else ""

    wkts = []
    skipped = 0
    layer.ResetReading()
    for feature in layer:
        geom = feature.GetGeometryRef()
        if geom is None:
            continue
        if ogr.GT_Flatten(geom.GetGeometryType()) not in _POLYGON_TYPES:
            skipped += 1
            continue
        wkts.append(geom.ExportToWkt())

    ds = None

    if skipped:
        logger.warning("Skipped %d non-polygon feature(s) in %s", skipped, vector_path)

    return PolygonSet(geometries_wkt=tuple(wkts), crs=crs, source_path=vector_path)
