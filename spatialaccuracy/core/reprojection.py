"""CRS handling and geometry reprojection for spatialaccuracy.

Polygons are reprojected to the raster CRS, never the other way round,
so raster cells are never resampled.

Depends on: GDAL/OGR/OSR.
"""

import logging
from typing import List

from osgeo import ogr, osr

from ..domain.models import PolygonSet

ogr.UseExceptions()
osr.UseExceptions()

logger = logging.getLogger(__name__)


def spatial_reference(crs: str) -> osr.SpatialReference:
    """Build an OSR spatial reference from WKT, PROJ or "EPSG:xxxx" input.

    Axis order is always x/y (easting/longitude first).
    """
    srs = osr.SpatialReference()
    srs.SetFromUserInput(crs)
    srs.SetAxisMappingStrategy(osr.OAMS_TRADITIONAL_GIS_ORDER)
    return srs


def same_crs(crs_a: str, crs_b: str) -> bool:
    """True if both CRS definitions describe the same system.

    An empty definition on either side is treated as matching.
    """
    if not crs_a or not crs_b:
        return True
    if crs_a == crs_b:
        return True
    return bool(spatial_reference(crs_a).IsSame(spatial_reference(crs_b)))


def is_geographic(crs: str) -> bool:
    if not crs:
        return False
    return bool(spatial_reference(crs).IsGeographic())


def to_ogr_geometries(polygons: PolygonSet) -> List[ogr.Geometry]:
    """OGR geometries for a PolygonSet, tagged with its CRS."""
    srs = spatial_reference(polygons.crs) if polygons.crs else None
    geoms = []
    for wkt in polygons.geometries_wkt:
        geom = ogr.CreateGeometryFromWkt(wkt)
        if srs is not None:
            geom.AssignSpatialReference(srs)
        geoms.append(geom)
    return geoms


def reproject_polygons(polygons: PolygonSet, target_crs: str) -> PolygonSet:
    """Return polygons expressed in *target_crs*.

    The input set is returned unchanged when the CRS already matches.
    """
    if same_crs(polygons.crs, target_crs):
        return polygons

    source = spatial_reference(polygons.crs)
    target = spatial_reference(target_crs)
    transform = osr.CoordinateTransformation(source, target)

    reprojected = []
    for wkt in polygons.geometries_wkt:
        geom = ogr.CreateGeometryFromWkt(wkt)
        geom.Transform(transform)
        reprojected.append(geom.ExportToWkt())

    logger.info(
        "Reprojected %d polygon(s) to the raster CRS", len(reprojected)
    )
    return PolygonSet(
        geometries_wkt=tuple(reprojected),
        crs=target_crs,
        source_path=polygons.source_path,
    )


def polygon_area_m2(polygons: PolygonSet) -> float:
    """Summed polygon area in square metres.

    Projected CRS: planar area scaled by the CRS linear unit.
    Geographic CRS: geodesic area on the CRS ellipsoid.
    """
    if not polygons.geometries_wkt:
        return 0.0

    srs = spatial_reference(polygons.crs) if polygons.crs else None
    geographic = srs is not None and bool(srs.IsGeographic())
    unit_m = srs.GetLinearUnits() if (srs is not None and not geographic) else 1.0

    total = 0.0
    for geom in to_ogr_geometries(polygons):
        if geographic:
            total += geom.GetGeodesicArea()
        else:
            total += geom.GetArea() * unit_m * unit_m
    return float(total)
