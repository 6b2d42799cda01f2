"""Test configuration for spatialaccuracy.

Fixtures build small in-memory layers and polygons on a 10 m UTM grid,
so no raster or vector files are needed except in the I/O tests.
"""

import numpy as np
import pytest

from spatialaccuracy.domain.models import (
    CategoricalRasterLayer,
    PolygonSet,
    RasterStack,
)

UTM_30N = "EPSG:32630"
WGS84 = "EPSG:4326"

# 10 m cells, upper-left corner at (500000, 4000040)
GEOTRANSFORM = (500000.0, 10.0, 0.0, 4000040.0, 0.0, -10.0)

ASM_CATEGORIES = {1: "ASM", 2: "Non.ASM"}

# Covers the top-left 2 x 2 cells of a 4 x 4 grid
TOP_LEFT_BLOCK_WKT = (
    "POLYGON ((500000 4000020, 500020 4000020, 500020 4000040, "
    "500000 4000040, 500000 4000020))"
)


def make_layer(name, values, categories=ASM_CATEGORIES, nodata=None,
               crs=UTM_30N, geotransform=GEOTRANSFORM):
    return CategoricalRasterLayer(
        name=name,
        values=np.asarray(values),
        categories=None if categories is None else dict(categories),
        geotransform=geotransform,
        crs=crs,
        nodata=nodata,
    )


@pytest.fixture
def asm_values():
    """4 x 4 grid of ASM (1) with a single Non.ASM (2) bottom-right corner."""
    values = np.ones((4, 4), dtype=np.int32)
    values[3, 3] = 2
    return values


@pytest.fixture
def asm_layer(asm_values):
    return make_layer("model_a", asm_values)


@pytest.fixture
def top_left_block():
    return PolygonSet(geometries_wkt=(TOP_LEFT_BLOCK_WKT,), crs=UTM_30N)


@pytest.fixture
def two_layer_stack(asm_values):
    """Layers deliberately named in reverse alphabetical order."""
    other = asm_values.copy()
    other[0, 0] = 2          # one omission inside the block
    other[2, 2] = 2          # one fewer commission outside
    return RasterStack(layers=(
        make_layer("z_layer", asm_values),
        make_layer("a_layer", other),
    ))
