"""Faceted comparison map rendering for spatialaccuracy.

Consumes the long-form pixel table from facet_map.build_long_table and
draws one panel per layer with matplotlib.

Depends on: matplotlib, numpy, pandas, GDAL/OGR (polygon overlay).
"""

import io
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

import matplotlib
matplotlib.use("Agg")  # non-interactive backend for thread safety
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from matplotlib.figure import Figure
from matplotlib.patches import Patch, PathPatch
from matplotlib.path import Path
from osgeo import ogr

from ..domain.models import MapStyle, PolygonSet
from ..core.reprojection import to_ogr_geometries


STYLE = {
    "font.size": 8,
    "axes.grid": False,
    "figure.dpi": 100,
    "savefig.dpi": 300,
    "savefig.bbox": "tight",
}


def class_order(classes: Sequence[str], target_class: str, other_class: str) -> List[str]:
    """Target first, other second, then any remaining classes sorted."""
    present = set(classes)
    ordered = [c for c in (target_class, other_class) if c in present]
    ordered += sorted(present - set(ordered))
    return ordered


def class_colors(ordered: Sequence[str], target_class: str, other_class: str,
                 style: MapStyle) -> List[str]:
    colors = []
    for cls in ordered:
        if cls == target_class:
            colors.append(style.target_color)
        elif cls == other_class:
            colors.append(style.other_color)
        else:
            colors.append(style.fallback_color)
    return colors


def _cell_step(coords: np.ndarray) -> float:
    if len(coords) < 2:
        return 1.0
    return float(np.min(np.diff(coords)))


def grid_from_long(facet: pd.DataFrame, ordered: Sequence[str]) -> Tuple[np.ndarray, Tuple[float, float, float, float]]:
    """Rebuild a (rows, cols) class-index grid from one facet's rows.

    Cells are placed on a regular grid spanning the facet, so rows or
    columns with no data stay in place as NaN.

    Returns:
        (grid, extent): float grid of indices into *ordered* (NaN where no
        row exists) and the imshow extent (left, right, bottom, top).
    """
    x = facet["x"].to_numpy(dtype=float)
    y = facet["y"].to_numpy(dtype=float)
    xs = np.unique(x)
    ys = np.unique(y)

    dx = _cell_step(xs)
    dy = _cell_step(ys)
    ncols = int(np.rint((xs[-1] - xs[0]) / dx)) + 1
    nrows = int(np.rint((ys[-1] - ys[0]) / dy)) + 1

    col = np.rint((x - xs[0]) / dx).astype(int)
    row = np.rint((ys[-1] - y) / dy).astype(int)   # north-up

    grid = np.full((nrows, ncols), np.nan)
    index = {cls: i for i, cls in enumerate(ordered)}
    grid[row, col] = [index[c] for c in facet["Class"]]

    extent = (
        xs[0] - dx / 2.0, xs[-1] + dx / 2.0,
        ys[0] - dy / 2.0, ys[-1] + dy / 2.0,
    )
    return grid, extent


def _ring_path(points) -> Tuple[list, list]:
    verts = [(p[0], p[1]) for p in points]
    codes = [Path.MOVETO] + [Path.LINETO] * (len(verts) - 1)
    return verts, codes


def polygon_paths(polygons: PolygonSet) -> List[Path]:
    """One compound matplotlib Path per polygon (holes included)."""
    paths = []
    for geom in to_ogr_geometries(polygons):
        if ogr.GT_Flatten(geom.GetGeometryType()) == ogr.wkbPolygon:
            parts = [geom]
        else:
            parts = [geom.GetGeometryRef(i) for i in range(geom.GetGeometryCount())]
        for part in parts:
            verts, codes = [], []
            for r in range(part.GetGeometryCount()):
                ring = part.GetGeometryRef(r)
                if ring.GetPointCount() == 0:
                    continue
                v, c = _ring_path(ring.GetPoints())
                verts += v
                codes += c
            if verts:
                paths.append(Path(verts, codes))
    return paths


def render_facet_map(
    long_df: pd.DataFrame,
    target_class: str,
    other_class: str,
    polygons: Optional[PolygonSet] = None,
    style: MapStyle = MapStyle(),
) -> Figure:
    """Draw the faceted comparison map.

    Args:
        long_df: Output of build_long_table (x, y, Class, label).
        target_class: Label filled with style.target_color.
        other_class: Label filled with style.other_color.
        polygons: Overlay polygons in the raster CRS (drawn when
            style.show_polygons is set).
        style: Rendering options.

    Returns:
        matplotlib Figure (caller saves or closes it).
    """
    if isinstance(long_df["label"].dtype, pd.CategoricalDtype):
        facets = list(long_df["label"].cat.categories)
    else:
        facets = list(dict.fromkeys(long_df["label"]))

    ordered = class_order(long_df["Class"].unique(), target_class, other_class)
    colors = class_colors(ordered, target_class, other_class, style)
    cmap = ListedColormap(colors or [style.fallback_color])
    overlay = polygon_paths(polygons) if (style.show_polygons and polygons is not None) else []

    n = max(len(facets), 1)
    ncol = max(1, min(int(style.ncol_facet), n))
    nrow = int(math.ceil(n / float(ncol)))

    with plt.rc_context(STYLE):
        fig, axes = plt.subplots(
            nrow, ncol, figsize=(3.2 * ncol, 3.2 * nrow + 0.6), squeeze=False
        )

        for i, ax in enumerate(axes.flat):
            if i >= len(facets):
                ax.set_visible(False)
                continue

            facet = long_df[long_df["label"] == facets[i]]
            ax.set_title(str(facets[i]), fontsize=style.strip_text_size)
            if len(facet):
                grid, extent = grid_from_long(facet, ordered)
                ax.imshow(
                    np.ma.masked_invalid(grid), cmap=cmap, vmin=-0.5,
                    vmax=len(ordered) - 0.5, extent=extent,
                    interpolation="nearest", origin="upper",
                )

            for path in overlay:
                ax.add_patch(PathPatch(
                    path,
                    edgecolor=style.polygon_color,
                    facecolor=style.polygon_fill,
                    linewidth=style.polygon_size,
                    alpha=style.polygon_alpha,
                ))

            ax.set_aspect("equal")
            ax.tick_params(axis="x", labelrotation=45)
            ax.set_xlabel("")
            ax.set_ylabel("")

        handles = [
            Patch(facecolor=color, edgecolor="grey", label=cls)
            for cls, color in zip(ordered, colors)
        ]
        if handles:
            fig.legend(handles=handles, loc="lower center",
                       ncol=len(handles), title="Class", frameon=False)
        fig.tight_layout(rect=(0, 0.08, 1, 1))

    return fig


def figure_to_png(fig: Figure, dpi: int = 300) -> bytes:
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi)
    buf.seek(0)
    return buf.read()
