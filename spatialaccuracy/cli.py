"""Command-line interface for spatialaccuracy.

    spatialaccuracy accuracy model_a.tif model_b.tif --polygons ref.gpkg \
        --target ASM --other Non.ASM --metrics-csv metrics.csv --map-png map.png

    spatialaccuracy area model_a.tif --polygons ref.gpkg --target ASM
"""

import argparse
import logging
import os
import sys

from .core.accuracy_workflow import spatial_accuracy
from .core.area_calculator import calculate_area
from .core.raster_reader import read_raster_stack
from .core.vector_io import read_polygons
from .domain.errors import SpatialAccuracyError
from .reporting.export import (
    build_run_metadata,
    export_area_csv,
    export_metrics_csv,
    save_figure,
    write_run_metadata,
)
from .reporting.facet_map import LabelMode

logger = logging.getLogger("spatialaccuracy.cli")


def _class_arg(value: str):
    """Purely numeric class arguments select by raster code."""
    return int(value) if value.lstrip("-").isdigit() else value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spatialaccuracy",
        description="Polygon-based accuracy assessment of classified rasters.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    acc = sub.add_parser("accuracy", help="UA/PA/F1/SCR per layer plus a faceted map")
    acc.add_argument("rasters", nargs="+", help="Classified raster(s); every band is a layer")
    acc.add_argument("--polygons", required=True, help="Reference polygon file")
    acc.add_argument("--target", required=True, type=_class_arg, help="Target class label or code")
    acc.add_argument("--other", required=True, type=_class_arg, help="Other class label or code")
    acc.add_argument("--label-type", default=LabelMode.ACCURACY.value,
                     choices=[m.value for m in LabelMode], help="Facet title content")
    acc.add_argument("--ncol", type=int, default=3, help="Facet columns")
    acc.add_argument("--strip-text-size", type=float, default=7, help="Facet title font size")
    acc.add_argument("--no-polygons", action="store_true", help="Do not overlay polygons")
    acc.add_argument("--polygon-color", default="black")
    acc.add_argument("--polygon-fill", default="none")
    acc.add_argument("--polygon-size", type=float, default=0.5)
    acc.add_argument("--polygon-alpha", type=float, default=0.7)
    acc.add_argument("--workers", type=int, default=1, help="Evaluate layers on N threads")
    acc.add_argument("--metrics-csv", default="spatial_accuracy_metrics.csv")
    acc.add_argument("--map-png", default="spatial_accuracy_map.png")
    acc.add_argument("--dpi", type=int, default=300)

    area = sub.add_parser("area", help="Target-class area inside/outside the polygons")
    area.add_argument("raster", help="Classified raster (first band is used)")
    area.add_argument("--polygons", required=True, help="Reference polygon file")
    area.add_argument("--target", required=True, type=_class_arg, help="Target class label or code")
    area.add_argument("--csv", default=None, help="Write the summary to this file")

    return parser


def _run_accuracy(args) -> None:
    stack = read_raster_stack(args.rasters)
    polygons = read_polygons(args.polygons)

    result = spatial_accuracy(
        stack,
        polygons,
        target_class=args.target,
        other_class=args.other,
        label_type=args.label_type,
        show_polygons=not args.no_polygons,
        polygon_color=args.polygon_color,
        polygon_fill=args.polygon_fill,
        polygon_size=args.polygon_size,
        polygon_alpha=args.polygon_alpha,
        ncol_facet=args.ncol,
        strip_text_size=args.strip_text_size,
        max_workers=args.workers,
    )

    export_metrics_csv(result.metrics, args.metrics_csv)
    save_figure(result.figure, args.map_png, dpi=args.dpi)

    metadata = build_run_metadata(
        layer_names=stack.names,
        crs=stack.crs,
        target_class=args.target,
        other_class=args.other,
        label_type=args.label_type,
        raster_paths=args.rasters,
        polygon_path=args.polygons,
        parameters={"ncol_facet": args.ncol, "workers": args.workers},
    )
    write_run_metadata(metadata, os.path.splitext(args.metrics_csv)[0] + "_metadata.json")

    print(result.metrics.to_dataframe().to_string(index=False))


def _run_area(args) -> None:
    layer = read_raster_stack(args.raster).layers[0]
    polygons = read_polygons(args.polygons)

    summary = calculate_area(layer, polygons, args.target)
    if args.csv:
        export_area_csv(summary, args.csv)
    print(summary.to_dataframe().to_string(index=False))


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "accuracy":
            _run_accuracy(args)
        else:
            _run_area(args)
    except (SpatialAccuracyError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
