"""Export of metrics tables, maps, and provenance records.

Depends on: pandas, matplotlib, json.
"""

import dataclasses
import datetime
import json
import logging
from typing import Any, Dict, Sequence

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from ..domain.models import AreaSummary, MetricsTable, RunMetadata

logger = logging.getLogger(__name__)


def export_metrics_csv(table: MetricsTable, output_path: str, sep: str = ",") -> str:
    """Write the MetricsTable as a delimited file (undefined values as NA)."""
    table.to_dataframe().to_csv(output_path, sep=sep, index=False, na_rep="NA")
    logger.info("Metrics saved: %s", output_path)
    return output_path


def export_area_csv(summary: AreaSummary, output_path: str, sep: str = ",") -> str:
    summary.to_dataframe().to_csv(output_path, sep=sep, index=False, na_rep="NA")
    logger.info("Area summary saved: %s", output_path)
    return output_path


def save_figure(fig: Figure, output_path: str, dpi: int = 300, close: bool = True) -> str:
    """Save a rendered map; the figure is closed afterwards by default."""
    fig.savefig(output_path, dpi=dpi)
    if close:
        plt.close(fig)
    logger.info("Map saved: %s", output_path)
    return output_path


def build_run_metadata(
    layer_names: Sequence[str],
    crs: str,
    target_class,
    other_class,
    label_type: str,
    raster_paths: Sequence[str] = (),
    polygon_path: str = "",
    parameters: Dict[str, Any] = None,
) -> RunMetadata:
    from .. import __version__

    return RunMetadata(
        package_version=__version__,
        timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
        layer_names=tuple(layer_names),
        raster_paths=tuple(raster_paths),
        polygon_path=polygon_path,
        crs=crs,
        target_class=str(target_class),
        other_class=str(other_class),
        label_type=str(label_type),
        parameters=dict(parameters or {}),
    )


def write_run_metadata(metadata: RunMetadata, output_path: str) -> str:
    """Serialize provenance next to the exported outputs."""
    with open(output_path, "w") as f:
        json.dump(dataclasses.asdict(metadata), f, indent=2)
    return output_path
