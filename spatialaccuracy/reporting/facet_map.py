"""Facet labels and the long-form pixel table behind the comparison map.

The facet order is the MetricsTable order, which is the input layer
order (never alphabetical).

Depends on: numpy, pandas.
"""

import math
from enum import Enum
from typing import Dict, Optional

import numpy as np
import pandas as pd

from ..domain.categories import label_for
from ..domain.models import LayerMetrics, MetricsTable, RasterStack


class LabelMode(str, Enum):
    ACCURACY = "accuracy"
    SCR = "scr"
    BOTH = "both"


def as_label_mode(value) -> LabelMode:
    if isinstance(value, LabelMode):
        return value
    try:
        return LabelMode(str(value).lower())
    except ValueError:
        choices = ", ".join(m.value for m in LabelMode)
        raise ValueError(f"label_type must be one of: {choices}") from None


def _pct(value: float) -> str:
    return "NA" if math.isnan(value) else f"{value * 100:.1f}"


def _fixed2(value: float) -> str:
    return "NA" if math.isnan(value) else f"{value:.2f}"


def facet_label(metrics: LayerMetrics, mode=LabelMode.ACCURACY) -> str:
    """Two-line facet title for one layer."""
    mode = as_label_mode(mode)
    name = metrics.layer_name
    if mode is LabelMode.ACCURACY:
        return (
            f"{name}\nUA={_pct(metrics.users_accuracy)}% | "
            f"PA={_pct(metrics.producers_accuracy)}% | "
            f"F1={_pct(metrics.f1)}%"
        )
    if mode is LabelMode.SCR:
        return f"{name}\nSCR={_fixed2(metrics.scr)}"
    return f"{name}\nF1={_pct(metrics.f1)}% | SCR={_fixed2(metrics.scr)}"


def facet_labels(table: MetricsTable, mode=LabelMode.ACCURACY) -> Dict[str, str]:
    """{layer_name: facet label}, insertion-ordered like the table."""
    return {m.layer_name: facet_label(m, mode) for m in table}


def build_long_table(
    stack: RasterStack,
    table: MetricsTable,
    mode=LabelMode.ACCURACY,
    labels: Optional[Dict[str, str]] = None,
) -> pd.DataFrame:
    """One row per non-missing cell per layer.

    Columns: x, y (cell centre), Layer, Class (category label), label
    (facet title). Layer and label are ordered categoricals following
    the MetricsTable order.
    """
    labels = labels if labels is not None else facet_labels(table, mode)
    order = list(table.layer_names)

    frames = []
    for name in order:
        layer = stack[name]
        xs, ys = layer.cell_centers()
        valid = layer.valid_mask()
        codes = np.asarray(layer.values)[valid]

        lookup = {code: label_for(layer.categories, code) for code in np.unique(codes)}
        frames.append(pd.DataFrame({
            "x": xs[valid],
            "y": ys[valid],
            "Layer": name,
            "Class": [lookup[c] for c in codes],
            "label": labels[name],
        }))

    if frames:
        long_df = pd.concat(frames, ignore_index=True)
    else:
        long_df = pd.DataFrame(columns=["x", "y", "Layer", "Class", "label"])

    long_df["Layer"] = pd.Categorical(long_df["Layer"], categories=order, ordered=True)
    long_df["label"] = pd.Categorical(
        long_df["label"], categories=[labels[n] for n in order], ordered=True
    )
    return long_df
