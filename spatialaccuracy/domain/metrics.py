"""Accuracy and area metrics from presence/absence counts.

    UA  = tp / (tp + fp)
    PA  = tp / (tp + fn)
    F1  = 2 * UA * PA / (UA + PA)
    SCR = area_inside / (area_inside + area_outside)

Zero denominators give NaN. NaN propagates: F1 is NaN whenever UA or
PA is NaN. percentage_in_polygon is 0 when the polygon area is 0.

No GDAL imports. Only depends on: math.
"""

import math

from .models import ConfusionCounts, LayerMetrics

NAN = float("nan")


def _ratio(numerator: float, denominator: float) -> float:
    if denominator > 0:
        return float(numerator) / float(denominator)
    return NAN


def users_accuracy(tp: int, fp: int) -> float:
    return _ratio(tp, tp + fp)


def producers_accuracy(tp: int, fn: int) -> float:
    return _ratio(tp, tp + fn)


def f1_score(ua: float, pa: float) -> float:
    if math.isnan(ua) or math.isnan(pa):
        return NAN
    if (ua + pa) > 0:
        return 2.0 * ua * pa / (ua + pa)
    return NAN


def spatially_correct_ratio(area_inside: float, area_outside: float) -> float:
    return _ratio(area_inside, area_inside + area_outside)


def percentage_in_polygon(area_inside: float, total_polygon_area: float) -> float:
    if total_polygon_area > 0:
        return area_inside / total_polygon_area * 100.0
    return 0.0


def compute_layer_metrics(
    counts: ConfusionCounts,
    pixel_area: float,
    total_polygon_area: float,
    layer_name: str = "",
    target_code: int = 0,
    target_label: str = "",
) -> LayerMetrics:
    """Compute the full metrics record for one layer.

    Args:
        counts: tp / fn / fp for the target code.
        pixel_area: Cell width * height (m2 for metric projected CRS).
        total_polygon_area: Summed reference polygon area in m2.
        layer_name: Name attached to the record.
        target_code: Resolved raster code (carried for provenance).
        target_label: Class label (carried for provenance).

    Returns:
        LayerMetrics with NaN for undefined ratios.
    """
    tp = counts.true_positive
    fn = counts.false_negative
    fp = counts.false_positive

    ua = users_accuracy(tp, fp)
    pa = producers_accuracy(tp, fn)

    area_inside = tp * pixel_area
    area_outside = fp * pixel_area

    return LayerMetrics(
        layer_name=layer_name,
        users_accuracy=ua,
        producers_accuracy=pa,
        f1=f1_score(ua, pa),
        scr=spatially_correct_ratio(area_inside, area_outside),
        area_inside=area_inside,
        area_outside=area_outside,
        percentage_in_polygon=percentage_in_polygon(area_inside, total_polygon_area),
        pixel_count_inside=tp,
        pixel_count_outside=fp,
        target_code=target_code,
        target_label=target_label,
        pixel_area=pixel_area,
        total_polygon_area=total_polygon_area,
        counts=counts,
    )
