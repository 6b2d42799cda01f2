"""Presence/absence confusion counts within a polygon boundary.

Only the target class is tracked: inside cells are either hits (tp) or
omissions (fn), outside cells of the target class are commissions (fp).
True negatives outside the polygons are not part of this design.

No GDAL imports. Only depends on: numpy.
"""

import numpy as np

from .models import ConfusionCounts, ZoneValues


def _present(values: np.ndarray) -> np.ndarray:
    values = np.asarray(values)
    if np.issubdtype(values.dtype, np.floating):
        return values[~np.isnan(values)]
    return values


def accumulate(
    inside: np.ndarray,
    outside: np.ndarray,
    target_code: int,
) -> ConfusionCounts:
    """Count tp, fn, fp for one target code.

    Args:
        inside: Cell values within the polygon union.
        outside: Cell values outside the polygon union.
        target_code: Raster code of the target class.

    Returns:
        ConfusionCounts. Missing (NaN) values count as neither class.
    """
    inside = _present(inside)
    outside = _present(outside)

    tp = int(np.count_nonzero(inside == target_code))
    fn = int(inside.size) - tp
    fp = int(np.count_nonzero(outside == target_code))

    return ConfusionCounts(true_positive=tp, false_negative=fn, false_positive=fp)


def accumulate_zones(zones: ZoneValues, target_code: int) -> ConfusionCounts:
    return accumulate(zones.inside, zones.outside, target_code)
