"""Grid alignment checks across the layers of a raster stack.

Detects CRS, shape, resolution, and origin differences between layers.
Never resamples; only reports issues.

Depends on: core.reprojection.
"""

from dataclasses import dataclass, field
from typing import List

from ..domain.models import RasterStack
from .reprojection import same_crs


@dataclass
class AlignmentIssue:
    severity: str     # 'WARNING'
    message: str
    suggestion: str = ""


@dataclass
class AlignmentReport:
    issues: List[AlignmentIssue] = field(default_factory=list)

    @property
    def is_aligned(self) -> bool:
        return not self.issues


def check_stack_alignment(stack: RasterStack, tolerance: float = 1e-6) -> AlignmentReport:
    """Compare every layer of *stack* against its first layer.

    Layers of a stack are expected to share one grid; differences are
    reported as warnings and evaluation still proceeds per layer.
    """
    report = AlignmentReport()
    if len(stack) < 2:
        return report

    first = stack.layers[0]
    for layer in stack.layers[1:]:
        try:
            crs_matches = same_crs(first.crs, layer.crs)
        except RuntimeError as e:
            # Unreadable CRS fails later, when that layer is evaluated
            report.issues.append(AlignmentIssue(
                severity="WARNING",
                message=f"CRS of '{layer.name}' could not be compared: {e}",
            ))
            crs_matches = True
        if not crs_matches:
            report.issues.append(AlignmentIssue(
                severity="WARNING",
                message=f"CRS of '{layer.name}' differs from '{first.name}'.",
                suggestion="Polygons are reprojected per layer CRS.",
            ))

        if layer.shape != first.shape:
            report.issues.append(AlignmentIssue(
                severity="WARNING",
                message=(
                    f"Shape mismatch: '{layer.name}' is "
                    f"{layer.height} x {layer.width}, '{first.name}' is "
                    f"{first.height} x {first.width}."
                ),
            ))

        res_a, res_b = first.resolution, layer.resolution
        if abs(res_a[0] - res_b[0]) > tolerance or abs(res_a[1] - res_b[1]) > tolerance:
            report.issues.append(AlignmentIssue(
                severity="WARNING",
                message=(
                    f"Resolution mismatch: '{layer.name}' "
                    f"{res_b[0]:.4f} x {res_b[1]:.4f} vs "
                    f"{res_a[0]:.4f} x {res_a[1]:.4f}."
                ),
                suggestion=(
                    "Resample with nearest neighbour before comparing "
                    "layers side by side."
                ),
            ))

        gt_a, gt_b = first.geotransform, layer.geotransform
        if abs(gt_a[0] - gt_b[0]) > tolerance or abs(gt_a[3] - gt_b[3]) > tolerance:
            report.issues.append(AlignmentIssue(
                severity="WARNING",
                message=f"Grid origin of '{layer.name}' differs from '{first.name}'.",
            ))

    return report
