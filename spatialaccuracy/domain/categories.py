"""Class selection against a raster category table.

A target class is requested either by its label ("ASM") or, for rasters
that encode classes directly as small integers, by the code itself (1).
Raw user input is converted once into a ClassSelector and resolved here.

No GDAL imports. Only depends on: numpy, domain.errors.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import numpy as np

from .errors import (
    AmbiguousClassError,
    InvalidInputTypeError,
    NotCategoricalError,
    UnknownClassError,
)


@dataclass(frozen=True)
class ByLabel:
    label: str

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class ByCode:
    code: int

    def __str__(self) -> str:
        return str(self.code)


ClassSelector = Union[ByLabel, ByCode]


def as_selector(value) -> ClassSelector:
    """Convert user input (label, code or selector) into a ClassSelector."""
    if isinstance(value, (ByLabel, ByCode)):
        return value
    if isinstance(value, str):
        return ByLabel(value)
    # bool is an int subclass but never a sensible class code
    if isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_)):
        return ByCode(int(value))
    raise InvalidInputTypeError(
        f"Target class must be a label (str) or a code (int), "
        f"got {type(value).__name__}"
    )


def available_labels(categories: Dict[int, str]) -> List[str]:
    """Unique labels in table order."""
    seen: List[str] = []
    for label in categories.values():
        if label not in seen:
            seen.append(label)
    return seen


def resolve_code(
    categories: Optional[Dict[int, str]],
    selector: ClassSelector,
) -> int:
    """Resolve a class selector to its unique integer raster code.

    Args:
        categories: Ordered {code: label} table, or None if the layer
            is not categorical.
        selector: ByLabel or ByCode.

    Returns:
        The integer code of the requested class.

    Raises:
        NotCategoricalError: Table is missing.
        UnknownClassError: Label/code not in the table.
        AmbiguousClassError: Label shared by more than one code.
    """
    if categories is None:
        raise NotCategoricalError("Raster must be categorical (have a category table).")

    if isinstance(selector, ByCode):
        if selector.code not in categories:
            raise UnknownClassError(selector.code, available_labels(categories))
        return int(selector.code)

    codes = [int(code) for code, label in categories.items() if label == selector.label]
    if not codes:
        raise UnknownClassError(selector.label, available_labels(categories))
    if len(set(codes)) != 1:
        raise AmbiguousClassError(selector.label, codes)
    return codes[0]


def label_for(categories: Optional[Dict[int, str]], code) -> str:
    """Display label for a cell code, falling back to the code as text."""
    if categories is not None and code in categories:
        return categories[code]
    return str(code)
