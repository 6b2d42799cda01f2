"""Tests for class selection against category tables."""

import numpy as np
import pytest

from spatialaccuracy.domain.categories import (
    ByCode,
    ByLabel,
    as_selector,
    available_labels,
    label_for,
    resolve_code,
)
from spatialaccuracy.domain.errors import (
    AmbiguousClassError,
    InvalidInputTypeError,
    NotCategoricalError,
    UnknownClassError,
)

TABLE = {1: "ASM", 2: "Non.ASM"}


class TestResolveCode:
    """Tests for label/code resolution."""

    def test_label_resolves_to_code(self):
        assert resolve_code(TABLE, ByLabel("ASM")) == 1
        assert resolve_code(TABLE, ByLabel("Non.ASM")) == 2

    def test_code_resolves_to_itself(self):
        assert resolve_code(TABLE, ByCode(2)) == 2

    def test_unknown_label_lists_classes(self):
        with pytest.raises(UnknownClassError, match="ASM, Non.ASM") as exc:
            resolve_code(TABLE, ByLabel("water"))
        assert exc.value.available == ("ASM", "Non.ASM")
        assert "water" in str(exc.value)

    def test_unknown_code_raises(self):
        with pytest.raises(UnknownClassError, match="ASM, Non.ASM"):
            resolve_code(TABLE, ByCode(9))

    def test_missing_table_raises(self):
        with pytest.raises(NotCategoricalError):
            resolve_code(None, ByLabel("ASM"))
        with pytest.raises(NotCategoricalError):
            resolve_code(None, ByCode(1))

    def test_shared_label_is_ambiguous(self):
        table = {1: "forest", 2: "forest", 3: "water"}
        with pytest.raises(AmbiguousClassError) as exc:
            resolve_code(table, ByLabel("forest"))
        assert exc.value.codes == (1, 2)

    def test_errors_are_value_errors(self):
        """Callers catching ValueError still see resolution failures."""
        with pytest.raises(ValueError):
            resolve_code(TABLE, ByLabel("water"))

    def test_available_labels_unique_in_table_order(self):
        table = {3: "b", 1: "a", 2: "b"}
        assert available_labels(table) == ["b", "a"]


class TestAsSelector:
    """Tests for converting raw user input into selectors."""

    def test_string_is_label(self):
        assert as_selector("ASM") == ByLabel("ASM")

    def test_int_is_code(self):
        assert as_selector(1) == ByCode(1)

    def test_numpy_int_is_code(self):
        assert as_selector(np.int64(2)) == ByCode(2)

    def test_selector_passes_through(self):
        sel = ByCode(3)
        assert as_selector(sel) is sel

    def test_float_rejected(self):
        with pytest.raises(InvalidInputTypeError):
            as_selector(1.5)

    def test_bool_rejected(self):
        with pytest.raises(InvalidInputTypeError):
            as_selector(True)


class TestLabelFor:

    def test_known_code(self):
        assert label_for(TABLE, 1) == "ASM"

    def test_unknown_code_falls_back_to_text(self):
        assert label_for(TABLE, 7) == "7"
        assert label_for(None, 7) == "7"
