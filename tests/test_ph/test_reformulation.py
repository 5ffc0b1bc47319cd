"""Test functions of ph/reformulation.py ."""

import logging

import numpy as np
import pandas as pd
import pytest

from autopad import Model
from autopad.core.formula import ELEMENTS, formula_to_vector
from autopad.exceptions import NegativeAtomCountError
from autopad.ph import (
    adjust_vector,
    apply_formula_edits,
    compute_formula_edits,
    reformulate,
)


def test_adjust_vector() -> None:
    """Test shifting hydrogen count and charge."""
    vector = formula_to_vector("C10H12N5O13P3")
    adjusted, charge = adjust_vector(vector, -4, -1)
    assert adjusted[ELEMENTS.index("H")] == 11
    assert charge == -5
    # the input is left untouched
    assert vector[ELEMENTS.index("H")] == 12


def test_adjust_vector_missing_charge() -> None:
    """Test that a missing charge stays missing."""
    _, charge = adjust_vector(formula_to_vector("H2O"), None, 1)
    assert charge is None


def test_adjust_vector_negative() -> None:
    """Test that hydrogen counts cannot become negative."""
    with pytest.raises(NegativeAtomCountError):
        adjust_vector(formula_to_vector("CO2"), 0, -1)


def test_reformulate() -> None:
    """Test the edit of ATP losing a proton."""
    edit = reformulate("atp[c]", "C10H12N5O13P3", -4, -1)
    assert edit.formula == "H11C10O13P3N5"
    assert edit.charge == -5
    assert edit.delta == -1
    assert not edit.fallback


def test_reformulate_unknown_element() -> None:
    """Test that formulae outside the vocabulary are kept."""
    edit = reformulate("sel[c]", "C3H6NO2Se", 0, 1)
    assert edit.formula == "C3H6NO2Se"
    assert edit.charge == 1
    assert edit.fallback


def test_reformulate_proton_loss() -> None:
    """Test that a vector without positive counts keeps the formula."""
    edit = reformulate("h[c]", "H", 1, -1)
    assert edit.formula == "H"
    assert edit.charge == 0
    assert edit.fallback


def test_reformulate_missing_formula() -> None:
    """Test that a missing formula is not a fallback."""
    edit = reformulate("unk[c]", None, 0, 1)
    assert edit.formula is None
    assert edit.charge == 1
    assert not edit.fallback


def test_reformulate_negative() -> None:
    """Test that the error names the metabolite."""
    with pytest.raises(NegativeAtomCountError, match="co2\\[e\\]"):
        reformulate("co2[e]", "CO2", 0, -1)


def test_compute_formula_edits(model: Model) -> None:
    """Test that only metabolites with a non-zero delta are edited."""
    deltas = pd.Series(0, index=[met.id for met in model.metabolites])
    deltas["ac[e]"] = -1
    deltas["atp[c]"] = 1
    edits = compute_formula_edits(model, deltas)
    assert [edit.metabolite_id for edit in edits] == ["atp[c]", "ac[e]"]
    # nothing is applied yet
    assert model.metabolites.get_by_id("ac[e]").formula == "C2H3O2"


def test_apply_formula_edits(model: Model, caplog) -> None:
    """Test writing edits and reverting them with the model context."""
    met = model.metabolites.get_by_id("ac[e]")
    edits = [
        reformulate("ac[e]", "C2H3O2", -1, -1),
        reformulate("glc[e]", "C6H12O6Se", 0, 1),
    ]
    with model:
        with caplog.at_level(logging.WARNING):
            apply_formula_edits(model, edits)
        assert met.formula == "H2C2O2"
        assert met.charge == -2
        assert model.metabolites.get_by_id("glc[e]").charge == 1
        assert "could not be rebuilt" in caplog.text
    assert met.formula == "C2H3O2"
    assert met.charge == -1
    assert model.metabolites.get_by_id("glc[e]").charge == 0


def test_round_trip() -> None:
    """Test that opposite deltas restore elements and charge."""
    forward = reformulate("atp[c]", "C10H12N5O13P3", -4, -2)
    backward = reformulate("atp[c]", forward.formula, forward.charge, 2)
    assert np.array_equal(
        formula_to_vector(backward.formula), formula_to_vector("C10H12N5O13P3")
    )
    assert backward.charge == -4
