"""Test functions of reaction.py ."""

import pytest

from autopad import Metabolite, Model, Reaction


def test_reactants_and_products(model: Model) -> None:
    """Test the split of a reaction into its two sides."""
    rxn = model.reactions.get_by_id("ACt")
    assert {m.id for m in rxn.reactants} == {"ac[e]", "h[e]"}
    assert {m.id for m in rxn.products} == {"ac[c]", "h[c]"}
    assert not rxn.boundary
    assert model.reactions.get_by_id("EX_glc").boundary


def test_get_coefficient(model: Model) -> None:
    """Test retrieving coefficients by id and by object."""
    rxn = model.reactions.get_by_id("ATPM")
    assert rxn.get_coefficient("atp[c]") == -1
    assert rxn.get_coefficient(model.metabolites.get_by_id("h[c]")) == 1
    with pytest.raises(KeyError):
        rxn.get_coefficient("glc[c]")


def test_add_metabolites_combine(model: Model) -> None:
    """Test combining coefficients and removal of zero entries."""
    rxn = model.reactions.get_by_id("ACt")
    rxn.add_metabolites({"h[c]": 1})
    assert rxn.get_coefficient("h[c]") == 2
    rxn.add_metabolites({"h[c]": -2})
    assert "h[c]" not in {m.id for m in rxn.metabolites}
    assert rxn not in model.metabolites.get_by_id("h[c]").reactions


def test_add_metabolites_replace(model: Model) -> None:
    """Test replacing coefficients."""
    rxn = model.reactions.get_by_id("ATPM")
    rxn.add_metabolites({"h[c]": 3}, combine=False)
    assert rxn.get_coefficient("h[c]") == 3


def test_add_metabolites_context(model: Model) -> None:
    """Test that coefficient changes are reverted on context exit."""
    rxn = model.reactions.get_by_id("ACt")
    with model:
        rxn.add_metabolites({"h[c]": -1})
        rxn.add_metabolites({"glc[c]": 2})
        assert "h[c]" not in {m.id for m in rxn.metabolites}
        assert rxn.get_coefficient("glc[c]") == 2
    assert rxn.get_coefficient("h[c]") == 1
    assert "glc[c]" not in {m.id for m in rxn.metabolites}


def test_add_metabolites_string_without_model() -> None:
    """Test that string keys need a model."""
    rxn = Reaction("R1")
    with pytest.raises(ValueError):
        rxn.add_metabolites({"a[c]": -1})


def test_check_mass_balance(model: Model) -> None:
    """Test the per-reaction element and charge balance."""
    assert model.reactions.get_by_id("ATPM").check_mass_balance() == {}
    assert model.reactions.get_by_id("EX_glc").check_mass_balance() == {
        "C": -6,
        "H": -12,
        "O": -6,
    }


def test_reaction_string() -> None:
    """Test the human readable equation."""
    a = Metabolite("a[c]")
    b = Metabolite("b[e]")
    rxn = Reaction("T")
    rxn.add_metabolites({a: -2, b: 1})
    assert rxn.build_reaction_string() == "2 a[c] --> b[e]"
    assert str(rxn) == "T: 2 a[c] --> b[e]"
