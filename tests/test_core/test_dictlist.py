"""Test functions of dictlist.py ."""

import pickle

import pytest

from autopad import DictList, Object


@pytest.fixture
def dict_list() -> DictList:
    """Provide a DictList of two objects."""
    return DictList([Object("a"), Object("b")])


def test_get_by_id(dict_list: DictList) -> None:
    """Test lookup by identifier."""
    assert dict_list.get_by_id("b") is dict_list[1]
    assert dict_list.a is dict_list[0]
    with pytest.raises(KeyError):
        dict_list.get_by_id("c")
    with pytest.raises(AttributeError):
        dict_list.c


def test_contains(dict_list: DictList) -> None:
    """Test membership by identifier and object."""
    assert "a" in dict_list
    assert dict_list[1] in dict_list
    assert "c" not in dict_list


def test_append_duplicate(dict_list: DictList) -> None:
    """Test that identifiers are unique."""
    with pytest.raises(ValueError):
        dict_list.append(Object("a"))


def test_remove(dict_list: DictList) -> None:
    """Test removal and reindexing."""
    dict_list.remove("a")
    assert len(dict_list) == 1
    assert dict_list.index("b") == 0


def test_index_other_object(dict_list: DictList) -> None:
    """Test that a different object with a known id is not found."""
    with pytest.raises(ValueError):
        dict_list.index(Object("a"))


def test_query(dict_list: DictList) -> None:
    """Test filtering."""
    result = dict_list.query(lambda x: x.id == "b")
    assert isinstance(result, DictList)
    assert result.list_attr("id") == ["b"]


def test_pickle(dict_list: DictList) -> None:
    """Test that the index survives serialization."""
    restored = pickle.loads(pickle.dumps(dict_list))
    assert restored.list_attr("id") == ["a", "b"]
    assert restored.get_by_id("b").id == "b"
