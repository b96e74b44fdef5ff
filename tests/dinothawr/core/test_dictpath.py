# tests/dinothawr/core/test_dictpath.py
from __future__ import annotations

import pytest

from dinothawr.core.dictpath import deleteByPath, getByPath, setByPath


# ----------------------------------------
# getByPath
# ----------------------------------------

def test_getByPath_nestedAndMissing() -> None:
    data = {"paths": {"bundle": "/opt/dino/bundle"}, "volume": 0}

    assert getByPath(data, "paths.bundle") == "/opt/dino/bundle"
    assert getByPath(data, "volume") == 0
    assert getByPath(data, "paths.engine", "fallback") == "fallback"
    assert getByPath(data, "volume.level") is None
    assert getByPath(None, "anything") is None


@pytest.mark.parametrize("path", ["", "a..b", ".a", "a."])
def test_paths_withEmptySegments_areRejected(path: str) -> None:
    with pytest.raises(ValueError):
        getByPath({}, path)


# ----------------------------------------
# setByPath
# ----------------------------------------

def test_setByPath_createsIntermediateDicts() -> None:
    data: dict = {}
    setByPath(data, "platform.display.widthDp", 800)
    assert data == {"platform": {"display": {"widthDp": 800}}}


def test_setByPath_replacesScalarParent() -> None:
    data: dict = {"platform": 1}
    setByPath(data, "platform.refreshRate", 60.0)
    assert data == {"platform": {"refreshRate": 60.0}}


def test_setByPath_withoutCreate_raisesOnMissingParent() -> None:
    with pytest.raises(KeyError):
        setByPath({}, "a.b", 1, createIfMissing=False)


# ----------------------------------------
# deleteByPath
# ----------------------------------------

def test_deleteByPath_missingLeaf_returnsFalse() -> None:
    data = {"a": {"b": 1}}
    assert deleteByPath(data, "a.c") is False
    assert deleteByPath(data, "x.y") is False
    assert data == {"a": {"b": 1}}


def test_deleteByPath_prunesOnlyEmptyParents() -> None:
    data = {"a": {"b": {"c": 1}, "keep": True}}
    assert deleteByPath(data, "a.b.c", pruneEmptyParents=True) is True
    assert data == {"a": {"keep": True}}


def test_deleteByPath_withoutPrune_leavesEmptyParents() -> None:
    data = {"a": {"b": {"c": 1}}}
    deleteByPath(data, "a.b.c")
    assert data == {"a": {"b": {}}}
