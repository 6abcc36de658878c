"""Tests for save/restore semantics of the redirection store."""

from __future__ import annotations

from pathlib import Path

from ds_redirect.scope import GLOBAL_SCOPE, Scope
from ds_redirect.store import RedirectionStore


def test_global_set_and_remove(store: RedirectionStore) -> None:
    store.set("Tau", Path("/a"), GLOBAL_SCOPE)
    assert store.get("Tau") == Path("/a")
    assert "Tau" in store

    store.set("Tau", None, GLOBAL_SCOPE)
    assert store.get("Tau") is None
    assert len(store) == 0


def test_scoped_set_restores_absent(store: RedirectionStore) -> None:
    with Scope() as scope:
        store.set("Tau", Path("/a"), scope)
        assert store.get("Tau") == Path("/a")
    assert store.get("Tau") is None


def test_nested_scopes_restore_outer_override(store: RedirectionStore) -> None:
    with Scope() as outer:
        store.set("Tau", Path("/outer"), outer)
        with Scope() as inner:
            store.set("Tau", Path("/inner"), inner)
            assert store.get("Tau") == Path("/inner")
        assert store.get("Tau") == Path("/outer")
    assert store.get("Tau") is None


def test_scoped_removal_restores_global_override(store: RedirectionStore) -> None:
    store.set("Tau", Path("/global"), GLOBAL_SCOPE)
    with Scope() as scope:
        store.set("Tau", None, scope)
        assert store.get("Tau") is None
    assert store.get("Tau") == Path("/global")


def test_repeated_sets_in_one_scope_unwind_to_start(store: RedirectionStore) -> None:
    store.set("Tau", Path("/start"), GLOBAL_SCOPE)
    with Scope() as scope:
        store.set("Tau", Path("/one"), scope)
        store.set("Tau", Path("/two"), scope)
        store.set("Other", Path("/other"), scope)
    assert store.snapshot() == {"Tau": Path("/start")}
