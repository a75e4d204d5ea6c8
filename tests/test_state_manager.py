"""Tests for shopify_spinner.state_manager.StateManager."""

import json
import os

import pytest

from shopify_spinner.errors import StateError
from shopify_spinner.state_manager import STEP_ORDER, StateManager


@pytest.fixture
def manager(tmp_path):
    return StateManager(str(tmp_path / "stores"))


@pytest.fixture
def saved(manager):
    state = manager.initialize_state("my-store", "/configs/store.yaml")
    manager.save_state("my-store", state)
    return manager


def test_initialize_state(manager):
    state = manager.initialize_state("my-store", "/configs/store.yaml")
    assert state["storeName"] == "my-store"
    assert state["configPath"] == "/configs/store.yaml"
    assert list(state["steps"]) == list(STEP_ORDER)
    assert all(step["status"] == "pending" for step in state["steps"].values())
    # Not written until save_state
    assert manager.load_state("my-store") is None


def test_save_and_load_round_trip(saved, tmp_path):
    state_file = tmp_path / "stores" / "my-store" / "state.json"
    assert state_file.exists()
    on_disk = json.loads(state_file.read_text())
    assert on_disk["storeName"] == "my-store"
    assert saved.load_state("my-store") == on_disk


def test_save_leaves_no_temp_files(saved, tmp_path):
    store_dir = tmp_path / "stores" / "my-store"
    assert sorted(os.listdir(store_dir)) == ["state.json"]


def test_update_step_in_progress_sets_started_at(saved):
    state = saved.update_step("my-store", "products_imported", "in_progress")
    step = state["steps"]["products_imported"]
    assert step["status"] == "in_progress"
    assert "startedAt" in step
    assert "completedAt" not in step


@pytest.mark.parametrize("status", ["complete", "failed", "partial"])
def test_update_step_terminal_sets_completed_at(saved, status):
    state = saved.update_step("my-store", "products_imported", status)
    assert "completedAt" in state["steps"]["products_imported"]


def test_update_step_merges_data(saved):
    saved.update_step("my-store", "products_imported", "in_progress", {"source": "p.csv"})
    saved.update_step("my-store", "products_imported", "partial", {"created": 9, "failed": 1})
    step = saved.load_state("my-store")["steps"]["products_imported"]
    assert step["data"] == {"source": "p.csv", "created": 9, "failed": 1}


def test_update_step_persists(saved):
    saved.update_step("my-store", "store_created", "complete")
    assert saved.load_state("my-store")["steps"]["store_created"]["status"] == "complete"


def test_update_step_without_state_raises(manager):
    with pytest.raises(StateError, match="No state found for store: ghost"):
        manager.update_step("ghost", "store_created", "complete")


def test_update_step_unknown_step(saved):
    with pytest.raises(ValueError):
        saved.update_step("my-store", "coffee_brewed", "complete")


def test_update_step_unknown_status(saved):
    with pytest.raises(ValueError):
        saved.update_step("my-store", "store_created", "done")


def test_set_step_error(saved):
    saved.update_step("my-store", "products_imported", "in_progress")
    state = saved.set_step_error("my-store", "products_imported", "CSV errors: Row 2")
    step = state["steps"]["products_imported"]
    assert step["status"] == "failed"
    assert step["error"] == "CSV errors: Row 2"
    assert "completedAt" in step


def test_set_step_error_without_state(manager):
    with pytest.raises(StateError):
        manager.set_step_error("ghost", "store_created", "boom")


def test_find_next_incomplete_step(saved):
    assert saved.find_next_incomplete_step("my-store") == "store_created"
    saved.update_step("my-store", "store_created", "complete")
    saved.update_step("my-store", "theme_configured", "partial")
    assert saved.find_next_incomplete_step("my-store") == "theme_configured"

    for step in STEP_ORDER:
        saved.update_step("my-store", step, "complete")
    assert saved.find_next_incomplete_step("my-store") is None


def test_find_next_incomplete_step_unknown_store(manager):
    assert manager.find_next_incomplete_step("ghost") is None


def test_list_stores_sorted(manager):
    for name in ("zeta", "alpha", "mid"):
        manager.save_state(name, manager.initialize_state(name, "/c.yaml"))
    assert manager.list_stores() == ["alpha", "mid", "zeta"]


def test_delete_store(saved):
    saved.delete_store("my-store")
    assert saved.load_state("my-store") is None
    assert saved.list_stores() == []
    # Deleting again is a no-op
    saved.delete_store("my-store")
