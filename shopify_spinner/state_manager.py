"""
State Manager — Persist per-store build progress to disk.

Each store gets <base_dir>/<store_name>/state.json:

    {
      "storeName": "my-store",
      "shopDomain": "my-store.myshopify.com",
      "configPath": "/abs/path/config.yaml",
      "createdAt": "...", "updatedAt": "...",
      "steps": {
        "store_created":       {"status": "complete", "completedAt": "...", "data": {...}},
        "theme_configured":    {"status": "pending"},
        "products_imported":   {"status": "partial", "data": {"created": 9, "failed": 1}},
        "collections_created": {"status": "pending"},
        "settings_applied":    {"status": "pending"}
      }
    }

Step lifecycle: pending -> in_progress -> complete | failed | partial.
Entering in_progress stamps startedAt; entering any terminal status stamps
completedAt. The data dict is merged on every update so repeated calls
accumulate diagnostics. The whole file is rewritten (atomically) after
every transition.
"""

import os
import shutil
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .errors import StateError
from .json_store import read_json, write_json_atomic

STEP_ORDER = (
    "store_created",
    "theme_configured",
    "products_imported",
    "collections_created",
    "settings_applied",
)

STEP_LABELS = {
    "store_created": "Store Created",
    "theme_configured": "Theme Configured",
    "products_imported": "Products Imported",
    "collections_created": "Collections Created",
    "settings_applied": "Settings Applied",
}

PENDING = "pending"
IN_PROGRESS = "in_progress"
COMPLETE = "complete"
FAILED = "failed"
PARTIAL = "partial"

STEP_STATUSES = (PENDING, IN_PROGRESS, COMPLETE, FAILED, PARTIAL)
TERMINAL_STATUSES = (COMPLETE, FAILED, PARTIAL)

STATE_FILENAME = "state.json"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class StateManager:
    """Reads and writes build state files under a base directory."""

    def __init__(self, base_dir: str):
        self.base_dir = base_dir
        os.makedirs(base_dir, exist_ok=True)

    def _store_path(self, store_name: str) -> str:
        return os.path.join(self.base_dir, store_name)

    def _state_file(self, store_name: str) -> str:
        return os.path.join(self._store_path(store_name), STATE_FILENAME)

    def initialize_state(self, store_name: str, config_path: str) -> Dict[str, Any]:
        """Build a fresh state with every step pending. Nothing is written."""
        now = _now()
        return {
            "storeName": store_name,
            "configPath": config_path,
            "createdAt": now,
            "updatedAt": now,
            "steps": {step: {"status": PENDING} for step in STEP_ORDER},
        }

    def save_state(self, store_name: str, state: Dict[str, Any]) -> None:
        state["updatedAt"] = _now()
        write_json_atomic(self._state_file(store_name), state)

    def load_state(self, store_name: str) -> Optional[Dict[str, Any]]:
        return read_json(self._state_file(store_name), default=lambda: None)

    def _require_state(self, store_name: str) -> Dict[str, Any]:
        state = self.load_state(store_name)
        if state is None:
            raise StateError(f"No state found for store: {store_name}")
        return state

    @staticmethod
    def _check_step(step: str) -> None:
        if step not in STEP_ORDER:
            raise ValueError(f"Unknown step: {step}")

    def update_step(
        self,
        store_name: str,
        step: str,
        status: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Move a step to a new status, merging data into its payload.

        Returns:
            The saved state.

        Raises:
            StateError: If the store has no saved state.
            ValueError: If the step or status is unknown.
        """
        self._check_step(step)
        if status not in STEP_STATUSES:
            raise ValueError(f"Unknown step status: {status}")

        state = self._require_state(store_name)
        step_state = state["steps"].setdefault(step, {"status": PENDING})

        step_state["status"] = status
        if status == IN_PROGRESS:
            step_state["startedAt"] = _now()
        if status in TERMINAL_STATUSES:
            step_state["completedAt"] = _now()
        if data:
            step_state["data"] = {**step_state.get("data", {}), **data}

        self.save_state(store_name, state)
        return state

    def set_step_error(self, store_name: str, step: str, error: str) -> Dict[str, Any]:
        """Mark a step failed with an error message (from any status)."""
        self._check_step(step)
        state = self._require_state(store_name)
        step_state = state["steps"].setdefault(step, {"status": PENDING})

        step_state["status"] = FAILED
        step_state["error"] = error
        step_state["completedAt"] = _now()

        self.save_state(store_name, state)
        return state

    def find_next_incomplete_step(self, store_name: str) -> Optional[str]:
        """First step in STEP_ORDER that is not complete, or None."""
        state = self.load_state(store_name)
        if state is None:
            return None

        for step in STEP_ORDER:
            if state["steps"].get(step, {}).get("status") != COMPLETE:
                return step
        return None

    def list_stores(self) -> List[str]:
        if not os.path.exists(self.base_dir):
            return []
        return sorted(
            entry for entry in os.listdir(self.base_dir)
            if os.path.isdir(os.path.join(self.base_dir, entry))
        )

    def delete_store(self, store_name: str) -> None:
        store_path = self._store_path(store_name)
        if os.path.exists(store_path):
            shutil.rmtree(store_path)
