"""
JSON Store — Read and atomically write the spinner's JSON files.

Tokens, the whitelist and per-store build state are all small JSON documents
that are read, modified and written back on every call. Writes go to a
temporary file in the same directory and are moved into place with
os.replace(), so a crash mid-write never leaves a truncated file behind.

There is no locking: two CLI invocations touching the same file can still
overwrite each other's changes (last writer wins).
"""

import os
import json
import tempfile
from typing import Any, Callable


def read_json(path: str, default: Callable[[], Any]) -> Any:
    """Load JSON from path, or return default() if the file does not exist."""
    if not os.path.exists(path):
        return default()
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json_atomic(path: str, data: Any) -> None:
    """Write data as indented JSON to path via temp file + rename."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
