"""JSON snapshots of a program state."""

from __future__ import annotations

from datetime import datetime, timezone
import hashlib
import json

from ..constants import CELL_MODULUS, SNAPSHOT_VERSION
from .core import sanitize
from .state import ProgramState

REQUIRED_KEYS = ("tapebf_version", "source", "tape_size", "pointer", "counter", "cells")
VOLATILE_KEYS = ("timestamp", "report")


def build_snapshot_document(state: ProgramState, report=None):
    """Create an in-memory snapshot of *state*.

    Only non-zero cells are stored, keyed by their index as a string.
    """

    doc = {
        "tapebf_version": SNAPSHOT_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "source": state.source,
        "tape_size": state.tape_size,
        "pointer": state.pointer,
        "counter": state.counter,
        "cells": {str(i): value for i, value in enumerate(state.tape) if value},
        "output": state.output_log,
    }
    if report is not None:
        doc["report"] = report.to_dict()
    return doc


def write_snapshot_document(doc, filename):
    """Persist a snapshot document to disk."""

    with open(filename, "w", encoding="utf-8") as f:
        json.dump(doc, f, indent=2)
    print(f"  ✓ Snapshot exported → {filename}")
    return doc


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def verify_snapshot_document(doc):
    if not isinstance(doc, dict):
        raise ValueError("Snapshot must be a JSON object")
    missing = [key for key in REQUIRED_KEYS if key not in doc]
    if missing:
        raise ValueError(f"Snapshot missing {', '.join(missing)}")
    for key in ("tape_size", "pointer", "counter"):
        if not _is_int(doc[key]):
            raise ValueError(f"Snapshot {key} must be an integer, got {doc[key]!r}")
    if not isinstance(doc["source"], str):
        raise ValueError("Snapshot source must be a string")
    if not isinstance(doc["cells"], dict):
        raise ValueError("Snapshot cells must be a JSON object")
    tape_size = doc["tape_size"]
    if tape_size < 1:
        raise ValueError(f"Snapshot has invalid tape size {tape_size!r}")
    if not 0 <= doc["pointer"] < tape_size:
        raise ValueError(f"Snapshot pointer {doc['pointer']} outside tape")
    if not 0 <= doc["counter"] <= len(sanitize(doc["source"])):
        raise ValueError(f"Snapshot counter {doc['counter']} outside program")
    for key, value in doc["cells"].items():
        if not isinstance(key, str) or not key.isdigit() or int(key) >= tape_size:
            raise ValueError(f"Snapshot cell {key!r} outside tape")
        if not _is_int(value) or not 0 <= value < CELL_MODULUS:
            raise ValueError(f"Snapshot cell {key} holds non-byte value {value!r}")
    output = doc.get("output", "")
    if not isinstance(output, str):
        raise ValueError("Snapshot output must be a string")
    return doc


def load_snapshot(filename):
    """Load and validate a snapshot JSON file."""
    with open(filename, "r", encoding="utf-8") as f:
        doc = json.load(f)
    return verify_snapshot_document(doc)


def restore_state(doc) -> ProgramState:
    """Rebuild a :class:`ProgramState` that resumes where the snapshot stopped."""

    verify_snapshot_document(doc)
    state = ProgramState(sanitize(doc["source"]), doc["tape_size"])
    for key, value in doc["cells"].items():
        state.tape[int(key)] = value
    state.pointer = doc["pointer"]
    state.counter = doc["counter"]
    state.output_log = doc.get("output", "")
    return state


def canonicalize_snapshot(doc):
    """Drop fields that change between otherwise identical runs."""

    return {key: value for key, value in doc.items() if key not in VOLATILE_KEYS}


def hash_snapshot_document(doc):
    canon = canonicalize_snapshot(doc)
    payload = json.dumps(canon, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def hash_snapshot(filename):
    """Compute the canonical SHA-256 of a snapshot file."""
    return hash_snapshot_document(load_snapshot(filename))


__all__ = [
    "build_snapshot_document",
    "canonicalize_snapshot",
    "hash_snapshot",
    "hash_snapshot_document",
    "load_snapshot",
    "restore_state",
    "verify_snapshot_document",
    "write_snapshot_document",
]
