"""Signed, append-only ledger of program runs."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import sys

from ..constants import LOGBOOK_FILE, LOGBOOK_LIMIT
from . import crypto as _crypto
from .snapshot import hash_snapshot


def _logbook_path():
    return getattr(sys.modules.get("tapebf.runtime"), "LOGBOOK_FILE", LOGBOOK_FILE)


def record_run(snapshot_filename, report):
    """Append this run's summary to the logbook, signed over the snapshot hash."""
    sha = hash_snapshot(snapshot_filename)
    runtime_mod = sys.modules.get("tapebf.runtime")
    signer = getattr(runtime_mod, "sign_hash", _crypto.sign_hash)
    sig = signer(sha)

    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "filename": str(snapshot_filename),
        "hash": sha,
        "signature": sig,
        "instruction_count": report.instruction_count,
        "final_counter": report.final_counter,
        "elapsed_us": report.elapsed_us,
        "output_length": len(report.output),
    }

    logbook_path = _logbook_path()
    with open(logbook_path, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry) + "\n")

    print(f"  📜 Recorded and signed run → {logbook_path}")
    return entry


def read_logbook(limit=LOGBOOK_LIMIT):
    try:
        with open(_logbook_path(), "r", encoding="utf-8") as f:
            lines = [line for line in f if line.strip()]
    except FileNotFoundError:
        return []
    return [json.loads(line) for line in lines[-limit:]]


def show_logbook(limit=LOGBOOK_LIMIT):
    """Display recent logbook entries, newest first."""
    entries = read_logbook(limit)
    if not entries:
        print("No logbook yet.")
        return entries

    print(f"\ntapebf logbook — last {len(entries)} entries:")
    for e in reversed(entries):
        print(
            f"• {e['timestamp']}  {e['filename']}  "
            f"pc={e['final_counter']}/{e['instruction_count']}  "
            f"{e['elapsed_us']}µs  {e['hash'][:12]}…"
        )
    return entries


__all__ = [
    "read_logbook",
    "record_run",
    "show_logbook",
]
