"""Shared file helpers for the JSON-backed repositories.

Each backing file is a JSON list of records.  Read-modify-write cycles on
the same path are serialised across processes by a sibling ``.lock``
file, and every write goes through a uniquely named temporary file plus
``os.replace`` so readers never see a half-written file.
"""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock


def _lock_for(path: Path) -> FileLock:
    return FileLock(path.with_name(path.name + ".lock"))


def ensure_file(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with _lock_for(path):
        if not path.exists():
            _write(path, [])


def load_records(path: Path) -> list[dict]:
    # Writers replace the file atomically, so a plain read is consistent.
    return json.loads(path.read_text(encoding="utf-8"))


@contextmanager
def updating_records(path: Path) -> Iterator[list[dict]]:
    """Yield the record list; persist it if the block exits cleanly."""
    with _lock_for(path):
        records = json.loads(path.read_text(encoding="utf-8"))
        yield records
        _write(path, records)


def _write(path: Path, records: list[dict]) -> None:
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=path.name + ".",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        json.dump(records, tmp, indent=2)
        tmp.write("\n")
    try:
        os.replace(tmp.name, path)
    except OSError:
        os.unlink(tmp.name)
        raise
