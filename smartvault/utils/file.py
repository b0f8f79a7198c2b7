from __future__ import annotations

import contextlib
import os
import tempfile
import time
import uuid
from pathlib import Path
from typing import Iterator


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def unique_token() -> str:
    """Time-based prefix plus a random suffix, safe across concurrent requests."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def safe_unlink(path: Path) -> None:
    with contextlib.suppress(OSError):
        path.unlink()


@contextlib.contextmanager
def workdir(prefix: str, root: str | None = None) -> Iterator[Path]:
    if root:
        ensure_dir(Path(root))
    with tempfile.TemporaryDirectory(
        prefix=f"{prefix}-{unique_token()}-", dir=root, ignore_cleanup_errors=True
    ) as tmp:
        yield Path(tmp)


@contextlib.contextmanager
def scratch_file(data: bytes, suffix: str, prefix: str = "scratch", root: str | None = None) -> Iterator[Path]:
    """Write ``data`` to a fresh temp file that is removed on exit, even if the write fails."""
    if root:
        ensure_dir(Path(root))
    fd, name = tempfile.mkstemp(prefix=f"{prefix}-{unique_token()}", suffix=suffix, dir=root)
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        yield path
    finally:
        safe_unlink(path)
