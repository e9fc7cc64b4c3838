"""Exclusive file lock guarding the single-writer cache database."""

import fcntl
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from notehub.storage.exceptions import LockError

LOCK_TIMEOUT = 5.0


@contextmanager
def file_lock(lock_path: Path, timeout: float = LOCK_TIMEOUT) -> Generator[None, None, None]:
    """Hold an exclusive lock on lock_path for the duration of the block.

    The cache supports a single writing process at a time; a second invocation
    waits up to timeout seconds and then raises LockError.
    """
    lock_path = Path(lock_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)

    with open(lock_path, "w") as lock_file:
        start_time = time.monotonic()
        while True:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() - start_time >= timeout:
                    raise LockError(f"Could not acquire lock on {lock_path} within {timeout}s") from None
                time.sleep(0.01)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
