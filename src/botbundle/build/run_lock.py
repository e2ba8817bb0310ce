"""Cross-process run lock for a distribution root.

Two bundler runs against the same dist directory would race on the
dependency cache and the final executable. The lock file is published with
a hard link from a private file that already holds the owner PID, so the
lock never exists without its owner. A lock whose owner process is gone is
moved aside and reclaimed; a lock with no readable owner is only reclaimed
once it is older than ``UNOWNED_LOCK_GRACE_SECONDS``.
"""

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Optional

import psutil

from ..errors import DirectoryError

logger = logging.getLogger(__name__)

LOCK_FILENAME = ".botbundle.lock"

UNOWNED_LOCK_GRACE_SECONDS = 30.0


class RunLock:
    """Exclusive lock on a distribution root, usable as a context manager."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.path = self.root / LOCK_FILENAME
        self._held = False

    def acquire(self) -> None:
        """Take the lock.

        Raises:
            DirectoryError: If another process holds the lock or the lock
                file cannot be written
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, pending_name = tempfile.mkstemp(prefix=f"{LOCK_FILENAME}.", suffix=".tmp", dir=self.root)
        except OSError as e:
            raise DirectoryError(f"Cannot create lock file in {self.root}: {e}") from e

        pending = Path(pending_name)
        try:
            with os.fdopen(fd, "w") as f:
                f.write(str(os.getpid()))

            for _attempt in range(2):
                try:
                    os.link(pending, self.path)
                except FileExistsError:
                    self._reclaim_if_stale()
                    continue
                except OSError as e:
                    raise DirectoryError(f"Cannot create lock file {self.path}: {e}") from e
                self._held = True
                return
        finally:
            pending.unlink(missing_ok=True)

        raise DirectoryError(f"Could not acquire lock {self.path}")

    def release(self) -> None:
        if self._held:
            if self.read_owner() == os.getpid():
                self.path.unlink(missing_ok=True)
            self._held = False

    def read_owner(self) -> Optional[int]:
        """PID recorded in the lock file, or None if missing or corrupt."""
        try:
            return int(self.path.read_text().strip())
        except (OSError, ValueError):
            return None

    def _reclaim_if_stale(self) -> None:
        """Move a stale lock out of the way.

        Raises:
            DirectoryError: If the lock is held, or changed hands while it
                was being reclaimed
        """
        try:
            observed = self.path.stat()
        except FileNotFoundError:
            return
        except OSError as e:
            raise DirectoryError(f"Cannot inspect lock file {self.path}: {e}") from e

        owner = self.read_owner()
        if owner is None:
            age = time.time() - observed.st_mtime
            if age < UNOWNED_LOCK_GRACE_SECONDS:
                raise DirectoryError(
                    f"Lock file {self.path} has no readable owner and is {age:.0f}s old; "
                    + "another bundler run may be starting"
                )
        elif owner == os.getpid() or psutil.pid_exists(owner):
            raise DirectoryError(
                f"Another bundler run (pid {owner}) is using {self.root}; "
                + f"wait for it to finish or remove {self.path} if it is stale"
            )

        logger.warning("Removing stale lock file %s (owner pid %s)", self.path, owner)
        claimed = self.path.with_name(f"{LOCK_FILENAME}.{os.getpid()}.stale")
        try:
            os.replace(self.path, claimed)
        except FileNotFoundError:
            return  # another run moved it first
        except OSError as e:
            raise DirectoryError(f"Cannot remove stale lock file {self.path}: {e}") from e

        try:
            if claimed.stat().st_ino != observed.st_ino:
                # A new owner published its lock after the check; give it back.
                try:
                    os.link(claimed, self.path)
                except FileExistsError:
                    logger.warning("Could not restore lock file %s; it was recreated", self.path)
                raise DirectoryError(f"Lock file {self.path} changed owner while being reclaimed")
        finally:
            claimed.unlink(missing_ok=True)

    def __enter__(self) -> "RunLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
