"""Distribution layout and directory preparation.

Layout Structure:
    dist/
    ├── music-bot           # Final application executable (purged each run)
    └── bin/                # Staged runtime dependencies (kept across runs)
        ├── yt-dlp
        └── ffmpeg

The bin directory doubles as the dependency cache: nothing in it expires.
Only the application executable is removed before a new build so a failed
run never leaves a stale artifact looking like a fresh one.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..errors import DirectoryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistributionLayout:
    """Paths making up a distribution directory."""

    root: Path
    bin_dir: Path
    executable: Path

    @classmethod
    def create(cls, root: Path, app_filename: str, bin_subdir: str = "bin") -> "DistributionLayout":
        root = Path(root)
        return cls(root=root, bin_dir=root / bin_subdir, executable=root / app_filename)


class DirectoryPreparer:
    """Creates the distribution directories and purges the stale artifact."""

    def __init__(self, show_progress: bool = True):
        self.show_progress = show_progress

    def prepare(self, layout: DistributionLayout) -> None:
        """Ensure directories exist and remove a previous executable.

        Args:
            layout: Distribution layout to prepare

        Raises:
            DirectoryError: If a directory cannot be created or the old
                executable cannot be removed
        """
        self._status("Preparing dist directories")
        for directory in (layout.root, layout.bin_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DirectoryError(f"Cannot create directory {directory}: {e}") from e

        if layout.executable.is_dir():
            raise DirectoryError(f"Expected a file but found a directory at {layout.executable}")

        if layout.executable.exists():
            self._status("Removing previous binary artifact")
            try:
                layout.executable.unlink()
            except OSError as e:
                raise DirectoryError(f"Cannot remove previous artifact {layout.executable}: {e}") from e
            logger.info("Removed %s", layout.executable)

    def _status(self, message: str) -> None:
        if self.show_progress:
            print(f"[BUILD] {message}")
