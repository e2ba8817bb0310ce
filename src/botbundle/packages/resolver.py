"""Dependency resolution: reuse a staged binary or fetch and stage it.

The presence of a dependency's target path is the only cache signal. Nothing
is ever written to the target path except by a single ``os.replace`` of a
fully prepared file, so a present path always means a completed fetch.
"""

import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from ..errors import DirectoryError
from .archive_utils import ArchiveExtractor
from .dependency import Dependency
from .downloader import PackageDownloader

logger = logging.getLogger(__name__)


@dataclass
class ResolveResult:
    """Outcome of resolving one dependency."""

    name: str
    path: Path
    fetched: bool


class DependencyResolver:
    """Fetch-or-reuse decision for bundled dependencies."""

    def __init__(
        self,
        downloader: Optional[PackageDownloader] = None,
        extractor: Optional[ArchiveExtractor] = None,
        show_progress: bool = True,
    ):
        self.downloader = downloader or PackageDownloader(show_progress=show_progress)
        self.extractor = extractor or ArchiveExtractor(show_progress=show_progress)
        self.show_progress = show_progress

    def resolve(self, dependency: Dependency) -> ResolveResult:
        """Make sure a dependency is staged at its target path.

        Args:
            dependency: Dependency to resolve

        Returns:
            ResolveResult telling whether a download happened

        Raises:
            FetchError: If the download fails
            ExtractionError: If the archive cannot be unpacked or located
            DirectoryError: If the scratch directory cannot be created
        """
        if dependency.is_staged:
            self._status(f"{dependency.name} found")
            logger.warning(
                "Reusing cached %s at %s without checking upstream for a newer release; "
                + "delete it to fetch the latest",
                dependency.name,
                dependency.target,
            )
            return ResolveResult(name=dependency.name, path=dependency.target, fetched=False)

        self._status(f"Downloading {dependency.name}")
        bin_dir = dependency.target.parent
        try:
            scratch = tempfile.TemporaryDirectory(prefix=f".{dependency.name}-", dir=bin_dir)
        except OSError as e:
            raise DirectoryError(f"Cannot create scratch directory in {bin_dir}: {e}") from e

        with scratch as scratch_name:
            scratch_dir = Path(scratch_name)
            download_path = scratch_dir / self._download_name(dependency)
            self.downloader.download(dependency.url, download_path)

            if dependency.kind.is_archive:
                binary = self.extractor.extract_binary(download_path, dependency, scratch_dir)
            else:
                binary = download_path

            self._stage(binary, dependency.target)

        logger.info("Staged %s at %s", dependency.name, dependency.target)
        return ResolveResult(name=dependency.name, path=dependency.target, fetched=True)

    def _stage(self, binary: Path, target: Path) -> None:
        """Mark a prepared binary executable and rename it to its target."""
        try:
            mode = binary.stat().st_mode
            binary.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            os.replace(binary, target)
        except OSError as e:
            raise DirectoryError(f"Failed to stage {binary.name} at {target}: {e}") from e

    @staticmethod
    def _download_name(dependency: Dependency) -> str:
        filename = Path(urlparse(dependency.url).path).name
        return filename or dependency.target.name

    def _status(self, message: str) -> None:
        if self.show_progress:
            print(f"[BUILD] {message}")
