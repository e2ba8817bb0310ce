"""Archive Extraction Utilities.

This module extracts downloaded dependency archives (.tar.xz and .zip) and
finds the one binary the bundle needs inside the extracted tree. Upstream
archives nest the binary under a versioned directory, so the layout is
flattened by returning just that file; the caller moves it to its staged
path and discards the rest of the tree.
"""

import logging
import lzma
import tarfile
import zipfile
from pathlib import Path

from ..errors import ExtractionError
from ..interrupt_utils import handle_keyboard_interrupt_properly
from .dependency import ArchiveKind, Dependency

logger = logging.getLogger(__name__)


class ArchiveExtractor:
    """Extracts dependency archives and locates their binary.

    Supports .tar.xz and .zip archives. Extraction always happens into a
    caller-owned scratch directory so cleanup is the caller's scope.
    """

    def __init__(self, show_progress: bool = True):
        """Initialize archive extractor.

        Args:
            show_progress: Whether to print extraction status
        """
        self.show_progress = show_progress

    def extract(self, archive_path: Path, kind: ArchiveKind, dest_dir: Path) -> Path:
        """Extract an archive of the given kind into dest_dir.

        Args:
            archive_path: Path to the archive file
            kind: Archive kind (must not be ArchiveKind.NONE)
            dest_dir: Destination directory for extraction

        Returns:
            Path to the extraction directory

        Raises:
            ExtractionError: If the archive is missing, corrupt or unsupported
        """
        archive_path = Path(archive_path)
        dest_dir = Path(dest_dir)

        if not archive_path.exists():
            raise ExtractionError(f"Archive not found: {archive_path}")

        dest_dir.mkdir(parents=True, exist_ok=True)

        try:
            if kind is ArchiveKind.TAR_XZ:
                self._extract_tar_xz(archive_path, dest_dir)
            elif kind is ArchiveKind.ZIP:
                self._extract_zip(archive_path, dest_dir)
            else:
                raise ExtractionError(f"Unsupported archive kind for {archive_path.name}: {kind.value}")
        except ExtractionError:
            raise
        except KeyboardInterrupt as ke:
            handle_keyboard_interrupt_properly(ke)
        except (tarfile.TarError, lzma.LZMAError, zipfile.BadZipFile, EOFError, OSError) as e:
            raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e

        return dest_dir

    def extract_binary(self, archive_path: Path, dependency: Dependency, scratch_dir: Path) -> Path:
        """Extract a dependency archive and return the path of its binary.

        Args:
            archive_path: Downloaded archive
            dependency: Dependency the archive belongs to
            scratch_dir: Directory owned by the caller; extracted files land
                in a subdirectory of it

        Returns:
            Path to the single binary matched by the dependency's locator

        Raises:
            ExtractionError: If extraction fails or the locator does not
                match exactly one file
        """
        if self.show_progress:
            print(f"[BUILD] Extracting {dependency.name}")

        extract_root = self.extract(archive_path, dependency.kind, scratch_dir / "extracted")
        binary = dependency.locate(extract_root)
        logger.info("Located %s binary at %s", dependency.name, binary.relative_to(extract_root))
        return binary

    def _extract_tar_xz(self, archive_path: Path, dest_dir: Path) -> None:
        """Extract a .tar.xz archive.

        Interpreters without tarfile extraction filters get an equivalent
        member check before a plain extractall.

        Args:
            archive_path: Path to the .tar.xz archive file
            dest_dir: Directory to extract contents into
        """
        with tarfile.open(archive_path, "r:xz") as tar:
            if hasattr(tarfile, "data_filter"):
                tar.extractall(dest_dir, filter="data")
            else:
                self._check_tar_members(tar, dest_dir)
                tar.extractall(dest_dir)

    @staticmethod
    def _check_tar_members(tar: tarfile.TarFile, dest_dir: Path) -> None:
        """Reject members that would land outside dest_dir.

        Raises:
            ExtractionError: On absolute paths, parent traversal, device
                files, or links pointing outside dest_dir
        """
        root = dest_dir.resolve()
        for member in tar.getmembers():
            target = (root / member.name).resolve()
            if not target.is_relative_to(root):
                raise ExtractionError(f"Archive member escapes extraction directory: {member.name}")
            if member.isdev():
                raise ExtractionError(f"Archive member is a device file: {member.name}")
            if member.issym() or member.islnk():
                base = target.parent if member.issym() else root
                link_target = (base / member.linkname).resolve()
                if not link_target.is_relative_to(root):
                    raise ExtractionError(f"Archive link escapes extraction directory: {member.name}")

    def _extract_zip(self, archive_path: Path, dest_dir: Path) -> None:
        """Extract a zip archive.

        Args:
            archive_path: Path to zip archive
            dest_dir: Destination directory
        """
        with zipfile.ZipFile(archive_path, "r") as zip_file:
            zip_file.extractall(dest_dir)
