"""Dependency model for bundled runtime tools.

A dependency is a prebuilt executable (yt-dlp, ffmpeg) that ships next to the
application in ``dist/bin``. Some are published as bare executables, others
inside an archive whose top-level directory name changes with every release,
so each archived dependency carries a locator describing how to find its
binary once extracted.

Dependency Table:
    linux:
        yt-dlp  -> bin/yt-dlp      (direct download)
        ffmpeg  -> bin/ffmpeg      (tar.xz, ffmpeg-*-static/ffmpeg)
    windows:
        yt-dlp  -> bin/yt-dlp.exe  (direct download)
        ffmpeg  -> bin/ffmpeg.exe  (zip, ffmpeg.exe anywhere in the tree)
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from ..errors import ConfigError, ExtractionError


class ArchiveKind(Enum):
    """How a dependency is packaged upstream."""

    NONE = "none"
    TAR_XZ = "tar-xz"
    ZIP = "zip"

    @property
    def is_archive(self) -> bool:
        return self is not ArchiveKind.NONE


class Locator(Protocol):
    """Finds the binary of interest inside an extraction root."""

    def candidates(self, root: Path) -> List[Path]: ...

    def describe(self) -> str: ...


@dataclass(frozen=True)
class DirectoryPatternLocator:
    """Binary inside a top-level directory named ``<prefix>*<suffix>``.

    Matches release tarballs such as ``ffmpeg-7.0.2-amd64-static/ffmpeg``
    where the version in the directory name is not known in advance.
    """

    prefix: str
    suffix: str
    binary_name: str

    def candidates(self, root: Path) -> List[Path]:
        matches = []
        for item in sorted(root.iterdir()):
            if not item.is_dir():
                continue
            if item.name.startswith(self.prefix) and item.name.endswith(self.suffix):
                binary = item / self.binary_name
                if binary.is_file():
                    matches.append(binary)
        return matches

    def describe(self) -> str:
        return f"{self.prefix}*{self.suffix}/{self.binary_name}"


@dataclass(frozen=True)
class FileNameLocator:
    """Regular file with a fixed name anywhere under the extraction root."""

    binary_name: str

    def candidates(self, root: Path) -> List[Path]:
        return sorted(p for p in root.rglob(self.binary_name) if p.is_file())

    def describe(self) -> str:
        return f"**/{self.binary_name}"


@dataclass(frozen=True)
class Dependency:
    """A runtime dependency and where it is staged.

    Attributes:
        name: Short name used in status messages (e.g. 'ffmpeg')
        target: Canonical staged path inside the distribution bin directory
        url: Download URL
        kind: Archive kind of the download
        locator: How to find the binary in an extracted archive
    """

    name: str
    target: Path
    url: str
    kind: ArchiveKind = ArchiveKind.NONE
    locator: Optional[Locator] = None

    def __post_init__(self) -> None:
        if self.kind.is_archive and self.locator is None:
            raise ConfigError(f"Archived dependency '{self.name}' needs a locator")

    @property
    def is_staged(self) -> bool:
        """Whether the dependency is already present at its target path."""
        return self.target.exists()

    def locate(self, root: Path) -> Path:
        """Return the single binary matching this dependency's locator.

        Raises:
            ExtractionError: If the locator matches zero or several files
        """
        if self.locator is None:
            raise ExtractionError(f"Dependency '{self.name}' has no locator")

        matches = self.locator.candidates(root)
        if len(matches) != 1:
            found = ", ".join(str(m.relative_to(root)) for m in matches) or "none"
            raise ExtractionError(
                f"Expected exactly one match for '{self.locator.describe()}' "
                + f"in {self.name} archive, found {len(matches)}: {found}"
            )
        return matches[0]


@dataclass(frozen=True)
class DependencySource:
    """Platform table entry; bound to a bin directory by ``bind``."""

    name: str
    filename: str
    url: str
    kind: ArchiveKind = ArchiveKind.NONE
    locator: Optional[Locator] = None

    def bind(self, bin_dir: Path, url: Optional[str] = None) -> Dependency:
        return Dependency(
            name=self.name,
            target=bin_dir / self.filename,
            url=url or self.url,
            kind=self.kind,
            locator=self.locator,
        )


YTDLP_BASE_URL = "https://github.com/yt-dlp/yt-dlp/releases/latest/download"

DEPENDENCY_TABLE: Dict[str, List[DependencySource]] = {
    "linux": [
        DependencySource(
            name="yt-dlp",
            filename="yt-dlp",
            url=f"{YTDLP_BASE_URL}/yt-dlp",
        ),
        DependencySource(
            name="ffmpeg",
            filename="ffmpeg",
            url="https://johnvansickle.com/ffmpeg/releases/ffmpeg-release-amd64-static.tar.xz",
            kind=ArchiveKind.TAR_XZ,
            locator=DirectoryPatternLocator(prefix="ffmpeg-", suffix="-static", binary_name="ffmpeg"),
        ),
    ],
    "windows": [
        DependencySource(
            name="yt-dlp",
            filename="yt-dlp.exe",
            url=f"{YTDLP_BASE_URL}/yt-dlp.exe",
        ),
        DependencySource(
            name="ffmpeg",
            filename="ffmpeg.exe",
            url="https://www.gyan.dev/ffmpeg/builds/ffmpeg-release-essentials.zip",
            kind=ArchiveKind.ZIP,
            locator=FileNameLocator(binary_name="ffmpeg.exe"),
        ),
    ],
}
