"""Runtime dependency management for botbundle.

This module handles downloading, extracting and staging the external
executables (yt-dlp, ffmpeg) shipped next to the application.
"""

from .archive_utils import ArchiveExtractor
from .dependency import (
    DEPENDENCY_TABLE,
    ArchiveKind,
    Dependency,
    DependencySource,
    DirectoryPatternLocator,
    FileNameLocator,
)
from .downloader import PackageDownloader
from .platform_utils import PlatformDetector, PlatformError
from .resolver import DependencyResolver, ResolveResult

__all__ = [
    "ArchiveExtractor",
    "ArchiveKind",
    "DEPENDENCY_TABLE",
    "Dependency",
    "DependencyResolver",
    "DependencySource",
    "DirectoryPatternLocator",
    "FileNameLocator",
    "PackageDownloader",
    "PlatformDetector",
    "PlatformError",
    "ResolveResult",
]
