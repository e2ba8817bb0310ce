"""Platform Detection Utilities.

This module detects the host platform to pick the dependency table and the
executable naming convention for a release bundle.

Supported Platforms:
    - Linux: linux (x86_64 static builds)
    - Windows: windows (x86_64)
"""

import platform
from typing import Literal

from ..errors import ConfigError

BundlePlatform = Literal["linux", "windows"]

SUPPORTED_PLATFORMS = ("linux", "windows")


class PlatformError(ConfigError):
    """Raised when platform detection fails or platform is unsupported."""

    pass


class PlatformDetector:
    """Detects the current platform for bundle layout selection."""

    @staticmethod
    def detect_bundle_platform() -> str:
        """Detect the host platform.

        Returns:
            'linux' or 'windows'

        Raises:
            PlatformError: If the platform has no dependency table
        """
        system = platform.system().lower()
        machine = platform.machine().lower()

        if system == "windows":
            return "windows"
        elif system == "linux":
            return "linux"
        else:
            raise PlatformError(f"Unsupported platform: {system} {machine}")

    @staticmethod
    def validate(name: str) -> str:
        """Normalize an explicit platform name.

        Raises:
            PlatformError: If the name is not a supported platform
        """
        normalized = name.strip().lower()
        if normalized in ("win", "win32", "win64"):
            normalized = "windows"
        if normalized not in SUPPORTED_PLATFORMS:
            raise PlatformError(
                f"Unsupported platform: {name} (expected one of {', '.join(SUPPORTED_PLATFORMS)})"
            )
        return normalized

    @staticmethod
    def executable_name(name: str, plat: str) -> str:
        """Return the platform-canonical executable file name."""
        if plat == "windows" and not name.lower().endswith(".exe"):
            return f"{name}.exe"
        return name
