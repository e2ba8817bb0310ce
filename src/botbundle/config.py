"""Bundle configuration.

All paths, URLs and timeouts the pipeline uses live in ``BundleConfig``.
Defaults reproduce the release layout of the music-bot project; every field
can be overridden through ``BOTBUNDLE_*`` environment variables or CLI flags.

Environment Variables:
    BOTBUNDLE_PROJECT_ROOT          Project to build (default: repository root)
    BOTBUNDLE_DIST_DIR              Distribution root (default: <project>/dist)
    BOTBUNDLE_PLATFORM              linux or windows (default: host platform)
    BOTBUNDLE_APP_NAME              Application name (default: music-bot)
    BOTBUNDLE_BUILD_COMMAND         Build command line (default: cargo build --release)
    BOTBUNDLE_BUILD_OUTPUT          Toolchain output file (default: <project>/target/release/<app>)
    BOTBUNDLE_BUILD_TIMEOUT         Build timeout in seconds
    BOTBUNDLE_FETCH_CONNECT_TIMEOUT Download connect timeout in seconds
    BOTBUNDLE_FETCH_READ_TIMEOUT    Download read timeout in seconds
    BOTBUNDLE_PARALLEL              Resolve dependencies concurrently (1/0)
    BOTBUNDLE_<NAME>_URL            Download URL override, e.g. BOTBUNDLE_YT_DLP_URL
"""

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .build.build_invoker import DEFAULT_BUILD_COMMAND
from .build.layout import DistributionLayout
from .errors import ConfigError
from .packages.dependency import DEPENDENCY_TABLE, Dependency
from .packages.platform_utils import PlatformDetector

ENV_PREFIX = "BOTBUNDLE_"

DEFAULT_APP_NAME = "music-bot"

# src/botbundle/config.py -> repository root
DEFAULT_PROJECT_ROOT = Path(__file__).resolve().parents[2]


def url_env_var(dependency_name: str) -> str:
    """Environment variable overriding a dependency's download URL."""
    return f"{ENV_PREFIX}{dependency_name.upper().replace('-', '_')}_URL"


@dataclass
class BundleConfig:
    """Everything the bundling pipeline needs to know.

    Attributes:
        project_root: Directory the build toolchain runs in
        dist_dir: Distribution root directory
        platform: Target platform ('linux' or 'windows')
        app_name: Application name without extension
        bin_subdir: Name of the dependency directory inside dist_dir
        build_command: Command producing the release executable
        build_output: Executable written by the toolchain; derived from the
            toolchain convention when not given
        build_timeout: Seconds to wait for the build (None waits forever)
        fetch_connect_timeout: Seconds to wait for a download connection
        fetch_read_timeout: Seconds to wait for each chunk of a download
        parallel: Resolve dependencies on a thread pool
        url_overrides: Per-dependency URL replacements
        show_progress: Print status lines and progress bars
    """

    project_root: Path = DEFAULT_PROJECT_ROOT
    dist_dir: Optional[Path] = None
    platform: str = field(default_factory=PlatformDetector.detect_bundle_platform)
    app_name: str = DEFAULT_APP_NAME
    bin_subdir: str = "bin"
    build_command: List[str] = field(default_factory=lambda: list(DEFAULT_BUILD_COMMAND))
    build_output: Optional[Path] = None
    build_timeout: Optional[float] = 3600.0
    fetch_connect_timeout: float = 15.0
    fetch_read_timeout: float = 60.0
    parallel: bool = False
    url_overrides: Dict[str, str] = field(default_factory=dict)
    show_progress: bool = True

    def __post_init__(self) -> None:
        self.project_root = Path(self.project_root).resolve()
        self.platform = PlatformDetector.validate(self.platform)
        if self.dist_dir is None:
            self.dist_dir = self.project_root / "dist"
        self.dist_dir = Path(self.dist_dir)
        if not self.build_command:
            raise ConfigError("Build command must not be empty")
        if self.build_timeout is not None and self.build_timeout <= 0:
            raise ConfigError(f"Build timeout must be positive, got {self.build_timeout}")
        if self.fetch_connect_timeout <= 0 or self.fetch_read_timeout <= 0:
            raise ConfigError("Fetch timeouts must be positive")
        known = {source.name for source in DEPENDENCY_TABLE[self.platform]}
        unknown = set(self.url_overrides) - known
        if unknown:
            raise ConfigError(f"URL override for unknown dependency: {', '.join(sorted(unknown))}")

    @property
    def app_filename(self) -> str:
        """Platform-canonical executable name (music-bot / music-bot.exe)."""
        return PlatformDetector.executable_name(self.app_name, self.platform)

    @property
    def layout(self) -> DistributionLayout:
        return DistributionLayout.create(self.dist_dir, self.app_filename, self.bin_subdir)

    @property
    def build_artifact(self) -> Path:
        """Where the toolchain leaves the release executable."""
        if self.build_output is not None:
            return Path(self.build_output)
        return self.project_root / "target" / "release" / self.app_filename

    @property
    def fetch_timeout(self) -> tuple[float, float]:
        return (self.fetch_connect_timeout, self.fetch_read_timeout)

    def dependencies(self) -> List[Dependency]:
        """Dependencies for the target platform, bound to the bin directory."""
        bin_dir = self.layout.bin_dir
        return [
            source.bind(bin_dir, self.url_overrides.get(source.name))
            for source in DEPENDENCY_TABLE[self.platform]
        ]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "BundleConfig":
        """Build a configuration from environment variables.

        Keyword overrides (typically CLI flags) win over the environment;
        None values are ignored.

        Raises:
            ConfigError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        values: Dict[str, object] = {}

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value if value else None

        if get("PROJECT_ROOT"):
            values["project_root"] = Path(get("PROJECT_ROOT"))
        if get("DIST_DIR"):
            values["dist_dir"] = Path(get("DIST_DIR"))
        if get("PLATFORM"):
            values["platform"] = get("PLATFORM")
        if get("APP_NAME"):
            values["app_name"] = get("APP_NAME")
        if get("BUILD_COMMAND"):
            values["build_command"] = shlex.split(get("BUILD_COMMAND"))
        if get("BUILD_OUTPUT"):
            values["build_output"] = Path(get("BUILD_OUTPUT"))
        if get("BUILD_TIMEOUT"):
            values["build_timeout"] = _parse_float("BUILD_TIMEOUT", get("BUILD_TIMEOUT"))
        if get("FETCH_CONNECT_TIMEOUT"):
            values["fetch_connect_timeout"] = _parse_float(
                "FETCH_CONNECT_TIMEOUT", get("FETCH_CONNECT_TIMEOUT")
            )
        if get("FETCH_READ_TIMEOUT"):
            values["fetch_read_timeout"] = _parse_float("FETCH_READ_TIMEOUT", get("FETCH_READ_TIMEOUT"))
        if get("PARALLEL"):
            values["parallel"] = _parse_bool("PARALLEL", get("PARALLEL"))

        url_overrides = {}
        for sources in DEPENDENCY_TABLE.values():
            for source in sources:
                url = env.get(url_env_var(source.name))
                if url:
                    url_overrides[source.name] = url
        if url_overrides:
            values["url_overrides"] = url_overrides

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} must be a number, got '{value}'")


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{ENV_PREFIX}{name} must be a boolean, got '{value}'")
