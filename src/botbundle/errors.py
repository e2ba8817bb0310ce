"""Error taxonomy for the bundling pipeline.

Every step of the pipeline raises one of these. All of them are fatal: the
orchestrator stops at the first one and the CLI turns it into an exit code.
"""

from typing import Optional


class BundleError(Exception):
    """Base class for all bundling failures."""

    retryable = False
    exit_code = 1


class ConfigError(BundleError):
    """Raised when a configuration override is invalid."""

    exit_code = 2


class DirectoryError(BundleError):
    """Raised when the distribution directories cannot be prepared."""

    exit_code = 3


class FetchError(BundleError):
    """Raised when a dependency download fails.

    Network failures are the only retryable kind; the pipeline itself never
    retries, but operators can simply run it again.
    """

    retryable = True
    exit_code = 4

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class ExtractionError(BundleError):
    """Raised when an archive cannot be extracted or its binary located."""

    exit_code = 5


class BuildError(BundleError):
    """Raised when the external build toolchain fails.

    When the toolchain exited with a non-zero status, that status becomes the
    process exit code.
    """

    exit_code = 6

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode
        if returncode is not None and 0 < returncode < 256:
            self.exit_code = returncode


class ArtifactMissingError(BundleError):
    """Raised when the build reported success but produced no executable."""

    exit_code = 7

    def __init__(self, path):
        super().__init__(f"Build artifact not found at {path}")
        self.path = path
