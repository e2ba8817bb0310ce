"""Artifact assembly.

Copies the toolchain's release executable into the distribution root. The
toolchain exit status alone is not trusted: the output file must exist.
"""

import logging
import shutil
from pathlib import Path

from ..errors import ArtifactMissingError, DirectoryError
from .layout import DistributionLayout

logger = logging.getLogger(__name__)


class ArtifactAssembler:
    """Places the build output into the distribution layout."""

    def __init__(self, show_progress: bool = True):
        self.show_progress = show_progress

    def assemble(self, build_output: Path, layout: DistributionLayout) -> Path:
        """Copy the build output to the layout's executable path.

        Args:
            build_output: Executable produced by the toolchain
            layout: Distribution layout to assemble into

        Returns:
            Path to the bundled executable

        Raises:
            ArtifactMissingError: If build_output does not exist
            DirectoryError: If the copy fails
        """
        if self.show_progress:
            print("[BUILD] Bundling artifacts")

        if not build_output.is_file():
            raise ArtifactMissingError(build_output)

        try:
            shutil.copy2(build_output, layout.executable)
        except OSError as e:
            raise DirectoryError(f"Failed to copy {build_output} to {layout.executable}: {e}") from e

        logger.info("Copied %s -> %s", build_output, layout.executable)
        return layout.executable
