"""Build Invoker.

This module runs the application's own build toolchain (``cargo build
--release`` by default) as an opaque command from the project root.

Design:
    - Wraps subprocess.Popen so the toolchain's output streams to the console
    - Enforces a wall-clock timeout; on timeout or interrupt the whole process
      tree is terminated with psutil, children first
    - A non-zero exit status becomes a BuildError carrying that status
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

import psutil

from ..errors import BuildError

logger = logging.getLogger(__name__)

DEFAULT_BUILD_COMMAND = ["cargo", "build", "--release"]


class BuildInvoker:
    """Runs the external build toolchain synchronously."""

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        timeout: Optional[float] = 3600.0,
        show_progress: bool = True,
    ):
        """Initialize build invoker.

        Args:
            command: Build command (defaults to cargo release build)
            timeout: Seconds to wait for the build, None to wait forever
            show_progress: Whether to print the status line
        """
        self.command: List[str] = list(command or DEFAULT_BUILD_COMMAND)
        self.timeout = timeout
        self.show_progress = show_progress

    def build(self, project_root: Path) -> None:
        """Run the build command in project_root.

        Args:
            project_root: Directory to run the toolchain from

        Raises:
            BuildError: If the toolchain is missing, times out or exits non-zero
        """
        if self.show_progress:
            print("[BUILD] Compiling application in release mode")
        logger.info("Running %s in %s", " ".join(self.command), project_root)

        try:
            proc = subprocess.Popen(self.command, cwd=str(project_root))
        except FileNotFoundError as e:
            raise BuildError(f"Build toolchain not found: {self.command[0]} ({e})") from e
        except OSError as e:
            raise BuildError(f"Failed to start build command {self.command[0]}: {e}") from e

        try:
            returncode = proc.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            killed = self._kill_tree(proc.pid)
            proc.wait()
            raise BuildError(f"Build timed out after {self.timeout}s (terminated {killed} processes)")
        except KeyboardInterrupt:
            self._kill_tree(proc.pid)
            proc.wait()
            raise

        if returncode != 0:
            raise BuildError(
                f"Build command '{' '.join(self.command)}' failed with exit code {returncode}",
                returncode=returncode,
            )

    @staticmethod
    def _kill_tree(root_pid: int) -> int:
        """Terminate a process and all its descendants.

        Returns:
            Number of processes signalled
        """
        try:
            root_proc = psutil.Process(root_pid)
            processes = root_proc.children(recursive=True)
            processes.reverse()
            processes.append(root_proc)
        except psutil.NoSuchProcess:
            return 0

        killed_count = 0
        for proc in processes:
            try:
                proc.terminate()
                killed_count += 1
                logger.debug("Terminated process %s", proc.pid)
            except psutil.NoSuchProcess:
                pass  # Already dead

        # Wait for graceful termination
        _gone, alive = psutil.wait_procs(processes, timeout=3)

        # Force kill any stragglers
        for proc in alive:
            try:
                proc.kill()
                logger.warning("Force killed stubborn process %s", proc.pid)
            except psutil.NoSuchProcess:
                pass

        return killed_count
