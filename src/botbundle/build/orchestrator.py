"""
Bundle orchestration for music-bot releases.

This module coordinates the release bundling pipeline:
1. Prepare the dist directories (purge only the stale executable)
2. Resolve each runtime dependency (reuse if staged, else fetch and stage)
3. Build the application with the release toolchain
4. Copy the release executable into the dist root

The pipeline is a linear state machine. The first failing step moves it to
ABORTED and nothing after that step runs. Dependencies staged before a
failure stay cached for the next run.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

from ..errors import BundleError
from ..packages.downloader import PackageDownloader
from ..packages.resolver import DependencyResolver, ResolveResult
from .assembler import ArtifactAssembler
from .build_invoker import BuildInvoker
from .layout import DirectoryPreparer
from .run_lock import RunLock

if TYPE_CHECKING:
    from ..config import BundleConfig
    from ..packages.dependency import Dependency

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """States of the bundling pipeline.

    DEPENDENCY_READY is entered once per dependency in table order, so the
    two-dependency tables give the sequence
    INIT, DIRS_READY, DEPENDENCY_READY (yt-dlp), DEPENDENCY_READY (ffmpeg),
    BUILT, ASSEMBLED, DONE. The history detail names the dependency, which
    keeps each entry distinct. No other state is entered twice.
    """

    INIT = "INIT"
    DIRS_READY = "DIRS_READY"
    DEPENDENCY_READY = "DEPENDENCY_READY"
    BUILT = "BUILT"
    ASSEMBLED = "ASSEMBLED"
    DONE = "DONE"
    ABORTED = "ABORTED"


@dataclass
class BundleResult:
    """Result of a complete bundling run."""

    success: bool
    state: PipelineState
    artifact_path: Optional[Path]
    dist_dir: Path
    resolved: List[ResolveResult]
    build_time: float
    message: str
    error: Optional[BundleError] = None
    history: List[Tuple[PipelineState, str]] = field(default_factory=list)

    @property
    def fetched(self) -> List[str]:
        """Names of dependencies downloaded during this run."""
        return [r.name for r in self.resolved if r.fetched]

    @property
    def exit_code(self) -> int:
        if self.success:
            return 0
        return self.error.exit_code if self.error is not None else 1


class BundleOrchestrator:
    """
    Runs the bundling pipeline for one configuration.

    Example usage:
        orchestrator = BundleOrchestrator(BundleConfig.from_env())
        result = orchestrator.run()
        if result.success:
            print(f"Distribution: {result.dist_dir}")
    """

    def __init__(
        self,
        config: "BundleConfig",
        resolver: Optional[DependencyResolver] = None,
        preparer: Optional[DirectoryPreparer] = None,
        invoker: Optional[BuildInvoker] = None,
        assembler: Optional[ArtifactAssembler] = None,
    ):
        self.config = config
        show_progress = config.show_progress
        self.resolver = resolver or DependencyResolver(
            downloader=PackageDownloader(timeout=config.fetch_timeout, show_progress=show_progress),
            show_progress=show_progress,
        )
        self.preparer = preparer or DirectoryPreparer(show_progress=show_progress)
        self.invoker = invoker or BuildInvoker(
            command=config.build_command,
            timeout=config.build_timeout,
            show_progress=show_progress,
        )
        self.assembler = assembler or ArtifactAssembler(show_progress=show_progress)
        self.state = PipelineState.INIT
        self.history: List[Tuple[PipelineState, str]] = [(PipelineState.INIT, "")]

    def run(self) -> BundleResult:
        """Run the pipeline once.

        Returns:
            BundleResult; failures are reported through it rather than raised.
            KeyboardInterrupt still propagates.
        """
        config = self.config
        layout = config.layout
        resolved: List[ResolveResult] = []
        artifact: Optional[Path] = None
        start_time = time.time()

        try:
            with RunLock(layout.root):
                self.preparer.prepare(layout)
                self._advance(PipelineState.DIRS_READY, str(layout.root))

                for result in self._resolve_all(config.dependencies()):
                    resolved.append(result)
                    self._advance(PipelineState.DEPENDENCY_READY, result.name)

                self.invoker.build(config.project_root)
                self._advance(PipelineState.BUILT, str(config.build_artifact))

                artifact = self.assembler.assemble(config.build_artifact, layout)
                self._advance(PipelineState.ASSEMBLED, str(artifact))

        except BundleError as e:
            failed_after = self.state
            self._advance(PipelineState.ABORTED, f"{type(e).__name__}: {e}")
            logger.error("Pipeline aborted after %s: %s", failed_after.value, e)
            return BundleResult(
                success=False,
                state=self.state,
                artifact_path=None,
                dist_dir=layout.root,
                resolved=resolved,
                build_time=time.time() - start_time,
                message=str(e),
                error=e,
                history=list(self.history),
            )

        self._advance(PipelineState.DONE, "")
        return BundleResult(
            success=True,
            state=self.state,
            artifact_path=artifact,
            dist_dir=layout.root,
            resolved=resolved,
            build_time=time.time() - start_time,
            message=f"Distribution created at {layout.root}",
            history=list(self.history),
        )

    def _resolve_all(self, dependencies: List["Dependency"]) -> Iterator[ResolveResult]:
        """Resolve dependencies in table order, optionally concurrently.

        In parallel mode every dependency is still awaited before the pool
        is left; the first failure in table order is raised.
        """
        if not self.config.parallel or len(dependencies) < 2:
            for dep in dependencies:
                yield self.resolver.resolve(dep)
            return

        with ThreadPoolExecutor(max_workers=len(dependencies)) as pool:
            futures = [pool.submit(self.resolver.resolve, dep) for dep in dependencies]
            for future in futures:
                yield future.result()

    def _advance(self, state: PipelineState, detail: str) -> None:
        logger.debug("%s -> %s %s", self.state.value, state.value, detail)
        self.state = state
        self.history.append((state, detail))
