"""
Bundle assembly components for botbundle.

This module provides:
- Distribution layout and directory preparation
- Release build invocation
- Artifact assembly
- Pipeline orchestration
"""

from .assembler import ArtifactAssembler
from .build_invoker import BuildInvoker
from .layout import DirectoryPreparer, DistributionLayout
from .orchestrator import BundleOrchestrator, BundleResult, PipelineState
from .run_lock import RunLock

__all__ = [
    "ArtifactAssembler",
    "BuildInvoker",
    "BundleOrchestrator",
    "BundleResult",
    "DirectoryPreparer",
    "DistributionLayout",
    "PipelineState",
    "RunLock",
]
