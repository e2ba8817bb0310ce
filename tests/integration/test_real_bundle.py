"""
Integration tests against the real release hosts.

These download the actual yt-dlp and ffmpeg releases (tens of megabytes) and
only run with --full.
"""

import os
import subprocess
import sys
import time
from pathlib import Path

import pytest

from botbundle.build.orchestrator import BundleOrchestrator, PipelineState
from botbundle.config import BundleConfig

WRITE_ARTIFACT = (
    "import pathlib; p = pathlib.Path('target/release/music-bot'); "
    "p.parent.mkdir(parents=True, exist_ok=True); p.write_bytes(b'music-bot release')"
)


@pytest.mark.integration
@pytest.mark.skipif(sys.platform != "linux", reason="Linux dependency table")
class TestRealLinuxBundle:
    """Bundle a stand-in project with the real Linux dependencies."""

    @pytest.fixture(scope="class")
    def project_dir(self, tmp_path_factory):
        return tmp_path_factory.mktemp("music-bot")

    @pytest.fixture(scope="class")
    def config(self, project_dir):
        return BundleConfig(
            project_root=project_dir,
            platform="linux",
            build_command=[sys.executable, "-c", WRITE_ARTIFACT],
            build_timeout=120,
        )

    def test_cold_bundle(self, config, project_dir):
        """
        Test a bundle from an empty cache.

        Validates:
        - both dependencies are downloaded
        - ffmpeg is the binary from the static tarball and runs
        - yt-dlp is executable
        """
        start_time = time.time()
        result = BundleOrchestrator(config).run()
        elapsed = time.time() - start_time

        assert result.success, result.message
        assert result.state is PipelineState.DONE
        assert sorted(result.fetched) == ["ffmpeg", "yt-dlp"]
        assert elapsed < 600, f"Cold bundle took {elapsed:.0f}s"

        bin_dir = project_dir / "dist" / "bin"
        assert sorted(p.name for p in bin_dir.iterdir()) == ["ffmpeg", "yt-dlp"]
        assert os.access(bin_dir / "yt-dlp", os.X_OK)

        version = subprocess.run(
            [str(bin_dir / "ffmpeg"), "-version"],
            capture_output=True,
            text=True,
            timeout=30,
        )
        assert version.returncode == 0
        assert version.stdout.startswith("ffmpeg version")

    def test_warm_bundle_downloads_nothing(self, config, project_dir):
        """Test a second bundle reuses both cached dependencies."""
        ffmpeg = project_dir / "dist" / "bin" / "ffmpeg"
        mtime = ffmpeg.stat().st_mtime

        result = BundleOrchestrator(config).run()

        assert result.success, result.message
        assert result.fetched == []
        assert ffmpeg.stat().st_mtime == mtime
        assert (project_dir / "dist" / "music-bot").read_bytes() == b"music-bot release"


@pytest.mark.integration
@pytest.mark.skipif(sys.platform != "linux", reason="Linux dependency table")
def test_cli_bundles_project(tmp_path):
    """Test the installed botbundle command end to end."""
    env = dict(os.environ)
    env["BOTBUNDLE_PROJECT_ROOT"] = str(tmp_path)
    env["BOTBUNDLE_BUILD_COMMAND"] = f'"{sys.executable}" -c "{WRITE_ARTIFACT}"'

    result = subprocess.run(
        ["botbundle", "--no-progress", "--parallel"],
        capture_output=True,
        text=True,
        env=env,
        timeout=900,
    )

    assert result.returncode == 0, f"STDOUT:\n{result.stdout}\nSTDERR:\n{result.stderr}"
    assert (Path(tmp_path) / "dist" / "music-bot").exists()
