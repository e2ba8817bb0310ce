"""Shared fixtures for botbundle unit tests."""

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Dict, List, Union

import pytest

from botbundle.errors import FetchError
from botbundle.packages.downloader import PackageDownloader


class FakeDownloader(PackageDownloader):
    """Serves canned payloads instead of touching the network."""

    def __init__(self, payloads: Dict[str, Union[bytes, BaseException]]):
        super().__init__(show_progress=False)
        self.payloads = payloads
        self.calls: List[str] = []

    def download(self, url, dest_path, show_progress=None):
        self.calls.append(url)
        payload = self.payloads.get(url)
        if payload is None:
            raise FetchError(f"Failed to download {url}: no route to host", url=url)
        if isinstance(payload, BaseException):
            raise payload
        dest_path = Path(dest_path)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        dest_path.write_bytes(payload)
        return dest_path


def build_tar_xz(files: Dict[str, bytes]) -> bytes:
    """Create an in-memory .tar.xz archive holding the given files."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:xz") as tar:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def build_zip(files: Dict[str, bytes]) -> bytes:
    """Create an in-memory .zip archive holding the given files."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def fake_downloader():
    """Factory for FakeDownloader instances."""
    return FakeDownloader


@pytest.fixture
def tar_xz_bytes():
    return build_tar_xz


@pytest.fixture
def zip_bytes():
    return build_zip


@pytest.fixture
def ffmpeg_tarball():
    """A tarball shaped like the johnvansickle static ffmpeg release."""
    return build_tar_xz(
        {
            "ffmpeg-7.0.2-amd64-static/ffmpeg": b"\x7fELF ffmpeg",
            "ffmpeg-7.0.2-amd64-static/ffprobe": b"\x7fELF ffprobe",
            "ffmpeg-7.0.2-amd64-static/manpages/ffmpeg.txt": b"manual",
            "ffmpeg-7.0.2-amd64-static/readme.txt": b"readme",
        }
    )


@pytest.fixture
def ffmpeg_zip():
    """A zip shaped like the gyan.dev essentials ffmpeg release."""
    return build_zip(
        {
            "ffmpeg-7.1-essentials_build/bin/ffmpeg.exe": b"MZ ffmpeg",
            "ffmpeg-7.1-essentials_build/bin/ffprobe.exe": b"MZ ffprobe",
            "ffmpeg-7.1-essentials_build/LICENSE": b"license",
        }
    )
