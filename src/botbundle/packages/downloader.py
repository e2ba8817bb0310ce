"""Dependency downloader with progress tracking.

This module handles downloading release binaries and archives over HTTP.
Downloads stream into a temporary file next to the destination and are only
renamed into place once the whole body has been written.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlparse

import requests
from tqdm import tqdm

from .. import __version__
from ..errors import FetchError

logger = logging.getLogger(__name__)

# Some release hosts reject the default python-requests agent with a 403.
USER_AGENT = f"botbundle/{__version__}"

DEFAULT_TIMEOUT: Tuple[float, float] = (15.0, 60.0)


class PackageDownloader:
    """Downloads files with progress tracking and explicit timeouts."""

    def __init__(
        self,
        chunk_size: int = 65536,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        show_progress: bool = True,
    ):
        """Initialize downloader.

        Args:
            chunk_size: Size of chunks to stream to disk
            timeout: (connect, read) timeouts in seconds; the read timeout
                applies to each socket read, not the whole transfer
            show_progress: Whether to show a progress bar
        """
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.show_progress = show_progress

    def download(self, url: str, dest_path: Path, show_progress: Optional[bool] = None) -> Path:
        """Download a file from a URL, following redirects.

        Args:
            url: URL to download from
            dest_path: Destination file path
            show_progress: Override the instance progress setting

        Returns:
            Path to the downloaded file

        Raises:
            FetchError: If the request fails or the body cannot be written
        """
        dest_path = Path(dest_path)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        if show_progress is None:
            show_progress = self.show_progress

        # Use temporary file during download
        temp_file = dest_path.with_name(dest_path.name + ".tmp")

        logger.info("GET %s -> %s", url, dest_path)
        try:
            with requests.get(
                url,
                stream=True,
                timeout=self.timeout,
                allow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            ) as response:
                response.raise_for_status()

                total_size = int(response.headers.get("content-length", 0))

                progress_bar = None
                if show_progress and total_size > 0:
                    filename = Path(urlparse(url).path).name
                    progress_bar = tqdm(
                        total=total_size,
                        unit="B",
                        unit_scale=True,
                        unit_divisor=1024,
                        desc=f"Downloading {filename}",
                    )

                try:
                    with open(temp_file, "wb") as f:
                        for chunk in response.iter_content(chunk_size=self.chunk_size):
                            if chunk:
                                f.write(chunk)
                                if progress_bar:
                                    progress_bar.update(len(chunk))
                finally:
                    if progress_bar:
                        progress_bar.close()

            if dest_path.exists():
                dest_path.unlink()
            temp_file.rename(dest_path)
            return dest_path

        except requests.RequestException as e:
            raise FetchError(f"Failed to download {url}: {e}", url=url) from e
        except OSError as e:
            raise FetchError(f"Failed to write {dest_path} from {url}: {e}", url=url) from e
        finally:
            if temp_file.exists():
                temp_file.unlink()
