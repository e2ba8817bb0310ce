"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/music-bot/botbundle"
KEYWORDS = "release bundler yt-dlp ffmpeg cargo distribution packaging"
HERE = os.path.dirname(os.path.abspath(__file__))


def read_version() -> str:
    with open(os.path.join(HERE, "src", "botbundle", "__init__.py"), encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"')
    raise RuntimeError("Unable to find __version__")


if __name__ == "__main__":
    setup(
        name="botbundle",
        version=read_version(),
        description="Release bundler that packages the music-bot with yt-dlp and ffmpeg",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.10",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=[
            "requests>=2.28",
            "tqdm>=4.64",
            "psutil>=5.9",
        ],
        extras_require={
            "test": ["pytest>=7.0"],
        },
        entry_points={
            "console_scripts": [
                "botbundle=botbundle.cli:main",
            ],
        },
        include_package_data=True)
