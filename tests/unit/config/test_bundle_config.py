"""Unit tests for bundle configuration."""

from pathlib import Path

import pytest

from botbundle.config import BundleConfig, url_env_var
from botbundle.errors import ConfigError
from botbundle.packages.dependency import ArchiveKind


class TestBundleConfig:
    """Test cases for BundleConfig."""

    def test_defaults_linux(self, tmp_path):
        config = BundleConfig(project_root=tmp_path, platform="linux")

        assert config.project_root == tmp_path.resolve()
        assert config.dist_dir == tmp_path.resolve() / "dist"
        assert config.app_filename == "music-bot"
        assert config.build_command == ["cargo", "build", "--release"]
        assert config.build_artifact == tmp_path.resolve() / "target" / "release" / "music-bot"
        assert config.layout.bin_dir == tmp_path.resolve() / "dist" / "bin"
        assert config.layout.executable == tmp_path.resolve() / "dist" / "music-bot"
        assert config.fetch_timeout == (15.0, 60.0)
        assert config.build_timeout == 3600.0
        assert config.parallel is False

    def test_defaults_windows(self, tmp_path):
        config = BundleConfig(project_root=tmp_path, platform="windows")

        assert config.app_filename == "music-bot.exe"
        assert config.build_artifact.name == "music-bot.exe"
        assert config.layout.executable.name == "music-bot.exe"

    def test_dependencies_bound_to_bin_dir(self, tmp_path):
        config = BundleConfig(project_root=tmp_path, platform="linux")
        deps = config.dependencies()

        assert [d.name for d in deps] == ["yt-dlp", "ffmpeg"]
        assert all(d.target.parent == config.layout.bin_dir for d in deps)
        assert deps[1].kind is ArchiveKind.TAR_XZ

    def test_url_override(self, tmp_path):
        config = BundleConfig(
            project_root=tmp_path,
            platform="linux",
            url_overrides={"ffmpeg": "https://mirror.example/ffmpeg.tar.xz"},
        )
        deps = {d.name: d for d in config.dependencies()}

        assert deps["ffmpeg"].url == "https://mirror.example/ffmpeg.tar.xz"
        assert deps["yt-dlp"].url.startswith("https://github.com/yt-dlp/")

    def test_unknown_url_override(self, tmp_path):
        with pytest.raises(ConfigError, match="unknown dependency"):
            BundleConfig(project_root=tmp_path, platform="linux", url_overrides={"deno": "x"})

    def test_explicit_build_output(self, tmp_path):
        config = BundleConfig(project_root=tmp_path, platform="linux", build_output=tmp_path / "out" / "app")
        assert config.build_artifact == tmp_path / "out" / "app"

    def test_invalid_timeout(self, tmp_path):
        with pytest.raises(ConfigError, match="positive"):
            BundleConfig(project_root=tmp_path, platform="linux", build_timeout=0)

    def test_empty_build_command(self, tmp_path):
        with pytest.raises(ConfigError, match="must not be empty"):
            BundleConfig(project_root=tmp_path, platform="linux", build_command=[])

    def test_unsupported_platform(self, tmp_path):
        with pytest.raises(ConfigError, match="Unsupported platform"):
            BundleConfig(project_root=tmp_path, platform="amiga")


class TestBundleConfigFromEnv:
    """Test cases for BundleConfig.from_env."""

    def test_empty_environment(self, tmp_path):
        config = BundleConfig.from_env({}, project_root=tmp_path, platform="linux")

        assert config.project_root == tmp_path.resolve()
        assert config.url_overrides == {}

    def test_environment_overrides(self, tmp_path):
        env = {
            "BOTBUNDLE_PROJECT_ROOT": str(tmp_path),
            "BOTBUNDLE_DIST_DIR": str(tmp_path / "release"),
            "BOTBUNDLE_PLATFORM": "windows",
            "BOTBUNDLE_APP_NAME": "jukebox",
            "BOTBUNDLE_BUILD_COMMAND": "cargo build --release --locked",
            "BOTBUNDLE_BUILD_TIMEOUT": "900",
            "BOTBUNDLE_FETCH_CONNECT_TIMEOUT": "5",
            "BOTBUNDLE_FETCH_READ_TIMEOUT": "30",
            "BOTBUNDLE_PARALLEL": "yes",
            "BOTBUNDLE_YT_DLP_URL": "https://mirror.example/yt-dlp.exe",
        }

        config = BundleConfig.from_env(env)

        assert config.project_root == tmp_path.resolve()
        assert config.dist_dir == tmp_path / "release"
        assert config.platform == "windows"
        assert config.app_filename == "jukebox.exe"
        assert config.build_command == ["cargo", "build", "--release", "--locked"]
        assert config.build_timeout == 900.0
        assert config.fetch_timeout == (5.0, 30.0)
        assert config.parallel is True
        assert config.url_overrides == {"yt-dlp": "https://mirror.example/yt-dlp.exe"}

    def test_keyword_overrides_win(self, tmp_path):
        env = {"BOTBUNDLE_PLATFORM": "windows", "BOTBUNDLE_BUILD_TIMEOUT": "900"}

        config = BundleConfig.from_env(env, project_root=tmp_path, platform="linux", build_timeout=None)

        assert config.platform == "linux"
        assert config.build_timeout == 900.0

    def test_invalid_number(self, tmp_path):
        with pytest.raises(ConfigError, match="BOTBUNDLE_BUILD_TIMEOUT must be a number"):
            BundleConfig.from_env({"BOTBUNDLE_BUILD_TIMEOUT": "soon"}, project_root=tmp_path, platform="linux")

    def test_invalid_bool(self, tmp_path):
        with pytest.raises(ConfigError, match="BOTBUNDLE_PARALLEL must be a boolean"):
            BundleConfig.from_env({"BOTBUNDLE_PARALLEL": "maybe"}, project_root=tmp_path, platform="linux")

    def test_url_env_var(self):
        assert url_env_var("yt-dlp") == "BOTBUNDLE_YT_DLP_URL"
        assert url_env_var("ffmpeg") == "BOTBUNDLE_FFMPEG_URL"

    def test_project_root_path_type(self, tmp_path):
        config = BundleConfig.from_env({"BOTBUNDLE_PROJECT_ROOT": str(tmp_path)}, platform="linux")
        assert isinstance(config.project_root, Path)
