# ruff: noqa: PLR2004
"""Tests for ruby_activation.path_converter module."""

import asyncio
import logging
from pathlib import Path, PurePath
from unittest.mock import patch

import pytest

from ruby_activation.path_converter import ContainerPathConverter, build_path_mapping


class TestBuildPathMapping:
    """Test filtering declared mappings down to existing directories."""

    @pytest.mark.asyncio
    async def test_keeps_existing_directories(self, tmp_path: Path) -> None:
        """Test files and missing paths are dropped."""
        (tmp_path / "app").mkdir()
        (tmp_path / "config").mkdir()
        (tmp_path / "Gemfile").write_text("")

        mapping = await build_path_mapping(
            {
                "app": "/usr/src/app",
                str(tmp_path / "config"): "/usr/src/config",
                "Gemfile": "/usr/src/Gemfile",
                "missing": "/usr/src/missing",
            },
            tmp_path,
        )

        assert mapping == {
            str((tmp_path / "app").resolve()): "/usr/src/app",
            str((tmp_path / "config").resolve()): "/usr/src/config",
        }

    @pytest.mark.asyncio
    async def test_relative_paths_resolved(self, tmp_path: Path) -> None:
        """Test relative local paths are resolved against the base directory."""
        (tmp_path / "a").mkdir()

        mapping = await build_path_mapping({"./a/../a": "/a", ".": "/root"}, tmp_path)

        assert mapping == {str((tmp_path / "a").resolve()): "/a", str(tmp_path.resolve()): "/root"}

    @pytest.mark.asyncio
    async def test_dropped_entries_logged(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test dropped entries are logged at debug level."""
        logger = logging.getLogger("test_path_converter.dropped")

        with caplog.at_level(logging.DEBUG, logger=logger.name):
            mapping = await build_path_mapping({"missing": "/missing"}, tmp_path, logger)

        assert mapping == {}
        assert "Skipping path mapping" in caplog.text
        assert [record.levelno for record in caplog.records] == [logging.DEBUG]

    @pytest.mark.asyncio
    async def test_checks_run_concurrently(self, tmp_path: Path) -> None:
        """Test every path is checked before any result is awaited."""
        for name in ("a", "b", "c"):
            (tmp_path / name).mkdir()

        started: list[Path] = []
        release = asyncio.Event()

        async def fake_to_thread(func, *args):  # noqa: ANN001, ANN202
            started.append(func.__self__)
            if len(started) == 3:
                release.set()
            await release.wait()
            return func(*args)

        with patch("ruby_activation.path_converter.asyncio.to_thread", new=fake_to_thread):
            mapping = await asyncio.wait_for(
                build_path_mapping({"a": "/a", "b": "/b", "c": "/c"}, tmp_path), timeout=5
            )

        assert len(started) == 3
        assert len(mapping) == 3

    @pytest.mark.asyncio
    async def test_empty(self, tmp_path: Path) -> None:
        """Test an empty mapping stays empty."""
        assert await build_path_mapping({}, tmp_path) == {}


class TestContainerPathConverter:
    """Test translating paths in both directions."""

    @pytest.fixture
    def converter(self) -> ContainerPathConverter:
        """Create a converter with nested mapped roots."""
        return ContainerPathConverter(
            {
                "/home/me/app": "/usr/src/app",
                "/home/me/app/vendor/bundle": "/usr/local/bundle",
            }
        )

    def test_to_remote(self, converter: ContainerPathConverter) -> None:
        """Test a host path under a mapped root is translated."""
        assert converter.to_remote("/home/me/app/lib/models/user.rb") == "/usr/src/app/lib/models/user.rb"
        assert converter.to_remote(Path("/home/me/app")) == "/usr/src/app"

    def test_to_remote_longest_prefix(self, converter: ContainerPathConverter) -> None:
        """Test the most specific mapped root wins."""
        assert converter.to_remote("/home/me/app/vendor/bundle/gems/rake") == "/usr/local/bundle/gems/rake"

    def test_to_local(self, converter: ContainerPathConverter) -> None:
        """Test an in-container path under a mapped root is translated back."""
        assert converter.to_local("/usr/src/app/Gemfile") == str(PurePath("/home/me/app/Gemfile"))
        assert converter.to_local("/usr/local/bundle/gems") == str(PurePath("/home/me/app/vendor/bundle/gems"))

    def test_unmapped_paths_unchanged(self, converter: ContainerPathConverter) -> None:
        """Test paths outside every mapped root are returned as given."""
        assert converter.to_remote("/home/me/application/x.rb") == "/home/me/application/x.rb"
        assert converter.to_local("/usr/src/application") == "/usr/src/application"

    def test_empty_mapping_is_identity(self) -> None:
        """Test a converter without mappings translates nothing."""
        converter = ContainerPathConverter({})

        assert converter.to_remote("/home/me/app/a.rb") == "/home/me/app/a.rb"
        assert converter.to_local("/usr/src/app/a.rb") == "/usr/src/app/a.rb"

    def test_mapping_is_read_only(self, converter: ContainerPathConverter) -> None:
        """Test the mapping cannot be changed after construction."""
        with pytest.raises(TypeError):
            converter.path_mapping["/tmp"] = "/tmp"  # type: ignore[index]

    def test_source_mapping_copied(self) -> None:
        """Test later changes to the source mapping do not leak in."""
        source = {"/home/me/app": "/app"}
        converter = ContainerPathConverter(source)

        source["/home/me/other"] = "/other"

        assert dict(converter.path_mapping) == {"/home/me/app": "/app"}
