"""Shared fixtures for dropmodules tests."""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Never read the real ~/.dropmodules/config.json."""
    config_file = tmp_path_factory.mktemp("config") / "config.json"
    monkeypatch.setattr("dropmodules.config.CONFIG_FILE", config_file)
    return config_file


def _write_files(directory: Path, count: int, total_bytes: int) -> None:
    """Create ``count`` files in ``directory`` adding up to ``total_bytes``."""
    directory.mkdir(parents=True, exist_ok=True)
    per_file, remainder = divmod(total_bytes, count)
    for i in range(count):
        size = per_file + (remainder if i == 0 else 0)
        (directory / f"file{i}.js").write_bytes(b"x" * size)


@pytest.fixture
def write_files():
    """Helper that fills a directory with files of a known total size."""
    return _write_files


@pytest.fixture
def project_tree(tmp_path):
    """
    Two projects with node_modules, one of them holding a nested node_modules.

    a/node_modules: 10 files, 500 bytes (nested node_modules adds no files)
    b/node_modules: 2 files, 1500 bytes
    """
    a_modules = tmp_path / "a" / "node_modules"
    b_modules = tmp_path / "b" / "node_modules"
    _write_files(a_modules, 10, 500)
    (a_modules / "nested" / "node_modules").mkdir(parents=True)
    _write_files(b_modules, 2, 1500)
    (tmp_path / "a" / "package.json").write_text("{}")
    (tmp_path / "b" / "package.json").write_text("{}")
    return {"root": tmp_path, "a": a_modules, "b": b_modules}
