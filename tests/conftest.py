"""Shared fixtures for bestls tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_theme(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Path:
    """Point the theme file at an empty location outside the listed trees."""
    config = tmp_path_factory.mktemp("config") / "config.toml"
    monkeypatch.setenv("BESTLS_CONFIG", str(config))
    return config


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a standard test directory tree.

    Structure::

        root/
        ├── .secret             (10 bytes)
        ├── a.txt               (500 bytes)
        ├── b.rs                (2048 bytes)
        ├── docs/
        │   └── guide.md        (5 bytes)
        └── src/
            ├── main.rs         (4 bytes)
            └── api/
                └── auth.py     (4 bytes)
    """
    (tmp_path / ".secret").write_bytes(b"x" * 10)
    (tmp_path / "a.txt").write_bytes(b"a" * 500)
    (tmp_path / "b.rs").write_bytes(b"b" * 2048)
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.md").write_text("guide")
    (tmp_path / "src" / "api").mkdir(parents=True)
    (tmp_path / "src" / "main.rs").write_text("main")
    (tmp_path / "src" / "api" / "auth.py").write_text("auth")
    return tmp_path


@pytest.fixture
def gitignore_tree(tmp_path: Path) -> Path:
    """Tree with .gitignore for gitignore-integration testing.

    Structure::

        root/
        ├── .gitignore          (*.pyc, node_modules/, dist/)
        ├── dist/
        │   └── bundle.js
        ├── node_modules/
        │   └── pkg/
        │       └── index.js
        ├── src/
        │   ├── app.py
        │   └── app.pyc
        └── README.md
    """
    (tmp_path / ".gitignore").write_text("*.pyc\nnode_modules/\ndist/\n")
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "bundle.js").write_text("bundle")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("js")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("app")
    (tmp_path / "src" / "app.pyc").write_bytes(b"\x00")
    (tmp_path / "README.md").write_text("readme")
    return tmp_path
