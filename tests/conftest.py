"""Shared test fixtures for plugin-signer."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from plugin_signer import config
from plugin_signer.keystore import KeyStore

MANIFEST_TEXT = 'name = "Todo"\nversion = "1.2.0"\ndescription = "Track TODO comments"\n'
ENTRY_SCRIPT = b'local M = {}\nfunction M.init() print("todo") end\nreturn M\n'

# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_global_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep tests away from the real user profile and reset logging."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.delenv("PLUGIN_SIGNER_KEY_DIR", raising=False)
    monkeypatch.delenv("PLUGIN_SIGNER_LOG_LEVEL", raising=False)
    config.set_settings(None)
    yield
    config.set_settings(None)
    package_logger = logging.getLogger("plugin_signer")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Key stores
# ---------------------------------------------------------------------------


@pytest.fixture()
def key_dir(tmp_path: Path) -> Path:
    return tmp_path / "keys"


@pytest.fixture()
def key_store(key_dir: Path) -> KeyStore:
    """A KeyStore with a freshly generated keypair."""
    store = KeyStore(key_dir)
    store.generate()
    return store


@pytest.fixture()
def other_key_store(tmp_path: Path) -> KeyStore:
    """A second, unrelated keypair."""
    store = KeyStore(tmp_path / "other-keys")
    store.generate()
    return store


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


@pytest.fixture()
def plugin_dir(tmp_path: Path) -> Path:
    """A plugin bundle named ``todo-plugin``.

    Structure:
        todo-plugin/
            init.lua
            plugin.toml  (declares version 1.2.0)
    """
    d = tmp_path / "todo-plugin"
    d.mkdir()
    (d / "init.lua").write_bytes(ENTRY_SCRIPT)
    (d / "plugin.toml").write_text(MANIFEST_TEXT, encoding="utf-8")
    return d


@pytest.fixture()
def release_binary(tmp_path: Path) -> Path:
    """A fake release binary with an extension."""
    binary = tmp_path / "dist" / "ferrispad-linux-amd64.tar.gz"
    binary.parent.mkdir()
    binary.write_bytes(bytes(range(256)) * 4)
    return binary
