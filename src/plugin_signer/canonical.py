"""Canonical message construction for plugin bundles and release binaries.

The signed message is rebuilt from on-disk bytes on every call.  Nothing here
accepts a precomputed checksum, so a verifier can never be handed a stale or
forged digest in place of the real content.

Fields are joined with ``:`` and not escaped.  The consuming editor rebuilds
the same string, so the format cannot change here; an identity field that
itself contains ``:`` is logged as ambiguous.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from plugin_signer.checksum import digest, prefixed_digest
from plugin_signer.errors import MissingArtifactError
from plugin_signer.manifest import MANIFEST_FILE, declared_version
from plugin_signer.models import PluginArtifact, ReleaseArtifact

logger = logging.getLogger(__name__)

DELIMITER = ":"
ENTRY_SCRIPT_FILE = "init.lua"


def _warn_if_ambiguous(**fields: str) -> None:
    for name, value in fields.items():
        if DELIMITER in value:
            logger.warning(
                "%s %r contains the message delimiter %r; the signed message "
                "may be ambiguous with another artifact",
                name,
                value,
                DELIMITER,
            )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _read_required(path: Path) -> bytes:
    if not path.is_file():
        raise MissingArtifactError(path)
    return path.read_bytes()


def load_plugin_artifact(plugin_dir: Path | str) -> PluginArtifact:
    """Read a plugin bundle directory.

    Raises:
        MissingArtifactError: if ``init.lua`` or ``plugin.toml`` is absent.
        MalformedManifestError: if the manifest declares no version.
    """
    root = Path(plugin_dir)
    entry_script = _read_required(root / ENTRY_SCRIPT_FILE)
    manifest = _read_required(root / MANIFEST_FILE)

    # "." and ".." have no name of their own.
    bundle_name = Path(os.path.abspath(root)).name
    if not bundle_name:
        raise MissingArtifactError(root, "Plugin directory name")
    return PluginArtifact(
        bundle_name=bundle_name,
        version=declared_version(manifest),
        entry_script=entry_script,
        manifest=manifest,
    )


def load_release_artifact(
    binary: Path | str, version: str, platform: str
) -> ReleaseArtifact:
    """Read a release binary and pair it with its caller-supplied identity.

    Raises:
        MissingArtifactError: if *binary* does not exist.
    """
    path = Path(binary)
    if not path.is_file():
        raise MissingArtifactError(path, "Binary")
    return ReleaseArtifact(
        path=path,
        version=version,
        platform=platform,
        binary=path.read_bytes(),
    )


# ---------------------------------------------------------------------------
# Canonical messages
# ---------------------------------------------------------------------------


def plugin_message(artifact: PluginArtifact) -> str:
    """``{bundle}/:{version}:sha256:{entry}:sha256:{manifest}``."""
    _warn_if_ambiguous(bundle_name=artifact.bundle_name, version=artifact.version)
    return DELIMITER.join(
        [
            f"{artifact.bundle_name}/",
            artifact.version,
            prefixed_digest(artifact.entry_script),
            prefixed_digest(artifact.manifest),
        ]
    )


def release_message(artifact: ReleaseArtifact) -> str:
    """``{version}:{platform}:{hex digest of binary}``."""
    _warn_if_ambiguous(version=artifact.version, platform=artifact.platform)
    return DELIMITER.join([artifact.version, artifact.platform, digest(artifact.binary)])


__all__ = [
    "DELIMITER",
    "ENTRY_SCRIPT_FILE",
    "load_plugin_artifact",
    "load_release_artifact",
    "plugin_message",
    "release_message",
]
