"""Signing and verification of plugin bundles and release binaries."""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from plugin_signer.canonical import (
    load_plugin_artifact,
    load_release_artifact,
    plugin_message,
    release_message,
)
from plugin_signer.checksum import digest, prefixed_digest
from plugin_signer.errors import MissingArtifactError, SignatureEncodingError
from plugin_signer.keystore import KeyStore
from plugin_signer.models import (
    SIGNATURE_SIZE,
    ArtifactKind,
    PluginSignature,
    ReleaseSignature,
    VerificationOutcome,
    VerificationResult,
)

logger = logging.getLogger(__name__)

SIDECAR_SUFFIX = ".sig"

# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def sign_message(message: str, private_key: Ed25519PrivateKey) -> bytes:
    """Sign the UTF-8 encoding of *message*; returns the raw 64-byte signature."""
    return private_key.sign(message.encode("utf-8"))


def verify_message(message: str, signature: bytes, public_key: Ed25519PublicKey) -> bool:
    """Return True if *signature* is valid for *message* under *public_key*."""
    try:
        public_key.verify(signature, message.encode("utf-8"))
    except InvalidSignature:
        return False
    return True


def encode_signature(signature: bytes) -> str:
    return base64.b64encode(signature).decode("ascii")


def decode_signature(text: str) -> bytes:
    """Decode a base64 signature and check its length.

    Raises:
        SignatureEncodingError: on invalid base64 or a length other than 64.
    """
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SignatureEncodingError(f"Signature is not valid base64: {exc}") from exc
    if len(raw) != SIGNATURE_SIZE:
        raise SignatureEncodingError(
            f"Signature must be {SIGNATURE_SIZE} bytes, got {len(raw)}"
        )
    return raw


def sidecar_path(binary: Path | str) -> Path:
    """Return the signature file that sits next to *binary*: ``<name>.sig``."""
    path = Path(binary)
    return path.with_name(path.name + SIDECAR_SUFFIX)


def read_sidecar(binary: Path | str) -> str:
    """Return the base64 signature stored beside *binary*.

    Raises:
        MissingArtifactError: if no sidecar file exists.
    """
    path = sidecar_path(binary)
    if not path.is_file():
        raise MissingArtifactError(path, "Signature file")
    return path.read_bytes().decode("ascii", errors="replace").strip()


# ---------------------------------------------------------------------------
# ArtifactSigner
# ---------------------------------------------------------------------------


class ArtifactSigner:
    """Sign plugin bundles and release binaries with the stored private key."""

    def __init__(self, key_store: KeyStore | None = None) -> None:
        self._key_store = key_store or KeyStore()

    def sign_plugin(self, plugin_dir: Path | str) -> PluginSignature:
        """Sign the plugin bundle in *plugin_dir*.

        The bundle must contain ``init.lua`` and a ``plugin.toml`` declaring a
        version.  The returned :class:`PluginSignature` carries both
        checksums for the plugin registry entry.
        """
        artifact = load_plugin_artifact(plugin_dir)
        message = plugin_message(artifact)
        private_key = self._key_store.load_private()
        signature = encode_signature(sign_message(message, private_key))

        logger.debug("Signed plugin message %s", message)
        return PluginSignature(
            bundle_name=artifact.bundle_name,
            version=artifact.version,
            entry_checksum=prefixed_digest(artifact.entry_script),
            manifest_checksum=prefixed_digest(artifact.manifest),
            message=message,
            signature=signature,
        )

    def sign_release(
        self,
        binary: Path | str,
        version: str,
        platform: str,
        write_sidecar: bool = True,
    ) -> ReleaseSignature:
        """Sign a release binary for *version* on *platform*.

        Args:
            binary: Path to the binary.
            version: Release version string, e.g. ``"0.9.1"``.
            platform: Platform identifier, e.g. ``"linux-amd64"``.
            write_sidecar: Also write the base64 signature to
                ``<binary>.sig`` (see :func:`sidecar_path`).

        Returns:
            A :class:`ReleaseSignature`; ``sidecar`` is set when a file was
            written.
        """
        artifact = load_release_artifact(binary, version, platform)
        message = release_message(artifact)
        private_key = self._key_store.load_private()
        signature = encode_signature(sign_message(message, private_key))

        sidecar: Path | None = None
        if write_sidecar:
            sidecar = sidecar_path(artifact.path)
            sidecar.write_text(signature, encoding="ascii")
            logger.debug("Wrote signature to %s", sidecar)

        return ReleaseSignature(
            binary=artifact.path,
            size_bytes=len(artifact.binary),
            version=version,
            platform=platform,
            checksum=digest(artifact.binary),
            message=message,
            signature=signature,
            sidecar=sidecar,
        )


# ---------------------------------------------------------------------------
# ArtifactVerifier
# ---------------------------------------------------------------------------


class ArtifactVerifier:
    """Check claimed signatures against freshly recomputed canonical messages.

    A signature that does not match yields a ``rejected`` result; only
    precondition failures (missing files, malformed manifest, bad key or bad
    signature encoding) raise.
    """

    def __init__(self, key_store: KeyStore | None = None) -> None:
        self._key_store = key_store or KeyStore()

    def _check(self, message: str, signature_b64: str) -> tuple[VerificationOutcome, str | None]:
        raw_signature = decode_signature(signature_b64)
        public_key = self._key_store.load_public()
        if verify_message(message, raw_signature, public_key):
            return VerificationOutcome.verified, None
        logger.debug("Signature does not match message %s", message)
        return VerificationOutcome.rejected, "signature does not match content or key"

    def verify_plugin(self, plugin_dir: Path | str, signature_b64: str) -> VerificationResult:
        """Verify *signature_b64* for the plugin bundle in *plugin_dir*."""
        artifact = load_plugin_artifact(plugin_dir)
        message = plugin_message(artifact)
        outcome, reason = self._check(message, signature_b64)
        return VerificationResult(
            kind=ArtifactKind.plugin,
            outcome=outcome,
            name=artifact.bundle_name,
            version=artifact.version,
            message=message,
            reason=reason,
        )

    def verify_release(
        self,
        binary: Path | str,
        version: str,
        platform: str,
        signature_b64: str | None = None,
    ) -> VerificationResult:
        """Verify a release binary.

        When *signature_b64* is omitted the signature is read from the
        binary's sidecar file.
        """
        artifact = load_release_artifact(binary, version, platform)
        if signature_b64 is None:
            signature_b64 = read_sidecar(artifact.path)
        message = release_message(artifact)
        outcome, reason = self._check(message, signature_b64)
        return VerificationResult(
            kind=ArtifactKind.release,
            outcome=outcome,
            name=artifact.path.name,
            version=version,
            platform=platform,
            message=message,
            reason=reason,
        )


__all__ = [
    "SIDECAR_SUFFIX",
    "ArtifactSigner",
    "ArtifactVerifier",
    "decode_signature",
    "encode_signature",
    "read_sidecar",
    "sidecar_path",
    "sign_message",
    "verify_message",
]
