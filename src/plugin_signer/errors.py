"""Exception hierarchy for plugin-signer.

Every precondition failure surfaced by the core derives from
:class:`SignerError`.  A signature that simply does not match is *not* an
error; see :class:`plugin_signer.models.VerificationOutcome`.
"""

from __future__ import annotations

from pathlib import Path


class SignerError(Exception):
    """Base class for all errors raised by plugin-signer."""


class MissingArtifactError(SignerError):
    """An expected artifact file (entry script, manifest, binary) is absent."""

    def __init__(self, path: Path, description: str | None = None) -> None:
        self.path = path
        what = description or path.name
        super().__init__(f"{what} not found: {path}")


class MalformedManifestError(SignerError):
    """The plugin manifest cannot be decoded or declares no version."""


class KeyAbsentError(SignerError):
    """A key file does not exist yet."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Could not read key from {path}. "
            "Run 'plugin-signer generate-keypair' first."
        )


class KeyExistsError(SignerError):
    """Key generation refused because a private key is already present."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Key already exists at {path}. "
            "Delete it manually if you want to generate a new one."
        )


class KeySizeMismatchError(SignerError):
    """A key file exists but does not hold exactly 32 bytes."""

    def __init__(self, path: Path, size: int) -> None:
        self.path = path
        self.size = size
        super().__init__(f"Invalid key file size: {path} holds {size} bytes, expected 32")


class InvalidPublicKeyError(SignerError):
    """The public key bytes do not encode a point on the Ed25519 curve."""


class SignatureEncodingError(SignerError):
    """A claimed signature is not valid base64 or has the wrong length."""


__all__ = [
    "InvalidPublicKeyError",
    "KeyAbsentError",
    "KeyExistsError",
    "KeySizeMismatchError",
    "MalformedManifestError",
    "MissingArtifactError",
    "SignatureEncodingError",
    "SignerError",
]
