"""Pydantic models for plugin-signer."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Raw Ed25519 sizes.
KEY_SIZE = 32
SIGNATURE_SIZE = 64


class ArtifactKind(str, Enum):
    """Which canonicalization scheme an artifact uses."""

    plugin = "plugin"
    release = "release"


class VerificationOutcome(str, Enum):
    """Result of a verification that ran to completion."""

    verified = "verified"
    rejected = "rejected"


class KeyPair(BaseModel):
    """An Ed25519 private seed and its public key, both raw 32 bytes."""

    model_config = ConfigDict(frozen=True)

    private_key: bytes = Field(min_length=KEY_SIZE, max_length=KEY_SIZE, repr=False)
    public_key: bytes = Field(min_length=KEY_SIZE, max_length=KEY_SIZE)


class PluginArtifact(BaseModel):
    """A plugin bundle as read from disk."""

    bundle_name: str
    version: str = Field(min_length=1)
    entry_script: bytes = Field(repr=False)
    manifest: bytes = Field(repr=False)


class ReleaseArtifact(BaseModel):
    """A release binary plus its caller-supplied identity."""

    path: Path
    version: str
    platform: str
    binary: bytes = Field(repr=False)


class PluginSignature(BaseModel):
    """Everything produced by signing a plugin bundle."""

    bundle_name: str
    version: str
    entry_checksum: str
    manifest_checksum: str
    message: str
    signature: str  # Base-64 encoded raw Ed25519 signature


class ReleaseSignature(BaseModel):
    """Everything produced by signing a release binary."""

    binary: Path
    size_bytes: int = Field(ge=0)
    version: str
    platform: str
    checksum: str
    message: str
    signature: str  # Base-64 encoded raw Ed25519 signature
    sidecar: Path | None = None


class VerificationResult(BaseModel):
    """Outcome of checking a claimed signature against recomputed content."""

    kind: ArtifactKind
    outcome: VerificationOutcome
    name: str
    version: str
    platform: str | None = None
    message: str
    reason: str | None = None

    @property
    def verified(self) -> bool:
        return self.outcome is VerificationOutcome.verified


__all__ = [
    "KEY_SIZE",
    "SIGNATURE_SIZE",
    "ArtifactKind",
    "KeyPair",
    "PluginArtifact",
    "PluginSignature",
    "ReleaseArtifact",
    "ReleaseSignature",
    "VerificationOutcome",
    "VerificationResult",
]
