"""plugin-signer: Ed25519 signing and verification for editor plugins and release binaries."""

from plugin_signer.core import ArtifactSigner, ArtifactVerifier
from plugin_signer.errors import (
    InvalidPublicKeyError,
    KeyAbsentError,
    KeyExistsError,
    KeySizeMismatchError,
    MalformedManifestError,
    MissingArtifactError,
    SignatureEncodingError,
    SignerError,
)
from plugin_signer.keystore import KeyStore
from plugin_signer.models import (
    ArtifactKind,
    KeyPair,
    PluginArtifact,
    PluginSignature,
    ReleaseArtifact,
    ReleaseSignature,
    VerificationOutcome,
    VerificationResult,
)

__version__ = "0.1.0"

__all__ = [
    "ArtifactKind",
    "ArtifactSigner",
    "ArtifactVerifier",
    "InvalidPublicKeyError",
    "KeyAbsentError",
    "KeyExistsError",
    "KeyPair",
    "KeySizeMismatchError",
    "KeyStore",
    "MalformedManifestError",
    "MissingArtifactError",
    "PluginArtifact",
    "PluginSignature",
    "ReleaseArtifact",
    "ReleaseSignature",
    "SignatureEncodingError",
    "SignerError",
    "VerificationOutcome",
    "VerificationResult",
]
