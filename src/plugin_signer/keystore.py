"""Generate, persist, and load the raw Ed25519 signing keypair."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from plugin_signer.config import get_settings
from plugin_signer.errors import (
    InvalidPublicKeyError,
    KeyAbsentError,
    KeyExistsError,
    KeySizeMismatchError,
)
from plugin_signer.models import KEY_SIZE, KeyPair

logger = logging.getLogger(__name__)

PRIVATE_KEY_FILE = "plugin_signing_key.bin"
PUBLIC_KEY_FILE = "plugin_signing_key.pub.bin"

# Curve25519 field prime and the twisted Edwards constant d = -121665/121666.
_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _is_curve_point(encoded: bytes) -> bool:
    """Return True if *encoded* decompresses to a point on edwards25519.

    The y coordinate is the low 255 bits; x is recovered from
    x^2 = (y^2 - 1) / (d*y^2 + 1), which must be a square mod p.

    Acceptance follows ed25519-dalek's lenient decompression, which the
    consuming editor uses: a non-canonical y >= p is reduced mod p rather
    than refused, and the sign bit is ignored.
    """
    y = (int.from_bytes(encoded, "little") & ((1 << 255) - 1)) % _P
    y2 = y * y % _P
    u = (y2 - 1) % _P
    v = (_D * y2 + 1) % _P
    x2 = u * pow(v, _P - 2, _P) % _P
    if x2 == 0:
        return True
    return pow(x2, (_P - 1) // 2, _P) == 1


def _raw_private(key: Ed25519PrivateKey) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _raw_public(key: Ed25519PublicKey) -> bytes:
    return key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def _write_new(path: Path, data: bytes, mode: int) -> None:
    """Create *path* exclusively with *mode* and write *data* to it."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)


# ---------------------------------------------------------------------------
# KeyStore
# ---------------------------------------------------------------------------


class KeyStore:
    """Raw 32-byte Ed25519 keys kept as two files under a single directory.

    The directory defaults to the configured key location (see
    :meth:`plugin_signer.config.Settings.get_key_dir`).  Tests and callers
    that must not touch the user's profile pass an explicit *root*.

    There is no locking: two concurrent :meth:`generate` calls against the
    same directory can race.  Loading is safe, key files never change after
    creation.
    """

    def __init__(self, root: Path | str | None = None) -> None:
        self._root = Path(root) if root is not None else get_settings().get_key_dir()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def private_key_path(self) -> Path:
        return self._root / PRIVATE_KEY_FILE

    @property
    def public_key_path(self) -> Path:
        return self._root / PUBLIC_KEY_FILE

    def exists(self) -> bool:
        """Return True if a private key is already present."""
        return self.private_key_path.exists()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(self) -> KeyPair:
        """Create and persist a fresh keypair.

        Generation is a one-time bootstrap.  An existing private key is never
        overwritten; delete it out of band to start over.

        Both files are staged under temporary names and renamed into place,
        so a failure leaves neither key behind.  The private key file is
        restricted to mode 0o600 where the platform honours it.

        Raises:
            KeyExistsError: if a private key already exists.
        """
        if self.exists():
            logger.warning("Refusing to overwrite existing key at %s", self.private_key_path)
            raise KeyExistsError(self.private_key_path)

        self._root.mkdir(parents=True, exist_ok=True)

        private_key = Ed25519PrivateKey.generate()
        keypair = KeyPair(
            private_key=_raw_private(private_key),
            public_key=_raw_public(private_key.public_key()),
        )

        staged_private = self.private_key_path.with_name(PRIVATE_KEY_FILE + ".tmp")
        staged_public = self.public_key_path.with_name(PUBLIC_KEY_FILE + ".tmp")
        for stale in (staged_private, staged_public):
            stale.unlink(missing_ok=True)
        try:
            _write_new(staged_private, keypair.private_key, 0o600)
            _write_new(staged_public, keypair.public_key, 0o644)
            # Restrict private key permissions on POSIX
            try:
                os.chmod(staged_private, 0o600)
            except NotImplementedError:
                pass  # Windows: skip chmod
            os.replace(staged_public, self.public_key_path)
            os.replace(staged_private, self.private_key_path)
        except BaseException:
            for leftover in (staged_private, staged_public):
                leftover.unlink(missing_ok=True)
            if not self.private_key_path.exists():
                self.public_key_path.unlink(missing_ok=True)
            raise

        logger.debug("Generated keypair in %s", self._root)
        return keypair

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _read_raw(self, path: Path) -> bytes:
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise KeyAbsentError(path) from exc
        if len(data) != KEY_SIZE:
            raise KeySizeMismatchError(path, len(data))
        return data

    def load_private(self) -> Ed25519PrivateKey:
        """Load the signing key.

        Raises:
            KeyAbsentError: if no private key file exists.
            KeySizeMismatchError: if the file is not exactly 32 bytes.
        """
        seed = self._read_raw(self.private_key_path)
        logger.debug("Loaded private key from %s", self.private_key_path)
        return Ed25519PrivateKey.from_private_bytes(seed)

    def public_key_bytes(self) -> bytes:
        """Return the raw 32-byte public key after validating it."""
        raw = self._read_raw(self.public_key_path)
        if not _is_curve_point(raw):
            raise InvalidPublicKeyError(
                f"Public key in {self.public_key_path} is not a valid Ed25519 point"
            )
        return raw

    def load_public(self) -> Ed25519PublicKey:
        """Load the verifying key.

        Raises:
            KeyAbsentError: if no public key file exists.
            KeySizeMismatchError: if the file is not exactly 32 bytes.
            InvalidPublicKeyError: if the bytes are not a curve point.
        """
        raw = self.public_key_bytes()
        try:
            return Ed25519PublicKey.from_public_bytes(raw)
        except ValueError as exc:
            raise InvalidPublicKeyError(str(exc)) from exc


__all__ = ["PRIVATE_KEY_FILE", "PUBLIC_KEY_FILE", "KeyStore"]
