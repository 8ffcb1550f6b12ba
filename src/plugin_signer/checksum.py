"""SHA-256 content digests in the two renderings the signing schemes use."""

from __future__ import annotations

import hashlib

DIGEST_PREFIX = "sha256:"


def digest(data: bytes) -> str:
    """Return the bare lowercase hex SHA-256 digest of *data*."""
    return hashlib.sha256(data).hexdigest()


def prefixed_digest(data: bytes) -> str:
    """Return the digest of *data* tagged with its scheme, ``sha256:<hex>``."""
    return DIGEST_PREFIX + digest(data)


__all__ = ["DIGEST_PREFIX", "digest", "prefixed_digest"]
