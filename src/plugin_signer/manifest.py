"""Typed decoding of the ``plugin.toml`` manifest shipped with every plugin."""

from __future__ import annotations

import tomllib

from pydantic import BaseModel, ConfigDict

from plugin_signer.errors import MalformedManifestError

MANIFEST_FILE = "plugin.toml"


class PluginManifest(BaseModel):
    """The top-level keys of ``plugin.toml`` that signing relies on.

    Only ``version`` is checked; every other key is carried through
    untouched, whatever its type.
    """

    model_config = ConfigDict(extra="allow")

    version: str

    @classmethod
    def from_text(cls, text: str) -> PluginManifest:
        """Decode manifest *text*.

        Raises:
            MalformedManifestError: if the text is not TOML or has no string
                ``version`` key at the top level.
        """
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise MalformedManifestError(f"{MANIFEST_FILE} is not valid TOML: {exc}") from exc

        version = data.get("version")
        if not isinstance(version, str) or not version:
            raise MalformedManifestError(f"Could not find version in {MANIFEST_FILE}")

        return cls.model_validate(data)

    @classmethod
    def from_bytes(cls, raw: bytes) -> PluginManifest:
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedManifestError(f"{MANIFEST_FILE} is not UTF-8: {exc}") from exc
        return cls.from_text(text)


def declared_version(raw: bytes) -> str:
    """Return the version a raw manifest declares."""
    return PluginManifest.from_bytes(raw).version


__all__ = ["MANIFEST_FILE", "PluginManifest", "declared_version"]
