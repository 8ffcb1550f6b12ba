"""Human-readable renderings of signing and verification results."""

from __future__ import annotations

import base64
import json

from plugin_signer.canonical import ENTRY_SCRIPT_FILE
from plugin_signer.manifest import MANIFEST_FILE
from plugin_signer.models import (
    ArtifactKind,
    PluginSignature,
    ReleaseSignature,
    VerificationResult,
)

_RULE = "-" * 40


def rust_key_array(public_key: bytes, name: str = "PLUGIN_PUBLIC_KEY") -> str:
    """Render *public_key* as the Rust constant the editor embeds."""
    rows = []
    for offset in range(0, len(public_key), 8):
        chunk = public_key[offset : offset + 8]
        rows.append("    " + " ".join(f"0x{b:02x}," for b in chunk))
    return "\n".join([f"const {name}: [u8; {len(public_key)}] = [", *rows, "];"])


def public_key_report(public_key: bytes) -> str:
    return "\n".join(
        [
            "Public key for plugin_verify.rs:",
            "",
            rust_key_array(public_key),
            "",
            f"Base64: {base64.b64encode(public_key).decode('ascii')}",
            f"Hex:    {public_key.hex()}",
        ]
    )


def plugin_json_fragment(result: PluginSignature) -> str:
    """The ``checksums``/``signature`` entries to paste into ``plugins.json``."""
    checksums = json.dumps(
        {
            ENTRY_SCRIPT_FILE: result.entry_checksum,
            MANIFEST_FILE: result.manifest_checksum,
        },
        indent=2,
    )
    body = f'"checksums": {checksums},\n"signature": {json.dumps(result.signature)}'
    return "\n".join("    " + line for line in body.splitlines())


def plugin_signature_report(result: PluginSignature) -> str:
    return "\n".join(
        [
            f"Plugin: {result.bundle_name}",
            f"Version: {result.version}",
            "",
            "Checksums:",
            f"  {ENTRY_SCRIPT_FILE}:    {result.entry_checksum}",
            f"  {MANIFEST_FILE}: {result.manifest_checksum}",
            "",
            f"Message signed: {result.message}",
            f"Signature: {result.signature}",
            "",
            "JSON fragment for plugins.json:",
            _RULE,
            plugin_json_fragment(result),
            _RULE,
        ]
    )


def release_signature_report(result: ReleaseSignature) -> str:
    lines = [
        f"Binary: {result.binary}",
        f"Size: {result.size_bytes:,} bytes",
        f"Version: {result.version}",
        f"Platform: {result.platform}",
        "",
        f"SHA-256: {result.checksum}",
        "",
        f"Message signed: {result.message}",
        f"Signature: {result.signature}",
    ]
    if result.sidecar is not None:
        lines += ["", f"Signature written to: {result.sidecar}"]
    return "\n".join(lines)


def verification_report(result: VerificationResult) -> str:
    if not result.verified:
        return "\n".join(
            [
                "Verification: FAILED",
                f"Error: {result.reason}",
            ]
        )
    if result.kind is ArtifactKind.plugin:
        detail = f"Plugin {result.name} v{result.version} is authentic."
    else:
        detail = f"Binary {result.name} v{result.version} ({result.platform}) is authentic."
    return "\n".join(["Verification: PASSED", detail])


__all__ = [
    "plugin_json_fragment",
    "plugin_signature_report",
    "public_key_report",
    "release_signature_report",
    "rust_key_array",
    "verification_report",
]
