"""Tests for plugin_signer.render."""

from __future__ import annotations

import base64
import json
from pathlib import Path

from plugin_signer.models import (
    ArtifactKind,
    PluginSignature,
    ReleaseSignature,
    VerificationOutcome,
    VerificationResult,
)
from plugin_signer.render import (
    plugin_json_fragment,
    plugin_signature_report,
    public_key_report,
    release_signature_report,
    rust_key_array,
    verification_report,
)


def _plugin_signature() -> PluginSignature:
    return PluginSignature(
        bundle_name="todo-plugin",
        version="1.2.0",
        entry_checksum="sha256:" + "a" * 64,
        manifest_checksum="sha256:" + "b" * 64,
        message="todo-plugin/:1.2.0:sha256:" + "a" * 64 + ":sha256:" + "b" * 64,
        signature="c2lnbmF0dXJl",
    )


class TestRustKeyArray:
    def test_layout(self) -> None:
        text = rust_key_array(bytes(range(32)))
        lines = text.splitlines()
        assert lines[0] == "const PLUGIN_PUBLIC_KEY: [u8; 32] = ["
        assert lines[1] == "    0x00, 0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07,"
        assert lines[4] == "    0x18, 0x19, 0x1a, 0x1b, 0x1c, 0x1d, 0x1e, 0x1f,"
        assert lines[5] == "];"
        assert len(lines) == 6

    def test_custom_name(self) -> None:
        assert rust_key_array(bytes(32), name="KEY").startswith("const KEY: [u8; 32]")


class TestPublicKeyReport:
    def test_includes_all_renderings(self) -> None:
        report = public_key_report(bytes([0xAB]) * 32)
        assert "0xab," in report
        assert "ab" * 32 in report
        assert base64.b64encode(bytes([0xAB]) * 32).decode() in report


class TestPluginJsonFragment:
    def test_fragment_is_embeddable_json(self) -> None:
        fragment = plugin_json_fragment(_plugin_signature())
        parsed = json.loads("{" + fragment + "}")
        assert parsed == {
            "checksums": {
                "init.lua": "sha256:" + "a" * 64,
                "plugin.toml": "sha256:" + "b" * 64,
            },
            "signature": "c2lnbmF0dXJl",
        }

    def test_indentation(self) -> None:
        lines = plugin_json_fragment(_plugin_signature()).splitlines()
        assert lines[0] == '    "checksums": {'
        assert lines[1].startswith('      "init.lua": ')
        assert lines[3] == "    },"
        assert lines[4] == '    "signature": "c2lnbmF0dXJl"'

    def test_report_contains_fragment(self) -> None:
        report = plugin_signature_report(_plugin_signature())
        assert "Plugin: todo-plugin" in report
        assert "Version: 1.2.0" in report
        assert plugin_json_fragment(_plugin_signature()) in report


class TestReleaseReport:
    def test_mentions_sidecar(self) -> None:
        result = ReleaseSignature(
            binary=Path("dist/app"),
            size_bytes=2048,
            version="0.9.1",
            platform="linux-amd64",
            checksum="d" * 64,
            message="0.9.1:linux-amd64:" + "d" * 64,
            signature="c2ln",
            sidecar=Path("dist/app.sig"),
        )
        report = release_signature_report(result)
        assert "Size: 2,048 bytes" in report
        assert "SHA-256: " + "d" * 64 in report
        assert "Signature written to:" in report

    def test_without_sidecar(self) -> None:
        result = ReleaseSignature(
            binary=Path("app"),
            size_bytes=0,
            version="1",
            platform="p",
            checksum="e" * 64,
            message="1:p:" + "e" * 64,
            signature="c2ln",
        )
        assert "Signature written to" not in release_signature_report(result)


class TestVerificationReport:
    def test_plugin_passed(self) -> None:
        result = VerificationResult(
            kind=ArtifactKind.plugin,
            outcome=VerificationOutcome.verified,
            name="todo-plugin",
            version="1.2.0",
            message="m",
        )
        report = verification_report(result)
        assert "Verification: PASSED" in report
        assert "Plugin todo-plugin v1.2.0 is authentic." in report

    def test_release_passed(self) -> None:
        result = VerificationResult(
            kind=ArtifactKind.release,
            outcome=VerificationOutcome.verified,
            name="app.exe",
            version="0.9.1",
            platform="windows-x64.exe",
            message="m",
        )
        assert "Binary app.exe v0.9.1 (windows-x64.exe) is authentic." in verification_report(
            result
        )

    def test_failed(self) -> None:
        result = VerificationResult(
            kind=ArtifactKind.plugin,
            outcome=VerificationOutcome.rejected,
            name="todo-plugin",
            version="1.2.0",
            message="m",
            reason="signature does not match content or key",
        )
        report = verification_report(result)
        assert "Verification: FAILED" in report
        assert "does not match" in report
