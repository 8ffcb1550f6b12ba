"""plugin-signer quickstart: working demonstrations of the signing workflows.

Run this file directly to verify your installation and see the features in action:

    python examples/quickstart.py

Each demo function is self-contained and uses a temporary key directory, so
your real signing key under ~/.config/ferrispad/signing is never touched.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from plugin_signer import (
    ArtifactSigner,
    ArtifactVerifier,
    KeyExistsError,
    KeyStore,
    VerificationOutcome,
)
from plugin_signer.core import read_sidecar
from plugin_signer.render import plugin_json_fragment, rust_key_array

# ---------------------------------------------------------------------------
# Demo 1: plugin bundle sign & verify
# ---------------------------------------------------------------------------


def demo_plugin() -> None:
    """Sign a plugin bundle, verify it, then show that tampering is caught."""

    print("\n=== Demo 1: Plugin Sign & Verify ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)

        plugin_dir = tmp / "todo-plugin"
        plugin_dir.mkdir()
        (plugin_dir / "init.lua").write_text("return { name = 'todo' }\n", encoding="utf-8")
        (plugin_dir / "plugin.toml").write_text(
            'name = "Todo"\nversion = "1.2.0"\n', encoding="utf-8"
        )

        store = KeyStore(tmp / "keys")
        store.generate()
        print(f"  Keys written to: {store.root}/")

        signed = ArtifactSigner(store).sign_plugin(plugin_dir)
        print(f"  Message signed: {signed.message}")
        print("  Registry fragment:")
        print(plugin_json_fragment(signed))

        verifier = ArtifactVerifier(store)
        result = verifier.verify_plugin(plugin_dir, signed.signature)
        print(f"  Untouched bundle: {result.outcome.value}")

        (plugin_dir / "init.lua").write_text("os.exit(1)\n", encoding="utf-8")
        result = verifier.verify_plugin(plugin_dir, signed.signature)
        assert result.outcome is VerificationOutcome.rejected
        print(f"  Tampered bundle:  {result.outcome.value}")


# ---------------------------------------------------------------------------
# Demo 2: release binary with sidecar signature
# ---------------------------------------------------------------------------


def demo_release() -> None:
    """Sign a release binary and verify it from the sidecar file."""

    print("\n=== Demo 2: Release Binary & Sidecar ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)
        binary = tmp / "ferrispad-linux-amd64"
        binary.write_bytes(b"\x7fELF" + b"\x00" * 4096)

        store = KeyStore(tmp / "keys")
        store.generate()

        signed = ArtifactSigner(store).sign_release(binary, "0.9.1", "linux-amd64")
        print(f"  Message signed: {signed.message}")
        print(f"  Sidecar:        {signed.sidecar}")

        result = ArtifactVerifier(store).verify_release(
            binary, "0.9.1", "linux-amd64", read_sidecar(binary)
        )
        print(f"  Verification:   {result.outcome.value}")

        result = ArtifactVerifier(store).verify_release(binary, "0.9.2", "linux-amd64")
        print(f"  Wrong version:  {result.outcome.value}")


# ---------------------------------------------------------------------------
# Demo 3: key lifecycle
# ---------------------------------------------------------------------------


def demo_keys() -> None:
    """Generation is one-shot: a second call never replaces the key."""

    print("\n=== Demo 3: Key Lifecycle ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        store = KeyStore(Path(tmpdir) / "keys")
        keypair = store.generate()
        print(rust_key_array(keypair.public_key))

        try:
            store.generate()
        except KeyExistsError as exc:
            print(f"  Second generate refused: {exc}")


if __name__ == "__main__":
    demo_plugin()
    demo_release()
    demo_keys()
