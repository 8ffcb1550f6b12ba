"""CLI entry point for plugin-signer."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from pydantic import ValidationError

from plugin_signer.config import configure_logging, get_settings
from plugin_signer.core import ArtifactSigner, ArtifactVerifier
from plugin_signer.errors import KeyExistsError, SignerError
from plugin_signer.keystore import KeyStore
from plugin_signer.render import (
    plugin_signature_report,
    public_key_report,
    release_signature_report,
    verification_report,
)

# Exit status for a verification that ran but did not match.
EXIT_REJECTED = 2

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _key_store(ctx: click.Context) -> KeyStore:
    return ctx.ensure_object(dict)["key_store"]


_json_option = click.option("--json-output", is_flag=True, help="Emit the result as JSON.")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="plugin-signer")
@click.option(
    "--key-dir",
    default=None,
    metavar="DIR",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding the signing keys (default: XDG config dir).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log diagnostics to stderr.")
@click.pass_context
def main(ctx: click.Context, key_dir: Path | None, verbose: bool) -> None:
    """Sign and verify editor plugins and release binaries."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        click.echo(f"Error: invalid settings: {exc}", err=True)
        sys.exit(1)
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.ensure_object(dict)["key_store"] = KeyStore(key_dir or settings.get_key_dir())


@main.command("generate-keypair")
@click.pass_context
def generate_keypair_command(ctx: click.Context) -> None:
    """Generate a new Ed25519 keypair (never overwrites an existing one)."""
    store = _key_store(ctx)
    try:
        keypair = store.generate()
    except KeyExistsError as exc:
        click.echo(f"Warning: Key already exists at {exc.path}", err=True)
        click.echo("Delete it manually if you want to generate a new one.", err=True)
        return
    except (SignerError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo("Generated new keypair:")
    click.echo(f"  Private key: {store.private_key_path}")
    click.echo(f"  Public key:  {store.public_key_path}")
    click.echo()
    click.echo(public_key_report(keypair.public_key))


@main.command("show-public-key")
@click.pass_context
def show_public_key_command(ctx: click.Context) -> None:
    """Print the public key in the formats the editor embeds."""
    try:
        public_key = _key_store(ctx).public_key_bytes()
    except (SignerError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(public_key_report(public_key))


@main.command("sign-plugin")
@click.argument("plugin_dir", type=click.Path(path_type=Path))
@_json_option
@click.pass_context
def sign_plugin_command(ctx: click.Context, plugin_dir: Path, json_output: bool) -> None:
    """Sign the plugin bundle in PLUGIN_DIR."""
    signer = ArtifactSigner(_key_store(ctx))
    try:
        result = signer.sign_plugin(plugin_dir)
    except (SignerError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if json_output:
        click.echo(result.model_dump_json(indent=2))
    else:
        click.echo(plugin_signature_report(result))


@main.command("verify-plugin")
@click.argument("plugin_dir", type=click.Path(path_type=Path))
@click.argument("signature")
@_json_option
@click.pass_context
def verify_plugin_command(
    ctx: click.Context, plugin_dir: Path, signature: str, json_output: bool
) -> None:
    """Verify SIGNATURE (base64) for the plugin bundle in PLUGIN_DIR."""
    verifier = ArtifactVerifier(_key_store(ctx))
    try:
        result = verifier.verify_plugin(plugin_dir, signature)
    except (SignerError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(result.model_dump_json(indent=2) if json_output else verification_report(result))
    if not result.verified:
        sys.exit(EXIT_REJECTED)


@main.command("sign-release")
@click.argument("binary", type=click.Path(path_type=Path))
@click.argument("version")
@click.argument("platform")
@click.option(
    "--no-sidecar",
    is_flag=True,
    help="Do not write <BINARY>.sig next to the binary.",
)
@_json_option
@click.pass_context
def sign_release_command(
    ctx: click.Context,
    binary: Path,
    version: str,
    platform: str,
    no_sidecar: bool,
    json_output: bool,
) -> None:
    """Sign a release BINARY for VERSION on PLATFORM (e.g. linux-amd64)."""
    signer = ArtifactSigner(_key_store(ctx))
    try:
        result = signer.sign_release(binary, version, platform, write_sidecar=not no_sidecar)
    except (SignerError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if json_output:
        click.echo(result.model_dump_json(indent=2))
    else:
        click.echo(release_signature_report(result))


@main.command("verify-release")
@click.argument("binary", type=click.Path(path_type=Path))
@click.argument("version")
@click.argument("platform")
@click.argument("signature", required=False)
@_json_option
@click.pass_context
def verify_release_command(
    ctx: click.Context,
    binary: Path,
    version: str,
    platform: str,
    signature: str | None,
    json_output: bool,
) -> None:
    """Verify a release BINARY.

    SIGNATURE is base64; when omitted it is read from <BINARY>.sig.
    """
    verifier = ArtifactVerifier(_key_store(ctx))
    try:
        result = verifier.verify_release(binary, version, platform, signature)
    except (SignerError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(result.model_dump_json(indent=2) if json_output else verification_report(result))
    if not result.verified:
        sys.exit(EXIT_REJECTED)


__all__ = ["EXIT_REJECTED", "main"]


if __name__ == "__main__":
    main()
