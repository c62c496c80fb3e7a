"""Typer CLI entrypoint."""

from __future__ import annotations

import typer

from nodectl.core.errors import NodectlError
from nodectl.core.service import ProfileService

app = typer.Typer(help="Inspect wireless node feature profiles")


def _build_service() -> ProfileService:
    service = ProfileService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command("profiles")
def list_profiles() -> None:
    """List loaded feature profiles and the models they match."""
    try:
        service = _build_service()
        profiles = service.list_profiles()
        if not profiles:
            typer.echo("No profiles loaded")
            raise typer.Exit(code=1)

        for profile in profiles:
            typer.echo(f"{profile.id}: {profile.name}")
            models = ", ".join(str(m) for m in profile.match.models) or "-"
            prefixes = ", ".join(str(p) for p in profile.match.model_prefix) or "-"
            typer.echo(f"  models: {models}  model prefixes: {prefixes}")
    except NodectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("features")
def show_features(
    model: int,
    firmware: str = typer.Option(..., "--firmware", help="Node firmware version, e.g. 10.2"),
) -> None:
    """Show what a node of MODEL running FIRMWARE supports."""
    try:
        service = _build_service()
        features = service.features_for(model, firmware)
        typer.echo(f"Profile: {features.profile.id} ({features.profile.name})")
        typer.echo(f"  channels: {', '.join(str(ch) for ch in features.channels())}")
        modes = ", ".join(mode.name.lower() for mode in features.sampling_modes())
        typer.echo(f"  sampling modes: {modes}")
        capabilities = ", ".join(c.value for c in features.supported_capabilities())
        typer.echo(f"  capabilities: {capabilities}")
        for setting, masks in features.channel_settings().items():
            typer.echo(f"  {setting.value}: {' '.join(f'[{mask}]' for mask in masks)}")
    except NodectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("locate")
def locate_setting(
    model: int,
    setting: str,
    channel: list[int] = typer.Option(..., "--channel", help="Channel number, repeat for groups"),
    firmware: str = typer.Option(..., "--firmware", help="Node firmware version, e.g. 10.2"),
) -> None:
    """Print the register holding SETTING for the given channel(s)."""
    try:
        service = _build_service()
        location = service.locate(model, firmware, setting, channel)
        typer.echo(f"{location.name} address={location.address} type={location.value_type.value}")
    except NodectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
