"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from soundctl.core.errors import SoundctlError
from soundctl.core.model import DeviceType, MuteAction, OutputFormat
from soundctl.core.output import format_device
from soundctl.core.service import SoundService

app = typer.Typer(help="Select and control audio devices by name, ID, or MAC address")

_MUTE_ACTIONS = {
    "on": MuteAction.MUTE,
    "mute": MuteAction.MUTE,
    "off": MuteAction.UNMUTE,
    "unmute": MuteAction.UNMUTE,
    "toggle": MuteAction.TOGGLE,
}
_CONFIG_HELP = "Path to config file (default: ~/.config/soundctl/config.json)"


def _build_service(config: str | None) -> SoundService:
    return SoundService(config_path=config)


def _fail(exc: SoundctlError) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution details to stderr"),
) -> None:
    """Without a command, show the current output device."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        show_current(device_type=DeviceType.OUTPUT, output_format=OutputFormat.HUMAN, config=None)


@app.command("list")
def list_devices(
    device_type: DeviceType = typer.Option(DeviceType.OUTPUT, "--type", "-t", help="Device type"),
    output_format: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
    config: str | None = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """List audio devices."""
    try:
        service = _build_service(config)
        for device in service.list_device_groups(device_type):
            typer.echo(format_device(device, output_format))
    except SoundctlError as exc:
        raise _fail(exc) from None


@app.command("current")
def show_current(
    device_type: DeviceType = typer.Option(DeviceType.OUTPUT, "--type", "-t", help="Device type"),
    output_format: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
    config: str | None = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Show the current audio device."""
    try:
        service = _build_service(config)
        typer.echo(format_device(service.current_device(device_type), output_format))
    except SoundctlError as exc:
        raise _fail(exc) from None


@app.command("set")
def set_device(
    identifier: str = typer.Argument(..., help="MAC address, device ID, or name"),
    device_type: DeviceType = typer.Option(DeviceType.OUTPUT, "--type", "-t", help="Device type"),
    config: str | None = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Set the audio device.

    IDENTIFIER is tried as a MAC address, then as a numeric device ID, and
    finally as an exact or fuzzy device name.
    """
    try:
        service = _build_service(config)
        for result in service.set_device(identifier, device_type):
            typer.echo(f'{result.type.value} audio device set to "{result.device.name}"')
    except SoundctlError as exc:
        raise _fail(exc) from None


@app.command("next")
def cycle_next(
    device_type: DeviceType = typer.Option(DeviceType.OUTPUT, "--type", "-t", help="Device type"),
    config: str | None = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Cycle to the next audio device."""
    try:
        service = _build_service(config)
        for result in service.cycle_next(device_type):
            typer.echo(f'{result.type.value} audio device set to "{result.device.name}"')
    except SoundctlError as exc:
        raise _fail(exc) from None


@app.command("mute")
def mute(
    action: str = typer.Argument("toggle", help="Mute action (toggle/on/off)"),
    device_type: DeviceType = typer.Option(DeviceType.OUTPUT, "--type", "-t", help="Device type"),
    config: str | None = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Control the mute state of the current audio device."""
    mute_action = _MUTE_ACTIONS.get(action.lower())
    if mute_action is None:
        raise typer.BadParameter(f"Invalid mute action '{action}'. Use: toggle, on, or off", param_hint="ACTION")

    try:
        service = _build_service(config)
        for result in service.set_mute(mute_action, device_type):
            state = "muted" if result.muted else "unmuted"
            typer.echo(f"Setting device {result.device.name} to {state}")
    except SoundctlError as exc:
        raise _fail(exc) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
