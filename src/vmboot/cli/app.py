# src/vmboot/cli/app.py
from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Optional

import typer

from vmboot.bootstrap.authenticator import PublicKeyAuthenticator
from vmboot.bootstrap.connector import ParamikoConnector
from vmboot.bootstrap.controller import BootstrapController
from vmboot.bootstrap.errors import TargetResolutionError
from vmboot.bootstrap.launcher import LinuxLauncher
from vmboot.bootstrap.target import resolve_target
from vmboot.config.loader import load_config
from vmboot.config.models import InstanceSpec, VmbootConfig
from vmboot.logging.log import init_logging
from vmboot.observers.dispatcher import EventBus
from vmboot.observers.jsonfile import JsonFileObserver
from vmboot.observers.logger import LoggerObserver


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Bootstrap SSH sessions to freshly provisioned VMs")


def _pick_instance(cfg: VmbootConfig, name: str) -> InstanceSpec:
    try:
        return cfg.instance(name)
    except KeyError as e:
        raise typer.BadParameter(e.args[0], param_hint="--instance")


def _use_internal(cfg: VmbootConfig, internal: Optional[bool]) -> bool:
    return cfg.connect.use_internal_address if internal is None else internal


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

@app.command("show-target")
def show_target(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="vmboot YAML config"),
    instance: str = typer.Option(..., "--instance"),
    internal: Optional[bool] = typer.Option(None, "--internal/--external"),
):
    """Print the host, port and login that connect would dial."""
    cfg = load_config(config)
    spec = _pick_instance(cfg, instance)
    try:
        target = resolve_target(spec.to_record(), _use_internal(cfg, internal))
    except TargetResolutionError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    typer.echo(f"{target.username}@{target.address}")


@app.command()
def connect(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="vmboot YAML config"),
    instance: str = typer.Option(..., "--instance"),
    internal: Optional[bool] = typer.Option(None, "--internal/--external"),
    attempts: Optional[int] = typer.Option(None, "--attempts", min=0, help="Override retry.max_attempts"),
    delay_ms: Optional[int] = typer.Option(None, "--delay-ms", min=0, help="Override retry.delay_ms"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir"),
    debug: bool = typer.Option(False, "--debug"),
):
    """
    Wait for an instance's SSH service and authenticate with its key pair.

    The session is closed again once authenticated; this only proves the
    node is reachable.
    """
    logger, run_id, log_path = init_logging(base_dir=log_dir, verbose=debug)

    cfg = load_config(config)
    spec = _pick_instance(cfg, instance)

    policy = cfg.retry_policy()
    if attempts is not None:
        policy = dataclasses.replace(policy, max_attempts=attempts)
    if delay_ms is not None:
        policy = dataclasses.replace(policy, delay_ms=delay_ms)
    logger.debug("retry policy: %s", policy)

    bus = EventBus(observers=[
        LoggerObserver(logger),
        JsonFileObserver(log_path.with_suffix(".jsonl")),
    ])

    controller = BootstrapController(
        ParamikoConnector(
            connect_timeout=cfg.connect.timeout_s,
            banner_timeout=cfg.connect.banner_timeout_s,
        ),
        PublicKeyAuthenticator(),
        policy,
        bus=bus,
        run_id=run_id,
    )
    launcher = LinuxLauncher(controller, use_internal_address=_use_internal(cfg, internal))

    outcome = launcher.setup_connection(spec.to_record())
    if not outcome.ok:
        typer.secho(
            f"[{spec.name}] bootstrap failed ({outcome.reason.value}): {outcome.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    try:
        typer.secho(
            f"[{spec.name}] SSH ready after {outcome.attempts} attempt(s)",
            fg=typer.colors.GREEN,
        )
    finally:
        outcome.session.close()


if __name__ == "__main__":
    app()
