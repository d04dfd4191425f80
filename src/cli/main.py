"""Typer CLI.

Commands:
- `estimate`: FPS estimate for one game (cache -> provider -> local fallback).
- `score`: compatibility score against one or more catalog games.
- `games`: list the catalog.
- `doctor ...`: configuration diagnostics and provider setup.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.game_catalog import GameCatalog, load_game_catalog
from cli.doctor import app as doctor_app
from cli.ui_components import (
    build_compatibility_panel,
    build_estimate_panel,
    build_games_table,
    print_banner,
)
from core.config import AppSettings
from core.domain.models import EstimationRequest, GameFpsProfile, HardwareProfile
from core.domain.presets import Quality, Resolution
from core.resources_loader import get_default_catalog_path
from core.services.compatibility import CompatibilityScorer
from core.services.fps_estimation import FPSEstimationService

app = typer.Typer(no_args_is_help=True, help="FPS estimation and hardware/game compatibility scoring.")
app.add_typer(doctor_app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    settings = AppSettings()
    _configure_logging("DEBUG" if verbose else settings.log_level)


def _load_catalog(path: Path | None) -> GameCatalog:
    catalog_path = path or get_default_catalog_path()
    if catalog_path is None or not catalog_path.exists():
        raise typer.BadParameter("No game catalog found; pass --catalog <games.json>.")
    return load_game_catalog(catalog_path)


def _resolve_game(name: str, fps_json: str | None, catalog_path: Path | None) -> GameFpsProfile:
    if fps_json:
        try:
            profiles = json.loads(fps_json)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"--fps-json is not valid JSON: {exc}") from exc
        return GameFpsProfile.model_validate({"name": name, "fpsProfiles": profiles})

    game = _load_catalog(catalog_path).find(name)
    if game is None:
        _err_console.print(f"[yellow]'{name}' is not in the catalog; using the default baseline.[/yellow]")
        return GameFpsProfile(name=name)
    return game.to_fps_profile()


@app.command()
def estimate(
    game: str = typer.Option(..., "--game", "-g", help="Game title."),
    cpu: Optional[str] = typer.Option(None, "--cpu", help="CPU descriptor."),
    gpu: Optional[str] = typer.Option(None, "--gpu", help="GPU descriptor."),
    ram: Optional[str] = typer.Option(None, "--ram", help="RAM descriptor, e.g. '16GB'."),
    resolution: Resolution = typer.Option(Resolution.P1080, "--resolution", "-r"),
    quality: Quality = typer.Option(Quality.MEDIUM, "--quality", "-q"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Game catalog JSON."),
    fps_json: Optional[str] = typer.Option(
        None,
        "--fps-json",
        help='Inline baseline table, e.g. \'{"1080p": {"low": 90, "medium": 60, "high": 45}}\'.',
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response payload."),
) -> None:
    """Estimate average FPS for one game on the given hardware."""

    settings = AppSettings()
    request = EstimationRequest(
        hardware=HardwareProfile(cpu=cpu, gpu=gpu, ram=ram),
        game=_resolve_game(game, fps_json, catalog),
        resolution=resolution,
        quality=quality,
    )
    service = FPSEstimationService.from_settings(settings)
    response = asyncio.run(service.respond(request))

    if as_json:
        typer.echo(json.dumps(response.body, ensure_ascii=False))
    else:
        print_banner(_console)
        _console.print(build_estimate_panel(request, response))

    if not response.ok:
        raise typer.Exit(code=1)


@app.command()
def score(
    games: Optional[list[str]] = typer.Option(None, "--game", "-g", help="Game title (repeatable; default all)."),
    cpu: Optional[str] = typer.Option(None, "--cpu"),
    gpu: Optional[str] = typer.Option(None, "--gpu"),
    ram: Optional[str] = typer.Option(None, "--ram"),
    resolution: Resolution = typer.Option(Resolution.P1080, "--resolution", "-r"),
    quality: Quality = typer.Option(Quality.MEDIUM, "--quality", "-q"),
    target_fps: int = typer.Option(60, "--target-fps", min=1),
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Game catalog JSON."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result."),
) -> None:
    """Score hardware against catalog games' requirements."""

    selected, missing = _load_catalog(catalog).select(games or [])
    if missing:
        raise typer.BadParameter(f"Unknown game(s): {', '.join(missing)}")

    result = CompatibilityScorer().score(
        HardwareProfile(cpu=cpu, gpu=gpu, ram=ram),
        selected,
        resolution,
        quality,
        target_fps,
    )

    if as_json:
        typer.echo(json.dumps(result.model_dump(by_alias=True), ensure_ascii=False))
        return

    print_banner(_console)
    _console.print(build_compatibility_panel(result))


@app.command(name="games")
def list_games(
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Game catalog JSON."),
) -> None:
    """List the games in the catalog."""

    table = build_games_table()
    for game in _load_catalog(catalog).games:
        table.add_row(
            game.name,
            f"{game.min_ram}/{game.recommended_ram} GB",
            game.recommended_cpu or "-",
            game.recommended_gpu or "-",
        )
    _console.print(table)


def run() -> None:
    app()
