"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.game_catalog import load_game_catalog
from adapters.http_client import build_async_client
from core.config import ENV_PREFIX, AppSettings, ProviderKind, write_user_env_vars
from core.resources_loader import get_default_catalog_path

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

PROVIDER_PRESETS: dict[str, dict[str, str]] = {
    "gemini": {
        "AI_PROVIDER": ProviderKind.GEMINI.value,
        "AI_BASE_URL": "https://generativelanguage.googleapis.com/v1beta",
        "AI_MODEL": "models/gemini-1.5-flash",
    },
    "deepseek": {
        "AI_PROVIDER": ProviderKind.OPENAI.value,
        "AI_BASE_URL": "https://api.deepseek.com",
        "AI_MODEL": "deepseek-chat",
    },
    "groq": {
        "AI_PROVIDER": ProviderKind.OPENAI.value,
        "AI_BASE_URL": "https://api.groq.com/openai/v1",
        "AI_MODEL": "llama-3.1-8b-instant",
    },
    "openrouter": {
        "AI_PROVIDER": ProviderKind.OPENAI.value,
        "AI_BASE_URL": "https://openrouter.ai/api/v1",
        "AI_MODEL": "openai/gpt-4o-mini",
    },
    "ollama": {
        "AI_PROVIDER": ProviderKind.OPENAI.value,
        "AI_BASE_URL": "http://localhost:11434/v1",
        "AI_MODEL": "llama3",
    },
}


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_catalog() -> tuple[bool, str]:
    path = get_default_catalog_path()
    if path is None:
        return False, "No games.json found (pass --catalog to estimate/score)"
    try:
        catalog = load_game_catalog(path)
    except Exception as exc:
        return False, f"{path}: {exc}"
    return True, f"{path} ({len(catalog.games)} games)"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="FPS Estimator Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if settings.has_remote_provider():
        table.add_row("AI provider", "OK", f"{settings.ai_provider.value} (remote estimates enabled)")
    else:
        table.add_row("AI provider", "OPTIONAL", "No key set -> local heuristic estimates only")
    table.add_row("AI base_url", "OK", settings.ai_base_url)
    table.add_row("AI model", "OK", settings.ai_model)
    table.add_row("AI timeout", "OK", f"{settings.ai_timeout_seconds:.0f}s (then local fallback)")

    bound = "unbounded" if settings.cache_max_entries is None else f"max {settings.cache_max_entries}"
    table.add_row("Cache", "OK", f"TTL {settings.cache_ttl_seconds:.0f}s, {bound}")

    ok_catalog, detail_catalog = _check_catalog()
    table.add_row("Game catalog", "OK" if ok_catalog else "WARN", detail_catalog)

    if settings.has_remote_provider():
        ok_http, detail_http = asyncio.run(_check_http(settings.ai_base_url, settings))
        table.add_row("Provider connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)


@app.command(name="setup-ai")
def setup_ai() -> None:
    """Interactive provider setup (stored in the user config .env)."""

    provider = typer.prompt(
        "AI provider",
        default="gemini",
        show_default=True,
    ).strip().lower()

    values = PROVIDER_PRESETS.get(provider, {}).copy()
    if not values:
        _console.print("[yellow]Unknown provider preset. You can still enter custom values.[/yellow]")
        values["AI_PROVIDER"] = typer.prompt(
            "Provider kind (gemini/openai)", default=ProviderKind.OPENAI.value
        ).strip().lower()
        if values["AI_PROVIDER"] not in {kind.value for kind in ProviderKind}:
            raise typer.BadParameter("provider kind must be 'gemini' or 'openai'")

    base_url = typer.prompt("AI base URL", default=values.get("AI_BASE_URL", ""), show_default=True).strip()
    model = typer.prompt("AI model", default=values.get("AI_MODEL", ""), show_default=True).strip()
    api_key = typer.prompt("AI API key", hide_input=True, default="", show_default=False).strip()

    if not base_url or not model:
        raise typer.BadParameter("base_url and model are required")

    env_path = write_user_env_vars(
        {
            f"{ENV_PREFIX}AI_PROVIDER": values["AI_PROVIDER"],
            f"{ENV_PREFIX}AI_BASE_URL": base_url,
            f"{ENV_PREFIX}AI_MODEL": model,
            f"{ENV_PREFIX}AI_API_KEY": api_key,
        }
    )

    _console.print(f"[green]Saved AI config to:[/green] {env_path}")
