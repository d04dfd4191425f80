"""Rich panels and tables shared by the CLI commands."""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import CompatibilityResult, EstimationRequest, EstimationResponse

_LABEL_STYLES = {
    "Excellent": "green",
    "Good": "yellow",
    "Fair": "dark_orange",
    "Poor": "red",
}


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in JSON mode)."""

    title = Text("FPS Estimator", style="bold cyan")
    subtitle = Text("Hardware • Baseline FPS • Compatibility", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _hardware_lines(body: Text, request: EstimationRequest) -> None:
    hw = request.hardware
    body.append(f"CPU: {hw.cpu or 'unknown'}\n", style="dim")
    body.append(f"GPU: {hw.gpu or 'unknown'}\n", style="dim")
    body.append(f"RAM: {hw.ram or 'unknown'}\n", style="dim")


def build_estimate_panel(request: EstimationRequest, response: EstimationResponse) -> Panel:
    game = request.game.name if request.game else "?"
    resolution = request.resolution.value if request.resolution else "?"
    quality = request.quality.value if request.quality else "?"
    title = Text(f"{game} @ {resolution} / {quality}", style="bold yellow")

    body = Text()
    _hardware_lines(body, request)
    body.append("\n")

    if not response.ok:
        body.append(f"Error: {response.body.get('error')}\n", style="bold red")
        if response.body.get("providerStatus") is not None:
            body.append(f"Provider status: {response.body['providerStatus']}\n", style="red")
        if response.body.get("detail"):
            body.append(f"{response.body['detail']}\n", style="dim red")
        return Panel(body, title=title, border_style="red")

    body.append(f"{response.body['fps']} FPS", style="bold green")
    tags = [k for k in ("cached", "estimated", "fallback") if response.body.get(k)]
    body.append(f"  ({', '.join(tags) if tags else 'provider'})", style="dim")
    return Panel(body, title=title, border_style="green")


def build_compatibility_panel(result: CompatibilityResult) -> Panel:
    style = _LABEL_STYLES.get(result.label, "white")
    verdict = "Compatible" if result.is_compatible else "Not compatible"

    body = Text()
    body.append(f"{verdict}\n", style=f"bold {style}")
    body.append(f"Score: {result.score}/100 ({result.label})\n")
    if result.issues:
        body.append("\nIssues:\n", style="bold")
        for issue in result.issues:
            body.append(f"- {issue}\n", style="red")
    if result.recommendations:
        body.append("\nRecommendations:\n", style="bold")
        for rec in result.recommendations:
            body.append(f"- {rec}\n")
    return Panel(body, title=Text("Compatibility", style="bold yellow"), border_style=style)


def build_games_table() -> Table:
    table = Table(title="Games")
    table.add_column("Game", style="cyan", no_wrap=True)
    table.add_column("RAM (min/rec)", style="white")
    table.add_column("CPU (rec)", style="white")
    table.add_column("GPU (rec)", style="magenta")
    return table
