"""
Run display - surfaces planning, prompts and results according to Verbosity.

The executor never formats strings; it calls named methods here. A quiet
Verbosity turns every method into a no-op.

Colour language:
  cyan    - planning
  blue    - model calls and responses
  green   - completed actions
  red     - failures
"""
from __future__ import annotations

from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from waypoint.config.defaults import DISPLAY_MAX_PREVIEW_CHARS
from waypoint.core.options import Verbosity


def _preview(value: Any, max_len: int = DISPLAY_MAX_PREVIEW_CHARS) -> str:
    text = str(value)
    if len(text) > max_len:
        return text[:max_len] + "…"
    return text


class RunDisplay:
    """Verbosity-gated console output for one run."""

    def __init__(self, verbosity: Optional[Verbosity] = None, console: Optional[Console] = None):
        self.verbosity = verbosity or Verbosity()
        self._console = console or Console(stderr=True)

    def plan_formed(self, agent_name: str, plan) -> None:
        if not (self.verbosity.show_planning or self.verbosity.debug):
            return
        table = Table(show_header=True, header_style="bold cyan", expand=False)
        table.add_column("#", justify="right")
        table.add_column("Action")
        table.add_column("Inputs")
        table.add_column("Output")
        for i, action in enumerate(plan.actions, start=1):
            table.add_row(str(i), action.name, ", ".join(action.inputs), action.output)
        self._console.print(
            Panel(
                table,
                title=f"[cyan]{agent_name}[/cyan] plan for goal [bold]{plan.goal.output}[/bold]",
                border_style="cyan",
            )
        )

    def action_started(self, action_name: str, inputs: dict) -> None:
        if not self.verbosity.debug:
            return
        self._console.print(f"[dim]▶ {action_name}[/dim] [dim]inputs: {', '.join(inputs)}[/dim]")

    def action_completed(self, action_name: str, output: Any, duration_ms: int) -> None:
        if not (self.verbosity.show_llm_responses or self.verbosity.debug):
            return
        line = Text()
        line.append("✓ ", style="green")
        line.append(action_name, style="bold green")
        line.append(f" ({duration_ms}ms) ", style="dim")
        line.append(_preview(output))
        self._console.print(line)

    def action_failed(self, action_name: str, error: BaseException) -> None:
        if self.verbosity.is_quiet:
            return
        self._console.print(Text(f"✗ {action_name}: {error}", style="red"))

    def model_prompt(self, model_name: str, prompt: Any) -> None:
        if not self.verbosity.show_prompts:
            return
        self._console.print(
            Panel(_preview(prompt), title=f"[blue]prompt → {model_name}[/blue]", border_style="blue")
        )

    def model_response(self, model_name: str, response: Any, cost_usd: float = 0.0) -> None:
        if not self.verbosity.show_llm_responses:
            return
        title = f"[blue]response ← {model_name}[/blue]"
        if cost_usd:
            title += f" [dim]${cost_usd:.6f}[/dim]"
        self._console.print(Panel(_preview(response), title=title, border_style="blue"))
