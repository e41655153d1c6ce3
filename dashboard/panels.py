"""
Dashboard Panels - trade card and universe views.
"""

from typing import List

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.helpers.trail import fmt_price
from core.models import EvaluationResult, SignalState

_STATE_STYLE = {
    SignalState.TRADE_AVAILABLE: "bold green",
    SignalState.SETUP_WATCH: "bold yellow",
    SignalState.NO_TRADE: "dim",
    SignalState.BLOCKED: "bold red",
}


def render_header(result: EvaluationResult) -> Text:
    """State, symbol and trend on one line."""
    bar = Text()
    bar.append(f"{result.symbol} ", style="bold cyan")
    bar.append(result.state.value, style=_STATE_STYLE.get(result.state, "white"))
    bar.append(" │ ")
    bar.append(f"{result.trend_timeframe} trend: ", style="dim")
    bar.append(result.trend_direction.value)
    bar.append(" │ ")
    bar.append(f"equity {result.equity:g} @ {result.risk_percent * 100:.2f}% risk ({result.risk_mode})", style="dim")
    return bar


def render_levels_table(result: EvaluationResult) -> Table:
    levels = result.levels
    position = result.position
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Leg")
    table.add_column("Side")
    table.add_column("Price", justify="right")
    table.add_column("Qty %", justify="right")

    orders = result.orders
    table.add_row("Entry", orders.entry.side.value, f"[white]{fmt_price(levels.entry)}[/]", "100")
    table.add_row("Stop", orders.stop_loss.side.value, f"[red]{fmt_price(levels.stop)}[/]", "100")
    for tp in orders.take_profits:
        table.add_row(tp.name, tp.side.value, f"[green]{fmt_price(tp.price)}[/]", f"{tp.qty_pct * 100:.0f}")
    table.add_row("Runner", "-", "manual", f"{orders.runner.qty_pct * 100:.0f}")
    table.caption = (
        f"qty {position.quantity:g} │ notional {position.notional:.2f} │ "
        f"risk {position.risk_amount:.2f} │ lev {position.leverage_hint}"
    )
    return table


def render_trade_card(result: EvaluationResult) -> Panel:
    """Render one evaluation result."""
    parts: List = [render_header(result), Text(result.reason)]
    if result.is_trade:
        parts.append(Text(""))
        parts.append(render_levels_table(result))
    if result.why:
        parts.append(Text(""))
        parts.append(Text("\n".join(result.why), style="dim"))
    if result.orders is not None:
        parts.append(Text(""))
        parts.append(Text("\n".join(f"• {n}" for n in result.orders.notes), style="italic"))

    border = _STATE_STYLE.get(result.state, "white").replace("bold ", "")
    title = f"[bold]⚡ Trade Card[/] [dim]{result.engine_version}[/]"
    return Panel(Group(*parts), title=title, border_style=border if border != "dim" else "white")


def render_universe(rows: List[dict]) -> Panel:
    """Render ranked universe listing."""
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("#", justify="right")
    table.add_column("Symbol", style="cyan")
    for row in rows:
        table.add_row(str(row["rank"]), row["symbol"])
    if not rows:
        return Panel("[dim]Universe empty[/]", title="[bold blue]Universe[/]", border_style="blue")
    return Panel(table, title="[bold blue]Universe[/]", border_style="blue")
