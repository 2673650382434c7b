"""Rich rendering of the interactive session."""

from __future__ import annotations

import io

from rich.console import Console, Group
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from keylight import __version__
from keylight.core import CommandRouter, Focus
from keylight.models import LightState
from keylight.utils.units import (
    BRIGHTNESS_MAX,
    BRIGHTNESS_MIN,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
)

VIEW_WIDTH = 101
BAR_WIDTH = 50
SCOPE_LABEL_MAX = 15

DIM = "#888888"
BRIGHT = "#FFFFFF"
VALUE = "bold #00FF00"
BUTTON = "#AAAAAA"
BUTTON_FOCUSED = "bold reverse #FFFFFF"

HELP = (
    "↑/↓: navigate rows • ←/→: buttons/adjust • Enter: apply • a: all • "
    "1-9: select • d: discover • q: quit"
)


def aggregate_indicator(states: list[LightState | None]) -> str:
    """○ when no light is on, ● when all are, ◐ otherwise."""
    lit = sum(1 for state in states if state is not None and state.on)
    if lit == 0:
        return "○"
    if lit == len(states):
        return "●"
    return "◐"


def _state_text(state: LightState | None) -> tuple[str, str, str]:
    if state is None:
        return "○", "Offline", DIM
    power = "On" if state.on else "Off"
    text = f"{power} / {state.brightness}% / {state.temperature}K"
    if state.on:
        return "●", text, BRIGHT
    return "○", text, DIM


def light_rows(router: CommandRouter) -> Text:
    registry = router.registry.current
    selection = router.selection
    states: list[LightState | None] = []
    for address in registry.addresses:
        state = router.states.get(address)
        states.append(state if isinstance(state, LightState) else None)

    rows = Text()
    arrow = "▶ " if selection.mode.is_all else "▹ "
    all_style = DIM if not any(state and state.on for state in states) else BRIGHT
    rows.append(arrow)
    rows.append(f"{aggregate_indicator(states)} - (a) All Lights\n", style=all_style)

    for ordinal, (name, state) in enumerate(zip(registry.names, states), start=1):
        indicator, status, style = _state_text(state)
        rows.append("▶ " if selection.is_targeted(ordinal) else "  ")
        rows.append(f"{indicator} - ({ordinal}) {name} ({status})\n", style=style)
    return rows


def scope_label(router: CommandRouter) -> str:
    name = router.selection.selected_name(router.registry.current)
    if name is None:
        return "All"
    if len(name) > SCOPE_LABEL_MAX:
        return name[:12] + "..."
    return name


def _button(label: str, focused: bool) -> Text:
    return Text(f"[ {label} ]", style=BUTTON_FOCUSED if focused else BUTTON)


def buttons_row(router: CommandRouter) -> Text:
    focus = router.focus.focus
    row = Text()
    row.append_text(_button(f"TOGGLE {scope_label(router)}", focus is Focus.TOGGLE))
    row.append(" ")
    row.append_text(_button("TURN OFF", focus is Focus.TURN_OFF))
    row.append(" ")
    row.append_text(_button("TURN ON", focus is Focus.TURN_ON))
    return row


def brightness_bar(value: int, width: int = BAR_WIDTH) -> Text:
    filled = int((value - BRIGHTNESS_MIN) / (BRIGHTNESS_MAX - BRIGHTNESS_MIN) * width)
    bar = Text()
    for i in range(width):
        if i < filled:
            level = int(50 + (i / width) * 205)
            bar.append("█", style=f"#{level:02x}{level:02x}{level:02x}")
        else:
            bar.append("░", style=DIM)
    return bar


def temperature_bar(value: int, width: int = BAR_WIDTH) -> Text:
    filled = int(
        (value - TEMPERATURE_MIN) / (TEMPERATURE_MAX - TEMPERATURE_MIN) * width
    )
    bar = Text()
    for i in range(width):
        if i < filled:
            ratio = i / width
            red = int(255 - ratio * 100)
            green = int(180 - ratio * 50)
            blue = int(100 + ratio * 155)
            bar.append("█", style=f"#{red:02x}{green:02x}{blue:02x}")
        else:
            bar.append("░", style=DIM)
    return bar


def sliders(router: CommandRouter) -> Table:
    focus = router.focus
    table = Table.grid(padding=(0, 3))
    table.add_row(
        _button("  Brightness  ", focus.focus is Focus.BRIGHTNESS),
        brightness_bar(focus.brightness),
        Text(f"{focus.brightness}%", style=VALUE),
    )
    table.add_row(
        _button("  Temperature ", focus.focus is Focus.TEMPERATURE),
        temperature_bar(focus.temperature),
        Text(f"{focus.temperature}K", style=VALUE),
    )
    return table


def render(router: CommandRouter) -> Panel:
    title = Table.grid(expand=True)
    title.add_column()
    title.add_column(justify="right")
    title.add_row(
        Text(f"Control Elgato Lights  v{__version__}", style="bold"),
        Text("(d Detect Lights)", style=DIM),
    )

    parts = [
        title,
        Rule(style=DIM),
        light_rows(router),
        Rule(style=DIM),
        buttons_row(router),
        sliders(router),
        Rule(style=DIM),
        Text(HELP, style=DIM),
    ]
    if router.message:
        parts.append(Text(router.message, style="#00FF00"))
    return Panel(Group(*parts), padding=(1, 2))


def render_ansi(router: CommandRouter, width: int = VIEW_WIDTH) -> str:
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        force_terminal=True,
        color_system="truecolor",
        width=width,
    )
    console.print(render(router))
    return buffer.getvalue()
