"""Rendering of the interactive view.

``render`` is a pure function of the state: it never mutates it and can be
called any number of times. Styles are Rich theme names from
:mod:`boxy.core.theme`.
"""

from io import StringIO

from rich.console import Console, Group, RenderableType
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text

from boxy.core.theme import ThemeColors, get_rich_theme
from boxy.models.package import PackageItem
from boxy.models.state import AppState, ConfirmAction, Mode, OperationKind
from boxy.tui.items import visible_sections
from boxy.tui.viewport import capacity_for, ensure_visible, layout_sections, range_label

HELP_LINES = (
    "↑/k up  ↓/j down  i install  u uninstall  b bookmark",
    "Enter info  / search  a manual/all  q quit",
)
DESCRIPTION_WIDTH = 30
MODAL_WIDTH = 60


def _truncate(text: str | None, width: int = DESCRIPTION_WIDTH) -> str:
    if not text:
        return "-"
    if len(text) > width:
        return text[: width - 3] + "..."
    return text


def _render_row(item: PackageItem, selected: bool) -> Text:
    """Render one package row."""
    return Text.assemble(
        "> " if selected else "  ",
        ("●", "package.bookmark" if item.bookmarked else "muted"),
        " ",
        (item.name, "package.selected" if selected else "package.name"),
        "  ",
        (_truncate(item.fact.description), "package.description"),
        "  ",
        ("[✓]", "package.installed") if item.installed else ("[ ]", "package.not_installed"),
    )


def _render_search_bar(state: AppState) -> Text:
    if state.mode is Mode.SEARCH:
        return Text.assemble(("Search: ", "search"), state.query, ("█", "search"))
    if state.filtered is not None or state.searching:
        return Text.assemble(
            ("Search: ", "search"),
            state.query,
            ("  (/ to edit, Esc to clear)", "muted"),
        )
    return Text("Press / to search", style="muted")


def _render_list(state: AppState) -> list[RenderableType]:
    """Render section headers and the rows inside the viewport."""
    if state.loading:
        return [Text("PACKAGES", style="header"), Text("  Loading packages...", style="muted")]
    if state.searching:
        return [Text("SEARCH RESULTS", style="header"), Text("  Searching...", style="muted")]

    sections = visible_sections(state)
    total = sum(len(section.items) for section in sections)
    capacity = capacity_for(state.height)
    scroll = ensure_visible(state.cursor, state.scroll, capacity)

    if total == 0:
        label = sections[0].label if sections else "PACKAGES"
        empty = "No results" if state.filtered is not None else "No packages"
        return [Text(label, style="header"), Text(f"  {empty}", style="muted")]

    lines: list[RenderableType] = []
    hint = range_label(scroll, capacity, total)
    for view in layout_sections(sections, scroll, capacity):
        header = Text(view.label, style="header")
        if hint:
            header.append(f" {hint}", style="muted")
            hint = None
        lines.append(header)
        lines.extend(_render_row(item, index == state.cursor) for index, item in view.rows)
    return lines


def _render_modal(state: AppState) -> RenderableType | None:
    if state.mode is Mode.INFO:
        title = "Package Info"
        body = Text(state.info_text)
    elif state.mode is Mode.CONFIRM and state.confirm is not None:
        title = "Confirm"
        action = "install" if state.confirm.action is ConfirmAction.INSTALL else "uninstall"
        body = Text(
            f"Are you sure you want to {action} {state.confirm.package}?\n\n[y] Yes  [n] No"
        )
    else:
        return None

    content = Text.assemble((title, "title"), "\n\n", body, "\n\n", ("Press Esc to close", "muted"))
    return Panel(
        content,
        border_style="border",
        padding=(1, 2),
        width=min(MODAL_WIDTH, max(20, state.width)),
    )


def _render_status(state: AppState) -> Text:
    """Render the status slot: the running mutation, then the latest message.

    The slot is always one line so the list capacity does not depend on it.
    """
    line = Text(no_wrap=True, overflow="ellipsis")
    if OperationKind.INSTALL in state.in_flight:
        line.append("Installing...", style="info")
    elif OperationKind.UNINSTALL in state.in_flight:
        line.append("Uninstalling...", style="info")
    if state.status is not None:
        if line.plain:
            line.append("  ")
        style = "error" if state.status.is_error else "success"
        line.append(state.status.message, style=style)
    return line


def render(state: AppState, manager_name: str = "") -> RenderableType:
    """Render the whole screen for ``state``.

    Args:
        state: Current state (read only).
        manager_name: Package manager name shown in the header.

    Returns:
        Rich renderable for the full screen.
    """
    header = Text.assemble(("boxy", "title"))
    if manager_name:
        header.append(f" [{manager_name}]", style="muted")

    parts: list[RenderableType] = [
        header,
        Text("─" * min(state.width, 60), style="muted"),
        _render_search_bar(state),
        Text(""),
    ]

    modal = _render_modal(state)
    if modal is not None:
        parts.append(Padding(modal, (0, 0, 0, 2)))
    else:
        parts.extend(_render_list(state))

    parts.append(Text(""))
    parts.append(_render_status(state))
    parts.extend(Text(line, style="help") for line in HELP_LINES)
    return Group(*parts)


def render_text(state: AppState, manager_name: str = "", width: int | None = None) -> str:
    """Render ``state`` to plain text without styling.

    Args:
        state: Current state (read only).
        manager_name: Package manager name shown in the header.
        width: Output width; defaults to the state's terminal width.

    Returns:
        The rendered screen as a string.
    """
    buffer = StringIO()
    console = Console(
        file=buffer,
        width=width or state.width,
        theme=get_rich_theme(ThemeColors()),
        color_system=None,
        force_terminal=False,
        highlight=False,
    )
    console.print(render(state, manager_name))
    return buffer.getvalue()
