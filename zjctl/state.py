"""Pane, tab and client bookkeeping kept by the RPC plugin."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping


@dataclass(frozen=True)
class PaneId:
    """Identifies a pane to the host: a numeric id plus its kind."""

    id: int
    is_plugin: bool = False


@dataclass(frozen=True)
class PaneInfo:
    """A pane as reported by the host in a pane update."""

    id: int
    is_plugin: bool = False
    title: str = ""
    terminal_command: str | None = None
    is_focused: bool = False
    is_floating: bool = False
    is_suppressed: bool = False
    pane_content_rows: int = 0
    pane_content_columns: int = 0


@dataclass(frozen=True)
class TabInfo:
    """A tab as reported by the host in a tab update."""

    position: int
    name: str
    active: bool = False


@dataclass(frozen=True)
class ClientInfo:
    """A connected client and the pane it is focused on."""

    client_id: int
    pane_id: PaneId
    is_current_client: bool = False


@dataclass
class PaneEntry:
    """The plugin's record of a single pane."""

    numeric_id: int
    is_plugin: bool
    title: str
    command: str | None
    tab_index: int
    tab_name: str
    focused: bool
    floating: bool
    suppressed: bool
    rows: int
    cols: int

    def id_string(self) -> str:
        kind = "plugin" if self.is_plugin else "terminal"
        return f"{kind}:{self.numeric_id}"

    def pane_id(self) -> PaneId:
        return PaneId(self.numeric_id, self.is_plugin)


@dataclass(frozen=True)
class TabEntry:
    index: int
    name: str
    active: bool


@dataclass(frozen=True)
class PaneListItem:
    """A pane as presented by ``panes.list``."""

    id: str
    pane_type: str
    title: str
    command: str | None
    tab_index: int
    tab_name: str
    focused: bool
    floating: bool
    suppressed: bool
    rows: int
    cols: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pane_type": self.pane_type,
            "title": self.title,
            "command": self.command,
            "tab_index": self.tab_index,
            "tab_name": self.tab_name,
            "focused": self.focused,
            "floating": self.floating,
            "suppressed": self.suppressed,
            "rows": self.rows,
            "cols": self.cols,
        }


@dataclass
class PluginState:
    """Everything the plugin knows about the session's layout."""

    panes: dict[str, PaneEntry] = field(default_factory=dict)
    tabs: list[TabEntry] = field(default_factory=list)
    current_client_pane_id: PaneId | None = None

    def _tab_name(self, tab_index: int) -> str:
        if 0 <= tab_index < len(self.tabs):
            return self.tabs[tab_index].name
        return f"Tab {tab_index}"

    def update_panes(self, manifest: Mapping[int, Iterable[PaneInfo]]) -> None:
        """Replace the known panes with those in ``manifest`` (tab index to panes)."""
        self.panes.clear()
        for tab_index, panes in manifest.items():
            tab_name = self._tab_name(tab_index)
            for pane in panes:
                entry = PaneEntry(
                    numeric_id=pane.id,
                    is_plugin=pane.is_plugin,
                    title=pane.title,
                    command=pane.terminal_command,
                    tab_index=tab_index,
                    tab_name=tab_name,
                    focused=pane.is_focused,
                    floating=pane.is_floating,
                    suppressed=pane.is_suppressed,
                    rows=pane.pane_content_rows,
                    cols=pane.pane_content_columns,
                )
                self.panes[entry.id_string()] = entry

    def update_tabs(self, tabs: Iterable[TabInfo]) -> None:
        """Replace the tab list, filling gaps in positions with default tabs."""
        tabs = list(tabs)
        max_position = max((tab.position for tab in tabs), default=0)
        slots: list[TabEntry | None] = [None] * (max_position + 1)
        for tab in tabs:
            slots[tab.position] = TabEntry(tab.position, tab.name, tab.active)
        self.tabs = [
            slot if slot is not None else TabEntry(index, f"Tab {index}", False)
            for index, slot in enumerate(slots)
        ]

    def update_clients(self, clients: Iterable[ClientInfo]) -> None:
        """Track the pane of the current client, or of the lowest-numbered one."""
        clients = list(clients)
        if not clients:
            self.current_client_pane_id = None
            return
        chosen = next((c for c in clients if c.is_current_client), None)
        if chosen is None:
            chosen = min(clients, key=lambda c: c.client_id)
        self.current_client_pane_id = chosen.pane_id

    def active_tab_index(self) -> int | None:
        return next((tab.index for tab in self.tabs if tab.active), None)

    def list_panes(self, focused_id: str | None) -> list[PaneListItem]:
        items = []
        for pane in self.panes.values():
            pane_id = pane.id_string()
            items.append(
                PaneListItem(
                    id=pane_id,
                    pane_type="plugin" if pane.is_plugin else "terminal",
                    title=pane.title,
                    command=pane.command,
                    tab_index=pane.tab_index,
                    tab_name=pane.tab_name,
                    focused=focused_id is not None and focused_id == pane_id,
                    floating=pane.floating,
                    suppressed=pane.suppressed,
                    rows=pane.rows,
                    cols=pane.cols,
                )
            )
        return items