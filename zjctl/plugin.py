"""The RPC plugin: answers pane queries and commands arriving over a CLI pipe."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from zjctl.protocol import (
    PANE_FOCUS,
    PANE_RENAME,
    PANE_RESIZE,
    PANE_SEND,
    PANES_LIST,
    RpcError,
    RpcErrorCode,
    RpcRequest,
    RpcResponse,
)
from zjctl.selector import (
    CommandSelector,
    FocusedSelector,
    IdSelector,
    PaneSelector,
    PaneType,
    SelectorError,
    StringPattern,
    TabIndexSelector,
    TitleSelector,
    parse_selector,
)
from zjctl.state import ClientInfo, PaneEntry, PaneId, PaneInfo, PluginState, TabInfo

RPC_PIPE_NAME = "zjctl-rpc"

_U64_MAX = 2**64 - 1


class ResizeKind(Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class ResizeStrategy:
    resize: ResizeKind
    direction: Direction | None = None
    invert_on_boundaries: bool = True


@dataclass(frozen=True)
class PipeMessage:
    """A message on a named pipe; ``cli_id`` is set only when it came from the CLI."""

    name: str
    payload: str | None = None
    cli_id: str | None = None


class PluginHost:
    """The actions the plugin asks of its host.

    This base records every action in order; a host that drives a real
    session overrides the methods.
    """

    def __init__(self) -> None:
        self.actions: list[tuple] = []
        self.outputs: list[tuple[str, str]] = []
        self.unblocked: list[str] = []

    def write_chars(self, text: str, pane_id: PaneId) -> None:
        self.actions.append(("write_chars", text, pane_id))

    def focus_pane(self, pane_id: PaneId) -> None:
        self.actions.append(("focus_pane", pane_id))

    def rename_pane(self, pane_id: PaneId, name: str) -> None:
        self.actions.append(("rename_pane", pane_id, name))

    def resize_pane(self, strategy: ResizeStrategy, pane_id: PaneId) -> None:
        self.actions.append(("resize_pane", strategy, pane_id))

    def pipe_output(self, pipe_id: str, text: str) -> None:
        self.outputs.append((pipe_id, text))

    def unblock_pipe(self, pipe_id: str) -> None:
        self.unblocked.append(pipe_id)


class _RpcFailure(Exception):
    def __init__(self, code: RpcErrorCode, message: str) -> None:
        super().__init__(message)
        self.error = RpcError(code, message)


def _param(params: Any, name: str) -> Any:
    return params.get(name) if isinstance(params, dict) else None


def _require_str(params: Any, name: str) -> str:
    value = _param(params, name)
    if not isinstance(value, str):
        raise _RpcFailure(RpcErrorCode.INVALID_PARAMS, f"missing '{name}'")
    return value


def _pattern_matches(pattern: StringPattern, text: str) -> bool:
    try:
        return pattern.matches(text)
    except SelectorError:
        return False


def _exactly_one(panes: list[PaneEntry]) -> PaneEntry:
    if not panes:
        raise _RpcFailure(RpcErrorCode.NO_MATCH, "no panes match selector")
    if len(panes) > 1:
        raise _RpcFailure(
            RpcErrorCode.AMBIGUOUS_MATCH, f"{len(panes)} panes match selector"
        )
    return panes[0]


class ZrpcPlugin:
    """Keeps session state from host events and serves RPC requests."""

    def __init__(self, host: PluginHost) -> None:
        self.host = host
        self.state = PluginState()

    def on_pane_update(self, manifest: Mapping[int, Iterable[PaneInfo]]) -> None:
        self.state.update_panes(manifest)

    def on_tab_update(self, tabs: Iterable[TabInfo]) -> None:
        self.state.update_tabs(tabs)

    def on_clients(self, clients: Iterable[ClientInfo]) -> None:
        self.state.update_clients(clients)

    def pipe(self, message: PipeMessage) -> bool:
        """Handle a pipe message; always returns False (no re-render needed)."""
        if message.name != RPC_PIPE_NAME or message.cli_id is None:
            return False
        pipe_id = message.cli_id
        if message.payload is None:
            self._send_error(pipe_id, RpcErrorCode.INVALID_REQUEST, "empty payload")
            return False
        try:
            request = RpcRequest.from_json(message.payload)
        except ValueError as exc:
            self._send_error(pipe_id, RpcErrorCode.INVALID_REQUEST, f"invalid JSON: {exc}")
            return False
        self.handle_request(pipe_id, request)
        return False

    def focused_pane(self) -> PaneEntry | None:
        panes = list(self.state.panes.values())

        current = self.state.current_client_pane_id
        if current is not None:
            for pane in panes:
                if (
                    pane.is_plugin == current.is_plugin
                    and pane.numeric_id == current.id
                    and not pane.suppressed
                ):
                    return pane

        active_tab = self.state.active_tab_index()
        if active_tab is not None:
            candidates = [
                p for p in panes
                if p.tab_index == active_tab and p.focused and not p.suppressed
            ]
            terminals = [p for p in candidates if not p.is_plugin]
            if terminals:
                return min(terminals, key=lambda p: p.numeric_id)
            return min(candidates, key=lambda p: (p.is_plugin, p.numeric_id), default=None)

        candidates = [p for p in panes if p.focused and not p.suppressed]
        terminals = [p for p in candidates if not p.is_plugin]
        if terminals:
            return min(terminals, key=lambda p: (p.tab_index, p.numeric_id))
        return min(
            candidates,
            key=lambda p: (p.tab_index, p.is_plugin, p.numeric_id),
            default=None,
        )

    def resolve_selector(self, selector: PaneSelector) -> list[PaneEntry]:
        panes = self.state.panes.values()
        match selector:
            case FocusedSelector():
                focused = self.focused_pane()
                return [focused] if focused is not None else []
            case IdSelector(pane_type=pane_type, id=pane_id):
                is_plugin = pane_type is PaneType.PLUGIN
                return [p for p in panes if p.numeric_id == pane_id and p.is_plugin == is_plugin]
            case TitleSelector(pattern=pattern):
                return [p for p in panes if _pattern_matches(pattern, p.title)]
            case CommandSelector(pattern=pattern):
                return [
                    p for p in panes
                    if p.command is not None and _pattern_matches(pattern, p.command)
                ]
            case TabIndexSelector(tab=tab, index=index):
                in_tab = sorted(
                    (p for p in panes if p.tab_index == tab),
                    key=lambda p: (p.is_plugin, p.numeric_id),
                )
                return in_tab[index:index + 1]
        raise TypeError(f"not a pane selector: {selector!r}")

    def dispatch(self, request: RpcRequest) -> RpcResponse:
        """Run ``request`` and build its response."""
        handlers = {
            PANES_LIST: self._panes_list,
            PANE_SEND: self._pane_send,
            PANE_FOCUS: self._pane_focus,
            PANE_RENAME: self._pane_rename,
            PANE_RESIZE: self._pane_resize,
        }
        handler = handlers.get(request.method)
        try:
            if handler is None:
                raise _RpcFailure(
                    RpcErrorCode.METHOD_NOT_FOUND, f"unknown method: {request.method}"
                )
            result = handler(request.params)
        except _RpcFailure as failure:
            return RpcResponse.failure(request.id, failure.error)
        return RpcResponse.success(request.id, result)

    def handle_request(self, pipe_id: str, request: RpcRequest) -> None:
        self._send_response(pipe_id, self.dispatch(request))

    def _select(self, params: Any) -> list[PaneEntry]:
        text = _require_str(params, "selector")
        return self._resolve_text(text)

    def _resolve_text(self, text: str) -> list[PaneEntry]:
        try:
            selector = parse_selector(text)
        except SelectorError as exc:
            raise _RpcFailure(RpcErrorCode.INVALID_PARAMS, f"invalid selector: {exc}") from None
        return self.resolve_selector(selector)

    def _panes_list(self, params: Any) -> list[dict]:
        focused = self.focused_pane()
        focused_id = focused.id_string() if focused is not None else None
        return [item.to_dict() for item in self.state.list_panes(focused_id)]

    def _pane_send(self, params: Any) -> dict:
        selector_text = _require_str(params, "selector")
        text = _require_str(params, "text")
        send_all = _param(params, "all")
        send_all = send_all if isinstance(send_all, bool) else False

        panes = self._resolve_text(selector_text)
        if not panes:
            raise _RpcFailure(RpcErrorCode.NO_MATCH, "no panes match selector")
        if len(panes) > 1 and not send_all:
            raise _RpcFailure(
                RpcErrorCode.AMBIGUOUS_MATCH,
                f"{len(panes)} panes match selector; use --all to target all",
            )
        for pane in panes:
            self.host.write_chars(text, pane.pane_id())
        return {"sent_to": len(panes)}

    def _pane_focus(self, params: Any) -> dict:
        pane = _exactly_one(self._select(params))
        self.host.focus_pane(pane.pane_id())
        return {"focused": pane.id_string()}

    def _pane_rename(self, params: Any) -> dict:
        selector_text = _require_str(params, "selector")
        name = _require_str(params, "name")
        pane = _exactly_one(self._resolve_text(selector_text))
        self.host.rename_pane(pane.pane_id(), name)
        return {"renamed": pane.id_string()}

    def _pane_resize(self, params: Any) -> dict:
        selector_text = _require_str(params, "selector")
        resize_type = _require_str(params, "resize_type")
        direction = _param(params, "direction")
        direction = direction if isinstance(direction, str) else None
        step = _param(params, "step")
        if isinstance(step, bool) or not isinstance(step, int) or not 0 <= step <= _U64_MAX:
            step = 1

        pane = _exactly_one(self._resolve_text(selector_text))

        try:
            resize = ResizeKind(resize_type)
        except ValueError:
            raise _RpcFailure(
                RpcErrorCode.INVALID_PARAMS, "resize_type must be 'increase' or 'decrease'"
            ) from None
        if direction is None:
            parsed_direction = None
        else:
            try:
                parsed_direction = Direction(direction)
            except ValueError:
                raise _RpcFailure(
                    RpcErrorCode.INVALID_PARAMS, f"invalid direction: {direction}"
                ) from None

        strategy = ResizeStrategy(resize, parsed_direction, invert_on_boundaries=True)
        for _ in range(step):
            self.host.resize_pane(strategy, pane.pane_id())
        return {"resized": pane.id_string()}

    def _send_response(self, pipe_id: str, response: RpcResponse) -> None:
        self.host.pipe_output(pipe_id, response.to_json())
        self.host.unblock_pipe(pipe_id)

    def _send_error(self, pipe_id: str, code: RpcErrorCode, message: str) -> None:
        response = RpcResponse.failure(uuid.UUID(int=0), RpcError(code, message))
        self._send_response(pipe_id, response)