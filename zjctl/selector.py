"""Pane selectors: parsing, matching patterns and their JSON form."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

_U32_MAX = 2**32 - 1
_USIZE_MAX = 2**64 - 1


class SelectorError(ValueError):
    """Raised when a selector string cannot be parsed."""


class InvalidFormatError(SelectorError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid selector format: {detail}")
        self.detail = detail


class InvalidPaneTypeError(SelectorError):
    def __init__(self, value: str) -> None:
        super().__init__(f"invalid pane type: {value} (expected 'terminal' or 'plugin')")
        self.value = value


class InvalidPaneIdError(SelectorError):
    def __init__(self, value: str) -> None:
        super().__init__(f"invalid pane id: {value}")
        self.value = value


class InvalidRegexError(SelectorError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid regex pattern: {detail}")
        self.detail = detail


class PaneType(str, Enum):
    TERMINAL = "terminal"
    PLUGIN = "plugin"

    @classmethod
    def parse(cls, text: str) -> PaneType:
        """Parse a pane type, ignoring case."""
        try:
            return cls(text.lower())
        except ValueError:
            raise InvalidPaneTypeError(text) from None


def _compile(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidRegexError(str(exc)) from None


@dataclass(frozen=True)
class SubstringPattern:
    """Case-insensitive substring match."""

    value: str

    def matches(self, text: str) -> bool:
        return self.value.lower() in text.lower()


@dataclass(frozen=True)
class RegexPattern:
    """Regular expression searched anywhere in the text."""

    pattern: str

    def matches(self, text: str) -> bool:
        return _compile(self.pattern).search(text) is not None


StringPattern = Union[SubstringPattern, RegexPattern]


@dataclass(frozen=True)
class IdSelector:
    pane_type: PaneType
    id: int


@dataclass(frozen=True)
class FocusedSelector:
    pass


@dataclass(frozen=True)
class TitleSelector:
    pattern: StringPattern


@dataclass(frozen=True)
class CommandSelector:
    pattern: StringPattern


@dataclass(frozen=True)
class TabIndexSelector:
    tab: int
    index: int


PaneSelector = Union[IdSelector, FocusedSelector, TitleSelector, CommandSelector, TabIndexSelector]


def _parse_unsigned(text: str, limit: int) -> int | None:
    """Parse an unsigned decimal with an optional '+' sign; None if invalid."""
    digits = text[1:] if text.startswith("+") else text
    if not digits or not all("0" <= c <= "9" for c in digits):
        return None
    value = int(digits)
    return value if value <= limit else None


def _parse_pane_id(text: str) -> int:
    value = _parse_unsigned(text, _U32_MAX)
    if value is None:
        raise InvalidPaneIdError(text)
    return value


def parse_string_pattern(text: str) -> StringPattern:
    """Turn ``/re/`` into a regex pattern and anything else into a substring."""
    if text.startswith("/") and text.endswith("/") and len(text) > 2:
        pattern = text[1:-1]
        _compile(pattern)
        return RegexPattern(pattern)
    return SubstringPattern(text)


def parse_selector(text: str) -> PaneSelector:
    """Parse a selector such as ``focused``, ``terminal:3`` or ``title:/^vim/``."""
    s = text.strip()

    if s == "focused":
        return FocusedSelector()

    head, sep, tail = s.partition(":")
    if sep and head in ("terminal", "plugin"):
        if not all("0" <= c <= "9" for c in tail):
            raise InvalidPaneIdError(tail)
        return IdSelector(PaneType.parse(head), _parse_pane_id(tail))

    if s.startswith("id:"):
        kind, sep, number = s[len("id:"):].partition(":")
        if not sep:
            raise InvalidFormatError(
                "id selector requires format id:terminal:N or id:plugin:N"
            )
        return IdSelector(PaneType.parse(kind), _parse_pane_id(number))

    if s.startswith("title:"):
        return TitleSelector(parse_string_pattern(s[len("title:"):]))

    if s.startswith("cmd:"):
        return CommandSelector(parse_string_pattern(s[len("cmd:"):]))

    if s.startswith("tab:"):
        parts = s[len("tab:"):].split(":")
        if len(parts) == 3 and parts[1] == "index":
            tab = _parse_unsigned(parts[0], _USIZE_MAX)
            if tab is None:
                raise InvalidFormatError("invalid tab index")
            index = _parse_unsigned(parts[2], _USIZE_MAX)
            if index is None:
                raise InvalidFormatError("invalid pane index")
            return TabIndexSelector(tab, index)
        raise InvalidFormatError("tab selector requires format tab:N:index:M")

    raise InvalidFormatError(f"unknown selector format: {s}")


def pattern_to_dict(pattern: StringPattern) -> dict:
    match pattern:
        case SubstringPattern(value=value):
            return {"kind": "substring", "value": value}
        case RegexPattern(pattern=regex):
            return {"kind": "regex", "pattern": regex}
    raise TypeError(f"not a string pattern: {pattern!r}")


def _string_field(data: dict, name: str) -> str:
    value = data.get(name)
    if not isinstance(value, str):
        raise ValueError(f"field '{name}' must be a string")
    return value


def _unsigned_field(data: dict, name: str, limit: int) -> int:
    value = data.get(name)
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= limit:
        raise ValueError(f"field '{name}' must be an unsigned integer")
    return value


def pattern_from_dict(data: Any) -> StringPattern:
    if not isinstance(data, dict):
        raise ValueError("pattern must be a JSON object")
    kind = data.get("kind")
    if kind == "substring":
        return SubstringPattern(_string_field(data, "value"))
    if kind == "regex":
        return RegexPattern(_string_field(data, "pattern"))
    raise ValueError(f"unknown pattern kind: {kind!r}")


def selector_to_dict(selector: PaneSelector) -> dict:
    match selector:
        case IdSelector(pane_type=pane_type, id=pane_id):
            return {"type": "id", "pane_type": pane_type.value, "id": pane_id}
        case FocusedSelector():
            return {"type": "focused"}
        case TitleSelector(pattern=pattern):
            return {"type": "title", "pattern": pattern_to_dict(pattern)}
        case CommandSelector(pattern=pattern):
            return {"type": "command", "pattern": pattern_to_dict(pattern)}
        case TabIndexSelector(tab=tab, index=index):
            return {"type": "tab_index", "tab": tab, "index": index}
    raise TypeError(f"not a pane selector: {selector!r}")


def selector_from_dict(data: Any) -> PaneSelector:
    if not isinstance(data, dict):
        raise ValueError("selector must be a JSON object")
    kind = data.get("type")
    if kind == "id":
        pane_type = data.get("pane_type")
        if pane_type not in ("terminal", "plugin"):
            raise ValueError(f"unknown pane type: {pane_type!r}")
        return IdSelector(PaneType(pane_type), _unsigned_field(data, "id", _U32_MAX))
    if kind == "focused":
        return FocusedSelector()
    if kind == "title":
        return TitleSelector(pattern_from_dict(data.get("pattern")))
    if kind == "command":
        return CommandSelector(pattern_from_dict(data.get("pattern")))
    if kind == "tab_index":
        return TabIndexSelector(
            _unsigned_field(data, "tab", _USIZE_MAX),
            _unsigned_field(data, "index", _USIZE_MAX),
        )
    raise ValueError(f"unknown selector type: {kind!r}")