"""Request and response envelopes exchanged with the RPC plugin."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

PROTOCOL_VERSION = 1

PANES_LIST = "panes.list"
PANE_SEND = "pane.send"
PANE_FOCUS = "pane.focus"
PANE_RENAME = "pane.rename"
PANE_RESIZE = "pane.resize"


def _to_json_value(value: Any) -> Any:
    """Normalise ``value`` into plain JSON data, raising if it cannot be encoded."""
    return json.loads(json.dumps(value, allow_nan=False))


def _require_mapping(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object")
    return data


def _require_field(data: dict, name: str, what: str) -> Any:
    try:
        return data[name]
    except KeyError:
        raise ValueError(f"{what} is missing field '{name}'") from None


def _parse_version(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
        raise ValueError(f"invalid protocol version: {value!r}")
    return value


def _parse_uuid(value: Any) -> uuid.UUID:
    if not isinstance(value, str):
        raise ValueError(f"invalid id: {value!r}")
    try:
        return uuid.UUID(value)
    except ValueError:
        raise ValueError(f"invalid id: {value!r}") from None


class RpcErrorCode(str, Enum):
    """Machine-readable category of an RPC failure."""

    INVALID_REQUEST = "invalid_request"
    METHOD_NOT_FOUND = "method_not_found"
    INVALID_PARAMS = "invalid_params"
    NO_MATCH = "no_match"
    AMBIGUOUS_MATCH = "ambiguous_match"
    INTERNAL = "internal"


@dataclass(frozen=True)
class RpcError:
    """An error carried in a failed response."""

    code: RpcErrorCode
    message: str

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}

    @classmethod
    def from_dict(cls, data: Any) -> RpcError:
        data = _require_mapping(data, "error")
        code = _require_field(data, "code", "error")
        message = _require_field(data, "message", "error")
        if not isinstance(message, str):
            raise ValueError("error message must be a string")
        try:
            parsed_code = RpcErrorCode(code)
        except ValueError:
            raise ValueError(f"unknown error code: {code!r}") from None
        return cls(parsed_code, message)


@dataclass(frozen=True)
class RpcRequest:
    """A method call sent to the plugin."""

    v: int
    id: uuid.UUID
    method: str
    params: Any = None

    @classmethod
    def create(cls, method: str) -> RpcRequest:
        """Build a request with a fresh id and no parameters."""
        return cls(v=PROTOCOL_VERSION, id=uuid.uuid4(), method=method)

    def with_params(self, params: Any) -> RpcRequest:
        """Return a copy carrying ``params``; raises if they are not JSON data."""
        return replace(self, params=_to_json_value(params))

    def to_dict(self) -> dict:
        return {
            "v": self.v,
            "id": str(self.id),
            "method": self.method,
            "params": self.params,
        }

    @classmethod
    def from_dict(cls, data: Any) -> RpcRequest:
        data = _require_mapping(data, "request")
        method = _require_field(data, "method", "request")
        if not isinstance(method, str):
            raise ValueError("request method must be a string")
        return cls(
            v=_parse_version(_require_field(data, "v", "request")),
            id=_parse_uuid(_require_field(data, "id", "request")),
            method=method,
            params=data.get("params"),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> RpcRequest:
        return cls.from_dict(json.loads(text))


@dataclass(frozen=True)
class RpcResponse:
    """The plugin's answer to a request."""

    v: int
    id: uuid.UUID
    ok: bool
    result: Any = None
    error: RpcError | None = field(default=None)

    @classmethod
    def success(cls, id: uuid.UUID, result: Any) -> RpcResponse:
        return cls(v=PROTOCOL_VERSION, id=id, ok=True, result=_to_json_value(result))

    @classmethod
    def failure(cls, id: uuid.UUID, error: RpcError) -> RpcResponse:
        return cls(v=PROTOCOL_VERSION, id=id, ok=False, error=error)

    def to_dict(self) -> dict:
        data: dict = {"v": self.v, "id": str(self.id), "ok": self.ok}
        if self.result is not None:
            data["result"] = self.result
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> RpcResponse:
        data = _require_mapping(data, "response")
        ok = _require_field(data, "ok", "response")
        if not isinstance(ok, bool):
            raise ValueError("response 'ok' must be a boolean")
        raw_error = data.get("error")
        return cls(
            v=_parse_version(_require_field(data, "v", "response")),
            id=_parse_uuid(_require_field(data, "id", "response")),
            ok=ok,
            result=data.get("result"),
            error=None if raw_error is None else RpcError.from_dict(raw_error),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> RpcResponse:
        return cls.from_dict(json.loads(text))