import json
import uuid

import pytest

from zjctl.protocol import (
    PROTOCOL_VERSION,
    RpcError,
    RpcErrorCode,
    RpcRequest,
    RpcResponse,
)


def test_request_serialization():
    req = RpcRequest.create("panes.list")
    text = req.to_json()

    parsed = json.loads(text)
    assert parsed["v"] == 1
    assert parsed["method"] == "panes.list"
    assert isinstance(parsed["id"], str)

    req2 = RpcRequest.from_json(text)
    assert req2.method == "panes.list"
    assert req2.v == PROTOCOL_VERSION
    assert req2.id == req.id


def test_request_with_params():
    req = RpcRequest.create("pane.send").with_params(
        {"selector": "focused", "text": "hello"}
    )
    parsed = json.loads(req.to_json())
    assert parsed["params"]["selector"] == "focused"
    assert parsed["params"]["text"] == "hello"


def test_with_params_leaves_original_untouched():
    req = RpcRequest.create("pane.send")
    req2 = req.with_params({"a": (1, 2)})
    assert req.params is None
    assert req2.params == {"a": [1, 2]}
    assert req2.id == req.id


def test_with_params_rejects_non_json():
    with pytest.raises(TypeError):
        RpcRequest.create("pane.send").with_params({"a": object()})


def test_request_params_default_to_none():
    text = json.dumps({"v": 1, "id": str(uuid.uuid4()), "method": "panes.list"})
    assert RpcRequest.from_json(text).params is None


@pytest.mark.parametrize(
    "data",
    [
        {"v": 1, "method": "x"},
        {"v": 1, "id": "not-a-uuid", "method": "x"},
        {"v": 300, "id": str(uuid.uuid4()), "method": "x"},
        {"v": 1, "id": str(uuid.uuid4()), "method": 5},
        [1, 2],
    ],
)
def test_request_from_dict_rejects_bad_data(data):
    with pytest.raises(ValueError):
        RpcRequest.from_dict(data)


def test_response_success():
    rid = uuid.uuid4()
    resp = RpcResponse.success(rid, {"count": 5})

    assert resp.ok is True
    assert resp.error is None
    assert resp.result["count"] == 5

    resp2 = RpcResponse.from_json(resp.to_json())
    assert resp2.ok is True
    assert resp2.id == rid
    assert resp2.result == {"count": 5}


def test_response_error():
    rid = uuid.uuid4()
    error = RpcError(RpcErrorCode.NO_MATCH, "no panes found")
    resp = RpcResponse.failure(rid, error)

    assert resp.ok is False
    assert resp.result is None
    assert resp.error.code == RpcErrorCode.NO_MATCH

    resp2 = RpcResponse.from_json(resp.to_json())
    assert resp2.ok is False
    assert resp2.error.message == "no panes found"


def test_response_omits_absent_fields():
    rid = uuid.uuid4()
    failure = RpcResponse.failure(rid, RpcError(RpcErrorCode.INTERNAL, "boom")).to_dict()
    assert "result" not in failure
    success = RpcResponse.success(rid, [1]).to_dict()
    assert "error" not in success


def test_error_code_serialization():
    error = RpcError(RpcErrorCode.AMBIGUOUS_MATCH, "multiple matches")
    text = json.dumps(error.to_dict())
    assert "ambiguous_match" in text

    error2 = RpcError.from_dict(json.loads(text))
    assert error2.code == RpcErrorCode.AMBIGUOUS_MATCH


def test_unknown_error_code_rejected():
    with pytest.raises(ValueError):
        RpcError.from_dict({"code": "bogus", "message": "x"})