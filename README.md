# zjctl

Building blocks for driving terminal multiplexer panes over a small JSON RPC
protocol. The package has no dependencies beyond the standard library.

- `zjctl.protocol`: the wire format. `RpcRequest`, `RpcResponse`, `RpcError`
  and `RpcErrorCode`, with `to_dict`/`from_dict` and `to_json`/`from_json`.
  The protocol version is `PROTOCOL_VERSION = 1`.
- `zjctl.selector`: pane selectors, parsed from short strings with
  `parse_selector`, and their JSON form (`selector_to_dict`,
  `selector_from_dict`, `pattern_to_dict`, `pattern_from_dict`).
- `zjctl.state`: `PluginState`, the record of panes, tabs and clients built
  from `PaneInfo`, `TabInfo` and `ClientInfo` updates.
- `zjctl.plugin`: `ZrpcPlugin`, which answers requests arriving on the
  `zjctl-rpc` pipe and acts on panes through a `PluginHost`.

## Installation

```
pip install .
```

## Selectors

| Selector                    | Meaning                                         |
|-----------------------------|-------------------------------------------------|
| `focused`                   | the focused pane                                |
| `terminal:N`, `plugin:N`    | pane by id                                      |
| `id:terminal:N`             | pane by id, written out in full                 |
| `title:vim`                 | title contains `vim`, ignoring case             |
| `title:/^vim.*$/`           | title matches a regular expression (`re.search`)|
| `cmd:cargo`                 | command contains `cargo`                        |
| `tab:2:index:0`             | first pane of tab 2, terminals first, by id     |

Parsing errors raise a `SelectorError` (a `ValueError`), more precisely one
of `InvalidFormatError`, `InvalidPaneTypeError`, `InvalidPaneIdError` or
`InvalidRegexError`.

```python
from zjctl.selector import InvalidPaneIdError, parse_selector, selector_to_dict

selector = parse_selector("id:terminal:0007")   # IdSelector(PaneType.TERMINAL, 7)
selector_to_dict(selector)   # {"type": "id", "pane_type": "terminal", "id": 7}

try:
    parse_selector("id:terminal:4a")
except InvalidPaneIdError as exc:
    print(exc)   # invalid pane id: 4a
```

## Requests and responses

```python
from zjctl.protocol import RpcErrorCode, RpcRequest, RpcResponse

request = RpcRequest.create("pane.send").with_params(
    {"selector": "focused", "text": "hello"}
)
payload = request.to_json()

response = RpcResponse.from_json(
    '{"v":1,"id":"00000000-0000-0000-0000-000000000000","ok":false,'
    '"error":{"code":"no_match","message":"no panes match selector"}}'
)
assert not response.ok
assert response.error.code is RpcErrorCode.NO_MATCH
```

## Serving requests

`ZrpcPlugin` is fed host events (`on_tab_update`, `on_pane_update`,
`on_clients`) and pipe messages (`pipe`). Replies are written with
`PluginHost.pipe_output`, after which the pipe is released with
`PluginHost.unblock_pipe`. The base `PluginHost` only records what it is asked
to do in `actions`, `outputs` and `unblocked`; override its methods to act on
a real session.

```python
from zjctl.plugin import PipeMessage, PluginHost, ZrpcPlugin
from zjctl.protocol import RpcRequest, RpcResponse
from zjctl.state import PaneId, PaneInfo, TabInfo

host = PluginHost()
plugin = ZrpcPlugin(host)
plugin.on_tab_update([TabInfo(position=0, name="main", active=True)])
plugin.on_pane_update({0: [PaneInfo(id=1, title="vim", is_focused=True)]})

request = RpcRequest.create("pane.send").with_params(
    {"selector": "title:vim", "text": "ls\n"}
)
plugin.pipe(PipeMessage(name="zjctl-rpc", payload=request.to_json(), cli_id="cli-1"))

pipe_id, text = host.outputs[0]
assert RpcResponse.from_json(text).result == {"sent_to": 1}
assert host.actions == [("write_chars", "ls\n", PaneId(1, False))]
assert host.unblocked == ["cli-1"]
```

`ZrpcPlugin.dispatch` runs a request and returns the `RpcResponse` without
touching the pipe.

| Method        | Parameters                                                       | Result                   |
|---------------|------------------------------------------------------------------|--------------------------|
| `panes.list`  | none                                                             | list of pane objects     |
| `pane.send`   | `selector`, `text`, optional `all` (bool)                        | `{"sent_to": n}`         |
| `pane.focus`  | `selector`                                                       | `{"focused": "terminal:1"}` |
| `pane.rename` | `selector`, `name`                                               | `{"renamed": ...}`       |
| `pane.resize` | `selector`, `resize_type` (`increase`/`decrease`), optional `direction` (`left`/`right`/`up`/`down`), optional `step` (default 1) | `{"resized": ...}` |

A request that matches no pane fails with `no_match`; one that matches several
fails with `ambiguous_match`, except `pane.send` with `"all": true`. Missing or
malformed parameters give `invalid_params`, an unknown method
`method_not_found`, and an empty or unparsable payload `invalid_request` with
the all-zero id. Messages on other pipes, or not from the CLI, are ignored.

The focused pane is the current client's pane if known and not suppressed;
otherwise the focused, unsuppressed pane of the active tab (terminals before
plugins, lowest id first); otherwise the same search over all tabs.

## What this package does not do

There is no command-line client and nothing that connects to a running
multiplexer session. Events must be passed to `ZrpcPlugin` by the caller, and
pane actions go only as far as the `PluginHost` you provide.

## Running the tests

```
pip install .[test]
pytest
```