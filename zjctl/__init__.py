"""JSON RPC protocol, pane selectors, plugin state and request handling for multiplexer panes."""

__version__ = "0.0.1"
__all__ = ["protocol", "selector", "state", "plugin"]