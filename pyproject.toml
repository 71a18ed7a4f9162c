[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zjctl"
version = "0.0.1"
description = "JSON RPC protocol, pane selectors and request handling for controlling terminal multiplexer panes"
requires-python = ">=3.10"
dependencies = []
keywords = ["zellij", "rpc", "protocol", "terminal", "multiplexer", "panes", "selector"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["zjctl"]

[tool.pytest.ini_options]
addopts = "-ra"
