"""Coordination toolkit for developer tools: event bus, pipelines, branching votes, cart, generated-code tracking, a local file store and a web file browser."""

__version__ = "0.1.3"