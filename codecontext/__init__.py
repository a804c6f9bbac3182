"""Render source files and folders as JSON, XML, TOML or Markdown context, with Git helpers."""

__version__ = "1.0.0"