"""Lookup and construction of formatters by name."""

from __future__ import annotations

from .base import Config, Formatter, FormatterError
from .json_formatter import JSONFormatter
from .markdown_formatter import MarkdownFormatter
from .toml_formatter import TOMLFormatter
from .xml_formatter import XMLFormatter

_CLASSES: dict[str, type[Formatter]] = {
    "json": JSONFormatter,
    "xml": XMLFormatter,
    "toml": TOMLFormatter,
    "markdown": MarkdownFormatter,
    "md": MarkdownFormatter,
}


class FormatterFactory:
    """Registry of the available output formats."""

    def __init__(self) -> None:
        self._formatters: dict[str, Formatter] = {}
        for name in ("json", "xml", "toml", "markdown"):
            self.register(name, _CLASSES[name](None))

    def register(self, name: str, formatter: Formatter) -> None:
        self._formatters[name] = formatter

    def get(self, name: str) -> Formatter:
        return self.get_formatter(name, None)

    def get_formatter(self, name: str, config: Config | None) -> Formatter:
        """A new formatter for ``name`` (case-insensitive) bound to ``config``."""
        cls = _CLASSES.get(name.lower())
        if cls is None:
            raise FormatterError(f"不支持的格式: {name.lower()}")
        return cls(config)

    def supported_formats(self) -> list[str]:
        return self.available_formats()

    def available_formats(self) -> list[str]:
        return list(self._formatters)

    def formatter_info(self, name: str) -> tuple[str, str]:
        """Display name and description of a format."""
        formatter = self.get_formatter(name, None)
        return formatter.name, formatter.description


def new_formatter(format_name: str, config: Config | None) -> Formatter:
    return FormatterFactory().get_formatter(format_name, config)


def create_default_factory(config: Config | None) -> FormatterFactory:
    return FormatterFactory()