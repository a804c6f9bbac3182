"""Template rendering for AI-oriented output."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, StrictUndefined, TemplateError, TemplateSyntaxError

from .base import FormatterError

if TYPE_CHECKING:
    from .base import Config

TOOL_NAME = "code-context-generator"
TOOL_VERSION = "1.0.0"


@dataclass
class ProjectData:
    name: str = ""
    path: str = ""
    description: str = ""
    languages: list[str] = field(default_factory=list)


@dataclass
class GenerationData:
    timestamp: datetime = field(default_factory=lambda: datetime.now().astimezone())
    tool: str = TOOL_NAME
    version: str = TOOL_VERSION
    command: str = TOOL_NAME


@dataclass
class StatisticsData:
    file_count: int = 0
    folder_count: int = 0
    total_size: int = 0
    total_tokens: int = 0


@dataclass
class TemplateData:
    project: ProjectData = field(default_factory=ProjectData)
    generation: GenerationData = field(default_factory=GenerationData)
    statistics: StatisticsData = field(default_factory=StatisticsData)
    custom: dict[str, Any] = field(default_factory=dict)


def format_size(num_bytes: int) -> str:
    """Human-readable size using binary units."""
    unit = 1024
    if num_bytes < unit:
        return f"{num_bytes} B"
    div, exp = unit, 0
    n = num_bytes // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{num_bytes / div:.1f} {'KMGTPE'[exp]}B"


def format_number(num: int) -> str:
    return str(num)


def format_list(items: list[str]) -> str:
    return ", ".join(items)


def format_date(moment: datetime) -> str:
    """RFC 3339 timestamp with second precision; naive values are taken as local time."""
    aware = moment if moment.tzinfo is not None else moment.astimezone()
    text = aware.replace(microsecond=0).isoformat()
    if text.endswith("+00:00"):
        return text[:-6] + "Z"
    return text


_XML_ESCAPES = (("&", "&amp;"), ("<", "&lt;"), (">", "&gt;"), ('"', "&quot;"), ("'", "&apos;"))
_JSON_ESCAPES = (("\\", "\\\\"), ('"', '\\"'), ("\n", "\\n"), ("\r", "\\r"), ("\t", "\\t"))


def escape_xml(s: str) -> str:
    for raw, escaped in _XML_ESCAPES:
        s = s.replace(raw, escaped)
    return s


def escape_json(s: str) -> str:
    for raw, escaped in _JSON_ESCAPES:
        s = s.replace(raw, escaped)
    return s


def truncate(s: str, length: int) -> str:
    """Shorten ``s`` to ``length`` characters, marking the cut with an ellipsis."""
    if length < 0:
        raise ValueError("length must not be negative")
    if len(s) <= length:
        return s
    if length <= 3:
        return s[:length]
    return s[: length - 3] + "..."


def word_count(s: str) -> int:
    return len(s.split())


def line_count(s: str) -> int:
    return s.count("\n") + 1


def _join(items: list[str], sep: str) -> str:
    return sep.join(items)


def _split(s: str, sep: str) -> list[str]:
    return list(s) if sep == "" else s.split(sep)


def _replace(s: str, old: str, new: str, n: int = -1) -> str:
    return s.replace(old, new, n)


def _title(s: str) -> str:
    return re.sub(r"(?<![\w'])\w", lambda m: m.group().upper(), s)


_TEMPLATE_FUNCS = {
    "format_size": format_size,
    "format_number": format_number,
    "format_list": format_list,
    "format_date": format_date,
    "escape_xml": escape_xml,
    "escape_json": escape_json,
    "truncate": truncate,
    "word_count": word_count,
    "line_count": line_count,
    "join": _join,
    "split": _split,
    "replace": _replace,
    "lower": str.lower,
    "upper": str.upper,
    "title": _title,
    "trim": str.strip,
}


class TemplateSystem:
    """Renders Jinja templates against project data."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config

    def process_template(self, template_str: str, data: TemplateData) -> str:
        env = Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=True)
        env.globals.update(_TEMPLATE_FUNCS)
        env.filters.update(_TEMPLATE_FUNCS)
        try:
            template = env.from_string(template_str)
        except TemplateSyntaxError as exc:
            raise FormatterError(f"解析模板失败: {exc}") from exc
        try:
            return template.render(
                project=data.project,
                generation=data.generation,
                statistics=data.statistics,
                custom=data.custom,
            )
        except (TemplateError, TypeError, ValueError) as exc:
            raise FormatterError(f"执行模板失败: {exc}") from exc

    def create_default_template_data(
        self, file_count: int, folder_count: int, total_size: int, languages: list[str]
    ) -> TemplateData:
        return TemplateData(
            project=ProjectData(
                name=self._project_name(),
                path=".",
                description="Code repository analysis",
                languages=languages,
            ),
            generation=GenerationData(
                timestamp=datetime.now().astimezone(),
                tool=TOOL_NAME,
                version=TOOL_VERSION,
                command=TOOL_NAME,
            ),
            statistics=StatisticsData(
                file_count=file_count,
                folder_count=folder_count,
                total_size=total_size,
                total_tokens=0,
            ),
            custom={},
        )

    def _project_name(self) -> str:
        if self.config is not None and self.config.output.filename_template:
            return self.config.output.filename_template
        return "project"