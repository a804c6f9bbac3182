"""Core data model and the abstract formatter shared by all output formats."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar

from .encoding import convert_encoding

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
BINARY_PLACEHOLDER = "[二进制文件 - 内容未显示]"


class FormatterError(Exception):
    """Raised when data cannot be rendered in the requested format."""


@dataclass
class FileInfo:
    """A single file collected from the scanned tree."""

    path: str = ""
    name: str = ""
    size: int = 0
    mod_time: datetime = ZERO_TIME
    content: str = ""
    is_dir: bool = False
    is_hidden: bool = False
    is_binary: bool = False


@dataclass
class FolderInfo:
    """A directory with its direct files and sub-folders."""

    path: str = ""
    name: str = ""
    size: int = 0
    mod_time: datetime = ZERO_TIME
    is_hidden: bool = False
    count: int = 0
    files: list[FileInfo] = field(default_factory=list)
    folders: list[FolderInfo] = field(default_factory=list)


@dataclass
class ContextData:
    """Everything collected for one run, ready to be formatted."""

    files: list[FileInfo] = field(default_factory=list)
    folders: list[FolderInfo] = field(default_factory=list)
    file_count: int = 0
    folder_count: int = 0
    total_size: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)


class XMLContentHandling(str, enum.Enum):
    """How file content is embedded in XML output."""

    ESCAPE = "escape"
    CDATA = "cdata"
    RAW = "raw"


@dataclass
class FormatConfig:
    """Per-format options."""

    enabled: bool = False
    encoding: str = ""
    structure: dict[str, Any] | None = None
    fields: dict[str, str] | None = None


@dataclass
class XMLFormattingConfig:
    """XML-specific rendering options."""

    content_handling: XMLContentHandling | None = None


@dataclass
class XMLFormatConfig(FormatConfig):
    """Options for the XML format."""

    formatting: XMLFormattingConfig = field(default_factory=XMLFormattingConfig)


@dataclass
class FormatsConfig:
    """Options for every supported format."""

    json: FormatConfig = field(default_factory=FormatConfig)
    xml: XMLFormatConfig = field(default_factory=XMLFormatConfig)
    toml: FormatConfig = field(default_factory=FormatConfig)
    markdown: FormatConfig = field(default_factory=FormatConfig)


@dataclass
class AISummaryConfig:
    """Options for the AI summary block."""

    enabled: bool = False
    template: str = ""


@dataclass
class AIInstructionsConfig:
    """Where the AI analysis instructions come from."""

    enabled: bool = False
    file_path: str = ""
    content: str = ""


@dataclass
class OutputConfig:
    """Options that shape the generated output."""

    include_metadata: bool = False
    ai_optimized: bool = False
    filename_template: str = ""
    ai_summary: AISummaryConfig = field(default_factory=AISummaryConfig)
    ai_instructions: AIInstructionsConfig = field(default_factory=AIInstructionsConfig)


@dataclass
class Config:
    """Complete configuration handed to formatters."""

    output: OutputConfig = field(default_factory=OutputConfig)
    formats: FormatsConfig = field(default_factory=FormatsConfig)


class Formatter(ABC):
    """Base class of every output format."""

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config

    @abstractmethod
    def format(self, data: ContextData) -> str:
        """Render a whole context."""

    @abstractmethod
    def format_file(self, file: FileInfo) -> str:
        """Render a single file."""

    @abstractmethod
    def format_folder(self, folder: FolderInfo) -> str:
        """Render a single folder."""

    @property
    def _include_metadata(self) -> bool:
        return bool(self.config is not None and self.config.output.include_metadata)

    @staticmethod
    def _apply_encoding(text: str, target: str) -> str:
        """Convert ``text`` unless the target encoding is empty or utf-8."""
        if not target or target == "utf-8":
            return text
        try:
            return convert_encoding(text, target)
        except ValueError as exc:
            raise FormatterError(f"编码转换失败: {exc}") from exc


def simplify_file(file: FileInfo) -> dict[str, Any]:
    """Return the file without its metadata fields."""
    return {
        "path": file.path,
        "name": file.name,
        "size": file.size,
        "content": file.content,
    }


def simplify_folder(folder: FolderInfo) -> dict[str, Any]:
    """Return the folder without its metadata fields."""
    return {
        "path": folder.path,
        "name": folder.name,
        "size": folder.size,
        "count": folder.count,
    }