"""Markdown output format."""

from __future__ import annotations

import json
from collections.abc import Iterator
from datetime import datetime
from typing import Any

from .ai_summary import AISummaryGenerator
from .base import (
    BINARY_PLACEHOLDER,
    ContextData,
    FileInfo,
    FolderInfo,
    Formatter,
    FormatterError,
)
from .instruction_loader import InstructionLoader

MAX_INLINE_CONTENT = 1000
TRUNCATION_NOTE = "\n... (内容已截断)"

_LANGUAGES = {
    "go": "go",
    "py": "python",
    "js": "javascript",
    "ts": "typescript",
    "java": "java",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "c": "c",
    "cs": "csharp",
    "php": "php",
    "rb": "ruby",
    "rs": "rust",
    "swift": "swift",
    "kt": "kotlin",
    "scala": "scala",
    "r": "r",
    "m": "matlab",
    "pl": "perl",
    "sh": "bash",
    "bash": "bash",
    "ps1": "powershell",
    "sql": "sql",
    "html": "html",
    "css": "css",
    "xml": "xml",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "md": "markdown",
}


def _extension(filename: str) -> str:
    parts = filename.split(".")
    return parts[-1] if len(parts) > 1 else ""


def detect_language(filename: str) -> str:
    """Code-fence language for a file name; unknown extensions give 'text'."""
    return _LANGUAGES.get(_extension(filename), "text")


def estimate_tokens(content: str) -> int:
    """Rough token count: one token per four bytes of UTF-8."""
    return len(content.encode("utf-8")) // 4


def _stamp(moment: datetime) -> str:
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )


def _kind(file: FileInfo) -> str:
    return "- **类型**: 二进制文件\n" if file.is_binary else "- **类型**: 文本文件\n"


def _shortened(content: str) -> str:
    if len(content) > MAX_INLINE_CONTENT:
        return content[:MAX_INLINE_CONTENT] + TRUNCATION_NOTE
    return content


def _file_entry(file: FileInfo) -> Iterator[str]:
    """A file listed inside a larger document, with its content shortened."""
    yield f"### {file.name}\n\n"
    yield f"- **路径**: {file.path}\n"
    yield f"- **大小**: {file.size} 字节\n"
    yield f"- **修改时间**: {_stamp(file.mod_time)}\n"
    yield _kind(file)
    if file.is_hidden:
        yield "- **隐藏**: 是\n"
    if not file.is_binary:
        yield "\n#### 内容\n\n```\n"
        yield _shortened(file.content)
        yield "\n```\n"
    yield "\n"


def _folder_entry(folder: FolderInfo) -> Iterator[str]:
    yield f"- **{folder.name}** ({folder.path})\n"
    yield f"  - 大小: {folder.size} 字节\n"
    yield f"  - 文件数量: {folder.count}\n"
    yield f"  - 修改时间: {_stamp(folder.mod_time)}\n"
    if folder.is_hidden:
        yield "  - 隐藏: 是\n"
    yield "\n"


def _subfolder_entry(folder: FolderInfo) -> Iterator[str]:
    yield f"### {folder.name}\n\n"
    yield f"- **路径**: {folder.path}\n"
    yield f"- **大小**: {folder.size} 字节\n"
    yield f"- **文件数量**: {folder.count}\n"
    yield f"- **修改时间**: {_stamp(folder.mod_time)}\n"
    if folder.is_hidden:
        yield "- **隐藏**: 是\n"
    yield "\n"


def _ai_file_entry(file: FileInfo) -> str:
    language = detect_language(file.name)
    parts = [
        f"### {file.name}\n\n",
        f"- **路径**: `{file.path}`\n",
        f"- **大小**: {file.size} 字节\n",
        f"- **修改时间**: {_stamp(file.mod_time)}\n",
        f"- **语言**: {language}\n",
        f"- **Token数量**: {estimate_tokens(file.content)}\n",
        _kind(file),
    ]
    if file.is_hidden:
        parts.append("- **隐藏**: 是\n")
    parts.append("\n")
    if file.is_binary:
        parts.append(f"#### 文件内容\n\n{BINARY_PLACEHOLDER}\n")
    else:
        parts.append(f"#### 代码内容\n\n```{language}\n{file.content}\n```\n")
    return "".join(parts)


def _directory_structure(data: ContextData) -> str:
    lines = ["```\n"]
    lines.extend(f"{folder.name}/\n" for folder in data.folders)
    lines.extend(f"  {file.name}\n" for file in data.files)
    lines.append("```\n")
    return "".join(lines)


class MarkdownFormatter(Formatter):
    """Renders context data as a Markdown document."""

    name = "Markdown"
    description = "Markdown format"

    def format(self, data: ContextData) -> str:
        cfg = self.config
        if cfg is not None and cfg.output.ai_optimized:
            return self._format_ai_optimized(data)
        if cfg is not None and cfg.formats.markdown.structure is not None:
            return self._custom_structure(data, cfg.formats.markdown.structure)

        parts = [
            "# 代码上下文\n\n",
            "## 统计信息\n\n",
            f"- **文件数量**: {data.file_count}\n",
            f"- **文件夹数量**: {data.folder_count}\n",
            f"- **总大小**: {data.total_size} 字节\n",
            "\n",
        ]
        if self._include_metadata and data.metadata:
            parts.append("## 元信息\n\n")
            parts.extend(f"- **{key}**: {value}\n" for key, value in sorted(data.metadata.items()))
            parts.append("\n")
        if data.folders:
            parts.append("## 文件夹\n\n")
            for folder in data.folders:
                parts.extend(_folder_entry(folder))
        if data.files:
            parts.append("## 文件\n\n")
            for file in data.files:
                parts.extend(_file_entry(file))
        return self._encoded("".join(parts))

    def format_file(self, file: FileInfo) -> str:
        parts = [
            f"# {file.name}\n\n",
            "## 文件信息\n\n",
            f"- **路径**: {file.path}\n",
            f"- **大小**: {file.size} 字节\n",
            f"- **修改时间**: {_stamp(file.mod_time)}\n",
            _kind(file),
        ]
        if file.is_hidden:
            parts.append("- **隐藏**: 是\n")
        parts.append("\n## 内容\n\n")
        if file.is_binary:
            parts.append(f"{BINARY_PLACEHOLDER}\n")
        else:
            parts.append(f"```\n{file.content}\n```\n")
        return self._encoded("".join(parts))

    def format_folder(self, folder: FolderInfo) -> str:
        parts = [
            f"# {folder.name}\n\n",
            "## 文件夹信息\n\n",
            f"- **路径**: {folder.path}\n",
            f"- **大小**: {folder.size} 字节\n",
            f"- **修改时间**: {_stamp(folder.mod_time)}\n",
            f"- **文件数量**: {folder.count}\n",
        ]
        if folder.is_hidden:
            parts.append("- **隐藏**: 是\n")
        parts.append("\n")
        if folder.folders:
            parts.append("## 子文件夹\n\n")
            for sub in folder.folders:
                parts.extend(_subfolder_entry(sub))
        if folder.files:
            parts.append("## 文件\n\n")
            for file in folder.files:
                parts.extend(_file_entry(file))
        return self._encoded("".join(parts))

    def _encoded(self, text: str) -> str:
        if self.config is None:
            return text
        return self._apply_encoding(text, self.config.formats.markdown.encoding)

    @staticmethod
    def _custom_structure(data: ContextData, structure: dict[str, Any]) -> str:
        custom = dict(structure)
        custom.setdefault("file_count", data.file_count)
        custom.setdefault("folder_count", data.folder_count)
        custom.setdefault("total_size", data.total_size)
        body = json.dumps(custom, indent=2, ensure_ascii=False, default=str)
        return f"# 自定义结构数据\n\n```json\n{body}\n```\n"

    def _format_ai_optimized(self, data: ContextData) -> str:
        languages = list(dict.fromkeys(detect_language(f.name) for f in data.files))
        summary = AISummaryGenerator(self.config).generate_summary(
            data.file_count, data.total_size, languages
        )
        parts = [
            "# AI优化代码上下文分析\n\n",
            "## 项目摘要\n\n",
            summary.format_as_markdown(),
            "\n\n",
            "## 项目结构\n\n",
            _directory_structure(data),
            "\n\n",
            "## 代码内容\n\n",
        ]
        for file in data.files:
            parts.append(_ai_file_entry(file))
            parts.append("\n\n")

        cfg = self.config
        if cfg is not None and cfg.output.ai_instructions.enabled:
            try:
                instructions = InstructionLoader(cfg).load_instructions()
            except FormatterError:
                instructions = ""
            if instructions:
                parts.append("## AI分析指令\n\n")
                parts.append(instructions)
                parts.append("\n\n")
        return self._encoded("".join(parts))