"""XML output format."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
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
    XMLContentHandling,
    simplify_file,
    simplify_folder,
)
from .instruction_loader import InstructionLoader
from .template_system import escape_xml

HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

_LANGUAGES = {
    ".go": "go",
    ".py": "python",
    ".js": "javascript",
    ".ts": "typescript",
    ".java": "java",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".c": "c",
    ".cs": "csharp",
    ".php": "php",
    ".rb": "ruby",
    ".rs": "rust",
    ".swift": "swift",
    ".kt": "kotlin",
    ".scala": "scala",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".xml": "xml",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".md": "markdown",
    ".sh": "shell",
    ".bash": "shell",
    ".sql": "sql",
}

_TEXT_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&#34;",
    "'": "&#39;",
    "\t": "&#x9;",
    "\n": "&#xA;",
    "\r": "&#xD;",
}

_NAME_RE = re.compile(r"[A-Za-z_][\w.\-]*\Z")


def escape_xml_attribute(s: str) -> str:
    """Escape a value for use inside a double-quoted XML attribute."""
    return escape_xml(s)


def file_extension(path: str) -> str:
    """Text after the last dot, with the dot, or an empty string."""
    parts = path.split(".")
    return "." + parts[-1] if len(parts) > 1 else ""


def _detect_language(path: str) -> str:
    return _LANGUAGES.get(file_extension(path).lower(), "unknown")


def _estimate_tokens(content: str) -> int:
    return len(content.encode("utf-8")) // 4


def _valid_char(ch: str) -> bool:
    code = ord(ch)
    return (
        code in (0x09, 0x0A, 0x0D)
        or 0x20 <= code <= 0xD7FF
        or 0xE000 <= code <= 0xFFFD
        or 0x10000 <= code <= 0x10FFFF
    )


def _escape_text(s: str) -> str:
    return "".join(
        _TEXT_ESCAPES.get(ch, ch) if _valid_char(ch) else "\ufffd" for ch in s
    )


def _escape_minimal(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _timestamp(moment: datetime, fractional: bool = True) -> str:
    """RFC 3339 timestamp in the value's own zone."""
    aware = moment if moment.tzinfo is not None else moment.astimezone()
    text = (
        f"{aware.year:04d}-{aware.month:02d}-{aware.day:02d}"
        f"T{aware.hour:02d}:{aware.minute:02d}:{aware.second:02d}"
    )
    if fractional and aware.microsecond:
        text += "." + f"{aware.microsecond:06d}".rstrip("0")
    offset = aware.utcoffset()
    if not offset:
        return text + "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, minutes = divmod(abs(total) // 60, 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def _fixed_z(moment: datetime) -> str:
    """Wall-clock time of the value followed by a literal 'Z'."""
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}Z"
    )


def _format_float(value: float) -> str:
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


@dataclass
class _Element:
    name: str
    body: str = ""
    children: list[_Element] = field(default_factory=list)
    attrs: tuple[tuple[str, str], ...] = ()


def _render(element: _Element, depth: int = 0) -> str:
    pad = "  " * depth
    attrs = "".join(f' {key}="{_escape_text(value)}"' for key, value in element.attrs)
    opening = f"<{element.name}{attrs}>"
    if element.children:
        inner = "\n".join(_render(child, depth + 1) for child in element.children)
        return f"{pad}{opening}\n{inner}\n{pad}</{element.name}>"
    return f"{pad}{opening}{element.body}</{element.name}>"


def _leaf(name: str, text: str) -> _Element:
    return _Element(name, body=_escape_text(text))


def _scalar_text(value: Any) -> str | None:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        return _timestamp(value)
    return None


def _value_elements(name: str, value: Any) -> list[_Element]:
    """Elements for an arbitrary value; unsupported types raise ValueError."""
    if value is None:
        return []
    if isinstance(value, FileInfo):
        return [_file_element(value, name)]
    if isinstance(value, FolderInfo):
        return [_folder_element(value, name)]
    if isinstance(value, (list, tuple)):
        return [element for item in value for element in _value_elements(name, item)]
    text = _scalar_text(value)
    if text is None:
        raise ValueError(f"xml: unsupported type: {type(value).__name__}")
    return [_leaf(name, text)]


def _file_element(file: FileInfo, name: str) -> _Element:
    return _Element(
        name,
        children=[
            _leaf("Path", file.path),
            _leaf("Name", file.name),
            _leaf("Size", str(file.size)),
            _leaf("ModTime", _timestamp(file.mod_time)),
            _leaf("Content", file.content),
            _leaf("IsDir", _scalar_text(file.is_dir)),
            _leaf("IsHidden", _scalar_text(file.is_hidden)),
            _leaf("IsBinary", _scalar_text(file.is_binary)),
        ],
    )


def _folder_element(folder: FolderInfo, name: str) -> _Element:
    return _Element(
        name,
        children=[
            _leaf("Path", folder.path),
            _leaf("Name", folder.name),
            _leaf("Size", str(folder.size)),
            _leaf("ModTime", _timestamp(folder.mod_time)),
            _leaf("IsHidden", _scalar_text(folder.is_hidden)),
            _leaf("Count", str(folder.count)),
            *(_file_element(f, "Files") for f in folder.files),
            *(_folder_element(sub, "Folders") for sub in folder.folders),
        ],
    )


def _simple_element(name: str, values: dict[str, Any]) -> _Element:
    children: list[_Element] = []
    for key, value in values.items():
        children.extend(_value_elements(key.capitalize(), value))
    return _Element(name, children=children)


def _wrapped_file(file: FileInfo, mode: XMLContentHandling) -> _Element:
    content = BINARY_PLACEHOLDER if file.is_binary else file.content
    if mode is XMLContentHandling.CDATA:
        body = f"<![CDATA[{content}]]>"
    else:
        body = _escape_minimal(content)
    return _Element(
        "File",
        children=[
            _leaf("Name", file.name),
            _leaf("Path", file.path),
            _leaf("Size", str(file.size)),
            _leaf("ModTime", _fixed_z(file.mod_time)),
            _leaf("IsBinary", _scalar_text(file.is_binary)),
            _leaf("IsDir", _scalar_text(file.is_dir)),
            _leaf("IsHidden", _scalar_text(file.is_hidden)),
            _Element("Content", body=body),
        ],
    )


def _wrapped_folder(folder: FolderInfo, mode: XMLContentHandling) -> _Element:
    if mode is XMLContentHandling.CDATA:
        mod_time = _timestamp(folder.mod_time, fractional=False)
    else:
        mod_time = _fixed_z(folder.mod_time)
    return _Element(
        "Folder",
        children=[
            _leaf("Name", folder.name),
            _leaf("Path", folder.path),
            _leaf("Size", str(folder.size)),
            _leaf("ModTime", mod_time),
            _leaf("IsHidden", _scalar_text(folder.is_hidden)),
            _leaf("Count", str(folder.count)),
            *(_wrapped_file(f, mode) for f in folder.files),
            *(_wrapped_folder(sub, mode) for sub in folder.folders),
        ],
    )


def _directory_lines(folder: FolderInfo, depth: int) -> Iterator[str]:
    yield (
        f'{"  " * depth}<directory name="{escape_xml_attribute(folder.name)}" '
        f'path="{escape_xml_attribute(folder.path)}" files="{len(folder.files)}" '
        f'size="{folder.size}" />\n'
    )
    for sub in folder.folders:
        yield from _directory_lines(sub, depth + 1)


class XMLFormatter(Formatter):
    """Renders context data as XML."""

    name = "XML"
    description = "Extensible Markup Language format"

    def format(self, data: ContextData) -> str:
        cfg = self.config
        if cfg is not None and cfg.output.ai_optimized:
            return self._format_ai_optimized(data)
        try:
            if cfg is not None and cfg.formats.xml.structure is not None:
                # A configured structure is rendered without re-encoding.
                return HEADER + _render(self._custom_context(data, cfg.formats.xml.structure))
            root = _Element("context", children=list(self._sections(data).values()))
            text = HEADER + _render(root)
        except ValueError as exc:
            raise FormatterError(f"XML格式化失败: {exc}") from exc
        if cfg is not None:
            text = self._apply_encoding(text, cfg.formats.xml.encoding)
        return text

    def format_file(self, file: FileInfo) -> str:
        if file.is_binary:
            file = dataclasses.replace(file, content=BINARY_PLACEHOLDER)
        mode = self._content_handling
        if mode in (XMLContentHandling.CDATA, XMLContentHandling.RAW):
            return HEADER + _render(_wrapped_file(file, mode))
        return HEADER + _render(_file_element(file, "FileInfo"))

    def format_folder(self, folder: FolderInfo) -> str:
        mode = self._content_handling
        if mode in (XMLContentHandling.CDATA, XMLContentHandling.RAW):
            return HEADER + _render(_wrapped_folder(folder, mode))
        return HEADER + _render(_folder_element(folder, "FolderInfo"))

    @property
    def _content_handling(self) -> XMLContentHandling | None:
        if self.config is None:
            return None
        value = self.config.formats.xml.formatting.content_handling
        if not value:
            return None
        try:
            return XMLContentHandling(value)
        except ValueError:
            return None

    def _sections(self, data: ContextData) -> dict[str, _Element]:
        if self._include_metadata:
            files = [_file_element(f, "file") for f in data.files]
            folders = [_folder_element(f, "folder") for f in data.folders]
        else:
            files = [_simple_element("file", simplify_file(f)) for f in data.files]
            folders = [_simple_element("folder", simplify_folder(f)) for f in data.folders]
        sections = {
            "files": _Element("files", children=files),
            "folders": _Element("folders", children=folders),
            "file_count": _leaf("file_count", str(data.file_count)),
            "folder_count": _leaf("folder_count", str(data.folder_count)),
            "total_size": _leaf("total_size", str(data.total_size)),
        }
        if self._include_metadata:
            sections["metadata"] = _Element(
                "metadata",
                children=[
                    _Element("item", children=_value_elements("value", value), attrs=(("key", key),))
                    for key, value in data.metadata.items()
                ],
            )
        return sections

    def _custom_context(self, data: ContextData, structure: dict[str, Any]) -> _Element:
        children: list[_Element] = []
        for key, value in structure.items():
            if not _NAME_RE.match(key):
                raise ValueError(f"xml: invalid element name {key!r}")
            children.extend(_value_elements(key, value))
        children.extend(
            element for key, element in self._sections(data).items() if key not in structure
        )
        return _Element("context", children=children)

    def _format_ai_optimized(self, data: ContextData) -> str:
        languages = list(
            dict.fromkeys(
                lang for lang in (_detect_language(f.path) for f in data.files) if lang != "unknown"
            )
        )
        summary = AISummaryGenerator(self.config).generate_summary(
            data.file_count, data.total_size, languages
        )
        parts = [
            summary.format_as_xml(),
            "\n",
            "<directory_structure>\n",
            *(line for folder in data.folders for line in _directory_lines(folder, 1)),
            "</directory_structure>",
            "\n",
            "<files>\n",
        ]
        for file in data.files:
            parts.append(self._ai_file(file))
            parts.append("\n")
        parts.append("</files>\n")

        cfg = self.config
        if cfg is not None and cfg.output.ai_instructions.enabled:
            try:
                instructions = InstructionLoader(cfg).load_instructions()
            except FormatterError as exc:
                raise FormatterError(f"加载AI指令失败: {exc}") from exc
            if instructions:
                parts.append("\n<instruction>\n")
                parts.append(f"  <![CDATA[\n{instructions}\n  ]]>")
                parts.append("\n</instruction>\n")
        return HEADER + "<project>\n" + "".join(parts) + "</project>"

    @staticmethod
    def _ai_file(file: FileInfo) -> str:
        content = BINARY_PLACEHOLDER if file.is_binary else file.content
        return (
            f'  <file path="{escape_xml_attribute(file.path)}">\n'
            "    <metadata>\n"
            f"      <size>{file.size}</size>\n"
            f"      <lines>{len(content.split(chr(10)))}</lines>\n"
            f"      <tokens>{_estimate_tokens(content)}</tokens>\n"
            f"      <language>{_detect_language(file.path)}</language>\n"
            "    </metadata>\n"
            "    <content>\n"
            f"      <![CDATA[{content}]]>\n"
            "    </content>\n"
            "  </file>"
        )