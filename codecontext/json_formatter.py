"""JSON output format."""

from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from typing import Any

from .base import (
    BINARY_PLACEHOLDER,
    ContextData,
    FileInfo,
    FolderInfo,
    Formatter,
    FormatterError,
    simplify_file,
    simplify_folder,
)

_HTML_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _dumps(obj: Any) -> str:
    text = json.dumps(obj, indent=2, ensure_ascii=False)
    # These characters can only occur inside JSON strings, so the replacement is safe.
    for raw, escaped in _HTML_ESCAPES:
        text = text.replace(raw, escaped)
    return text


def _timestamp(moment: datetime) -> str:
    text = moment.isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _file_dict(file: FileInfo) -> dict[str, Any]:
    return {
        "path": file.path,
        "name": file.name,
        "size": file.size,
        "mod_time": _timestamp(file.mod_time),
        "content": file.content,
        "is_dir": file.is_dir,
        "is_hidden": file.is_hidden,
        "is_binary": file.is_binary,
    }


def _folder_dict(folder: FolderInfo) -> dict[str, Any]:
    return {
        "path": folder.path,
        "name": folder.name,
        "size": folder.size,
        "mod_time": _timestamp(folder.mod_time),
        "is_hidden": folder.is_hidden,
        "count": folder.count,
        "files": [_file_dict(f) for f in folder.files],
        "folders": [_folder_dict(sub) for sub in folder.folders],
    }


def _context_dict(data: ContextData) -> dict[str, Any]:
    return {
        "files": [_file_dict(f) for f in data.files],
        "folders": [_folder_dict(f) for f in data.folders],
        "file_count": data.file_count,
        "folder_count": data.folder_count,
        "total_size": data.total_size,
        "metadata": dict(sorted(data.metadata.items())),
    }


class JSONFormatter(Formatter):
    """Renders context data as indented JSON."""

    name = "JSON"
    description = "JavaScript Object Notation format"

    def format(self, data: ContextData) -> str:
        if self._has_custom_structure():
            output: Any = self._custom_structure(data)
        elif self._include_metadata:
            output = _context_dict(data)
        else:
            output = {
                "files": [simplify_file(f) for f in data.files],
                "folders": [simplify_folder(f) for f in data.folders],
                "file_count": data.file_count,
                "folder_count": data.folder_count,
                "total_size": data.total_size,
            }
        try:
            text = _dumps(output)
        except (TypeError, ValueError) as exc:
            raise FormatterError(f"JSON格式化失败: {exc}") from exc
        if self.config is not None:
            text = self._apply_encoding(text, self.config.formats.json.encoding)
        return text

    def format_file(self, file: FileInfo) -> str:
        if file.is_binary:
            file = dataclasses.replace(file, content=BINARY_PLACEHOLDER)
        output = self._custom_fields(file) if self._include_metadata else simplify_file(file)
        try:
            return _dumps(output)
        except (TypeError, ValueError) as exc:
            raise FormatterError(f"JSON文件格式化失败: {exc}") from exc

    def format_folder(self, folder: FolderInfo) -> str:
        output = _folder_dict(folder) if self._include_metadata else simplify_folder(folder)
        try:
            return _dumps(output)
        except (TypeError, ValueError) as exc:
            raise FormatterError(f"JSON文件夹格式化失败: {exc}") from exc

    def _has_custom_structure(self) -> bool:
        """True when the structure maps anything beyond file->file and folder->folder."""
        if self.config is None or self.config.formats.json.structure is None:
            return False
        return any(
            key not in ("file", "folder") or value != key
            for key, value in self.config.formats.json.structure.items()
        )

    def _custom_structure(self, data: ContextData) -> dict[str, Any]:
        assert self.config is not None and self.config.formats.json.structure is not None
        custom = dict(self.config.formats.json.structure)
        custom.setdefault("files", [_file_dict(f) for f in data.files])
        custom.setdefault("folders", [_folder_dict(f) for f in data.folders])
        custom.setdefault("file_count", data.file_count)
        custom.setdefault("folder_count", data.folder_count)
        custom.setdefault("total_size", data.total_size)
        if "metadata" not in custom and self._include_metadata:
            custom["metadata"] = dict(sorted(data.metadata.items()))
        return dict(sorted(custom.items()))

    def _custom_fields(self, file: FileInfo) -> dict[str, Any]:
        fields = None if self.config is None else self.config.formats.json.fields
        if fields is None:
            return _file_dict(file)
        custom: dict[str, Any] = dict(fields)
        custom["path"] = file.path
        custom["name"] = file.name
        custom["size"] = file.size
        return dict(sorted(custom.items()))