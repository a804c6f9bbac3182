"""TOML output format."""

from __future__ import annotations

import dataclasses
from typing import Any

import tomli_w

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


def _file_table(file: FileInfo) -> dict[str, Any]:
    return {
        "Path": file.path,
        "Name": file.name,
        "Size": file.size,
        "ModTime": file.mod_time,
        "Content": file.content,
        "IsDir": file.is_dir,
        "IsHidden": file.is_hidden,
        "IsBinary": file.is_binary,
    }


def _folder_table(folder: FolderInfo) -> dict[str, Any]:
    return {
        "Path": folder.path,
        "Name": folder.name,
        "Size": folder.size,
        "ModTime": folder.mod_time,
        "IsHidden": folder.is_hidden,
        "Count": folder.count,
        "Files": [_file_table(f) for f in folder.files],
        "Folders": [_folder_table(sub) for sub in folder.folders],
    }


def _capitalized(values: dict[str, Any]) -> dict[str, Any]:
    return {key.capitalize(): value for key, value in values.items()}


def _full_context(data: ContextData) -> dict[str, Any]:
    return {
        "files": [_file_table(f) for f in data.files],
        "folders": [_folder_table(f) for f in data.folders],
        "file_count": data.file_count,
        "folder_count": data.folder_count,
        "total_size": data.total_size,
        "metadata": dict(data.metadata),
    }


def _dumps(obj: dict[str, Any], error_prefix: str) -> str:
    try:
        return tomli_w.dumps(obj)
    except (TypeError, ValueError) as exc:
        raise FormatterError(f"{error_prefix}: {exc}") from exc


class TOMLFormatter(Formatter):
    """Renders context data as TOML."""

    name = "TOML"
    description = "Tom's Obvious, Minimal Language format"

    def format(self, data: ContextData) -> str:
        if self.config is not None and self.config.formats.toml.structure is not None:
            # A configured structure is rendered with the full data and no re-encoding.
            return _dumps(_full_context(data), "TOML格式化失败")
        if self._include_metadata:
            output = _full_context(data)
        else:
            output = {
                "files": [_capitalized(simplify_file(f)) for f in data.files],
                "folders": [_capitalized(simplify_folder(f)) for f in data.folders],
                "file_count": data.file_count,
                "folder_count": data.folder_count,
                "total_size": data.total_size,
            }
        return self._encoded(_dumps(output, "TOML格式化失败"))

    def format_file(self, file: FileInfo) -> str:
        if file.is_binary:
            file = dataclasses.replace(file, content=BINARY_PLACEHOLDER)
        return self._encoded(_dumps(_file_table(file), "TOML文件格式化失败"))

    def format_folder(self, folder: FolderInfo) -> str:
        return self._encoded(_dumps(_folder_table(folder), "TOML文件夹格式化失败"))

    def _encoded(self, text: str) -> str:
        if self.config is None:
            return text
        return self._apply_encoding(text, self.config.formats.toml.encoding)