from datetime import datetime

import pytest

from codecontext.base import (
    Config,
    ContextData,
    FileInfo,
    FolderInfo,
    FormatConfig,
    FormatsConfig,
    Formatter,
    FormatterError,
    OutputConfig,
    XMLContentHandling,
    XMLFormatConfig,
    XMLFormattingConfig,
    simplify_file,
    simplify_folder,
)

CONTENT = 'package main\n\nfunc main() {\n\tprintln("Hello World")\n}'


def make_file() -> FileInfo:
    return FileInfo(
        path="test/file.go",
        name="file.go",
        size=1024,
        mod_time=datetime.now(),
        content=CONTENT,
    )


def make_folder() -> FolderInfo:
    return FolderInfo(
        path="test/folder",
        name="folder",
        mod_time=datetime.now(),
        files=[make_file()],
        folders=[],
        size=1024,
        count=1,
    )


class _Echo(Formatter):
    name = "Echo"
    description = "echo format"

    def format(self, data):
        target = self.config.formats.json.encoding if self.config else ""
        return self._apply_encoding(f"{data.file_count} 文件 é", target)

    def format_file(self, file):
        return file.name

    def format_folder(self, folder):
        return folder.name


def test_simplify_file_keeps_core_fields():
    assert simplify_file(make_file()) == {
        "path": "test/file.go",
        "name": "file.go",
        "size": 1024,
        "content": CONTENT,
    }


def test_simplify_folder_keeps_core_fields():
    assert simplify_folder(make_folder()) == {
        "path": "test/folder",
        "name": "folder",
        "size": 1024,
        "count": 1,
    }


def test_formatter_is_abstract():
    with pytest.raises(TypeError):
        Formatter()


def test_concrete_formatter_exposes_name_and_renders():
    echo = _Echo()
    assert echo.name == "Echo"
    assert echo.description == "echo format"
    assert echo.format_file(make_file()) == "file.go"
    assert echo.format_folder(make_folder()) == "folder"


def test_encoding_is_left_alone_for_utf8():
    config = Config(formats=FormatsConfig(json=FormatConfig(encoding="utf-8")))
    assert _Echo(config).format(ContextData(file_count=1)) == "1 文件 é"


def test_encoding_converts_to_target():
    config = Config(formats=FormatsConfig(json=FormatConfig(encoding="gbk")))
    assert _Echo(config).format(ContextData(file_count=1)) == "1 ?? ?"


def test_unknown_encoding_raises_formatter_error():
    config = Config(formats=FormatsConfig(json=FormatConfig(encoding="klingon")))
    with pytest.raises(FormatterError):
        _Echo(config).format(ContextData())


def test_include_metadata_follows_config():
    assert _Echo()._include_metadata is False
    enabled = Config(output=OutputConfig(include_metadata=True))
    assert _Echo(enabled)._include_metadata is True


def test_xml_format_config_carries_shared_fields():
    cfg = XMLFormatConfig(
        encoding="latin1",
        structure={"root": "project"},
        formatting=XMLFormattingConfig(content_handling=XMLContentHandling.CDATA),
    )
    assert isinstance(cfg, FormatConfig)
    assert cfg.encoding == "latin1"
    assert cfg.structure == {"root": "project"}
    assert cfg.formatting.content_handling is XMLContentHandling.CDATA


def test_context_data_defaults_are_independent():
    first, second = ContextData(), ContextData()
    first.files.append(make_file())
    first.metadata["k"] = 1
    assert second.files == []
    assert second.metadata == {}


def test_default_config_has_no_content_handling():
    config = Config()
    assert config.formats.xml.formatting.content_handling is None
    assert config.formats.json.structure is None