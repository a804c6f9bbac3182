import json
from datetime import datetime, timezone

import pytest

from codecontext.base import (
    Config,
    ContextData,
    FileInfo,
    FolderInfo,
    FormatConfig,
    FormatsConfig,
    FormatterError,
    OutputConfig,
)
from codecontext.json_formatter import JSONFormatter

MOMENT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def make_file():
    return FileInfo(
        path="test/file.go",
        name="file.go",
        size=1024,
        mod_time=MOMENT,
        content='package main\n\nfunc main() {\n\tprintln("Hello World")\n}',
    )


def make_folder():
    return FolderInfo(
        path="test/folder",
        name="folder",
        mod_time=MOMENT,
        files=[make_file()],
        folders=[],
        size=1024,
        count=1,
    )


def make_data():
    return ContextData(
        files=[make_file()],
        folders=[make_folder()],
        file_count=1,
        folder_count=1,
        total_size=1024,
        metadata={},
    )


def test_name_and_description():
    formatter = JSONFormatter(None)
    assert formatter.name == "JSON"
    assert formatter.description == "JavaScript Object Notation format"


def test_format_contains_files_and_folders():
    parsed = json.loads(JSONFormatter(None).format(make_data()))
    assert "files" in parsed
    assert "folders" in parsed
    assert parsed["file_count"] == 1
    assert parsed["total_size"] == 1024
    assert set(parsed["files"][0]) == {"path", "name", "size", "content"}


def test_format_file():
    file = make_file()
    parsed = json.loads(JSONFormatter(None).format_file(file))
    assert parsed["name"] == file.name
    assert parsed["size"] == file.size
    assert parsed["content"] == file.content


def test_format_folder():
    folder = make_folder()
    parsed = json.loads(JSONFormatter(None).format_folder(folder))
    assert parsed == {"path": "test/folder", "name": "folder", "size": 1024, "count": 1}


def test_format_file_binary_hides_content():
    file = make_file()
    file.is_binary = True
    parsed = json.loads(JSONFormatter(None).format_file(file))
    assert parsed["content"] == "[二进制文件 - 内容未显示]"
    assert file.content.startswith("package main")


def test_custom_structure():
    config = Config(
        formats=FormatsConfig(
            json=FormatConfig(structure={"custom_field": "custom_value", "files": []})
        )
    )
    parsed = json.loads(JSONFormatter(config).format(make_data()))
    assert parsed["custom_field"] == "custom_value"
    assert parsed["files"] == []
    assert parsed["folders"][0]["name"] == "folder"
    assert parsed["file_count"] == 1
    assert "metadata" not in parsed


def test_identity_structure_is_not_custom():
    config = Config(
        formats=FormatsConfig(json=FormatConfig(structure={"file": "file", "folder": "folder"}))
    )
    parsed = json.loads(JSONFormatter(config).format(make_data()))
    assert "file" not in parsed
    assert set(parsed["files"][0]) == {"path", "name", "size", "content"}


def test_custom_fields():
    config = Config(
        output=OutputConfig(include_metadata=True),
        formats=FormatsConfig(json=FormatConfig(fields={"custom_file_field": "custom_value"})),
    )
    parsed = json.loads(JSONFormatter(config).format_file(make_file()))
    assert parsed == {
        "custom_file_field": "custom_value",
        "path": "test/file.go",
        "name": "file.go",
        "size": 1024,
    }


def test_include_metadata_full_structure():
    data = make_data()
    data.metadata = {"tool": "x"}
    config = Config(output=OutputConfig(include_metadata=True))
    parsed = json.loads(JSONFormatter(config).format(data))
    assert parsed["metadata"] == {"tool": "x"}
    assert parsed["files"][0]["is_binary"] is False
    assert parsed["folders"][0]["files"][0]["path"] == "test/file.go"


def test_include_metadata_folder():
    config = Config(output=OutputConfig(include_metadata=True))
    parsed = json.loads(JSONFormatter(config).format_folder(make_folder()))
    assert parsed["files"][0]["name"] == "file.go"
    assert parsed["folders"] == []


def test_nil_config_small_data():
    result = JSONFormatter(None).format(
        ContextData(
            files=[FileInfo(path="test.go", name="test.go", size=100, content="test content")],
            file_count=1,
        )
    )
    assert "test.go" in result


def test_empty_data():
    result = JSONFormatter(None).format(ContextData())
    assert '"files": []' in result


def test_html_characters_escaped():
    data = ContextData(files=[FileInfo(name="a", content="<a & b>")], file_count=1)
    result = JSONFormatter(None).format(data)
    assert "\\u003c" in result and "\\u0026" in result
    assert json.loads(result)["files"][0]["content"] == "<a & b>"


def test_encoding_conversion():
    config = Config(formats=FormatsConfig(json=FormatConfig(encoding="latin1")))
    data = ContextData(files=[FileInfo(name="a", content="中文")], file_count=1)
    result = JSONFormatter(config).format(data)
    assert "中文" not in result
    assert json.loads(result)["files"][0]["content"] == "??"


def test_unsupported_encoding_raises():
    config = Config(formats=FormatsConfig(json=FormatConfig(encoding="klingon")))
    with pytest.raises(FormatterError, match="编码转换失败"):
        JSONFormatter(config).format(make_data())


def test_unserializable_metadata_raises():
    data = make_data()
    data.metadata = {"bad": object()}
    config = Config(output=OutputConfig(include_metadata=True))
    with pytest.raises(FormatterError, match="JSON格式化失败"):
        JSONFormatter(config).format(data)