from datetime import datetime

import pytest

from codecontext.base import (
    AIInstructionsConfig,
    Config,
    ContextData,
    FileInfo,
    FolderInfo,
    FormatConfig,
    FormatsConfig,
    FormatterError,
    OutputConfig,
)
from codecontext.markdown_formatter import MarkdownFormatter, detect_language, estimate_tokens

CONTENT = 'package main\n\nfunc main() {\n\tprintln("Hello World")\n}'


def make_file(**overrides):
    values = dict(
        path="test/file.go",
        name="file.go",
        size=1024,
        mod_time=datetime(2024, 5, 6, 7, 8, 9),
        content=CONTENT,
    )
    values.update(overrides)
    return FileInfo(**values)


def make_folder():
    return FolderInfo(
        path="test/folder",
        name="folder",
        mod_time=datetime(2024, 5, 6, 7, 8, 9),
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
    )


def test_format_contains_sections():
    result = MarkdownFormatter(None).format(make_data())
    assert "# 代码上下文" in result
    assert "## 文件" in result
    assert "## 文件夹" in result
    assert "```" in result
    assert "package main" in result
    assert "- **文件数量**: 1\n" in result
    assert "- **修改时间**: 2024-05-06 07:08:09\n" in result


def test_format_file():
    result = MarkdownFormatter(None).format_file(make_file())
    assert result.startswith("# file.go\n\n")
    assert "**路径**" in result
    assert "**大小**" in result
    assert "```" in result
    assert "- **类型**: 文本文件\n" in result


def test_format_file_binary_hides_content():
    result = MarkdownFormatter(None).format_file(make_file(is_binary=True))
    assert "[二进制文件 - 内容未显示]" in result
    assert "package main" not in result
    assert "- **类型**: 二进制文件\n" in result


def test_format_folder():
    result = MarkdownFormatter(None).format_folder(make_folder())
    assert result.startswith("# folder\n\n")
    assert "**路径**" in result
    assert "**文件数量**" in result
    assert "## 文件" in result


def test_empty_data_has_no_file_section():
    result = MarkdownFormatter(None).format(ContextData())
    assert "## 文件" not in result
    assert "- **总大小**: 0 字节" in result


def test_long_content_is_truncated():
    data = ContextData(files=[make_file(content="a" * 1500)], file_count=1)
    result = MarkdownFormatter(None).format(data)
    assert "a" * 1000 + "\n... (内容已截断)" in result
    assert "a" * 1001 not in result


def test_metadata_listed_when_enabled():
    config = Config(output=OutputConfig(include_metadata=True))
    data = ContextData(metadata={"b": 2, "a": "x"})
    result = MarkdownFormatter(config).format(data)
    assert "## 元信息\n\n- **a**: x\n- **b**: 2\n" in result


def test_encoding_conversion():
    config = Config(formats=FormatsConfig(markdown=FormatConfig(encoding="latin1")))
    result = MarkdownFormatter(config).format_file(make_file())
    assert "路径" not in result
    assert "?" in result


def test_unsupported_encoding_raises():
    config = Config(formats=FormatsConfig(markdown=FormatConfig(encoding="klingon")))
    with pytest.raises(FormatterError):
        MarkdownFormatter(config).format(make_data())


def test_custom_structure():
    config = Config(formats=FormatsConfig(markdown=FormatConfig(structure={"title": "demo"})))
    result = MarkdownFormatter(config).format(make_data())
    assert result.startswith("# 自定义结构数据\n\n```json\n")
    assert '"title": "demo"' in result


def test_ai_optimized_output():
    config = Config(
        output=OutputConfig(
            ai_optimized=True, ai_instructions=AIInstructionsConfig(enabled=True)
        )
    )
    data = ContextData(files=[make_file(content="abcdefgh")], file_count=1, total_size=8)
    result = MarkdownFormatter(config).format(data)
    assert result.startswith("# AI优化代码上下文分析\n\n")
    assert "- **Token数量**: 2\n" in result
    assert "```go\nabcdefgh\n```" in result
    assert "## AI分析指令" in result
    assert "## AI Analysis Instructions" in result


@pytest.mark.parametrize(
    "name, expected",
    [
        ("main.go", "go"),
        ("a.py", "python"),
        ("x.cc", "cpp"),
        ("run.sh", "bash"),
        ("conf.yml", "yaml"),
        ("README.md", "markdown"),
        ("Makefile", "text"),
        ("MAIN.GO", "text"),
    ],
)
def test_detect_language(name, expected):
    assert detect_language(name) == expected


def test_estimate_tokens():
    assert estimate_tokens("abcdefgh") == 2
    assert estimate_tokens("abc") == 0