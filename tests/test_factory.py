import pytest

from codecontext.base import Config, FormatterError
from codecontext.factory import FormatterFactory, create_default_factory, new_formatter
from codecontext.json_formatter import JSONFormatter
from codecontext.markdown_formatter import MarkdownFormatter


def test_get_json():
    factory = FormatterFactory()
    assert factory.get("json").name == "JSON"
    assert factory.get("JSON").name == "JSON"


def test_get_unknown_raises():
    with pytest.raises(FormatterError):
        FormatterFactory().get("nonexistent")


def test_supported_formats():
    formats = FormatterFactory().supported_formats()
    assert len(formats) == 4
    assert sorted(formats) == ["json", "markdown", "toml", "xml"]


@pytest.mark.parametrize(
    "name, expected",
    [("json", "JSON"), ("xml", "XML"), ("toml", "TOML"), ("markdown", "Markdown"), ("md", "Markdown")],
)
def test_new_formatter(name, expected):
    assert new_formatter(name, Config()).name == expected


def test_new_formatter_unknown_raises():
    with pytest.raises(FormatterError):
        new_formatter("nonexistent", Config())


@pytest.mark.parametrize("name", ["json", "JSON", "Json", "jSoN"])
def test_case_insensitive(name):
    factory = create_default_factory(Config())
    assert factory.get(name).name == "JSON"


def test_get_formatter_binds_config():
    config = Config()
    formatter = FormatterFactory().get_formatter("json", config)
    assert isinstance(formatter, JSONFormatter)
    assert formatter.config is config


def test_formatter_info():
    assert FormatterFactory().formatter_info("md") == ("Markdown", "Markdown format")
    with pytest.raises(FormatterError):
        FormatterFactory().formatter_info("yaml")


def test_register_adds_format():
    factory = FormatterFactory()
    factory.register("notes", MarkdownFormatter(None))
    assert "notes" in factory.available_formats()
    assert len(factory.available_formats()) == 5