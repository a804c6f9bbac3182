[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "codecontext"
version = "1.0.0"
description = "Render source files and folders as JSON, XML, TOML or Markdown context for AI analysis, with helpers for Git diffs, history and statistics."
requires-python = ">=3.10"
keywords = ["code-context", "ai", "formatter", "xml", "markdown", "toml", "json", "git"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Text Processing :: Markup",
]
dependencies = [
    "tomli-w",
    "jinja2",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["codecontext"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
