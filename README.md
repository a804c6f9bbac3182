# codecontext

Render a set of source files and folders as one document that an AI model, a
reviewer or a documentation tool can read in a single pass. The same data can
be written as JSON, XML, TOML or Markdown. Separate helpers render simple
diffs and compute commit history and activity statistics from commit records.

## Installation

```
pip install codecontext
```

With the test dependencies:

```
pip install "codecontext[test]"
```

## Formatting context data

Describe files and folders with `FileInfo`, `FolderInfo` and `ContextData`
from `codecontext.base`, then ask for a formatter by name:

```python
from codecontext.base import ContextData, FileInfo
from codecontext.factory import new_formatter

files = [FileInfo(path="src/main.go", name="main.go", size=42, content="package main\n")]
data = ContextData(files=files, folders=[], file_count=1, folder_count=0, total_size=42)

formatter = new_formatter("markdown", None)
print(formatter.format(data))
```

Format names are case-insensitive: `json`, `xml`, `toml` and `markdown`
(or `md`). An unknown name raises `codecontext.base.FormatterError`, as does
any failure to render.

`FormatterFactory` (in `codecontext.factory`) offers:

- `get(name)` and `get_formatter(name, config)` – a new formatter instance;
- `register(name, formatter)` – add an entry to the factory's list;
- `supported_formats()` / `available_formats()` – the registered names
  (`json`, `xml`, `toml`, `markdown` by default);
- `formatter_info(name)` – the display name and description.

The formatter classes are `JSONFormatter`, `XMLFormatter`, `TOMLFormatter`
and `MarkdownFormatter`. Each has:

- `format(data)` – render a whole `ContextData`;
- `format_file(file)` – render one `FileInfo`;
- `format_folder(folder)` – render one `FolderInfo`.

Binary files (`is_binary=True`) have their content replaced by a placeholder.
In Markdown, file content listed inside a document is cut at 1000 characters.

## Configuration

Pass a `codecontext.base.Config` to a formatter. The options are:

- `output.include_metadata` – when off (the default), `format` writes only
  path, name, size and content for each file, and path, name, size and count
  for each folder. When on, modification times, flags, nested files and
  folders and `ContextData.metadata` are written too. JSON's `format_file`
  and `format_folder` follow the same switch.
- `output.ai_optimized` – makes `XMLFormatter.format` and
  `MarkdownFormatter.format` produce a layout for AI analysis: a summary, a
  directory listing, and each file with its detected language and a token
  estimate (XML also gives a line count).
- `output.ai_summary.template` – `default`, `minimal` or `detailed`; any
  other value gives the default summary.
- `output.ai_instructions` – when `enabled`, instructions are appended to the
  AI layout. They are read from `file_path`, else taken from `content`, else a
  built-in default is used. In file and inline instructions, `{{TOOL_NAME}}`,
  `{{CURRENT_DATE}}` (the `DATE` environment variable) and `{{REPO_NAME}}`
  (the current directory's name) are replaced.
- `formats.<name>.structure` – a custom structure. JSON and XML merge its
  entries with the data; TOML then writes the full data; Markdown writes the
  structure and the counts as a JSON block.
- `formats.json.fields` – extra fields for `JSONFormatter.format_file` when
  metadata is included.
- `formats.<name>.encoding` – a target encoding for `format` output (and for
  Markdown's and TOML's file and folder output). `gbk`, `gb2312`, `gb18030`,
  `big5`, `shift_jis`, `sjis` and `euc-jp` keep ASCII only; `iso-8859-1` and
  `latin1` keep code points below 256; other characters become `?`. An
  unsupported name raises `FormatterError`.
- `formats.xml.formatting.content_handling` – `XMLContentHandling.CDATA` or
  `XMLContentHandling.RAW` changes how `XMLFormatter.format_file` and
  `format_folder` embed file content.

`InstructionLoader.get_preset_instructions(preset)` returns the `security`,
`performance` or `documentation` instruction sets, or the default for any
other name.

## Other helpers

- `codecontext.ai_summary` – `AISummaryGenerator.generate_summary` builds an
  `AISummary`, which renders with `format_as_xml()` or `format_as_markdown()`.
- `codecontext.template_system` – `TemplateSystem.process_template` renders a
  Jinja2 template against `TemplateData` (`project`, `generation`,
  `statistics`, `custom`); `create_default_template_data` fills one in. The
  functions `format_size`, `format_number`, `format_list`, `format_date`,
  `escape_xml`, `escape_json`, `truncate`, `word_count` and `line_count` are
  importable and also available in templates, together with `join`, `split`,
  `replace`, `lower`, `upper`, `title` and `trim`.
- `codecontext.encoding` – `convert_encoding(text, target_encoding)` and
  `escape_toml_string(s)`.

## Git helpers

| Module | Purpose |
| --- | --- |
| `git_detect` | `is_git_repository`, `find_git_repository` (search upward for a `.git` entry) and `current_branch` (read `HEAD`). |
| `git_diff` | `format_diff` renders a simple `unified`, `context` or `raw` diff; `count_changes`, `count_content_changes` and `added_file_diff`; `FileDiff` and `CommitDiff` records. |
| `git_history` | `build_history` filters `CommitInfo` records by time window, author and count and orders them newest first; `parse_time_period` accepts `1y`, `6m`, `3m`, `1m`, `30d`, `7d` and `1d` (and their long forms). |
| `git_stats` | `generate_stats` and the `calculate_*` functions compute commit, author, file and per-day activity statistics from `CommitInfo` records. |

## What this package does not do

- It has no command-line program; it is used as a library.
- It does not scan directories: the caller builds the `FileInfo` and
  `FolderInfo` records.
- It does not read commits, trees or patches from a Git repository. Apart from
  locating a repository and reading its current branch, the Git helpers work
  on `CommitInfo` records and text that the caller supplies.