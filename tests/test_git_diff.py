import pytest

from codecontext.git_diff import (
    CommitDiff,
    FileDiff,
    added_file_diff,
    count_changes,
    count_content_changes,
    format_diff,
)

CONTEXT_HEADER = "--- a/\n+++ b/\n***************\n"


def test_unified_worked_example():
    assert format_diff("", "a\nb", "unified") == "@@ -1,1 +1,2 @@\n-\n+a\n+b\n"


def test_unified_identical_content_has_only_header():
    text = "one\ntwo\nthree"
    result = format_diff(text, text, "unified")
    assert result.startswith("@@ -1,")
    assert result.count("\n") == 1
    assert count_changes(result) == (0, 0)


def test_unknown_format_falls_back_to_unified():
    assert format_diff("x\ny", "x\nz", "weird") == format_diff("x\ny", "x\nz", "unified")


def test_empty_format_is_unified():
    assert format_diff("a", "b", "") == format_diff("a", "b", "unified")


def test_raw_returns_new_content():
    content = "line one\nline two\n"
    assert format_diff("old", content, "raw") == content


def test_context_lists_every_new_line():
    result = format_diff("ignored", "alpha\nbeta", "context")
    assert result.startswith(CONTEXT_HEADER)
    assert result[len(CONTEXT_HEADER):].splitlines() == ["  alpha", "  beta"]


def test_unified_changed_line_pairs_minus_and_plus():
    result = format_diff("keep\nold", "keep\nnew", "unified")
    assert "-old\n+new\n" in result
    assert "keep" not in result


def test_count_changes_ignores_headers():
    diff = "--- a/file\n+++ b/file\n+added\n-removed\n context"
    assert count_changes(diff) == (1, 1)


def test_count_changes_matches_unified_rendering():
    from_content = "a\nb"
    to_content = "a\nc\nd"
    assert count_changes(format_diff(from_content, to_content, "unified")) == count_content_changes(
        from_content, to_content
    )


def test_count_content_changes_identical_is_zero():
    text = "same\ncontent"
    assert count_content_changes(text, text) == (0, 0)


def test_count_content_changes_symmetry():
    left, right = "a\nb\nc", "a\nx"
    ins, dels = count_content_changes(left, right)
    assert count_content_changes(right, left) == (dels, ins)


def test_added_file_diff_counts_lines_with_trailing_newline():
    content = "one\ntwo\nthree\n"
    diff = added_file_diff("src/main.go", content, "")
    assert diff.file_path == "src/main.go"
    assert diff.status == "added"
    assert diff.insertions == content.count("\n")
    assert diff.deletions == 0
    assert diff.diff == ""


def test_added_file_diff_counts_last_line_without_newline():
    content = "one\ntwo"
    diff = added_file_diff("a.txt", content, "")
    assert diff.insertions == len(content.split("\n"))


@pytest.mark.parametrize("fmt", ["unified", "context", "raw"])
def test_added_file_diff_renders_when_format_given(fmt):
    content = "x\ny"
    diff = added_file_diff("f.txt", content, fmt)
    assert diff.diff == format_diff("", content, fmt)


def test_commit_diff_defaults_are_independent():
    first = CommitDiff(commit_hash="abc")
    second = CommitDiff(commit_hash="def")
    first.files.append(FileDiff(file_path="a"))
    assert second.files == []
    assert first.total_changes == 0
    assert [f.file_path for f in first.files] == ["a"]