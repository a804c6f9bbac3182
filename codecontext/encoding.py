"""Output encoding conversion and string escaping helpers."""

from __future__ import annotations

_ASCII_ONLY = frozenset({"gbk", "gb2312", "gb18030", "big5", "shift_jis", "sjis", "euc-jp"})
_LATIN1 = frozenset({"iso-8859-1", "latin1"})
_UTF8 = frozenset({"utf-8", "utf8"})


def _replace_above(text: str, limit: int) -> str:
    return "".join(ch if ord(ch) < limit else "?" for ch in text)


def convert_encoding(text: str, target_encoding: str) -> str:
    """Reduce ``text`` to what the target encoding keeps; unknown targets raise ValueError."""
    target = target_encoding.lower()
    if target in _ASCII_ONLY:
        return _replace_above(text, 128)
    if target in _LATIN1:
        return _replace_above(text, 256)
    if target in _UTF8:
        return text
    raise ValueError(f"unsupported encoding format: {target_encoding}")


_TOML_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


def escape_toml_string(s: str) -> str:
    """Escape a string for use inside a basic TOML string."""
    for raw, escaped in _TOML_ESCAPES:
        s = s.replace(raw, escaped)
    return s