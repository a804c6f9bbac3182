"""Loading of the AI analysis instructions appended to optimised output."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from .base import FormatterError
from .template_system import TOOL_NAME

if TYPE_CHECKING:
    from .base import Config

_Section = tuple[str, tuple[str, ...]]


def _render_plain(title: str, intro: str, sections: tuple[_Section, ...], closing: str) -> str:
    """Render sections as level-three headings with bullet lists."""
    blocks = [f"## {title}", intro]
    blocks.extend(
        "\n".join([f"### {heading}", *(f"- {item}" for item in items)])
        for heading, items in sections
    )
    blocks.append(closing)
    return "\n\n".join(blocks)


def _render_numbered(title: str, intro: str, sections: tuple[_Section, ...], closing: str) -> str:
    """Render sections as a numbered list of bold headings with indented bullets."""
    blocks = [f"## {title}", intro]
    blocks.extend(
        "\n".join([f"{number}. **{heading}**", *(f"   - {item}" for item in items)])
        for number, (heading, items) in enumerate(sections, start=1)
    )
    blocks.append(closing)
    return "\n\n".join(blocks)


DEFAULT_INSTRUCTIONS = _render_plain(
    "AI Analysis Instructions",
    "Please analyze this codebase for the following aspects:",
    (
        ("Code Quality", (
            "Identify potential code quality issues",
            "Suggest improvements for readability and maintainability",
            "Check for code duplication",
        )),
        ("Security", (
            "Look for potential security vulnerabilities",
            "Identify hardcoded credentials or sensitive data",
            "Check for unsafe coding practices",
        )),
        ("Performance", (
            "Suggest performance optimization opportunities",
            "Identify potential bottlenecks",
            "Recommend efficient algorithms or data structures",
        )),
        ("Architecture", (
            "Analyze the overall architecture and design patterns",
            "Suggest improvements for modularity and extensibility",
            "Identify coupling and cohesion issues",
        )),
        ("Documentation", (
            "Check for missing or outdated documentation",
            "Suggest improvements for code comments",
            "Identify areas that need better documentation",
        )),
        ("Testing", (
            "Identify areas that lack test coverage",
            "Suggest test cases for critical functionality",
            "Check for proper error handling",
        )),
    ),
    "Please provide specific, actionable recommendations for each area.",
)

_PRESETS = {
    "security": _render_numbered(
        "Security Analysis Instructions",
        "Focus on security-related aspects of this codebase:",
        (
            ("Input Validation", (
                "Check for SQL injection vulnerabilities",
                "Identify XSS (Cross-Site Scripting) risks",
                "Look for buffer overflow possibilities",
                "Validate all user inputs",
            )),
            ("Authentication & Authorization", (
                "Review authentication mechanisms",
                "Check authorization implementations",
                "Identify privilege escalation risks",
                "Validate session management",
            )),
            ("Data Protection", (
                "Look for sensitive data exposure",
                "Check encryption implementations",
                "Identify insecure data storage",
                "Validate data transmission security",
            )),
            ("Code Injection", (
                "Check for command injection vulnerabilities",
                "Look for LDAP injection risks",
                "Identify XML injection possibilities",
                "Validate dynamic code execution",
            )),
            ("Error Handling", (
                "Review error message disclosure",
                "Check for information leakage",
                "Validate exception handling",
                "Identify debugging information exposure",
            )),
        ),
        "Provide specific security recommendations and risk assessments.",
    ),
    "performance": _render_numbered(
        "Performance Analysis Instructions",
        "Analyze this codebase for performance optimization opportunities:",
        (
            ("Algorithm Efficiency", (
                "Identify inefficient algorithms (O(n²) when O(n log n) possible)",
                "Look for unnecessary nested loops",
                "Check for optimal data structure usage",
                "Suggest better sorting/searching algorithms",
            )),
            ("Memory Usage", (
                "Identify memory leaks",
                "Check for excessive object creation",
                "Look for inefficient memory patterns",
                "Suggest memory pooling where applicable",
            )),
            ("I/O Operations", (
                "Minimize file system operations",
                "Optimize database queries",
                "Reduce network calls",
                "Implement proper caching strategies",
            )),
            ("Concurrency", (
                "Identify blocking operations",
                "Suggest async/await patterns",
                "Look for race conditions",
                "Recommend parallel processing",
            )),
            ("Resource Management", (
                "Check resource cleanup",
                "Identify resource contention",
                "Suggest connection pooling",
                "Optimize resource allocation",
            )),
        ),
        "Provide specific performance metrics and improvement suggestions.",
    ),
    "documentation": _render_numbered(
        "Documentation Analysis Instructions",
        "Review this codebase for documentation quality:",
        (
            ("Code Comments", (
                "Check for missing function/method comments",
                "Identify unclear or outdated comments",
                "Look for TODO/FIXME items",
                "Validate comment accuracy",
            )),
            ("API Documentation", (
                "Review public API documentation",
                "Check parameter descriptions",
                "Validate return value documentation",
                "Identify missing examples",
            )),
            ("Architecture Documentation", (
                "Check for high-level architecture docs",
                "Identify missing design decisions",
                "Look for outdated system documentation",
                "Validate component interactions",
            )),
            ("README and Guides", (
                "Review installation instructions",
                "Check usage examples",
                "Validate configuration documentation",
                "Identify missing setup guides",
            )),
            ("Inline Documentation", (
                "Check for complex algorithm explanations",
                "Identify business logic documentation",
                "Look for data structure documentation",
                "Validate code examples",
            )),
        ),
        "Suggest specific documentation improvements and additions.",
    ),
}


class InstructionLoader:
    """Resolves the AI instructions from a file, inline content or the defaults."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config

    def load_instructions(self) -> str:
        """Return the configured instructions, or an empty string when disabled."""
        if self.config is None or not self.config.output.ai_instructions.enabled:
            return ""
        settings = self.config.output.ai_instructions
        if settings.file_path:
            try:
                return self._load_from_file(settings.file_path)
            except FormatterError as exc:
                raise FormatterError(f"加载指令文件失败: {exc}") from exc
        if settings.content:
            return self._process_template(settings.content)
        return DEFAULT_INSTRUCTIONS

    def get_preset_instructions(self, preset: str) -> str:
        """Return a built-in instruction set; unknown names give the defaults."""
        return _PRESETS.get(preset, DEFAULT_INSTRUCTIONS)

    def _load_from_file(self, file_path: str) -> str:
        path = Path(file_path)
        if not path.exists():
            if not path.is_absolute():
                path = Path.cwd() / path
            if not path.exists():
                raise FormatterError(f"指令文件不存在: {path}")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FormatterError(f"读取指令文件失败: {exc}") from exc
        return self._process_template(content)

    def _process_template(self, content: str) -> str:
        replacements = {
            "{{TOOL_NAME}}": TOOL_NAME,
            "{{CURRENT_DATE}}": os.environ.get("DATE", ""),
            "{{REPO_NAME}}": self._repo_name(),
        }
        for key, value in replacements.items():
            content = content.replace(key, value)
        return content

    @staticmethod
    def _repo_name() -> str:
        try:
            return Path.cwd().name
        except OSError:
            return "unknown-project"