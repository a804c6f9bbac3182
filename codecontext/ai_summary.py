"""AI-oriented summary block placed at the top of optimised output."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from .template_system import TOOL_NAME, TOOL_VERSION, format_date

if TYPE_CHECKING:
    from .base import Config

_MB = 1024 * 1024


@dataclass
class ProjectInfo:
    name: str = "Project"
    description: str = "Code repository analysis"
    file_count: int = 0
    total_size: int = 0
    languages: list[str] = field(default_factory=list)
    generated_at: datetime = field(default_factory=lambda: datetime.now().astimezone())


@dataclass
class AISummary:
    generation_header: str = ""
    purpose: str = ""
    file_format: str = ""
    usage_guidelines: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    project_info: ProjectInfo = field(default_factory=ProjectInfo)

    def format_as_xml(self) -> str:
        info = self.project_info
        lines = [
            "<file_summary>",
            "  <generation_info>",
            f"    <tool>{TOOL_NAME}</tool>",
            f"    <version>{TOOL_VERSION}</version>",
            f"    <timestamp>{format_date(info.generated_at)}</timestamp>",
            "  </generation_info>",
            "  <ai_instructions>",
            f"    <purpose><![CDATA[{self.purpose}]]></purpose>",
            "    <usage_guidelines>",
            *(f"      <guideline><![CDATA[{g}]]></guideline>" for g in self.usage_guidelines),
            "    </usage_guidelines>",
            "  </ai_instructions>",
            "  <project_info>",
            f"    <file_count>{info.file_count}</file_count>",
            f"    <total_size>{info.total_size}</total_size>",
            "    <languages>",
            *(f"      <language>{lang}</language>" for lang in info.languages),
            "    </languages>",
            "  </project_info>",
            "</file_summary>",
        ]
        return "\n".join(lines) + "\n"

    def format_as_markdown(self) -> str:
        info = self.project_info
        parts = [
            "# AI Analysis Summary\n\n",
            f"**Generated:** {format_date(info.generated_at)}\n\n",
            "## Purpose\n\n",
            self.purpose + "\n\n",
            "## Usage Guidelines\n\n",
            *(f"- {g}\n" for g in self.usage_guidelines),
            "\n",
            "## Project Information\n\n",
            f"- **Files:** {info.file_count}\n",
            f"- **Total Size:** {info.total_size / _MB:.2f} MB\n",
        ]
        if info.languages:
            parts.append(f"- **Languages:** {', '.join(info.languages)}\n")
        parts.append("\n")
        if self.notes:
            parts.append("## Notes\n\n")
            parts.extend(f"- {note}\n" for note in self.notes)
            parts.append("\n")
        return "".join(parts)


class AISummaryGenerator:
    """Builds an AISummary according to the configured template."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config

    def generate_summary(self, file_count: int, total_size: int, languages: list[str]) -> AISummary:
        info = ProjectInfo(
            file_count=file_count,
            total_size=total_size,
            languages=languages,
            generated_at=datetime.now().astimezone(),
        )
        template = "default"
        if self.config is not None and self.config.output.ai_summary.template:
            template = self.config.output.ai_summary.template
        if template == "minimal":
            return self._minimal(info)
        if template == "detailed":
            return self._detailed(info)
        return self._default(info)

    @staticmethod
    def _default(info: ProjectInfo) -> AISummary:
        return AISummary(
            generation_header=(
                f"Generated by {TOOL_NAME} v{TOOL_VERSION} at {format_date(info.generated_at)}"
            ),
            purpose=(
                "This file contains a packed representation of the entire repository "
                "for AI analysis and processing."
            ),
            file_format="XML structure with file contents, metadata, and directory organization",
            usage_guidelines=[
                "This file should be treated as read-only reference material",
                "Use for AI analysis, code review, or documentation generation",
                "Do not modify the contents directly",
                "Consider token limits when processing large repositories",
            ],
            notes=[
                f"Repository contains {info.file_count} files across {len(info.languages)} languages",
                f"Total size: {info.total_size / _MB:.2f} MB",
                "Binary files are marked and content excluded",
                "Hidden files and directories are included based on configuration",
            ],
            project_info=info,
        )

    @staticmethod
    def _minimal(info: ProjectInfo) -> AISummary:
        return AISummary(
            generation_header=f"Generated at {format_date(info.generated_at)}",
            purpose="Packed repository for AI analysis",
            file_format="XML",
            usage_guidelines=["Read-only reference", "For AI processing only"],
            notes=[f"{info.file_count} files"],
            project_info=info,
        )

    @staticmethod
    def _detailed(info: ProjectInfo) -> AISummary:
        return AISummary(
            generation_header=(
                f"Code Context Generator Output - Version {TOOL_VERSION} - "
                f"Generated: {format_date(info.generated_at)}"
            ),
            purpose=(
                "This comprehensive XML file contains the complete codebase representation "
                "designed for advanced AI analysis, code review, and automated processing tasks."
            ),
            file_format=(
                "Structured XML with detailed metadata, file contents, directory hierarchy, "
                "and AI-optimized formatting"
            ),
            usage_guidelines=[
                "This file is a read-only snapshot of the repository state",
                "Ideal for AI-powered code analysis, security scanning, and documentation generation",
                "Use with token-aware processing for large repositories",
                "Content is escaped for XML compatibility while preserving readability",
                "Directory structure provides context for file relationships",
            ],
            notes=[
                f"Repository Statistics: {info.file_count} files, {info.total_size / _MB:.2f} MB total size",
                f"Programming Languages: {', '.join(info.languages)}",
                "Binary files are identified and excluded from content analysis",
                "File metadata includes size, modification time, and language detection",
                "Directory structure reflects the complete project hierarchy",
                "Generated with code-context-generator tool for optimal AI processing",
            ],
            project_info=info,
        )