# studio_agent/chat/exporters.py
"""Timeline export formatters.

Supports Markdown and JSON export with proposal and decision details.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from studio_agent.chat.models import Turn
from studio_agent.constants import ExportFormat, TurnRole


class MarkdownExporter:
    """Export a timeline as formatted Markdown."""

    @staticmethod
    def export(
        turns: Iterable[Turn],
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Export turns to Markdown format.

        Args:
            turns: Timeline turns in order
            metadata: Optional metadata (api_url, conversation_id, etc.)

        Returns:
            Formatted Markdown string
        """
        lines: list[str] = ["# Agent Conversation", ""]

        if metadata:
            lines.append("## Metadata")
            lines.append("")
            for key, value in metadata.items():
                lines.append(f"- **{key}**: {value}")
            lines.append("")

        lines.append("---")
        lines.append("")

        for turn in turns:
            if turn.pending:
                continue
            stamp = turn.created_at.strftime("%Y-%m-%d %H:%M:%S")
            if turn.role is TurnRole.USER:
                lines.append(f"### User ({stamp})")
            elif turn.tool_name:
                lines.append(f"### Tool Result `{turn.tool_name}` ({stamp})")
            else:
                lines.append(f"### Assistant ({stamp})")
            lines.append("")
            if turn.text:
                lines.append(turn.text)
                lines.append("")

            for proposal in turn.proposed_tools:
                lines.append(
                    f"**Tool Call**: `{proposal.tool_name}` "
                    f"(`{proposal.id}`, {proposal.decision.value})"
                )
                lines.append("")
                lines.append("```json")
                lines.append(json.dumps(proposal.parameters, indent=2, default=str))
                lines.append("```")
                lines.append("")

        return "\n".join(lines)


class JSONExporter:
    """Export a timeline as structured JSON."""

    @staticmethod
    def export(
        turns: Iterable[Turn],
        metadata: dict[str, Any] | None = None,
    ) -> str:
        export_data: dict[str, Any] = {
            "version": "1.0",
            "exported_at": datetime.now(timezone.utc).isoformat(),
        }
        if metadata:
            export_data["metadata"] = metadata
        export_data["turns"] = [t.to_dict() for t in turns if not t.pending]
        return json.dumps(export_data, indent=2, default=str)


def export_timeline(
    turns: Iterable[Turn],
    path: str | Path,
    fmt: ExportFormat = ExportFormat.MARKDOWN,
    metadata: dict[str, Any] | None = None,
) -> Path:
    """Write ``turns`` to ``path`` in the chosen format."""
    exporter = MarkdownExporter if fmt is ExportFormat.MARKDOWN else JSONExporter
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(exporter.export(turns, metadata), encoding="utf-8")
    return target
