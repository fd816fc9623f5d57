# src/review_relay/review/renderer.py
"""Markdown rendering for inline review comments and the summary comment.

Rendering is pure: the same review result and RenderConfig always produce the
same bytes. Platform permalinks come in through a link builder, so one
renderer serves every platform.
"""
from collections.abc import Callable
import yaml
from review_relay.models.config import RenderConfig, Severity
from review_relay.models.review import Issue, Praise, ReviewResult
from .text import (
    SEVERITY_GLYPHS,
    category_glyph,
    humanize_category,
    sanitize_fence,
    severity_glyph,
    wrap,
)


LinkBuilder = Callable[[str, int], str | None]

SUMMARY_SIGNATURE = "**Automated Code Review"
SUMMARY_TITLE = "🤖 **Automated Code Review Results**"
FAILURE_NOTICE = (
    "🚨 **Automated Code Review Failed** 🚨\n\n"
    "Could not get a valid JSON response from the review service."
)
EMPTY_NOTICE = (
    "✅ **Automated Code Review Complete** ✅\n\n"
    "No issues or praises were found."
)

SUGGESTED_FIX_HEADING = "**💡 Suggested Fix:**"
MACHINE_BLOCK_HEADING = "**🤖 AI-Assisted Fix (copy this):**"

TABLE_SEVERITIES = (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW)


class _LiteralText(str):
    pass


class _MachineBlockDumper(yaml.SafeDumper):
    pass


def _represent_literal(dumper: yaml.SafeDumper, data: _LiteralText) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(data), style="|")


_MachineBlockDumper.add_representer(_LiteralText, _represent_literal)


def _sanitized_fix(issue: Issue) -> str | None:
    if not issue.suggested_fix:
        return None
    fix = sanitize_fence(issue.suggested_fix)
    return fix if fix.strip() else None


def render_machine_block(issue: Issue) -> str:
    """YAML list entry describing the issue, with message and fix kept verbatim."""
    entry = {
        "file": issue.file_path,
        "line": issue.line_number,
        "severity": issue.severity,
        "category": issue.category,
        "message": _LiteralText(issue.message),
    }
    fix = _sanitized_fix(issue)
    if fix:
        entry["suggested_fix"] = _LiteralText(fix)
    return yaml.dump(
        [entry],
        Dumper=_MachineBlockDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=4096,
    )


def location_label(finding: Praise, link_builder: LinkBuilder | None = None) -> str:
    location = finding.location
    if location is None:
        return "(no location)"
    file_path, line_number = location
    url = link_builder(file_path, line_number) if link_builder else None
    if not url:
        return f"`{file_path}:{line_number}`"
    return f"[{file_path}:{line_number}]({url})"


def render_inline(issue: Issue, config: RenderConfig | None = None) -> str:
    """Format one issue as an inline comment body."""
    config = config or RenderConfig()
    heading = (
        f"{severity_glyph(issue.severity)} **{issue.severity} "
        f"({category_glyph(issue.category)} {humanize_category(issue.category)}):**"
    )
    body = f"{heading}\n\n{issue.message}"

    fix = _sanitized_fix(issue)
    if fix:
        wrapped = wrap(fix, config.max_code_block_width)
        body += f"\n\n---\n\n{SUGGESTED_FIX_HEADING}\n\n```\n{wrapped}\n```"

    if config.include_machine_block_inline:
        body += f"\n\n---\n\n{MACHINE_BLOCK_HEADING}\n```yaml\n{render_machine_block(issue)}```"

    return body


def _render_praises(result: ReviewResult, link_builder: LinkBuilder | None) -> list[str]:
    lines = [f"### ✨ Praises ({result.summary.total_praises})", ""]
    for praise in result.praises:
        lines.append(
            f"- ✅ **{humanize_category(praise.category)}** in {location_label(praise, link_builder)}"
        )
        lines.append(f"  - {praise.message}")
        lines.append("")
    return lines


def _render_issues(
    result: ReviewResult,
    link_builder: LinkBuilder | None,
    config: RenderConfig,
) -> list[str]:
    counts = result.summary
    lines = [
        f"### ⚠️ Issues Found ({counts.total_issues})",
        "",
        "| Severity | Count |",
        "| :--- | :---: |",
    ]
    for severity in TABLE_SEVERITIES:
        count = getattr(counts, severity.value)
        if count > 0:
            lines.append(f"| {SEVERITY_GLYPHS[severity]} {severity.value.title()} | {count} |")
    lines.append("")

    for issue in result.issues:
        lines.append(
            f"- {severity_glyph(issue.severity)} **{issue.severity}** in "
            f"{location_label(issue, link_builder)} "
            f"({category_glyph(issue.category)} {humanize_category(issue.category)})"
        )
        lines += ["", issue.message, ""]

        fix = _sanitized_fix(issue)
        if fix:
            lines += [SUGGESTED_FIX_HEADING, "```", wrap(fix, config.max_code_block_width), "```"]

        if config.include_machine_block_in_summary:
            lines += [
                "",
                MACHINE_BLOCK_HEADING,
                "```yaml",
                render_machine_block(issue).rstrip("\n"),
                "```",
            ]
        lines.append("")
    return lines


def render_summary(
    result: ReviewResult | None,
    link_builder: LinkBuilder | None = None,
    config: RenderConfig | None = None,
) -> str:
    """Format the whole review as one summary comment.

    A result of None means the review service response could not be parsed,
    which renders the fixed failure notice.
    """
    config = config or RenderConfig()
    if result is None:
        return FAILURE_NOTICE

    counts = result.summary
    if counts.total_issues == 0 and counts.total_praises == 0:
        return EMPTY_NOTICE

    lines = [SUMMARY_TITLE, ""]
    if counts.total_praises > 0:
        lines += _render_praises(result, link_builder)
    if counts.total_issues > 0:
        lines += _render_issues(result, link_builder, config)
    return "\n".join(lines)
