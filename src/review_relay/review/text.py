# src/review_relay/review/text.py
import re
import textwrap
from review_relay.models.config import Category, Severity


SEVERITY_GLYPHS = {
    Severity.CRITICAL: "🟣",
    Severity.HIGH: "🔴",
    Severity.MEDIUM: "🟠",
    Severity.LOW: "🟡",
}
DEFAULT_SEVERITY_GLYPH = "⚪️"

CATEGORY_GLYPHS = {
    Category.BUG: "🐞",
    Category.SECURITY: "🛡️",
    Category.BEST_PRACTICE: "✨",
    Category.DEPENDENCY: "📦",
    Category.PERFORMANCE: "🚀",
    Category.RBAC: "🔑",
    Category.SYNTAX: "📝",
}
DEFAULT_CATEGORY_GLYPH = "📝"

_OPENING_FENCE = re.compile(r"\A[ \t]*```[\w.+#-]*[ \t]*(?:\n|\Z)")
_CLOSING_FENCE = re.compile(r"(?:\A|\n)[ \t]*```[ \t]*\n?\Z")


def humanize_category(category: str) -> str:
    """best_practice -> Best Practice."""
    words = category.replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def severity_glyph(severity: str) -> str:
    try:
        return SEVERITY_GLYPHS[Severity(severity)]
    except ValueError:
        return DEFAULT_SEVERITY_GLYPH


def category_glyph(category: str) -> str:
    try:
        return CATEGORY_GLYPHS[Category(category)]
    except ValueError:
        return DEFAULT_CATEGORY_GLYPH


def sanitize_fence(text: str) -> str:
    """Strip a leading ```lang line and a trailing ``` line.

    Runs to a fixed point, so nested or doubled fences collapse and a second
    call is always a no-op.
    """
    previous = None
    while text != previous:
        previous = text
        text = _OPENING_FENCE.sub("", text, count=1)
        text = _CLOSING_FENCE.sub("", text, count=1)
    return text


def wrap(text: str, width: int) -> str:
    """Fold lines longer than width, preferring whitespace breaks (like `fold -s`)."""
    wrapper = textwrap.TextWrapper(
        width=width,
        expand_tabs=False,
        replace_whitespace=False,
        drop_whitespace=False,
        break_on_hyphens=False,
        break_long_words=True,
    )
    lines = []
    for line in text.split("\n"):
        if len(line) <= width:
            lines.append(line)
        else:
            lines.extend(wrapper.wrap(line))
    return "\n".join(lines)
