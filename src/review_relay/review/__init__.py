from .parser import parse_review_result
from .renderer import render_inline, render_summary
from .engine import ReviewEngine, EngineRunResult, InlineOutcome, InlineStatus
from .gate import GateDecision, decide

__all__ = [
    "parse_review_result",
    "render_inline",
    "render_summary",
    "ReviewEngine",
    "EngineRunResult",
    "InlineOutcome",
    "InlineStatus",
    "GateDecision",
    "decide",
]
