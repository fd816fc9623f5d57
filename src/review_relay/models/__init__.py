from .config import Category, GateState, RenderConfig, Severity
from .review import (
    ExistingAnnotation,
    ExistingComment,
    Issue,
    LocationKey,
    Praise,
    PullRequestContext,
    ReviewCounts,
    ReviewRequest,
    ReviewResult,
)

__all__ = [
    "Category",
    "GateState",
    "RenderConfig",
    "Severity",
    "ExistingAnnotation",
    "ExistingComment",
    "Issue",
    "LocationKey",
    "Praise",
    "PullRequestContext",
    "ReviewCounts",
    "ReviewRequest",
    "ReviewResult",
]
