from typing import Any
from pydantic import BaseModel, Field, field_validator, model_validator


LocationKey = tuple[str, int]


def _as_text(value: Any, default: Any = "") -> Any:
    # Scalars are kept as their text; anything structured is unusable
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return default


def _as_list(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class ReviewCounts(BaseModel):
    total_issues: int = 0
    total_praises: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @field_validator("*", mode="before")
    @classmethod
    def null_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("*")
    @classmethod
    def negative_as_zero(cls, value: int) -> int:
        return max(0, value)


class Praise(BaseModel):
    file_path: str | None = None
    line_number: int | None = None
    message: str = ""
    category: str = ""

    @field_validator("message", "category", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("file_path", mode="before")
    @classmethod
    def blank_path_as_none(cls, value: Any) -> Any:
        return _as_text(value, None) or None

    @field_validator("line_number", mode="before")
    @classmethod
    def unusable_line_as_none(cls, value: Any) -> Any:
        # A finding with a garbled line is still summarized, just never inline
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, float) and not value.is_integer():
            return None
        try:
            line = int(value)
        except (TypeError, ValueError):
            return None
        return line if line >= 1 else None

    @property
    def location(self) -> LocationKey | None:
        """(file_path, line_number), or None when the finding has no inline anchor."""
        if not self.file_path or self.line_number is None:
            return None
        return (self.file_path, self.line_number)


class Issue(Praise):
    severity: str = "unknown"
    suggested_fix: str | None = None

    @field_validator("severity", mode="before")
    @classmethod
    def null_as_unknown(cls, value: Any) -> Any:
        return _as_text(value, "unknown")

    @field_validator("suggested_fix", mode="before")
    @classmethod
    def coerce_fix(cls, value: Any) -> Any:
        return _as_text(value, None)


class ReviewResult(BaseModel):
    summary: ReviewCounts = Field(default_factory=ReviewCounts)
    issues: list[Issue] = Field(default_factory=list)
    praises: list[Praise] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def lift_review_block(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        # The review service nests findings under "review"
        review = data.get("review") if isinstance(data.get("review"), dict) else {}
        return {
            **data,
            "summary": data.get("summary") or {},
            "issues": _as_list(data.get("issues") or review.get("issues")),
            "praises": _as_list(data.get("praises") or review.get("praises")),
        }


class ExistingAnnotation(BaseModel):
    file_path: str | None = None
    line_number: int | None = None


class ExistingComment(BaseModel):
    id: int | str
    body: str = ""


class ReviewRequest(BaseModel):
    repo_url: str
    commit_hash: str
    base_branch: str
    source_branch: str
    ticket_system: str | None = None
    vcs_token: str | None = None


class PullRequestContext(BaseModel):
    """Pull request identity extracted from the CI environment."""
    repo_url: str
    commit_hash: str
    base_branch: str
    source_branch: str
    pull_request_id: int
    ticket_system: str | None = None
