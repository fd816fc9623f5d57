# src/review_relay/review/engine.py
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
import httpx
from review_relay.models.config import RenderConfig
from review_relay.models.review import Issue, ReviewResult
from review_relay.platforms.base import GitPlatform
from .gate import GateDecision, decide
from .index import LocationIndex
from .parser import parse_review_result
from .renderer import render_inline, render_summary
from .summary import SummaryManager


logger = logging.getLogger(__name__)


class InlineStatus(str, Enum):
    POSTED = "posted"
    FAILED = "failed"
    DUPLICATE = "duplicate"
    INELIGIBLE = "ineligible"


@dataclass
class InlineOutcome:
    """What happened to one issue during inline dispatch."""
    file_path: str | None
    line_number: int | None
    status: InlineStatus
    status_code: int | None = None
    error: str | None = None


@dataclass
class EngineRunResult:
    """Result of posting one review to a pull request."""
    inline: list[InlineOutcome] = field(default_factory=list)
    summary_posted: bool = False
    gate: GateDecision | None = None

    @property
    def comments_count(self) -> int:
        return sum(1 for outcome in self.inline if outcome.status == InlineStatus.POSTED)

    @property
    def exit_code(self) -> int:
        # Only a missing summary fails the run; everything else is partial feedback
        return 0 if self.summary_posted else 1


class ReviewEngine:
    def __init__(
        self,
        platform: GitPlatform,
        render_config: RenderConfig | None = None,
        gate_context: str = "Code Review",
        max_concurrent_posts: int = 4,
    ):
        self.platform = platform
        self.render_config = render_config or RenderConfig()
        self.gate_context = gate_context
        self.max_concurrent_posts = max(1, max_concurrent_posts)
        self.summaries = SummaryManager(platform)

    async def run(self, raw_review: str) -> EngineRunResult:
        """Post inline comments, the summary and the gate status for one review response."""
        result = parse_review_result(raw_review)
        run_result = EngineRunResult()

        if result is None:
            logger.warning("No usable review result, skipping inline comments")
        elif result.summary.total_issues > 0:
            run_result.inline = await self.reconcile(result)
        elif result.issues:
            logger.warning(
                f"Review lists {len(result.issues)} issues but reports none in its summary, "
                "skipping inline comments"
            )

        summary = render_summary(result, self.platform.build_link, self.render_config)
        logger.debug(f"Summary comment content:\n{summary}")
        run_result.summary_posted = await self.summaries.replace(summary)

        if result is not None:
            run_result.gate = decide(result.summary.critical)
            await self._report_gate(run_result.gate)

        return run_result

    async def reconcile(self, result: ReviewResult) -> list[InlineOutcome]:
        """Post one inline comment per issue location not already commented on.

        Locations are claimed in issue order before any post is sent, so two
        issues at the same file:line produce a single comment. A failed post
        keeps its claim and is not retried.
        """
        index = await self._load_index()

        outcomes: list[InlineOutcome | None] = []
        pending: list[tuple[int, Issue]] = []
        for issue in result.issues:
            location = issue.location
            if location is None:
                outcomes.append(
                    InlineOutcome(issue.file_path, issue.line_number, InlineStatus.INELIGIBLE)
                )
                continue

            if index.contains(location):
                logger.info(
                    f"Skipping comment on {issue.file_path}:{issue.line_number} "
                    "as a comment already exists there."
                )
                outcomes.append(
                    InlineOutcome(issue.file_path, issue.line_number, InlineStatus.DUPLICATE)
                )
                continue

            index.add(location)
            pending.append((len(outcomes), issue))
            outcomes.append(None)

        semaphore = asyncio.Semaphore(self.max_concurrent_posts)
        posted = await asyncio.gather(*(self._post_inline(issue, semaphore) for _, issue in pending))
        for (slot, _), outcome in zip(pending, posted):
            outcomes[slot] = outcome

        failed = sum(1 for outcome in posted if outcome.status == InlineStatus.FAILED)
        logger.info(f"Posted {len(posted) - failed} inline comments, {failed} failed")
        return outcomes

    async def _load_index(self) -> LocationIndex:
        logger.info("Fetching existing review comments to prevent duplicates...")
        try:
            annotations = await self.platform.fetch_existing_annotations()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                f"Could not fetch or parse existing comments. Duplicate checking will be skipped: {e}"
            )
            return LocationIndex()

        index = LocationIndex.build(annotations)
        logger.info(f"Found comments at {len(index)} unique locations.")
        return index

    async def _post_inline(self, issue: Issue, semaphore: asyncio.Semaphore) -> InlineOutcome:
        body = render_inline(issue, self.render_config)
        async with semaphore:
            try:
                status_code = await self.platform.post_inline_annotation(
                    issue.file_path, issue.line_number, body
                )
            except httpx.HTTPStatusError as e:
                logger.error(
                    f"Error posting an inline comment on {issue.file_path}:{issue.line_number}. "
                    f"HTTP Status: {e.response.status_code}. Response: {e.response.text}"
                )
                return InlineOutcome(
                    issue.file_path,
                    issue.line_number,
                    InlineStatus.FAILED,
                    status_code=e.response.status_code,
                    error=e.response.text,
                )
            except httpx.HTTPError as e:
                logger.error(f"Error posting an inline comment on {issue.file_path}:{issue.line_number}: {e}")
                return InlineOutcome(
                    issue.file_path, issue.line_number, InlineStatus.FAILED, error=str(e)
                )

        logger.info(f"Successfully posted an inline comment on {issue.file_path}:{issue.line_number}.")
        return InlineOutcome(
            issue.file_path, issue.line_number, InlineStatus.POSTED, status_code=status_code
        )

    async def _report_gate(self, decision: GateDecision) -> None:
        if not self.platform.supports_gate_status:
            logger.info(f"Platform cannot report commit statuses, gate result: {decision.state.value}")
            return

        try:
            await self.platform.report_gate_status(
                decision.state, decision.description, self.gate_context
            )
        except httpx.HTTPError as e:
            logger.warning(f"Could not post commit status: {e}")
            return
        logger.info(f"Successfully posted commit status: {decision.state.value}")
