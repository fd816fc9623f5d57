# src/review_relay/review/summary.py
import logging
from collections.abc import Iterable
import httpx
from review_relay.models.review import ExistingComment
from review_relay.platforms.base import GitPlatform
from .renderer import SUMMARY_SIGNATURE


logger = logging.getLogger(__name__)


def find_stale_summaries(
    comments: Iterable[ExistingComment],
    signature: str = SUMMARY_SIGNATURE,
) -> list[ExistingComment]:
    """Previously posted summaries, recognized by their signature text."""
    return [comment for comment in comments if signature in comment.body]


class SummaryManager:
    """Keeps one summary comment per pull request by deleting old ones before posting.

    On platforms that cannot delete comments, new summaries are simply appended.
    """

    def __init__(self, platform: GitPlatform, signature: str = SUMMARY_SIGNATURE):
        self.platform = platform
        self.signature = signature

    async def replace(self, body: str) -> bool:
        """Delete stale summaries, then post body. Returns whether the post succeeded."""
        if self.platform.supports_comment_deletion:
            await self._delete_stale()
        else:
            logger.info("Platform cannot delete comments, appending new summary")

        try:
            await self.platform.post_summary(body)
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Error posting summary comment. HTTP Status: {e.response.status_code}. "
                f"Response: {e.response.text}"
            )
            return False
        except httpx.HTTPError as e:
            logger.error(f"Error posting summary comment: {e}")
            return False

        logger.info("Successfully posted summary comment to pull request.")
        return True

    async def _delete_stale(self) -> None:
        try:
            existing = await self.platform.fetch_existing_summaries()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not fetch existing comments to delete old summaries: {e}")
            return

        for comment in find_stale_summaries(existing, self.signature):
            logger.info(f"Deleting old summary comment (ID: {comment.id})...")
            try:
                await self.platform.delete_comment(comment.id)
            except httpx.HTTPError as e:
                logger.warning(f"Could not delete comment {comment.id}: {e}")
