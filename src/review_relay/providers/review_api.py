# src/review_relay/providers/review_api.py
import logging
import httpx
from .base import ReviewProvider
from review_relay.models.review import ReviewRequest


logger = logging.getLogger(__name__)


class ReviewApiProvider(ReviewProvider):
    def __init__(self, api_url: str, api_key: str, timeout: float = 600.0):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout

    async def trigger_review(self, request: ReviewRequest) -> str:
        logger.info(f"Triggering code review for commit {request.commit_hash}...")
        async with httpx.AsyncClient() as client:
            response = await client.post(
                self.api_url,
                headers={"X-API-Key": self.api_key},
                json=request.model_dump(exclude_none=True),
                timeout=self.timeout,
            )
            response.raise_for_status()

        logger.info(f"Review service responded with HTTP {response.status_code}, {len(response.text)} chars")
        logger.debug(f"Raw review response: {response.text}")
        return response.text
