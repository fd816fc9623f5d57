# src/review_relay/providers/base.py
from abc import ABC, abstractmethod
from review_relay.models.review import ReviewRequest


class ReviewProvider(ABC):
    @abstractmethod
    async def trigger_review(self, request: ReviewRequest) -> str:
        """Ask the review service to review a commit and return its raw response body."""
        pass
