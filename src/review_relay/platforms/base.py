from abc import ABC, abstractmethod
from review_relay.models.review import ExistingAnnotation, ExistingComment
from review_relay.models.config import GateState


class GitPlatform(ABC):
    """Pull request operations the review engine needs from a hosting platform.

    Write operations return the HTTP status code and raise httpx.HTTPError on
    failure. Fetch operations return fully de-paginated lists.
    """

    supports_comment_deletion: bool = False
    supports_gate_status: bool = False

    @abstractmethod
    async def fetch_existing_annotations(self) -> list[ExistingAnnotation]:
        pass

    @abstractmethod
    async def post_inline_annotation(self, file_path: str, line_number: int, body: str) -> int:
        pass

    @abstractmethod
    async def fetch_existing_summaries(self) -> list[ExistingComment]:
        pass

    @abstractmethod
    async def post_summary(self, body: str) -> int:
        pass

    @abstractmethod
    def build_link(self, file_path: str, line_number: int) -> str | None:
        pass

    async def delete_comment(self, comment_id: int | str) -> int:
        raise NotImplementedError(f"{type(self).__name__} cannot delete comments")

    async def report_gate_status(self, state: GateState, description: str, context: str) -> int:
        raise NotImplementedError(f"{type(self).__name__} cannot report commit statuses")
