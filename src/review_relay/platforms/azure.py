import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote
import httpx
from review_relay.models.review import ExistingAnnotation, ExistingComment, PullRequestContext
from .base import GitPlatform


API_VERSION = "6.0"

# Azure DevOps comment thread constants
COMMENT_TYPE_TEXT = 1
THREAD_STATUS_ACTIVE = 1


def _strip_credentials(url: str) -> str:
    return re.sub(r"^(https?://)[^/@]*@", r"\1", url)


def _strip_ref_prefix(ref: str) -> str:
    return ref.removeprefix("refs/heads/")


def context_from_env(environ: Mapping[str, str]) -> PullRequestContext:
    """Read the pull request identity from Azure Pipelines variables."""
    return PullRequestContext(
        repo_url=_strip_credentials(environ["BUILD_REPOSITORY_URI"]),
        commit_hash=environ["SYSTEM_PULLREQUEST_SOURCECOMMITID"],
        base_branch=_strip_ref_prefix(environ["SYSTEM_PULLREQUEST_TARGETBRANCH"]),
        source_branch=_strip_ref_prefix(environ["SYSTEM_PULLREQUEST_SOURCEBRANCH"]),
        pull_request_id=int(environ["SYSTEM_PULLREQUEST_PULLREQUESTID"]),
        ticket_system="ado",
    )


class AzureDevOpsClient(GitPlatform):
    """Azure DevOps pull request threads.

    Thread file paths are repository-rooted ("/src/app.py"); the leading slash
    is removed on read and added on write so the engine sees plain relative
    paths. Old summaries are never deleted and no status is reported.
    """

    def __init__(
        self,
        token: str,
        collection_url: str,
        project: str,
        repository_id: str,
        pull_request_id: int,
        commit_sha: str,
        repository_url: str,
        timeout: float = 30.0,
    ):
        self.token = token
        self.pull_request_id = pull_request_id
        self.commit_sha = commit_sha
        self.repository_url = repository_url
        self.threads_url = (
            f"{collection_url.rstrip('/')}/{project}/_apis/git/repositories/"
            f"{repository_id}/pullRequests/{pull_request_id}/threads"
        )
        self.timeout = timeout

    @classmethod
    def from_env(
        cls,
        token: str,
        context: PullRequestContext,
        environ: Mapping[str, str],
        timeout: float = 30.0,
    ) -> "AzureDevOpsClient":
        return cls(
            token=token,
            collection_url=environ["SYSTEM_TEAMFOUNDATIONCOLLECTIONURI"],
            project=environ["SYSTEM_TEAMPROJECT"],
            repository_id=environ["BUILD_REPOSITORY_ID"],
            pull_request_id=context.pull_request_id,
            commit_sha=context.commit_hash,
            repository_url=context.repo_url,
            timeout=timeout,
        )

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    async def _fetch_threads(self) -> list[dict[str, Any]]:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                self.threads_url,
                headers=self._headers(),
                params={"api-version": API_VERSION},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        if not isinstance(data, dict) or not isinstance(data.get("value"), list):
            raise ValueError("Unexpected thread list from Azure DevOps")
        return [thread for thread in data["value"] if not thread.get("isDeleted")]

    async def _post_thread(self, payload: dict[str, Any]) -> int:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                self.threads_url,
                headers=self._headers(),
                params={"api-version": API_VERSION},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.status_code

    async def fetch_existing_annotations(self) -> list[ExistingAnnotation]:
        annotations = []
        for thread in await self._fetch_threads():
            context = thread.get("threadContext") or {}
            file_path = context.get("filePath")
            start = context.get("rightFileStart") or {}
            annotations.append(
                ExistingAnnotation(
                    file_path=file_path.lstrip("/") if file_path else None,
                    line_number=start.get("line"),
                )
            )
        return annotations

    async def post_inline_annotation(self, file_path: str, line_number: int, body: str) -> int:
        return await self._post_thread({
            "comments": [
                {"parentCommentId": 0, "content": body, "commentType": COMMENT_TYPE_TEXT}
            ],
            "status": THREAD_STATUS_ACTIVE,
            "threadContext": {
                "filePath": f"/{file_path}",
                "rightFileStart": {"line": line_number, "offset": 1},
                "rightFileEnd": {"line": line_number, "offset": 1},
            },
        })

    async def fetch_existing_summaries(self) -> list[ExistingComment]:
        summaries = []
        for thread in await self._fetch_threads():
            if thread.get("threadContext"):
                continue
            comments = thread.get("comments") or [{}]
            summaries.append(ExistingComment(id=thread["id"], body=comments[0].get("content") or ""))
        return summaries

    async def post_summary(self, body: str) -> int:
        return await self._post_thread({
            "comments": [
                {"parentCommentId": 0, "content": body, "commentType": COMMENT_TYPE_TEXT}
            ],
            "status": THREAD_STATUS_ACTIVE,
        })

    def build_link(self, file_path: str, line_number: int) -> str:
        return (
            f"{self.repository_url}?path=/{quote(file_path)}"
            f"&version=GC{self.commit_sha}&line={line_number}"
        )
