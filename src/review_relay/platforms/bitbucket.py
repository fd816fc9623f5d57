from collections.abc import Mapping
from typing import Any
import httpx
from review_relay.models.config import GateState
from review_relay.models.review import ExistingAnnotation, ExistingComment, PullRequestContext
from .base import GitPlatform


GATE_STATES = {GateState.PASS: "SUCCESSFUL", GateState.FAIL: "FAILED"}
STATUS_KEY = "code-review"


def context_from_env(environ: Mapping[str, str]) -> PullRequestContext:
    """Read the pull request identity from Bitbucket Pipelines variables."""
    return PullRequestContext(
        repo_url=environ["BITBUCKET_GIT_HTTP_ORIGIN"],
        commit_hash=environ["BITBUCKET_COMMIT"],
        base_branch=environ["BITBUCKET_PR_DESTINATION_BRANCH"],
        source_branch=environ["BITBUCKET_BRANCH"],
        pull_request_id=int(environ["BITBUCKET_PR_ID"]),
    )


class BitbucketClient(GitPlatform):
    supports_comment_deletion = True
    supports_gate_status = True

    def __init__(
        self,
        token: str,
        workspace: str,
        repo_slug: str,
        pull_request_id: int,
        commit_sha: str,
        origin_url: str,
        api_url: str = "https://api.bitbucket.org/2.0",
        timeout: float = 30.0,
    ):
        self.token = token
        self.workspace = workspace
        self.repo_slug = repo_slug
        self.pull_request_id = pull_request_id
        self.commit_sha = commit_sha
        self.origin_url = origin_url.rstrip("/")
        self.repo_api_url = f"{api_url.rstrip('/')}/repositories/{workspace}/{repo_slug}"
        self.comments_url = f"{self.repo_api_url}/pullrequests/{pull_request_id}/comments"
        self.timeout = timeout

    @classmethod
    def from_env(
        cls,
        token: str,
        context: PullRequestContext,
        environ: Mapping[str, str],
        timeout: float = 30.0,
    ) -> "BitbucketClient":
        return cls(
            token=token,
            workspace=environ["BITBUCKET_WORKSPACE"],
            repo_slug=environ["BITBUCKET_REPO_SLUG"],
            pull_request_id=context.pull_request_id,
            commit_sha=context.commit_hash,
            origin_url=context.repo_url,
            timeout=timeout,
        )

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    async def _fetch_comments(self) -> list[dict[str, Any]]:
        """All pull request comments, following the paged `next` links."""
        comments: list[dict[str, Any]] = []
        next_url: str | None = self.comments_url
        params: dict[str, int] | None = {"pagelen": 100}
        async with httpx.AsyncClient() as client:
            while next_url:
                response = await client.get(
                    next_url,
                    headers=self._headers(),
                    params=params,
                    timeout=self.timeout,
                )
                response.raise_for_status()
                page = response.json()
                if not isinstance(page, dict) or not isinstance(page.get("values"), list):
                    raise ValueError(f"Unexpected comment page from {next_url}")
                comments.extend(c for c in page["values"] if not c.get("deleted"))
                next_url = page.get("next")
                params = None
        return comments

    async def _post(self, url: str, payload: dict[str, Any]) -> int:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                url,
                headers=self._headers(),
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.status_code

    async def fetch_existing_annotations(self) -> list[ExistingAnnotation]:
        annotations = []
        for comment in await self._fetch_comments():
            inline = comment.get("inline") or {}
            annotations.append(
                ExistingAnnotation(file_path=inline.get("path"), line_number=inline.get("to"))
            )
        return annotations

    async def post_inline_annotation(self, file_path: str, line_number: int, body: str) -> int:
        return await self._post(
            self.comments_url,
            {
                "content": {"raw": body},
                "inline": {"path": file_path, "to": line_number},
            },
        )

    async def fetch_existing_summaries(self) -> list[ExistingComment]:
        return [
            ExistingComment(id=comment["id"], body=(comment.get("content") or {}).get("raw") or "")
            for comment in await self._fetch_comments()
            if not comment.get("inline")
        ]

    async def delete_comment(self, comment_id: int | str) -> int:
        async with httpx.AsyncClient() as client:
            response = await client.delete(
                f"{self.comments_url}/{comment_id}",
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.status_code

    async def post_summary(self, body: str) -> int:
        return await self._post(self.comments_url, {"content": {"raw": body}})

    async def report_gate_status(self, state: GateState, description: str, context: str) -> int:
        return await self._post(
            f"{self.repo_api_url}/commit/{self.commit_sha}/statuses/build",
            {
                "key": STATUS_KEY,
                "state": GATE_STATES[state],
                "name": context,
                "description": description,
                "url": f"{self.origin_url}/pull-requests/{self.pull_request_id}",
            },
        )

    def build_link(self, file_path: str, line_number: int) -> str:
        return f"{self.origin_url}/src/{self.commit_sha}/{file_path}#lines-{line_number}"
