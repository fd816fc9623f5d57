import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any
import httpx
from review_relay.models.config import GateState
from review_relay.models.review import ExistingAnnotation, ExistingComment, PullRequestContext
from .base import GitPlatform


GATE_STATES = {GateState.PASS: "success", GateState.FAIL: "failure"}


def context_from_env(environ: Mapping[str, str]) -> PullRequestContext:
    """Read the pull request identity from a GitHub Actions pull_request event."""
    event = json.loads(Path(environ["GITHUB_EVENT_PATH"]).read_text(encoding="utf-8"))
    pull_request = event["pull_request"]
    server_url = environ.get("GITHUB_SERVER_URL", "https://github.com").rstrip("/")
    return PullRequestContext(
        repo_url=f"{server_url}/{environ['GITHUB_REPOSITORY']}.git",
        # The PR head, not the temporary merge commit
        commit_hash=pull_request["head"]["sha"],
        base_branch=pull_request["base"]["ref"],
        source_branch=pull_request["head"]["ref"],
        pull_request_id=pull_request["number"],
        ticket_system="github",
    )


class GitHubClient(GitPlatform):
    supports_comment_deletion = True
    supports_gate_status = True

    def __init__(
        self,
        token: str,
        repository: str,
        pull_number: int,
        commit_sha: str,
        server_url: str = "https://github.com",
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
    ):
        self.token = token
        self.repository = repository
        self.pull_number = pull_number
        self.commit_sha = commit_sha
        self.server_url = server_url.rstrip("/")
        self.repo_api_url = f"{api_url.rstrip('/')}/repos/{repository}"
        self.timeout = timeout

    @classmethod
    def from_env(
        cls,
        token: str,
        context: PullRequestContext,
        environ: Mapping[str, str],
        timeout: float = 30.0,
    ) -> "GitHubClient":
        return cls(
            token=token,
            repository=environ["GITHUB_REPOSITORY"],
            pull_number=context.pull_request_id,
            commit_sha=context.commit_hash,
            server_url=environ.get("GITHUB_SERVER_URL", "https://github.com"),
            api_url=environ.get("GITHUB_API_URL", "https://api.github.com"),
            timeout=timeout,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github.v3+json",
        }

    async def _fetch_all(self, url: str) -> list[dict[str, Any]]:
        """GET every page of a list endpoint by following the Link header."""
        items: list[dict[str, Any]] = []
        next_url: str | None = url
        params: dict[str, int] | None = {"per_page": 100}
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
                if not isinstance(page, list):
                    raise ValueError(f"Expected a list from {next_url}, got {type(page).__name__}")
                items.extend(page)
                # The next link already carries the query string
                next_url = response.links.get("next", {}).get("url")
                params = None
        return items

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
        comments = await self._fetch_all(f"{self.repo_api_url}/pulls/{self.pull_number}/comments")
        return [
            ExistingAnnotation(file_path=comment.get("path"), line_number=comment.get("line"))
            for comment in comments
        ]

    async def post_inline_annotation(self, file_path: str, line_number: int, body: str) -> int:
        return await self._post(
            f"{self.repo_api_url}/pulls/{self.pull_number}/comments",
            {
                "body": body,
                "commit_id": self.commit_sha,
                "path": file_path,
                "line": line_number,
            },
        )

    async def fetch_existing_summaries(self) -> list[ExistingComment]:
        comments = await self._fetch_all(f"{self.repo_api_url}/issues/{self.pull_number}/comments")
        return [
            ExistingComment(id=comment["id"], body=comment.get("body") or "")
            for comment in comments
        ]

    async def delete_comment(self, comment_id: int | str) -> int:
        async with httpx.AsyncClient() as client:
            response = await client.delete(
                f"{self.repo_api_url}/issues/comments/{comment_id}",
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.status_code

    async def post_summary(self, body: str) -> int:
        # Summaries go on the conversation tab, not the review diff
        return await self._post(
            f"{self.repo_api_url}/issues/{self.pull_number}/comments",
            {"body": body},
        )

    async def report_gate_status(self, state: GateState, description: str, context: str) -> int:
        return await self._post(
            f"{self.repo_api_url}/statuses/{self.commit_sha}",
            {
                "state": GATE_STATES[state],
                "description": description,
                "context": context,
            },
        )

    def build_link(self, file_path: str, line_number: int) -> str:
        return f"{self.server_url}/{self.repository}/blob/{self.commit_sha}/{file_path}#L{line_number}"
