# src/review_relay/main.py
import asyncio
import logging
import os
import sys
from collections.abc import Mapping
from functools import lru_cache
import httpx

from review_relay.config import Settings
from review_relay.models.review import PullRequestContext, ReviewRequest
from review_relay.platforms import azure, bitbucket, github
from review_relay.platforms.base import GitPlatform
from review_relay.providers.review_api import ReviewApiProvider
from review_relay.review.engine import ReviewEngine


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_platform(
    settings: Settings,
    environ: Mapping[str, str],
) -> tuple[GitPlatform, PullRequestContext]:
    """Build the platform client and pull request context for the configured CI."""
    if settings.platform == "github":
        token, module, client_cls = settings.github_token, github, github.GitHubClient
    elif settings.platform == "bitbucket":
        token, module, client_cls = settings.bitbucket_token, bitbucket, bitbucket.BitbucketClient
    else:
        token, module, client_cls = settings.ado_personal_access_token, azure, azure.AzureDevOpsClient

    if not token:
        raise ValueError(f"No access token configured for platform {settings.platform}")

    context = module.context_from_env(environ)
    client = client_cls.from_env(token, context, environ, timeout=settings.request_timeout)
    return client, context


async def run_review(settings: Settings, environ: Mapping[str, str]) -> int:
    """Run one review for the pull request described by environ. Returns the exit code."""
    platform, context = get_platform(settings, environ)
    provider = ReviewApiProvider(
        api_url=settings.review_api_url,
        api_key=settings.review_api_key,
        timeout=settings.review_timeout,
    )
    request = ReviewRequest(
        repo_url=context.repo_url,
        commit_hash=context.commit_hash,
        base_branch=context.base_branch,
        source_branch=context.source_branch,
        ticket_system=context.ticket_system,
        vcs_token=settings.github_token if settings.platform == "github" else None,
    )

    try:
        raw_review = await provider.trigger_review(request)
    except httpx.HTTPError as e:
        logger.error(f"Review service call failed: {e}")
        raw_review = ""

    engine = ReviewEngine(
        platform=platform,
        render_config=settings.render_config(),
        gate_context=settings.gate_context,
        max_concurrent_posts=settings.max_concurrent_posts,
    )
    result = await engine.run(raw_review)
    logger.info(
        f"Review completed for PR #{context.pull_request_id}: "
        f"{result.comments_count} inline comments posted, summary posted: {result.summary_posted}"
    )
    return result.exit_code


def main() -> None:
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    sys.exit(asyncio.run(run_review(settings, os.environ)))


if __name__ == "__main__":
    main()
