# tests/unit/test_summary.py
import httpx
import pytest
from unittest.mock import AsyncMock
from review_relay.models.review import ExistingComment
from review_relay.platforms.base import GitPlatform
from review_relay.review.renderer import EMPTY_NOTICE, SUMMARY_TITLE
from review_relay.review.summary import SummaryManager, find_stale_summaries


OLD_SUMMARY = ExistingComment(id=101, body=f"{SUMMARY_TITLE}\n\n### ⚠️ Issues Found (2)")
OLD_EMPTY_SUMMARY = ExistingComment(id=102, body=EMPTY_NOTICE)
HUMAN_COMMENT = ExistingComment(id=103, body="Thanks, will fix tomorrow")


@pytest.fixture
def mock_platform():
    client = AsyncMock(spec=GitPlatform)
    client.supports_comment_deletion = True
    client.fetch_existing_summaries.return_value = [OLD_SUMMARY, HUMAN_COMMENT, OLD_EMPTY_SUMMARY]
    client.delete_comment.return_value = 204
    client.post_summary.return_value = 201
    return client


@pytest.mark.unit
def test_find_stale_summaries_matches_signature_only():
    stale = find_stale_summaries([OLD_SUMMARY, HUMAN_COMMENT, OLD_EMPTY_SUMMARY])
    assert [comment.id for comment in stale] == [101, 102]


@pytest.mark.asyncio
async def test_replace_deletes_old_summaries_then_posts(mock_platform):
    manager = SummaryManager(mock_platform)

    posted = await manager.replace("new summary")

    assert posted is True
    deleted = [call.args[0] for call in mock_platform.delete_comment.call_args_list]
    assert deleted == [101, 102]
    mock_platform.post_summary.assert_called_once_with("new summary")


@pytest.mark.asyncio
async def test_delete_failure_does_not_block_post(mock_platform):
    mock_platform.delete_comment.side_effect = httpx.ConnectError("connection reset")
    manager = SummaryManager(mock_platform)

    assert await manager.replace("new summary") is True
    assert mock_platform.delete_comment.call_count == 2
    mock_platform.post_summary.assert_called_once_with("new summary")


@pytest.mark.asyncio
async def test_fetch_failure_still_posts(mock_platform):
    mock_platform.fetch_existing_summaries.side_effect = ValueError("not a list")
    manager = SummaryManager(mock_platform)

    assert await manager.replace("new summary") is True
    mock_platform.delete_comment.assert_not_called()


@pytest.mark.asyncio
async def test_platform_without_deletion_appends(mock_platform):
    mock_platform.supports_comment_deletion = False
    manager = SummaryManager(mock_platform)

    assert await manager.replace("new summary") is True
    mock_platform.fetch_existing_summaries.assert_not_called()
    mock_platform.delete_comment.assert_not_called()
    mock_platform.post_summary.assert_called_once_with("new summary")


@pytest.mark.asyncio
async def test_post_failure_is_reported(mock_platform):
    request = httpx.Request("POST", "https://api.example.test/comments")
    mock_platform.post_summary.side_effect = httpx.HTTPStatusError(
        "forbidden",
        request=request,
        response=httpx.Response(403, text="Resource not accessible", request=request),
    )
    manager = SummaryManager(mock_platform)

    assert await manager.replace("new summary") is False
