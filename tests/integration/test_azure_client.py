# tests/integration/test_azure_client.py
import json
import pytest
from review_relay.platforms.azure import AzureDevOpsClient, context_from_env


THREADS = "https://dev.azure.com/acme/Shop/_apis/git/repositories/repo-id/pullRequests/31/threads"


@pytest.fixture
def client():
    return AzureDevOpsClient(
        token="ado-token",
        collection_url="https://dev.azure.com/acme/",
        project="Shop",
        repository_id="repo-id",
        pull_request_id=31,
        commit_sha="0a1b2c",
        repository_url="https://dev.azure.com/acme/Shop/_git/api",
    )


@pytest.fixture
def threads(httpx_mock):
    httpx_mock.add_response(
        method="GET",
        url=f"{THREADS}?api-version=6.0",
        json={
            "value": [
                {
                    "id": 1,
                    "threadContext": {"filePath": "/src/app.py", "rightFileStart": {"line": 14, "offset": 1}},
                    "comments": [{"content": "inline"}],
                },
                {"id": 2, "threadContext": None, "comments": [{"content": "🤖 **Automated Code Review Results**"}]},
                {"id": 3, "isDeleted": True, "threadContext": {"filePath": "/gone.py", "rightFileStart": {"line": 1}}},
            ],
            "count": 3,
        },
    )


@pytest.mark.integration
@pytest.mark.asyncio
async def test_fetch_existing_annotations_strips_leading_slash(client, threads):
    annotations = await client.fetch_existing_annotations()

    assert [(a.file_path, a.line_number) for a in annotations] == [("src/app.py", 14), (None, None)]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_fetch_existing_summaries(client, threads):
    summaries = await client.fetch_existing_summaries()

    assert [(s.id, s.body) for s in summaries] == [(2, "🤖 **Automated Code Review Results**")]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_post_inline_annotation_adds_leading_slash(httpx_mock, client):
    httpx_mock.add_response(method="POST", url=f"{THREADS}?api-version=6.0", json={"id": 4})

    assert await client.post_inline_annotation("src/app.py", 20, "body") == 200

    payload = json.loads(httpx_mock.get_request().content)
    assert payload["threadContext"]["filePath"] == "/src/app.py"
    assert payload["threadContext"]["rightFileStart"] == {"line": 20, "offset": 1}
    assert payload["comments"][0]["content"] == "body"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_post_summary(httpx_mock, client):
    httpx_mock.add_response(method="POST", url=f"{THREADS}?api-version=6.0", json={"id": 5})

    await client.post_summary("summary")

    payload = json.loads(httpx_mock.get_request().content)
    assert "threadContext" not in payload
    assert payload["comments"] == [{"parentCommentId": 0, "content": "summary", "commentType": 1}]
    assert httpx_mock.get_request().headers["Authorization"] == "Bearer ado-token"


@pytest.mark.asyncio
async def test_deletion_and_statuses_are_unsupported(client):
    assert client.supports_comment_deletion is False
    assert client.supports_gate_status is False
    with pytest.raises(NotImplementedError):
        await client.delete_comment(2)


def test_build_link(client):
    assert client.build_link("docs/read me.md", 3) == (
        "https://dev.azure.com/acme/Shop/_git/api?path=/docs/read%20me.md&version=GC0a1b2c&line=3"
    )


def test_context_from_env():
    context = context_from_env({
        "BUILD_REPOSITORY_URI": "https://build@dev.azure.com/acme/Shop/_git/api",
        "SYSTEM_PULLREQUEST_SOURCECOMMITID": "0a1b2c",
        "SYSTEM_PULLREQUEST_TARGETBRANCH": "refs/heads/main",
        "SYSTEM_PULLREQUEST_SOURCEBRANCH": "refs/heads/feature/cart",
        "SYSTEM_PULLREQUEST_PULLREQUESTID": "31",
    })

    assert context.repo_url == "https://dev.azure.com/acme/Shop/_git/api"
    assert context.base_branch == "main"
    assert context.source_branch == "feature/cart"
    assert context.ticket_system == "ado"
