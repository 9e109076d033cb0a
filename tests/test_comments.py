"""Tests for issue and pull request comment management."""

from unittest.mock import AsyncMock, Mock

import pytest

from gitagent.comments import (
    AUTO_REPLY_MARKER,
    CommentManager,
    extract_number,
    has_bot_reply,
)
from gitagent.config import CommentsConfig
from gitagent.github import GitHubClient


@pytest.fixture
def github():
    client = Mock(spec=GitHubClient)
    client.list_issues = AsyncMock(return_value=[])
    client.list_pull_requests = AsyncMock(return_value=[])
    client.list_issue_comments = AsyncMock(return_value=[])
    client.list_pull_request_comments = AsyncMock(return_value=[])
    client.create_issue_comment = AsyncMock(return_value={"id": 1})
    client.delete_comment = AsyncMock(return_value=True)
    return client


@pytest.fixture
def manager(github, mock_console):
    return CommentManager(CommentsConfig(), github, mock_console)


def test_extract_number():
    assert extract_number("issue#123") == 123
    assert extract_number("pr#4") == 4
    assert extract_number("issue") is None


def test_has_bot_reply():
    assert has_bot_reply([{"body": f"Thanks\n\n{AUTO_REPLY_MARKER}", "user": {"type": "User"}}])
    assert has_bot_reply([{"body": "This is an automated reply", "user": {"type": "Bot"}}])
    assert not has_bot_reply([{"body": "automated", "user": {"type": "User"}}])
    assert not has_bot_reply([])


@pytest.mark.parametrize(
    "labels,expected",
    [
        (["bug"], "Bug acknowledged. Will prioritize this fix. 🐛"),
        (["Feature"], "Feature request acknowledged! 🎯 We'll consider this for future releases."),
        (["documentation"], "Documentation improvement noted! 📚 We'll update our docs accordingly."),
        (["question"], "We are looking into this issue. 👍"),
        ([], "We are looking into this issue. 👍"),
    ],
)
def test_issue_reply(manager, labels, expected):
    issue = {"number": 1, "labels": [{"name": name} for name in labels]}
    assert manager.issue_reply(issue) == expected


def test_issue_reply_prefers_configured_template(github, mock_console):
    config = CommentsConfig().model_copy(
        update={"templates": {**CommentsConfig().templates, "feature": "Noted!"}}
    )
    manager = CommentManager(config, github, mock_console)
    assert manager.issue_reply({"labels": [{"name": "feature"}]}) == "Noted!"


def test_pull_request_reply(manager):
    assert manager.pull_request_reply({"state": "open"}) == "Thank you for your contribution! 🚀"
    assert manager.pull_request_reply({"state": "closed"}) == ""


@pytest.mark.asyncio
async def test_auto_reply(manager, github):
    github.list_issues.return_value = [
        {"number": 1, "labels": [{"name": "bug"}]},
        {"number": 2, "labels": []},
    ]
    github.list_pull_requests.return_value = [{"number": 3, "state": "open"}]

    async def comments(number):
        if number == 2:
            return [{"body": AUTO_REPLY_MARKER, "user": {"type": "Bot"}}]
        return []

    github.list_issue_comments.side_effect = comments

    posted = await manager.auto_reply()

    assert posted == 2
    numbers = [call.args[0] for call in github.create_issue_comment.await_args_list]
    assert numbers == [1, 3]
    body = github.create_issue_comment.await_args_list[0].args[1]
    assert body.startswith("Bug acknowledged.")
    assert body.endswith(AUTO_REPLY_MARKER)


@pytest.mark.asyncio
async def test_auto_reply_disabled(github, mock_console):
    config = CommentsConfig(auto_reply=False)
    manager = CommentManager(config, github, mock_console)
    assert await manager.auto_reply() == 0
    github.list_issues.assert_not_called()


@pytest.mark.asyncio
async def test_auto_reply_continues_after_failure(manager, github):
    github.list_issues.return_value = [
        {"number": 1, "labels": []},
        {"number": 2, "labels": []},
    ]
    github.create_issue_comment.side_effect = [None, {"id": 2}]
    assert await manager.auto_reply() == 1


@pytest.mark.asyncio
async def test_list_comments(manager, github):
    github.list_issue_comments.return_value = [{"body": "hello", "user": {"login": "octo"}}]
    github.list_pull_request_comments.return_value = [{"body": "nit", "user": {"login": "cat"}}]

    assert len(await manager.list_comments("issue#5")) == 1
    github.list_pull_request_comments.assert_not_called()

    assert len(await manager.list_comments("pr#5")) == 2


@pytest.mark.asyncio
async def test_create_and_delete_comment(manager, github):
    assert await manager.create_comment("pr#7", "LGTM") == {"id": 1}
    github.create_issue_comment.assert_awaited_once_with(7, "LGTM")

    assert await manager.delete_comment("comment#9") is True
    github.delete_comment.assert_awaited_once_with(9)


@pytest.mark.asyncio
async def test_invalid_target(manager):
    with pytest.raises(ValueError):
        await manager.create_comment("issue", "hi")
    with pytest.raises(ValueError):
        await manager.delete_comment("comment")
