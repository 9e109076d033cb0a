"""Issue and pull request comment management."""
import re
from typing import Any, Dict, List, Optional

from rich.console import Console

from .config import CommentsConfig
from .github import GitHubClient
from .log import get_logger

logger = get_logger(__name__)

AUTO_REPLY_MARKER = "<!-- git-agent automated reply -->"
BOT_USER_TYPE = "Bot"
PREVIEW_LENGTH = 100

# Replies for label keywords that have no template of their own
KEYWORD_REPLIES = {
    "feature": "Feature request acknowledged! 🎯 We'll consider this for future releases.",
    "help wanted": "Community help appreciated! 🙏 Anyone interested in contributing to this issue?",
    "documentation": "Documentation improvement noted! 📚 We'll update our docs accordingly.",
}

_NUMBER_PATTERN = re.compile(r"#(\d+)")


def extract_number(target: str) -> Optional[int]:
    """Number after the ``#`` in targets like ``issue#12`` or ``comment#7``."""
    match = _NUMBER_PATTERN.search(target or "")
    return int(match.group(1)) if match else None


def is_pull_request_target(target: str) -> bool:
    return "pr" in target.lower()


def has_bot_reply(comments: List[Dict[str, Any]]) -> bool:
    """Whether an automated reply was already posted in this thread."""
    for comment in comments:
        body = comment.get("body") or ""
        if AUTO_REPLY_MARKER in body:
            return True
        user = comment.get("user") or {}
        if user.get("type") == BOT_USER_TYPE and "automated" in body.lower():
            return True
    return False


class CommentManager:
    """Replies to open issues and pull requests and manages single comments."""

    def __init__(
        self,
        config: CommentsConfig,
        github: GitHubClient,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.github = github
        self.console = console or Console()

    def issue_reply(self, issue: Dict[str, Any]) -> str:
        """Reply template chosen from the issue's labels.

        The first configured keyword found among the labels wins.
        """
        labels = [label.get("name", "").lower() for label in issue.get("labels") or []]
        templates = self.config.templates
        for keyword in self.config.keywords:
            if keyword.lower() in labels:
                return self._keyword_reply(keyword.lower())
        if "bug" in labels:
            return templates.get("bugReport", "")
        return templates.get("issue", "")

    def _keyword_reply(self, keyword: str) -> str:
        templates = self.config.templates
        if keyword == "bug":
            return templates.get("bugReport", "")
        if keyword in templates:
            return templates[keyword]
        return KEYWORD_REPLIES.get(keyword, templates.get("issue", ""))

    def pull_request_reply(self, pull_request: Dict[str, Any]) -> str:
        if pull_request.get("state", "open") != "open":
            return ""
        return self.config.templates.get("mergeRequest", "")

    async def auto_reply(self) -> int:
        """Post one automated reply on each recent issue and pull request.

        Threads that already carry an automated reply are skipped.

        Returns:
            int: Number of replies posted
        """
        if not self.config.auto_reply:
            self.console.print("[yellow]Auto-reply is disabled[/yellow]")
            return 0

        self.console.print("[blue]Replying to recent issues and pull requests...[/blue]")
        posted = 0
        for issue in await self.github.list_issues():
            if await self._reply(issue["number"], self.issue_reply(issue)):
                posted += 1
        for pull_request in await self.github.list_pull_requests():
            if await self._reply(pull_request["number"], self.pull_request_reply(pull_request)):
                posted += 1
        return posted

    async def _reply(self, number: int, reply: str) -> bool:
        if not reply:
            return False
        if has_bot_reply(await self.github.list_issue_comments(number)):
            logger.debug("Thread #%s already has an automated reply", number)
            return False
        created = await self.github.create_issue_comment(number, f"{reply}\n\n{AUTO_REPLY_MARKER}")
        if created is not None:
            self.console.print(f"[green]✅ Replied on #{number}[/green]")
        return created is not None

    async def list_comments(self, target: str) -> List[Dict[str, Any]]:
        number = self._require_number(target, "issue#123 or pr#456")
        comments = await self.github.list_issue_comments(number)
        if is_pull_request_target(target):
            comments = comments + await self.github.list_pull_request_comments(number)

        self.console.print(f"Comments for {target}:")
        for index, comment in enumerate(comments, 1):
            login = (comment.get("user") or {}).get("login", "unknown")
            body = (comment.get("body") or "")[:PREVIEW_LENGTH]
            self.console.print(f"{index}. @{login}: {body}", markup=False)
        return comments

    async def create_comment(self, target: str, message: str) -> Optional[Dict[str, Any]]:
        number = self._require_number(target, "issue#123 or pr#456")
        created = await self.github.create_issue_comment(number, message)
        if created is None:
            self.console.print(f"[red]Failed to create comment on {target}[/red]")
        else:
            self.console.print(f"[green]✅ Comment created on {target}[/green]")
        return created

    async def delete_comment(self, target: str) -> bool:
        comment_id = self._require_number(target, "comment#789")
        deleted = await self.github.delete_comment(comment_id)
        if deleted:
            self.console.print(f"[green]✅ Comment #{comment_id} deleted[/green]")
        else:
            self.console.print(f"[red]Failed to delete comment #{comment_id}[/red]")
        return deleted

    @staticmethod
    def _require_number(target: str, usage: str) -> int:
        number = extract_number(target)
        if number is None:
            raise ValueError(f"Invalid target format. Use: {usage}")
        return number
