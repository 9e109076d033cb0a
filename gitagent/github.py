"""GitHub REST API client.

Every call fails soft: HTTP and decoding errors are logged and the method
returns an empty list, False or None so a caller looping over several issues
keeps going.
"""
from typing import Any, Dict, List, Optional

import httpx

from .config import resolve_repo_slug
from .log import get_logger

logger = get_logger(__name__)

API_URL = "https://api.github.com"


class GitHubClient:
    """Minimal async client for releases, issues, pull requests and comments."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        base_url: str = API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.token = token
        self.owner = owner
        self.repo = repo
        self.base_url = base_url
        self.transport = transport
        self.timeout = timeout

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _client(self) -> httpx.AsyncClient:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Optional[Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, f"{self.repo_path}{path}", **kwargs)
                response.raise_for_status()
                if not response.content:
                    return {}
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("GitHub API %s %s failed: %s", method, path, e)
            return None

    async def list_issues(self, per_page: int = 10) -> List[Dict[str, Any]]:
        """Recently updated open issues, pull requests excluded."""
        data = await self._request(
            "GET",
            "/issues",
            params={"state": "open", "sort": "updated", "direction": "desc", "per_page": per_page},
        )
        return [issue for issue in data or [] if "pull_request" not in issue]

    async def list_pull_requests(self, per_page: int = 10) -> List[Dict[str, Any]]:
        data = await self._request(
            "GET",
            "/pulls",
            params={"state": "open", "sort": "updated", "direction": "desc", "per_page": per_page},
        )
        return list(data or [])

    async def list_issue_comments(self, number: int) -> List[Dict[str, Any]]:
        return list(await self._request("GET", f"/issues/{number}/comments") or [])

    async def list_pull_request_comments(self, number: int) -> List[Dict[str, Any]]:
        """Review comments on a pull request's diff."""
        return list(await self._request("GET", f"/pulls/{number}/comments") or [])

    async def create_issue_comment(self, number: int, body: str) -> Optional[Dict[str, Any]]:
        """Comment on an issue or pull request conversation."""
        return await self._request("POST", f"/issues/{number}/comments", json={"body": body})

    async def delete_comment(self, comment_id: int) -> bool:
        return await self._request("DELETE", f"/issues/comments/{comment_id}") is not None

    async def create_release(
        self, tag: str, body: str, prerelease: bool = False
    ) -> Optional[Dict[str, Any]]:
        return await self._request(
            "POST",
            "/releases",
            json={
                "tag_name": tag,
                "name": f"Release {tag}",
                "body": body,
                "draft": False,
                "prerelease": prerelease,
            },
        )


def create_github_client(
    token: str,
    owner: str,
    repo: str,
    remote_url: Optional[str] = None,
) -> Optional[GitHubClient]:
    """Client for the configured repository, or None without credentials.

    Owner and repository name fall back to the ones in a GitHub remote URL.
    """
    if not (owner and repo):
        slug = resolve_repo_slug(remote_url)
        if slug:
            owner, repo = slug
    if not (token and owner and repo):
        return None
    return GitHubClient(token, owner, repo)
