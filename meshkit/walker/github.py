"""Walking the contents of a GitHub repository through its contents API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, fields
from typing import Any

import requests

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com/repos/{owner}/{repo}/contents/{path}?ref={branch}"
DEFAULT_BRANCH = "main"
_RECURSE_SUFFIX = "/**"
_FORBIDDEN = "[GithubWalker]: GithubAPI responded with: forbidden"


@dataclass
class GithubContent:
    """One entry of a contents API response.

    content and encoding are empty for directories.
    """

    name: str = ""
    path: str = ""
    sha: str = ""
    size: int = 0
    url: str = ""
    html_url: str = ""
    git_url: str = ""
    download_url: str = ""
    type: str = ""
    content: str = ""
    encoding: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GithubContent:
        """Build an entry from decoded JSON, ignoring unknown keys and nulls."""
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})


FileInterceptor = Callable[[GithubContent], object]
DirInterceptor = Callable[[list[GithubContent]], object]


def _has_extension(path: str) -> bool:
    return "." in path.rsplit("/", 1)[-1]


class GithubWalker:
    """Walks a repository from a root path, calling interceptors on files and directories.

    A root ending in "/**" makes the walk descend into every subdirectory.
    Nodes are visited concurrently, so interceptors must be thread safe.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        branch: str = DEFAULT_BRANCH,
        root: str = "",
        file_interceptor: FileInterceptor | None = None,
        dir_interceptor: DirInterceptor | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.recurse = root.endswith(_RECURSE_SUFFIX)
        self.root = root[: -len(_RECURSE_SUFFIX)] if self.recurse else root
        self.file_interceptor = file_interceptor
        self.dir_interceptor = dir_interceptor

    def walk(self) -> None:
        """Start the walk; a root with an extension is treated as a single file."""
        is_file = bool(self.root) and _has_extension(self.root)
        self._visit(self.root, is_file)

    def _fetch(self, path: str) -> Any:
        url = API_URL.format(owner=self.owner, repo=self.repo, path=path, branch=self.branch)
        with requests.get(url) as response:
            if response.status_code == 403:
                try:
                    message = response.json().get("message")
                except (ValueError, AttributeError):
                    message = None
                raise PermissionError(message if isinstance(message, str) else _FORBIDDEN)
            if response.status_code != 200:
                raise FileNotFoundError("file not found")
            try:
                return response.json()
            except ValueError:
                logger.error("[GithubWalker]: failed to decode API response")
                raise

    def _visit_child(self, entry: GithubContent) -> None:
        is_file = entry.type == "file"
        if not (self.recurse or is_file):
            return
        try:
            self._visit(entry.path, is_file)
        except Exception as exc:  # a failing node must not stop its siblings
            logger.error("[GithubWalker]: error occurred while processing github node %s", exc)

    def _visit(self, path: str, is_file: bool) -> None:
        body = self._fetch(path)
        if is_file:
            entry = GithubContent.from_dict(body)
            if self.file_interceptor is not None:
                self.file_interceptor(entry)
            return

        if not isinstance(body, list):
            logger.error("[GithubWalker]: failed to decode API response")
            raise ValueError("expected a JSON array for a directory listing")
        entries = [GithubContent.from_dict(item) for item in body]

        if entries:
            with ThreadPoolExecutor(max_workers=min(16, len(entries))) as pool:
                list(pool.map(self._visit_child, entries))

        if self.dir_interceptor is not None:
            try:
                self.dir_interceptor(entries)
            except Exception as exc:
                logger.error(
                    "[GithubWalker]: error occurred while executing directory interceptor function %s",
                    exc,
                )
                raise