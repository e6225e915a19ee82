"""GitHub API adapter."""

import base64
from datetime import datetime
from typing import Any, Dict, List

import requests

from mountie.adapters.base import GitPlatformAdapter, GitPlatformError
from mountie.models import PR, Commit, FileContent, PullState, Ref, Repository

# GitHub caps per_page at 100
_PAGE_SIZE = 100


def _parse_iso(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _pr_from_api(data: Dict[str, Any]) -> PR:
    head = data.get("head") or {}
    base = data.get("base") or {}
    return PR(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        head_branch=head.get("ref", ""),
        base_branch=base.get("ref", ""),
        state=data.get("state", "open"),
        html_url=data.get("html_url"),
    )


def _commit_from_api(data: Dict[str, Any]) -> Commit:
    committer = (data.get("commit") or {}).get("committer") or {}
    return Commit(sha=data["sha"], committed_at=_parse_iso(committer["date"]))


def _content_from_api(data: Any, path: str) -> FileContent:
    # A directory comes back as a list of entries
    if isinstance(data, list):
        return FileContent(path=path, type="dir")
    return FileContent(
        path=data.get("path", path),
        type=data.get("type", "file"),
        sha=data.get("sha", ""),
        content=data.get("content"),
        encoding=data.get("encoding"),
    )


class GitHubAdapter(GitPlatformAdapter):
    """GitHub REST API implementation."""

    def __init__(self, token: str, api_url: str = "https://api.github.com") -> None:
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._session.request(method, url, params=params, json=json, timeout=30)
        except requests.RequestException as e:
            raise GitPlatformError(f"{method} {path} failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except (ValueError, AttributeError):
                pass
            raise GitPlatformError(f"{resp.status_code}: {msg}", status_code=resp.status_code)
        return resp

    def _paginate(self, path: str, params: Dict[str, Any] | None = None) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            query = {**(params or {}), "per_page": _PAGE_SIZE, "page": page}
            data = self._request("GET", path, params=query).json() or []
            items.extend(data)
            if len(data) < _PAGE_SIZE:
                return items
            page += 1

    def get_repository(self, repo: str) -> Repository:
        data = self._request("GET", f"/repos/{repo}").json()
        return Repository.from_payload(data)

    def list_repositories(self, organization: str | None = None) -> List[Repository]:
        path = f"/orgs/{organization}/repos" if organization else "/user/repos"
        return [Repository.from_payload(d) for d in self._paginate(path)]

    def get_ref(self, repo: str, ref: str) -> Ref:
        data = self._request("GET", f"/repos/{repo}/git/ref/{ref}").json()
        return Ref(ref=data.get("ref", ref), sha=data["object"]["sha"])

    def create_ref(self, repo: str, ref: str, sha: str) -> None:
        self._request("POST", f"/repos/{repo}/git/refs", json={"ref": ref, "sha": sha})

    def get_content(self, repo: str, path: str, ref: str | None = None) -> FileContent:
        params = {"ref": ref} if ref else None
        data = self._request("GET", f"/repos/{repo}/contents/{path}", params=params).json()
        return _content_from_api(data, path)

    def create_or_update_file(
        self,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> None:
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha:
            body["sha"] = sha
        self._request("PUT", f"/repos/{repo}/contents/{path}", json=body)

    def list_pulls(self, repo: str, state: PullState = "all") -> List[PR]:
        data = self._paginate(f"/repos/{repo}/pulls", params={"state": state})
        return [_pr_from_api(d) for d in data]

    def create_pr(
        self,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str,
        maintainer_can_modify: bool = True,
    ) -> PR:
        resp = self._request(
            "POST",
            f"/repos/{repo}/pulls",
            json={
                "title": title,
                "body": body,
                "head": head,
                "base": base,
                "maintainer_can_modify": maintainer_can_modify,
            },
        )
        return _pr_from_api(resp.json())

    def list_commits(self, repo: str, path: str, sha: str | None = None) -> List[Commit]:
        params: Dict[str, Any] = {"path": path}
        if sha:
            params["sha"] = sha
        data = self._request("GET", f"/repos/{repo}/commits", params=params).json() or []
        return [_commit_from_api(d) for d in data]
