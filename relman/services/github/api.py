"""GitHub REST client: releases, release assets and raw git-data objects.

Every call goes through an injected HttpClient. Non-success statuses are
mapped to step-specific errors; transport failures become CommunicationError.
Nothing is retried.
"""

from __future__ import annotations

import json
import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from relman.core.result import Err, Ok, Result
from relman.core.structured import as_str_dict, get_str, get_table
from relman.net.http import HttpClient, HttpResponse, build_url
from relman.output.console import ConsoleProtocol
from relman.services.github.errors import (
    CommunicationError,
    FilesDoNotExist,
    GitHubError,
    ReleaseLookupFailed,
    UnableToCreateCommit,
    UnableToCreateRelease,
    UnableToCreateTree,
    UnableToMakeURI,
    UnableToReadCommit,
    UnableToUpdateReference,
    UploadsFailed,
)
from relman.versions.semver import Version

GITHUB_API = "https://api.github.com"
_ACCEPT = "application/vnd.github.v3+json"
_BLOB_MODE = "100644"
_ENCODING_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
}


def asset_content_type(name: str) -> str:
    """Content type for an uploaded asset; compressed files report the compression."""
    mime, encoding = mimetypes.guess_type(name)
    if encoding is not None:
        return _ENCODING_TYPES.get(encoding, "application/octet-stream")
    return mime or "application/octet-stream"


@dataclass(frozen=True, slots=True)
class GitHubSettings:
    owner: str
    repo: str
    token: str
    api_base: str = GITHUB_API


@dataclass(frozen=True, slots=True)
class Committer:
    name: str
    email: str


@dataclass(frozen=True, slots=True)
class Release:
    tag: str
    upload_url: str | None = None
    html_url: str | None = None


def _upload_base(template: str) -> str:
    # "https://uploads.github.com/repos/o/r/releases/1/assets{?name,label}"
    brace = template.find("{")
    return template if brace < 0 else template[:brace]


def _parse_release(tag: str, payload: object) -> Release:
    data = as_str_dict(payload) or {}
    return Release(
        tag=get_str(data, "tag_name") or tag,
        upload_url=get_str(data, "upload_url"),
        html_url=get_str(data, "html_url"),
    )


def _error_message(response: HttpResponse) -> str:
    data = as_str_dict(response.json())
    if data is not None:
        message = get_str(data, "message")
        if message:
            return message
    return response.text().strip()[:200]


class GitHubClient:
    """Client for one GitHub repository.

    Attributes:
        settings: Repository coordinates, token and API base URL.
    """

    def __init__(
        self,
        settings: GitHubSettings,
        *,
        http: HttpClient,
        console: ConsoleProtocol,
    ) -> None:
        self.settings = settings
        self._http = http
        self._console = console

    # -------------------------------------------------------------------------
    # Releases
    # -------------------------------------------------------------------------

    def create_release(
        self, target_commit: str, version: Version, body: str, *, draft: bool = False
    ) -> Result[Release, GitHubError]:
        """Create release ``v<version>`` pointing at ``target_commit``."""
        tag = version.to_tag()
        payload = {
            "tag_name": tag,
            "target_commitish": target_commit,
            "name": tag,
            "body": body,
            "draft": draft,
            "prerelease": False,
        }
        response = self._send_json("POST", ["releases"], payload)
        if isinstance(response, Err):
            return response

        resp = response.value
        if resp.status != 201:
            self._console.debug(f"release creation answered {resp.status}: {resp.text()}")
            return Err(UnableToCreateRelease(status=resp.status, message=_error_message(resp)))
        return Ok(_parse_release(tag, resp.json()))

    def release_by_tag(self, tag: str) -> Result[Release, GitHubError]:
        response = self._send("GET", ["releases", "tags", tag])
        if isinstance(response, Err):
            return response

        resp = response.value
        if resp.status != 200:
            return Err(ReleaseLookupFailed(tag=tag, status=resp.status))

        release = _parse_release(tag, resp.json())
        if release.upload_url is None:
            return Err(ReleaseLookupFailed(tag=tag, status=resp.status))
        return Ok(release)

    def upload_asset(self, release: Release, name: str, path: Path) -> Result[None, GitHubError]:
        """Upload one file to the release's advertised upload endpoint."""
        url = build_url(_upload_base(release.upload_url or ""), query={"name": name})
        if isinstance(url, Err):
            return Err(UnableToMakeURI(url=url.error.url, reason=url.error.reason))

        try:
            data = path.read_bytes()
        except OSError:
            return Err(FilesDoNotExist(names=(name,)))

        content_type = asset_content_type(name)
        response = self._request("POST", url.value, body=data, content_type=content_type)
        if isinstance(response, Err):
            return response

        resp = response.value
        if resp.status != 201:
            return Err(UnableToCreateRelease(status=resp.status, message=_error_message(resp)))
        return Ok(None)

    def add_artifacts_to_release(
        self, tag: str, named_files: Mapping[str, Path]
    ) -> Result[tuple[str, ...], GitHubError]:
        """Attach files to an existing release.

        Every path is checked before anything is sent; missing files fail the
        whole call up front. Uploads are then attempted one by one and never
        stop early: assets that made it stay attached even when the call
        reports UploadsFailed.

        Returns:
            Ok(names uploaded) when every upload succeeded.
        """
        missing = tuple(name for name, path in named_files.items() if not path.is_file())
        if missing:
            return Err(FilesDoNotExist(names=missing))

        release = self.release_by_tag(tag)
        if isinstance(release, Err):
            return release

        uploaded: list[str] = []
        failed: list[str] = []
        for name, path in named_files.items():
            result = self.upload_asset(release.value, name, path)
            match result:
                case Ok(_):
                    uploaded.append(name)
                    self._console.success(f"uploaded {name}")
                case Err(e):
                    failed.append(name)
                    self._console.error(f"failed to upload {name}: {e}")

        self._console.info(f"uploaded {len(uploaded)} of {len(named_files)} assets to {tag}")
        if failed:
            return Err(UploadsFailed(failed=tuple(failed), uploaded=tuple(uploaded)))
        return Ok(tuple(uploaded))

    # -------------------------------------------------------------------------
    # Git data
    # -------------------------------------------------------------------------

    def commit_tree(self, sha: str) -> Result[str, GitHubError]:
        """Tree id of an existing commit."""
        response = self._send("GET", ["git", "commits", sha])
        if isinstance(response, Err):
            return response

        resp = response.value
        tree = get_str(get_table(as_str_dict(resp.json()) or {}, "tree") or {}, "sha")
        if resp.status != 200 or tree is None:
            return Err(UnableToReadCommit(sha=sha, status=resp.status))
        return Ok(tree)

    def create_tree(self, base_tree: str, files: Mapping[str, str]) -> Result[str, GitHubError]:
        payload = {
            "base_tree": base_tree,
            "tree": [
                {"path": path, "mode": _BLOB_MODE, "type": "blob", "content": content}
                for path, content in files.items()
            ],
        }
        response = self._send_json("POST", ["git", "trees"], payload)
        if isinstance(response, Err):
            return response

        resp = response.value
        sha = get_str(as_str_dict(resp.json()) or {}, "sha")
        if resp.status != 201 or sha is None:
            return Err(UnableToCreateTree(status=resp.status, message=_error_message(resp)))
        return Ok(sha)

    def create_commit(
        self, message: str, tree: str, parent: str, committer: Committer
    ) -> Result[str, GitHubError]:
        payload = {
            "message": message,
            "tree": tree,
            "parents": [parent],
            "committer": {"name": committer.name, "email": committer.email},
        }
        response = self._send_json("POST", ["git", "commits"], payload)
        if isinstance(response, Err):
            return response

        resp = response.value
        sha = get_str(as_str_dict(resp.json()) or {}, "sha")
        if resp.status != 201 or sha is None:
            return Err(UnableToCreateCommit(status=resp.status, message=_error_message(resp)))
        return Ok(sha)

    def update_ref(self, branch: str, sha: str) -> Result[None, GitHubError]:
        response = self._send_json("PATCH", ["git", "refs", "heads", branch], {"sha": sha})
        if isinstance(response, Err):
            return response

        resp = response.value
        if resp.status != 200:
            return Err(
                UnableToUpdateReference(
                    branch=branch, status=resp.status, message=_error_message(resp)
                )
            )
        return Ok(None)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def repo_url(self, *segments: str) -> Result[str, UnableToMakeURI]:
        s = self.settings
        url = build_url(s.api_base, "repos", s.owner, s.repo, *segments)
        if isinstance(url, Err):
            return Err(UnableToMakeURI(url=url.error.url, reason=url.error.reason))
        return url

    def _send(self, method: str, segments: list[str]) -> Result[HttpResponse, GitHubError]:
        url = self.repo_url(*segments)
        if isinstance(url, Err):
            return url
        return self._request(method, url.value)

    def _send_json(
        self, method: str, segments: list[str], payload: object
    ) -> Result[HttpResponse, GitHubError]:
        url = self.repo_url(*segments)
        if isinstance(url, Err):
            return url
        body = json.dumps(payload).encode("utf-8")
        return self._request(method, url.value, body=body, content_type="application/json")

    def _request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        content_type: str | None = None,
    ) -> Result[HttpResponse, GitHubError]:
        headers = {"Accept": _ACCEPT, "Authorization": f"token {self.settings.token}"}
        if content_type is not None:
            headers["Content-Type"] = content_type

        self._console.debug(f"{method} {url}")
        result = self._http.request(method, url, body=body, headers=headers)
        if isinstance(result, Err):
            return Err(CommunicationError(url=url, message=result.error.message))
        return Ok(result.value)
