"""Artifactory REST client: archive upload, properties, build-info, distribution.

Every call is authenticated with the ``X-JFrog-Art-Api`` header and goes
through an injected HttpClient. Any 2xx status is success.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from relman.core.result import Err, Ok, Result
from relman.net.http import HttpClient, HttpResponse, build_url
from relman.output.console import ConsoleProtocol
from relman.services.artifactory.errors import PropertiesNotSet, PropertyFailure
from relman.services.artifactory.manifest import BuildManifest
from relman.services.errors import (
    CommunicationError,
    RemoteCallError,
    UnableToCreateRelease,
    UnableToMakeURI,
)

_EXPLODE_HEADERS = {
    "X-Explode-Archive": "true",
    "X-Explode-Archive-Atomic": "true",
}


@dataclass(frozen=True, slots=True)
class ArtifactorySettings:
    server: str
    repo: str
    token: str


def temp_artifact_name(unix_seconds: int) -> str:
    return f"temp-artifact-{unix_seconds}.tar"


def properties_query(build_name: str, build_number: str) -> list[tuple[str, str]]:
    return [
        ("properties", f"build.number={build_number};build.name={build_name}"),
        ("recursive", "1"),
    ]


class ArtifactoryClient:
    def __init__(
        self,
        settings: ArtifactorySettings,
        *,
        http: HttpClient,
        console: ConsoleProtocol,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings
        self._http = http
        self._console = console
        self._clock = clock

    def upload_archive(self, archive: bytes) -> Result[str, RemoteCallError]:
        """PUT the tar into the repository and let the server explode it atomically.

        Returns:
            Ok(URL the archive was uploaded to)
        """
        url = self._url(self.settings.repo, temp_artifact_name(int(self._clock())))
        if isinstance(url, Err):
            return url

        headers = {**_EXPLODE_HEADERS, "Content-Type": "application/x-tar"}
        response = self._request("PUT", url.value, body=archive, headers=headers)
        if isinstance(response, Err):
            return response
        if not response.value.ok:
            return Err(_rejected(response.value))
        return Ok(url.value)

    def set_properties(
        self, publish_prefix: str, *, build_name: str, build_number: str
    ) -> Result[None, RemoteCallError]:
        """Stamp ``build.name``/``build.number`` recursively under ``publish_prefix``."""
        url = self._url(
            "api",
            "storage",
            self.settings.repo,
            publish_prefix,
            query=properties_query(build_name, build_number),
            safe_query="=;",
        )
        if isinstance(url, Err):
            return url

        response = self._request("PUT", url.value)
        if isinstance(response, Err):
            return response
        if not response.value.ok:
            return Err(_rejected(response.value))
        return Ok(None)

    def stamp_properties(self, manifest: BuildManifest) -> Result[None, PropertiesNotSet]:
        """Stamp every module, then report all modules that failed."""
        failures: list[PropertyFailure] = []
        for module in manifest.modules:
            result = self.set_properties(
                module.publish_prefix, build_name=manifest.name, build_number=manifest.number
            )
            match result:
                case Ok(_):
                    self._console.debug(f"properties set on {module.publish_prefix}")
                case Err(UnableToCreateRelease(status=status)):
                    failures.append(PropertyFailure(module.publish_prefix, status))
                case Err(e):
                    self._console.error(f"properties not set on {module.publish_prefix}: {e}")
                    failures.append(PropertyFailure(module.publish_prefix, 0))

        if failures:
            return Err(PropertiesNotSet(failures=tuple(failures)))
        return Ok(None)

    def register_build(self, manifest: BuildManifest) -> Result[None, RemoteCallError]:
        return self._send_json("PUT", ["api", "build"], manifest.to_json_dict())

    def distribute(
        self,
        *,
        build_name: str,
        build_number: str,
        target_repo: str,
        publish: bool = True,
    ) -> Result[None, RemoteCallError]:
        """Promote a registered build from the staging repo to ``target_repo``."""
        payload = {
            "publish": publish,
            "overrideExistingFiles": False,
            "async": False,
            "targetRepo": target_repo,
            "sourceRepos": [self.settings.repo],
            "dryRun": False,
        }
        return self._send_json(
            "POST", ["api", "build", "distribute", build_name, build_number], payload
        )

    def _url(
        self,
        *segments: str,
        query: list[tuple[str, str]] | None = None,
        safe_query: str = "",
    ) -> Result[str, UnableToMakeURI]:
        url = build_url(self.settings.server, *segments, query=query, safe_query=safe_query)
        if isinstance(url, Err):
            return Err(UnableToMakeURI(url=url.error.url, reason=url.error.reason))
        return url

    def _send_json(
        self, method: str, segments: list[str], payload: object
    ) -> Result[None, RemoteCallError]:
        url = self._url(*segments)
        if isinstance(url, Err):
            return url

        body = json.dumps(payload)
        self._console.debug(f"JSON body: {body}")
        response = self._request(
            method,
            url.value,
            body=body.encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )
        if isinstance(response, Err):
            return response
        if not response.value.ok:
            return Err(_rejected(response.value))
        return Ok(None)

    def _request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[HttpResponse, CommunicationError]:
        all_headers = {"X-JFrog-Art-Api": self.settings.token, **(headers or {})}
        self._console.debug(f"{method} {url}")
        result = self._http.request(method, url, body=body, headers=all_headers)
        if isinstance(result, Err):
            return Err(CommunicationError(url=url, message=result.error.message))
        return Ok(result.value)


def _rejected(response: HttpResponse) -> UnableToCreateRelease:
    return UnableToCreateRelease(status=response.status, message=response.text().strip()[:200])
