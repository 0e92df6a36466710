"""Remote-call failures shared by the GitHub and Artifactory clients."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UnableToCreateRelease:
    """The remote answered a write with a non-success status."""

    status: int
    message: str = ""


@dataclass(frozen=True, slots=True)
class CommunicationError:
    """The request never produced a response."""

    url: str
    message: str


@dataclass(frozen=True, slots=True)
class UnableToMakeURI:
    url: str
    reason: str


RemoteCallError = UnableToCreateRelease | CommunicationError | UnableToMakeURI
