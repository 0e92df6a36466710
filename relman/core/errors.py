"""Exit codes for CLI commands.

Each failure kind a release command can hit maps to one stable, non-zero
process exit status. CI pipelines key off these values, so existing numbers
must never be reassigned.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes, one per error kind."""

    OK = 0
    UNKNOWN = 1
    NO_PROJECT_FOUND = 2
    GITHUB_ERROR = 3
    NETWORK_CALL_FAILED = 4
    UNABLE_TO_GET_HEAD_SHA = 5
    UNABLE_TO_BUMP_VERSION = 6
    UNABLE_TO_FIND_BRANCH_FOR_SHA = 7
    FILE_DOES_NOT_EXIST = 8
    ARTIFACTORY_SECTION_MISSING = 9
    REPO_NOT_VALID = 10
    ARTIFACTORY_COMMUNICATION_FAILED = 11
    CONFIG_ERROR = 12
    INVALID_VERSION = 13
    VERSION_FILE_INVALID = 14
    DISTRIBUTION_REPO_MISSING = 15

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
