"""Process exit codes for the mutatio CLI.

Each lifecycle error kind maps to one of these codes so CI jobs can tell a
bad argument from a merge conflict without parsing stderr.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    The numeric values are part of the CLI contract and must stay stable:
    - 0: Success
    - 1: User error (bad version string, unknown category, bad arguments)
    - 2: Environment error (invalid config, not a git checkout)
    - 3: Version control error (checkout, push, fetch, missing branch)
    - 4: Manifest error (pom.xml missing or not editable)
    - 5: Merge error (outcome outside the accepted set)
    - 6: I/O error (CI variable export failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    VCS_ERROR = 3
    MANIFEST_ERROR = 4
    MERGE_ERROR = 5
    IO_ERROR = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
