"""Process exit codes.

A failed run maps its error to one of these codes so the CI runner can tell a
bad version input from an unreachable catalog or a broken download.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for hcp-setup commands.

    Values are used as process exit codes and must remain stable:
    - 0: Success
    - 1: User error (bad input, invalid configuration)
    - 2: Environment error (unsupported platform or architecture)
    - 3: Discovery error (no release matches the requested version)
    - 4: Network error (catalog or download unreachable)
    - 5: Install error (extraction, caching or profile setup failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    DISCOVERY_ERROR = 3
    NETWORK_ERROR = 4
    INSTALL_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
