from __future__ import annotations

from typing import List, Optional, Tuple


class ProvisionError(RuntimeError):
    """A provisioning call failed; carries the path and the OS error behind it."""

    verb = "provision"

    def __init__(self, path: str, os_error: Optional[OSError] = None) -> None:
        self.path = path
        self.os_error = os_error
        super().__init__(self._format())

    def _format(self) -> str:
        msg = f'Cannot {self.verb} "{self.path}"'
        if self.os_error is not None:
            msg += f": {describe_os_error(self.os_error)}"
        return msg


class AccessError(ProvisionError):
    verb = "access"


class PermissionRepairError(ProvisionError):
    verb = "set RW on"


class CreateError(ProvisionError):
    verb = "create"


class CopyError(ProvisionError):
    def __init__(self, path: str, os_error: Optional[OSError] = None, *, source: str = "") -> None:
        self.source = source
        super().__init__(path, os_error)

    def _format(self) -> str:
        msg = f'Error copying "{self.source}" to "{self.path}"'
        if self.os_error is not None:
            msg += f": {describe_os_error(self.os_error)}"
        return msg


class FinalizeError(ProvisionError):
    verb = "finalize permissions of"


class TemplateNotFoundError(ProvisionError):
    def __init__(self, path: str, attempts: List[Tuple[str, OSError]]) -> None:
        self.attempts = list(attempts)
        super().__init__(path, attempts[-1][1] if attempts else None)

    def _format(self) -> str:
        tried = "; ".join(f'"{p}": {describe_os_error(e)}' for p, e in self.attempts)
        return f'No template available for "{self.path}" (tried {tried or "nothing"})'


def describe_os_error(e: OSError) -> str:
    return e.strerror or str(e)
