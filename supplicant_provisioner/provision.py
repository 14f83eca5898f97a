from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import (
    AccessError,
    CopyError,
    CreateError,
    FinalizeError,
    PermissionRepairError,
    ProvisionError,
    TemplateNotFoundError,
    describe_os_error,
)
from .lib.env import DEFAULT_CONFIG, ProvisionConfig

logger = logging.getLogger(__name__)

# os.open/os.read/os.write are retried on EINTR by the interpreter (PEP 475).


class TargetState(enum.Enum):
    ACCESSIBLE = "accessible"
    DENIED = "denied"
    MISSING = "missing"


@dataclass(frozen=True)
class ProvisionResult:
    target: str
    action: str
    template: Optional[str] = None
    error: Optional[ProvisionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def probe_target(path: str) -> TargetState:
    """Classify the target by whether it can be opened read/write.

    Raises AccessError for anything other than "missing" or "denied".
    """

    if os.access(path, os.R_OK | os.W_OK):
        return TargetState.ACCESSIBLE

    # os.access() does not say why; an open attempt recovers the errno.
    try:
        fd = os.open(path, os.O_RDWR | os.O_NONBLOCK)
    except FileNotFoundError:
        return TargetState.MISSING
    except PermissionError:
        return TargetState.DENIED
    except OSError as e:
        raise AccessError(path, e) from e
    os.close(fd)
    # Opened with the effective ids but access() checks the real ones.
    return TargetState.DENIED


def open_template(config: ProvisionConfig, target: str) -> Tuple[int, str]:
    """Open the first readable template candidate for target, in search order."""

    attempts: List[Tuple[str, OSError]] = []
    for candidate in config.template_candidates():
        try:
            fd = os.open(candidate, os.O_RDONLY)
        except OSError as e:
            attempts.append((candidate, e))
            continue
        logger.debug("Using template %s", candidate)
        return fd, candidate
    raise TemplateNotFoundError(target, attempts)


def _read_chunk(fd: int, size: int) -> bytes:
    return os.read(fd, size)


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        n = os.write(fd, view)
        view = view[n:]


def _remove_partial(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning('Could not remove "%s": %s', path, describe_os_error(e))


def _repair_permissions(path: str, config: ProvisionConfig) -> None:
    try:
        os.chmod(path, config.file_mode)
    except OSError as e:
        raise PermissionRepairError(path, e) from e


def _create_from_template(path: str, config: ProvisionConfig) -> str:
    src_fd, template = open_template(config, path)
    try:
        try:
            dst_fd = os.open(path, os.O_CREAT | os.O_RDWR, config.file_mode)
        except OSError as e:
            raise CreateError(path, e) from e

        try:
            while True:
                chunk = _read_chunk(src_fd, config.buffer_size)
                if not chunk:
                    break
                _write_all(dst_fd, chunk)
        except OSError as e:
            os.close(dst_fd)
            _remove_partial(path)
            raise CopyError(path, e, source=template) from e
        os.close(dst_fd)
    finally:
        os.close(src_fd)

    # The creation mode is filtered through the umask; set it explicitly.
    try:
        os.chmod(path, config.file_mode)
    except OSError as e:
        _remove_partial(path)
        raise FinalizeError(path, e) from e

    return template


def _provision(path: str, config: ProvisionConfig, dry_run: bool) -> ProvisionResult:
    state = probe_target(path)

    if state is TargetState.ACCESSIBLE:
        logger.debug("%s already present", path)
        return ProvisionResult(target=path, action="existing")

    if state is TargetState.DENIED:
        if dry_run:
            logger.info("Would chmod %s to %s", path, oct(config.file_mode))
            return ProvisionResult(target=path, action="would-repair")
        _repair_permissions(path, config)
        logger.info("Repaired permissions of %s (%s)", path, oct(config.file_mode))
        return ProvisionResult(target=path, action="repaired")

    if dry_run:
        fd, template = open_template(config, path)
        os.close(fd)
        logger.info("Would create %s from %s", path, template)
        return ProvisionResult(target=path, action="would-create", template=template)

    template = _create_from_template(path, config)
    logger.info("Created %s from %s", path, template)
    return ProvisionResult(target=path, action="created", template=template)


def ensure_config_exists(
    target_path: str,
    config: ProvisionConfig = DEFAULT_CONFIG,
    *,
    dry_run: bool = False,
) -> ProvisionResult:
    """Make sure target_path exists, is read/write accessible and carries config.file_mode.

    A missing target is seeded from the first readable template candidate.
    Failures are logged and returned in the result rather than raised.
    """

    try:
        return _provision(target_path, config, dry_run)
    except ProvisionError as e:
        logger.error("%s", e)
        return ProvisionResult(target=target_path, action="failed", error=e)
