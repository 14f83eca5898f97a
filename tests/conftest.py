"""
Shared fixtures: a sandboxed install root under tmp_path.
"""
import logging
from pathlib import Path

import pytest

from supplicant_provisioner.lib.env import ProvisionConfig, TargetSpec

TEMPLATE_REL = "/etc/wifi/wpa_supplicant.conf"


class Sandbox:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.system = root / "system"
        self.vendor = root / "vendor"
        self.data = root / "data" / "misc" / "wifi"
        self.data.mkdir(parents=True)

    @property
    def primary(self) -> Path:
        return self.data / "wpa_supplicant.conf"

    @property
    def secondary(self) -> Path:
        return self.data / "p2p_supplicant.conf"

    def template(self, prefix: Path, content: bytes) -> Path:
        p = prefix / TEMPLATE_REL.lstrip("/")
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(content)
        return p

    def config(self, **overrides) -> ProvisionConfig:
        kwargs = dict(
            template_path=TEMPLATE_REL,
            template_prefixes=(str(self.system), str(self.vendor)),
            targets=(
                TargetSpec(str(self.primary), required=True),
                TargetSpec(str(self.secondary), required=False),
            ),
        )
        kwargs.update(overrides)
        return ProvisionConfig(**kwargs)


@pytest.fixture
def sandbox(tmp_path: Path) -> Sandbox:
    """Provide an isolated /system, /vendor and /data layout."""
    return Sandbox(tmp_path)


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Undo configure_logging() between tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    for attr in ("_supplicant_configured", "_supplicant_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
