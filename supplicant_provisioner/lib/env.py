from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class TargetSpec:
    path: str
    # Mandatory targets abort startup on failure; the rest are best-effort.
    required: bool = True


@dataclass(frozen=True)
class ProvisionConfig:
    template_path: str = "/etc/wifi/wpa_supplicant.conf"
    template_prefixes: Tuple[str, ...] = ("/system", "/vendor")
    targets: Tuple[TargetSpec, ...] = (
        TargetSpec("/data/misc/wifi/wpa_supplicant.conf", required=True),
        TargetSpec("/data/misc/wifi/p2p_supplicant.conf", required=False),
    )
    file_mode: int = 0o660
    buffer_size: int = 2048

    def template_candidates(self) -> List[str]:
        """Template paths in search order (prefix + template_path)."""
        return [prefix.rstrip("/") + self.template_path for prefix in self.template_prefixes]


DEFAULT_CONFIG = ProvisionConfig()
