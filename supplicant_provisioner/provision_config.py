from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Tuple

from .lib.env import DEFAULT_CONFIG, ProvisionConfig, TargetSpec

_KNOWN_KEYS = {"template_path", "template_prefixes", "targets", "file_mode", "buffer_size"}


def _parse_mode(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("file_mode must be an octal string or an integer")
    if isinstance(value, int):
        mode = value
    elif isinstance(value, str):
        try:
            mode = int(value, 8)
        except ValueError as e:
            raise ValueError(f"file_mode is not an octal number: {value!r}") from e
    else:
        raise ValueError("file_mode must be an octal string or an integer")

    if not 0 <= mode <= 0o7777:
        raise ValueError(f"file_mode out of range: {oct(mode)}")
    return mode


def _parse_targets(value: Any) -> Tuple[TargetSpec, ...]:
    if not isinstance(value, list) or not value:
        raise ValueError("targets must be a non-empty list")

    out: list[TargetSpec] = []
    for item in value:
        if isinstance(item, str):
            out.append(TargetSpec(path=item, required=True))
            continue
        if not isinstance(item, dict) or not item.get("path"):
            raise ValueError("each target must be a path or a mapping with 'path'")
        required = item.get("required", True)
        if not isinstance(required, bool):
            raise ValueError(f"target required flag must be true or false: {required!r}")
        out.append(TargetSpec(path=str(item["path"]), required=required))
    return tuple(out)


def config_from_mapping(raw: Dict[str, Any]) -> ProvisionConfig:
    """Overlay raw on the built-in defaults."""

    unknown = set(raw) - _KNOWN_KEYS
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    template_path = raw.get("template_path", DEFAULT_CONFIG.template_path)
    if not isinstance(template_path, str) or not template_path.startswith("/"):
        raise ValueError("template_path must start with '/'")

    prefixes = raw.get("template_prefixes", list(DEFAULT_CONFIG.template_prefixes))
    if not isinstance(prefixes, list) or not prefixes:
        raise ValueError("template_prefixes must be a non-empty list")
    if not all(isinstance(prefix, str) and prefix for prefix in prefixes):
        raise ValueError("template_prefixes entries must be non-empty strings")

    targets = DEFAULT_CONFIG.targets
    if "targets" in raw:
        targets = _parse_targets(raw["targets"])

    file_mode = DEFAULT_CONFIG.file_mode
    if "file_mode" in raw:
        file_mode = _parse_mode(raw["file_mode"])

    buffer_size = raw.get("buffer_size", DEFAULT_CONFIG.buffer_size)
    if isinstance(buffer_size, bool) or not isinstance(buffer_size, int) or buffer_size <= 0:
        raise ValueError("buffer_size must be a positive integer")

    return ProvisionConfig(
        template_path=template_path,
        template_prefixes=tuple(prefixes),
        targets=targets,
        file_mode=file_mode,
        buffer_size=buffer_size,
    )


def load_provision_config(path: str) -> ProvisionConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("provisioner config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the provisioner config") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"provisioner config is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError("provisioner config must contain a mapping/object")

    return config_from_mapping(raw)
