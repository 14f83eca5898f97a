from __future__ import annotations

import argparse
import logging
from typing import Optional

from .lib.env import DEFAULT_CONFIG, ProvisionConfig
from .logging_utils import configure_logging
from .provision import ensure_config_exists
from .provision_config import load_provision_config

logger = logging.getLogger(__name__)


def run(*, config: ProvisionConfig = DEFAULT_CONFIG, dry_run: bool = False) -> int:
    """Provision every configured target in order; returns the process exit status."""

    for spec in config.targets:
        result = ensure_config_exists(spec.path, config, dry_run=dry_run)
        if result.ok:
            continue

        if spec.required:
            logger.error("Wi-Fi will not be enabled")
            return 1

        # Not every device ships this file; the supplicant reports it if needed.
        logger.debug("Ignoring optional target %s (%s)", spec.path, result.error)

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="supplicant-provisioner")
    p.add_argument("--config", default=None, help="YAML file overriding the built-in paths/mode")
    p.add_argument("--log", default=None, help="Also write the log to this file")
    p.add_argument("--dry-run", action="store_true", help="Report what would be done without touching files")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log)

    config = DEFAULT_CONFIG
    if args.config:
        try:
            config = load_provision_config(args.config)
        except (OSError, ValueError, RuntimeError) as e:
            logger.error("Cannot load config %s: %s", args.config, e)
            return 2

    return run(config=config, dry_run=bool(args.dry_run))


if __name__ == "__main__":
    raise SystemExit(main())
