# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vmboot/config/loader.py

import logging
import os
import re
from pathlib import Path

import yaml

from .models import VmbootConfig

log = logging.getLogger("vmboot")

_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _expand_env(raw: str, path: Path) -> str:
    # os.path.expandvars leaves unknown names untouched; fail loudly instead
    missing = sorted({m for m in _PLACEHOLDER.findall(raw) if m not in os.environ})
    if missing:
        raise ValueError(
            f"{path}: environment variable(s) not set: {', '.join(missing)}"
        )
    return os.path.expandvars(raw)


def load_config(path: str | Path) -> VmbootConfig:
    """
    Load and validate a vmboot YAML config.

    ``${ENV_VAR}`` placeholders are resolved before parsing, so addresses
    and key paths can be supplied by the environment.
    """
    path = Path(path)
    document = yaml.safe_load(_expand_env(path.read_text(encoding="utf-8"), path))

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ValueError(
            f"{path}: expected a mapping at the top level, got {type(document).__name__}"
        )

    cfg = VmbootConfig.model_validate(document)
    log.debug("Loaded %d instance(s) from %s", len(cfg.instances), path)
    return cfg
