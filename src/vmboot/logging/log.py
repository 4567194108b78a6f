# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

#src/vmboot/logging/log.py

from __future__ import annotations

import logging
from pathlib import Path
from datetime import datetime, timezone
import uuid

FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FORMAT, datefmt=DATEFMT))
    logger.addHandler(handler)


def _reset(logger: logging.Logger) -> None:
    # repeated runs in one process (tests, CliRunner) must not stack handlers
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def init_logging(
    *,
    base_dir: Path | None = None,
    name: str = "vmboot",
    verbose: bool = False,
    run_id: str | None = None,
) -> tuple[logging.Logger, str, Path]:
    """
    Point the ``name`` logger at a per-run file (every attempt, DEBUG) and
    the console (INFO, or DEBUG when verbose).

    Returns (logger, run_id, log_path). The run_id is part of the file name
    and should be handed to BootstrapController so events carry the same id.
    """
    run_id = run_id or str(uuid.uuid4())
    log_dir = base_dir if base_dir is not None else Path.home() / ".vmboot" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    started = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_path = log_dir / f"{name}-{started}-{run_id}.log"

    logger = logging.getLogger(name)
    _reset(logger)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    _attach(logger, logging.FileHandler(log_path, encoding="utf-8"), logging.DEBUG)
    _attach(logger, logging.StreamHandler(), logging.DEBUG if verbose else logging.INFO)

    logger.info("vmboot run %s started, log file %s", run_id, log_path)
    return logger, run_id, log_path
