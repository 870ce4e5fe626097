"""Shared utilities for the report reader."""

from __future__ import annotations

import logging
import os
from pathlib import Path


def project_root() -> Path:
    """Resolve the project root directory."""
    return Path(os.environ.get("PROJECT_ROOT", Path(__file__).resolve().parent.parent.parent))


def load_env_file(path: str) -> None:
    """Load KEY=VALUE pairs from a file into os.environ (does not overwrite existing)."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                raw = line.strip()
                if not raw or raw.startswith("#") or "=" not in raw:
                    continue
                key, value = raw.split("=", 1)
                key = key.strip()
                if key and key not in os.environ:
                    v = value.strip()
                    if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
                        v = v[1:-1]
                    os.environ[key] = v
    except OSError:
        return


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def setup_logger(name: str, *, verbose: bool = False) -> logging.Logger:
    """Return the ``benchreport.<name>`` logger with a single stderr handler.

    stdout carries the extracted report text only, so every diagnostic goes
    to stderr.
    """
    logger = logging.getLogger(f"benchreport.{name}")
    logger.setLevel(logging.DEBUG)
    if not logger.handlers:
        sh = logging.StreamHandler()
        sh.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(sh)
    level = logging.DEBUG if verbose else logging.INFO
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger
