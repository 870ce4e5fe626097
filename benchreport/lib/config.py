"""Configuration for the benchmark report reader.

Single source of truth for:
- Default report location, marker text and target selector
- Exit codes
- Environment variable loading (BROWSER_*, BENCHREPORT_*)

Stdlib only.

Usage:
    from benchreport.lib.config import load_reader_config, resolve_report_url

    cfg = load_reader_config()
    url = resolve_report_url("/tmp/run-3/benchmark.html")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional

from benchreport.lib.common import project_root, load_env_file


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class ExitCode(IntEnum):
    OK = 0
    USAGE = 2


# ---------------------------------------------------------------------------
# Report constants
# ---------------------------------------------------------------------------

DEFAULT_REPORT_PATH = "/tmp/benchmark.html"
MARKER_TEXT = "Benchmark Report"
NODE_SELECTOR = "body > div > div"

# Upper bound for the marker wait; other steps have no timeout of their own.
DEFAULT_WAIT_TIMEOUT_MS = 90_000


def resolve_report_url(path: Optional[str] = None) -> str:
    """Build the ``file://`` URI for a report path, defaulting when unset.

    The path is used verbatim: no normalisation, no existence check.
    """
    return f"file://{path or DEFAULT_REPORT_PATH}"


# ---------------------------------------------------------------------------
# Reader configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReaderConfig:
    wait_timeout_ms: int = DEFAULT_WAIT_TIMEOUT_MS
    headless: bool = True
    user_agent: str = ""
    proxy: str = ""


def _env_int(key: str, default: int) -> int:
    raw = os.environ.get(key, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_bool(key: str, default: bool) -> bool:
    raw = os.environ.get(key, "").strip().lower()
    if not raw:
        return default
    return raw not in ("false", "0", "no", "off")


def load_reader_config(env_file: Optional[str] = None) -> ReaderConfig:
    """Load reader settings from env vars (after sourcing the project .env)."""
    load_env_file(env_file or str(project_root() / ".env"))

    return ReaderConfig(
        wait_timeout_ms=_env_int("BENCHREPORT_WAIT_TIMEOUT_MS", DEFAULT_WAIT_TIMEOUT_MS),
        headless=_env_bool("BROWSER_HEADLESS", True),
        user_agent=os.environ.get("BROWSER_USER_AGENT", "").strip(),
        proxy=os.environ.get("BROWSER_PROXY_SERVER", "").strip(),
    )


def browser_options(cfg: ReaderConfig) -> Dict[str, Any]:
    """Kwargs for PlaywrightWeb derived from a ReaderConfig."""
    opts: Dict[str, Any] = {"headless": cfg.headless}
    if cfg.user_agent:
        opts["user_agent"] = cfg.user_agent
    if cfg.proxy:
        opts["proxy"] = {"server": cfg.proxy}
    return opts
