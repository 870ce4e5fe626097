#!/usr/bin/env python3
"""Benchmark report reader.

Opens a rendered benchmark report (local HTML file) in headless Chromium,
waits for the "Benchmark Report" marker, and prints the text of the
``body > div > div`` region to stdout.

The marker wait is best-effort: on timeout a warning goes to stderr and the
region is read anyway. Any other failure (browser launch, navigation,
missing region) is fatal and surfaces as a traceback with a non-zero exit.

Usage:
    python3 benchreport/report_reader.py [report_path]
    python3 benchreport/report_reader.py /tmp/benchmark.html --timeout-ms 5000
    benchreport --headed -v

Exit codes:
    0: Report text printed (even if the marker never appeared)
    1: Uncaught failure (browser, navigation, selector)
    2: Bad arguments
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Optional

_repo = Path(__file__).resolve().parent.parent
if str(_repo) not in sys.path:
    sys.path.insert(0, str(_repo))

from benchreport.lib.browser import BrowserCapability, PlaywrightWeb, element_handle
from benchreport.lib.common import setup_logger
from benchreport.lib.config import (
    MARKER_TEXT,
    NODE_SELECTOR,
    ExitCode,
    ReaderConfig,
    browser_options,
    load_reader_config,
    resolve_report_url,
)


@dataclass(frozen=True)
class StepOutcome:
    ok: bool
    error: Optional[BaseException] = None


class ReportReader:
    """Read one benchmark report and write its text to *out*.

    When no *web* is given a PlaywrightWeb is built from *config* and closed
    after the text is written. An injected *web* is initialised here but
    left open for its owner.
    """

    def __init__(
        self,
        location: Optional[str] = None,
        *,
        web: Optional[BrowserCapability] = None,
        config: Optional[ReaderConfig] = None,
        out: Optional[IO[str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config or ReaderConfig()
        self.url = resolve_report_url(location)
        self._owns_web = web is None
        self.web: BrowserCapability = web or PlaywrightWeb(**browser_options(self.config))
        self.out = out if out is not None else sys.stdout
        self.log = logger or logging.getLogger("benchreport.reader")

    async def wait_for_marker(self) -> StepOutcome:
        try:
            await self.web.wait_for_text(MARKER_TEXT, self.config.wait_timeout_ms)
        except Exception as exc:
            self.log.warning(f'wait for text "{MARKER_TEXT}" failed: {exc}')
            return StepOutcome(ok=False, error=exc)
        return StepOutcome(ok=True)

    async def extract(self) -> str:
        async with element_handle(self.web, NODE_SELECTOR) as handle:
            text = await self.web.read_text(handle)
        self.log.debug(f"extracted {len(text)} chars from {NODE_SELECTOR!r}")
        return text

    async def run(self) -> None:
        try:
            await self._run()
        finally:
            if self._owns_web:
                await self.web.close()

    async def _run(self) -> None:
        self.log.debug(f"report: {self.url}")
        await self.web.init()
        await self.web.goto(self.url)

        outcome = await self.wait_for_marker()
        self.log.debug(f"marker wait ok={outcome.ok}")

        text = await self.extract()
        self.out.write(f"{text}\n")
        self.out.flush()


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="benchreport",
        description="Print the text of a rendered benchmark report.",
    )
    p.add_argument("report_path", nargs="?", default="",
                   help="Path to the report HTML (default: /tmp/benchmark.html)")
    p.add_argument("--timeout-ms", type=int, default=None,
                   help="Marker wait bound in milliseconds (default: 90000)")
    p.add_argument("--headed", action="store_true",
                   help="Show the browser window")
    p.add_argument("-v", "--verbose", action="store_true",
                   help="Debug logging on stderr")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.timeout_ms is not None and args.timeout_ms <= 0:
        parser.print_usage(sys.stderr)
        parser.exit(int(ExitCode.USAGE), f"{parser.prog}: error: --timeout-ms must be positive\n")
    log = setup_logger("reader", verbose=args.verbose)

    cfg = load_reader_config()
    if args.timeout_ms is not None:
        cfg = dataclasses.replace(cfg, wait_timeout_ms=args.timeout_ms)
    if args.headed:
        cfg = dataclasses.replace(cfg, headless=False)

    reader = ReportReader(args.report_path, config=cfg, logger=log)
    asyncio.run(reader.run())
    return int(ExitCode.OK)


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
