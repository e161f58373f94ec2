"""
Command-line entrypoint: normalize raw charger readings from a JSON file.

Reads one raw reading or a list of readings from a JSON file (``-`` for
stdin) and writes the canonical records to stdout as JSON.  With
``--group`` the list is grouped by device id the way the REST collaborator
consumes it.

Usage:
    python -m chargers.src.main readings.json
    python -m chargers.src.main readings.json --mode name
    cat batch.json | python -m chargers.src.main - --group

Structured JSON logging goes to stderr so stdout stays machine-readable.

CHANGELOG:
- 2026-10-14: Initial creation

TODO:
- None
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TextIO

from chargers.src.config import ParserSettings
from chargers.src.parser import ObservationParser

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging on stderr.

    Args:
        level: Root log level name (e.g. ``"DEBUG"``).
    """

    class _JsonFormatter(logging.Formatter):
        """Minimal JSON log formatter."""

        def format(self, record: logging.LogRecord) -> str:
            log_entry = {
                "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
            }
            if record.exc_info and record.exc_info[1] is not None:
                log_entry["exception"] = self.formatException(record.exc_info)
            return json.dumps(log_entry)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def log_config_summary(settings: ParserSettings) -> None:
    """Log the effective parser settings at startup."""
    logger.info(
        "Observation parser starting with config: "
        "observation_match_mode=%s, charger_online_window_s=%s, "
        "message_topic_prefix=%s, log_level=%s",
        settings.observation_match_mode,
        settings.charger_online_window_s,
        settings.message_topic_prefix,
        settings.log_level,
    )


# ---------------------------------------------------------------------------
# Normalization run
# ---------------------------------------------------------------------------


def _read_source(path: str, stdin: TextIO) -> str:
    if path == "-":
        return stdin.read()
    return Path(path).read_text(encoding="utf-8")


def run(
    document: Any,
    *,
    parser: ObservationParser,
    mode: str | None = None,
    group: bool = False,
) -> Any:
    """Normalize a decoded JSON *document* and return a JSON-ready result.

    A list yields a list of records (or, with *group*, a mapping of device
    id to records); a single object yields one record or ``None``.
    """
    if group:
        grouped = parser.parse_observations(document)
        return {
            device: [record.model_dump(by_alias=True) for record in records]
            for device, records in grouped.items()
        }
    if isinstance(document, list):
        records = (parser.parse_observation(item, mode) for item in document)
        return [record.model_dump(by_alias=True) for record in records if record is not None]
    record = parser.parse_observation(document, mode)
    return None if record is None else record.model_dump(by_alias=True)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    p = argparse.ArgumentParser(
        description="Normalize raw charger observations into canonical records"
    )
    p.add_argument("path", help="JSON file with one reading or a list ('-' for stdin)")
    p.add_argument(
        "--mode", choices=("id", "name"), default=None,
        help="Key resolution mode (default: OBSERVATION_MATCH_MODE or 'id')",
    )
    p.add_argument(
        "--group", action="store_true",
        help="Group a list of readings by device id from composite reading ids",
    )
    return p.parse_args(argv)


def main(
    argv: list[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Synchronous entrypoint.  Returns the process exit status."""
    args = parse_args(argv)
    settings = ParserSettings()
    configure_logging(settings.log_level)
    log_config_summary(settings)

    try:
        document = json.loads(_read_source(args.path, stdin or sys.stdin))
    except (OSError, ValueError):
        logger.error("Could not read JSON input from %s", args.path, exc_info=True)
        return 1

    result = run(document, parser=ObservationParser(settings), mode=args.mode, group=args.group)
    out = stdout or sys.stdout
    out.write(json.dumps(result, default=str, ensure_ascii=False))
    out.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
