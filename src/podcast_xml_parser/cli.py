"""Command line front end: parse a feed and print it as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence, TextIO, Tuple

from pydantic import HttpUrl, ValidationError

from . import __version__, config, config_constants, parser
from .exceptions import PodcastXmlParserError
from .models import ParseResult

_LOGGER = logging.getLogger(__name__)

URL_SCHEMES = ("http://", "https://")
STDIN_SOURCE = "-"


def apply_log_level(level: str, log_file: Optional[str] = None) -> None:
    """Configure the root logger for command line use.

    Args:
        level: Log level string (e.g., 'DEBUG', 'INFO', 'WARNING')
        log_file: Optional path to log file. If provided, logs will be written to both
                  console and file.

    Raises:
        ValueError: If log level is invalid
        OSError: If log file cannot be created or written to
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    root_logger = logging.getLogger()
    formatter = logging.Formatter(config_constants.LOG_FORMAT)

    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)
    else:
        for handler in root_logger.handlers:
            handler.setLevel(numeric_level)
    root_logger.setLevel(numeric_level)

    if log_file:
        file_handler_exists = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
            for h in root_logger.handlers
        )
        if not file_handler_exists:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            _LOGGER.info(f"Logging to file: {log_file}")


def _parse_header(value: str) -> Tuple[str, str]:
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid header {value!r}; expected 'Name: value'")
    return name.strip(), header_value.strip()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    arg_parser = argparse.ArgumentParser(
        prog="podcast-xml-parser",
        description="Parse a podcast RSS feed (URL, file or stdin) and print it as JSON.",
    )
    arg_parser.add_argument(
        "source",
        help="Feed URL (http/https), path to an XML file, or '-' to read from stdin",
    )
    arg_parser.add_argument(
        "--request-size",
        type=int,
        default=None,
        help="Only fetch the first N bytes of a feed URL and drop the truncated episode",
    )
    arg_parser.add_argument(
        "--header",
        dest="headers",
        action="append",
        type=_parse_header,
        default=[],
        metavar="'NAME: VALUE'",
        help="Extra HTTP header for feed URLs (repeatable)",
    )
    arg_parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    arg_parser.add_argument("--config", default=None, help="JSON or YAML file with fetch options")
    arg_parser.add_argument(
        "--log-level",
        default=config.DEFAULT_LOG_LEVEL,
        type=str.upper,
        choices=sorted(config.VALID_LOG_LEVELS),
        help="Logging level (default: %(default)s)",
    )
    arg_parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    arg_parser.add_argument(
        "--indent", type=int, default=2, help="JSON indentation (default: %(default)s)"
    )
    arg_parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return arg_parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> config.FetchConfig:
    """Merge the config file (if any) with command line overrides."""
    data: Dict[str, Any] = config.load_config_file(args.config) if args.config else {}
    cfg = config.FetchConfig(**data)

    overrides: Dict[str, Any] = {}
    if args.headers:
        headers = dict(cfg.request_headers)
        headers.update(dict(args.headers))
        overrides["request_headers"] = headers
    if args.request_size is not None:
        overrides["request_size"] = args.request_size
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    if not overrides:
        return cfg
    return config.FetchConfig(**{**cfg.model_dump(), **overrides})


def _is_url(source: str) -> bool:
    return source.lower().startswith(URL_SCHEMES)


def _run(args: argparse.Namespace, cfg: config.FetchConfig, stdin: TextIO) -> ParseResult:
    if _is_url(args.source):
        return parser.parse_url(HttpUrl(args.source), cfg)

    if cfg.request_size is not None or cfg.request_headers:
        _LOGGER.warning("Fetch options only apply to feed URLs; ignoring them for %s", args.source)
    if args.source == STDIN_SOURCE:
        return parser.parse(stdin.read())
    return parser.parse(Path(args.source).expanduser().read_text(encoding="utf-8"))


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    apply_log_level_fn: Optional[Callable[[str, Optional[str]], None]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    logger: Optional[logging.Logger] = None,
) -> int:
    """Entry point for the CLI; returns an exit status code."""
    log = logger or _LOGGER
    if apply_log_level_fn is None:
        apply_log_level_fn = apply_log_level
    out = stdout or sys.stdout

    args = parse_args(argv)

    try:
        apply_log_level_fn(args.log_level, args.log_file)
    except (ValueError, OSError) as exc:
        log.error(f"Error: {exc}")
        return 1

    try:
        cfg = _build_config(args)
    except ValidationError as exc:
        log.error(f"Invalid configuration: {exc}")
        return 1
    except ValueError as exc:
        log.error(f"Error: {exc}")
        return 1

    try:
        result = _run(args, cfg, stdin or sys.stdin)
    except PodcastXmlParserError as exc:
        log.error(f"Error: {exc}")
        return 1
    except ValidationError as exc:
        log.error(f"Invalid feed URL: {exc}")
        return 1
    except OSError as exc:
        # requests.RequestException derives from OSError
        log.error(f"Could not read {args.source}: {exc}")
        return 1

    json.dump(result.to_dict(), out, indent=args.indent, ensure_ascii=False)
    out.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
