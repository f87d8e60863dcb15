from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .usage import DEFAULT_TIMEZONE

ENV_PREFIX = "RENEWABLE_BILLING_"
DEFAULT_DATA_DIR = Path("Users")
DEFAULT_ADMIN_PASSWORD = "ADMIN6408"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    timezone: str = DEFAULT_TIMEZONE
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    log_level: str = "WARNING"
    log_file: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        log_file = env.get(f"{ENV_PREFIX}LOG_FILE", "").strip()
        return cls(
            data_dir=Path(env.get(f"{ENV_PREFIX}DATA_DIR", "").strip() or DEFAULT_DATA_DIR),
            timezone=parse_timezone(env.get(f"{ENV_PREFIX}TIMEZONE")),
            admin_password=env.get(f"{ENV_PREFIX}ADMIN_PASSWORD") or DEFAULT_ADMIN_PASSWORD,
            log_level=parse_log_level(env.get(f"{ENV_PREFIX}LOG_LEVEL")),
            log_file=Path(log_file) if log_file else None,
        )


def parse_timezone(value: str | None) -> str:
    timezone_name = (value or "").strip() or DEFAULT_TIMEZONE
    try:
        ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {timezone_name!r}") from exc
    return timezone_name


def parse_log_level(value: str | None) -> str:
    level = (value or "").strip().upper() or "WARNING"
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {value!r}. Use {', '.join(LOG_LEVELS)}")
    return level


def _timezone_argument(value: str) -> str:
    try:
        return parse_timezone(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="renewable-billing",
        description="Renewable energy billing and usage tracking console",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=defaults.data_dir,
        help=f"Directory holding one record per consumer (default: {defaults.data_dir})",
    )
    parser.add_argument(
        "--timezone",
        type=_timezone_argument,
        default=defaults.timezone,
        help=f"Timezone used for usage labels (default: {defaults.timezone})",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level,
        help=f"Logging level (default: {defaults.log_level})",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=defaults.log_file,
        help="Also write log messages to this file",
    )
    return parser


def parse_arguments(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build settings from the environment, then apply command line overrides."""

    try:
        defaults = Settings.from_env(environ)
    except ValueError as exc:
        build_parser(Settings()).error(f"invalid environment setting: {exc}")
    args = build_parser(defaults).parse_args(argv)
    return replace(
        defaults,
        data_dir=args.data_dir,
        timezone=args.timezone,
        log_level=args.log_level,
        log_file=args.log_file,
    )
