"""Command line entry point for KafkaLens."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from kafkalens.constants.defaults import LOG_FILE_DEFAULT, LOG_LEVELS
from kafkalens.models.state.config_manager import (
    AppSettings,
    ConfigLoadError,
    ConfigManager,
    ConfigSaveError,
)

logger = logging.getLogger("kafkalens")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def _command(value: str) -> str:
    if not value.strip():
        raise argparse.ArgumentTypeError("must not be empty")
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="kafkalens",
        description="Inspect a Kafka topic: consume it and query the buffered records",
        allow_abbrev=False,
    )
    ap.add_argument("--cluster", required=True, help="Cluster id known to the backend")
    ap.add_argument("--topic", required=True, help="Topic to inspect")
    ap.add_argument(
        "--backend", type=_command, default=None, help="Backend command (overrides settings)"
    )
    ap.add_argument("--config", type=Path, default=None, help="Settings file (YAML)")
    ap.add_argument(
        "--poll-interval-ms",
        type=_positive_int,
        default=None,
        help="Consumer status poll interval while consuming",
    )
    ap.add_argument("--log-file", type=Path, default=Path(LOG_FILE_DEFAULT))
    ap.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Overrides the settings log level",
    )
    ap.add_argument(
        "--save-config",
        action="store_true",
        help="Write the settings, with command line overrides, back to the settings file",
    )
    return ap.parse_args(argv)


def setup_logging(level: str, log_file: Path) -> None:
    # The terminal belongs to the TUI, so log to a file
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        filename=str(log_file),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def load_settings(args: argparse.Namespace) -> AppSettings:
    """Load settings and apply command line overrides."""
    try:
        settings = ConfigManager.load(args.config)
    except ConfigLoadError as exc:
        logger.warning("Using default settings: %s", exc)
        settings = AppSettings()

    if args.backend:
        settings.backend_command = args.backend
    if args.poll_interval_ms is not None:
        settings.poll_interval_ms = args.poll_interval_ms
    if args.log_level:
        settings.log_level = args.log_level
    return settings


def save_settings(settings: AppSettings, path: Path | None) -> Path | None:
    """Persist settings; failures are logged and do not stop the app."""
    try:
        written = ConfigManager.save(settings, path)
    except ConfigSaveError as exc:
        logger.error("Settings not saved: %s", exc)
        return None
    logger.info("Settings saved to %s", written)
    return written


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_settings(args)
    setup_logging(settings.log_level, args.log_file)
    logger.info("Starting KafkaLens for %s/%s", args.cluster, args.topic)
    if args.save_config:
        save_settings(settings, args.config)

    from kafkalens.app import KafkaLensApp

    app = KafkaLensApp(args.cluster, args.topic, settings=settings, config_path=args.config)
    app.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
