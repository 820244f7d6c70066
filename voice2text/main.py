"""Main application entry point for Voice2Text."""

import sys
import asyncio
import argparse
import logging
from functools import partial
from pathlib import Path
from typing import Optional

from .config import Voice2TextConfig

logger = logging.getLogger(__name__)

VERSION = "Voice2Text v0.1.0"


def setup_logging(config: Voice2TextConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/voice2text.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("Voice2Text starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def load_config(args: argparse.Namespace) -> Voice2TextConfig:
    config = Voice2TextConfig(args.config)
    setup_logging(config, args.log_level or config.get('logging.level', 'INFO'))
    return config


def run_relay_command(args: argparse.Namespace) -> None:
    from .relay import run_relay

    config = load_config(args)
    if args.web_root:
        config.set('relay.web_root', args.web_root)
    run_relay(config, host=args.host, port=args.port)


def run_record_command(args: argparse.Namespace) -> None:
    from .audio import AudioCapture, check_microphone_available
    from .services import RecordingService
    from .transcription import WebhookTranscriptionBackend
    from .ui import TerminalClient

    config = load_config(args)
    if args.webhook_url:
        config.set('client.webhook_url', args.webhook_url)
    if args.relay_url:
        config.set('client.relay_url', args.relay_url)

    if not check_microphone_available():
        print("❌ Sorry, no audio input device is available for recording.")
        sys.exit(1)

    capture_factory = partial(
        AudioCapture,
        sample_rate=config.get('audio.sample_rate', 16000),
        chunk_size=config.get('audio.chunk_size', 1024),
        channels=config.get('audio.channels', 1),
    )
    service = RecordingService(
        config,
        backend=WebhookTranscriptionBackend.from_config(config),
        capture_factory=capture_factory,
    )
    client = TerminalClient(service)
    asyncio.run(client.run())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Voice2Text - record speech and transcribe it through a webhook",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=VERSION
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: looks for voice2text.yaml)"
    )
    common.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    relay = subparsers.add_parser("relay", parents=[common], help="Run the relay server")
    relay.add_argument("--host", type=str, help="Interface to bind (default: relay.host)")
    relay.add_argument("--port", type=int, help="Port to listen on (default: relay.port, 3000)")
    relay.add_argument("--web-root", type=str, help="Directory of client assets to serve")
    relay.set_defaults(func=run_relay_command)

    record = subparsers.add_parser("record", parents=[common], help="Record and transcribe from the terminal")
    record.add_argument("--webhook-url", type=str, help="Webhook that receives the recording")
    record.add_argument("--relay-url", type=str, help="Relay base URL used for localhost webhooks")
    record.set_defaults(func=run_record_command)

    return parser


def main(argv: Optional[list] = None) -> None:
    """Main entry point for Voice2Text."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except Exception as e:
        print(f"❌ Error: {e}")
        logging.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
