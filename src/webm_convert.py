#!/usr/bin/env python3
"""
Batch convert videos to WebM, one folder per title.

Each input is integrity-checked, probed for its resolution (unless one is forced
with -r), encoded to VP9 WebM with ffmpeg, and verified again. Progress and the
final summary are sent to the Pushover recipients in ~/.webm-convert.json.
"""

import argparse
import signal
import sys
import time
from pathlib import Path

import webmconvert
from webmconvert.transcode import SUPPORTED_HEIGHTS, BatchConverter, ConsoleProgress
from webmconvert.utils import EXIT_ERROR, EXIT_INTERRUPTED, EXIT_OK, LogLevel, constants, logger, system_util
from webmconvert.utils.config_store import apply_env_fallback, config_path, load_or_init
from webmconvert.utils.errors import MissingDependencyError, StorageError, UsageError
from webmconvert.utils.file_util import expand_inputs
from webmconvert.utils.pushover import PushoverNotifier


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports problems as UsageError instead of exiting with code 2."""

    def error(self, message):
        raise UsageError(message)


def _signal_handler(signum, _frame):
    """Turn SIGINT/SIGTERM into KeyboardInterrupt so a blocking encode is abandoned."""
    try:
        sig_name = signal.Signals(signum).name
    except ValueError:
        sig_name = str(signum)
    logger.log("signal.received", LogLevel.DEBUG, signal=sig_name)
    raise KeyboardInterrupt(sig_name)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="webm-convert",
        description="Convert video files to WebM (VP9), one output folder per title. "
                    "Sends Pushover notifications when credentials are configured.",
        epilog="Example: webm-convert -r 720 ./episodes/*.mkv",
    )
    parser.add_argument("inputs", nargs="*", metavar="input",
                        help="Video files (or quoted glob patterns) to convert, in order")
    parser.add_argument("-r", "--resolution", type=int, choices=SUPPORTED_HEIGHTS,
                        help="Force the resolution profile instead of probing each file")
    parser.add_argument("-o", "--output-dir", default=".",
                        help="Folder that receives one sub-folder per title (default: current folder)")
    parser.add_argument("--optimize", action="store_true",
                        help="Optimize each WebM with mkclean after encoding")
    parser.add_argument("--delay", type=float, default=constants.START_DELAY_SECONDS,
                        help=f"Seconds to wait before starting (default: {constants.START_DELAY_SECONDS})")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {webmconvert.__version__}")
    return parser


def main(argv=None) -> int:
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        inputs = expand_inputs(args.inputs)
        if not inputs:
            raise UsageError("at least one input file is required")
    except UsageError as e:
        parser.print_usage(sys.stderr)
        logger.safe_print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR

    logger.set_log_level(LogLevel.DEBUG if args.debug else LogLevel.INFO)

    try:
        system_util.which_or_die(constants.FFMPEG_BIN)
        if args.resolution is None:
            system_util.which_or_die(constants.FFPROBE_BIN)
        if args.optimize:
            system_util.which_or_die(constants.MKCLEAN_BIN)
        config = apply_env_fallback(load_or_init(config_path()))
    except (MissingDependencyError, StorageError) as e:
        logger.log("startup.error", LogLevel.ERROR, error_type=type(e).__name__, msg=str(e))
        return EXIT_ERROR

    output_root = Path(args.output_dir).expanduser().resolve()
    notifier = PushoverNotifier(config)
    progress = ConsoleProgress()
    converter = BatchConverter(
        config,
        output_root,
        resolution=args.resolution,
        optimize=args.optimize,
        notifier=notifier,
        tick_interval=constants.TICK_INTERVAL_SECONDS,
        progress=progress,
    )

    previous_handlers = {
        sig: signal.signal(sig, _signal_handler) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    started = False
    try:
        if args.delay > 0:
            logger.log("batch.pending", LogLevel.INFO, msg=f"Conversion starting in {args.delay:g} seconds...")
            time.sleep(args.delay)
        logger.log("batch.queued", LogLevel.INFO, msg=f"{len(inputs)} files will be converted.")
        started = True
        converter.run(inputs)
    except KeyboardInterrupt:
        if not started:
            notifier.notify("Conversion interrupted.", is_error=True)
        logger.log("batch.aborted", LogLevel.WARN, msg="Conversion interrupted.")
        return EXIT_INTERRUPTED
    finally:
        progress.close()
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
