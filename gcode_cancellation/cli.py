import sys
import socket
import logging
import argparse
from datetime import datetime, timezone

from . import __version__
from .errors import PreprocessError
from .preprocess import parse_layer_filter, preprocess_file

APP_NAME = "gcode_cancellation"
VERBOSITY_LEVELS = ("WARNING", "INFO", "DEBUG")


# -----------------------------------------------------------------------------#
# RFC-5424 compliant formatter for logging.
# -----------------------------------------------------------------------------
class RFC5424Formatter(logging.Formatter):
    def __init__(self, appname=APP_NAME):
        super().__init__()
        self.appname = appname
        self.hostname = socket.gethostname()

    def format(self, record):
        pri = "<14>"
        version = "1"
        msgid = "-"
        timestamp = (
            datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z")
        )
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return (
            f"{pri}{version} {timestamp} {self.hostname} {self.appname} "
            f"{record.process} {msgid} {message}"
        )


# -----------------------------------------------------------------------------#
# Logging setup.
# -----------------------------------------------------------------------------
def setup_logging(level_str, log_file=None):
    numeric_level = getattr(logging, level_str.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level_str}")

    formatter = RFC5424Formatter()
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)
    logging.debug("Logging initialized at level %s", level_str.upper())


def verbosity_level(verbose):
    return VERBOSITY_LEVELS[min(verbose, len(VERBOSITY_LEVELS) - 1)]


def build_parser():
    parser = argparse.ArgumentParser(
        prog="gcode-cancellation",
        description=(
            "Preprocess G-Code files to inject support for Klipper's "
            "EXCLUDE_OBJECT feature. Supported slicers: Cura, Slic3r, "
            "PrusaSlicer, SuperSlicer, OrcaSlicer, ideaMaker and G-code with "
            "Marlin M486 tags."
        ),
    )
    parser.add_argument("gcode", nargs="+", help="G-code input files")
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Verbose mode (-v, -vv)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL); overrides -v",
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument(
        "-o",
        "--output-suffix",
        default=None,
        help="Add a suffix to the G-code output. Without this the file will be "
        "rewritten in place.",
    )
    parser.add_argument("-O", "--output-dir", default=None, help="G-code output directory")

    processing = parser.add_mutually_exclusive_group()
    processing.add_argument(
        "-l",
        "--layers",
        default=None,
        metavar="LAYERS",
        help="Layers to collect shape points from. '*' collects all layers, "
        "'*/n' every nth layer, 'n-m' layers n to m. Default: '*'",
    )
    processing.add_argument(
        "--fast",
        action="store_true",
        help="Use only the first layer for point collection",
    )

    # Accepted for compatibility with older invocations, shapely is always used.
    shapely_group = parser.add_mutually_exclusive_group()
    shapely_group.add_argument(
        "--enable-shapely", action="store_true", help=argparse.SUPPRESS
    )
    shapely_group.add_argument(
        "--disable-shapely", action="store_true", help=argparse.SUPPRESS
    )
    return parser


# -----------------------------------------------------------------------------#
# Main entry point.
# -----------------------------------------------------------------------------
def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level or verbosity_level(args.verbose), args.log_file)
    except ValueError as e:
        parser.error(str(e))

    if args.fast:
        layers = "0"
    elif args.layers is not None:
        layers = args.layers
    else:
        layers = "*"

    try:
        layer_filter = parse_layer_filter(layers)
    except PreprocessError as e:
        logging.error("%s", e)
        sys.exit(1)

    for filename in args.gcode:
        logging.debug("Processing GCode file: %s", filename)
        try:
            preprocess_file(
                filename,
                layer_filter,
                output_suffix=args.output_suffix,
                output_dir=args.output_dir,
            )
        except PreprocessError as e:
            logging.error("Error processing file %s: %s", filename, e)
            sys.exit(1)
        logging.info("Successfully processed %s", filename)


if __name__ == "__main__":
    main()
