"""Generate a lesson rotation calendar (.ics) for one grade.

Loads the school calendar CSV, the rotation template and the lesson times
from a data directory or URL, asks for a label per lesson (or reads them from
a JSON file), and writes calendar.ics.

Run with: python scripts/generate_calendar.py
Grade:    python scripts/generate_calendar.py --grade myp
Choices:  python scripts/generate_calendar.py --choices data/choices.example.json
Remote:   python scripts/generate_calendar.py --source https://example.org/data
Stdout:   python scripts/generate_calendar.py --choices my.json --stdout > out.ics

Exit codes:
  0 = success (calendar.ics written, or document on stdout with --stdout)
  1 = error (message on stderr)
"""

import argparse
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Allow running from a checkout without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from rotation_calendar.config import CalendarConfig  # noqa: E402
from rotation_calendar.errors import CalendarError  # noqa: E402
from rotation_calendar.generator import CalendarGenerator  # noqa: E402
from rotation_calendar.loaders import loader_for  # noqa: E402
from rotation_calendar.logging import get_logger, setup_logging  # noqa: E402
from rotation_calendar.prompts import (  # noqa: E402
    ConsoleChoicePrompter,
    JsonChoicePrompter,
)
from rotation_calendar.sinks import FileDocumentSink, MemoryDocumentSink  # noqa: E402


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for the calendar."""
    print(msg, file=sys.stderr)


def _parse_args(config: CalendarConfig) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Generate a lesson rotation calendar (.ics).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--grade",
        type=str,
        default=config.grade,
        help=f"Grade key from the rotation template (default: {config.grade}).",
    )
    parser.add_argument(
        "--source",
        type=str,
        default=config.data_source,
        help=f"Data directory or base URL (default: {config.data_source}).",
    )
    parser.add_argument(
        "--choices",
        type=str,
        default=None,
        help="JSON file of lesson id -> label. Prompts on the terminal if omitted.",
    )

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--output",
        type=str,
        default=config.output_dir,
        help=f"Directory to write calendar.ics into (default: {config.output_dir}).",
    )
    output_group.add_argument(
        "--stdout",
        action="store_true",
        help="Print the calendar to stdout instead of writing a file.",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=config.log_json,
        help="Emit JSON log lines on stderr.",
    )
    return parser.parse_args()


def main() -> int:
    config = CalendarConfig()
    args = _parse_args(config)
    setup_logging(json_output=args.json_logs, log_level=config.log_level)
    log = get_logger("generate_calendar")

    config = config.model_copy(update={"data_source": args.source, "grade": args.grade})
    loader = loader_for(
        config.data_source,
        timeout=config.fetch_timeout,
        attempts=config.fetch_attempts,
    )
    prompter = JsonChoicePrompter(args.choices) if args.choices else ConsoleChoicePrompter()
    sink = MemoryDocumentSink() if args.stdout else FileDocumentSink(args.output)

    try:
        export = CalendarGenerator(loader, prompter, sink, config).run()
    except CalendarError as e:
        log.error("generation_failed", error=str(e), type=type(e).__name__)
        _log(f"Could not generate the calendar: {e}")
        return 1
    except KeyboardInterrupt:
        _log("Aborted.")
        return 1

    if args.stdout:
        sys.stdout.write(export.document)
    else:
        _log(f"Wrote {export.event_count} lessons to {export.location}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
