"""Proofread a piece of text from the command line and print the report.

Usage: python -m proofmark "i think he is gud"
"""

import argparse
import asyncio
import sys

from proofmark.config import settings
from proofmark.core.reconciliation import ReconciliationEngine
from proofmark.logging_config import configure_logging
from proofmark.services.language_model import HttpLanguageModelService
from proofmark.services.proofreader import Proofreader
from proofmark.services.report import format_report


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proofmark",
        description="Proofread text with the configured language model",
    )
    parser.add_argument("text", nargs="?", help="Text to proofread (default: read stdin)")
    parser.add_argument(
        "--accept-all",
        action="store_true",
        help="Accept every located correction, left to right, and print the final text",
    )
    return parser


async def run(text: str, accept_all: bool = False, proofreader: Proofreader | None = None) -> str:
    engine = ReconciliationEngine(proofreader or Proofreader(HttpLanguageModelService()), text=text)
    outcome = await engine.submit()
    if outcome.result is None:
        return f"{outcome.notice or 'Nothing to proofread'}\n"

    report = format_report(text, outcome.result, outcome.corrections)
    if accept_all:
        while engine.corrections:
            engine.query_at(engine.corrections[0].start_index)
            engine.accept()
        report += f"\nACCEPTED TEXT:\n{engine.buffer}\n"
    return report


def main(argv: list[str] | None = None) -> int:
    args = create_argument_parser().parse_args(argv)
    text = args.text if args.text is not None else sys.stdin.read()
    configure_logging(settings)
    print(asyncio.run(run(text, args.accept_all)), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
