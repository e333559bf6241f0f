"""
Ask the handbook answer bot a single question from the command line.

Run as a module so package imports work:

    python -m scripts.ask "What is the deductible?" --follow-ups
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from src.api.deps import build_orchestrator
from src.core.config import AppConfig
from src.core.errors import AnswerBotError
from src.core.models import ChatTurn, RequestOverrides


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("question", help="Question to answer")
    parser.add_argument("--top", type=int, default=3, help="Max documents to retrieve")
    parser.add_argument("--exclude-category", default=None, help="Skip documents in this category")
    parser.add_argument(
        "--retrieval-mode",
        default=None,
        help='Retrieval mode; "Vector" skips query formulation',
    )
    parser.add_argument("--follow-ups", action="store_true", help="Suggest follow-up questions")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    config = AppConfig.from_env()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    orchestrator, documents_loaded = build_orchestrator(config)
    if orchestrator is None:
        print(
            f"Orchestrator unavailable (documents loaded: {documents_loaded}). "
            "Check DOCUMENTS_PATH and LLM_API_KEY.",
            file=sys.stderr,
        )
        return 2

    overrides = RequestOverrides(
        top=args.top,
        exclude_category=args.exclude_category,
        retrieval_mode=args.retrieval_mode,
        suggest_follow_up_questions=args.follow_ups,
    )
    try:
        response = await orchestrator.reply([ChatTurn(user=args.question)], overrides)
    except AnswerBotError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
    return 0


def main(argv=None) -> int:
    return asyncio.run(run(parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
