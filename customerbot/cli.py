#!/usr/bin/env python3
"""
Agentic CustomerBot - Command Line Interface

Commands:
    query       - Ask a single question
    followup    - Ask a follow-up question (no suggestions)
    facts       - Show the facts retrieved for a question
    chat        - Start an interactive chat session
    check       - Probe the Azure OpenAI deployments

Usage:
    python -m customerbot.cli query "How long does a refund take?"
    python -m customerbot.cli facts "Is shipping free?" --top-k 5
    python -m customerbot.cli chat
    python -m customerbot.cli check

For help on a specific command:
    python -m customerbot.cli <command> --help
"""

import argparse
import asyncio
import sys
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, TypeVar

import aiohttp

from customerbot.config import settings
from customerbot.errors import RequestFailed
from customerbot.logger import init_logging, setup_logging, get_logger
from customerbot.messages import msg
from customerbot.pipeline.agent import SupportAgent, create_agent

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class ConversationTurn:
    """
    One exchange shown in the interactive transcript.

    Attributes:
        sender: "user" or "bot"
        text: Message text
        facts: Facts attached to a bot answer
        suggestions: Follow-up questions offered with a bot answer
    """
    sender: str
    text: str
    facts: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


async def _with_agent(action: Callable[[SupportAgent], Awaitable[T]]) -> T:
    """Run an action against an agent whose HTTP session lives for the call."""
    async with aiohttp.ClientSession() as session:
        return await action(create_agent(session))


def _print_facts(facts: List[str]) -> None:
    if not facts:
        print(f"   {msg('facts.none')}")
        return
    for i, fact in enumerate(facts, 1):
        print(f"   {i}. {fact}")


def cmd_query(args: argparse.Namespace) -> int:
    """Ask a single question and get a response."""
    print(f"\n❓ Question: {args.question}")
    print("-" * 50)

    try:
        result = asyncio.run(_with_agent(
            lambda agent: agent.handle_query(
                args.question, top_k=args.top_k, min_similarity=args.min_similarity
            )
        ))
    except RequestFailed as e:
        logger.error(f"Query failed: {e}")
        print(f"❌ {msg('cli.request_failed')}")
        return 1

    print(f"\n💬 Answer:\n{result.answer}")

    if args.show_facts:
        print("\n📚 Facts:")
        _print_facts(result.facts)

    if result.follow_up_suggestions:
        print("\n💡 You might also ask:")
        for suggestion in result.follow_up_suggestions:
            print(f"   - {suggestion}")

    return 0


def cmd_followup(args: argparse.Namespace) -> int:
    """Ask a follow-up question."""
    try:
        result = asyncio.run(_with_agent(
            lambda agent: agent.handle_follow_up(args.question)
        ))
    except RequestFailed as e:
        logger.error(f"Follow-up failed: {e}")
        print(f"❌ {msg('cli.request_failed')}")
        return 1

    print(f"\n💬 Answer:\n{result.answer}")
    if args.show_facts:
        print("\n📚 Facts:")
        _print_facts(result.facts)
    return 0


def cmd_facts(args: argparse.Namespace) -> int:
    """Show the facts retrieved for a question, without generating an answer."""
    try:
        result = asyncio.run(_with_agent(
            lambda agent: agent.retriever.retrieve(
                args.question, top_k=args.top_k, min_similarity=args.min_similarity
            )
        ))
    except RequestFailed as e:
        logger.error(f"Retrieval failed: {e}")
        print(f"❌ {msg('cli.request_failed')}")
        return 1

    print(f"\n📚 Facts for: {args.question}")
    _print_facts(result.facts)
    print(
        f"\n   scored={result.candidates_scored} "
        f"skipped={result.embedding_failures} "
        f"read_errors={len(result.corpus_errors)}"
    )
    return 0


async def _chat_loop(agent: SupportAgent, show_facts: bool) -> None:
    transcript: List[ConversationTurn] = []
    suggestions: List[str] = []

    while True:
        try:
            user_input = (await asyncio.to_thread(input, "You: ")).strip()
        except (KeyboardInterrupt, EOFError):
            print("\n👋 Goodbye!")
            return

        if not user_input:
            continue
        if user_input.lower() == "/quit":
            print("\n👋 Goodbye!")
            return
        if user_input.lower() == "/history":
            for turn in transcript:
                print(f"   [{turn.sender}] {turn.text[:80]}")
            print()
            continue

        # A number picks one of the offered suggestions as a follow-up
        follow_up = user_input.isdigit() and 1 <= int(user_input) <= len(suggestions)
        question = suggestions[int(user_input) - 1] if follow_up else user_input
        transcript.append(ConversationTurn(sender="user", text=question))

        try:
            if follow_up:
                print(f"You (follow-up): {question}")
                result = await agent.handle_follow_up(question)
                turn = ConversationTurn(sender="bot", text=result.answer, facts=result.facts)
            else:
                result = await agent.handle_query(question)
                turn = ConversationTurn(
                    sender="bot",
                    text=result.answer,
                    facts=result.facts,
                    suggestions=result.follow_up_suggestions
                )
        except RequestFailed as e:
            logger.error(f"Chat request failed: {e}")
            print(f"Bot: {msg('cli.request_failed')}\n")
            continue

        transcript.append(turn)
        suggestions = turn.suggestions
        print(f"Bot: {turn.text}")
        if show_facts:
            _print_facts(turn.facts)
        for i, suggestion in enumerate(suggestions, 1):
            print(f"   [{i}] {suggestion}")
        print()


def cmd_chat(args: argparse.Namespace) -> int:
    """Start an interactive chat session."""
    print("\n" + "=" * 60)
    print("🤖 Agentic CustomerBot - Interactive Chat")
    print("=" * 60)
    print("Type your questions below. Commands:")
    print("  <n>       - Ask suggested follow-up number n")
    print("  /history  - Show this session's transcript")
    print("  /quit     - Exit chat")
    print("-" * 60)
    print(f"📚 Knowledge base: {settings.knowledge.path}\n")

    asyncio.run(_with_agent(lambda agent: _chat_loop(agent, args.show_facts)))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Probe the embedding and chat deployments."""
    from customerbot.diagnostics import check_all

    print("\n🔍 Azure OpenAI deployment check")
    print("-" * 50)

    try:
        statuses = check_all(settings)
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    for status in statuses:
        icon = "✅" if status.ok else "❌"
        print(f"{icon} {status.name:<11} {status.deployment:<20} {status.summary}")
        if status.error:
            print(f"   Error: {status.error}")
        if status.limit_tokens:
            print(f"   Tokens/min: {status.remaining_tokens}/{status.limit_tokens} remaining")
        if status.limit_requests:
            print(f"   Requests/min: {status.remaining_requests}/{status.limit_requests} remaining")

    return 0 if all(s.ok for s in statuses) else 1


def _add_retrieval_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--top-k", "-k",
        type=int,
        default=None,
        help=f"Maximum facts to retrieve (default: {settings.retrieval.top_k})"
    )
    parser.add_argument(
        "--min-similarity",
        type=float,
        default=None,
        help=f"Similarity threshold (default: {settings.retrieval.min_similarity})"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all commands."""
    parser = argparse.ArgumentParser(
        prog="customerbot",
        description="Agentic CustomerBot CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m customerbot.cli query "How long does a refund take?" --show-facts
    python -m customerbot.cli facts "Is shipping free?" --min-similarity 0.5
    python -m customerbot.cli chat
        """
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    query_parser = subparsers.add_parser("query", help="Ask a single question")
    query_parser.add_argument("question", help="Question to ask")
    _add_retrieval_args(query_parser)
    query_parser.add_argument("--show-facts", action="store_true", help="Show retrieved facts")
    query_parser.set_defaults(func=cmd_query)

    followup_parser = subparsers.add_parser("followup", help="Ask a follow-up question")
    followup_parser.add_argument("question", help="Follow-up question")
    followup_parser.add_argument("--show-facts", action="store_true", help="Show retrieved facts")
    followup_parser.set_defaults(func=cmd_followup)

    facts_parser = subparsers.add_parser("facts", help="Show retrieved facts only")
    facts_parser.add_argument("question", help="Question to retrieve facts for")
    _add_retrieval_args(facts_parser)
    facts_parser.set_defaults(func=cmd_facts)

    chat_parser = subparsers.add_parser("chat", help="Start an interactive chat session")
    chat_parser.add_argument("--show-facts", action="store_true", help="Show retrieved facts")
    chat_parser.set_defaults(func=cmd_chat)

    check_parser = subparsers.add_parser("check", help="Check the Azure OpenAI deployments")
    check_parser.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.verbose:
        setup_logging(level="DEBUG", log_file=settings.logging.file)
    else:
        init_logging()

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
