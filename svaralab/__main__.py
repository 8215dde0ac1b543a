"""CLI interface for SvaraLab.

Usage:
    python -m svaralab study               Start a study session
    python -m svaralab speed               Play a timed speaking round
    python -m svaralab stats               Show your statistics
    python -m svaralab due                 Show how many cards are due
    python -m svaralab categories          List categories and set a filter
    python -m svaralab reset               Erase all card progress
"""

import argparse
import asyncio
import logging
import time

from backend.catalog import LearnableItem, load_catalog
from backend.config import settings
from backend.database import async_session, init_db
from backend.host import EngineHost
from backend.srs.scheduling import CardLevel
from backend.srs.session import COMPLETE
from backend.store import SnapshotStore

LEVEL_LABELS = {
    CardLevel.NEW: "NEW",
    CardLevel.MASTERED: "MASTERED",
}


async def open_host() -> EngineHost:
    """Create tables if needed and load the engine from the saved snapshot."""
    await init_db()
    catalog = load_catalog(settings.catalog_path)
    return await EngineHost.open(catalog, SnapshotStore(async_session))


def ask_outcome(prompt: str = "  Did you say it correctly? [y/n/q]: ") -> bool | None:
    """Read a self-graded outcome. Returns None when the learner quits."""
    while True:
        answer = input(prompt).strip().lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        if answer == "q":
            return None


def show_card(item: LearnableItem, label: str) -> None:
    print(label)
    print(f"  {item.prompt_text}")
    input("  Say it in English, then press enter to reveal...")
    print(f"  -> {item.target_text}")


async def cmd_study(args: argparse.Namespace) -> None:
    """Run an interactive study session."""
    host = await open_host()

    async with host.mutate() as engine:
        queue = engine.planner.build_queue(engine.clock(), engine.selected_category)
        engine.start_session(queue.ids)

    if not queue.total:
        print("\nNo cards due for review. You're all caught up!")
        return

    print("\n  Study Session")
    print(f"  {len(queue.due_ids)} due + {len(queue.new_ids)} new = {queue.total} cards")
    print("  Type 'q' at the prompt to stop early\n")

    position = 0
    while True:
        async with host.mutate() as engine:
            item = engine.next_card()
        if item is COMPLETE:
            break

        position += 1
        level = engine.get_progress(item.id).level
        card_label = f"  [{position}/{queue.total}]"
        if level in LEVEL_LABELS:
            card_label += f" ({LEVEL_LABELS[level]})"
        show_card(item, card_label)

        correct = ask_outcome()
        if correct is None:
            print("\n  Session ended early.")
            break

        async with host.mutate() as engine:
            progress = engine.review_card(item.id, correct)
        days = (progress.next_review_date - progress.last_reviewed).days
        print(f"  Level {int(progress.level)} - next review in {days} days\n")

    async with host.mutate() as engine:
        summary = engine.end_session()

    print("\n  Session Complete!")
    print(
        f"  Reviewed: {summary.total}  Correct: {summary.correct}  "
        f"Accuracy: {summary.accuracy}%\n"
    )


async def cmd_speed(args: argparse.Namespace) -> None:
    """Play a timed round: answers slower than the timer count as wrong."""
    host = await open_host()
    engine = host.engine
    items = engine.get_words()[: args.rounds]

    engine.start_game()
    print("\n  Speed Round")
    print("  Press enter as soon as you have said the phrase out loud.\n")

    for i, item in enumerate(items, 1):
        budget = engine.get_timer_seconds()
        print(f"  [{i}/{len(items)}] difficulty {engine.difficulty.difficulty}, {budget}s")
        print(f"  {item.prompt_text}")
        start_time = time.monotonic()
        input()
        elapsed = time.monotonic() - start_time

        if elapsed > budget:
            print(f"  Time's up ({elapsed:.1f}s)! It was: {item.target_text}\n")
            engine.record_round_outcome(False)
            continue

        print(f"  -> {item.target_text}")
        correct = ask_outcome()
        if correct is None:
            break
        engine.record_round_outcome(correct)
        print()

    summary = engine.end_game()
    print("\n  Round Complete!")
    print(f"  Correct: {summary.correct}/{summary.total}  Accuracy: {summary.accuracy}%")
    print(f"  Best streak: {summary.best_streak}  Final difficulty: {summary.final_difficulty}\n")


async def cmd_stats(args: argparse.Namespace) -> None:
    """Show learner statistics."""
    host = await open_host()
    engine = host.engine
    overview = engine.get_overview()

    print("\n  SvaraLab Statistics")
    print(f"  {'Total words:':<20} {overview.total_items}")
    print(f"  {'New (unseen):':<20} {overview.new_count}")
    print(f"  {'Learning:':<20} {overview.learning_count}")
    print(f"  {'Mastered:':<20} {overview.mastered_count}")
    print(f"  {'Due now:':<20} {overview.review_count}")
    print()
    for category in engine.get_categories():
        stats = engine.get_category_stats(category.id)
        print(
            f"  {category.name + ':':<20} {stats.mastered}/{stats.total} mastered, "
            f"{stats.learning} learning"
        )
    print()


async def cmd_due(args: argparse.Namespace) -> None:
    """Show how many cards are due."""
    host = await open_host()
    engine = host.engine
    due = engine.get_review_count()
    new = len(engine.get_new_cards(limit=len(engine.catalog)))
    print(f"  {due} cards due, {new} new cards available")


async def cmd_categories(args: argparse.Namespace) -> None:
    """List categories, optionally selecting one as the study filter."""
    host = await open_host()

    if args.select is not None or args.clear:
        async with host.mutate() as engine:
            engine.set_category_filter(None if args.clear else args.select)

    selected = host.engine.selected_category
    for category in host.engine.get_categories():
        marker = "*" if category.id == selected else " "
        print(f"  {marker} {category.icon} {category.id:<12} {category.name}")
    print(f"\n  Filter: {selected or 'all categories'}")


async def cmd_reset(args: argparse.Namespace) -> None:
    """Erase all progress after confirmation."""
    host = await open_host()
    if not args.yes:
        answer = input("  This erases all progress. Type 'reset' to confirm: ").strip()
        if answer != "reset":
            print("  Aborted.")
            return

    async with host.mutate() as engine:
        engine.reset_progress()
    print("  Progress reset.")


def main() -> None:
    """Entry point for the SvaraLab CLI application."""
    parser = argparse.ArgumentParser(
        prog="svaralab",
        description="SvaraLab spoken English practice",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # study
    subparsers.add_parser("study", help="Start a study session")

    # speed
    speed_parser = subparsers.add_parser("speed", help="Play a timed speaking round")
    speed_parser.add_argument("--rounds", type=int, default=10, help="Number of rounds")

    # stats
    subparsers.add_parser("stats", help="Show your statistics")

    # due
    subparsers.add_parser("due", help="Show cards due for review")

    # categories
    categories_parser = subparsers.add_parser("categories", help="List or select categories")
    categories_parser.add_argument("--select", default=None, help="Category id to study")
    categories_parser.add_argument("--clear", action="store_true", help="Study all categories")

    # reset
    reset_parser = subparsers.add_parser("reset", help="Erase all card progress")
    reset_parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.command:
        parser.print_help()
        return

    cmd_map = {
        "study": cmd_study,
        "speed": cmd_speed,
        "stats": cmd_stats,
        "due": cmd_due,
        "categories": cmd_categories,
        "reset": cmd_reset,
    }

    asyncio.run(cmd_map[args.command](args))


if __name__ == "__main__":
    main()
