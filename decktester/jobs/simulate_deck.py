"""
Simulate a deck list from a JSON file.

Useful for checking a deck outside the web app or for regression runs with
a fixed seed. The deck file looks like:

    {
        "name": "Lightning Box",
        "cards": [
            {"card_id": "sv1-81", "category": "basic_unit", "quantity": 4},
            ...
        ]
    }
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from decktester.api.testing import session_to_response
from decktester.config import DEFAULT_HANDS, DEFAULT_TURN_HORIZON
from decktester.models.card import CardCategory, CardEntry
from decktester.models.deck import DeckComposition
from decktester.models.failure import KnownError
from decktester.models.simulation import SimulationConfig
from decktester.simulation.session import run_testing_session

logger = logging.getLogger(__name__)


def load_deck_file(path: Path) -> DeckComposition:
    """
    Read a deck list from JSON.

    Raises:
        ValueError: The file is not a valid deck list
    """
    data = json.loads(path.read_text())

    try:
        entries = tuple(
            CardEntry(
                card_id=str(card["card_id"]),
                category=CardCategory(card["category"]),
                quantity=int(card["quantity"]),
                name=str(card.get("name", "")),
            )
            for card in data["cards"]
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid deck file {path}: {e}") from e

    return DeckComposition(entries=entries, deck_id=path.stem, name=data.get("name", path.stem))


def simulate_deck_file(
    path: Path,
    number_of_hands: int = DEFAULT_HANDS,
    turn_horizon: int = DEFAULT_TURN_HORIZON,
    seed: int = 0,
    prize_count: int = 0,
    workers: int | None = None,
) -> dict[str, Any]:
    """
    Simulate a deck file and return the session as a JSON-ready dict.

    Raises:
        ValueError: The file is not a valid deck list
        KnownError: The deck or settings were rejected, or every trial failed
    """
    deck = load_deck_file(path)
    config = SimulationConfig(
        number_of_hands=number_of_hands,
        turn_horizon=turn_horizon,
        random_seed_base=seed,
        prize_count=prize_count,
    )

    logger.info("Simulating %d hands of %s (seed %d)", number_of_hands, deck.name, seed)
    session = run_testing_session(deck, config, max_workers=workers)
    return session_to_response(session).model_dump(mode="json")


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Simulate opening hands for a deck")
    parser.add_argument("deck", type=Path, help="Path to deck JSON file")
    parser.add_argument("--hands", type=int, default=DEFAULT_HANDS, help="Trials to run")
    parser.add_argument("--turns", type=int, default=DEFAULT_TURN_HORIZON, help="Turn horizon")
    parser.add_argument("--seed", type=int, default=0, help="Base seed")
    parser.add_argument("--prizes", type=int, default=0, help="Prize cards to set aside")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads")
    parser.add_argument(
        "--stats-only",
        action="store_true",
        help="Print aggregate statistics without per-trial hands",
    )

    args = parser.parse_args()

    if not args.deck.exists():
        logger.error("Deck file not found: %s", args.deck)
        raise SystemExit(1)

    try:
        result = simulate_deck_file(
            args.deck,
            number_of_hands=args.hands,
            turn_horizon=args.turns,
            seed=args.seed,
            prize_count=args.prizes,
            workers=args.workers,
        )
    except (ValueError, KnownError) as e:
        logger.error("Simulation failed: %s", e)
        raise SystemExit(1) from e

    if args.stats_only:
        result = result["aggregate_stats"]
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
