from dataclasses import dataclass

from decktester.models.deck import ShuffledDeck
from decktester.models.simulation import DrawCount, Hand, single_draw


@dataclass(frozen=True)
class TurnSequence:
    """
    Hand state over the simulated turns.

    Attributes:
        snapshots: Hand after each turn's draw (index 0 = turn 1)
        decked_out: A draw was attempted with no cards left
        cursor: Position of the next card to draw
    """

    snapshots: tuple[Hand, ...]
    decked_out: bool
    cursor: int


def step_turns(
    hand: Hand,
    deck: ShuffledDeck,
    cursor: int,
    turn_horizon: int,
    draw_count: DrawCount = single_draw,
) -> TurnSequence:
    """
    Draw for each turn from 1 to turn_horizon.

    Hands are cumulative: each snapshot is the previous one plus that turn's
    draws. Card effects are not modelled; draw_count is the only hook for
    turns that draw more (or fewer) than one card.

    Running out of cards is terminal for the trial, not an error: the trial
    is marked decked out and every later snapshot repeats the last hand.
    """
    snapshots: list[Hand] = []
    decked_out = False

    for turn in range(1, turn_horizon + 1):
        if not decked_out:
            wanted = max(0, draw_count(turn))
            drawn = deck.take(cursor, wanted)
            cursor += len(drawn)
            hand = hand + drawn
            if len(drawn) < wanted:
                decked_out = True
        snapshots.append(hand)

    return TurnSequence(snapshots=tuple(snapshots), decked_out=decked_out, cursor=cursor)
