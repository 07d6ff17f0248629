import random

from decktester.models.card import CardInstance
from decktester.models.deck import DeckComposition, ShuffledDeck


def expand_deck(deck: DeckComposition) -> list[CardInstance]:
    """
    Expand a deck list into individual card instances.

    Instance ids are assigned in deck list order, so the same composition
    always expands to the same instances.
    """
    instances: list[CardInstance] = []
    for entry in deck.entries:
        for _ in range(entry.quantity):
            instances.append(
                CardInstance(
                    instance_id=len(instances),
                    card_id=entry.card_id,
                    category=entry.category,
                )
            )
    return instances


def _permute(instances: list[CardInstance], seed: int) -> ShuffledDeck:
    # random.Random.shuffle is a Fisher-Yates shuffle
    random.Random(seed).shuffle(instances)
    return ShuffledDeck(cards=tuple(instances), seed=seed)


def shuffle(deck: DeckComposition, seed: int) -> ShuffledDeck:
    """
    Shuffle a deck into a uniformly random order.

    The same deck and seed always give the same order. No card is added,
    lost or duplicated.
    """
    return _permute(expand_deck(deck), seed)


def reshuffle(deck: ShuffledDeck, seed: int) -> ShuffledDeck:
    """
    Shuffle every card of an existing deck back into a new order.

    Cards that were drawn (a rejected hand) are part of the deck again.
    Instances are put back into id order first, so the result depends only
    on the instances and the seed.
    """
    instances = sorted(deck.cards, key=lambda card: card.instance_id)
    return _permute(instances, seed)
