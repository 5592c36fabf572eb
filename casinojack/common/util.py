import random
from typing import Callable, Dict, List, Optional, Tuple

from scipy import stats

from casinojack.common.card import Card
from casinojack.common.deck import DECK_SIZE, Deck, build_deck


def calculate_chi_square(
    observed_values: List[float], expected_values: List[float]
) -> float:
    """
    Calculate the chi-square statistic given lists of observed and expected values.

    :param observed_values: A list of observed values
    :param expected_values: A list of expected values
    :return: The calculated chi-square statistic
    :raises ValueError: If the observed_values and expected_values lists do not have the same length

    """
    if len(observed_values) != len(expected_values):
        raise ValueError("Observed and expected value lists must have the same length.")

    chi_square_stat = sum(
        (o - e) ** 2 / e for o, e in zip(observed_values, expected_values)
    )
    return chi_square_stat


def shuffle_uniformity(
    target: Card,
    samples: int = 5200,
    rng: Optional[random.Random] = None,
    deck_factory: Callable[[Optional[random.Random]], Deck] = build_deck,
) -> Tuple[float, float]:
    """
    Audit how evenly a card lands across the deck positions.

    Shuffles ``samples`` fresh decks, counts the position ``target`` ends up
    in and compares the counts to a uniform distribution.

    :return: The chi-square statistic and its p-value (51 degrees of freedom).
    """
    counts: Dict[int, int] = {position: 0 for position in range(DECK_SIZE)}
    for _ in range(samples):
        deck = deck_factory(rng)
        counts[deck.cards.index(target)] += 1

    observed = [counts[position] for position in range(DECK_SIZE)]
    expected = [samples / DECK_SIZE] * DECK_SIZE
    chi_square = calculate_chi_square(observed, expected)
    p_value = float(stats.chi2.sf(chi_square, DECK_SIZE - 1))
    return chi_square, p_value
