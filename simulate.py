"""Simulation script for Secret Prisoner round analysis.

Deals one random round with ``Repository.deal_round()``: the bag is
drawn first, then both players' chips are drawn jointly from what is
left, and the bag hands each player a different negative hint. Prints
the round and the bag probability for every pair of hints the players
could express to each other.
"""

import logging
import random

import compute_posteriors
import secret_prisoner

# Seed for a reproducible round; None for a fresh one each run.
SEED: int | None = None

# Toggle to play the color-only variant.
COLOR_ONLY = False

# Toggle to restrict each player to hints they can vouch for.
TRUTHFUL_ONLY = False

# Toggle debug logging of draws, eliminations and hints.
VERBOSE = False


def main() -> None:
    if VERBOSE:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    config = (
        secret_prisoner.COLOR_ONLY_CONFIG if COLOR_ONLY
        else secret_prisoner.DEFAULT_CONFIG
    )
    repo = secret_prisoner.Repository(config, rng=random.Random(SEED))
    game_round = repo.deal_round()

    posterior = compute_posteriors.evaluate_round(
        game_round, config, truthful_only=TRUTHFUL_ONLY,
    )
    for player in secret_prisoner.Player:
        compute_posteriors.print_round_analysis(game_round, posterior, player, config)


if __name__ == "__main__":
    main()
