"""Posterior engine for the Secret Prisoner chip game.

Computes, from one player's perspective, how likely a guess about the
bag or the opponent's chip is to be correct once hints have been
exchanged. Works on the model objects in ``secret_prisoner``.

Architecture:
    Round evaluation enumerates every ordered pair of hints the two
    players could express and scores each pair by process of
    elimination (``evaluate_hypothesis`` / ``evaluate_round``).
    Reference tables precompute one redistributed spread per possible
    arbiter attribute (``build_spreads``) and turn them into normalized
    arbiter / opponent distributions (``arbitration_table``).
"""

from __future__ import annotations

import dataclasses
import logging

import tqdm

import secret_prisoner
from secret_prisoner import (
    DEFAULT_CONFIG,
    AttributeKind,
    DegenerateHypothesis,
    GameConfig,
    Hint,
    Player,
)

logger = logging.getLogger(__name__)

_C = secret_prisoner._Colors

Entry = tuple[str, float]


def normalize_entries(entries: list[Entry]) -> list[Entry]:
    """Rescale ``(label, weight)`` entries so the weights sum to 1.

    Raises:
        DegenerateHypothesis: If the weights sum to 0.
    """
    total = sum(weight for _, weight in entries)
    if total <= 0:
        raise DegenerateHypothesis(
            f"Cannot normalize {[label for label, _ in entries]}: zero total mass"
        )
    return [(label, weight / total) for label, weight in entries]


# =============================================================================
# Bag Inference
# =============================================================================

@dataclasses.dataclass(frozen=True)
class BagCandidates:
    """Attribute values the bag may still have from one player's view.

    Attributes:
        colors: Remaining candidate colors, in universe order.
        shapes: Remaining candidate shapes, or None in color-only games.
    """
    colors: tuple[str, ...]
    shapes: tuple[str, ...] | None

    @property
    def combinations(self) -> int:
        """Number of (color, shape) combinations the bag could be."""
        if self.shapes is None:
            return len(self.colors)
        return len(self.colors) * len(self.shapes)


def _remaining(
    chip: secret_prisoner.Chip,
    hint_a: Hint,
    hint_b: Hint,
    universe: secret_prisoner.Universe,
) -> tuple[str, ...]:
    own = chip.attribute(universe.kind)
    return tuple(
        value for value in universe.attributes
        if value != own
        and hint_a.admits(universe.kind, value)
        and hint_b.admits(universe.kind, value)
    )


def bag_candidates(
    chip: secret_prisoner.Chip,
    hint_a: Hint,
    hint_b: Hint,
    config: GameConfig = DEFAULT_CONFIG,
) -> BagCandidates:
    """Eliminate candidates for the bag given both expressed hints.

    The holder of ``chip`` rules out their own attributes (chips are
    drawn without replacement) and, trusting both statements, the values
    named by ``hint_a`` and ``hint_b``.

    Args:
        chip: The reasoning player's own chip.
        hint_a: Player A's expressed hint.
        hint_b: Player B's expressed hint.
        config: The game variant.

    Returns:
        The surviving candidates per attribute kind.
    """
    colors = _remaining(chip, hint_a, hint_b, config.colors)
    shapes = None
    if config.shapes is not None:
        shapes = _remaining(chip, hint_a, hint_b, config.shapes)
    return BagCandidates(colors, shapes)


def bag_probability(
    chip: secret_prisoner.Chip,
    hint_a: Hint,
    hint_b: Hint,
    config: GameConfig = DEFAULT_CONFIG,
) -> float:
    """Probability of naming the bag exactly by process of elimination.

    Guesses are uniform over the surviving combinations, and the color
    and shape remainders are treated as independent, so the result is
    ``1 / (|colors| * |shapes|)`` (``1 / |colors|`` without shapes).

    Raises:
        DegenerateHypothesis: If no color (or no shape) survives.
    """
    candidates = bag_candidates(chip, hint_a, hint_b, config)
    if not candidates.colors:
        raise DegenerateHypothesis(
            f"Hints {hint_a} and {hint_b} leave no color for the holder "
            f"of {chip!r}"
        )
    if candidates.shapes is not None and not candidates.shapes:
        raise DegenerateHypothesis(
            f"Hints {hint_a} and {hint_b} leave no shape for the holder "
            f"of {chip!r}"
        )
    return 1 / candidates.combinations


def weighted_candidates(
    chip: secret_prisoner.Chip,
    hint_a: Hint,
    hint_b: Hint,
    kind: AttributeKind,
    config: GameConfig = DEFAULT_CONFIG,
) -> list[Entry]:
    """Prior-weighted distribution over the bag's surviving values of one kind.

    Raises:
        DegenerateHypothesis: If no value of this kind survives.
    """
    universe = config.universe(kind)
    remaining = _remaining(chip, hint_a, hint_b, universe)
    return normalize_entries([(value, universe.prior(value)) for value in remaining])


def bag_likelihoods(
    chip: secret_prisoner.Chip,
    hint_a: Hint,
    hint_b: Hint,
    config: GameConfig = DEFAULT_CONFIG,
) -> list[tuple[secret_prisoner.Chip, float]]:
    """Prior-weighted distribution over the chips the bag could be.

    Color and shape candidates are weighted by their priors separately
    and joined with ``secret_prisoner.cross_combinations``.

    Returns:
        ``(chip, probability)`` entries, most likely first. Ties keep
        universe order.

    Raises:
        DegenerateHypothesis: If no color (or no shape) survives.
    """
    colors = secret_prisoner.WeightedSet(
        config.colors,
        dict(weighted_candidates(chip, hint_a, hint_b, AttributeKind.COLOR, config)),
        predecessor_share=config.predecessor_share,
        successor_share=config.successor_share,
    )
    if config.shapes is None:
        entries = [(secret_prisoner.Chip(color), w) for color, w in colors.snapshot()]
    else:
        shapes = secret_prisoner.WeightedSet(
            config.shapes,
            dict(weighted_candidates(chip, hint_a, hint_b, AttributeKind.SHAPE, config)),
            predecessor_share=config.predecessor_share,
            successor_share=config.successor_share,
        )
        entries = secret_prisoner.cross_combinations(colors, shapes)
    return sorted(entries, key=lambda entry: -entry[1])


# =============================================================================
# Round Evaluation
# =============================================================================

@dataclasses.dataclass(frozen=True)
class HypothesisOutcome:
    """Evaluation of one ordered pair of expressed hints.

    Attributes:
        hint_a: What player A expressed ("bag is NOT ...").
        hint_b: What player B expressed.
        a_truthful: Whether player A's own knowledge supports hint_a.
        a_accurate: Whether hint_a is true of the bag.
        b_truthful: Whether player B's own knowledge supports hint_b.
        b_accurate: Whether hint_b is true of the bag.
        bag_probability_a: Player A's chance of naming the bag, or None
            when the combination leaves player A no candidate.
        bag_probability_b: Same for player B.
    """
    hint_a: Hint
    hint_b: Hint
    a_truthful: bool
    a_accurate: bool
    b_truthful: bool
    b_accurate: bool
    bag_probability_a: float | None
    bag_probability_b: float | None

    def bag_probability(self, player: Player) -> float | None:
        if player is Player.A:
            return self.bag_probability_a
        return self.bag_probability_b

    def __str__(self) -> str:
        def _flags(truthful: bool, accurate: bool) -> str:
            return f"{'truthful' if truthful else 'bluff'}/{'accurate' if accurate else 'false'}"

        def _pct(p: float | None) -> str:
            return "n/a" if p is None else f"{p:.1%}"

        return (
            f"A: {self.hint_a} ({_flags(self.a_truthful, self.a_accurate)}), "
            f"B: {self.hint_b} ({_flags(self.b_truthful, self.b_accurate)}) "
            f"-> P(A names bag) {_pct(self.bag_probability_a)}, "
            f"P(B names bag) {_pct(self.bag_probability_b)}"
        )


def evaluate_hypothesis(
    game_round: secret_prisoner.Round,
    hint_a: Hint,
    hint_b: Hint,
    config: GameConfig = DEFAULT_CONFIG,
) -> HypothesisOutcome:
    """Evaluate one ordered pair of expressed hints for a round.

    Each player is assumed to trust the other's statement. A player for
    whom the pair leaves no candidate gets a probability of None and the
    condition is logged.

    Args:
        game_round: The round (chips, received hints and bag).
        hint_a: Player A's expression.
        hint_b: Player B's expression.
        config: The game variant.

    Returns:
        The outcome with truthfulness, accuracy and bag probabilities.
    """
    probabilities: dict[Player, float | None] = {}
    for player in Player:
        chip = game_round.hand(player).chip
        try:
            probabilities[player] = bag_probability(chip, hint_a, hint_b, config)
        except DegenerateHypothesis as e:
            logger.warning(f"Skipping degenerate hypothesis for player {player.name}: {e}")
            probabilities[player] = None
    return HypothesisOutcome(
        hint_a=hint_a,
        hint_b=hint_b,
        a_truthful=game_round.player_a.can_vouch_for(hint_a),
        a_accurate=hint_a.accuracy_against(game_round.bag),
        b_truthful=game_round.player_b.can_vouch_for(hint_b),
        b_accurate=hint_b.accuracy_against(game_round.bag),
        bag_probability_a=probabilities[Player.A],
        bag_probability_b=probabilities[Player.B],
    )


@dataclasses.dataclass
class RoundPosterior:
    """All hypothesis outcomes for one round.

    Attributes:
        game_round: The evaluated round.
        outcomes: One outcome per ordered (hint_a, hint_b) pair, with
            player A's expression varying slowest.
        degenerate: ``(player, hint_a, hint_b)`` for every combination
            that left that player no candidate.
    """
    game_round: secret_prisoner.Round
    outcomes: list[HypothesisOutcome]
    degenerate: list[tuple[Player, Hint, Hint]] = dataclasses.field(default_factory=list)

    def outcome(self, hint_a: Hint, hint_b: Hint) -> HypothesisOutcome:
        """Look up the outcome for one hint pair.

        Raises:
            ValueError: If the pair was not evaluated.
        """
        for outcome in self.outcomes:
            if outcome.hint_a == hint_a and outcome.hint_b == hint_b:
                return outcome
        raise ValueError(f"No outcome for hints ({hint_a}, {hint_b})")

    def table(self, player: Player) -> list[tuple[tuple[Hint, Hint], float]]:
        """``((hint_a, hint_b), probability)`` for every non-degenerate pair."""
        return [
            ((o.hint_a, o.hint_b), o.bag_probability(player))
            for o in self.outcomes
            if o.bag_probability(player) is not None
        ]

    def best(self, player: Player) -> HypothesisOutcome | None:
        """The outcome giving ``player`` the highest bag probability.

        Ties go to the earliest outcome. None if every outcome is
        degenerate for that player.
        """
        best = None
        for outcome in self.outcomes:
            p = outcome.bag_probability(player)
            if p is None:
                continue
            if best is None or p > best.bag_probability(player):
                best = outcome
        return best


def evaluate_round(
    game_round: secret_prisoner.Round,
    config: GameConfig = DEFAULT_CONFIG,
    truthful_only: bool = False,
) -> RoundPosterior:
    """Evaluate every pair of hints the two players could express.

    Args:
        game_round: The round to evaluate.
        config: The game variant; its universes define the expressible
            hints (8 with shapes, 4 color-only).
        truthful_only: If True, each player only expresses hints their own
            knowledge supports.

    Returns:
        A RoundPosterior with one outcome per ordered hint pair.
    """
    expressions = secret_prisoner.enumerate_hints(config)
    options_a = [
        h for h in expressions
        if not truthful_only or game_round.player_a.can_vouch_for(h)
    ]
    options_b = [
        h for h in expressions
        if not truthful_only or game_round.player_b.can_vouch_for(h)
    ]

    posterior = RoundPosterior(game_round=game_round, outcomes=[])
    for hint_a in options_a:
        for hint_b in options_b:
            outcome = evaluate_hypothesis(game_round, hint_a, hint_b, config)
            posterior.outcomes.append(outcome)
            for player in Player:
                if outcome.bag_probability(player) is None:
                    posterior.degenerate.append((player, hint_a, hint_b))
    return posterior


# =============================================================================
# Arbitration Reference Tables
# =============================================================================

@dataclasses.dataclass
class Spread:
    """The distribution left after one attribute went to the arbiter.

    Attributes:
        arbiter: The attribute eliminated into the arbiter's bag.
        weights: The redistributed weighted set without that attribute.
        pairs: Scored pairs of the remaining attributes.
    """
    arbiter: str
    weights: secret_prisoner.WeightedSet
    pairs: list[secret_prisoner.Pair]


def build_spreads(
    universe: secret_prisoner.Universe = secret_prisoner.COLORS,
    config: GameConfig = DEFAULT_CONFIG,
) -> dict[str, Spread]:
    """Precompute one spread per possible arbiter attribute.

    Each spread starts from a fresh copy of the universe priors, so the
    scenarios are independent of each other.

    Args:
        universe: The universe to build spreads for.
        config: Supplies the redistribution shares.

    Returns:
        Arbiter attribute -> Spread, in universe order.
    """
    spreads = {}
    for arbiter in universe.attributes:
        weights = secret_prisoner.WeightedSet(
            universe,
            predecessor_share=config.predecessor_share,
            successor_share=config.successor_share,
        )
        weights.eliminate(arbiter)
        spreads[arbiter] = Spread(
            arbiter=arbiter,
            weights=weights,
            pairs=secret_prisoner.combinations(weights),
        )
    return spreads


@dataclasses.dataclass(frozen=True)
class ArbitrationTable:
    """Posterior over who holds what, given my attribute and a hint.

    Attributes:
        my_attribute: The reasoning player's own attribute.
        hint: The attribute the hint rules out, or None for no hint.
        arbiter: ``(attribute, probability)`` that the arbiter holds it.
        opponent: ``(attribute, probability)`` that the opponent holds it.
        max_index: Index of the largest entry in ``entries()``.
        max_value: That entry's probability.
    """
    my_attribute: str
    hint: str | None
    arbiter: tuple[Entry, ...]
    opponent: tuple[Entry, ...]
    max_index: int
    max_value: float

    def entries(self) -> list[Entry]:
        """Arbiter entries followed by opponent entries."""
        return list(self.arbiter) + list(self.opponent)

    @property
    def max_entry(self) -> tuple[str, str, float]:
        """``(role, attribute, probability)`` of the largest entry."""
        if self.max_index < len(self.arbiter):
            role = "arbiter"
            attribute = self.arbiter[self.max_index][0]
        else:
            role = "opponent"
            attribute = self.opponent[self.max_index - len(self.arbiter)][0]
        return role, attribute, self.max_value


def arbitration_table(
    my_attribute: str,
    hint: str | None,
    spreads: dict[str, Spread],
    universe: secret_prisoner.Universe = secret_prisoner.COLORS,
) -> ArbitrationTable:
    """Score every candidate arbiter and opponent attribute.

    For each arbiter attribute other than mine and the hinted one, every
    pair of its spread that contains my attribute and not the hinted one
    contributes its score weighted by the arbiter's prior. The sum is the
    arbiter's score; each contribution is also credited to the pair's
    other member as an opponent score. Both are normalized separately.

    Args:
        my_attribute: The reasoning player's attribute.
        hint: The attribute ruled out by the hint, or None.
        spreads: Output of ``build_spreads`` for ``universe``.
        universe: The universe being reasoned about.

    Returns:
        The arbiter / opponent posterior table.

    Raises:
        ValueError: If the hint names the player's own attribute, or
            either attribute is not in ``universe``.
        DegenerateHypothesis: If no pair survives, leaving zero mass.
    """
    universe.index(my_attribute)
    if hint is not None:
        universe.index(hint)
    if hint is not None and hint == my_attribute:
        raise ValueError(f"Hint cannot rule out the player's own attribute {hint!r}")

    arbiter_scores = {a: 0.0 for a in universe.attributes}
    opponent_scores = {a: 0.0 for a in universe.attributes}
    for arbiter in universe.attributes:
        if arbiter == my_attribute or arbiter == hint:
            continue
        prior = universe.prior(arbiter)
        for pair in spreads[arbiter].pairs:
            if my_attribute not in pair or (hint is not None and hint in pair):
                continue
            weighted = pair.score * prior
            arbiter_scores[arbiter] += weighted
            opponent_scores[pair.other(my_attribute)] += weighted

    arbiter = normalize_entries(list(arbiter_scores.items()))
    opponent = normalize_entries(list(opponent_scores.items()))

    max_index = -1
    max_value = 0.0
    for i, (_, probability) in enumerate(arbiter + opponent):
        if probability > max_value:
            max_value = probability
            max_index = i

    return ArbitrationTable(
        my_attribute=my_attribute,
        hint=hint,
        arbiter=tuple(arbiter),
        opponent=tuple(opponent),
        max_index=max_index,
        max_value=max_value,
    )


def build_reference_tables(
    universe: secret_prisoner.Universe = secret_prisoner.COLORS,
    config: GameConfig = DEFAULT_CONFIG,
    show_progress: bool = False,
) -> list[ArbitrationTable]:
    """Build the arbitration table for every (hint, my attribute) scenario.

    Hints range over "no hint" plus every attribute; my attribute ranges
    over every attribute the hint does not name. Degenerate scenarios are
    logged and left out.

    Args:
        universe: The universe to tabulate.
        config: Supplies the redistribution shares.
        show_progress: If True, display a tqdm progress bar.

    Returns:
        Tables ordered by hint (None first), then by my attribute.
    """
    spreads = build_spreads(universe, config)
    scenarios = [
        (hint, mine)
        for hint in (None, *universe.attributes)
        for mine in universe.attributes
        if mine != hint
    ]
    if show_progress:
        scenarios = tqdm.tqdm(
            scenarios,
            desc="Reference tables",
            unit=" tables",
            dynamic_ncols=True,
        )

    tables = []
    for hint, mine in scenarios:
        try:
            tables.append(arbitration_table(mine, hint, spreads, universe))
        except DegenerateHypothesis as e:
            logger.warning(f"Skipping table for {mine!r} with hint {hint!r}: {e}")
    return tables


# =============================================================================
# Terminal Display
# =============================================================================

def _box(rows: list[list[str]], highlight: tuple[int, int] | None = None) -> list[str]:
    """Lay out rows of cells in a box-drawn grid, bolding one cell."""
    width = max(len(cell) for row in rows for cell in row)
    columns = max(len(row) for row in rows)
    rule = "─" * (width + 2)
    lines = ["┌" + "┬".join([rule] * columns) + "┐"]
    for r, row in enumerate(rows):
        if r:
            lines.append("├" + "┼".join([rule] * columns) + "┤")
        cells = []
        for c in range(columns):
            text = (row[c] if c < len(row) else "").ljust(width)
            if highlight == (r, c):
                text = f"{_C.BOLD}{text}{_C.RESET}"
            cells.append(f" {text} ")
        lines.append("│" + "│".join(cells) + "│")
    lines.append("└" + "┴".join([rule] * columns) + "┘")
    return lines


def print_reference_table(table: ArbitrationTable) -> None:
    """Print one arbitration table, arbiter row above opponent row."""
    hint = "N/A" if table.hint is None else table.hint
    print(f"Given that my chip is {table.my_attribute} and my hint is {hint}...")
    rows = [
        [f"P(A.{a}) = {p:.2%}" for a, p in table.arbiter],
        [f"P(O.{a}) = {p:.2%}" for a, p in table.opponent],
    ]
    highlight = None
    if table.max_index >= 0:
        columns = len(table.arbiter)
        highlight = divmod(table.max_index, columns)
    for line in _box(rows, highlight):
        print(f"\t{line}")
    print()


def print_round_analysis(
    game_round: secret_prisoner.Round,
    posterior: RoundPosterior,
    player: Player = Player.A,
    config: GameConfig = DEFAULT_CONFIG,
) -> None:
    """Print a player's bag probability for every pair of expressions.

    Rows are player A's expressions, columns player B's. Expressions the
    speaker can vouch for are marked with ``*``; the best cell is bold.
    Under the best pair, the bag chips the player should favor are listed
    with their prior-weighted probabilities.
    """
    print(f"{_C.BOLD}{'─' * 60}{_C.RESET}")
    print(f"{_C.BOLD}Bag probability for player {player.name}{_C.RESET}")
    print(f"{_C.BOLD}{'─' * 60}{_C.RESET}")
    print(game_round)
    print()

    hints_a: list[Hint] = []
    hints_b: list[Hint] = []
    for outcome in posterior.outcomes:
        if outcome.hint_a not in hints_a:
            hints_a.append(outcome.hint_a)
        if outcome.hint_b not in hints_b:
            hints_b.append(outcome.hint_b)
    if not hints_a or not hints_b:
        print(f"  {_C.DIM}No hypotheses evaluated.{_C.RESET}")
        return

    def _label(hint: Hint, hand: secret_prisoner.Hand) -> str:
        mark = "*" if hand.can_vouch_for(hint) else ""
        return f"{hint}{mark}"

    rows = [["A \\ B"] + [_label(h, game_round.player_b) for h in hints_b]]
    best = posterior.best(player)
    highlight = None
    for r, hint_a in enumerate(hints_a, 1):
        row = [_label(hint_a, game_round.player_a)]
        for c, hint_b in enumerate(hints_b, 1):
            p = posterior.outcome(hint_a, hint_b).bag_probability(player)
            row.append("n/a" if p is None else f"{p:.1%}")
            if best is not None and (best.hint_a, best.hint_b) == (hint_a, hint_b):
                highlight = (r, c)
        rows.append(row)
    for line in _box(rows, highlight):
        print(f"  {line}")

    if best is not None:
        print()
        print(f"  Best: {best}")
        likelihoods = bag_likelihoods(
            game_round.hand(player).chip, best.hint_a, best.hint_b, config,
        )
        ranked = ", ".join(f"{chip} {p:.1%}" for chip, p in likelihoods[:3])
        print(f"  Most likely bag: {ranked}")
    if posterior.degenerate:
        print(
            f"  {_C.DIM}{len(posterior.degenerate)} degenerate "
            f"combination(s) skipped{_C.RESET}"
        )
    print()
