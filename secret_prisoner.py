"""Secret Prisoner game model.

Core classes representing the chip deduction game: attribute universes
and their prior weights, weighted draw distributions with neighbor
redistribution, negative hints, chips, hands, rounds and guesses.
Supports both the color-only variant and the color + shape variant.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import random
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# Weight sums are accepted as "1.0" within this tolerance.
_TOLERANCE = 1e-9

# Share of an eliminated member's weight handed to each cyclic neighbor.
PREDECESSOR_SHARE = 0.4
SUCCESSOR_SHARE = 0.6


# =============================================================================
# ANSI Color Constants
# =============================================================================

class _Colors:
    """ANSI escape codes for terminal coloring."""
    RED = "\033[91m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    BLACK = "\033[90m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


_ATTRIBUTE_ANSI = {
    "red": _Colors.RED,
    "green": _Colors.GREEN,
    "blue": _Colors.BLUE,
    "black": _Colors.BLACK,
}

_SHAPE_SYMBOLS = {
    "triangle": "▲",
    "square": "▆",
    "circle": "●",
    "star": "✶",
}


def depict(attribute: str) -> str:
    """Return a terminal rendering of an attribute.

    Colors are printed as their name in that color, shapes as their
    symbol. Attributes of custom universes are returned unchanged.
    """
    if attribute in _ATTRIBUTE_ANSI:
        return f"{_ATTRIBUTE_ANSI[attribute]}{attribute}{_Colors.RESET}"
    return _SHAPE_SYMBOLS.get(attribute, attribute)


# =============================================================================
# Errors
# =============================================================================

class ChipGameError(ValueError):
    """Base class for all errors raised by the chip game engine."""


class InvalidDistribution(ChipGameError):
    """Prior weights are malformed (negative, or not summing to 1)."""


class EmptyDistribution(ChipGameError):
    """Sampling or normalizing a distribution with zero total mass."""


class AlreadyEliminated(ChipGameError):
    """Eliminating an attribute whose weight is already 0."""


class DegenerateHypothesis(ChipGameError):
    """A hint combination leaves no candidate to compute a posterior over."""


# =============================================================================
# Enums
# =============================================================================

class AttributeKind(enum.Enum):
    """Which universe an attribute belongs to."""
    COLOR = "color"
    SHAPE = "shape"


class Player(enum.Enum):
    """The two players of a round."""
    A = enum.auto()
    B = enum.auto()

    @property
    def other(self) -> Player:
        """The opposing player."""
        return Player.B if self is Player.A else Player.A


class Target(enum.Enum):
    """What a final guess is aimed at."""
    BAG = enum.auto()
    OPPONENT = enum.auto()
    ABSTAIN = enum.auto()


class RoundResult(enum.Enum):
    """Outcome of a player's final guess."""
    BAG_CORRECT = enum.auto()
    BAG_WRONG = enum.auto()
    OPPONENT_CORRECT = enum.auto()
    OPPONENT_WRONG = enum.auto()
    ABSTAIN = enum.auto()


# =============================================================================
# Universes & Configuration
# =============================================================================

def _check_weights(weights: Mapping[str, float], label: str) -> None:
    """Validate that weights are non-negative and sum to 1.

    Raises:
        InvalidDistribution: If any weight is negative or the total is
            not within tolerance of 1.0.
    """
    negative = [a for a, w in weights.items() if w < 0]
    if negative:
        raise InvalidDistribution(
            f"{label} weights must be non-negative, got negative weight "
            f"for {', '.join(negative)}"
        )
    total = sum(weights.values())
    if abs(total - 1.0) > _TOLERANCE:
        raise InvalidDistribution(
            f"{label} weights must sum to 1.0, got {total!r}"
        )


def _check_shares(predecessor_share: float, successor_share: float) -> None:
    if predecessor_share < 0 or successor_share < 0:
        raise InvalidDistribution(
            f"Redistribution shares must be non-negative, got "
            f"{predecessor_share}/{successor_share}"
        )
    if abs(predecessor_share + successor_share - 1.0) > _TOLERANCE:
        raise InvalidDistribution(
            f"Redistribution shares must sum to 1.0, got "
            f"{predecessor_share}/{successor_share}"
        )


@dataclasses.dataclass(frozen=True)
class Universe:
    """The fixed, cyclically ordered set of values for one attribute kind.

    The order of ``attributes`` defines the cycle used for redistribution:
    the predecessor of index ``i`` is ``(i - 1) % n`` and its successor is
    ``(i + 1) % n``.

    Attributes:
        kind: Whether this is the color or the shape universe.
        attributes: Attribute names in cyclic order.
        priors: Prior weight of each attribute, in the same order.
    """
    kind: AttributeKind
    attributes: tuple[str, ...]
    priors: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", tuple(self.attributes))
        object.__setattr__(self, "priors", tuple(float(p) for p in self.priors))
        if len(self.attributes) != len(self.priors):
            raise InvalidDistribution(
                f"Universe has {len(self.attributes)} attributes but "
                f"{len(self.priors)} priors"
            )
        if len(self.attributes) < 2:
            raise InvalidDistribution(
                f"Universe needs at least 2 attributes, got {len(self.attributes)}"
            )
        if len(set(self.attributes)) != len(self.attributes):
            raise InvalidDistribution(
                f"Universe attributes must be distinct: {self.attributes}"
            )
        _check_weights(dict(zip(self.attributes, self.priors)), self.kind.value)

    @classmethod
    def from_weights(
        cls, kind: AttributeKind, weights: Mapping[str, float],
    ) -> Universe:
        """Build a universe from relative (e.g. integer) weights.

        Args:
            kind: The attribute kind.
            weights: Attribute -> relative weight, in cyclic order.
                ``{"red": 25, "green": 25, ...}`` yields priors of 0.25.

        Returns:
            A Universe with the weights normalized into priors.

        Raises:
            InvalidDistribution: If any weight is negative or all are 0.
        """
        if any(w < 0 for w in weights.values()):
            raise InvalidDistribution(
                f"{kind.value} weights must be non-negative: {dict(weights)}"
            )
        total = sum(weights.values())
        if total <= 0:
            raise InvalidDistribution(
                f"{kind.value} weights must have a positive total: {dict(weights)}"
            )
        return cls(
            kind,
            tuple(weights),
            tuple(w / total for w in weights.values()),
        )

    def __len__(self) -> int:
        return len(self.attributes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.attributes)

    def __contains__(self, attribute: object) -> bool:
        return attribute in self.attributes

    def index(self, attribute: str) -> int:
        """Position of an attribute in the cycle.

        Raises:
            ValueError: If the attribute is not in this universe.
        """
        try:
            return self.attributes.index(attribute)
        except ValueError:
            raise ValueError(
                f"{attribute!r} is not a {self.kind.value} "
                f"(expected one of {', '.join(self.attributes)})"
            )

    def prior(self, attribute: str) -> float:
        """Prior weight of an attribute."""
        return self.priors[self.index(attribute)]


COLORS = Universe(
    AttributeKind.COLOR,
    ("red", "green", "blue", "black"),
    (0.3, 0.3, 0.3, 0.1),
)

SHAPES = Universe(
    AttributeKind.SHAPE,
    ("triangle", "square", "circle", "star"),
    (0.3, 0.3, 0.3, 0.1),
)


@dataclasses.dataclass(frozen=True)
class GameConfig:
    """Universes and redistribution constants for one game variant.

    Attributes:
        colors: The color universe.
        shapes: The shape universe, or None for the color-only variant.
        predecessor_share: Fraction of an eliminated weight handed to the
            cyclic predecessor.
        successor_share: Fraction handed to the cyclic successor.
    """
    colors: Universe = COLORS
    shapes: Universe | None = SHAPES
    predecessor_share: float = PREDECESSOR_SHARE
    successor_share: float = SUCCESSOR_SHARE

    def __post_init__(self) -> None:
        if self.colors.kind != AttributeKind.COLOR:
            raise ValueError("GameConfig.colors must be a color universe")
        if self.shapes is not None and self.shapes.kind != AttributeKind.SHAPE:
            raise ValueError("GameConfig.shapes must be a shape universe")
        _check_shares(self.predecessor_share, self.successor_share)

    @property
    def has_shapes(self) -> bool:
        """Whether chips carry a shape in this variant."""
        return self.shapes is not None

    @property
    def kinds(self) -> tuple[AttributeKind, ...]:
        """Attribute kinds in play, colors first."""
        if self.shapes is None:
            return (AttributeKind.COLOR,)
        return (AttributeKind.COLOR, AttributeKind.SHAPE)

    def universe(self, kind: AttributeKind) -> Universe:
        """The universe for an attribute kind.

        Raises:
            ValueError: If shapes are requested in the color-only variant.
        """
        if kind == AttributeKind.COLOR:
            return self.colors
        if self.shapes is None:
            raise ValueError("This game variant has no shapes")
        return self.shapes

    def weighted_set(self, kind: AttributeKind) -> WeightedSet:
        """A fresh WeightedSet over one universe's priors."""
        return WeightedSet(
            self.universe(kind),
            predecessor_share=self.predecessor_share,
            successor_share=self.successor_share,
        )


DEFAULT_CONFIG = GameConfig()
COLOR_ONLY_CONFIG = GameConfig(shapes=None)


# =============================================================================
# Random Helpers
# =============================================================================

def _uniform(rng: random.Random | None) -> float:
    """A uniform draw in [0, 1) from ``rng`` or the module generator."""
    return rng.random() if rng is not None else random.random()


def _choose_weighted(
    entries: Sequence[tuple[_T, float]], rng: random.Random | None,
) -> _T:
    """Pick a key from ``(key, weight)`` entries proportionally to weight.

    Weights need not sum to 1. Entries with zero weight are never picked.

    Raises:
        EmptyDistribution: If the total weight is zero.
    """
    total = sum(w for _, w in entries)
    if total <= 0:
        raise EmptyDistribution("Cannot sample from a distribution with zero mass")
    threshold = _uniform(rng) * total
    cumulative = 0.0
    chosen = None
    for key, weight in entries:
        if weight <= 0:
            continue
        cumulative += weight
        chosen = key
        if threshold < cumulative:
            return key
    # Rounding can leave threshold just past the final cumulative sum.
    return chosen


# =============================================================================
# Weighted Set
# =============================================================================

class WeightedSet:
    """A mutable weight distribution over one universe.

    Weights are kept in a fixed-size array in universe order; eliminated
    members stay in place at weight 0 so neighbor arithmetic always runs on
    the original cycle. A member is active while its weight is positive.

    Eliminating member ``i`` with weight ``w`` hands ``predecessor_share *
    w`` to the nearest active member walking backwards from ``i`` and
    ``successor_share * w`` to the nearest active member walking forwards.
    When both neighbors are active these are ``(i - 1) % n`` and
    ``(i + 1) % n``; an eliminated neighbor is skipped rather than
    revived. Total mass is conserved unless the last active member is
    eliminated, which leaves an empty set.
    """

    def __init__(
        self,
        universe: Universe,
        weights: Mapping[str, float] | None = None,
        predecessor_share: float = PREDECESSOR_SHARE,
        successor_share: float = SUCCESSOR_SHARE,
    ) -> None:
        """Create a weighted set.

        Args:
            universe: The universe whose cycle this set follows.
            weights: Attribute -> weight. Defaults to the universe priors.
                Attributes missing from the mapping start eliminated.
            predecessor_share: Share of an eliminated weight given to the
                predecessor.
            successor_share: Share given to the successor.

        Raises:
            InvalidDistribution: If a weight is negative, an attribute is
                not in the universe, the weights do not sum to 1, or the
                shares are invalid.
        """
        if weights is None:
            weights = dict(zip(universe.attributes, universe.priors))
        unknown = [a for a in weights if a not in universe]
        if unknown:
            raise InvalidDistribution(
                f"Unknown {universe.kind.value} attribute(s): {', '.join(unknown)}"
            )
        _check_weights(weights, universe.kind.value)
        _check_shares(predecessor_share, successor_share)
        self._universe = universe
        self._weights = [float(weights.get(a, 0.0)) for a in universe.attributes]
        self._predecessor_share = predecessor_share
        self._successor_share = successor_share

    @property
    def universe(self) -> Universe:
        return self._universe

    @property
    def total(self) -> float:
        """Sum of all current weights."""
        return sum(self._weights)

    def weight(self, attribute: str) -> float:
        """Current weight of an attribute (0 once eliminated)."""
        return self._weights[self._universe.index(attribute)]

    def is_active(self, attribute: str) -> bool:
        return self.weight(attribute) > 0

    def active(self) -> list[str]:
        """Attributes with positive weight, in universe order."""
        return [
            a for a, w in zip(self._universe.attributes, self._weights)
            if w > 0
        ]

    def __len__(self) -> int:
        return len(self.active())

    def snapshot(self, include_eliminated: bool = False) -> list[tuple[str, float]]:
        """Current ``(attribute, weight)`` entries in universe order.

        Args:
            include_eliminated: If True, eliminated members are included
                with weight 0.
        """
        return [
            (a, w) for a, w in zip(self._universe.attributes, self._weights)
            if include_eliminated or w > 0
        ]

    def copy(self) -> WeightedSet:
        """An independent copy with the same weights and shares."""
        clone = WeightedSet.__new__(WeightedSet)
        clone._universe = self._universe
        clone._weights = list(self._weights)
        clone._predecessor_share = self._predecessor_share
        clone._successor_share = self._successor_share
        return clone

    def sample(self, rng: random.Random | None = None) -> str:
        """Draw an attribute with probability proportional to its weight.

        Args:
            rng: Random source. Defaults to the ``random`` module.

        Raises:
            EmptyDistribution: If every weight is 0.
        """
        if self.total <= 0:
            raise EmptyDistribution(
                f"No active {self._universe.kind.value} left to sample"
            )
        return _choose_weighted(self.snapshot(), rng)

    def _nearest_active(self, index: int, step: int) -> int | None:
        n = len(self._weights)
        for offset in range(1, n):
            j = (index + step * offset) % n
            if self._weights[j] > 0:
                return j
        return None

    def eliminate(self, attribute: str) -> float:
        """Remove an attribute and redistribute its weight to its neighbors.

        Args:
            attribute: The attribute to eliminate.

        Returns:
            The weight the attribute held before elimination.

        Raises:
            AlreadyEliminated: If the attribute's weight is already 0.
            ValueError: If the attribute is not in the universe.
        """
        index = self._universe.index(attribute)
        weight = self._weights[index]
        if weight <= 0:
            raise AlreadyEliminated(
                f"{self._universe.kind.value} {attribute!r} has already "
                f"been eliminated"
            )
        self._weights[index] = 0.0
        predecessor = self._nearest_active(index, -1)
        successor = self._nearest_active(index, 1)
        if predecessor is None or successor is None:
            logger.debug(f"Eliminated last active {attribute!r}; set is now empty")
            return weight
        self._weights[predecessor] += weight * self._predecessor_share
        self._weights[successor] += weight * self._successor_share
        logger.debug(
            f"Eliminated {attribute!r} ({weight:.4f}): "
            f"{self._universe.attributes[predecessor]!r} "
            f"+{weight * self._predecessor_share:.4f}, "
            f"{self._universe.attributes[successor]!r} "
            f"+{weight * self._successor_share:.4f}"
        )
        return weight

    def draw(self, rng: random.Random | None = None) -> str:
        """Sample an attribute and eliminate it in one step."""
        attribute = self.sample(rng)
        self.eliminate(attribute)
        return attribute

    def normalize(self) -> None:
        """Rescale all weights so they sum to 1.

        Raises:
            EmptyDistribution: If the total weight is 0.
        """
        total = self.total
        if total <= 0:
            raise EmptyDistribution(
                f"Cannot normalize an empty {self._universe.kind.value} set"
            )
        self._weights = [w / total for w in self._weights]

    def __repr__(self) -> str:
        entries = ", ".join(f"{a}={w:.4f}" for a, w in self.snapshot())
        return f"WeightedSet({self._universe.kind.value}: {entries})"


# =============================================================================
# Pairs
# =============================================================================

@dataclasses.dataclass(frozen=True)
class Pair:
    """An unordered pair of distinct attributes with a joint score.

    Attributes:
        first: The member earlier in universe order.
        second: The other member.
        score: Joint-likelihood proxy for the pair (mean of the two
            members' weights).
    """
    first: str
    second: str
    score: float

    def __post_init__(self) -> None:
        if self.first == self.second:
            raise ValueError(f"A pair needs two distinct attributes, got {self.first!r} twice")

    @property
    def members(self) -> tuple[str, str]:
        return (self.first, self.second)

    def __contains__(self, attribute: object) -> bool:
        return attribute == self.first or attribute == self.second

    def other(self, attribute: str) -> str:
        """The member that is not ``attribute``.

        Raises:
            ValueError: If ``attribute`` is not in the pair.
        """
        if attribute == self.first:
            return self.second
        if attribute == self.second:
            return self.first
        raise ValueError(f"{attribute!r} is not in pair {self.members}")

    def __str__(self) -> str:
        return f"({self.first}, {self.second}) = {self.score:.4f}"


def combinations(
    weighted_set: WeightedSet, active_only: bool = True,
) -> list[Pair]:
    """Score every unordered pair of members of a weighted set.

    Each pair is scored as the arithmetic mean of its members' current
    weights. The scores rank joint likelihoods against each other and are
    not a probability measure over pairs: they do not sum to 1.

    Args:
        weighted_set: The distribution to pair up.
        active_only: If True (default), eliminated members are left out.

    Returns:
        ``n * (n - 1) / 2`` pairs in universe order.
    """
    entries = weighted_set.snapshot(include_eliminated=not active_only)
    pairs = []
    for i, (first, first_weight) in enumerate(entries):
        for second, second_weight in entries[i + 1:]:
            pairs.append(Pair(first, second, (first_weight + second_weight) / 2))
    return pairs


def cross_combinations(
    colors: WeightedSet, shapes: WeightedSet,
) -> list[tuple[Chip, float]]:
    """Score every active (color, shape) chip as a joint draw.

    Colors and shapes are drawn independently, so each chip is scored
    with the product of its color and shape weights. With normalized
    inputs the scores sum to 1.

    Returns:
        ``(chip, score)`` entries, colors varying slowest.
    """
    return [
        (Chip(color, shape), color_weight * shape_weight)
        for color, color_weight in colors.snapshot()
        for shape, shape_weight in shapes.snapshot()
    ]


def sample_pair(pairs: list[Pair], rng: random.Random | None = None) -> Pair:
    """Pick a pair with probability proportional to its score.

    Raises:
        EmptyDistribution: If there are no pairs or all scores are 0.
    """
    return _choose_weighted([(pair, pair.score) for pair in pairs], rng)


# =============================================================================
# Hints
# =============================================================================

@dataclasses.dataclass(frozen=True)
class Hint:
    """A negative statement about a chip: "the chip is NOT ``value``".

    Attributes:
        kind: Which attribute the hint talks about.
        value: The attribute value being ruled out.
    """
    kind: AttributeKind
    value: str

    @classmethod
    def color(cls, value: str) -> Hint:
        return cls(AttributeKind.COLOR, value)

    @classmethod
    def shape(cls, value: str) -> Hint:
        return cls(AttributeKind.SHAPE, value)

    def admits(self, kind: AttributeKind, value: str) -> bool:
        """Whether a candidate attribute value survives this hint."""
        return kind != self.kind or value != self.value

    def applies(self, chip: Chip) -> bool:
        """Whether the hint is a true statement about ``chip``.

        A chip without an attribute of this kind (color-only chips and
        shape hints) is never ruled out.
        """
        attribute = chip.attribute(self.kind)
        return attribute is None or self.admits(self.kind, attribute)

    def is_consistent_with_own_knowledge(
        self, chip: Chip, previous_hint: Hint | None = None,
    ) -> bool:
        """Whether a speaker holding ``chip`` may issue this hint.

        The hint must not name the speaker's own attribute and must not
        repeat the previously issued hint.
        """
        return self.applies(chip) and self != previous_hint

    def accuracy_against(self, truth: Chip) -> bool:
        """Whether the hint is accurate about the ground-truth chip.

        Accuracy ignores what the speaker knew: a statement made without
        grounds can still happen to be accurate.
        """
        return self.applies(truth)

    def prior(self, config: GameConfig = DEFAULT_CONFIG) -> float:
        """Prior weight of the ruled-out value in its universe."""
        return config.universe(self.kind).prior(self.value)

    def __str__(self) -> str:
        return f"NOT {self.value}"


def enumerate_hints(config: GameConfig = DEFAULT_CONFIG) -> list[Hint]:
    """Every hint that can be expressed in a game variant, colors first."""
    return [
        Hint(kind, value)
        for kind in config.kinds
        for value in config.universe(kind).attributes
    ]


# =============================================================================
# Chips, Hands & Rounds
# =============================================================================

@dataclasses.dataclass(frozen=True)
class Chip:
    """A chip's attributes.

    Attributes:
        color: The chip's color.
        shape: The chip's shape, or None in the color-only variant.
    """
    color: str
    shape: str | None = None

    def attribute(self, kind: AttributeKind) -> str | None:
        """The chip's attribute of the given kind."""
        return self.color if kind == AttributeKind.COLOR else self.shape

    def hint(
        self,
        known: Chip,
        previous_hints: Iterable[Hint] = (),
        config: GameConfig = DEFAULT_CONFIG,
        rng: random.Random | None = None,
    ) -> Hint:
        """Pick a random hint about this chip for the holder of ``known``.

        Candidates are hints that are true of this chip, tell the
        recipient nothing about their own chip, and have not been issued
        before. One is chosen uniformly.

        Args:
            known: The recipient's chip.
            previous_hints: Hints already issued about this chip.
            config: The game variant.
            rng: Random source. Defaults to the ``random`` module.

        Returns:
            The chosen hint.

        Raises:
            EmptyDistribution: If no candidate hint remains.
        """
        issued = set(previous_hints)
        candidates = [
            hint for hint in enumerate_hints(config)
            if hint.is_consistent_with_own_knowledge(self)
            and hint.applies(known)
            and hint not in issued
        ]
        if not candidates:
            raise EmptyDistribution(f"No hint left to give about {self!r}")
        chosen = candidates[int(_uniform(rng) * len(candidates))]
        logger.debug(f"Hint about {self!r} for holder of {known!r}: {chosen}")
        return chosen

    def __str__(self) -> str:
        ansi = _ATTRIBUTE_ANSI.get(self.color, "")
        if self.shape is None:
            return f"{ansi}{self.color}{_Colors.RESET}"
        symbol = _SHAPE_SYMBOLS.get(self.shape, self.shape)
        return f"{ansi}{symbol}{_Colors.RESET}"


@dataclasses.dataclass(frozen=True)
class Hand:
    """What one player holds: their own chip and a hint about the bag.

    Attributes:
        chip: The player's own chip.
        hint: The hint the player received about the bag.
    """
    chip: Chip
    hint: Hint

    def can_vouch_for(self, expression: Hint) -> bool:
        """Whether this player knows that "bag is NOT value" holds.

        Chips are drawn without replacement, so the bag never shares the
        player's own attributes; the received hint is true by construction.
        """
        return (
            expression.value == self.chip.attribute(expression.kind)
            or expression == self.hint
        )

    def __str__(self) -> str:
        return f"{self.chip} [bag is {self.hint}]"


@dataclasses.dataclass(frozen=True)
class Round:
    """Two hands and the hidden bag chip.

    Attributes:
        player_a: Player A's hand.
        player_b: Player B's hand.
        bag: The hidden chip both players try to infer.
    """
    player_a: Hand
    player_b: Hand
    bag: Chip

    def hand(self, player: Player) -> Hand:
        return self.player_a if player is Player.A else self.player_b

    def opponent_chip(self, player: Player) -> Chip:
        """The chip held by ``player``'s opponent."""
        return self.hand(player.other).chip

    def __str__(self) -> str:
        return (
            f"Bag: {self.bag}"
            f"\n   Player A: {self.player_a}"
            f"\n   Player B: {self.player_b}"
        )


# =============================================================================
# Guesses
# =============================================================================

@dataclasses.dataclass(frozen=True)
class Guess:
    """A player's final guess.

    Attributes:
        target: Whether the guess is about the bag or the opponent's chip,
            or an abstention.
        color: Guessed color (None only when abstaining).
        shape: Guessed shape (None when abstaining or in color-only games).
    """
    target: Target
    color: str | None = None
    shape: str | None = None

    def __post_init__(self) -> None:
        if self.target == Target.ABSTAIN:
            if self.color is not None or self.shape is not None:
                raise ValueError("An abstention cannot name a color or shape")
        elif self.color is None:
            raise ValueError(f"A {self.target.name.lower()} guess must name a color")

    @classmethod
    def abstain(cls) -> Guess:
        return cls(Target.ABSTAIN)

    def matches(self, chip: Chip) -> bool:
        """Whether the guess names exactly this chip's attributes."""
        return self.color == chip.color and self.shape == chip.shape


def resolve_guess(game_round: Round, player: Player, guess: Guess) -> RoundResult:
    """Score a player's final guess against the round's ground truth.

    Args:
        game_round: The round being played.
        player: The player making the guess.
        guess: The guess.

    Returns:
        The round result for that player.

    Raises:
        ValueError: If the guess omits the shape in a color + shape round.
    """
    if guess.target == Target.ABSTAIN:
        return RoundResult.ABSTAIN
    if game_round.bag.shape is not None and guess.shape is None:
        raise ValueError("Guesses must name a shape when chips carry shapes")
    if guess.target == Target.BAG:
        if guess.matches(game_round.bag):
            return RoundResult.BAG_CORRECT
        return RoundResult.BAG_WRONG
    if guess.matches(game_round.opponent_chip(player)):
        return RoundResult.OPPONENT_CORRECT
    return RoundResult.OPPONENT_WRONG


# =============================================================================
# Repository (chip generation)
# =============================================================================

class Repository:
    """Draws the chips of one scenario without replacement.

    Owns one WeightedSet per universe. Every drawn attribute is eliminated,
    so later draws are conditioned on earlier ones.

    Attributes:
        config: The game variant.
        colors: Remaining color distribution.
        shapes: Remaining shape distribution (None in color-only games).
    """

    def __init__(
        self,
        config: GameConfig = DEFAULT_CONFIG,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config
        self._rng = rng
        self.colors = config.weighted_set(AttributeKind.COLOR)
        self.shapes = (
            config.weighted_set(AttributeKind.SHAPE)
            if config.shapes is not None else None
        )

    def _require(self, count: int) -> None:
        """Check every universe can still supply ``count`` attributes.

        Raises:
            EmptyDistribution: If some universe has fewer active members.
        """
        for weighted_set in (self.colors, self.shapes):
            if weighted_set is not None and len(weighted_set) < count:
                raise EmptyDistribution(
                    f"Need {count} {weighted_set.universe.kind.value}(s), "
                    f"only {len(weighted_set)} left"
                )

    def chip(self) -> Chip:
        """Draw a single chip (used for the bag).

        Raises:
            EmptyDistribution: If a universe has no member left. Nothing
                is drawn in that case.
        """
        self._require(1)
        color = self.colors.draw(self._rng)
        shape = self.shapes.draw(self._rng) if self.shapes is not None else None
        chip = Chip(color, shape)
        logger.debug(f"Drew chip {chip!r}")
        return chip

    def _draw_pair(self, weighted_set: WeightedSet) -> tuple[str, str]:
        pair = sample_pair(combinations(weighted_set), self._rng)
        first, second = pair.members
        if _uniform(self._rng) < 0.5:
            first, second = second, first
        weighted_set.eliminate(first)
        weighted_set.eliminate(second)
        return first, second

    def pair(self) -> tuple[Chip, Chip]:
        """Draw the two players' chips jointly.

        Each universe's remaining members are paired and scored; one pair
        is sampled by score and its members are dealt in random order.

        Raises:
            EmptyDistribution: If fewer than two members remain in some
                universe. Nothing is drawn in that case.
        """
        self._require(2)
        color_a, color_b = self._draw_pair(self.colors)
        shape_a = shape_b = None
        if self.shapes is not None:
            shape_a, shape_b = self._draw_pair(self.shapes)
        chips = (Chip(color_a, shape_a), Chip(color_b, shape_b))
        logger.debug(f"Drew player chips {chips[0]!r} and {chips[1]!r}")
        return chips

    def deal_round(self) -> Round:
        """Draw the bag and both players' chips, then hint each player.

        The two players never receive the same hint.
        """
        bag = self.chip()
        chip_a, chip_b = self.pair()
        hint_a = bag.hint(chip_a, (), self.config, self._rng)
        hint_b = bag.hint(chip_b, (hint_a,), self.config, self._rng)
        return Round(Hand(chip_a, hint_a), Hand(chip_b, hint_b), bag)
