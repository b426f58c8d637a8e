"""Unit tests for the secret_prisoner game model."""

import random
import unittest

from secret_prisoner import (
    COLOR_ONLY_CONFIG,
    COLORS,
    DEFAULT_CONFIG,
    SHAPES,
    AlreadyEliminated,
    AttributeKind,
    Chip,
    EmptyDistribution,
    GameConfig,
    Guess,
    Hand,
    Hint,
    InvalidDistribution,
    Pair,
    Player,
    Repository,
    Round,
    RoundResult,
    Target,
    Universe,
    WeightedSet,
    combinations,
    cross_combinations,
    enumerate_hints,
    resolve_guess,
    sample_pair,
)


class FixedRng:
    """Random source stub that always returns the same draw."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


def _three_colors() -> Universe:
    return Universe(AttributeKind.COLOR, ("red", "green", "blue"), (0.4, 0.3, 0.3))


class TestUniverse(unittest.TestCase):
    """Tests for Universe construction and lookup."""

    def test_default_colors(self) -> None:
        self.assertEqual(COLORS.attributes, ("red", "green", "blue", "black"))
        self.assertEqual(len(COLORS), 4)
        self.assertAlmostEqual(COLORS.prior("black"), 0.1)
        self.assertEqual(COLORS.index("blue"), 2)
        self.assertIn("green", COLORS)
        self.assertNotIn("triangle", COLORS)

    def test_default_shapes(self) -> None:
        self.assertEqual(SHAPES.kind, AttributeKind.SHAPE)
        self.assertAlmostEqual(SHAPES.prior("star"), 0.1)

    def test_unknown_attribute_raises(self) -> None:
        with self.assertRaises(ValueError):
            COLORS.index("purple")

    def test_length_mismatch_raises(self) -> None:
        with self.assertRaises(InvalidDistribution):
            Universe(AttributeKind.COLOR, ("red", "green"), (1.0,))

    def test_negative_prior_raises(self) -> None:
        with self.assertRaises(InvalidDistribution):
            Universe(AttributeKind.COLOR, ("red", "green"), (1.5, -0.5))

    def test_priors_must_sum_to_one(self) -> None:
        with self.assertRaises(InvalidDistribution):
            Universe(AttributeKind.COLOR, ("red", "green"), (0.5, 0.4))

    def test_duplicate_attributes_raise(self) -> None:
        with self.assertRaises(InvalidDistribution):
            Universe(AttributeKind.COLOR, ("red", "red"), (0.5, 0.5))

    def test_single_attribute_raises(self) -> None:
        with self.assertRaises(InvalidDistribution):
            Universe(AttributeKind.COLOR, ("red",), (1.0,))

    def test_invalid_distribution_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            Universe(AttributeKind.COLOR, ("red", "green"), (0.5, 0.4))

    def test_from_integer_weights(self) -> None:
        u = Universe.from_weights(
            AttributeKind.COLOR,
            {"red": 25, "green": 25, "blue": 25, "black": 25},
        )
        self.assertEqual(u.priors, (0.25, 0.25, 0.25, 0.25))
        self.assertEqual(u.attributes, ("red", "green", "blue", "black"))

    def test_from_weights_zero_total_raises(self) -> None:
        with self.assertRaises(InvalidDistribution):
            Universe.from_weights(AttributeKind.COLOR, {"red": 0, "green": 0})


class TestGameConfig(unittest.TestCase):
    """Tests for GameConfig validation and accessors."""

    def test_default_kinds(self) -> None:
        self.assertEqual(
            DEFAULT_CONFIG.kinds, (AttributeKind.COLOR, AttributeKind.SHAPE),
        )
        self.assertTrue(DEFAULT_CONFIG.has_shapes)

    def test_color_only(self) -> None:
        self.assertEqual(COLOR_ONLY_CONFIG.kinds, (AttributeKind.COLOR,))
        self.assertFalse(COLOR_ONLY_CONFIG.has_shapes)
        with self.assertRaises(ValueError):
            COLOR_ONLY_CONFIG.universe(AttributeKind.SHAPE)

    def test_shares_must_sum_to_one(self) -> None:
        with self.assertRaises(InvalidDistribution):
            GameConfig(predecessor_share=0.5, successor_share=0.6)

    def test_negative_share_raises(self) -> None:
        with self.assertRaises(InvalidDistribution):
            GameConfig(predecessor_share=-0.2, successor_share=1.2)

    def test_wrong_universe_kind_raises(self) -> None:
        with self.assertRaises(ValueError):
            GameConfig(colors=SHAPES)
        with self.assertRaises(ValueError):
            GameConfig(shapes=COLORS)

    def test_weighted_set_uses_shares(self) -> None:
        config = GameConfig(predecessor_share=0.5, successor_share=0.5)
        ws = config.weighted_set(AttributeKind.COLOR)
        ws.eliminate("red")
        self.assertAlmostEqual(ws.weight("black"), 0.25)
        self.assertAlmostEqual(ws.weight("green"), 0.45)


class TestWeightedSet(unittest.TestCase):
    """Tests for WeightedSet creation, elimination and sampling."""

    def test_default_snapshot(self) -> None:
        ws = WeightedSet(COLORS)
        self.assertEqual(
            ws.snapshot(),
            [("red", 0.3), ("green", 0.3), ("blue", 0.3), ("black", 0.1)],
        )
        self.assertEqual(len(ws), 4)

    def test_negative_weight_raises(self) -> None:
        with self.assertRaises(InvalidDistribution):
            WeightedSet(COLORS, {"red": 1.1, "green": -0.1})

    def test_weights_not_summing_to_one_raise(self) -> None:
        with self.assertRaises(InvalidDistribution):
            WeightedSet(COLORS, {"red": 0.5, "green": 0.3})

    def test_unknown_attribute_raises(self) -> None:
        with self.assertRaises(InvalidDistribution):
            WeightedSet(COLORS, {"red": 0.5, "purple": 0.5})

    def test_missing_attributes_start_eliminated(self) -> None:
        ws = WeightedSet(COLORS, {"green": 0.48, "blue": 0.3, "black": 0.22})
        self.assertEqual(ws.active(), ["green", "blue", "black"])
        self.assertEqual(ws.weight("red"), 0.0)
        self.assertFalse(ws.is_active("red"))

    def test_eliminate_red(self) -> None:
        ws = WeightedSet(COLORS)
        removed = ws.eliminate("red")
        self.assertAlmostEqual(removed, 0.3)
        weights = dict(ws.snapshot())
        self.assertEqual(list(weights), ["green", "blue", "black"])
        self.assertAlmostEqual(weights["green"], 0.48)
        self.assertAlmostEqual(weights["blue"], 0.3)
        self.assertAlmostEqual(weights["black"], 0.22)
        self.assertEqual(ws.weight("red"), 0.0)
        self.assertAlmostEqual(ws.total, 1.0, places=9)

    def test_eliminate_black(self) -> None:
        ws = WeightedSet(COLORS)
        ws.eliminate("black")
        weights = dict(ws.snapshot())
        self.assertEqual(list(weights), ["red", "green", "blue"])
        self.assertAlmostEqual(weights["red"], 0.36)
        self.assertAlmostEqual(weights["green"], 0.3)
        self.assertAlmostEqual(weights["blue"], 0.34)

    def test_elimination_conserves_mass(self) -> None:
        for attribute in COLORS.attributes:
            ws = WeightedSet(COLORS)
            before = ws.total
            ws.eliminate(attribute)
            self.assertAlmostEqual(ws.total, before, places=12)

    def test_redistribution_ratios(self) -> None:
        for i, attribute in enumerate(COLORS.attributes):
            ws = WeightedSet(COLORS)
            before = dict(ws.snapshot(include_eliminated=True))
            predecessor = COLORS.attributes[(i - 1) % 4]
            successor = COLORS.attributes[(i + 1) % 4]
            w = ws.weight(attribute)
            ws.eliminate(attribute)
            self.assertAlmostEqual(
                ws.weight(predecessor) - before[predecessor], 0.4 * w,
            )
            self.assertAlmostEqual(
                ws.weight(successor) - before[successor], 0.6 * w,
            )

    def test_eliminate_twice_raises(self) -> None:
        ws = WeightedSet(COLORS)
        ws.eliminate("red")
        after_first = ws.snapshot(include_eliminated=True)
        with self.assertRaises(AlreadyEliminated):
            ws.eliminate("red")
        self.assertEqual(ws.snapshot(include_eliminated=True), after_first)

    def test_eliminated_neighbor_is_skipped(self) -> None:
        ws = WeightedSet(COLORS)
        ws.eliminate("red")
        # green's predecessor (red) is gone, so its share walks on to black.
        ws.eliminate("green")
        self.assertEqual(ws.weight("red"), 0.0)
        self.assertAlmostEqual(ws.weight("black"), 0.22 + 0.4 * 0.48)
        self.assertAlmostEqual(ws.weight("blue"), 0.3 + 0.6 * 0.48)
        self.assertAlmostEqual(ws.total, 1.0)

    def test_two_active_members_merge(self) -> None:
        ws = WeightedSet(COLORS, {"green": 0.7, "black": 0.3})
        ws.eliminate("green")
        self.assertEqual(ws.active(), ["black"])
        self.assertAlmostEqual(ws.weight("black"), 1.0)

    def test_eliminating_last_member_empties_set(self) -> None:
        ws = WeightedSet(COLORS, {"blue": 1.0})
        ws.eliminate("blue")
        self.assertEqual(len(ws), 0)
        self.assertEqual(ws.total, 0.0)
        with self.assertRaises(EmptyDistribution):
            ws.sample()
        with self.assertRaises(EmptyDistribution):
            ws.normalize()

    def test_unknown_attribute_eliminate_raises(self) -> None:
        ws = WeightedSet(COLORS)
        with self.assertRaises(ValueError):
            ws.eliminate("purple")

    def test_normalize(self) -> None:
        ws = WeightedSet(COLORS)
        ws.eliminate("red")
        ws.eliminate("blue")
        ws.normalize()
        self.assertAlmostEqual(ws.total, 1.0, places=9)

    def test_sample_follows_cumulative_weights(self) -> None:
        ws = WeightedSet(COLORS)
        self.assertEqual(ws.sample(FixedRng(0.0)), "red")
        self.assertEqual(ws.sample(FixedRng(0.45)), "green")
        self.assertEqual(ws.sample(FixedRng(0.65)), "blue")
        self.assertEqual(ws.sample(FixedRng(0.95)), "black")

    def test_sample_skips_eliminated(self) -> None:
        ws = WeightedSet(COLORS)
        ws.eliminate("red")
        self.assertEqual(ws.sample(FixedRng(0.0)), "green")
        self.assertEqual(ws.sample(FixedRng(0.5)), "blue")
        rng = random.Random(7)
        for _ in range(200):
            self.assertNotEqual(ws.sample(rng), "red")

    def test_draw_eliminates(self) -> None:
        ws = WeightedSet(COLORS)
        drawn = ws.draw(FixedRng(0.0))
        self.assertEqual(drawn, "red")
        self.assertFalse(ws.is_active("red"))
        self.assertEqual(len(ws), 3)

    def test_copy_is_independent(self) -> None:
        ws = WeightedSet(COLORS)
        clone = ws.copy()
        clone.eliminate("red")
        self.assertAlmostEqual(ws.weight("red"), 0.3)
        self.assertEqual(clone.weight("red"), 0.0)


class TestPairs(unittest.TestCase):
    """Tests for pair scoring and sampling."""

    def test_three_member_scores(self) -> None:
        ws = WeightedSet(COLORS, {"green": 0.48, "blue": 0.3, "black": 0.22})
        pairs = combinations(ws)
        self.assertEqual(len(pairs), 3)
        scores = {p.members: p.score for p in pairs}
        self.assertAlmostEqual(scores[("green", "blue")], 0.39)
        self.assertAlmostEqual(scores[("green", "black")], 0.35)
        self.assertAlmostEqual(scores[("blue", "black")], 0.26)

    def test_pair_count_and_uniqueness(self) -> None:
        pairs = combinations(WeightedSet(COLORS))
        self.assertEqual(len(pairs), 6)
        self.assertEqual(len({frozenset(p.members) for p in pairs}), 6)

    def test_inactive_members_optional(self) -> None:
        ws = WeightedSet(COLORS)
        ws.eliminate("red")
        self.assertEqual(len(combinations(ws)), 3)
        self.assertEqual(len(combinations(ws, active_only=False)), 6)

    def test_pair_helpers(self) -> None:
        pair = Pair("green", "blue", 0.39)
        self.assertIn("green", pair)
        self.assertNotIn("red", pair)
        self.assertEqual(pair.other("green"), "blue")
        with self.assertRaises(ValueError):
            pair.other("red")

    def test_pair_needs_distinct_members(self) -> None:
        with self.assertRaises(ValueError):
            Pair("red", "red", 0.3)

    def test_cross_combinations(self) -> None:
        entries = cross_combinations(WeightedSet(COLORS), WeightedSet(SHAPES))
        self.assertEqual(len(entries), 16)
        scores = dict(entries)
        self.assertAlmostEqual(scores[Chip("black", "star")], 0.01)
        self.assertAlmostEqual(scores[Chip("red", "star")], 0.03)
        self.assertAlmostEqual(scores[Chip("red", "circle")], 0.09)
        self.assertAlmostEqual(sum(scores.values()), 1.0)
        self.assertEqual(entries[0][0], Chip("red", "triangle"))

    def test_cross_combinations_shared_names(self) -> None:
        shapes = Universe(AttributeKind.SHAPE, ("red", "x"), (0.5, 0.5))
        entries = cross_combinations(WeightedSet(COLORS), WeightedSet(shapes))
        self.assertEqual(len(entries), 8)
        self.assertAlmostEqual(dict(entries)[Chip("red", "red")], 0.15)

    def test_cross_combinations_skip_eliminated(self) -> None:
        colors = WeightedSet(COLORS)
        colors.eliminate("red")
        entries = cross_combinations(colors, WeightedSet(SHAPES))
        self.assertEqual(len(entries), 12)
        self.assertNotIn("red", {chip.color for chip, _ in entries})

    def test_sample_pair_by_score(self) -> None:
        ws = WeightedSet(COLORS, {"green": 0.48, "blue": 0.3, "black": 0.22})
        pairs = combinations(ws)
        self.assertEqual(sample_pair(pairs, FixedRng(0.0)).members, ("green", "blue"))
        self.assertEqual(sample_pair(pairs, FixedRng(0.5)).members, ("green", "black"))
        self.assertEqual(sample_pair(pairs, FixedRng(0.9)).members, ("blue", "black"))

    def test_sample_pair_empty_raises(self) -> None:
        with self.assertRaises(EmptyDistribution):
            sample_pair([])
        with self.assertRaises(EmptyDistribution):
            sample_pair([Pair("red", "green", 0.0)])


class TestHint(unittest.TestCase):
    """Tests for Hint predicates."""

    def setUp(self) -> None:
        self.chip = Chip("red", "triangle")

    def test_applies(self) -> None:
        self.assertTrue(Hint.color("blue").applies(self.chip))
        self.assertFalse(Hint.color("red").applies(self.chip))
        self.assertTrue(Hint.shape("star").applies(self.chip))
        self.assertFalse(Hint.shape("triangle").applies(self.chip))

    def test_shape_hint_applies_to_color_only_chip(self) -> None:
        self.assertTrue(Hint.shape("star").applies(Chip("red")))

    def test_admits(self) -> None:
        hint = Hint.color("green")
        self.assertFalse(hint.admits(AttributeKind.COLOR, "green"))
        self.assertTrue(hint.admits(AttributeKind.COLOR, "blue"))
        self.assertTrue(hint.admits(AttributeKind.SHAPE, "green"))

    def test_consistent_with_own_knowledge(self) -> None:
        hint = Hint.color("blue")
        self.assertTrue(hint.is_consistent_with_own_knowledge(self.chip))
        self.assertFalse(Hint.color("red").is_consistent_with_own_knowledge(self.chip))
        self.assertFalse(hint.is_consistent_with_own_knowledge(self.chip, Hint.color("blue")))
        self.assertTrue(hint.is_consistent_with_own_knowledge(self.chip, Hint.color("black")))

    def test_accuracy_is_independent_of_knowledge(self) -> None:
        truth = Chip("green", "square")
        hint = Hint.color("blue")
        # The speaker already issued this hint, so it is not consistent...
        self.assertFalse(hint.is_consistent_with_own_knowledge(self.chip, hint))
        # ...but it is still accurate about the truth.
        self.assertTrue(hint.accuracy_against(truth))
        self.assertFalse(Hint.color("green").accuracy_against(truth))

    def test_prior(self) -> None:
        self.assertAlmostEqual(Hint.color("black").prior(), 0.1)
        self.assertAlmostEqual(Hint.shape("circle").prior(), 0.3)

    def test_structural_equality(self) -> None:
        self.assertEqual(Hint.color("red"), Hint(AttributeKind.COLOR, "red"))
        self.assertNotEqual(Hint.color("red"), Hint.shape("red"))
        self.assertEqual(len({Hint.color("red"), Hint.color("red")}), 1)

    def test_frozen(self) -> None:
        hint = Hint.color("red")
        with self.assertRaises(AttributeError):
            hint.value = "blue"  # type: ignore[misc]

    def test_str(self) -> None:
        self.assertEqual(str(Hint.color("red")), "NOT red")

    def test_enumerate_hints(self) -> None:
        hints = enumerate_hints()
        self.assertEqual(len(hints), 8)
        self.assertEqual(hints[0], Hint.color("red"))
        self.assertEqual(hints[4], Hint.shape("triangle"))
        self.assertEqual(len(enumerate_hints(COLOR_ONLY_CONFIG)), 4)


class TestChip(unittest.TestCase):
    """Tests for Chip attributes and hint generation."""

    def test_attribute(self) -> None:
        chip = Chip("red", "star")
        self.assertEqual(chip.attribute(AttributeKind.COLOR), "red")
        self.assertEqual(chip.attribute(AttributeKind.SHAPE), "star")
        self.assertIsNone(Chip("red").attribute(AttributeKind.SHAPE))

    def test_hint_first_candidate(self) -> None:
        bag = Chip("red", "triangle")
        known = Chip("green", "square")
        self.assertEqual(bag.hint(known, rng=FixedRng(0.0)), Hint.color("blue"))
        self.assertEqual(
            bag.hint(known, [Hint.color("blue")], rng=FixedRng(0.0)),
            Hint.color("black"),
        )
        self.assertEqual(bag.hint(known, rng=FixedRng(0.99)), Hint.shape("star"))

    def test_hint_legality(self) -> None:
        rng = random.Random(11)
        bag = Chip("blue", "circle")
        known = Chip("black", "star")
        previous = [Hint.color("red")]
        for _ in range(100):
            hint = bag.hint(known, previous, rng=rng)
            self.assertNotEqual(hint.value, bag.attribute(hint.kind))
            self.assertNotEqual(hint.value, known.attribute(hint.kind))
            self.assertNotIn(hint, previous)

    def test_issued_hints_are_consistent_for_the_bag(self) -> None:
        rng = random.Random(7)
        bag = Chip("green", "square")
        known = Chip("red", "circle")
        for _ in range(50):
            hint = bag.hint(known, rng=rng)
            self.assertTrue(hint.is_consistent_with_own_knowledge(bag))
            self.assertTrue(hint.is_consistent_with_own_knowledge(known))

    def test_hint_exhausted_raises(self) -> None:
        bag = Chip("red")
        known = Chip("green")
        previous = [Hint.color("blue"), Hint.color("black")]
        with self.assertRaises(EmptyDistribution):
            bag.hint(known, previous, COLOR_ONLY_CONFIG)

    def test_str_output(self) -> None:
        self.assertIn("▲", str(Chip("red", "triangle")))
        self.assertIn("green", str(Chip("green")))


class TestHandAndRound(unittest.TestCase):
    """Tests for Hand knowledge and Round accessors."""

    def setUp(self) -> None:
        self.bag = Chip("blue", "circle")
        self.hand_a = Hand(Chip("red", "triangle"), Hint.shape("star"))
        self.hand_b = Hand(Chip("green", "square"), Hint.color("black"))
        self.round = Round(self.hand_a, self.hand_b, self.bag)

    def test_can_vouch_for(self) -> None:
        self.assertTrue(self.hand_a.can_vouch_for(Hint.color("red")))
        self.assertTrue(self.hand_a.can_vouch_for(Hint.shape("triangle")))
        self.assertTrue(self.hand_a.can_vouch_for(Hint.shape("star")))
        self.assertFalse(self.hand_a.can_vouch_for(Hint.color("black")))

    def test_round_accessors(self) -> None:
        self.assertIs(self.round.hand(Player.A), self.hand_a)
        self.assertIs(self.round.hand(Player.B), self.hand_b)
        self.assertEqual(self.round.opponent_chip(Player.A), self.hand_b.chip)
        self.assertEqual(Player.A.other, Player.B)

    def test_str_output(self) -> None:
        text = str(self.round)
        self.assertIn("Bag:", text)
        self.assertIn("Player A:", text)
        self.assertIn("NOT star", text)


class TestGuess(unittest.TestCase):
    """Tests for guess validation and scoring."""

    def setUp(self) -> None:
        self.round = Round(
            Hand(Chip("red", "triangle"), Hint.shape("star")),
            Hand(Chip("green", "square"), Hint.color("black")),
            Chip("blue", "circle"),
        )

    def test_abstain(self) -> None:
        self.assertEqual(
            resolve_guess(self.round, Player.A, Guess.abstain()),
            RoundResult.ABSTAIN,
        )

    def test_abstain_cannot_name_attributes(self) -> None:
        with self.assertRaises(ValueError):
            Guess(Target.ABSTAIN, color="red")

    def test_guess_needs_color(self) -> None:
        with self.assertRaises(ValueError):
            Guess(Target.BAG)

    def test_bag_guess(self) -> None:
        right = Guess(Target.BAG, "blue", "circle")
        wrong = Guess(Target.BAG, "blue", "star")
        self.assertEqual(resolve_guess(self.round, Player.A, right), RoundResult.BAG_CORRECT)
        self.assertEqual(resolve_guess(self.round, Player.B, wrong), RoundResult.BAG_WRONG)

    def test_opponent_guess(self) -> None:
        guess = Guess(Target.OPPONENT, "green", "square")
        self.assertEqual(
            resolve_guess(self.round, Player.A, guess), RoundResult.OPPONENT_CORRECT,
        )
        self.assertEqual(
            resolve_guess(self.round, Player.B, guess), RoundResult.OPPONENT_WRONG,
        )

    def test_missing_shape_raises(self) -> None:
        with self.assertRaises(ValueError):
            resolve_guess(self.round, Player.A, Guess(Target.BAG, "blue"))

    def test_color_only_guess(self) -> None:
        game_round = Round(
            Hand(Chip("red"), Hint.color("black")),
            Hand(Chip("green"), Hint.color("black")),
            Chip("blue"),
        )
        self.assertEqual(
            resolve_guess(game_round, Player.A, Guess(Target.BAG, "blue")),
            RoundResult.BAG_CORRECT,
        )


class TestRepository(unittest.TestCase):
    """Tests for chip generation."""

    def test_chip_eliminates_drawn_attributes(self) -> None:
        repo = Repository(rng=random.Random(3))
        chip = repo.chip()
        self.assertFalse(repo.colors.is_active(chip.color))
        self.assertFalse(repo.shapes.is_active(chip.shape))
        self.assertEqual(len(repo.colors), 3)
        self.assertAlmostEqual(repo.colors.total, 1.0)

    def test_deal_round_is_well_formed(self) -> None:
        for seed in range(50):
            game_round = Repository(rng=random.Random(seed)).deal_round()
            bag = game_round.bag
            a = game_round.player_a
            b = game_round.player_b
            self.assertEqual(len({bag.color, a.chip.color, b.chip.color}), 3)
            self.assertEqual(len({bag.shape, a.chip.shape, b.chip.shape}), 3)
            self.assertNotEqual(a.hint, b.hint)
            for hand in (a, b):
                self.assertTrue(hand.hint.applies(bag))
                self.assertTrue(hand.hint.applies(hand.chip))

    def test_color_only_round(self) -> None:
        game_round = Repository(COLOR_ONLY_CONFIG, random.Random(5)).deal_round()
        self.assertIsNone(game_round.bag.shape)
        self.assertIsNone(game_round.player_a.chip.shape)
        self.assertEqual(game_round.player_a.hint.kind, AttributeKind.COLOR)

    def test_three_color_round_exhausts_colors(self) -> None:
        config = GameConfig(colors=_three_colors(), shapes=None)
        repo = Repository(config, random.Random(9))
        game_round = repo.deal_round()
        self.assertEqual(len(repo.colors), 0)
        # With three colors the only legal hint names the other player's chip.
        self.assertEqual(game_round.player_a.hint, Hint.color(game_round.player_b.chip.color))
        self.assertEqual(game_round.player_b.hint, Hint.color(game_round.player_a.chip.color))

    def test_pair_needs_two_members(self) -> None:
        config = GameConfig(colors=_three_colors(), shapes=None)
        repo = Repository(config, random.Random(1))
        repo.chip()
        repo.chip()
        with self.assertRaises(EmptyDistribution):
            repo.pair()

    def test_failed_pair_leaves_colors_untouched(self) -> None:
        two_shapes = Universe(AttributeKind.SHAPE, ("triangle", "square"), (0.5, 0.5))
        repo = Repository(GameConfig(shapes=two_shapes), random.Random(2))
        repo.chip()
        colors_before = repo.colors.snapshot(include_eliminated=True)
        shapes_before = repo.shapes.snapshot(include_eliminated=True)
        with self.assertRaises(EmptyDistribution):
            repo.pair()
        self.assertEqual(repo.colors.snapshot(include_eliminated=True), colors_before)
        self.assertEqual(repo.shapes.snapshot(include_eliminated=True), shapes_before)
        self.assertEqual(len(repo.colors), 3)

    def test_failed_chip_leaves_colors_untouched(self) -> None:
        two_shapes = Universe(AttributeKind.SHAPE, ("triangle", "square"), (0.5, 0.5))
        repo = Repository(GameConfig(shapes=two_shapes), random.Random(4))
        repo.chip()
        repo.chip()
        self.assertEqual(len(repo.shapes), 0)
        colors_before = repo.colors.snapshot(include_eliminated=True)
        with self.assertRaises(EmptyDistribution):
            repo.chip()
        self.assertEqual(repo.colors.snapshot(include_eliminated=True), colors_before)


if __name__ == "__main__":
    unittest.main()
