"""Tests for the game controller and its turn state machine."""

from __future__ import annotations

import random
from typing import Sequence

import pytest

from eights.cards import Card, Rank, Suit
from eights.errors import ConsistencyError, Forfeit, TurnLimitExceeded
from eights.game import Game, GameConfig, GameStatus
from eights.players import BasicPlayer, Player, RandomPlayer, ScriptedPlayer
from eights.rules import Attempt, Constraint, Effect

FILLER = ["2D#0", "3D#0", "4D#0", "6D#0", "7D#0", "9D#0", "10D#0", "JD#0"]


def card(code: str) -> Card:
    return Card.from_code(code)


def play(code: str, suit: Suit | None = None) -> Attempt:
    return Attempt(card(code), suit)


def _game(
    players: Sequence[Player],
    hands: Sequence[Sequence[str]],
    opening: str,
    rest: Sequence[str] = FILLER,
) -> Game:
    """Deal ``hands`` in seat order, flip ``opening`` and leave ``rest`` as the draw pile."""

    deck = [card(code) for hand in hands for code in hand]
    deck.append(card(opening))
    deck.extend(card(code) for code in rest)
    config = GameConfig(starting_hand_size=len(hands[0]))
    game = Game(players, config, deck=deck, rng=random.Random(99))
    game.start()
    return game


def _names(seats) -> list[str]:
    return [seat.name for seat in seats]


def _assert_invariants(game: Game, names: Sequence[str]) -> None:
    assert game.card_count() == game.total_cards
    everyone = _names(game.order.roster) + _names(game.winners) + _names(game.losers)
    assert sorted(everyone) == sorted(names)


def test_requires_two_players() -> None:
    with pytest.raises(ValueError):
        Game([ScriptedPlayer("A")])


def test_requires_unique_names() -> None:
    with pytest.raises(ValueError):
        Game([ScriptedPlayer("A"), ScriptedPlayer("A")])


def test_start_deals_hands_and_flips_opening_card() -> None:
    game = Game([BasicPlayer("A"), BasicPlayer("B"), BasicPlayer("C")], rng=random.Random(5))
    assert game.status is GameStatus.NOT_STARTED

    game.start()

    assert game.status is GameStatus.IN_PROGRESS
    assert all(seat.hand_size() == 5 for seat in game.seats)
    assert len(game.piles.discard) == 1
    assert game.total_cards == 54
    assert game.card_count() == 54
    assert game.constraint is not None


def test_large_tables_use_more_decks() -> None:
    players = [BasicPlayer(f"P{idx}") for idx in range(5)]
    game = Game(players, rng=random.Random(5))

    assert game.total_cards == 108


def test_start_twice_is_a_consistency_error() -> None:
    game = _game([ScriptedPlayer("A"), ScriptedPlayer("B")], [["2C#0"], ["3C#0"]], "9H#0")

    with pytest.raises(ConsistencyError):
        game.start()


def test_short_initial_deal_is_fatal() -> None:
    deck = [card("2C#0"), card("3C#0")]
    game = Game([ScriptedPlayer("A"), ScriptedPlayer("B")], GameConfig(starting_hand_size=2), deck=deck)

    with pytest.raises(ConsistencyError):
        game.start()


def test_run_turn_before_start_is_rejected() -> None:
    game = Game([ScriptedPlayer("A"), ScriptedPlayer("B")])

    with pytest.raises(ConsistencyError):
        game.run_turn()


def test_queen_skips_next_player() -> None:
    players = [ScriptedPlayer("A", [play("QH#0")]), ScriptedPlayer("B"), ScriptedPlayer("C")]
    game = _game(players, [["QH#0", "2C#0"], ["3S#0", "4S#0"], ["5S#0", "6S#0"]], "9H#0")

    result = game.run_turn()

    assert result is not None and result.accepted
    assert result.effect is Effect.SKIP_NEXT
    assert game.order.current.name == "C"
    assert game.turn == 1


def test_ace_with_two_players_returns_turn_to_same_player() -> None:
    players = [ScriptedPlayer("A", [play("AH#0")]), ScriptedPlayer("B")]
    game = _game(players, [["AH#0", "2C#0"], ["3S#0", "4S#0"]], "9H#0")

    result = game.run_turn()

    assert result is not None and result.effect is Effect.REVERSE_DIRECTION
    assert game.order.reversed
    # Reversal plus skip on a two-seat circle lands on the player who just played.
    assert game.order.current.name == "A"


def test_ace_with_three_players_reverses_without_skipping() -> None:
    players = [ScriptedPlayer("A", [play("AH#0")]), ScriptedPlayer("B"), ScriptedPlayer("C")]
    game = _game(players, [["AH#0", "2C#0"], ["3S#0", "4S#0"], ["5S#0", "6S#0"]], "9H#0")

    game.run_turn()

    assert game.order.current.name == "C"
    assert game.view.predict_next_players(2) == ["B", "A"]


def test_legal_play_updates_stack_and_constraint() -> None:
    players = [ScriptedPlayer("A", [play("9C#0")]), ScriptedPlayer("B")]
    game = _game(players, [["9C#0", "2C#0"], ["3S#0", "4S#0"]], "9H#0")

    game.run_turn()

    assert game.piles.top == card("9C#0")
    assert game.constraint == Constraint(Suit.CLUBS, Rank.NINE)
    assert game.seat("A").hand == [card("2C#0")]
    assert game.order.current.name == "B"


def test_wild_play_sets_declared_suit() -> None:
    players = [ScriptedPlayer("A", [play("8S#0", Suit.DIAMONDS)]), ScriptedPlayer("B")]
    game = _game(players, [["8S#0", "2C#0"], ["3S#0", "4S#0"]], "9H#0")

    game.run_turn()

    assert game.constraint == Constraint(Suit.DIAMONDS, Rank.EIGHT)
    assert "A played EIGHT OF SPADES (DIAMONDS)." in game.log.lines()[-1]


def test_illegal_attempt_returns_card_and_deals_one_penalty() -> None:
    players = [ScriptedPlayer("A", [play("KC#0")]), ScriptedPlayer("B")]
    game = _game(players, [["KC#0", "2C#0"], ["3S#0", "4S#0"]], "5H#0")
    hand_before = len(game.seat("A").hand)

    result = game.run_turn()

    hand = game.seat("A").hand
    assert result is not None and not result.accepted
    assert result.effect is Effect.NONE
    assert card("KC#0") in hand
    assert len(hand) == hand_before + 1
    assert hand[-1] == card(FILLER[0])
    assert game.constraint == Constraint(Suit.HEARTS, Rank.FIVE)
    assert game.piles.discard == [card("5H#0")]
    assert game.order.current.name == "B"


def test_accept_attempt_directly_penalises_illegal_card() -> None:
    game = _game([ScriptedPlayer("A"), ScriptedPlayer("B")], [["KC#0", "2C#0"], ["3S#0", "4S#0"]], "5H#0")
    seat = game.seat("A")
    attempt = play("KC#0")
    assert seat.take(attempt.card)

    assert game.accept_attempt(attempt, seat) is False
    assert sorted(c.code for c in seat.hand) == sorted(["2C#0", "KC#0", FILLER[0]])
    assert game.constraint == Constraint(Suit.HEARTS, Rank.FIVE)


def test_accept_attempt_requires_card_out_of_hand() -> None:
    game = _game([ScriptedPlayer("A"), ScriptedPlayer("B")], [["KC#0", "2C#0"], ["3S#0", "4S#0"]], "5H#0")

    with pytest.raises(ConsistencyError):
        game.accept_attempt(play("KC#0"), game.seat("A"))


def test_illegal_queen_does_not_skip() -> None:
    players = [ScriptedPlayer("A", [play("QC#0")]), ScriptedPlayer("B"), ScriptedPlayer("C")]
    game = _game(players, [["QC#0", "2C#0"], ["3S#0", "4S#0"], ["5S#0", "6S#0"]], "5H#0")

    game.run_turn()

    assert game.order.current.name == "B"


def test_draw_deals_one_card() -> None:
    players = [ScriptedPlayer("A", [None]), ScriptedPlayer("B")]
    game = _game(players, [["KC#0", "2C#0"], ["3S#0", "4S#0"]], "5H#0")

    result = game.run_turn()

    assert result is not None and result.attempt is None
    assert len(game.seat("A").hand) == 3
    assert "A has chosen to draw. Penalty of 1 card applied." in game.log.lines()
    assert game.order.current.name == "B"


def test_draw_with_exhausted_piles_is_skipped() -> None:
    players = [ScriptedPlayer("A", [None]), ScriptedPlayer("B")]
    game = _game(players, [["KC#0", "2C#0"], ["3S#0", "4S#0"]], "5H#0", rest=[])

    game.run_turn()

    assert len(game.seat("A").hand) == 2
    assert "Skipping this draw due to insufficient cards." in game.log.lines()
    assert game.order.current.name == "B"


def test_playing_card_not_in_hand_is_fatal() -> None:
    players = [ScriptedPlayer("A", [play("KH#0")]), ScriptedPlayer("B")]
    game = _game(players, [["KC#0", "2C#0"], ["3S#0", "4S#0"]], "5H#0")

    with pytest.raises(ConsistencyError):
        game.run_turn()


def test_winner_leaves_and_skip_still_applies() -> None:
    players = [ScriptedPlayer("A", [play("QH#0")]), ScriptedPlayer("B"), ScriptedPlayer("C")]
    game = _game(players, [["QH#0"], ["3S#0"], ["4S#0"]], "9H#0")

    game.run_turn()

    assert _names(game.winners) == ["A"]
    assert _names(game.order.roster) == ["B", "C"]
    assert game.order.current.name == "C"
    assert game.status is GameStatus.IN_PROGRESS


def test_winner_in_two_player_game_leaves_sole_loser() -> None:
    players = [ScriptedPlayer("A", [play("9C#0")]), ScriptedPlayer("B")]
    game = _game(players, [["9C#0"], ["3S#0"]], "9H#0")

    game.run_turn()

    assert _names(game.winners) == ["A"]
    assert _names(game.losers) == ["B"]
    assert game.order.roster == []
    assert game.status is GameStatus.FINISHED
    assert game.seat("B").hand == [card("3S#0")]
    _assert_invariants(game, ["A", "B"])
    with pytest.raises(ConsistencyError):
        game.run_turn()


def test_forfeit_becomes_a_loss() -> None:
    players = [ScriptedPlayer("A", [Forfeit()]), ScriptedPlayer("B"), ScriptedPlayer("C")]
    game = _game(players, [["KC#0", "2C#0"], ["3S#0", "4S#0"], ["5S#0", "6S#0"]], "5H#0")
    draw_before = len(game.piles.draw_pile)

    result = game.run_turn()

    assert result is not None and result.forfeited
    assert _names(game.losers) == ["A"]
    assert game.seat("A").hand == []
    assert len(game.piles.draw_pile) == draw_before + 2
    assert game.order.current.name == "B"
    assert game.turn == 1
    _assert_invariants(game, ["A", "B", "C"])


def test_forfeit_with_two_players_ends_game() -> None:
    players = [ScriptedPlayer("A", [Forfeit()]), ScriptedPlayer("B")]
    game = _game(players, [["KC#0", "2C#0"], ["3S#0", "4S#0"]], "5H#0")

    game.run_turn()

    assert _names(game.losers) == ["A", "B"]
    assert game.winners == []
    assert game.finished


def test_wild_opening_card_is_declared_by_first_player() -> None:
    players = [ScriptedPlayer("A", suits=[Suit.SPADES]), ScriptedPlayer("B")]
    game = _game(players, [["KC#0", "2C#0"], ["3S#0", "4S#0"]], "8H#0")

    assert game.constraint == Constraint(Suit.SPADES, Rank.EIGHT)
    assert game.order.current.name == "A"
    assert "A declared suit for EIGHT OF HEARTS: SPADES." in game.log.lines()


def test_forfeit_during_opening_declaration_passes_to_next_player() -> None:
    class Quitter(ScriptedPlayer):
        def declare_suit(self, view, hand):
            raise Forfeit()

    players = [Quitter("A"), ScriptedPlayer("B", suits=[Suit.CLUBS]), ScriptedPlayer("C")]
    game = _game(players, [["KC#0"], ["3S#0"], ["4S#0"]], "JOKER-RJ#0")

    assert _names(game.losers) == ["A"]
    assert game.constraint == Constraint(Suit.CLUBS, Rank.JOKER)
    assert game.order.current.name == "B"


def test_lone_player_is_resolved_before_another_turn() -> None:
    game = _game([ScriptedPlayer("A"), ScriptedPlayer("B")], [["KC#0"], ["3S#0"]], "5H#0")

    game.elimination.remove_loser(game.seat("B"))

    assert _names(game.losers) == ["B", "A"]
    assert game.finished


def test_run_all_finishes_with_strategies() -> None:
    names = ["A", "B", "C", "D"]
    players = [
        BasicPlayer("A", rng=random.Random(1)),
        BasicPlayer("B", rng=random.Random(2)),
        RandomPlayer("C", rng=random.Random(3)),
        RandomPlayer("D", rng=random.Random(4), blunder_rate=0.2),
    ]
    game = Game(players, rng=random.Random(2024))

    game.run_all(max_turns=5000)

    assert game.finished
    assert len(game.losers) >= 1 or len(game.winners) == 4
    _assert_invariants(game, names)


@pytest.mark.parametrize("seed", range(8))
def test_invariants_hold_every_turn(seed: int) -> None:
    names = ["A", "B", "C", "D", "E", "F"]
    rng = random.Random(seed)
    players: list[Player] = [
        BasicPlayer(name, rng=random.Random(rng.getrandbits(32)))
        if idx % 2
        else RandomPlayer(name, rng=random.Random(rng.getrandbits(32)), blunder_rate=0.3)
        for idx, name in enumerate(names)
    ]
    game = Game(players, rng=random.Random(seed))
    game.start()

    for _ in range(400):
        if len(game.order) <= 1:
            break
        game.run_turn()
        _assert_invariants(game, names)
        assert game.piles.discard
        assert game.constraint is not None
        if game.constraint.rank not in (Rank.EIGHT, Rank.JOKER):
            assert game.piles.top.suit is game.constraint.suit
        assert game.piles.top.rank is game.constraint.rank


def test_run_all_turn_limit() -> None:
    players = [ScriptedPlayer("A"), ScriptedPlayer("B")]
    game = _game(players, [["KC#0", "2C#0"], ["3S#0", "4S#0"]], "5H#0")

    with pytest.raises(TurnLimitExceeded):
        game.run_all(max_turns=3)


def test_report_lists_every_hand() -> None:
    players = [ScriptedPlayer("A", [play("9C#0")]), ScriptedPlayer("B")]
    game = _game(players, [["9C#0"], ["3S#0"]], "9H#0")
    game.run_all()

    report = game.report()

    assert "[EVENT LOG]" in report
    assert "B: THREE OF SPADES" in report
    assert "A (winner) (0 cards)" in report
    assert "B (loser) (1 cards)" in report


def test_possible_plays_for_seat() -> None:
    hands = [["KC#0", "5C#0", "8S#0"], ["3S#0", "4S#0", "2H#0"]]
    game = _game([ScriptedPlayer("A"), ScriptedPlayer("B")], hands, "5H#0")

    assert game.possible_plays(game.seat("A")) == [card("5C#0"), card("8S#0")]
    assert game.possible_plays(game.seat("B")) == [card("2H#0")]
