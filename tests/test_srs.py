"""Tests for the SRS engine: scheduling policy, ledger, queue, session and difficulty."""

from dataclasses import replace
from datetime import timedelta

import pytest

from backend.srs.difficulty import DifficultyController, timer_seconds
from backend.srs.ledger import CardLedger
from backend.srs.queue import QueueConfig, ReviewQueue, SessionPlanner
from backend.srs.scheduling import (
    MAX_EASE,
    MIN_EASE,
    CardLevel,
    CardProgress,
    SchedulingPolicy,
    interval_days,
    is_due,
    round_half_up,
)
from backend.srs.session import COMPLETE, SessionRunner, SessionState
from tests.factories import D0, build_catalog

# --- Scheduling policy ---


class TestSchedulingPolicy:
    def setup_method(self) -> None:
        self.policy = SchedulingPolicy()

    def test_first_review_correct(self) -> None:
        result = self.policy.next(CardProgress.new(42, D0), correct=True, today=D0)
        assert result.level == CardLevel.LEVEL_1
        assert result.ease_factor == pytest.approx(2.6)
        # round(1 * 2.6) = 3
        assert result.next_review_date == D0 + timedelta(days=3)
        assert result.correct_count == 1
        assert result.incorrect_count == 0
        assert result.last_reviewed == D0

    def test_incorrect_drops_one_level(self) -> None:
        progress = replace(CardProgress.new(7, D0), level=CardLevel.LEVEL_3)
        result = self.policy.next(progress, correct=False, today=D0)
        assert result.level == CardLevel.LEVEL_2
        assert result.ease_factor == pytest.approx(2.3)
        # round(3 * 2.3) = 7
        assert result.next_review_date == D0 + timedelta(days=7)
        assert result.incorrect_count == 1

    def test_first_review_incorrect_lands_on_level_one(self) -> None:
        result = self.policy.next(CardProgress.new(1, D0), correct=False, today=D0)
        assert result.level == CardLevel.LEVEL_1
        assert result.ease_factor == pytest.approx(2.3)

    def test_reviewed_card_never_returns_to_new(self) -> None:
        progress = CardProgress.new(1, D0)
        progress = self.policy.next(progress, correct=True, today=D0)
        for _ in range(10):
            progress = self.policy.next(progress, correct=False, today=D0)
            assert progress.level >= CardLevel.LEVEL_1

    def test_level_caps_at_mastered(self) -> None:
        progress = CardProgress.new(1, D0)
        for _ in range(8):
            progress = self.policy.next(progress, correct=True, today=D0)
        assert progress.level == CardLevel.MASTERED
        assert progress.correct_count == 8

    def test_ease_stays_bounded(self) -> None:
        progress = CardProgress.new(1, D0)
        for _ in range(30):
            progress = self.policy.next(progress, correct=True, today=D0)
            assert MIN_EASE <= progress.ease_factor <= MAX_EASE
        assert progress.ease_factor == MAX_EASE

        for _ in range(30):
            progress = self.policy.next(progress, correct=False, today=D0)
            assert MIN_EASE <= progress.ease_factor <= MAX_EASE
        assert progress.ease_factor == MIN_EASE

    def test_half_intervals_round_up(self) -> None:
        # Level 1 at ease 2.5 is 2.5 days: standard rounding gives 3, not 2
        progress = replace(CardProgress.new(1, D0), ease_factor=2.4)
        result = self.policy.next(progress, correct=True, today=D0)
        assert result.ease_factor == pytest.approx(2.5)
        assert result.next_review_date == D0 + timedelta(days=3)

    def test_input_is_not_mutated(self) -> None:
        progress = CardProgress.new(1, D0)
        self.policy.next(progress, correct=True, today=D0)
        assert progress.level == CardLevel.NEW
        assert progress.correct_count == 0

    def test_custom_intervals_must_cover_every_level(self) -> None:
        with pytest.raises(ValueError):
            SchedulingPolicy(intervals=(0, 1, 2))

    def test_is_due(self) -> None:
        progress = replace(CardProgress.new(1, D0), next_review_date=D0)
        assert is_due(progress, D0)
        assert is_due(progress, D0 + timedelta(days=1))
        assert not is_due(progress, D0 - timedelta(days=1))

    def test_interval_days(self) -> None:
        assert interval_days(CardLevel.MASTERED, 2.5) == 75
        assert interval_days(CardLevel.LEVEL_2, 1.3) == 4

    def test_round_half_up(self) -> None:
        assert round_half_up(2.5) == 3
        assert round_half_up(6.5) == 7
        assert round_half_up(6.49) == 6


# --- Ledger ---


class TestCardLedger:
    def setup_method(self) -> None:
        self.ledger = CardLedger()

    def test_get_progress_unknown_is_default(self) -> None:
        progress = self.ledger.get_progress(99, D0)
        assert progress == CardProgress.new(99, D0)
        assert progress.ease_factor == 2.5
        assert progress.last_reviewed is None
        # Reading never creates an entry
        assert 99 not in self.ledger

    def test_initialize_is_idempotent(self) -> None:
        self.ledger.apply_review(5, True, D0)
        reviewed = self.ledger.get_progress(5, D0)
        self.ledger.initialize(5, D0 + timedelta(days=1))
        assert self.ledger.get_progress(5, D0) == reviewed

        self.ledger.initialize(6, D0)
        assert 6 in self.ledger
        assert self.ledger.get(6).level == CardLevel.NEW

    def test_review_unknown_matches_initialize_then_review(self) -> None:
        direct = CardLedger()
        direct.apply_review(42, True, D0)

        initialized = CardLedger()
        initialized.initialize(42, D0)
        initialized.apply_review(42, True, D0)

        assert direct.get(42) == initialized.get(42)

    def test_apply_review_stores_result(self) -> None:
        result = self.ledger.apply_review(1, True, D0)
        assert self.ledger.get(1) == result
        assert len(self.ledger) == 1

    def test_reset(self) -> None:
        self.ledger.apply_review(1, True, D0)
        self.ledger.apply_review(2, False, D0)
        self.ledger.reset()
        assert len(self.ledger) == 0
        assert self.ledger.get(1) is None

    def test_snapshot_is_a_copy(self) -> None:
        self.ledger.apply_review(1, True, D0)
        snapshot = self.ledger.snapshot()
        self.ledger.apply_review(2, True, D0)
        assert list(snapshot) == [1]

        restored = CardLedger(entries=snapshot.values())
        assert restored.get(1) == self.ledger.get(1)


# --- Queue ---


def _seed(ledger: CardLedger, item_id: int, level: CardLevel, due_in: int = 0) -> None:
    progress = replace(
        CardProgress.new(item_id, D0),
        level=level,
        next_review_date=D0 + timedelta(days=due_in),
        last_reviewed=D0 - timedelta(days=1),
    )
    ledger.load([progress])


class TestSessionPlanner:
    def setup_method(self) -> None:
        self.catalog = build_catalog([("greeting", 10), ("food", 10)])
        self.ledger = CardLedger()
        self.planner = SessionPlanner(self.catalog, self.ledger, QueueConfig())

    def test_due_excludes_unstarted_future_and_mastered(self) -> None:
        _seed(self.ledger, 1, CardLevel.LEVEL_2, due_in=0)
        _seed(self.ledger, 2, CardLevel.LEVEL_2, due_in=-3)
        _seed(self.ledger, 3, CardLevel.LEVEL_2, due_in=1)
        _seed(self.ledger, 4, CardLevel.MASTERED, due_in=-30)

        due = [item.id for item in self.planner.get_due_cards(D0)]
        assert due == [1, 2]

    def test_mastered_never_due(self) -> None:
        for item_id in range(1, 6):
            _seed(self.ledger, item_id, CardLevel.MASTERED, due_in=-365)
        assert self.planner.get_due_cards(D0 + timedelta(days=1000)) == []

    def test_due_respects_category(self) -> None:
        _seed(self.ledger, 1, CardLevel.LEVEL_1)
        _seed(self.ledger, 12, CardLevel.LEVEL_1)
        assert [i.id for i in self.planner.get_due_cards(D0, "food")] == [12]
        assert [i.id for i in self.planner.get_due_cards(D0, "greeting")] == [1]

    def test_new_cards_in_catalog_order(self) -> None:
        _seed(self.ledger, 1, CardLevel.LEVEL_1)
        _seed(self.ledger, 3, CardLevel.LEVEL_1)
        new = [item.id for item in self.planner.get_new_cards(limit=4)]
        assert new == [2, 4, 5, 6]

    def test_new_cards_default_limit_and_category(self) -> None:
        assert len(self.planner.get_new_cards()) == 10
        assert [i.id for i in self.planner.get_new_cards(3, "food")] == [11, 12, 13]
        assert self.planner.get_new_cards(0) == []

    def test_initialized_card_is_neither_new_nor_skipped(self) -> None:
        self.ledger.initialize(1, D0)
        assert 1 not in [i.id for i in self.planner.get_new_cards()]
        # Level 0 due today still counts as due (it has been started)
        assert [i.id for i in self.planner.get_due_cards(D0)] == [1]

    def test_session_ten_due_then_five_new(self) -> None:
        catalog = build_catalog([("greeting", 20)])
        ledger = CardLedger()
        for item_id in range(1, 13):
            _seed(ledger, item_id, CardLevel.LEVEL_2)
        planner = SessionPlanner(catalog, ledger, QueueConfig())

        queue = planner.build_queue(D0)
        assert queue.due_ids == list(range(1, 11))
        assert queue.new_ids == [13, 14, 15, 16, 17]
        assert queue.total == 15

    def test_session_properties(self) -> None:
        for item_id in (2, 5, 9, 14):
            _seed(self.ledger, item_id, CardLevel.LEVEL_3, due_in=-1)
        ids = self.planner.plan_session(D0)

        assert len(ids) <= 15
        assert len(ids) == len(set(ids))
        due = {2, 5, 9, 14}
        last_due = max(i for i, item_id in enumerate(ids) if item_id in due)
        first_new = min(i for i, item_id in enumerate(ids) if item_id not in due)
        assert last_due < first_new

    def test_short_session_when_catalog_runs_out(self) -> None:
        catalog = build_catalog([("greeting", 4)])
        ledger = CardLedger()
        _seed(ledger, 2, CardLevel.LEVEL_1)
        planner = SessionPlanner(catalog, ledger, QueueConfig())
        assert planner.plan_session(D0) == [2, 1, 3, 4]

    def test_planning_does_not_touch_ledger(self) -> None:
        self.planner.plan_session(D0)
        assert len(self.ledger) == 0

    def test_review_queue_ids(self) -> None:
        queue = ReviewQueue(due_ids=[3, 1], new_ids=[7])
        assert queue.ids == [3, 1, 7]
        assert queue.total == 3


# --- Session runner ---


class TestSessionRunner:
    def setup_method(self) -> None:
        self.ledger = CardLedger()
        self.runner = SessionRunner(self.ledger)

    def test_idle_until_started(self) -> None:
        assert self.runner.state is SessionState.IDLE
        assert self.runner.current() is COMPLETE
        assert self.runner.review_current(True, D0) is COMPLETE
        assert len(self.ledger) == 0

    def test_walks_the_session(self) -> None:
        self.runner.start([4, 8])
        assert self.runner.state is SessionState.ACTIVE
        assert self.runner.current() == 4

        self.runner.review_current(True, D0)
        assert self.runner.current() == 8
        self.runner.review_current(False, D0)

        assert self.runner.state is SessionState.COMPLETE
        assert self.runner.current() is COMPLETE
        assert self.runner.remaining == 0
        assert self.ledger.get(4).correct_count == 1
        assert self.ledger.get(8).incorrect_count == 1

    def test_past_end_is_complete_not_error(self) -> None:
        self.runner.start([1])
        self.runner.review_current(True, D0)
        assert self.runner.review_current(True, D0) is COMPLETE
        assert self.ledger.get(1).correct_count == 1

    def test_end_returns_tally_and_keeps_reviews(self) -> None:
        self.runner.start([1, 2, 3])
        self.runner.review_current(True, D0)
        self.runner.review_current(False, D0)

        summary = self.runner.end()
        assert (summary.correct, summary.total) == (1, 2)
        assert summary.accuracy == 50
        assert self.runner.state is SessionState.IDLE
        # Partial session reviews stay recorded
        assert 1 in self.ledger and 2 in self.ledger
        assert 3 not in self.ledger

    def test_restart_resets_counters(self) -> None:
        self.runner.start([1])
        self.runner.review_current(True, D0)
        self.runner.start([2, 3])
        assert self.runner.current() == 2
        assert self.runner.end().total == 0

    def test_skip(self) -> None:
        self.runner.start([1, 2])
        self.runner.skip()
        assert self.runner.current() == 2
        assert 1 not in self.ledger

    def test_empty_session_summary(self) -> None:
        self.runner.start([])
        assert self.runner.state is SessionState.COMPLETE
        assert self.runner.end().accuracy == 0


# --- Difficulty controller ---


class TestDifficultyController:
    def setup_method(self) -> None:
        self.controller = DifficultyController(initial_difficulty=5)

    def test_starts_at_midpoint(self) -> None:
        assert self.controller.difficulty == 5
        assert self.controller.timer_seconds == 6

    def test_three_correct_raise_difficulty(self) -> None:
        for _ in range(2):
            self.controller.record_outcome(True)
        assert self.controller.difficulty == 5
        self.controller.record_outcome(True)

        s = self.controller.state
        assert s.difficulty == 6
        assert s.consecutive_correct == 0
        assert s.consecutive_wrong == 0
        assert s.streak == 3

    def test_two_wrong_lower_difficulty(self) -> None:
        self.controller.record_outcome(False)
        assert self.controller.difficulty == 5
        self.controller.record_outcome(False)
        assert self.controller.difficulty == 4
        assert self.controller.state.consecutive_wrong == 0

    def test_mixed_outcomes_reset_counters(self) -> None:
        self.controller.record_outcome(True)
        self.controller.record_outcome(True)
        self.controller.record_outcome(False)
        self.controller.record_outcome(True)
        self.controller.record_outcome(False)
        assert self.controller.difficulty == 5
        assert self.controller.state.streak == 0

    def test_difficulty_bounds(self) -> None:
        for _ in range(60):
            self.controller.record_outcome(True)
        assert self.controller.difficulty == 10
        assert self.controller.timer_seconds == 3

        for _ in range(60):
            self.controller.record_outcome(False)
        assert self.controller.difficulty == 1
        assert self.controller.timer_seconds == 8

    def test_timer_is_monotonic(self) -> None:
        timers = [timer_seconds(d) for d in range(1, 11)]
        assert timers == sorted(timers, reverse=True)
        assert timer_seconds(5) == 6
        # 8 - 1.5 = 6.5 rounds half up
        assert timer_seconds(3) == 7

    def test_end_game_summary_and_reset(self) -> None:
        for outcome in (True, True, True, True, False):
            self.controller.record_outcome(outcome)
        summary = self.controller.end_game()

        assert summary.correct == 4
        assert summary.total == 5
        assert summary.accuracy == 80
        assert summary.best_streak == 4
        assert summary.final_difficulty == 6
        assert self.controller.difficulty == 5
        assert self.controller.state.total == 0

    def test_initial_difficulty_is_clamped(self) -> None:
        assert DifficultyController(initial_difficulty=42).difficulty == 10
