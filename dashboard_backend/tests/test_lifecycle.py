import logging

import pytest

from src.api.lifecycle import cycle_priority, next_priority, transition_status
from src.api.models import Priority, TaskStatus
from src.api.timer import FocusTimer


class TestPriorityCycle:
    @pytest.mark.parametrize(
        "current,expected",
        [("LOW", "MEDIUM"), ("MEDIUM", "HIGH"), ("HIGH", "CRITICAL"), ("CRITICAL", "LOW")],
    )
    def test_advances_one_step(self, current, expected):
        assert next_priority(current) == Priority(expected)

    def test_full_cycle_returns_to_start(self):
        p = Priority.MEDIUM
        for _ in range(4):
            p = next_priority(p)
        assert p == Priority.MEDIUM

    def test_unrecognized_priority_restarts_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="src.api.lifecycle"):
            assert next_priority("URGENT") == Priority.LOW
        assert "URGENT" in caplog.text

    def test_cycle_priority_copies_task(self):
        task = {"id": "t1", "priority": "CRITICAL"}
        assert cycle_priority(task) == {"id": "t1", "priority": "LOW"}
        assert task["priority"] == "CRITICAL"


class TestStatusTransition:
    @pytest.mark.parametrize("source", list(TaskStatus))
    @pytest.mark.parametrize("target", list(TaskStatus))
    def test_any_transition_is_legal(self, source, target):
        task = {"id": "t1", "status": source.value}
        assert transition_status(task, target)["status"] == target.value

    def test_done_task_can_be_reopened(self):
        assert transition_status({"status": "DONE"}, TaskStatus.TODO) == {"status": "TODO"}

    def test_unrecognized_status_can_be_moved_out_of(self):
        assert transition_status({"status": "BLOCKED"}, TaskStatus.IN_PROGRESS)["status"] == "IN_PROGRESS"

    def test_invalid_target_is_rejected(self):
        with pytest.raises(ValueError):
            transition_status({"status": "TODO"}, "BLOCKED")


class TestFocusTimer:
    def test_starts_stopped_at_full_focus_length(self):
        timer = FocusTimer()
        assert timer.running is False
        assert timer.remaining_display == "25:00"

    def test_tick_only_counts_while_running(self):
        timer = FocusTimer()
        assert timer.tick(10) is None
        assert timer.remaining_seconds == 25 * 60
        timer.start()
        timer.tick(61)
        assert timer.remaining_display == "23:59"

    def test_completed_focus_returns_minutes_and_stops(self):
        timer = FocusTimer()
        timer.start()
        assert timer.tick(25 * 60) == 25
        assert timer.running is False
        assert timer.remaining_seconds == 0
        timer.start()
        assert timer.running is False

    def test_completed_break_returns_nothing(self):
        timer = FocusTimer("shortBreak")
        timer.start()
        assert timer.tick(5 * 60) is None
        assert timer.running is False

    def test_switch_mode_stops_and_resets(self):
        timer = FocusTimer()
        timer.start()
        timer.tick(30)
        timer.switch_mode("longBreak")
        assert timer.running is False
        assert timer.remaining_display == "15:00"

    def test_toggle_and_reset(self):
        timer = FocusTimer()
        timer.toggle()
        assert timer.running is True
        timer.tick(5)
        timer.toggle()
        assert timer.running is False
        timer.reset()
        assert timer.remaining_seconds == 25 * 60
