"""
Unit tests for the day executor and the event/impediment models.
"""

from datetime import timedelta

import pytest

from scrumsim.core.events import (
    SEVERITY_TABLE,
    apply_impact,
    roll_daily_event,
    roll_impediment,
)
from scrumsim.core.executor import DayExecutor
from scrumsim.models.entities import (
    Complexity,
    EventImpact,
    EventType,
    ImpedimentSeverity,
    ImpedimentStatus,
    SimulationMetrics,
    StoryStatus,
)
from tests.unit.helpers import ScriptedRandom, make_sprint, make_state, make_story

QUIET = 0.5  # above both the event and the impediment chance


def executor_for(state, values):
    return DayExecutor(ScriptedRandom(values), state)


class TestEventRoll:
    """Tests for the daily random event."""

    def test_quiet_day(self, start_date):
        rng = ScriptedRandom([QUIET])

        assert roll_daily_event(rng, "event-0", start_date) is None
        assert rng.draws == 1

    def test_impediment_event(self, start_date):
        state = make_state(average_velocity=20.0, team_morale=7.0)
        executor = executor_for(state, [0.05, 0.0, 0.5, 0.5])

        executor.roll_event(start_date)

        event = state.events[0]
        assert event.type == EventType.IMPEDIMENT_CREATED
        assert event.impact.to_dict() == {"velocity": -0.1, "morale": -0.05}
        assert event.timestamp == start_date
        assert state.metrics.average_velocity == pytest.approx(18.0)
        assert state.metrics.team_morale == pytest.approx(6.95)
        assert executor.rng.remaining == 0

    def test_velocity_change(self, start_date):
        state = make_state(average_velocity=20.0)
        executor = executor_for(state, [0.05, 0.5, 0.75, 0.1])

        executor.roll_event(start_date)

        event = state.events[0]
        assert event.type == EventType.VELOCITY_CHANGE
        assert event.impact.velocity == pytest.approx(0.05)
        assert event.impact.timeline is None
        assert state.metrics.average_velocity == pytest.approx(21.0)

    def test_scope_change_leaves_metrics(self, start_date):
        state = make_state(average_velocity=20.0, team_morale=7.0)
        executor = executor_for(state, [0.05, 0.9, 0.2, 1.0 - 1e-9])

        executor.roll_event(start_date)

        event = state.events[0]
        assert event.type == EventType.SCOPE_CHANGE
        assert event.impact.timeline == pytest.approx(0.15)
        assert event.description == "Project scope has been modified"
        assert state.metrics.average_velocity == 20.0
        assert state.metrics.team_morale == 7.0

    def test_morale_clamped(self):
        metrics = SimulationMetrics(average_velocity=10.0, team_morale=1.0)

        apply_impact(metrics, EventImpact(velocity=-0.1, morale=-0.05))

        assert metrics.team_morale == 1.0

        metrics.team_morale = 10.0
        apply_impact(metrics, EventImpact(morale=0.5, quality=20.0))

        assert metrics.team_morale == 10.0
        assert metrics.quality_score == 10.0


class TestWorkProgress:
    """Tests for story completion and starts."""

    def test_completion(self, start_date):
        story = make_story("s1", points=3, complexity=Complexity.SIMPLE, status=StoryStatus.IN_PROGRESS)
        sprint = make_sprint([story])
        state = make_state(sprints=[sprint], average_velocity=20.0, team_morale=10.0)
        # chance is 0.3 * 1.2 * 1.0 = 0.36
        executor = executor_for(state, [0.35])

        completed = executor.process_story_work(sprint, start_date)

        assert completed == [story]
        assert story.status == StoryStatus.DONE
        assert state.metrics.total_stories_completed == 1
        assert state.events[0].type == EventType.STORY_COMPLETED
        assert state.events[0].description == 'Story "Story s1" completed'
        assert state.metrics.average_velocity == pytest.approx(22.0)
        assert state.metrics.team_morale == 10.0

    def test_completion_chance_scales_with_morale(self):
        state = make_state(team_morale=5.0)
        executor = executor_for(state, [])

        complex_story = make_story("c", complexity=Complexity.COMPLEX)

        assert executor.completion_chance(complex_story) == pytest.approx(0.3 * 0.8 * 0.5)

    def test_no_completion(self, start_date):
        story = make_story("s1", complexity=Complexity.COMPLEX, status=StoryStatus.IN_PROGRESS)
        sprint = make_sprint([story])
        state = make_state(sprints=[sprint], team_morale=10.0)
        executor = executor_for(state, [0.5])

        executor.process_story_work(sprint, start_date)

        assert story.status == StoryStatus.IN_PROGRESS
        assert state.events == []

    def test_start_cap_stops_drawing(self, start_date):
        stories = [make_story(f"s{i}", status=StoryStatus.SPRINT_BACKLOG) for i in range(3)]
        sprint = make_sprint(stories)
        state = make_state(team_size=1, sprints=[sprint])
        # cap is ceil(1 * 1.5) = 2
        executor = executor_for(state, [0.1, 0.1])

        executor.process_story_work(sprint, start_date)

        assert [s.status for s in stories] == [
            StoryStatus.IN_PROGRESS,
            StoryStatus.IN_PROGRESS,
            StoryStatus.SPRINT_BACKLOG,
        ]
        assert executor.rng.draws == 2

    def test_start_roll_can_fail(self, start_date):
        story = make_story("s1", status=StoryStatus.SPRINT_BACKLOG)
        sprint = make_sprint([story])
        state = make_state(sprints=[sprint])
        executor = executor_for(state, [0.3])

        executor.process_story_work(sprint, start_date)

        assert story.status == StoryStatus.SPRINT_BACKLOG

    def test_cap_counts_after_completions(self, start_date):
        finishing = make_story("done", status=StoryStatus.IN_PROGRESS)
        working = make_story("busy", status=StoryStatus.IN_PROGRESS)
        waiting = make_story("next", status=StoryStatus.SPRINT_BACKLOG)
        sprint = make_sprint([finishing, working, waiting])
        state = make_state(team_size=1, sprints=[sprint], team_morale=10.0)
        executor = executor_for(state, [0.0, 0.99, 0.1])

        executor.process_story_work(sprint, start_date)

        assert finishing.status == StoryStatus.DONE
        assert working.status == StoryStatus.IN_PROGRESS
        assert waiting.status == StoryStatus.IN_PROGRESS
        assert executor.rng.remaining == 0

    def test_empty_team_starts_nothing(self, start_date):
        story = make_story("s1", status=StoryStatus.SPRINT_BACKLOG)
        sprint = make_sprint([story])
        state = make_state(team_size=0, sprints=[sprint])
        executor = executor_for(state, [QUIET, QUIET])

        executor.execute_day(sprint, 0)

        assert story.status == StoryStatus.SPRINT_BACKLOG
        assert executor.max_active_stories() == 0
        assert len(sprint.burndown_data) == 1


class TestBurndown:
    """Tests for burndown sampling."""

    def test_sample(self, start_date):
        stories = [
            make_story("a", points=5, status=StoryStatus.DONE),
            make_story("b", points=3, status=StoryStatus.IN_PROGRESS),
            make_story("c", points=2, status=StoryStatus.SPRINT_BACKLOG),
        ]
        sprint = make_sprint(stories)
        state = make_state(sprints=[sprint])
        executor = executor_for(state, [])

        point = executor.record_burndown(sprint, executor.day_timestamp(sprint, 3))

        assert point.remaining_points == 5
        assert point.remaining_hours == 40
        assert point.date == start_date + timedelta(days=3)
        assert sprint.burndown_data == [point]


class TestImpediments:
    """Tests for the impediment roll."""

    @pytest.mark.parametrize(
        "roll,expected",
        [
            (0.49, ImpedimentSeverity.LOW),
            (0.5, ImpedimentSeverity.MEDIUM),
            (0.8, ImpedimentSeverity.HIGH),
            (0.95, ImpedimentSeverity.CRITICAL),
        ],
    )
    def test_severity_table(self, roll, expected):
        assert ScriptedRandom([roll]).pick_threshold(SEVERITY_TABLE) == expected

    def test_no_impediment(self, start_date):
        rng = ScriptedRandom([0.05])

        assert roll_impediment(rng, "impediment-0", start_date) is None

    def test_critical_on_first_day_cuts_velocity_by_30_percent(self):
        sprint = make_sprint()
        state = make_state(sprints=[sprint], average_velocity=20.0)
        # quiet event roll, no stories, then impediment: roll, description, severity
        executor = executor_for(state, [QUIET, 0.01, 0.0, 0.99])
        before = state.metrics.average_velocity

        executor.execute_day(sprint, 0)

        impediment = sprint.impediments[0]
        assert impediment.severity == ImpedimentSeverity.CRITICAL
        assert impediment.status == ImpedimentStatus.OPEN
        assert impediment.description == "Technical infrastructure issues"
        assert impediment.id == "impediment-0"
        assert impediment.created_at == sprint.start_date
        assert state.metrics.average_velocity == pytest.approx(before * 0.7)
        assert executor.rng.remaining == 0

    @pytest.mark.parametrize(
        "severity_roll,factor",
        [(0.0, 0.95), (0.6, 0.90), (0.9, 0.80)],
    )
    def test_penalties(self, severity_roll, factor):
        sprint = make_sprint()
        state = make_state(sprints=[sprint], average_velocity=10.0)
        executor = executor_for(state, [0.0, 0.5, severity_roll])

        executor.check_for_impediments(sprint, sprint.start_date)

        assert state.metrics.average_velocity == pytest.approx(10.0 * factor)
