import pytest

from painkiller.core.models import (
    HabitStatus,
    UserHabit,
    ValidationError,
    apply_status_toggle,
    toggle_status,
)


def test_toggle_same_status_clears():
    assert toggle_status(HabitStatus.SUCCESS, HabitStatus.SUCCESS) == HabitStatus.NONE


def test_toggle_different_status_replaces():
    assert toggle_status(HabitStatus.SUCCESS, HabitStatus.FAIL) == HabitStatus.FAIL
    assert toggle_status(HabitStatus.NONE, HabitStatus.PARTIAL) == HabitStatus.PARTIAL


def test_apply_toggle_twice_returns_day_to_none():
    habit = UserHabit.create("Quit Smoking")
    once = apply_status_toggle(habit, "2024-03-15", HabitStatus.SUCCESS)
    twice = apply_status_toggle(once, "2024-03-15", HabitStatus.SUCCESS)

    assert once.status_on("2024-03-15") == HabitStatus.SUCCESS
    assert twice.status_on("2024-03-15") == HabitStatus.NONE
    assert "2024-03-15" not in twice.logs


def test_apply_toggle_does_not_touch_original_snapshot():
    habit = UserHabit.create("Quit Smoking")
    updated = apply_status_toggle(habit, "2024-03-15", HabitStatus.FAIL)

    assert habit.logs == {}
    assert updated.logs == {"2024-03-15": HabitStatus.FAIL}
    assert updated.id == habit.id


def test_apply_toggle_rejects_invalid_date():
    habit = UserHabit.create("Quit Smoking")
    with pytest.raises(ValidationError):
        apply_status_toggle(habit, "2024-02-30", HabitStatus.SUCCESS)
    with pytest.raises(ValidationError):
        apply_status_toggle(habit, "15/03/2024", HabitStatus.SUCCESS)


def test_status_coerce_accepts_codes_and_names():
    assert HabitStatus.coerce(2) == HabitStatus.PARTIAL
    assert HabitStatus.coerce("fail") == HabitStatus.FAIL
    assert HabitStatus.coerce(HabitStatus.SUCCESS) == HabitStatus.SUCCESS
    with pytest.raises(ValidationError):
        HabitStatus.coerce(7)
    with pytest.raises(ValidationError):
        HabitStatus.coerce(True)


def test_status_labels():
    assert HabitStatus.NONE.label == "No record"
    assert HabitStatus.PARTIAL.label == "Partial Success"
    assert HabitStatus.PARTIAL.counts_toward_streak
    assert not HabitStatus.FAIL.counts_toward_streak


def test_note_is_independent_of_status():
    habit = UserHabit.create("Gratitude Journal").with_note("2024-03-14", "")
    assert habit.note_on("2024-03-14") == ""
    assert habit.status_on("2024-03-14") == HabitStatus.NONE


def test_dict_round_trip():
    habit = apply_status_toggle(UserHabit.create("Fasting"), "2024-03-10", HabitStatus.PARTIAL)
    habit = habit.with_note("2024-03-11", "skipped breakfast")

    data = habit.to_dict()
    assert data["logs"] == {"2024-03-10": 2}
    assert UserHabit.from_dict(data) == habit


def test_from_dict_drops_none_codes_and_missing_notes():
    habit = UserHabit.from_dict({
        "id": "abc",
        "name": "Fasting",
        "logs": {"2024-03-10": 0, "2024-03-11": 1},
        "createdAt": "2024-01-01T00:00:00+00:00",
    })
    assert habit.logs == {"2024-03-11": HabitStatus.SUCCESS}
    assert habit.notes == {}


@pytest.mark.parametrize("record", [
    {"name": "x", "createdAt": "2024-01-01"},
    {"id": "a", "name": "x", "createdAt": "2024-01-01", "logs": {"not-a-date": 1}},
    {"id": "a", "name": "x", "createdAt": "2024-01-01", "logs": {"2024-01-01": 9}},
    {"id": "a", "name": "   ", "createdAt": "2024-01-01"},
    ["not", "a", "dict"],
])
def test_from_dict_rejects_malformed_records(record):
    with pytest.raises(ValidationError):
        UserHabit.from_dict(record)
