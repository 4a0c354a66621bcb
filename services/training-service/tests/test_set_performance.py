from types import SimpleNamespace

from training_service.set_performance import SetPerformance, classify_set, set_volume, summarize_session


def _set(number=1, weight=100.0, reps=8, completed=True):
    return SimpleNamespace(number=number, weight=weight, reps_completed=reps, completed=completed)


def _exercise(exercise_id, *sets):
    return SimpleNamespace(exercise_id=exercise_id, sets=list(sets))


def test_no_previous_set_is_no_data():
    assert classify_set(None, _set()) is SetPerformance.NO_DATA


def test_incomplete_sets_are_no_data():
    assert classify_set(_set(completed=False), _set()) is SetPerformance.NO_DATA
    assert classify_set(_set(), _set(completed=False)) is SetPerformance.NO_DATA


def test_volume_comparison():
    previous = _set(weight=100, reps=8)
    assert classify_set(previous, _set(weight=100, reps=9)) is SetPerformance.INCREASED
    assert classify_set(previous, _set(weight=90, reps=8)) is SetPerformance.DECREASED
    assert classify_set(previous, _set(weight=80, reps=10)) is SetPerformance.SAME


def test_missing_weight_counts_as_zero():
    assert set_volume(_set(weight=None, reps=10)) == 0
    assert classify_set(_set(weight=None, reps=10), _set(weight=5, reps=1)) is SetPerformance.INCREASED


def test_classification_is_pure():
    previous, current = _set(weight=50, reps=5), _set(weight=55, reps=5)
    assert classify_set(previous, current) is classify_set(previous, current)
    assert current.weight == 55 and previous.weight == 50


def test_summary_matches_exercises_by_identity():
    previous = [_exercise(1, _set(1, 100, 8)), _exercise(2, _set(1, 20, 10))]
    # Exercise order changed; matching still follows exercise identity
    current = [_exercise(2, _set(1, 20, 12), _set(2, 20, 10)), _exercise(1, _set(1, 100, 8))]

    summary = summarize_session(current, previous)
    assert summary.sets == 3
    assert summary.total_volume == 240 + 200 + 800
    assert summary.progressions == 1


def test_summary_without_previous_session():
    summary = summarize_session([_exercise(1, _set(1, 10, 10))])
    assert summary.sets == 1
    assert summary.progressions == 0
