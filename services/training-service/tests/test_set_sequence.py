from types import SimpleNamespace

from training_service.set_sequence import next_set_values, remove_and_renumber


def _set(number, lower=6, upper=10, rir=1, weight=50.0):
    return SimpleNamespace(
        number=number, rep_range_lower_bound=lower, rep_range_upper_bound=upper, rir=rir, weight=weight
    )


def test_first_set_uses_defaults():
    assert next_set_values([]) == {
        "number": 1,
        "rep_range_lower_bound": 5,
        "rep_range_upper_bound": 8,
        "rir": 0,
        "weight": None,
    }


def test_new_set_copies_last_prescription():
    values = next_set_values([_set(1), _set(2, lower=8, upper=12, rir=2, weight=70.0)])
    assert values == {
        "number": 3,
        "rep_range_lower_bound": 8,
        "rep_range_upper_bound": 12,
        "rir": 2,
        "weight": 70.0,
    }


def test_remove_renumbers_following_sets():
    sets = [_set(1), _set(2), _set(3), _set(4)]
    former_third = sets[2]

    remove_and_renumber(sets, sets[1])

    assert [s.number for s in sets] == [1, 2, 3]
    assert former_third.number == 2
