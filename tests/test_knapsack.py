import pytest

from knapsack import PartitionError, checked_split, naive_knapsack_solve


def weight_one(item):
    return 1


@pytest.mark.parametrize("length", [1, 7, 42, 500])
def test_naive_solver_takes_half(length):
    items = [42] * (2 * length)

    result = naive_knapsack_solve(items, length, weight_one, weight_one)

    assert result == [42] * length


def test_naive_solver_skips_items_that_do_not_fit():
    items = [("a", 0.6), ("b", 0.3), ("c", 0.1)]

    result = naive_knapsack_solve(items, 0.5, lambda x: x[1], lambda x: x[1])

    assert result == [("b", 0.3), ("c", 0.1)]


def test_naive_solver_empty_input():
    assert naive_knapsack_solve([], 10, weight_one, weight_one) == []


def test_checked_split_returns_subset_and_complement():
    items = [("a", 0.25), ("b", 0.5), ("c", 0.25)]

    left, right = checked_split(naive_knapsack_solve, items, 0.5, lambda x: x[1], lambda x: x[1])

    assert left == [("a", 0.25), ("c", 0.25)]
    assert right == [("b", 0.5)]


def test_checked_split_handles_duplicate_items():
    left, right = checked_split(naive_knapsack_solve, [42] * 4, 2, weight_one, weight_one)

    assert left == [42, 42]
    assert right == [42, 42]


def test_checked_split_rejects_empty_subset():
    with pytest.raises(PartitionError):
        checked_split(lambda *args: [], ["a", "b"], 1, weight_one, weight_one)


def test_checked_split_rejects_full_subset():
    with pytest.raises(PartitionError):
        checked_split(lambda items, *args: list(items), ["a", "b"], 1, weight_one, weight_one)


def test_checked_split_rejects_foreign_items():
    with pytest.raises(PartitionError):
        checked_split(lambda *args: ["z"], ["a", "b"], 1, weight_one, weight_one)


def test_partition_error_is_a_value_error():
    assert issubclass(PartitionError, ValueError)
