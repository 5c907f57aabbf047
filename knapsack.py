from typing import Callable, List, Sequence, Tuple

# A solver is any callable with the signature
#   solve(items, capacity, weight_of, value_of) -> list of items
# returning a subset whose total weight approximates capacity without exceeding it.


class PartitionError(ValueError):
    """Raised when a solver returns an empty, full or foreign subset for a splittable item set."""


def naive_knapsack_solve(items, capacity, weight_of, value_of): # items: sequence, capacity: number, weight_of/value_of: item -> number
    # First-fit greedy: take every item that still fits, in input order. value_of is unused.
    weight = 0
    taken = []
    for item in items:
        weight_delta = weight_of(item)
        if weight + weight_delta <= capacity:
            weight += weight_delta
            taken.append(item)
    return taken


def checked_split(solve: Callable, items: Sequence, capacity: float,
                  weight_of: Callable, value_of: Callable) -> Tuple[List, List]:
    """
    Runs solve and returns (subset, complement); the complement keeps input order
    Raises PartitionError if the solver broke its contract on a >= 2 item set
    """
    items = list(items)
    subset = list(solve(items, capacity, weight_of, value_of))

    remaining = list(items)
    for item in subset:
        if item not in remaining:
            raise PartitionError(f"solver returned item {item!r} not present in the input")
        remaining.remove(item)

    if len(items) > 1 and (not subset or not remaining):
        raise PartitionError(
            f"solver must return a non-empty proper subset, got {len(subset)} of {len(items)} items"
        )

    return subset, remaining
