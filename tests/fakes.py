import itertools


class FakeClock:
    """Deterministic nanosecond clock: each reading advances by `step`."""

    def __init__(self, start=1_000, step=10):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


def sequential_ids(prefix="todo"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"
