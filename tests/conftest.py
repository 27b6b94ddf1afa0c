import pytest

from link import LinkModel
from options import RunParameters


class FakeScheduler:
    """Stands in for a Tk widget's after()/after_cancel()"""

    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self.delays = []
        self._next_id = 0

    def after(self, ms, func):
        self._next_id += 1
        after_id = f"after#{self._next_id}"
        self.pending[after_id] = func
        self.delays.append(ms)
        return after_id

    def after_cancel(self, after_id):
        self.cancelled.append(after_id)
        self.pending.pop(after_id, None)

    def fire(self):
        """Run every pending callback once"""
        callbacks = list(self.pending.items())
        self.pending.clear()
        for _, func in callbacks:
            func()

    def fire_all(self, limit=100000):
        fired = 0
        while self.pending and fired < limit:
            self.fire()
            fired += 1
        return fired


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def model():
    return LinkModel(link_width_px=510)


@pytest.fixture
def default_params():
    return RunParameters(length_m=1E5, rate_bps=1E6, size_bits=4E3)
