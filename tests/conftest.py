import pytest

from catchip8 import Chip8Engine


class FakeClock:
    """Manually advanced stand-in for time.monotonic"""

    def __init__(self, start_ms: int = 100_000):
        self.ms = start_ms

    def __call__(self) -> float:
        return self.ms / 1000

    def advance_ms(self, ms: int):
        self.ms += ms


class FixedRandom:
    """rng stand-in that always returns the same byte"""

    def __init__(self, value: int):
        self.value = value

    def randint(self, a: int, b: int) -> int:
        assert (a, b) == (0, 255)
        return self.value


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_engine(clock):
    """Build an engine around a list of 16-bit instruction words"""
    def _make(*words, **kwargs):
        program = b''.join(w.to_bytes(2, 'big') for w in words)
        kwargs.setdefault('clock', clock)
        return Chip8Engine(program, **kwargs)
    return _make
