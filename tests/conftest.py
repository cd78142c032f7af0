import random

import pytest


class ScriptedRandom(random.Random):
    """Random whose die rolls come from a queue; falls back to seeded rolls once it runs dry."""

    def queue(self, *values: int) -> "ScriptedRandom":
        if not hasattr(self, "_script"):
            self._script: list[int] = []
        self._script.extend(values)
        return self

    @property
    def remaining(self) -> int:
        return len(getattr(self, "_script", []))

    def randint(self, a: int, b: int) -> int:
        script = getattr(self, "_script", [])
        if not script:
            return super().randint(a, b)
        value = script.pop(0)
        assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
        return value


@pytest.fixture
def scripted():
    def _make(*values: int, seed: int = 0) -> ScriptedRandom:
        return ScriptedRandom(seed).queue(*values)

    return _make
