import asyncio
from typing import Dict, List, Tuple

import pytest

from wtype.errors import FetchFailure, SubmitFailure
from wtype.models import Word


class FakeProvider:
    """Serves fixed pools and counts how often it was asked."""

    def __init__(self, pools: Dict[Tuple[str, int], List[Word]]):
        self.pools = pools
        self.fetch_count = 0

    async def fetch(self, language: str, level: int) -> List[Word]:
        self.fetch_count += 1
        if (language, level) not in self.pools:
            raise FetchFailure(language, level, "not served")
        return self.pools[(language, level)]


class GatedProvider(FakeProvider):
    """Holds every fetch until its gate is opened by the test."""

    def __init__(self, pools):
        super().__init__(pools)
        self.gates: Dict[Tuple[str, int], asyncio.Event] = {}

    async def fetch(self, language: str, level: int) -> List[Word]:
        gate = asyncio.Event()
        self.gates[(language, level)] = gate
        await gate.wait()
        return await super().fetch(language, level)


class FakeSink:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.results = []

    async def submit(self, result):
        if self.fail:
            raise SubmitFailure("sink is down")
        self.results.append(result)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def neko():
    return Word(id=1, display="cat", pron="neko")


@pytest.fixture
def clock():
    return FakeClock()
