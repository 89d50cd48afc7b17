from datetime import datetime, timedelta, timezone

import pytest

from doubleminer.core.types import Color, Outcome

LETTERS = {'R': Color.RED, 'B': Color.BLACK, 'W': Color.WHITE}
NUMBERS = {Color.RED: 3, Color.BLACK: 10, Color.WHITE: 0}
T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_log(text: str, step: int = 60) -> list[Outcome]:
    out = []
    for i, ch in enumerate(text.replace(' ', '')):
        c = LETTERS[ch]
        out.append(Outcome(id=i + 1, color=c, number=NUMBERS[c], timestamp=T0 + timedelta(seconds=i * step)))
    return out


def colors(text: str) -> list[Color]:
    return [LETTERS[ch] for ch in text.replace(' ', '')]


@pytest.fixture
def log():
    return make_log
