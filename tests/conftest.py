from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from threshold_extension.settings import ENV_FIELDS, get_settings

_LOREM_WORDS: tuple[str, ...] = (
    "Lorem",
    "Ipsum",
    "is",
    "simply",
    "dummy",
    "text",
    "of",
    "the",
    "printing",
    "and",
    "typesetting",
    "industry.",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ENV_FIELDS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def lorem() -> list[str]:
    return list(_LOREM_WORDS)


@pytest.fixture
def make_destination() -> Callable[..., list[str]]:
    def _make_destination(*words: str) -> list[str]:
        return list(words) if words else list(_LOREM_WORDS)

    return _make_destination
