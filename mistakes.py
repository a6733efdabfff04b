"""Persistence of the mistake set: a JSON array of question ids under one key."""
from __future__ import annotations

import logging
from typing import Iterable

from api.config import MISTAKES_KEY
from api.utils.json_utils import compact_dump, json_load
from storage import KeyValueStore

log = logging.getLogger(__name__)


def load_mistakes(store: KeyValueStore, key: str = MISTAKES_KEY) -> frozenset[str]:
    raw = store.get(key)
    if not raw:
        return frozenset()
    try:
        data = json_load(raw)
    except ValueError:
        log.warning("Stored mistake set under %r is not valid JSON; ignoring it", key)
        return frozenset()
    if not isinstance(data, list):
        log.warning("Stored mistake set under %r is not a list; ignoring it", key)
        return frozenset()
    return frozenset(str(item) for item in data if isinstance(item, (str, int)))


def save_mistakes(store: KeyValueStore, ids: Iterable[str], key: str = MISTAKES_KEY) -> None:
    store.set(key, compact_dump(sorted(ids)))


def clear_mistakes(store: KeyValueStore, key: str = MISTAKES_KEY) -> None:
    save_mistakes(store, (), key)
