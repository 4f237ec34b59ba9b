"""
import_engine.dedup - Identity keys and the lookup against stored podcasts.

Two podcasts are the same entry when their normalized titles and hosts
are equal.  This is an exact comparison of canonical forms, not a
similarity score: differently-worded near duplicates stay separate, and
unrelated podcasts never collide.
"""

from __future__ import annotations

import re
from typing import Iterable, Protocol, Sequence

KEY_SEPARATOR = "|||"

_PUNCTUATION = re.compile(r"[,.!?;:\"'()\[\]{}]")
_LEADING_ARTICLE = re.compile(r"^(?:the|a|an) ")


class IdentityStore(Protocol):
    def find_by_identity_keys(self, keys: Sequence[str]) -> list: ...


def normalize(text: str) -> str:
    """
    Canonical form of a title or host.

    lowercase → drop punctuation → collapse whitespace → drop leading
    articles.  Articles are removed until none is left so the function is
    idempotent ("The The Wine Hour" and "the wine hour" agree); a bare
    article with nothing after it is kept.
    """
    text = _PUNCTUATION.sub("", text.lower())
    text = " ".join(text.split())
    while True:
        stripped = _LEADING_ARTICLE.sub("", text, count=1)
        if stripped == text:
            return text
        text = stripped


def identity_key(title: str, host: str) -> str:
    return f"{normalize(title)}{KEY_SEPARATOR}{normalize(host)}"


def find_existing(store: IdentityStore, keys: Iterable[str]) -> dict[str, str]:
    """
    Map identity key → id of the stored podcast carrying it.

    When the store already holds duplicates of one key the oldest row
    returned by the store wins.
    """
    wanted = sorted(set(keys))
    if not wanted:
        return {}

    existing: dict[str, str] = {}
    for podcast in store.find_by_identity_keys(wanted):
        key = identity_key(podcast.title, podcast.host)
        existing.setdefault(key, podcast.id)
    return existing
