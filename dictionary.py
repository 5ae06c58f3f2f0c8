# dictionary.py
# Shared, read-only word list for every board, plus the loader that builds it.

import os
import time
from typing import Iterable, Iterator, List, Tuple

import requests

from utils import log_with_time, vlog


class Dictionary:
    """
    Immutable ordered word list with case-insensitive matching:
      - Dictionary.build(words) -> Dictionary
      - words -> Tuple[str, ...]
      - word_matches_prefix(word, prefix) -> bool
      - word_matches(word, text, start=0) -> bool
    Words are stored uppercased, in the order they were given. A single
    instance is built at startup and handed to every board; nothing mutates it.
    """

    __slots__ = ("_words", "_wordset")

    def __init__(self, words: Tuple[str, ...]):
        self._words = words
        self._wordset = frozenset(words)

    # ---------- Public API ----------
    @classmethod
    def build(cls, words: Iterable[str]) -> "Dictionary":
        """
        Build a dictionary from already-admitted words. Words are uppercased;
        no filtering happens here (see ``filter_lines``).
        """
        return cls(tuple(w.upper() for w in words))

    @property
    def words(self) -> Tuple[str, ...]:
        return self._words

    @staticmethod
    def word_matches_prefix(word: str, prefix: str) -> bool:
        """True if ``word`` begins with ``prefix``, ignoring ASCII case."""
        return word.upper().startswith(prefix.upper())

    @staticmethod
    def word_matches(word: str, text: str, start: int = 0) -> bool:
        """True if ``text`` continues with ``word`` at offset ``start``, ignoring ASCII case."""
        return text[start:start + len(word)].upper() == word.upper()

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word) -> bool:
        return isinstance(word, str) and word.upper() in self._wordset

    def __repr__(self) -> str:
        return f"Dictionary({len(self._words)} words)"


def is_admissible(line: str) -> bool:
    """A line becomes a word if it is all ASCII letters and longer than one letter, or is 'a'."""
    if not (line.isascii() and line.isalpha()):
        return False
    return len(line) > 1 or line.lower() == "a"


def filter_lines(lines: Iterable[str]) -> List[str]:
    """Keep the admissible lines, in order, with line endings stripped. Other whitespace disqualifies a line."""
    return [l for l in (raw.rstrip("\r\n") for raw in lines) if is_admissible(l)]


def _read_source(source: str) -> str:
    if source.startswith(("http://", "https://")):
        resp = requests.get(source, timeout=30)
        resp.raise_for_status()
        return resp.text
    if not os.path.isfile(source):
        raise FileNotFoundError(source)
    with open(source, "r", encoding="ascii", errors="replace") as f:
        return f.read()


def load_dictionary(source: str) -> Dictionary:
    """Load and filter a word list from a local path or an http(s) URL."""
    t0 = time.time()
    log_with_time(f"⟳ Loading dictionary from {source}…")
    text = _read_source(source)
    lines = text.splitlines()
    words = filter_lines(lines)
    vlog(f"Dictionary loaded and filtered ({len(words)} of {len(lines)} lines kept)", t0)
    log_with_time(f"✅ {len(words)} words")
    return Dictionary.build(words)
