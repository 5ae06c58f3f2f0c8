# ouija.py
# Incremental word segmentation for a message spelled one letter at a time.

from enum import Enum
from typing import Iterator, List, Optional, Set, Tuple

from dictionary import Dictionary
from utils import is_ascii_letter


class OuijaStatus(Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    DONE = "done"


class Ouija:
    """
    One message in progress against a shared Dictionary.

    ``candidates`` holds the open word hypotheses as ``(word, offset)`` pairs:
    ``word[offset:]`` is the part of a dictionary word not yet spelled. The
    pairs reference the dictionary's own strings, so no word data is copied.
    ``accepting`` is True when the message so far splits exactly into
    complete dictionary words.
    """

    __slots__ = ("dictionary", "message", "candidates", "accepting", "finalized")

    def __init__(self, dictionary: Dictionary):
        self.dictionary = dictionary
        self.message = ""
        self.candidates: List[Tuple[str, int]] = [(w, 0) for w in dictionary.words]
        self.accepting = False
        self.finalized = False

    def push_char(self, char: str) -> OuijaStatus:
        """Accept ``char`` if some open hypothesis continues with it."""
        self._check_live()
        if not is_ascii_letter(char):
            return OuijaStatus.REJECT
        ch = char.upper()
        advanced = [(w, i + 1) for w, i in self.candidates if w[i] == ch]
        if not advanced:
            return OuijaStatus.REJECT

        accepting = False
        remaining = []
        for w, i in advanced:
            if i == len(w):
                accepting = True
            else:
                remaining.append((w, i))
        if accepting:
            remaining.extend((w, 0) for w in self.dictionary.words)

        # duplicate pairs are the same hypothesis reached along different splits
        self.candidates = list(dict.fromkeys(remaining))
        self.accepting = accepting
        self.message += char
        return OuijaStatus.ACCEPT

    def legal_next_characters(self) -> Set[str]:
        self._check_live()
        return {w[i] for w, i in self.candidates}

    def finalize(self) -> Tuple[OuijaStatus, Optional[List[str]]]:
        """
        Split the message into the fewest dictionary words.

        Returns ``(DONE, words)`` and retires the board, or ``(REJECT, None)``
        when the message does not end on a word boundary. Among equally short
        splits the one met first when trying words in dictionary order wins.
        """
        self._check_live()
        if not self.accepting:
            return OuijaStatus.REJECT, None
        words = self._shortest_split()
        if words is None:
            return OuijaStatus.REJECT, None
        self.finalized = True
        return OuijaStatus.DONE, words

    def iter_segmentations(self, allow_trailing: bool = False) -> Iterator[List[str]]:
        """
        Lazily yield every split of the message, depth first in dictionary order.

        With ``allow_trailing`` a tail that only starts a word still counts,
        ending the split with that word. Exponential in the worst case. The
        message is captured when this is called, so the walk does not see
        letters pushed afterwards.
        """
        self._check_live()
        return self._walk(self.dictionary.words, self.message.upper(), allow_trailing)

    # ---------- Helpers ----------
    @staticmethod
    def _walk(words: Tuple[str, ...], text: str, allow_trailing: bool) -> Iterator[List[str]]:
        n = len(text)
        # frame = [position, next dictionary index to try, whether anything was yielded below]
        stack = [[0, 0, False]]
        path: List[str] = []
        while stack:
            frame = stack[-1]
            pos, idx, found = frame
            if pos == n:
                yield list(path)
                found = True
            else:
                while idx < len(words) and not Dictionary.word_matches(words[idx], text, pos):
                    idx += 1
                if idx < len(words):
                    frame[1] = idx + 1
                    path.append(words[idx])
                    stack.append([pos + len(words[idx]), 0, False])
                    continue
                if allow_trailing and not found:
                    tail = text[pos:]
                    for w in words:
                        if Dictionary.word_matches_prefix(w, tail):
                            found = True
                            yield path + [w]
            stack.pop()
            if stack:
                path.pop()
                if found:
                    stack[-1][2] = True

    def _shortest_split(self) -> Optional[List[str]]:
        words = self.dictionary.words
        text = self.message.upper()
        n = len(text)
        # best[i] = (word count, dictionary index of first word) for text[i:]
        best: List[Optional[Tuple[int, int]]] = [None] * (n + 1)
        best[n] = (0, -1)
        for pos in range(n - 1, -1, -1):
            for idx, w in enumerate(words):
                end = pos + len(w)
                if end > n or best[end] is None or not Dictionary.word_matches(w, text, pos):
                    continue
                count = best[end][0] + 1
                if best[pos] is None or count < best[pos][0]:
                    best[pos] = (count, idx)
        if best[0] is None:
            return None
        split = []
        pos = 0
        while pos < n:
            w = words[best[pos][1]]
            split.append(w)
            pos += len(w)
        return split

    def _check_live(self):
        if self.finalized:
            raise RuntimeError("this Ouija board has already been finalized")

    def __repr__(self) -> str:
        return (f"Ouija(message={self.message!r}, accepting={self.accepting}, "
                f"candidates={len(self.candidates)})")
