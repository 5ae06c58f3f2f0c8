# boards.py
# One Ouija board per channel, with the commands players use on it.

import threading
import time
from collections import namedtuple

from colorama import Fore

from ouija import Ouija, OuijaStatus
from utils import (
    BOARD_TIMEOUT, NEW_QUESTION, BOARD_TAKEN, NO_BOARD, CAPITALS_ONLY,
    INCOMPREHENSIBLE, SPIRITS_HAVE_SPOKEN, log_with_time, vlog,
)

# Text to send back; ephemeral replies are shown only to the caller
Reply = namedtuple("Reply", ["content", "ephemeral"])


class Board:
    __slots__ = ("ouija", "question", "last_updated", "lock")

    def __init__(self, ouija, question, now):
        self.ouija = ouija
        self.question = question
        self.last_updated = now
        self.lock = threading.Lock()


class BoardRegistry:
    """Boards keyed by channel id.

    The registry lock only guards the mapping; each board's own lock
    serializes moves on that board, so different channels never wait on each
    other. Boards idle for longer than ``timeout`` seconds count as gone.
    """

    def __init__(self, dictionary, timeout=BOARD_TIMEOUT, clock=time.monotonic):
        self.dictionary = dictionary
        self.timeout = timeout
        self.clock = clock
        self._boards = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._boards)

    def _expired(self, board, now):
        return now - board.last_updated > self.timeout

    def get(self, channel_id):
        """Return the live board for ``channel_id``, evicting it if it went idle."""
        now = self.clock()
        with self._lock:
            board = self._boards.get(channel_id)
            if board is not None and self._expired(board, now):
                del self._boards[channel_id]
                vlog(f"Board in {channel_id} evicted after {now - board.last_updated:.0f}s idle")
                return None
            return board

    def evict_idle(self):
        """Drop every idle board; returns the evicted channel ids."""
        now = self.clock()
        with self._lock:
            stale = [cid for cid, b in self._boards.items() if self._expired(b, now)]
            for cid in stale:
                del self._boards[cid]
        for cid in stale:
            vlog(f"Board in {cid} evicted")
        return stale

    def _remove(self, channel_id, board):
        with self._lock:
            if self._boards.get(channel_id) is board:
                del self._boards[channel_id]

    # ---------- Commands ----------
    def ask(self, channel_id, question):
        now = self.clock()
        with self._lock:
            board = self._boards.get(channel_id)
            if board is not None and not self._expired(board, now):
                return Reply(BOARD_TAKEN, True)
            self._boards[channel_id] = Board(Ouija(self.dictionary), question, now)
        log_with_time(f"New board in {channel_id}: {question}")
        return Reply(NEW_QUESTION.format(question=question), False)

    def tell(self, channel_id, char):
        board = self.get(channel_id)
        if board is None:
            return Reply(NO_BOARD, True)
        with board.lock:
            if board.ouija.finalized:
                return Reply(NO_BOARD, True)
            board.last_updated = self.clock()
            if not (len(char) == 1 and char.isascii() and char.isupper()):
                return Reply(CAPITALS_ONLY, True)
            status = board.ouija.push_char(char)
        if status is OuijaStatus.ACCEPT:
            vlog(f"{channel_id}: {board.ouija.message}")
            return Reply(char, False)
        return Reply(INCOMPREHENSIBLE, True)

    def goodbye(self, channel_id):
        board = self.get(channel_id)
        if board is None:
            return Reply(NO_BOARD, True)
        with board.lock:
            if board.ouija.finalized:
                return Reply(NO_BOARD, True)
            status, words = board.ouija.finalize()
        if status is OuijaStatus.REJECT:
            return Reply(INCOMPREHENSIBLE, True)
        self._remove(channel_id, board)
        answer = " ".join(words)
        log_with_time(f"Board in {channel_id} closed: {answer}", color=Fore.GREEN)
        return Reply(SPIRITS_HAVE_SPOKEN.format(answer=answer), False)

    def autocomplete(self, channel_id, partial=""):
        """Characters to offer for the next letter, given what the user has typed."""
        board = self.get(channel_id)
        if board is None:
            return []
        with board.lock:
            if board.ouija.finalized:
                return []
            valid = board.ouija.legal_next_characters()
        if len(partial) == 0:
            return sorted(valid)
        if len(partial) == 1:
            return [partial] if partial in valid else []
        return []

    def status(self, channel_id):
        board = self.get(channel_id)
        if board is None:
            return None
        with board.lock:
            if board.ouija.finalized:
                return None
            return {
                "question": board.question,
                "message": board.ouija.message,
                "accepting": board.ouija.accepting,
                "legal": sorted(board.ouija.legal_next_characters()),
            }

    def readings(self, channel_id, limit=5):
        """Up to ``limit`` ways to read the message so far, shortest first."""
        if limit <= 0:
            return []
        board = self.get(channel_id)
        if board is None:
            return []
        with board.lock:
            if board.ouija.finalized:
                return []
            splits = board.ouija.iter_segmentations(allow_trailing=True)
        # the walk works on a snapshot of the message, so moves can go on meanwhile
        found = []
        for split in splits:
            found.append(split)
            if len(found) >= limit:
                break
        return sorted(found, key=len)
