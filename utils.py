# --- utils.py ---

import time
import threading
from colorama import Fore, Style, init

init()

# Seconds a board may sit idle before it is evicted
BOARD_TIMEOUT = 60 * 10

# Environment variable naming the dictionary file or URL
DICT_ENV = 'ASKOUIJA_DICT'

# Replies sent back to the channel
NEW_QUESTION = "New question for the spirits!\n{question}"
BOARD_TAKEN = "Channels can only fit one Ouija board at a time."
NO_BOARD = "There isn't a board through which you can speak."
CAPITALS_ONLY = "The mortals can only receive capital letters."
INCOMPREHENSIBLE = "The mortals won't be able to comprehend this."
SPIRITS_HAVE_SPOKEN = "The spirits have spoken!\n> {answer}"

VERBOSE = False
start_time = None

# Lock used for synchronized printing across threads
PRINT_LOCK = threading.Lock()

def log_with_time(msg, color=Fore.LIGHTBLUE_EX):
    """Print ``msg`` with a timestamp."""
    global start_time
    if start_time is None:
        start_time = time.time()
    elapsed = time.time() - start_time
    mins = int(elapsed // 60)
    secs = elapsed % 60
    timestamp = Style.DIM + f"[{mins:02}:{secs:06.3f}]" + Style.RESET_ALL
    with PRINT_LOCK:
        print(f"{timestamp} {color}{msg}{Style.RESET_ALL}", flush=True)

def vlog(msg, t0=None):
    if VERBOSE:
        if t0 is not None:
            elapsed = time.time() - t0
            log_with_time(f"{msg} (took {elapsed:.3f}s)")
        else:
            log_with_time(msg)

def is_ascii_letter(ch):
    return len(ch) == 1 and ch.isascii() and ch.isalpha()
