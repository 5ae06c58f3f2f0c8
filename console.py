import argparse
import os
import sys
import time

import requests
from colorama import Fore, Style

import utils
from utils import BOARD_TIMEOUT, DICT_ENV, PRINT_LOCK, log_with_time
from dictionary import load_dictionary
from boards import BoardRegistry, Reply

HELP = "Commands: /askouija <question>, /tellouija <letter>, /goodbye, /hint [letter], /readings [n], /quit"


def note(content):
    return Reply(content, True)


def print_reply(reply):
    """Public replies in green; ephemeral ones dimmed, as only the caller would see them."""
    color = Style.DIM if reply.ephemeral else Fore.GREEN
    with PRINT_LOCK:
        print(f"{color}{reply.content}{Style.RESET_ALL}", flush=True)


def handle_line(registry, channel_id, line):
    """Run one console line against ``registry``. Returns False when the loop should stop."""
    line = line.strip()
    if not line:
        return True
    if not line.startswith("/"):
        print_reply(note(HELP))
        return True
    parts = line[1:].split(maxsplit=1)
    command = parts[0].lower()
    arg = parts[1] if len(parts) > 1 else ""

    if command == "quit":
        return False

    registry.evict_idle()
    utils.vlog(f"Executing command {command} in {channel_id}...")
    if command == "askouija":
        if not arg:
            print_reply(note("Ask the spirits a question: /askouija <question>"))
            return True
        print_reply(registry.ask(channel_id, arg))
    elif command == "tellouija":
        print_reply(registry.tell(channel_id, arg))
    elif command == "goodbye":
        print_reply(registry.goodbye(channel_id))
    elif command == "hint":
        choices = registry.autocomplete(channel_id, arg)
        print_reply(note(" ".join(choices) if choices else "(no letters)"))
    elif command == "readings":
        try:
            limit = int(arg) if arg else 5
        except ValueError:
            limit = 0
        if limit < 1:
            print_reply(note("Usage: /readings [n]"))
            return True
        found = registry.readings(channel_id, limit=limit)
        lines = [" ".join(split) for split in found if split]
        print_reply(note("\n".join(lines) if lines else "(no readings)"))
    else:
        print_reply(note(HELP))
        return True
    utils.vlog(f"Executed command {command} in {channel_id}!")
    return True


def run_console(argv=None, stdin=None):
    parser = argparse.ArgumentParser(description="AskOuija console board")
    parser.add_argument(
        "--dict",
        type=str,
        default=os.environ.get(DICT_ENV),
        help=f"Path or http(s) URL of the word list (default: ${DICT_ENV})",
    )
    parser.add_argument(
        "--timeout", type=float, default=BOARD_TIMEOUT, help=f"Seconds before an idle board is evicted (default: {BOARD_TIMEOUT})"
    )
    parser.add_argument("--channel", type=str, default="console", help="Channel id the console plays in (default: console)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    args = parser.parse_args(argv)

    utils.start_time = time.time()
    utils.VERBOSE = args.verbose

    if not args.dict:
        parser.error(f"--dict is required when ${DICT_ENV} is not set")

    try:
        dictionary = load_dictionary(args.dict)
    except FileNotFoundError:
        log_with_time(f"Could not find dictionary: {args.dict}", color=Fore.RED)
        return 1
    except requests.RequestException as e:
        log_with_time(f"Error downloading dictionary: {e}", color=Fore.RED)
        return 1
    except OSError as e:
        log_with_time(f"Error reading dictionary: {e}", color=Fore.RED)
        return 1
    if len(dictionary) == 0:
        log_with_time("Dictionary has no usable words", color=Fore.RED)
        return 1

    registry = BoardRegistry(dictionary, timeout=args.timeout)
    print_reply(note(HELP))
    for line in stdin if stdin is not None else sys.stdin:
        if not handle_line(registry, args.channel, line):
            break
    return 0
