"""Commit message parsing: subjects, stable markers, reverts and references."""

import string
from enum import Enum
from typing import Dict, List, Optional

from gitfixes.models import ParsedCommit, Reference

FIXES_LABEL = "fixes:"
REVERT_PREFIX = "This reverts commit "
REVERT_LINE_LENGTH = len(REVERT_PREFIX) + 40

# Addresses that flag a fix for the stable trees
STABLE_MARKERS = ("stable@vger.kernel.org", "stable@kernel.org")

MIN_TOKEN_LENGTH = 8
MAX_TOKEN_LENGTH = 40

HEX_DIGITS = frozenset(string.hexdigits)
DELIMITERS = frozenset(" \t:")


class ScanState(Enum):
    """Where the token scanner is relative to a candidate reference."""

    READY = "ready"  # at line start or right after a delimiter
    WORD = "word"  # inside text that cannot start a token
    TOKEN = "token"  # collecting hex digits


class CharClass(Enum):
    HEX = "hex"
    DELIMITER = "delimiter"
    OTHER = "other"


class Action(Enum):
    NONE = "none"
    START = "start"
    APPEND = "append"
    EMIT = "emit"
    DISCARD = "discard"


TRANSITIONS = {
    (ScanState.READY, CharClass.HEX): (ScanState.TOKEN, Action.START),
    (ScanState.READY, CharClass.DELIMITER): (ScanState.READY, Action.NONE),
    (ScanState.READY, CharClass.OTHER): (ScanState.WORD, Action.NONE),
    (ScanState.WORD, CharClass.HEX): (ScanState.WORD, Action.NONE),
    (ScanState.WORD, CharClass.DELIMITER): (ScanState.READY, Action.NONE),
    (ScanState.WORD, CharClass.OTHER): (ScanState.WORD, Action.NONE),
    (ScanState.TOKEN, CharClass.HEX): (ScanState.TOKEN, Action.APPEND),
    (ScanState.TOKEN, CharClass.DELIMITER): (ScanState.READY, Action.EMIT),
    (ScanState.TOKEN, CharClass.OTHER): (ScanState.WORD, Action.DISCARD),
}


def classify(char: str) -> CharClass:
    if char in HEX_DIGITS:
        return CharClass.HEX
    if char in DELIMITERS:
        return CharClass.DELIMITER
    return CharClass.OTHER


def scan_tokens(line: str) -> List[str]:
    """Extract candidate reference tokens from one line.

    A token is a run of hex digits that starts at the beginning of the line
    or right after a blank or colon, and ends at the next blank, colon or
    the end of the line. Runs ended by any other character are dropped, as
    are tokens shorter than 8 or longer than 40 digits.
    """
    tokens = []
    state = ScanState.READY
    current: List[str] = []

    def emit() -> None:
        if MIN_TOKEN_LENGTH <= len(current) <= MAX_TOKEN_LENGTH:
            tokens.append("".join(current))

    for char in line:
        state, action = TRANSITIONS[(state, classify(char))]
        if action is Action.START:
            current = [char]
        elif action is Action.APPEND:
            current.append(char)
        elif action is Action.EMIT:
            emit()
            current = []
        elif action is Action.DISCARD:
            current = []

    if state is ScanState.TOKEN:
        emit()

    return tokens


def is_fix_declaration(line: str) -> bool:
    return line[: len(FIXES_LABEL)].lower() == FIXES_LABEL


def revert_target(line: str) -> Optional[str]:
    """Return the lowercase id named by an exact ``This reverts commit <sha>`` line.

    The line may end with the period git puts there; nothing else may follow.
    """
    if line.endswith("."):
        line = line[:-1]
    if len(line) != REVERT_LINE_LENGTH or not line.startswith(REVERT_PREFIX):
        return None

    target = line[len(REVERT_PREFIX):]
    if not all(c in HEX_DIGITS for c in target):
        return None
    return target.lower()


def has_stable_marker(line: str) -> bool:
    return any(marker in line for marker in STABLE_MARKERS)


class MessageParser:
    """Turns commit messages into ParsedCommit records.

    Revert declarations are collected in ``reverts`` (reverting commit ->
    reverted commit) as messages are parsed.
    """

    def __init__(self) -> None:
        self.reverts: Dict[str, str] = {}

    def parse(self, commit_id: str, message: str) -> ParsedCommit:
        """Parse a commit message.

        Args:
            commit_id: Full SHA of the commit the message belongs to
            message: Raw commit message

        Returns:
            ParsedCommit with subject, stable flag and references in message order
        """
        subject = ""
        stable = False
        references: List[Reference] = []

        for line in message.split("\n"):
            line = line.rstrip()
            if not line:
                continue

            if not subject:
                subject = line

            target = revert_target(line)
            if target is not None:
                self.reverts[commit_id] = target

            if has_stable_marker(line):
                stable = True

            explicit = is_fix_declaration(line)
            for token in scan_tokens(line):
                references.append(Reference(token=token, is_explicit_fix_tag=explicit))

        return ParsedCommit(id=commit_id, subject=subject, stable=stable, references=references)
