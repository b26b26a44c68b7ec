# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Line-oriented lexical scanner for MapServer mapfiles.

Mapfiles are scanned one physical line at a time. The only information that
crosses line boundaries is an open ``/* ... */`` block comment and, when
enabled, an unterminated quoted string. That carry-over is an explicit
:class:`LexerState` value: every call receives the state left by the previous
line and returns the state for the next one.
"""

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

# ###############
# Public Interface
# ###############


class TokenKind(enum.Enum):
    """All token kinds produced by the mapfile lexer."""

    WORD = "word"
    STRING = "string"


@dataclass(frozen=True)
class Token:
    """A lexical token with its position on the line.

    Attributes:
        kind: The kind of token.
        text: The word text, or the unescaped content of a quoted string.
        column: 1-based column of the first character (the opening quote for strings).
        quote: The quote character for STRING tokens, ``None`` for words.
        closed: False when a quoted string ran to the end of the line.
    """

    kind: TokenKind
    text: str
    column: int
    quote: str | None = None
    closed: bool = True

    @property
    def upper(self) -> str:
        """Return the token text upper-cased (mapfile keywords are case-insensitive)."""
        return self.text.upper()


@dataclass(frozen=True)
class UnclosedQuote:
    """Position of a quoted string that was not terminated on its line."""

    column: int
    quote: str


@dataclass(frozen=True)
class LexerState:
    """Multi-line carry-over between two consecutive line scans.

    Attributes:
        in_block_comment: The previous line ended inside ``/* ... */``.
        in_quote: The previous line ended inside a quoted string (only
            reachable when multi-line quotes are enabled).
        quote_char: The quote character that is still open.
    """

    in_block_comment: bool = False
    in_quote: bool = False
    quote_char: str = ""


@dataclass(frozen=True)
class LineScan:
    """Result of scanning a single physical line.

    Attributes:
        tokens: Word and string tokens in source order.
        unclosed_quotes: Quoted strings that reached the end of the line.
        state: The lexer state to hand to the next line.
    """

    tokens: list[Token] = field(default_factory=list)
    unclosed_quotes: list[UnclosedQuote] = field(default_factory=list)
    state: LexerState = LexerState()

    @property
    def words(self) -> list[Token]:
        """Return only the WORD tokens of the line."""
        return [tok for tok in self.tokens if tok.kind is TokenKind.WORD]

    @property
    def first(self) -> Token | None:
        """Return the first token of the line, or None for comment-only and blank lines."""
        return self.tokens[0] if self.tokens else None

    @property
    def first_word(self) -> str | None:
        """Return the upper-cased first token if it is a word, otherwise None."""
        first = self.first
        if first is None or first.kind is not TokenKind.WORD:
            return None
        return first.upper


def scan_line(line: str, state: LexerState | None = None, *, allow_multiline_quotes: bool = False) -> LineScan:
    """Scan one physical line of a mapfile.

    Comments (``#``, ``//`` and ``/* ... */``) are discarded. Numbers and
    punctuation are skipped; only words and quoted strings become tokens.

    Args:
        line: The line text without its terminating newline.
        state: Carry-over from the previous line; a fresh state when omitted.
        allow_multiline_quotes: Let an unterminated quote continue on the
            next line instead of abandoning the rest of the line.

    Returns:
        A :class:`LineScan` holding the tokens, any unterminated quotes and
        the state for the next line. Malformed input never raises.
    """
    return _LineScanner(line, state or LexerState(), allow_multiline_quotes).scan()


def scan_lines(lines: Iterable[str], *, allow_multiline_quotes: bool = False) -> Iterator[LineScan]:
    """Scan consecutive lines, threading the lexer state from one to the next."""
    state = LexerState()
    for line in lines:
        result = scan_line(line, state, allow_multiline_quotes=allow_multiline_quotes)
        state = result.state
        yield result


def split_lines(text: str) -> list[str]:
    """Split mapfile text into physical lines, accepting ``\\n``, ``\\r\\n`` and ``\\r``."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


# ################
# Implementation
# ################


def _is_word_start(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_word_char(ch: str) -> bool:
    return _is_word_start(ch) or ("0" <= ch <= "9")


class _LineScanner:
    """Internal per-line scanner state machine."""

    def __init__(self, line: str, state: LexerState, allow_multiline_quotes: bool) -> None:
        self._line = line
        self._pos = 0
        self._allow_multiline_quotes = allow_multiline_quotes
        self._in_block_comment = state.in_block_comment
        self._in_quote = state.in_quote
        self._quote_char = state.quote_char
        self._tokens: list[Token] = []
        self._unclosed: list[UnclosedQuote] = []

    def scan(self) -> LineScan:
        """Run the scanner over the whole line."""
        while self._pos < len(self._line):
            if self._in_block_comment:
                if not self._leave_block_comment():
                    break
                continue
            if self._in_quote:
                if not self._leave_carried_quote():
                    break
                continue

            ch = self._line[self._pos]
            nxt = self._line[self._pos + 1] if self._pos + 1 < len(self._line) else ""

            if ch == "#" or (ch == "/" and nxt == "/"):
                break
            if ch == "/" and nxt == "*":
                self._in_block_comment = True
                self._pos += 2
            elif ch.isspace():
                self._pos += 1
            elif ch in "\"'":
                if not self._scan_string(ch):
                    break
            elif _is_word_start(ch):
                self._scan_word()
            else:
                self._pos += 1

        return LineScan(
            tokens=self._tokens,
            unclosed_quotes=self._unclosed,
            state=LexerState(
                in_block_comment=self._in_block_comment,
                in_quote=self._in_quote,
                quote_char=self._quote_char,
            ),
        )

    # ------------------------------------------------------------------
    # Carry-over handling
    # ------------------------------------------------------------------

    def _leave_block_comment(self) -> bool:
        """Skip to just past ``*/``. Return False if the comment runs to end of line."""
        end = self._line.find("*/", self._pos)
        if end == -1:
            self._pos = len(self._line)
            return False
        self._in_block_comment = False
        self._pos = end + 2
        return True

    def _leave_carried_quote(self) -> bool:
        """Skip to just past the closing quote of a carried-over string."""
        escaped = False
        while self._pos < len(self._line):
            ch = self._line[self._pos]
            self._pos += 1
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == self._quote_char:
                self._in_quote = False
                self._quote_char = ""
                return True
        return False

    # ------------------------------------------------------------------
    # Token scanners
    # ------------------------------------------------------------------

    def _scan_string(self, quote: str) -> bool:
        """Scan a quoted string. Return False when scanning of the line must stop."""
        column = self._pos + 1
        self._pos += 1  # opening quote
        chars: list[str] = []
        escaped = False
        closed = False
        while self._pos < len(self._line):
            ch = self._line[self._pos]
            self._pos += 1
            if escaped:
                chars.append(ch)
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                closed = True
                break
            else:
                chars.append(ch)

        self._tokens.append(Token(TokenKind.STRING, "".join(chars), column, quote=quote, closed=closed))
        if closed:
            return True

        self._unclosed.append(UnclosedQuote(column=column, quote=quote))
        if self._allow_multiline_quotes:
            self._in_quote = True
            self._quote_char = quote
        return False

    def _scan_word(self) -> None:
        """Scan a ``[A-Za-z_][A-Za-z0-9_]*`` word."""
        start = self._pos
        self._pos += 1
        while self._pos < len(self._line) and _is_word_char(self._line[self._pos]):
            self._pos += 1
        self._tokens.append(Token(TokenKind.WORD, self._line[start : self._pos], start + 1))
