# services/ingestion/tolerant_parser.py
"""
Tolerant Deserializer.

Turns pasted text into a plain value tree (dict / list / str / int / float /
bool / None). Strict JSON is tried first; if that fails the text is re-read
with a relaxed literal grammar that additionally accepts:

  - unquoted object keys (identifiers or numbers) and single-quoted keys
  - single- or double-quoted strings, including raw control characters
  - trailing commas in arrays and objects
  - // line and /* block */ comments

The relaxed reader is a small tokenizer + recursive-descent parser over
literals only. There is no expression grammar at all: identifiers other than
true / false / null are rejected in value position, so input such as
`process.exit()` or `(() => 1)()` can only ever fail to parse.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class TolerantParseError(ValueError):
    """Raised when text cannot be read under either grammar."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)


# ---- Tokens ----
LBRACE = "{"
RBRACE = "}"
LBRACKET = "["
RBRACKET = "]"
COLON = ":"
COMMA = ","
STRING = "STRING"
NUMBER = "NUMBER"
IDENT = "IDENT"
EOF = "EOF"

_PUNCTUATION = {LBRACE, RBRACE, LBRACKET, RBRACKET, COLON, COMMA}

_LITERALS = {"true": True, "false": False, "null": None}

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_IDENT_RE = re.compile(r"(?:[^\W\d]|\$)[\w$]*")

_SIMPLE_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "0": "\0",
}

Token = Tuple[str, Any, int]


class _TolerantParser:

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self._peeked: Optional[Token] = None

    # ---- Tokenizer ----

    def _skip_ignorable(self) -> None:
        text = self.text
        length = len(text)
        while self.pos < length:
            ch = text[self.pos]
            if ch.isspace() or ch == "\ufeff":
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = length if end == -1 else end + 1
            elif text.startswith("/*", self.pos):
                end = text.find("*/", self.pos + 2)
                if end == -1:
                    raise TolerantParseError("Unterminated comment", self.pos)
                self.pos = end + 2
            else:
                break

    def _read_string(self, quote: str) -> str:
        start = self.pos
        text = self.text
        self.pos += 1
        chunks: List[str] = []
        while True:
            if self.pos >= len(text):
                raise TolerantParseError("Unterminated string", start)
            ch = text[self.pos]
            if ch == quote:
                self.pos += 1
                return "".join(chunks)
            if ch != "\\":
                chunks.append(ch)
                self.pos += 1
                continue

            # Escape sequence
            self.pos += 1
            if self.pos >= len(text):
                raise TolerantParseError("Unterminated string", start)
            esc = text[self.pos]
            if esc in _SIMPLE_ESCAPES:
                chunks.append(_SIMPLE_ESCAPES[esc])
                self.pos += 1
            elif esc == "u":
                chunks.append(self._read_unicode_escape())
            elif esc == "x":
                chunks.append(chr(self._read_hex(self.pos + 1, 2)))
                self.pos += 3
            elif esc == "\r" and text.startswith("\r\n", self.pos):
                self.pos += 2  # line continuation
            elif esc in "\n\r\u2028\u2029":
                self.pos += 1  # line continuation
            else:
                chunks.append(esc)
                self.pos += 1

    def _read_hex(self, start: int, width: int) -> int:
        digits = self.text[start:start + width]
        if len(digits) != width or not all(c in "0123456789abcdefABCDEF" for c in digits):
            raise TolerantParseError("Invalid escape sequence", start - 2)
        return int(digits, 16)

    def _read_unicode_escape(self) -> str:
        # self.pos sits on the "u"
        code = self._read_hex(self.pos + 1, 4)
        self.pos += 5
        if 0xD800 <= code <= 0xDBFF and self.text.startswith("\\u", self.pos):
            low = self._read_hex(self.pos + 2, 4)
            if 0xDC00 <= low <= 0xDFFF:
                self.pos += 6
                code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
        return chr(code)

    def _read_token(self) -> Token:
        self._skip_ignorable()
        start = self.pos
        if start >= len(self.text):
            return (EOF, None, start)

        ch = self.text[start]
        if ch in _PUNCTUATION:
            self.pos += 1
            return (ch, ch, start)
        if ch in "\"'":
            return (STRING, self._read_string(ch), start)

        match = _NUMBER_RE.match(self.text, start)
        if match:
            self.pos = match.end()
            raw = match.group(0)
            try:
                if any(c in raw for c in ".eE"):
                    value: Any = float(raw)
                else:
                    value = int(raw)
            except (ValueError, OverflowError) as e:
                # e.g. integers past the interpreter's digit limit
                raise TolerantParseError(f"Unreadable number: {e}", start) from e
            return (NUMBER, value, start)

        match = _IDENT_RE.match(self.text, start)
        if match:
            self.pos = match.end()
            return (IDENT, match.group(0), start)

        raise TolerantParseError(f"Unexpected character {ch!r}", start)

    def _peek(self) -> Token:
        if self._peeked is None:
            self._peeked = self._read_token()
        return self._peeked

    def _next(self) -> Token:
        token = self._peek()
        self._peeked = None
        return token

    def _expect(self, kind: str) -> Token:
        token = self._next()
        if token[0] != kind:
            raise TolerantParseError(f"Expected {kind!r}, found {token[0]!r}", token[2])
        return token

    # ---- Grammar ----

    def parse(self) -> Any:
        value = self._parse_value()
        kind, _, position = self._next()
        if kind != EOF:
            raise TolerantParseError("Unexpected trailing content", position)
        return value

    def _parse_value(self) -> Any:
        kind, value, position = self._next()
        if kind == LBRACE:
            return self._parse_object()
        if kind == LBRACKET:
            return self._parse_array()
        if kind in (STRING, NUMBER):
            return value
        if kind == IDENT and value in _LITERALS:
            return _LITERALS[value]
        if kind == IDENT:
            raise TolerantParseError(f"Bare identifier {value!r} is not a literal", position)
        raise TolerantParseError(f"Unexpected {kind!r}", position)

    def _parse_key(self) -> str:
        kind, value, position = self._next()
        if kind in (STRING, IDENT):
            return value
        if kind == NUMBER:
            if isinstance(value, float) and value.is_integer():
                return str(int(value))
            return str(value)
        raise TolerantParseError(f"Expected object key, found {kind!r}", position)

    def _parse_object(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        while True:
            if self._peek()[0] == RBRACE:
                self._next()
                return result
            key = self._parse_key()
            self._expect(COLON)
            result[key] = self._parse_value()

            kind, _, position = self._next()
            if kind == RBRACE:
                return result
            if kind != COMMA:
                raise TolerantParseError("Expected ',' or '}' in object", position)

    def _parse_array(self) -> List[Any]:
        result: List[Any] = []
        while True:
            if self._peek()[0] == RBRACKET:
                self._next()
                return result
            result.append(self._parse_value())

            kind, _, position = self._next()
            if kind == RBRACKET:
                return result
            if kind != COMMA:
                raise TolerantParseError("Expected ',' or ']' in array", position)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard constant {name}")


def loads_strict(text: str) -> Any:
    """Plain JSON. NaN / Infinity are refused."""
    if not isinstance(text, str):
        raise TolerantParseError(f"Expected text, got {type(text).__name__}")
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise TolerantParseError(f"Strict parse failed: {e}") from e


def loads_tolerant(text: str) -> Any:
    if not isinstance(text, str):
        raise TolerantParseError(f"Expected text, got {type(text).__name__}")
    try:
        return _TolerantParser(text).parse()
    except RecursionError as e:
        raise TolerantParseError("Input nested too deeply") from e
    except TolerantParseError:
        raise
    except (ValueError, OverflowError) as e:
        raise TolerantParseError(f"Tolerant parse failed: {e}") from e


def loads(text: str, fallback_log_level: int = logging.WARNING) -> Any:
    """
    Strict first, tolerant second.
    Raises TolerantParseError when neither grammar accepts the text.
    """
    try:
        return loads_strict(text)
    except TolerantParseError as strict_error:
        logger.log(fallback_log_level, f"Strict parse failed, attempting tolerant parse... ({strict_error})")

    return loads_tolerant(text)
