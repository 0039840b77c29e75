"""Pull tokenizer for JSON text.

The tokenizer reads its input incrementally (a ``str`` or any text stream
with ``read``), tracks line and column, checks the JSON structure while it
goes and hands out one token per ``next_token`` call. Object keys come out
as ``FIELD_NAME`` tokens; commas and colons are consumed internally.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, TextIO, Union

from record_engine.exceptions import JsonSyntaxError, UnexpectedEndOfInputError
from record_engine.schemas import DEFAULT_CODEC_CONFIG, CodecConfig

_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?\Z")
_NUMBER_CHARS = frozenset("+-.eE0123456789")
_WHITESPACE = frozenset(" \t\n\r")
_LITERALS = {"true": "TRUE", "false": "FALSE", "null": "NULL"}


class TokenKind(str, Enum):
    START_OBJECT = "start_object"
    END_OBJECT = "end_object"
    START_ARRAY = "start_array"
    END_ARRAY = "end_array"
    FIELD_NAME = "field_name"
    STRING = "string"
    NUMBER_INT = "number_int"
    NUMBER_FLOAT = "number_float"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"


@dataclass(frozen=True)
class Token:
    """A token and the 1-based position of its first character.

    ``text`` is the raw source text for numbers and the decoded text for
    strings and field names.
    """

    kind: TokenKind
    text: str
    value: Any
    line: int
    column: int

    def describe(self) -> str:
        return _TOKEN_DESCRIPTIONS[self.kind]


_TOKEN_DESCRIPTIONS = {
    TokenKind.START_OBJECT: "nested JSON Object",
    TokenKind.END_OBJECT: "end of JSON Object",
    TokenKind.START_ARRAY: "array",
    TokenKind.END_ARRAY: "end of array",
    TokenKind.FIELD_NAME: "field name",
    TokenKind.STRING: "String",
    TokenKind.NUMBER_INT: "number",
    TokenKind.NUMBER_FLOAT: "number",
    TokenKind.TRUE: "boolean",
    TokenKind.FALSE: "boolean",
    TokenKind.NULL: "null",
}


class _Expect(str, Enum):
    VALUE = "value"
    KEY_OR_END = "key_or_end"
    KEY = "key"
    ELEMENT_OR_END = "element_or_end"
    COMMA_OR_END = "comma_or_end"


class _Frame:
    __slots__ = ("closer", "expect")

    def __init__(self, closer: str, expect: _Expect):
        self.closer = closer
        self.expect = expect


class JsonTokenizer:
    """Incremental JSON tokenizer with line/column tracking."""

    def __init__(self, source: Union[str, TextIO], config: Optional[CodecConfig] = None):
        self.config = config or DEFAULT_CODEC_CONFIG
        if isinstance(source, str):
            self._buffer = source
            self._stream: Optional[TextIO] = None
        else:
            self._buffer = ""
            self._stream = source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._stack: List[_Frame] = []
        self._root_done = False
        self._closed = False

    @property
    def line(self) -> int:
        return self._line

    @property
    def column(self) -> int:
        return self._column

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def location(self) -> str:
        return f"line {self._line}, column {self._column}"

    def __iter__(self):
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def next_token(self) -> Optional[Token]:
        """Return the next token, or ``None`` once the root value is complete
        and the input is exhausted."""
        while True:
            self._skip_whitespace()
            char = self._peek()

            if not self._stack:
                if self._root_done:
                    if char == "":
                        self._closed = True
                        return None
                    raise self._syntax_error(f"Unexpected content after root value: {char!r}")
                if char == "":
                    self._closed = True
                    return None
                return self._read_value()

            frame = self._stack[-1]
            if char == "":
                raise UnexpectedEndOfInputError(
                    f"Unexpected end of input at {self.location()}", self._line, self._column
                )

            if frame.expect in (_Expect.KEY_OR_END, _Expect.KEY):
                if char == "}" and frame.expect == _Expect.KEY_OR_END:
                    return self._close_container(TokenKind.END_OBJECT)
                if char != '"':
                    raise self._syntax_error(f"Expected field name but found {char!r}")
                line, column = self._line, self._column
                name = self._read_string()
                self._skip_whitespace()
                separator = self._peek()
                if separator == "":
                    raise UnexpectedEndOfInputError(
                        f"Unexpected end of input at {self.location()}", self._line, self._column
                    )
                if separator != ":":
                    raise self._syntax_error(f"Expected ':' after field name but found {separator!r}")
                self._advance()
                frame.expect = _Expect.VALUE
                return Token(TokenKind.FIELD_NAME, name, name, line, column)

            if frame.expect == _Expect.COMMA_OR_END:
                if char == frame.closer:
                    kind = TokenKind.END_OBJECT if char == "}" else TokenKind.END_ARRAY
                    return self._close_container(kind)
                if char != ",":
                    raise self._syntax_error(f"Expected ',' or {frame.closer!r} but found {char!r}")
                self._advance()
                frame.expect = _Expect.KEY if frame.closer == "}" else _Expect.VALUE
                continue

            if frame.expect == _Expect.ELEMENT_OR_END and char == "]":
                return self._close_container(TokenKind.END_ARRAY)
            return self._read_value()

    def ensure_exhausted(self) -> None:
        """Raise ``JsonSyntaxError`` if anything but whitespace remains."""
        self._skip_whitespace()
        char = self._peek()
        if char != "":
            raise self._syntax_error(f"Unexpected content after root value: {char!r}")
        self._closed = True

    # Value readers

    def _read_value(self) -> Token:
        char = self._peek()
        line, column = self._line, self._column

        if char == "{":
            self._advance()
            self._push("}", _Expect.KEY_OR_END)
            return Token(TokenKind.START_OBJECT, "{", None, line, column)
        if char == "[":
            self._advance()
            self._push("]", _Expect.ELEMENT_OR_END)
            return Token(TokenKind.START_ARRAY, "[", None, line, column)
        if char == '"':
            text = self._read_string()
            self._value_done()
            return Token(TokenKind.STRING, text, text, line, column)
        if char in _NUMBER_CHARS:
            text = self._read_while(_NUMBER_CHARS)
            if not _NUMBER_RE.match(text):
                raise JsonSyntaxError(f"Invalid number {text!r} at line {line}, column {column}", line, column)
            self._value_done()
            if any(c in text for c in ".eE"):
                return Token(TokenKind.NUMBER_FLOAT, text, float(text), line, column)
            return Token(TokenKind.NUMBER_INT, text, int(text), line, column)
        if char.isalpha():
            text = self._read_while_alpha()
            kind_name = _LITERALS.get(text)
            if kind_name is None:
                raise JsonSyntaxError(f"Unrecognized token {text!r} at line {line}, column {column}", line, column)
            self._value_done()
            kind = TokenKind[kind_name]
            value = {TokenKind.TRUE: True, TokenKind.FALSE: False, TokenKind.NULL: None}[kind]
            return Token(kind, text, value, line, column)
        raise self._syntax_error(f"Unexpected character {char!r}")

    def _read_string(self) -> str:
        line, column = self._line, self._column
        self._advance()  # opening quote
        raw: List[str] = []
        escaped = False
        while True:
            char = self._peek()
            if char == "":
                raise UnexpectedEndOfInputError(
                    f"Unterminated string starting at line {line}, column {column}", line, column
                )
            self._advance()
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                break
            raw.append(char)
        literal = '"' + "".join(raw) + '"'
        try:
            return json.loads(literal)
        except json.JSONDecodeError as exc:
            raise JsonSyntaxError(
                f"Invalid string at line {line}, column {column}: {exc.msg}", line, column
            ) from exc

    def _read_while(self, allowed: frozenset) -> str:
        chars: List[str] = []
        while True:
            char = self._peek()
            if char == "" or char not in allowed:
                return "".join(chars)
            chars.append(char)
            self._advance()

    def _read_while_alpha(self) -> str:
        chars: List[str] = []
        while True:
            char = self._peek()
            if char == "" or not char.isalpha():
                return "".join(chars)
            chars.append(char)
            self._advance()

    # Structure bookkeeping

    def _push(self, closer: str, expect: _Expect) -> None:
        if len(self._stack) >= self.config.max_depth:
            raise self._syntax_error(f"Maximum nesting depth of {self.config.max_depth} exceeded")
        self._stack.append(_Frame(closer, expect))

    def _close_container(self, kind: TokenKind) -> Token:
        line, column = self._line, self._column
        char = self._peek()
        self._advance()
        self._stack.pop()
        self._value_done()
        return Token(kind, char, None, line, column)

    def _value_done(self) -> None:
        if self._stack:
            self._stack[-1].expect = _Expect.COMMA_OR_END
        else:
            self._root_done = True

    # Character input

    def _fill(self) -> bool:
        if self._stream is None:
            return False
        chunk = self._stream.read(self.config.chunk_size)
        if not chunk:
            self._stream = None
            return False
        self._buffer = self._buffer[self._pos:] + chunk
        self._pos = 0
        return True

    def _peek(self) -> str:
        if self._pos >= len(self._buffer) and not self._fill():
            return ""
        return self._buffer[self._pos]

    def _advance(self) -> None:
        char = self._buffer[self._pos]
        self._pos += 1
        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

    def _skip_whitespace(self) -> None:
        while self._peek() in _WHITESPACE:
            self._advance()

    def _syntax_error(self, message: str) -> JsonSyntaxError:
        return JsonSyntaxError(f"{message} at {self.location()}", self._line, self._column)
