"""Strict XML tokenization.

This module converts markup text into a stream of tokens: start tags (with
their attributes already decoded), end tags, character data, CDATA sections,
comments, processing instructions and DOCTYPE declarations. Any violation of
well-formedness at the lexical level raises :class:`MalformedInputError`
carrying the line and column of the offending construct.
"""

import re
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, List, Optional, Tuple

from xml_node_tree.shared import (
    InputTooLargeError,
    MalformedInputError,
    ParserConfig,
    get_logger,
)

# Start of the non-ASCII range accepted in names
UNICODE_START_OFFSET = 0x80

PREDEFINED_ENTITIES: Dict[str, str] = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "apos": "'",
}

_ENTITY_PATTERN = re.compile(r"&(#[0-9]+|#x[0-9a-fA-F]+|[A-Za-z_][\w.-]*);")
_INVALID_CHAR_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")
_WHITESPACE = " \t\n\r"


class TokenType(Enum):
    """XML token types produced by the tokenizer."""

    START_TAG = auto()              # <name attr="value">
    EMPTY_TAG = auto()              # <name attr="value"/>
    END_TAG = auto()                # </name>
    TEXT = auto()                   # Character data between tags
    CDATA = auto()                  # <![CDATA[ ... ]]>
    COMMENT = auto()                # <!-- ... -->
    PROCESSING_INSTRUCTION = auto()  # <?target ... ?>
    DOCTYPE = auto()                # <!DOCTYPE ...>


@dataclass
class TokenPosition:
    """Position information for XML tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass
class Token:
    """A single XML token.

    ``value`` holds the element name for tag tokens, the decoded text for
    character data and CDATA, and the raw body for the remaining types.
    """

    type: TokenType
    value: str
    position: TokenPosition
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def is_character_data(self) -> bool:
        """Check if this token carries element text."""
        return self.type in (TokenType.TEXT, TokenType.CDATA)


def is_name_start_char(char: str) -> bool:
    """Check if character can start an XML name."""
    return (char.isalpha() or
            char == "_" or
            char == ":" or
            ord(char) >= UNICODE_START_OFFSET)


def is_name_char(char: str) -> bool:
    """Check if character can be part of an XML name."""
    return (is_name_start_char(char) or
            char.isdigit() or
            char in ".-")


def is_valid_xml_char(code: int) -> bool:
    """Check if a code point is allowed in an XML 1.0 document."""
    return (
        code in (0x9, 0xA, 0xD)
        or 0x20 <= code <= 0xD7FF
        or 0xE000 <= code <= 0xFFFD
        or 0x10000 <= code <= 0x10FFFF
    )


class XMLTokenizer:
    """Strict XML tokenizer.

    The tokenizer is restartable: every call to :meth:`iter_tokens` resets its
    position tracking, so one instance can process many documents in turn.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the XML tokenizer.

        Args:
            config: Parser configuration (input size limit, DOCTYPE policy)
            correlation_id: Optional correlation ID for call tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tokenizer")
        self._reset_state("")

    def _reset_state(self, text: str) -> None:
        self._text = text
        self._line = 1
        self._line_start = 0
        self._scanned = 0

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize a whole document into a list of tokens."""
        return list(self.iter_tokens(text))

    def iter_tokens(self, text: str) -> Iterator[Token]:
        """Lazily yield tokens from ``text``.

        Raises:
            InputTooLargeError: text exceeds ``config.max_input_size``
            MalformedInputError: text is not lexically well-formed
        """
        if self.config.max_input_size is not None and len(text) > self.config.max_input_size:
            raise InputTooLargeError(
                f"Input of {len(text)} characters exceeds limit of "
                f"{self.config.max_input_size}"
            )

        # XML end-of-line handling
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        self._reset_state(text)

        start_time = time.time()
        token_count = 0
        self.logger.debug("Starting tokenization", extra={"char_count": len(text)})

        i = 0
        n = len(text)
        while i < n:
            if text[i] == "<":
                token, i = self._read_markup(i)
            else:
                token, i = self._read_text(i)
            token_count += 1
            yield token

        self.logger.debug(
            "Tokenization completed",
            extra={
                "token_count": token_count,
                "processing_time": time.time() - start_time,
            }
        )

    # Position tracking

    def _position(self, offset: int) -> TokenPosition:
        """Return the line/column position of ``offset``.

        Offsets are normally requested in increasing order, so newlines are
        counted incrementally from the last request.
        """
        if offset < self._scanned:
            self._line = 1
            self._line_start = 0
            self._scanned = 0
        text = self._text
        newlines = text.count("\n", self._scanned, offset)
        if newlines:
            self._line += newlines
            self._line_start = text.rfind("\n", self._scanned, offset) + 1
        self._scanned = offset
        return TokenPosition(self._line, offset - self._line_start + 1, offset)

    def _error(self, message: str, offset: int) -> MalformedInputError:
        position = self._position(min(offset, len(self._text)))
        return MalformedInputError(
            message,
            line=position.line,
            column=position.column,
            offset=position.offset,
        )

    # Character data

    def _read_text(self, start: int) -> Tuple[Token, int]:
        text = self._text
        end = text.find("<", start)
        if end == -1:
            end = len(text)
        raw = text[start:end]
        if "]]>" in raw:
            raise self._error("Sequence ']]>' not allowed in character data",
                              start + raw.index("]]>"))
        self._check_chars(raw, start)
        value = self._decode_entities(raw, start)
        return Token(TokenType.TEXT, value, self._position(start)), end

    def _check_chars(self, raw: str, start: int) -> None:
        match = _INVALID_CHAR_PATTERN.search(raw)
        if match:
            raise self._error(
                f"Invalid character U+{ord(match.group()):04X}", start + match.start()
            )

    def _decode_entities(self, raw: str, start: int) -> str:
        """Replace entity and character references in ``raw``."""
        if "&" not in raw:
            return raw

        parts = []
        pos = 0
        while True:
            amp = raw.find("&", pos)
            if amp == -1:
                parts.append(raw[pos:])
                break
            parts.append(raw[pos:amp])
            match = _ENTITY_PATTERN.match(raw, amp)
            if not match:
                raise self._error("Malformed entity reference", start + amp)
            name = match.group(1)
            if name.startswith("#"):
                code = int(name[2:], 16) if name[1] == "x" else int(name[1:])
                if not is_valid_xml_char(code):
                    raise self._error(
                        f"Character reference &{name}; is not a valid XML character",
                        start + amp,
                    )
                parts.append(chr(code))
            elif name in PREDEFINED_ENTITIES:
                parts.append(PREDEFINED_ENTITIES[name])
            else:
                raise self._error(f"Unknown entity &{name};", start + amp)
            pos = match.end()
        return "".join(parts)

    # Markup

    def _read_markup(self, start: int) -> Tuple[Token, int]:
        text = self._text
        if text.startswith("<!--", start):
            return self._read_comment(start)
        if text.startswith("<![CDATA[", start):
            return self._read_cdata(start)
        if text.startswith("<!DOCTYPE", start):
            return self._read_doctype(start)
        if text.startswith("<?", start):
            return self._read_processing_instruction(start)
        if text.startswith("</", start):
            return self._read_end_tag(start)
        if text.startswith("<!", start):
            raise self._error("Unsupported markup declaration", start)
        return self._read_start_tag(start)

    def _read_comment(self, start: int) -> Tuple[Token, int]:
        end = self._text.find("-->", start + 4)
        if end == -1:
            raise self._error("Unterminated comment", start)
        body = self._text[start + 4:end]
        if "--" in body or body.endswith("-"):
            raise self._error("'--' not allowed inside comment", start)
        return Token(TokenType.COMMENT, body, self._position(start)), end + 3

    def _read_cdata(self, start: int) -> Tuple[Token, int]:
        body_start = start + len("<![CDATA[")
        end = self._text.find("]]>", body_start)
        if end == -1:
            raise self._error("Unterminated CDATA section", start)
        body = self._text[body_start:end]
        self._check_chars(body, body_start)
        return Token(TokenType.CDATA, body, self._position(start)), end + 3

    def _read_doctype(self, start: int) -> Tuple[Token, int]:
        if not self.config.skip_doctype:
            raise self._error("DOCTYPE declarations are not allowed", start)

        text = self._text
        depth = 0
        quote: Optional[str] = None
        for i in range(start + len("<!DOCTYPE"), len(text)):
            char = text[i]
            if quote:
                if char == quote:
                    quote = None
            elif char in "\"'":
                quote = char
            elif char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
            elif char == ">" and depth <= 0:
                body = text[start + len("<!DOCTYPE"):i].strip()
                return Token(TokenType.DOCTYPE, body, self._position(start)), i + 1
        raise self._error("Unterminated DOCTYPE declaration", start)

    def _read_processing_instruction(self, start: int) -> Tuple[Token, int]:
        end = self._text.find("?>", start + 2)
        if end == -1:
            raise self._error("Unterminated processing instruction", start)
        target, pos = self._read_name(start + 2)
        if pos < end and self._text[pos] not in _WHITESPACE:
            raise self._error("Invalid processing instruction target", start)
        body = self._text[start + 2:end]
        return Token(TokenType.PROCESSING_INSTRUCTION, body, self._position(start)), end + 2

    def _read_end_tag(self, start: int) -> Tuple[Token, int]:
        name, pos = self._read_name(start + 2)
        pos = self._skip_whitespace(pos)
        if pos >= len(self._text):
            raise self._error(f"Unexpected end of input in end tag </{name}>", start)
        if self._text[pos] != ">":
            raise self._error(f"Expected '>' to close end tag </{name}>", pos)
        return Token(TokenType.END_TAG, name, self._position(start)), pos + 1

    def _read_start_tag(self, start: int) -> Tuple[Token, int]:
        text = self._text
        name, pos = self._read_name(start + 1)
        attributes: Dict[str, str] = {}

        while True:
            next_pos = self._skip_whitespace(pos)
            if next_pos >= len(text):
                raise self._error(f"Unexpected end of input in start tag <{name}>", start)
            char = text[next_pos]
            if char == ">":
                token = Token(TokenType.START_TAG, name, self._position(start), attributes)
                return token, next_pos + 1
            if text.startswith("/>", next_pos):
                token = Token(TokenType.EMPTY_TAG, name, self._position(start), attributes)
                return token, next_pos + 2
            if next_pos == pos:
                raise self._error(
                    f"Expected whitespace before attribute in <{name}>", next_pos
                )
            attr_name, attr_value, pos = self._read_attribute(next_pos)
            # Duplicate attribute names keep the last value seen
            attributes[attr_name] = attr_value

    def _read_attribute(self, start: int) -> Tuple[str, str, int]:
        text = self._text
        attr_name, pos = self._read_name(start)
        pos = self._skip_whitespace(pos)
        if pos >= len(text) or text[pos] != "=":
            raise self._error(f"Attribute '{attr_name}' has no value", pos)
        pos = self._skip_whitespace(pos + 1)
        if pos >= len(text) or text[pos] not in "\"'":
            raise self._error(f"Attribute '{attr_name}' value must be quoted", pos)
        quote = text[pos]
        end = text.find(quote, pos + 1)
        if end == -1:
            raise self._error(f"Unterminated value for attribute '{attr_name}'", pos)
        raw = text[pos + 1:end]
        if "<" in raw:
            raise self._error(
                f"'<' not allowed in value of attribute '{attr_name}'",
                pos + 1 + raw.index("<"),
            )
        self._check_chars(raw, pos + 1)
        return attr_name, self._decode_entities(raw, pos + 1), end + 1

    def _read_name(self, start: int) -> Tuple[str, int]:
        text = self._text
        if start >= len(text):
            raise self._error("Unexpected end of input, expected a name", start)
        if not is_name_start_char(text[start]):
            raise self._error(f"Invalid name start character: {text[start]!r}", start)
        pos = start + 1
        while pos < len(text) and is_name_char(text[pos]):
            pos += 1
        return text[start:pos], pos

    def _skip_whitespace(self, pos: int) -> int:
        text = self._text
        while pos < len(text) and text[pos] in _WHITESPACE:
            pos += 1
        return pos
