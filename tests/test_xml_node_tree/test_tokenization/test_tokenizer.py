"""Tests for the strict XML tokenizer."""

import pytest

from xml_node_tree.shared import InputTooLargeError, MalformedInputError, ParserConfig
from xml_node_tree.tokenization import (
    Token,
    TokenPosition,
    TokenType,
    XMLTokenizer,
    is_name_char,
    is_name_start_char,
    is_valid_xml_char,
)


@pytest.fixture
def tokenizer() -> XMLTokenizer:
    return XMLTokenizer()


class TestTokenPosition:
    """Test position validation."""

    def test_valid_position(self) -> None:
        """Test a valid position is accepted."""
        position = TokenPosition(1, 1, 0)

        assert (position.line, position.column, position.offset) == (1, 1, 0)

    @pytest.mark.parametrize("line,column,offset", [(0, 1, 0), (1, 0, 0), (1, 1, -1)])
    def test_invalid_position(self, line: int, column: int, offset: int) -> None:
        """Test out-of-range positions are rejected."""
        with pytest.raises(ValueError):
            TokenPosition(line, column, offset)

    def test_character_data_tokens(self) -> None:
        """Test which token types carry element text."""
        position = TokenPosition(1, 1, 0)

        assert Token(TokenType.TEXT, "x", position).is_character_data
        assert Token(TokenType.CDATA, "x", position).is_character_data
        assert not Token(TokenType.COMMENT, "x", position).is_character_data


class TestCharacterClasses:
    """Test name and character predicates."""

    def test_name_characters(self) -> None:
        """Test name start and name characters."""
        assert is_name_start_char("a")
        assert is_name_start_char("_")
        assert is_name_start_char(":")
        assert is_name_start_char("é")
        assert not is_name_start_char("1")
        assert not is_name_start_char("-")
        assert is_name_char("1")
        assert is_name_char("-")
        assert is_name_char(".")
        assert not is_name_char(" ")

    def test_valid_xml_characters(self) -> None:
        """Test the XML 1.0 character ranges."""
        assert is_valid_xml_char(0x9)
        assert is_valid_xml_char(ord("a"))
        assert is_valid_xml_char(0x1F600)
        assert not is_valid_xml_char(0x0)
        assert not is_valid_xml_char(0x1B)
        assert not is_valid_xml_char(0xFFFE)
        assert not is_valid_xml_char(0xD800)


class TestTokenize:
    """Test token streams for well-formed input."""

    def test_element_with_text(self, tokenizer: XMLTokenizer) -> None:
        """Test start tag, text and end tag tokens."""
        tokens = tokenizer.tokenize("<a>hi</a>")

        assert [t.type for t in tokens] == [
            TokenType.START_TAG, TokenType.TEXT, TokenType.END_TAG,
        ]
        assert [t.value for t in tokens] == ["a", "hi", "a"]

    def test_attributes(self, tokenizer: XMLTokenizer) -> None:
        """Test attributes with both quote styles and spacing around '='."""
        token = tokenizer.tokenize("""<a x="1" y = '2' z="it's"/>""")[0]

        assert token.type == TokenType.EMPTY_TAG
        assert token.attributes == {"x": "1", "y": "2", "z": "it's"}

    def test_duplicate_attribute_keeps_last(self, tokenizer: XMLTokenizer) -> None:
        """Test a repeated attribute name keeps the last value."""
        token = tokenizer.tokenize('<a x="1" x="2"/>')[0]

        assert token.attributes == {"x": "2"}

    def test_markup_tokens(self, tokenizer: XMLTokenizer) -> None:
        """Test comment, CDATA, processing instruction and DOCTYPE tokens."""
        tokens = tokenizer.tokenize(
            '<?xml version="1.0"?><!DOCTYPE a><a><!-- note --><![CDATA[x<y]]></a>'
        )

        assert [t.type for t in tokens] == [
            TokenType.PROCESSING_INSTRUCTION,
            TokenType.DOCTYPE,
            TokenType.START_TAG,
            TokenType.COMMENT,
            TokenType.CDATA,
            TokenType.END_TAG,
        ]
        assert tokens[0].value == 'xml version="1.0"'
        assert tokens[1].value == "a"
        assert tokens[3].value == " note "
        assert tokens[4].value == "x<y"

    def test_whitespace_in_end_tag(self, tokenizer: XMLTokenizer) -> None:
        """Test whitespace before '>' in an end tag."""
        tokens = tokenizer.tokenize("<a></a  >")

        assert tokens[-1].type == TokenType.END_TAG
        assert tokens[-1].value == "a"

    def test_entity_decoding(self, tokenizer: XMLTokenizer) -> None:
        """Test predefined entities and character references are decoded."""
        tokens = tokenizer.tokenize("<a>&lt;&gt;&amp;&quot;&apos;&#169;&#x263A;</a>")

        assert tokens[1].value == "<>&\"'©☺"

    def test_line_endings_are_normalized(self, tokenizer: XMLTokenizer) -> None:
        """Test CRLF and CR become LF."""
        tokens = tokenizer.tokenize("<a>x\r\ny\rz</a>")

        assert tokens[1].value == "x\ny\nz"

    def test_positions(self, tokenizer: XMLTokenizer) -> None:
        """Test line, column and offset of each token."""
        tokens = tokenizer.tokenize("<a>\n  <b/>\n</a>")

        start_b = tokens[2]
        assert start_b.value == "b"
        assert (start_b.position.line, start_b.position.column) == (2, 3)
        assert start_b.position.offset == 6
        end_a = tokens[-1]
        assert (end_a.position.line, end_a.position.column) == (3, 1)

    def test_iter_tokens_is_lazy(self, tokenizer: XMLTokenizer) -> None:
        """Test tokens before an error are produced before it is raised."""
        tokens = tokenizer.iter_tokens("<a>ok</a><!bad>")

        assert next(tokens).type == TokenType.START_TAG
        assert next(tokens).value == "ok"
        assert next(tokens).type == TokenType.END_TAG
        with pytest.raises(MalformedInputError):
            next(tokens)

    def test_tokenizer_is_restartable(self, tokenizer: XMLTokenizer) -> None:
        """Test positions restart for every document."""
        tokenizer.tokenize("<a>\n\n</a>")
        tokens = tokenizer.tokenize("<b/>")

        assert tokens[0].position.line == 1


class TestTokenizeErrors:
    """Test lexical errors."""

    @pytest.mark.parametrize("text,message", [
        ("<a>&nbsp;</a>", "Unknown entity"),
        ("<a>&#0;</a>", "not a valid XML character"),
        ("<a>&#xZZ;</a>", "Malformed entity reference"),
        ("<a x='1'y='2'/>", "Expected whitespace before attribute"),
        ("<a x/>", "has no value"),
        ("<a x=1/>", "must be quoted"),
        ("<a x='<'/>", "'<' not allowed"),
        ("<a x='1", "Unterminated value"),
        ("<a", "Unexpected end of input in start tag"),
        ("</a", "Unexpected end of input in end tag"),
        ("</a b>", "Expected '>'"),
        ("<!-- open", "Unterminated comment"),
        ("<!-- a--->", "'--' not allowed"),
        ("<![CDATA[x", "Unterminated CDATA"),
        ("<?pi", "Unterminated processing instruction"),
        ("<?pi!?>", "Invalid processing instruction target"),
        ("<!DOCTYPE a [", "Unterminated DOCTYPE"),
        ("<!ENTITY x>", "Unsupported markup declaration"),
        ("< a/>", "Invalid name start character"),
        ("<a>]]></a>", "']]>' not allowed"),
        ("<a>\x0b</a>", r"Invalid character U\+000B"),
    ])
    def test_malformed_tokens(self, tokenizer: XMLTokenizer, text: str, message: str) -> None:
        """Test each lexical error raises with a descriptive message."""
        with pytest.raises(MalformedInputError, match=message):
            tokenizer.tokenize(text)

    def test_error_position(self, tokenizer: XMLTokenizer) -> None:
        """Test the error points at the offending character."""
        with pytest.raises(MalformedInputError) as exc_info:
            tokenizer.tokenize("<a>\nbad & text</a>")

        assert exc_info.value.line == 2
        assert exc_info.value.column == 5
        assert exc_info.value.offset == 8

    def test_doctype_rejected_when_configured(self) -> None:
        """Test DOCTYPE is rejected when skipping is disabled."""
        tokenizer = XMLTokenizer(ParserConfig(skip_doctype=False))

        with pytest.raises(MalformedInputError, match="DOCTYPE declarations are not allowed"):
            tokenizer.tokenize("<!DOCTYPE a><a/>")

    def test_input_size_limit(self) -> None:
        """Test input larger than the limit is rejected before tokenizing."""
        tokenizer = XMLTokenizer(ParserConfig(max_input_size=8))

        assert len(tokenizer.tokenize("<a></a>")) == 2
        with pytest.raises(InputTooLargeError, match="exceeds limit of 8"):
            tokenizer.tokenize("<a>long text</a>")
