"""Tests for encoding detection and byte decoding."""

import codecs

import pytest

from xml_node_tree.character import (
    BOMDetector,
    DetectionMethod,
    EncodingDetector,
    XMLDeclarationParser,
    decode_bytes,
)
from xml_node_tree.shared import MalformedInputError, ParserConfig


class TestBOMDetector:
    """Test byte order mark detection."""

    @pytest.mark.parametrize("bom,encoding", [
        (codecs.BOM_UTF8, "utf-8"),
        (codecs.BOM_UTF16_LE, "utf-16-le"),
        (codecs.BOM_UTF16_BE, "utf-16-be"),
        (codecs.BOM_UTF32_LE, "utf-32-le"),
        (codecs.BOM_UTF32_BE, "utf-32-be"),
    ])
    def test_detects_bom(self, bom: bytes, encoding: str) -> None:
        """Test each supported BOM maps to its encoding and length."""
        result = BOMDetector().detect(bom + b"<")

        assert result is not None
        assert result.encoding == encoding
        assert result.method == DetectionMethod.BOM
        assert result.bom_length == len(bom)

    def test_no_bom(self) -> None:
        """Test plain data and empty data have no BOM."""
        detector = BOMDetector()

        assert detector.detect(b"<a/>") is None
        assert detector.detect(b"") is None


class TestXMLDeclarationParser:
    """Test encoding declarations."""

    def test_declared_encoding_is_canonical(self) -> None:
        """Test the declared name is normalized to the codec name."""
        result = XMLDeclarationParser().parse_declaration(
            b'<?xml version="1.0" encoding="ISO-8859-1"?><a/>'
        )

        assert result is not None
        assert result.encoding == codecs.lookup("latin-1").name
        assert result.method == DetectionMethod.XML_DECLARATION

    def test_single_quoted_declaration(self) -> None:
        """Test single quotes around the encoding name."""
        result = XMLDeclarationParser().parse_declaration(
            b"<?xml version='1.0' encoding='utf-8'?><a/>"
        )

        assert result.encoding == "utf-8"

    def test_declaration_without_encoding(self) -> None:
        """Test a declaration without encoding yields no result."""
        assert XMLDeclarationParser().parse_declaration(b'<?xml version="1.0"?><a/>') is None

    def test_declaration_must_lead_document(self) -> None:
        """Test an encoding attribute later in the document is ignored."""
        data = b'<a><?xml version="1.0" encoding="latin-1"?></a>'

        assert XMLDeclarationParser().parse_declaration(data) is None

    def test_unknown_declared_encoding(self) -> None:
        """Test an unknown declared encoding is malformed input."""
        with pytest.raises(MalformedInputError, match="Unknown encoding"):
            XMLDeclarationParser().parse_declaration(
                b'<?xml version="1.0" encoding="x-unknown-codec"?><a/>'
            )


class TestEncodingDetector:
    """Test the detection sequence."""

    def test_bom_takes_precedence(self) -> None:
        """Test a BOM wins over a conflicting declaration."""
        data = codecs.BOM_UTF8 + b'<?xml version="1.0" encoding="latin-1"?><a/>'

        result = EncodingDetector().detect(data)

        assert result.encoding == "utf-8"
        assert result.method == DetectionMethod.BOM

    def test_fallback_encoding(self) -> None:
        """Test undeclared input uses the configured fallback."""
        result = EncodingDetector(ParserConfig(fallback_encoding="latin-1")).detect(b"<a/>")

        assert result.encoding == "latin-1"
        assert result.method == DetectionMethod.FALLBACK

    def test_detection_can_be_disabled(self) -> None:
        """Test disabled detection always uses the fallback."""
        config = ParserConfig(detect_encoding=False)

        result = EncodingDetector(config).detect(codecs.BOM_UTF16_LE + b"<\x00")

        assert result.method == DetectionMethod.FALLBACK
        assert result.bom_length == 0


class TestDecodeBytes:
    """Test decoding raw documents."""

    def test_utf8_bom_is_stripped(self) -> None:
        """Test the BOM does not appear in the decoded text."""
        data = codecs.BOM_UTF8 + "<a>café</a>".encode("utf-8")

        assert decode_bytes(data) == "<a>café</a>"

    def test_utf16_document(self) -> None:
        """Test a UTF-16 document with BOM."""
        data = codecs.BOM_UTF16_LE + "<a>é</a>".encode("utf-16-le")

        assert decode_bytes(data) == "<a>é</a>"

    def test_declared_latin1_document(self) -> None:
        """Test decoding with the declared encoding."""
        data = b'<?xml version="1.0" encoding="ISO-8859-1"?><a>\xe9</a>'

        assert decode_bytes(data).endswith("<a>é</a>")

    def test_invalid_bytes_raise(self) -> None:
        """Test undecodable bytes are malformed input with an offset."""
        with pytest.raises(MalformedInputError) as exc_info:
            decode_bytes(b"<a>\xff</a>")

        assert exc_info.value.offset == 3
        assert "utf-8" in str(exc_info.value)
