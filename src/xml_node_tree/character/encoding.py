"""Encoding detection and decoding for byte input.

Detection runs in sequence: byte order mark, XML declaration, then the
configured fallback encoding. Unlike text input, bytes that cannot be decoded
with the detected encoding are a hard failure.
"""

import codecs
import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional

from xml_node_tree.shared import MalformedInputError, ParserConfig, get_logger

# Only the head of the document is searched for a declaration
DECLARATION_SEARCH_LENGTH = 1024


class DetectionMethod(Enum):
    """Enumeration of encoding detection methods."""
    BOM = "bom"
    XML_DECLARATION = "xml_declaration"
    FALLBACK = "fallback"


@dataclass
class EncodingResult:
    """Result of encoding detection.

    Attributes:
        encoding: Detected encoding name (canonical codec name)
        method: Detection method used
        bom_length: Number of leading BOM bytes to skip before decoding
    """
    encoding: str
    method: DetectionMethod
    bom_length: int = 0


class BOMDetector:
    """Byte Order Mark (BOM) detection for the Unicode encodings."""

    BOM_PATTERNS: ClassVar[Dict[bytes, str]] = {
        codecs.BOM_UTF8: "utf-8",
        codecs.BOM_UTF16_LE: "utf-16-le",
        codecs.BOM_UTF16_BE: "utf-16-be",
        codecs.BOM_UTF32_LE: "utf-32-le",
        codecs.BOM_UTF32_BE: "utf-32-be",
    }

    def detect(self, data: bytes) -> Optional[EncodingResult]:
        """Detect encoding based on BOM, or return None."""
        if not data:
            return None

        # UTF-32 LE BOM starts with the UTF-16 LE one, so test longer marks first
        for bom_bytes, encoding in sorted(
            self.BOM_PATTERNS.items(), key=lambda x: len(x[0]), reverse=True
        ):
            if data.startswith(bom_bytes):
                return EncodingResult(
                    encoding=encoding,
                    method=DetectionMethod.BOM,
                    bom_length=len(bom_bytes),
                )

        return None


class XMLDeclarationParser:
    """Parser for XML encoding declarations."""

    XML_DECLARATION_PATTERN = re.compile(
        rb'^\s*<\?xml\s[^>]*?encoding\s*=\s*["\']([A-Za-z][A-Za-z0-9._-]*)["\']',
    )

    def parse_declaration(self, data: bytes) -> Optional[EncodingResult]:
        """Parse encoding from an XML declaration at the start of ``data``.

        Raises:
            MalformedInputError: the declared encoding is not a known codec
        """
        match = self.XML_DECLARATION_PATTERN.match(data[:DECLARATION_SEARCH_LENGTH])
        if not match:
            return None

        declared = match.group(1).decode("ascii").lower()
        try:
            encoding = codecs.lookup(declared).name
        except LookupError:
            raise MalformedInputError(
                f"Unknown encoding in XML declaration: {declared}"
            ) from None

        return EncodingResult(encoding=encoding, method=DetectionMethod.XML_DECLARATION)


class EncodingDetector:
    """Main encoding detection class."""

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()
        self.bom_detector = BOMDetector()
        self.declaration_parser = XMLDeclarationParser()

    def detect(self, data: bytes) -> EncodingResult:
        """Detect the encoding of ``data``."""
        if self.config.detect_encoding:
            result = self.bom_detector.detect(data)
            if result is None:
                result = self.declaration_parser.parse_declaration(data)
            if result is not None:
                return result

        return EncodingResult(
            encoding=self.config.fallback_encoding,
            method=DetectionMethod.FALLBACK,
        )


def decode_bytes(
    data: bytes,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> str:
    """Decode raw markup bytes to text.

    Args:
        data: Raw document bytes
        config: Parser configuration controlling detection and fallback
        correlation_id: Optional correlation ID for call tracking

    Returns:
        Decoded text with any byte order mark removed

    Raises:
        MalformedInputError: bytes are not valid in the detected encoding
    """
    logger = get_logger(__name__, correlation_id, "encoding")
    result = EncodingDetector(config).detect(data)

    logger.debug(
        "Encoding detected",
        extra={
            "encoding": result.encoding,
            "method": result.method.value,
            "byte_count": len(data),
        }
    )

    try:
        return data[result.bom_length:].decode(result.encoding)
    except UnicodeDecodeError as e:
        raise MalformedInputError(
            f"Input is not valid {result.encoding}: {e.reason}",
            offset=e.start + result.bom_length,
        ) from e
