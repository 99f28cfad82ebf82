"""
Text recovery straight from a page's content stream.
Used when the library's own text extraction is missing or garbled.
"""

import re
from typing import Optional

from loguru import logger

from .encoding import EncodingNormalizer

# Closes a "show text array" operator; treated as an opaque chunk delimiter
SHOW_TEXT_ARRAY_END = b']TJ'

HEX_STRING_PATTERN = re.compile(rb'<([0-9A-Fa-f\s]+)>')
STRUCTURAL_PUNCTUATION = re.compile(rb'[/\\()\[\]{}]')


def _decode_hex_run(match) -> bytes:
    digits = re.sub(rb'\s+', b'', match.group(1))
    if len(digits) % 2:
        # PDF rule: a missing final digit is taken as 0
        digits += b'0'
    return bytes.fromhex(digits.decode('ascii'))


class RawContentTextExtractor:
    """Derive text from raw content stream bytes."""

    def __init__(self, normalizer: Optional[EncodingNormalizer] = None):
        self.normalizer = normalizer or EncodingNormalizer()

    def extract_raw(self, page) -> str:
        """
        Extract text from the page's raw content stream.

        Args:
            page: PdfPage (anything with a raw_content() method)

        Returns:
            Recovered text, or '' when the page has no content stream
        """
        return self.extract_from_stream(page.raw_content())

    def extract_from_stream(self, stream: Optional[bytes]) -> str:
        if not stream:
            return ''

        chunks = []
        for chunk in bytes(stream).split(SHOW_TEXT_ARRAY_END):
            chunk = HEX_STRING_PATTERN.sub(_decode_hex_run, chunk)
            chunk = STRUCTURAL_PUNCTUATION.sub(b' ', chunk)
            chunks.append(chunk)

        text = self.normalizer.normalize(b''.join(chunks))
        logger.debug(f"Recovered {len(text)} characters from {len(stream)} bytes of content stream")
        return text
