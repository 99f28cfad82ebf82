"""
Encoding recovery for text pulled out of PDFs.
Tries a fixed chain of source encodings and always returns usable text.
"""

import re
from typing import Optional, Union

from loguru import logger

# Order matters: strict attempts first, ASCII with dropped bytes last
FALLBACK_ENCODINGS = ('utf-8', 'cp1252', 'iso-8859-1')

# Surrogates that surrogateescape cannot map back to a single byte (U+DC80-U+DCFF can)
UNESCAPABLE_SURROGATES = re.compile('[\ud800-\udc7f\udd00-\udfff]')


class EncodingNormalizer:
    """Turn raw bytes (or suspicious str) into valid text. Never raises."""

    def __init__(self, encodings=FALLBACK_ENCODINGS):
        self.encodings = tuple(encodings)

    def normalize(self, raw: Optional[Union[bytes, bytearray, str]]) -> str:
        """
        Decode raw text through the fallback chain.

        Args:
            raw: Bytes from a content stream, or a str from a PDF library

        Returns:
            Valid text. Undecodable bytes are dropped, never replaced by a visible character.
        """
        if raw is None:
            return ''

        if isinstance(raw, str):
            try:
                raw.encode('utf-8')
                return self._clean(raw)
            except UnicodeEncodeError:
                # Escaped bytes from a lossy decode go back to the original byte, other lone surrogates are dropped
                raw = UNESCAPABLE_SURROGATES.sub('', raw).encode('utf-8', 'surrogateescape')

        data = bytes(raw)
        for encoding in self.encodings:
            try:
                return self._clean(data.decode(encoding))
            except UnicodeDecodeError:
                logger.debug(f"Text is not valid {encoding}, trying next encoding")
                continue

        return self._clean(data.decode('ascii', errors='ignore'))

    @staticmethod
    def _clean(text: str) -> str:
        text = text.replace('\x00', '')
        text = text.replace('\ufffd', '')
        return text


_default_normalizer = EncodingNormalizer()


def normalize_encoding(raw: Optional[Union[bytes, bytearray, str]]) -> str:
    return _default_normalizer.normalize(raw)
