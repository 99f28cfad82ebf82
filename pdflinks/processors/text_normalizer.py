"""
Spacing and punctuation repair for PDF text.
Fixes the usual damage from text runs being glued together by the PDF producer.
"""

import re
from typing import Optional

WHITESPACE_RUN = re.compile(r'\s+')
# 1. Sentence end glued to the next sentence: "end.Next" -> "end. Next"
SENTENCE_BOUNDARY = re.compile(r'(?<=[.!?])(?=[A-Z])')
# 2. camelCase boundary: "wordWord" -> "word Word"
CAMEL_BOUNDARY = re.compile(r'(?<=[a-z])(?=[A-Z])')
# 3. Acronym followed by a word: "HTMLParser" -> "HTML Parser"
ACRONYM_BOUNDARY = re.compile(r'(?<=[A-Z])(?=[A-Z][a-z])')
# 4. Digit-dot-digit: "12.5" -> "12. 5". Conservative on purpose, numbers are split too.
DECIMAL_BOUNDARY = re.compile(r'(?<=\d)\.(?=\d)')


def clean_text(text: Optional[str]) -> str:
    """
    Normalize spacing in extracted page text.

    Running it twice gives the same result as running it once.

    Args:
        text: Raw page text

    Returns:
        Single-line text with repaired word and sentence boundaries
    """
    if not text:
        return ''

    text = WHITESPACE_RUN.sub(' ', text)
    text = SENTENCE_BOUNDARY.sub(' ', text)
    text = CAMEL_BOUNDARY.sub(' ', text)
    text = ACRONYM_BOUNDARY.sub(' ', text)
    text = WHITESPACE_RUN.sub(' ', text).strip()
    text = DECIMAL_BOUNDARY.sub('. ', text)
    return text
