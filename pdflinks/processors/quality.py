"""
Heuristic text quality score.
Only meaningful for comparing two candidate extractions of the same page.
"""

import re
from typing import Optional

SPACE_WEIGHT = 2
NEWLINE_WEIGHT = 1
GARBAGE_RUN_PENALTY = 5
MERGED_SENTENCE_PENALTY = 3

# 3+ characters in a row that are neither alphanumeric nor whitespace
GARBAGE_RUN_PATTERN = re.compile(r'(?:[^\w\s]|_){3,}')
# Period glued to the next word, e.g. "end.Start"
MERGED_SENTENCE_PATTERN = re.compile(r'\.[^\W\d_]')


class TextQualityScorer:
    """Score a text block for plausibility."""

    def score(self, text: Optional[str]) -> int:
        if not text:
            return 0

        score = text.count(' ') * SPACE_WEIGHT
        score += text.count('\n') * NEWLINE_WEIGHT
        score -= len(GARBAGE_RUN_PATTERN.findall(text)) * GARBAGE_RUN_PENALTY
        score -= len(MERGED_SENTENCE_PATTERN.findall(text)) * MERGED_SENTENCE_PENALTY
        return score
