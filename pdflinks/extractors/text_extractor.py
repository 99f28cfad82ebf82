"""
Per-page text extraction with two independent strategies.

Strategy 1 is the PDF library's own text extraction, strategy 2 reads the
raw content stream. Both are scored, the better one is normalized.
"""

from typing import List, Optional

from loguru import logger

from ..core.analysis_log import AnalysisLog
from ..core.models import ExtractedText, FailureKind, StepFailure, run_step
from ..processors.quality import TextQualityScorer
from ..processors.text_normalizer import clean_text
from .encoding import EncodingNormalizer
from .raw_content import RawContentTextExtractor


class TextExtractionEngine:
    """Pick and clean the best text for a page. Never raises for page-local problems."""

    def __init__(self,
                 normalizer: Optional[EncodingNormalizer] = None,
                 scorer: Optional[TextQualityScorer] = None,
                 raw_extractor: Optional[RawContentTextExtractor] = None,
                 sample_length: int = 100):
        self.normalizer = normalizer or EncodingNormalizer()
        self.scorer = scorer or TextQualityScorer()
        self.raw_extractor = raw_extractor or RawContentTextExtractor(self.normalizer)
        self.sample_length = sample_length

    def extract_page_text(self, page, log: Optional[AnalysisLog] = None) -> ExtractedText:
        """
        Extract text for one page.

        Args:
            page: PdfPage
            log: Event collector; strategy failures are reported here

        Returns:
            ExtractedText. content is '' when both strategies failed. error is
            set when both strategies failed or the chosen one did; a failure
            of the losing strategy is only logged as a warning.
        """
        log = log or AnalysisLog(forward=False)

        # Strategy 1: structured text from the PDF library
        structured = run_step(FailureKind.STRUCTURED_TEXT, self._structured_text, page)
        # Strategy 2: raw content stream
        raw = run_step(FailureKind.RAW_CONTENT, self.raw_extractor.extract_raw, page)

        structured_text = structured.value_or('')
        raw_text = raw.value_or('')

        structured_score = self.scorer.score(structured_text)
        raw_score = self.scorer.score(raw_text)
        if raw_score > structured_score:
            chosen, winner, method = raw_text, raw, 'raw content'
        else:
            chosen, winner, method = structured_text, structured, 'structured text'
        logger.debug(f"Page {page.index}: structured score {structured_score}, "
                     f"raw score {raw_score}, using {method}")

        both_failed = not structured.ok and not raw.ok
        failures: List[StepFailure] = []
        for step in (structured, raw):
            if step.ok:
                continue
            if step is winner or both_failed:
                failures.append(step.failure)
                log.error(self._failure_message(page.index, step.failure))
            else:
                log.warn(self._failure_message(page.index, step.failure))

        cleaned = run_step(FailureKind.NORMALIZATION, clean_text, chosen)
        if not cleaned.ok:
            failures.append(cleaned.failure)
            log.warn(self._failure_message(page.index, cleaned.failure))
        content = self.normalizer.normalize(cleaned.value_or(chosen))

        if content:
            logger.debug(f"Sample text: {content[:self.sample_length]}")

        error = '; '.join(f"{failure.kind.value}: {failure.message}" for failure in failures) or None
        return ExtractedText(page=page.index, content=content, error=error)

    @staticmethod
    def _failure_message(page_index: int, failure: StepFailure) -> str:
        if failure.kind is FailureKind.STRUCTURED_TEXT:
            return f"Error extracting text from page {page_index}: {failure.message}"
        if failure.kind is FailureKind.RAW_CONTENT:
            return f"Raw content extraction failed on page {page_index}: {failure.message}"
        return f"Text normalization failed on page {page_index}: {failure.message}"

    def _structured_text(self, page) -> str:
        return self.normalizer.normalize(page.structured_text())
