"""
Main Analysis Pipeline
Runs text extraction and link mining over every page, then collects
annotation links, without letting one bad page abort the document.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from .analysis_log import AnalysisLog
from .config import load_config
from .models import AnalysisResult, ExtractedText, FailureKind, Link, LogEvent, run_step
from ..extractors.annotations import AnnotationLinkExtractor
from ..extractors.pdf_document import PdfDocument, open_document
from ..extractors.text_extractor import TextExtractionEngine
from ..processors.link_miner import LinkMiner

NO_LINKS_HINTS = [
    "No links were found: the PDF may not contain any clickable links or URLs",
    "No links were found: the URLs may be formatted in an unexpected way",
    "No links were found: the URLs may be split across lines",
]


@dataclass
class PageOutcome:
    """Everything one page contributes to the result."""
    text: ExtractedText
    links: List[Link] = field(default_factory=list)
    events: List[LogEvent] = field(default_factory=list)


class AnalysisPipeline:
    """Extract links and cleaned text from a PDF document."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, config_path: Optional[str] = None):
        """
        Initialize pipeline.

        Args:
            config: Configuration dictionary (takes precedence over config_path)
            config_path: Path to config.yaml
        """
        self.config = load_config(config_path, overrides=config)

        log_config = self.config['analysis_log']
        self.max_message_length = log_config['max_message_length']

        pipeline_config = self.config['pipeline']
        self.parallel = pipeline_config['parallel']
        self.max_workers = max(1, int(pipeline_config['max_workers']))
        self.parallel_page_threshold = pipeline_config['parallel_page_threshold']

        self.backend = self.config['pdf']['backend']
        self.text_engine = TextExtractionEngine(sample_length=log_config['sample_length'])
        self.link_miner = LinkMiner()
        self.annotation_extractor = AnnotationLinkExtractor(scope=self.config['pdf']['annotation_scope'])

    def analyze_file(self, pdf_path: Union[str, Path]) -> AnalysisResult:
        """
        Open a PDF with the configured backend and analyze it.

        Raises:
            DocumentOpenError: the PDF cannot be opened at all
        """
        pdf_path = Path(pdf_path)
        with open_document(pdf_path, backend=self.backend) as document:
            return self.analyze(document, source=pdf_path.name)

    def analyze(self, document: PdfDocument, source: Optional[str] = None) -> AnalysisResult:
        """
        Analyze an opened document.

        Args:
            document: Page-enumerable PdfDocument
            source: Label stored on the result (defaults to document.source)

        Returns:
            AnalysisResult with page-ordered links and texts
        """
        log = AnalysisLog(max_message_length=self.max_message_length)
        page_count = document.page_count
        result = AnalysisResult(source=source or document.source, page_count=page_count)
        log.info(f"Processing PDF file: {result.source or 'document'} ({page_count} pages)")

        if self._use_parallel(page_count):
            outcomes = self._process_pages_parallel(document, page_count)
        else:
            outcomes = [self._process_page(document, index) for index in range(1, page_count + 1)]

        for outcome in outcomes:
            result.texts.append(outcome.text)
            result.links.extend(outcome.links)
            log.extend(outcome.events)

        annotation_links = run_step(FailureKind.ANNOTATION,
                                    self.annotation_extractor.extract_annotation_links, document, log)
        if annotation_links.ok:
            result.links.extend(annotation_links.value)
        else:
            log.error(f"Error extracting annotations: {annotation_links.failure.message}")

        log.info(f"Analysis complete. Total links found: {len(result.links)}")
        if not result.links:
            for hint in NO_LINKS_HINTS:
                log.warn(hint)

        result.logs = log.events
        return result

    def _use_parallel(self, page_count: int) -> bool:
        if self.max_workers < 2 or page_count < 2:
            return False
        return self.parallel or page_count > self.parallel_page_threshold

    def _process_pages_parallel(self, document: PdfDocument, page_count: int) -> List[PageOutcome]:
        """Process pages on a thread pool, then put them back in page order."""
        outcomes: List[Optional[PageOutcome]] = [None] * page_count
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(self._process_page, document, index): index
                       for index in range(1, page_count + 1)}
            for future in as_completed(futures):
                index = futures[future]
                outcomes[index - 1] = future.result()
        logger.debug(f"Processed {page_count} pages with {self.max_workers} workers")
        return outcomes

    def _process_page(self, document: PdfDocument, index: int) -> PageOutcome:
        """Run text extraction and link mining for one page. Never raises."""
        log = AnalysisLog(max_message_length=self.max_message_length)
        log.info(f"Processing page {index}")

        loaded = run_step(FailureKind.PAGE, document.page, index)
        if not loaded.ok:
            return self._failed_page(index, loaded.failure.message, log)
        page = loaded.value

        extracted = run_step(FailureKind.PAGE, self.text_engine.extract_page_text, page, log)
        if not extracted.ok:
            return self._failed_page(index, extracted.failure.message, log)
        text = extracted.value

        log.info(f"Extracted {text.characters} characters from page {index}")
        if not text.content:
            log.warn(f"No text extracted from page {index}")
            return PageOutcome(text=text, events=log.events)

        mined = run_step(FailureKind.LINK_MINING, self.link_miner.mine_links, text.content, index)
        if not mined.ok:
            log.error(f"Error mining links on page {index}: {mined.failure.message}")
            return PageOutcome(text=text, events=log.events)

        for link in mined.value:
            log.info(f"Added {link.category.value} link: {link.uri}")
        return PageOutcome(text=text, links=mined.value, events=log.events)

    @staticmethod
    def _failed_page(index: int, message: str, log: AnalysisLog) -> PageOutcome:
        log.error(f"Error processing page {index}: {message}")
        return PageOutcome(text=ExtractedText(page=index, content='', error=message), events=log.events)
