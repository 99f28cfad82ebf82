"""
Clickable link extraction from PDF link annotations.
Bypasses page text entirely: only annotations with a URI action are reported.
"""

from typing import List, Optional

from loguru import logger

from ..core.analysis_log import AnalysisLog
from ..core.models import Link, LinkCategory
from .encoding import EncodingNormalizer
from .pdf_document import PdfDocument, RawAnnotation

PAGE_SCOPE = 'page'
DOCUMENT_SCOPE = 'document'

# Document-wide scans cannot tell which page an annotation sits on
DOCUMENT_SCOPE_PAGE = 1


class AnnotationLinkExtractor:
    """Turn URI link annotations into Links."""

    def __init__(self, scope: str = PAGE_SCOPE, normalizer: Optional[EncodingNormalizer] = None):
        if scope not in (PAGE_SCOPE, DOCUMENT_SCOPE):
            raise ValueError(f"Unknown annotation scope '{scope}'")
        self.scope = scope
        self.normalizer = normalizer or EncodingNormalizer()

    def extract_annotation_links(self, document: PdfDocument, log: Optional[AnalysisLog] = None) -> List[Link]:
        """
        Collect annotation links for the whole document.

        Args:
            document: Opened PdfDocument
            log: Event collector for decode failures and found links

        Returns:
            Links in page order, then annotation order
        """
        log = log or AnalysisLog(forward=False)

        if self.scope == DOCUMENT_SCOPE:
            if document.supports_document_annotations:
                return self._extract_document_wide(document, log)
            log.warn(f"{type(document).__name__} cannot scan annotations document-wide, reading them per page")

        links: List[Link] = []
        for index in range(1, document.page_count + 1):
            try:
                page = document.page(index)
                handles = page.annotations()
            except Exception as e:
                log.error(f"Error processing annotations on page {index}: {e}")
                continue

            for handle in handles:
                try:
                    decoded = page.decode_annotation(handle)
                except Exception as e:
                    log.error(f"Error processing annotation link on page {index}: {e}")
                    continue
                link = self._to_link(decoded, index)
                if link:
                    links.append(link)
                    log.info(f"Added annotation link: {link.uri}")

        return links

    def _extract_document_wide(self, document: PdfDocument, log: AnalysisLog) -> List[Link]:
        links: List[Link] = []
        try:
            handles = document.document_annotations()
        except Exception as e:
            log.error(f"Error extracting annotations: {e}")
            return links

        for handle in handles:
            try:
                decoded = document.decode_document_annotation(handle)
            except Exception as e:
                log.error(f"Error processing annotation link: {e}")
                continue
            link = self._to_link(decoded, DOCUMENT_SCOPE_PAGE)
            if link:
                links.append(link)
                log.info(f"Added annotation link: {link.uri}")

        logger.debug(f"Document-wide scan found {len(links)} annotation links (attributed to page {DOCUMENT_SCOPE_PAGE})")
        return links

    def _to_link(self, decoded: Optional[RawAnnotation], page_index: int) -> Optional[Link]:
        if decoded is None:
            return None
        uri = decoded.uri
        if isinstance(uri, (bytes, bytearray)):
            uri = self.normalizer.normalize(uri)
        uri = str(uri).strip()
        if not uri:
            return None
        return Link(page=page_index, category=LinkCategory.ANNOTATION, uri=uri, rect=decoded.rect)
