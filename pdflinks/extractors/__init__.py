"""PDF access, encoding recovery and text/annotation extraction modules."""

from .encoding import EncodingNormalizer, normalize_encoding
from .raw_content import RawContentTextExtractor
from .text_extractor import TextExtractionEngine
from .annotations import AnnotationLinkExtractor
from .pdf_document import (
    DocumentOpenError,
    PdfDocument,
    PdfLinksError,
    PdfPage,
    RawAnnotation,
    open_document,
)

__all__ = [
    'EncodingNormalizer',
    'normalize_encoding',
    'RawContentTextExtractor',
    'TextExtractionEngine',
    'AnnotationLinkExtractor',
    'DocumentOpenError',
    'PdfDocument',
    'PdfLinksError',
    'PdfPage',
    'RawAnnotation',
    'open_document',
]
