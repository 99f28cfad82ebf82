"""
pdflinks
Recovers contact and profile links plus cleaned per-page text from PDFs with unreliable text layout.
"""

# Core pipeline
from .core.pipeline import AnalysisPipeline
from .core.config import load_config
from .core.analysis_log import AnalysisLog
from .core.models import (
    AnalysisResult,
    ExtractedText,
    Link,
    LinkCategory,
    LogEvent,
    Severity,
)

# Extractors
from .extractors.pdf_document import DocumentOpenError, PdfDocument, PdfPage, open_document

# Serialization
from .serializers import format_response

__all__ = [
    'AnalysisPipeline',
    'load_config',
    'AnalysisLog',
    'AnalysisResult',
    'ExtractedText',
    'Link',
    'LinkCategory',
    'LogEvent',
    'Severity',
    'DocumentOpenError',
    'PdfDocument',
    'PdfPage',
    'open_document',
    'format_response',
]
