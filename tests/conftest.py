"""
Pytest fixtures for pdflinks tests.
Fake in-memory documents stand in for PyMuPDF/pypdf/pdfplumber.
"""
import pytest

from pdflinks.extractors.pdf_document import PdfDocument, PdfPage, RawAnnotation


class FakePage(PdfPage):
    """Page whose text, stream and annotations are given up front.

    Any value that is an Exception instance is raised when accessed.
    """

    def __init__(self, index, text='', stream=None, annotations=None):
        super().__init__(index)
        self._text = text
        self._stream = stream
        self._annotations = annotations or []

    def structured_text(self):
        if isinstance(self._text, Exception):
            raise self._text
        return self._text

    def raw_content(self):
        if isinstance(self._stream, Exception):
            raise self._stream
        return self._stream

    def annotations(self):
        if isinstance(self._annotations, Exception):
            raise self._annotations
        return list(self._annotations)

    def decode_annotation(self, handle):
        if isinstance(handle, Exception):
            raise handle
        return handle


class FakeDocument(PdfDocument):
    def __init__(self, pages, document_annotations=None, broken_pages=()):
        self._pages = pages
        self._document_annotations = document_annotations
        self._broken_pages = set(broken_pages)
        self.supports_document_annotations = document_annotations is not None
        self.source = 'fake.pdf'
        self.closed = False

    @property
    def page_count(self):
        return len(self._pages)

    def page(self, index):
        if index in self._broken_pages:
            raise ValueError(f"page {index} object is corrupt")
        return self._pages[index - 1]

    def document_annotations(self):
        return list(self._document_annotations)

    def decode_document_annotation(self, handle):
        if isinstance(handle, Exception):
            raise handle
        return handle

    def close(self):
        self.closed = True


@pytest.fixture
def make_page():
    return FakePage


@pytest.fixture
def make_document():
    return FakeDocument


@pytest.fixture
def uri_annotation():
    def _make(uri, rect=(10.0, 20.0, 110.0, 32.0)):
        return RawAnnotation(uri=uri, rect=rect)
    return _make


@pytest.fixture
def quiet_config():
    """Sequential pipeline config with default everything else."""
    return {'pipeline': {'parallel': False, 'parallel_page_threshold': 1000}}
