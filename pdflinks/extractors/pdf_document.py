"""
PDF access layer.
Wraps PyMuPDF, pdfplumber and pypdf behind one small page interface:
structured text, raw content stream bytes and link annotations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple, Union

from loguru import logger

try:
    import fitz  # PyMuPDF
    PYMUPDF_AVAILABLE = True
except ImportError:
    PYMUPDF_AVAILABLE = False
    logger.warning("PyMuPDF not available")

try:
    import pdfplumber
    from pdfminer.pdftypes import resolve1
    PDFPLUMBER_AVAILABLE = True
except ImportError:
    PDFPLUMBER_AVAILABLE = False
    logger.warning("pdfplumber not available")

try:
    from pypdf import PdfReader
    PYPDF_AVAILABLE = True
except ImportError:
    PYPDF_AVAILABLE = False
    logger.warning("pypdf not available")


class PdfLinksError(Exception):
    """Base error for this package."""


class DocumentOpenError(PdfLinksError):
    """The PDF could not be opened at all."""


Rect = Tuple[float, float, float, float]


@dataclass(frozen=True)
class RawAnnotation:
    """A decoded link annotation carrying an external URI."""
    uri: Any
    rect: Optional[Rect] = None


def _to_rect(values) -> Optional[Rect]:
    """Four numbers as (x0, top, x1, bottom), top-left origin."""
    if values is None:
        return None
    values = [float(v) for v in values]
    if len(values) != 4:
        return None
    return (values[0], values[1], values[2], values[3])


def _flip_rect(values, page_top: float) -> Optional[Rect]:
    """PDF user-space /Rect (bottom-left origin, corners in any order) to top-left origin."""
    rect = _to_rect(values)
    if rect is None:
        return None
    x0, y0, x1, y1 = rect
    return (min(x0, x1), page_top - max(y0, y1), max(x0, x1), page_top - min(y0, y1))


class PdfPage(ABC):
    """One physical page. index is 1-based."""

    def __init__(self, index: int):
        self.index = index

    @abstractmethod
    def structured_text(self) -> str:
        """Text from the library's own extraction (may be empty)."""

    @abstractmethod
    def raw_content(self) -> Optional[bytes]:
        """Decoded content stream bytes, or None when the page has none."""

    @abstractmethod
    def annotations(self) -> List[Any]:
        """Raw link annotation handles on this page."""

    @abstractmethod
    def decode_annotation(self, handle: Any) -> Optional[RawAnnotation]:
        """Decode one handle. None when it has no URI action."""


class PdfDocument(ABC):
    """An opened, page-enumerable PDF."""

    source: Optional[str] = None
    available = True
    supports_document_annotations = False

    @property
    @abstractmethod
    def page_count(self) -> int:
        ...

    @abstractmethod
    def page(self, index: int) -> PdfPage:
        """Return page `index` (1-based)."""

    def pages(self) -> Iterator[PdfPage]:
        for index in range(1, self.page_count + 1):
            yield self.page(index)

    def document_annotations(self) -> List[Any]:
        """Every link annotation object in the file, without page mapping."""
        raise NotImplementedError(f"{type(self).__name__} cannot scan annotations document-wide")

    def decode_document_annotation(self, handle: Any) -> Optional[RawAnnotation]:
        raise NotImplementedError(f"{type(self).__name__} cannot scan annotations document-wide")

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


# PyMuPDF

class PyMuPDFPage(PdfPage):
    def __init__(self, index: int, page):
        super().__init__(index)
        self._page = page

    def structured_text(self) -> str:
        return self._page.get_text() or ''

    def raw_content(self) -> Optional[bytes]:
        return self._page.read_contents() or None

    def annotations(self) -> List[Any]:
        return list(self._page.get_links())

    def decode_annotation(self, handle: Any) -> Optional[RawAnnotation]:
        if handle.get('kind') != fitz.LINK_URI or not handle.get('uri'):
            return None
        return RawAnnotation(uri=handle['uri'], rect=_to_rect(handle.get('from')))


class PyMuPDFDocument(PdfDocument):
    available = PYMUPDF_AVAILABLE
    supports_document_annotations = True

    def __init__(self, pdf_path: Union[str, Path]):
        if not PYMUPDF_AVAILABLE:
            raise RuntimeError("PyMuPDF backend requested but PyMuPDF is not installed")
        self.source = str(pdf_path)
        self._doc = fitz.open(str(pdf_path))

    @property
    def page_count(self) -> int:
        return len(self._doc)

    def page(self, index: int) -> PdfPage:
        return PyMuPDFPage(index, self._doc[index - 1])

    def document_annotations(self) -> List[Any]:
        # /Type is optional in annotation dictionaries, /Subtype is not
        return [xref for xref in range(1, self._doc.xref_length())
                if self._doc.xref_get_key(xref, 'Subtype')[1] == '/Link']

    def decode_document_annotation(self, handle: Any) -> Optional[RawAnnotation]:
        if self._doc.xref_get_key(handle, 'A/S')[1] != '/URI':
            return None
        kind, uri = self._doc.xref_get_key(handle, 'A/URI')
        if kind == 'null' or not uri:
            return None
        rect = None
        kind, value = self._doc.xref_get_key(handle, 'Rect')
        if kind == 'array':
            rect = self._page_one_rect(value.strip('[]').split())
        return RawAnnotation(uri=uri, rect=rect)

    def _page_one_rect(self, values) -> Optional[Rect]:
        """Map a PDF-space /Rect into page 1 coordinates, where document-wide links are attributed."""
        raw = _to_rect(values)
        if raw is None or not len(self._doc):
            return None
        matrix = self._doc[0].transformation_matrix
        p1 = fitz.Point(raw[0], raw[1]) * matrix
        p2 = fitz.Point(raw[2], raw[3]) * matrix
        return (min(p1.x, p2.x), min(p1.y, p2.y), max(p1.x, p2.x), max(p1.y, p2.y))

    def close(self) -> None:
        self._doc.close()


# pypdf

class PypdfPage(PdfPage):
    def __init__(self, index: int, page):
        super().__init__(index)
        self._page = page

    def structured_text(self) -> str:
        return self._page.extract_text() or ''

    def raw_content(self) -> Optional[bytes]:
        contents = self._page.get_contents()
        if contents is None:
            return None
        return contents.get_data() or None

    def annotations(self) -> List[Any]:
        annots = self._page.get('/Annots')
        if annots is None:
            return []
        return list(annots.get_object())

    def decode_annotation(self, handle: Any) -> Optional[RawAnnotation]:
        annot = handle.get_object()
        if annot.get('/Subtype') != '/Link':
            return None
        action = annot.get('/A')
        if action is None:
            return None
        action = action.get_object()
        if action.get('/S') != '/URI' or action.get('/URI') is None:
            return None
        return RawAnnotation(uri=action['/URI'],
                             rect=_flip_rect(annot.get('/Rect'), float(self._page.mediabox.top)))


class PypdfDocument(PdfDocument):
    available = PYPDF_AVAILABLE

    def __init__(self, pdf_path: Union[str, Path]):
        if not PYPDF_AVAILABLE:
            raise RuntimeError("pypdf backend requested but pypdf is not installed")
        self.source = str(pdf_path)
        self._reader = PdfReader(str(pdf_path))

    @property
    def page_count(self) -> int:
        return len(self._reader.pages)

    def page(self, index: int) -> PdfPage:
        return PypdfPage(index, self._reader.pages[index - 1])


# pdfplumber

class PlumberPage(PdfPage):
    def __init__(self, index: int, page):
        super().__init__(index)
        self._page = page

    def structured_text(self) -> str:
        return self._page.extract_text() or ''

    def raw_content(self) -> Optional[bytes]:
        streams = self._page.page_obj.contents
        if not streams:
            return None
        return b''.join(resolve1(stream).get_data() for stream in streams) or None

    def annotations(self) -> List[Any]:
        return list(self._page.hyperlinks or [])

    def decode_annotation(self, handle: Any) -> Optional[RawAnnotation]:
        uri = handle.get('uri')
        if not uri:
            return None
        rect = _to_rect([handle['x0'], handle['top'], handle['x1'], handle['bottom']])
        return RawAnnotation(uri=uri, rect=rect)


class PlumberDocument(PdfDocument):
    available = PDFPLUMBER_AVAILABLE

    def __init__(self, pdf_path: Union[str, Path]):
        if not PDFPLUMBER_AVAILABLE:
            raise RuntimeError("pdfplumber backend requested but pdfplumber is not installed")
        self.source = str(pdf_path)
        self._pdf = pdfplumber.open(str(pdf_path))

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    def page(self, index: int) -> PdfPage:
        return PlumberPage(index, self._pdf.pages[index - 1])

    def close(self) -> None:
        self._pdf.close()


BACKENDS = {
    'pymupdf': PyMuPDFDocument,
    'pypdf': PypdfDocument,
    'pdfplumber': PlumberDocument,
}


def open_document(pdf_path: Union[str, Path], backend: str = 'pymupdf') -> PdfDocument:
    """
    Open a PDF with the requested backend.

    Args:
        pdf_path: Path to the PDF file
        backend: One of BACKENDS

    Returns:
        Opened PdfDocument (use as a context manager)

    Raises:
        DocumentOpenError: file missing or unreadable
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise DocumentOpenError(f"PDF not found: {pdf_path}")

    try:
        document_class = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown PDF backend '{backend}'. Available: {list(BACKENDS)}") from None

    if not document_class.available:
        raise RuntimeError(f"{backend} backend requested but its library is not installed")

    try:
        return document_class(pdf_path)
    except Exception as e:
        raise DocumentOpenError(f"Could not open {pdf_path.name} with {backend}: {e}") from e
