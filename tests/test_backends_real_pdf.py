"""
Backend tests against a real PDF written with PyMuPDF.
Two A4 pages, each with one line of text and one URI link annotation.
"""
import fitz
import pytest

from pdflinks import AnalysisPipeline, DocumentOpenError, LinkCategory, open_document
from pdflinks.extractors.pdf_document import PyMuPDFDocument

PAGE_ONE_LINK = fitz.Rect(72, 100, 200, 120)
PAGE_TWO_LINK = fitz.Rect(300, 400, 450, 415)


@pytest.fixture(scope='module')
def cv_pdf(tmp_path_factory):
    path = tmp_path_factory.mktemp('pdfs') / 'cv.pdf'
    doc = fitz.open()

    page = doc.new_page(width=595, height=842)
    page.insert_text((72, 72), 'Jane Doe jane@example.com')
    page.insert_link({'kind': fitz.LINK_URI, 'from': PAGE_ONE_LINK, 'uri': 'https://jane.dev'})

    page = doc.new_page(width=595, height=842)
    page.insert_text((72, 72), 'Portfolio at janedoe.dev')
    page.insert_link({'kind': fitz.LINK_URI, 'from': PAGE_TWO_LINK, 'uri': 'https://example.org/cv'})

    doc.save(str(path))
    doc.close()
    return path


def annotation_links(result):
    return [link for link in result.links if link.category is LinkCategory.ANNOTATION]


def test_pymupdf_page_access(cv_pdf):
    with open_document(cv_pdf) as document:
        assert isinstance(document, PyMuPDFDocument)
        assert document.page_count == 2

        page = document.page(1)
        assert page.index == 1
        assert 'jane@example.com' in page.structured_text()
        raw = page.raw_content()
        assert isinstance(raw, bytes) and raw

        decoded = [page.decode_annotation(handle) for handle in page.annotations()]
        assert [annotation.uri for annotation in decoded] == ['https://jane.dev']
        assert decoded[0].rect == pytest.approx(tuple(PAGE_ONE_LINK))


@pytest.mark.parametrize('backend', ['pymupdf', 'pypdf', 'pdfplumber'])
def test_backends_agree_on_annotation_rects(cv_pdf, backend):
    with open_document(cv_pdf, backend=backend) as document:
        page = document.page(2)
        decoded = [page.decode_annotation(handle) for handle in page.annotations()]
    decoded = [annotation for annotation in decoded if annotation is not None]

    assert [str(annotation.uri) for annotation in decoded] == ['https://example.org/cv']
    assert decoded[0].rect == pytest.approx(tuple(PAGE_TWO_LINK))


def test_analyze_file_with_default_backend(cv_pdf):
    result = AnalysisPipeline(config={'pipeline': {'parallel': False}}).analyze_file(cv_pdf)

    assert result.source == 'cv.pdf'
    assert result.page_count == 2
    assert [text.page for text in result.texts] == [1, 2]
    assert all(text.error is None for text in result.texts)

    found = [(link.page, link.category, link.uri) for link in result.links
             if link.category is not LinkCategory.ANNOTATION]
    assert (1, LinkCategory.EMAIL, 'mailto:jane@example.com') in found
    assert (2, LinkCategory.URL, 'https://janedoe.dev') in found

    annotations = annotation_links(result)
    assert [(link.page, link.uri) for link in annotations] == [
        (1, 'https://jane.dev'),
        (2, 'https://example.org/cv'),
    ]
    assert annotations[1].rect == pytest.approx(tuple(PAGE_TWO_LINK))


def test_document_scope_attributes_links_to_first_page(cv_pdf):
    pipeline = AnalysisPipeline(config={'pdf': {'annotation_scope': 'document'}})
    result = pipeline.analyze_file(cv_pdf)

    annotations = annotation_links(result)
    assert sorted(link.uri for link in annotations) == ['https://example.org/cv', 'https://jane.dev']
    assert {link.page for link in annotations} == {1}

    by_uri = {link.uri: link for link in annotations}
    assert by_uri['https://jane.dev'].rect == pytest.approx(tuple(PAGE_ONE_LINK))


@pytest.mark.parametrize('backend', ['pymupdf', 'pypdf', 'pdfplumber'])
def test_corrupt_file_raises_document_open_error(tmp_path, backend):
    path = tmp_path / 'broken.pdf'
    path.write_bytes(b'this is not a pdf at all')
    with pytest.raises(DocumentOpenError):
        open_document(path, backend=backend)
