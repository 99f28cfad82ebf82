"""
Backend adapter tests. Library page objects are replaced by small stubs so
no real PDF is needed.
"""
import pytest

from pdflinks.extractors.pdf_document import (
    DocumentOpenError,
    PlumberPage,
    PypdfPage,
    RawAnnotation,
    _flip_rect,
    _to_rect,
    open_document,
)


class StubObject(dict):
    """Mimics a pypdf dictionary/indirect object."""

    def get_object(self):
        return self


class StubArray(list):
    def get_object(self):
        return self


class StubContents:
    def __init__(self, data):
        self.data = data

    def get_data(self):
        return self.data


class StubBox:
    def __init__(self, top):
        self.top = top


class StubPypdfPage(dict):
    def __init__(self, contents=None, annots=None, text='', height=792):
        super().__init__()
        self.mediabox = StubBox(height)
        if annots is not None:
            self['/Annots'] = annots
        self._contents = contents
        self._text = text

    def get_contents(self):
        return self._contents

    def extract_text(self):
        return self._text


def test_to_rect():
    assert _to_rect([1, '2', 3.5, 4]) == (1.0, 2.0, 3.5, 4.0)
    assert _to_rect(None) is None
    assert _to_rect([1, 2]) is None


def test_flip_rect_moves_origin_to_top_left():
    # PDF /Rect corners may come in any order
    assert _flip_rect([200, 742, 72, 722], 842) == (72.0, 100.0, 200.0, 120.0)
    assert _flip_rect(None, 842) is None


def test_open_document_missing_file(tmp_path):
    with pytest.raises(DocumentOpenError):
        open_document(tmp_path / 'nope.pdf')


def test_open_document_unknown_backend(tmp_path):
    pdf = tmp_path / 'a.pdf'
    pdf.write_bytes(b'%PDF-1.4\n')
    with pytest.raises(ValueError):
        open_document(pdf, backend='ghostscript')


def test_pypdf_page_raw_content():
    assert PypdfPage(1, StubPypdfPage(contents=None)).raw_content() is None
    assert PypdfPage(1, StubPypdfPage(contents=StubContents(b''))).raw_content() is None
    assert PypdfPage(1, StubPypdfPage(contents=StubContents(b'BT ET'))).raw_content() == b'BT ET'


def test_pypdf_page_text_none_becomes_empty():
    assert PypdfPage(1, StubPypdfPage(text=None)).structured_text() == ''


def test_pypdf_annotation_decoding():
    uri_link = StubObject({
        '/Subtype': '/Link',
        '/Rect': [0, 0, 50, 10],
        '/A': StubObject({'/S': '/URI', '/URI': 'https://example.com'}),
    })
    goto_link = StubObject({'/Subtype': '/Link', '/A': StubObject({'/S': '/GoTo'})})
    widget = StubObject({'/Subtype': '/Widget'})
    page = PypdfPage(1, StubPypdfPage(annots=StubArray([uri_link, goto_link, widget])))

    handles = page.annotations()
    assert len(handles) == 3
    decoded = [page.decode_annotation(handle) for handle in handles]
    assert decoded == [RawAnnotation(uri='https://example.com', rect=(0.0, 782.0, 50.0, 792.0)), None, None]


def test_pypdf_page_without_annots():
    assert PypdfPage(1, StubPypdfPage()).annotations() == []


def test_plumber_annotation_decoding():
    page = PlumberPage(1, object())
    handle = {'uri': 'https://jane.dev', 'x0': 1, 'top': 2, 'x1': 3, 'bottom': 4}
    assert page.decode_annotation(handle) == RawAnnotation(uri='https://jane.dev', rect=(1.0, 2.0, 3.0, 4.0))
    assert page.decode_annotation({'uri': None}) is None
