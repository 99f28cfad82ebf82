import pytest

from pdflinks.extractors.encoding import EncodingNormalizer, normalize_encoding


@pytest.fixture
def normalizer():
    return EncodingNormalizer()


def test_utf8_bytes_decoded(normalizer):
    assert normalizer.normalize('café'.encode('utf-8')) == 'café'


def test_cp1252_fallback(normalizer):
    # 0x93/0x94 are curly quotes in Windows-1252 and invalid as UTF-8
    assert normalizer.normalize(b'\x93quoted\x94') == '“quoted”'


def test_latin1_fallback_for_bytes_cp1252_does_not_define(normalizer):
    # 0x81 is undefined in cp1252 but valid ISO-8859-1
    assert normalizer.normalize(b'a\x81b') == 'a\x81b'


def test_none_and_empty(normalizer):
    assert normalizer.normalize(None) == ''
    assert normalizer.normalize(b'') == ''
    assert normalizer.normalize('') == ''


def test_no_replacement_characters_or_nuls(normalizer):
    text = normalizer.normalize('a\x00b�c')
    assert text == 'abc'


def test_lone_surrogates_are_recovered(normalizer):
    text = normalizer.normalize('bad\udcffsurrogate')
    text.encode('utf-8')
    assert text.startswith('bad')
    assert text.endswith('surrogate')


def test_escaped_bytes_restored_to_original_character(normalizer):
    assert normalizer.normalize('Caf\udce9 menu') == 'Café menu'


def test_escaped_utf8_sequence_restored(normalizer):
    assert normalizer.normalize('na\udcc3\udcafve') == 'naïve'


def test_unescapable_surrogates_dropped(normalizer):
    assert normalizer.normalize('\ud83dgithub.com/jane\udfff') == 'github.com/jane'


def test_ascii_terminal_step_drops_bytes():
    normalizer = EncodingNormalizer(encodings=('utf-8',))
    assert normalizer.normalize(b'ok\xffok') == 'okok'


@pytest.mark.parametrize('raw', [
    bytes(range(256)),
    b'\xff\xfe\xfd',
    b'\xed\xa0\x80',
    'mixed   text'.encode('utf-16'),
])
def test_normalize_is_total(raw):
    text = normalize_encoding(raw)
    assert isinstance(text, str)
    text.encode('utf-8')
