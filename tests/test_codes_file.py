import pytest

from codes_file import (escape_symbol, format_codes, pack_bits, parse_codes, read_codes,
                        read_encoded, read_packed, read_text, unescape_symbol, unpack_bits,
                        write_codes, write_encoded, write_packed, write_text,
                        TextEncodingError)
from huffman import HuffmanCodec, HuffmanError, MalformedCodeError


AWKWARD_SYMBOLS = ['\n', '\r', '\t', ':', '\\', ' ', 'é', '中', "'", 'a']


@pytest.mark.parametrize('symbol', AWKWARD_SYMBOLS)
def test_escape_round_trip(symbol):
    escaped = escape_symbol(symbol)
    assert '\n' not in escaped
    assert escaped.isascii()
    assert unescape_symbol(escaped) == symbol


def test_format_codes():
    assert format_codes({'a': '0', '\n': '10', ':': '11'}) == 'a:0\n\\n:10\n::11\n'


def test_parse_codes():
    assert parse_codes('a:0\n\\n:10\n\n::11\n \\\\:111') == {
        'a': '0', '\n': '10', ':': '11', ' \\': '111'}


@pytest.mark.parametrize('text', [
    'no separator here\n',
    ':01\n',
    'a:0\na:1\n',
    '\\:0\n',
])
def test_parse_codes_rejects_bad_lines(text):
    with pytest.raises(MalformedCodeError):
        parse_codes(text)


def test_codes_file_round_trip(tmp_path):
    codes = {s: format(i, '04b') for i, s in enumerate(AWKWARD_SYMBOLS)}
    path = tmp_path / 'codes.txt'
    write_codes(codes, path)
    assert len(path.read_text(encoding='ascii').splitlines()) == len(codes)
    assert read_codes(path) == codes


def test_encoded_file_round_trip(tmp_path):
    path = tmp_path / 'encoded.txt'
    write_encoded('0101110', path)
    assert read_encoded(path) == '0101110'
    path.write_text('0101\n', encoding='ascii')
    assert read_encoded(path) == '0101'


def test_text_keeps_line_endings(tmp_path):
    path = tmp_path / 'input.txt'
    write_text('one\r\ntwo\nthree', path)
    assert read_text(path) == 'one\r\ntwo\nthree'


def test_persisted_codes_decode(tmp_path):
    text = 'Hello: world!\r\nSecond line\tö\\\n'
    codec = HuffmanCodec()
    bits, _ = codec.encode(text)
    write_codes(codec.codes, tmp_path / 'codes.txt')
    write_encoded(bits, tmp_path / 'encoded.txt')

    rebuilt = HuffmanCodec.from_codes(read_codes(tmp_path / 'codes.txt'))
    assert rebuilt.decode(read_encoded(tmp_path / 'encoded.txt')) == text


@pytest.mark.parametrize('bits', ['', '0', '1', '10110011', '101100111', '01' * 100])
def test_pack_round_trip(bits):
    packed = pack_bits(bits)
    assert len(packed) == 4 + (len(bits) + 7) // 8
    assert unpack_bits(packed) == bits


def test_pack_layout():
    assert pack_bits('101') == b'\x00\x00\x00\x03\xa0'


def test_pack_rejects_non_bits():
    with pytest.raises(MalformedCodeError):
        pack_bits('0120')


@pytest.mark.parametrize('data', [b'', b'\x00\x00', pack_bits('1' * 20)[:-1]])
def test_unpack_truncated(data):
    with pytest.raises(MalformedCodeError):
        unpack_bits(data)


def test_packed_file_round_trip(tmp_path):
    path = tmp_path / 'encoded.bin'
    bits, _ = HuffmanCodec().encode('abracadabra')
    write_packed(bits, path)
    assert read_packed(path) == bits


def test_read_codes_not_ascii(tmp_path):
    path = tmp_path / 'codes.txt'
    path.write_bytes('é:0\n'.encode('utf-8'))
    with pytest.raises(MalformedCodeError):
        read_codes(path)


def test_read_encoded_not_ascii(tmp_path):
    path = tmp_path / 'encoded.txt'
    path.write_bytes(b'0101\xff')
    with pytest.raises(MalformedCodeError):
        read_encoded(path)


def test_read_text_not_utf8(tmp_path):
    path = tmp_path / 'input.txt'
    path.write_bytes(b'abc\xff\xfe')
    with pytest.raises(TextEncodingError) as excinfo:
        read_text(path)
    assert isinstance(excinfo.value, HuffmanError)
    assert '0xff' in str(excinfo.value)
