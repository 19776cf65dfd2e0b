"""Reading and writing Huffman code tables and encoded bit strings.

A code table file has one `<symbol>:<code>` entry per line. Symbols are
written with Python's unicode_escape codec, so line breaks, backslashes
and non-ASCII characters stay on one line. The code comes after the last
colon, which lets ':' itself appear unescaped as a symbol.

The packed form stores a bit string as a 32-bit bit count followed by the
bits, zero-padded to a whole number of bytes.
"""

import logging

from bitstring import Bits, BitArray, ConstBitStream, ReadError

from huffman import HuffmanError, MalformedCodeError


log = logging.getLogger(__name__)

BIT_COUNT_BITS = 32


class TextEncodingError(HuffmanError, ValueError):
    pass


def escape_symbol(symbol):
    return symbol.encode('unicode_escape').decode('ascii')


def unescape_symbol(text):
    try:
        return text.encode('ascii').decode('unicode_escape')
    except UnicodeError as e:
        raise MalformedCodeError(f'bad symbol escape {text!r}: {e}') from None


def format_codes(codes):
    return ''.join(f'{escape_symbol(s)}:{code}\n' for s, code in codes.items())


def parse_codes(text):
    codes = {}
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line:
            continue
        escaped, sep, code = line.rpartition(':')
        if not sep or not escaped:
            raise MalformedCodeError(f'line {line_no}: expected <symbol>:<code>, got {line!r}')
        symbol = unescape_symbol(escaped)
        if symbol in codes:
            raise MalformedCodeError(f'line {line_no}: duplicate symbol {escaped!r}')
        codes[symbol] = code
    return codes


def write_codes(codes, path):
    with open(path, 'w', encoding='ascii', newline='\n') as f:
        f.write(format_codes(codes))
    log.debug('wrote %d codes to %s', len(codes), path)


def _read(path, encoding, error):
    # newline='' keeps line endings exactly as they are in the file.
    try:
        with open(path, 'r', encoding=encoding, newline='') as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise error(f'{path}: not valid {encoding} text '
                    f'(found byte {e.object[e.start]:#04x})') from None


def read_codes(path):
    return parse_codes(_read(path, 'ascii', MalformedCodeError))


def write_encoded(bits, path):
    with open(path, 'w', encoding='ascii') as f:
        f.write(bits)


def read_encoded(path):
    return _read(path, 'ascii', MalformedCodeError).strip()


def read_text(path):
    return _read(path, 'utf-8', TextEncodingError)


def write_text(text, path):
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(text)


def pack_bits(bits):
    if bits.strip('01'):
        raise MalformedCodeError('bit string may only contain 0 and 1')
    out = BitArray()
    out.append(Bits(uint=len(bits), length=BIT_COUNT_BITS))
    if bits:
        out.append(Bits(bin=bits))
    return out.tobytes()


def unpack_bits(data):
    stream = ConstBitStream(data)
    try:
        num_bits = stream.read(f'uint:{BIT_COUNT_BITS}')
        if num_bits == 0:
            return ''
        return stream.read(f'bin:{num_bits}')
    except ReadError:
        raise MalformedCodeError('packed bit string is truncated') from None


def write_packed(bits, path):
    with open(path, 'wb') as f:
        f.write(pack_bits(bits))


def read_packed(path):
    with open(path, 'rb') as f:
        return unpack_bits(f.read())
