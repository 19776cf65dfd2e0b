"""Huffman-code a text file, or decode one that was coded earlier.

Encoding writes the bit string and the code table next to each other;
decoding needs both.

  python huffman_cli.py -i input.txt -e encoded.txt -c codes.txt
  python huffman_cli.py -d -e encoded.txt -c codes.txt -o decoded.txt
"""

import argparse
import logging
import sys

import report
from codes_file import (read_codes, read_encoded, read_packed, read_text,
                        write_codes, write_encoded, write_packed, write_text)
from huffman import HuffmanCodec, HuffmanError


log = logging.getLogger(__name__)

DEFAULT_INPUT = 'input.txt'
DEFAULT_ENCODED = 'encoded.txt'
DEFAULT_CODES = 'codes.txt'
LOG_FORMAT = '%(levelname)s %(name)s: %(message)s'


def make_parser():
    parser = argparse.ArgumentParser(prog='huffman-text',
                                     description='Huffman text coder')
    parser.add_argument('-i', '--input', default=DEFAULT_INPUT,
                        help=f'text file to encode (default: {DEFAULT_INPUT})')
    parser.add_argument('-e', '--encoded', default=DEFAULT_ENCODED,
                        help=f'encoded bit string file (default: {DEFAULT_ENCODED})')
    parser.add_argument('-c', '--codes', default=DEFAULT_CODES,
                        help=f'code table file (default: {DEFAULT_CODES})')
    parser.add_argument('-o', '--output',
                        help='with --decode, write the decoded text here instead of stdout')
    parser.add_argument('-d', '--decode', action='store_true',
                        help='decode the encoded file instead of encoding the input')
    parser.add_argument('--packed', action='store_true',
                        help='store the encoded bits packed into bytes instead of as 0/1 text')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='skip the frequency, code, tree and size printouts')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='enable debug logging')
    return parser


def encode_file(args):
    text = read_text(args.input)
    codec = HuffmanCodec()
    bits, metrics = codec.encode(text)

    if not args.quiet:
        print(f'Reading from: {args.input}')
        print(f'\nOriginal Text:\n{text}')
        report.print_frequency_table(codec.frequencies)
        report.print_code_table(codec.codes)
        report.print_tree(codec.tree)
        print(f'\nEncoded Text:\n{bits}')
        report.print_size_analysis(metrics)

    if args.packed:
        write_packed(bits, args.encoded)
    else:
        write_encoded(bits, args.encoded)
    write_codes(codec.codes, args.codes)
    log.info('wrote %d bits to %s', len(bits), args.encoded)
    log.info('wrote %d codes to %s', len(codec.codes), args.codes)
    print(f'Encoded text saved to {args.encoded}')
    print(f'Huffman codes saved to {args.codes}')

    decoded = codec.decode(bits)
    if not args.quiet:
        print(f'\nDecoded Text:\n{decoded}')
    ok = decoded == text
    print(f'\nCompression successful: {ok}')
    return 0 if ok else 1


def decode_file(args):
    bits = read_packed(args.encoded) if args.packed else read_encoded(args.encoded)
    codec = HuffmanCodec.from_codes(read_codes(args.codes))
    log.debug('decoding %d bits with %d codes', len(bits), len(codec.codes))
    text = codec.decode(bits)
    if args.output:
        write_text(text, args.output)
        log.info('wrote %d characters to %s', len(text), args.output)
        print(f'Decoded text saved to {args.output}')
    else:
        print(text, end='')
    return 0


def main(argv=None):
    args = make_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format=LOG_FORMAT)
    try:
        if args.decode:
            return decode_file(args)
        return encode_file(args)
    except OSError as e:
        log.error('I/O error: %s', e)
    except HuffmanError as e:
        log.error('%s', e)
    return 1


if __name__ == '__main__':
    sys.exit(main())
