"""Console tables for frequencies, codes, trees and sizes."""

from decimal import ROUND_HALF_UP, Decimal

from codes_file import escape_symbol
from huffman import Leaf


RULE = '-' * 25


def display_symbol(symbol):
    if isinstance(symbol, str):
        return escape_symbol(symbol)
    return repr(symbol)


def _print_table(title, heading, rows):
    print(f'\n{title}:')
    print(RULE)
    print(f'{"Character":<10} {heading:<10}')
    print(RULE)
    for symbol, value in rows:
        print(f'{display_symbol(symbol):<10} {value:<10}')
    print(RULE)


def print_frequency_table(frequencies):
    _print_table('Character Frequency Table', 'Frequency', frequencies.items())


def print_code_table(codes):
    _print_table('Huffman Codes', 'Code', codes.items())


def print_tree(tree):
    print('\nHuffman Tree Visualization:')
    print(RULE)
    _print_node(tree, 0)
    print(RULE)


def _print_node(node, level):
    # Sideways: right subtree above its parent, left subtree below.
    if node is None:
        return
    if isinstance(node, Leaf):
        print(f"{'    ' * level}'{display_symbol(node.symbol)}'({node.weight})")
        return
    _print_node(node.right, level + 1)
    print(f"{'    ' * level}({node.weight})")
    _print_node(node.left, level + 1)


def _two_places(value):
    # Halves round up, so 9 bits reads as 1.13 bytes rather than 1.12.
    return Decimal(value).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def _bytes(bits):
    return _two_places(Decimal(bits) / 8)


def print_size_analysis(metrics):
    print('\nSize Analysis:')
    print(RULE)
    print(f'Original Size: {_bytes(metrics.original_bits)} bytes ({metrics.original_bits} bits)')
    print(f'Compressed Size: {_bytes(metrics.compressed_bits)} bytes ({metrics.compressed_bits} bits)')
    print(f'Size Reduction: {_two_places(str(metrics.space_saving))}%')
    print(RULE)
