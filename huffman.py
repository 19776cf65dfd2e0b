"""Huffman coding of symbol sequences.

Codes and encoded output are strings of '0' and '1' characters. A tree
is made of Leaf and Internal named tuples and is never modified once built.
"""

import logging
from collections import namedtuple
from heapq import heapify, heappop, heappush
from itertools import count


log = logging.getLogger(__name__)

# Each input symbol is counted as one byte when measuring the original size.
ORIGINAL_SYMBOL_BITS = 8


class HuffmanError(Exception):
    pass


class EmptyInputError(HuffmanError, ValueError):
    def __init__(self, message='no symbols to build a Huffman tree from'):
        super().__init__(message)


class UncodedSymbolError(HuffmanError, KeyError):
    def __init__(self, symbol):
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self):
        return f'symbol not coded: {self.symbol!r}'


class MalformedCodeError(HuffmanError, ValueError):
    def __init__(self, message, position=None):
        super().__init__(message)
        self.position = position

    def __str__(self):
        if self.position is None:
            return self.args[0]
        return f'{self.args[0]} (at bit {self.position})'


Leaf = namedtuple('Leaf', ['symbol', 'weight'])
Internal = namedtuple('Internal', ['weight', 'left', 'right'])


class SizeMetrics(namedtuple('SizeMetrics', ['original_bits', 'compressed_bits'])):
    __slots__ = ()

    @property
    def space_saving(self):
        """Percentage of the original size saved by the code."""
        if self.original_bits == 0:
            return 0.0
        return (self.original_bits - self.compressed_bits) / self.original_bits * 100


EncodeResult = namedtuple('EncodeResult', ['bits', 'metrics'])


def count_symbols(seq):
    symbols = {}
    for s in seq:
        if s in symbols:
            symbols[s] += 1
        else:
            symbols[s] = 1
    return symbols


def make_huffman_tree(frequencies):
    """Merge the two lightest nodes until one is left.

    Heap entries carry an insertion counter, so nodes of equal weight come
    out first-in first-out: leaves in the order of `frequencies`, merged
    nodes after every node pushed before them. The first node popped in a
    merge becomes the left child.
    """
    if not frequencies:
        raise EmptyInputError()
    order = count()
    pq = [(weight, next(order), Leaf(symbol, weight))
          for symbol, weight in frequencies.items()]
    heapify(pq)
    while len(pq) > 1:
        w1, _, n1 = heappop(pq)
        w2, _, n2 = heappop(pq)
        heappush(pq, (w1 + w2, next(order), Internal(w1 + w2, n1, n2)))
    return pq[0][2]


def make_encoding_dictionary(tree):
    # A lone leaf has an empty path; give it a one-bit code instead.
    if isinstance(tree, Leaf):
        return {tree.symbol: '0'}

    codes = {}
    stack = [(tree, '')]
    while stack:
        node, code = stack.pop()
        if isinstance(node, Leaf):
            codes[node.symbol] = code
        elif node is not None:
            stack.append((node.right, code + '1'))
            stack.append((node.left, code + '0'))
    return codes


def make_decoding_tree(codes):
    """Rebuild a tree from a code table by laying out each code as a path.

    Leaf weights are not recoverable from codes and are set to 0. Paths
    that no code uses are left as None children.
    """
    if not codes:
        raise EmptyInputError('empty code table')
    if len(codes) == 1:
        (symbol, code), = codes.items()
        if code == '0':
            return Leaf(symbol, 0)

    root = [None, None]
    for symbol, code in codes.items():
        if not code or code.strip('01'):
            raise MalformedCodeError(f'invalid code {code!r} for symbol {symbol!r}')
        node = root
        for bit in code[:-1]:
            child = node[int(bit)]
            if child is None:
                child = node[int(bit)] = [None, None]
            elif isinstance(child, Leaf):
                raise MalformedCodeError(
                    f'code {code!r} for {symbol!r} extends the code of {child.symbol!r}')
            node = child
        if node[int(code[-1])] is not None:
            raise MalformedCodeError(
                f'code {code!r} for {symbol!r} is a prefix of, or equal to, another code')
        node[int(code[-1])] = Leaf(symbol, 0)
    return _freeze(root)


def _freeze(root):
    # Post-order with an explicit stack: a code table can describe a tree
    # far deeper than the recursion limit.
    frozen = {}
    stack = [root]
    while stack:
        node = stack[-1]
        pending = [c for c in node if isinstance(c, list) and id(c) not in frozen]
        if pending:
            stack.extend(pending)
            continue
        stack.pop()
        left, right = [frozen.pop(id(c)) if isinstance(c, list) else c for c in node]
        weight = sum(n.weight for n in (left, right) if n is not None)
        frozen[id(node)] = Internal(weight, left, right)
    return frozen[id(root)]


def iter_leaves(tree):
    stack = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            yield node
        elif node is not None:
            stack.append(node.right)
            stack.append(node.left)


def tree_depth(tree):
    depth = 0
    stack = [(tree, 0)]
    while stack:
        node, level = stack.pop()
        if isinstance(node, Internal):
            stack.append((node.left, level + 1))
            stack.append((node.right, level + 1))
        elif node is not None:
            depth = max(depth, level)
    return depth


def huffman_encode(seq, codes):
    out = []
    num_symbols = 0
    compressed_bits = 0
    for s in seq:
        try:
            code = codes[s]
        except KeyError:
            raise UncodedSymbolError(s) from None
        out.append(code)
        num_symbols += 1
        compressed_bits += len(code)
    metrics = SizeMetrics(num_symbols * ORIGINAL_SYMBOL_BITS, compressed_bits)
    return ''.join(out), metrics


def huffman_decode(bits, tree):
    """Walk `tree` bit by bit and return the list of decoded symbols."""
    out = []

    if isinstance(tree, Leaf):
        for i, bit in enumerate(bits):
            if bit != '0':
                raise MalformedCodeError(f'unexpected {bit!r} in single-symbol code', i)
            out.append(tree.symbol)
        return out

    node = tree
    for i, bit in enumerate(bits):
        if bit == '0':
            node = node.left
        elif bit == '1':
            node = node.right
        else:
            raise MalformedCodeError(f'not a bit: {bit!r}', i)
        if node is None:
            raise MalformedCodeError('bit sequence leads off the tree', i)
        if isinstance(node, Leaf):
            out.append(node.symbol)
            node = tree
    if node is not tree:
        raise MalformedCodeError('bit sequence ends in the middle of a code', len(bits))
    return out


def _collector_for(seq):
    if isinstance(seq, (bytes, bytearray)):
        return bytes
    if isinstance(seq, str):
        return ''.join
    return list


class HuffmanCodec:
    """Builds a Huffman code for one input and keeps its tree for decoding.

    `frequencies`, `tree` and `codes` describe the most recent build and
    are replaced, not updated, by the next one.
    """

    def __init__(self):
        self.frequencies = {}
        self.tree = None
        self.codes = {}
        self._collect = list

    @classmethod
    def from_codes(cls, codes):
        """Make a codec that decodes with a tree rebuilt from `codes`."""
        codec = cls()
        codec.tree = make_decoding_tree(codes)
        codec.codes = dict(codes)
        if all(isinstance(s, str) and len(s) == 1 for s in codes):
            codec._collect = ''.join
        return codec

    def build(self, seq):
        frequencies = count_symbols(seq)
        tree = make_huffman_tree(frequencies)
        self.frequencies = frequencies
        self.tree = tree
        self.codes = make_encoding_dictionary(tree)
        self._collect = _collector_for(seq)
        log.debug('built Huffman tree: %d symbols, depth %d',
                  len(frequencies), tree_depth(tree))
        return tree

    def encode(self, seq):
        self.build(seq)
        bits, metrics = huffman_encode(seq, self.codes)
        log.debug('encoded %d bits into %d bits',
                  metrics.original_bits, metrics.compressed_bits)
        return EncodeResult(bits, metrics)

    def decode(self, bits):
        if self.tree is None:
            raise HuffmanError('no Huffman tree: build() or from_codes() first')
        return self._collect(huffman_decode(bits, self.tree))
