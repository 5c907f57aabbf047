from typing import Dict, List, Tuple

from knapsack import checked_split, naive_knapsack_solve

WeightedSymbol = Tuple[str, float] # (symbol, frequency)


class ShannonFanoNode: # Node for Shannon-Fano tree
    def __init__(self, symbols):
        self.symbols = symbols  # list of (symbol, frequency), never empty
        self.left = None
        self.right = None

    def is_leaf(self):
        return len(self.symbols) == 1


def symbol_frequencies(text: str) -> List[WeightedSymbol]: # text: input string
    counts: Dict[str, int] = {}
    for ch in text:
        counts[ch] = counts.get(ch, 0) + 1
    return [(ch, count / len(text)) for ch, count in counts.items()] # first-occurrence order


def _frequency(weighted_symbol):
    return weighted_symbol[1]


def build_shannon_fano_tree(node: ShannonFanoNode, solve=naive_knapsack_solve) -> ShannonFanoNode:
    if node.is_leaf():
        return node

    # Split into two groups of near-equal weight; the solver's subset goes left
    capacity = 0.5 * sum(frequency for _, frequency in node.symbols)
    left, right = checked_split(solve, node.symbols, capacity, _frequency, _frequency)

    node.left = build_shannon_fano_tree(ShannonFanoNode(left), solve)
    node.right = build_shannon_fano_tree(ShannonFanoNode(right), solve)
    return node


def generate_shannon_fano_codes(root: ShannonFanoNode) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Walks the tree once and returns (compression_keys, decompression_keys)
    compression_keys maps symbol -> code, decompression_keys maps code -> symbol
    """
    if root.is_leaf():
        symbol = root.symbols[0][0]
        return {symbol: ""}, {"": symbol}

    compression_keys: Dict[str, str] = {}
    decompression_keys: Dict[str, str] = {}
    for bit, child in (("0", root.left), ("1", root.right)):
        child_compression, _ = generate_shannon_fano_codes(child)
        for symbol, code in child_compression.items():
            code = bit + code
            if symbol in compression_keys or code in decompression_keys:
                raise ValueError(f"code table collision for symbol {symbol!r} with code {code!r}")
            compression_keys[symbol] = code
            decompression_keys[code] = symbol

    return compression_keys, decompression_keys


def shannon_fano_encode(text: str, code_map: Dict[str, str]) -> str: # code_map: symbol -> code
    return ''.join(code_map[ch] for ch in text)


def shannon_fano_decode(bitstring: str, decompression_keys: Dict[str, str]) -> str:
    decoded = []
    current = ""
    for bit in bitstring:
        current += bit
        if current in decompression_keys: # prefix-free, so the first match is the only one
            decoded.append(decompression_keys[current])
            current = ""

    if current:
        raise ValueError(f"{len(current)} trailing bits do not match any code")
    return ''.join(decoded)


def build_code_tables(text: str, solve=naive_knapsack_solve) -> Tuple[Dict[str, str], Dict[str, str]]:
    if text == "":
        return {}, {}

    # One distinct symbol: no tree, every occurrence becomes "1"
    if len(set(text)) == 1:
        return {text[0]: "1"}, {"1": text[0]}

    root = build_shannon_fano_tree(ShannonFanoNode(symbol_frequencies(text)), solve)
    return generate_shannon_fano_codes(root)


def compress(text: str, solve=naive_knapsack_solve) -> Tuple[str, Dict[str, str]]:
    compression_keys, decompression_keys = build_code_tables(text, solve)
    return shannon_fano_encode(text, compression_keys), decompression_keys


def decompress(bitstring: str, decompression_keys: Dict[str, str]) -> str:
    if bitstring and not decompression_keys:
        raise ValueError("cannot decode bits without decompression keys")
    return shannon_fano_decode(bitstring, decompression_keys)


class ShannonFanoCompressor:
    """Shannon-Fano compressor bound to one partition solver."""

    def __init__(self, solve=naive_knapsack_solve):
        self.solve = solve

    def compress(self, text: str) -> Tuple[str, Dict[str, str]]:
        return compress(text, self.solve)

    def decompress(self, bitstring: str, decompression_keys: Dict[str, str]) -> str:
        return decompress(bitstring, decompression_keys)
