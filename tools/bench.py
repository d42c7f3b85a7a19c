#!/usr/bin/env python3
"""
Benchmark: nodes visited and time per search, minimax versus alpha-beta.

Runs both strategies on a fixed set of positions at the same depth. The two
must report the same value for every position; the node counts show how
much work pruning saves. The root move count of every position is also
checked against python-chess.

Usage: python3 tools/bench.py [depth]
"""
import os
import sys
import time

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO not in sys.path:
    sys.path.insert(0, REPO)

import chess

from chesscore.position import Position
from chesscore.search import alphabeta_search, minimax_search

# Fixed forever so that runs are comparable across engine versions.
POSITIONS = [
    ("Start",        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -"),
    ("Italian",      "r1bqk1nr/pppp1ppp/2n5/2b1p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq -"),
    ("Open files",   "r3k2r/ppp2ppp/8/3q4/3Q4/8/PPP2PPP/R3K2R w KQkq -"),
    ("Mate in one",  "6k1/5ppp/8/8/8/8/5PPP/R5K1 w - -"),
    ("Rook ending",  "8/5pk1/6p1/7p/7P/6P1/5PK1/4R3 w - -"),
    ("Pawn race",    "8/1p4k1/p7/P1K5/8/8/8/8 w - -"),
]


def run_position(label: str, fen: str, depth: int) -> dict:
    """Search one position with both strategies and collect metrics.

    Args:
        label: Human-readable position name for display.
        fen: Position to search.
        depth: Search depth in plies.

    Returns:
        Dict with keys: label, moves, candidates, value, mm_nodes, ab_nodes, mm_ms, ab_ms.

    Raises:
        AssertionError: If the legal move count disagrees with python-chess, or
                        the two strategies disagree on the value.
    """
    position = Position.from_fen(fen)
    moves = len(position.all_legal_actions())
    # python-chess lists every promotion piece; the engine generates queens only.
    expected = sum(1 for m in chess.Board(fen).legal_moves if m.promotion in (None, chess.QUEEN))
    if moves != expected:
        raise AssertionError(f"{label}: {moves} legal moves, python-chess has {expected}")

    start = time.monotonic()
    mm = minimax_search(position, depth)
    mm_ms = int((time.monotonic() - start) * 1000)

    start = time.monotonic()
    ab = alphabeta_search(position, depth)
    ab_ms = int((time.monotonic() - start) * 1000)

    if mm.value != ab.value:
        raise AssertionError(f"{label}: minimax {mm.value} != alphabeta {ab.value}")

    return {
        "label": label,
        "moves": moves,
        "candidates": len(ab.candidates),
        "value": ab.value,
        "mm_nodes": mm.stats.nodes,
        "ab_nodes": ab.stats.nodes,
        "mm_ms": mm_ms,
        "ab_ms": ab_ms,
    }


def main() -> None:
    """Run all benchmark positions and print a summary table."""
    depth = int(sys.argv[1]) if len(sys.argv) > 1 else 2
    print(f"chesscore benchmark, depth {depth}, {sys.executable}")
    print()
    print(
        f"{'Position':<13} {'Value':>7} {'Best':>4} "
        f"{'MM nodes':>9} {'AB nodes':>9} {'MM ms':>7} {'AB ms':>7}"
    )
    print("-" * 62)

    results = []
    for label, fen in POSITIONS:
        r = run_position(label, fen, depth)
        results.append(r)
        print(
            f"{r['label']:<13} {r['value']:>7.2f} {r['candidates']:>4} "
            f"{r['mm_nodes']:>9,} {r['ab_nodes']:>9,} {r['mm_ms']:>7,} {r['ab_ms']:>7,}"
        )

    mm_total = sum(r["mm_nodes"] for r in results)
    ab_total = sum(r["ab_nodes"] for r in results)
    print("-" * 62)
    print(f"{'TOTAL':<13} {'':>7} {'':>4} {mm_total:>9,} {ab_total:>9,}")
    if mm_total:
        print(f"\nAlpha-beta visited {100 * ab_total / mm_total:.1f}% of the minimax nodes.")


if __name__ == "__main__":
    main()
