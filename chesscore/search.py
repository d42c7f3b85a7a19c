"""
Fixed-depth adversarial search: plain minimax and alpha-beta pruning.

Both strategies score positions from FIRST's point of view (see evaluate.py):
FIRST maximizes, SECOND minimizes. Both explore by cloning, so the caller's
Position is never modified.

Plain minimax materializes the whole move tree as SearchNodes before folding
values bottom-up. That is wasteful, but the tree can be inspected, which is
what makes plain minimax useful as a reference for testing the pruned search.

Alpha-beta never builds a tree. It recurses over the lazy successor
generator, so a pruned branch is never even generated. For any position and
depth its value equals the plain minimax value; pruning only changes how much
work is done.

Root policy (shared by both strategies):
    Every root action whose value equals the optimum is collected. The set is
    reset whenever a strictly better value appears and extended on an exact
    tie. The returned action is drawn uniformly from that set with the
    caller's random generator, so a seeded ``random.Random`` makes the choice
    reproducible.

    Each root child is searched with a full (-inf, +inf) window. A narrowed
    window would let a child return a bound equal to the current best instead
    of its exact value, and the tied set could then pick up moves that are
    actually worse.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Iterable

from chesscore.datatypes import Action, Side
from chesscore.errors import NoLegalMoveError
from chesscore.evaluate import evaluate, terminal_score
from chesscore.position import Position

_log = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """
    Work counters filled in by one search call.

    Attributes:
        nodes:  Positions visited, root included.
        leaves: Positions scored statically (depth horizon or game over).
    """

    nodes: int = 0
    leaves: int = 0


@dataclass
class SearchNode:
    """
    One position in a materialized minimax tree.

    Attributes:
        position: Snapshot owned by this node.
        action:   The action that produced ``position`` from its parent (for
                  the root, the position's own ``last_action``).
        value:    Minimax value from FIRST's point of view.
        children: One node per legal action, in generation order. Empty at
                  the depth horizon and at checkmate/stalemate.
    """

    position: Position
    action: Action | None = None
    value: float = 0.0
    children: list["SearchNode"] = field(default_factory=list)

    def count_nodes(self) -> int:
        return 1 + sum(child.count_nodes() for child in self.children)

    def count_leaves(self) -> int:
        if not self.children:
            return 1
        return sum(child.count_leaves() for child in self.children)


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of a root search.

    Attributes:
        action:     The chosen action, sampled from ``candidates``.
        value:      Optimal value of the root position.
        candidates: Every root action achieving ``value``, in generation order.
        stats:      Work counters for the search.
    """

    action: Action
    value: float
    candidates: tuple[Action, ...]
    stats: SearchStats


def _is_maximizing(position: Position) -> bool:
    return position.turn is Side.FIRST


def _require_depth(depth: int) -> None:
    if depth < 1:
        raise ValueError(f"Search depth must be at least 1, got {depth}")


def _collect_best(scored: Iterable[tuple[Action, float]], maximizing: bool) -> tuple[list[Action], float]:
    """Tied-best actions and their value: reset on strict improvement, append on tie."""
    best_value: float | None = None
    best_actions: list[Action] = []
    for action, value in scored:
        improved = best_value is None or (value > best_value if maximizing else value < best_value)
        if improved:
            best_value = value
            best_actions = [action]
        elif value == best_value:
            best_actions.append(action)
    if best_value is None:
        raise NoLegalMoveError("Search requested for a position with no legal move")
    return best_actions, best_value


# ---------------------------------------------------------------------------
# Plain minimax
# ---------------------------------------------------------------------------


def build_search_tree(position: Position, depth: int, stats: SearchStats | None = None) -> SearchNode:
    """
    Materialize the full move tree below ``position`` and fold its values.

    Args:
        position: Root position. Not modified; the root node owns a copy.
        depth:    Plies to expand. 0 yields a single scored leaf.
        stats:    Optional counters to fill in.

    Returns:
        The root SearchNode, with every node's ``value`` filled in: the
        static score at leaves, the max (FIRST to move) or min (SECOND to
        move) of the children's values elsewhere.
    """
    if stats is None:
        stats = SearchStats()

    def build(node_position: Position, action: Action | None, remaining: int) -> SearchNode:
        stats.nodes += 1
        node = SearchNode(node_position, action)
        if remaining > 0:
            node.children = [
                build(child, child_action, remaining - 1)
                for child_action, child in node_position.successors()
            ]

        if node.children:
            values = [child.value for child in node.children]
            node.value = max(values) if _is_maximizing(node_position) else min(values)
        else:
            stats.leaves += 1
            # With depth left but no children, the game is over here.
            node.value = terminal_score(node_position) if remaining > 0 else evaluate(node_position)
        return node

    return build(position.copy(), position.last_action, depth)


def minimax(position: Position, depth: int, stats: SearchStats | None = None) -> float:
    """Plain minimax value of ``position`` searched ``depth`` plies deep."""
    return build_search_tree(position, depth, stats).value


def minimax_search(position: Position, depth: int, rng: random.Random | None = None) -> SearchResult:
    """
    Choose an action for the side to move by plain minimax.

    Args:
        position: Position to move from. Not modified.
        depth:    Plies to look ahead, at least 1.
        rng:      Source of randomness for the tie-break. Defaults to the
                  module-level generator.

    Returns:
        SearchResult with the sampled action, the root value and the full
        tied-best set.

    Raises:
        ValueError:       If depth is less than 1.
        NoLegalMoveError: If the side to move has no legal action.
    """
    _require_depth(depth)
    stats = SearchStats()
    tree = build_search_tree(position, depth, stats)
    candidates, value = _collect_best(
        ((child.action, child.value) for child in tree.children), _is_maximizing(position)
    )
    return _finish("minimax", position, depth, candidates, value, stats, rng)


def get_minimax_action(position: Position, depth: int, rng: random.Random | None = None) -> Action:
    return minimax_search(position, depth, rng).action


# ---------------------------------------------------------------------------
# Alpha-beta
# ---------------------------------------------------------------------------


def alphabeta(
    position: Position,
    depth: int,
    alpha: float = -math.inf,
    beta: float = math.inf,
    stats: SearchStats | None = None,
) -> float:
    """
    Minimax value of ``position`` with alpha-beta pruning.

    The window [alpha, beta] bounds the values that can still influence the
    caller. A maximizing node raises alpha as it finds better children and
    stops once alpha >= beta: the minimizing parent already has an
    alternative at least that good for it. A minimizing node lowers beta and
    stops once beta <= alpha.

    Called with the full (-inf, +inf) window the result is exact and equal to
    ``minimax(position, depth)``. With a narrower window a result outside it
    is only a bound.

    Args:
        position: Position to evaluate. Not modified.
        depth:    Remaining plies; 0 scores the position statically.
        alpha:    Best value FIRST is already guaranteed higher up the tree.
        beta:     Best value SECOND is already guaranteed higher up the tree.
        stats:    Optional counters to fill in.

    Returns:
        The value from FIRST's point of view.
    """
    if stats is None:
        stats = SearchStats()
    stats.nodes += 1

    if depth == 0:
        stats.leaves += 1
        return evaluate(position)

    maximizing = _is_maximizing(position)
    value = -math.inf if maximizing else math.inf
    expanded = False

    for _, child in position.successors():
        expanded = True
        score = alphabeta(child, depth - 1, alpha, beta, stats)
        if maximizing:
            value = max(value, score)
            alpha = max(alpha, value)
            if alpha >= beta:
                break
        else:
            value = min(value, score)
            beta = min(beta, value)
            if beta <= alpha:
                break

    if not expanded:
        stats.leaves += 1
        return terminal_score(position)
    return value


def alphabeta_search(position: Position, depth: int, rng: random.Random | None = None) -> SearchResult:
    """
    Choose an action for the side to move by alpha-beta search.

    Same contract as ``minimax_search``; the returned value is always equal
    to the plain minimax value, while the number of visited nodes is never
    larger.

    Raises:
        ValueError:       If depth is less than 1.
        NoLegalMoveError: If the side to move has no legal action.
    """
    _require_depth(depth)
    stats = SearchStats(nodes=1)
    scored = (
        (action, alphabeta(child, depth - 1, -math.inf, math.inf, stats))
        for action, child in position.successors()
    )
    candidates, value = _collect_best(scored, _is_maximizing(position))
    return _finish("alphabeta", position, depth, candidates, value, stats, rng)


def get_alphabeta_action(position: Position, depth: int, rng: random.Random | None = None) -> Action:
    return alphabeta_search(position, depth, rng).action


def _finish(
    strategy: str,
    position: Position,
    depth: int,
    candidates: list[Action],
    value: float,
    stats: SearchStats,
    rng: random.Random | None,
) -> SearchResult:
    action = (rng or random).choice(candidates)
    _log.debug(
        "%s depth=%d value=%s candidates=%d nodes=%d leaves=%d chose %s",
        strategy,
        depth,
        value,
        len(candidates),
        stats.nodes,
        stats.leaves,
        action,
    )
    return SearchResult(action=action, value=value, candidates=tuple(candidates), stats=stats)
