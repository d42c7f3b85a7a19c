"""
Chess rules and fixed-depth search package.

This package implements a complete two-player chess position model (check,
castling, en passant, promotion, checkmate and stalemate) and a fixed-depth
adversarial search over it, with plain minimax and alpha-beta pruning.

Modules:
    datatypes — Squares, pieces, sides and actions (immutable values)
    constants — Board geometry, piece values, and search parameters
    errors    — Move, notation, layout and search exceptions
    notation  — Square and move text encoding/decoding
    legality  — Piece geometry, path blocking, attacks and special moves
    position  — Board grid, turn, history; move validation and generation
    evaluate  — Leaf scoring (material, checkmate, stalemate)
    search    — Plain minimax (materialized tree) and alpha-beta search
    players   — Human / random / minimax / alpha-beta player selector
    config    — Pydantic game and player configuration models
"""
