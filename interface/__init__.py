"""
Interface package: text drivers that put a user (or a GUI) in front of chesscore.

Modules:
    uci — UCI protocol handler for chess GUIs and match runners.
          Protocol on stdout, diagnostics on stderr.
          Entry point: chesscore-uci (or python interface/uci.py)
    cli — Terminal game between any two configured players.
          Entry point: chesscore-play (or python -m interface.cli --help)
"""
