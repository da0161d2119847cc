"""Game logic: board, pieces, and round controller."""

from clonetris.game.board import Board
from clonetris.game.pieces import (
    KICK_TABLE_I,
    KICK_TABLE_JLSTZ,
    KICK_TABLE_O,
    Piece,
    PieceKind,
    PieceState,
    random_piece,
)
from clonetris.game.tetris import Command, GameSnapshot, TetrisGame, TickOutcome

__all__ = [
    "Board",
    "Piece",
    "PieceKind",
    "PieceState",
    "KICK_TABLE_JLSTZ",
    "KICK_TABLE_O",
    "KICK_TABLE_I",
    "random_piece",
    "Command",
    "GameSnapshot",
    "TetrisGame",
    "TickOutcome",
]
