"""Squares as plain integers.

Index = rank * 8 + file, so a1 is 0, h1 is 7, a2 is 8 and h8 is 63.
Sorting squares numerically orders them by rank first, then by file.
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = int

FILES = "abcdefgh"
RANKS = "12345678"


def file_of(sq: Square) -> int:
    return sq % 8


def rank_of(sq: Square) -> int:
    return sq // 8


def make_square(file: int, rank: int) -> Square:
    return rank * 8 + file


def is_on_board(file: int, rank: int) -> bool:
    """True when both indices are in 0..7. Nothing wraps around an edge."""
    return 0 <= file < 8 and 0 <= rank < 8


def offset_square(sq: Square, df: int, dr: int) -> Square | None:
    """*sq* shifted by *df* files and *dr* ranks, or ``None`` off the edge."""
    file, rank = file_of(sq) + df, rank_of(sq) + dr
    return make_square(file, rank) if is_on_board(file, rank) else None


def square_name(sq: Square) -> str:
    """``0`` → ``"a1"``."""
    return f"{FILES[file_of(sq)]}{RANKS[rank_of(sq)]}"


def parse_square(name: str) -> Square:
    """``"e4"`` → ``28``; raises ``ValueError`` for anything else."""
    if len(name) != 2 or name[0] not in FILES or name[1] not in RANKS:
        raise ValueError(f"Invalid square name: {name!r}")
    return make_square(FILES.index(name[0]), RANKS.index(name[1]))


def is_valid_square(sq: int) -> bool:
    return 0 <= sq < 64


def square_parity(sq: Square) -> int:
    """0 for dark squares (a1 is dark), 1 for light ones."""
    return (file_of(sq) + rank_of(sq)) % 2


# fmt: off
A1, B1, C1, D1, E1, F1, G1, H1 = range(0, 8)
A2, B2, C2, D2, E2, F2, G2, H2 = range(8, 16)
A3, B3, C3, D3, E3, F3, G3, H3 = range(16, 24)
A4, B4, C4, D4, E4, F4, G4, H4 = range(24, 32)
A5, B5, C5, D5, E5, F5, G5, H5 = range(32, 40)
A6, B6, C6, D6, E6, F6, G6, H6 = range(40, 48)
A7, B7, C7, D7, E7, F7, G7, H7 = range(48, 56)
A8, B8, C8, D8, E8, F8, G8, H8 = range(56, 64)
# fmt: on
