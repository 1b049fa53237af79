"""Move generation, attack detection and legality tests.

Perft reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from gitchess.core.enums import CastlingSide, Color, PieceType
from gitchess.core.move import Move
from gitchess.core.move_generator import MoveGenerator
from gitchess.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from gitchess.core.position import Position
from gitchess.core.types import (
    B1, C1, C3, D2, D3, D6, E1, E2, E3, E4, E5, E6, E7, E8, F1, G1, G8,
)


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth*."""
    if depth == 0:
        return 1
    moves = MoveGenerator(position).generate_legal_moves()
    if depth == 1:
        return len(moves)
    return sum(perft(position.apply_move(move), depth - 1) for move in moves)


def legal(fen: str, move: Move) -> bool:
    return MoveGenerator(position_from_fen(fen)).is_valid_move(move)


# ── Perft ────────────────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 1) == 20

    def test_depth_2(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 2) == 400

    def test_depth_3(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 3) == 8_902

    @pytest.mark.slow
    def test_depth_4(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 4) == 197_281


# Rich in tactics: castling, ep, promotions.
KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        assert perft(position_from_fen(KIWIPETE), 1) == 48

    def test_depth_2(self) -> None:
        assert perft(position_from_fen(KIWIPETE), 2) == 2_039

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        assert perft(position_from_fen(KIWIPETE), 3) == 97_862


# En-passant discovered checks along the rank.
POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


class TestPerftPos3:
    def test_depth_1(self) -> None:
        assert perft(position_from_fen(POS3), 1) == 14

    def test_depth_2(self) -> None:
        assert perft(position_from_fen(POS3), 2) == 191

    def test_depth_3(self) -> None:
        assert perft(position_from_fen(POS3), 3) == 2_812


# Many promotions, castling rights lost to captures.
POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"


class TestPerftPos4:
    def test_depth_1(self) -> None:
        assert perft(position_from_fen(POS4), 1) == 6

    def test_depth_2(self) -> None:
        assert perft(position_from_fen(POS4), 2) == 264

    def test_depth_3(self) -> None:
        assert perft(position_from_fen(POS4), 3) == 9_467


POS5 = "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8"


class TestPerftPos5:
    def test_depth_1(self) -> None:
        assert perft(position_from_fen(POS5), 1) == 44

    def test_depth_2(self) -> None:
        assert perft(position_from_fen(POS5), 2) == 1_486

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        assert perft(position_from_fen(POS5), 3) == 62_379


# ── Attack detection ─────────────────────────────────────────────────────────


class TestAttacks:
    def test_pawn_and_knight_cover_third_rank(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.is_square_attacked(E3, Color.WHITE)
        assert not gen.is_square_attacked(E4, Color.WHITE)
        assert gen.is_square_attacked(E6, Color.BLACK)

    def test_king_attacks_only_adjacent_squares(self) -> None:
        gen = MoveGenerator(position_from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1"))
        assert gen.is_square_attacked(F1, Color.WHITE)
        assert not gen.is_square_attacked(G1, Color.WHITE)
        assert not gen.is_square_attacked(C1, Color.WHITE)

    def test_slider_blocked_by_piece(self) -> None:
        gen = MoveGenerator(position_from_fen("4k3/4p3/8/8/8/8/8/4RK2 w - - 0 1"))
        assert gen.is_square_attacked(E7, Color.WHITE)
        assert not gen.is_square_attacked(E8, Color.WHITE)

    def test_missing_king_is_never_in_check(self) -> None:
        gen = MoveGenerator(position_from_fen("8/8/8/8/8/8/8/4K2r w - - 0 1"))
        assert not gen.is_in_check(Color.BLACK)
        assert gen.is_in_check(Color.WHITE)


# ── Legality ─────────────────────────────────────────────────────────────────

CASTLING_FEN = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1"
KINGSIDE = Move(E1, G1, PieceType.KING, castling=CastlingSide.KINGSIDE)
QUEENSIDE = Move(E1, C1, PieceType.KING, castling=CastlingSide.QUEENSIDE)


class TestCastling:
    def test_both_sides_legal(self) -> None:
        assert legal(CASTLING_FEN, KINGSIDE)
        assert legal(CASTLING_FEN, QUEENSIDE)

    def test_flag_is_optional(self) -> None:
        assert legal(CASTLING_FEN, Move(E1, G1, PieceType.KING))

    def test_blocked_by_pieces(self) -> None:
        assert not legal(STARTING_FEN, KINGSIDE)

    def test_requires_rights(self) -> None:
        assert not legal("r3k2r/8/8/8/8/8/8/R3K2R w - - 0 1", KINGSIDE)
        assert not legal("r3k2r/8/8/8/8/8/8/R3K2R w Q - 0 1", KINGSIDE)
        assert legal("r3k2r/8/8/8/8/8/8/R3K2R w Q - 0 1", QUEENSIDE)

    def test_not_out_of_check(self) -> None:
        fen = "r3k2r/8/8/8/8/8/4r3/R3K2R w KQkq - 0 1"
        assert not legal(fen, KINGSIDE)
        assert not legal(fen, QUEENSIDE)

    def test_not_through_attacked_square(self) -> None:
        fen = "r3k2r/8/8/8/8/8/5r2/R3K2R w KQkq - 0 1"
        assert not legal(fen, KINGSIDE)
        assert legal(fen, QUEENSIDE)

    def test_not_onto_attacked_square(self) -> None:
        assert not legal("r3k2r/8/8/8/8/8/6r1/R3K2R w KQkq - 0 1", KINGSIDE)

    def test_attacked_rook_path_square_is_fine(self) -> None:
        # b1 is attacked, but the king never crosses it.
        assert legal("r3k2r/8/8/8/8/8/1r6/R3K2R w KQkq - 0 1", QUEENSIDE)

    def test_requires_rook_on_corner(self) -> None:
        assert not legal("r3k2r/8/8/8/8/8/8/R3K3 w KQkq - 0 1", KINGSIDE)

    def test_black_castles(self) -> None:
        fen = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R b KQkq - 0 1"
        assert legal(fen, Move(E8, G8, PieceType.KING))

    def test_generated_only_when_legal(self) -> None:
        gen = MoveGenerator(position_from_fen("r3k2r/8/8/8/8/8/5r2/R3K2R w KQkq - 0 1"))
        castles = [m for m in gen.generate_legal_moves() if m.castling is not None]
        assert castles == [QUEENSIDE]


class TestIsValidMove:
    def test_starting_position_has_twenty_moves(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert len(gen.generate_legal_moves()) == 20

    def test_pawn_moves(self) -> None:
        assert legal(STARTING_FEN, Move(E2, E4, PieceType.PAWN))
        assert legal(STARTING_FEN, Move(E2, E3, PieceType.PAWN))
        assert not legal(STARTING_FEN, Move(E2, E5, PieceType.PAWN))
        assert not legal(STARTING_FEN, Move(E2, D3, PieceType.PAWN))

    def test_knight_move(self) -> None:
        assert legal(STARTING_FEN, Move(B1, C3, PieceType.KNIGHT))
        assert not legal(STARTING_FEN, Move(B1, D2, PieceType.KNIGHT))

    def test_wrong_side_to_move(self) -> None:
        assert not legal(STARTING_FEN, Move(E7, E5, PieceType.PAWN))

    def test_empty_source_square(self) -> None:
        assert not legal(STARTING_FEN, Move(E4, E5, PieceType.PAWN))

    def test_declared_piece_must_match(self) -> None:
        assert not legal(STARTING_FEN, Move(E2, E4, PieceType.QUEEN))

    def test_pinned_piece_cannot_leave_line(self) -> None:
        fen = "4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1"
        assert not legal(fen, Move(E2, D3, PieceType.BISHOP))

    def test_king_cannot_step_into_check(self) -> None:
        fen = "4k3/8/8/8/8/8/3r4/4K3 w - - 0 1"
        assert not legal(fen, Move(E1, E2, PieceType.KING))
        assert legal(fen, Move(E1, D2, PieceType.KING, captured=PieceType.ROOK))

    def test_en_passant_capture(self) -> None:
        fen = "rnbqkbnr/ppp1pppp/8/3pP3/8/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 3"
        assert legal(fen, Move(E5, D6, PieceType.PAWN, captured=PieceType.PAWN, en_passant=True))
        assert legal(fen, Move(E5, D6, PieceType.PAWN))

    def test_en_passant_flag_must_fit(self) -> None:
        assert not legal(STARTING_FEN, Move(E2, E3, PieceType.PAWN, en_passant=True))

    def test_promotion_required_on_last_rank(self) -> None:
        fen = "8/4P3/8/8/8/8/k7/4K3 w - - 0 1"
        assert not legal(fen, Move(E7, E8, PieceType.PAWN))
        assert not legal(fen, Move(E7, E8, PieceType.PAWN, promotion=PieceType.KING))
        assert legal(fen, Move(E7, E8, PieceType.PAWN, promotion=PieceType.ROOK))

    def test_promotion_only_on_last_rank(self) -> None:
        assert not legal(STARTING_FEN, Move(E2, E4, PieceType.PAWN, promotion=PieceType.QUEEN))

    def test_four_promotion_choices_generated(self) -> None:
        gen = MoveGenerator(position_from_fen("8/4P3/8/8/8/8/k7/4K3 w - - 0 1"))
        promos = {m.promotion for m in gen.generate_legal_moves() if m.from_sq == E7}
        assert promos == {PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT}

    def test_queries_do_not_mutate(self) -> None:
        pos = position_from_fen(KIWIPETE)
        gen = MoveGenerator(pos)
        first = gen.generate_legal_moves()
        second = gen.generate_legal_moves()
        assert first == second
        assert position_to_fen(pos) == KIWIPETE


class TestResolveMove:
    def test_plain_move(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.resolve_move(E2, E4) == Move(E2, E4, PieceType.PAWN)

    def test_empty_square_gives_none(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.resolve_move(E4, E5) is None

    def test_en_passant_flags(self) -> None:
        gen = MoveGenerator(
            position_from_fen("rnbqkbnr/ppp1pppp/8/3pP3/8/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 3")
        )
        move = gen.resolve_move(E5, D6)
        assert move is not None
        assert move.en_passant
        assert move.captured == PieceType.PAWN
        assert move.is_capture
        assert not gen.resolve_move(D2, D3).is_capture  # type: ignore[union-attr]

    def test_castling_flag(self) -> None:
        gen = MoveGenerator(position_from_fen(CASTLING_FEN))
        assert gen.resolve_move(E1, C1) == QUEENSIDE
        black = gen.resolve_move(E8, G8)
        assert black is not None and black.castling == CastlingSide.KINGSIDE

