# -*-  coding: utf-8 -*-
"""
Set of test for the board state model and the tile spawner.
"""
from unittest import TestCase, main

import numpy as np
from numpy.random import default_rng

from slidemerge.core.config import TILE_SPAWN_PROBS, ConfigurationError, GameConfiguration, validate_board_size
from slidemerge.core.gameboard import add_block, fill_cells, new_state
from slidemerge.core.state import BoardState, boards_equal, empty_board


class TestBoardState(TestCase):
    """
    Test for the BoardState value type.
    """

    def test_empty_board(self):
        """Empty board has the requested shape and no tile."""
        board = empty_board(5)
        self.assertEqual(board.shape, (5, 5))
        self.assertEqual(np.count_nonzero(board), 0)

    def test_state_copies_board(self):
        """Mutating the source array does not affect the state."""
        board = np.array([[2, 0], [0, 0]])
        state = BoardState(board=board)
        board[0, 0] = 4

        self.assertEqual(state.board[0, 0], 2)

    def test_state_is_read_only(self):
        """The board of a state cannot be written."""
        state = BoardState(board=np.zeros((4, 4), dtype=np.int64))
        with self.assertRaises(ValueError):
            state.board[0, 0] = 2

    def test_invalid_boards_rejected(self):
        """Non power of two, negative and non-square boards are refused."""
        with self.assertRaises(ValueError):
            BoardState(board=np.array([[3, 0], [0, 0]]))
        with self.assertRaises(ValueError):
            BoardState(board=np.array([[-2, 0], [0, 0]]))
        with self.assertRaises(ValueError):
            BoardState(board=np.zeros((2, 3), dtype=np.int64))
        with self.assertRaises(ValueError):
            BoardState(board=np.zeros((4, 4), dtype=np.int64), score=-1)

    def test_non_integer_boards_rejected(self):
        """Fractional and boolean cells are refused rather than truncated."""
        with self.assertRaises(ValueError):
            BoardState(board=np.array([[2.5, 0], [0, 0]]))
        with self.assertRaises(ValueError):
            BoardState(board=np.array([[True, False], [False, False]]))

        # ##>: Whole floats are accepted and stored as integers.
        state = BoardState(board=np.array([[2.0, 0.0], [0.0, 4.0]]))
        self.assertEqual(state.board.dtype, np.int64)
        self.assertEqual(state.max_tile, 4)

    def test_equality(self):
        """States are equal when board, score and session start are equal."""
        board = np.array([[2, 4], [0, 8]])
        state = BoardState(board=board, score=12, session_start=3.0)

        self.assertEqual(state, BoardState(board=board.copy(), score=12, session_start=3.0))
        self.assertNotEqual(state, BoardState(board=board, score=8, session_start=3.0))
        self.assertNotEqual(state, BoardState(board=board, score=12, session_start=4.0))
        self.assertNotEqual(state, state.with_board(np.array([[2, 4], [8, 0]])))

    def test_boards_equal(self):
        """Structural equality of boards."""
        self.assertTrue(boards_equal(np.array([[2, 0], [0, 0]]), np.array([[2, 0], [0, 0]])))
        self.assertFalse(boards_equal(np.array([[2, 0], [0, 0]]), np.array([[0, 2], [0, 0]])))
        self.assertFalse(boards_equal(empty_board(3), empty_board(4)))

    def test_properties(self):
        """Size, max tile and empty cells are derived from the board."""
        state = BoardState(board=np.array([[2, 0, 0], [0, 64, 0], [0, 0, 4]]))

        self.assertEqual(state.size, 3)
        self.assertEqual(state.max_tile, 64)
        self.assertEqual(state.empty_cells, 6)


class TestNewGame(TestCase):
    """
    Test for the creation of a fresh game.
    """

    def test_new_state(self):
        """A new game has two tiles of 2 or 4, a zero score and the given start."""
        state = new_state(size=4, rng=default_rng(42), now=123.0)

        self.assertEqual(np.count_nonzero(state.board), 2)
        self.assertTrue(np.all(np.isin(state.board[state.board != 0], [2, 4])))
        self.assertEqual(state.score, 0)
        self.assertEqual(state.session_start, 123.0)

    def test_new_state_reproducible(self):
        """Same seed produces identical initial boards."""
        first = new_state(rng=default_rng(7), now=0.0)
        second = new_state(rng=default_rng(7), now=0.0)

        self.assertEqual(first, second)

    def test_configuration_sizes(self):
        """Only supported sizes are accepted, once, at configuration time."""
        for size in (3, 4, 5):
            self.assertEqual(validate_board_size(size), size)
            self.assertEqual(GameConfiguration(size=size).size, size)

        for size in (2, 6, 0, -4, True, 4.0):
            with self.assertRaises(ConfigurationError):
                validate_board_size(size)

    def test_configuration_errors(self):
        """Invalid win tile or undo depth are refused."""
        with self.assertRaises(ConfigurationError):
            GameConfiguration(win_tile=1000)
        with self.assertRaises(ConfigurationError):
            GameConfiguration(win_tile=2)
        with self.assertRaises(ConfigurationError):
            GameConfiguration(undo_depth=0)

        # ##>: ConfigurationError is also a ValueError.
        with self.assertRaises(ValueError):
            GameConfiguration(size=7)


class TestSpawner(TestCase):
    """
    Test for random tile placement.
    """

    def test_add_block_single_empty_cell(self):
        """With one empty cell, exactly one tile is placed there and the board becomes full."""
        board = np.array([[2, 4, 8, 16], [32, 64, 128, 0], [256, 512, 1024, 2048], [4096, 8192, 16384, 32768]])
        state = BoardState(board=board, score=40)

        result = add_block(state, rng=default_rng(0))

        self.assertIn(result.board[1, 3], (2, 4))
        self.assertEqual(result.empty_cells, 0)
        self.assertEqual(result.score, 40)

        # ##>: Only the empty cell changed.
        mask = np.ones_like(board, dtype=bool)
        mask[1, 3] = False
        np.testing.assert_array_equal(result.board[mask], board[mask])

    def test_add_block_full_board_is_noop(self):
        """A full board is returned unchanged without error."""
        board = np.array([[2, 4], [8, 16]])
        state = BoardState(board=board)

        self.assertEqual(add_block(state), state)

    def test_add_block_does_not_mutate(self):
        """The input state keeps its board."""
        state = BoardState(board=np.zeros((4, 4), dtype=np.int64))
        result = add_block(state, rng=default_rng(1))

        self.assertEqual(np.count_nonzero(state.board), 0)
        self.assertEqual(np.count_nonzero(result.board), 1)

    def test_add_block_reproducible(self):
        """Same seed, same sequence of spawned tiles."""
        first_rng, second_rng = default_rng(3), default_rng(3)
        first = second = BoardState(board=np.zeros((4, 4), dtype=np.int64))
        for _ in range(10):
            first = add_block(first, rng=first_rng)
            second = add_block(second, rng=second_rng)

        self.assertEqual(first, second)

    def test_fill_cells_caps_to_available(self):
        """Requesting more tiles than empty cells fills every empty cell."""
        board = np.array([[2, 0], [0, 4]])
        fill_cells(board, number_tile=5, rng=default_rng(0))

        self.assertEqual(np.count_nonzero(board), 4)

    def test_tile_spawn_distribution(self):
        """Tile values follow the 90/10 distribution for 2 vs 4."""
        rng = default_rng(2024)
        empty = BoardState(board=np.zeros((4, 4), dtype=np.int64))
        counts = {2: 0, 4: 0}
        samples = 2000

        for _ in range(samples):
            state = add_block(empty, rng=rng)
            counts[int(state.board.max())] += 1

        self.assertAlmostEqual(counts[2] / samples, TILE_SPAWN_PROBS[2], delta=0.03)
        self.assertAlmostEqual(counts[4] / samples, TILE_SPAWN_PROBS[4], delta=0.03)

    def test_spawn_position_uniform(self):
        """Every empty cell gets picked."""
        rng = default_rng(11)
        empty = BoardState(board=np.zeros((3, 3), dtype=np.int64))
        seen = set()

        for _ in range(500):
            state = add_block(empty, rng=rng)
            seen.add(tuple(np.argwhere(state.board != 0)[0]))

        self.assertEqual(len(seen), 9)


if __name__ == "__main__":
    main()
