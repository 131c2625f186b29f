import unittest

from xword.core.constants import Direction
from xword.data.lexicon import Lexicon
from xword.engine.grid import Grid
from xword.engine.solver import apply_solution, solve_grid
from xword.engine.validator import GridValidator


class SolveGridTests(unittest.TestCase):
    def test_word_square_is_solved_and_validates(self) -> None:
        grid = Grid.empty(2)
        lexicon = Lexicon.from_words(["ab", "cd", "ac", "bd"])
        solution = solve_grid(grid, lexicon, timeout=10.0, num_workers=1)
        self.assertIsNotNone(solution)
        self.assertEqual(grid.filled_count(), 0)

        apply_solution(grid, solution)
        self.assertTrue(grid.is_complete())
        self.assertIn(grid.clue_value(grid.clues.find(Direction.ACROSS, 1)), {"AB", "AC"})
        self.assertTrue(all(cell.autocompleted for row in grid.cells for cell in row))
        self.assertTrue(GridValidator(lexicon, require_words=True).validate(grid).ok)

    def test_placed_letters_are_honoured(self) -> None:
        grid = Grid.empty(3)
        grid.edit_cell(0, 0, "c")
        lexicon = Lexicon.from_words(["cat", "ace", "tea", "cat", "ate", "ten", "cab", "aha"])
        solution = solve_grid(grid, lexicon, timeout=10.0, num_workers=1)
        if solution is not None:
            words = {(clue.direction, clue.number): word for clue, word in solution}
            self.assertTrue(words[(Direction.ACROSS, 1)].startswith("C"))
            self.assertTrue(words[(Direction.DOWN, 1)].startswith("C"))

    def test_infeasible_grid_returns_none(self) -> None:
        grid = Grid.empty(2)
        self.assertIsNone(solve_grid(grid, Lexicon.from_words(["ab", "cd"]), timeout=10.0, num_workers=1))

    def test_missing_length_returns_none(self) -> None:
        self.assertIsNone(solve_grid(Grid.empty(3), Lexicon.from_words(["ab"]), timeout=5.0, num_workers=1))

    def test_grid_without_clues_is_trivially_solved(self) -> None:
        self.assertEqual(solve_grid(Grid.from_layout(["#"]), Lexicon.from_words(["ab"])), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
