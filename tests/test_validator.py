import unittest

from xword.core.exceptions import ValidationError
from xword.data.lexicon import Lexicon
from xword.engine.grid import Grid
from xword.engine.validator import GridValidator


WORDS = ["ab", "cd", "ac", "bd"]


def filled_square() -> Grid:
    return Grid.from_layout(["AB", "CD"])


class GridValidatorTests(unittest.TestCase):
    def test_structure_of_fresh_grid_is_valid(self) -> None:
        result = GridValidator().validate(Grid.empty(5))
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])

    def test_valid_fill_passes_word_check(self) -> None:
        validator = GridValidator(Lexicon.from_words(WORDS), require_words=True)
        self.assertTrue(validator.validate(filled_square()).ok)

    def test_asymmetric_blocks_are_reported(self) -> None:
        grid = Grid.empty(3)
        grid.cell(0, 0).filled = True
        result = GridValidator().validate(grid)
        self.assertFalse(result.ok)
        self.assertIn("mirror", result.messages[0])

    def test_numbered_block_is_reported(self) -> None:
        grid = Grid.empty(3)
        grid.cell(1, 1).filled = True
        grid.cell(1, 1).number = 7
        with self.assertRaises(ValidationError):
            GridValidator().check(grid)

    def test_clue_over_block_is_reported(self) -> None:
        grid = Grid.empty(3)
        grid.cell(0, 1).filled = True
        grid.cell(2, 1).filled = True
        with self.assertRaises(ValidationError):
            GridValidator().check(grid)

    def test_multi_character_value_is_reported(self) -> None:
        grid = Grid.empty(2)
        grid.cell(0, 0).value = "AB"
        result = GridValidator().validate(grid)
        self.assertFalse(result.ok)
        self.assertIn("Invalid letter", result.messages[0])

    def test_unknown_bigram_is_reported(self) -> None:
        grid = Grid.from_layout(["BA", ".."])
        result = GridValidator(Lexicon.from_words(WORDS)).validate(grid)
        self.assertFalse(result.ok)
        self.assertIn("'BA'", result.messages[0])

    def test_partial_fill_skips_incomplete_pairs(self) -> None:
        grid = Grid.from_layout(["A.", ".D"])
        self.assertTrue(GridValidator(Lexicon.from_words(WORDS), require_words=True).validate(grid).ok)

    def test_non_word_is_reported_only_when_required(self) -> None:
        grid = Grid.from_layout(["AB", "CD"])
        lexicon = Lexicon.from_words(["abd", "cd", "ac", "bd"])
        self.assertTrue(GridValidator(lexicon).validate(grid).ok)
        result = GridValidator(lexicon, require_words=True).validate(grid)
        self.assertFalse(result.ok)
        self.assertIn("'AB'", result.messages[0])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
