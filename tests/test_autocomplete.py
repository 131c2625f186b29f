import random
import unittest

from xword.core.constants import Direction, FillStatus
from xword.core.exceptions import InfeasibleGridError
from xword.data.lexicon import Lexicon
from xword.engine.autocomplete import AutocompleteEngine
from xword.engine.grid import Grid
from xword.engine.validator import GridValidator


def snapshot(grid):
    return [[(cell.value, cell.autocompleted) for cell in row] for row in grid.cells]


def clear(grid, clue):
    for cell in grid.clue_cells(clue):
        cell.value = ""
        cell.autocompleted = False


class MostConstrainedClueTests(unittest.TestCase):
    def test_empty_grid_returns_first_across_clue(self) -> None:
        grid = Grid.empty(3)
        engine = AutocompleteEngine(grid, Lexicon.from_words(["cat", "car", "ace"]))
        clue = engine.most_constrained_clue()
        self.assertEqual((clue.direction, clue.number), (Direction.ACROSS, 1))
        self.assertEqual(clue.length, 3)

    def test_highest_ratio_wins(self) -> None:
        grid = Grid.empty(3)
        grid.edit_cell(1, 1, "a")
        grid.edit_cell(2, 1, "b")
        engine = AutocompleteEngine(grid, Lexicon.from_words(["cat"]))
        clue = engine.most_constrained_clue()
        self.assertEqual((clue.direction, clue.number), (Direction.DOWN, 2))

    def test_ties_prefer_across_then_lower_number(self) -> None:
        grid = Grid.empty(3)
        grid.edit_cell(2, 2, "z")
        engine = AutocompleteEngine(grid, Lexicon.from_words(["cat"]))
        clue = engine.most_constrained_clue()
        self.assertEqual((clue.direction, clue.number), (Direction.ACROSS, 5))

    def test_full_grid_has_no_clue_left(self) -> None:
        grid = Grid.from_layout(["AB", "CD"])
        engine = AutocompleteEngine(grid, Lexicon.from_words(["ab"]))
        self.assertIsNone(engine.most_constrained_clue())
        self.assertEqual(engine.step(), FillStatus.COMPLETED)


class FindCandidateTests(unittest.TestCase):
    def test_fills_empty_clue_with_word_of_matching_length(self) -> None:
        grid = Grid.empty(3)
        words = {"CAT", "CAR", "ACE"}
        engine = AutocompleteEngine(grid, Lexicon.from_words(words), rng=random.Random(3))
        clue = engine.most_constrained_clue()
        word = engine.find_candidate(clue)
        self.assertIn(word, words)
        self.assertEqual(grid.clue_value(clue), word)
        self.assertTrue(all(cell.autocompleted for cell in grid.clue_cells(clue)))
        self.assertFalse(clue.impossible)

    def test_respects_placed_letters(self) -> None:
        grid = Grid.empty(3)
        grid.edit_cell(0, 0, "c")
        grid.edit_cell(0, 2, "r")
        engine = AutocompleteEngine(grid, Lexicon.from_words(["cat", "car", "ace"]))
        clue = grid.clues.find(Direction.ACROSS, 1)
        for _ in range(5):
            self.assertEqual(engine.find_candidate(clue), "CAR")

    def test_whole_clue_flagged_autocompleted(self) -> None:
        grid = Grid.empty(3)
        grid.edit_cell(1, 0, "a")
        engine = AutocompleteEngine(grid, Lexicon.from_words(["ace"]))
        clue = grid.clues.find(Direction.ACROSS, 4)
        self.assertEqual(engine.find_candidate(clue), "ACE")
        self.assertTrue(all(cell.autocompleted for cell in grid.clue_cells(clue)))
        self.assertTrue(grid.is_clue_autocompleted(clue))

    def test_bigram_pruning_uses_crossing_neighbours(self) -> None:
        grid = Grid.empty(3)
        grid.edit_cell(0, 1, "a")
        engine = AutocompleteEngine(grid, Lexicon.from_words(["exe", "ace"]))
        clue = grid.clues.find(Direction.ACROSS, 4)
        for seed in range(5):
            engine.rng = random.Random(seed)
            clear(grid, clue)
            self.assertEqual(engine.find_candidate(clue), "ACE")

    def test_bigram_after_crossing_puts_neighbour_first(self) -> None:
        grid = Grid.empty(2)
        grid.edit_cell(1, 0, "b")
        clue = grid.clues.find(Direction.ACROSS, 1)
        # B sits below the first letter, so the pair checked is B + letter.
        engine = AutocompleteEngine(grid, Lexicon.from_words(["ab"]))
        self.assertIsNone(engine.find_candidate(clue))
        self.assertTrue(clue.impossible)

        engine = AutocompleteEngine(grid, Lexicon.from_words(["ab", "ba"]))
        for seed in range(4):
            engine.rng = random.Random(seed)
            clear(grid, clue)
            self.assertEqual(engine.find_candidate(clue), "AB")

    def test_fill_keeps_every_crossing_bigram_known(self) -> None:
        grid = Grid.empty(3)
        lexicon = Lexicon.from_words(["cat", "ape", "tea", "cot", "are", "tee", "ace", "pat"])
        engine = AutocompleteEngine(grid, lexicon, rng=random.Random(11))
        grid.edit_cell(0, 0, "c")
        grid.edit_cell(2, 2, "e")
        clue = grid.clues.find(Direction.ACROSS, 4)
        word = engine.find_candidate(clue)
        self.assertIsNotNone(word)
        for position, coord in enumerate(clue.cells):
            down = grid.clues_for_cell(*coord)[Direction.DOWN]
            index = down.index_of(coord)
            before = grid.cell(*down.cells[index - 1]).value if index > 0 else ""
            after = grid.cell(*down.cells[index + 1]).value if index + 1 < down.length else ""
            if before:
                self.assertTrue(lexicon.is_valid_bigram(before + word[position]))
            if after:
                self.assertTrue(lexicon.is_valid_bigram(after + word[position]))

    def test_mutually_exclusive_crossing_fails_without_mutation(self) -> None:
        grid = Grid.empty(3)
        grid.edit_cell(0, 1, "a")
        grid.edit_cell(1, 0, "o")
        engine = AutocompleteEngine(grid, Lexicon.from_words(["cat", "dog"]))
        before = snapshot(grid)

        across = grid.clues.find(Direction.ACROSS, 1)
        down = grid.clues.find(Direction.DOWN, 1)
        self.assertIsNone(engine.find_candidate(across))
        self.assertTrue(across.impossible)
        self.assertIsNone(engine.find_candidate(down))
        self.assertTrue(down.impossible)
        self.assertEqual(snapshot(grid), before)

    def test_no_words_of_length(self) -> None:
        grid = Grid.empty(4)
        engine = AutocompleteEngine(grid, Lexicon.from_words(["cat"]))
        clue = engine.most_constrained_clue()
        self.assertIsNone(engine.find_candidate(clue))
        self.assertTrue(clue.impossible)

    def test_resume_after_and_stop_at_walk_pool_circularly(self) -> None:
        grid = Grid.from_layout(["..."])
        engine = AutocompleteEngine(grid, Lexicon.from_words(["aaa", "bbb", "ccc", "ddd"]))
        clue = grid.clues.find(Direction.ACROSS, 1)

        self.assertEqual(engine.find_candidate(clue, resume_after="BBB"), "CCC")
        clear(grid, clue)
        self.assertEqual(engine.find_candidate(clue, resume_after="DDD", stop_at="BBB"), "AAA")
        clear(grid, clue)
        self.assertIsNone(engine.find_candidate(clue, resume_after="AAA", stop_at="BBB"))
        self.assertTrue(clue.impossible)
        self.assertEqual(grid.clue_value(clue), "")

    def test_success_clears_impossible_flag(self) -> None:
        grid = Grid.from_layout(["..."])
        engine = AutocompleteEngine(grid, Lexicon.from_words(["aaa"]))
        clue = grid.clues.find(Direction.ACROSS, 1)
        clue.impossible = True
        self.assertEqual(engine.autocomplete_clue(clue), "AAA")
        self.assertFalse(clue.impossible)


class StepTests(unittest.TestCase):
    def test_step_records_blanks_and_attempts(self) -> None:
        grid = Grid.empty(3)
        grid.edit_cell(0, 0, "c")
        engine = AutocompleteEngine(grid, Lexicon.from_words(["cat"]))
        self.assertEqual(engine.step(), FillStatus.IN_PROGRESS)
        self.assertEqual(len(engine.steps), 1)
        step = engine.steps[0]
        self.assertEqual((step.clue.direction, step.clue.number), (Direction.ACROSS, 1))
        self.assertEqual(step.blanks, [(0, 1), (0, 2)])
        self.assertEqual((step.first_attempt, step.last_attempt), ("CAT", "CAT"))

    def test_unwind_with_empty_stack_is_infeasible(self) -> None:
        engine = AutocompleteEngine(Grid.empty(2), Lexicon.from_words(["ab"]))
        with self.assertRaises(InfeasibleGridError):
            engine.unwind()

    def test_unwind_clears_blanks_and_tries_next_word(self) -> None:
        grid = Grid.from_layout(["..."])
        engine = AutocompleteEngine(grid, Lexicon.from_words(["aaa", "bbb"]), rng=random.Random(0))
        engine.step()
        first = engine.steps[0].first_attempt
        replacement = engine.unwind()
        self.assertNotEqual(replacement, first)
        self.assertEqual(grid.clue_value(engine.steps[0].clue), replacement)
        self.assertEqual(engine.steps[0].last_attempt, replacement)
        with self.assertRaises(InfeasibleGridError):
            engine.unwind()
        self.assertEqual(engine.steps, [])
        self.assertEqual(grid.clue_value(grid.clues.across[0]), "")

    def test_word_square_fill_completes(self) -> None:
        grid = Grid.empty(2)
        lexicon = Lexicon.from_words(["ab", "cd", "ac", "bd"])
        for seed in range(6):
            grid.reset_text()
            engine = AutocompleteEngine(grid, lexicon, rng=random.Random(seed))
            status = FillStatus.IN_PROGRESS
            for _ in range(200):
                status = engine.step()
                if status != FillStatus.IN_PROGRESS:
                    break
            self.assertEqual(status, FillStatus.COMPLETED)
            self.assertTrue(grid.is_complete())
            self.assertTrue(GridValidator(lexicon, require_words=True).validate(grid).ok)

    def test_infeasible_grid_terminates(self) -> None:
        grid = Grid.empty(2)
        engine = AutocompleteEngine(grid, Lexicon.from_words(["ab", "cd"]), rng=random.Random(1))
        status = FillStatus.IN_PROGRESS
        for _ in range(200):
            status = engine.step()
            if status != FillStatus.IN_PROGRESS:
                break
        self.assertEqual(status, FillStatus.INFEASIBLE)

    def test_user_letters_survive_infeasibility(self) -> None:
        grid = Grid.empty(2)
        grid.edit_cell(0, 0, "z")
        engine = AutocompleteEngine(grid, Lexicon.from_words(["ab", "cd"]))
        self.assertEqual(engine.step(), FillStatus.INFEASIBLE)
        self.assertEqual(grid.cell(0, 0).value, "Z")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
