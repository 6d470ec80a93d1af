import io
import unittest
from contextlib import redirect_stdout, redirect_stderr

from UI.cli import ConsoleInputSource, format_probability_table, main
from nontransitive_dice.core.dice import parse_dice
from nontransitive_dice.core.engine import GameCancelled

DICE = parse_dice(["2,2,4,4,9,9", "1,1,6,6,8,8", "3,3,5,5,7,7"])


def scripted_input(answers):
    it = iter(answers)
    return lambda prompt="": next(it)


class TestConsoleInputSource(unittest.TestCase):
    def test_number_prompt_shows_hmac_and_retries(self):
        src = ConsoleInputSource(input_fn=scripted_input(["x", "7", "-1", "1"]))
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(src.choose_number(2, b"\xab\xcd"), 1)
        self.assertIn("HMAC=ABCD", out.getvalue())
        self.assertEqual(out.getvalue().count("Invalid input"), 3)

    def test_number_prompt_exit(self):
        src = ConsoleInputSource(input_fn=scripted_input(["e"]))
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(GameCancelled):
                src.choose_number(2, b"\x00")

    def test_dice_menu_help_and_taken(self):
        src = ConsoleInputSource(input_fn=scripted_input(["h", "2", "3"]))
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(src.choose_die(DICE, 1), 2)
        text = out.getvalue()
        self.assertIn("Dice #2 (taken)", text)
        self.assertIn("Winning probabilities", text)
        self.assertIn("Invalid choice.", text)

    def test_dice_menu_exit(self):
        src = ConsoleInputSource(input_fn=scripted_input(["E"]))
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(GameCancelled):
                src.choose_die(DICE, None)


class TestProbabilityTable(unittest.TestCase):
    def test_table_rows(self):
        lines = format_probability_table(DICE)
        self.assertEqual(len(lines), 2 + len(DICE))
        self.assertIn("55.6%", lines[2])
        self.assertIn("44.4%", lines[3])
        self.assertIn("-", lines[2])


class TestMain(unittest.TestCase):
    def test_too_few_dice_exits_with_error(self):
        err = io.StringIO()
        with redirect_stderr(err):
            self.assertEqual(main(["1,2,3", "4,5,6"]), 1)
        self.assertIn("at least 3 dice", err.getvalue())

    def test_unknown_agent(self):
        err = io.StringIO()
        with redirect_stderr(err):
            self.assertEqual(main(["1,2", "3,4", "5,6", "--agent", "nobody"]), 1)
        self.assertIn("unknown agent", err.getvalue())


if __name__ == '__main__':
    unittest.main()
