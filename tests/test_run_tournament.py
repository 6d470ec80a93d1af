import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from nontransitive_dice.core.config import MatchConfig
from nontransitive_dice.core.dice import parse_dice
from scripts.run_tournament import agent_win_rates, main, run_matches

DICE_ARGS = ["2,2,4,4,9,9", "1,1,6,6,8,8", "3,3,5,5,7,7"]


class TestTournament(unittest.TestCase):
    """
    Tests for the tournament script:
      - Outcome counts turn into per-agent win percentages.
      - The printed summary reports a win rate for each seat and for ties.
    """

    def test_agent_win_rates(self):
        rates = agent_win_rates({"human": 3, "computer": 1}, 4)
        self.assertEqual(rates, {"human": 75.0, "computer": 25.0, "tie": 0.0})

    def test_agent_win_rates_ignores_cancelled(self):
        rates = agent_win_rates({"human": 1, "tie": 1, None: 2}, 4)
        self.assertEqual(rates["human"], 25.0)
        self.assertEqual(rates["tie"], 25.0)
        self.assertEqual(rates["computer"], 0.0)

    def test_agent_win_rates_no_matches(self):
        self.assertEqual(agent_win_rates({}, 0), {"human": 0.0, "computer": 0.0, "tie": 0.0})

    def test_run_matches_counts(self):
        results = run_matches("random", "counter", parse_dice(DICE_ARGS), 10, MatchConfig())
        self.assertEqual(sum(results["outcomes"].values()), 10)
        self.assertEqual(sum(results["die_games"].values()), 20)
        rates = agent_win_rates(results["outcomes"], 10)
        self.assertAlmostEqual(sum(rates.values()), 100.0)

    def test_main_prints_per_agent_rates(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = io.StringIO()
            with redirect_stdout(out):
                main(["--matches", "6", "--data-dir", tmp] + DICE_ARGS)
            self.assertTrue(os.path.exists(os.path.join(tmp, "die_win_rates.png")))
        text = out.getvalue()
        self.assertRegex(text, r"random \(A\) won \d+/6 \(\d+\.\d%\)")
        self.assertRegex(text, r"counter \(B\) won \d+/6 \(\d+\.\d%\)")
        self.assertRegex(text, r"Ties: \d+/6 \(\d+\.\d%\)")


if __name__ == '__main__':
    unittest.main()
