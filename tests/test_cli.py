"""Tests for the command-line interface."""

import io
import json
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from theory_engine.__main__ import build_parser, main

FIXTURES = Path(__file__).parent / "fixtures"
GENERATOR = str(FIXTURES / "generator_dminor.json")


def _main(argv):
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class TestGenerate(unittest.TestCase):
    """Test the generate command."""

    def test_text(self):
        """Text output names the chord."""
        code, out, _ = _main(["generate", "--config", GENERATOR, "--seed", "3"])
        self.assertEqual(code, 0)
        self.assertIn("Build: D Minor (1st inversion)", out)

    def test_json(self):
        """JSON output carries the task."""
        code, out, _ = _main(["generate", "--config", GENERATOR, "--seed", "3", "--json"])
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["primary_answer"], "Dm/1")
        self.assertEqual(data["pitches"], [53, 57, 62])


class TestCheckAnswer(unittest.TestCase):
    """Test the check-answer command."""

    def test_match(self):
        """Correct answer exits 0."""
        code, out, _ = _main(["check-answer", "--config", GENERATOR, "--seed", "3", "d minor 1st inversion"])
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("[MATCH]"))

    def test_wrong_root(self):
        """Wrong root exits 1 with the reason."""
        code, out, _ = _main(["check-answer", "--config", GENERATOR, "--seed", "3", "Em/1"])
        self.assertEqual(code, 1)
        self.assertIn("(root)", out)

    def test_missing_label(self):
        """Unlabeled inversion fails when labels are required."""
        code, out, _ = _main(["check-answer", "--config", GENERATOR, "--seed", "3", "Dm", "--json"])
        self.assertEqual(code, 1)
        data = json.loads(out)
        self.assertFalse(data["result"]["matched"])
        self.assertEqual(data["result"]["reason"], "quality_or_inversion")
        self.assertEqual(data["task"]["primary_answer"], "Dm/1")


class TestValidate(unittest.TestCase):
    """Test the validate command."""

    def test_passing_exercise(self):
        """Clean exercise exits 0."""
        code, out, _ = _main(["validate", str(FIXTURES / "exercise_species1.json")])
        self.assertEqual(code, 0)
        self.assertIn("OVERALL: PASS", out)

    def test_failing_exercise_to_file(self):
        """Failing exercise exits 1 and writes the report."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "report.json"
            code, out, _ = _main([
                "validate", str(FIXTURES / "exercise_parallel.json"), "--json", "-o", str(path),
            ])
            self.assertEqual(code, 1)
            self.assertEqual(out, "")
            data = json.loads(path.read_text())
        self.assertEqual(data["score"], 50)
        self.assertFalse(data["passed"])

    def test_configuration_error(self):
        """Missing file exits 2."""
        code, out, err = _main(["validate", str(FIXTURES / "missing.json")])
        self.assertEqual(code, 2)
        self.assertTrue(err.startswith("error: cannot read"))

    def test_malformed_scoring(self):
        """A non-integer pass threshold exits with the configuration error code."""
        data = json.loads((FIXTURES / "exercise_species1.json").read_text())
        data["scoring"] = {"pass_threshold": None}
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "exercise.json"
            path.write_text(json.dumps(data))
            code, _, err = _main(["validate", str(path)])
        self.assertEqual(code, 2)
        self.assertIn("pass_threshold", err)


class TestParser(unittest.TestCase):
    """Test argument parsing."""

    def test_no_command(self):
        """No command prints help."""
        code, out, _ = _main([])
        self.assertEqual(code, 0)
        self.assertIn("usage", out)

    def test_seed_required_for_check(self):
        """check-answer needs --seed."""
        parser = build_parser()
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parser.parse_args(["check-answer", "--config", GENERATOR, "Dm/1"])


if __name__ == "__main__":
    unittest.main()
