"""Tests for the command-line interface."""
import json
import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from thyme.cli import app
from thyme.storage import load_stream

SNAPSHOT = {
    "Time": "2025-01-01T12:00:00",
    "Windows": [
        {"ID": 1, "Name": "notes.txt - Vim"},
        {"ID": 2, "Name": "Slack - My Workspace - #general"},
    ],
    "Active": 1,
    "Visible": [1, 2],
}


class TestCli(unittest.TestCase):
    """record and show commands."""

    def setUp(self) -> None:
        """Fresh runner and stream path."""
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "thyme.json"
        self.runner = CliRunner()

    def _record(self, payload: dict) -> None:
        result = self.runner.invoke(
            app, ["record", "--out", str(self.path)], input=json.dumps(payload)
        )
        self.assertEqual(result.exit_code, 0, result.output)

    def test_record_appends_to_stream_file(self) -> None:
        self._record(SNAPSHOT)
        self._record(dict(SNAPSHOT, Time="2025-01-01T12:00:30"))

        self.assertEqual(len(load_stream(self.path)), 2)

    def test_record_to_stdout(self) -> None:
        result = self.runner.invoke(app, ["record", "--out", "-"], input=json.dumps(SNAPSHOT))

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output)["Active"], 1)
        self.assertFalse(self.path.exists())

    def test_record_rejects_invalid_json(self) -> None:
        result = self.runner.invoke(app, ["record", "--out", str(self.path)], input="{}")

        self.assertEqual(result.exit_code, 1)
        self.assertFalse(self.path.exists())

    def test_show_list(self) -> None:
        self._record(SNAPSHOT)

        result = self.runner.invoke(app, ["show", "--in", str(self.path)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("My Workspace - #general", result.output)

    def test_show_stats(self) -> None:
        self._record(SNAPSHOT)

        result = self.runner.invoke(
            app, ["show", "--in", str(self.path), "--what", "stats", "--by", "window"]
        )

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("notes.txt - Vim", result.output)

    def test_show_missing_file_fails(self) -> None:
        result = self.runner.invoke(app, ["show", "--in", str(self.path)])

        self.assertEqual(result.exit_code, 1)

    def test_show_rejects_unknown_view(self) -> None:
        self._record(SNAPSHOT)

        result = self.runner.invoke(app, ["show", "--in", str(self.path), "--what", "chart"])

        self.assertEqual(result.exit_code, 2)


    def test_show_stats_with_mixed_time_zones_fails_cleanly(self) -> None:
        self.path.write_text(json.dumps({"Snapshots": [
            dict(SNAPSHOT),
            dict(SNAPSHOT, Time="2025-01-01T12:01:00Z"),
        ]}), encoding="utf-8")

        result = self.runner.invoke(app, ["show", "-i", str(self.path), "-w", "stats"])

        self.assertEqual(result.exit_code, 1)
        self.assertIsInstance(result.exception, SystemExit)

    def test_show_non_utf8_file_fails_cleanly(self) -> None:
        self.path.write_bytes(b'{"Snapshots": [\xff]}')

        result = self.runner.invoke(app, ["show", "-i", str(self.path)])

        self.assertEqual(result.exit_code, 1)
        self.assertIsInstance(result.exception, SystemExit)

if __name__ == "__main__":
    unittest.main()
