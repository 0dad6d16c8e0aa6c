"""Unit tests for sample-count aggregation."""
import datetime
import unittest

from thyme.aggregation import BarChart, aggregate, top_n
from thyme.models import Bar, Snapshot, Stream, Window
from thyme.normalization import app_label, window_label
from thyme.timeline import MISSING_LABEL

BASE = datetime.datetime(2025, 1, 1, 12, 0, 0)

EDITOR = Window(id=1, name="notes.txt - Vim")
OTHER_EDITOR = Window(id=2, name="todo.txt - Vim")
BROWSER = Window(id=3, name="Inbox - Gmail - Google Chrome")


class TestTopN(unittest.TestCase):
    """Ranking of counted labels."""

    def test_ties_keep_first_seen_order(self) -> None:
        chart = BarChart("Active", "App", "Samples", "Top")
        chart.plus("A", 5)
        chart.plus("B", 5)
        chart.plus("C", 3)

        self.assertEqual([bar.label for bar in chart.top(2)], ["A", "B"])
        self.assertEqual([bar.label for bar in chart.top(10)], ["A", "B", "C"])

    def test_higher_counts_rank_first_regardless_of_insertion(self) -> None:
        bars = top_n({"C": 1, "B": 4, "A": 4, "D": 9}, 3)

        self.assertEqual(bars, [Bar("D", 9), Bar("B", 4), Bar("A", 4)])

    def test_zero_or_negative_limit_is_empty(self) -> None:
        self.assertEqual(top_n({"A": 1}, 0), [])
        self.assertEqual(top_n({"A": 1}, -3), [])

    def test_ordered_bars_respects_max_bars(self) -> None:
        chart = BarChart("All", "App", "Samples", "Top", max_bars=2)
        for label in "abcde":
            chart.plus(label)

        self.assertEqual(len(chart.ordered_bars()), 2)
        self.assertEqual(chart.total, 5)

    def test_plus_accumulates(self) -> None:
        chart = BarChart("All", "App", "Samples", "Top")
        chart.plus("A")
        chart.plus("A", 2)

        self.assertEqual(chart.series, {"A": 3})


class TestAggregate(unittest.TestCase):
    """Per-track sample counting over a stream."""

    def setUp(self) -> None:
        """Three snapshots, the middle one with a vanished active window."""
        windows = [EDITOR, OTHER_EDITOR, BROWSER]
        self.stream = Stream([
            Snapshot(time=BASE, windows=windows, active=1, visible=[1, 3]),
            Snapshot(
                time=BASE + datetime.timedelta(seconds=30),
                windows=windows,
                active=77,
                visible=[2, 77],
            ),
            Snapshot(
                time=BASE + datetime.timedelta(seconds=60),
                windows=windows,
                active=3,
                visible=[3],
            ),
        ])

    def test_unresolved_active_window_is_skipped(self) -> None:
        agg = aggregate(self.stream, app_label)

        self.assertEqual(agg.active.series, {"Vim": 1, "Google Chrome": 1})
        self.assertNotIn(MISSING_LABEL, agg.active.series)

    def test_unresolved_visible_window_counts_as_missing_label(self) -> None:
        agg = aggregate(self.stream, app_label)

        self.assertEqual(agg.visible.series, {"Vim": 2, "Google Chrome": 2, MISSING_LABEL: 1})

    def test_all_counts_every_window_in_every_snapshot(self) -> None:
        agg = aggregate(self.stream, app_label)

        self.assertEqual(agg.all.series, {"Vim": 6, "Google Chrome": 3})
        self.assertEqual(agg.all.total, 9)

    def test_window_granularity_keeps_windows_apart(self) -> None:
        agg = aggregate(self.stream, window_label)

        self.assertEqual(agg.all.series, {
            EDITOR.name: 3,
            OTHER_EDITOR.name: 3,
            BROWSER.name: 3,
        })

    def test_charts_are_ordered_and_titled(self) -> None:
        agg = aggregate(self.stream, app_label, max_bars=5)

        self.assertEqual([chart.id for chart in agg.charts], ["Active", "Visible", "All"])
        self.assertTrue(agg.active.title.startswith("Top 5 active"))
        self.assertEqual(agg.chart("All").max_bars, 5)
        with self.assertRaises(KeyError):
            agg.chart("Hidden")

    def test_empty_stream(self) -> None:
        agg = aggregate(Stream(), app_label)

        for chart in agg.charts:
            self.assertEqual(chart.series, {})
            self.assertEqual(chart.ordered_bars(), [])


if __name__ == "__main__":
    unittest.main()
