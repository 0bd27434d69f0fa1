"""Tests for update classification."""

from __future__ import annotations

import random

from winupdate_probe.classifier import classify
from winupdate_probe.models import UpdateRecord


class TestClassify:
    def test_empty_input(self):
        c = classify([])
        assert (c.critical_count, c.optional_count, c.hidden_count) == (0, 0, 0)
        assert c.critical_titles == []

    def test_buckets(self, critical_records):
        c = classify(critical_records)
        assert c.critical_count == 2
        assert c.optional_count == 1
        assert c.hidden_count == 0
        assert c.critical_titles == ["[Update1]", "[Update2]"]

    def test_hidden_wins_over_auto_selectable(self):
        c = classify([UpdateRecord(title="KB1", is_hidden=True, is_auto_selectable=True)])
        assert c.hidden_count == 1
        assert c.critical_count == 0
        assert c.critical_titles == []

    def test_titles_keep_encounter_order(self):
        records = [
            UpdateRecord(title="Zeta", is_auto_selectable=True),
            UpdateRecord(title="Other"),
            UpdateRecord(title="Alpha", is_auto_selectable=True),
        ]
        assert classify(records).critical_titles == ["[Zeta]", "[Alpha]"]

    def test_counts_sum_to_input_length(self):
        rng = random.Random(1234)
        for size in range(0, 40):
            records = [
                UpdateRecord(
                    title=f"KB{i}",
                    is_hidden=rng.random() < 0.3,
                    is_auto_selectable=rng.random() < 0.5,
                )
                for i in range(size)
            ]
            assert classify(records).total == size

    def test_accepts_generator(self):
        c = classify(UpdateRecord(title=f"KB{i}") for i in range(4))
        assert c.optional_count == 4
