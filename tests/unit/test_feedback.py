"""Unit tests for the feedback log and the offline weight tuner."""
import pytest

from partsort.models.feedback import FeedbackEntry
from partsort.models.listing import Category, Listing
from partsort.services.feedback import FeedbackLog, WeightTuner
from partsort.services.normalization import listing_fingerprint


@pytest.fixture
def listing():
    return Listing(name="CNHL LiPo Battery", description="with spare motor")


class TestFeedbackLog:
    def test_record(self, listing):
        log = FeedbackLog()

        entry = log.record(listing, Category.BATTERY)

        assert entry.listing_fingerprint == listing_fingerprint(listing.name, listing.description)
        assert entry.human_assigned_category is Category.BATTERY
        assert log.entries() == (entry,)
        assert len(log) == 1

    def test_persisted_as_json_lines(self, tmp_path, listing):
        path = tmp_path / "feedback.jsonl"
        log = FeedbackLog(path)
        log.record(listing, Category.BATTERY)
        log.record(listing, Category.MOTOR)

        reloaded = FeedbackLog.load(path)

        assert len(path.read_text(encoding="utf-8").splitlines()) == 2
        assert reloaded.entries() == log.entries()

    def test_load_missing_file(self, tmp_path):
        assert len(FeedbackLog.load(tmp_path / "absent.jsonl")) == 0

    def test_entries_are_a_snapshot(self, listing):
        log = FeedbackLog()
        before = log.entries()
        log.record(listing, Category.BATTERY)
        assert before == ()


class TestWeightTuner:
    def _weight(self, table, term):
        return next(rule.weight for rule in table.keywords if rule.term == term)

    def test_boosts_and_damps(self, rule_table, listing):
        fingerprint = listing_fingerprint(listing.name, listing.description)
        entry = FeedbackEntry(listing_fingerprint=fingerprint, human_assigned_category=Category.BATTERY)

        tuned = WeightTuner().tune(rule_table, [entry], {fingerprint: listing})

        assert tuned.version == rule_table.version + 1
        assert self._weight(tuned, "lipo battery") == pytest.approx(52.5)
        assert self._weight(tuned, "motor") == pytest.approx(28.5)
        assert self._weight(tuned, "frame") == self._weight(rule_table, "frame")
        assert self._weight(rule_table, "lipo battery") == 50

    def test_unmatched_feedback_is_noop(self, rule_table):
        entry = FeedbackEntry(listing_fingerprint="deadbeef", human_assigned_category=Category.MOTOR)
        assert WeightTuner().tune(rule_table, [entry], {}) is rule_table

    def test_weights_clamped(self, rule_table, listing):
        fingerprint = listing_fingerprint(listing.name, listing.description)
        entries = [
            FeedbackEntry(listing_fingerprint=fingerprint, human_assigned_category=Category.BATTERY)
            for _ in range(50)
        ]

        tuned = WeightTuner(learning_rate=0.5, max_weight=60).tune(
            rule_table, entries, {fingerprint: listing}
        )

        assert self._weight(tuned, "lipo battery") == 60
        assert self._weight(tuned, "motor") == 1

    @pytest.mark.parametrize("rate", [0, 1, -0.1, 1.5])
    def test_invalid_learning_rate(self, rate):
        with pytest.raises(ValueError):
            WeightTuner(learning_rate=rate)
