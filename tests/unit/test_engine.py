"""Unit tests for the public engine facade."""
import pytest

from partsort import ClassificationEngine, PartClassificationEngine, create_engine
from partsort.errors import ConfigurationError, RuleTableError, SnapshotUnavailableError
from partsort.models import Category, DuplicateAction, Listing
from partsort.rules import RuleTable, RuleTableStore


@pytest.fixture
def engine(rule_table, settings):
    return PartClassificationEngine(rule_table, settings)


class TestEngine:
    def test_satisfies_protocol(self, engine):
        assert isinstance(engine, ClassificationEngine)

    def test_classify(self, engine):
        result = engine.classify("Tattu 1550mAh 4S 75C LiPo Battery")
        assert result.category is Category.BATTERY
        assert result.rule_table_version == 1

    def test_detect_variants(self, engine):
        plan = engine.detect_variants("Badass 2 - 2207.5 Motor - 1400KV/1900KV/2400KV", "", Category.MOTOR)
        assert len(plan.children) == 3
        assert plan.children[0].name == "Badass 2 - 2207.5 Motor - 1400KV"

    def test_find_duplicates(self, engine):
        pool = [
            engine.fingerprint(Listing(name="Tattu R-Line 1550mAh 4S 120C LiPo Battery"), "a"),
            engine.fingerprint(Listing(name="Gemfan Hurricane 51466 Tri-Blade Props"), "b"),
        ]

        candidates = engine.find_duplicates(Listing(name="Tattu R-Line 1550mAh 4S 120C LiPo Battery"), pool)

        assert [c.candidate_id for c in candidates] == ["a"]
        assert candidates[0].action is DuplicateAction.AUTO_MERGE

    def test_inconsistent_settings_rejected(self, rule_table, settings):
        bad = settings.model_copy(update={"review_threshold": 0.95})
        with pytest.raises(ConfigurationError):
            PartClassificationEngine(rule_table, bad)


class TestEngineFactories:
    def test_from_store_pins_snapshot(self, store, settings):
        engine = PartClassificationEngine.from_store(store, settings)
        store.swap(RuleTable(version=9))

        assert engine.rule_table.version == 1

    def test_from_empty_store(self, settings):
        with pytest.raises(SnapshotUnavailableError):
            PartClassificationEngine.from_store(RuleTableStore(), settings)

    def test_create_engine_defaults(self, settings):
        assert create_engine(settings).rule_table.version == 1

    def test_create_engine_from_path(self, tmp_path, rule_table, settings):
        path = tmp_path / "rules.json"
        path.write_text(rule_table.with_keywords(rule_table.keywords).model_dump_json(), encoding="utf-8")

        engine = create_engine(settings.model_copy(update={"rule_table_path": str(path)}))

        assert engine.rule_table.version == 2
        assert engine.classify("Tattu 1550mAh 4S 75C LiPo Battery").rule_table_version == 2

    def test_create_engine_bad_path(self, tmp_path, settings):
        with pytest.raises(RuleTableError):
            create_engine(settings.model_copy(update={"rule_table_path": str(tmp_path / "nope.json")}))
