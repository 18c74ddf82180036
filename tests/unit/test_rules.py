"""Unit tests for rule table validation, loading and publishing."""
import threading

import pytest

from partsort.errors import RuleTableError, SnapshotUnavailableError
from partsort.models.listing import Category
from partsort.rules import (
    BrandRule,
    KeywordRule,
    RuleTable,
    RuleTableStore,
    build_rule_table,
    compile_term,
    default_rule_table,
    load_rule_table,
)


class TestCompileTerm:
    def test_does_not_match_inside_words(self):
        regex = compile_term("motor")
        assert regex.search("brushless motor")
        assert not regex.search("t-motor f60")
        assert not regex.search("motorcycle")

    def test_cached(self):
        assert compile_term("frame") is compile_term("frame")


class TestRuleModels:
    def test_aliases_lowercased(self):
        rule = BrandRule(key="tattu", aliases=["TATTU", " Tattu "], bias=[Category.BATTERY])
        assert rule.aliases == ["tattu", "tattu"]

    def test_blank_alias_rejected(self):
        with pytest.raises(ValueError):
            BrandRule(key="x", aliases=["  "])

    def test_invalid_pattern_rejected(self):
        with pytest.raises(ValueError, match="invalid pattern"):
            KeywordRule(term="broken", category=Category.MOTOR, pattern="motor(")

    def test_keyword_regex_defaults_to_escaped_term(self):
        rule = KeywordRule(term="li-ion", category=Category.BATTERY, weight=30)
        assert rule.regex.search("18650 li-ion cell")

    def test_unknown_category_rejected(self):
        with pytest.raises(RuleTableError):
            build_rule_table({"keywords": [{"term": "widget", "category": "unknown", "weight": 5}]})

    def test_anchored_needs_code(self):
        with pytest.raises(RuleTableError):
            build_rule_table(
                {"keywords": [{"term": "frame kit", "category": "frame", "weight": 60, "anchored": True}]}
            )


class TestDefaultRuleTable:
    def test_default_table_is_valid(self, rule_table):
        assert rule_table.version == 1
        assert rule_table.brand("t-motor").bias == [Category.MOTOR, Category.PROP, Category.STACK]
        assert rule_table.brand("nonexistent") is None

    def test_every_category_has_keywords(self, rule_table):
        covered = {rule.category for rule in rule_table.keywords}
        assert covered == set(Category.known())

    def test_with_keywords_bumps_version(self, rule_table):
        tuned = rule_table.with_keywords(rule_table.keywords[:3])
        assert tuned.version == 2
        assert len(tuned.keywords) == 3
        assert rule_table.version == 1


class TestLoadRuleTable:
    def test_json_round_trip(self, tmp_path, rule_table):
        path = tmp_path / "rules.json"
        path.write_text(rule_table.model_dump_json(), encoding="utf-8")

        loaded = load_rule_table(path)

        assert loaded == rule_table

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleTableError) as exc_info:
            load_rule_table(tmp_path / "missing.json")
        assert "path" in exc_info.value.details

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(RuleTableError):
            load_rule_table(path)


class TestRuleTableStore:
    def test_empty_store(self):
        store = RuleTableStore()
        assert store.version is None
        with pytest.raises(SnapshotUnavailableError):
            store.snapshot()

    def test_swap_returns_previous(self, store, rule_table):
        newer = rule_table.with_keywords(rule_table.keywords)

        previous = store.swap(newer)

        assert previous is rule_table
        assert store.version == 2

    def test_snapshot_survives_swap(self, store, rule_table):
        pinned = store.snapshot()
        store.swap(RuleTable(version=5))

        assert pinned is rule_table
        assert store.snapshot().version == 5

    def test_concurrent_swaps(self, rule_table):
        store = RuleTableStore(rule_table)
        tables = [RuleTable(version=v) for v in range(2, 12)]
        threads = [threading.Thread(target=store.swap, args=(t,)) for t in tables]

        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.snapshot() in tables

    def test_from_settings_loads_path(self, tmp_path, settings):
        path = tmp_path / "rules.json"
        path.write_text(RuleTable(version=7).model_dump_json(), encoding="utf-8")

        store = RuleTableStore.from_settings(settings.model_copy(update={"rule_table_path": str(path)}))

        assert store.version == 7

    def test_from_settings_defaults(self, settings):
        assert RuleTableStore.from_settings(settings).snapshot() == default_rule_table()
