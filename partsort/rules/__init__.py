"""Rule tables: brands, keywords, accessory cues and scoring weights."""
from partsort.rules.table import (
    BrandRule,
    KeywordRule,
    RuleTable,
    ScoringWeights,
    StructuralCue,
    build_rule_table,
    compile_term,
    load_rule_table,
)
from partsort.rules.defaults import default_rule_table
from partsort.rules.store import RuleTableStore

__all__ = [
    "BrandRule",
    "KeywordRule",
    "RuleTable",
    "ScoringWeights",
    "StructuralCue",
    "build_rule_table",
    "compile_term",
    "load_rule_table",
    "default_rule_table",
    "RuleTableStore",
]
