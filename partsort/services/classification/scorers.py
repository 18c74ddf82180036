"""Per-category scorers.

Each scorer reads the shared signal set and reports the rules that fired
for its category as RuleHits. Scorers know nothing about each other;
cross-category penalties live in the disambiguator.
"""
import re
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type

from partsort.models.classification import CategoryScore, RuleClass, RuleHit
from partsort.models.listing import Category
from partsort.models.reasons import ReasonCode
from partsort.models.signals import Signal, SignalKind
from partsort.rules.table import ScoringWeights


# Words that end the head phrase of a listing name ("Camera Mount for ...").
_HEAD_BREAK = re.compile(
    r"(?<![\w-])(?:for|with|w/|incl(?:udes|uding|\.)?|fits?|compatible|\+)(?![\w-])"
)


class SignalSet:
    """Signals of one listing, indexed for the scorers.

    Args:
        signals: Extracted signals
        name: Normalized listing name the name-field spans point into
    """

    def __init__(self, signals: Iterable[Signal], name: str = ""):
        self.name = name
        self.signals: List[Signal] = list(signals)
        self._numeric: Dict[str, List[Signal]] = defaultdict(list)
        self._keywords: Dict[Category, List[Signal]] = defaultdict(list)
        self.brands: List[Signal] = []
        self.structural: List[Signal] = []
        self.cross_references: List[Signal] = []
        for signal in self.signals:
            if signal.kind is SignalKind.NUMERIC_SPEC:
                self._numeric[signal.name].append(signal)
            elif signal.kind is SignalKind.BRAND:
                self.brands.append(signal)
            elif signal.kind is SignalKind.STRUCTURAL:
                self.structural.append(signal)
            elif signal.cross_reference:
                self.cross_references.append(signal)
            elif signal.category is not None:
                self._keywords[signal.category].append(signal)

    def numeric(self, name: str) -> List[Signal]:
        return self._numeric.get(name, [])

    def keywords(self, category: Category) -> List[Signal]:
        return self._keywords.get(category, [])

    def has_term(self, category: Category, *terms: str) -> bool:
        return any(s.name in terms for s in self.keywords(category))

    def first_value(self, name: str) -> Optional[str]:
        """Value of the first occurrence, preferring the listing name."""
        found = self.numeric(name)
        if not found:
            return None
        in_name = [s for s in found if s.in_name]
        return (in_name or found)[0].value

    @property
    def name_cues(self) -> List[Signal]:
        return [s for s in self.structural if s.in_name]

    @property
    def description_cues(self) -> List[Signal]:
        return [s for s in self.structural if not s.in_name]

    @property
    def name_keywords(self) -> List[Signal]:
        """Category keywords found in the name, cross-references excluded."""
        found = [s for signals in self._keywords.values() for s in signals if s.in_name]
        return sorted(found, key=lambda s: s.span)

    @property
    def head_end(self) -> int:
        """Offset where the head phrase of the name ends."""
        match = _HEAD_BREAK.search(self.name)
        return match.start() if match else len(self.name)

    @property
    def accessory_head(self) -> bool:
        """The name's head phrase is itself an accessory.

        True when a name cue sits inside the head phrase and either
        directly follows a part keyword ("motor mount", "battery strap")
        or no part keyword follows it there ("Battery Tray 1300mAh").
        """
        head_end = self.head_end
        keywords = self.name_keywords
        for cue in self.name_cues:
            start, end = cue.span
            if start >= head_end:
                continue
            attached = any(
                k.span[1] <= start and not self.name[k.span[1]:start].strip()
                for k in keywords
            )
            trailing = any(end <= k.span[0] < head_end for k in keywords)
            if attached or not trailing:
                return True
        return False

    @property
    def brand_keys(self) -> List[str]:
        keys: List[str] = []
        for signal in self.brands:
            if signal.name not in keys:
                keys.append(signal.name)
        return keys


def _to_number(value: Optional[str]) -> Optional[Any]:
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return value
    return int(number) if number.is_integer() else number


class CategoryScorer(ABC):
    """Abstract base class for category scorers.

    Subclasses implement the definitive structural rules and spec
    extraction for their category; keyword and brand-bias rules are shared.
    """

    category: Category
    keyword_code: ReasonCode
    brand_code: ReasonCode

    def __init__(self, weights: ScoringWeights):
        self.weights = weights

    def score(self, signals: SignalSet) -> CategoryScore:
        """Evaluate structural, keyword and brand-bias rules in order."""
        score = CategoryScore(self.category)
        self.structural_rules(signals, score)
        self._keyword_rules(signals, score)
        self._brand_rules(signals, score)
        return score

    @abstractmethod
    def structural_rules(self, signals: SignalSet, score: CategoryScore) -> None:
        """Fire the definitive and spec rules of this category."""
        pass

    @abstractmethod
    def specifications(self, signals: SignalSet) -> Dict[str, Any]:
        """Category-specific specs read from the signals."""
        pass

    def evidence_weight(
        self,
        found: Sequence[Signal],
        base: float,
        discount: bool = True,
    ) -> float:
        """Weight of repeated evidence.

        The first occurrence counts fully (discounted when it only appears
        in the description); each repeat adds a small bonus, capped.
        """
        if not found:
            return 0.0
        primary = base
        if discount and not any(s.in_name for s in found):
            primary *= self.weights.description_multiplier
        repeats = min(len(found) - 1, self.weights.max_repeats)
        return primary * (1 + self.weights.repeat_bonus * repeats)

    def fire(
        self,
        score: CategoryScore,
        code: ReasonCode,
        rule_class: RuleClass,
        found: Sequence[Signal],
        base: float,
        discount: bool = True,
        anchored: bool = False,
    ) -> None:
        weight = self.evidence_weight(found, base, discount)
        if weight > 0:
            score.add(RuleHit(code, rule_class, weight, anchored=anchored))

    def _keyword_rules(self, signals: SignalSet, score: CategoryScore) -> None:
        by_term: Dict[str, List[Signal]] = defaultdict(list)
        for signal in signals.keywords(self.category):
            by_term[signal.name].append(signal)

        for found in by_term.values():
            first = found[0]
            if first.anchored:
                self.fire(
                    score,
                    first.code or self.keyword_code,
                    RuleClass.STRUCTURAL,
                    found,
                    first.weight,
                    anchored=any(s.in_name for s in found),
                )
            else:
                self.fire(score, self.keyword_code, RuleClass.KEYWORD, found, first.weight)

    def _brand_rules(self, signals: SignalSet, score: CategoryScore) -> None:
        by_brand: Dict[str, List[Signal]] = defaultdict(list)
        for signal in signals.brands:
            if self.category in signal.bias:
                by_brand[signal.name].append(signal)

        for found in by_brand.values():
            base = (
                self.weights.brand_bias_exclusive
                if len(found[0].bias) == 1
                else self.weights.brand_bias_shared
            )
            weight = self.evidence_weight(found[:1], base)
            score.add(RuleHit(self.brand_code, RuleClass.BRAND_BIAS, weight))


class FrameScorer(CategoryScorer):
    category = Category.FRAME
    keyword_code = ReasonCode.FRAME_KEYWORD
    brand_code = ReasonCode.FRAME_BRAND_BIAS

    def structural_rules(self, signals: SignalSet, score: CategoryScore) -> None:
        # Wheelbase only ever describes a frame, wherever it is written
        wheelbase = signals.numeric("wheelbase")
        self.fire(
            score,
            ReasonCode.WHEELBASE_SPEC,
            RuleClass.STRUCTURAL,
            wheelbase,
            self.weights.wheelbase,
            discount=False,
            anchored=any(s.in_name for s in wheelbase),
        )

    def specifications(self, signals: SignalSet) -> Dict[str, Any]:
        specs: Dict[str, Any] = {}
        wheelbase = signals.first_value("wheelbase")
        if wheelbase:
            specs["wheelbase_mm"] = _to_number(wheelbase)
        inch = signals.first_value("inch")
        if inch:
            specs["size_inch"] = _to_number(inch)
        return specs


class BatteryScorer(CategoryScorer):
    category = Category.BATTERY
    keyword_code = ReasonCode.BATTERY_KEYWORD
    brand_code = ReasonCode.BATTERY_BRAND_BIAS

    def structural_rules(self, signals: SignalSet, score: CategoryScore) -> None:
        cells = signals.numeric("cells")
        capacity = signals.numeric("mah")
        if cells and capacity:
            self.fire(
                score,
                ReasonCode.CELLS_WITH_CAPACITY,
                RuleClass.STRUCTURAL,
                capacity,
                self.weights.cells_with_capacity,
            )
        else:
            self.fire(score, ReasonCode.CAPACITY_SPEC, RuleClass.KEYWORD, capacity, self.weights.capacity)
            self.fire(score, ReasonCode.CELL_COUNT_SPEC, RuleClass.KEYWORD, cells, self.weights.cell_count)
        self.fire(
            score,
            ReasonCode.C_RATING_SPEC,
            RuleClass.KEYWORD,
            signals.numeric("c_rating"),
            self.weights.c_rating,
        )

    def specifications(self, signals: SignalSet) -> Dict[str, Any]:
        specs: Dict[str, Any] = {}
        for key, name in (("capacity_mah", "mah"), ("cells", "cells"), ("c_rating", "c_rating")):
            value = signals.first_value(name)
            if value:
                specs[key] = _to_number(value)
        return specs


class MotorScorer(CategoryScorer):
    category = Category.MOTOR
    keyword_code = ReasonCode.MOTOR_KEYWORD
    brand_code = ReasonCode.MOTOR_BRAND_BIAS

    def structural_rules(self, signals: SignalSet, score: CategoryScore) -> None:
        self.fire(
            score,
            ReasonCode.KV_RATING,
            RuleClass.STRUCTURAL,
            signals.numeric("kv"),
            self.weights.kv_rating,
        )
        self.fire(
            score,
            ReasonCode.STATOR_SIZE,
            RuleClass.KEYWORD,
            signals.numeric("stator"),
            self.weights.stator,
        )

    def specifications(self, signals: SignalSet) -> Dict[str, Any]:
        specs: Dict[str, Any] = {}
        kv = signals.first_value("kv")
        if kv:
            specs["kv"] = _to_number(kv)
        stator = signals.first_value("stator")
        if stator:
            specs["stator"] = stator
        return specs


class StackScorer(CategoryScorer):
    category = Category.STACK
    keyword_code = ReasonCode.STACK_KEYWORD
    brand_code = ReasonCode.STACK_BRAND_BIAS

    CONTROLLER_TERMS = ("flight controller", "fc")
    ESC_TERMS = ("esc", "4in1 esc", "4in1")

    def structural_rules(self, signals: SignalSet, score: CategoryScore) -> None:
        mcu = signals.numeric("mcu")
        if mcu and signals.has_term(self.category, *self.CONTROLLER_TERMS):
            self.fire(
                score,
                ReasonCode.FLIGHT_CONTROLLER_WITH_MCU,
                RuleClass.STRUCTURAL,
                mcu,
                self.weights.flight_controller_with_mcu,
            )
        else:
            self.fire(score, ReasonCode.MCU_SPEC, RuleClass.KEYWORD, mcu, self.weights.mcu)

        current = signals.numeric("current")
        if current and signals.has_term(self.category, *self.ESC_TERMS):
            self.fire(
                score,
                ReasonCode.ESC_WITH_CURRENT,
                RuleClass.STRUCTURAL,
                current,
                self.weights.esc_with_current,
            )

    def specifications(self, signals: SignalSet) -> Dict[str, Any]:
        specs: Dict[str, Any] = {}
        mcu = signals.first_value("mcu")
        if mcu:
            specs["mcu"] = mcu.upper()
        current = signals.first_value("current")
        if current:
            specs["current_a"] = _to_number(current)
        return specs


class CameraScorer(CategoryScorer):
    category = Category.CAMERA
    keyword_code = ReasonCode.CAMERA_KEYWORD
    brand_code = ReasonCode.CAMERA_BRAND_BIAS

    def structural_rules(self, signals: SignalSet, score: CategoryScore) -> None:
        self.fire(
            score,
            ReasonCode.TVL_RESOLUTION,
            RuleClass.STRUCTURAL,
            signals.numeric("tvl"),
            self.weights.tvl_resolution,
        )

    def specifications(self, signals: SignalSet) -> Dict[str, Any]:
        tvl = signals.first_value("tvl")
        return {"tvl": _to_number(tvl)} if tvl else {}


class PropScorer(CategoryScorer):
    category = Category.PROP
    keyword_code = ReasonCode.PROPELLER_KEYWORD
    brand_code = ReasonCode.PROP_BRAND_BIAS

    def structural_rules(self, signals: SignalSet, score: CategoryScore) -> None:
        self.fire(
            score,
            ReasonCode.PROP_DIMENSIONS,
            RuleClass.STRUCTURAL,
            signals.numeric("prop_size"),
            self.weights.prop_dimensions,
        )

    def specifications(self, signals: SignalSet) -> Dict[str, Any]:
        size = signals.first_value("prop_size")
        if not size:
            return {}
        diameter, pitch, blades = size.split("x")
        return {
            "diameter_inch": _to_number(diameter),
            "pitch_inch": _to_number(pitch),
            "blades": int(blades),
        }


# Scorers in category priority order; the tie-break uses the same order
SCORER_REGISTRY: Dict[Category, Type[CategoryScorer]] = {
    Category.BATTERY: BatteryScorer,
    Category.MOTOR: MotorScorer,
    Category.FRAME: FrameScorer,
    Category.STACK: StackScorer,
    Category.CAMERA: CameraScorer,
    Category.PROP: PropScorer,
}

CATEGORY_PRIORITY: List[Category] = list(SCORER_REGISTRY)


def create_scorers(weights: ScoringWeights) -> List[CategoryScorer]:
    """Create one scorer per known category, in priority order."""
    return [scorer_class(weights) for scorer_class in SCORER_REGISTRY.values()]
