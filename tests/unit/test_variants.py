"""Unit tests for bundled-listing variant detection."""
import pytest

from partsort.models.listing import Category, Listing
from partsort.models.variants import VariantType
from partsort.services.variants import VariantDetector


@pytest.fixture
def detector():
    return VariantDetector()


class TestFindGroup:
    @pytest.mark.parametrize(
        "name,variant_type,values,base_name",
        [
            (
                "Badass 2 2207.5 Motor 1400KV/1900KV/2400KV",
                VariantType.KV,
                ["1400kv", "1900kv", "2400kv"],
                "Badass 2 2207.5 Motor",
            ),
            (
                "Xing 2207 1400/1900/2400KV Motor",
                VariantType.KV,
                ["1400kv", "1900kv", "2400kv"],
                "Xing 2207 Motor",
            ),
            (
                "CNHL 1300mAh, 1500mAh 4S LiPo",
                VariantType.CAPACITY,
                ["1300mah", "1500mah"],
                "CNHL 4S LiPo",
            ),
            (
                "Tattu 1300mAh 4S/6S LiPo",
                VariantType.CELLS,
                ["4s", "6s"],
                "Tattu 1300mAh LiPo",
            ),
            (
                "Gemfan 5x4.3x3 / 5.1x4.6x3 Props",
                VariantType.SIZE,
                ["5x4.3x3", "5.1x4.6x3"],
                "Gemfan Props",
            ),
        ],
    )
    def test_enumerations(self, detector, name, variant_type, values, base_name):
        group = detector.find_group(name)

        assert group is not None
        assert group.variant_type is variant_type
        assert group.values == values
        assert group.base_name == base_name

    @pytest.mark.parametrize(
        "name",
        [
            "",
            "Tattu 1550mAh 4S 75C LiPo Battery",
            "Badass 2 1900KV/1900KV",
            "Mario 5 Frame Kit",
        ],
    )
    def test_no_enumeration(self, detector, name):
        assert detector.find_group(name) is None

    def test_category_patterns_first(self, detector):
        name = "Combo 30A/45A 1900KV/2400KV"

        assert detector.find_group(name).variant_type is VariantType.KV
        assert detector.find_group(name, Category.STACK).variant_type is VariantType.CURRENT


class TestSplitPlan:
    def test_children_named_after_values(self, detector):
        plan = detector.detect_variants("Badass 2 2207.5 Motor 1400KV/1900KV/2400KV", "", Category.MOTOR)

        assert plan.child_names == [
            "Badass 2 2207.5 Motor - 1400KV",
            "Badass 2 2207.5 Motor - 1900KV",
            "Badass 2 2207.5 Motor - 2400KV",
        ]
        assert plan.original_listing.name == "Badass 2 2207.5 Motor 1400KV/1900KV/2400KV"

    def test_children_inherit_listing_fields(self, detector):
        listing = Listing(
            name="Badass 2 1400KV/1900KV",
            description="Fast motor",
            vendor="getfpv",
            brand="BrotherHobby",
            specifications={"weight_g": 32},
        )

        plan = detector.split_listing(listing, Category.MOTOR)
        child = plan.children[0]

        assert child.vendor == "getfpv"
        assert child.brand == "BrotherHobby"
        assert child.existing_category is Category.MOTOR
        assert child.description == "Fast motor (1400KV variant)"
        assert child.specifications == {
            "weight_g": 32,
            "variant": "1400KV",
            "variant_type": "kv",
            "original_name": "Badass 2 1400KV/1900KV",
        }

    def test_description_mentioning_value_kept(self, detector):
        listing = Listing(name="Badass 2 1400KV/1900KV", description="Available in 1400kv and 1900kv")

        plan = detector.split_listing(listing)

        assert all(child.description == listing.description for child in plan.children)

    def test_original_listing_untouched(self, detector):
        listing = Listing(name="CNHL 1300mAh/1500mAh 4S", existing_category=Category.BATTERY)

        detector.split_listing(listing)

        assert listing.name == "CNHL 1300mAh/1500mAh 4S"
        assert listing.specifications == {}

    def test_single_value_yields_nothing(self, detector):
        assert detector.detect_variants("Tattu 1550mAh 4S", "1300mAh/1550mAh also available") is None


class TestVariantStats:
    def test_has_likely_variants(self, detector):
        assert detector.has_likely_variants("Motor 1900KV/2400KV")
        assert not detector.has_likely_variants("Motor 1900KV")

    def test_variant_stats(self, detector):
        stats = detector.variant_stats(
            [
                "Motor 1900KV/2400KV",
                "Tattu 1550mAh 4S",
                "CNHL 1300mAh, 1500mAh, 1800mAh",
            ]
        )

        assert stats.total_products == 3
        assert stats.products_with_variants == 2
        assert stats.detected == [
            ("Motor 1900KV/2400KV", 2, VariantType.KV),
            ("CNHL 1300mAh, 1500mAh, 1800mAh", 3, VariantType.CAPACITY),
        ]
