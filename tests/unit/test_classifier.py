"""Unit tests for ProductClassifier end-to-end behaviour."""
import pytest

from partsort.models.classification import ClassificationMethod
from partsort.models.listing import Category, Listing
from partsort.models.reasons import ReasonCode, WarningCode


class TestCatalogScenarios:
    """Real-world listing names and the category they belong to."""

    @pytest.mark.parametrize(
        "name,description,expected",
        [
            ("SpeedyBee Mario 5 Frame Kit - DC O4", 'propeller compatibility: up to 5.1"', Category.FRAME),
            ("Carbon Fiber 5 Inch Frame 225mm Wheelbase", "", Category.FRAME),
            ("Tattu 1550mAh 4S 75C LiPo Battery", "", Category.BATTERY),
            ("CNHL 1300mAh 6S 100C Battery Pack", "XT60 plug", Category.BATTERY),
            ("iFlight XING2 2207 1855KV FPV Motor", "", Category.MOTOR),
            ("T-Motor F60 Pro V 2207.5 1950KV Brushless Motor", "", Category.MOTOR),
            ("HQProp 5x4.3x3 Propellers", "", Category.PROP),
            ("Gemfan Hurricane 51466 Tri-Blade Props", "", Category.PROP),
            ("Foxeer Razer Mini 1200TVL FPV Camera", "", Category.CAMERA),
            ("DJI O3 Air Unit", "", Category.CAMERA),
            ("SpeedyBee F405 V4 BLS 55A 30x30 FC&ESC Stack", "", Category.STACK),
            ("Holybro Kakute H743 Flight Controller", "", Category.STACK),
            (
                "JHEMCU 35A 4in1 ESC",
                "Supports 2-6S, compatible with 2207 motors up to 2400KV",
                Category.STACK,
            ),
        ],
    )
    def test_classifies(self, classifier, name, description, expected):
        result = classifier.classify(name, description)
        assert result.category is expected, result

    @pytest.mark.parametrize(
        "name",
        [
            "Motor Mount for 2207 Motors",
            "Battery Strap 250mm",
            "Battery Tray 1300mAh",
            "Frame Arm Protection Kit",
            "Stack Vibration Dampener Balls",
            "Brushless Motor Mount for 2207",
            "Brushless Motor Protection Cover",
            "FPV Camera Mount 19mm",
            "LiPo Battery Strap 250mm",
            "LiPo Battery Charger 4S",
            "AIO Flight Controller Mount",
            "Camera Mount for 225mm Wheelbase Frame",
        ],
    )
    def test_accessories_are_unknown(self, classifier, name):
        result = classifier.classify(name, "")

        assert result.category is Category.UNKNOWN
        assert result.method is ClassificationMethod.ACCESSORY_SUPPRESSED
        assert ReasonCode.ACCESSORY_SUPPRESSION in result.reasoning
        assert WarningCode.ACCESSORY_SUPPRESSED in result.warnings
        assert result.confidence < 40


class TestKnownOutcomes:
    def test_frame_kit_with_prop_compatibility(self, classifier, settings):
        result = classifier.classify(
            "SpeedyBee Mario 5 Frame Kit - DC O4",
            'propeller compatibility: up to 5.1"',
        )

        assert result.category is Category.FRAME
        assert result.confidence >= settings.high_confidence
        assert result.method is ClassificationMethod.STRUCTURAL
        assert result.reasoning[0] is ReasonCode.FRAME_KIT
        assert WarningCode.CROSS_REFERENCE_IGNORED in result.warnings

    def test_wheelbase_and_frame_kit_beat_prop_text(self, classifier):
        result = classifier.classify(
            "Nazgul5 V2 Frame Kit 240mm Wheelbase",
            "Max prop size 5.1 inch. Supports 5 inch props. Propeller 5x4.3x3 recommended.",
        )

        assert result.category is Category.FRAME
        assert ReasonCode.WHEELBASE_SPEC in result.reasoning
        assert result.specifications["wheelbase_mm"] == 240

    def test_tattu_battery(self, classifier, settings):
        result = classifier.classify("Tattu 1550mAh 4S 75C LiPo Battery", "")

        assert result.category is Category.BATTERY
        assert result.confidence >= settings.high_confidence
        assert ReasonCode.CELLS_WITH_CAPACITY in result.reasoning
        assert result.specifications == {"capacity_mah": 1550, "cells": 4, "c_rating": 75}

    def test_motor_specifications(self, classifier):
        result = classifier.classify("iFlight XING2 2207 1855KV FPV Motor", "")
        assert result.specifications == {"kv": 1855, "stator": "2207"}

    def test_motor_mount_is_unknown(self, classifier):
        result = classifier.classify("Motor Mount for 2207 Motors", "")
        assert result.category is Category.UNKNOWN
        assert result.reasoning
        assert result.warnings

    def test_description_accessory_only_warns(self, classifier):
        result = classifier.classify(
            "Mario 5 Frame Kit",
            "Includes battery strap and camera mount",
        )

        assert result.category is Category.FRAME
        assert WarningCode.ACCESSORY_IN_DESCRIPTION in result.warnings
        assert WarningCode.ACCESSORY_SUPPRESSED not in result.warnings

    def test_anchored_phrase_survives_accessory_cue(self, classifier):
        result = classifier.classify("Frame Kit with Battery Strap", "")
        assert result.category is Category.FRAME

    @pytest.mark.parametrize(
        "name,description",
        [
            ("2207", "motor mount"),
            ("1500mAh 4S", "Battery tray"),
        ],
    )
    def test_description_accessory_with_bare_name_is_unknown(self, classifier, name, description):
        result = classifier.classify(name, description)

        assert result.category is Category.UNKNOWN
        assert result.method is ClassificationMethod.ACCESSORY_SUPPRESSED
        assert WarningCode.ACCESSORY_IN_DESCRIPTION in result.warnings
        assert result.confidence < 40

    @pytest.mark.parametrize(
        "name",
        ["GoPro Hero 11 Action Camera", "GoPro Hero 12 Black Camera"],
    )
    def test_action_camera_is_not_fpv_camera(self, classifier, name):
        result = classifier.classify(name, "")

        assert result.category is Category.UNKNOWN
        assert WarningCode.CROSS_REFERENCE_IGNORED in result.warnings

    def test_fpv_camera_mentioning_gopro_in_description(self, classifier):
        result = classifier.classify(
            "Caddx Ratel 2 1200TVL FPV Camera",
            "Sharper than a GoPro at night",
        )
        assert result.category is Category.CAMERA

    def test_exclusive_brand_alone(self, classifier):
        result = classifier.classify("Gemfan Hurricane 51466", "")

        assert result.category is Category.PROP
        assert result.method is ClassificationMethod.BRAND_BIAS

    def test_shared_brand_alone_is_unknown(self, classifier):
        result = classifier.classify("T-Motor Velox", "")

        assert result.category is Category.UNKNOWN
        assert result.method is ClassificationMethod.BELOW_THRESHOLD
        assert WarningCode.BELOW_MIN_CONFIDENCE in result.warnings

    def test_brand_does_not_beat_keywords(self, classifier):
        result = classifier.classify("EMAX Avan Flow 5 Inch Props", "")
        assert result.category is Category.PROP

    def test_description_is_discounted(self, classifier):
        in_name = classifier.classify("Motor 2400KV", "")
        in_description = classifier.classify("Motor", "2400KV")
        assert in_description.confidence < in_name.confidence


class TestEmptyAndGarbage:
    @pytest.mark.parametrize("name,description", [("", ""), (None, None), ("!!!", "???")])
    def test_no_extractable_text(self, classifier, name, description):
        result = classifier.classify(name, description)

        assert result.category is Category.UNKNOWN
        assert result.confidence == 0
        assert result.reasoning == [ReasonCode.NO_EXTRACTABLE_TEXT]
        assert result.warnings == [WarningCode.NO_EXTRACTABLE_TEXT]

    def test_no_signals(self, classifier):
        result = classifier.classify("Sticky notes assortment", "")

        assert result.category is Category.UNKNOWN
        assert result.confidence == 0
        assert result.reasoning == [ReasonCode.NO_SIGNALS_MATCHED]
        assert result.warnings


class TestInvariants:
    NAMES = [
        "SpeedyBee Mario 5 Frame Kit - DC O4",
        "Motor Mount for 2207 Motors",
        "Tattu 1550mAh 4S 75C LiPo Battery",
        "T-Motor",
        "",
        "Random Gadget",
        "RunCam Phoenix 2 1000TVL FPV Cam",
        "XT60 Pigtail 12AWG",
    ]

    @pytest.mark.parametrize("name", NAMES)
    def test_idempotent(self, classifier, name):
        assert classifier.classify(name, "desc") == classifier.classify(name, "desc")

    @pytest.mark.parametrize("name", NAMES)
    def test_result_shape(self, classifier, name):
        result = classifier.classify(name, "")

        assert 0 <= result.confidence <= 100
        assert result.reasoning
        if result.category is Category.UNKNOWN:
            assert result.warnings
        assert result.rule_table_version == classifier.rule_table.version

    def test_classify_listing(self, classifier):
        listing = Listing(name="Tattu 1550mAh 4S 75C LiPo Battery", existing_category=Category.MOTOR)
        assert classifier.classify_listing(listing).category is Category.BATTERY
        assert listing.existing_category is Category.MOTOR
