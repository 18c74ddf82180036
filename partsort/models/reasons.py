"""Reason and warning codes attached to classification results.

Codes are stable identifiers so callers and tests can assert on them
instead of on prose.
"""
from enum import Enum


class ReasonCode(str, Enum):
    """A fired rule."""

    # Frame
    WHEELBASE_SPEC = "wheelbase_spec"
    FRAME_KIT = "frame_kit"
    FRAME_KEYWORD = "frame_keyword"
    FRAME_BRAND_BIAS = "frame_brand_bias"

    # Battery
    CELLS_WITH_CAPACITY = "cells_with_capacity"
    LIPO_PACK = "lipo_pack"
    BATTERY_KEYWORD = "battery_keyword"
    CAPACITY_SPEC = "capacity_spec"
    CELL_COUNT_SPEC = "cell_count_spec"
    C_RATING_SPEC = "c_rating_spec"
    BATTERY_BRAND_BIAS = "battery_brand_bias"

    # Motor
    KV_RATING = "kv_rating"
    BRUSHLESS_MOTOR = "brushless_motor"
    MOTOR_KEYWORD = "motor_keyword"
    STATOR_SIZE = "stator_size"
    MOTOR_BRAND_BIAS = "motor_brand_bias"

    # Stack
    FLIGHT_CONTROLLER_WITH_MCU = "flight_controller_with_mcu"
    ALL_IN_ONE = "all_in_one"
    FOUR_IN_ONE_ESC = "four_in_one_esc"
    ESC_WITH_CURRENT = "esc_with_current"
    STACK_KEYWORD = "stack_keyword"
    MCU_SPEC = "mcu_spec"
    STACK_BRAND_BIAS = "stack_brand_bias"

    # Camera
    FPV_CAMERA = "fpv_camera"
    DIGITAL_VIDEO_SYSTEM = "digital_video_system"
    TVL_RESOLUTION = "tvl_resolution"
    CAMERA_KEYWORD = "camera_keyword"
    CAMERA_BRAND_BIAS = "camera_brand_bias"

    # Prop
    PROP_DIMENSIONS = "prop_dimensions"
    PROPELLER_KEYWORD = "propeller_keyword"
    PROP_BRAND_BIAS = "prop_brand_bias"

    # Disambiguation
    PROP_CROSS_REFERENCE_PENALTY = "prop_cross_reference_penalty"
    STACK_CONTEXT_PENALTY = "stack_context_penalty"
    BATTERY_CONTEXT_PENALTY = "battery_context_penalty"
    FRAME_CONTEXT_PENALTY = "frame_context_penalty"
    PROP_CONTEXT_PENALTY = "prop_context_penalty"
    ACTION_CAMERA_PENALTY = "action_camera_penalty"
    BRAND_BIAS_DROPPED = "brand_bias_dropped"
    ACCESSORY_SUPPRESSION = "accessory_suppression"
    TIE_BROKEN_BY_PRIORITY = "tie_broken_by_priority"

    # Nothing to go on
    NO_EXTRACTABLE_TEXT = "no_extractable_text"
    NO_SIGNALS_MATCHED = "no_signals_matched"


class WarningCode(str, Enum):
    """Why a result is weak or unknown."""
    NO_EXTRACTABLE_TEXT = "no extractable text"
    BELOW_MIN_CONFIDENCE = "no category cleared minimum confidence"
    ACCESSORY_SUPPRESSED = "accessory language suppressed classification"
    ACCESSORY_IN_DESCRIPTION = "accessory language found in description"
    NEAR_TIE = "near-tie between top categories"
    CROSS_REFERENCE_IGNORED = "compatibility mention ignored"
