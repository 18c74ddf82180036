"""Built-in rule table.

Keyword weights apply to matches in the listing name; description matches
are discounted by ScoringWeights.description_multiplier.
"""
from typing import List

from partsort.models.listing import Category
from partsort.models.reasons import ReasonCode
from partsort.rules.table import BrandRule, KeywordRule, RuleTable, StructuralCue

MOTOR = Category.MOTOR
FRAME = Category.FRAME
STACK = Category.STACK
CAMERA = Category.CAMERA
PROP = Category.PROP
BATTERY = Category.BATTERY


DEFAULT_BRANDS: List[BrandRule] = [
    # Multi-line brands
    BrandRule(key="t-motor", aliases=["t-motor", "tmotor", "t motor"], bias=[MOTOR, PROP, STACK]),
    BrandRule(key="iflight", aliases=["iflight", "i-flight"], bias=[FRAME, MOTOR, STACK]),
    BrandRule(key="speedybee", aliases=["speedybee", "speedy bee"], bias=[STACK, FRAME]),
    BrandRule(key="geprc", aliases=["geprc"], bias=[FRAME, STACK]),
    BrandRule(key="betafpv", aliases=["betafpv", "beta fpv"], bias=[FRAME, STACK]),
    BrandRule(key="flywoo", aliases=["flywoo"], bias=[FRAME, STACK]),
    BrandRule(key="racerstar", aliases=["racerstar"], bias=[MOTOR, STACK]),
    BrandRule(key="lumenier", aliases=["lumenier"], bias=[FRAME, PROP]),
    # Motors
    BrandRule(key="emax", aliases=["emax"], bias=[MOTOR]),
    BrandRule(key="brotherhobby", aliases=["brotherhobby", "brother hobby"], bias=[MOTOR]),
    BrandRule(key="rcinpower", aliases=["rcinpower"], bias=[MOTOR]),
    BrandRule(key="sunnysky", aliases=["sunnysky"], bias=[MOTOR]),
    BrandRule(key="axisflying", aliases=["axisflying"], bias=[MOTOR]),
    # Props
    BrandRule(key="gemfan", aliases=["gemfan"], bias=[PROP]),
    BrandRule(key="hqprop", aliases=["hqprop", "hq prop", "hq-prop"], bias=[PROP]),
    BrandRule(key="dalprop", aliases=["dalprop", "dal prop"], bias=[PROP]),
    BrandRule(key="ethix", aliases=["ethix"], bias=[PROP]),
    BrandRule(key="azure", aliases=["azure power", "azure"], bias=[PROP]),
    # Batteries
    BrandRule(key="tattu", aliases=["tattu"], bias=[BATTERY]),
    BrandRule(key="gnb", aliases=["gnb", "gaoneng"], bias=[BATTERY]),
    BrandRule(key="cnhl", aliases=["cnhl"], bias=[BATTERY]),
    BrandRule(key="gens ace", aliases=["gens ace", "gensace", "gens-ace"], bias=[BATTERY]),
    BrandRule(key="ovonic", aliases=["ovonic"], bias=[BATTERY]),
    BrandRule(key="dogcom", aliases=["dogcom"], bias=[BATTERY]),
    BrandRule(key="turnigy", aliases=["turnigy"], bias=[BATTERY]),
    BrandRule(key="auline", aliases=["auline"], bias=[BATTERY]),
    # Cameras and video
    BrandRule(key="runcam", aliases=["runcam", "run cam"], bias=[CAMERA]),
    BrandRule(key="foxeer", aliases=["foxeer"], bias=[CAMERA]),
    BrandRule(key="caddx", aliases=["caddx", "caddxfpv"], bias=[CAMERA]),
    BrandRule(key="walksnail", aliases=["walksnail"], bias=[CAMERA]),
    BrandRule(key="hdzero", aliases=["hdzero", "hd zero"], bias=[CAMERA]),
    BrandRule(key="dji", aliases=["dji"], bias=[CAMERA]),
    # Flight controllers and ESCs
    BrandRule(key="holybro", aliases=["holybro"], bias=[STACK]),
    BrandRule(key="matek", aliases=["mateksys", "matek systems", "matek"], bias=[STACK]),
    BrandRule(key="jhemcu", aliases=["jhemcu"], bias=[STACK]),
    BrandRule(key="hglrc", aliases=["hglrc"], bias=[STACK]),
    BrandRule(key="aikon", aliases=["aikon"], bias=[STACK]),
    BrandRule(key="diatone", aliases=["diatone"], bias=[FRAME, STACK]),
    # Frames
    BrandRule(key="armattan", aliases=["armattan"], bias=[FRAME]),
    BrandRule(key="tbs", aliases=["tbs", "team blacksheep"], bias=[FRAME]),
    BrandRule(key="impulserc", aliases=["impulserc", "impulse rc"], bias=[FRAME]),
]


DEFAULT_KEYWORDS: List[KeywordRule] = [
    # Compatibility mentions; matched first so their terms never score
    KeywordRule(
        term="propeller compatibility",
        category=PROP,
        pattern=r"(?:propellers?|props?)\s(?:compatibility|compatible|support(?:ed)?|size|clearance)",
        cross_reference=True,
    ),
    KeywordRule(
        term="max prop size",
        category=PROP,
        pattern=r"max(?:imum)?\s(?:propellers?|props?)(?:\ssize)?",
        cross_reference=True,
    ),
    KeywordRule(
        term="supports props",
        category=PROP,
        pattern=r"(?:supports?|fits?|for)\s(?:up\sto\s)?[\d.]+\s?(?:inch|in|\")?\s?(?:propellers?|props?)",
        cross_reference=True,
    ),
    KeywordRule(
        term="compatible with motors",
        category=MOTOR,
        pattern=r"(?:compatible\swith|for|fits?)\s(?:\d{4}\s)?(?:motors?)",
        cross_reference=True,
    ),
    KeywordRule(
        term="action camera",
        category=CAMERA,
        pattern=r"gopro|action\s?cam(?:era)?s?",
        cross_reference=True,
    ),
    # Frame
    KeywordRule(
        term="frame kit",
        category=FRAME,
        weight=60,
        pattern=r"frame\s?kit|kit\sframe",
        anchored=True,
        code=ReasonCode.FRAME_KIT,
    ),
    KeywordRule(term="frame", category=FRAME, weight=35, pattern=r"frames?(?!\s?rate)"),
    KeywordRule(term="chassis", category=FRAME, weight=30),
    KeywordRule(term="wheelbase", category=FRAME, weight=20),
    KeywordRule(term="unibody", category=FRAME, weight=10),
    KeywordRule(term="arm", category=FRAME, weight=8, pattern=r"arms?"),
    KeywordRule(term="carbon fiber", category=FRAME, weight=8, pattern=r"carbon\s?fib(?:er|re)"),
    # Stack
    KeywordRule(
        term="4in1 esc",
        category=STACK,
        weight=55,
        pattern=r"(?:4\s?in\s?1|4-in-1|four\sin\sone)\s?escs?",
        anchored=True,
        code=ReasonCode.FOUR_IN_ONE_ESC,
    ),
    KeywordRule(
        term="aio",
        category=STACK,
        weight=50,
        pattern=r"aio|all[\s-]in[\s-]one",
        anchored=True,
        code=ReasonCode.ALL_IN_ONE,
    ),
    KeywordRule(term="flight controller", category=STACK, weight=45, pattern=r"flight\s?controllers?"),
    KeywordRule(term="stack", category=STACK, weight=35, pattern=r"stacks?"),
    KeywordRule(term="esc", category=STACK, weight=30, pattern=r"escs?"),
    KeywordRule(term="4in1", category=STACK, weight=25, pattern=r"4\s?in\s?1|4-in-1"),
    KeywordRule(term="fc", category=STACK, weight=25),
    KeywordRule(term="blheli", category=STACK, weight=10, pattern=r"blheli(?:_?32|_s)?|bluejay|am32"),
    KeywordRule(term="gyro", category=STACK, weight=8),
    KeywordRule(term="osd", category=STACK, weight=5),
    # Motor
    KeywordRule(
        term="brushless motor",
        category=MOTOR,
        weight=55,
        pattern=r"brushless\s(?:outrunner\s)?motors?",
        anchored=True,
        code=ReasonCode.BRUSHLESS_MOTOR,
    ),
    KeywordRule(term="motor", category=MOTOR, weight=30, pattern=r"motors?"),
    KeywordRule(term="stator", category=MOTOR, weight=15),
    KeywordRule(term="outrunner", category=MOTOR, weight=15),
    # Camera
    KeywordRule(
        term="fpv camera",
        category=CAMERA,
        weight=55,
        pattern=r"fpv\s(?:cameras?|cams?)",
        anchored=True,
        code=ReasonCode.FPV_CAMERA,
    ),
    KeywordRule(
        term="air unit",
        category=CAMERA,
        weight=50,
        pattern=r"air\s?units?|vtx\s(?:and|&)\scamera",
        anchored=True,
        code=ReasonCode.DIGITAL_VIDEO_SYSTEM,
    ),
    KeywordRule(term="camera", category=CAMERA, weight=35, pattern=r"cameras?"),
    KeywordRule(term="cam", category=CAMERA, weight=20, pattern=r"cams?"),
    KeywordRule(term="cmos", category=CAMERA, weight=15),
    KeywordRule(term="frame rate", category=CAMERA, weight=5, pattern=r"frame\s?rate|fps"),
    KeywordRule(term="lens", category=CAMERA, weight=8, pattern=r"lens(?:es)?"),
    KeywordRule(term="starlight", category=CAMERA, weight=10),
    # Prop
    KeywordRule(term="propeller", category=PROP, weight=45, pattern=r"propellers?"),
    KeywordRule(term="prop", category=PROP, weight=35, pattern=r"props?"),
    KeywordRule(
        term="blade",
        category=PROP,
        weight=20,
        pattern=r"(?:bi|tri|quad|[2-6])[\s-]?blades?|blades?",
    ),
    # Battery
    KeywordRule(
        term="lipo battery",
        category=BATTERY,
        weight=50,
        pattern=r"(?:li-?po|lihv|li-?ion)\s(?:batter(?:y|ies)|packs?)|battery\spacks?",
        anchored=True,
        code=ReasonCode.LIPO_PACK,
    ),
    KeywordRule(term="lipo", category=BATTERY, weight=40, pattern=r"li-?po|lihv|li-?hv"),
    KeywordRule(term="battery", category=BATTERY, weight=35, pattern=r"batter(?:y|ies)"),
    KeywordRule(term="li-ion", category=BATTERY, weight=30, pattern=r"li-?ion|18650|21700"),
    KeywordRule(term="discharge", category=BATTERY, weight=5),
]


DEFAULT_STRUCTURAL_CUES: List[StructuralCue] = [
    StructuralCue(term="mount", pattern=r"mounts?"),
    StructuralCue(term="tray", pattern=r"trays?"),
    StructuralCue(term="holder", pattern=r"holders?"),
    StructuralCue(term="protection kit", pattern=r"protection\s(?:kit|cover|case)s?"),
    StructuralCue(term="protector", pattern=r"protectors?"),
    StructuralCue(term="guard", pattern=r"guards?"),
    StructuralCue(term="accessory", pattern=r"accessor(?:y|ies)"),
    StructuralCue(term="strap", pattern=r"straps?"),
    StructuralCue(term="dampener", pattern=r"dampeners?|dampers?|damping\sballs?"),
    StructuralCue(term="spare", pattern=r"spare(?:\sparts?)?"),
    StructuralCue(term="replacement"),
    StructuralCue(term="hardware", pattern=r"screws?|standoffs?|bolts?|nuts?"),
    StructuralCue(term="charger", pattern=r"chargers?"),
    StructuralCue(term="bag", pattern=r"bags?"),
    StructuralCue(term="sticker", pattern=r"stickers?|decals?"),
]


def default_rule_table() -> RuleTable:
    """Return the built-in rule table (version 1)."""
    return RuleTable(
        version=1,
        brands=DEFAULT_BRANDS,
        keywords=DEFAULT_KEYWORDS,
        structural_cues=DEFAULT_STRUCTURAL_CUES,
    )
