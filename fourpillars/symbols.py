"""
Fixed BaZi vocabularies and lookup tables.

Heavenly stems, earthly branches, the 24 solar terms, and the static
mappings the pillar calculators read: sectional term → month branch,
branch → hidden stems, clock hour → branch, and the Five Tigers /
Five Rats starting stems.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"


@dataclass(frozen=True)
class HeavenlyStem:
    chinese: str
    pinyin: str
    element: Element
    polarity: Polarity
    index: int  # 0-9 in the cycle

    def __str__(self):
        return self.chinese

    def to_dict(self):
        return {
            "chinese": self.chinese,
            "pinyin": self.pinyin,
            "element": self.element.value,
            "polarity": self.polarity.value,
        }


@dataclass(frozen=True)
class EarthlyBranch:
    chinese: str
    pinyin: str
    animal: str
    element: Element  # primary/season element
    polarity: Polarity
    index: int  # 0-11 in the cycle
    hidden_stems: tuple[str, ...]  # chinese, [main_qi, middle_qi, residual_qi]

    def __str__(self):
        return self.chinese

    def to_dict(self):
        return {
            "chinese": self.chinese,
            "pinyin": self.pinyin,
            "animal": self.animal,
            "element": self.element.value,
            "polarity": self.polarity.value,
            "hidden_stems": list(self.hidden_stems),
        }


# ============================================================
# STEM AND BRANCH DEFINITIONS
# ============================================================

HEAVENLY_STEMS = (
    HeavenlyStem("甲", "Jia", Element.WOOD, Polarity.YANG, 0),
    HeavenlyStem("乙", "Yi", Element.WOOD, Polarity.YIN, 1),
    HeavenlyStem("丙", "Bing", Element.FIRE, Polarity.YANG, 2),
    HeavenlyStem("丁", "Ding", Element.FIRE, Polarity.YIN, 3),
    HeavenlyStem("戊", "Wu", Element.EARTH, Polarity.YANG, 4),
    HeavenlyStem("己", "Ji", Element.EARTH, Polarity.YIN, 5),
    HeavenlyStem("庚", "Geng", Element.METAL, Polarity.YANG, 6),
    HeavenlyStem("辛", "Xin", Element.METAL, Polarity.YIN, 7),
    HeavenlyStem("壬", "Ren", Element.WATER, Polarity.YANG, 8),
    HeavenlyStem("癸", "Gui", Element.WATER, Polarity.YIN, 9),
)

EARTHLY_BRANCHES = (
    EarthlyBranch("子", "Zi", "Rat", Element.WATER, Polarity.YANG, 0,
                  ("癸",)),  # main: Gui Water
    EarthlyBranch("丑", "Chou", "Ox", Element.EARTH, Polarity.YIN, 1,
                  ("己", "癸", "辛")),  # main: Ji Earth, mid: Gui Water, res: Xin Metal
    EarthlyBranch("寅", "Yin", "Tiger", Element.WOOD, Polarity.YANG, 2,
                  ("甲", "丙", "戊")),  # main: Jia Wood, mid: Bing Fire, res: Wu Earth
    EarthlyBranch("卯", "Mao", "Rabbit", Element.WOOD, Polarity.YIN, 3,
                  ("乙",)),  # main: Yi Wood
    EarthlyBranch("辰", "Chen", "Dragon", Element.EARTH, Polarity.YANG, 4,
                  ("戊", "乙", "癸")),  # main: Wu Earth, mid: Yi Wood, res: Gui Water
    EarthlyBranch("巳", "Si", "Snake", Element.FIRE, Polarity.YIN, 5,
                  ("丙", "戊", "庚")),  # main: Bing Fire, mid: Wu Earth, res: Geng Metal
    EarthlyBranch("午", "Wu", "Horse", Element.FIRE, Polarity.YANG, 6,
                  ("丁", "己")),  # main: Ding Fire, mid: Ji Earth
    EarthlyBranch("未", "Wei", "Goat", Element.EARTH, Polarity.YIN, 7,
                  ("己", "丁", "乙")),  # main: Ji Earth, mid: Ding Fire, res: Yi Wood
    EarthlyBranch("申", "Shen", "Monkey", Element.METAL, Polarity.YANG, 8,
                  ("庚", "壬", "戊")),  # main: Geng Metal, mid: Ren Water, res: Wu Earth
    EarthlyBranch("酉", "You", "Rooster", Element.METAL, Polarity.YIN, 9,
                  ("辛",)),  # main: Xin Metal
    EarthlyBranch("戌", "Xu", "Dog", Element.EARTH, Polarity.YANG, 10,
                  ("戊", "辛", "丁")),  # main: Wu Earth, mid: Xin Metal, res: Ding Fire
    EarthlyBranch("亥", "Hai", "Pig", Element.WATER, Polarity.YIN, 11,
                  ("壬", "甲")),  # main: Ren Water, mid: Jia Wood
)

# Lookup helpers
STEM_BY_CHINESE = MappingProxyType({s.chinese: s for s in HEAVENLY_STEMS})
BRANCH_BY_CHINESE = MappingProxyType({b.chinese: b for b in EARTHLY_BRANCHES})


def stem_at(index: int) -> HeavenlyStem:
    """Stem for any integer index, wrapping around the 10-cycle."""
    return HEAVENLY_STEMS[index % 10]


def branch_at(index: int) -> EarthlyBranch:
    """Branch for any integer index, wrapping around the 12-cycle."""
    return EARTHLY_BRANCHES[index % 12]


def hidden_stems(branch: EarthlyBranch) -> tuple[HeavenlyStem, ...]:
    """Hidden stems of a branch, primary qi first."""
    return tuple(STEM_BY_CHINESE[c] for c in branch.hidden_stems)


@dataclass(frozen=True)
class Pillar:
    """A sexagenary stem-branch pair. Stem and branch share polarity."""
    stem: HeavenlyStem
    branch: EarthlyBranch

    def __str__(self):
        return f"{self.stem.chinese}{self.branch.chinese}"

    @classmethod
    def parse(cls, text: str) -> "Pillar":
        """Build a pillar from its two-character form, e.g. "乙巳"."""
        if len(text) != 2 or text[0] not in STEM_BY_CHINESE or text[1] not in BRANCH_BY_CHINESE:
            raise ValueError(f"Not a stem-branch pair: {text!r}")
        return cls(STEM_BY_CHINESE[text[0]], BRANCH_BY_CHINESE[text[1]])

    def shift(self, steps: int) -> "Pillar":
        """Move `steps` positions along the 60-cycle (negative goes back)."""
        return Pillar(stem_at(self.stem.index + steps),
                      branch_at(self.branch.index + steps))

    def describe(self) -> str:
        return (f"{self.stem.pinyin} {self.branch.pinyin} "
                f"({self.stem.polarity.value} {self.stem.element.value} {self.branch.animal})")

    def to_dict(self, position: Optional[str] = None):
        data = {
            "stem": self.stem.to_dict(),
            "branch": self.branch.to_dict(),
            "combined": str(self),
            "description": self.describe(),
        }
        if position is not None:
            data = {"position": position, **data}
        return data


# ============================================================
# SOLAR TERMS
# ============================================================
#
# The 12 Jie (节) terms open a BaZi month; the 12 Qi (中气) terms sit
# mid-month and never move the month pillar.

class SolarTerm(Enum):
    XIAO_HAN = "小寒"
    DA_HAN = "大寒"
    LI_CHUN = "立春"
    YU_SHUI = "雨水"
    JING_ZHE = "驚蟄"
    CHUN_FEN = "春分"
    QING_MING = "清明"
    GU_YU = "穀雨"
    LI_XIA = "立夏"
    XIAO_MAN = "小滿"
    MANG_ZHONG = "芒種"
    XIA_ZHI = "夏至"
    XIAO_SHU = "小暑"
    DA_SHU = "大暑"
    LI_QIU = "立秋"
    CHU_SHU = "處暑"
    BAI_LU = "白露"
    QIU_FEN = "秋分"
    HAN_LU = "寒露"
    SHUANG_JIANG = "霜降"
    LI_DONG = "立冬"
    XIAO_XUE = "小雪"
    DA_XUE = "大雪"
    DONG_ZHI = "冬至"

    @property
    def is_sectional(self) -> bool:
        return self in TERM_TO_BRANCH

    @classmethod
    def from_name(cls, name: str) -> "SolarTerm":
        """Parse a term name in traditional or simplified characters."""
        name = SIMPLIFIED_TERM_NAMES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown solar term: {name!r}") from None


SIMPLIFIED_TERM_NAMES = MappingProxyType({
    "惊蛰": "驚蟄",
    "谷雨": "穀雨",
    "小满": "小滿",
    "芒种": "芒種",
    "处暑": "處暑",
})

# Sectional term → month branch (Li Chun opens the Tiger month)
TERM_TO_BRANCH = MappingProxyType({
    SolarTerm.LI_CHUN: BRANCH_BY_CHINESE["寅"],
    SolarTerm.JING_ZHE: BRANCH_BY_CHINESE["卯"],
    SolarTerm.QING_MING: BRANCH_BY_CHINESE["辰"],
    SolarTerm.LI_XIA: BRANCH_BY_CHINESE["巳"],
    SolarTerm.MANG_ZHONG: BRANCH_BY_CHINESE["午"],
    SolarTerm.XIAO_SHU: BRANCH_BY_CHINESE["未"],
    SolarTerm.LI_QIU: BRANCH_BY_CHINESE["申"],
    SolarTerm.BAI_LU: BRANCH_BY_CHINESE["酉"],
    SolarTerm.HAN_LU: BRANCH_BY_CHINESE["戌"],
    SolarTerm.LI_DONG: BRANCH_BY_CHINESE["亥"],
    SolarTerm.DA_XUE: BRANCH_BY_CHINESE["子"],
    SolarTerm.XIAO_HAN: BRANCH_BY_CHINESE["丑"],
})

SECTIONAL_TERMS = tuple(TERM_TO_BRANCH)


# ============================================================
# HOUR TABLE AND STARTING-STEM MAPS
# ============================================================

# (start_hour, end_hour, branch), half-open [start, end); Zi wraps midnight
HOUR_BRANCH_TABLE = (
    (23, 1, BRANCH_BY_CHINESE["子"]),
    (1, 3, BRANCH_BY_CHINESE["丑"]),
    (3, 5, BRANCH_BY_CHINESE["寅"]),
    (5, 7, BRANCH_BY_CHINESE["卯"]),
    (7, 9, BRANCH_BY_CHINESE["辰"]),
    (9, 11, BRANCH_BY_CHINESE["巳"]),
    (11, 13, BRANCH_BY_CHINESE["午"]),
    (13, 15, BRANCH_BY_CHINESE["未"]),
    (15, 17, BRANCH_BY_CHINESE["申"]),
    (17, 19, BRANCH_BY_CHINESE["酉"]),
    (19, 21, BRANCH_BY_CHINESE["戌"]),
    (21, 23, BRANCH_BY_CHINESE["亥"]),
)

# Five Tigers Escape (五虎遁): year stem → stem of the Tiger month
TIGER_START_STEMS = MappingProxyType({
    0: 2, 5: 2,   # Jia/Ji year → Bing Tiger
    1: 4, 6: 4,   # Yi/Geng year → Wu Tiger
    2: 6, 7: 6,   # Bing/Xin year → Geng Tiger
    3: 8, 8: 8,   # Ding/Ren year → Ren Tiger
    4: 0, 9: 0,   # Wu/Gui year → Jia Tiger
})

# Five Rats Escape (五鼠遁): day stem → stem of the Rat hour
RAT_START_STEMS = MappingProxyType({
    0: 0, 5: 0,   # Jia/Ji day → Jia Zi hour
    1: 2, 6: 2,   # Yi/Geng day → Bing Zi hour
    2: 4, 7: 4,   # Bing/Xin day → Wu Zi hour
    3: 6, 8: 6,   # Ding/Ren day → Geng Zi hour
    4: 8, 9: 8,   # Wu/Gui day → Ren Zi hour
})


def branch_for_hour(hour: int) -> Optional[EarthlyBranch]:
    """Branch whose two-hour slot contains `hour` (0-23)."""
    if not 0 <= hour < 24:
        return None
    for start, end, branch in HOUR_BRANCH_TABLE:
        if start > end:
            if hour >= start or hour < end:
                return branch
        elif start <= hour < end:
            return branch
    return None
