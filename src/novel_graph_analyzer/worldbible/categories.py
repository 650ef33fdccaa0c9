"""
World-building vocabulary.

Keyword tables used to surface beliefs, social structures and cultural
elements from event descriptions and the concept network.
"""

from enum import Enum


class CulturalCategory(Enum):
    """Fixed categories of cultural elements."""
    CUSTOMS = "customs"         # Customs, rituals, taboos
    BELIEFS = "beliefs"         # Faith, gods, worship
    VALUES = "values"           # Morality and virtue
    ARTS = "arts"               # Music, dance, poetry, painting
    KNOWLEDGE = "knowledge"     # Learning, crafts, secret arts


CULTURAL_KEYWORDS: dict[CulturalCategory, tuple[str, ...]] = {
    CulturalCategory.CUSTOMS: ("习俗", "传统", "礼仪", "规矩", "禁忌"),
    CulturalCategory.BELIEFS: ("信仰", "神明", "教义", "祭祀", "祈祷"),
    CulturalCategory.VALUES: ("道德", "伦理", "美德", "品格", "操守"),
    CulturalCategory.ARTS: ("艺术", "音乐", "舞蹈", "诗歌", "绘画"),
    CulturalCategory.KNOWLEDGE: ("智慧", "学问", "技艺", "秘术", "法门"),
}

# Words signalling a stated belief or value judgement
VALUE_KEYWORDS: tuple[str, ...] = (
    "认为", "相信", "觉得", "坚持", "追求", "应该", "必须", "一定要",
    "永远", "绝不", "对错", "善恶", "是非", "价值", "意义",
)

# Checked in this order when typing a relationship between group members
SOCIAL_MARKERS: dict[str, tuple[str, ...]] = {
    "family": ("父母", "子女", "兄弟", "姐妹", "夫妻"),
    "organization": ("组织", "团队", "公司", "集团", "部门", "学校", "机构", "门派", "宗门", "帮会"),
    "social": ("朋友", "同学", "同事", "伙伴", "搭档", "师徒"),
    "power": ("领导", "上司", "下属", "主管", "经理", "老板"),
}

UNNAMED_GROUP = "未命名组织"

# Cultural significance by share of events touching the category
SIGNIFICANCE_LEVELS: list[tuple[float, str]] = [
    (0.3, "重要"),
    (0.1, "相关"),
]
DEFAULT_SIGNIFICANCE = "次要"
