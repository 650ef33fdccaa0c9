"""Surface-pattern rule tables for entity, attribute and relation extraction.

Rules are plain data: each one is a compiled pattern plus the name of the
capture group holding the value. The traversal code in ``recognizer``,
``resolver`` and ``relationships`` never hard-codes a pattern.
"""

import re
from dataclasses import dataclass
from typing import Iterator

from ..models.entities import EntityType
from ..models.relationships import RelationType

HAN = r"[\u4e00-\u9fa5]"


@dataclass(frozen=True)
class RuleMatch:
    """One hit of a surface rule."""

    rule: str
    text: str
    start: int
    end: int
    groups: dict[str, str | None]


@dataclass(frozen=True)
class SurfaceRule:
    """A named, compiled pattern returning ``(span, groups)`` hits."""

    name: str
    pattern: re.Pattern

    def scan(self, text: str) -> Iterator[RuleMatch]:
        for match in self.pattern.finditer(text):
            if not match.group():
                continue
            yield RuleMatch(
                rule=self.name,
                text=match.group(),
                start=match.start(),
                end=match.end(),
                groups=match.groupdict(),
            )


def rule(name: str, pattern: str, flags: int = 0) -> SurfaceRule:
    # "H{m,n}" abbreviates a run of Han characters
    return SurfaceRule(name=name, pattern=re.compile(pattern.replace("H{", HAN + "{"), flags))


# ============================================================================
# Entity recognition
# ============================================================================

# Dict order is type precedence: a name claimed by an earlier type is never
# offered to a later one.
ENTITY_RULES: dict[EntityType, list[SurfaceRule]] = {
    EntityType.CHARACTER: [
        rule("speech_verb", r"(?P<name>H{2,4})(?=说|道|笑|问|答|喊|叫)"),
        rule("demonstrative", r"(?:这个|那个|这位|那位|这名|那名)(?P<name>H{2,4})"),
        rule("honorific", r"(?P<name>H{2,4})(?=大师|前辈|师兄|师姐|师弟|师妹)"),
        rule("copula", r"(?P<name>H{2,4})(?=是一位|是一名|是一个|是个|是位)"),
        rule("nickname", r"(?P<name>(?:老|小|阿)H{1})(?=[说道笑问答喊叫是和与])"),
    ],
    EntityType.ORGANIZATION: [
        rule("sect", r"(?P<name>H{2,8}(?:帮|派|门|宗|盟|会馆|商会|公会|组织|社))"),
        rule("house", r"(?P<name>H{2,8}(?:魔教|神教|圣教|山庄|镖局|世家))"),
        rule("military", r"(?P<name>H{2,8}(?:大军|禁军|铁骑|卫队|军团|营))"),
        rule("government", r"(?P<name>H{2,8}(?:朝廷|王朝|衙门|官府|司|署))"),
    ],
    EntityType.LOCATION: [
        rule("settlement", r"(?P<name>H{2,10}[城镇村府宫殿山洞室堂寺庙谷])"),
        rule("landform", r"(?P<name>H{2,10}(?:瀑布|山|林|湖|海|河|谷|潭|泉))"),
        rule("building", r"(?P<name>H{2,10}(?:宫|殿|楼|阁|亭|台|寺|观|庙|府|院|阵|园))"),
        rule("region", r"(?P<name>H{2,10}(?:域|界|国|郡|州|县|镇|城|村|境))"),
    ],
    EntityType.ITEM: [
        rule("weapon", r"(?P<name>H{2,8}(?:剑|刀|枪|斧|戟|矛|弓|锤|鞭|棍|杖))"),
        rule("artifact", r"(?P<name>H{2,8}(?:符|丹|珠|镜|印|图|册|经|卷))"),
        rule("treasure", r"(?P<name>H{2,8}(?:宝|器|铠|甲|袍|靴|环|佩|玉))"),
    ],
    EntityType.SKILL: [
        rule("martial", r"(?P<name>H{2,8}(?:剑法|刀法|枪法|箭法|身法|拳|掌|指|腿|功|诀|术))"),
        rule("secret", r"(?P<name>H{2,8}(?:神通|秘技|绝学|心法|功法|内功|心经))"),
    ],
    EntityType.RACE: [
        rule("clan", r"(?P<name>H{1,4}族)"),
        rule("tribe", r"(?P<name>H{2,4}(?:遗民|部落))"),
    ],
    EntityType.TITLE: [
        rule(
            "rank",
            r"(?P<name>H{2,4}(?:大师|前辈|师兄|师姐|师弟|师妹|掌门|宗主|教主|门主|帮主|将军|统领|首领|族长|城主))",
        ),
    ],
}

# Generic fallback rules for the lightweight recognizer
QUICK_RULES: dict[EntityType, list[SurfaceRule]] = {
    EntityType.CHARACTER: [
        ENTITY_RULES[EntityType.CHARACTER][0],
        rule("labelled", r"(?:角色|人物)[:：]\s*(?P<name>[^\s，。,;；:：]+)"),
    ],
    EntityType.LOCATION: [
        ENTITY_RULES[EntityType.LOCATION][0],
        rule("labelled", r"(?:地点|场所)[:：]\s*(?P<name>[^\s，。,;；:：]+)"),
    ],
}

# Leading function words that greedy character rules pick up ("看着李明")
CHARACTER_PREFIX_NOISE = re.compile(r"^[他她它我你和与跟对把被让给从在却便就又也都看听见着了的是]+")

# Everything up to the last locative or acquisition verb ("他住在长安城")
PLACE_PREFIX_NOISE = re.compile(
    r"^.*(?:住在|来到|前往|到达|抵达|位于|回到|进入|离开|走进|加入|属于|效忠于|来自|"
    r"获得|得到|拥有|使用|修炼|学会|掌握|施展|在|到|去|往|从|了|的|着|和|与)"
)

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 20
MAX_QUICK_NAME_LENGTH = 10


# ============================================================================
# Attribute rules
# ============================================================================

@dataclass(frozen=True)
class AttributeRule:
    """Fills one entity attribute from the context around a mention.

    ``collect`` rules gather every distinct value into a list; the others
    keep the first value found.
    """

    field: str
    pattern: re.Pattern
    group: int = 1
    collect: bool = False


def attr(field: str, pattern: str, group: int = 1, collect: bool = False) -> AttributeRule:
    return AttributeRule(field=field, pattern=re.compile(pattern), group=group, collect=collect)


NUMBER = "[一二三四五六七八九十百千0-9]"

ATTRIBUTE_RULES: dict[EntityType, list[AttributeRule]] = {
    EntityType.CHARACTER: [
        attr(
            "personality",
            r"(?:性格|为人|秉性)?(温和|善良|正直|勇敢|机智|豪爽|大方|谨慎|稳重|冷静|聪明|智慧|仁慈|开朗|活泼|坚强|谦逊|耐心|细心|勤奋)",
            collect=True,
        ),
        attr(
            "personality",
            r"(暴躁|狡猾|自私|傲慢|固执|鲁莽|懒惰|虚伪|胆小|愚钝|狠毒|阴险|贪婪|残暴|怯懦|轻浮|粗心|冷漠)",
            collect=True,
        ),
        attr("age", rf"(?:年仅|年方|年近|虚岁)?({NUMBER}+[岁年])"),
        attr("generation", r"(少年|青年|中年|老年|前辈|前代|后辈|晚辈)"),
        attr("status", r"(掌门|宗主|帮主|教主|门主|族长|首领|统领|将军|王|帝|皇|官|师|主)"),
    ],
    EntityType.ITEM: [
        attr("quality", r"(上品|极品|绝品|神品|凡品|下品)"),
        attr("rarity", r"(独一无二|举世无双|世所罕见|稀有|珍贵|罕见)"),
        attr("power", r"(神威|威力|威能|功效|效果|作用)"),
        attr("material", r"(?:由|用|以)([^，。]+?)(?:炼制|打造|制成)"),
        attr("origin", r"(?:传自|来自|源自|出自)([^，。]+)"),
    ],
    EntityType.SKILL: [
        attr("level", r"(登峰造极|返璞归真|入门|小成|大成|圆满|初级|中级|高级|顶级)"),
        attr("power", r"(?:威力|威能|杀伤力|破坏力|效果)(极强|强大|一般|微弱)"),
        attr("skill_type", r"(攻击|防御|辅助|治疗|控制|封印|幻术|身法)"),
        attr("element", r"(金|木|水|火|土|风|雷|光|暗|冰|雪|毒)"),
        attr("difficulty", r"(?:难度|修炼|掌握)(艰深|极难|困难|一般|容易)"),
    ],
    EntityType.LOCATION: [
        attr("size", r"(广大|宏伟|巨大|宽广|辽阔|狭小|逼仄)"),
        attr("environment", r"(险峻|平坦|陡峭|幽深|空旷|荒凉|繁华|热闹)"),
        attr("climate", r"(寒冷|炎热|温和|潮湿|干燥|多雨|多雾)"),
        attr("significance", r"(重要|关键|核心|偏远|边缘|偏僻)"),
        attr("resources", r"(?:盛产|出产|富含|蕴含)([^，。]+)"),
    ],
    EntityType.ORGANIZATION: [
        attr("scale", r"(规模宏大|庞大|巨大|中等|小型)"),
        attr("influence", r"(显赫|强大|普通|微弱|没落)"),
        attr("nature", r"(正派|邪派|中立|善|恶)"),
        attr("history", r"(历史悠久|悠久|古老|新兴|初创)"),
        attr("territory", r"(?:势力范围|管辖范围|统治范围)([^，。]+)"),
    ],
}


# ============================================================================
# Alias and disambiguation markers
# ============================================================================

# Apposition: the phrase after the marker names the same referent
APPOSITION_MARKERS = ("又称", "亦称", "别称", "别名", "绰号", "名为", "名叫")

# Markers written directly in front of a name (kinship, nickname, status).
# Markers sharing a label describe the same referent: 老小明 and 前辈小明
# are one person, 小小明 another.
PREFIX_MARKERS: dict[str, str] = {
    # kinship
    "祖父": "祖父",
    "祖母": "祖母",
    "父亲": "父亲",
    "母亲": "母亲",
    "哥哥": "兄长",
    "兄长": "兄长",
    "弟弟": "弟弟",
    "姐姐": "姐姐",
    "妹妹": "妹妹",
    "师父": "师父",
    # seniority and nicknames
    "前辈": "老",
    "晚辈": "小",
    "老": "老",
    "小": "小",
    "大": "大",
    "阿": "阿",
    # status
    "前任": "前任",
    "现任": "现任",
    "后任": "后任",
}

# Longest markers are tried first
PREFIX_MARKER_ORDER = sorted(PREFIX_MARKERS, key=len, reverse=True)

APPOSITION_WINDOW = 30

# Apposition phrase shortly after a mention, within the same sentence
APPOSITION_PATTERN = re.compile(
    rf"^[^。！？!?.]{{0,{APPOSITION_WINDOW}}}?(?:{'|'.join(APPOSITION_MARKERS)})([^，。！？!?.、]+)"
)


# ============================================================================
# Relation templates
# ============================================================================

@dataclass(frozen=True)
class RelationRule:
    """An explicit relation template binding ``source`` and ``target`` groups."""

    type: RelationType
    rule: SurfaceRule


RELATION_RULES: list[RelationRule] = [
    RelationRule(
        RelationType.MASTER_APPRENTICE,
        rule(
            "master_apprentice",
            r"(?P<source>H{2,4})(?:收|带|教导|教习|教授)(?P<target>H{2,4})(?:为徒|学艺|修行)",
        ),
    ),
    RelationRule(
        RelationType.FAMILY,
        rule(
            "family",
            r"(?P<source>H{2,4})(?:的|是|为)(?P<target>H{2,4})的?(?:祖父|祖母|父|母|兄|弟|姐|妹|子|女|夫|妻)",
        ),
    ),
    RelationRule(
        RelationType.FACTION,
        rule("faction", r"(?P<source>H{2,4})(?:加入|属于|效忠于|来自)(?P<target>H{2,10})"),
    ),
    RelationRule(
        RelationType.LOCATION,
        rule("location", r"(?P<source>H{2,4})(?:位于|在|到达|来到|前往)(?P<target>H{2,10})"),
    ),
    RelationRule(
        RelationType.SKILL,
        rule("skill", r"(?P<source>H{2,4})(?:修炼|学会|掌握|使用)(?P<target>H{2,10})"),
    ),
    RelationRule(
        RelationType.ITEM,
        rule("item", r"(?P<source>H{2,4})(?:获得|得到|拥有|使用)(?P<target>H{2,10})"),
    ),
]

# (relation type, base confidence) for co-occurring pairs, keyed by the
# non-character side when one side is a character
COOCCURRENCE_TYPES: dict[tuple[EntityType, EntityType], tuple[RelationType, float]] = {
    (EntityType.CHARACTER, EntityType.CHARACTER): (RelationType.CHARACTER_RELATION, 0.7),
    (EntityType.CHARACTER, EntityType.ORGANIZATION): (RelationType.BELONGS_TO, 0.6),
    (EntityType.CHARACTER, EntityType.LOCATION): (RelationType.APPEARS_IN, 0.6),
    (EntityType.CHARACTER, EntityType.SKILL): (RelationType.POSSESSES, 0.7),
    (EntityType.CHARACTER, EntityType.ITEM): (RelationType.OWNS, 0.7),
}
DEFAULT_COOCCURRENCE = (RelationType.RELATED_TO, 0.5)

CONTEXT_SNIPPET = 20
COOCCURRENCE_SPAN = 100


# ============================================================================
# Coreference vocabulary
# ============================================================================

# Longest forms first so 这个 wins over 这
PRONOUNS: dict[str, tuple[str, ...]] = {
    "first": ("寡人", "本王", "本君", "本座", "老夫", "本尊", "我", "俺", "咱", "朕"),
    "second": ("阁下", "大人", "前辈", "先生", "姑娘", "你", "您", "汝", "尔", "贵"),
    "third": ("此人", "那人", "这人", "他", "她", "它", "其", "彼"),
    "near": ("这个", "这位", "这名", "这种", "这", "此"),
    "far": ("那个", "那位", "那名", "那种", "那", "彼"),
    "reflexive": ("自己", "本身", "亲自"),
}

SPEECH_PATTERN = re.compile(r"([^，。！？!?.]+)(?:笑道|喊道|问道|回答|说|道)")
