"""Vocabulary for time expressions, event detection and causal inference."""

from ..extract.patterns import SurfaceRule, rule

NUMERAL = "[一二三四五六七八九十百千万零〇两0-9]"
SMALL_NUMERAL = "[一二三四五六七八九十0-9]"

# Keyed by ``<category>_<subtype>``
TIME_RULES: dict[str, SurfaceRule] = {
    "absolute_date": rule(
        "absolute_date",
        rf"(?P<year>{NUMERAL}+年)?(?P<month>{SMALL_NUMERAL}+月)(?P<day>{SMALL_NUMERAL}+[日号])?",
    ),
    "absolute_time": rule(
        "absolute_time",
        rf"(?P<hour>{SMALL_NUMERAL}+时)(?P<minute>{NUMERAL}+分)?(?P<second>{NUMERAL}+秒)?",
    ),
    "absolute_season": rule("absolute_season", r"(?:春|夏|秋|冬)(?:季|天|日)"),
    "absolute_period": rule("absolute_period", r"黎明|黄昏|傍晚|清晨|朝|夕|晨|昏|午|晚|早|夜"),
    "relative_past": rule("relative_past", r"当初|从前|前|昨|往|曾|已|刚"),
    "relative_future": rule("relative_future", r"将来|不久|后|明|将|即|未|待"),
    "relative_sequence": rule("relative_sequence", r"接着|随后|之前|之后|然后|先|后"),
    "relative_duration": rule("relative_duration", rf"{NUMERAL}+(?:年|月|日|时|分|秒|天|载|岁)"),
    "period_age": rule("period_age", r"上古|远古|古代|近代|现代"),
    "period_dynasty": rule("period_dynasty", r"时期|时代|年代|朝|代"),
    "period_lifecycle": rule("period_lifecycle", r"幼年|少年|青年|中年|老年"),
}

EVENT_INDICATORS: dict[str, tuple[str, ...]] = {
    "action": ("发生", "进行", "开始", "结束", "完成"),
    "interaction": ("遇见", "相遇", "见面", "交谈", "交手", "战斗", "切磋", "比试"),
    "change": ("变化", "转变", "改变", "提升", "突破", "衰落", "陨落", "崛起"),
    "movement": ("前往", "抵达", "到达", "离开", "返回", "进入", "出发"),
}

CAUSAL_MARKERS: dict[str, tuple[str, ...]] = {
    "cause": ("因为", "由于", "缘于", "既然", "基于", "出于", "源于"),
    "effect": ("所以", "因此", "故此", "以致", "导致", "造成", "引起", "致使"),
    "condition": ("如果", "若是", "倘若", "假如", "一旦", "只要"),
    "purpose": ("为了", "以便", "目的是", "为的是"),
}
