"""Emotion lexicon grouped into polarity tiers."""

from types import MappingProxyType

EMOTION_LEXICON = MappingProxyType(
    {
        "positive": MappingProxyType(
            {
                "joy": ("欢喜", "快乐", "高兴", "开心", "兴奋", "愉悦", "欣喜", "雀跃", "欢欣", "喜悦"),
                "love": ("喜欢", "爱", "疼爱", "宠爱", "钟情", "倾心", "仰慕", "欣赏", "敬爱", "眷恋"),
                "hope": ("希望", "期待", "憧憬", "向往", "企盼", "盼望", "渴望", "祈愿", "梦想", "憬想"),
                "peace": ("平静", "安宁", "祥和", "温馨", "恬淡", "宁静", "安详", "淡定", "从容", "安然"),
                "gratitude": ("感激", "感谢", "谢意", "感恩", "致谢", "铭记", "念及", "答谢", "报答", "感念"),
            }
        ),
        "negative": MappingProxyType(
            {
                "anger": ("愤怒", "生气", "恼火", "发火", "暴怒", "震怒", "恼怒", "气愤", "火大", "光火"),
                "sadness": ("悲伤", "难过", "伤心", "哀愁", "忧郁", "悲痛", "黯然", "落寞", "凄凉", "忧伤"),
                "fear": ("害怕", "恐惧", "畏惧", "惊恐", "惊惧", "胆怯", "惊慌", "惶恐", "惊惶", "恐慌"),
                "hate": ("憎恨", "厌恶", "讨厌", "痛恨", "嫌弃", "反感", "恶心", "憎恶", "仇恨", "鄙视"),
                "anxiety": ("焦虑", "担心", "忧心", "忧虑", "烦恼", "不安", "困扰", "忧愁", "苦恼", "烦忧"),
            }
        ),
        "neutral": MappingProxyType(
            {
                "surprise": ("惊讶", "吃惊", "诧异", "意外", "震惊", "愕然", "惊奇", "惊异", "讶异", "惊诧"),
                "confusion": ("困惑", "迷茫", "疑惑", "茫然", "不解", "迷惘", "费解", "懵懂", "迷惑", "糊涂"),
            }
        ),
    }
)
