"""Conversion between Chinese numerals and integers."""

CN_DIGITS: dict[str, int] = {
    "零": 0, "〇": 0, "一": 1, "二": 2, "两": 2, "三": 3, "四": 4,
    "五": 5, "六": 6, "七": 7, "八": 8, "九": 9,
}

CN_UNITS: dict[str, int] = {"十": 10, "百": 100, "千": 1000}

_DIGIT_CHARS = "零一二三四五六七八九"


def chinese_to_int(text: str) -> int | None:
    """Parse a Chinese (or Arabic, or mixed) numeral.

    Returns None when the text contains anything that is not a numeral.

    >>> chinese_to_int("二十三")
    23
    >>> chinese_to_int("二〇二三")
    2023
    """
    text = text.strip()
    if not text:
        return None
    if text.isdigit():
        return int(text)

    # Positional form without units, e.g. 二〇二三
    if len(text) > 1 and all(ch in CN_DIGITS or ch.isdigit() for ch in text):
        return int("".join(str(CN_DIGITS.get(ch, ch)) for ch in text))

    total = 0
    section = 0
    number = 0
    for ch in text:
        if ch in CN_DIGITS:
            number = CN_DIGITS[ch]
        elif ch.isdigit():
            number = number * 10 + int(ch)
        elif ch == "万":
            total += (section + number) * 10000
            section = 0
            number = 0
        elif ch in CN_UNITS:
            section += (number or 1) * CN_UNITS[ch]
            number = 0
        else:
            return None
    return total + section + number


def _below_ten_thousand(n: int) -> str:
    result = ""
    pending_zero = False
    for unit_value, unit in ((1000, "千"), (100, "百"), (10, "十"), (1, "")):
        digit = n // unit_value % 10
        if digit:
            if pending_zero:
                result += "零"
                pending_zero = False
            result += _DIGIT_CHARS[digit] + unit
        elif result:
            pending_zero = True
    return result


def int_to_chinese(n: int) -> str:
    """Render a non-negative integer as a Chinese numeral (一百零五, 十二)."""
    if n < 0:
        raise ValueError(f"Cannot render negative number: {n}")
    if n == 0:
        return "零"

    if n < 10000:
        result = _below_ten_thousand(n)
    else:
        high, low = divmod(n, 10000)
        result = int_to_chinese(high) + "万"
        if low:
            if low < 1000:
                result += "零"
            result += _below_ten_thousand(low)

    # 一十二 reads as 十二
    if result.startswith("一十"):
        result = result[1:]
    return result
