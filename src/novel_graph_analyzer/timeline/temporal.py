"""Time expression extraction and normalization."""

import logging

from ..ingest.numerals import chinese_to_int
from ..models.timeline import TimeExpression
from .patterns import TIME_RULES

logger = logging.getLogger(__name__)


class TimeExpressionExtractor:
    """Finds absolute, relative and period time expressions."""

    def extract(self, text: str) -> list[TimeExpression]:
        """Scan every time rule over the text.

        Returns:
            Expressions sorted by position; at one position the rule
            order (absolute, relative, period) decides.
        """
        expressions: list[TimeExpression] = []
        for expression_type, time_rule in TIME_RULES.items():
            for match in time_rule.scan(text):
                expressions.append(
                    TimeExpression(
                        expression=match.text,
                        type=expression_type,
                        normalized=normalize(expression_type, match.groups),
                        position=match.start,
                    )
                )

        expressions.sort(key=lambda e: e.position)
        logger.debug("Found %d time expressions", len(expressions))
        return expressions


def normalize(expression_type: str, groups: dict[str, str | None]) -> str | None:
    """Normalize dates to ``YYYY-MM-DD`` and times to ``HH:MM:SS``.

    Missing date parts are written as X (``XXXX-03-XX``). Other
    expression types are not normalized.
    """
    if expression_type == "absolute_date":
        year = _number(groups.get("year"))
        month = _number(groups.get("month"))
        day = _number(groups.get("day"))
        return "-".join(
            [
                f"{year:04d}" if year is not None else "XXXX",
                f"{month:02d}" if month is not None else "XX",
                f"{day:02d}" if day is not None else "XX",
            ]
        )
    if expression_type == "absolute_time":
        parts = [_number(groups.get(key)) or 0 for key in ("hour", "minute", "second")]
        return ":".join(f"{part:02d}" for part in parts)
    return None


def time_sort_key(expression: TimeExpression) -> tuple[int, ...]:
    """Comparable ``(year, month, day, hour, minute, second)`` for normalized expressions."""
    if not expression.normalized:
        return ()
    if expression.type == "absolute_time":
        return (0, 0, 0) + tuple(int(p) for p in expression.normalized.split(":"))
    date = tuple(0 if "X" in p else int(p) for p in expression.normalized.split("-"))
    return date + (0, 0, 0)


def _number(unit_text: str | None) -> int | None:
    if not unit_text:
        return None
    # Drop the unit character (年, 月, 日, 时, ...)
    return chinese_to_int(unit_text[:-1])
