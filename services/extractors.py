# FILE: services/extractors.py
import calendar
import re
import unicodedata
from functools import lru_cache
from typing import Iterable, List, NamedTuple, Optional, Tuple

# Goal used when a savings message names nothing we recognise
DEFAULT_GOAL = "savings"

SAVE_VERB_TOKENS = ["貯め", "貯金", "貯蓄", "save", "set target"]

# Ordered: specific destinations before the generic travel label
GOAL_KEYWORDS: List[Tuple[Tuple[str, ...], str]] = [
    (("沖縄", "okinawa"), "Okinawa Trip"),
    (("東京", "tokyo"), "Tokyo Trip"),
    (("京都", "kyoto"), "Kyoto Trip"),
    (("大阪", "osaka"), "Osaka Trip"),
    (("北海道", "hokkaido"), "Hokkaido Trip"),
    (("旅行", "travel", "trip", "vacation"), "Travel"),
    (("車", "car"), "New Car"),
]

_save_verb = r"(?:貯め|貯金|貯蓄|(?<![a-z])save(?![a-z])|(?<![a-z])set\s+target(?![a-z]))"
_save_verb_re = re.compile(_save_verb, re.IGNORECASE)
_verb_after_re = re.compile(r"^\s*" + _save_verb, re.IGNORECASE)
_verb_before_re = re.compile(_save_verb + r"\s*$", re.IGNORECASE)

# Numbers that carry a time unit or sit inside a date are never amounts
_time_unit = (
    r"日|ヶ月|か月|カ月|ケ月|月|年|週間|時|分|%|[/\-.]\d"
    r"|days?(?![a-z])|weeks?(?![a-z])|months?(?![a-z])|years?(?![a-z])"
)

# A currency sign may follow a word ("save¥1000"); a bare number may not.
# A trailing comma is punctuation unless three digits follow it.
_amount_re = re.compile(
    r"(?:(?<![0-9.,/\-])(?P<currency>[¥￥]\s*)|(?<![0-9a-z.,/\-¥￥]))"
    r"(?P<number>\d{1,3}(?:,\d{3})+|\d+)"
    r"(?!\d|,\d{3}|x[0-9a-f])"
    r"(?!\s*(?:" + _time_unit + r"))"
    r"(?P<suffix>\s*(?:円|yen(?![a-z])|jpy(?![a-z])))?",
    re.IGNORECASE,
)

_iso_date_re = re.compile(r"(?<!\d)(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})(?!\d)")
_ja_date_re = re.compile(r"(?<!\d)(\d{4})年\s*(\d{1,2})月\s*(\d{1,2})日")
# Year left out: "12月31日" means the next December 31st
_month_day_re = re.compile(r"(?<![\d年])(\d{1,2})月\s*(\d{1,2})日")
_days_re = re.compile(r"(?<![\d月])(\d+)\s*(?:日間|日|days?(?![a-z]))", re.IGNORECASE)
_weeks_re = re.compile(r"(?<!\d)(\d+)\s*(?:週間|weeks?(?![a-z]))", re.IGNORECASE)
_months_re = re.compile(r"(?<!\d)(\d+)\s*(?:ヶ月|か月|カ月|ケ月|months?(?![a-z]))", re.IGNORECASE)

_address_re = re.compile(r"0x[0-9a-fA-F]{40}(?![0-9a-fA-F])")


class AmountMatch(NamedTuple):
    value: int
    start: int
    end: int
    # True when a currency symbol or unit was attached
    marked: bool


def normalize_text(text: str) -> str:
    """NFKC folds full-width digits, ￥ and ？ onto their ASCII forms."""
    if not text:
        return ""
    return unicodedata.normalize("NFKC", text).strip()


@lru_cache(maxsize=256)
def _keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(r"(?<![a-z])" + re.escape(keyword) + r"(?![a-z])")


def find_keyword(lowered: str, keywords: Iterable[str]) -> Optional[str]:
    """
    Return the first keyword present in ``lowered``.
    ASCII keywords must stand as whole words ("hi" does not match "this");
    Japanese keywords match as substrings.
    """
    for keyword in keywords:
        if keyword.isascii():
            if _keyword_pattern(keyword).search(lowered):
                return keyword
        elif keyword in lowered:
            return keyword
    return None


def has_save_verb(text: str) -> bool:
    return bool(_save_verb_re.search(text))


def extract_amounts(text: str) -> List[AmountMatch]:
    amounts = []
    for m in _amount_re.finditer(text):
        value = int(m.group("number").replace(",", ""))
        if value <= 0:
            continue
        marked = bool(m.group("currency") or m.group("suffix"))
        amounts.append(AmountMatch(value, m.start("number"), m.end("number"), marked))
    return amounts


def extract_savings_amount(text: str) -> Optional[int]:
    """
    Amount the user wants to save, or None.

    Currency-marked amounts win anywhere in the message. A bare number only
    counts when a save verb sits right next to it ("1000貯めたい", "save 500").
    """
    if not has_save_verb(text):
        return None

    amounts = extract_amounts(text)
    for amount in amounts:
        if amount.marked:
            return amount.value

    for amount in amounts:
        if _verb_after_re.match(text[amount.end:]) or _verb_before_re.search(text[:amount.start]):
            return amount.value
    return None


def extract_first_amount(text: str) -> Optional[int]:
    amounts = extract_amounts(text)
    return amounts[0].value if amounts else None


def extract_goal(lowered: str) -> str:
    for keywords, label in GOAL_KEYWORDS:
        if find_keyword(lowered, keywords):
            return label
    return DEFAULT_GOAL


def extract_timeline(text: str) -> Tuple[Optional[int], Optional[str]]:
    """
    Returns (timeline_days, timeline_date). An explicit calendar date wins
    over a day count; the date is handed on as YYYY-MM-DD without checking
    that it exists on the calendar. A month and day without a year comes out
    as "December 31" so the goal calculator can pick the next occurrence.
    """
    m = _ja_date_re.search(text) or _iso_date_re.search(text)
    if m:
        year, month, day = (int(g) for g in m.groups())
        return None, f"{year:04d}-{month:02d}-{day:02d}"

    m = _month_day_re.search(text)
    if m:
        month, day = int(m.group(1)), int(m.group(2))
        if 1 <= month <= 12:
            return None, f"{calendar.month_name[month]} {day}"
        # Left for the calculator to reject as an invalid timeline
        return None, m.group(0)

    m = _days_re.search(text)
    if m:
        return int(m.group(1)), None

    m = _weeks_re.search(text)
    if m:
        return int(m.group(1)) * 7, None

    m = _months_re.search(text)
    if m:
        return int(m.group(1)) * 30, None

    return None, None


def extract_address(text: str) -> Optional[str]:
    m = _address_re.search(text)
    return m.group(0) if m else None
