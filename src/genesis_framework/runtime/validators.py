"""Evaluators for an income-generating content agent.

Each evaluator is a pure function of ``(action, context)`` returning a
``Verdict``. They read collaborator-owned soul sections:

- ``finances``: ``{"daily_limit": float, "transactions": [{"date", "type", "amount"}]}``
- ``content``: ``{"published": [{"title", "published_at"}]}``
- ``topics``: ``{"blacklist": [str]}``

Actions are mappings with a ``type`` key (``spend``, ``publish``, ``write``,
``record_earning``, ``record_cost``) plus type-specific fields.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

from genesis_framework.domain.laws import Law, Verdict
from genesis_framework.infrastructure.time_utils import utc_today
from genesis_framework.runtime.constitution import Constitution, Evaluator

DEFAULT_DAILY_LIMIT = 20.0
MAX_DAILY_PUBLISH = 3
MIN_CONTENT_CHARS = 500
MIN_TITLE_CHARS = 10
MIN_CONTENT_WORDS = 200
LOSS_DAYS_BEFORE_CONSERVATIVE = 3
RISK_WINDOW = 7

HARMFUL_PATTERNS = (
    re.compile(r"\bscam\b"),
    re.compile(r"\bfraud\b"),
    re.compile(r"\billegal\b"),
    re.compile(r"\bgambling\b"),
    re.compile(r"\bdrugs?\b"),
)


def _section(context: Any, name: str) -> Dict[str, Any]:
    if context is None:
        return {}
    soul = context.get("soul") if isinstance(context, Mapping) else getattr(context, "soul", None)
    if soul is None:
        return {}
    section = soul.data.extras.get(name)
    return section if isinstance(section, dict) else {}


def _text_of(action: Mapping[str, Any]) -> str:
    return f"{action.get('title') or ''} {action.get('content') or ''}".lower()


def _transactions(context: Any) -> List[Dict[str, Any]]:
    items = _section(context, "finances").get("transactions") or []
    return [item for item in items if isinstance(item, dict)]


def check_budget_limit(action: Mapping[str, Any], context: Any) -> Verdict:
    if action.get("type") != "spend":
        return Verdict.ok()
    finances = _section(context, "finances")
    today = utc_today()
    spent = sum(
        float(t.get("amount", 0) or 0)
        for t in _transactions(context)
        if t.get("date") == today and t.get("type") == "cost"
    )
    limit = float(finances.get("daily_limit", DEFAULT_DAILY_LIMIT) or DEFAULT_DAILY_LIMIT)
    amount = float(action.get("amount", 0) or 0)
    if spent + amount > limit:
        return Verdict.deny(f"Daily budget exceeded: spent {spent:.2f} / limit {limit:g}")
    return Verdict.ok()


def check_no_spam(action: Mapping[str, Any], context: Any) -> Verdict:
    if action.get("type") != "publish":
        return Verdict.ok()
    today = utc_today()
    published = _section(context, "content").get("published") or []
    today_count = sum(
        1 for item in published
        if isinstance(item, dict) and str(item.get("published_at") or "").startswith(today)
    )
    if today_count >= MAX_DAILY_PUBLISH:
        return Verdict.deny(f"Already published {today_count} articles today, limit reached")
    return Verdict.ok()


def check_quality_threshold(action: Mapping[str, Any], context: Any) -> Verdict:
    if action.get("type") != "publish":
        return Verdict.ok()
    if len(action.get("content") or "") < MIN_CONTENT_CHARS:
        return Verdict.deny(f"Content too short (< {MIN_CONTENT_CHARS} characters)")
    if len(action.get("title") or "") < MIN_TITLE_CHARS:
        return Verdict.deny("Title missing or too short")
    return Verdict.ok()


def check_risk_control(action: Mapping[str, Any], context: Any) -> Verdict:
    if action.get("type") != "spend":
        return Verdict.ok()
    daily_net: Dict[str, float] = {}
    for t in _transactions(context)[-RISK_WINDOW:]:
        amount = float(t.get("amount", 0) or 0)
        sign = 1 if t.get("type") == "earning" else -1
        day = str(t.get("date"))
        daily_net[day] = daily_net.get(day, 0.0) + sign * amount
    loss_days = sum(1 for net in daily_net.values() if net < 0)
    if loss_days >= LOSS_DAYS_BEFORE_CONSERVATIVE:
        return Verdict.deny(f"{loss_days} losing days, conservative mode engaged")
    return Verdict.ok()


def check_transparency(action: Mapping[str, Any], context: Any) -> Verdict:
    if action.get("type") not in ("record_earning", "record_cost"):
        return Verdict.ok()
    amount = action.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
        return Verdict.deny("Financial records must carry a positive amount")
    if not (action.get("description") or action.get("desc")):
        return Verdict.deny("Financial records must carry a description")
    return Verdict.ok()


def check_topic_blacklist(action: Mapping[str, Any], context: Any) -> Verdict:
    if action.get("type") not in ("write", "publish"):
        return Verdict.ok()
    text = _text_of(action)
    for banned in _section(context, "topics").get("blacklist") or []:
        if str(banned).lower() in text:
            return Verdict.deny(f"Content touches blacklisted topic: {banned}")
    return Verdict.ok()


def check_no_harm(action: Mapping[str, Any], context: Any) -> Verdict:
    text = _text_of(action)
    for pattern in HARMFUL_PATTERNS:
        if pattern.search(text):
            return Verdict.deny(f"Content may be harmful, matched: {pattern.pattern}")
    return Verdict.ok()


def check_create_value(action: Mapping[str, Any], context: Any) -> Verdict:
    if action.get("type") != "publish":
        return Verdict.ok()
    if len((action.get("content") or "").split()) < MIN_CONTENT_WORDS:
        return Verdict.deny("Content too thin to create value")
    return Verdict.ok()


DEFAULT_VALIDATORS: Mapping[str, Evaluator] = {
    "NO_HARM": check_no_harm,
    "CREATE_VALUE": check_create_value,
    "BUDGET_LIMIT": check_budget_limit,
    "QUALITY_THRESHOLD": check_quality_threshold,
    "NO_SPAM": check_no_spam,
    "RISK_CONTROL": check_risk_control,
    "TRANSPARENCY": check_transparency,
    "TOPIC_BLACKLIST": check_topic_blacklist,
}


def earning_agent_constitution(
    evaluators: Optional[Mapping[str, Evaluator]] = None,
) -> Constitution:
    """Default laws plus budget, quality, spam, risk and disclosure rules."""
    return Constitution(
        [
            Law(id="NO_HARM", priority=0, text="Do no harm to others"),
            Law(id="CREATE_VALUE", priority=1, text="Create genuine value"),
            Law(id="BE_HONEST", priority=2, text="Be honest and keep your word"),
            Law(id="BUDGET_LIMIT", priority=3, text="Daily costs stay under the limit"),
            Law(id="QUALITY_THRESHOLD", priority=4, text="Articles must meet the quality bar"),
            Law(id="NO_SPAM", priority=5, text=f"Publish at most {MAX_DAILY_PUBLISH} articles a day"),
            Law(id="RISK_CONTROL", priority=6, text="Go conservative after repeated losses"),
            Law(id="TRANSPARENCY", priority=7, text="Record every earning and cost truthfully"),
            Law(id="TOPIC_BLACKLIST", priority=8, text="Stay away from blacklisted topics"),
        ],
        evaluators if evaluators is not None else DEFAULT_VALIDATORS,
    )
