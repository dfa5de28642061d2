"""
Expense advisor: turns a snapshot of logged expenses into a short, curated list of
suggestions, two weekly budget envelopes and a one-line narrative.

The numbers in `stats` are always exact; only the phrasing varies, driven by the
generator built from the caller's seed.
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import config
from models import (
    CategoryTotal,
    Expense,
    ExpenseAdviceEnvelope,
    ExpenseAdviceResult,
    ExpenseAdviceStats,
    MonthTotal,
)
from core.formatting import format_money
from core.phrases import DEFAULT_ADVISOR_PHRASES, AdvisorPhrases
from core.rng import EngineRandom, advice_random

DOMINANT_SHARE = 0.4
OTHER_SHARE_WARNING = 0.1
MOM_CHANGE_THRESHOLD = 0.2
REPEATED_MERCHANT_MIN_COUNT = 3
REPEATED_MERCHANT_MIN_TOTAL = 50
TOP_CATEGORY_COUNT = 3
TIP_CATEGORY_COUNT = 2
ENVELOPE_COUNT = 2
ENVELOPE_MIN_WEEKLY_CAP = 10
ENVELOPE_TARGET_CUT_PCT = 12
OTHER_CATEGORY = "Other"


@dataclass
class MerchantTotal:
    merchant: str
    count: int = 0
    total: float = 0.0


@dataclass
class ExpenseAggregates:
    by_category: Dict[str, float]
    by_month: Dict[str, float]
    by_merchant: Dict[str, MerchantTotal]

    @property
    def total(self) -> float:
        return sum(self.by_category.values())

    def months(self) -> List[Tuple[str, float]]:
        return sorted(self.by_month.items(), key=lambda item: item[0])

    def top_categories(self, limit: int = TOP_CATEGORY_COUNT) -> List[Tuple[str, float]]:
        return sorted(self.by_category.items(), key=lambda item: item[1], reverse=True)[:limit]


@dataclass
class AdviceSignals:
    dominant: bool
    has_other: bool
    other_share: float
    has_subscription: bool
    has_gym: bool
    has_annual: bool
    repeated_merchant: Optional[MerchantTotal]
    big_mom_change: bool


def clamp_max_suggestions(value: Optional[float]) -> int:
    """Clamps the requested suggestion count to [MIN_SUGGESTIONS, MAX_SUGGESTIONS]."""
    if value is None:
        value = config.DEFAULT_MAX_SUGGESTIONS
    return int(max(config.MIN_SUGGESTIONS, min(config.MAX_SUGGESTIONS, value)))


def aggregate_expenses(items: Sequence[Expense]) -> ExpenseAggregates:
    """Single pass over the expenses: totals per category, per yyyy-mm month and per merchant."""
    by_category: Dict[str, float] = {}
    by_month: Dict[str, float] = {}
    by_merchant: Dict[str, MerchantTotal] = {}

    for expense in items:
        amount = expense.amount
        by_category[expense.category] = by_category.get(expense.category, 0.0) + amount

        month = expense.date[:7]
        if month:
            by_month[month] = by_month.get(month, 0.0) + amount

        merchant = expense.description.strip().lower()
        if merchant:
            entry = by_merchant.setdefault(merchant, MerchantTotal(merchant=merchant))
            entry.count += 1
            entry.total += amount

    return ExpenseAggregates(by_category=by_category, by_month=by_month, by_merchant=by_merchant)


def _mentions_any(items: Sequence[Expense], keywords: Sequence[str]) -> bool:
    return any(
        keyword in expense.description.lower()
        for expense in items
        for keyword in keywords
    )


def compute_signals(
    items: Sequence[Expense],
    aggregates: ExpenseAggregates,
    phrases: AdvisorPhrases = DEFAULT_ADVISOR_PHRASES
) -> AdviceSignals:
    total = aggregates.total
    months = aggregates.months()
    last = months[-1][1] if months else 0.0
    prev = months[-2][1] if len(months) >= 2 else 0.0

    has_other = OTHER_CATEGORY in aggregates.by_category
    other_share = aggregates.by_category[OTHER_CATEGORY] / max(total, 1) if has_other else 0.0

    frequent = [
        merchant for merchant in aggregates.by_merchant.values()
        if merchant.count >= REPEATED_MERCHANT_MIN_COUNT and merchant.total >= REPEATED_MERCHANT_MIN_TOTAL
    ]
    frequent.sort(key=lambda merchant: merchant.total, reverse=True)

    return AdviceSignals(
        dominant=total > 0 and any(value / total > DOMINANT_SHARE for value in aggregates.by_category.values()),
        has_other=has_other,
        other_share=other_share,
        has_subscription=_mentions_any(items, phrases.subscription_keywords),
        has_gym=_mentions_any(items, phrases.gym_keywords),
        has_annual=_mentions_any(items, phrases.annual_keywords),
        repeated_merchant=frequent[0] if frequent else None,
        big_mom_change=len(months) >= 2 and abs(last - prev) / max(prev, 1) >= MOM_CHANGE_THRESHOLD,
    )


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def build_envelopes(top_categories: Sequence[Tuple[str, float]], currency: str) -> List[ExpenseAdviceEnvelope]:
    """Weekly cap = a quarter of the category total, rounded to the nearest 5, never below 10."""
    return [
        ExpenseAdviceEnvelope(
            category=category,
            weekly_cap=max(ENVELOPE_MIN_WEEKLY_CAP, round_half_up(amount / 4 / 5) * 5),
            target_cut_pct=ENVELOPE_TARGET_CUT_PCT,
            currency=currency,
        )
        for category, amount in top_categories[:ENVELOPE_COUNT]
    ]


def curate_suggestions(
    aggregates: ExpenseAggregates,
    signals: AdviceSignals,
    rng: EngineRandom,
    currency: str,
    phrases: AdvisorPhrases = DEFAULT_ADVISOR_PHRASES
) -> List[str]:
    """Builds the ordered candidate list. The order of `rng` draws here is part of the seed contract."""
    def fmt(amount: float) -> str:
        return format_money(amount, currency)

    months = aggregates.months()
    last = months[-1][1] if months else 0.0
    prev = months[-2][1] if len(months) >= 2 else 0.0
    top_categories = aggregates.top_categories()

    curated: List[str] = [rng.choose(phrases.snapshot_openers)]
    month_part = f"; last month {fmt(prev)}, this month {fmt(last)}" if months else ""
    curated.append(f"You’ve logged {fmt(aggregates.total)}{month_part}.")

    if top_categories:
        category, amount = top_categories[0]
        curated.append(f"{rng.choose(phrases.top_category_labels)}: {category} at {fmt(amount)}.")

    for raw_category, _ in top_categories[:TIP_CATEGORY_COUNT]:
        tips = phrases.category_tips.get(phrases.normalize_category(raw_category))
        if tips:
            curated.append(rng.choose(tips))

    if signals.dominant:
        curated.append(phrases.dominance_alert)
    if signals.has_other and (
        signals.other_share >= OTHER_SHARE_WARNING or top_categories[0][0] == OTHER_CATEGORY
    ):
        curated.append(phrases.other_bucket_warning)
    if signals.big_mom_change:
        delta = last - prev
        curated.append(f"Month-over-month change: {'+' if delta >= 0 else ''}{fmt(delta)}.")
    if signals.has_subscription:
        curated.append(phrases.subscription_nudge)
    if signals.has_gym:
        curated.append(phrases.gym_nudge)
    if signals.has_annual:
        curated.append(phrases.annual_nudge)
    if signals.repeated_merchant:
        curated.append(phrases.repeated_merchant_template.format(merchant=signals.repeated_merchant.merchant))

    return curated


def dedupe(candidates: Sequence[str], limit: int) -> List[str]:
    """Drops empty and exactly repeated strings, keeping first occurrences, then truncates."""
    seen = set()
    unique: List[str] = []
    for candidate in candidates:
        if candidate and candidate not in seen:
            seen.add(candidate)
            unique.append(candidate)
    return unique[:limit]


def advise_expenses(
    items: Sequence[Expense],
    currency: Optional[str] = None,
    max_suggestions: Optional[float] = None,
    seed: Optional[float] = None,
    phrases: AdvisorPhrases = DEFAULT_ADVISOR_PHRASES
) -> ExpenseAdviceResult:
    """
    Produces expense advice for a snapshot of expenses.

    Args:
        items: The expenses to analyse. Amounts are assumed already coerced to finite floats.
        currency: ISO currency code for formatting and envelopes. Defaults to config.DEFAULT_CURRENCY.
        max_suggestions: Requested suggestion count, clamped to [3, 10].
        seed: Any finite number makes the phrasing reproducible; None draws from an unseeded source.
        phrases: Phrase banks and category rules.

    Returns:
        ExpenseAdviceResult with deduplicated suggestions, up to two envelopes, exact stats and a narrative.
    """
    currency = currency or config.DEFAULT_CURRENCY
    limit = clamp_max_suggestions(max_suggestions)
    rng = advice_random(seed)

    if not items:
        return ExpenseAdviceResult(
            suggestions=[phrases.empty_suggestion],
            envelopes=[],
            stats=ExpenseAdviceStats(total=0.0, top_categories=[], months=[]),
            narrative=phrases.empty_narrative,
        )

    aggregates = aggregate_expenses(items)
    signals = compute_signals(items, aggregates, phrases)
    top_categories = aggregates.top_categories()

    suggestions = dedupe(curate_suggestions(aggregates, signals, rng, currency, phrases), limit)
    envelopes = build_envelopes(top_categories, currency)
    narrative = rng.choose(phrases.narratives)

    return ExpenseAdviceResult(
        suggestions=suggestions,
        envelopes=envelopes,
        stats=ExpenseAdviceStats(
            total=aggregates.total,
            top_categories=[CategoryTotal(category=c, amount=a) for c, a in top_categories],
            months=[MonthTotal(month=m, total=t) for m, t in aggregates.months()],
        ),
        narrative=narrative,
    )
