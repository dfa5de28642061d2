"""
Static phrase banks for the expense advisor and the day planner.

The tables are immutable and handed to the engines as arguments; callers can pass
their own `AdvisorPhrases` / `PlannerPhrases` to localise or A/B the wording.
"""
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Pattern, Tuple


@dataclass(frozen=True)
class CategoryRule:
    pattern: Pattern[str]
    label: str


def _rule(expression: str, label: str) -> CategoryRule:
    return CategoryRule(pattern=re.compile(expression), label=label)


# Evaluated in order against the lower-cased category; the first match wins.
# "Restaurants" and the "gas bill" alternative are shadowed by earlier rules.
CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    _rule(r"grocery|grocer|supermarket", "Groceries"),
    _rule(r"food|dining|eat|cafe|coffee|restaurant", "Food & Dining"),
    _rule(r"restaurant", "Restaurants"),
    _rule(r"transport|transit|uber|lyft|taxi", "Transport"),
    _rule(r"fuel|gasoline|diesel", "Fuel"),
    _rule(r"gas\b", "Gas"),
    _rule(r"travel|flight|hotel|airbnb", "Travel"),
    _rule(r"shop|retail|apparel|clothes|electronics", "Shopping"),
    _rule(r"utility|internet|wifi|electric|power|water|gas bill", "Utilities"),
    _rule(r"entertainment|movies|music|games", "Entertainment"),
    _rule(r"health|pharmacy|doctor|dentist", "Health"),
    _rule(r"gym|fitness", "Gym"),
    _rule(r"other|misc", "Other"),
)

CATEGORY_TIPS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Groceries": (
        "Groceries: plan 3 core meals, shop your list, and anchor around store-brand staples.",
        "Groceries: buy base items in bulk (rice, beans, oats) and let meals orbit them.",
    ),
    "Food & Dining": (
        "Food & Dining: swap one dining-out this week for a home cook; bank the difference.",
        "Food & Dining: set a per-outing cap and pre-decide the number of outings.",
    ),
    "Restaurants": (
        "Restaurants: pick one ‘treat night’ and keep the rest to home meals.",
        "Restaurants: default to water; sides add up quickly.",
    ),
    "Transport": (
        "Transport: batch errands into one trip; fewer cold starts saves real fuel.",
        "Transport: map the week—stack nearby stops to cut cross-town backtracking.",
    ),
    "Fuel": (
        "Fuel: keep tires properly inflated; it’s a quiet efficiency gain.",
        "Fuel: combine short trips; cold engines burn more.",
    ),
    "Gas": (
        "Gas: group short drives; quick hops are the least efficient.",
        "Gas: check tire pressure; small PSI gaps cost over a month.",
    ),
    "Travel": (
        "Travel: price alerts + flexible dates usually beat fixed-date searches.",
        "Travel: pack snacks/water to avoid high airport/road markups.",
    ),
    "Shopping": (
        "Shopping: 24-hour cooldown → wishlist first, cart later.",
        "Shopping: filter by ‘needs’ only this month; wants go to next month’s list.",
    ),
    "Utilities": (
        "Utilities: compare current plan vs. new-customer promos; ask for a retention match.",
        "Utilities: auto-read your usage; set alerts for spikes.",
    ),
    "Entertainment": (
        "Entertainment: rotate one streamer per month; ‘one-in-one-out’ keeps costs sane.",
        "Entertainment: library/app bundles can replace single-purpose subs.",
    ),
    "Health": (
        "Health: ask providers about cash-pay or preventative bundle discounts.",
        "Health: schedule routine care in one window to avoid extra trips.",
    ),
    "Gym": (
        "Gym: check pause/reduced-rate options for 1–2 months while you reassess.",
        "Gym: if usage < 6 visits/month, pay-per-visit might be cheaper.",
    ),
    "Other": (
        "Other: rename ‘Other’ items into specific buckets; precision changes behavior.",
    ),
})

SUBSCRIPTION_KEYWORDS: Tuple[str, ...] = (
    "sub", "subscription", "spotify", "netflix", "prime", "youtube",
    "icloud", "onedrive", "adobe", "canva", "membership",
)
GYM_KEYWORDS: Tuple[str, ...] = ("gym", "fitness", "classpass")
ANNUAL_KEYWORDS: Tuple[str, ...] = (
    "insurance", "domain", "license", "registration", "tax", "tuition", "membership", "annual",
)


@dataclass(frozen=True)
class AdvisorPhrases:
    """Everything the expense advisor may say, plus the rules it uses to pick tips."""
    category_rules: Tuple[CategoryRule, ...] = CATEGORY_RULES
    category_tips: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: CATEGORY_TIPS)
    subscription_keywords: Tuple[str, ...] = SUBSCRIPTION_KEYWORDS
    gym_keywords: Tuple[str, ...] = GYM_KEYWORDS
    annual_keywords: Tuple[str, ...] = ANNUAL_KEYWORDS
    snapshot_openers: Tuple[str, ...] = ("Quick snapshot:", "Here’s the short read:", "Fast overview:")
    top_category_labels: Tuple[str, ...] = ("Top category", "Largest bucket", "Biggest driver")
    narratives: Tuple[str, ...] = (
        "Cap the leader, fix one recurring leak, and review weekly.",
        "Target the biggest driver, tweak one habit, and automate a small win.",
        "One cap + one change this week → steady drift down.",
    )
    empty_suggestion: str = "Add a few expenses so I can spot real trends and propose targeted caps."
    empty_narrative: str = "Once you add some data, I’ll flip into analysis mode."
    dominance_alert: str = "Alert: one category is >40% of spend — add a weekly cap + split rules."
    other_bucket_warning: str = "‘Other’ is absorbing a lot — rename into real buckets to expose patterns."
    subscription_nudge: str = "Subscriptions: use ‘one-in-one-out’ and set a monthly review reminder."
    gym_nudge: str = "Gym: ask about pause or reduced-rate for 1–2 months while you review usage."
    annual_nudge: str = "Annuals: create a 12-month envelope (insurance/domains/licenses) to smooth spikes."
    repeated_merchant_template: str = "Frequent with “{merchant}”: set a per-visit cap or move to a cheaper plan."

    def normalize_category(self, category: Optional[str]) -> str:
        """Maps a free-text category onto a tip bank key; unknown labels pass through."""
        lowered = (category or "").lower()
        for rule in self.category_rules:
            if rule.pattern.search(lowered):
                return rule.label
        return category or "Other"


NUDGES: Tuple[str, ...] = (
    "Work in 25–50 min focus blocks with 5–10 min breaks.",
    "Front-load the hardest item; momentum compounds.",
    "Close each block with a 30-second note: what moved, what’s next.",
    "Batch low-complexity tasks to avoid context churn.",
    "Protect two interruption-free blocks — DND on, tabs closed.",
    "Use WIP limits: no more than 2 active tasks at once.",
    "Eisenhower it: urgent/important first, schedule the rest.",
    "Timebox admin to a single 20-minute window.",
    "If a task is stuck, write the first ugly draft or ask one concrete question.",
    "End of day: queue the first action for tomorrow — tiny and obvious.",
    "Use tags as lanes: deep-work, admin, comms, errands.",
    "Do a 5-minute weekly retro: keep, improve, drop.",
    "Group meetings together; protect a meeting-free zone.",
    "Declare a theme for today (shipping, cleanup, learning).",
    "When energy dips, run a 10-minute ‘micro-win’.",
    "Put blockers in the calendar with a name; make the ask specific.",
    "Schedule a buffer block; real days need slack.",
    "Write tasks as verbs + objects: ‘draft outline’, not ‘outline’.",
    "Kill zombie tasks: if it’s been ignored 3 times, rewrite or archive.",
    "Make the next step testably small.",
)


@dataclass(frozen=True)
class PlannerPhrases:
    nudges: Tuple[str, ...] = NUDGES
    tones: Tuple[str, ...] = (
        "Let’s ship something meaningful today.",
        "Small, finished beats big, unfinished.",
        "One clear win, then let the rest follow.",
        "Aim for momentum, not max effort.",
    )
    empty_plan_text: str = "- No active tasks to plan.\n"
    default_bucket: str = "general"


DEFAULT_ADVISOR_PHRASES = AdvisorPhrases()
DEFAULT_PLANNER_PHRASES = PlannerPhrases()
