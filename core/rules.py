"""
Keyword heuristics expressed as ordered (pattern, outcome) rules.

Every rule list is evaluated by ``match_rule``: the first rule whose keyword
occurs in the text (case-insensitive, on word boundaries) decides the outcome.
"""
import re
from typing import List, NamedTuple, Optional, Sequence, TypeVar

T = TypeVar("T")


class KeywordRule(NamedTuple):
    """A compiled keyword pattern and the outcome it selects."""
    pattern: "re.Pattern[str]"
    outcome: object


def keyword_rule(keywords: Sequence[str], outcome: object) -> KeywordRule:
    """
    Build a rule matching any of the keywords as whole words.

    Args:
        keywords: Literal keywords or phrases
        outcome: Value returned when the rule matches

    Returns:
        KeywordRule
    """
    alternatives = "|".join(re.escape(k) for k in keywords)
    # \b fails next to "/" at a keyword edge, so use lookarounds on word chars
    pattern = re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)", re.IGNORECASE)
    return KeywordRule(pattern, outcome)


def match_rule(text: Optional[str], rules: Sequence[KeywordRule], default: T = None) -> T:
    """
    Return the outcome of the first matching rule.

    Args:
        text: Text to inspect (None is treated as empty)
        rules: Ordered rules
        default: Outcome when nothing matches

    Returns:
        Outcome of the first matching rule, or default
    """
    if not text:
        return default
    for rule in rules:
        if rule.pattern.search(text):
            return rule.outcome
    return default


def matches_any(text: Optional[str], rules: Sequence[KeywordRule]) -> bool:
    """True if any rule matches the text."""
    return match_rule(text, rules) is not None


RECEIVED_RULES: List[KeywordRule] = [
    keyword_rule(
        [
            "received", "credited", "deposited", "cr", "added", "refunded",
            "inward", "transferred to your a/c", "inflow", "salary", "freelance",
        ],
        "Income",
    ),
]

# "Credit card" in a payment-mode column is not a credit
CREDIT_TYPE_RULES: List[KeywordRule] = [
    KeywordRule(re.compile(r"(?<!\w)(?:cr|credit)(?!\w)(?!\s*card)", re.IGNORECASE), "Income"),
]

BILL_PAYMENT_RULES: List[KeywordRule] = [
    keyword_rule(
        [
            "credit card payment", "cc payment", "cc bill", "credit card bill",
            "card payment", "card settlement", "paid card", "bill desk", "billdesk",
        ],
        "BillPayment",
    ),
]

TRANSFER_RULES: List[KeywordRule] = [
    keyword_rule(
        [
            "transfer", "remit", "internal", "self", "to a/c", "from a/c",
            "linked account", "tfr", "own account",
        ],
        "Transfer",
    ),
]

INCOME_TYPE_RULES: List[KeywordRule] = [
    keyword_rule(["salary", "payroll", "wages"], "Salary"),
    keyword_rule(["freelance", "invoice", "consulting"], "Freelance"),
    keyword_rule(["dividend", "interest", "mutual fund", "redemption"], "Investment"),
    keyword_rule(["gift"], "Gift"),
]

# Account snapshot rows: Type / description markers
ACCOUNT_TYPE_MARKERS = ("ACCOUNT", "ASSET", "LIABILITY")
LIABILITY_MARKERS = ("LIABILITY", "DEBT", "LOAN", "CARD", "OVERDRAFT")

LIABILITY_CATEGORY_RULES: List[KeywordRule] = [
    keyword_rule(["home loan", "housing loan", "mortgage"], "HomeLoan"),
    keyword_rule(["gold loan"], "GoldLoan"),
    keyword_rule(["personal loan", "loan"], "PersonalLoan"),
    keyword_rule(["overdraft", "od"], "Overdraft"),
]

ASSET_CATEGORY_RULES: List[KeywordRule] = [
    keyword_rule(["pension", "nps", "ppf", "epf", "retirement"], "Pension"),
    keyword_rule(["gold"], "Gold"),
    keyword_rule(["cash", "wallet"], "Cash"),
    keyword_rule(["stocks", "stock", "mutual fund", "demat", "brokerage", "investment"], "Investment"),
]

# Typical SMS noise: one-time passwords and promotional / reminder messages
NOISE_RULES: List[KeywordRule] = [
    keyword_rule(["otp", "one time password", "verification code", "security code"], "otp"),
    keyword_rule(
        [
            "offer", "congratulations", "reward", "limited time", "avl bal",
            "available bal", "balance is", "will be debited", "scheduled",
            "reminder", "min of", "e-statement",
        ],
        "promotional",
    ),
]

AMOUNT_PATTERN = re.compile(
    r"(?:Rs\.?|INR|₹|\$|Amt\.?|Amount|Total|Value)\s*:?\s*([\d,]+(?:\.\d+)?)",
    re.IGNORECASE,
)

MERCHANT_PATTERN = re.compile(
    r"\b(?:to|at|towards|from|by|spent on|payment for|info:)\s+([^,.\n\r]+?)"
    r"(?:\s+(?:via|on|Ref|Txn|Link|Date|Avl|Bal|Not you|Remaining)\b)",
    re.IGNORECASE,
)


def is_received(text: Optional[str]) -> bool:
    """True if the text reads like money coming in."""
    return matches_any(text, RECEIVED_RULES)


def is_credit_type(text: Optional[str]) -> bool:
    """True for DR/CR style type cells marking a credit."""
    return matches_any(text, CREDIT_TYPE_RULES)


def is_bill_payment(text: Optional[str]) -> bool:
    """True if the text reads like a credit card bill settlement."""
    return matches_any(text, BILL_PAYMENT_RULES)


def is_transfer(text: Optional[str]) -> bool:
    """True if the text reads like a transfer between own accounts."""
    return matches_any(text, TRANSFER_RULES)


def is_noise(text: Optional[str]) -> bool:
    """True for OTP and promotional lines."""
    return matches_any(text, NOISE_RULES)


def income_type_for(text: Optional[str]) -> str:
    """Income type suggested by the text, ``Other`` when unknown."""
    return match_rule(text, INCOME_TYPE_RULES, default="Other")
