import re
from typing import Dict, List, Optional

import pendulum

from .errors import ValidationError

MONTH_REGEX = r"^\d{4}-(0[1-9]|1[0-2])$"


def current_month() -> str:
    return pendulum.now("UTC").format("YYYY-MM")


def count_by(values: List[str]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def top_key(counts: Dict[str, int]) -> str:
    # Ties go to the key seen first
    top = None
    for key, count in counts.items():
        if top is None or count > counts[top]:
            top = key
    return "None" if top is None else top


def daily_trend(timestamps: List[str]) -> List[dict]:
    counts = count_by([timestamp[:10] for timestamp in timestamps])
    return [{"date": day, "count": counts[day]} for day in sorted(counts)]


def monthly_report(enquiry_repo, month: Optional[str] = None) -> dict:
    """Roll up one calendar month of enquiries. Recomputed on every call."""
    target = month or current_month()
    if not re.match(MONTH_REGEX, target):
        raise ValidationError("Month must be in YYYY-MM format")

    enquiries = [e for e in enquiry_repo.list_all() if (e.timestamp or "").startswith(target)]

    products = count_by([e.product_interest or "Unspecified" for e in enquiries])
    cities = count_by([e.city or "Unknown" for e in enquiries])

    return {
        "month": target,
        "total_enquiries": len(enquiries),
        "top_product_interest": top_key(products),
        "top_city": top_key(cities),
        "product_breakdown": products,
        "city_breakdown": cities,
        "daily_trend": daily_trend([e.timestamp for e in enquiries]),
    }
