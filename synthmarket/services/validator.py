"""OHLCV sanity checks.

Findings are returned as :class:`Violation` lists, never raised; callers
that want bad data to be fatal use :func:`ensure_valid`.
"""

from __future__ import annotations

from typing import Sequence

from synthmarket.errors import ValidationFailed
from synthmarket.schemas.market import OHLCVRecord, ValidationRules, Violation

DEFAULT_VALIDATION_RULES = ValidationRules()

_PRICE_FIELDS = ("open", "high", "low", "close")


def validate_ohlcv(record: OHLCVRecord, rules: ValidationRules | None = None) -> list[Violation]:
    """Check one record. Every rule is reported independently.

    Structural checks always run; range checks only when *rules* is given.
    """
    out: list[Violation] = []
    day = record.date

    def add(rule: str, message: str, value: float | None) -> None:
        out.append(Violation(rule=rule, message=message, value=value, date=day))

    # OHLC relationships
    if record.high < record.open:
        add("high_vs_open", f"high {record.high} is below open {record.open}", record.high)
    if record.high < record.close:
        add("high_vs_close", f"high {record.high} is below close {record.close}", record.high)
    if record.low > record.open:
        add("low_vs_open", f"low {record.low} is above open {record.open}", record.low)
    if record.low > record.close:
        add("low_vs_close", f"low {record.low} is above close {record.close}", record.low)
    if record.high < record.low:
        add("high_vs_low", f"high {record.high} is below low {record.low}", record.high)

    for field in _PRICE_FIELDS:
        price = getattr(record, field)
        if price <= 0:
            add("non_positive_price", f"{field} must be > 0, got {price}", price)

    if record.volume < 0:
        add("negative_volume", f"volume must be >= 0, got {record.volume}", record.volume)

    if rules is None:
        return out

    for field in _PRICE_FIELDS:
        price = getattr(record, field)
        if price < rules.min_price or price > rules.max_price:
            add(
                "price_range",
                f"{field} {price} outside [{rules.min_price}, {rules.max_price}]",
                price,
            )
    if record.volume < rules.min_volume or record.volume > rules.max_volume:
        add(
            "volume_range",
            f"volume {record.volume} outside [{rules.min_volume}, {rules.max_volume}]",
            record.volume,
        )
    return out


def validate_series(
    series: Sequence[OHLCVRecord],
    rules: ValidationRules | None = None,
) -> list[Violation]:
    """Check every record plus the day-over-day relationships."""
    rules = rules or DEFAULT_VALIDATION_RULES
    out: list[Violation] = []
    prev: OHLCVRecord | None = None

    for record in series:
        out.extend(validate_ohlcv(record, rules))
        if prev is None:
            prev = record
            continue

        if record.date == prev.date:
            out.append(Violation(
                rule="duplicate_date",
                message=f"date {record.date} appears more than once",
                date=record.date,
            ))
        elif record.date < prev.date:
            out.append(Violation(
                rule="date_order",
                message=f"date {record.date} follows later date {prev.date}",
                date=record.date,
            ))

        if prev.close > 0:
            change = abs(record.close - prev.close) / prev.close
            if change > rules.max_daily_change:
                out.append(Violation(
                    rule="max_daily_change",
                    message=(
                        f"close moved {change:.2%} from {prev.close} to {record.close}, "
                        f"limit {rules.max_daily_change:.2%}"
                    ),
                    value=change,
                    date=record.date,
                ))
            gap = abs(record.open - prev.close) / prev.close
            if gap > rules.max_gap:
                out.append(Violation(
                    rule="max_gap",
                    message=(
                        f"open {record.open} gaps {gap:.2%} from previous close "
                        f"{prev.close}, limit {rules.max_gap:.2%}"
                    ),
                    value=gap,
                    date=record.date,
                ))
        prev = record

    return out


def ensure_valid(
    series: Sequence[OHLCVRecord],
    rules: ValidationRules | None = None,
) -> None:
    """Raise ``ValidationFailed`` if :func:`validate_series` finds anything."""
    violations = validate_series(series, rules)
    if violations:
        raise ValidationFailed(violations, hint="Inspect .violations for details.")
