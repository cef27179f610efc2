"""Symbol profile catalog – read-only reference data for NSE large caps."""

from __future__ import annotations

from synthmarket.errors import NotFound
from synthmarket.schemas.market import SymbolProfile

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

LARGE_CAP_THRESHOLD = 100_000  # crores (1 lakh crore)

MARKET_SECTORS: tuple[str, ...] = (
    "Banking",
    "Information Technology",
    "FMCG",
    "Oil & Gas",
    "Automobile",
    "Healthcare",
    "Telecommunications",
    "Chemicals",
    "Metals",
    "Real Estate",
    "Power",
    "Media",
    "Consumer Durables",
    "Capital Goods",
    "Others",
)


def _profile(
    symbol: str,
    name: str,
    sector: str,
    industry: str,
    market_cap: float,
    pe_ratio: float,
    dividend_yield: float,
    base_price: float,
    volatility: float,
    avg_volume: int,
    description: str,
) -> SymbolProfile:
    return SymbolProfile(
        symbol=symbol,
        name=name,
        sector=sector,
        industry=industry,
        exchange="NSE",
        market_cap=market_cap,
        pe_ratio=pe_ratio,
        dividend_yield=dividend_yield,
        base_price=base_price,
        volatility=volatility,
        avg_volume=avg_volume,
        description=description,
    )


SYMBOL_PROFILES: tuple[SymbolProfile, ...] = (
    _profile(
        "RELIANCE", "Reliance Industries Ltd", "Oil & Gas", "Refineries",
        1_500_000, 25.5, 0.8, 2500, 0.025, 5_000_000,
        "Conglomerate spanning energy, petrochemicals, retail and telecom.",
    ),
    _profile(
        "TCS", "Tata Consultancy Services Ltd", "Information Technology", "Software",
        1_200_000, 30.2, 1.2, 3800, 0.020, 3_000_000,
        "Global IT services, consulting and business solutions.",
    ),
    _profile(
        "HDFCBANK", "HDFC Bank Ltd", "Banking", "Private Banks",
        800_000, 18.5, 1.5, 1600, 0.030, 8_000_000,
        "Private sector bank with a wide range of financial services.",
    ),
    _profile(
        "INFY", "Infosys Ltd", "Information Technology", "Software",
        600_000, 28.0, 2.1, 1400, 0.022, 4_000_000,
        "Digital services and consulting.",
    ),
    _profile(
        "ICICIBANK", "ICICI Bank Ltd", "Banking", "Private Banks",
        500_000, 16.8, 1.8, 900, 0.035, 10_000_000,
        "Private sector bank with retail and corporate products.",
    ),
    _profile(
        "HINDUNILVR", "Hindustan Unilever Ltd", "FMCG", "Personal Care",
        450_000, 45.2, 2.5, 2000, 0.018, 2_000_000,
        "Consumer goods company with brands across categories.",
    ),
    _profile(
        "ITC", "ITC Ltd", "FMCG", "Tobacco",
        400_000, 22.5, 3.2, 320, 0.020, 15_000_000,
        "Diversified conglomerate: cigarettes, hotels, paperboards, FMCG.",
    ),
    _profile(
        "SBIN", "State Bank of India", "Banking", "Public Banks",
        350_000, 12.5, 2.8, 400, 0.040, 20_000_000,
        "Public sector bank with an extensive branch network.",
    ),
    _profile(
        "BHARTIARTL", "Bharti Airtel Ltd", "Telecommunications", "Telecom Services",
        300_000, 35.8, 1.1, 800, 0.045, 8_000_000,
        "Telecommunications operator across Asia and Africa.",
    ),
    _profile(
        "AXISBANK", "Axis Bank Ltd", "Banking", "Private Banks",
        250_000, 15.2, 2.0, 850, 0.038, 6_000_000,
        "Private sector bank focused on retail banking.",
    ),
    _profile(
        "ASIANPAINT", "Asian Paints Ltd", "Chemicals", "Paints",
        200_000, 55.0, 1.8, 3200, 0.025, 1_500_000,
        "Paint manufacturer operating in 15 countries.",
    ),
    _profile(
        "MARUTI", "Maruti Suzuki India Ltd", "Automobile", "Passenger Cars",
        180_000, 28.5, 1.5, 6000, 0.030, 2_000_000,
        "Passenger vehicle manufacturer.",
    ),
    _profile(
        "SUNPHARMA", "Sun Pharmaceutical Industries Ltd", "Healthcare", "Pharmaceuticals",
        160_000, 32.5, 1.2, 650, 0.035, 5_000_000,
        "Specialty generic pharmaceutical company.",
    ),
    _profile(
        "TATAMOTORS", "Tata Motors Ltd", "Automobile", "Commercial Vehicles",
        140_000, 18.5, 0.8, 450, 0.050, 8_000_000,
        "Commercial, passenger and electric vehicle manufacturer.",
    ),
    _profile(
        "WIPRO", "Wipro Ltd", "Information Technology", "Software",
        120_000, 25.8, 2.5, 400, 0.028, 6_000_000,
        "IT, consulting and business process services.",
    ),
)

_BY_SYMBOL: dict[str, SymbolProfile] = {p.symbol: p for p in SYMBOL_PROFILES}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get_symbol_profile(symbol: str) -> SymbolProfile | None:
    """Case-insensitive lookup. Returns ``None`` for unknown symbols."""
    return _BY_SYMBOL.get(symbol.strip().upper())


def require_symbol_profile(symbol: str) -> SymbolProfile:
    """Like :func:`get_symbol_profile` but raises ``NotFound``."""
    profile = get_symbol_profile(symbol)
    if profile is None:
        raise NotFound(
            f"No symbol profile for '{symbol}'",
            hint="Use list_symbols() to see the available symbols.",
        )
    return profile


def list_symbols() -> list[str]:
    return [p.symbol for p in SYMBOL_PROFILES]


def get_profiles_by_sector(sector: str) -> list[SymbolProfile]:
    return [p for p in SYMBOL_PROFILES if p.sector == sector]


def get_profiles_by_exchange(exchange: str) -> list[SymbolProfile]:
    return [p for p in SYMBOL_PROFILES if p.exchange == exchange]


def get_large_cap_profiles() -> list[SymbolProfile]:
    return [
        p for p in SYMBOL_PROFILES
        if p.market_cap is not None and p.market_cap >= LARGE_CAP_THRESHOLD
    ]
