"""Display strings for prices and distances."""

from typing import Optional


def format_price(price: Optional[float]) -> str:
    return "N/A" if price is None else f"{price:.3f} €/L"


def format_distance(distance_km: Optional[float]) -> str:
    if distance_km is None:
        return "N/A"
    metres = round(distance_km * 1000)
    if metres < 1000:
        return f"{metres}m"
    return f"{distance_km:.1f}km"
