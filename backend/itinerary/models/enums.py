"""
Enums for the itinerary application.

This module contains the enumeration types shared by the query layer,
the ranking service and the outward serialization.
"""

from enum import Enum


class RankingCriterion(str, Enum):
    """Journey attribute a result set can be ordered by."""
    EXCHANGES = "exchanges"
    PRICE = "price"
    DURATION = "duration"

    @classmethod
    def _missing_(cls, value):
        # Accept any casing plus the attribute names used by older clients
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        aliases = {
            "numberofexchanges": cls.EXCHANGES,
            "number_of_exchanges": cls.EXCHANGES,
            "totalprice": cls.PRICE,
            "total_price": cls.PRICE,
            "totalduration": cls.DURATION,
            "total_duration": cls.DURATION,
        }
        for member in cls:
            if member.value == normalized:
                return member
        return aliases.get(normalized)
