"""
MoveQuote domain models
=======================

Central import point for the value types shared by the catalog, scheduling
and pricing services.

Usage::

    from movequote.models import BookingItem, PropertyAccessDetails, ServiceType
"""

# -- Booking --
from .booking import (
    DEMAND_SEVERITY,
    BookingItem,
    BusyLevel,
    DemandLevel,
    Flexibility,
    PropertyAccessDetails,
    SlotType,
    TimePreference,
)

# -- Catalog --
from .catalog import PromoCode, PromoConditions, PromoType, ServiceType

__all__ = [
    # Booking
    "DEMAND_SEVERITY",
    "BookingItem",
    "BusyLevel",
    "DemandLevel",
    "Flexibility",
    "PropertyAccessDetails",
    "SlotType",
    "TimePreference",
    # Catalog
    "PromoCode",
    "PromoConditions",
    "PromoType",
    "ServiceType",
]
