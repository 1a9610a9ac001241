"""
UK bank holiday calendar (England & Wales).

No moves are scheduled on bank holidays.  The table is maintained by hand from
the gov.uk list; substitute days are used where the holiday falls on a
weekend.
"""

from __future__ import annotations

from datetime import date

UK_BANK_HOLIDAYS: frozenset[date] = frozenset({
    # 2024
    date(2024, 12, 25),  # Christmas Day
    date(2024, 12, 26),  # Boxing Day
    # 2025
    date(2025, 1, 1),    # New Year's Day
    date(2025, 4, 18),   # Good Friday
    date(2025, 4, 21),   # Easter Monday
    date(2025, 5, 5),    # Early May bank holiday
    date(2025, 5, 26),   # Spring bank holiday
    date(2025, 8, 25),   # Summer bank holiday
    date(2025, 12, 25),  # Christmas Day
    date(2025, 12, 26),  # Boxing Day
    # 2026
    date(2026, 1, 1),    # New Year's Day
    date(2026, 4, 3),    # Good Friday
    date(2026, 4, 6),    # Easter Monday
    date(2026, 5, 4),    # Early May bank holiday
    date(2026, 5, 25),   # Spring bank holiday
    date(2026, 8, 31),   # Summer bank holiday
    date(2026, 12, 25),  # Christmas Day
    date(2026, 12, 28),  # Boxing Day (substitute day)
    # 2027
    date(2027, 1, 1),    # New Year's Day
    date(2027, 3, 26),   # Good Friday
    date(2027, 3, 29),   # Easter Monday
    date(2027, 5, 3),    # Early May bank holiday
    date(2027, 5, 31),   # Spring bank holiday
    date(2027, 8, 30),   # Summer bank holiday
    date(2027, 12, 27),  # Christmas Day (substitute day)
    date(2027, 12, 28),  # Boxing Day (substitute day)
})
