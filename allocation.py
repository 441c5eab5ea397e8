from typing import Optional, Sequence

from models import AllocationPeriod

def resolve_allocation(year: int, periods: Sequence[AllocationPeriod]) -> Optional[AllocationPeriod]:
    """
    Active allocation period for `year`: the last period starting on or before it.
    Periods must be sorted by start_year, so the scan stops at the first later one.
    """
    current = None
    for period in periods:
        if year >= period.start_year:
            current = period
        else:
            break
    return current
