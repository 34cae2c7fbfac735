"""Filter construction shared by the sales listing and the sales reports.

A filter holds the optional criteria of a request. Only the criteria that
are present contribute a predicate; the predicates are combined with AND
into a single `Q` applied to the Sale queryset.
"""
import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from tortoise.expressions import Q

from ..inventory.models import Item


def start_of_day(day: datetime.date) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time.min, tzinfo=datetime.timezone.utc)


class DateRangeFilter(BaseModel):
    start_date: Optional[datetime.date] = Field(None, description="First day of the period, inclusive (YYYY-MM-DD)")
    end_date: Optional[datetime.date] = Field(None, description="Last day of the period, inclusive (YYYY-MM-DD)")

    def date_predicates(self) -> List[Q]:
        predicates = []
        if self.start_date:
            predicates.append(Q(sale_date__gte=start_of_day(self.start_date)))
        if self.end_date:
            # Whole end day is included: everything before the following midnight
            predicates.append(Q(sale_date__lt=start_of_day(self.end_date + datetime.timedelta(days=1))))
        return predicates

    async def extra_predicates(self) -> List[Q]:
        return []

    async def build(self) -> Optional[Q]:
        """Returns the conjunction of every present criterion, or None when there is none."""
        predicates = self.date_predicates() + await self.extra_predicates()
        if not predicates:
            return None
        return Q(*predicates, join_type=Q.AND)

    def describe(self) -> dict:
        """The applied date range as echoed back in report responses."""
        return {
            "start_date": self.start_date.isoformat() if self.start_date else "All time",
            "end_date": self.end_date.isoformat() if self.end_date else "All time",
        }


class SalesFilter(DateRangeFilter):
    category_id: Optional[str] = Field(None, description="Only sales of items in this category (public ID)")

    async def extra_predicates(self) -> List[Q]:
        if not self.category_id:
            return []
        item_ids = await Item.filter(category__public_id=self.category_id).values_list("id", flat=True)
        # An unknown category resolves to no items and therefore matches no sale
        return [Q(item_id__in=list(item_ids))]
