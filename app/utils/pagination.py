"""
Paging and sorting for list endpoints.

Callers choose a sort column by name; names are looked up in per-endpoint
allow-lists so that no caller-supplied text ever reaches the SQL.
"""

import math

from fastapi import Query

from database.models import Guest, Reservation
from enums.sort_direction import SortDirection

DEFAULT_SORT_KEY = "created_date"

GUEST_SORT_COLUMNS = {
    "created_date": Guest.created_date,
    "updated_date": Guest.updated_date,
    "first_name": Guest.first_name,
    "last_name": Guest.last_name,
    "email": Guest.email,
}

RESERVATION_SORT_COLUMNS = {
    "created_date": Reservation.created_date,
    "check_in": Reservation.check_in,
    "check_out": Reservation.check_out,
    "total_amount": Reservation.total_amount,
    "primary_guest_name": Reservation.primary_guest_name,
}

CURRENT_GUEST_SORT_COLUMNS = {
    **GUEST_SORT_COLUMNS,
    "check_in": Reservation.check_in,
    "check_out": Reservation.check_out,
    "total_amount": Reservation.total_amount,
}


class PageParams:
    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        sortKey: str = Query(DEFAULT_SORT_KEY),
        sortDirection: str = Query("DESC"),
    ):
        self.page = page
        self.limit = limit
        self.sort_key = sortKey
        self.direction = SortDirection.parse(sortDirection)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int, total_key: str) -> dict:
        return {
            total_key: total,
            "totalPages": math.ceil(total / self.limit) if self.limit else 0,
            "currentPage": self.page,
            "pageSize": self.limit,
        }


def sort_column(columns: dict, key: str):
    return columns.get(key) or columns[DEFAULT_SORT_KEY]


def order_clause(columns: dict, key: str, direction: SortDirection):
    column = sort_column(columns, key)
    return column.asc() if direction == SortDirection.ASC else column.desc()
