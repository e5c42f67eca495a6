from enum import Enum


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value) -> "SortDirection":
        """Anything other than a case-insensitive ``asc`` sorts descending."""
        if value and str(value).lower() == "asc":
            return cls.ASC
        return cls.DESC
