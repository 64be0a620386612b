from enum import Enum


class FilterOperator(str, Enum):
    """Operators a filter node can carry."""

    # Comparison
    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    # Membership
    IN = "in"
    NOT_IN = "not_in"

    # String
    LIKE = "like"

    # Logical
    AND = "and"
    OR = "or"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"

    def inverted(self) -> "SortOrder":
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC
