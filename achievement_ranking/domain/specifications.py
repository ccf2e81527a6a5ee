"""Specification pattern for achievement filtering.

Specifications encapsulate listing filters that can be:
- Combined with logical operators (AND, OR, NOT)
- Built from a SearchQuery
- Tested independently
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from achievement_ranking.domain.academic_year import academic_year_from_date
from achievement_ranking.domain.models import (
    Achievement,
    AchievementType,
    OrgLevel,
    Role,
    SearchQuery,
)

T = TypeVar("T")


class Specification(ABC, Generic[T]):
    """Base specification interface.

    A specification represents a business rule that can be checked
    against a candidate object.
    """

    @abstractmethod
    def is_satisfied_by(self, candidate: T) -> bool:
        """Check if candidate satisfies this specification.

        Args:
            candidate: Object to check

        Returns:
            True if candidate satisfies the specification
        """
        pass

    def and_(self, other: "Specification[T]") -> "AndSpecification[T]":
        """Combine with AND logic."""
        return AndSpecification(self, other)

    def or_(self, other: "Specification[T]") -> "OrSpecification[T]":
        """Combine with OR logic."""
        return OrSpecification(self, other)

    def not_(self) -> "NotSpecification[T]":
        """Negate this specification."""
        return NotSpecification(self)


class AndSpecification(Specification[T]):
    """AND combination of two specifications."""

    def __init__(self, left: Specification[T], right: Specification[T]) -> None:
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: T) -> bool:
        """Both specifications must be satisfied."""
        return self.left.is_satisfied_by(candidate) and self.right.is_satisfied_by(
            candidate
        )


class OrSpecification(Specification[T]):
    """OR combination of two specifications."""

    def __init__(self, left: Specification[T], right: Specification[T]) -> None:
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: T) -> bool:
        """At least one specification must be satisfied."""
        return self.left.is_satisfied_by(candidate) or self.right.is_satisfied_by(
            candidate
        )


class NotSpecification(Specification[T]):
    """NOT negation of a specification."""

    def __init__(self, spec: Specification[T]) -> None:
        self.spec = spec

    def is_satisfied_by(self, candidate: T) -> bool:
        """Specification must NOT be satisfied."""
        return not self.spec.is_satisfied_by(candidate)


class AnyAchievementSpec(Specification[Achievement]):
    """Matches every achievement; the identity for AND chains."""

    def is_satisfied_by(self, candidate: Achievement) -> bool:
        return True


class OwnerRoleSpec(Specification[Achievement]):
    """Achievements owned by a given role."""

    def __init__(self, role: Role) -> None:
        self.role = role

    def is_satisfied_by(self, candidate: Achievement) -> bool:
        return candidate.owner_role == self.role


class AchievementTypeSpec(Specification[Achievement]):
    """Achievements of a given category."""

    def __init__(self, achievement_type: AchievementType) -> None:
        self.achievement_type = achievement_type

    def is_satisfied_by(self, candidate: Achievement) -> bool:
        return candidate.type == self.achievement_type


class OrgLevelSpec(Specification[Achievement]):
    """Achievements recognized at a given organizational level."""

    def __init__(self, org_level: OrgLevel) -> None:
        self.org_level = org_level

    def is_satisfied_by(self, candidate: Achievement) -> bool:
        return candidate.org_level == self.org_level


class AcademicYearSpec(Specification[Achievement]):
    """Achievements dated within a Buddhist-era academic year."""

    def __init__(self, academic_year: int, tz_name: str = "UTC") -> None:
        """Initialize with the academic year.

        Args:
            academic_year: Buddhist-era academic year (e.g. 2567)
            tz_name: Timezone used to read achievement dates
        """
        self.academic_year = academic_year
        self.tz_name = tz_name

    def is_satisfied_by(self, candidate: Achievement) -> bool:
        """Undated achievements never match."""
        return (
            academic_year_from_date(candidate.date, self.tz_name) == self.academic_year
        )


class FullTextContainsSpec(Specification[Achievement]):
    """Achievements whose searchable text contains the term.

    The term may appear anywhere in the text, not only as its prefix, so
    in-memory search also finds matches inside titles and descriptions.
    """

    def __init__(self, term: str) -> None:
        self.term = term.lower().strip()

    def is_satisfied_by(self, candidate: Achievement) -> bool:
        return self.term in candidate.full_text


def specification_for(
    query: SearchQuery, tz_name: str = "UTC"
) -> Specification[Achievement]:
    """Build the conjunction of every filter set on a query.

    Args:
        query: Listing options
        tz_name: Timezone used for the academic-year facet

    Returns:
        Combined specification; matches everything when no filter is set

    Example:
        >>> spec = specification_for(SearchQuery(owner_role=Role.TEACHER))
        >>> visible = [a for a in achievements if spec.is_satisfied_by(a)]
    """
    spec: Specification[Achievement] = AnyAchievementSpec()
    if query.owner_role is not None:
        spec = spec.and_(OwnerRoleSpec(query.owner_role))
    if query.type is not None:
        spec = spec.and_(AchievementTypeSpec(query.type))
    if query.org_level is not None:
        spec = spec.and_(OrgLevelSpec(query.org_level))
    if query.academic_year is not None:
        spec = spec.and_(AcademicYearSpec(query.academic_year, tz_name))
    if query.search_term is not None:
        spec = spec.and_(FullTextContainsSpec(query.search_term))
    return spec
