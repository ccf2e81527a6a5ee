"""Domain models for the achievement ranking engine.

All models use Pydantic v2 for validation and serialization. Records are
frozen: the engine derives separate result objects and never mutates input.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from achievement_ranking.domain.exceptions import ConfigurationError
from achievement_ranking.domain.scoring_constants import (
    DEFAULT_ISSUER_WEIGHT,
    DEFAULT_OWNER_NAME_WEIGHT,
    DEFAULT_PARTIAL_TOKEN_DESCRIPTION_BOOST,
    DEFAULT_PARTIAL_TOKEN_ISSUER_FACTOR,
    DEFAULT_PARTIAL_TOKEN_OWNER_FACTOR,
    DEFAULT_PARTIAL_TOKEN_TITLE_BOOST,
    MERIT_SCORE_CEILING,
)


class Role(str, Enum):
    """Role of the person an achievement belongs to."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AchievementType(str, Enum):
    """Achievement category."""

    CERTIFICATE = "certificate"
    DIPLOMA = "diploma"
    AWARD = "award"
    COMPETITION = "competition"
    TRAINING = "training"
    OTHER = "other"


class OrgLevel(str, Enum):
    """Organizational level of the issuing body, lowest first."""

    SCHOOL = "school"
    DISTRICT = "district"
    PROVINCE = "province"
    REGION = "region"
    NATIONAL = "national"


class EvidenceFile(BaseModel):
    """Uploaded evidence attachment. Only the count matters for scoring."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(default="", description="Storage path")
    url: str = Field(default="", description="Public URL")
    mime_type: str = Field(default="", description="MIME type")
    name: str = Field(default="", description="Original file name")
    size: int = Field(default=0, ge=0, description="Size in bytes")
    is_thumbnail: bool = Field(default=False, description="Thumbnail marker")
    blur_data_url: str | None = Field(
        default=None, description="Tiny base64 blurred preview"
    )


class Achievement(BaseModel):
    """Achievement record (certificate, award, training completion...)."""

    model_config = ConfigDict(frozen=True)

    id: str | None = Field(default=None, description="Record identifier")
    title: str = Field(..., description="Achievement title")
    description: str | None = Field(default=None, description="Free-text details")
    issuer: str | None = Field(default=None, description="Issuing organization")
    date: str | None = Field(default=None, description="Achievement date (ISO)")
    owner_role: Role = Field(..., description="Role of the owner")
    owner_name: str = Field(..., description="Owner display name")
    type: AchievementType = Field(..., description="Achievement category")
    url: str | None = Field(default=None, description="Reference URL")
    org_level: OrgLevel | None = Field(default=None, description="Organization level")
    org_names: list[str] = Field(default_factory=list, description="Organizations")
    tags: list[str] = Field(default_factory=list, description="Derived tags")
    evidence: list[EvidenceFile] = Field(
        default_factory=list, description="Evidence attachments"
    )
    created_at: int = Field(..., description="Creation time (epoch ms)")
    updated_at: int | None = Field(default=None, description="Update time (epoch ms)")

    # Training / diploma specifics
    training_hours: float | None = Field(default=None, description="Training hours")
    training_benefits: str | None = Field(default=None, description="Benefits gained")
    training_next_actions: str | None = Field(
        default=None, description="Follow-up actions"
    )

    # Award / competition / other specifics
    award_level: str | None = Field(default=None, description="Award level or rank")
    competition_category: str | None = Field(
        default=None, description="Competition category"
    )
    other_specified: str | None = Field(
        default=None, description="Details when type is 'other'"
    )

    @field_validator("title", "owner_name")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        """Reject blank required text fields."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @property
    def evidence_count(self) -> int:
        return len(self.evidence)

    @property
    def owner_key(self) -> tuple[Role, str]:
        return (self.owner_role, self.owner_name)

    @property
    def full_text(self) -> str:
        """Lowercased searchable text: title, description, issuer, owner.

        Missing fields leave their slot empty so the layout stays stable.
        """
        return (
            f"{self.title} {self.description or ''} {self.issuer or ''} "
            f"{self.owner_name}"
        ).lower()


class SearchWeights(BaseModel):
    """Tunable search relevance weights.

    Any subset may be overridden through with_overrides; the rest keep the
    documented defaults.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    issuer_weight: float = Field(
        default=DEFAULT_ISSUER_WEIGHT, ge=0.0, description="Issuer contains term"
    )
    owner_name_weight: float = Field(
        default=DEFAULT_OWNER_NAME_WEIGHT,
        ge=0.0,
        description="Owner name contains term",
    )
    partial_token_title_boost: float = Field(
        default=DEFAULT_PARTIAL_TOKEN_TITLE_BOOST,
        ge=0.0,
        description="Per-token prefix boost in title",
    )
    partial_token_issuer_factor: float = Field(
        default=DEFAULT_PARTIAL_TOKEN_ISSUER_FACTOR,
        ge=0.0,
        description="Fraction of issuer_weight per token prefix match",
    )
    partial_token_owner_factor: float = Field(
        default=DEFAULT_PARTIAL_TOKEN_OWNER_FACTOR,
        ge=0.0,
        description="Fraction of owner_name_weight per token prefix match",
    )
    partial_token_description_boost: float = Field(
        default=DEFAULT_PARTIAL_TOKEN_DESCRIPTION_BOOST,
        ge=0.0,
        description="Per-token prefix boost in description",
    )

    def with_overrides(self, overrides: Mapping[str, Any] | None) -> "SearchWeights":
        """Return a copy with the given weights replaced.

        Args:
            overrides: Weight name to value; None or empty returns self

        Returns:
            Merged weights

        Raises:
            ConfigurationError: On unknown weight names or invalid values

        Example:
            >>> SearchWeights().with_overrides({"owner_name_weight": 30}).issuer_weight
            18.0
        """
        if not overrides:
            return self

        unknown = sorted(set(overrides) - set(type(self).model_fields))
        if unknown:
            raise ConfigurationError(f"Unknown search weights: {', '.join(unknown)}")

        try:
            return type(self).model_validate({**self.model_dump(), **overrides})
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid search weights: {e}") from e


DEFAULT_SEARCH_WEIGHTS = SearchWeights()


class OwnerAggregate(BaseModel):
    """Activity statistics for one (role, name) owner."""

    model_config = ConfigDict(frozen=True)

    owner_role: Role
    owner_name: str
    count: int = 0
    total_evidence: int = 0
    avg_description_length: float = 0.0
    latest_created_at: int = 0


class ComponentScores(BaseModel):
    """Owner-independent Hall of Fame components, each already normalized."""

    model_config = ConfigDict(frozen=True)

    evidence: float = Field(..., ge=0.0, le=10.0)
    description: float = Field(..., ge=0.0, le=25.0)
    recency: float = Field(..., ge=0.0, le=15.0)
    url: float = Field(..., ge=0.0, le=5.0)
    issuer: float = Field(..., ge=0.0, le=10.0)
    org_level: float = Field(..., ge=0.0, le=15.0)
    type: float = Field(..., ge=0.0, le=10.0)

    @property
    def total(self) -> float:
        """Base score (0-90)."""
        return (
            self.evidence
            + self.description
            + self.recency
            + self.url
            + self.issuer
            + self.org_level
            + self.type
        )

    def as_pairs(self) -> list[tuple[str, float]]:
        """Labeled components in display order."""
        return [
            ("evidence", self.evidence),
            ("description", self.description),
            ("recency", self.recency),
            ("url", self.url),
            ("issuer", self.issuer),
            ("orgLevel", self.org_level),
            ("type", self.type),
        ]


class RankedAchievement(BaseModel):
    """Hall of Fame score result for one achievement."""

    model_config = ConfigDict(frozen=True)

    achievement: Achievement
    components: ComponentScores
    base_score: float = Field(..., description="Sum of components (0-90)")
    owner_bonus_raw: float = Field(
        ..., description="Normalized owner bonus before the multiplier (0-10)"
    )
    owner_weight: float = Field(..., description="Multiplier applied to the bonus")
    owner_bonus: float = Field(..., description="owner_bonus_raw * owner_weight")
    hof_score: float = Field(
        ..., ge=0.0, le=MERIT_SCORE_CEILING, description="Merit score (0-100)"
    )
    owner_aggregate: OwnerAggregate
    computed_at: int = Field(..., description="'now' used for the computation (ms)")

    @property
    def created_at(self) -> int:
        return self.achievement.created_at


class ScoreExplainComponent(BaseModel):
    """One labeled contribution to a merit score."""

    label: str
    value: float


class ScoreExplanation(BaseModel):
    """Component breakdown of a merit score."""

    components: list[ScoreExplainComponent]
    total: float = Field(..., description="min(100, sum of components)")
    clamped: bool = Field(
        default=False, description="True when the 100 ceiling cut the raw sum"
    )

    @property
    def component_sum(self) -> float:
        return sum(c.value for c in self.components)

    def value_of(self, label: str) -> float | None:
        """Value of the component with the given label, if present."""
        for component in self.components:
            if component.label == label:
                return component.value
        return None

    def format_lines(self, precision: int = 2) -> list[str]:
        """Render the breakdown for display, rounding only here."""
        lines = [f"{c.label}: {c.value:.{precision}f}" for c in self.components]
        lines.append(f"total: {self.total:.{precision}f}")
        return lines


class SearchHit(BaseModel):
    """Achievement with its relevance score (None for unscored listings)."""

    achievement: Achievement
    score: float | None = None

    @property
    def created_at(self) -> int:
        return self.achievement.created_at


class SearchFacets(BaseModel):
    """Facet values persisted next to an achievement for filtered lookups."""

    type: AchievementType
    role: Role
    org_level: OrgLevel | None = None
    year: int | None = None
    academic_year: int | None = None


class SearchMetadata(BaseModel):
    """Derived values a repository stores for indexed lookup."""

    full_text: str = Field(..., description="Lowercased searchable text")
    title: str = Field(..., description="Normalized title")
    tags: list[str] = Field(default_factory=list)
    facets: SearchFacets
    created_at: int


class SearchQuery(BaseModel):
    """Filter, search and pagination options for a listing request."""

    search_term: str | None = Field(default=None, description="Free-text query")
    owner_role: Role | None = None
    type: AchievementType | None = None
    org_level: OrgLevel | None = None
    academic_year: int | None = Field(
        default=None, description="Buddhist-era academic year facet"
    )
    after_created_at: int | None = Field(
        default=None, description="Cursor for listings without a search term"
    )
    after_full_text: str | None = Field(
        default=None, description="Cursor for search-term listings"
    )
    limit: int = Field(default=30, ge=1, description="Page size")

    @field_validator("search_term", mode="before")
    @classmethod
    def normalize_search_term(cls, v: Any) -> str | None:
        """Trim the term; blank terms mean no search."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def uses_created_at_cursor(self) -> bool:
        """createdAt cursors only apply when there is no search term."""
        return self.search_term is None


class SearchPage(BaseModel):
    """One page of listing or search results."""

    hits: list[SearchHit] = Field(default_factory=list)
    next_after_created_at: int | None = None
    next_after_full_text: str | None = None
