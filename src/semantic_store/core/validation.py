"""Validation of entry, replacement and search-query payloads.

Payloads are checked exhaustively with pydantic: every violation in the
payload is collected in a single pass and reported as a list of
:class:`Violation`. Unknown fields are dropped, defaults are applied, and the
result is a fully typed record.

Schemas:
    create        - a new entry; identity and timestamps are server-assigned
    replace       - a full replacement; the same fields are mandatory as for create
    search-query  - a similarity search request
"""

import logging
import math
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Generic, Literal, TypeVar
from uuid import UUID

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)
from pydantic_core import PydanticCustomError

from semantic_store.core.errors import ValidationFailure, Violation
from semantic_store.core.models import (
    DEFAULT_BOOST_FACTOR,
    DEFAULT_PREFERENCE_ALIGNMENT,
    DEFAULT_RECENCY_WEIGHT,
    DEFAULT_SEARCH_LIMIT,
    DEFAULT_SIMILARITY_THRESHOLD,
    MAX_BOOST_FACTOR,
    MAX_CONTENT_LENGTH,
    MAX_CONTENT_TYPE_LENGTH,
    MAX_EMOTION_LENGTH,
    MAX_SEARCH_LIMIT,
    MAX_TAG_LENGTH,
    MAX_TAGS,
    MAX_TITLE_LENGTH,
    PRIMARY_EMBEDDING_DIMENSION,
    BoostOptions,
)

logger = logging.getLogger(__name__)

SchemaName = Literal["create", "replace", "search-query"]

T = TypeVar("T", bound=BaseModel)


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond the float range
        return False


def fixed_vector(dimension: int) -> Any:
    """Annotated list type accepting exactly ``dimension`` finite numbers."""

    def check(value: Any) -> list[float]:
        if not isinstance(value, (list, tuple)):
            raise PydanticCustomError(
                "vector_type",
                "must be an array of {dimension} numbers",
                {"dimension": dimension},
            )
        if len(value) != dimension:
            raise PydanticCustomError(
                "vector_length",
                "must have exactly {dimension} dimensions, got {actual}",
                {"dimension": dimension, "actual": len(value)},
            )
        for index, item in enumerate(value):
            if not _is_number(item):
                raise PydanticCustomError(
                    "vector_item",
                    "must contain only numbers; element {index} is not a finite "
                    "number (expected {dimension} numbers)",
                    {"index": index, "dimension": dimension},
                )
        return [float(item) for item in value]

    return Annotated[list[float], BeforeValidator(check)]


def bounded(minimum: float, maximum: float, integer: bool = False) -> Any:
    """Annotated numeric type restricted to the inclusive range [minimum, maximum]."""

    kind = "an integer" if integer else "a number"

    def check(value: Any) -> Any:
        if not _is_number(value) or (integer and float(value) != int(value)):
            raise PydanticCustomError(
                "number_type", "must be {kind}", {"kind": kind}
            )
        if not minimum <= value <= maximum:
            raise PydanticCustomError(
                "out_of_range",
                "must be between {minimum} and {maximum} inclusive",
                {"minimum": minimum, "maximum": maximum},
            )
        return int(value) if integer else float(value)

    return Annotated[int if integer else float, BeforeValidator(check)]


PrimaryEmbedding = fixed_vector(PRIMARY_EMBEDDING_DIMENSION)
UnitInterval = bounded(0.0, 1.0)
BoostFactor = bounded(0.0, MAX_BOOST_FACTOR)
HourOfDay = bounded(0, 23, integer=True)
DayOfWeek = bounded(0, 6, integer=True)
SearchLimit = bounded(1, MAX_SEARCH_LIMIT, integer=True)
Tag = Annotated[str, StringConstraints(max_length=MAX_TAG_LENGTH)]


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SearchMetadataSchema(_Schema):
    boost_factor: BoostFactor = DEFAULT_BOOST_FACTOR
    recency_weight: UnitInterval = DEFAULT_RECENCY_WEIGHT
    user_preference_alignment: UnitInterval = DEFAULT_PREFERENCE_ALIGNMENT


class LinkedEntitiesSchema(_Schema):
    people: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    events: list[str] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)


class EmotionalContextSchema(_Schema):
    primary_emotion: Annotated[str, StringConstraints(max_length=MAX_EMOTION_LENGTH)] | None = None
    intensity: UnitInterval = 0.0


class TemporalContextSchema(_Schema):
    hour_of_day: HourOfDay | None = None
    day_of_week: DayOfWeek | None = None


class EntrySchema(_Schema):
    """Canonical shape of a create or replace payload."""

    user_id: UUID
    content_type: Annotated[
        str, StringConstraints(min_length=1, max_length=MAX_CONTENT_TYPE_LENGTH)
    ]
    title: Annotated[str, StringConstraints(min_length=1, max_length=MAX_TITLE_LENGTH)]
    content: Annotated[
        str, StringConstraints(min_length=1, max_length=MAX_CONTENT_LENGTH)
    ]
    primary_embedding: PrimaryEmbedding
    tags: list[Tag] = Field(default_factory=list, max_length=MAX_TAGS)
    linked_entities: LinkedEntitiesSchema = Field(default_factory=LinkedEntitiesSchema)
    search_metadata: SearchMetadataSchema = Field(default_factory=SearchMetadataSchema)
    session_id: UUID | None = None
    emotional_context: EmotionalContextSchema | None = None
    temporal_context: TemporalContextSchema | None = None

    def to_record(self) -> dict[str, Any]:
        """Plain dict with UUIDs rendered as strings."""
        return self.model_dump(mode="json")


class SearchQuerySchema(_Schema):
    embedding: PrimaryEmbedding
    user_id: UUID | None = None
    content_type: list[str] | None = None
    tags: list[str] | None = None
    limit: SearchLimit = DEFAULT_SEARCH_LIMIT
    similarity_threshold: UnitInterval = DEFAULT_SIMILARITY_THRESHOLD
    boost_recent: bool = False
    boost_preferences: bool = False

    @property
    def boost(self) -> BoostOptions:
        return BoostOptions(
            boost_recent=self.boost_recent, boost_preferences=self.boost_preferences
        )


SCHEMAS: dict[str, type[BaseModel]] = {
    "create": EntrySchema,
    "replace": EntrySchema,
    "search-query": SearchQuerySchema,
}

_SCALARS = (str, int, float, bool, type(None))


@dataclass
class ValidationResult(Generic[T]):
    """Outcome of validating one payload: a record or a list of violations."""

    value: T | None = None
    violations: list[Violation] | None = None

    @property
    def ok(self) -> bool:
        return not self.violations

    def unwrap(self) -> T:
        """Return the canonical record or raise ValidationFailure."""
        if self.violations:
            raise ValidationFailure(self.violations)
        assert self.value is not None
        return self.value


def _field_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _to_violations(error: ValidationError, prefix: str = "") -> list[Violation]:
    violations = []
    for detail in error.errors(include_url=False):
        path = _field_path(detail["loc"])
        if prefix:
            path = f"{prefix}.{path}" if path else prefix
        value = detail.get("input")
        if detail["type"] == "missing" or not isinstance(value, _SCALARS):
            value = None
        label = path or "payload"
        violations.append(Violation(field=path, message=f"{label}: {detail['msg']}", value=value))
    return violations


def _run(schema: type[T], payload: Any, label: str) -> ValidationResult[T]:
    if not isinstance(payload, dict):
        violation = Violation(field="", message=f"{label} payload must be an object")
        return ValidationResult(violations=[violation])
    try:
        return ValidationResult(value=schema.model_validate(payload))
    except ValidationError as exc:
        violations = _to_violations(exc)
        logger.debug("%s payload rejected with %d violation(s)", label, len(violations))
        return ValidationResult(violations=violations)


def validate_payload(payload: Any, schema: SchemaName) -> ValidationResult[Any]:
    """Validate a payload against the named schema.

    Args:
        payload: Decoded JSON object
        schema: One of "create", "replace" or "search-query"

    Returns:
        ValidationResult holding either the typed record or every violation

    Raises:
        ValueError: If the schema name is unknown
    """
    model = SCHEMAS.get(schema)
    if model is None:
        raise ValueError(f"Unknown schema {schema!r}; expected one of {sorted(SCHEMAS)}")
    return _run(model, payload, schema)


def validate_entry(payload: Any) -> ValidationResult[EntrySchema]:
    return _run(EntrySchema, payload, "create")


def validate_replacement(payload: Any) -> ValidationResult[EntrySchema]:
    return _run(EntrySchema, payload, "replace")


def validate_search_query(payload: Any) -> ValidationResult[SearchQuerySchema]:
    return _run(SearchQuerySchema, payload, "search-query")


_UUID_ADAPTER: TypeAdapter[UUID] = TypeAdapter(UUID)


def _uuid_checker(field: str) -> Callable[[Any], str]:
    def check(value: Any) -> str:
        try:
            return str(_UUID_ADAPTER.validate_python(value))
        except ValidationError as exc:
            raise ValidationFailure(_to_violations(exc, prefix=field)) from None

    return check


validate_entry_id = _uuid_checker("id")
validate_user_id = _uuid_checker("user_id")
