"""Tests for payload validation."""

import pytest

from semantic_store.core.errors import ValidationFailure
from semantic_store.core.validation import (
    EntrySchema,
    SearchQuerySchema,
    validate_entry,
    validate_entry_id,
    validate_payload,
    validate_replacement,
    validate_search_query,
    validate_user_id,
)

from conftest import USER_ID, make_payload, make_vector


def messages(result) -> list[str]:
    return [v.message for v in result.violations]


class TestEntryValidation:
    """Test cases for create payloads."""

    def test_valid_payload(self) -> None:
        result = validate_entry(make_payload())
        assert result.ok
        record = result.unwrap()
        assert isinstance(record, EntrySchema)
        assert str(record.user_id) == USER_ID
        assert len(record.primary_embedding) == 768

    def test_defaults_applied(self) -> None:
        payload = make_payload()
        del payload["tags"]
        record = validate_entry(payload).unwrap()
        assert record.tags == []
        assert record.linked_entities.people == []
        assert record.search_metadata.boost_factor == 1.0
        assert record.search_metadata.recency_weight == 0.5
        assert record.search_metadata.user_preference_alignment == 0.5
        assert record.emotional_context is None

    def test_unknown_fields_stripped(self) -> None:
        record = validate_entry(make_payload(mood="sunny", id="client-chosen")).unwrap()
        data = record.to_record()
        assert "mood" not in data
        assert "id" not in data

    def test_wrong_dimension(self) -> None:
        result = validate_entry(make_payload(primary_embedding=make_vector(1.0, dimension=512)))
        assert not result.ok
        assert result.violations[0].field == "primary_embedding"
        assert "768" in result.violations[0].message
        assert "512" in result.violations[0].message

    def test_non_numeric_embedding(self) -> None:
        vector = make_vector(1.0)
        vector[3] = "x"
        result = validate_entry(make_payload(primary_embedding=vector))
        assert result.violations[0].field == "primary_embedding"
        assert "768" in result.violations[0].message

    def test_missing_fields_reported_together(self) -> None:
        result = validate_entry({"title": "Only a title"})
        fields = {v.field for v in result.violations}
        assert {"user_id", "content_type", "content", "primary_embedding"} <= fields
        for violation in result.violations:
            assert violation.message.startswith(f"{violation.field}:")

    def test_violations_collected_exhaustively(self) -> None:
        payload = make_payload(
            title="",
            search_metadata={"boost_factor": 11, "recency_weight": -0.1},
            temporal_context={"hour_of_day": 24, "day_of_week": 7},
        )
        result = validate_entry(payload)
        fields = {v.field for v in result.violations}
        assert fields == {
            "title",
            "search_metadata.boost_factor",
            "search_metadata.recency_weight",
            "temporal_context.hour_of_day",
            "temporal_context.day_of_week",
        }

    def test_range_message_and_value(self) -> None:
        result = validate_entry(make_payload(search_metadata={"user_preference_alignment": 1.5}))
        violation = result.violations[0]
        assert violation.field == "search_metadata.user_preference_alignment"
        assert "between 0.0 and 1.0" in violation.message
        assert violation.value == 1.5

    def test_explicit_zero_kept(self) -> None:
        record = validate_entry(
            make_payload(search_metadata={"boost_factor": 0, "recency_weight": 0})
        ).unwrap()
        assert record.search_metadata.boost_factor == 0.0
        assert record.search_metadata.recency_weight == 0.0

    def test_length_limits(self) -> None:
        assert validate_entry(make_payload(title="t" * 1000)).ok
        assert not validate_entry(make_payload(title="t" * 1001)).ok
        assert not validate_entry(make_payload(content="c" * 10001)).ok
        assert not validate_entry(make_payload(tags=[f"t{i}" for i in range(21)])).ok
        assert not validate_entry(make_payload(tags=["t" * 101])).ok

    def test_user_id_must_be_uuid(self) -> None:
        result = validate_entry(make_payload(user_id="alice"))
        assert [v.field for v in result.violations] == ["user_id"]
        assert result.violations[0].value == "alice"

    def test_optional_contexts(self) -> None:
        record = validate_entry(
            make_payload(
                session_id="9b2f3c4d-1e2f-4a5b-8c6d-7e8f9a0b1c2d",
                emotional_context={"primary_emotion": "calm", "intensity": 0.4},
                temporal_context={"hour_of_day": 7, "day_of_week": 2},
            )
        ).unwrap()
        assert record.emotional_context.primary_emotion == "calm"
        assert record.temporal_context.hour_of_day == 7
        assert record.to_record()["session_id"] == "9b2f3c4d-1e2f-4a5b-8c6d-7e8f9a0b1c2d"

    def test_oversized_integers_rejected(self) -> None:
        huge = 10**400
        result = validate_entry(make_payload(primary_embedding=[huge] + [0.0] * 767))
        assert [v.field for v in result.violations] == ["primary_embedding"]

        result = validate_entry(make_payload(search_metadata={"boost_factor": huge}))
        assert [v.field for v in result.violations] == ["search_metadata.boost_factor"]

    def test_non_object_payload(self) -> None:
        result = validate_entry(["not", "an", "object"])
        assert not result.ok
        assert result.violations[0].field == ""

    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValidationFailure) as exc_info:
            validate_entry({}).unwrap()
        assert "user_id" in exc_info.value.fields


class TestReplacementValidation:
    def test_mandatory_fields_same_as_create(self) -> None:
        result = validate_replacement({"title": "New title"})
        assert not result.ok
        assert {"user_id", "content", "primary_embedding"} <= {v.field for v in result.violations}

    def test_valid_replacement(self) -> None:
        assert validate_replacement(make_payload(title="Evening walk")).ok


class TestSearchQueryValidation:
    def test_defaults(self) -> None:
        query = validate_search_query({"embedding": make_vector(1.0)}).unwrap()
        assert isinstance(query, SearchQuerySchema)
        assert query.limit == 10
        assert query.similarity_threshold == 0.7
        assert not query.boost.enabled

    def test_limit_bounds(self) -> None:
        assert not validate_search_query({"embedding": make_vector(1.0), "limit": 0}).ok
        assert not validate_search_query({"embedding": make_vector(1.0), "limit": 101}).ok
        assert validate_search_query({"embedding": make_vector(1.0), "limit": 100}).ok

    def test_threshold_bounds(self) -> None:
        result = validate_search_query({"embedding": make_vector(1.0), "similarity_threshold": 1.2})
        assert result.violations[0].field == "similarity_threshold"

    def test_oversized_integers_rejected(self) -> None:
        result = validate_search_query(
            {"embedding": make_vector(1.0), "limit": 10**400, "similarity_threshold": 10**400}
        )
        assert {v.field for v in result.violations} == {"limit", "similarity_threshold"}

    def test_embedding_required(self) -> None:
        result = validate_search_query({"boost_recent": True})
        assert [v.field for v in result.violations] == ["embedding"]

    def test_boost_flags(self) -> None:
        query = validate_search_query(
            {"embedding": make_vector(1.0), "boost_recent": True}
        ).unwrap()
        assert query.boost.boost_recent
        assert query.boost.enabled


class TestValidatePayload:
    def test_named_schema(self) -> None:
        assert validate_payload(make_payload(), "create").ok
        assert validate_payload({"embedding": make_vector(0.5)}, "search-query").ok

    def test_unknown_schema(self) -> None:
        with pytest.raises(ValueError, match="Unknown schema"):
            validate_payload({}, "update")


class TestIdentifiers:
    def test_entry_id_canonical(self) -> None:
        assert validate_entry_id(USER_ID.upper()) == USER_ID

    def test_entry_id_invalid(self) -> None:
        with pytest.raises(ValidationFailure) as exc_info:
            validate_entry_id("not-a-uuid")
        assert exc_info.value.fields == ["id"]

    def test_user_id_invalid(self) -> None:
        with pytest.raises(ValidationFailure) as exc_info:
            validate_user_id("42")
        assert exc_info.value.fields == ["user_id"]
