"""
Tag reconciliation tests against a faked segments API.
"""

import pytest

from mailchimp_subscribe.errors import DataFormatError, TagsNotFoundError, TransportError
from mailchimp_subscribe.members import calculate_subscriber_hash
from mailchimp_subscribe.tags import TagReconciler, match_segments

from conftest import LIST_ID

EMAIL = "jane@example.com"
SEGMENTS = f"/lists/{LIST_ID}/segments"


@pytest.fixture
def segments(fake):
    fake.route("GET", SEGMENTS, {
        "segments": [
            {"id": 11, "name": "VIP"},
            {"id": 12, "name": "Webinar"},
            {"id": 13, "name": "VIP"},
        ]
    })
    fake.route("POST", SEGMENTS, lambda payload: {"id": 99, "name": payload["name"]})
    for segment_id in (11, 12, 13):
        fake.route("POST", f"{SEGMENTS}/{segment_id}", {"total_added": 1, "total_removed": 0})
    return fake


def test_match_segments_first_duplicate_wins():
    matched, missing = match_segments(
        [{"id": 1, "name": "A"}, {"id": 2, "name": "A"}, {"id": 3, "name": "B"}],
        ["A", "C", "A"]
    )
    assert matched == [{"id": 1, "name": "A"}]
    assert missing == ["C"]


def test_existing_tags_get_one_add_each(segments):
    result = TagReconciler(segments).assign_tags_to_user(LIST_ID, EMAIL, ["VIP", "Webinar"])

    adds = segments.calls_to("POST")
    assert sorted(endpoint for endpoint, _ in adds) == [f"{SEGMENTS}/11", f"{SEGMENTS}/12"]
    assert all(payload == {"members_to_add": [EMAIL]} for _, payload in adds)
    assert result["created"] == []
    assert len(result["updated"]) == 2


def test_assigning_twice_adds_again_without_duplicates(segments):
    reconciler = TagReconciler(segments)
    reconciler.assign_tags_to_user(LIST_ID, EMAIL, ["VIP"])
    reconciler.assign_tags_to_user(LIST_ID, EMAIL, ["VIP", "VIP"])

    adds = segments.calls_to("POST", f"{SEGMENTS}/11")
    assert len(adds) == 2
    # the duplicate VIP segment (id 13) is never touched
    assert segments.calls_to("POST", f"{SEGMENTS}/13") == []


def test_missing_tag_without_create_raises_before_mutation(segments):
    with pytest.raises(TagsNotFoundError) as exc_info:
        TagReconciler(segments).assign_tags_to_user(LIST_ID, EMAIL, ["VIP", "X"], False)

    assert exc_info.value.missing == ["X"]
    assert "X" in str(exc_info.value)
    assert segments.calls_to("POST") == []


def test_missing_tag_with_create_seeds_member(segments):
    result = TagReconciler(segments).assign_tags_to_user(LIST_ID, EMAIL, ["X"], True)

    creates = segments.calls_to("POST", SEGMENTS)
    assert creates == [(SEGMENTS, {"name": "X", "static_segment": [EMAIL]})]
    # no separate add call for the new segment
    assert len(segments.calls_to("POST")) == 1
    assert result["created"] == [{"id": 99, "name": "X"}]


def test_create_and_add_mixed(segments):
    TagReconciler(segments).assign_tags_to_user(LIST_ID, EMAIL, ["Webinar", "New"], create_if_missing=True)

    assert len(segments.calls_to("POST", SEGMENTS)) == 1
    assert segments.calls_to("POST", f"{SEGMENTS}/12") == [(f"{SEGMENTS}/12", {"members_to_add": [EMAIL]})]


def test_missing_tags_are_created_before_existing_ones_are_added(segments):
    TagReconciler(segments).assign_tags_to_user(LIST_ID, EMAIL, ["Webinar", "New"], create_if_missing=True)

    order = [endpoint for endpoint, _ in segments.calls_to("POST")]
    assert order == [SEGMENTS, f"{SEGMENTS}/12"]


def test_failed_add_aborts_assignment(segments):
    segments.route("POST", f"{SEGMENTS}/12", TransportError("Segment is not static", 400))
    with pytest.raises(TransportError):
        TagReconciler(segments).assign_tags_to_user(LIST_ID, EMAIL, ["VIP", "Webinar"])


def test_remove_existing_tags(segments):
    removed = TagReconciler(segments).remove_tags(LIST_ID, EMAIL, ["Webinar", "VIP"])

    calls = segments.calls_to("POST")
    assert sorted(endpoint for endpoint, _ in calls) == [f"{SEGMENTS}/11", f"{SEGMENTS}/12"]
    assert all(payload == {"members_to_remove": [EMAIL]} for _, payload in calls)
    assert len(removed) == 2


def test_remove_unknown_tag_is_a_no_op(segments):
    assert TagReconciler(segments).remove_tags(LIST_ID, EMAIL, ["Y"]) == []
    assert segments.calls_to("POST") == []


def test_malformed_segments_response(fake):
    fake.route("GET", SEGMENTS, {"segments": None})
    with pytest.raises(DataFormatError):
        TagReconciler(fake).assign_tags_to_user(LIST_ID, EMAIL, ["VIP"])


def test_get_tags_by_user_keeps_platform_order(fake):
    member = f"/lists/{LIST_ID}/members/{calculate_subscriber_hash(EMAIL)}"
    fake.route("GET", member, {"tags": [{"id": 2, "name": "Webinar"}, {"id": 1, "name": "VIP"},
                                        {"id": 2, "name": "Webinar"}]})

    assert TagReconciler(fake).get_tags_by_user(LIST_ID, EMAIL) == ["Webinar", "VIP", "Webinar"]


def test_get_tags_by_user_without_tags_field(fake):
    member = f"/lists/{LIST_ID}/members/{calculate_subscriber_hash(EMAIL)}"
    fake.route("GET", member, {"email_address": EMAIL})

    assert TagReconciler(fake).get_tags_by_user(LIST_ID, EMAIL) == []
