from datetime import datetime, timedelta, timezone
from uuid import uuid4

from expocrm.models.capture import Capture
from expocrm.models.contact import Contact, FollowUpStatus
from expocrm.models.interaction import Interaction
from expocrm.models.meeting_brief import MeetingBrief
from expocrm.models.note import Note
from expocrm.services.timeline import (
    categorize_contact,
    categorize_follow_ups,
    find_capture_for,
    includes_meetings,
    includes_notes,
    merge_timeline,
)

T0 = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


class TestMergeTimeline:

    def test_sorted_newest_first_with_type_and_date(self):
        interaction = Interaction(interaction_type="email", interaction_date=T0)
        note = Note(content="spoke at booth", created_at=T0 + timedelta(hours=1))
        meeting = MeetingBrief(meeting_date=T0 + timedelta(days=2))

        merged = merge_timeline([interaction], [note], [meeting], [])

        assert [item["type"] for item in merged] == ["meeting", "note", "interaction"]
        assert merged[0]["date"] == meeting.to_dict()["meeting_date"]
        assert merged[1]["date"] == note.to_dict()["created_at"]
        assert merged[2]["date"] == interaction.to_dict()["interaction_date"]

    def test_meeting_interaction_of_listed_meeting_is_dropped(self):
        meeting = MeetingBrief(meeting_date=T0)
        duplicate = Interaction(interaction_type="meeting", details={"meeting_id": str(meeting.id)})
        other = Interaction(interaction_type="meeting", details={"meeting_id": str(uuid4())})

        merged = merge_timeline([duplicate, other], [], [meeting], [])

        ids = [item["id"] for item in merged]
        assert str(duplicate.id) not in ids
        assert str(other.id) in ids
        assert str(meeting.id) in ids

    def test_capture_interaction_gets_image_of_matching_capture(self):
        event_id = uuid4()
        near = Capture(event_id=event_id, image_url="near.jpg", created_at=T0 + timedelta(seconds=5))
        newest = Capture(event_id=uuid4(), image_url="newest.jpg", created_at=T0 + timedelta(hours=3))
        interaction = Interaction(
            interaction_type="capture", event_id=event_id, interaction_date=T0, details={"source": "card_scan"}
        )

        merged = merge_timeline([interaction], [], [], [newest, near])

        assert merged[0]["details"]["image_url"] == "near.jpg"
        assert merged[0]["details"]["source"] == "card_scan"

    def test_capture_interaction_keeps_existing_image(self):
        capture = Capture(image_url="other.jpg", created_at=T0)
        interaction = Interaction(
            interaction_type="capture", interaction_date=T0, details={"image_url": "own.jpg"}
        )

        merged = merge_timeline([interaction], [], [], [capture])

        assert merged[0]["details"]["image_url"] == "own.jpg"


class TestFindCapture:

    def test_falls_back_to_most_recent_capture(self):
        newest = Capture(event_id=uuid4(), image_url="newest.jpg", created_at=T0 + timedelta(days=1))
        older = Capture(event_id=uuid4(), image_url="older.jpg", created_at=T0)
        interaction = Interaction(interaction_type="capture", event_id=uuid4(), interaction_date=T0)

        assert find_capture_for(interaction, [newest, older]) is newest

    def test_window_is_exclusive(self):
        event_id = uuid4()
        late = Capture(event_id=event_id, image_url="late.jpg", created_at=T0 + timedelta(seconds=30))
        fallback = Capture(event_id=None, image_url="fallback.jpg", created_at=T0 + timedelta(days=1))
        interaction = Interaction(interaction_type="capture", event_id=event_id, interaction_date=T0)

        assert find_capture_for(interaction, [fallback, late]) is fallback

    def test_no_captures(self):
        assert find_capture_for(Interaction(), []) is None


def test_type_filters():
    assert includes_notes(None) and includes_notes("all") and includes_notes("note")
    assert not includes_notes("email")
    assert includes_meetings("meeting") and not includes_meetings("capture")


class TestFollowUpCategorization:

    def test_explicit_status_wins(self):
        contact = Contact(first_name="Ana", follow_up_status="followed_up")
        assert categorize_contact(contact, has_sent_draft=False, has_interaction=False) == FollowUpStatus.FOLLOWED_UP

    def test_legacy_spellings_map_to_needs_followup(self):
        for value in ("contacted", "needs_follow_up", "needs_followup"):
            contact = Contact(first_name="Ana", follow_up_status=value)
            assert categorize_contact(contact, True, True) == FollowUpStatus.NEEDS_FOLLOWUP

    def test_derived_status(self):
        contact = Contact(first_name="Ana")
        assert categorize_contact(contact, True, True) == FollowUpStatus.FOLLOWED_UP
        assert categorize_contact(contact, False, True) == FollowUpStatus.NEEDS_FOLLOWUP
        assert categorize_contact(contact, False, False) == FollowUpStatus.NOT_CONTACTED

    def test_groups_keep_input_order(self):
        sent = Contact(first_name="Sent")
        met = Contact(first_name="Met")
        fresh_a = Contact(first_name="A")
        fresh_b = Contact(first_name="B")

        grouped = categorize_follow_ups([fresh_a, sent, met, fresh_b], {sent.id}, {met.id, sent.id})

        assert set(grouped) == {"not_contacted", "needs_followup", "followed_up"}
        assert grouped["not_contacted"] == [fresh_a, fresh_b]
        assert grouped["needs_followup"] == [met]
        assert grouped["followed_up"] == [sent]
