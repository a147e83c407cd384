"""
Timeline and follow-up rules

Pure functions over already-fetched records: the contact timeline merge
and the follow-up categorization used by the follow-ups board.
"""
from typing import Iterable, List, Optional, Set
from uuid import UUID

from ..models.capture import Capture
from ..models.contact import Contact, FollowUpStatus
from ..models.interaction import Interaction, InteractionType
from ..models.meeting_brief import MeetingBrief
from ..models.note import Note

ALL_TYPES = "all"


def includes_notes(type_filter: Optional[str]) -> bool:
    return not type_filter or type_filter in (ALL_TYPES, InteractionType.NOTE.value)


def includes_meetings(type_filter: Optional[str]) -> bool:
    return not type_filter or type_filter in (ALL_TYPES, InteractionType.MEETING.value)


def find_capture_for(
    interaction: Interaction,
    captures: List[Capture],
    window_seconds: int = 30,
) -> Optional[Capture]:
    """
    Capture that produced an interaction.

    First capture (newest first) at the same event created within
    window_seconds of the interaction; otherwise the most recent capture.
    """
    if not captures:
        return None
    for capture in captures:
        if capture.event_id != interaction.event_id:
            continue
        delta = abs((capture.created_at - interaction.interaction_date).total_seconds())
        if delta < window_seconds:
            return capture
    return captures[0]


def merge_timeline(
    interactions: Iterable[Interaction],
    notes: Iterable[Note],
    meetings: Iterable[MeetingBrief],
    captures: List[Capture],
    window_seconds: int = 30,
) -> List[dict]:
    """
    Merge a contact's activity into one list, newest first.

    Each item is the record's dict plus 'type' (interaction | note | meeting)
    and 'date'. Meeting interactions pointing at a listed meeting brief are
    dropped. Capture interactions without an image get the image of their
    capture.
    """
    meetings = list(meetings)
    meeting_ids = {str(m.id) for m in meetings}
    entries = []

    for interaction in interactions:
        details = interaction.details or {}
        if (
            interaction.interaction_type == InteractionType.MEETING.value
            and details.get("meeting_id")
            and str(details["meeting_id"]) in meeting_ids
        ):
            continue

        item = interaction.to_dict()
        if interaction.interaction_type == InteractionType.CAPTURE.value and not details.get("image_url"):
            capture = find_capture_for(interaction, captures, window_seconds)
            if capture:
                item["details"] = {**details, "image_url": capture.image_url}

        item["type"] = "interaction"
        item["date"] = item["interaction_date"]
        entries.append((interaction.interaction_date, item))

    for note in notes:
        item = note.to_dict()
        item["type"] = "note"
        item["date"] = item["created_at"]
        entries.append((note.created_at, item))

    for meeting in meetings:
        item = meeting.to_dict()
        item["type"] = "meeting"
        item["date"] = item["meeting_date"]
        entries.append((meeting.meeting_date, item))

    entries.sort(key=lambda entry: entry[0], reverse=True)
    return [item for _, item in entries]


def categorize_contact(
    contact: Contact,
    has_sent_draft: bool,
    has_interaction: bool,
) -> FollowUpStatus:
    """
    Follow-up bucket for one contact.

    An explicit follow_up_status wins; otherwise a sent draft means
    followed_up, any interaction means needs_followup, else not_contacted.
    """
    explicit = FollowUpStatus.normalize(contact.follow_up_status)
    if explicit:
        return explicit
    if has_sent_draft:
        return FollowUpStatus.FOLLOWED_UP
    if has_interaction:
        return FollowUpStatus.NEEDS_FOLLOWUP
    return FollowUpStatus.NOT_CONTACTED


def categorize_follow_ups(
    contacts: Iterable[Contact],
    sent_contact_ids: Set[UUID],
    interacted_contact_ids: Set[UUID],
) -> dict:
    """Group contacts into the three follow-up buckets (input order is kept)"""
    categorized = {status.value: [] for status in FollowUpStatus}
    for contact in contacts:
        status = categorize_contact(
            contact,
            has_sent_draft=contact.id in sent_contact_ids,
            has_interaction=contact.id in interacted_contact_ids,
        )
        categorized[status.value].append(contact)
    return categorized
