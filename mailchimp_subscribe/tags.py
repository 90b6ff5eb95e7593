#!/usr/bin/env python3
"""
tags.py

Tag management for Mailchimp members.

Mailchimp tags are static segments under the hood, so a member is tagged
by adding them to the segment of that name and untagged by removing them.
Segments are listed fresh on every call.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from . import config
from .errors import TagsNotFoundError
from .fanout import fan_out
from .members import member_endpoint
from .transport import MailchimpTransport, extract_list_field

logger = logging.getLogger(__name__)


def match_segments(segments: List[Dict[str, Any]],
                   names: Iterable[str]) -> Tuple[List[Dict[str, Any]], List[str]]:
    """
    Split requested tag names into (matched segments, missing names).

    When Mailchimp returns several segments with one name, the first wins.
    Each segment is matched at most once.
    """
    by_name: Dict[str, Dict[str, Any]] = {}
    for segment in segments:
        by_name.setdefault(segment.get("name"), segment)

    matched, missing = [], []
    for name in dict.fromkeys(names):
        segment = by_name.pop(name, None)
        if segment is None:
            missing.append(name)
        else:
            matched.append(segment)
    return matched, missing


class TagReconciler:
    """Adds and removes a member's tags by name"""

    def __init__(self, transport: MailchimpTransport):
        self.transport = transport

    def list_segments(self, list_id: str) -> List[Dict[str, Any]]:
        body = self.transport.call(
            f"/lists/{list_id}/segments", "GET",
            params={"count": config.PAGE_COUNT}
        )
        return extract_list_field(body, "segments")

    def create_segment(self, list_id: str, name: str,
                       static_members: Optional[List[str]] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": name}
        if static_members is not None:
            payload["static_segment"] = static_members
        logger.info(f"🏷️ Creating tag '{name}' in list {list_id}")
        return self.transport.call(f"/lists/{list_id}/segments", "POST", payload)

    def add_member(self, list_id: str, segment: Dict[str, Any], email: str) -> Dict[str, Any]:
        logger.debug(f"Adding {email} to tag '{segment.get('name')}'")
        return self.transport.call(
            f"/lists/{list_id}/segments/{segment['id']}", "POST",
            {"members_to_add": [email]}
        )

    def remove_member(self, list_id: str, segment: Dict[str, Any], email: str) -> Dict[str, Any]:
        logger.debug(f"Removing {email} from tag '{segment.get('name')}'")
        return self.transport.call(
            f"/lists/{list_id}/segments/{segment['id']}", "POST",
            {"members_to_remove": [email]}
        )

    def assign_tags_to_user(self, list_id: str, email: str, tag_names: Iterable[str],
                            create_if_missing: bool = False) -> Dict[str, List[Dict[str, Any]]]:
        """
        Make sure the member carries every tag in tag_names.

        Missing tags are created with the member as their first static
        member when create_if_missing is set; otherwise TagsNotFoundError
        is raised before anything is changed. Existing tags get one
        "members_to_add" call each, created tags get none.

        Returns:
            {"created": [segment responses], "updated": [segment responses]}
        """
        matched, missing = match_segments(self.list_segments(list_id), tag_names)

        if missing and not create_if_missing:
            logger.warning(f"⚠️ Tags not found for {email} in list {list_id}: {missing}")
            raise TagsNotFoundError(missing)

        created = fan_out(lambda name: self.create_segment(list_id, name, [email]), missing)
        updated = fan_out(lambda segment: self.add_member(list_id, segment, email), matched)

        logger.info(f"✅ Tagged {email}: {len(updated)} existing, {len(created)} created")
        return {"created": created, "updated": updated}

    def remove_tags(self, list_id: str, email: str, tag_names: Iterable[str]) -> List[Dict[str, Any]]:
        """Remove the member from every named tag that exists; unknown names are skipped"""
        matched, missing = match_segments(self.list_segments(list_id), tag_names)
        if missing:
            logger.debug(f"Skipping unknown tags for {email}: {missing}")

        removed = fan_out(lambda segment: self.remove_member(list_id, segment, email), matched)
        logger.info(f"🧹 Removed {email} from {len(removed)} tags")
        return removed

    def get_tags_by_user(self, list_id: str, email: str) -> List[str]:
        """Tag names on the member record, in Mailchimp's order"""
        member = self.transport.call(member_endpoint(list_id, email), "GET")
        return [tag.get("name") for tag in member.get("tags") or []]
