"""Validation of user-supplied list names and entries."""

from __future__ import annotations

from typing import Any, Iterable

MAX_LIST_NAME_LENGTH = 50
MAX_PARTICIPANT_NAME_LENGTH = 100
MAX_PARTICIPANTS_PER_LIST = 1000


def validate_list_name(name: Any) -> str:
    """Return the trimmed list name.

    Raises
    ------
    ValueError
        If the name is missing, blank or longer than
        :data:`MAX_LIST_NAME_LENGTH` characters.
    """
    if not isinstance(name, str):
        raise ValueError("List name is required")
    trimmed = name.strip()
    if not trimmed:
        raise ValueError("List name must not be empty")
    if len(trimmed) > MAX_LIST_NAME_LENGTH:
        raise ValueError(
            f"List name must be at most {MAX_LIST_NAME_LENGTH} characters"
        )
    return trimmed


def validate_participant_name(name: Any) -> str:
    """Return the trimmed participant name, or raise :class:`ValueError`."""
    if not isinstance(name, str):
        raise ValueError("Participant name is required")
    trimmed = name.strip()
    if not trimmed:
        raise ValueError("Participant name must not be empty")
    if len(trimmed) > MAX_PARTICIPANT_NAME_LENGTH:
        raise ValueError(
            f"Participant name must be at most {MAX_PARTICIPANT_NAME_LENGTH} characters"
        )
    return trimmed


def validate_participants(participants: Iterable[Any]) -> list[str]:
    """Return the trimmed participant names.

    Raises
    ------
    ValueError
        If the list is empty, too long, contains an invalid name, or contains
        names that differ only by case or surrounding whitespace.
    """
    if isinstance(participants, (str, bytes)):
        raise ValueError("Participants must be a list of names")
    names = list(participants)
    if not names:
        raise ValueError("A list needs at least one participant")
    if len(names) > MAX_PARTICIPANTS_PER_LIST:
        raise ValueError(
            f"A list can have at most {MAX_PARTICIPANTS_PER_LIST} participants"
        )

    cleaned: list[str] = []
    seen: set[str] = set()
    for position, name in enumerate(names, start=1):
        try:
            trimmed = validate_participant_name(name)
        except ValueError as exc:
            raise ValueError(f"Participant {position}: {exc}") from exc
        key = trimmed.lower()
        if key in seen:
            raise ValueError(f"Duplicate participant name: {trimmed}")
        seen.add(key)
        cleaned.append(trimmed)
    return cleaned


__all__ = [
    "MAX_LIST_NAME_LENGTH",
    "MAX_PARTICIPANTS_PER_LIST",
    "MAX_PARTICIPANT_NAME_LENGTH",
    "validate_list_name",
    "validate_participant_name",
    "validate_participants",
]
