"""Combine call signals into a canonical tag set and a single outcome.

The outcome is decided first and the tag list is assembled once, so the
result always carries exactly one of ``ai_resolved`` / ``ai_failed``.

Outcome rules:
  1. Failed if the call was transferred, the caller asked for a human, the
     sentiment is negative, ``call_successful`` is explicitly false, or the
     user hung up after the early-hangup threshold.
  2. An early user hangup without a human request or negative sentiment is
     resolved and tagged ``ai_no_chance``, unless the call was transferred.
  3. Otherwise resolved.

Free-text values (call type, sentiment) are lower-cased and reduced to a
tag-safe slug: characters outside [a-z0-9_-] become "_", so "Very Positive"
yields ``sentiment_very_positive``. Zendesk splits tags on whitespace.
"""

import re
from enum import StrEnum

from pydantic import BaseModel

from app.mappers.signals import (
    EARLY_HANGUP_THRESHOLD_SEC,
    detect_requested_human,
    did_transfer,
    is_early_hangup,
    is_user_hangup,
)
from app.schemas.retell import CallRecord

IDENTITY_TAGS = ("retell_ai", "voice_bot", "ai_call_review")

TAG_EARLY_HANGUP = "ai_early_hangup"
TAG_HANGUP = "ai_hangup"
TAG_NO_CHANCE = "ai_no_chance"
TAG_REQUESTED_HUMAN = "requested_human"

_UNSAFE_TAG_CHARS = re.compile(r"[^a-z0-9_\-]+")


class Outcome(StrEnum):
    resolved = "ai_resolved"
    failed = "ai_failed"


class HangupKind(StrEnum):
    early = "early"
    late = "late"


class CallClassification(BaseModel):
    outcome: Outcome
    no_chance: bool = False
    transferred: bool = False
    requested_human: bool = False
    sentiment: str | None = None
    hangup: HangupKind | None = None
    tags: list[str]


def tag_slug(value: str) -> str:
    """Lower-case a free-text value and make it safe inside a ticket tag."""
    return _UNSAFE_TAG_CHARS.sub("_", value.strip().lower()).strip("_")


def _classify_hangup(
    call: CallRecord, threshold_sec: float
) -> HangupKind | None:
    if not call.disconnection_reason or not is_user_hangup(call.disconnection_reason):
        return None
    if is_early_hangup(call.duration_ms / 1000, threshold_sec):
        return HangupKind.early
    return HangupKind.late


def _decide_outcome(
    *,
    transferred: bool,
    requested_human: bool,
    negative: bool,
    call_successful: bool | None,
    hangup: HangupKind | None,
) -> tuple[Outcome, bool]:
    """Return (outcome, no_chance)."""
    if transferred:
        return Outcome.failed, False

    if hangup is HangupKind.early and not requested_human and not negative:
        return Outcome.resolved, True

    if (
        requested_human
        or negative
        or call_successful is False
        or hangup is HangupKind.late
    ):
        return Outcome.failed, False

    return Outcome.resolved, False


def classify_call(
    call: CallRecord,
    *,
    early_hangup_threshold_sec: float = EARLY_HANGUP_THRESHOLD_SEC,
) -> CallClassification:
    analysis = call.call_analysis

    transferred = did_transfer(call)
    requested_human = detect_requested_human(call.transcript)
    sentiment = (analysis.user_sentiment or "").strip().lower() if analysis else ""
    call_successful = analysis.call_successful if analysis else None
    in_voicemail = bool(analysis and analysis.in_voicemail is True)
    hangup = _classify_hangup(call, early_hangup_threshold_sec)

    outcome, no_chance = _decide_outcome(
        transferred=transferred,
        requested_human=requested_human,
        negative=sentiment == "negative",
        call_successful=call_successful,
        hangup=hangup,
    )

    tags: list[str] = list(IDENTITY_TAGS)
    if call.call_type and tag_slug(call.call_type):
        tags.append(f"calltype_{tag_slug(call.call_type)}")
    tags.append("voicemail_yes" if in_voicemail else "voicemail_no")
    tags.append("ai_transferred" if transferred else "ai_not_transferred")
    sentiment_slug = tag_slug(sentiment)
    tags.append(f"sentiment_{sentiment_slug}" if sentiment_slug else "sentiment_unknown")
    if hangup is HangupKind.early:
        tags.append(TAG_EARLY_HANGUP)
    elif hangup is HangupKind.late:
        tags.append(TAG_HANGUP)
    if no_chance:
        tags.append(TAG_NO_CHANCE)
    tags.append(outcome.value)
    if requested_human:
        tags.append(TAG_REQUESTED_HUMAN)

    return CallClassification(
        outcome=outcome,
        no_chance=no_chance,
        transferred=transferred,
        requested_human=requested_human,
        sentiment=sentiment or None,
        hangup=hangup,
        tags=list(dict.fromkeys(tags)),
    )


def compute_tags(
    call: CallRecord,
    *,
    early_hangup_threshold_sec: float = EARLY_HANGUP_THRESHOLD_SEC,
) -> list[str]:
    return classify_call(
        call, early_hangup_threshold_sec=early_hangup_threshold_sec
    ).tags
