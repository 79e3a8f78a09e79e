"""Decoding of raw webhook bodies into ``PushEvent`` models."""

from pydantic import ValidationError

from commitlink.schemas.webhooks import PushEvent


class CommitLinkError(Exception):
    """Base class for request-level failures raised by this service."""


class DecodeError(CommitLinkError):
    """The webhook body is not a well-formed push payload."""


def parse_push_event(raw_body: bytes | str) -> PushEvent:
    """Decode a push payload from its JSON wire form.

    Raises:
        DecodeError: If the body is not JSON or does not match the push shape.
            Nothing is salvaged from a partially valid body.
    """
    try:
        return PushEvent.model_validate_json(raw_body)
    except ValidationError as exc:
        raise DecodeError(f"invalid push payload: {exc.error_count()} error(s)") from exc
