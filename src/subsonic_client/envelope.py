"""Decoding of the ``subsonic-response`` envelope."""

import json
import logging
from typing import Any, Dict, Tuple

from .exceptions import CoercionError, ParseError, ShapeError, remote_error_for
from .models import APIError, Envelope, EnvelopeStatus
from .normalize import coerce_to_int, coerce_to_string

logger = logging.getLogger(__name__)

ROOT_KEY = "subsonic-response"


def _decode_error(raw: Any) -> APIError:
    if not isinstance(raw, dict):
        return APIError(0, "Unknown error")
    try:
        code = coerce_to_int(raw.get("code", 0), "error.code")
    except CoercionError:
        code = 0
    try:
        message = coerce_to_string(raw.get("message"), "error.message")
    except CoercionError:
        message = ""
    return APIError(code, message or "Unknown error")


def decode(body: bytes, url: str) -> Tuple[Envelope, Dict[str, Any]]:
    """Parse a response body into its envelope and payload.

    Args:
        body: Raw response bytes
        url: Request URL, used in error messages

    Returns:
        Tuple of (Envelope, payload) where payload is the full inner object,
        operation-specific sections included

    Raises:
        ParseError: If body is not valid JSON
        ShapeError: If body is not a JSON object wrapping ``subsonic-response``,
            or ``status`` is neither "ok" nor "failed"
    """
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise ParseError(url, str(e)) from e

    if not isinstance(data, dict):
        raise ShapeError(ROOT_KEY, url, "not wrapped in an object")
    payload = data.get(ROOT_KEY)
    if not isinstance(payload, dict):
        raise ShapeError(ROOT_KEY, url, "missing" if payload is None else type(payload).__name__)

    raw_status = payload.get("status")
    try:
        status = EnvelopeStatus(raw_status.lower() if isinstance(raw_status, str) else raw_status)
    except ValueError:
        observed = "missing" if raw_status is None else repr(raw_status)
        raise ShapeError("status", url, observed) from None
    version = payload.get("version", payload.get("serverVersion"))

    envelope = Envelope(
        status=status,
        server_version=coerce_to_string(version, "version"),
        xmlns=coerce_to_string(payload.get("xmlns"), "xmlns"),
        error=_decode_error(payload.get("error")) if status is EnvelopeStatus.FAILED else None,
        open_subsonic=payload.get("openSubsonic") is True,
    )
    return envelope, payload


def raise_for_error(envelope: Envelope) -> None:
    """Raise the RemoteError carried by a failed envelope, if any."""
    if envelope.error is None:
        return
    logger.error(f"Subsonic API error {envelope.error.code}: {envelope.error.message}")
    raise remote_error_for(envelope.error.code, envelope.error.message)
