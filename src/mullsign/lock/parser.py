"""Decoder for `tailscale lock status --json` output."""

import logging
from typing import Union

from pydantic import ValidationError

from mullsign.errors import ParseError
from mullsign.models import LockStatus

logger = logging.getLogger(__name__)


def parse(raw: Union[bytes, str]) -> LockStatus:
    """
    Decode a lock status document.

    Unknown fields are ignored. Missing fields, wrong types and malformed JSON
    all raise ParseError; no partially populated status is ever returned.

    Args:
        raw: JSON document as emitted by the tailscale CLI

    Returns:
        The decoded LockStatus
    """
    try:
        status = LockStatus.model_validate_json(raw)
    except ValidationError as e:
        raise ParseError(str(e)) from e

    logger.debug(
        f"Parsed lock status: enabled={status.enabled}, "
        f"{len(status.visible_peers)} visible, {len(status.filtered_peers)} filtered"
    )
    return status


def encode(status: LockStatus) -> bytes:
    """Encode a LockStatus back into its wire form."""
    return status.model_dump_json(by_alias=True).encode("utf-8")
