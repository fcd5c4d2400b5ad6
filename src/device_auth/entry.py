# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""DeviceAuthEntry — the persisted token record and its byte codec."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticSerializationError

from device_auth.exceptions import EntryDecodeError, EntryEncodeError


class DeviceAuthEntry(BaseModel):
    """A device token issued by the gateway for one role.

    Attributes:
        token:         Opaque credential.  Never logged.
        role:          Normalized role the token authorizes.
        scopes:        Sorted, de-duplicated scope strings.
        updated_at_ms: Epoch milliseconds at write time.  Informational only.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: str
    role: str
    scopes: list[str] = Field(default_factory=list)
    updated_at_ms: int = Field(alias="updatedAtMs")


def encode_entry(entry: DeviceAuthEntry) -> bytes:
    """Serialize *entry* to UTF-8 JSON using the wire field names."""
    try:
        return entry.model_dump_json(by_alias=True).encode("utf-8")
    except (PydanticSerializationError, UnicodeEncodeError) as exc:
        raise EntryEncodeError(f"cannot serialize entry ({type(exc).__name__})") from exc


def decode_entry(payload: bytes) -> DeviceAuthEntry:
    """Parse a stored payload.

    Raises:
        EntryDecodeError: The payload is not JSON, or is missing or
            mistypes a required field.  Unknown keys are ignored.
    """
    try:
        return DeviceAuthEntry.model_validate_json(payload)
    except ValidationError as exc:
        # Never echo input values: the payload holds the token.
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'payload'}: {err['msg']}"
            for err in exc.errors(include_input=False)
        )
        raise EntryDecodeError(problems) from exc
