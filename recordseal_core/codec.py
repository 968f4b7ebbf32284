"""
recordseal_core.codec
---------------------
Binary export of the record set against the published protobuf schema.

- encode(): records -> RecordList bytes (deterministic serialization)
- decode(): RecordList bytes -> ExportedRecord list
- encode_stream(): the same bytes, one record at a time

The wire format deliberately carries no digest or signature. created_at
travels as epoch milliseconds, so a decoded timestamp equals the stored
instant truncated to the millisecond, rendered as "YYYY-MM-DDTHH:MM:SS.mmmZ".
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Mapping

from google.protobuf.message import DecodeError
from google.protobuf.unknown_fields import UnknownFieldSet

from recordseal_core.constants import ROLES, STATUSES
from recordseal_core.errors import InvalidInput, MalformedPayload
from recordseal_core.logger import get_logger
from recordseal_core.schema import CURRENT_SCHEMA, MessageSpec, Schema, message_classes
from recordseal_core.utils import epoch_ms_to_iso, iso_to_epoch_ms

log = get_logger("RecordSeal.Codec")


@dataclass(frozen=True)
class ExportedRecord:
    id: int
    identifier: str
    role: str
    status: str
    created_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "identifier": self.identifier,
            "role": self.role,
            "status": self.status,
            "createdAt": self.created_at,
        }


def _enum_number(schema: Schema, enum_name: str, value):
    # "admin" -> ROLE_ADMIN -> 1
    wire_name = f"{enum_name.upper()}_{str(value).upper()}"
    return next((n for name, n in schema.enum(enum_name).values if name == wire_name), None)


def _get(rec: Any, name: str):
    if isinstance(rec, Mapping):
        return rec.get(name)
    return getattr(rec, name, None)


def _to_message(rec: Any, index: int, schema: Schema):
    classes = message_classes(schema)
    rec_id = _get(rec, "id")
    identifier = _get(rec, "identifier")
    role = _get(rec, "role")
    status = _get(rec, "status")
    created_at = _get(rec, "created_at")

    if not isinstance(rec_id, int) or isinstance(rec_id, bool):
        raise InvalidInput(f"record {index}: id must be an integer, got {rec_id!r}")
    if not isinstance(identifier, str) or not identifier:
        raise InvalidInput(f"record {index}: identifier must be a non-empty string")
    if role not in ROLES:
        raise InvalidInput(f"record {index}: unrecognized role {role!r}")
    if status not in STATUSES:
        raise InvalidInput(f"record {index}: unrecognized status {status!r}")
    try:
        created_ms = iso_to_epoch_ms(created_at)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"record {index}: bad created_at {created_at!r}: {e}") from e

    try:
        return classes["Record"](
            id=rec_id,
            identifier=identifier,
            role=_enum_number(schema, "Role", role),
            status=_enum_number(schema, "Status", status),
            created_at=created_ms,
        )
    except (TypeError, ValueError) as e:
        # int64 overflow on id or created_at
        raise InvalidInput(f"record {index}: {e}") from e


def encode_stream(records: Iterable[Any], schema: Schema = CURRENT_SCHEMA) -> Iterator[bytes]:
    """
    Yield the RecordList encoding one record at a time.

    Each chunk is a one-record RecordList; concatenated RecordLists merge
    their repeated fields, so the joined chunks equal what encode() returns.
    """
    record_list = message_classes(schema)["RecordList"]
    for index, rec in enumerate(records):
        yield record_list(records=[_to_message(rec, index, schema)]).SerializeToString(deterministic=True)


def encode(records: Iterable[Any], schema: Schema = CURRENT_SCHEMA) -> bytes:
    messages = [_to_message(rec, index, schema) for index, rec in enumerate(records)]
    payload = message_classes(schema)["RecordList"](records=messages).SerializeToString(deterministic=True)
    log.debug(f"Encoded export payload ({len(payload)} bytes)")
    return payload


def _enum_value(schema: Schema, enum_name: str, number: int, allowed: Iterable[str], index: int) -> str:
    name = schema.enum(enum_name).by_number().get(number)
    for value in allowed:
        if name == f"{enum_name.upper()}_{value.upper()}":
            return value
    raise MalformedPayload(f"record {index}: unrecognized {enum_name.lower()} value {number}")


def _reject_unknown_fields(message, spec: MessageSpec, where: str, allow_new: bool) -> None:
    # The parser files a declared tag with the wrong wire type under unknown
    # fields. Only tags the schema does not declare may be skipped, and only
    # where newer writers may append fields (Record, not the RecordList wrapper).
    declared = {f.tag for f in spec.fields}
    for entry in UnknownFieldSet(message):
        if entry.field_number in declared:
            raise MalformedPayload(
                f"{where}: field {entry.field_number} has wire type {entry.wire_type}, "
                f"not the one {spec.name} declares"
            )
        if not allow_new:
            raise MalformedPayload(f"{where}: unexpected field {entry.field_number}")


def decode(payload: bytes, schema: Schema = CURRENT_SCHEMA) -> List[ExportedRecord]:
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise InvalidInput(f"payload must be bytes, got {type(payload).__name__}")

    message = message_classes(schema)["RecordList"]()
    try:
        message.ParseFromString(bytes(payload))
    except DecodeError as e:
        raise MalformedPayload(f"Cannot decode {schema.file_name} payload: {e}") from e

    _reject_unknown_fields(message, schema.message("RecordList"), "RecordList", allow_new=False)
    record_spec = schema.message("Record")
    out = []
    for index, rec in enumerate(message.records):
        _reject_unknown_fields(rec, record_spec, f"record {index}", allow_new=True)
        if not rec.identifier:
            raise MalformedPayload(f"record {index}: missing identifier")
        try:
            created_at = epoch_ms_to_iso(rec.created_at)
        except (OverflowError, ValueError) as e:
            raise MalformedPayload(f"record {index}: timestamp out of range: {rec.created_at}") from e
        out.append(ExportedRecord(
            id=rec.id,
            identifier=rec.identifier,
            role=_enum_value(schema, "Role", rec.role, ROLES, index),
            status=_enum_value(schema, "Status", rec.status, STATUSES, index),
            created_at=created_at,
        ))
    log.debug(f"Decoded {len(out)} records from export payload")
    return out
