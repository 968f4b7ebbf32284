import pytest

from recordseal_core.codec import ExportedRecord, decode, encode, encode_stream
from recordseal_core.errors import InvalidInput, MalformedPayload
from recordseal_core.storage import UserRecord
from recordseal_core.utils import iso_to_epoch_ms, epoch_ms_to_iso

# RecordList{records: [Record{id: 1, identifier: "alice@example.com",
#   role: ROLE_ADMIN, status: STATUS_ACTIVE, created_at: 1000}]}
GOLDEN_V1 = b"\x0a\x1c\x08\x01\x12\x11alice@example.com\x18\x01\x20\x01\x28\xe8\x07"


def _records():
    return [
        UserRecord(id=1, identifier="alice@example.com", role="admin", status="active",
                   created_at="2024-01-15T10:30:45.123456Z"),
        UserRecord(id=2, identifier="bob@example.com", role="user", status="inactive",
                   created_at="2024-01-15 10:30:45"),
        {"id": 3, "identifier": "carol@example.com", "role": "user", "status": "active",
         "created_at": "2024-01-15T12:30:45.500+02:00"},
    ]


def test_empty_roundtrip():
    assert encode([]) == b""
    assert decode(encode([])) == []
    assert decode(b"") == []


def test_roundtrip_fields_and_millisecond_timestamps():
    out = decode(encode(_records()))
    assert [r.id for r in out] == [1, 2, 3]
    assert [r.identifier for r in out] == ["alice@example.com", "bob@example.com", "carol@example.com"]
    assert [r.role for r in out] == ["admin", "user", "user"]
    assert [r.status for r in out] == ["active", "inactive", "active"]
    assert [r.created_at for r in out] == [
        "2024-01-15T10:30:45.123Z",
        "2024-01-15T10:30:45.000Z",
        "2024-01-15T10:30:45.500Z",
    ]


def test_decoded_records_reencode_identically():
    payload = encode(_records())
    assert encode(decode(payload)) == payload


def test_encoding_is_deterministic_and_streamable():
    payload = encode(_records())
    assert payload == encode(_records())
    assert b"".join(encode_stream(_records())) == payload


def test_golden_v1_payload_decodes():
    assert decode(GOLDEN_V1) == [
        ExportedRecord(id=1, identifier="alice@example.com", role="admin",
                       status="active", created_at="1970-01-01T00:00:01.000Z"),
    ]
    rec = {"id": 1, "identifier": "alice@example.com", "role": "admin",
           "status": "active", "created_at": "1970-01-01T00:00:01Z"}
    assert encode([rec]) == GOLDEN_V1


def test_unknown_fields_from_newer_writers_are_skipped():
    newer = b"\x0a\x1e\x08\x01\x12\x11alice@example.com\x18\x01\x20\x01\x28\xe8\x07\x48\x05"
    assert decode(newer) == decode(GOLDEN_V1)


def test_to_dict_uses_wire_names():
    rec = decode(GOLDEN_V1)[0]
    assert rec.to_dict() == {
        "id": 1,
        "identifier": "alice@example.com",
        "role": "admin",
        "status": "active",
        "createdAt": "1970-01-01T00:00:01.000Z",
    }


@pytest.mark.parametrize("payload", [
    GOLDEN_V1[:-1],
    GOLDEN_V1[:5],
    b"\x0a\x05abc",
    b"\xff",
    b"\x08\x01",
    b"\x10\x05\x18\x07",
    b"\x0a\x02\x10\x05",
])
def test_truncated_or_garbage_payload(payload):
    with pytest.raises(MalformedPayload):
        decode(payload)


def test_unrecognized_enum_value_is_rejected():
    bad_role = b"\x0a\x1c\x08\x01\x12\x11alice@example.com\x18\x07\x20\x01\x28\xe8\x07"
    with pytest.raises(MalformedPayload, match="role"):
        decode(bad_role)


def test_unspecified_enum_value_is_rejected():
    no_status = b"\x0a\x1a\x08\x01\x12\x11alice@example.com\x18\x01\x28\xe8\x07"
    with pytest.raises(MalformedPayload, match="status"):
        decode(no_status)


def test_decode_requires_bytes():
    with pytest.raises(InvalidInput):
        decode("not bytes")


@pytest.mark.parametrize("field, value", [
    ("role", "superuser"),
    ("status", "banned"),
    ("id", None),
    ("id", "7"),
    ("identifier", ""),
    ("created_at", "yesterday"),
    ("created_at", None),
])
def test_encode_rejects_bad_records(field, value):
    rec = {"id": 1, "identifier": "alice@example.com", "role": "admin",
           "status": "active", "created_at": "2024-01-01T00:00:00Z"}
    rec[field] = value
    with pytest.raises(InvalidInput):
        encode([rec])


@pytest.mark.parametrize("text, ms", [
    ("1970-01-01T00:00:00Z", 0),
    ("1970-01-01T00:00:00.001Z", 1),
    ("2024-01-15T10:30:45.123999Z", 1705314645123),
    ("2024-01-15 10:30:45", 1705314645000),
    ("2024-01-15T11:30:45+01:00", 1705314645000),
    ("1969-12-31T23:59:59.999500Z", -1),
])
def test_iso_to_epoch_ms_truncates(text, ms):
    assert iso_to_epoch_ms(text) == ms


def test_epoch_ms_to_iso_matches_js_format():
    assert epoch_ms_to_iso(1705314645123) == "2024-01-15T10:30:45.123Z"
    assert epoch_ms_to_iso(0) == "1970-01-01T00:00:00.000Z"
    assert epoch_ms_to_iso(-1) == "1969-12-31T23:59:59.999Z"


def test_declared_tag_with_wrong_wire_type_is_rejected():
    # identifier (tag 2) sent as a varint instead of a string
    with pytest.raises(MalformedPayload, match="wire type"):
        decode(b"\x0a\x02\x10\x05")
    # records (tag 1) sent as a varint instead of an embedded message
    with pytest.raises(MalformedPayload, match="wire type"):
        decode(b"\x08\x01")


def test_stray_fields_on_the_list_wrapper_are_rejected():
    with pytest.raises(MalformedPayload, match="unexpected field"):
        decode(GOLDEN_V1 + b"\x10\x05")


def test_each_streamed_chunk_is_a_record_list():
    chunks = list(encode_stream(_records()))
    assert len(chunks) == 3
    assert [decode(c)[0].id for c in chunks] == [1, 2, 3]
