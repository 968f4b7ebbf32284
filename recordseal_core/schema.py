"""
recordseal_core.schema
----------------------
Data-only description of the export wire schema.

The tables here are the single source of truth: message classes are built
from them at runtime through the protobuf descriptor API, and the
published proto/records_v1.proto is their rendering. Tags are
append-only: a new field gets a new tag, an existing tag is never reused
or retyped.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Dict, List, Tuple

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

from recordseal_core.constants import SCHEMA_FILE, SCHEMA_PACKAGE, SCHEMA_VERSION

_FDP = descriptor_pb2.FieldDescriptorProto

SCALAR_TYPES = {
    "int32": _FDP.TYPE_INT32,
    "int64": _FDP.TYPE_INT64,
    "uint64": _FDP.TYPE_UINT64,
    "bool": _FDP.TYPE_BOOL,
    "string": _FDP.TYPE_STRING,
    "bytes": _FDP.TYPE_BYTES,
}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    tag: int
    type: str
    repeated: bool = False


@dataclass(frozen=True)
class EnumSpec:
    name: str
    values: Tuple[Tuple[str, int], ...]

    def by_number(self) -> Dict[int, str]:
        return {number: name for name, number in self.values}


@dataclass(frozen=True)
class MessageSpec:
    name: str
    fields: Tuple[FieldSpec, ...]

    def field(self, name: str) -> FieldSpec:
        return next(f for f in self.fields if f.name == name)


@dataclass(frozen=True)
class Schema:
    version: int
    package: str
    file_name: str
    enums: Tuple[EnumSpec, ...]
    messages: Tuple[MessageSpec, ...]

    def enum(self, name: str) -> EnumSpec:
        return next(e for e in self.enums if e.name == name)

    def message(self, name: str) -> MessageSpec:
        return next(m for m in self.messages if m.name == name)

    @property
    def header_value(self) -> str:
        return f"{self.file_name};version={self.version}"


ROLE_ENUM = EnumSpec("Role", (
    ("ROLE_UNSPECIFIED", 0),
    ("ROLE_ADMIN", 1),
    ("ROLE_USER", 2),
))

STATUS_ENUM = EnumSpec("Status", (
    ("STATUS_UNSPECIFIED", 0),
    ("STATUS_ACTIVE", 1),
    ("STATUS_INACTIVE", 2),
))

RECORD_FIELDS = (
    FieldSpec("id", 1, "int64"),
    FieldSpec("identifier", 2, "string"),
    FieldSpec("role", 3, "Role"),
    FieldSpec("status", 4, "Status"),
    FieldSpec("created_at", 5, "int64"),
)

SCHEMA_V1 = Schema(
    version=SCHEMA_VERSION,
    package=SCHEMA_PACKAGE,
    file_name=SCHEMA_FILE,
    enums=(ROLE_ENUM, STATUS_ENUM),
    messages=(
        MessageSpec("Record", RECORD_FIELDS),
        MessageSpec("RecordList", (FieldSpec("records", 1, "Record", repeated=True),)),
    ),
)

SCHEMA_HISTORY = {1: SCHEMA_V1}
CURRENT_SCHEMA = SCHEMA_HISTORY[SCHEMA_VERSION]


def _json_name(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def file_descriptor(schema: Schema) -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto(
        name=f"recordseal/{schema.file_name}",
        package=schema.package,
        syntax="proto3",
    )
    for enum in schema.enums:
        ep = fdp.enum_type.add(name=enum.name)
        for name, number in enum.values:
            ep.value.add(name=name, number=number)

    enum_names = {e.name for e in schema.enums}
    for msg in schema.messages:
        mp = fdp.message_type.add(name=msg.name)
        for f in msg.fields:
            fp = mp.field.add(name=f.name, number=f.tag, json_name=_json_name(f.name))
            fp.label = _FDP.LABEL_REPEATED if f.repeated else _FDP.LABEL_OPTIONAL
            if f.type in SCALAR_TYPES:
                fp.type = SCALAR_TYPES[f.type]
            elif f.type in enum_names:
                fp.type = _FDP.TYPE_ENUM
                fp.type_name = f".{schema.package}.{f.type}"
            else:
                fp.type = _FDP.TYPE_MESSAGE
                fp.type_name = f".{schema.package}.{f.type}"
    return fdp


@lru_cache(maxsize=None)
def message_classes(schema: Schema = CURRENT_SCHEMA) -> Dict[str, type]:
    """Build (once per schema) the protobuf message classes for `schema`."""
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_descriptor(schema).SerializeToString())
    return {
        msg.name: message_factory.GetMessageClass(
            pool.FindMessageTypeByName(f"{schema.package}.{msg.name}")
        )
        for msg in schema.messages
    }


def render_proto(schema: Schema = CURRENT_SCHEMA) -> str:
    lines = [f"// {schema.file_name}", 'syntax = "proto3";', "", f"package {schema.package};", ""]
    for enum in schema.enums:
        lines.append(f"enum {enum.name} {{")
        lines.extend(f"  {name} = {number};" for name, number in enum.values)
        lines.append("}")
        lines.append("")
    for msg in schema.messages:
        lines.append(f"message {msg.name} {{")
        for f in msg.fields:
            prefix = "repeated " if f.repeated else ""
            lines.append(f"  {prefix}{f.type} {f.name} = {f.tag};")
        lines.append("}")
        lines.append("")
    return "\n".join(lines)


def load_proto_text(schema: Schema = CURRENT_SCHEMA) -> str:
    """The published .proto file shipped inside the package."""
    return resources.files("recordseal_core").joinpath("proto", schema.file_name).read_text(encoding="utf-8")


def check_backward_compatible(old: Schema, new: Schema) -> List[str]:
    """
    List the ways `new` breaks readers of `old` payloads.

    Empty list means compatible: every old message, field and enum value
    survives under the same tag/number with the same name and type.
    """
    problems = []
    for old_msg in old.messages:
        try:
            new_msg = new.message(old_msg.name)
        except StopIteration:
            problems.append(f"message {old_msg.name} removed")
            continue
        new_by_tag = {f.tag: f for f in new_msg.fields}
        new_by_name = {f.name: f for f in new_msg.fields}
        for f in old_msg.fields:
            nf = new_by_tag.get(f.tag)
            if nf is None:
                problems.append(f"{old_msg.name}.{f.name} (tag {f.tag}) removed")
            elif (nf.name, nf.type, nf.repeated) != (f.name, f.type, f.repeated):
                problems.append(f"{old_msg.name} tag {f.tag} changed from {f.type} {f.name} to {nf.type} {nf.name}")
            moved = new_by_name.get(f.name)
            if moved is not None and moved.tag != f.tag:
                problems.append(f"{old_msg.name}.{f.name} moved from tag {f.tag} to {moved.tag}")

    for old_enum in old.enums:
        try:
            new_values = new.enum(old_enum.name).by_number()
        except StopIteration:
            problems.append(f"enum {old_enum.name} removed")
            continue
        for number, name in old_enum.by_number().items():
            if new_values.get(number) != name:
                problems.append(f"{old_enum.name} value {number} changed from {name} to {new_values.get(number)}")
    return problems
