"""Protobuf message classes for the ``vault.Vault`` gRPC service.

The schema mirrors ``proto/vault.proto`` and is registered at import time in a private
descriptor pool, so no protoc-generated module is needed.
"""

from __future__ import annotations

from typing import Any

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "vault"
SERVICE_NAME = f"{PACKAGE}.Vault"
HASH_METHOD = f"/{SERVICE_NAME}/Hash"
VALIDATE_METHOD = f"/{SERVICE_NAME}/Validate"

_Field = descriptor_pb2.FieldDescriptorProto

_MESSAGES: dict[str, tuple[tuple[str, int], ...]] = {
    "HashRequest": (("password", _Field.TYPE_STRING),),
    "HashResponse": (("hash", _Field.TYPE_STRING), ("err", _Field.TYPE_STRING)),
    "ValidateRequest": (("password", _Field.TYPE_STRING), ("hash", _Field.TYPE_STRING)),
    "ValidateResponse": (("valid", _Field.TYPE_BOOL), ("err", _Field.TYPE_STRING)),
}
_METHODS = (
    ("Hash", "HashRequest", "HashResponse"),
    ("Validate", "ValidateRequest", "ValidateResponse"),
)


def build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    """Describe vault.proto: four proto3 messages and the Vault service."""

    file_proto = descriptor_pb2.FileDescriptorProto(
        name="vault.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    for message_name, fields in _MESSAGES.items():
        message_proto = file_proto.message_type.add(name=message_name)
        for number, (field_name, field_type) in enumerate(fields, start=1):
            message_proto.field.add(
                name=field_name,
                number=number,
                type=field_type,
                label=_Field.LABEL_OPTIONAL,
            )

    service_proto = file_proto.service.add(name="Vault")
    for method_name, input_name, output_name in _METHODS:
        service_proto.method.add(
            name=method_name,
            input_type=f".{PACKAGE}.{input_name}",
            output_type=f".{PACKAGE}.{output_name}",
        )
    return file_proto


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(build_file_descriptor().SerializeToString())


def _message_class(name: str) -> Any:
    return message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{PACKAGE}.{name}"))


HashRequestMessage = _message_class("HashRequest")
HashResponseMessage = _message_class("HashResponse")
ValidateRequestMessage = _message_class("ValidateRequest")
ValidateResponseMessage = _message_class("ValidateResponse")
