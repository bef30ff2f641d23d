"""JSON (de)serialization of request and response documents."""

from olp_client.serialization.serializer import PydanticSerializer, Serializer

__all__ = ["PydanticSerializer", "Serializer"]
