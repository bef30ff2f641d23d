"""
Message capabilities and stock message models.

Two explicit capabilities drive the dispatcher instead of class-hierarchy
inspection:

- ``CarriesCorrelationId``: a success object that can receive the
  response's X-Correlation-Id.
- ``StructuredErrorPayload``: an error type that can be synthesized from a
  status code and a raw (non-JSON) body excerpt. Error types without it
  must be constructible without arguments.
"""

from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


@runtime_checkable
class CarriesCorrelationId(Protocol):
    """Capability of a response object to carry a correlation id."""

    def set_correlation_id(self, correlation_id: str) -> None:
        ...


@runtime_checkable
class StructuredErrorPayload(Protocol):
    """Capability of an error type to be built from a non-JSON response."""

    @classmethod
    def from_status_and_body(cls, status_code: int, body: str) -> "StructuredErrorPayload":
        ...


class OlpHttpMessage(BaseModel):
    """
    Base model for resource-server documents that track the correlation id.

    The correlation id is kept out of the model's fields, so it is never
    serialized back to the server.
    """

    model_config = ConfigDict(populate_by_name=True)

    _correlation_id: Optional[str] = PrivateAttr(default=None)

    @property
    def correlation_id(self) -> Optional[str]:
        return self._correlation_id

    def set_correlation_id(self, correlation_id: str) -> None:
        self._correlation_id = correlation_id


class ErrorResponse(BaseModel):
    """
    Error document returned by OAuth2 and OLP resource servers.

    Combines the OAuth2 error fields (``error``, ``error_description``)
    with the OLP ones (``errorId``, ``httpStatus``, ``errorCode``,
    ``message``). Every field is optional since servers fill different
    subsets.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    error: Optional[str] = Field(default=None, description="OAuth2 error code")
    error_description: Optional[str] = Field(
        default=None, description="OAuth2 human-readable error description"
    )
    error_id: Optional[str] = Field(default=None, alias="errorId")
    http_status: Optional[int] = Field(default=None, alias="httpStatus")
    error_code: Optional[int] = Field(default=None, alias="errorCode")
    message: Optional[str] = Field(default=None, description="Error message or raw body excerpt")

    @classmethod
    def from_status_and_body(cls, status_code: int, body: str) -> "ErrorResponse":
        """Synthesize an error document from a non-JSON response."""
        return cls(http_status=status_code, message=body)
