"""Wire-level JSON error body.

Every non-2xx response produced by the dispatch layer carries this shape:

    {"errorCode": "ITEM_NOT_FOUND", "message": "Item not found: abc123"}

Serialization is deterministic (fixed field order, no optional fields), so
equal errors always produce byte-identical bodies.
"""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """JSON error envelope.

    Attributes:
        error_code: Short symbolic error code (serialized as ``errorCode``).
        message: Human-readable message.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    error_code: str = Field(alias="errorCode")
    message: str

    def to_json_bytes(self) -> bytes:
        """Serialize to the wire format.

        Returns:
            bytes: Compact JSON with camelCase keys.
        """
        return self.model_dump_json(by_alias=True).encode("utf-8")
