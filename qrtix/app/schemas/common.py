# qrtix/app/schemas/common.py
from pydantic import BaseModel, ConfigDict


class RequestBody(BaseModel):
    """Base for request bodies: values of the wrong JSON type are rejected, not coerced."""
    model_config = ConfigDict(strict=True)


class StatusResponse(BaseModel):
    status: str
    mensaje: str
