"""Upload relay result."""

from pydantic import BaseModel, ConfigDict, Field


class UploadResult(BaseModel):
    """Stored image location returned to the photo forms."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Public URL of the stored image")
    public_id: str = Field(..., description="Store key, e.g. uploads/3f2c...jpg")
