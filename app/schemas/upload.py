"""URL ingestion API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UploadFromUrlRequest(BaseModel):
    """Body of POST /upload-from-url.

    Blank or missing url and unknown storage modes are rejected by the
    ingestion service so the error messages match the other 400s.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str | None = Field(default=None, description="http(s) URL to fetch")
    storage_mode: str | None = Field(
        default=None,
        alias="storageMode",
        description="telegram (default), r2, s3, discord or huggingface",
    )


class UploadedFileItem(BaseModel):
    """One stored file: public path /file/<locator>."""

    src: str = Field(..., description="Public path of the stored file")
