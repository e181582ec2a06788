"""File-info API schemas (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.upload import FileInfoResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FileInfoResponse(_CamelModel):
    """Response for GET /file-info/{file_id} when a record is found."""

    success: bool = True
    file_id: str = Field(..., alias="fileId")
    key: str = Field(..., description="Index key the record was found under")
    file_name: str = Field(..., alias="fileName")
    original_name: str | None = Field(default=None, alias="originalName")
    file_size: int = Field(default=0, alias="fileSize")
    upload_time: int | None = Field(default=None, alias="uploadTime")
    storage_type: str = Field(default="telegram", alias="storageType")
    list_type: str = Field(default="None", alias="listType")
    label: str = "None"
    liked: bool = False

    @classmethod
    def from_result(cls, result: FileInfoResult) -> "FileInfoResponse":
        record = result.record
        return cls(
            file_id=result.file_id,
            key=result.key,
            file_name=record.file_name or result.file_id,
            original_name=record.file_name or None,
            file_size=record.file_size,
            upload_time=record.created_at,
            storage_type=record.storage_type.value,
            list_type=record.list_type,
            label=record.label,
            liked=record.liked,
        )


class FileNotFoundResponse(_CamelModel):
    """Response for GET /file-info/{file_id} when no record exists (404)."""

    error: str = "File not found"
    file_id: str = Field(..., alias="fileId")
    file_name: str = Field(..., alias="fileName")
    original_name: str | None = Field(default=None, alias="originalName")
