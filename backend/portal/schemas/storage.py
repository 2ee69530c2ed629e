from pydantic import BaseModel, ConfigDict, Field


class UploadURLRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Presence of ``name`` is checked by the upload broker so that a missing
    # name is a 400, not a schema error.
    name: str | None = None
    size: int | None = None
    content_type: str | None = Field(default=None, alias="contentType")


class UploadURLResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    upload_url: str = Field(alias="uploadURL")
    file_url: str = Field(alias="fileURL")
    content_type: str | None = Field(default=None, alias="contentType")


class UploadPutResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    file_url: str = Field(alias="fileURL")
