from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AdmitCardCreate(BaseModel):
    student_id: str = Field(..., min_length=1)
    exam_name: str = Field(..., min_length=1, max_length=255)
    file_url: str = Field(..., min_length=1, max_length=1024)
    file_name: str = Field(..., min_length=1, max_length=255)
    terms_english: str | None = None
    terms_hindi: str | None = None


class AdmitCardRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    exam_name: str
    file_url: str
    file_name: str
    terms_english: str | None = None
    terms_hindi: str | None = None
    uploaded_at: datetime
