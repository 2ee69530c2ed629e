from typing import Any

from fastapi import HTTPException, status
from fastapi.staticfiles import StaticFiles
from starlette.responses import Response
from starlette.types import Scope


class UploadStaticFiles(StaticFiles):
    """Public read-only view of the upload directory with a cache hint.

    Dot-files (in-flight ``.upload-*.part`` temporaries) are never served.
    """

    def __init__(self, *args: Any, max_age: int, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.max_age = max_age

    async def get_response(self, path: str, scope: Scope) -> Response:
        if any(part.startswith(".") for part in path.split("/") if part):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return await super().get_response(path, scope)

    def file_response(self, *args: Any, **kwargs: Any) -> Response:
        response = super().file_response(*args, **kwargs)
        response.headers["Cache-Control"] = f"public, max-age={self.max_age}"
        return response
