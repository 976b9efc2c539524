"""Upload endpoints bound through the binder registry."""

from pydantic import BaseModel

from upload_binder.core.logger import LogIcon, logger
from upload_binder.core.router import Router
from upload_binder.core.settings import settings as st
from upload_binder.models.core import Upload

router = Router(prefix=st.UPLOADS_ROUTE_PREFIX)


class UploadInfo(BaseModel):
    """Summary of one bound upload."""

    field: str
    name: str | None
    size: int

    @classmethod
    def from_upload(cls, upload: Upload) -> "UploadInfo":
        return cls(field=upload.field_name, name=upload.filename, size=upload.size)


class UploadsResponse(BaseModel):
    """Uploads bound to a request field."""

    count: int
    files: list[UploadInfo]


@router.post("/upload")
async def upload_files(files: list[Upload]) -> UploadsResponse:
    """Receive every file sent under the 'files' form field."""
    logger.info("Uploads bound", icon=LogIcon.UPLOAD, count=len(files))
    return UploadsResponse(count=len(files), files=[UploadInfo.from_upload(upload) for upload in files])


@router.post("/upload/single")
async def upload_file(file: Upload) -> UploadsResponse:
    """Receive the first file sent under the 'file' form field."""
    infos = [UploadInfo.from_upload(file)] if file else []
    logger.info("Upload bound", icon=LogIcon.UPLOAD, count=len(infos))
    return UploadsResponse(count=len(infos), files=infos)
