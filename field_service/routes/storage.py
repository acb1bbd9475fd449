"""Photo uploads made before a report exists."""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile

from field_service.routes.dependencies import get_session_context
from field_service.routes.reports import read_uploads, to_upload_result
from field_service.schemas.common import APIResponse
from field_service.schemas.report import UploadResult
from field_service.services.photo_service import store_photos
from field_service.services.storage import LocalObjectStorage, get_storage

router = APIRouter(
    prefix="/storage",
    tags=["storage"],
    dependencies=[Depends(get_session_context)],
)


@router.post("/photos", response_model=APIResponse[List[UploadResult]])
def upload_photos(
    files: List[UploadFile] = File(...),
    storage: LocalObjectStorage = Depends(get_storage),
):
    results = [to_upload_result(outcome) for outcome in store_photos(storage, read_uploads(files))]
    return APIResponse(success=all(result.success for result in results), data=results)
