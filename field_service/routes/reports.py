"""Service report API routes."""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from field_service.db.session import get_db
from field_service.routes.dependencies import get_session_context
from field_service.schemas.common import APIResponse
from field_service.schemas.notification import SmsNotificationOut
from field_service.schemas.report import (
    PhotoOut,
    ReportStatusResponse,
    ServiceReportCreate,
    ServiceReportDetail,
    ServiceReportListItem,
    ServiceReportOut,
    ServiceReportPayload,
    UploadResult,
)
from field_service.services import report_service
from field_service.services.photo_service import PhotoFile, UploadOutcome, upload_report_photos
from field_service.services.report_dispatch import send_report_email
from field_service.services.sms_service import send_report_reminder
from field_service.services.storage import LocalObjectStorage, get_storage

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    dependencies=[Depends(get_session_context)],
)


def read_uploads(files: list[UploadFile]) -> list[PhotoFile]:
    return [PhotoFile(filename=upload.filename or "photo", content=upload.file.read()) for upload in files]


def to_upload_result(outcome: UploadOutcome) -> UploadResult:
    return UploadResult(
        filename=outcome.filename,
        success=outcome.success,
        photo_url=outcome.photo_url,
        photo=PhotoOut.model_validate(outcome.photo) if outcome.photo else None,
        error=outcome.error,
    )


@router.get("/", response_model=APIResponse[List[ServiceReportListItem]])
def list_reports(db: Session = Depends(get_db)):
    reports = report_service.list_reports(db)
    return APIResponse(
        success=True,
        data=[ServiceReportListItem.model_validate(report) for report in reports],
    )


@router.post("/", response_model=APIResponse[ServiceReportOut], status_code=201)
def create_report(payload: ServiceReportCreate, db: Session = Depends(get_db)):
    report = report_service.create_report(db, payload)
    return APIResponse(
        success=True,
        data=ServiceReportOut.model_validate(report),
        message="Service report created successfully!",
    )


@router.get("/{report_id}", response_model=APIResponse[ServiceReportDetail])
def get_report(report_id: str, db: Session = Depends(get_db)):
    report = report_service.get_report(db, report_id)
    return APIResponse(success=True, data=ServiceReportDetail.model_validate(report))


@router.put("/{report_id}", response_model=APIResponse[ServiceReportOut])
def update_report(report_id: str, payload: ServiceReportPayload, db: Session = Depends(get_db)):
    report = report_service.update_report(db, report_id, payload)
    return APIResponse(
        success=True,
        data=ServiceReportOut.model_validate(report),
        message="Service report updated successfully!",
    )


@router.delete("/{report_id}", response_model=APIResponse[None])
def delete_report(report_id: str, db: Session = Depends(get_db)):
    report_service.delete_report(db, report_id)
    return APIResponse(success=True, message="Service report has been deleted")


@router.post("/{report_id}/finalize", response_model=APIResponse[ReportStatusResponse])
def finalize_report(report_id: str, db: Session = Depends(get_db)):
    report = report_service.finalize_report(db, report_id)
    return APIResponse(
        success=True,
        data=ReportStatusResponse(report_id=report.id, status=report.status),
        message="Report has been finalized and marked as completed",
    )


@router.post("/{report_id}/send")
def send_report(report_id: str, db: Session = Depends(get_db)):
    result = send_report_email(db, report_id)
    return JSONResponse(
        status_code=200 if result.success else 500,
        content=result.as_payload(),
    )


@router.post("/{report_id}/sms-reminder", response_model=APIResponse[SmsNotificationOut])
def send_sms_reminder(report_id: str, db: Session = Depends(get_db)):
    notification = send_report_reminder(db, report_id)
    return APIResponse(
        success=True,
        data=SmsNotificationOut.model_validate(notification),
        message=f"Service reminder {notification.status} to {notification.phone_number}",
    )


@router.post("/{report_id}/photos", response_model=APIResponse[List[UploadResult]])
def upload_photos(
    report_id: str,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
):
    outcomes = upload_report_photos(db, storage, report_id, read_uploads(files))
    results = [to_upload_result(outcome) for outcome in outcomes]
    failed = sum(1 for result in results if not result.success)
    return APIResponse(
        success=failed == 0,
        data=results,
        message="Photos uploaded successfully!" if failed == 0 else f"{failed} photo(s) failed to upload",
    )


@router.delete("/{report_id}/photos/{photo_id}", response_model=APIResponse[None])
def remove_photo(report_id: str, photo_id: str, db: Session = Depends(get_db)):
    report_service.remove_photo(db, report_id, photo_id)
    return APIResponse(success=True, message="Photo removed successfully")
