"""Dispatch callables: stateless endpoints with one external side effect each."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from field_service.db.session import get_db
from field_service.routes.dependencies import get_session_context
from field_service.schemas.notification import SendReportRequest, SendSmsRequest
from field_service.services.report_dispatch import send_report_email
from field_service.services.twilio_client import SmsProviderError, send_sms

router = APIRouter(
    prefix="/functions",
    tags=["functions"],
    dependencies=[Depends(get_session_context)],
)
logger = logging.getLogger(__name__)


@router.post("/generate-and-send-report")
def generate_and_send_report(payload: SendReportRequest, db: Session = Depends(get_db)):
    result = send_report_email(db, payload.reportId)
    if not result.success:
        logger.error("Error in generate-and-send-report: %s", result.error)
    return JSONResponse(
        status_code=200 if result.success else 500,
        content=result.as_payload(),
    )


@router.post("/send-sms")
def send_sms_callable(payload: SendSmsRequest):
    if not payload.to or not payload.message:
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Both 'to' and 'message' are required"},
        )

    try:
        result = send_sms(to=payload.to, body=payload.message)
    except SmsProviderError as exc:
        logger.error("Error in send-sms: %s", exc)
        return JSONResponse(status_code=502, content={"success": False, "error": str(exc)})

    return JSONResponse(status_code=200, content=result.as_payload())
