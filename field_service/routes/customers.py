"""Customer API routes."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from field_service.db.session import get_db
from field_service.routes.dependencies import get_session_context
from field_service.schemas.common import APIResponse
from field_service.schemas.customer import CustomerOut, CustomerPayload
from field_service.schemas.notification import CustomSmsRequest, SmsNotificationOut
from field_service.services import customer_service
from field_service.services.sms_service import send_customer_sms

router = APIRouter(
    prefix="/customers",
    tags=["customers"],
    dependencies=[Depends(get_session_context)],
)


@router.get("/", response_model=APIResponse[List[CustomerOut]])
def list_customers(db: Session = Depends(get_db)):
    customers = customer_service.list_customers(db)
    return APIResponse(
        success=True,
        data=[CustomerOut.model_validate(customer) for customer in customers],
    )


@router.post("/", response_model=APIResponse[CustomerOut], status_code=201)
def create_customer(payload: CustomerPayload, db: Session = Depends(get_db)):
    customer = customer_service.create_customer(db, payload)
    return APIResponse(
        success=True,
        data=CustomerOut.model_validate(customer),
        message="Customer added successfully",
    )


@router.get("/{customer_id}", response_model=APIResponse[CustomerOut])
def get_customer(customer_id: str, db: Session = Depends(get_db)):
    customer = customer_service.get_customer(db, customer_id)
    return APIResponse(success=True, data=CustomerOut.model_validate(customer))


@router.put("/{customer_id}", response_model=APIResponse[CustomerOut])
def update_customer(customer_id: str, payload: CustomerPayload, db: Session = Depends(get_db)):
    customer = customer_service.update_customer(db, customer_id, payload)
    return APIResponse(
        success=True,
        data=CustomerOut.model_validate(customer),
        message="Customer updated successfully",
    )


@router.delete("/{customer_id}", response_model=APIResponse[None])
def delete_customer(customer_id: str, db: Session = Depends(get_db)):
    customer_service.delete_customer(db, customer_id)
    return APIResponse(success=True, message="Customer has been deleted")


@router.get("/{customer_id}/sms", response_model=APIResponse[List[SmsNotificationOut]])
def sms_history(customer_id: str, db: Session = Depends(get_db)):
    notifications = customer_service.list_sms_history(db, customer_id)
    return APIResponse(
        success=True,
        data=[SmsNotificationOut.model_validate(row) for row in notifications],
    )


@router.post("/{customer_id}/sms", response_model=APIResponse[SmsNotificationOut])
def send_sms_to_customer(
    customer_id: str,
    payload: CustomSmsRequest,
    db: Session = Depends(get_db),
):
    notification = send_customer_sms(db, customer_id, payload.message)
    return APIResponse(
        success=True,
        data=SmsNotificationOut.model_validate(notification),
        message=f"Message {notification.status} to {notification.phone_number}",
    )
