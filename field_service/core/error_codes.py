"""Machine-readable error codes returned in API error envelopes."""


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STORE_ERROR = "STORE_ERROR"

    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    CUSTOMER_HAS_REPORTS = "CUSTOMER_HAS_REPORTS"

    REPORT_NOT_FOUND = "REPORT_NOT_FOUND"
    PHOTO_NOT_FOUND = "PHOTO_NOT_FOUND"
    INVALID_STATUS = "INVALID_STATUS"

    MISSING_PHONE = "MISSING_PHONE"
    MISSING_NEXT_SERVICE_DATE = "MISSING_NEXT_SERVICE_DATE"
    SMS_SEND_FAILED = "SMS_SEND_FAILED"

    AUTH_REQUIRED = "AUTH_REQUIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_TAKEN = "EMAIL_TAKEN"
