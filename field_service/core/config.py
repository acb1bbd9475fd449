"""Environment-driven settings.

Values are read once at import time. A local `.env` file is honoured for
development; deployments set real environment variables instead.
"""

import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./field_service.db")

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
ACCESS_TOKEN_TTL_MINUTES = int(os.getenv("ACCESS_TOKEN_TTL_MINUTES", "60"))

BUSINESS_NAME = os.getenv("BUSINESS_NAME", "Australian Vacuum Services")

# Email provider (Resend HTTP API)
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
RESEND_API_URL = os.getenv("RESEND_API_URL", "https://api.resend.com/emails")
REPORT_EMAIL_FROM = os.getenv(
    "REPORT_EMAIL_FROM",
    "Service Reports <onboarding@resend.dev>",
)
# Reports go to the operator mailbox, never to the customer.
REPORT_EMAIL_TO = os.getenv("REPORT_EMAIL_TO", "info@australianvacuumservices.com")
EMAIL_TIMEOUT_SECONDS = float(os.getenv("EMAIL_TIMEOUT_SECONDS", "20"))

# SMS provider (Twilio)
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_SMS_FROM = os.getenv("TWILIO_SMS_FROM")

# Photo object storage
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "service-photos")
STORAGE_DIR = os.getenv("STORAGE_DIR", os.path.join(".", "storage", STORAGE_BUCKET))
STORAGE_PUBLIC_URL = os.getenv(
    "STORAGE_PUBLIC_URL",
    f"http://localhost:8000/storage/{STORAGE_BUCKET}",
).rstrip("/")
