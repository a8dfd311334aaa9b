import os

from dotenv import load_dotenv

# Load .env from the project root
load_dotenv()

ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.lower()
IS_DEV = ENV_NORMALIZED in {"dev", "development", "local", "test"}
IS_PROD = ENV_NORMALIZED in {"prod", "production"}

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./food_orders.db" if IS_DEV else "").strip()
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS
_cors_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = [origin.strip() for origin in _cors_env.split(",") if origin.strip() and origin.strip() != "*"]

if not CORS_ORIGINS and IS_DEV:
    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
    ]

# Auth (JWT)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))

# SMS (Hubtel)
HUBTEL_CLIENT_ID = os.getenv("HUBTEL_CLIENT_ID", "").strip()
HUBTEL_CLIENT_SECRET = os.getenv("HUBTEL_CLIENT_SECRET", "").strip()
HUBTEL_SENDER_ID = os.getenv("HUBTEL_SENDER_ID", "").strip()
HUBTEL_BASE_URL = os.getenv("HUBTEL_BASE_URL", "https://sms.hubtel.com/v1/messages").rstrip("/")
HUBTEL_TIMEOUT_SECONDS = float(os.getenv("HUBTEL_TIMEOUT_SECONDS", "20"))

ADMIN_PHONE_NUMBERS = [
    phone.strip() for phone in os.getenv("ADMIN_PHONE_NUMBERS", "").split(",") if phone.strip()
]

# Payments (Paystack)
PAYSTACK_SECRET_KEY = os.getenv("PAYSTACK_SECRET_KEY", "").strip()
PAYSTACK_BASE_URL = os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co").rstrip("/")
PAYSTACK_TIMEOUT_SECONDS = float(os.getenv("PAYSTACK_TIMEOUT_SECONDS", "20"))

# Orders
ORDER_ID_MAX_ATTEMPTS = int(os.getenv("ORDER_ID_MAX_ATTEMPTS", "5"))
CURRENCY_LABEL = os.getenv("CURRENCY_LABEL", "GHS")
