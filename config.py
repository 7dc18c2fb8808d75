import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./ledger.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    AUTH_DISABLED = bool(data.get("AUTH_DISABLED", True))
    API_TOKENS = data.get("API_TOKENS", {})  # token -> actor id, used when auth is enabled
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Invoicing
    CURRENCY = data.get("CURRENCY", "NGN")
    DEFAULT_TAX_RATE = data.get("DEFAULT_TAX_RATE", "0")  # Percent, used when outlet has none
    INVOICE_DUE_DAYS = data.get("INVOICE_DUE_DAYS", 30)

    # Payments
    PAYMENT_DELETE_WINDOW_DAYS = data.get("PAYMENT_DELETE_WINDOW_DAYS", 7)

    # Receipt storage (post-commit upload)
    RECEIPT_STORAGE_BACKEND = data.get("RECEIPT_STORAGE_BACKEND", "local")  # local | http
    RECEIPT_STORAGE_DIR = data.get("RECEIPT_STORAGE_DIR", os.path.join(ROOT_PATH, "receipts"))
    RECEIPT_BASE_URL = data.get("RECEIPT_BASE_URL", "/receipts")
    RECEIPT_UPLOAD_URL = data.get("RECEIPT_UPLOAD_URL", None)
    RECEIPT_MAX_BYTES = data.get("RECEIPT_MAX_BYTES", 5 * 1024 * 1024)

    # Notifications
    NOTIFICATION_WEBHOOK = data.get("NOTIFICATION_WEBHOOK", None)

    # Invoice Reconciliation Worker
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
