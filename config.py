import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./orders.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Pricing
    DEFAULT_CURRENCY = data.get("DEFAULT_CURRENCY", "EUR")

    # Payment provider gateway ("simulated" or "http")
    PAYMENT_GATEWAY = data.get("PAYMENT_GATEWAY", "simulated")
    PAYMENT_API_URL = data.get("PAYMENT_API_URL", "http://localhost:3000/api")
    PAYMENT_API_KEY = data.get("PAYMENT_API_KEY", None)
    PAYMENT_API_TIMEOUT = float(data.get("PAYMENT_API_TIMEOUT", 15.0))  # Seconds per provider call

    # Analytics events and customer notifications (fire-and-forget)
    EVENT_WEBHOOK_URL = data.get("EVENT_WEBHOOK_URL", None)
    NOTIFICATION_WEBHOOK_URL = data.get("NOTIFICATION_WEBHOOK_URL", None)

    # Subscription billing worker
    BILLING_WORKER_ENABLED = bool(data.get("BILLING_WORKER_ENABLED", True))
    BILLING_INTERVAL_SECONDS = data.get("BILLING_INTERVAL_SECONDS", 3600)  # Hourly

    # Invoice rendering
    COMPANY_NAME = data.get("COMPANY_NAME", "SoftCrown")
    COMPANY_ADDRESS = data.get("COMPANY_ADDRESS", "Calle Mayor 1, 28013 Madrid, ES")
