from __future__ import annotations
import os

APP_NAME = "marketplace-credentials"
APP_VERSION = os.getenv("APP_VERSION", "0.1.0")

CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]
