import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Local development origins, including the Capacitor/Ionic mobile shells
DEFAULT_LOCAL_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://localhost:4173",
    "http://localhost:3000",
    "http://localhost:8080",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:4173",
    "http://localhost",
    "capacitor://localhost",
    "ionic://localhost",
]

ADMIN_ROLES = ("admin", "superadmin")


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


class Settings:
    """Runtime configuration, built once from the environment and passed explicitly"""

    def __init__(self):
        self.app_name = os.getenv("APP_NAME", "BookIt")
        self.version = "1.0.0"
        self.environment = os.getenv("ENVIRONMENT", "development").lower()
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", 8000))
        self.debug = os.getenv("DEBUG", "False").lower() == "true"

        # Auth
        self.jwt_secret = os.getenv("JWT_SECRET", "dev-secret")
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.admin_roles = ADMIN_ROLES

        # DynamoDB
        self.aws_access_key_id = os.getenv("AWS_ACCESS_KEY_ID")
        self.aws_secret_access_key = os.getenv("AWS_SECRET_ACCESS_KEY")
        self.aws_region = os.getenv("AWS_REGION", "us-east-1")
        self.dynamodb_endpoint_url = os.getenv("DYNAMODB_ENDPOINT_URL") or None
        self.table_name = os.getenv("VENUES_TABLE_NAME")

        # CORS
        port_origin = f"http://localhost:{self.port}"
        origins = [port_origin] + DEFAULT_LOCAL_ORIGINS + _split_csv(os.getenv("ALLOWED_ORIGINS", ""))
        self.allowed_origins = list(dict.fromkeys(origins))

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_dir = os.getenv("LOG_DIR") or None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> List[str]:
        # Outside production every origin is accepted
        if self.is_production:
            return self.allowed_origins
        return ["*"]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
