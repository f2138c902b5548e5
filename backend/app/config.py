# backend/app/config.py
from pydantic_settings import BaseSettings
from pathlib import Path
from pydantic import field_validator

class Settings(BaseSettings):
    """Application settings from environment variables"""

    # Environment
    environment: str = "development"  # development, production

    # ===== EXPORT SETTINGS =====
    export_delivery: str = "memory"  # memory | filesystem | r2
    export_generator: str = "VibeSolver"  # Stamped into JSON metadata, PDF creator, Terraform tags
    export_version: str = "1.0"

    # Terraform stub defaults (variable blocks)
    terraform_default_region: str = "us-east-1"
    terraform_default_environment: str = "dev"

    # ===== STORAGE SETTINGS =====
    # Cloudflare R2 (S3-compatible) storage for export artifacts
    exports_use_r2: bool = False  # Enable R2 storage for exports instead of direct streaming
    r2_access_key_id: str = ""
    r2_secret_access_key: str = ""
    r2_bucket: str = ""
    r2_endpoint_url: str = ""  # e.g. https://<accountid>.r2.cloudflarestorage.com
    r2_presign_expiry: int = 3600  # seconds for signed URL validity

    # Paths
    log_dir: Path = Path("logs")
    export_dir: Path = Path("exports")  # target of "filesystem" delivery and the CLI

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]
    @field_validator("cors_origins", mode="before")
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            import json
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [v]
        return v

    @property
    def r2_configured(self) -> bool:
        return bool(
            self.exports_use_r2 and self.r2_bucket and self.r2_access_key_id
            and self.r2_secret_access_key and self.r2_endpoint_url
        )

    class Config:
        # Point explicitly to backend/.env so scripts run from repo root still load variables
        env_file = Path(__file__).resolve().parent.parent / ".env"
        case_sensitive = False
        extra = "ignore"  # Allow future env vars without breaking startup

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Create directories if they don't exist
        for directory in [self.log_dir, self.export_dir]:
            directory.mkdir(parents=True, exist_ok=True)

# Global settings instance
settings = Settings()
