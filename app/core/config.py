"""
Para Sports ID Card System Configuration
Compatible with Pydantic v2 settings management
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
import logging


# Bundled assets live beside the app package
DEFAULT_ASSETS_PATH = str(Path(__file__).resolve().parent.parent / "assets")


class Settings(BaseSettings):
    """Application settings for the Para Sports ID card service"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore"
    )

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Para Sports Association ID Card Service"
    VERSION: str = "1.0.0"

    # Development/Debug Configuration
    DEBUG: bool = False

    # File Storage Configuration
    FILE_STORAGE_PATH: str = "/var/para-sports-data"
    IDCARDS_DIR_NAME: str = "idcards"

    # Card assets (each one optional, checked lazily per render)
    ASSETS_PATH: str = DEFAULT_ASSETS_PATH
    PRIMARY_LOGO_FILE: str = "logo1.png"
    SECONDARY_LOGO_FILE: str = "logo2.png"
    UNICODE_FONT_FILE: str = "fonts/NotoSansGujarati-Regular.ttf"

    # Card text
    CARD_TITLE: str = "PARA SPORTS ASSOCIATION OF GUJARAT"
    FOOTER_TEXT: str = "મારી ડિજિટલ ઓળખ"

    # Card generation
    IDCARD_RENDER_TIMEOUT_SECONDS: float = 30.0

    # OTP lookup cache
    OTP_TTL_SECONDS: int = 300  # 5 minutes
    OTP_MAX_ENTRIES: int = 10000
    OTP_SWEEP_INTERVAL_SECONDS: int = 60

    def get_file_storage_path(self) -> Path:
        """Get file storage path"""
        base_path = Path(self.FILE_STORAGE_PATH)

        # Ensure the base path exists (important for persistent disk mounting)
        try:
            base_path.mkdir(parents=True, exist_ok=True)
        except OSError:
            # If we can't create the directory, log the issue but don't crash
            logger = logging.getLogger(__name__)
            logger.warning(f"Cannot create storage directory {base_path}. Using /tmp fallback.")
            fallback_path = Path("/tmp") / "para-sports-data"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path

        return base_path

    def get_idcards_path(self) -> Path:
        """Directory holding generated ID card PDFs"""
        return self.get_file_storage_path() / self.IDCARDS_DIR_NAME

    def get_asset_path(self, relative_name: str) -> Path:
        """Resolve an asset file name against ASSETS_PATH"""
        return Path(self.ASSETS_PATH) / relative_name


def get_settings() -> Settings:
    """Get application settings instance"""
    return Settings()
