from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # School details printed in every report header. Set in .env.
    school_name: str = "Your School Name"
    school_address: str = ""
    school_phone: str = ""

    # Reports
    currency_code: str = "UGX"
    # Vertical cursor (mm) after which the next group starts on a new page
    page_content_threshold_mm: float = 260
    # Where save_artifact writes exported reports
    report_output_dir: str = "reports"

    @property
    def school_info(self) -> dict[str, str]:
        """One dict for report headers: school name, address, phones."""
        return {
            "name": self.school_name,
            "address": self.school_address,
            "phone": self.school_phone,
        }

    @field_validator("currency_code", mode="before")
    @classmethod
    def normalize_currency_code(cls, v):
        """Currency code is printed as-is before every amount: keep it upper-case."""
        if not v:
            raise ValueError("CURRENCY_CODE is required")
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("page_content_threshold_mm")
    @classmethod
    def check_threshold(cls, v):
        if v <= 0:
            raise ValueError("PAGE_CONTENT_THRESHOLD_MM must be positive")
        return v

settings = Settings()
