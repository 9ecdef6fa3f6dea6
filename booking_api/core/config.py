from dataclasses import dataclass
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env and assets from the project root so they load regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


@dataclass(frozen=True)
class ScheduleConfig:
    """Weekly booking grid. Weekdays use date.weekday() numbering (Monday == 0)."""

    slot_duration_minutes: int = 30
    business_start_hour: int = 9
    business_end_hour: int = 17  # exclusive, so last slot starts before 17:00
    blocked_start: str = "14:00"
    blocked_end: str = "14:30"
    bookable_weekdays: frozenset[int] = frozenset({1, 3, 4})  # Tue, Thu, Fri


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS
    cors_origins: str = "http://localhost:3000"
    cors_allow_methods: str = "GET, POST, OPTIONS"
    cors_allow_headers: str = "Content-Type, Authorization"

    # Slot/appointment business rules
    slot_duration_minutes: int = 30
    business_start_hour: int = 9
    business_end_hour: int = 17
    blocked_start: str = "14:00"
    blocked_end: str = "14:30"
    bookable_weekdays: list[int] = [1, 3, 4]

    # Env
    env: str = "development"

    # Email (Resend). Leave resend_api_key empty to disable sending.
    resend_api_key: str = ""
    from_email: str = "info@af-automation-systems.com"
    from_name: str = "AF Automation"
    reply_to_email: str = "info@af-automation-systems.com"
    bcc_email: str = "info@af-automation-systems.com"
    contact_email_subject: str = "Ihr Blueprint für Ihre Kanzlei"
    contact_attachment_path: str = str(_PROJECT_ROOT / "assets" / "Blueprint.pdf")
    contact_attachment_filename: str = "Blueprint.pdf"
    sender_signature: str = "Furkan Asani"

    @property
    def cors_origins_list(self) -> list[str]:
        return _split_csv(self.cors_origins)

    @property
    def cors_allow_methods_list(self) -> list[str]:
        return _split_csv(self.cors_allow_methods)

    @property
    def cors_allow_headers_list(self) -> list[str]:
        return _split_csv(self.cors_allow_headers)

    @property
    def email_enabled(self) -> bool:
        return bool(self.resend_api_key and self.from_email)

    @property
    def schedule(self) -> ScheduleConfig:
        return ScheduleConfig(
            slot_duration_minutes=self.slot_duration_minutes,
            business_start_hour=self.business_start_hour,
            business_end_hour=self.business_end_hour,
            blocked_start=self.blocked_start,
            blocked_end=self.blocked_end,
            bookable_weekdays=frozenset(self.bookable_weekdays),
        )


def _split_csv(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


settings = Settings()
