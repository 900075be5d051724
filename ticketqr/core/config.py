# ticketqr/core/config.py
import os

from pydantic import BaseModel, ConfigDict, Field

from ticketqr.core.errors import QRConfigError

PLACEHOLDER_SECRET = "CHANGE_ME_TICKET_SECRET"
# caracteres do HMAC-SHA256 no fim de um token Fernet (32 bytes em base64, sem "=")
MAX_NONCE_LENGTH = 43


def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(data_dir, 'scans.db')}")


class Settings(BaseModel):
    APP_ENV: str = Field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    DATABASE_URL: str = Field(default_factory=_default_database_url)
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    TICKET_SECRET_KEY: str = Field(default_factory=lambda: os.getenv("TICKET_SECRET_KEY", PLACEHOLDER_SECRET))
    QR_EPOCH_SECONDS: int = Field(default_factory=lambda: int(os.getenv("QR_EPOCH_SECONDS", "60")))
    QR_REFRESH_SECONDS: int = Field(default_factory=lambda: int(os.getenv("QR_REFRESH_SECONDS", "45")))
    QR_SKEW_EPOCHS: int = Field(default_factory=lambda: int(os.getenv("QR_SKEW_EPOCHS", "0")))
    QR_NONCE_LENGTH: int = Field(default_factory=lambda: int(os.getenv("QR_NONCE_LENGTH", "16")))


class QRConfig(BaseModel):
    """Single source of truth shared by the issuer and the validator.

    Built once at startup and never mutated; both roles must agree on
    ``epoch_seconds`` or every scan is rejected.
    """

    model_config = ConfigDict(frozen=True)

    secret_key: str
    epoch_seconds: int = 60
    refresh_seconds: int = 45
    skew_epochs: int = 0
    nonce_length: int = 16

    @property
    def epoch_millis(self) -> int:
        return self.epoch_seconds * 1000

    @property
    def refresh_millis(self) -> int:
        return self.refresh_seconds * 1000

    def check(self) -> "QRConfig":
        if not self.secret_key:
            raise QRConfigError("TICKET_SECRET_KEY is required")
        if self.epoch_seconds <= 0:
            raise QRConfigError("QR_EPOCH_SECONDS must be positive")
        if self.refresh_seconds <= 0:
            raise QRConfigError("QR_REFRESH_SECONDS must be positive")
        # o código novo precisa estar na tela antes do anterior expirar
        if self.refresh_seconds >= self.epoch_seconds:
            raise QRConfigError("QR_REFRESH_SECONDS must be shorter than QR_EPOCH_SECONDS")
        if self.skew_epochs < 0:
            raise QRConfigError("QR_SKEW_EPOCHS cannot be negative")
        if not 0 < self.nonce_length <= MAX_NONCE_LENGTH:
            raise QRConfigError(f"QR_NONCE_LENGTH must be between 1 and {MAX_NONCE_LENGTH}")
        return self

    @classmethod
    def from_settings(cls, s: Settings) -> "QRConfig":
        if s.APP_ENV.lower() == "production" and s.TICKET_SECRET_KEY in ("", PLACEHOLDER_SECRET):
            raise QRConfigError("TICKET_SECRET_KEY must be set in production")
        return cls(
            secret_key=s.TICKET_SECRET_KEY,
            epoch_seconds=s.QR_EPOCH_SECONDS,
            refresh_seconds=s.QR_REFRESH_SECONDS,
            skew_epochs=s.QR_SKEW_EPOCHS,
            nonce_length=s.QR_NONCE_LENGTH,
        ).check()


settings = Settings()
