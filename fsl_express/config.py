from pydantic_settings import BaseSettings

# Credential values shipped in sample .env files. A channel whose credential
# equals one of these is treated as unconfigured.
PLACEHOLDER_VALUES = frozenset({
    "changeme",
    "placeholder",
    "your_smtp_user",
    "your_smtp_pass",
    "your_brevo_api_key",
    "your-brevo-api-key",
    "your_api_key",
    "your-api-key",
    "your_gmail_user",
    "your_gmail_app_password",
    "xxx",
})


def is_configured(value: str | None) -> bool:
    """True when a credential is present and not a placeholder sentinel."""
    if value is None:
        return False
    normalized = value.strip()
    if not normalized:
        return False
    return normalized.lower() not in PLACEHOLDER_VALUES


class Settings(BaseSettings):
    """Backend settings loaded from environment."""

    # Service
    service_name: str = "fsl-express"
    service_version: str = "1.0.1"
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    smtp_debug: bool = False  # Debug-level logging for mail channels
    cors_origins: list[str] = ["*"]

    # Cloudinary asset index
    cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_folder: str = ""
    cloudinary_timeout_seconds: float = 15.0

    # Mail: sender identity
    from_email: str = ""  # Must be verified with the relay; falls back to smtp_user
    from_name: str = "FSL Express"
    otp_subject: str = "Your OTP Code"

    # Mail: Brevo SMTP relay
    smtp_host: str = "smtp-relay.brevo.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: str = ""

    # Mail: Brevo HTTP API
    brevo_api_key: str = ""
    brevo_base_url: str = "https://api.brevo.com/v3"

    # Mail: fallback account (sends only as itself)
    gmail_user: str = ""
    gmail_app_password: str = ""
    gmail_smtp_host: str = "smtp.gmail.com"
    gmail_smtp_port: int = 587

    # Mail: AWS SES
    ses_sender_email: str = ""
    aws_region: str = "us-east-1"

    # Mail: orchestration
    email_channel_order: list[str] = ["brevo_smtp", "brevo_api", "gmail_smtp", "ses"]
    email_simulation: bool = False  # Dev mode: append a channel that only logs
    mail_ready_timeout_seconds: float = 10.0
    mail_send_timeout_seconds: float = 15.0

    # Classification
    models_dir: str = "models"
    classifier_models: list[str] = ["alphabet", "words"]
    max_upload_bytes: int = 10 * 1024 * 1024
    preload_models: bool = False  # Load every classifier at startup instead of first use

    @property
    def sender_email(self) -> str:
        return self.from_email or self.smtp_user

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
