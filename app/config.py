from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    api_base_url: str = "http://localhost:5000"
    request_timeout: float = 10.0
    tax_rate: Decimal = Decimal("0.18")
    max_guests: int = 4
    contact_email_path: str = ".contact_emails.json"
    price_grouping: str = "indian"
    log_level: str = "INFO"
