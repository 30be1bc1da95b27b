from decimal import Decimal
from typing import Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_db: str = "storefront"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # full URL wins over the postgres_* parts (tests point this at sqlite)
    sqlalchemy_database_url: Optional[str] = None

    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    ENV: str = "production"

    # checkout
    currency: str = "EUR"
    tax_rate: Decimal = Decimal("0.084")
    flat_shipping_cents: int = 500
    max_line_quantity: int = 99
    public_reference_prefix: str = "ORD-"
    public_reference_length: int = 10

    # comma separated
    admin_emails: str = ""

    BREVO_API_KEY: str = ""
    MAIL_FROM: str = "orders@storefront.local"
    STORE_NAME: str = "Storefront"

    @property
    def database_url(self):
        if self.sqlalchemy_database_url:
            return self.sqlalchemy_database_url
        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def admin_email_set(self) -> frozenset:
        return frozenset(
            e.strip().lower() for e in self.admin_emails.split(",") if e.strip()
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"


settings = Settings()
