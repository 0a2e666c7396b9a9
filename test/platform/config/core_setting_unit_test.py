from decimal import Decimal

from pydantic import ValidationError
import pytest

from src.platform.config.core_setting import Settings


@pytest.mark.unit
class TestSettings:
    def test_database_url_masked_hides_password(self) -> None:
        settings = Settings(POSTGRES_PASSWORD='s3cret', POSTGRES_DB='labdb')

        assert 's3cret' in settings.DATABASE_URL
        assert 's3cret' not in settings.DATABASE_URL_MASKED
        assert settings.DATABASE_URL_MASKED.endswith('/labdb')

    def test_transfer_demo_defaults(self) -> None:
        settings = Settings()

        assert settings.TRANSFER_FROM_ACCOUNT == 'Virat'
        assert settings.TRANSFER_TO_ACCOUNT == 'Rohit'
        assert settings.TRANSFER_AMOUNT == Decimal('100.00')

    def test_negative_processing_delay_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(BOOKING_PROCESSING_DELAY_SECONDS=-1)

    def test_cors_origins_from_comma_separated_string(self) -> None:
        settings = Settings(BACKEND_CORS_ORIGINS='http://a.test, http://b.test')

        assert settings.BACKEND_CORS_ORIGINS == ['http://a.test', 'http://b.test']
