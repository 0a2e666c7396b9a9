import anyio
import pytest

from src.service.seat_booking.driven_adapter.processing_delay_impl import SleepProcessingDelay


@pytest.mark.unit
class TestSleepProcessingDelay:
    @pytest.mark.asyncio
    async def test_zero_delay_returns_immediately(self) -> None:
        with anyio.fail_after(0.5):
            await SleepProcessingDelay().wait(session_id='s1')

    @pytest.mark.asyncio
    async def test_waits_configured_seconds(self) -> None:
        start = anyio.current_time()

        await SleepProcessingDelay(seconds=0.05).wait(session_id='s1')

        assert anyio.current_time() - start >= 0.05

    def test_negative_delay_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            SleepProcessingDelay(seconds=-1)
