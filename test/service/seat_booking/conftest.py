"""BDD step definitions for booking_api.feature."""

from typing import Any
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient
import pytest
from pytest_bdd import given, parsers, then

from fake_resource_store import FakeResourceStore
from src.platform.constant.route_constant import BOOKING_CREATE, BOOKING_RESET
from src.platform.exception.exceptions import StoreUnavailableError
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable


# =============================================================================
# Given
# =============================================================================
@given(parsers.parse('seat A1 has been booked at "{isolation_level}"'))
def given_seat_booked(isolation_level: str, client: TestClient, context: dict[str, Any]) -> None:
    response = client.post(BOOKING_CREATE, json={'isolation_level': isolation_level})
    assert response.json()['outcome'] == 'success', response.text
    context['earlier_booking'] = response.json()


@given('the demo has been reset')
def given_demo_reset(client: TestClient) -> None:
    assert client.post(BOOKING_RESET).status_code == 200


@given('seat A1 does not exist')
def given_seat_missing(fake_store: FakeResourceStore) -> None:
    fake_store.delete(ResourceTable.SEATS, 'A1')


@given('the store refuses new transactions')
def given_store_refuses_transactions(
    fake_store: FakeResourceStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        fake_store, 'begin_transaction', AsyncMock(side_effect=StoreUnavailableError())
    )


# =============================================================================
# Then
# =============================================================================
@then('the booking should be owned by its own session')
def then_owned_by_own_session(context: dict[str, Any]) -> None:
    data = context['response'].json()
    assert len(data['session_id']) == 8
    assert data['owner'] == data['session_id']
    assert data['message'] == (
        f'Seat A1 booked by session {data["session_id"]} (isolation: {data["isolation_level"]})'
    )


@then('the booking should be owned by the earlier session')
def then_owned_by_earlier_session(context: dict[str, Any]) -> None:
    data = context['response'].json()
    earlier = context['earlier_booking']['session_id']
    assert data['owner'] == earlier
    assert data['session_id'] != earlier


@then('the seat status should show the earlier session as booker')
def then_status_shows_booker(context: dict[str, Any]) -> None:
    data = context['response'].json()
    assert data['booked_by'] == context['earlier_booking']['session_id']
    assert data['booked_at'] is not None


@then('seat A1 should be available in the store')
def then_seat_available(fake_store: FakeResourceStore) -> None:
    seat = fake_store.committed(ResourceTable.SEATS, 'A1')
    assert seat is not None
    assert seat['status'] == 'available'
    assert seat['booked_by'] is None and seat['reserved_by'] is None
