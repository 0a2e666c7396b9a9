"""BDD step definitions for transfer_api.feature."""

from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient
import pytest
from pytest_bdd import given, parsers, then
from pytest_bdd.model import Step

from bdd_conftest.shared_step_utils import extract_table_data
from fake_resource_store import FakeResourceStore
from src.platform.constant.route_constant import TRANSFER_EXECUTE
from src.platform.exception.exceptions import StoreUnavailableError
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable


def _as_decimals(values: dict[str, Any]) -> dict[str, Decimal]:
    return {account_id: Decimal(str(balance)) for account_id, balance in values.items()}


# =============================================================================
# Given
# =============================================================================
@given(parsers.parse('the demo transfer has run {times:d} times'))
def given_transfers_ran(times: int, client: TestClient) -> None:
    for _ in range(times):
        assert client.post(TRANSFER_EXECUTE).json()['success'] is True


@given(parsers.parse('account "{account_id}" does not exist'))
def given_account_missing(account_id: str, fake_store: FakeResourceStore) -> None:
    fake_store.delete(ResourceTable.ACCOUNTS, account_id)


@given('the store cannot report its version')
def given_store_unreachable(
    fake_store: FakeResourceStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        fake_store, 'server_version', AsyncMock(side_effect=StoreUnavailableError())
    )


# =============================================================================
# Then
# =============================================================================
@then('the committed balances should be')
def then_committed_balances(step: Step, fake_store: FakeResourceStore) -> None:
    expected = _as_decimals(extract_table_data(step))
    for account_id, balance in expected.items():
        row = fake_store.committed(ResourceTable.ACCOUNTS, account_id)
        assert row is not None
        assert row['balance'] == balance


@then('the balance response should be')
def then_balance_response(step: Step, context: dict[str, Any]) -> None:
    data = context['response'].json()
    assert _as_decimals(data) == _as_decimals(extract_table_data(step))
    assert list(data) == sorted(data)


@then(parsers.parse('the response field "{field}" should start with "{prefix}"'))
def then_field_starts_with(field: str, prefix: str, context: dict[str, Any]) -> None:
    assert context['response'].json()[field].startswith(prefix)
