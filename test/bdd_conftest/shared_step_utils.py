from typing import Any

from pytest_bdd.model import Step


def extract_table_data(step: Step) -> dict[str, Any]:
    """First table row is the header, second row the values."""
    rows = step.data_table.rows
    headers = [cell.value for cell in rows[0].cells]
    values = [cell.value for cell in rows[1].cells]
    return dict(zip(headers, values, strict=True))
