from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class TransferResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'success': True,
                'message': '✅ SUCCESS: Transfer completed! $100.00 transferred from Virat to Rohit.',
                'outcome': 'success',
            }
        },
    }

    success: bool
    message: str
    outcome: str


class ConnectionResponse(BaseModel):
    success: bool
    version: Optional[str] = None
    error: Optional[str] = None


BalancesResponse = dict[str, Decimal]
