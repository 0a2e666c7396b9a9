from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class BookSeatRequest(BaseModel):
    # Free text on purpose: unknown values fall back to ReadCommitted with a warning
    isolation_level: Optional[str] = Field(default=None, max_length=64)

    model_config = {
        'json_schema_extra': {
            'examples': [
                {'isolation_level': 'ReadCommitted'},
                {'isolation_level': 'Serializable'},
            ]
        },
    }


class BookSeatResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'session_id': '1a2b3c4d',
                'outcome': 'success',
                'message': 'Seat A1 booked by session 1a2b3c4d (isolation: ReadCommitted)',
                'owner': '1a2b3c4d',
                'isolation_level': 'ReadCommitted',
                'effective_isolation_level': 'ReadCommitted',
                'retryable': False,
            }
        },
    }

    session_id: str
    outcome: str  # 'success' or a FailureKind value
    message: str
    owner: Optional[str] = None
    isolation_level: str
    effective_isolation_level: Optional[str] = None
    retryable: bool = False


class ResetSeatResponse(BaseModel):
    message: str


class SeatStatusResponse(BaseModel):
    status: str
    booked_by: Optional[str] = None
    reserved_by: Optional[str] = None
    booked_at: Optional[datetime] = None
    reserved_at: Optional[datetime] = None


class SeatNotFoundResponse(BaseModel):
    status: Literal['not_found'] = 'not_found'
