# API Route Constants

# Base API
API_BASE = '/api'

# Booking routes
BOOKING_BASE = f'{API_BASE}/booking'
BOOKING_CREATE = BOOKING_BASE
BOOKING_RESET = f'{BOOKING_BASE}/reset'
BOOKING_SEAT_STATUS = f'{BOOKING_BASE}/seat-status'

# Transfer routes
TRANSFER_BASE = f'{API_BASE}/transfer'
TRANSFER_EXECUTE = TRANSFER_BASE
TRANSFER_BALANCES = f'{TRANSFER_BASE}/balances'
TRANSFER_CONNECTION = f'{TRANSFER_BASE}/connection'
