# API Route Constants

# Base API
API_BASE = '/api'

# Seat hold routes
SEAT_HOLD_BASE = f'{API_BASE}/seat_hold'
SEAT_HOLD_ACQUIRE = SEAT_HOLD_BASE
SEAT_HOLD_EXTEND = f'{SEAT_HOLD_BASE}/extend'
SEAT_HOLD_SEAT_MAP = f'{SEAT_HOLD_BASE}/showtime/{{showtime_id}}'
SEAT_HOLD_HISTORY = f'{SEAT_HOLD_BASE}/history'

# Booking routes
BOOKING_BASE = f'{API_BASE}/booking'
BOOKING_CREATE = BOOKING_BASE
BOOKING_LIST = BOOKING_BASE
BOOKING_GET = f'{BOOKING_BASE}/{{booking_id}}'
BOOKING_GET_BY_REFERENCE = f'{BOOKING_BASE}/reference/{{reference_code}}'
BOOKING_PAY = f'{BOOKING_BASE}/{{booking_id}}/payment'
BOOKING_CANCEL = f'{BOOKING_BASE}/{{booking_id}}/cancel'
BOOKING_EXTEND = f'{BOOKING_BASE}/{{booking_id}}/extend'
BOOKING_DELETE = f'{BOOKING_BASE}/{{booking_id}}'
BOOKING_RESTORE = f'{BOOKING_BASE}/{{booking_id}}/restore'

# Showtime routes
SHOWTIME_BASE = f'{API_BASE}/showtime'
SHOWTIME_CREATE = SHOWTIME_BASE
SHOWTIME_LIST = SHOWTIME_BASE
SHOWTIME_GET = f'{SHOWTIME_BASE}/{{showtime_id}}'
SHOWTIME_UPDATE = f'{SHOWTIME_BASE}/{{showtime_id}}'
SHOWTIME_CANCEL = f'{SHOWTIME_BASE}/{{showtime_id}}/cancel'
SHOWTIME_DELETE = f'{SHOWTIME_BASE}/{{showtime_id}}'
SHOWTIME_RESTORE = f'{SHOWTIME_BASE}/{{showtime_id}}/restore'

# Customer identity header forwarded by the gateway
CUSTOMER_ID_HEADER = 'X-Customer-Id'
