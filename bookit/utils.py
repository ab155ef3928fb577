import uuid
from datetime import datetime, timezone


def generate_host_request_id() -> str:
    """Generate a unique host request ID"""
    return f"hostreq-{str(uuid.uuid4())[:8]}"


def generate_venue_id() -> str:
    """Generate a unique venue ID"""
    return f"venue-{str(uuid.uuid4())[:8]}"


def generate_booking_id() -> str:
    """Generate a unique booking ID"""
    return f"booking-{str(uuid.uuid4())}"


def get_current_timestamp() -> str:
    """Get current UTC timestamp in ISO format"""
    return datetime.now(timezone.utc).isoformat()
