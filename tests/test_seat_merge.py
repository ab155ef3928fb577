from bookit.seat_merge import (
    desired_seat_count,
    empty_seat,
    merge_seat_arrays,
    normalize_seats,
)


def booking(created_by, start="10:00", date="2025-06-01", email="someone@example.com"):
    return {
        "booking_id": f"booking-{created_by}-{start}",
        "date": date,
        "start_time": start,
        "end_time": None,
        "hours": 1,
        "created_by": created_by,
        "created_by_email": email,
    }


def test_normalize_fills_missing_seats():
    """Gaps and missing tail seats become empty seats"""
    seats = [{"id": 2, "label": "Window", "price": 50, "bookings": []}]

    normalized = normalize_seats(seats, 3)

    assert [s["id"] for s in normalized] == [1, 2, 3]
    assert normalized[0] == empty_seat(1)
    assert normalized[1]["label"] == "Window"
    assert normalized[1]["price"] == 50
    assert normalized[2] == empty_seat(3)


def test_normalize_is_idempotent():
    seats = [
        {"id": 1, "label": "A", "price": 10, "bookings": [booking("user")]},
        {"id": 2, "label": "B", "price": 20, "bookings": []},
    ]

    once = normalize_seats(seats, 4)
    twice = normalize_seats(once, 4)

    assert once == twice


def test_normalize_preserves_existing_content_when_growing():
    seats = [{"id": 1, "label": "A", "price": 10, "bookings": [booking("owner")]}]

    normalized = normalize_seats(seats, 5)

    assert normalized[0] == seats[0]
    assert len(normalized) == 5


def test_normalize_does_not_modify_input():
    seats = [{"id": 1, "label": "A"}]

    normalize_seats(seats, 2)

    assert seats == [{"id": 1, "label": "A"}]


def test_desired_seat_count_covers_capacity_and_arrays():
    assert desired_seat_count(3, [], None) == 3
    assert desired_seat_count(1, [empty_seat(1), empty_seat(2)], []) == 2
    assert desired_seat_count(0, [{"id": 4}]) == 4


def test_merge_takes_user_bookings_from_venue_and_owner_bookings_from_host():
    """Each side is the only writer of its own booking category"""
    user_booking = booking("user", "14:00")
    owner_booking = booking("owner", "18:00")
    stale_user_copy = booking("user", "09:00")
    stale_owner_copy = booking("owner", "07:00")

    host_seats = [{"id": 1, "label": "Host label", "price": 30, "bookings": [stale_user_copy, owner_booking]}]
    venue_seats = [{"id": 1, "label": "Old label", "price": 10, "bookings": [user_booking, stale_owner_copy]}]

    merged = merge_seat_arrays(host_seats, venue_seats, capacity=1)

    assert merged == [
        {"id": 1, "label": "Host label", "price": 30, "bookings": [user_booking, owner_booking]}
    ]


def test_merge_treats_untagged_host_bookings_as_owner_bookings():
    legacy = booking("owner")
    del legacy["created_by"]

    merged = merge_seat_arrays([{"id": 1, "label": "", "bookings": [legacy]}], [], capacity=1)

    assert merged[0]["bookings"] == [legacy]


def test_merge_label_and_price_fall_back_to_venue_then_default():
    host_seats = [{"id": 1, "label": None, "price": None, "bookings": []}]
    venue_seats = [
        {"id": 1, "label": "Venue label", "price": 40, "bookings": []},
        {"id": 2, "label": "Second", "bookings": []},
    ]

    merged = merge_seat_arrays(host_seats, venue_seats, capacity=3, default_price=75)

    assert merged[0]["label"] == "Venue label"
    assert merged[0]["price"] == 40
    assert merged[1]["label"] == "Second"
    assert merged[1]["price"] == 75
    assert merged[2] == {"id": 3, "label": "", "price": 75, "bookings": []}


def test_merge_length_is_max_of_capacity_and_both_arrays():
    host_seats = normalize_seats([], 2)
    venue_seats = normalize_seats([], 4)

    assert len(merge_seat_arrays(host_seats, venue_seats, capacity=3)) == 4
    assert len(merge_seat_arrays(host_seats, [], capacity=5)) == 5


def test_merge_is_stable_when_repeated():
    """Merging an already merged pair changes nothing and duplicates nothing"""
    host_seats = [{"id": 1, "label": "A", "price": 5, "bookings": [booking("owner", "08:00")]}]
    venue_seats = [{"id": 1, "label": "A", "price": 5, "bookings": [booking("user", "12:00")]}]

    merged = merge_seat_arrays(host_seats, venue_seats, capacity=2)
    again = merge_seat_arrays(merged, merged, capacity=2)

    assert again == merged
    assert len(again[0]["bookings"]) == 2
