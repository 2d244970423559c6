"""Example: drive the membership service directly (no Flask).

Controllers stay thin; everything below is what the JSON routes call.
"""

import importlib

from config import get_settings_module

from src.library_seats.library_seats.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    for r in container.membership_service.list_expiring_soon():
        print(r.student.student_id, r.student.name, r.student.membership_end, r.status.value)

    for seat in container.catalog_service.available_seats(1):
        print("free for shift 1:", seat.seat_number)


if __name__ == "__main__":
    main()
