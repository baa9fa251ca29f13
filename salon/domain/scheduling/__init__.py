"""
Scheduling domain - availability, bookings and calendar changes.

Structure:
    time_calculator.py      # "HH:MM" <-> minutes, weekdays, interval overlap
    conflict_validator.py   # Half-open overlap checks against a professional's calendar
    availability_service.py # Bookable slots for a cart of services
    booking_service.py      # All-or-nothing cart commit plus side effects
    relocation_service.py   # Move, resize and block
    appointment_service.py  # Status lifecycle and cancellation window
    locks.py                # Per professional/day calendar locks
    repository.py           # Appointment queries
    router.py               # /scheduling endpoints
"""
