"""
Scheduling Engine

Pure business rules for salon bookings, free of ORM access:
- Working hours per weekday (hours.py)
- Candidate start times (slots.py)
- Booking length from selected services (durations.py)
- Interval overlap detection (overlap.py)
- Bookable slots for a day (availability.py)
- Calendar geometry (projector.py)
- Injectable "now" (clock.py)
"""
