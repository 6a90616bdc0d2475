"""
Scheduling core

Pure business logic for appointment scheduling, free of HTTP and persistence:
- Effective window resolution (calendar_rules.py)
- Booking window policy (booking_window.py)
- Slot generation (slots.py)
- Conflict detection and alternatives (conflicts.py)
- Appointment lifecycle (state_machine.py)
"""
