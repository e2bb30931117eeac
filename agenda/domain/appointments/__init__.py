"""
Appointments domain.

Booking with overlap checks, partial updates, soft cancellation and the
day/week slot views. The owner row lock in repository.py serializes
bookings of the same calendar.
"""
