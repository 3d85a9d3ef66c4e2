from django.dispatch import Signal

# Sent once a client booking and its service links are saved.
# Receivers get ``appointment``.
booking_created = Signal()
