"""
Signals sent by the submissions API.
"""

import django.dispatch

# A new submission was received. Sent with `submission`.
submission_created = django.dispatch.Signal()
