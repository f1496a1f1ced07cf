"""
Signals for the review API.
See https://docs.djangoproject.com/en/stable/topics/signals/
"""

import django.dispatch

# A reviewer submitted their review.
# Sent with `review` and `submission` after the aggregate was recomputed.
review_submitted = django.dispatch.Signal()
