"""
Signals sent by the forms API.
See https://docs.djangoproject.com/en/stable/topics/signals/
"""

import django.dispatch

# A form published new form and rubric versions.
# Sent with `form`, `form_version` and `rubric_version`.
form_published = django.dispatch.Signal()
