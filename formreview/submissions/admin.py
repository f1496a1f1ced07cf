""" Admin file of submissions app """


from django.contrib import admin

from .models import Submission, SubmissionAggregate


class SubmissionAggregateInline(admin.StackedInline):
    """The aggregate is maintained by the review app and is read-only here."""
    model = SubmissionAggregate
    can_delete = False
    readonly_fields = ('reviews_count', 'composite_score', 'last_review_at')


class SubmissionAdmin(admin.ModelAdmin):
    """
    Admin for submissions.

    The grading status is derived from submitted reviews, so it is not editable.
    """
    list_display = ('uuid', 'form', 'submitter_email', 'status', 'submitted_at')
    list_filter = ('status',)
    search_fields = ('uuid', 'submitter_email')
    readonly_fields = (
        'uuid', 'organization', 'form', 'form_version', 'rubric_version',
        'status', 'status_changed', 'submitted_at',
    )
    inlines = (SubmissionAggregateInline,)


admin.site.register(Submission, SubmissionAdmin)
