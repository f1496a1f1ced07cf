"""
Django admin models for reviews
"""
import json

from django.contrib import admin
from django.utils.html import format_html

from formreview.review.models import Review, ReviewRevision


class ReviewRevisionInline(admin.TabularInline):
    """
    Revisions are append-only; they are shown but never edited here.
    """
    model = ReviewRevision
    extra = 0
    can_delete = False
    readonly_fields = ('created_at', 'scores_summary', 'comment')
    exclude = ('scores',)

    def scores_summary(self, revision):
        """Scores as indented JSON."""
        return format_html("<pre>{}</pre>", json.dumps(revision.scores, sort_keys=True, indent=4))

    def has_add_permission(self, request, obj=None):
        return False


class ReviewAdmin(admin.ModelAdmin):
    """
    Django admin model for Reviews.
    """
    list_display = ('id', 'submission', 'reviewer', 'state', 'created_at', 'submitted_at')
    list_filter = ('submitted_at',)
    raw_id_fields = ('submission', 'reviewer')
    search_fields = ('submission__uuid', 'reviewer__username')
    readonly_fields = ('submission', 'reviewer', 'created_at', 'submitted_at')
    inlines = (ReviewRevisionInline,)


admin.site.register(Review, ReviewAdmin)
