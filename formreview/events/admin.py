""" Admin file of events app """


from django.contrib import admin

from .models import DomainEvent


class DomainEventAdmin(admin.ModelAdmin):
    """The event log is read-only."""
    list_display = ('id', 'organization', 'event_type', 'created_at')
    list_filter = ('event_type',)
    readonly_fields = ('organization', 'event_type', 'payload', 'created_at')

    def has_add_permission(self, request):
        return False


admin.site.register(DomainEvent, DomainEventAdmin)
