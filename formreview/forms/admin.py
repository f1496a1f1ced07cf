""" Admin file of forms app """


from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from .models import Form, FormVersion, RubricQuestion, RubricVersion


class FormAdmin(SimpleHistoryAdmin):
    """
    Admin for forms.

    Editing the visibility settings here applies to all submissions of the
    form immediately; the history view shows who changed what.
    """
    list_display = ('id', 'name', 'organization', 'status', 'min_reviews_required', 'visibility_mode')
    list_filter = ('status', 'visibility_mode')
    search_fields = ('name', 'slug')
    history_list_display = ('status', 'min_reviews_required', 'visibility_mode', 'visibility_threshold')


class RubricQuestionInline(admin.TabularInline):
    """Questions of a rubric version"""
    model = RubricQuestion
    extra = 0
    can_delete = False
    readonly_fields = ('question_id', 'label', 'description', 'weight', 'required', 'order_num')

    def has_add_permission(self, request, obj=None):
        return False


class RubricVersionAdmin(admin.ModelAdmin):
    """Rubric versions are immutable; the admin is read-only."""
    list_display = ('id', 'form', 'version', 'scale_min', 'scale_max', 'scale_step', 'published_at')
    readonly_fields = ('form', 'version', 'scale_min', 'scale_max', 'scale_step', 'published_at')
    inlines = (RubricQuestionInline,)

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class FormVersionAdmin(admin.ModelAdmin):
    list_display = ('id', 'form', 'version', 'published_at')
    readonly_fields = ('form', 'version', 'schema', 'published_at', 'notes')


admin.site.register(Form, FormAdmin)
admin.site.register(FormVersion, FormVersionAdmin)
admin.site.register(RubricVersion, RubricVersionAdmin)
