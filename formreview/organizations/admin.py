""" Admin file of organizations app """


from django.contrib import admin

from .models import Membership, Organization


class MembershipInline(admin.TabularInline):
    """Memberships of an organization"""
    model = Membership
    extra = 0
    raw_id_fields = ("user",)


class OrganizationAdmin(admin.ModelAdmin):
    """Admin for organizations and their members."""
    list_display = ("id", "name", "slug", "created_at")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    inlines = (MembershipInline,)


admin.site.register(Organization, OrganizationAdmin)
