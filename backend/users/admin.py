from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.html import format_html

from .models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = (
        "id",
        "avatar_preview",
        "username",
        "email",
        "name",
        "is_staff",
        "date_joined",
    )
    list_display_links = ("id", "username")
    list_filter = ("is_staff", "is_superuser", "is_active")
    search_fields = (
        "id",
        "username",
        "email",
        "name",
    )
    ordering = ("id",)
    readonly_fields = ("avatar_preview",)

    fieldsets = DjangoUserAdmin.fieldsets + (
        (
            "Профиль",
            {"fields": ("name", "bio", "avatar_url", "avatar_preview")},
        ),
    )
    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        (None, {"fields": ("email", "name")}),
    )

    @admin.display(description="Аватар")
    def avatar_preview(self, obj):
        if obj.avatar_url:
            return format_html(
                (
                    '<img src="{}" style="height:40px;width:40px;'
                    "object-fit:cover;border-radius:50%;"
                    '">'
                ),
                obj.avatar_url,
            )
        return "-"
