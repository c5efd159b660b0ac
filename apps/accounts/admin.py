import logging

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import User

logger = logging.getLogger(__name__)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for blog platform users."""

    model = User
    list_display = (
        "username",
        "email",
        "fullname",
        "role_badge",
        "google_auth",
        "total_posts",
        "total_reads",
        "date_joined",
    )
    list_filter = ("role", "google_auth", "is_active", "is_staff", "date_joined")
    search_fields = ("username", "email", "fullname")
    ordering = ("-date_joined",)
    readonly_fields = ("total_posts", "total_reads", "date_joined", "last_login")

    fieldsets = (
        (None, {"fields": ("username", "password", "email")}),
        (
            _("Personal info"),
            {"fields": ("fullname", "bio", "profile_img", "social_links")},
        ),
        (
            _("Account"),
            {
                "fields": (
                    "role",
                    "google_auth",
                    "total_posts",
                    "total_reads",
                    "is_active",
                    "is_staff",
                    "is_superuser",
                )
            },
        ),
        (
            _("Permissions"),
            {
                "fields": ("groups", "user_permissions"),
                "classes": ("collapse",),
            },
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("username", "email", "fullname", "password1", "password2"),
            },
        ),
        (_("Account"), {"fields": ("role",)}),
    )

    actions = ["promote_to_admin", "demote_to_user"]

    def role_badge(self, obj):
        """Display role as colored badge."""
        colors = {
            User.Role.SUPERADMIN: "purple",
            User.Role.ADMIN: "green",
            User.Role.USER: "gray",
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(obj.role, "gray"),
            obj.get_role_display(),
        )

    role_badge.short_description = "Role"

    def promote_to_admin(self, request, queryset):
        updated = queryset.filter(role=User.Role.USER).update(role=User.Role.ADMIN)
        logger.info(f"{request.user} promoted {updated} users to admin")
        self.message_user(request, f"{updated} users promoted to admin.")

    promote_to_admin.short_description = "Promote selected users to admin"

    def demote_to_user(self, request, queryset):
        updated = queryset.filter(role=User.Role.ADMIN).update(role=User.Role.USER)
        logger.info(f"{request.user} demoted {updated} admins to user")
        self.message_user(request, f"{updated} admins demoted to user.")

    demote_to_user.short_description = "Demote selected admins to user"
