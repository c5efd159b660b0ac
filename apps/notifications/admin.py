from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("type", "notification_for", "user", "blog", "seen", "created_at")
    list_filter = ("type", "seen", "created_at")
    search_fields = ("notification_for__username", "user__username", "blog__title")
    raw_id_fields = (
        "notification_for",
        "user",
        "blog",
        "comment",
        "reply",
        "replied_on_comment",
    )
    actions = ["mark_seen"]

    def mark_seen(self, request, queryset):
        updated = queryset.update(seen=True)
        self.message_user(request, f"{updated} notifications marked as seen.")

    mark_seen.short_description = "Mark selected notifications as seen"
