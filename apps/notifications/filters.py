import django_filters

from .models import Notification

FILTER_CHOICES = [("all", "All")] + list(Notification.NotificationType.choices)


class NotificationFilter(django_filters.FilterSet):
    """
    Inbox filter: ``?filter=like|comment|reply|tutorial`` or ``all``.
    """

    filter = django_filters.ChoiceFilter(
        choices=FILTER_CHOICES, method="filter_by_type", empty_label=None
    )
    seen = django_filters.BooleanFilter()

    class Meta:
        model = Notification
        fields = ["filter", "seen"]

    def filter_by_type(self, queryset, name, value):
        if not value or value == "all":
            return queryset
        return queryset.filter(type=value)
