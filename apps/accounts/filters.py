from django.db.models import Q
from django_filters import rest_framework as filters

from .models import User


class UserFilter(filters.FilterSet):
    """
    User filtering for the superadmin console
    """

    search = filters.CharFilter(method="filter_search")
    role = filters.ChoiceFilter(choices=User.Role.choices)
    google_auth = filters.BooleanFilter()
    joined_after = filters.DateTimeFilter(field_name="date_joined", lookup_expr="gte")

    class Meta:
        model = User
        fields = ["search", "role", "google_auth"]

    def filter_search(self, queryset, name, value):
        """Search across username, full name and email"""
        if not value:
            return queryset
        return queryset.filter(
            Q(username__icontains=value)
            | Q(fullname__icontains=value)
            | Q(email__icontains=value)
        )
