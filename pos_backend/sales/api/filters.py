# sales/api/filters.py

"""
BILL HISTORY FILTERS

?date_from=YYYY-MM-DD&date_to=YYYY-MM-DD  (inclusive, local dates)
?status=completed|reprinted|pending
?q=<text>  reference number, barcode or customer name
"""

import django_filters
from django.db.models import Q

from sales.models import Bill


class BillFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    status = django_filters.ChoiceFilter(choices=Bill.STATUS_CHOICES)
    q = django_filters.CharFilter(method="filter_q")

    class Meta:
        model = Bill
        fields = ["status", "date_from", "date_to", "q"]

    def filter_q(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(reference_number__icontains=value)
            | Q(barcode__icontains=value)
            | Q(customer_name__icontains=value)
        )
