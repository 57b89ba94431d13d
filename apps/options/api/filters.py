from django_filters import rest_framework as filters
from apps.options.models import OptionSet


class OptionSetFilter(filters.FilterSet):
    """Filter for option sets."""

    shop = filters.CharFilter(field_name='shop')
    tag = filters.CharFilter(method='filter_by_tag')

    class Meta:
        model = OptionSet
        fields = ['shop', 'active', 'apply_to_all']

    def filter_by_tag(self, queryset, name, value):
        """
        Sets shown for a product with this tag.
        Example: ?tag=engravable
        """
        tag = value.strip()
        if not tag:
            return queryset

        matching = [
            option_set.pk for option_set in queryset.filter(product_tags__icontains=tag)
            if tag in option_set.tag_list
        ]
        return queryset.filter(apply_to_all=True) | queryset.filter(pk__in=matching)
