"""
Service selecting the option sets shown on a product page.
"""

from django.db.models import Prefetch
from typing import List, Optional

from apps.options.models import Option, OptionSet
from apps.options.models.option_set import split_tags
from .definitions import OptionDefinition


class ActiveOptionService:
    """
    Reads the active option sets of a shop and filters them by product tags.
    """

    @staticmethod
    def parse_tags(product_tags) -> Optional[List[str]]:
        """
        Normalise product tags given as a comma separated string or a list.

        Returns None when no tags were supplied at all, which disables tag
        filtering.
        """
        if product_tags is None:
            return None
        if isinstance(product_tags, str):
            return split_tags(product_tags)
        return [str(tag).strip() for tag in product_tags if str(tag).strip()]

    @staticmethod
    def get_option_sets(shop: str, product_tags=None) -> List[OptionSet]:
        """
        Active option sets of ``shop`` applicable to a product.

        Args:
            shop: Shop domain
            product_tags: Tags of the product (string or list). When omitted,
                every active set of the shop is returned.

        Returns:
            Option sets with their options prefetched in display order
        """
        option_sets = OptionSet.objects.filter(
            shop=shop,
            active=True
        ).prefetch_related(
            Prefetch('options', queryset=Option.objects.order_by('position', 'id'))
        ).order_by('created_at', 'id')

        tags = ActiveOptionService.parse_tags(product_tags)
        if tags is None:
            return list(option_sets)

        return [option_set for option_set in option_sets if option_set.applies_to_tags(tags)]

    @staticmethod
    def get_definition_groups(shop: str, product_tags=None) -> List[List[OptionDefinition]]:
        """
        Option definitions of a product page, one list per option set.

        Dependencies only resolve inside a set, so sets are kept apart.
        """
        return [
            option_set.get_definitions()
            for option_set in ActiveOptionService.get_option_sets(shop, product_tags)
        ]
