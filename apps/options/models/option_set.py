import logging

from django.db import models
from simple_history.models import HistoricalRecords

from apps.options.exceptions import OptionDefinitionError

logger = logging.getLogger(__name__)


def split_tags(raw):
    """Split a comma separated tag string into trimmed, non-empty tags."""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(',') if tag.strip()]


class OptionSet(models.Model):
    """
    An ordered collection of options offered on a shop's product pages.

    A set either applies to every product of the shop or only to products
    carrying at least one of its tags.
    Example: "Engraving" set with a "Gift wrap" radio and a "Message" text field.
    """
    name = models.CharField(
        max_length=255,
        verbose_name='Name'
    )
    shop = models.CharField(
        max_length=255,
        db_index=True,
        verbose_name='Shop',
        help_text='Shop domain, e.g. example.myshopify.com'
    )
    active = models.BooleanField(
        default=True,
        verbose_name='Active'
    )
    apply_to_all = models.BooleanField(
        default=True,
        verbose_name='Apply to all products'
    )
    product_tags = models.TextField(
        blank=True,
        verbose_name='Product tags',
        help_text='Comma separated tags; used when "apply to all products" is off'
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    # History tracking
    history = HistoricalRecords()

    class Meta:
        ordering = ['shop', 'name']
        verbose_name = 'Option Set'
        verbose_name_plural = 'Option Sets'

    def __str__(self):
        return f"{self.name} [{self.shop}]"

    @property
    def tag_list(self):
        return split_tags(self.product_tags)

    def applies_to_tags(self, tags):
        """
        Whether this set is shown for a product with the given tags.

        Sets applied to all products always match; otherwise at least one of
        the set's tags must be present on the product.
        """
        if self.apply_to_all:
            return True
        required = self.tag_list
        if not required:
            return False
        product_tags = set(tags)
        return any(tag in product_tags for tag in required)

    def get_definitions(self):
        """
        Immutable definitions of this set's options, in display order.

        Options whose stored data cannot be read are logged and left out.
        """
        definitions = []
        for option in self.options.all():
            try:
                definitions.append(option.to_definition())
            except OptionDefinitionError as e:
                logger.warning("Skipping option %s of set %s: %s", option.pk, self.pk, e)
        return definitions
