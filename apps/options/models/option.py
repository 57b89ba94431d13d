from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
from simple_history.models import HistoricalRecords

from apps.options.choices import OptionType, MULTI_VALUE_TYPES, FLAT_PRICE_TYPES


class Option(models.Model):
    """
    One configurable control on a product page.

    ``values`` holds the ordered choices of multi-value types as a list of
    ``{"id", "label", "image", "price"}`` objects. ``depend_on`` points at a
    radio option of the same set; the option is only shown while that radio
    has ``show_when_value`` selected.
    """
    option_set = models.ForeignKey(
        'options.OptionSet',
        on_delete=models.CASCADE,
        related_name='options',
        verbose_name='Option set'
    )
    name = models.CharField(
        max_length=255,
        verbose_name='Name',
        help_text='Label shown to customers and key of the cart line property'
    )
    type = models.CharField(
        max_length=32,
        choices=OptionType.choices,
        default=OptionType.TEXT,
        verbose_name='Type'
    )
    required = models.BooleanField(
        default=False,
        verbose_name='Required'
    )
    values = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Values'
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Price',
        help_text='Flat surcharge for text, number and dropdown options'
    )

    # Conditional display
    depend_on = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='dependents',
        verbose_name='Depends on'
    )
    show_when_value = models.CharField(
        max_length=255,
        blank=True,
        verbose_name='Show when value',
        help_text='Label of the radio value that must be selected'
    )

    position = models.PositiveIntegerField(
        default=0,
        verbose_name='Position'
    )

    # History tracking
    history = HistoricalRecords()

    class Meta:
        ordering = ['position', 'id']
        verbose_name = 'Option'
        verbose_name_plural = 'Options'

    def __str__(self):
        return f"{self.name} ({self.get_type_display()})"

    def clean(self):
        errors = {}

        if self.type in MULTI_VALUE_TYPES:
            if not isinstance(self.values, list) or not self.values:
                errors['values'] = 'This option type needs at least one value.'
            elif any(
                not isinstance(value, dict) or not str(value.get('label', '')).strip()
                for value in self.values
            ):
                errors['values'] = 'Every value needs a label.'
        elif self.values:
            errors['values'] = 'Only dropdown, dropdown with thumbnails and radio options have values.'

        if self.price is not None and self.type not in FLAT_PRICE_TYPES:
            errors['price'] = 'A flat price only applies to text, number and dropdown options.'

        dependency_error = self._dependency_error()
        if dependency_error:
            errors['depend_on'] = dependency_error

        if errors:
            raise ValidationError(errors)

    def _dependency_error(self):
        target = self.depend_on
        if target is None:
            return None
        if self.pk is not None and target.pk == self.pk:
            return 'An option cannot depend on itself.'
        if target.type != OptionType.RADIO:
            return 'Options can only depend on radio options.'
        if target.option_set_id != self.option_set_id:
            return 'Options can only depend on options of the same set.'
        if not self.show_when_value:
            return 'Choose the radio value that shows this option.'
        labels = [value.get('label') for value in target.values or [] if isinstance(value, dict)]
        if self.show_when_value not in labels:
            return f'"{self.show_when_value}" is not a value of {target.name}.'

        # Radio options may depend on other radios; refuse chains that loop back.
        seen = {self.pk} if self.pk is not None else set()
        current = target
        while current is not None:
            if current.pk in seen:
                return 'This dependency would create a visibility cycle.'
            seen.add(current.pk)
            current = current.depend_on
        return None

    def to_definition(self):
        """Convert this row into the immutable definition used by the renderers."""
        from apps.options.services.definitions import OptionDefinition
        return OptionDefinition.from_dict({
            'id': str(self.pk),
            'type': self.type,
            'name': self.name,
            'required': self.required,
            'values': self.values or [],
            'price': self.price,
            'dependOnOptionId': str(self.depend_on_id) if self.depend_on_id else None,
            'showWhenValue': self.show_when_value or None,
        })
