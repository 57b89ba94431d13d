"""
Django signals for the options app.
Reports conditional display settings that the storefront will ignore.
"""

import logging

from django.db.models.signals import pre_save
from django.dispatch import receiver

from .choices import OptionType
from .models import Option

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Option)
def report_broken_dependency(sender, instance, **kwargs):
    """
    Log dependencies the storefront will treat as unconditioned.

    Saves that bypass ``Option.clean()`` (scripts, bulk imports) can still
    store them; the option is then always shown.
    """
    if not instance.depend_on_id:
        return

    if instance.pk is not None and instance.depend_on_id == instance.pk:
        logger.warning("Option %s (%s) depends on itself", instance.pk, instance.name)
        return

    target = instance.depend_on
    if target.type != OptionType.RADIO:
        logger.warning(
            "Option %s (%s) depends on non-radio option %s; it will always be shown",
            instance.pk, instance.name, target.pk
        )
    elif target.option_set_id != instance.option_set_id:
        logger.warning(
            "Option %s (%s) depends on option %s of another set; it will always be shown",
            instance.pk, instance.name, target.pk
        )
