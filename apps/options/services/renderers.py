"""
Storefront markup for product options.

Every option type has one renderer taking the option and a ``RenderContext``.
The context is built by ``render_option_set`` / ``render_product_options``,
which also register the stylesheet, so renderers share no module-level state.

Each control posts as ``properties[<option name>]`` so the storefront cart
keeps the answer as a line item property; containers carry ``data-price`` for
the client-side surcharge total computed by ``options/product-options.js``,
which the composed markup loads once.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from django.core.exceptions import ImproperlyConfigured
from django.forms.utils import flatatt
from django.templatetags.static import static
from django.utils.html import format_html, format_html_join
from django.utils.safestring import SafeString, mark_safe

from apps.options.choices import OptionType
from apps.options.conf import StorefrontSettings, get_storefront_settings
from .definitions import OptionDefinition
from .money import format_amount
from .visibility import Dependency, VisibilityResolver

logger = logging.getLogger(__name__)

SCRIPT_PATH = 'options/product-options.js'


# =============================================================================
# Input normalisation
# =============================================================================

DIGITS = re.compile(r'[0-9]')
LEADING_INTEGER = re.compile(r'^\s*([+-]?\d+)')


@dataclass(frozen=True)
class ClampResult:
    value: Optional[int]
    notice: Optional[str] = None


def filter_text_input(raw: Optional[str]) -> str:
    """Free text answers may not contain digits."""
    return DIGITS.sub('', raw or '')


def clamp_number_input(raw, minimum: int = 0, maximum: int = 99) -> ClampResult:
    """
    Clamp a number answer into ``[minimum, maximum]``.

    Only the leading integer is read ("12.7" is 12); input without one
    yields no value. A notice is returned when the value was corrected.
    """
    if raw is None or isinstance(raw, bool):
        return ClampResult(None)
    match = LEADING_INTEGER.match(str(raw))
    if not match:
        return ClampResult(None)

    value = int(match.group(1))
    if value > maximum:
        return ClampResult(maximum, f"Auto-corrected to maximum value: {maximum}")
    if value < minimum:
        return ClampResult(minimum, f"Auto-corrected to minimum value: {minimum}")
    return ClampResult(value)


# =============================================================================
# Styles
# =============================================================================

BASE_CSS = """
.product-option { margin-bottom: 12px; }
.product-option__price { font-size: 0.85em; color: #e94560; margin-left: 5px; }
.product-option__required { color: #d82c0d; }
.number-range-info { font-size: 0.75em; color: #666; margin-top: 3px; }
.input-message { font-size: 0.75em; margin-top: 3px; padding: 2px 6px; border-radius: 3px; }
""".strip()

RADIO_CSS = """
.product-option__radio-item { display: flex; align-items: center; }
.product-option__radio-input { margin-right: 8px; }
""".strip()

THUMBNAIL_CSS = """
.thumbnail-options { min-width: 250px; }
.thumbnail-option { display: flex; align-items: center; gap: 12px; padding: 12px 8px; min-height: 60px; }
.option-image-container { width: 50px; height: 50px; border: 1px solid #ddd; border-radius: 4px;
  overflow: hidden; flex-shrink: 0; display: flex; align-items: center; justify-content: center;
  background-color: #f9f9f9; }
.option-image-container img { width: 100%; height: 100%; object-fit: cover; }
.no-image-placeholder { font-size: 0.7em; color: #999; text-align: center; padding: 2px; }
.option-text-container { flex: 1; text-align: left; }
.option-price { font-size: 0.8em; color: #e94560; font-weight: bold; display: block; margin-top: 2px; }
""".strip()

TYPE_CSS = {
    OptionType.RADIO: ('radio', RADIO_CSS),
    OptionType.DROPDOWN: ('thumbnail', THUMBNAIL_CSS),
    OptionType.DROPDOWN_THUMBNAIL: ('thumbnail', THUMBNAIL_CSS),
}


class StyleRegistry:
    """Named CSS blocks, each emitted once per page."""

    def __init__(self):
        self._blocks: Dict[str, str] = {}

    def register(self, name: str, css: str) -> None:
        self._blocks.setdefault(name, css)

    def __contains__(self, name):
        return name in self._blocks

    def render(self) -> SafeString:
        if not self._blocks:
            return mark_safe('')
        return format_html(
            '<style class="product-options-styles">\n{}\n</style>',
            mark_safe('\n'.join(self._blocks.values()))
        )


def register_styles(registry: StyleRegistry, option_types: Iterable[OptionType]) -> StyleRegistry:
    registry.register('base', BASE_CSS)
    for option_type in option_types:
        if option_type in TYPE_CSS:
            registry.register(*TYPE_CSS[option_type])
    return registry


# =============================================================================
# Render context
# =============================================================================

@dataclass
class RenderContext:
    resolver: VisibilityResolver
    styles: StyleRegistry
    settings: StorefrontSettings

    def is_required(self, option: OptionDefinition) -> bool:
        return self.resolver.is_required(option)

    @staticmethod
    def dom_id(prefix: str, option: OptionDefinition) -> str:
        return f"{prefix}_{re.sub(r'[^0-9A-Za-z_]', '_', option.id)}"


def _price_badge(option: OptionDefinition, context: RenderContext):
    if option.flat_price is None:
        return ''
    return format_html(
        '<span class="product-option__price">(+{}{})</span>',
        context.settings.currency_symbol,
        format_amount(option.flat_price)
    )


def _label(option: OptionDefinition, context: RenderContext, for_id: Optional[str] = None):
    required_marker = ''
    if option.required:
        required_marker = format_html('<span class="product-option__required">{}</span>', '*')
    return format_html(
        '<label class="product-option__label"{}>{} {} {}</label>',
        flatatt({'for': for_id}),
        option.name,
        _price_badge(option, context),
        required_marker
    )


def _container_attrs(option: OptionDefinition, modifier: str) -> Dict[str, object]:
    attrs = {
        'class': f"product-option product-option--{modifier}",
        'data-option-id': option.id,
        'data-option-type': option.type.value,
        'data-required': 'true' if option.required else None,
    }
    if option.flat_price is not None:
        attrs['data-price'] = format_amount(option.flat_price)
    return attrs


# =============================================================================
# Renderers
# =============================================================================

def render_text_option(option: OptionDefinition, context: RenderContext) -> SafeString:
    input_id = context.dom_id('text', option)
    input_attrs = {
        'type': 'text',
        'class': 'product-option__input',
        'id': input_id,
        'name': option.field_name,
        'pattern': '[^0-9]*',
        'data-filter': 'digits',
        'placeholder': context.settings.text_placeholder,
        'required': context.is_required(option),
    }
    return format_html(
        '<div{}>{}<input{}></div>',
        flatatt(_container_attrs(option, 'text')),
        _label(option, context, input_id),
        flatatt(input_attrs)
    )


def render_number_option(option: OptionDefinition, context: RenderContext) -> SafeString:
    settings = context.settings
    input_id = context.dom_id('number', option)
    input_attrs = {
        'type': 'number',
        'class': 'product-option__input',
        'id': input_id,
        'name': option.field_name,
        'placeholder': f"Please enter a number ({settings.number_min}-{settings.number_max})",
        'min': str(settings.number_min),
        'max': str(settings.number_max),
        'step': '1',
        'data-clamp': 'true',
        'data-notice-timeout': str(settings.notice_timeout_ms),
        'required': context.is_required(option),
    }
    return format_html(
        '<div{}>{}<input{}><div class="number-range-info">Range: {}-{}</div></div>',
        flatatt(_container_attrs(option, 'number')),
        _label(option, context, input_id),
        flatatt(input_attrs),
        settings.number_min,
        settings.number_max
    )


def _select(option: OptionDefinition, context: RenderContext, select_id: str, with_prices: bool):
    rows = []
    for value in option.values:
        attrs = {'value': value.label}
        if with_prices:
            attrs['data-price'] = format_amount(value.price) if value.price is not None else '0'
        rows.append((flatatt(attrs), value.label))
    return format_html(
        '<select{}><option value="">{}</option>{}</select>',
        flatatt({
            'class': 'product-option__input native-select',
            'id': select_id,
            'name': option.field_name,
            'required': context.is_required(option),
        }),
        context.settings.select_placeholder,
        format_html_join('', '<option{}>{}</option>', rows)
    )


def render_dropdown_option(option: OptionDefinition, context: RenderContext) -> SafeString:
    select_id = context.dom_id('dropdown', option)
    swatches = ''
    if any(value.image for value in option.values):
        swatches = format_html(
            '<div class="custom-options">{}</div>',
            format_html_join(
                '',
                '<div class="custom-option" data-value="{}">{}<span>{}</span></div>',
                (
                    (
                        value.label,
                        format_html('<img src="{}" class="option-image" alt="{}">', value.image, value.label)
                        if value.image else '',
                        value.label,
                    )
                    for value in option.values
                )
            )
        )
    return format_html(
        '<div{}>{}<div class="product-option__dropdown-container">{}{}</div></div>',
        flatatt(_container_attrs(option, 'dropdown')),
        _label(option, context, select_id),
        _select(option, context, select_id, with_prices=False),
        swatches
    )


def _thumbnail_row(value, context: RenderContext):
    if value.image:
        image = format_html('<img src="{}" class="option-image" alt="{}">', value.image, value.label)
    else:
        image = format_html('<div class="no-image-placeholder">{}</div>', 'No image')

    price_display = ''
    if value.price is not None and value.price > 0:
        price_display = format_html(
            '<span class="option-price">(+{}{})</span>',
            context.settings.currency_symbol,
            format_amount(value.price)
        )

    return format_html(
        '<div class="custom-option thumbnail-option" data-value="{}" data-price="{}">'
        '<div class="option-image-container">{}</div>'
        '<div class="option-text-container"><span class="option-text">{}</span>{}</div>'
        '</div>',
        value.label,
        format_amount(value.price) if value.price is not None else '0',
        image,
        value.label,
        price_display
    )


def render_dropdown_thumbnail_option(option: OptionDefinition, context: RenderContext) -> SafeString:
    select_id = context.dom_id('dropdown_thumbnail', option)
    attrs = _container_attrs(option, 'dropdown-thumbnail')
    attrs['data-price-mode'] = 'value'
    return format_html(
        '<div{}>{}<div class="product-option__dropdown-container">{}'
        '<div class="custom-options thumbnail-options">{}</div></div></div>',
        flatatt(attrs),
        _label(option, context, select_id),
        _select(option, context, select_id, with_prices=True),
        format_html_join('', '{}', ((_thumbnail_row(value, context),) for value in option.values))
    )


def render_radio_option(option: OptionDefinition, context: RenderContext) -> SafeString:
    group_id = context.dom_id('radio', option)
    selected = context.resolver.selected(option.id)
    required = context.is_required(option)

    items = []
    for index, value in enumerate(option.values):
        input_id = f"{group_id}_{index}"
        input_attrs = {
            'type': 'radio',
            'id': input_id,
            'name': option.field_name,
            'value': value.label,
            'class': 'product-option__radio-input',
            'data-option-id': option.id,
            'checked': value.label == selected,
            # one required radio makes the whole group required
            'required': required and index == 0,
        }
        items.append((flatatt(input_attrs), input_id, value.label))

    return format_html(
        '<div{}>{}<div class="product-option__radio-group">{}</div></div>',
        flatatt(_container_attrs(option, 'radio')),
        _label(option, context),
        format_html_join(
            '',
            '<div class="product-option__radio-item"><input{}>'
            '<label for="{}" class="product-option__radio-label">{}</label></div>',
            items
        )
    )


Renderer = Callable[[OptionDefinition, RenderContext], SafeString]

RENDERERS: Dict[OptionType, Renderer] = {
    OptionType.TEXT: render_text_option,
    OptionType.NUMBER: render_number_option,
    OptionType.DROPDOWN: render_dropdown_option,
    OptionType.DROPDOWN_THUMBNAIL: render_dropdown_thumbnail_option,
    OptionType.RADIO: render_radio_option,
}

_missing = set(OptionType) - set(RENDERERS)
if _missing:
    raise ImproperlyConfigured(
        f"No renderer for option types: {', '.join(sorted(t.value for t in _missing))}"
    )


# =============================================================================
# Conditional wrapping and composition
# =============================================================================

def wrap_conditional(fragment: SafeString, dependency: Dependency) -> SafeString:
    """
    Wrap a rendered option in the container the storefront toggles when the
    governing radio changes.
    """
    attrs = {
        'class': 'conditional-option',
        'data-depend-on': dependency.depends_on,
        'data-expected-value': dependency.expected_value,
        'data-option-id': dependency.option_id,
    }
    if not dependency.visible:
        attrs['hidden'] = True
        attrs['style'] = 'display: none;'
    return format_html('<div{}>{}</div>', flatatt(attrs), fragment)


def render_option(option: OptionDefinition, context: RenderContext) -> SafeString:
    fragment = RENDERERS[option.type](option, context)
    dependency = context.resolver.dependency_for(option.id)
    if dependency is None:
        return fragment
    return wrap_conditional(fragment, dependency)


def _render_group(
    options: List[OptionDefinition],
    selections: Optional[Mapping[str, str]],
    styles: StyleRegistry,
    settings: StorefrontSettings
) -> List[SafeString]:
    context = RenderContext(
        resolver=VisibilityResolver(options, selections),
        styles=styles,
        settings=settings,
    )
    fragments = []
    for option in options:
        try:
            fragments.append(render_option(option, context))
        except (ValueError, ArithmeticError):
            logger.exception("Skipping option %s that could not be rendered", option.id)
    return fragments


def _compose(styles: StyleRegistry, fragments: List[SafeString]) -> SafeString:
    if not fragments:
        return mark_safe('')
    return format_html(
        '<div class="product-options">{}{}<script src="{}" defer></script></div>',
        styles.render(),
        format_html_join('', '{}', ((fragment,) for fragment in fragments)),
        static(SCRIPT_PATH)
    )


def render_option_set(
    options: Iterable[OptionDefinition],
    selections: Optional[Mapping[str, str]] = None,
    settings: Optional[StorefrontSettings] = None
) -> SafeString:
    """
    Render the options of one option set, styles first.

    Args:
        options: Option definitions in display order
        selections: Current radio selections by option id; radios without
            one start at their first value
        settings: Storefront settings, defaults to ``settings.PRODUCT_OPTIONS``
    """
    options = list(options)
    styles = register_styles(StyleRegistry(), {option.type for option in options})
    fragments = _render_group(options, selections, styles, settings or get_storefront_settings())
    return _compose(styles, fragments)


def render_product_options(
    groups: Iterable[Iterable[OptionDefinition]],
    settings: Optional[StorefrontSettings] = None
) -> SafeString:
    """
    Render every option set of a product page with a single stylesheet.

    Each group gets its own resolver; dependencies never cross sets.
    """
    groups = [list(options) for options in groups]
    styles = register_styles(
        StyleRegistry(),
        {option.type for options in groups for option in options}
    )
    settings = settings or get_storefront_settings()

    fragments = []
    for options in groups:
        fragments.extend(_render_group(options, None, styles, settings))
    return _compose(styles, fragments)
