"""
Checkout cart transform: folds option surcharges into the unit price.

The checkout pricing engine calls ``cart_transform_run`` on every cart
recalculation. A line carrying a positive ``_price`` signal is replaced by a
single line at ``unit price + signal``. The replacement's private
``_all_properties`` blob carries a processed-marker, so running the transform
again over its own output changes nothing.

The transform keeps no state between calls; every decision is derived from the
line's own attributes.
"""

import copy
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .money import parse_amount

logger = logging.getLogger(__name__)

PRICE_ATTRIBUTE = '_price'
PROPERTIES_ATTRIBUTE = '_all_properties'
PROCESSED_MARKER = '_cart_transform_processed'

# Transform bookkeeping, never carried into the replacement's visible attributes
EXCLUDED_ATTRIBUTES = frozenset({PROCESSED_MARKER, PRICE_ATTRIBUTE, PROPERTIES_ATTRIBUTE})


class LineState(Enum):
    UNPROCESSED = 'unprocessed'
    PROCESSED = 'processed'
    NO_SIGNAL = 'no_signal'


@dataclass(frozen=True)
class CartLine:
    id: str
    merchandise_id: str
    unit_price: Optional[Decimal]
    attribute_blob: Optional[str]
    price_signal: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartLine':
        """
        Read one line of the checkout function input.

        Raises:
            KeyError, TypeError: the line has no id or no merchandise
        """
        cost = (data.get('cost') or {}).get('amountPerQuantity') or {}
        return cls(
            id=str(data['id']),
            merchandise_id=str(data['merchandise']['id']),
            unit_price=parse_amount(cost.get('amount')),
            attribute_blob=_attribute_value(data.get('attribute')),
            price_signal=_attribute_value(data.get('priceAttribute')),
        )


def _attribute_value(attribute: Any) -> Optional[str]:
    if isinstance(attribute, dict):
        value = attribute.get('value')
        return None if value is None else str(value)
    return None


def parse_attribute_blob(raw: Optional[str]) -> Dict[str, str]:
    """
    Parse the serialized property map of a line.

    Missing or malformed blobs yield an empty map.
    """
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed attribute blob: %r", raw[:200])
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring attribute blob that is not an object: %r", raw[:200])
        return {}
    return {
        str(key): '' if value is None else str(value)
        for key, value in data.items()
    }


def classify_line(line: CartLine, attributes: Dict[str, str]) -> Tuple[LineState, Optional[Decimal]]:
    """
    Decide what to do with a line.

    Returns:
        Tuple of (state, additional price for UNPROCESSED lines)
    """
    additional = parse_amount(line.price_signal)
    if additional is None or additional <= 0 or line.unit_price is None:
        return LineState.NO_SIGNAL, None
    if PROCESSED_MARKER in attributes:
        return LineState.PROCESSED, None
    return LineState.UNPROCESSED, additional


def expand_line(line: CartLine, attributes: Dict[str, str], new_unit_price: Decimal) -> Dict[str, Any]:
    """Replace ``line`` with one line at the new fixed unit price."""
    carried = {
        key: value for key, value in attributes.items()
        if key not in EXCLUDED_ATTRIBUTES
    }
    private = dict(carried)
    private[PROCESSED_MARKER] = 'true'

    item_attributes = [{'key': key, 'value': value} for key, value in carried.items()]
    item_attributes.append({
        'key': PROPERTIES_ATTRIBUTE,
        'value': json.dumps(private, ensure_ascii=False),
    })

    return {
        'lineExpand': {
            'cartLineId': line.id,
            'expandedCartItems': [
                {
                    'merchandiseId': line.merchandise_id,
                    'quantity': 1,
                    'price': {
                        'adjustment': {
                            'fixedPricePerUnit': {
                                'amount': new_unit_price,
                            },
                        },
                    },
                    'attributes': item_attributes,
                },
            ],
        },
    }


def transform_line(line: CartLine) -> Optional[Dict[str, Any]]:
    attributes = parse_attribute_blob(line.attribute_blob)
    state, additional = classify_line(line, attributes)

    if state is LineState.PROCESSED:
        logger.debug("Line %s already processed, skipping", line.id)
        return None
    if state is LineState.NO_SIGNAL:
        return None

    new_unit_price = line.unit_price + additional
    if not new_unit_price.is_finite():
        return None

    logger.info(
        "Adjusting line %s: %s + %s = %s",
        line.id, line.unit_price, additional, new_unit_price
    )
    return expand_line(line, attributes, new_unit_price)


def cart_transform_run(payload: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Run the transform over a cart snapshot.

    Args:
        payload: ``{"cart": {"lines": [...]}}`` as sent by the checkout

    Returns:
        ``{"operations": [...]}``; an empty cart yields no operations
    """
    cart = (payload or {}).get('cart')
    lines = cart.get('lines') if isinstance(cart, dict) else None
    if not lines or not isinstance(lines, list):
        return {'operations': []}

    operations = []
    for raw_line in lines:
        try:
            operation = transform_line(CartLine.from_dict(raw_line))
        except (AttributeError, KeyError, TypeError, ValueError, ArithmeticError):
            logger.exception("Skipping cart line that could not be transformed")
            continue
        if operation is not None:
            operations.append(operation)

    logger.info("Cart transform produced %d operation(s) for %d line(s)", len(operations), len(lines))
    return {'operations': operations}


def apply_operations(payload: Dict[str, Any], result: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply transform operations to a cart snapshot, as the checkout does.

    Expanded quantities are per unit of the parent line. Expanded lines keep
    the original ``priceAttribute``; the processed-marker in their
    ``_all_properties`` blob is what stops a second adjustment.
    """
    expansions = {
        operation['lineExpand']['cartLineId']: operation['lineExpand']
        for operation in result.get('operations', [])
        if 'lineExpand' in operation
    }

    lines = []
    for raw_line in ((payload or {}).get('cart') or {}).get('lines') or []:
        expansion = expansions.get(str(raw_line.get('id')))
        if expansion is None:
            lines.append(copy.deepcopy(raw_line))
            continue

        for index, item in enumerate(expansion['expandedCartItems']):
            attributes = {attr['key']: attr['value'] for attr in item.get('attributes', [])}
            amount = item['price']['adjustment']['fixedPricePerUnit']['amount']
            blob = attributes.get(PROPERTIES_ATTRIBUTE)
            lines.append({
                'id': f"{raw_line['id']}/{index}",
                'quantity': _line_quantity(raw_line) * item['quantity'],
                'merchandise': {'id': item['merchandiseId']},
                'cost': {'amountPerQuantity': {'amount': str(amount)}},
                'attribute': {'value': blob} if blob is not None else None,
                'priceAttribute': copy.deepcopy(raw_line.get('priceAttribute')),
            })

    return {'cart': {'lines': lines}}


def _line_quantity(raw_line: Dict[str, Any]) -> int:
    try:
        return max(int(raw_line.get('quantity') or 1), 1)
    except (TypeError, ValueError):
        return 1
