from .serializers import (
    OptionSerializer,
    OptionSetSerializer,
    OptionSetListSerializer,
    SelectionsSerializer,
)

__all__ = [
    'OptionSerializer',
    'OptionSetSerializer',
    'OptionSetListSerializer',
    'SelectionsSerializer',
]
