from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from django.db.models import Prefetch

from apps.options.models import Option, OptionSet
from apps.options.services import ActiveOptionService
from apps.options.services.money import format_amount
from apps.options.services.surcharge import build_line_properties
from apps.options.services.visibility import VisibilityResolver
from .serializers import (
    OptionSetSerializer,
    OptionSetListSerializer,
    SelectionsSerializer,
)
from .filters import OptionSetFilter


class OptionSetViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for option sets.

    list: List option sets
    retrieve: Get an option set with its options
    active: Option sets shown on a product page
    visibility: Which options are visible for given radio selections
    line_properties: Cart line properties and surcharge for given answers
    """
    queryset = OptionSet.objects.prefetch_related(
        Prefetch('options', queryset=Option.objects.order_by('position', 'id'))
    )
    filterset_class = OptionSetFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'shop', 'product_tags']
    ordering_fields = ['name', 'created_at']
    ordering = ['shop', 'name']

    def get_serializer_class(self):
        if self.action == 'list':
            return OptionSetListSerializer
        return OptionSetSerializer

    @action(detail=False, methods=['get'])
    def active(self, request):
        """
        Active option sets for a product.

        Query params:
            shop: Shop domain (required)
            productTags: Comma separated product tags; omit to get every
                active set of the shop
        """
        shop = request.query_params.get('shop')
        if not shop:
            return Response(
                {'error': 'Shop parameter is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        option_sets = ActiveOptionService.get_option_sets(
            shop,
            request.query_params.get('productTags')
        )
        serializer = OptionSetSerializer(option_sets, many=True, context={'request': request})
        return Response({'optionSets': serializer.data})

    @action(detail=True, methods=['post'])
    def visibility(self, request, pk=None):
        """
        Evaluate conditional display.

        Expected payload:
        {
            "selections": {"<radio option id>": "<value label>"}
        }
        """
        option_set = self.get_object()
        serializer = SelectionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        definitions = option_set.get_definitions()
        resolver = VisibilityResolver(definitions, serializer.validated_data['selections'])
        visibility = resolver.evaluate()

        return Response({
            'visibility': visibility,
            'required': {option.id: resolver.is_required(option) for option in definitions},
            'selections': resolver.selections,
        })

    @action(detail=True, methods=['post'], url_path='line-properties')
    def line_properties(self, request, pk=None):
        """
        Build the cart line for a set of answers.

        Expected payload:
        {
            "selections": {"<option name>": "<answer>"}
        }
        """
        option_set = self.get_object()
        serializer = SelectionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        line = build_line_properties(
            option_set.get_definitions(),
            serializer.validated_data['selections']
        )
        return Response({
            'properties': line.properties,
            'additionalPrice': format_amount(line.additional_price),
            'attributes': line.attributes(),
            'notices': line.notices,
        })
