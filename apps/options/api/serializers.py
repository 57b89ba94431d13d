from rest_framework import serializers
from apps.options.models import OptionSet, Option


# =============================================================================
# Option Serializers
# =============================================================================

class OptionSerializer(serializers.ModelSerializer):
    """Storefront shape of an option (camelCase keys, string ids)."""
    id = serializers.SerializerMethodField()
    dependOnOptionId = serializers.SerializerMethodField()
    showWhenValue = serializers.CharField(source='show_when_value', read_only=True)

    class Meta:
        model = Option
        fields = [
            'id', 'name', 'type', 'required', 'values', 'price',
            'dependOnOptionId', 'showWhenValue', 'position'
        ]

    def get_id(self, obj):
        return str(obj.pk)

    def get_dependOnOptionId(self, obj):
        return str(obj.depend_on_id) if obj.depend_on_id else None


class OptionSetSerializer(serializers.ModelSerializer):
    options = OptionSerializer(many=True, read_only=True)
    applyToAll = serializers.BooleanField(source='apply_to_all', read_only=True)
    productTags = serializers.CharField(source='product_tags', read_only=True)

    class Meta:
        model = OptionSet
        fields = [
            'id', 'name', 'shop', 'active', 'applyToAll', 'productTags',
            'options', 'created_at', 'updated_at'
        ]


class OptionSetListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for option set lists."""
    option_count = serializers.SerializerMethodField()

    class Meta:
        model = OptionSet
        fields = ['id', 'name', 'shop', 'active', 'apply_to_all', 'product_tags', 'option_count']

    def get_option_count(self, obj):
        return len(obj.options.all())


# =============================================================================
# Storefront Request Serializers
# =============================================================================

class SelectionsSerializer(serializers.Serializer):
    """
    Customer answers.

    For visibility checks the keys are radio option ids; for line properties
    they are option names, as posted in ``properties[<name>]``.
    """
    selections = serializers.DictField(
        child=serializers.CharField(allow_blank=True),
        required=False,
        default=dict
    )
