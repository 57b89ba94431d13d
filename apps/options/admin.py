from django.contrib import admin
from django.utils.html import format_html
from adminsortable2.admin import SortableAdminBase, SortableInlineAdminMixin
from simple_history.admin import SimpleHistoryAdmin

from .choices import OptionType
from .models import OptionSet, Option


# =============================================================================
# Inlines
# =============================================================================

class OptionInline(SortableInlineAdminMixin, admin.StackedInline):
    model = Option
    fk_name = 'option_set'
    extra = 0
    fields = [
        'name', 'type', 'required', 'values', 'price',
        'depend_on', 'show_when_value', 'position'
    ]

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        if db_field.name == 'depend_on':
            kwargs['queryset'] = Option.objects.filter(type=OptionType.RADIO).select_related('option_set')
        return super().formfield_for_foreignkey(db_field, request, **kwargs)


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(OptionSet)
class OptionSetAdmin(SortableAdminBase, SimpleHistoryAdmin):
    list_display = ['name', 'shop', 'active', 'targeting', 'option_count', 'updated_at']
    list_filter = ['active', 'apply_to_all', 'shop']
    list_editable = ['active']
    search_fields = ['name', 'shop', 'product_tags']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [OptionInline]

    fieldsets = (
        (None, {
            'fields': ('name', 'shop', 'active')
        }),
        ('Products', {
            'fields': ('apply_to_all', 'product_tags')
        }),
        ('Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['activate_sets', 'deactivate_sets']

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related('options')

    def option_count(self, obj):
        return len(obj.options.all())
    option_count.short_description = 'Options'

    def targeting(self, obj):
        if obj.apply_to_all:
            return format_html('<span style="color: green;">{}</span>', 'All products')
        return ', '.join(obj.tag_list) or '-'
    targeting.short_description = 'Applies to'

    @admin.action(description='Activate selected option sets')
    def activate_sets(self, request, queryset):
        count = queryset.update(active=True)
        self.message_user(request, f'{count} option sets activated.')

    @admin.action(description='Deactivate selected option sets')
    def deactivate_sets(self, request, queryset):
        count = queryset.update(active=False)
        self.message_user(request, f'{count} option sets deactivated.')


@admin.register(Option)
class OptionAdmin(SimpleHistoryAdmin):
    list_display = ['name', 'type', 'option_set', 'required', 'price', 'condition']
    list_filter = ['type', 'required', 'option_set__shop']
    search_fields = ['name', 'option_set__name']
    autocomplete_fields = ['option_set']
    raw_id_fields = ['depend_on']

    def condition(self, obj):
        if not obj.depend_on_id:
            return '-'
        return format_html('{} = <em>{}</em>', obj.depend_on.name, obj.show_when_value)
    condition.short_description = 'Shown when'


# =============================================================================
# Admin Site Configuration
# =============================================================================

admin.site.site_header = 'Product Options Admin'
admin.site.site_title = 'Product Options'
admin.site.index_title = 'Administration'
