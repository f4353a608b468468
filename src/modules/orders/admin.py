from django.contrib import admin

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import annotated_orders


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    fields = ("product", "quantity", "unit_price_cents", "subtotal_cents")
    readonly_fields = fields
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Orders are read-only here; they are placed through the API."""

    list_display = ("id", "created_at", "total_cents", "item_count")
    inlines = [OrderItemInline]

    def get_queryset(self, request):
        return annotated_orders()

    @admin.display(ordering="total_cents")
    def total_cents(self, obj):
        return obj.total_cents

    @admin.display(ordering="item_count")
    def item_count(self, obj):
        return obj.item_count

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
