from django.contrib import admin

from modules.products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "sku", "name", "price_cents", "stock_quantity", "updated_at")
    search_fields = ("name", "sku")
    readonly_fields = ("created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        # Name and SKU are fixed once the product exists.
        if obj is not None:
            return self.readonly_fields + ("name", "sku")
        return self.readonly_fields
