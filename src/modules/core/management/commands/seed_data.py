from __future__ import annotations

import random

from django.core.management.base import BaseCommand

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InsufficientStock
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

CATALOG = [
    ("ELEC-001", "Wireless Noise-Cancelling Headphones", 29999, 42),
    ("ELEC-002", "Mechanical Keyboard - TKL", 8999, 75),
    ("ELEC-003", "USB-C Hub 7-in-1", 4999, 120),
    ("ELEC-004", '27" 4K Monitor', 54999, 18),
    ("FURN-001", "Ergonomic Office Chair", 89999, 10),
    ("FURN-002", "Standing Desk Converter", 24999, 30),
    ("FURN-003", "LED Desk Lamp with USB Charging", 3999, 85),
    ("ELEC-005", "Webcam 1080p with Microphone", 7999, 60),
    ("ELEC-006", "Laptop Stand Aluminum", 2999, 200),
    ("ELEC-007", "Wireless Mouse - Ergonomic", 4499, 95),
    ("FURN-004", "Cable Management Box", 1999, 150),
    ("ELEC-008", "Monitor Light Bar", 3499, 70),
]


class Command(BaseCommand):
    help = "Seed the catalog with sample products and optionally place sample orders."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=0,
            help="Number of sample orders to place after seeding products.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        products, created = self._seed_products()
        orders_created = self._seed_orders(products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"products={len(products)} (new={created}), "
                f"orders={orders_created}"
            )
        )

    def _seed_products(self) -> tuple[list[Product], int]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        created_count = 0
        for sku, name, price_cents, stock in CATALOG:
            product, created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "price_cents": price_cents,
                    "stock_quantity": stock,
                },
            )
            products.append(product)
            created_count += int(created)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products, created_count

    def _seed_orders(self, products: list[Product], count: int) -> int:
        if count <= 0:
            return 0

        self.stdout.write("Creating orders...")
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        orders_created = 0
        for _ in range(count):
            picks = random.sample(products, k=random.randint(1, 3))
            dto = CreateOrderDTO(
                items=[
                    CreateOrderItemDTO(product_id=product.id, quantity=random.randint(1, 3))
                    for product in picks
                ]
            )
            try:
                service.place_order(dto)
            except InsufficientStock as exc:
                self.stdout.write(self.style.WARNING(f"Skipped order: {exc}"))
                continue
            orders_created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
