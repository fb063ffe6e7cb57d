from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.utils import timezone

from inventory.models import StockItem


class Command(BaseCommand):
    help = "Seed a small catalog of stock items for a demo till"

    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding stock items..."))

        today = timezone.localdate()

        # (barcode, name, category, retail, cost, stock)
        items = [
            ("4790001000011", "Basmati Rice 5kg", "Grocery", "2450.00", "2100.00", 40),
            ("4790001000028", "Dhal 1kg", "Grocery", "420.00", "360.00", 60),
            ("4790001000035", "Coconut Oil 750ml", "Grocery", "980.00", "850.00", 25),
            ("4790001000042", "Milk Powder 400g", "Dairy", "1150.00", "1020.00", 18),
            ("4790001000059", "Exercise Book 120pg", "Stationery", "240.00", "190.00", 100),
            ("4790001000066", "Ballpoint Pen (Blue)", "Stationery", "45.00", "30.00", 200),
            ("4790001000073", "LED Bulb 9W", "Electrical", "650.00", "520.00", 8),
            ("4790001000080", "Dish Soap 500ml", "Household", "360.00", "290.00", 5),
        ]

        created = 0
        for barcode, name, category, retail, cost, stock in items:
            _, was_created = StockItem.objects.get_or_create(
                barcode=barcode,
                defaults={
                    "name": name,
                    "category": category,
                    "retail_price": Decimal(retail),
                    "unit_cost": Decimal(cost),
                    "current_stock": stock,
                    "received_date": today,
                    "expiry_date": today + timedelta(days=365) if category == "Dairy" else None,
                },
            )
            created += int(was_created)

        self.stdout.write(self.style.SUCCESS(f"Stock items seeded. created={created}"))
