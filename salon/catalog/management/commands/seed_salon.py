import os
import random
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from salon.appointments.booking import available_slots
from salon.appointments.models import Appointment, AppointmentService, ServiceAppointment
from salon.catalog.models import Service
from salon.clients.models import Client
from salon.scheduling.clock import system_clock
from salon.scheduling.types import from_minutes, to_minutes

SERVICE_MENU = [
    # name, minutes, price range
    ("Women's haircut", 45, "150-200"),
    ("Men's haircut", 30, "80-100"),
    ("Blow-dry", 30, "100-150"),
    ("Root color", 60, "250-300"),
    ("Full color", 90, "350-450"),
    ("Highlights", 120, "500-700"),
    ("Keratin treatment", 150, "800-1200"),
]

DEMO_CLIENTS = [
    ("Noa Levi", "0501234567", "noa@example.com"),
    ("Dana Cohen", "0527654321", ""),
    ("Yael Mizrahi", "0541112233", "yael@example.com"),
]


class Command(BaseCommand):
    help = "Seed the studio's service menu and, optionally, demo clients and appointments."

    def add_arguments(self, parser):
        parser.add_argument("--with-users", action="store_true",
                            help="Create a demo staff superuser for the calendar.")
        parser.add_argument("--days", type=int, default=0,
                            help="How many days (from tomorrow) to populate with demo appointments.")

    @transaction.atomic
    def handle(self, *args, **opts):
        self.stdout.write(self.style.MIGRATE_HEADING("Seeding salon data..."))

        if opts["with_users"]:
            self._seed_users()

        services = self._seed_services()

        if opts["days"] > 0:
            clients = self._seed_clients()
            self._seed_appointments(clients, services, days=opts["days"])

        self.stdout.write(self.style.SUCCESS("Done!"))

    # ---------- helpers ----------

    def _seed_users(self):
        User = get_user_model()
        username = os.getenv("SEED_ADMIN_USERNAME", "studio")
        password = os.getenv("SEED_ADMIN_PASSWORD", "Studio123!")

        admin, created = User.objects.get_or_create(
            username=username,
            defaults={"is_staff": True, "is_superuser": True},
        )
        if created:
            admin.set_password(password)
            admin.save()

        self.stdout.write(self.style.SUCCESS(f"Staff user ready: {username}"))

    def _seed_services(self):
        services = []
        for name, minutes, price_range in SERVICE_MENU:
            service, _ = Service.objects.get_or_create(
                name=name,
                defaults={"duration_minutes": minutes, "price_range": price_range},
            )
            services.append(service)
        self.stdout.write(self.style.SUCCESS(f"{len(services)} services ready."))
        return services

    def _seed_clients(self):
        clients = []
        for full_name, phone, email in DEMO_CLIENTS:
            client, _ = Client.objects.get_or_create(
                phone=phone,
                defaults={"full_name": full_name, "email": email},
            )
            clients.append(client)
        self.stdout.write(self.style.SUCCESS(f"{len(clients)} clients ready."))
        return clients

    def _seed_appointments(self, clients, services, days):
        created = 0
        tomorrow = system_clock.now().date() + timedelta(days=1)

        # For each day, take a few free slots (closed days yield none)
        for d in range(days):
            day = tomorrow + timedelta(days=d)
            for _ in range(3):
                service = random.choice(services)
                duration, slots = available_slots(day, [service.id])
                if not slots:
                    continue
                start = random.choice(slots)

                appointment = ServiceAppointment.objects.create(
                    client=random.choice(clients),
                    date=day,
                    start_time=start,
                    end_time=from_minutes(to_minutes(start) + duration),
                    status=Appointment.STATUS_CONFIRMED,
                    source="admin",
                    notes="Demo appointment",
                )
                AppointmentService.objects.create(appointment=appointment, service=service, position=0)
                created += 1

        self.stdout.write(self.style.SUCCESS(f"Created {created} appointments over {days} day(s)."))
