from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _

from salon.scheduling.types import ACTIVE_STATUSES, KIND_MANUAL, KIND_SERVICE, BookedInterval, to_minutes


class AppointmentQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status__in=ACTIVE_STATUSES)

    def on_date(self, day):
        return self.filter(date=day)

    def as_intervals(self):
        return [appt.as_interval() for appt in self]


class Appointment(models.Model):
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_CANCELLED = "cancelled"
    STATUS_COMPLETED = "completed"

    STATUS_CHOICES = [
        (STATUS_PENDING, _("Pending")),
        (STATUS_CONFIRMED, _("Confirmed")),
        (STATUS_CANCELLED, _("Cancelled")),
        (STATUS_COMPLETED, _("Completed")),
    ]
    SOURCE_CHOICES = [
        ("client", _("Client")),
        ("admin", _("Admin")),
    ]
    KIND_CHOICES = [
        (KIND_SERVICE, _("Service appointment")),
        (KIND_MANUAL, _("Manual event")),
    ]

    date = models.DateField(_("Date"))
    start_time = models.TimeField(_("Start time"))
    end_time = models.TimeField(_("End time"))
    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        related_name="appointments",
        null=True,
        blank=True,
    )
    services = models.ManyToManyField(
        "catalog.Service",
        through="AppointmentService",
        related_name="appointments",
        blank=True,
    )
    kind = models.CharField(_("Kind"), max_length=16, choices=KIND_CHOICES, default=KIND_SERVICE)
    status = models.CharField(_("Status"), max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    source = models.CharField(_("Source"), max_length=16, choices=SOURCE_CHOICES, default="client")
    notes = models.TextField(_("Notes"), blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AppointmentQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=["date", "start_time"], name="appt_date_start_idx"),
            models.Index(fields=["date", "status"], name="appt_date_status_idx"),
        ]
        ordering = ["date", "start_time"]

    def __str__(self):
        label = self.notes if self.is_manual_event else str(self.client or "")
        return f"{label} @ {self.date:%d/%m} {self.start_time:%H:%M}-{self.end_time:%H:%M}"

    def clean(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({"end_time": _("End time must be after start time.")})
        if self.kind == KIND_MANUAL and self.client_id:
            raise ValidationError({"client": _("Manual events cannot belong to a client.")})

    @property
    def is_manual_event(self):
        return self.kind == KIND_MANUAL

    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES

    @property
    def duration_minutes(self):
        return to_minutes(self.end_time) - to_minutes(self.start_time)

    def ordered_services(self):
        return [link.service for link in self.service_links.all()]

    def service_names(self):
        return ", ".join(s.name for s in self.ordered_services())

    def as_interval(self):
        return BookedInterval.build(
            self.date, self.start_time, self.end_time,
            status=self.status, kind=self.kind, ident=self.pk,
        )


class AppointmentService(models.Model):
    """Selected service of an appointment, kept in selection order"""
    appointment = models.ForeignKey(Appointment, on_delete=models.CASCADE, related_name="service_links")
    service = models.ForeignKey("catalog.Service", on_delete=models.PROTECT, related_name="appointment_links")
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        unique_together = [("appointment", "service")]

    def __str__(self):
        return f"{self.appointment_id} -> {self.service}"


class ServiceAppointmentManager(models.Manager.from_queryset(AppointmentQuerySet)):
    def get_queryset(self):
        return super().get_queryset().filter(kind=KIND_SERVICE)


class ManualEventManager(models.Manager.from_queryset(AppointmentQuerySet)):
    def get_queryset(self):
        return super().get_queryset().filter(kind=KIND_MANUAL)


class ServiceAppointment(Appointment):
    """A client booking for one or more services"""
    objects = ServiceAppointmentManager()

    class Meta:
        proxy = True

    def save(self, *args, **kwargs):
        self.kind = KIND_SERVICE
        super().save(*args, **kwargs)


class ManualEvent(Appointment):
    """An admin calendar block with no client and no services"""
    objects = ManualEventManager()

    class Meta:
        proxy = True

    def save(self, *args, **kwargs):
        self.kind = KIND_MANUAL
        self.client = None
        super().save(*args, **kwargs)


class ScheduleDay(models.Model):
    """
    One row per calendar day. Writers that may create an overlap lock the
    day's row with select_for_update() so bookings for a date are serialized.
    """
    date = models.DateField(unique=True)

    def __str__(self):
        return f"{self.date:%Y-%m-%d}"

    @classmethod
    def lock(cls, day):
        cls.objects.get_or_create(date=day)
        return cls.objects.select_for_update().get(date=day)
