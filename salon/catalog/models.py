from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class ServiceQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def duration_lookup(self, ids=None):
        """id -> duration_minutes, the lookup consumed by duration aggregation"""
        queryset = self if ids is None else self.filter(id__in=ids)
        return dict(queryset.values_list("id", "duration_minutes"))


class Service(models.Model):
    name = models.CharField(_("Service"), max_length=120)
    duration_minutes = models.PositiveIntegerField(
        _("Duration (minutes)"),
        default=30,
        validators=[MinValueValidator(1)],
    )
    is_active = models.BooleanField(_("Active"), default=True)
    price_range = models.CharField(_("Price range"), max_length=60, blank=True)
    description = models.TextField(_("Description"), blank=True)

    objects = ServiceQuerySet.as_manager()

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def as_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "duration_minutes": self.duration_minutes,
            "price_range": self.price_range,
            "description": self.description,
        }
