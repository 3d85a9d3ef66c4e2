from django.db import models
from django.utils.translation import gettext_lazy as _


class Client(models.Model):
    full_name = models.CharField(_("Full name"), max_length=120)
    phone = models.CharField(_("Phone"), max_length=10, unique=True, help_text=_("Digits only, 05XXXXXXXX"))
    email = models.EmailField(_("Email"), blank=True)
    notes = models.TextField(_("Notes"), blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["full_name"]

    def __str__(self):
        return f"{self.full_name} ({self.phone})"
