from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class NotificationLog(models.Model):
    """Log every booking notification attempt"""
    CHANNEL_CHOICES = [
        ('webhook', 'Webhook'),
        ('whatsapp', 'WhatsApp'),
    ]

    STATUS_CHOICES = [
        ('pending', _('Pending')),
        ('sent', _('Sent')),
        ('failed', _('Failed')),
    ]

    # Who
    client = models.ForeignKey(
        'clients.Client',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications'
    )
    appointment = models.ForeignKey(
        'appointments.Appointment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications'
    )

    # What
    channel = models.CharField(_("Channel"), max_length=10, choices=CHANNEL_CHOICES)
    payload = models.JSONField(_("Payload"), default=dict, blank=True)
    message = models.TextField(_("Message"), blank=True)

    # When & Status
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=STATUS_CHOICES,
        default='pending'
    )
    sent_at = models.DateTimeField(_("Sent At"), null=True, blank=True)

    # External IDs (for tracking with providers)
    external_id = models.CharField(
        _("External ID"),
        max_length=100,
        blank=True,
        help_text=_("Twilio Message SID or webhook response code")
    )

    # Error tracking
    error_message = models.TextField(_("Error Message"), blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Notification Log")
        verbose_name_plural = _("Notification Logs")
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', '-created_at'], name='notif_status_created_idx'),
            models.Index(fields=['appointment'], name='notif_appointment_idx'),
        ]

    def __str__(self):
        return f"{self.channel} for appointment {self.appointment_id} - {self.status}"

    def mark_sent(self, external_id=""):
        self.status = 'sent'
        self.sent_at = timezone.now()
        self.external_id = str(external_id or "")[:100]
        self.save(update_fields=['status', 'sent_at', 'external_id'])

    def mark_failed(self, error_message):
        self.status = 'failed'
        self.error_message = error_message
        self.save(update_fields=['status', 'error_message'])
