import logging

from django.db import transaction

from .models import Client
from .phone import canonical_phone

logger = logging.getLogger(__name__)


@transaction.atomic
def upsert_client_by_phone(full_name, phone, email="", notes=""):
    """
    Find a client by canonical phone or create one.

    On a phone collision the existing client keeps its identity; the name is
    replaced and the email only when a new one is given.

    Returns:
        (Client, created)
    """
    phone = canonical_phone(phone)
    full_name = full_name.strip()
    email = (email or "").strip()

    client = Client.objects.select_for_update().filter(phone=phone).first()
    if client is None:
        client = Client.objects.create(full_name=full_name, phone=phone, email=email, notes=notes or "")
        logger.info(f"Created client {client.id} for phone {phone}")
        return client, True

    update_fields = []
    if full_name and client.full_name != full_name:
        client.full_name = full_name
        update_fields.append("full_name")
    if email and client.email != email:
        client.email = email
        update_fields.append("email")
    if update_fields:
        client.save(update_fields=update_fields + ["updated_at"])
        logger.info(f"Merged booking details into client {client.id}: {update_fields}")

    return client, False
