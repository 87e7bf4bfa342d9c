"""Django app configuration for Custodian."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class CustodianConfig(AppConfig):
    """Configuration for Custodian app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "custodian"
    verbose_name = _("Custódia de Inventário")
