from django.apps import AppConfig


class DrfShortIdConfig(AppConfig):
    name = "drf_shortid"
    verbose_name = "DRF Short ID"

    def ready(self):
        # register configuration checks
        import drf_shortid.checks  # noqa: F401
