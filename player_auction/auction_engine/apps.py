from django.apps import AppConfig


class AuctionEngineConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'auction_engine'

    def ready(self):
        # hook up change-version signal receivers
        from . import realtime  # noqa: F401
