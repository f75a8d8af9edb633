from django.apps import AppConfig


class RatesConfig(AppConfig):
    name = 'apps.rates'
    verbose_name = 'Rate tables'

    def ready(self):
        # Load (and validate) the tables at process start
        from apps.rates.loaders import get_rate_tables
        get_rate_tables()
