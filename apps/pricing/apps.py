from django.apps import AppConfig


class PricingConfig(AppConfig):
    name = 'apps.pricing'
    verbose_name = 'Loan pricing'

    def ready(self):
        # Reject an unknown PRICING_STRATEGY at process start
        from django.conf import settings

        from apps.pricing.strategies import DEFAULT_STRATEGY, get_strategy
        get_strategy(getattr(settings, 'PRICING_STRATEGY', DEFAULT_STRATEGY))
