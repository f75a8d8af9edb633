"""
URL configuration for the PLUS+ Calculator.
"""

from django.urls import include, path

from apps.core.views import health_check

urlpatterns = [
    path('health/', health_check, name='health-check'),
    path('api/', include('apps.rates.urls')),
    path('api/', include('apps.pricing.urls')),
]
