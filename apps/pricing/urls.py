"""
Pricing URL configuration.
"""

from django.urls import path

from apps.pricing.views import CalculateLoanView

urlpatterns = [
    path('calculate-loan', CalculateLoanView.as_view(), name='calculate-loan'),
]
