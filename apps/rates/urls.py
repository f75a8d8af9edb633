"""
Rate table URL configuration.
"""

from django.urls import path

from apps.rates.views import BanksView, ConvertView, RatesView

urlpatterns = [
    path('rates', RatesView.as_view(), name='rates'),
    path('convert', ConvertView.as_view(), name='convert'),
    path('banks', BanksView.as_view(), name='banks'),
]
