"""
URL configuration for the WellnessWay directory client.

The `urlpatterns` list routes URLs to views.  All pages come from the
directory app; Prometheus metrics are exposed at ``/metrics``.
"""
from django.urls import path, include

urlpatterns = [
    # django_prometheus.urls serves ``metrics`` itself
    path('', include('django_prometheus.urls')),
    # Pages, guards and the catch-all redirect live in the directory app
    path('', include('directory.routers')),
]
