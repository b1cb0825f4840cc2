"""medilens URL Configuration

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/stable/topics/http/urls/
"""
from django.urls import path, include
from reminders import urls as reminders_urls

urlpatterns = [
    path('api/v1/reminders/', include(reminders_urls, namespace='reminders_api')),
]
