"""
URL configuration for backend project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Gemstone Trade Manager Admin Panel"
admin.site.site_title = "Gemstone Trade Manager Admin Portal"
admin.site.index_title = "Welcome to Anantya Stoneworks Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('backend.core.urls')),
    path('api/', include('backend.parties.urls')),
    path('api/', include('backend.inventory.urls')),
    path('api/', include('backend.sales.urls')),
    path('api/', include('backend.certifications.urls')),
    path('api/', include('backend.consultations.urls')),
    path('api/', include('backend.tasks.urls')),
    path('api/', include('backend.tools.urls')),
    path('api/', include('backend.assistant.urls')),
    path('api/', include('backend.reports.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
