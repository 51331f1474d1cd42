"""
URL configuration for saffron_django_app project.

All routes live under ``api/spicedb/`` and answer with JSON, except the
schema source endpoint, which speaks ``text/plain``.
"""
from django.urls import path

from . import views

urlpatterns = [
    path('api/spicedb/terminal', views.terminal, name='terminal'),
    path('api/spicedb/schema', views.schema, name='schema'),
    path('api/spicedb/schema/namespaces', views.schema_namespaces, name='schema_namespaces'),
    path('api/spicedb/schema/highlight', views.schema_highlight, name='schema_highlight'),
]
