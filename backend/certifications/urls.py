from django.urls import path
from .views import (
    certification_list_create, certification_detail,
    certification_pending, certification_advance
)

urlpatterns = [
    path('certifications/', certification_list_create, name='certification-list-create'),
    path('certifications/pending/', certification_pending, name='certification-pending'),
    path('certifications/<int:pk>/', certification_detail, name='certification-detail'),
    path('certifications/<int:pk>/advance/', certification_advance, name='certification-advance'),
]
