from django.urls import path
from .views import consultation_list_create, consultation_detail

urlpatterns = [
    path('consultations/', consultation_list_create, name='consultation-list-create'),
    path('consultations/<int:pk>/', consultation_detail, name='consultation-detail'),
]
