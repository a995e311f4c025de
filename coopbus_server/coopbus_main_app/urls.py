from django.urls import path, include
from rest_framework import routers

from .views import FrequencyViewSet, TripViewSet, TicketViewSet

router = routers.DefaultRouter()
router.register(r"frequencies", FrequencyViewSet, basename="frequencies")
router.register(r"trips", TripViewSet, basename="trips")
router.register(r"tickets", TicketViewSet, basename="tickets")

urlpatterns = [
    path('', include(router.urls)),
]
