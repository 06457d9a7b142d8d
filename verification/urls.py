# verification/urls.py
from django.urls import path
from .views import CompareEmbeddingsView, CompareFacesView, ThresholdsView

urlpatterns = [
    path("compare/", CompareEmbeddingsView.as_view(), name="compare_embeddings"),
    path("compare-faces/", CompareFacesView.as_view(), name="compare_faces"),
    path("thresholds/", ThresholdsView.as_view(), name="thresholds"),
]
