""" Review Urls. """

from django.urls import path

from formreview.review import views

urlpatterns = [
    path('submissions/<uuid:submission_uuid>/reviews', views.reviews_view, name='submission-reviews'),
    path('orgs/<int:org_id>/review-queue', views.review_queue_view, name='review-queue'),
]
