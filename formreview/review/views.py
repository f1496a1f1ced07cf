""" JSON views for reviewing submissions. """
import json
import logging

from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from formreview.review.api import services
from formreview.review.errors import (
    AlreadySubmittedError, ForbiddenError, NotFoundError, ReviewError, ValidationError
)
from formreview.review.serializers import ReviewUpsertSerializer

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name


def error_response(ex):
    """Translate a review error into a JSON response with the matching status code."""
    if isinstance(ex, ValidationError):
        return JsonResponse({'error': str(ex), 'question_id': ex.question_id}, status=400)
    if isinstance(ex, ForbiddenError):
        return JsonResponse({'error': str(ex)}, status=403)
    if isinstance(ex, NotFoundError):
        return JsonResponse({'error': str(ex)}, status=404)
    if isinstance(ex, AlreadySubmittedError):
        return JsonResponse({'error': str(ex)}, status=409)
    return JsonResponse({'error': "An unexpected error occurred"}, status=500)


@login_required()
@require_http_methods(["GET", "POST"])
def reviews_view(request, submission_uuid):
    """
    Read the reviews of a submission visible to the user, or save the user's own review.

    GET returns the visible reviews together with the aggregate, which is
    null when the user may not see it. POST takes `{scores, comment, submit}`
    and returns the saved review.
    """
    review_services = services.build_services()
    try:
        if request.method == "POST":
            return _save_review(request, submission_uuid, review_services)

        response = services.get_visible_reviews(request.user, submission_uuid, services=review_services)
        response['can_see_aggregates'] = services.can_see_aggregates(
            request.user, submission_uuid, services=review_services
        )
        response['aggregate'] = (
            services.get_aggregate(submission_uuid, services=review_services)
            if response['can_see_aggregates'] else None
        )
        return JsonResponse(response)
    except ReviewError as ex:
        return error_response(ex)


@login_required()
@require_http_methods(["GET"])
def review_queue_view(request, org_id):
    """Submissions of the organization waiting for the user's review, one page at a time."""
    try:
        page = int(request.GET.get('page', 1))
    except ValueError:
        return JsonResponse({'error': "page must be an integer"}, status=400)

    try:
        return JsonResponse(services.get_review_queue(request.user, org_id, page=page))
    except ReviewError as ex:
        return error_response(ex)


def _save_review(request, submission_uuid, review_services):
    try:
        body = json.loads(request.body or b"{}")
    except ValueError:
        return JsonResponse({'error': "Request body must be JSON"}, status=400)

    serializer = ReviewUpsertSerializer(data=body)
    if not serializer.is_valid():
        return JsonResponse({'error': "Invalid review", 'field_errors': serializer.errors}, status=400)

    review = services.submit_review(
        submission_uuid,
        request.user,
        serializer.validated_data['scores'],
        comment=serializer.validated_data.get('comment'),
        submit=serializer.validated_data['submit'],
        services=review_services,
    )
    return JsonResponse(review)
