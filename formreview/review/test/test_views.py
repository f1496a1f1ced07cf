"""
Tests for the review JSON views.
"""
import json

import ddt
from mock import patch

from django.urls import reverse

from formreview.forms.models import VisibilityMode
from formreview.review.api.store import ReviewStore
from formreview.review.errors import ReviewInternalError
from formreview.review.models import Review

from .base import SCORES_A, SCORES_B, ReviewTestBase

UNKNOWN_UUID = "00000000-0000-0000-0000-000000000000"


@ddt.ddt
class ReviewsViewTest(ReviewTestBase):
    """
    GET and POST on a submission's reviews.
    """

    def url(self, submission_uuid=None):
        return reverse('submission-reviews', kwargs={'submission_uuid': submission_uuid or self.submission_uuid})

    def post_review(self, payload, user=None):
        self.client.force_login(user or self.alice)
        return self.client.post(self.url(), data=json.dumps(payload), content_type='application/json')

    def test_login_required(self):
        response = self.client.get(self.url())
        assert response.status_code == 302

    def test_method_not_allowed(self):
        self.client.force_login(self.alice)
        response = self.client.delete(self.url())
        assert response.status_code == 405

    def test_get_reviews(self):
        self.submit(self.bob, SCORES_B)
        self.submit(self.alice, SCORES_A)
        self.client.force_login(self.alice)

        response = self.client.get(self.url())
        assert response.status_code == 200
        body = response.json()
        assert body['can_see_others'] is True
        assert body['can_see_aggregates'] is True
        assert body['my_review']['latest_revision']['scores'] == SCORES_A
        assert [review['reviewer']['id'] for review in body['others']] == [self.bob.id]
        assert body['aggregate']['reviews_count'] == 2
        assert body['aggregate']['composite_score'] == "4.0000"

    def test_aggregate_hidden(self):
        self.set_form_settings(visibility_mode=VisibilityMode.NEVER)
        self.submit(self.alice, SCORES_A)
        self.client.force_login(self.alice)

        body = self.client.get(self.url()).json()
        assert body['can_see_aggregates'] is False
        assert body['aggregate'] is None

    def test_save_draft(self):
        response = self.post_review({'scores': SCORES_A, 'comment': "Draft"})
        assert response.status_code == 200
        body = response.json()
        assert body['state'] == "draft"
        assert body['latest_revision']['comment'] == "Draft"
        assert body['warnings'] == []

    def test_submit(self):
        response = self.post_review({'scores': SCORES_A, 'submit': True})
        assert response.status_code == 200
        assert response.json()['state'] == "submitted"

    def test_invalid_json(self):
        self.client.force_login(self.alice)
        response = self.client.post(self.url(), data="{not json", content_type='application/json')
        assert response.status_code == 400

    @ddt.data(
        {},
        {'scores': "five"},
        {'scores': SCORES_A, 'submit': "maybe"},
    )
    def test_invalid_payload(self, payload):
        response = self.post_review(payload)
        assert response.status_code == 400
        assert 'field_errors' in response.json()

    @ddt.data(
        {"q1": "5", "q2": 4},
        {"q1": 5, "q2": 4.0},
        {"q1": True, "q2": 4},
        {"q1": "high", "q2": 4},
    )
    def test_score_not_an_integer(self, scores):
        response = self.post_review({'scores': scores, 'submit': True})
        assert response.status_code == 400
        assert response.json()['question_id'] in scores
        assert not Review.objects.filter(reviewer=self.alice).exists()

    def test_score_out_of_range(self):
        response = self.post_review({'scores': {"q1": 9, "q2": 3}, 'submit': True})
        assert response.status_code == 400
        assert response.json()['question_id'] == "q1"

    def test_missing_required_question(self):
        response = self.post_review({'scores': {"q1": 3}})
        assert response.status_code == 400
        assert response.json()['question_id'] == "q2"

    @ddt.data("viewer", "outsider")
    def test_forbidden(self, user_attr):
        response = self.post_review({'scores': SCORES_A}, user=getattr(self, user_attr))
        assert response.status_code == 403

    def test_unknown_submission(self):
        self.client.force_login(self.alice)
        assert self.client.get(self.url(UNKNOWN_UUID)).status_code == 404

    def test_resubmit_different_scores(self):
        self.post_review({'scores': SCORES_A, 'submit': True})
        response = self.post_review({'scores': SCORES_B, 'submit': True})
        assert response.status_code == 409

    def test_resubmit_same_scores(self):
        first = self.post_review({'scores': SCORES_A, 'submit': True}).json()
        response = self.post_review({'scores': SCORES_A, 'submit': True})
        assert response.status_code == 200
        assert response.json()['submitted_at'] == first['submitted_at']

    @patch.object(ReviewStore, 'upsert_draft')
    def test_internal_error(self, mock_draft):
        mock_draft.side_effect = ReviewInternalError("Bad things happened")
        response = self.post_review({'scores': SCORES_A})
        assert response.status_code == 500
        assert response.json() == {'error': "An unexpected error occurred"}


class ReviewQueueViewTest(ReviewTestBase):
    """
    GET on an organization's review queue.
    """

    def url(self, org_id=None):
        return reverse('review-queue', kwargs={'org_id': org_id or self.organization.id})

    def test_queue(self):
        self.client.force_login(self.alice)
        response = self.client.get(self.url())
        assert response.status_code == 200
        body = response.json()
        assert [item['uuid'] for item in body['results']] == [self.submission_uuid]
        assert body['page'] == 1

    def test_invalid_page(self):
        self.client.force_login(self.alice)
        assert self.client.get(self.url(), {'page': 'last'}).status_code == 400

    def test_forbidden(self):
        self.client.force_login(self.viewer)
        assert self.client.get(self.url()).status_code == 403

    def test_login_required(self):
        assert self.client.get(self.url()).status_code == 302
