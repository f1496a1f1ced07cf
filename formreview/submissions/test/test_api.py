"""
Tests for the submissions API.
"""
import datetime
import uuid

import ddt
import pytz
from freezegun import freeze_time
from mock import patch
from pytest import raises

from django.db import DatabaseError

from formreview.forms import api as forms_api
from formreview.forms.models import Form
from formreview.submissions import api as sub_api
from formreview.submissions.errors import SubmissionInternalError, SubmissionNotFoundError, SubmissionRequestError
from formreview.submissions.models import Submission, SubmissionAggregate
from formreview.submissions.signals import submission_created
from formreview.test_utils import CacheResetTest
from formreview.tests.factories import FormFactory

FORM_SCHEMA = {"fields": [{"id": "pitch", "type": "textarea", "label": "Pitch"}]}

RUBRIC = {"questions": [{"question_id": "impact", "label": "Impact", "weight": "1"}]}

ANSWER = {"pitch": "A very good idea."}


@ddt.ddt
class SubmissionApiTest(CacheResetTest):
    """
    Receiving submissions and reading their aggregates.
    """

    def setUp(self):
        super().setUp()
        self.form = FormFactory(status=Form.DRAFT)
        forms_api.publish_form(self.form.id, FORM_SCHEMA, RUBRIC)

    @freeze_time("2026-03-01 10:00:00")
    def test_create_submission(self):
        submission = sub_api.create_submission(self.form.id, "ada@example.com", ANSWER)

        assert submission['submitter_email'] == "ada@example.com"
        assert submission['data'] == ANSWER
        assert submission['status'] == Submission.STATUS.ungraded
        assert submission['form'] == self.form.id
        assert submission['organization'] == self.form.organization_id
        assert submission['submitted_at'] == datetime.datetime(2026, 3, 1, 10, 0, tzinfo=pytz.utc)

    def test_create_submission_creates_empty_aggregate(self):
        submission = sub_api.create_submission(self.form.id, "ada@example.com", ANSWER)
        assert sub_api.get_aggregate(submission['uuid']) == {
            'reviews_count': 0,
            'composite_score': None,
            'last_review_at': None,
        }

    def test_submission_pins_versions(self):
        first = sub_api.create_submission(self.form.id, "ada@example.com", ANSWER)
        forms_api.publish_form(self.form.id, FORM_SCHEMA, dict(RUBRIC, scale_max=10))
        second = sub_api.create_submission(self.form.id, "grace@example.com", ANSWER)

        first_model = sub_api.get_submission_model(first['uuid'])
        second_model = sub_api.get_submission_model(second['uuid'])
        assert first_model.rubric_version.version == 1
        assert first_model.rubric_version.scale_max == 5
        assert second_model.rubric_version.version == 2
        assert second_model.form_version.version == 2

    @ddt.data(Form.DRAFT, Form.CLOSED, Form.ARCHIVED)
    def test_create_submission_form_not_open(self, status):
        Form.objects.filter(pk=self.form.id).update(status=status)
        with raises(SubmissionRequestError) as error:
            sub_api.create_submission(self.form.id, "ada@example.com", ANSWER)
        assert 'form' in error.value.field_errors

    def test_create_submission_unpublished_form(self):
        form = FormFactory(status=Form.OPEN)
        with raises(SubmissionRequestError):
            sub_api.create_submission(form.id, "ada@example.com", ANSWER)

    def test_create_submission_unknown_form(self):
        with raises(SubmissionRequestError):
            sub_api.create_submission(self.form.id + 1000, "ada@example.com", ANSWER)

    @ddt.data(
        ("not-an-email", ANSWER),
        ("ada@example.com", "not a dict"),
    )
    @ddt.unpack
    def test_create_submission_invalid_payload(self, email, data):
        with raises(SubmissionRequestError):
            sub_api.create_submission(self.form.id, email, data)

    def test_create_submission_too_large(self):
        with raises(SubmissionRequestError):
            sub_api.create_submission(self.form.id, "ada@example.com", {"pitch": "x" * Submission.MAXSIZE})

    def test_create_submission_sends_signal(self):
        with patch.object(submission_created, 'send') as mock_send:
            submission = sub_api.create_submission(self.form.id, "ada@example.com", ANSWER)
        assert str(mock_send.call_args[1]['submission'].uuid) == submission['uuid']

    @patch.object(SubmissionAggregate.objects, 'create')
    def test_create_submission_database_error(self, mock_create):
        mock_create.side_effect = DatabaseError("Bad things happened")
        with raises(SubmissionInternalError):
            sub_api.create_submission(self.form.id, "ada@example.com", ANSWER)
        assert not Submission.objects.exists()

    def test_get_submission(self):
        submission = sub_api.create_submission(self.form.id, "ada@example.com", ANSWER)
        assert sub_api.get_submission(submission['uuid']) == submission

    @ddt.data(str(uuid.uuid4()), "not-a-uuid")
    def test_get_unknown_submission(self, submission_uuid):
        with raises(SubmissionNotFoundError):
            sub_api.get_submission(submission_uuid)

    @ddt.data(str(uuid.uuid4()), "not-a-uuid")
    def test_get_aggregate_unknown_submission(self, submission_uuid):
        assert sub_api.get_aggregate(submission_uuid) is None
