"""
Tests for the forms API.
"""
import copy
from decimal import Decimal

import ddt
from mock import patch
from pytest import raises

from django.db import DatabaseError

from formreview.forms import api as forms_api
from formreview.forms.errors import FormInternalError, FormNotFoundError, FormRequestError
from formreview.forms.models import Form, RubricQuestion, RubricVersion, VisibilityMode
from formreview.forms.signals import form_published
from formreview.test_utils import CacheResetTest
from formreview.tests.factories import OrganizationFactory

FORM_SCHEMA = {
    "fields": [
        {"id": "name", "type": "text", "label": "Project name"},
        {"id": "pitch", "type": "textarea", "label": "Pitch"},
    ]
}

RUBRIC = {
    "scale_min": 1,
    "scale_max": 5,
    "scale_step": 1,
    "questions": [
        {"question_id": "impact", "label": "Impact", "weight": "0.4"},
        {"question_id": "clarity", "label": "Clarity", "weight": "0.3"},
        {"question_id": "feasibility", "label": "Feasibility", "weight": "0.3", "required": False},
    ],
}


@ddt.ddt
class FormApiTest(CacheResetTest):
    """
    Creating, configuring and publishing forms.
    """

    def setUp(self):
        super().setUp()
        self.organization = OrganizationFactory()
        self.form = forms_api.create_form(self.organization.id, "Demo Day", "demo-day", min_reviews_required=2)

    def test_create_form_defaults(self):
        assert self.form['status'] == Form.DRAFT
        assert self.form['min_reviews_required'] == 2
        assert self.form['visibility_mode'] == VisibilityMode.REVEAL_AFTER_ME_SUBMIT
        assert self.form['visibility_threshold'] is None
        assert self.form['organization'] == self.organization.id

    def test_create_form_duplicate_slug(self):
        with raises(FormRequestError) as error:
            forms_api.create_form(self.organization.id, "Demo Day again", "demo-day")
        assert 'slug' in error.value.field_errors

    def test_same_slug_in_other_organization(self):
        other = OrganizationFactory()
        form = forms_api.create_form(other.id, "Demo Day", "demo-day")
        assert form['organization'] == other.id

    def test_create_form_unknown_organization(self):
        with raises(FormRequestError) as error:
            forms_api.create_form(self.organization.id + 1000, "Nowhere", "nowhere")
        assert 'organization' in error.value.field_errors

    @ddt.data(
        {'min_reviews_required': 0},
        {'visibility_mode': 'SOMETIMES'},
        {'visibility_threshold': 0},
    )
    def test_create_form_invalid_settings(self, form_settings):
        with raises(FormRequestError):
            forms_api.create_form(self.organization.id, "Bad", "bad", **form_settings)

    def test_update_form_settings(self):
        form = forms_api.update_form_settings(
            self.form['id'],
            visibility_mode=VisibilityMode.NEVER,
            min_reviews_required=3,
        )
        assert form['visibility_mode'] == VisibilityMode.NEVER
        assert form['min_reviews_required'] == 3

    def test_update_form_settings_keeps_history(self):
        forms_api.update_form_settings(self.form['id'], visibility_mode=VisibilityMode.NEVER)
        history = Form.objects.get(pk=self.form['id']).history.all()
        assert [record.visibility_mode for record in history] == [
            VisibilityMode.NEVER, VisibilityMode.REVEAL_AFTER_ME_SUBMIT
        ]

    def test_update_form_settings_unknown_setting(self):
        with raises(FormRequestError) as error:
            forms_api.update_form_settings(self.form['id'], slug="renamed")
        assert 'slug' in error.value.field_errors

    def test_update_unknown_form(self):
        with raises(FormNotFoundError):
            forms_api.update_form_settings(self.form['id'] + 1000, status=Form.CLOSED)

    def test_publish_form(self):
        published = forms_api.publish_form(self.form['id'], FORM_SCHEMA, RUBRIC, notes="First round")

        assert published['form_version']['version'] == 1
        assert published['form_version']['notes'] == "First round"
        rubric = published['rubric_version']
        assert rubric['version'] == 1
        assert (rubric['scale_min'], rubric['scale_max'], rubric['scale_step']) == (1, 5, 1)
        assert [question['question_id'] for question in rubric['questions']] == ['impact', 'clarity', 'feasibility']
        assert [question['order_num'] for question in rubric['questions']] == [0, 1, 2]
        assert [question['required'] for question in rubric['questions']] == [True, True, False]

        # A draft form opens on its first publish
        assert Form.objects.get(pk=self.form['id']).status == Form.OPEN

    def test_republish_creates_new_versions(self):
        forms_api.publish_form(self.form['id'], FORM_SCHEMA, RUBRIC)
        rubric = copy.deepcopy(RUBRIC)
        rubric['scale_max'] = 10
        published = forms_api.publish_form(self.form['id'], FORM_SCHEMA, rubric)

        assert published['form_version']['version'] == 2
        assert published['rubric_version']['version'] == 2
        assert RubricVersion.objects.filter(form_id=self.form['id']).count() == 2

        form_version, rubric_version = forms_api.get_latest_versions(self.form['id'])
        assert form_version.version == 2
        assert rubric_version.scale_max == 10

    def test_publish_keeps_closed_form_closed(self):
        forms_api.update_form_settings(self.form['id'], status=Form.CLOSED)
        forms_api.publish_form(self.form['id'], FORM_SCHEMA, RUBRIC)
        assert Form.objects.get(pk=self.form['id']).status == Form.CLOSED

    def test_publish_rubric_defaults(self):
        published = forms_api.publish_form(
            self.form['id'], FORM_SCHEMA, {"questions": [{"question_id": "q", "label": "Q", "weight": 1}]}
        )
        rubric = published['rubric_version']
        assert (rubric['scale_min'], rubric['scale_max'], rubric['scale_step']) == (1, 5, 1)
        assert rubric['questions'][0]['required'] is True

    @ddt.data(
        {"fields": []},
        {},
        ["not", "a", "dict"],
    )
    def test_publish_invalid_schema(self, schema):
        with raises(FormRequestError) as error:
            forms_api.publish_form(self.form['id'], schema, RUBRIC)
        assert 'schema' in error.value.field_errors

    @ddt.data(
        {"questions": []},
        {"scale_min": 5, "scale_max": 1},
        {"scale_step": 0},
        {"scale_step": -1},
        {"scale_min": "one"},
    )
    def test_publish_invalid_rubric(self, changes):
        rubric = dict(copy.deepcopy(RUBRIC), **changes)
        with raises(FormRequestError):
            forms_api.publish_form(self.form['id'], FORM_SCHEMA, rubric)
        assert not RubricVersion.objects.filter(form_id=self.form['id']).exists()

    @ddt.data("1.5", "-0.1")
    def test_publish_weight_out_of_range(self, weight):
        rubric = copy.deepcopy(RUBRIC)
        rubric['questions'][0]['weight'] = weight
        with raises(FormRequestError):
            forms_api.publish_form(self.form['id'], FORM_SCHEMA, rubric)

    def test_publish_duplicate_question_ids(self):
        rubric = copy.deepcopy(RUBRIC)
        rubric['questions'][1]['question_id'] = 'impact'
        with raises(FormRequestError) as error:
            forms_api.publish_form(self.form['id'], FORM_SCHEMA, rubric)
        assert 'questions' in error.value.field_errors

    @patch('formreview.forms.api.logger')
    def test_publish_weights_not_adding_up_to_one(self, mock_logger):
        rubric = copy.deepcopy(RUBRIC)
        rubric['questions'][0]['weight'] = "0.9"
        forms_api.publish_form(self.form['id'], FORM_SCHEMA, rubric)

        mock_logger.warning.assert_called_once()
        rubric_version = RubricVersion.objects.get(form_id=self.form['id'])
        assert rubric_version.total_weight == Decimal("1.5")

    @patch('formreview.forms.api.logger')
    def test_publish_weights_adding_up_to_one(self, mock_logger):
        forms_api.publish_form(self.form['id'], FORM_SCHEMA, RUBRIC)
        mock_logger.warning.assert_not_called()

    def test_publish_sends_signal(self):
        with patch.object(form_published, 'send') as mock_send:
            forms_api.publish_form(self.form['id'], FORM_SCHEMA, RUBRIC)
        kwargs = mock_send.call_args[1]
        assert kwargs['form'].id == self.form['id']
        assert kwargs['rubric_version'].version == 1

    @patch.object(RubricQuestion.objects, 'bulk_create')
    def test_publish_database_error(self, mock_bulk_create):
        mock_bulk_create.side_effect = DatabaseError("KABOOM!")
        with raises(FormInternalError):
            forms_api.publish_form(self.form['id'], FORM_SCHEMA, RUBRIC)
        assert not RubricVersion.objects.filter(form_id=self.form['id']).exists()
        assert Form.objects.get(pk=self.form['id']).status == Form.DRAFT

    def test_get_latest_versions_unpublished(self):
        assert forms_api.get_latest_versions(self.form['id']) == (None, None)

    def test_get_rubric_version_from_cache(self):
        published = forms_api.publish_form(self.form['id'], FORM_SCHEMA, RUBRIC)
        rubric_version_id = published['rubric_version']['id']

        # Only the rubric version row is read; its questions come from the cache
        with self.assertNumQueries(1):
            rubric = forms_api.get_rubric_version(rubric_version_id)
        assert rubric == published['rubric_version']

    def test_get_unknown_rubric_version(self):
        with raises(FormNotFoundError):
            forms_api.get_rubric_version(12345)
