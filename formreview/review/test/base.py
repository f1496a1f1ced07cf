""" Base class for review tests, with a published form and a submission to review """

from formreview.forms import api as forms_api
from formreview.forms.models import VisibilityMode
from formreview.organizations.models import Membership
from formreview.review.api.services import build_services
from formreview.submissions import api as sub_api
from formreview.test_utils import CacheResetTest
from formreview.tests.factories import MembershipFactory, OrganizationFactory, UserFactory

FORM_SCHEMA = {
    "fields": [
        {"id": "name", "type": "text", "label": "Project name"},
        {"id": "pitch", "type": "textarea", "label": "Pitch"},
    ]
}

# Weights add up to 1; "q3" may be left unscored
RUBRIC = {
    "scale_min": 1,
    "scale_max": 5,
    "scale_step": 1,
    "questions": [
        {"question_id": "q1", "label": "Impact", "weight": "0.4"},
        {"question_id": "q2", "label": "Clarity", "weight": "0.3"},
        {"question_id": "q3", "label": "Feasibility", "weight": "0.3", "required": False},
    ],
}

ANSWER = {"name": "Formreview", "pitch": "Reviews that add up."}

SCORES_A = {"q1": 5, "q2": 4, "q3": 3}
SCORES_B = {"q1": 3, "q2": 5, "q3": 4}


class ReviewTestBase(CacheResetTest):
    """
    An organization with an admin, three reviewers, a viewer and an
    outsider, and one submission to a published form requiring two reviews.
    """

    visibility_mode = VisibilityMode.REVEAL_AFTER_ME_SUBMIT

    def setUp(self):
        super().setUp()
        self.organization = OrganizationFactory()
        self.admin = self.add_member(Membership.ORG_ADMIN)
        self.alice = self.add_member(Membership.REVIEWER)
        self.bob = self.add_member(Membership.REVIEWER)
        self.carol = self.add_member(Membership.REVIEWER)
        self.viewer = self.add_member(Membership.VIEWER)
        self.outsider = UserFactory()

        self.form_id = forms_api.create_form(
            self.organization.id,
            "Demo Day",
            "demo-day",
            min_reviews_required=2,
            visibility_mode=self.visibility_mode,
        )['id']
        forms_api.publish_form(self.form_id, FORM_SCHEMA, RUBRIC)
        self.submission_uuid = self.create_submission()
        self.services = build_services()

    def add_member(self, role, organization=None):
        user = UserFactory()
        MembershipFactory(user=user, organization=organization or self.organization, role=role)
        return user

    def create_submission(self, form_id=None, email="ada@example.com"):
        return sub_api.create_submission(form_id or self.form_id, email, ANSWER)['uuid']

    def get_submission(self, submission_uuid=None):
        return self.services.store.get_submission(submission_uuid or self.submission_uuid)

    def set_form_settings(self, **form_settings):
        forms_api.update_form_settings(self.form_id, **form_settings)

    def submit(self, reviewer, scores, submission_uuid=None, comment=None):
        return self.services.store.submit(
            self.get_submission(submission_uuid), reviewer, scores, comment=comment
        )

    def save_draft(self, reviewer, scores, submission_uuid=None, comment=None):
        return self.services.store.upsert_draft(
            self.get_submission(submission_uuid), reviewer, scores, comment=comment
        )
