"""
Recompute submission aggregates from the stored reviews
"""
import logging

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from formreview.review.api.services import build_services
from formreview.submissions.models import Submission

log = logging.getLogger(__name__)


class Command(BaseCommand):
    """
    Re-run aggregation for stored submissions, for instance after an
    aggregation failure left an aggregate out of date.
    """

    help = "Recompute the review aggregate and grading status of submissions"

    def add_arguments(self, parser):
        parser.add_argument(
            '--form-id',
            dest='form_id',
            type=int,
            help='Only recompute submissions of this form',
        )
        parser.add_argument(
            '--submission-uuid',
            dest='submission_uuid',
            help='Only recompute this submission',
        )

    def handle(self, *args, **options):
        if options.get('form_id') and options.get('submission_uuid'):
            raise CommandError("Only one of --form-id and --submission-uuid can be specified")

        services = build_services()
        submissions = Submission.objects.using(services.aggregation_engine.using).order_by('id')
        if options.get('form_id'):
            submissions = submissions.filter(form_id=options['form_id'])
        elif options.get('submission_uuid'):
            try:
                submissions = submissions.filter(uuid=options['submission_uuid'])
                found = submissions.exists()
            except (ValidationError, ValueError) as ex:
                raise CommandError(f"Invalid submission uuid {options['submission_uuid']}") from ex
            if not found:
                raise CommandError(f"No submission with uuid {options['submission_uuid']}")

        recomputed, failed = services.aggregation_engine.recompute_all(submissions.iterator())
        log.info("Recomputed %s aggregates, %s failed", recomputed, len(failed))
        self.stdout.write(f"Recomputed {recomputed} submission aggregates")
        if failed:
            raise CommandError(
                "Could not recompute submissions: {}".format(", ".join(str(uuid) for uuid in failed))
            )
