import csv

from django.core.management.base import BaseCommand, CommandError

from cargo.services.cargo_metrics import metrics_for_intake
from cargo.services.commercial_parameters import get_commercial_parameters
from cargo.types import JobPhase, coerce_enum
from jobs.models import Job

HEADERS = [
    "reference", "phase", "modality", "origin", "destination", "commodity",
    "completeness", "total_weight_kg", "total_volume_cbm", "chargeable_units",
]


class Command(BaseCommand):
    help = "Export the job register with cargo metrics as CSV."

    def add_arguments(self, parser):
        parser.add_argument("--output", type=str, help="File to write; stdout when omitted")
        parser.add_argument("--phase", type=str, help="Only export jobs in this phase")

    def handle(self, *args, **options):
        jobs = Job.objects.all().order_by('sequence')
        phase_arg = options.get("phase")
        if phase_arg:
            phase = coerce_enum(JobPhase, phase_arg)
            if phase is None:
                raise CommandError(f"Unknown phase '{phase_arg}'")
            jobs = jobs.filter(phase=phase.value)

        params = get_commercial_parameters()
        output = options.get("output")
        handle = open(output, "w", newline="", encoding="utf-8") if output else self.stdout
        try:
            writer = csv.writer(handle)
            writer.writerow(HEADERS)
            count = 0
            for job in jobs:
                intake = job.intake
                metrics = metrics_for_intake(intake, params)
                writer.writerow([
                    job.reference,
                    job.phase,
                    job.modality,
                    intake.origin,
                    intake.destination,
                    intake.commodity,
                    job.completeness_score,
                    f"{metrics.total_actual_weight:.2f}",
                    f"{metrics.total_volume_cbm:.3f}",
                    f"{metrics.chargeable_units:.2f}",
                ])
                count += 1
        finally:
            if output:
                handle.close()

        if output:
            self.stdout.write(self.style.SUCCESS(f"Exported {count} jobs to {output}"))
        else:
            self.stderr.write(f"Exported {count} jobs")
