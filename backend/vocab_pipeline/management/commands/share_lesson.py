from django.core.management.base import BaseCommand, CommandError

from lessons.store import DjangoLessonStore
from vocab_pipeline.pipelines.share import build_share_url


class Command(BaseCommand):
    help = "Print the share URL of a saved lesson."

    def add_arguments(self, parser):
        parser.add_argument("lesson_id")
        parser.add_argument("--base-url", default="http://localhost:5173/", help="Page that opens shared lessons")

    def handle(self, *args, **options):
        lesson = DjangoLessonStore().get(options["lesson_id"])
        if lesson is None:
            raise CommandError(f"Lesson not found: {options['lesson_id']}")
        self.stdout.write(build_share_url(options["base_url"], lesson))
