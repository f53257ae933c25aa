from django.core.management.base import BaseCommand, CommandError

from lessons.store import DjangoLessonStore
from vocab_pipeline import errors
from vocab_pipeline.pipelines.share import extract_share_token, import_lesson


class Command(BaseCommand):
    help = "Import a shared lesson from a share URL or a bare token."

    def add_arguments(self, parser):
        parser.add_argument("link", help="Share URL (?lessonData=...) or token")

    def handle(self, *args, **options):
        token = extract_share_token(options["link"])
        if not token:
            raise CommandError("The link does not carry a lesson.")
        try:
            lesson = import_lesson(token, store=DjangoLessonStore())
        except (errors.DecodeError, errors.ValidationError) as e:
            raise CommandError(f"The shared lesson link seems to be corrupted: {e}")

        self.stdout.write(self.style.SUCCESS(f'Imported "{lesson.subtitle}" as {lesson.id}'))
