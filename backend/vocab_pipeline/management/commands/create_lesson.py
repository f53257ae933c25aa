import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from lessons.store import DjangoLessonStore
from vocab_pipeline import errors
from vocab_pipeline.pipelines.orchestrator import GenerationStats, get_lesson_generator


class Command(BaseCommand):
    help = "Generate a lesson (details, illustration and narration per word) and save it."

    def add_arguments(self, parser):
        parser.add_argument("--subtitle", required=True, help="Lesson name shown to the learner")
        source = parser.add_mutually_exclusive_group(required=True)
        source.add_argument("--words-file", help="UTF-8 file with one word per line")
        source.add_argument("--word", action="append", dest="words", help="A word (repeatable)")
        parser.add_argument("--json", action="store_true", help="Print run statistics as JSON")

    def handle(self, *args, **options):
        if options["words_file"]:
            path = Path(options["words_file"])
            if not path.exists():
                raise CommandError(f"Words file not found: {path}")
            raw_words = path.read_text(encoding="utf-8")
        else:
            raw_words = "\n".join(options["words"])

        stats = GenerationStats()
        try:
            lesson = get_lesson_generator().generate_lesson(
                options["subtitle"],
                raw_words,
                progress=lambda message: self.stdout.write(message),
                store=DjangoLessonStore(),
                stats=stats,
            )
        except errors.ValidationError as e:
            raise CommandError(str(e))
        except errors.GenerationError as e:
            if options["json"]:
                self.stderr.write(json.dumps(stats.to_dict(), ensure_ascii=False))
            raise CommandError(f"Lesson generation failed at '{stats.failed_word}': {e}")

        self.stdout.write(self.style.SUCCESS(
            f"Created lesson {lesson.id} with {len(lesson.words)} words "
            f"({stats.images_missing} without image, {stats.audio_missing} without audio)"
        ))
        if options["json"]:
            self.stdout.write(json.dumps({"lesson_id": lesson.id, **stats.to_dict()}, ensure_ascii=False))
