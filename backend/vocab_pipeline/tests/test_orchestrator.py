"""
Integration-style tests for vocab_pipeline/pipelines/orchestrator.py

The GenAI client is faked at generate_content, so the real detail,
illustration and narration services run end to end.

Run with: python -m pytest vocab_pipeline/tests/test_orchestrator.py -v
"""
import threading
import unittest
from unittest.mock import MagicMock

from vocab_pipeline.config import config
from vocab_pipeline.errors import GenerationCancelled, GenerationError, ValidationError
from vocab_pipeline.pipelines.orchestrator import GenerationStats, LessonGenerator, parse_word_list
from vocab_pipeline.services.gemini_client import GeminiService
from vocab_pipeline.storage import InMemoryLessonStore
from vocab_pipeline.tests.fakes import PCM_BYTES, calls_for_model, make_genai_client
from vocab_pipeline.utils.binary_text import bytes_from_base64


def make_generator(client) -> LessonGenerator:
    return LessonGenerator(gemini=GeminiService(client=client))


class ParseWordListTests(unittest.TestCase):
    def test_drops_blank_lines_and_keeps_order(self):
        self.assertEqual(parse_word_list("犬\n\n   \n猫\r\n りんご \n"), ["犬", "猫", "りんご"])

    def test_empty(self):
        self.assertEqual(parse_word_list("\n  \n"), [])


class GenerateLessonTests(unittest.TestCase):
    def setUp(self):
        self.client = make_genai_client()
        self.generator = make_generator(self.client)
        self.store = MagicMock()

    def test_two_words_in_order(self):
        lesson = self.generator.generate_lesson("Animais", "犬\n猫", store=self.store)

        self.assertEqual([w.hiragana for w in lesson.words], ["いぬ", "ねこ"])
        for word in lesson.words:
            self.assertTrue(word.hiragana)
            self.assertTrue(word.portuguese)
            self.assertTrue(word.romaji)
            self.assertTrue(word.phonemes)
        self.assertEqual(lesson.subtitle, "Animais")
        self.assertTrue(lesson.is_user_created)
        self.assertTrue(lesson.created_at)
        self.store.append.assert_called_once_with(lesson)

    def test_word_entry_assembly(self):
        lesson = self.generator.generate_lesson("Animais", "犬", store=self.store)
        word = lesson.words[0]

        self.assertTrue(word.image_url.startswith("data:image/png;base64,"))
        self.assertEqual(bytes_from_base64(word.audio_data), PCM_BYTES)
        self.assertEqual(word.kanji, "犬")

    def test_empty_kanji_is_normalized(self):
        lesson = self.generator.generate_lesson("Frutas", "りんご")
        self.assertIsNone(lesson.words[0].kanji)

    def test_steps_run_sequentially_per_word(self):
        self.generator.generate_lesson("Animais", "犬\n猫")

        models = [c.kwargs["model"] for c in self.client.models.generate_content.call_args_list]
        expected = [config.text_model_name, config.image_model_name, config.speech_model_name] * 2
        self.assertEqual(models, expected)

    def test_lesson_ids_are_unique(self):
        first = self.generator.generate_lesson("Animais", "犬")
        second = self.generator.generate_lesson("Animais", "犬")
        self.assertNotEqual(first.id, second.id)

    def test_progress_messages(self):
        messages = []
        self.generator.generate_lesson("Animais", "犬\n猫", progress=messages.append)

        self.assertEqual(len(messages), 6)
        self.assertEqual(messages[0], 'Analisando "犬" (1/2)')
        self.assertIn('"猫" (2/2)', messages[-1])

    def test_failing_progress_sink_does_not_break_run(self):
        def broken(message):
            raise RuntimeError("socket closed")

        lesson = self.generator.generate_lesson("Animais", "犬", progress=broken)
        self.assertEqual(len(lesson.words), 1)


class GenerationFailureTests(unittest.TestCase):
    def test_detail_failure_on_second_word_persists_nothing(self):
        client = make_genai_client(fail_details_for="猫")
        store = MagicMock()
        stats = GenerationStats()

        with self.assertRaises(GenerationError):
            make_generator(client).generate_lesson("Animais", "犬\n猫\nりんご", store=store, stats=stats)

        store.append.assert_not_called()
        self.assertEqual(stats.failed_word, "猫")
        self.assertEqual(stats.words_completed, 1)
        # third word never requested
        self.assertEqual(len(calls_for_model(client, config.text_model_name)), 2)

    def test_unparseable_details_fail_the_run(self):
        client = make_genai_client(details={"犬": {"hiragana": "いぬ"}})
        store = InMemoryLessonStore()

        with self.assertRaises(GenerationError):
            make_generator(client).generate_lesson("Animais", "犬", store=store)
        self.assertEqual(store.list(), [])

    def test_missing_image_is_tolerated(self):
        client = make_genai_client(with_image=False)
        stats = GenerationStats()

        lesson = make_generator(client).generate_lesson("Animais", "犬", stats=stats)

        self.assertEqual(lesson.words[0].image_url, "")
        self.assertTrue(lesson.words[0].audio_data)
        self.assertEqual(stats.images_missing, 1)

    def test_missing_audio_is_tolerated(self):
        client = make_genai_client(with_audio=False)

        lesson = make_generator(client).generate_lesson("Animais", "犬\n猫")

        self.assertEqual([w.audio_data for w in lesson.words], ["", ""])


class InputValidationTests(unittest.TestCase):
    def setUp(self):
        self.client = make_genai_client()
        self.generator = make_generator(self.client)

    def test_blank_subtitle(self):
        with self.assertRaises(ValidationError):
            self.generator.generate_lesson("   ", "犬")
        self.client.models.generate_content.assert_not_called()

    def test_no_words(self):
        with self.assertRaises(ValidationError):
            self.generator.generate_lesson("Animais", "\n \n")
        self.client.models.generate_content.assert_not_called()


class CancellationTests(unittest.TestCase):
    def test_cancel_mid_run_persists_nothing(self):
        cancel = threading.Event()
        store = InMemoryLessonStore()

        def progress(message):
            if "Criando imagem" in message:
                cancel.set()

        client = make_genai_client()
        with self.assertRaises(GenerationCancelled):
            make_generator(client).generate_lesson(
                "Animais", "犬\n猫", progress=progress, store=store, cancel_event=cancel,
            )

        self.assertEqual(store.list(), [])
        self.assertEqual(len(calls_for_model(client, config.image_model_name)), 1)

    def test_cancelled_before_start(self):
        cancel = threading.Event()
        cancel.set()
        client = make_genai_client()

        with self.assertRaises(GenerationCancelled):
            make_generator(client).generate_lesson("Animais", "犬", cancel_event=cancel)
        client.models.generate_content.assert_not_called()


if __name__ == "__main__":
    unittest.main()
