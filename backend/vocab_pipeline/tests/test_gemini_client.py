"""
Tests for vocab_pipeline/services/gemini_client.py with a mocked GenAI client.
"""
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from vocab_pipeline.errors import GenerationError
from vocab_pipeline.services.gemini_client import GeminiService, first_inline_media
from vocab_pipeline.services.word_details import WORD_DETAIL_SCHEMA
from vocab_pipeline.tests.fakes import PNG_BYTES, make_response


class GenerateStructuredTests(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.service = GeminiService(client=self.client)

    def test_returns_parsed_object(self):
        self.client.models.generate_content.return_value = make_response(text='{"hiragana": "いぬ"}')

        payload = self.service.generate_structured("prompt", WORD_DETAIL_SCHEMA)

        self.assertEqual(payload, {"hiragana": "いぬ"})
        config = self.client.models.generate_content.call_args.kwargs["config"]
        self.assertEqual(config.response_mime_type, "application/json")
        self.assertEqual(config.response_schema, WORD_DETAIL_SCHEMA)

    def test_invalid_json_is_generation_error(self):
        self.client.models.generate_content.return_value = make_response(text="not json")
        with self.assertRaises(GenerationError):
            self.service.generate_structured("prompt", WORD_DETAIL_SCHEMA)

    def test_non_object_json_is_generation_error(self):
        self.client.models.generate_content.return_value = make_response(text='["a"]')
        with self.assertRaises(GenerationError):
            self.service.generate_structured("prompt", WORD_DETAIL_SCHEMA)

    def test_sdk_exception_is_wrapped(self):
        self.client.models.generate_content.side_effect = RuntimeError("503 overloaded")
        with self.assertRaises(GenerationError) as ctx:
            self.service.generate_structured("prompt", WORD_DETAIL_SCHEMA)
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)


class MediaGenerationTests(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.service = GeminiService(client=self.client)

    def test_image_payload(self):
        self.client.models.generate_content.return_value = make_response(inline=("image/png", PNG_BYTES))

        media = self.service.generate_image("a dog")

        self.assertEqual(media.mime_type, "image/png")
        self.assertEqual(media.data, PNG_BYTES)
        config = self.client.models.generate_content.call_args.kwargs["config"]
        self.assertEqual(config.response_modalities, ["IMAGE"])

    def test_image_absent(self):
        self.client.models.generate_content.return_value = make_response()
        self.assertIsNone(self.service.generate_image("a dog"))

    def test_speech_uses_prebuilt_voice(self):
        self.client.models.generate_content.return_value = make_response(inline=("audio/pcm", b"\x00\x00"))

        media = self.service.generate_speech("script", "Kore")

        self.assertEqual(media.data, b"\x00\x00")
        config = self.client.models.generate_content.call_args.kwargs["config"]
        self.assertEqual(config.response_modalities, ["AUDIO"])
        self.assertEqual(config.speech_config.voice_config.prebuilt_voice_config.voice_name, "Kore")

    def test_speech_failure_is_wrapped(self):
        self.client.models.generate_content.side_effect = ValueError("bad request")
        with self.assertRaises(GenerationError):
            self.service.generate_speech("script")


class FirstInlineMediaTests(unittest.TestCase):
    def test_skips_text_parts(self):
        text_part = SimpleNamespace(text="Here is your image", inline_data=None)
        response = make_response(inline=("image/jpeg", b"jpeg"), extra_parts=[text_part])

        media = first_inline_media(response)

        self.assertEqual(media.mime_type, "image/jpeg")

    def test_no_candidates(self):
        self.assertIsNone(first_inline_media(SimpleNamespace(candidates=None)))


class ClientConstructionTests(unittest.TestCase):
    def test_missing_api_key_fails_on_first_use(self):
        service = GeminiService(api_key="")
        with self.assertRaises(GenerationError):
            service.generate_image("a dog")

    @patch("vocab_pipeline.services.gemini_client.genai.Client")
    def test_client_built_lazily_with_key(self, client_cls):
        service = GeminiService(api_key="secret")
        client_cls.assert_not_called()

        _ = service.client

        client_cls.assert_called_once_with(api_key="secret")


if __name__ == "__main__":
    unittest.main()
