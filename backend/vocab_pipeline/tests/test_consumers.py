import asyncio
import json
import threading
from unittest.mock import patch

from asgiref.sync import async_to_sync
from asgiref.testing import ApplicationCommunicator
from django.test import SimpleTestCase, TransactionTestCase

from lessons.models import UserLesson
from vocab_pipeline.config import config
from vocab_pipeline.consumers import GenerationProgressConsumer
from vocab_pipeline.pipelines.orchestrator import LessonGenerator
from vocab_pipeline.services.gemini_client import GeminiService
from vocab_pipeline.tests.fakes import calls_for_model, make_genai_client

SCOPE = {
    'type': 'websocket',
    'path': '/ws/vocab/generate/',
    'query_string': b'',
    'headers': [],
    'subprotocols': [],
}

GENERATE = json.dumps({'type': 'generate', 'subtitle': 'Animais', 'words': '犬\n猫'})


async def open_socket() -> ApplicationCommunicator:
    communicator = ApplicationCommunicator(GenerationProgressConsumer.as_asgi(), dict(SCOPE))
    await communicator.send_input({'type': 'websocket.connect'})
    accepted = await communicator.receive_output()
    assert accepted['type'] == 'websocket.accept', accepted
    connected = await communicator.receive_output()
    assert json.loads(connected['text']) == {'event': 'connected'}, connected
    return communicator


async def receive_event(communicator: ApplicationCommunicator) -> dict:
    message = await communicator.receive_output(timeout=5)
    return json.loads(message['text'])


async def events_until_done(communicator: ApplicationCommunicator) -> list:
    """Progress events followed by the final lesson or error event"""
    events = []
    while True:
        event = await receive_event(communicator)
        events.append(event)
        if event['event'] != 'progress':
            return events


async def close_socket(communicator: ApplicationCommunicator) -> None:
    await communicator.send_input({'type': 'websocket.disconnect', 'code': 1000})
    await communicator.wait(timeout=5)


def fake_generator(client) -> LessonGenerator:
    return LessonGenerator(gemini=GeminiService(client=client))


class GenerationProgressProtocolTests(SimpleTestCase):
    databases = {'default'}

    def test_connect_and_reject_invalid_json(self):
        async def scenario():
            communicator = await open_socket()

            await communicator.send_input({'type': 'websocket.receive', 'text': 'not json'})
            self.assertEqual(await receive_event(communicator), {'event': 'error', 'detail': 'Invalid JSON'})

            await communicator.send_input({'type': 'websocket.receive', 'text': json.dumps({'type': 'ping'})})
            self.assertTrue(await communicator.receive_nothing())
            await close_socket(communicator)

        async_to_sync(scenario)()


class GenerationProgressRunTests(TransactionTestCase):
    @patch('vocab_pipeline.consumers.get_lesson_generator')
    def test_progress_then_lesson(self, get_generator):
        get_generator.return_value = fake_generator(make_genai_client())

        async def scenario():
            communicator = await open_socket()
            await communicator.send_input({'type': 'websocket.receive', 'text': GENERATE})
            events = await events_until_done(communicator)
            await close_socket(communicator)
            return events

        events = async_to_sync(scenario)()

        self.assertEqual([e['event'] for e in events], ['progress'] * 6 + ['lesson'])
        self.assertEqual(events[0]['message'], 'Analisando "犬" (1/2)')
        lesson = events[-1]['lesson']
        self.assertEqual([w['hiragana'] for w in lesson['words']], ['いぬ', 'ねこ'])
        self.assertTrue(UserLesson.objects.filter(lesson_id=lesson['id']).exists())

    @patch('vocab_pipeline.consumers.get_lesson_generator')
    def test_service_failure_sends_error(self, get_generator):
        get_generator.return_value = fake_generator(make_genai_client(fail_details_for='猫'))

        async def scenario():
            communicator = await open_socket()
            await communicator.send_input({'type': 'websocket.receive', 'text': GENERATE})
            events = await events_until_done(communicator)
            await close_socket(communicator)
            return events

        events = async_to_sync(scenario)()

        self.assertEqual(events[-1], {'event': 'error', 'detail': 'Lesson generation failed'})
        self.assertEqual(UserLesson.objects.count(), 0)

    @patch('vocab_pipeline.consumers.get_lesson_generator')
    def test_unexpected_failure_sends_error(self, get_generator):
        get_generator.return_value = fake_generator(make_genai_client())

        async def scenario():
            communicator = await open_socket()
            await communicator.send_input({'type': 'websocket.receive', 'text': GENERATE})
            events = await events_until_done(communicator)
            await close_socket(communicator)
            return events

        with patch.object(UserLesson.objects, 'update_or_create', side_effect=RuntimeError("database is locked")):
            with self.assertLogs('vocab_pipeline.consumers', level='ERROR'):
                events = async_to_sync(scenario)()

        self.assertEqual([e['event'] for e in events], ['progress'] * 6 + ['error'])
        self.assertEqual(events[-1]['detail'], 'Lesson generation failed')
        self.assertEqual(UserLesson.objects.count(), 0)

    @patch('vocab_pipeline.consumers.get_lesson_generator')
    def test_disconnect_cancels_run(self, get_generator):
        client = make_genai_client()
        generate = client.models.generate_content.side_effect
        image_gate = threading.Event()

        def gated(model, contents, **kwargs):
            if model == config.image_model_name:
                image_gate.wait(5)
            return generate(model, contents, **kwargs)

        client.models.generate_content.side_effect = gated
        get_generator.return_value = fake_generator(client)

        async def scenario():
            communicator = await open_socket()
            await communicator.send_input({'type': 'websocket.receive', 'text': GENERATE})
            first = await receive_event(communicator)
            await receive_event(communicator)  # image step started
            await communicator.send_input({'type': 'websocket.disconnect', 'code': 1001})
            # let the consumer flag the run before the image call returns
            await asyncio.sleep(0.2)
            image_gate.set()
            await communicator.wait(timeout=5)
            return first

        first = async_to_sync(scenario)()

        self.assertEqual(first['message'], 'Analisando "犬" (1/2)')
        self.assertEqual(UserLesson.objects.count(), 0)
        self.assertEqual(len(calls_for_model(client, config.image_model_name)), 1)
        self.assertEqual(calls_for_model(client, config.speech_model_name), [])
