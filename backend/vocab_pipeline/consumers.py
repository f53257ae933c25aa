import asyncio
import json
import logging
import threading

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from lessons.store import DjangoLessonStore
from vocab_pipeline import errors
from vocab_pipeline.pipelines.orchestrator import get_lesson_generator
from vocab_pipeline.types import lesson_to_dict

logger = logging.getLogger(__name__)


class GenerationProgressConsumer(AsyncWebsocketConsumer):
    """Runs one generation and streams its progress.

    Client protocol:
      - JSON { type: 'generate', subtitle: '...', words: '犬\\n猫' }

    Server sends:
      - { event: 'progress', message: '...' } before every step
      - { event: 'lesson', lesson: {...} } once the lesson is saved
      - { event: 'error', detail: '...' } on failure

    Closing the socket cancels the run; a cancelled run saves nothing.
    """

    async def connect(self):
        await self.accept()
        self._cancel = threading.Event()
        self._task = None
        await self._send_json({'event': 'connected'})

    async def disconnect(self, code):
        self._cancel.set()
        if self._task is not None:
            # The run stops at its next step; nothing is saved
            await self._task

    async def receive(self, text_data=None, bytes_data=None):
        if text_data is None:
            return
        try:
            msg = json.loads(text_data)
        except json.JSONDecodeError:
            await self._send_json({'event': 'error', 'detail': 'Invalid JSON'})
            return

        if msg.get('type') != 'generate':
            return
        if self._task is not None and not self._task.done():
            await self._send_json({'event': 'error', 'detail': 'A lesson is already being generated'})
            return

        self._task = asyncio.create_task(
            self._generate(str(msg.get('subtitle') or ''), str(msg.get('words') or ''))
        )

    async def _generate(self, subtitle: str, words: str):
        loop = asyncio.get_running_loop()

        def progress(message: str) -> None:
            asyncio.run_coroutine_threadsafe(
                self._send_json({'event': 'progress', 'message': message}),
                loop,
            )

        def run():
            return get_lesson_generator().generate_lesson(
                subtitle,
                words,
                progress=progress,
                store=DjangoLessonStore(),
                cancel_event=self._cancel,
            )

        try:
            lesson = await database_sync_to_async(run)()
        except errors.ValidationError as e:
            await self._send_json({'event': 'error', 'detail': str(e)})
            return
        except errors.GenerationCancelled:
            logger.info("Lesson generation cancelled by client")
            return
        except errors.GenerationError as e:
            logger.error(f"Error creating lesson: {e}")
            await self._send_json({'event': 'error', 'detail': 'Lesson generation failed'})
            return
        except Exception as e:
            logger.error(f"Unexpected error creating lesson: {e}", exc_info=True)
            await self._send_json({'event': 'error', 'detail': 'Lesson generation failed'})
            return

        await self._send_json({'event': 'lesson', 'lesson': lesson_to_dict(lesson)})

    async def _send_json(self, payload: dict):
        if self._cancel.is_set():
            return
        await self.send(text_data=json.dumps(payload, ensure_ascii=False))
