"""
API views for the vocabulary pipeline.
"""
import logging

from django.conf import settings
from django.http import HttpResponse
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from lessons.store import DjangoLessonStore
from vocab_pipeline import errors
from vocab_pipeline.pipelines.orchestrator import get_lesson_generator
from vocab_pipeline.pipelines.share import (
    build_share_url,
    encode_lesson_token,
    extract_share_token,
    import_lesson,
    preview_lesson_token,
)
from vocab_pipeline.serializers import GenerateLessonRequestSerializer, ShareTokenRequestSerializer
from vocab_pipeline.types import lesson_to_dict
from vocab_pipeline.utils.audio import audio_data_to_wav

logger = logging.getLogger(__name__)

GENERATION_FAILED_NOTICE = "Ocorreu um erro ao criar a lição. Tente novamente mais tarde."
CORRUPTED_LINK_NOTICE = "O link da lição compartilhada parece estar corrompido."


class GenerateLessonView(APIView):
    """
    POST /api/vocab/generate/

    Request:
    {
        "subtitle": "Animais",
        "words": "犬\\n猫"          // or "word_list": ["犬", "猫"]
    }

    Response (201): the lesson in its wire form.
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = GenerateLessonRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        subtitle = serializer.validated_data['subtitle']
        logger.info(f"Generating lesson: subtitle='{subtitle}'")

        try:
            lesson = get_lesson_generator().generate_lesson(
                subtitle,
                serializer.raw_words_text(),
                store=DjangoLessonStore(),
            )
        except errors.ValidationError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except errors.GenerationError as e:
            logger.error(f"Error creating lesson: {e}", exc_info=True)
            return Response({"detail": GENERATION_FAILED_NOTICE}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(lesson_to_dict(lesson), status=status.HTTP_201_CREATED)


class ShareLessonView(APIView):
    """GET /api/vocab/lessons/<id>/share/ -> {"token": ..., "url": ...}"""
    permission_classes = [permissions.AllowAny]

    def get(self, request, lesson_id: str):
        lesson = DjangoLessonStore().get(lesson_id)
        if lesson is None:
            return Response({"detail": "Lesson not found."}, status=status.HTTP_404_NOT_FOUND)

        base_url = getattr(settings, 'SHARE_BASE_URL', '') or request.build_absolute_uri('/')
        return Response({
            'token': encode_lesson_token(lesson),
            'url': build_share_url(base_url, lesson),
        })


class _ShareTokenMixin:
    def _token_from_request(self, request):
        serializer = ShareTokenRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return extract_share_token(data.get('token') or data.get('url'))


class ImportPreviewView(_ShareTokenMixin, APIView):
    """POST /api/vocab/import/preview/ -> subtitle and word count, nothing saved"""
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        token = self._token_from_request(request)
        if not token:
            return Response({"detail": CORRUPTED_LINK_NOTICE}, status=status.HTTP_400_BAD_REQUEST)
        try:
            preview = preview_lesson_token(token)
        except (errors.DecodeError, errors.ValidationError) as e:
            logger.error(f"Failed to parse shared lesson data: {e}")
            return Response({"detail": CORRUPTED_LINK_NOTICE}, status=status.HTTP_400_BAD_REQUEST)
        return Response(preview)


class ImportLessonView(_ShareTokenMixin, APIView):
    """POST /api/vocab/import/ -> the saved lesson under a new id"""
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        token = self._token_from_request(request)
        if not token:
            return Response({"detail": CORRUPTED_LINK_NOTICE}, status=status.HTTP_400_BAD_REQUEST)
        try:
            lesson = import_lesson(token, store=DjangoLessonStore())
        except (errors.DecodeError, errors.ValidationError) as e:
            logger.error(f"Failed to parse shared lesson data: {e}")
            return Response({"detail": CORRUPTED_LINK_NOTICE}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': f'Lição "{lesson.subtitle}" salva com sucesso!',
            'lesson': lesson_to_dict(lesson),
        }, status=status.HTTP_201_CREATED)


class WordAudioView(APIView):
    """GET /api/vocab/lessons/<id>/words/<index>/audio/ -> audio/wav, or 204 when silent"""
    permission_classes = [permissions.AllowAny]

    def get(self, request, lesson_id: str, index: int):
        lesson = DjangoLessonStore().get(lesson_id)
        if lesson is None or index >= len(lesson.words):
            return Response({"detail": "Word not found."}, status=status.HTTP_404_NOT_FOUND)

        wav = audio_data_to_wav(lesson.words[index].audio_data)
        if wav is None:
            return Response(status=status.HTTP_204_NO_CONTENT)

        response = HttpResponse(wav, content_type='audio/wav')
        response['Content-Length'] = str(len(wav))
        return response
