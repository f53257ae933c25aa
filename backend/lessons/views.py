from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import UserLesson
from .serializers import CrystalSerializer, UserLessonSummarySerializer
from .store import DjangoLessonStore, award_crystal, get_crystals


class LessonsListView(generics.ListAPIView):
    permission_classes = [permissions.AllowAny]
    queryset = UserLesson.objects.all()
    serializer_class = UserLessonSummarySerializer


class LessonDetailView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, lesson_id: str):
        row = UserLesson.objects.filter(lesson_id=lesson_id).first()
        if row is None:
            return Response({"detail": "Lesson not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(row.payload)

    def delete(self, request, lesson_id: str):
        DjangoLessonStore().remove_by_id(lesson_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CrystalsView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response(CrystalSerializer({'crystals': get_crystals()}).data)


class AwardCrystalView(APIView):
    """Called the first time a word is marked learned during a viewing."""
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        return Response(CrystalSerializer({'crystals': award_crystal()}).data)
