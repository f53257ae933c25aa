from rest_framework import serializers

from .models import UserLesson


class UserLessonSummarySerializer(serializers.ModelSerializer):
    """Dashboard row: no embedded image or audio payloads"""
    id = serializers.CharField(source='lesson_id', read_only=True)
    word_count = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField(read_only=True)

    class Meta:
        model = UserLesson
        fields = ['id', 'subtitle', 'word_count', 'created_at']

    def get_word_count(self, obj):
        return len((obj.payload or {}).get('words') or [])


class CrystalSerializer(serializers.Serializer):
    crystals = serializers.IntegerField(read_only=True)
