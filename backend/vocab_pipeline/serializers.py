"""DRF serializers for the vocabulary pipeline request bodies."""
from rest_framework import serializers


class GenerateLessonRequestSerializer(serializers.Serializer):
    """Either `words` (one per line) or `word_list`."""
    subtitle = serializers.CharField(allow_blank=True)
    words = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    word_list = serializers.ListField(
        child=serializers.CharField(allow_blank=True),
        required=False,
    )

    def validate(self, attrs):
        if 'words' not in attrs and 'word_list' not in attrs:
            raise serializers.ValidationError("Provide 'words' or 'word_list'.")
        return attrs

    def raw_words_text(self) -> str:
        data = self.validated_data
        if 'word_list' in data:
            return '\n'.join(data['word_list'])
        return data.get('words', '')


class ShareTokenRequestSerializer(serializers.Serializer):
    """A bare token or a full share URL."""
    token = serializers.CharField(required=False, allow_blank=False)
    url = serializers.CharField(required=False, allow_blank=False)

    def validate(self, attrs):
        if not attrs.get('token') and not attrs.get('url'):
            raise serializers.ValidationError("Provide 'token' or 'url'.")
        return attrs
