from django.apps import AppConfig


class VocabPipelineConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'vocab_pipeline'
    verbose_name = 'Vocabulary Lesson Pipeline'
