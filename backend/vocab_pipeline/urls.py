from django.urls import path
from django.views.decorators.csrf import csrf_exempt
from . import views

urlpatterns = [
    path('generate/', csrf_exempt(views.GenerateLessonView.as_view()), name='vocab_generate'),
    path('import/preview/', csrf_exempt(views.ImportPreviewView.as_view()), name='vocab_import_preview'),
    path('import/', csrf_exempt(views.ImportLessonView.as_view()), name='vocab_import'),
    path('lessons/<str:lesson_id>/share/', views.ShareLessonView.as_view(), name='vocab_share'),
    path('lessons/<str:lesson_id>/words/<int:index>/audio/', views.WordAudioView.as_view(), name='vocab_word_audio'),
]
