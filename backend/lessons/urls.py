from django.urls import path
from django.views.decorators.csrf import csrf_exempt
from .views import AwardCrystalView, CrystalsView, LessonDetailView, LessonsListView


urlpatterns = [
    path('', LessonsListView.as_view(), name='lessons-list'),
    path('crystals/', CrystalsView.as_view(), name='lessons-crystals'),
    path('crystals/award/', csrf_exempt(AwardCrystalView.as_view()), name='lessons-crystals-award'),
    path('<str:lesson_id>/', csrf_exempt(LessonDetailView.as_view()), name='lessons-detail'),
]
