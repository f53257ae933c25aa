from django.db import models


class UserLesson(models.Model):
    """A lesson created or imported by the learner, stored in its wire form."""
    lesson_id = models.CharField(max_length=64, unique=True)
    subtitle = models.CharField(max_length=255)
    payload = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.subtitle} ({self.lesson_id})"


class CrystalTally(models.Model):
    """Session progress counter, one row per key."""
    key = models.CharField(max_length=64, unique=True, default='default')
    crystals = models.IntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.key}: {self.crystals}"
