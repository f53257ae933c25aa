from django.contrib import admin
from .models import CrystalTally, UserLesson

admin.site.register(UserLesson)
admin.site.register(CrystalTally)
