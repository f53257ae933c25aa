from django.test import TestCase
from rest_framework.test import APITestCase

from vocab_pipeline.config import config
from vocab_pipeline.pipelines.share import encode_lesson_token, import_lesson
from vocab_pipeline.tests.fakes import make_lesson
from vocab_pipeline.types import lesson_to_dict

from .models import CrystalTally, UserLesson
from .store import DjangoLessonStore, award_crystal, get_crystals


class DjangoLessonStoreTests(TestCase):
    def setUp(self):
        self.store = DjangoLessonStore()

    def test_append_and_list_in_creation_order(self):
        first = make_lesson('a')
        second = make_lesson('b')
        self.store.append(first)
        self.store.append(second)

        self.assertEqual(self.store.list(), [first, second])
        self.assertEqual(self.store.get('b'), second)
        self.assertIsNone(self.store.get('missing'))

    def test_append_same_id_replaces(self):
        self.store.append(make_lesson('a'))
        self.store.append(make_lesson('a', with_media=False))

        self.assertEqual(UserLesson.objects.count(), 1)
        self.assertEqual(self.store.get('a').words[0].audio_data, '')

    def test_remove_by_id(self):
        self.store.append(make_lesson('a'))
        self.store.remove_by_id('a')
        self.store.remove_by_id('a')
        self.assertEqual(self.store.list(), [])

    def test_corrupted_row_is_dropped(self):
        self.store.append(make_lesson('a'))
        UserLesson.objects.create(lesson_id='broken', subtitle='x', payload={'id': 'broken'})

        with self.assertLogs('lessons.store', level='ERROR'):
            lessons = self.store.list()

        self.assertEqual([lesson.id for lesson in lessons], ['a'])
        self.assertFalse(UserLesson.objects.filter(lesson_id='broken').exists())

    def test_import_leaves_other_rows_alone(self):
        UserLesson.objects.create(lesson_id='broken', subtitle='x', payload={'id': 'broken'})

        imported = import_lesson(encode_lesson_token(make_lesson('shared')), store=self.store)

        self.assertTrue(UserLesson.objects.filter(lesson_id='broken').exists())
        self.assertTrue(UserLesson.objects.filter(lesson_id=imported.id).exists())


class CrystalTests(TestCase):
    def test_starts_at_initial_balance(self):
        self.assertEqual(get_crystals(), config.initial_crystals)

    def test_award_increments(self):
        self.assertEqual(award_crystal(), config.initial_crystals + 1)
        self.assertEqual(award_crystal(amount=2), config.initial_crystals + 3)
        self.assertEqual(CrystalTally.objects.count(), 1)


class LessonsApiTests(APITestCase):
    def setUp(self):
        self.lesson = make_lesson('lesson-1')
        DjangoLessonStore().append(self.lesson)

    def test_list_has_summaries(self):
        resp = self.client.get('/api/lessons/')

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]['id'], 'lesson-1')
        self.assertEqual(resp.data[0]['word_count'], 2)
        self.assertNotIn('words', resp.data[0])

    def test_detail_returns_wire_form(self):
        resp = self.client.get('/api/lessons/lesson-1/')

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data, lesson_to_dict(self.lesson))

    def test_detail_missing(self):
        resp = self.client.get('/api/lessons/nope/')
        self.assertEqual(resp.status_code, 404)

    def test_delete(self):
        resp = self.client.delete('/api/lessons/lesson-1/')

        self.assertEqual(resp.status_code, 204)
        self.assertEqual(UserLesson.objects.count(), 0)

    def test_crystals(self):
        resp = self.client.get('/api/lessons/crystals/')
        self.assertEqual(resp.data, {'crystals': config.initial_crystals})

        resp = self.client.post('/api/lessons/crystals/award/')
        self.assertEqual(resp.data, {'crystals': config.initial_crystals + 1})
