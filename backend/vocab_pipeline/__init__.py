"""
Vocabulary lesson generation pipeline.

This package orchestrates:
1. Word details (structured text from the text model)
2. Illustrations (image model, emoji fallback)
3. Narrated pronunciation (speech model, raw PCM16)
4. Lesson assembly, sharing and import
"""
