# socialdash/__init__.py
"""
Social dashboard content calendar.
Извлечение событий из ответов ассистента и owner-scoped хранилище событий.
"""
