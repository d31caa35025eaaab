import os
import sys

import pytest

# Ensure Python path includes project root for `import socialdash`
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Тестовое окружение: in-memory SQLite, хранилище в памяти, eager Celery
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("EVENT_STORE", "memory")

from socialdash.core.auth.security import create_access_token  # noqa: E402
from socialdash.core.calendar.memory import InMemoryEventStore  # noqa: E402
from socialdash.workers.tasks import celery_app  # noqa: E402

celery_app.conf.task_always_eager = True
celery_app.conf.task_eager_propagates = True


@pytest.fixture
def memory_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def auth_headers():
    """Заголовки с JWT для произвольного владельца."""
    def make(user_id: str = "u1") -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token({'user_id': user_id})}"}
    return make
