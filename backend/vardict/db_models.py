# Import all models once to ensure SQLAlchemy mapper registry is fully populated.
# Base.metadata.create_all / alembic autogenerate 모두 이 모듈 임포트에 의존합니다.

from .dictionary.models import VariableMapping, SearchHistory  # noqa: F401
from .activity.models import UserActivity, DailyStats  # noqa: F401
from .suggestions.models import RAGSuggestionLog  # noqa: F401
