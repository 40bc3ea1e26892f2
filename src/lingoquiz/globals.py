from .config import settings
from .registry import SessionRegistry
from .vocabulary import VocabularyManager

vocab_manager = VocabularyManager(f"{settings.VOCAB_DIR}")
sessions = SessionRegistry(settings.SESSION_TIMEOUT_MINUTES)
