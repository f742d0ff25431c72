from .config import settings
from .database import ResultStore
from .vocabulary import VocabularyManager

vocab_manager = VocabularyManager(settings.VOCAB_DIR)
result_store = ResultStore()
