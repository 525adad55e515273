from typing import Dict

from .config import settings
from .mastery import get_policy
from .progress import ProgressStore
from .session import ExerciseSession
from .vocabulary import VocabularyManager

vocab_manager = VocabularyManager(f"{settings.VOCAB_DIR}")
progress_store = ProgressStore(get_policy(settings.REVIEW_POLICY))
sessions: Dict[str, ExerciseSession] = {}
