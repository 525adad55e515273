import glob
import logging
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from .models import VocabularyEntry

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("source_word", "target_word")
OPTIONAL_COLUMNS = (
    "pronunciation",
    "word_type",
    "example_source",
    "example_target",
    "audio_url",
)

DUMMY_WORDS = [
    ("Hund", "dog", "Der Hund schläft.", "The dog is sleeping."),
    ("Katze", "cat", "Die Katze trinkt Milch.", "The cat drinks milk."),
    ("Baum", "tree", "Der Baum ist alt.", "The tree is old."),
    ("Haus", "house", "Das Haus ist groß.", "The house is big."),
    ("Wasser", "water", "Ich trinke Wasser.", "I drink water."),
]


def _clean(value: Any) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def frame_to_entries(df: pd.DataFrame, topic: str) -> List[VocabularyEntry]:
    entries = []
    for row_number, row in enumerate(df.to_dict("records")):
        source, target = _clean(row.get("source_word")), _clean(row.get("target_word"))
        if not source or not target:
            logger.warning(f"Skipping row {row_number} of {topic}: empty word")
            continue
        entries.append(
            VocabularyEntry(
                id=_clean(row.get("id")) or f"{topic}-{row_number}",
                source_word=source,
                target_word=target,
                **{col: _clean(row.get(col)) for col in OPTIONAL_COLUMNS},
            )
        )
    return entries


class VocabularyManager:
    """Manages loading and accessing vocabulary sets."""

    def __init__(self, directory: str):
        self.directory = directory
        self.vocab_sets: Dict[str, List[VocabularyEntry]] = {}

    def load_all(self):
        self.vocab_sets = {}
        if not os.path.exists(self.directory):
            os.makedirs(self.directory, exist_ok=True)
            logger.warning(f"Created directory {self.directory}. Please add CSV files.")

        csv_files = sorted(glob.glob(os.path.join(self.directory, "*.csv")))
        for file_path in csv_files:
            file_name = os.path.splitext(os.path.basename(file_path))[0]
            try:
                df = pd.read_csv(file_path, encoding="utf-8", dtype=str)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load {file_path}: {e}")
                continue

            missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
            if missing:
                logger.error(f"Skipping {file_name}: Missing columns {missing}.")
                continue

            self.vocab_sets[file_name] = frame_to_entries(df, file_name)
            logger.info(f"Loaded {len(self.vocab_sets[file_name])} words from {file_name}")

        if not self.vocab_sets:
            logger.warning("No CSV files found. Loading dummy data.")
            self.vocab_sets["default_dummy"] = [
                VocabularyEntry(
                    id=f"default_dummy-{i}",
                    source_word=source,
                    target_word=target,
                    example_source=example_source,
                    example_target=example_target,
                )
                for i, (source, target, example_source, example_target) in enumerate(
                    DUMMY_WORDS
                )
            ]

    def get_words(self, topic: str) -> List[VocabularyEntry]:
        return self.vocab_sets.get(topic, [])

    def get_entry(self, topic: str, vocabulary_id: str) -> Optional[VocabularyEntry]:
        return next((v for v in self.get_words(topic) if v.id == vocabulary_id), None)

    def all_entries(self) -> Dict[str, VocabularyEntry]:
        return {v.id: v for words in self.vocab_sets.values() for v in words}

    def get_topics(self) -> List[Dict[str, Any]]:
        topics = []
        for key, words in self.vocab_sets.items():
            display_name = key.replace("_", " ").title()
            topics.append({"id": key, "name": display_name, "count": len(words)})
        topics.sort(key=lambda x: x["name"])
        return topics
