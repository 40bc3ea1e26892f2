import glob
import logging
import os
from typing import Any, Dict, List, Optional, Union

import pandas as pd
from pydantic import ValidationError

from .models import CategoryFilter, Word, WordCategory
from .sampler import filter_by_category

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("english", "chinese")
TEXT_COLUMNS = (
    "english",
    "chinese",
    "phonetic",
    "part_of_speech",
    "example_sentence",
    "example_translation",
)

DUMMY_WORDS = [
    {"english": "abandon", "chinese": "放弃", "phonetic": "/əˈbændən/", "part_of_speech": "v."},
    {"english": "ability", "chinese": "能力", "phonetic": "/əˈbɪləti/", "part_of_speech": "n."},
    {"english": "absorb", "chinese": "吸收", "phonetic": "/əbˈzɔːb/", "part_of_speech": "v."},
    {"english": "abstract", "chinese": "抽象的", "phonetic": "/ˈæbstrækt/", "part_of_speech": "adj."},
    {"english": "academic", "chinese": "学术的", "phonetic": "/ˌækəˈdemɪk/", "part_of_speech": "adj."},
]


def category_from_name(name: str) -> Optional[WordCategory]:
    """Maps a file stem or column value such as ``cet4`` or ``CET-6``."""
    key = name.strip().upper().replace("_", "-")
    if not key.startswith("CET"):
        return None
    key = "CET-" + key[3:].lstrip("-")
    try:
        return WordCategory(key)
    except ValueError:
        return None


def _word_id(value: Any) -> Optional[str]:
    """Normalizes a CSV id cell; blank cells give None so Word picks its own."""
    if pd.isna(value):
        return None
    # Numeric id columns with gaps are read back as floats
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip() or None


# --- Service Layer: Vocabulary Management ---
class VocabularyManager:
    """CSV-backed word store: loads every ``*.csv`` in a directory."""

    def __init__(self, directory: str):
        self.directory = directory
        self.words: List[Word] = []

    def load_all(self):
        self.words = []
        if not os.path.exists(self.directory):
            os.makedirs(self.directory)
            logger.warning(f"Created directory {self.directory}. Please add CSV files.")

        csv_files = sorted(glob.glob(os.path.join(self.directory, "*.csv")))
        for file_path in csv_files:
            file_name = os.path.splitext(os.path.basename(file_path))[0]
            try:
                df = pd.read_csv(file_path, encoding="utf-8")
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load {file_path}: {e}")
                continue

            if not all(col in df.columns for col in REQUIRED_COLUMNS):
                logger.error(f"Skipping {file_name}: Missing columns.")
                continue

            loaded = self._words_from_frame(df, category_from_name(file_name))
            self.words.extend(loaded)
            logger.info(f"Loaded {len(loaded)} words from {file_name}")

        if not self.words:
            logger.warning("No CSV files found. Loading dummy data.")
            self.words = [Word(**row) for row in DUMMY_WORDS]

    def _words_from_frame(
        self, df: pd.DataFrame, default_category: Optional[WordCategory]
    ) -> List[Word]:
        df = df.copy()
        for col in TEXT_COLUMNS:
            if col in df.columns:
                df[col] = df[col].fillna("").astype(str).str.strip()
        if "difficulty" in df.columns:
            df["difficulty"] = pd.to_numeric(df["difficulty"], errors="coerce").fillna(1).astype(int)
        df = df[(df["english"] != "") & (df["chinese"] != "")]

        words = []
        for row in df.to_dict("records"):
            fields = {k: v for k, v in row.items() if k in Word.model_fields and k != "category"}
            category = category_from_name(str(row.get("category", ""))) or default_category
            if category is not None:
                fields["category"] = category
            if "id" in fields:
                word_id = _word_id(fields.pop("id"))
                if word_id:
                    fields["id"] = word_id
            if "difficulty" in fields:
                fields["difficulty"] = int(fields["difficulty"])
            try:
                words.append(Word(**fields))
            except ValidationError as e:
                logger.error(f"Skipping row {row.get('english')!r}: {e}")
        return words

    def get_words(self, category: Union[CategoryFilter, str] = CategoryFilter.ALL) -> List[Word]:
        return filter_by_category(self.words, category)

    def get_categories(self) -> List[Dict[str, Any]]:
        categories = []
        for category in CategoryFilter:
            categories.append(
                {"id": category.value, "count": len(self.get_words(category))}
            )
        return categories
