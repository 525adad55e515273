import random

import pytest

from wordquest.models import VocabularyEntry


def make_entry(i, source, target, example_source=None, example_target=None, **extra):
    return VocabularyEntry(
        id=f"v{i}",
        source_word=source,
        target_word=target,
        example_source=example_source,
        example_target=example_target,
        **extra,
    )


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def bare_pool():
    """Four words, no example sentences."""
    return [
        make_entry(1, "dog", "perro"),
        make_entry(2, "cat", "gato"),
        make_entry(3, "house", "casa"),
        make_entry(4, "water", "agua"),
    ]


@pytest.fixture
def sentence_pool():
    return [
        make_entry(1, "dog", "perro", "The dog barks.", "El perro ladra."),
        make_entry(2, "cat", "gato", "My cat sleeps all day.", "Mi gato duerme todo el día."),
        make_entry(3, "house", "casa", "This house is big.", "Esta casa es grande."),
        make_entry(4, "water", "agua", "Water is cold.", "El agua está fría."),
        make_entry(5, "book", "libro", "I read a book.", "Leo un libro."),
        make_entry(6, "run", "correr", "She runs every morning.", "Ella corre cada mañana."),
    ]
