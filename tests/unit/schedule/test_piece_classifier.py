"""
Unit-тесты для PieceClassifier.

ЦКП: Категория по упорядоченному списку правил.
"""

from dataclasses import replace

import pytest

from contracts.d2_schedule_dto import PieceCategory
from src.schedule.rules import RulesConfig
from src.schedule.s4_pieces import PieceClassifier


@pytest.fixture
def piece_config():
    RulesConfig._cache.clear()
    return RulesConfig.load().pieces


@pytest.fixture
def classifier(piece_config):
    return PieceClassifier(piece_config)


class TestClassificationRules:

    @pytest.mark.parametrize("text,expected", [
        ("Hymns 707, 421, 806", PieceCategory.HYMNS),
        ("Psalm 110 Garrett", PieceCategory.PSALMS),
        ("Anthem: O clap your hands", PieceCategory.ANTHEMS),
        ("Magnificat and Nunc Dimittis in G Stanford", PieceCategory.SETTINGS),
        ("Responses Smith", PieceCategory.SETTINGS),
        ("Walmisley in D minor", PieceCategory.SETTINGS),
        ("Wood in E-flat", PieceCategory.SETTINGS),
        ("Toccata in F Widor", PieceCategory.ORGAN),
        ("Voluntary: Prelude in C Bach", PieceCategory.ORGAN),
        ("Crux fidelis MacDonald", PieceCategory.ANTHEMS),
    ])
    def test_category(self, classifier, text, expected):
        assert classifier.classify(text) is expected

    def test_choral_keyword_vetoes_organ(self, classifier):
        """Должен не считать органным текст с хоровым ключевым словом."""
        assert classifier.classify("Chorale Prelude on Psalm 23") is PieceCategory.PSALMS

    def test_organ_keyword_whole_word_only(self, classifier):
        """Должен не срабатывать на 'organ' внутри 'organist' и 'march' внутри 'Marchant'."""
        assert classifier.classify("Te lucis Marchant") is PieceCategory.ANTHEMS
        assert classifier.classify("Anthem chosen by the organist") is PieceCategory.ANTHEMS

    def test_organ_keyword_plural(self, classifier):
        assert classifier.classify("Two Marches Elgar") is PieceCategory.ORGAN

    def test_configured_default_category(self, piece_config):
        """Должен использовать категорию по умолчанию из конфига."""
        classifier = PieceClassifier(replace(piece_config, default_category=PieceCategory.OTHER))
        assert classifier.classify("Crux fidelis MacDonald") is PieceCategory.OTHER

    def test_rules_ordered_and_named(self, classifier):
        assert [rule.name for rule in classifier.rules] == [
            "organ", "hymn", "psalm", "anthem", "setting_keyword", "setting_shape",
        ]

    def test_joined_key_pair_falls_back_to_default(self, classifier):
        """Должен отнести "Stanford in Cand F" к категории по умолчанию."""
        assert classifier.classify("Stanford in Cand F") is PieceCategory.ANTHEMS
