"""Tests for the expression classifier decision table."""

import itertools
import math

import pytest

from emojify.classifier import ExpressionClassifier, classify
from emojify.config import EmojifyConfig
from emojify.types import EmojiCategory


class TestDecisionTable:
    @pytest.mark.parametrize(
        "smiling, left_open, right_open, expected",
        [
            (0.9, 0.9, 0.9, EmojiCategory.SMILE),
            (0.9, 0.1, 0.9, EmojiCategory.LEFT_WINK),
            (0.9, 0.9, 0.1, EmojiCategory.RIGHT_WINK),
            (0.9, 0.1, 0.1, EmojiCategory.CLOSED_EYE_SMILE),
            (0.1, 0.9, 0.9, EmojiCategory.FROWN),
            (0.1, 0.1, 0.9, EmojiCategory.LEFT_WINK_FROWN),
            (0.1, 0.9, 0.1, EmojiCategory.RIGHT_WINK_FROWN),
            (0.1, 0.1, 0.1, EmojiCategory.CLOSED_EYE_FROWN),
        ],
    )
    def test_table(self, make_face, smiling, left_open, right_open, expected):
        face = make_face(smiling=smiling, left_open=left_open, right_open=right_open)
        assert classify(face) is expected

    def test_every_category_reachable(self, make_face):
        seen = set()
        for s, l, r in itertools.product((0.0, 1.0), repeat=3):
            seen.add(classify(make_face(smiling=s, left_open=l, right_open=r)))
        assert seen == set(EmojiCategory)


class TestBoundaries:
    def test_smiling_at_threshold_is_not_smiling(self, make_face):
        face = make_face(smiling=0.15, left_open=0.9, right_open=0.9)
        assert classify(face) is EmojiCategory.FROWN

    def test_smiling_just_above_threshold(self, make_face):
        face = make_face(smiling=0.1501, left_open=0.9, right_open=0.9)
        assert classify(face) is EmojiCategory.SMILE

    def test_eye_open_at_threshold_is_open(self, make_face):
        """Closed requires open probability strictly below 0.5."""
        face = make_face(smiling=0.9, left_open=0.5, right_open=0.5)
        assert classify(face) is EmojiCategory.SMILE

    def test_eye_open_just_below_threshold_is_closed(self, make_face):
        face = make_face(smiling=0.9, left_open=0.4999, right_open=0.5)
        assert classify(face) is EmojiCategory.LEFT_WINK

    def test_uncomputed_sentinel(self, make_face):
        """-1 (probability not computed) reads as not smiling, eyes closed."""
        face = make_face(smiling=-1.0, left_open=-1.0, right_open=-1.0)
        assert classify(face) is EmojiCategory.CLOSED_EYE_FROWN

    def test_nan_is_total(self, make_face):
        face = make_face(smiling=math.nan, left_open=math.nan, right_open=math.nan)
        assert classify(face) is EmojiCategory.FROWN


class TestTotality:
    def test_grid_always_one_category(self, make_face):
        values = (0.0, 0.1, 0.15, 0.2, 0.49, 0.5, 0.51, 0.9, 1.0)
        for s, l, r in itertools.product(values, repeat=3):
            result = classify(make_face(smiling=s, left_open=l, right_open=r))
            assert isinstance(result, EmojiCategory)

    def test_deterministic(self, make_face):
        face = make_face(smiling=0.3, left_open=0.2, right_open=0.8)
        results = {classify(face) for _ in range(20)}
        assert results == {EmojiCategory.LEFT_WINK}


class TestExpressionClassifier:
    def test_default_thresholds(self):
        classifier = ExpressionClassifier()
        assert classifier.smiling_threshold == 0.15
        assert classifier.eye_open_threshold == 0.5

    def test_callable(self, make_face):
        classifier = ExpressionClassifier()
        face = make_face(smiling=0.9, left_open=0.9, right_open=0.1)
        assert classifier(face) is EmojiCategory.RIGHT_WINK
        assert classifier.classify(face) is EmojiCategory.RIGHT_WINK

    def test_custom_thresholds(self, make_face):
        classifier = ExpressionClassifier(
            EmojifyConfig(smiling_threshold=0.5, eye_open_threshold=0.2)
        )
        face = make_face(smiling=0.3, left_open=0.3, right_open=0.3)
        # Default thresholds would say CLOSED_EYE_SMILE
        assert classify(face) is EmojiCategory.CLOSED_EYE_SMILE
        assert classifier(face) is EmojiCategory.FROWN
