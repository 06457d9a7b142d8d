# verification/tests/test_services.py
import numpy as np
from django.test import SimpleTestCase

from verification.services.matcher import EmbeddingMatcher, compare_embeddings
from verification.services.normalizer import normalize
from verification.services.thresholds import MatchThresholds
from verification.services.types import ConfidenceLevel, InvalidInput, MatchType
from verification.services.vector_math import (
    cosine_similarity,
    dot,
    euclidean_distance,
    l2_norm,
    population_variance,
)


class VectorMathTest(SimpleTestCase):
    def test_cosine_similarity_with_itself(self):
        a = np.array([0.3, -1.2, 2.5, 0.7], dtype=np.float32)
        self.assertAlmostEqual(cosine_similarity(a, a), 1.0, places=5)

    def test_cosine_similarity_zero_norm_is_zero(self):
        self.assertEqual(cosine_similarity([0.0, 0.0, 0.0], [0.0, 0.0, 0.0]), 0.0)
        self.assertEqual(cosine_similarity([0.0, 0.0], [1.0, 2.0]), 0.0)

    def test_euclidean_distance_with_itself(self):
        a = [0.3, -1.2, 2.5, 0.7]
        self.assertEqual(euclidean_distance(a, a), 0.0)

    def test_basic_metrics(self):
        self.assertAlmostEqual(dot([1.0, 2.0, 3.0], [4.0, 5.0, 6.0]), 32.0)
        self.assertAlmostEqual(l2_norm([3.0, 4.0]), 5.0)
        self.assertAlmostEqual(euclidean_distance([0.0, 0.0], [3.0, 4.0]), 5.0)
        # mean 2.5, squared deviations 2.25 + 0.25 + 0.25 + 2.25
        self.assertAlmostEqual(population_variance([1.0, 2.0, 3.0, 4.0]), 1.25)

    def test_length_mismatch_rejected(self):
        with self.assertRaises(InvalidInput):
            dot([1.0, 2.0], [1.0])
        with self.assertRaises(InvalidInput):
            euclidean_distance([1.0, 2.0], [1.0, 2.0, 3.0])

    def test_large_and_tiny_values(self):
        big = [1e200] * 3
        tiny = [1e-170, 2e-170]
        self.assertAlmostEqual(cosine_similarity(big, big), 1.0, places=5)
        self.assertAlmostEqual(cosine_similarity(tiny, tiny), 1.0, places=5)
        self.assertAlmostEqual(cosine_similarity([1e-170] * 4, [1e-170] * 4), 1.0, places=5)
        self.assertEqual(euclidean_distance(big, big), 0.0)
        self.assertEqual(population_variance(big), 0.0)
        self.assertAlmostEqual(l2_norm([1e200] * 4) / 2e200, 1.0)
        self.assertAlmostEqual(l2_norm([1e-170] * 4) / 2e-170, 1.0)
        self.assertAlmostEqual(dot([1e200, 0.0], [1e-200, 0.0]), 1.0)

    def test_metric_out_of_float_range(self):
        with self.assertRaises(InvalidInput):
            euclidean_distance([1e308], [-1e308])
        with self.assertRaises(InvalidInput):
            dot([1e200], [1e200])
        with self.assertRaises(InvalidInput):
            population_variance([1e308, -1e308])

    def test_non_numeric_rejected(self):
        for bad in (["0.5", "0.1"], [True, False], [None, 1.0], np.array([1 + 2j])):
            with self.assertRaises(InvalidInput):
                l2_norm(bad)
        self.assertEqual(l2_norm(np.array([3, 4], dtype=np.int32)), 5.0)


class NormalizerTest(SimpleTestCase):
    def test_unit_norm(self):
        out = normalize([3.0, 4.0])
        np.testing.assert_allclose(out, [0.6, 0.8])
        self.assertAlmostEqual(float(np.linalg.norm(out)), 1.0, places=6)

    def test_tiny_vector_becomes_zero(self):
        out = normalize([1e-13, 0.0, 0.0])
        np.testing.assert_array_equal(out, [0.0, 0.0, 0.0])

    def test_idempotent(self):
        once = normalize([0.2, -0.5, 1.7, 3.1])
        twice = normalize(once)
        np.testing.assert_allclose(once, twice, atol=1e-12)

    def test_output_read_only(self):
        out = normalize([1.0, 1.0])
        with self.assertRaises(ValueError):
            out[0] = 5.0

    def test_non_finite_rejected(self):
        with self.assertRaises(InvalidInput):
            normalize([1.0, float("nan")])
        with self.assertRaises(InvalidInput):
            normalize([])

    def test_extreme_magnitudes(self):
        np.testing.assert_array_equal(normalize([1e-170, 2e-170]), [0.0, 0.0])
        out = normalize([1e308] * 4)
        np.testing.assert_allclose(out, [0.5] * 4)
        self.assertAlmostEqual(float(np.linalg.norm(out)), 1.0, places=6)


class MatcherTest(SimpleTestCase):
    def test_identical_embeddings(self):
        e = normalize([1.0, 0.0, 0.0, 0.0])
        res = compare_embeddings(e, e)
        self.assertAlmostEqual(res.cosine_similarity, 1.0, places=6)
        self.assertEqual(res.euclidean_distance, 0.0)
        self.assertEqual(res.composite_similarity, res.cosine_similarity)
        self.assertAlmostEqual(res.quality_score, 0.1875)
        self.assertEqual(res.confidence, ConfidenceLevel.VERY_HIGH)
        self.assertTrue(res.is_match)
        self.assertEqual(res.match_type, MatchType.SAME_PERSON_HIGH_CONFIDENCE)

    def test_orthogonal_embeddings(self):
        res = compare_embeddings([1.0, 0.0, 0.0, 0.0], [0.0, 1.0, 0.0, 0.0])
        self.assertEqual(res.cosine_similarity, 0.0)
        self.assertAlmostEqual(res.euclidean_distance, 2 ** 0.5)
        # 0 (cosine) + 2 (distance) + 2 (variance)
        self.assertEqual(res.confidence, ConfidenceLevel.MEDIUM)
        self.assertFalse(res.is_match)
        self.assertEqual(res.match_type, MatchType.DIFFERENT_PEOPLE)

    def test_zero_vectors_are_not_an_error(self):
        res = compare_embeddings([0.0, 0.0, 0.0], [0.0, 0.0, 0.0])
        self.assertEqual(res.cosine_similarity, 0.0)
        self.assertEqual(res.euclidean_distance, 0.0)
        self.assertEqual(res.quality_score, 0.0)
        self.assertFalse(res.is_match)
        self.assertEqual(res.match_type, MatchType.DIFFERENT_PEOPLE)

    def test_invalid_inputs(self):
        with self.assertRaises(InvalidInput):
            compare_embeddings([1.0, 0.0], [1.0, 0.0, 0.0])
        with self.assertRaises(InvalidInput):
            compare_embeddings([], [])
        with self.assertRaises(InvalidInput):
            compare_embeddings([1.0, float("inf")], [1.0, 0.0])
        with self.assertRaises(InvalidInput):
            compare_embeddings([[1.0, 0.0]], [[1.0, 0.0]])
        with self.assertRaises(InvalidInput):
            compare_embeddings([1e308, 1e308], [-1e308, -1e308])

    def test_extreme_but_valid_embeddings(self):
        for e in ([1e200] * 3, [1e-170, 2e-170]):
            res = compare_embeddings(e, e)
            self.assertAlmostEqual(res.cosine_similarity, 1.0, places=5)
            self.assertEqual(res.euclidean_distance, 0.0)
            self.assertEqual(res.confidence, ConfidenceLevel.VERY_HIGH)
            self.assertTrue(res.is_match)
            self.assertEqual(res.match_type, MatchType.SAME_PERSON_HIGH_CONFIDENCE)

    def test_variance_from_first_embedding_only(self):
        a = [1.0, 0.0, 0.0, 0.0]
        b = [0.5, 0.5, 0.5, 0.5]
        self.assertAlmostEqual(compare_embeddings(a, b).quality_score, 0.1875)
        self.assertEqual(compare_embeddings(b, a).quality_score, 0.0)

    def test_average_variance_flag(self):
        matcher = EmbeddingMatcher(MatchThresholds(average_variance=True))
        res = matcher.compare([1.0, 0.0, 0.0, 0.0], [0.5, 0.5, 0.5, 0.5])
        self.assertAlmostEqual(res.quality_score, 0.09375)

    def test_payload(self):
        e = [1.0, 0.0, 0.0, 0.0]
        payload = compare_embeddings(e, e).to_payload()
        self.assertEqual(
            set(payload),
            {"isMatch", "matchType", "cosineSimilarity", "euclideanDistance",
             "compositeSimilarity", "confidence", "qualityScore"},
        )
        self.assertIs(payload["isMatch"], True)
        self.assertEqual(payload["matchType"], "SAME_PERSON_HIGH_CONFIDENCE")
        self.assertEqual(payload["confidence"], "VERY_HIGH")

    def test_result_is_immutable(self):
        res = compare_embeddings([1.0, 0.0], [1.0, 0.0])
        with self.assertRaises(AttributeError):
            res.is_match = False
