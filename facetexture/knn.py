"""Nearest-neighbour classification of feature vectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from bisect import bisect_right
from collections import Counter

import numpy as np

_UNSET_DISTANCE = 10000000000000000000.0
_UNSET_LABEL = 0


def _chi_square(a, b):
    """Chi-square distance between two histograms; empty bins are skipped."""
    total = a + b
    diff = a - b
    mask = total != 0
    return float(np.sum(diff[mask] * diff[mask] / total[mask]))


def _as_rows(data, name):
    arr = np.asarray(data, dtype=np.float32)
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be a 2-D array of feature vectors")
    return arr.astype(np.float64)


class Classifier(ABC):
    """Assigns class labels to test feature vectors given labelled training vectors.

    Feature sets hold one vector per row.
    """

    @abstractmethod
    def classify(self, train, labels, test):
        """Return the predicted label of every row of ``test``."""

    @abstractmethod
    def classify_one(self, train, labels, test):
        """Return the predicted label of the first row of ``test`` as a float."""


class KNN(Classifier):
    """k-nearest-neighbour classifier using the chi-square distance by default.

    Ties in the vote go to the smallest label.  When fewer than ``k``
    training vectors exist, the empty neighbour slots vote for label 0.
    """

    def __init__(self, k=1, distance=None):
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        self.k = int(k)
        self.distance = distance if distance is not None else _chi_square

    def _prepare(self, train, labels, test):
        train_rows = _as_rows(train, "train")
        test_rows = _as_rows(test, "test")
        label_list = [int(label) for label in labels]
        if len(label_list) != train_rows.shape[0]:
            raise ValueError(
                f"got {len(label_list)} labels for {train_rows.shape[0]} training vectors"
            )
        if test_rows.size and train_rows.size and test_rows.shape[1] != train_rows.shape[1]:
            raise ValueError(
                f"test vectors have {test_rows.shape[1]} features, "
                f"training vectors have {train_rows.shape[1]}"
            )
        return train_rows, label_list, test_rows

    def _predict(self, train_rows, labels, sample):
        distances = [_UNSET_DISTANCE] * self.k
        neighbours = [_UNSET_LABEL] * self.k
        for row, label in zip(train_rows, labels):
            dist = self.distance(row, sample)
            if dist < distances[-1]:
                pos = bisect_right(distances, dist)
                distances.insert(pos, dist)
                neighbours.insert(pos, label)
                del distances[self.k :]
                del neighbours[self.k :]
        votes = Counter(neighbours)
        best = max(votes.values())
        return min(label for label, count in votes.items() if count == best)

    def classify(self, train, labels, test):
        train_rows, label_list, test_rows = self._prepare(train, labels, test)
        return [self._predict(train_rows, label_list, sample) for sample in test_rows]

    def classify_one(self, train, labels, test):
        train_rows, label_list, test_rows = self._prepare(train, labels, test)
        if test_rows.shape[0] == 0:
            raise ValueError("no test vector was given")
        return float(self._predict(train_rows, label_list, test_rows[0]))