"""
Pytest configuration and shared fixtures.

Provides small HTSeq-style counts matrices as text and as files on disk.
"""

import numpy as np
import pytest
from pathlib import Path


HEADER = "gene_id\tS1\tS2\tS3\tS4"

COUNTS_LINES = [
    HEADER,
    "gene1\t10\t0\t0\t20",
    "gene2\t5\t5\t5\t5",
    "gene3\t1\t2\t0\t0",
    "gene4\t0\t0\t0\t0",
    "gene5\t100\t250\t80\t150",
    "__no_feature\t100\t200\t300\t400",
    "__ambiguous\t1\t2\t3\t4",
]


def write_counts(path: Path, lines) -> Path:
    """Write matrix lines to path, newline-terminated."""
    path.write_text("".join(f"{line}\n" for line in lines))
    return path


def generate_counts_lines(n_genes: int, n_samples: int, zero_fraction: float = 0.3, seed: int = 42):
    """
    Generate a synthetic HTSeq counts matrix as text lines.

    Counts are negative-binomial-like (Poisson with gamma-distributed means),
    with a fraction of values forced to zero, and the five standard HTSeq
    metacount rows appended.
    """
    rng = np.random.RandomState(seed)
    lines = ["gene_id\t" + "\t".join(f"SAMPLE_{j:03d}" for j in range(n_samples))]

    means = rng.gamma(shape=0.5, scale=200.0, size=n_genes)
    for i in range(n_genes):
        counts = rng.poisson(means[i], size=n_samples)
        counts[rng.rand(n_samples) < zero_fraction] = 0
        lines.append(f"ENSG{i:011d}\t" + "\t".join(str(c) for c in counts))

    for meta in ("__no_feature", "__ambiguous", "__too_low_aQual", "__not_aligned", "__alignment_not_unique"):
        counts = rng.poisson(1000, size=n_samples)
        lines.append(f"{meta}\t" + "\t".join(str(c) for c in counts))

    return lines


@pytest.fixture
def counts_lines():
    """Small matrix: five genes, two metacounts."""
    return list(COUNTS_LINES)


@pytest.fixture
def counts_text(counts_lines):
    return "".join(f"{line}\n" for line in counts_lines)


@pytest.fixture
def counts_file(tmp_path, counts_lines):
    """Small matrix written to a temporary file."""
    return write_counts(tmp_path / "counts.tsv", counts_lines)


@pytest.fixture
def synthetic_counts_file(tmp_path):
    """Synthetic matrix (500 genes x 12 samples) written to a temporary file."""
    return write_counts(tmp_path / "synthetic.tsv", generate_counts_lines(500, 12))
