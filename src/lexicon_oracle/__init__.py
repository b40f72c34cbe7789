# SPDX-License-Identifier: Apache-2.0
"""Lexicon Oracle package."""

from .config import OracleConfig, load_config
from .dictionary import Dictionary, FrequencyEntry, Vocabulary, build_dictionary, load_vocabulary
from .errors import ConstraintViolation, ExternalGeneratorError, OracleError, VocabularyUnavailable
from .oracle import GenerationMode, GenerationResult, Oracle, PredictOptions
from .sampling import reshape, sample_without_replacement
from .utils import tokenize

__all__ = [
    "ConstraintViolation",
    "Dictionary",
    "ExternalGeneratorError",
    "FrequencyEntry",
    "GenerationMode",
    "GenerationResult",
    "Oracle",
    "OracleConfig",
    "OracleError",
    "PredictOptions",
    "Vocabulary",
    "VocabularyUnavailable",
    "build_dictionary",
    "load_config",
    "load_vocabulary",
    "reshape",
    "sample_without_replacement",
    "tokenize",
]

__version__ = "0.1.0"
