# SPDX-License-Identifier: Apache-2.0
"""Predefined setup pipelines."""

from .workflows import oracle_from_text, prepare_oracle

__all__ = ["oracle_from_text", "prepare_oracle"]
