from __future__ import annotations

from pathlib import Path

from lexicon_oracle.config import OracleConfig
from lexicon_oracle.data import load_sample_corpus
from lexicon_oracle.oracle import GenerationMode, PredictOptions
from lexicon_oracle.pipelines import oracle_from_text, prepare_oracle


def test_prepare_oracle_builds_dictionary_from_corpus(tmp_path: Path, scripted) -> None:
    corpus = tmp_path / "iliad.txt"
    corpus.write_text(load_sample_corpus(), encoding="utf-8")
    config = OracleConfig.from_dict({"dictionary": {"path": str(tmp_path / "dictionary.txt"), "min_count": 3}})
    generate = scripted("the son of atreus")
    oracle = prepare_oracle(config, generate, corpus_path=corpus)
    assert (tmp_path / "dictionary.txt").exists()
    assert "achaeans" in oracle.vocabulary
    result = oracle.predict("the son")
    assert result.mode is GenerationMode.DELEGATED
    assert result.text == "The son of atreus."


def test_oracle_from_text_keeps_everything_in_memory(scripted) -> None:
    oracle, dictionary = oracle_from_text(load_sample_corpus(), min_count=5, generate=scripted("unused"))
    assert dictionary.words[:3] == ["the", "and", "of"]
    result = oracle.predict("prophecy", PredictOptions(mode=GenerationMode.RANKED, length=4))
    assert result.tokens == ["prophecy", "the", "and", "of"]
