"""Tests for pacgraph.core.logger."""

import pytest

from pacgraph.core.logger import FileFormatError, Logger, ValidationError


class TestRecording:
    def test_log_turns(self) -> None:
        logger = Logger("run")
        logger.log_turn(1, {"agents": {}})
        logger.log_turn(2, {"agents": {"0": [1, 1]}})
        assert logger.get_record_count() == 2
        assert logger.get_turn_range() == (1, 2)

    def test_turns_must_increase(self) -> None:
        logger = Logger("run")
        logger.log_turn(2, {})
        with pytest.raises(ValidationError):
            logger.log_turn(2, {})

    def test_negative_turn(self) -> None:
        with pytest.raises(ValidationError):
            Logger("run").log_turn(-1, {})

    def test_finalize_adds_summary(self) -> None:
        logger = Logger("run")
        logger.log_turn(1, {})
        logger.finalize(1, agents=2)
        assert logger.extract_summary() == [{"summary": True, "turn": 1, "agents": 2}]
        assert logger.get_turn_range() == (1, 1)

    def test_records_are_copied(self) -> None:
        logger = Logger("run")
        logger.log_turn(1, {})
        logger.get_records().clear()
        assert logger.get_record_count() == 1


class TestFiles:
    def test_write_and_read(self, tmp_path) -> None:
        logger = Logger("run", metadata={"width": 10}, path=str(tmp_path))
        logger.log_turn(1, {"ledger_size": 3})
        logger.finalize(1)
        filename = logger.write_to_file("out.json")

        loaded = Logger("other", path=str(tmp_path))
        loaded.read_from_file(filename)
        assert loaded.get_metadata() == {"width": 10}
        assert loaded.get_records() == logger.get_records()

    def test_generated_name(self, tmp_path) -> None:
        logger = Logger("run", path=str(tmp_path))
        filename = logger.write_to_file()
        assert filename.startswith("run_") and filename.endswith(".json")

    def test_refuses_overwrite(self, tmp_path) -> None:
        logger = Logger("run", path=str(tmp_path))
        logger.write_to_file("out.json")
        with pytest.raises(FileExistsError):
            logger.write_to_file("out.json")
        logger.write_to_file("out.json", force=True)

    def test_only_json(self, tmp_path) -> None:
        with pytest.raises(FileFormatError):
            Logger("run", path=str(tmp_path)).write_to_file("out.cbor")

    def test_corrupt_file(self, tmp_path) -> None:
        (tmp_path / "bad.json").write_text("{not json")
        with pytest.raises(FileFormatError):
            Logger("run", path=str(tmp_path)).read_from_file("bad.json")
