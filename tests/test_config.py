"""
Tests for YAML configuration loading and validation.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from clinicslots.config import AppConfig, ClinicConfig, DefaultsConfig


class TestDefaults:

    def test_built_in_defaults_match_the_clinic_policy(self):
        config = AppConfig()

        assert config.timezone == "Europe/Berlin"
        assert config.defaults.duration_minutes == 60
        assert config.clinic.off_weekdays == [6]
        assert [u.username for u in config.users] == ["patient", "practitioner"]

    def test_engine_from_config(self):
        engine = ClinicConfig().build_engine()

        assert engine.window_days == 7
        assert engine.slot_step_minutes == 30
        assert engine.collect_limit == 5
        assert engine.max_suggestions == 3
        assert list(engine.working_hours.candidate_hours()) == list(range(8, 20))

    def test_data_files_live_in_data_dir(self, tmp_path):
        config = AppConfig(data_dir=tmp_path)

        assert config.appointments_file == tmp_path / "appointments.json"
        assert config.session_file == tmp_path / "session.json"


class TestLoadFromYaml:

    def test_load(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "timezone: Asia/Kolkata\n"
            f"data_dir: {tmp_path}\n"
            "clinic:\n"
            "  off_weekdays: [6, 6, 0]\n"
            "  collect_limit: null\n"
            "defaults:\n"
            "  duration_minutes: 90\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(path)

        assert config.timezone == "Asia/Kolkata"
        assert config.data_dir == tmp_path
        assert config.clinic.off_weekdays == [6, 0]
        assert config.clinic.collect_limit is None
        assert config.defaults.duration_minutes == 90

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("clinic: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(path)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        assert AppConfig.load_from_yaml(path).defaults.duration_minutes == 60

    def test_load_without_any_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("clinicslots.config.get_default_config_path", lambda: tmp_path / "config.yaml")

        assert AppConfig.load().clinic.max_suggestions == 3

    def test_example_config_is_valid(self):
        example = Path(__file__).parent.parent / "config.example.yaml"

        config = AppConfig.load_from_yaml(example)

        assert config.clinic.start_hour == 8
        assert config.find_account("practitioner") is not None


class TestValidation:

    @pytest.mark.parametrize(
        "clinic",
        [
            {"start_hour": 25},
            {"end_hour": 0},
            {"start_hour": 12, "end_hour": 10},
            {"optimal_start_hour": 17, "optimal_end_hour": 9},
            {"off_weekdays": [7]},
            {"window_days": 0},
            {"slot_step_minutes": 90},
            {"collect_limit": 0},
        ],
    )
    def test_invalid_clinic_settings(self, clinic):
        with pytest.raises(ValidationError):
            ClinicConfig(**clinic)

    def test_duration_must_be_positive(self):
        with pytest.raises(ValidationError, match="duration_minutes"):
            DefaultsConfig(duration_minutes=0)

    def test_duplicate_usernames(self):
        account = {"id": "1", "username": "patient", "password": "demo", "role": "patient"}

        with pytest.raises(ValidationError, match="Duplicate username"):
            AppConfig(users=[account, dict(account, id="2", username="PATIENT")])
