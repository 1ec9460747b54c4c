"""
SystemConfig 테스트
"""

import pytest
import yaml

from pose_odom.config.system_config import (
    SystemConfig,
    load_config,
    create_default_config
)
from pose_odom.exceptions import ConfigurationError


class TestDefaults:
    """기본 설정 테스트"""

    def test_default_values(self):
        config = SystemConfig()
        assert config.filter.max_accel == 5.0
        assert config.filter.gps_fps == 20.0
        assert config.filter.nominal_dt == pytest.approx(0.05)
        assert config.filter.measurement_noise_std == 1e-2
        assert config.output.publish_tf
        assert config.output.child_frame_id == "base_link"
        assert config.output.mocap_frame_id == "fcu"
        assert not config.gating.enabled

    def test_default_is_valid(self):
        SystemConfig().validate()


class TestValidation:
    """설정 검증 테스트"""

    def test_tf_requires_child_frame_id(self):
        config = SystemConfig()
        config.output.child_frame_id = ""
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_empty_child_frame_ok_without_tf(self):
        config = SystemConfig()
        config.output.publish_tf = False
        config.output.child_frame_id = ""
        config.validate()

    @pytest.mark.parametrize("field, value", [
        ("gps_fps", 0.0),
        ("gps_fps", -20.0),
        ("max_accel", -1.0),
        ("initial_covariance_scale", 0.0),
        ("measurement_noise_std", -0.01),
        ("dt_floor", -1e-6),
    ])
    def test_invalid_filter_values(self, field, value):
        config = SystemConfig()
        setattr(config.filter, field, value)
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_invalid_output_format(self):
        config = SystemConfig()
        config.output.output_format = "xml"
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)


class TestLoadConfig:
    """YAML 로드 테스트"""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "missing.yaml"))
        assert config == SystemConfig()

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == SystemConfig()

    def test_partial_override(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({
            'filter': {'max_accel': 2.0, 'gps_fps': 100.0},
            'output': {'child_frame_id': 'quad'},
            'log_level': 'DEBUG'
        }))

        config = load_config(str(path))

        assert config.filter.max_accel == 2.0
        assert config.filter.gps_fps == 100.0
        assert config.filter.initial_covariance_scale == 1.0
        assert config.output.child_frame_id == 'quad'
        assert config.log_level == 'DEBUG'

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({'filter': {'max_acceleration': 2.0}}))
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_invalid_value_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({'filter': {'gps_fps': 0.0}}))
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "saved.yaml"
        config = SystemConfig()
        config.filter.max_accel = 3.0
        config.gating.enabled = True
        config.save(str(path))

        loaded = load_config(str(path))
        assert loaded == config

    def test_create_default_config(self, tmp_path):
        path = tmp_path / "default.yaml"
        config = create_default_config(str(path))
        assert path.exists()
        assert load_config(str(path)) == config


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
