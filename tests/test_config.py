import json

import pytest

from bbox2d.config import AppConfig, load_config, parse_offset, parse_size
from bbox2d.scaling import Dims, Offset


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.json") == AppConfig()

    def test_invalid_json_gives_defaults(self, tmp_path):
        p = tmp_path / "bad.json"
        p.write_text("{not json", encoding="utf-8")
        assert load_config(p) == AppConfig()

    def test_values_and_unknown_keys(self, tmp_path):
        p = tmp_path / "runtime.json"
        p.write_text(json.dumps({
            "nms_threshold": "0.6",
            "mirror": "yes",
            "clamp_intersection": False,
            "display_size": "1920x1080",
            "output_size": "2560x1440",
            "box_format": "xyxy",
            "something_else": 1,
        }), encoding="utf-8")
        cfg = load_config(p)
        assert cfg.nms_threshold == 0.6
        assert cfg.mirror is True
        assert cfg.clamp_intersection is False
        assert cfg.box_format == "xyxy"
        assert cfg.display_dims == Dims(1920, 1080)
        assert cfg.output_dims == Dims(2560, 1440)
        assert cfg.score_threshold == AppConfig.score_threshold

    def test_bad_fields_fall_back(self, tmp_path):
        p = tmp_path / "runtime.json"
        p.write_text(json.dumps({"score_threshold": "high", "box_format": "cxcywh", "enable_csv": None}),
                     encoding="utf-8")
        cfg = load_config(p)
        assert cfg.score_threshold == AppConfig.score_threshold
        assert cfg.box_format == "xywh"
        assert cfg.enable_csv is False

    def test_bad_sizes_and_offset_fall_back(self, tmp_path):
        p = tmp_path / "runtime.json"
        p.write_text(json.dumps({
            "input_size": "640",
            "display_size": "0x720",
            "output_size": "widexhigh",
            "offset": "3",
        }), encoding="utf-8")
        cfg = load_config(p)
        assert cfg.input_dims == Dims(640, 640)
        assert cfg.display_dims == Dims(1280, 720)
        assert cfg.output_dims == cfg.display_dims
        assert cfg.offset_xy == Offset(0, 0)

    def test_non_object_json(self, tmp_path):
        p = tmp_path / "runtime.json"
        p.write_text("[1, 2]", encoding="utf-8")
        assert load_config(p) == AppConfig()

    def test_output_defaults_to_display(self):
        cfg = AppConfig()
        assert cfg.output_dims == cfg.display_dims == Dims(1280, 720)
        assert cfg.input_dims == Dims(640, 640)
        assert cfg.offset_xy == Offset(0, 0)


class TestParsers:
    def test_parse_size(self):
        assert parse_size("1270x720") == Dims(1270, 720)
        assert parse_size("640X480") == Dims(640, 480)

    @pytest.mark.parametrize("text", ["640", "axb", "1x2x3", ""])
    def test_parse_size_invalid(self, text):
        with pytest.raises(ValueError):
            parse_size(text)

    def test_parse_offset(self):
        assert parse_offset("12,-4") == Offset(12, -4)
        with pytest.raises(ValueError):
            parse_offset("12")
