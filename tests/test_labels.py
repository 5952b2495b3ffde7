import pytest

from bbox2d.geometry import Box
from bbox2d.labels import (
    BLACK,
    COCO_LABELS,
    WHITE,
    BoxInfo,
    build_box_infos,
    format_label,
    grayscale,
    label_for,
    label_text_color,
    load_labels,
)


class TestLabels:
    def test_coco_fallback(self):
        labels = load_labels()
        assert len(labels) == 80
        assert labels[0] == "person"
        labels.append("extra")
        assert len(COCO_LABELS) == 80

    def test_load_from_file(self, tmp_path):
        p = tmp_path / "labels.txt"
        p.write_text("cat\n\n dog \nbird\n", encoding="utf-8")
        assert load_labels(p) == ["cat", "dog", "bird"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_labels(tmp_path / "nope.txt")

    def test_label_for_out_of_range(self):
        assert label_for(1, ["a", "b"]) == "b"
        assert label_for(5, ["a", "b"]) == "5"
        assert label_for(-1, ["a", "b"]) == "-1"


class TestFormatLabel:
    @pytest.mark.parametrize("conf,expected", [
        (0.875, "person: 87.5%"),
        (1.0, "person: 100%"),
        (0.0, "person: 0%"),
        (0.12344, "person: 12.34%"),
        (0.1, "person: 10%"),
    ])
    def test_format(self, conf, expected):
        assert format_label("person", conf) == expected


class TestColors:
    def test_grayscale_weights(self):
        assert grayscale((1.0, 1.0, 1.0)) == pytest.approx(1.0)
        assert grayscale((0.0, 1.0, 0.0, 0.5)) == pytest.approx(0.587)

    def test_text_color(self):
        assert label_text_color((1.0, 1.0, 0.0, 1.0)) == BLACK
        assert label_text_color((0.0, 0.0, 1.0, 1.0)) == WHITE
        assert label_text_color((1.0, 0.0, 0.0)) == WHITE


def test_build_box_infos():
    boxes = [Box(0, 0, 1, 1, class_index=0), Box(0, 0, 1, 1, class_index=3)]
    palette = [(1.0, 0.0, 0.0, 1.0), (0.0, 1.0, 0.0, 1.0)]
    infos = build_box_infos(boxes, ["person", "bicycle"], palette)
    assert infos[0] == BoxInfo(box=boxes[0], label="person", color=palette[0])
    assert infos[1].label == "3"
    assert infos[1].color == palette[1]

    plain = build_box_infos(boxes, COCO_LABELS)
    assert plain[1].label == "motorcycle"
    assert plain[1].color == (0.0, 0.0, 0.0, 0.0)
