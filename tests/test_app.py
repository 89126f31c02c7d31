import pytest

pytest.importorskip("mediapipe")
pytest.importorskip("moviepy")

from heartflow import app  # noqa: E402


def test_parser_defaults():
    args = app.build_parser().parse_args([])
    assert args.camera == 0
    assert args.video is None
    assert (args.width, args.height) == (960, 720)
    assert args.pose_model == "lite"
    cfg = app.config_from_args(args)
    assert cfg.legs is True
    assert cfg.walls is False


def test_parser_flags():
    args = app.build_parser().parse_args(["--no-legs", "--walls", "--max-age", "50", "--width", "640", "--height", "480"])
    cfg = app.config_from_args(args)
    assert cfg.legs is False
    assert cfg.walls is True
    assert cfg.max_age == 50
    assert (cfg.width, cfg.height) == (640, 480)


def test_bad_size_is_rejected():
    args = app.build_parser().parse_args(["--width", "0"])
    with pytest.raises(ValueError):
        app.config_from_args(args)


def test_missing_video_renders_nothing(tmp_path, capsys):
    assert app.render_video(str(tmp_path / "nope.mp4"), app.FlowConfig()) == ""
    assert "Failed to open video file" in capsys.readouterr().out


class FakeCapture:
    def __init__(self, *args):
        self.released = False

    def isOpened(self):
        return True

    def get(self, prop):
        return 30.0

    def read(self):
        return False, None

    def release(self):
        self.released = True


class FakeWriter:
    def __init__(self, *args):
        self.released = False

    def write(self, frame):
        pass

    def release(self):
        self.released = True


def test_failed_render_cleans_up(tmp_path, monkeypatch):
    captures, writers = [], []
    real_mkstemp = app.tempfile.mkstemp

    def capture(*args):
        captures.append(FakeCapture())
        return captures[-1]

    def writer(*args):
        writers.append(FakeWriter())
        return writers[-1]

    def broken_tracker(**kwargs):
        raise RuntimeError("model download failed")

    monkeypatch.setattr(app.cv2, "VideoCapture", capture)
    monkeypatch.setattr(app.cv2, "VideoWriter", writer)
    monkeypatch.setattr(app.tempfile, "mkstemp", lambda suffix: real_mkstemp(suffix=suffix, dir=str(tmp_path)))
    monkeypatch.setattr(app, "LandmarkTracker", broken_tracker)

    with pytest.raises(RuntimeError):
        app.render_video(str(tmp_path / "clip.mp4"), app.FlowConfig(width=64, height=48))

    assert captures[0].released
    assert writers[0].released
    assert list(tmp_path.glob("*.mp4")) == []
