from types import SimpleNamespace

from heartflow.landmarks import Landmark, LandmarkFrame, frame_from_results, landmark_at


def raw(x, y, z=0.0):
    return SimpleNamespace(x=x, y=y, z=z)


def category(name):
    return [SimpleNamespace(category_name=name)]


def test_empty_results_become_none():
    hands = SimpleNamespace(hand_landmarks=[], handedness=[])
    pose = SimpleNamespace(pose_landmarks=[])
    frame = frame_from_results(hands, pose, 12.0)
    assert frame.hands is None
    assert frame.poses is None
    assert frame.first_pose() is None
    assert frame.timestamp_ms == 12.0


def test_missing_results_become_none():
    frame = frame_from_results(None, None, 0.0)
    assert frame == LandmarkFrame()


def test_results_are_converted():
    hands = SimpleNamespace(
        hand_landmarks=[[raw(0.1, 0.2, -0.05)] * 21, [raw(0.8, 0.2)] * 21],
        handedness=[category("Left"), category("Right")],
    )
    pose = SimpleNamespace(pose_landmarks=[[raw(0.5, 0.5, -0.3)] * 33, [raw(0.1, 0.1)] * 33])
    frame = frame_from_results(hands, pose, 40.0)

    assert [h.handedness for h in frame.hands] == ["Left", "Right"]
    assert frame.hands[0].landmarks[8] == Landmark(0.1, 0.2, -0.05)
    assert len(frame.poses) == 2
    assert frame.first_pose()[0] == Landmark(0.5, 0.5, -0.3)


def test_missing_handedness_is_blank():
    hands = SimpleNamespace(hand_landmarks=[[raw(0.1, 0.2)] * 21], handedness=[])
    frame = frame_from_results(hands, None, 0.0)
    assert frame.hands[0].handedness == ""


def test_landmark_at_bounds():
    points = (Landmark(0, 0), Landmark(1, 1))
    assert landmark_at(points, 1) == Landmark(1, 1)
    assert landmark_at(points, 2) is None
    assert landmark_at(points, -1) is None
    assert landmark_at(None, 0) is None
