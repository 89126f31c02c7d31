import pytest
from conftest import make_frame, make_pose

from heartflow.geometry import CoordinateMapper
from heartflow.landmarks import (
    LEFT_ELBOW,
    LEFT_FOOT,
    LEFT_HIP,
    LEFT_KNEE,
    LEFT_SHOULDER,
    LEFT_WRIST,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    LandmarkFrame,
)
from heartflow.waypoints import Region, WaypointBuilder, heart_point, path_for


@pytest.fixture
def builder():
    return WaypointBuilder(CoordinateMapper(1000, 800), heart_offset=50)


def test_heart_point_is_shoulder_midpoint_pushed_down():
    assert heart_point((120.0, 200.0), (380.0, 260.0)) == ((120.0 + 380.0) / 2, (200.0 + 260.0) / 2 + 50)


def test_paths_empty_before_first_pose(builder):
    for region in Region:
        assert builder.path_for(region) == []
    assert builder.heart is None


def test_rebuild_assembles_all_paths(builder):
    pose = make_pose()
    builder.rebuild(LandmarkFrame(poses=(pose,)))
    c = builder.mapper.to_canvas
    heart = heart_point(c(pose[LEFT_SHOULDER]), c(pose[RIGHT_SHOULDER]), 50)

    assert builder.heart == heart
    assert builder.path_for(Region.LEFT_ARM) == [c(pose[LEFT_WRIST]), c(pose[LEFT_ELBOW]), c(pose[LEFT_SHOULDER]), heart]
    assert builder.path_for(Region.RIGHT_ARM)[0] == c(pose[RIGHT_WRIST])
    assert len(builder.path_for(Region.MOUTH)) == 2
    assert builder.path_for(Region.LEFT_LEG) == [
        c(pose[LEFT_FOOT]), c(pose[LEFT_KNEE]), c(pose[LEFT_HIP]), c(pose[LEFT_SHOULDER]), heart,
    ]
    # every path ends at the same heart
    for region in Region:
        assert builder.path_for(region)[-1] == heart


def test_eyes_share_the_mouth_path(builder):
    builder.rebuild(make_frame())
    assert builder.path_for(Region.EYES) is builder.path_for(Region.MOUTH)
    assert path_for(Region.EYES, builder.paths) is builder.paths[Region.MOUTH]


def test_absent_pose_keeps_paths_unchanged(builder):
    builder.rebuild(make_frame())
    before = builder.paths
    snapshot = {k: list(v) for k, v in before.items()}

    for frame in (None, LandmarkFrame(poses=None), LandmarkFrame(poses=())):
        assert builder.rebuild(frame) is before

    assert builder.paths is before
    assert builder.paths == snapshot


def test_truncated_pose_is_treated_as_absent(builder):
    builder.rebuild(make_frame())
    before = builder.paths
    builder.rebuild(LandmarkFrame(poses=(make_pose(n=20),)))
    assert builder.paths is before


def test_only_first_pose_is_used(builder):
    first = make_pose()
    second = make_pose({LEFT_SHOULDER: (0.1, 0.1, 0.0), RIGHT_SHOULDER: (0.2, 0.1, 0.0)})
    builder.rebuild(LandmarkFrame(poses=(first, second)))
    c = builder.mapper.to_canvas
    assert builder.heart == heart_point(c(first[LEFT_SHOULDER]), c(first[RIGHT_SHOULDER]), 50)


def test_rebuild_replaces_table_atomically(builder):
    builder.rebuild(make_frame())
    old = builder.paths
    old_left = old[Region.LEFT_ARM]
    builder.rebuild(LandmarkFrame(poses=(make_pose({LEFT_WRIST: (0.1, 0.9, 0.0)}),)))
    assert builder.paths is not old
    # the previous table was not touched
    assert old[Region.LEFT_ARM] is old_left
    assert builder.paths[Region.LEFT_ARM][0] == builder.mapper.to_canvas(make_pose({LEFT_WRIST: (0.1, 0.9, 0.0)})[LEFT_WRIST])
