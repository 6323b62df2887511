import pytest

import config
from grid import GridFamily
from motion import Heading
from scene import Command, Scene
from vec import Vec2


def make_scene(speed=0.0, positions=None, families=None):
    if families is None:
        families = [GridFamily(Vec2(1.0, 0.0), spacing=60.0, thickness=2.0)]
    if positions is None:
        positions = [Vec2(130.0, 100.0)]  # 30px right of the center line: outside
    return Scene(200, 200, families=families, point_positions=positions,
                 heading=Heading(direction=Vec2(1.0, 0.0), speed=speed))


class TestSceneTick:
    def test_moving_lines_touch_point_on_each_pass(self):
        scene = make_scene(speed=600.0)
        received = []
        scene.add_sink(received.append)
        counts = [len(scene.tick(0.05)) for _ in range(4)]
        # Lines advance 30px per tick: the point is on a line after ticks 1 and 3
        assert counts == [1, 0, 1, 0]
        assert len(received) == 2
        assert received[0].time == pytest.approx(0.05)
        assert received[1].time == pytest.approx(0.15)
        assert scene.touch_count == 2

    def test_stationary_scene_is_quiet(self):
        scene = make_scene(speed=0.0)
        assert sum(len(scene.tick(1 / 60)) for _ in range(120)) == 0
        assert scene.tick_count == 120

    def test_point_commands_apply_at_next_tick(self):
        scene = make_scene()
        scene.queue_add(Vec2(100.0, 100.0))  # on the center line
        assert len(scene.points) == 1
        events = scene.tick(1 / 60)
        assert len(scene.points) == 2
        assert [e.point_id for e in events] == [2]

    def test_remove_command(self):
        scene = make_scene(positions=[Vec2(10.0, 10.0), Vec2(20.0, 20.0)])
        scene.queue_remove(0)
        scene.tick(1 / 60)
        assert scene.points.ids == [2]
        assert scene.detector.state.shape == (1, 1)

    def test_toggle_command_removes_hovered_point(self):
        scene = make_scene(positions=[Vec2(50.0, 50.0)])
        assert scene.update_hover(Vec2(52.0, 50.0)) == 0
        scene.queue_toggle(Vec2(52.0, 50.0))
        scene.tick(1 / 60)
        assert len(scene.points) == 0
        assert scene.hover_index is None

    def test_unknown_command_raises(self):
        scene = make_scene()
        scene.pending.append(Command("explode", None))
        with pytest.raises(ValueError):
            scene.tick(1 / 60)

    def test_sink_errors_propagate(self):
        scene = make_scene(positions=[Vec2(100.0, 100.0)])

        def broken_sink(event):
            raise RuntimeError("sink failed")

        scene.add_sink(broken_sink)
        with pytest.raises(RuntimeError):
            scene.tick(1 / 60)

    def test_controls_steer_heading(self):
        scene = make_scene(speed=100.0)
        scene.tick(0.5, turn=+1, throttle=+1)
        assert scene.heading.speed == pytest.approx(100.0 + 0.5 * scene.heading.acceleration)
        assert scene.heading.angle == pytest.approx(0.5 * scene.heading.rotation_rate)


class TestSceneReset:
    def test_reset_restores_everything(self):
        scene = make_scene(speed=600.0, positions=[Vec2(130.0, 100.0)])
        scene.queue_add(Vec2(1.0, 1.0))
        for _ in range(5):
            scene.tick(0.05, turn=1, throttle=1)
        scene.queue_reset()
        scene.tick(0.0)

        family = scene.families[0]
        assert family.offset == 0.0
        assert scene.heading.speed == 600.0
        assert scene.heading.angle == 0.0
        assert [p.position for p in scene.points] == [Vec2(130.0, 100.0)]
        assert scene.detector.state.shape == (1, 1)


class TestDefaultScene:
    def test_defaults_come_from_config(self):
        scene = Scene(config.WINDOW_WIDTH, config.WINDOW_HEIGHT)
        assert len(scene.families) == len(config.GRID_FAMILIES)
        assert len(scene.points) == len(config.DEFAULT_POINT_LAYOUT)
        assert scene.detector.state.shape == (len(config.GRID_FAMILIES), len(config.DEFAULT_POINT_LAYOUT))
        assert scene.heading.speed == config.DEFAULT_SPEED
        assert scene.heading.direction.length() == pytest.approx(1.0)

    def test_center_and_diagonal(self):
        scene = Scene(300, 400, point_positions=[])
        assert scene.center == Vec2(150.0, 200.0)
        assert scene.diag == pytest.approx(500.0)

    def test_default_run_produces_touches(self):
        scene = Scene(config.WINDOW_WIDTH, config.WINDOW_HEIGHT)
        total = sum(len(scene.tick(1 / 60)) for _ in range(600))
        assert total > 0
