"""Tests for preview.py module."""

import pytest

from lyricreel.core.render.preview import PlaybackState, PreviewDriver


class FakePlayer:
    def __init__(self, duration=10.0):
        self._duration = duration
        self.time = 0.0
        self.playing = False
        self.finished = False
        self.fail_play = False
        self.fail_pause = False
        self.calls = []

    def play(self):
        self.calls.append("play")
        if self.fail_play:
            raise RuntimeError("device busy")
        self.playing = True

    def pause(self):
        self.calls.append("pause")
        if self.fail_pause:
            raise RuntimeError("device lost")
        self.playing = False

    def seek(self, seconds):
        self.calls.append(("seek", seconds))
        self.time = seconds

    def position(self):
        return self.time

    def duration(self):
        return self._duration

    def is_finished(self):
        return self.finished


class FakeSurface:
    def __init__(self):
        self.states = []

    def draw(self, state):
        self.states.append(state)


class FakeAudioContext:
    created = 0

    def __init__(self):
        FakeAudioContext.created += 1
        self.closed = False

    def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, driver=None, stop_after=3):
        self.driver = driver
        self.stop_after = stop_after
        self.ticks = []

    def tick(self, fps):
        self.ticks.append(fps)
        if len(self.ticks) >= self.stop_after:
            self.driver.stop()


@pytest.fixture(autouse=True)
def reset_context_count():
    FakeAudioContext.created = 0


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def driver(sample_timeline, configuration, player, surface):
    return PreviewDriver(
        sample_timeline,
        configuration,
        player,
        surface,
        audio_context_factory=FakeAudioContext,
        title="Song",
        artist="Band",
    )


class TestTransport:
    def test_starts_paused(self, driver):
        assert driver.state == PlaybackState.PAUSED
        assert driver.current_time == 0.0

    def test_play_creates_audio_context_once(self, driver):
        driver.play()
        driver.pause()
        driver.play()
        assert driver.state == PlaybackState.PLAYING
        assert FakeAudioContext.created == 1

    def test_play_failure_is_logged_and_state_unchanged(self, driver, player, caplog):
        player.fail_play = True
        with caplog.at_level("ERROR"):
            assert driver.play() is False
        assert driver.state == PlaybackState.PAUSED
        assert "device busy" in caplog.text

    def test_pause_samples_position(self, driver, player):
        driver.play()
        player.time = 3.2
        driver.pause()
        assert driver.state == PlaybackState.PAUSED
        assert driver.current_time == 3.2

    def test_pause_failure_is_logged_and_state_unchanged(self, driver, player, caplog):
        driver.play()
        player.fail_pause = True
        with caplog.at_level("ERROR"):
            assert driver.pause() is False
            assert driver.toggle() is False
        assert driver.state == PlaybackState.PLAYING
        assert "device lost" in caplog.text

    def test_toggle(self, driver):
        driver.toggle()
        assert driver.is_playing
        driver.toggle()
        assert driver.state == PlaybackState.PAUSED

    def test_seek_while_paused_redraws_immediately(self, driver, surface):
        driver.seek(3.0)
        assert driver.current_time == 3.0
        assert surface.states[-1].time == 3.0
        assert surface.states[-1].current.text == "World"

    def test_seek_is_clamped(self, driver):
        assert driver.seek(-4.0) == 0.0
        assert driver.seek(99.0) == 10.0


class TestTick:
    def test_tick_samples_player_while_playing(self, driver, player, surface):
        driver.play()
        player.time = 1.0
        assert driver.tick() is True
        assert driver.current_time == 1.0
        assert surface.states[-1].current.text == "Hello"
        assert surface.states[-1].progress == pytest.approx(0.5)
        assert surface.states[-1].title.text == "Song"

    def test_tick_while_paused_keeps_time(self, driver, player):
        player.time = 4.0
        driver.tick()
        assert driver.current_time == 0.0

    def test_reaching_end_sets_ended_and_clamps(self, driver, player):
        driver.play()
        player.time = 10.4
        driver.tick()
        assert driver.state == PlaybackState.ENDED
        assert driver.is_ended
        assert driver.current_time == 10.0

    def test_finished_player_ends_playback(self, driver, player):
        driver.play()
        player.time = 9.0
        player.finished = True
        driver.tick()
        assert driver.state == PlaybackState.ENDED
        assert driver.current_time == 10.0

    def test_play_after_end_restarts_from_zero(self, driver, player):
        driver.play()
        player.finished = True
        driver.tick()
        player.finished = False

        driver.play()

        assert driver.state == PlaybackState.PLAYING
        assert driver.current_time == 0.0
        assert ("seek", 0.0) in player.calls

    def test_reaching_end_pauses_player(self, driver, player):
        driver.play()
        player.finished = True
        driver.tick()
        assert player.calls[-1] == "pause"
        assert not player.playing

    def test_end_with_failing_pause_still_ends(self, driver, player):
        driver.play()
        player.fail_pause = True
        player.time = 10.0
        driver.tick()
        assert driver.is_ended

    def test_seek_clears_ended(self, driver, player):
        driver.play()
        player.finished = True
        driver.tick()
        driver.seek(2.0)
        assert driver.state == PlaybackState.PAUSED

    def test_restart(self, driver, player):
        driver.seek(5.0)
        driver.restart()
        assert driver.current_time == 0.0
        assert driver.is_playing

    def test_tick_after_stop(self, driver, surface):
        driver.stop()
        assert driver.tick() is False
        assert surface.states == []


class TestRunLoop:
    def test_run_until_stopped(self, driver):
        clock = FakeClock(driver, stop_after=3)
        frames = []
        driver.run(clock, on_frame=lambda d: frames.append(d.current_time))
        assert len(clock.ticks) == 3
        assert len(frames) == 3
        assert clock.ticks[0] == driver.fps

    def test_run_exits_immediately_when_stopped(self, driver):
        driver.stop()
        clock = FakeClock(driver)
        driver.run(clock)
        assert clock.ticks == []

    def test_on_frame_can_stop_loop(self, driver, surface):
        clock = FakeClock(driver, stop_after=100)
        driver.run(clock, on_frame=lambda d: d.stop())
        assert clock.ticks == []
        assert surface.states == []


class TestLifecycle:
    def test_context_manager_releases_audio_context(self, driver, player):
        with driver:
            driver.play()
            context = driver.audio_context
        assert context.closed
        assert driver.audio_context is None
        assert driver.stopped
        assert player.calls[-1] == "pause"

    def test_context_released_on_error(self, driver):
        with pytest.raises(RuntimeError):
            with driver:
                driver.play()
                context = driver.audio_context
                raise RuntimeError("host crashed")
        assert context.closed

    def test_close_releases_context_when_pause_fails(self, driver, player, caplog):
        driver.play()
        context = driver.audio_context
        player.fail_pause = True
        with caplog.at_level("ERROR"):
            driver.close()
        assert context.closed
        assert driver.audio_context is None
        assert "device lost" in caplog.text

    def test_close_without_play(self, driver):
        driver.close()
        assert FakeAudioContext.created == 0

    def test_no_factory(self, sample_timeline, configuration, player, surface):
        driver = PreviewDriver(sample_timeline, configuration, player, surface)
        assert driver.play()
        driver.close()
