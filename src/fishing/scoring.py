"""
Scoring & feedback controller.

Reacts to catches found by the simulation step: stops the hook, throws a
splash, updates the score, tells the host through its sinks, and queues the
delayed reset/respawn on the world's scheduler.
"""
from __future__ import annotations
from typing import Callable
import logging

from .entities import Feedback, Fish, HookState
from .world import World, reset_hook, spawn_fish, spawn_splash

logger = logging.getLogger(__name__)

ScoreSink = Callable[[int], None]
FeedbackSink = Callable[[str, bool, int], None]

WRONG_FISH_TEXT = "Wrong Fish!"


class ScoringController:
    def __init__(self, score_sink: ScoreSink, feedback_sink: FeedbackSink) -> None:
        # A missing display target is a wiring bug; surface it before the first frame.
        if not callable(score_sink):
            raise TypeError(f"score_sink must be callable, got {score_sink!r}")
        if not callable(feedback_sink):
            raise TypeError(f"feedback_sink must be callable, got {feedback_sink!r}")
        self.score_sink = score_sink
        self.feedback_sink = feedback_sink

    def on_catch(self, world: World, fish: Fish) -> None:
        hook = world.hook
        fish.caught = True

        # Hook stops where it is and stays there until the reset fires
        hook.state = HookState.IDLE
        hook.sinking = False
        hook.pending_reset = True

        spawn_splash(world, hook.x, world.water_surface)

        if fish.type.points > 0:
            world.score += fish.type.points
            self.push_score(world)
            self.show_feedback(world, f"+{fish.type.points}", True)
            logger.info("caught %s, score %d", fish.type.id, world.score)
        else:
            self.show_feedback(world, WRONG_FISH_TEXT, False)
            logger.info("caught the wrong fish (%s)", fish.type.id)

        def release() -> None:
            reset_hook(world)
            if fish in world.fishes:
                world.fishes.remove(fish)
                spawn_fish(world)

        world.scheduler.schedule(world.config.ticks(world.config.catch_reset_ms),
                                 release, label="catch-reset")

    def push_score(self, world: World) -> None:
        self.score_sink(world.score)

    def show_feedback(self, world: World, text: str, success: bool) -> None:
        message = Feedback(text, success)
        world.feedback = message
        self.feedback_sink(text, success, world.config.feedback_ms)

        def clear() -> None:
            # a newer message owns its own clear
            if world.feedback is message:
                world.feedback = None

        world.scheduler.schedule(world.config.ticks(world.config.feedback_ms),
                                 clear, label="feedback-clear")
