import random
import pytest
from config import GameConfig
from notes.catalog import lookup
from notes.selector import NoteSelector
from timeline.scheduler import Scheduler
from game.session import TrialStateMachine

@pytest.fixture
def scheduler():
    return Scheduler()

@pytest.fixture
def selector():
    return NoteSelector(random.Random(1234))

@pytest.fixture
def make_session(scheduler, selector):
    def _make(sel=None, **overrides):
        return TrialStateMachine(GameConfig(**overrides), sel or selector, scheduler)
    return _make

@pytest.fixture
def f_sharp_4():
    return lookup("F#", 4)

@pytest.fixture
def fixed_selector(f_sharp_4):
    """Every draw is F#4."""
    return NoteSelector(random.Random(0), pitches=[f_sharp_4])
