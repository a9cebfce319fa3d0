from timeline.scheduler import Scheduler

def test_fires_when_due(scheduler):
    fired = []
    scheduler.call_later(0.5, lambda: fired.append("a"))
    scheduler.step(0.4)
    assert fired == []
    scheduler.step(0.1)
    assert fired == ["a"]
    assert scheduler.pending == 0

def test_cancelled_task_never_fires(scheduler):
    fired = []
    h = scheduler.call_later(0.1, lambda: fired.append("a"))
    scheduler.cancel(h)
    scheduler.step(1.0)
    assert fired == []
    assert not h.active

def test_due_order(scheduler):
    fired = []
    scheduler.call_later(0.3, lambda: fired.append(3))
    scheduler.call_later(0.1, lambda: fired.append(1))
    scheduler.call_later(0.2, lambda: fired.append(2))
    scheduler.step(1.0)
    assert fired == [1, 2, 3]

def test_callback_may_schedule(scheduler):
    fired = []
    scheduler.call_later(0.1, lambda: scheduler.call_later(0.1, lambda: fired.append("b")))
    scheduler.step(0.1)
    assert scheduler.pending == 1
    scheduler.step(0.1)
    assert fired == ["b"]

def test_clear(scheduler):
    fired = []
    h = scheduler.call_later(0.1, lambda: fired.append("a"))
    scheduler.clear()
    scheduler.step(1.0)
    assert fired == [] and h.cancelled and scheduler.pending == 0
