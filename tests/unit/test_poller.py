import pytest

from conftest import FakeGenerator, FakeMailbox, make_message
from dispute_resolution.ingestion.poller import poll_once, run_forever
from dispute_resolution.ingestion.processor import ProcessingOutcome


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class ExplodingGenerator(FakeGenerator):
    """Fails while processing one specific message subject."""

    def __init__(self, poison: str):
        super().__init__()
        self.poison = poison

    def generate(self, prompt: str, system_instruction: str) -> str:
        if self.poison in prompt:
            raise RuntimeError("unexpected model failure")
        return super().generate(prompt, system_instruction)


# =================================================
# Scheduler
# =================================================

def test_fixed_rate_ticks():
    clock = FakeClock()

    def cycle():
        clock.now += 10

    cycles = run_forever(cycle, 60, clock=clock, sleep=clock.sleep, max_cycles=3)

    assert cycles == 3
    assert clock.sleeps == [50, 50]


def test_overrun_skips_missed_ticks():
    clock = FakeClock()
    durations = iter([130, 10])

    def cycle():
        clock.now += next(durations)

    run_forever(cycle, 60, clock=clock, sleep=clock.sleep, max_cycles=2)

    # first cycle ends at 130: ticks 60 and 120 are skipped, next is 180
    assert clock.sleeps == [50]


def test_cycle_ending_on_a_tick_starts_the_next_at_once():
    clock = FakeClock()
    durations = iter([60, 10])

    def cycle():
        clock.now += next(durations)

    run_forever(cycle, 60, clock=clock, sleep=clock.sleep, max_cycles=2)

    assert clock.sleeps == [0]


def test_failed_cycle_does_not_stop_the_scheduler():
    clock = FakeClock()
    calls = []

    def cycle():
        calls.append(clock.now)
        if len(calls) == 1:
            raise RuntimeError("mailbox unreachable")

    cycles = run_forever(cycle, 30, clock=clock, sleep=clock.sleep, max_cycles=3)

    assert cycles == 3
    assert calls == [0, 30, 60]


# =================================================
# One poll cycle
# =================================================

@pytest.mark.asyncio
async def test_poll_processes_batch(session_factory, case_store, empty_search):
    mailbox = FakeMailbox({
        "m1": make_message("m1"),
        "m2": make_message("m2", sender="Nobody <nobody@example.com>"),
    })

    outcomes = await poll_once(
        5,
        mailbox=mailbox,
        session_factory=session_factory,
        case_store=case_store,
        generator=FakeGenerator(),
        search=empty_search,
    )

    assert outcomes == {
        "m1": ProcessingOutcome.PROCESSED,
        "m2": ProcessingOutcome.UNKNOWN_VENDOR,
    }
    assert mailbox.unread == ["m2"]


@pytest.mark.asyncio
async def test_failing_message_does_not_stop_the_batch(session_factory, case_store, empty_search):
    poison = make_message("m1").model_copy(update={"subject": "POISON subject"})
    mailbox = FakeMailbox({"m1": poison, "m2": make_message("m2")})

    outcomes = await poll_once(
        5,
        mailbox=mailbox,
        session_factory=session_factory,
        case_store=case_store,
        generator=ExplodingGenerator("POISON"),
        search=empty_search,
    )

    assert outcomes == {"m1": None, "m2": ProcessingOutcome.PROCESSED}
    assert mailbox.unread == ["m1"]
    assert len(list(case_store.directory.iterdir())) == 1


@pytest.mark.asyncio
async def test_second_poll_does_not_duplicate_cases(session_factory, case_store, empty_search):
    mailbox = FakeMailbox({"m1": make_message("m1")})
    kwargs = dict(
        mailbox=mailbox,
        session_factory=session_factory,
        case_store=case_store,
        generator=FakeGenerator(),
        search=empty_search,
    )

    await poll_once(5, **kwargs)
    # mark_read was lost, the message shows up again
    mailbox.unread.append("m1")
    outcomes = await poll_once(5, **kwargs)

    assert outcomes == {"m1": ProcessingOutcome.ALREADY_PROCESSED}
    assert len(list(case_store.directory.iterdir())) == 1


@pytest.mark.asyncio
async def test_listing_failure_returns_empty(session_factory, case_store):
    class BrokenMailbox(FakeMailbox):
        def list_unread(self, max_results):
            raise ConnectionError("gmail unreachable")

    outcomes = await poll_once(
        5,
        mailbox=BrokenMailbox({}),
        session_factory=session_factory,
        case_store=case_store,
    )

    assert outcomes == {}


@pytest.mark.asyncio
async def test_empty_mailbox(session_factory, case_store):
    outcomes = await poll_once(
        5,
        mailbox=FakeMailbox({}),
        session_factory=session_factory,
        case_store=case_store,
    )

    assert outcomes == {}
