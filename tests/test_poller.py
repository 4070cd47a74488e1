"""Tests for analysis/poller.py - client-side polling loop."""

import asyncio

import pytest

from conftest import FakeGit, build_request

from branchlens.analysis.poller import AnalysisPoller
from branchlens.analysis.service import AnalysisService


def _poller(git, **kwargs):
    service = AnalysisService(git_factory=lambda repo_path: git)
    return AnalysisPoller(service, build_request(), interval_seconds=0.01, **kwargs)


class TestPollOnce:
    def test_first_poll_reports_change(self, fake_git):
        changes = []
        poller = _poller(fake_git, on_change=lambda result, sig: changes.append(sig))

        response = asyncio.run(poller.poll_once())

        assert response.changed is True
        assert changes == [response.signature]
        assert poller.state.signature == response.signature
        assert poller.state.result is response.result

    def test_second_poll_sends_last_signature(self, fake_git):
        changes = []
        poller = _poller(fake_git, on_change=lambda result, sig: changes.append(sig))

        async def two_polls():
            await poller.poll_once()
            return await poller.poll_once()

        second = asyncio.run(two_polls())

        assert second.changed is False
        assert len(changes) == 1
        assert poller.state.changes == 1
        assert poller.state.polls == 2
        assert poller.state.result is not None

    def test_error_clears_signature_and_reports(self):
        git = FakeGit(current_branch="main")
        errors = []
        poller = AnalysisPoller(
            AnalysisService(git_factory=lambda repo_path: git),
            build_request(compareSource="working-tree"),
            interval_seconds=0.01,
            on_error=errors.append,
        )
        poller.state.signature = "stale"

        assert asyncio.run(poller.poll_once()) is None
        assert poller.state.signature is None
        assert poller.state.result is None
        assert "to be checked out" in poller.state.error
        assert len(errors) == 1

    def test_recovers_after_error(self):
        git = FakeGit(current_branch="main")
        poller = AnalysisPoller(
            AnalysisService(git_factory=lambda repo_path: git),
            build_request(compareSource="working-tree"),
            interval_seconds=0.01,
        )

        async def fail_then_succeed():
            await poller.poll_once()
            git.current_branch = "feature"
            return await poller.poll_once()

        response = asyncio.run(fail_then_succeed())
        assert response.changed is True
        assert poller.state.error is None


class TestRun:
    def test_stops_after_max_polls(self, fake_git):
        state = asyncio.run(_poller(fake_git).run(max_polls=3))
        assert state.polls == 3
        assert state.changes == 1

    def test_stops_when_event_is_set(self, fake_git):
        poller = _poller(fake_git)

        async def run_and_stop():
            stop = asyncio.Event()
            task = asyncio.create_task(poller.run(stop_event=stop))
            await asyncio.sleep(0.05)
            stop.set()
            return await asyncio.wait_for(task, timeout=1)

        state = asyncio.run(run_and_stop())
        assert state.polls >= 1

    def test_rejects_non_positive_interval(self, fake_git):
        with pytest.raises(ValueError):
            AnalysisPoller(AnalysisService(), build_request(), interval_seconds=0)
