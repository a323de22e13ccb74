"""Unit tests for session state management."""

from unittest.mock import Mock

import pytest

from lumina.core.models import AspectRatio, GenerationState
from lumina.core.state import AspectRatioSelector, GenerationStateStore


class TestGenerationStateStore:
    """Tests for GenerationStateStore."""

    def test_initial_snapshot(self):
        store = GenerationStateStore(AspectRatio.WIDESCREEN)
        assert store.snapshot == GenerationState(aspect_ratio=AspectRatio.WIDESCREEN)

    def test_initial_ratio_from_string(self):
        store = GenerationStateStore("3:4")
        assert store.snapshot.aspect_ratio is AspectRatio.PORTRAIT

    def test_update_replaces_snapshot(self, state_store):
        before = state_store.snapshot
        after = state_store.update(error="oops")
        assert after.error == "oops"
        assert before.error is None
        assert state_store.snapshot is after

    def test_update_coerces_aspect_ratio(self, state_store):
        state_store.update(aspect_ratio="4:3")
        assert state_store.snapshot.aspect_ratio is AspectRatio.LANDSCAPE

    def test_update_rejects_unknown_field(self, state_store):
        with pytest.raises(TypeError):
            state_store.update(not_a_field=True)

    def test_set_prompt_while_generating(self, state_store):
        """Prompt edits remain possible during an in-flight request."""
        state_store.update(is_generating=True)
        state_store.set_prompt("next idea")
        assert state_store.snapshot.prompt == "next idea"
        assert state_store.snapshot.is_generating is True

    def test_subscribers_notified(self, state_store):
        listener = Mock()
        state_store.subscribe(listener)

        state_store.set_prompt("hello")

        listener.assert_called_once_with(state_store.snapshot)

    def test_unsubscribe(self, state_store):
        listener = Mock()
        unsubscribe = state_store.subscribe(listener)
        unsubscribe()
        unsubscribe()  # second call is harmless

        state_store.set_prompt("hello")

        listener.assert_not_called()

    def test_failing_listener_does_not_block_others(self, state_store):
        failing = Mock(side_effect=RuntimeError("listener bug"))
        healthy = Mock()
        state_store.subscribe(failing)
        state_store.subscribe(healthy)

        state_store.set_prompt("hello")

        healthy.assert_called_once()
        assert state_store.snapshot.prompt == "hello"


class TestAspectRatioSelector:
    """Tests for AspectRatioSelector."""

    def test_options(self, state_store):
        selector = AspectRatioSelector(state_store)
        assert [ratio.value for ratio in selector.options] == ["1:1", "3:4", "4:3", "16:9", "9:16"]

    def test_select_updates_store(self, state_store):
        selector = AspectRatioSelector(state_store)
        assert selector.select("16:9") is AspectRatio.WIDESCREEN
        assert selector.selected is AspectRatio.WIDESCREEN
        assert state_store.snapshot.aspect_ratio is AspectRatio.WIDESCREEN

    def test_select_rejects_unknown_ratio(self, state_store):
        selector = AspectRatioSelector(state_store)
        with pytest.raises(ValueError):
            selector.select("21:9")
        assert selector.selected is AspectRatio.SQUARE
