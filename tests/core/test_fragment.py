"""Tests for state machine fragments."""

from __future__ import annotations

import pytest

from stepgraph.core import (
    Chain,
    DefinitionBody,
    Parallel,
    Pass,
    StateMachine,
    StateMachineFragment,
)


class ParallelFragment(StateMachineFragment):
    def __init__(self, id: str) -> None:
        super().__init__(id)
        self._start = Parallel("Parallel State").branch(Pass("Step 1"))

    @property
    def start_state(self):
        return self._start

    @property
    def end_states(self):
        return [self._start]


class SimpleChain(StateMachineFragment):
    def __init__(self, id: str, task_cls) -> None:
        super().__init__(id)
        self.task1 = task_cls("Task1")
        self.task2 = task_cls("Task2")
        self.task1.next(self.task2)

    @property
    def start_state(self):
        return self.task1

    @property
    def end_states(self):
        return [self.task2]

    def catch(self, handler, **kwargs):
        self.task2.add_catch(handler, **kwargs)
        return self


class TestStateMachineFragment:
    """Tests for StateMachineFragment."""

    def test_requires_id(self):
        """A fragment needs an id."""
        with pytest.raises(ValueError, match="Fragment id is required"):
            ParallelFragment("")

    def test_next_composes_start_and_ends(self):
        """F1.next(F2) starts at F1's start and ends at F2's ends."""
        first = ParallelFragment("Fragment 1").prefix_states()
        second = ParallelFragment("Fragment 2").prefix_states()

        chain = first.next(second)

        assert chain.start_state is first.start_state
        assert chain.end_states == second.end_states

    def test_prefix_applies_to_nested_states(self):
        """Prefixing reaches into Parallel branches."""
        first = ParallelFragment("Fragment 1").prefix_states()
        second = ParallelFragment("Fragment 2").prefix_states()

        machine = StateMachine("Machine", definition_body=DefinitionBody.from_chainable(first.next(second)))
        definition = machine.definition

        assert definition["StartAt"] == "Fragment 1: Parallel State"
        assert definition["States"]["Fragment 1: Parallel State"]["Next"] == "Fragment 2: Parallel State"
        assert definition["States"]["Fragment 1: Parallel State"]["Branches"][0]["StartAt"] == (
            "Fragment 1: Step 1"
        )
        assert definition["States"]["Fragment 2: Parallel State"]["End"] is True
        assert list(definition["States"]["Fragment 2: Parallel State"]["Branches"][0]["States"]) == [
            "Fragment 2: Step 1"
        ]

    def test_custom_prefix(self):
        """An explicit prefix replaces the default."""
        fragment = ParallelFragment("F").prefix_states("v2/")

        assert fragment.start_state.state_name == "v2/Parallel State"

    def test_prefix_covers_error_handlers(self, fake_task):
        """Catch handlers inside the fragment are prefixed."""
        handler = Pass("Handler")
        fragment = SimpleChain("Chain", fake_task).catch(handler).prefix_states()

        assert handler.state_name == "Chain: Handler"
        assert fragment.task2.state_name == "Chain: Task2"

    def test_to_single_state(self, render, fake_task):
        """A fragment can be wrapped in a single Parallel state."""
        state = SimpleChain("Hello", fake_task).to_single_state()

        assert render(state) == {
            "StartAt": "Hello",
            "States": {
                "Hello": {
                    "Type": "Parallel",
                    "End": True,
                    "Branches": [
                        {
                            "StartAt": "Hello: Task1",
                            "States": {
                                "Hello: Task1": {"Type": "Task", "Next": "Hello: Task2", "Resource": "resource"},
                                "Hello: Task2": {"Type": "Task", "End": True, "Resource": "resource"},
                            },
                        }
                    ],
                }
            },
        }

    def test_to_single_state_with_name_and_props(self, render, fake_task):
        """state_name and Parallel options are passed through."""
        state = SimpleChain("Hello", fake_task).to_single_state("Wrapped", result_path="$.out")

        rendered = render(state)["States"]["Wrapped"]
        assert rendered["ResultPath"] == "$.out"
        assert rendered["Branches"][0]["StartAt"] == "Wrapped: Task1"

    def test_fragment_with_error_handler_in_chain(self, render, fake_task):
        """A fragment can share an error handler with surrounding states."""
        task1, task2 = fake_task("Before"), fake_task("After")
        handler = Pass("ErrorHandler")

        chain = Chain.start(task1.add_catch(handler)).next(
            SimpleChain("Chain", fake_task).catch(handler)
        ).next(task2.add_catch(handler))

        states = render(chain)["States"]
        assert states["Task2"]["Next"] == "After"
        assert states["Task2"]["Catch"] == [{"ErrorEquals": ["States.ALL"], "Next": "ErrorHandler"}]
